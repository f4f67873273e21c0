"""Sitewind FastAPI application.

Serves the JSON API used by the site form.
Run with: uvicorn app.application:app --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sitewind import __version__
from sitewind.api import router as api_router
from sitewind.settings import get_settings

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sitewind",
    description=(
        "UK postcode wind and altitude lookup for temporary fencing. "
        "Derives basic wind speed and pressure from the UK National Annex factors."
    ),
    version=__version__,
)

# CORS - configurable via SITEWIND_CORS_ORIGINS env var
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)  # /api/lookup, /api/assess, /api/health, ...


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
