"""Fetching raw dataset text from files or over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from sitewind.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


async def fetch_dataset(source: str, timeout_s: float = 30.0) -> str:
    """Return the text of one dataset.

    *source* is either a local path, read in a worker thread, or an
    ``http(s)://`` URL. A missing file or a non-2xx response raises.
    """
    if _is_url(source):
        async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as client:
            response = await client.get(source)
            response.raise_for_status()
            logger.info("Fetched dataset %s (%d bytes)", source, len(response.content))
            return response.text

    path = Path(source).expanduser()
    text = await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
    logger.info("Read dataset %s (%d chars)", path, len(text))
    return text


async def load_dataset_texts(settings: Optional[Settings] = None) -> tuple[str, str]:
    """Fetch the altitude and wind datasets concurrently."""
    settings = settings or get_settings()
    altitude_text, wind_text = await asyncio.gather(
        fetch_dataset(settings.altitude_dataset, settings.http_timeout_s),
        fetch_dataset(settings.wind_dataset, settings.http_timeout_s),
    )
    return altitude_text, wind_text


def file_loader(altitude_path: str | Path, wind_path: str | Path):
    """Build a cache loader reading two explicit files."""

    async def _load() -> tuple[str, str]:
        altitude_text, wind_text = await asyncio.gather(
            fetch_dataset(str(altitude_path)),
            fetch_dataset(str(wind_path)),
        )
        return altitude_text, wind_text

    return _load


__all__ = ["fetch_dataset", "file_loader", "load_dataset_texts"]
