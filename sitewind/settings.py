"""Application settings using pydantic-settings.

All configuration is centralized here. Values can be overridden
via environment variables prefixed with ``SITEWIND_``.

Example:
    export SITEWIND_ALTITUDE_DATASET="/srv/data/Postcode_elevation.csv"
    export SITEWIND_WIND_DATASET="https://example.org/data/vbpostcode.csv"
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Sitewind application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SITEWIND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Datasets: local paths or http(s) URLs
    altitude_dataset: str = "data/Postcode_elevation.csv"
    wind_dataset: str = "data/vbpostcode.csv"
    http_timeout_s: float = 30.0

    log_level: str = "INFO"

    # CORS origins (comma-separated in env var)
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8000",
    ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
