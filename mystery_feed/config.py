"""Centralized configuration for the Mystery Guest feed service.

This module reads environment variables (optionally from a .env file) using
Pydantic's `BaseSettings`. The resulting `Settings` object is handed to the
fetcher and rebuilder when they are constructed, so nothing downstream reads
the environment directly.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration pulled from environment variables."""

    # --- Server -------------------------------------------------------------
    PORT: int = Field(3000, description="Port the HTTP server binds to")
    HOST: str = Field("0.0.0.0", description="Interface the HTTP server binds to")
    LOG_LEVEL: str = Field("INFO", description="Root logging level")

    # --- Feeds --------------------------------------------------------------
    SOURCE_FEED_URL: str = Field(
        "https://feeds.simplecast.com/hNaFxXpO",
        description="Upstream podcast feed that gets redacted",
    )
    PUBLISHED_URL: str = Field(
        "https://smartless-mystery-feed.vercel.app/",
        description="Public address of this service, used as the feed and site URL",
    )
    FEED_TTL_MINUTES: int = Field(60, ge=1, description="Refresh interval hint written to <ttl>")
    CACHE_MAX_AGE_SECONDS: int = Field(3600, ge=0, description="max-age for the Cache-Control header")

    # --- Upstream fetch -----------------------------------------------------
    FETCH_TIMEOUT_SECONDS: float = Field(10.0, gt=0, description="Timeout for the upstream request")
    FETCH_MAX_RETRIES: int = Field(1, ge=0, description="Retries after the first failed attempt")
    FETCH_RETRY_BACKOFF_SECONDS: float = Field(1.0, ge=0, description="Wait between attempts")
    FETCH_USER_AGENT: str = Field(
        "mystery-feed/0.1 (+https://smartless-mystery-feed.vercel.app/)",
        description="User-Agent sent to the upstream host",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars rather than error
    )


@lru_cache()
def get_settings() -> Settings:
    """Return a cached *singleton* Settings instance.

    Environment variables are parsed once per process; tests that need other
    values build their own `Settings(...)` or call `get_settings.cache_clear()`.
    """
    return Settings()  # type: ignore[call-arg]


__all__ = [
    "Settings",
    "get_settings",
]
