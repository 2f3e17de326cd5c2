"""Application configuration using pydantic-settings.

All runtime knobs live here with explicit types and defaults matching the
behaviour of mvnrepository.com scraping. Every field can be overridden through
an environment variable with the same name (case-insensitive).

Notes:
- Pacing and backoff values are in seconds (floats), not milliseconds.
- MAX_RESULTS_LIMIT caps caller-supplied result counts; the scraped search page
  rarely carries more than a handful of entries anyway.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:139.0) Gecko/20100101 Firefox/139.0"
)


class Settings(BaseSettings):
    """Top-level application settings.

    Env var precedence follows pydantic-settings rules, e.g.
    `SCRAPE_TIMEOUT_SECONDS=45` or `MIN_REQUEST_INTERVAL_SECONDS=5`.
    """

    # Endpoints
    MVNREPOSITORY_BASE_URL: str = "https://mvnrepository.com"
    MAVEN_REPO_BASE_URL: str = "https://repo1.maven.org/maven2"
    USER_AGENT: str = _DEFAULT_USER_AGENT

    # HTTP behavior
    SCRAPE_TIMEOUT_SECONDS: int = Field(default=30, ge=1)
    REPO_TIMEOUT_SECONDS: int = Field(default=15, ge=1)

    # Pacing for the scraped host
    MIN_REQUEST_INTERVAL_SECONDS: float = Field(default=3.0, ge=0)
    REQUEST_JITTER_MIN_SECONDS: float = Field(default=2.0, ge=0)
    REQUEST_JITTER_MAX_SECONDS: float = Field(default=6.0, ge=0)

    # 403 handling
    BLOCK_MAX_RETRIES: int = Field(default=3, ge=0)
    BLOCK_BACKOFF_STEP_SECONDS: float = Field(default=5.0, ge=0)
    BLOCK_BACKOFF_JITTER_SECONDS: float = Field(default=3.0, ge=0)

    # Limits
    MAX_RESULTS_LIMIT: int = Field(default=100, ge=1)
    MAX_POM_BYTES: int = Field(default=2_000_000, ge=1)

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON: bool = False

    # Transport
    TRANSPORT: Literal["stdio", "http"] = "stdio"
    HTTP_HOST: str = "127.0.0.1"
    HTTP_PORT: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

    @model_validator(mode="after")
    def _check_jitter_range(self) -> "Settings":
        if self.REQUEST_JITTER_MAX_SECONDS < self.REQUEST_JITTER_MIN_SECONDS:
            raise ValueError("REQUEST_JITTER_MAX_SECONDS must be >= REQUEST_JITTER_MIN_SECONDS")
        return self


__all__ = ["Settings"]
