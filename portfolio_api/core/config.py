"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class SiteSettings(BaseSettings):
    """Portfolio site identity and upstream integration settings."""

    name: str = Field("Portfolio", description="Site owner display name")
    url: str = Field("http://localhost:3000", description="Public site URL")
    contact_email: str = Field(
        "hello@example.com",
        description="Address contact form submissions are addressed to",
    )
    github_user: str = Field("octocat", description="GitHub account shown on the site")
    github_token: str | None = Field(
        None,
        description="Optional GitHub token to raise the upstream API quota",
    )
    github_api_url: str = Field("https://api.github.com", description="GitHub REST API base URL")
    github_timeout_seconds: float = Field(10.0, description="Upstream request timeout in seconds")
    github_cache_ttl_seconds: int = Field(
        3600,
        description="How long GitHub responses are cached in-process",
        ge=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="SITE_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Per-route rate limiting configuration."""

    enabled: bool = Field(True, description="Enable rate limiting on API routes")
    include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers on responses",
    )
    cleanup_interval_seconds: int = Field(
        300,
        description="How often expired rate limit records are swept",
        ge=1,
    )
    contact_max_requests: int = Field(5, description="Contact form submissions per window", ge=1)
    contact_window_ms: int = Field(15 * 60 * 1000, description="Contact form window (ms)", ge=1)
    github_max_requests: int = Field(30, description="GitHub activity requests per window", ge=1)
    github_window_ms: int = Field(15 * 60 * 1000, description="GitHub activity window (ms)", ge=1)

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(10 * 1024 * 1024, description="Rotate log file at this size (0 disables)")
    backup_count: int = Field(5, description="Rotated log files to keep")
    request_id_header: str = Field("X-Request-ID", description="Correlation id header name")

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    site: SiteSettings = Field(default_factory=SiteSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Nested settings are created via default_factory so env loading works.
settings = Settings()
