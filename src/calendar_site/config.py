"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
The Google API key should be provided via the environment or a `.env` file in
the site project directory, not committed with the site sources.

## Required Environment Variables

- GOOGLE_CALENDAR_ID: ID of the public calendar holding the events
- GOOGLE_API_KEY: API key with Calendar API read access

## Optional Environment Variables

- DATABASE_URL: Where sync state is stored (default: local SQLite file)
- PROJECT_DIR: Site project directory the build runs in (default: cwd)
- BUILD_COMMAND: Command that rebuilds the site (default: npm run build)
- WEBHOOK_SECRET: Shared secret expected in the X-Webhook-Secret header
- LOG_LEVEL / LOG_FILE: Logging verbosity and optional log file

## Example .env file

```
GOOGLE_CALENDAR_ID=abc123@group.calendar.google.com
GOOGLE_API_KEY=your-google-api-key
PROJECT_DIR=/srv/site
BUILD_COMMAND=npm run build
WEBHOOK_SECRET=change-me
LOG_FILE=logs/calendar-watcher.log
```
"""

from __future__ import annotations

from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Calendar Site Sync"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Google Calendar API
    google_calendar_id: str = Field(
        ...,
        min_length=1,
        description="Calendar ID to read events from",
    )
    google_api_key: str = Field(
        ...,
        min_length=1,
        description="API key for the Google Calendar API",
    )

    # Full sync window
    full_sync_time_min: datetime = Field(
        default=datetime(2024, 1, 1, tzinfo=timezone.utc),
        description="Earliest event start included in a full sync",
    )
    full_sync_time_max: datetime = Field(
        default=datetime(2028, 12, 31, tzinfo=timezone.utc),
        description="Latest event start included in a full sync",
    )
    max_results_per_page: int = Field(default=250, ge=1, le=2500)

    # Sync state storage
    database_url: str = "sqlite:///.calendar-sync-state.db"
    database_echo: bool = False  # Log SQL queries

    # Site build
    project_dir: Path = Field(
        default=Path("."),
        description="Directory of the static site project",
    )
    build_command: str = "npm run build"
    build_shell: str = "/bin/bash"
    build_timeout_seconds: float | None = Field(default=None, gt=0)

    # Webhook
    webhook_secret: str | None = None
    webhook_host: str = "127.0.0.1"
    webhook_port: int = Field(default=3001, ge=1, le=65535)

    # Logging
    log_level: str = "INFO"
    log_file: Path | None = None

    @field_validator("full_sync_time_min", "full_sync_time_max")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive window bounds as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("webhook_secret", mode="before")
    @classmethod
    def blank_secret_is_unset(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def validate_sync_window(self) -> Settings:
        if self.full_sync_time_max <= self.full_sync_time_min:
            raise ValueError("full_sync_time_max must be after full_sync_time_min")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def webhook_secret_configured(self) -> bool:
        """Check if the webhook requires a shared secret."""
        return self.webhook_secret is not None


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
