"""Sync state models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class SyncMode(str, Enum):
    """How a watcher run fetched the calendar."""

    FULL = "full"  # No token yet, baseline fetch of the whole window
    INCREMENTAL = "incremental"  # Changes since the stored token
    RESYNC = "resync"  # Token expired, full fetch forced within the run


class SyncState(BaseModel):
    """Persisted state of the calendar watcher.

    A missing `sync_token` means the next run performs a full sync.
    `version` mirrors the stored record's version counter and is used for
    compare-and-swap writes; 0 means nothing has been stored yet.
    """

    sync_token: str | None = None
    last_sync: datetime | None = None
    version: int = Field(default=0, ge=0)

    @property
    def needs_full_sync(self) -> bool:
        return self.sync_token is None
