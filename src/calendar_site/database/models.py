"""Database models for the calendar watcher.

## Schema Overview

```
calendar_sync_state   one row per watched calendar
```

The row is written with an optimistic version counter: SQLAlchemy includes
the version read by the writer in the UPDATE's WHERE clause, so two watcher
runs overlapping on the same calendar cannot silently overwrite each other.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all database models."""


class SyncStateRecord(Base):
    """Incremental sync state of one calendar."""

    __tablename__ = "calendar_sync_state"

    calendar_id: Mapped[str] = mapped_column(String(255), primary_key=True)

    # Sync state
    sync_token: Mapped[str | None] = mapped_column(Text)  # None forces a full sync
    last_sync_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Compare-and-swap counter, managed by SQLAlchemy
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return (
            f"<SyncStateRecord(calendar_id={self.calendar_id!r}, "
            f"version={self.version})>"
        )
