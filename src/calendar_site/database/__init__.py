"""Database module for the calendar watcher.

This module provides:
- SQLAlchemy engine and session management
- The sync state record with its optimistic version counter
- `SyncStateStore`, the compare-and-swap store used by the watcher
"""

from calendar_site.database.connection import (
    close_db,
    get_session_factory,
    init_db,
)
from calendar_site.database.models import Base, SyncStateRecord
from calendar_site.database.state import SyncStateConflictError, SyncStateStore

__all__ = [
    # Connection
    "close_db",
    "get_session_factory",
    "init_db",
    # Models
    "Base",
    "SyncStateRecord",
    # State
    "SyncStateConflictError",
    "SyncStateStore",
]
