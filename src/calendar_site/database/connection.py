"""Database connection management.

Provides the SQLAlchemy engine and session factory used to persist sync
state. The watcher runs as a short-lived process, so a plain synchronous
engine is used.

## Configuration

Database connection is configured via environment variables:
- DATABASE_URL: SQLAlchemy connection string
  (default: `sqlite:///.calendar-sync-state.db` in the working directory)
- DATABASE_ECHO: Log SQL statements (default: false)

## Usage

```python
from calendar_site.database import SyncStateStore, get_session_factory, init_db

# Initialize on startup
init_db()

store = SyncStateStore(get_session_factory(), calendar_id)
```
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from calendar_site.config import get_settings
from calendar_site.database.models import Base

logger = logging.getLogger(__name__)

# Global engine and session factory
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def _engine_options(database_url: str) -> dict[str, Any]:
    if not database_url.startswith("sqlite"):
        return {"pool_pre_ping": True}  # Verify connections before use

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, or every session sees an empty database
        options["poolclass"] = StaticPool
    return options


def init_db(database_url: str | None = None, echo: bool | None = None) -> None:
    """Initialize the database connection and create missing tables.

    Args:
        database_url: Connection string, defaults to the configured one
        echo: Log SQL statements, defaults to the configured value
    """
    global _engine, _session_factory

    settings = get_settings()
    url = database_url or settings.database_url

    logger.info("Initializing database connection")

    _engine = create_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        **_engine_options(url),
    )

    _session_factory = sessionmaker(
        _engine,
        expire_on_commit=False,
        autoflush=False,
    )

    Base.metadata.create_all(_engine)

    logger.info("Database connection initialized")


def close_db() -> None:
    """Dispose of the engine and forget the session factory."""
    global _engine, _session_factory

    if _engine:
        logger.info("Closing database connection")
        _engine.dispose()
        _engine = None
        _session_factory = None


def get_session_factory() -> sessionmaker[Session]:
    """Get the session factory created by `init_db`."""
    if _session_factory is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _session_factory

