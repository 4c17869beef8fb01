"""Persistence of the watcher's sync state.

The state is read once at the start of a run and written at most once after
a successful fetch. Writes are compare-and-swap on the record's version: a
save based on a stale read raises `SyncStateConflictError` instead of
overwriting the newer state.
"""

from __future__ import annotations

import logging
from datetime import timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from calendar_site.database.models import SyncStateRecord
from calendar_site.models.sync import SyncState

logger = logging.getLogger(__name__)


class SyncStateConflictError(Exception):
    """Raised when the stored sync state changed since it was loaded."""

    def __init__(self, calendar_id: str, expected_version: int):
        super().__init__(
            f"Sync state of calendar {calendar_id} changed since version "
            f"{expected_version} was loaded"
        )
        self.calendar_id = calendar_id
        self.expected_version = expected_version


class SyncStateStore:
    """Load and save the sync state of one calendar.

    Example:
        ```python
        store = SyncStateStore(get_session_factory(), calendar_id)

        state = store.load()
        state = store.save(state.model_copy(update={"sync_token": token}))
        ```
    """

    def __init__(self, session_factory: sessionmaker[Session], calendar_id: str):
        self._session_factory = session_factory
        self.calendar_id = calendar_id

    def load(self) -> SyncState:
        """Load the stored state, or an empty state if none was saved yet."""
        with self._session_factory() as session:
            record = session.get(SyncStateRecord, self.calendar_id)
            if record is None:
                return SyncState()
            return self._to_state(record)

    def save(self, state: SyncState) -> SyncState:
        """Save a state derived from the one returned by `load`.

        Returns:
            The saved state with its new version

        Raises:
            SyncStateConflictError: If another writer saved in between
        """
        with self._session_factory() as session:
            record = session.get(SyncStateRecord, self.calendar_id)

            if record is None:
                if state.version != 0:
                    raise SyncStateConflictError(self.calendar_id, state.version)
                record = SyncStateRecord(calendar_id=self.calendar_id)
                session.add(record)
            elif record.version != state.version:
                raise SyncStateConflictError(self.calendar_id, state.version)

            record.sync_token = state.sync_token
            record.last_sync_at = state.last_sync

            try:
                session.commit()
            except (StaleDataError, IntegrityError) as e:
                session.rollback()
                raise SyncStateConflictError(self.calendar_id, state.version) from e

            saved = self._to_state(record)

        logger.debug(
            f"Saved sync state of {self.calendar_id} (version {saved.version})"
        )
        return saved

    @staticmethod
    def _to_state(record: SyncStateRecord) -> SyncState:
        last_sync = record.last_sync_at
        if last_sync is not None and last_sync.tzinfo is None:
            # SQLite drops the offset; values are always written in UTC
            last_sync = last_sync.replace(tzinfo=timezone.utc)
        return SyncState(
            sync_token=record.sync_token,
            last_sync=last_sync,
            version=record.version,
        )
