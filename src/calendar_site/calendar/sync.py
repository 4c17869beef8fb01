"""Calendar watcher: incremental sync and rebuild decision.

Handles one watcher run: fetching changes from the calendar, deciding whether
the site must be rebuilt, and storing the sync token for the next run.

## Sync Process

1. Load the stored sync state
2. Fetch events: full window without a token, changes only with one
3. If the feed reports the token expired, drop it and fetch the full window
4. Store the new sync token
5. Rebuild the site if an incremental fetch returned any change

## Rebuild Decision

| Run | Rebuild |
|-----|---------|
| Full sync (no stored token) | No, it only establishes the baseline |
| Forced resync (token expired) | No, same as a first run |
| Incremental with changes | Yes, once, after the token is stored |
| Incremental without changes | No |

The token is stored before the rebuild starts and is not rolled back when
the build fails, so a failed build is never followed by reprocessing the
same changes. Fetch errors abort the run before anything is stored; the next
scheduled run retries from the same token.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from calendar_site.build.rebuild import BuildResult
from calendar_site.calendar.google_calendar import (
    MAX_RESULTS_PER_PAGE,
    GoogleCalendarClient,
    SyncTokenExpiredError,
)
from calendar_site.config import Settings
from calendar_site.database.state import SyncStateStore
from calendar_site.models.event import CalendarEvent, NormalizedEvent
from calendar_site.models.sync import SyncMode, SyncState
from calendar_site.parsing.normalizer import parse_events

logger = logging.getLogger(__name__)


class Builder(Protocol):
    def run(self) -> BuildResult: ...


@dataclass
class SyncResult:
    """Result of a watcher run."""

    calendar_id: str
    mode: SyncMode
    token_expired: bool = False
    items_found: int = 0
    changes: list[CalendarEvent] = field(default_factory=list)
    events: list[NormalizedEvent] = field(default_factory=list)
    sync_token: str | None = None
    state_saved: bool = False
    rebuild_triggered: bool = False
    build: BuildResult | None = None
    synced_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def success(self) -> bool:
        return self.build is None or self.build.success


class CalendarSyncService:
    """Service running the calendar watcher.

    Example:
        ```python
        service = CalendarSyncService.from_settings(
            settings, client, store, SiteBuilder.from_settings(settings)
        )
        result = service.run()
        ```
    """

    def __init__(
        self,
        client: GoogleCalendarClient,
        store: SyncStateStore,
        builder: Builder,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        max_results: int = MAX_RESULTS_PER_PAGE,
    ):
        """Initialize the sync service.

        Args:
            client: Calendar feed client
            store: Sync state store for the calendar
            builder: Rebuild capability, invoked when changes are found
            calendar_id: Calendar to watch
            time_min: Start of the full sync window
            time_max: End of the full sync window
            max_results: Page size of full syncs
        """
        self.client = client
        self.store = store
        self.builder = builder
        self.calendar_id = calendar_id
        self.time_min = time_min
        self.time_max = time_max
        self.max_results = max_results

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        client: GoogleCalendarClient,
        store: SyncStateStore,
        builder: Builder,
    ) -> CalendarSyncService:
        return cls(
            client=client,
            store=store,
            builder=builder,
            calendar_id=settings.google_calendar_id,
            time_min=settings.full_sync_time_min,
            time_max=settings.full_sync_time_max,
            max_results=settings.max_results_per_page,
        )

    def run(self, force_full_sync: bool = False) -> SyncResult:
        """Run one sync and rebuild the site if needed.

        Args:
            force_full_sync: Ignore the stored token and re-establish the baseline

        Returns:
            SyncResult describing what was fetched and done

        Raises:
            CalendarAPIError: If the feed could not be read; nothing is stored
            SyncStateConflictError: If another run stored state in between
        """
        state = self.store.load()
        sync_token = None if force_full_sync else state.sync_token
        mode = SyncMode.INCREMENTAL if sync_token else SyncMode.FULL
        token_expired = False

        logger.info(f"Starting {mode.value} sync of calendar {self.calendar_id}")

        try:
            items, next_sync_token = self._fetch(sync_token)
        except SyncTokenExpiredError:
            logger.warning("Sync token expired, performing full resync")
            token_expired = True
            mode = SyncMode.RESYNC
            items, next_sync_token = self._fetch(None)

        result = SyncResult(
            calendar_id=self.calendar_id,
            mode=mode,
            token_expired=token_expired,
            items_found=len(items),
            events=parse_events(items),
            sync_token=next_sync_token,
        )

        if mode is not SyncMode.INCREMENTAL:
            logger.info(
                f"Full sync completed: {len(items)} events, "
                f"{len(result.events)} site events"
            )
            self._save(state, next_sync_token, result)
            logger.info("Sync state saved, no rebuild on full sync")
        elif items:
            logger.info(f"Changes detected: {len(items)} event(s) modified")
            result.changes = items
            for item in items:
                change = "DELETED" if item.is_cancelled else "UPDATED"
                logger.info(f"  {change}: {item.summary or item.id}")

            self._save(state, next_sync_token, result)

            result.rebuild_triggered = True
            result.build = self.builder.run()
        else:
            logger.info("No changes detected")
            if next_sync_token:
                self._save(state, next_sync_token, result)

        return result

    def _fetch(self, sync_token: str | None) -> tuple[list[CalendarEvent], str | None]:
        if sync_token:
            return self.client.list_events(self.calendar_id, sync_token=sync_token)
        return self.client.list_events(
            self.calendar_id,
            time_min=self.time_min,
            time_max=self.time_max,
            max_results=self.max_results,
        )

    def _save(
        self,
        state: SyncState,
        sync_token: str | None,
        result: SyncResult,
    ) -> None:
        new_state = state.model_copy(
            update={"sync_token": sync_token, "last_sync": result.synced_at}
        )
        self.store.save(new_state)
        result.state_saved = True
