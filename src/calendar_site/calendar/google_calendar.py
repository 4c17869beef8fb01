"""Google Calendar API client.

Read-only access to the events of a single public calendar:
- Full listing of a time window
- Incremental listing with sync tokens

## API Documentation

https://developers.google.com/calendar/api/v3/reference/events/list

## Authentication

Uses an API key. The calendar must be public; no OAuth flow is involved.

## Sync Tokens

The last page of a listing carries `nextSyncToken`. Passing it back as
`syncToken` returns only the events changed since, including deleted events
(status `cancelled`). An expired token is answered with HTTP 410 Gone, after
which the client must fall back to a full listing.

## Rate Limits

Google Calendar API has quotas:
- 1,000,000 queries per day (default)
- 500 queries per 100 seconds per user

Use incremental sync (sync tokens) to minimize API calls.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httplib2
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from calendar_site.models.event import CalendarEvent

logger = logging.getLogger(__name__)

MAX_RESULTS_PER_PAGE = 250


class CalendarAPIError(Exception):
    """Raised when the calendar feed cannot be read."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class SyncTokenExpiredError(CalendarAPIError):
    """Raised when the feed rejects a sync token as expired (HTTP 410)."""

    def __init__(self, calendar_id: str):
        super().__init__(
            f"Sync token expired for calendar {calendar_id}; full sync required",
            status_code=410,
        )
        self.calendar_id = calendar_id


class GoogleCalendarClient:
    """Client for the Google Calendar API.

    Example:
        ```python
        client = GoogleCalendarClient(api_key)

        # Full listing of a window
        events, sync_token = client.list_events(calendar_id, time_min, time_max)

        # Changes since the previous listing
        changes, sync_token = client.list_events(calendar_id, sync_token=sync_token)
        ```
    """

    def __init__(self, api_key: str, service: Any | None = None):
        """Initialize the client.

        Args:
            api_key: Google API key
            service: Prebuilt API service resource (used by tests)
        """
        self.api_key = api_key

        if service is None:
            service = build(
                "calendar", "v3", developerKey=api_key, cache_discovery=False
            )
        self._service = service

    def list_events(
        self,
        calendar_id: str,
        time_min: datetime | None = None,
        time_max: datetime | None = None,
        max_results: int = MAX_RESULTS_PER_PAGE,
        sync_token: str | None = None,
        order_by: str | None = None,
    ) -> tuple[list[CalendarEvent], str | None]:
        """List events from a calendar, following pagination.

        With a sync token only the changes since that token are listed and
        all other filters are ignored, as the API requires.

        Args:
            calendar_id: Calendar ID
            time_min: Minimum event end time (full listing only)
            time_max: Maximum event start time (full listing only)
            max_results: Maximum events per page
            sync_token: Token for incremental sync
            order_by: Sort order, e.g. "startTime" (full listing only)

        Returns:
            Tuple of (events across all pages, sync token of the last page)

        Raises:
            SyncTokenExpiredError: If the sync token is no longer valid
            CalendarAPIError: On any other API or network failure
        """
        events: list[CalendarEvent] = []
        page_token = None
        next_sync_token = None

        params: dict[str, Any] = {"calendarId": calendar_id}

        if sync_token:
            params["syncToken"] = sync_token
        else:
            params["singleEvents"] = True  # Expand recurring events
            params["maxResults"] = max_results
            if time_min:
                params["timeMin"] = time_min.isoformat()
            if time_max:
                params["timeMax"] = time_max.isoformat()
            if order_by:
                params["orderBy"] = order_by

        pages = 0
        while True:
            if page_token:
                params["pageToken"] = page_token

            result = self._execute_list(calendar_id, params, sync_token)
            pages += 1

            for item in result.get("items", []):
                events.append(CalendarEvent.from_api(item, calendar_id))

            page_token = result.get("nextPageToken")
            if not page_token:
                next_sync_token = result.get("nextSyncToken")
                break

        logger.debug(
            f"Listed {len(events)} events from calendar {calendar_id} "
            f"in {pages} page(s)"
        )
        return events, next_sync_token

    def _execute_list(
        self,
        calendar_id: str,
        params: dict[str, Any],
        sync_token: str | None,
    ) -> dict[str, Any]:
        """Fetch a single page of events."""
        try:
            return self._service.events().list(**params).execute()
        except HttpError as e:
            if e.resp.status == 410 and sync_token:
                raise SyncTokenExpiredError(calendar_id) from e
            raise CalendarAPIError(
                f"API error listing events of {calendar_id}: "
                f"{e.resp.status} {e.reason}",
                status_code=e.resp.status,
            ) from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise CalendarAPIError(
                f"Network error listing events of {calendar_id}: {e}"
            ) from e
