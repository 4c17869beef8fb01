"""Calendar integration module.

Reads the site's Google Calendar and keeps the site in step with it.

## Features

- Fetch all site events of a time window for a build
- Watch the calendar with sync tokens and rebuild on changes
- Filter and sort events for the site's pages

## Google Calendar API

Uses the Google Calendar API v3:
- https://developers.google.com/calendar/api/v3/reference

## Sync Modes

1. **Full**: First run, or after the sync token expired; no rebuild
2. **Incremental**: Changes since the last run; rebuild when any
"""

from calendar_site.calendar.collections import (
    fetch_calendar_events,
    filter_by_category,
    get_presentations,
    get_reading_groups,
    get_subtype_label,
    get_upcoming_events,
    get_writing_feedback_sessions,
    sort_by_date,
)
from calendar_site.calendar.google_calendar import (
    CalendarAPIError,
    GoogleCalendarClient,
    SyncTokenExpiredError,
)
from calendar_site.calendar.sync import (
    CalendarSyncService,
    SyncResult,
)

__all__ = [
    "CalendarAPIError",
    "GoogleCalendarClient",
    "SyncTokenExpiredError",
    "CalendarSyncService",
    "SyncResult",
    "fetch_calendar_events",
    "filter_by_category",
    "get_presentations",
    "get_reading_groups",
    "get_subtype_label",
    "get_upcoming_events",
    "get_writing_feedback_sessions",
    "sort_by_date",
]
