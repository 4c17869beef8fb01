"""Event collections for the site generator.

The site has one page per category plus an "upcoming events" listing:

| Page | Collection |
|------|------------|
| /seminars/ | `get_presentations` |
| /reading-group/ | `get_reading_groups` |
| /writing-feedback/ | `get_writing_feedback_sessions` |
| upcoming | `get_upcoming_events` |

All helpers work on the list returned by `fetch_calendar_events`, so a build
reads the calendar once.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from calendar_site.calendar.google_calendar import (
    MAX_RESULTS_PER_PAGE,
    GoogleCalendarClient,
)
from calendar_site.models.event import (
    EventCategory,
    EventSubtype,
    NormalizedEvent,
    Presentation,
    ReadingGroupSession,
    WritingFeedbackSession,
)
from calendar_site.parsing.normalizer import parse_events

logger = logging.getLogger(__name__)

SUBTYPE_LABELS: dict[EventSubtype, str] = {
    EventSubtype.TALK: "Research Talk",
    EventSubtype.READING: "Paper Discussion",
    EventSubtype.WRITING: "Writing Session",
    EventSubtype.FEEDBACK: "Feedback Session",
}


def fetch_calendar_events(
    client: GoogleCalendarClient,
    calendar_id: str,
    time_min: datetime,
    time_max: datetime,
    max_results: int = MAX_RESULTS_PER_PAGE,
) -> list[NormalizedEvent]:
    """Fetch all site events in a time window, ordered by start time.

    Raises:
        CalendarAPIError: If the calendar cannot be read
    """
    items, _ = client.list_events(
        calendar_id,
        time_min=time_min,
        time_max=time_max,
        max_results=max_results,
        order_by="startTime",
    )
    events = parse_events(items)
    logger.info(f"Fetched {len(items)} calendar events, {len(events)} site events")
    return events


def filter_by_category(
    events: Iterable[NormalizedEvent], category: EventCategory
) -> list[NormalizedEvent]:
    return [e for e in events if e.category == category]


def get_presentations(events: Iterable[NormalizedEvent]) -> list[Presentation]:
    """Get all presentations (research talks and seminars)."""
    return [e for e in events if isinstance(e, Presentation)]


def get_reading_groups(events: Iterable[NormalizedEvent]) -> list[ReadingGroupSession]:
    """Get all reading group sessions."""
    return [e for e in events if isinstance(e, ReadingGroupSession)]


def get_writing_feedback_sessions(
    events: Iterable[NormalizedEvent],
) -> list[WritingFeedbackSession]:
    """Get all writing and feedback sessions."""
    return [e for e in events if isinstance(e, WritingFeedbackSession)]


def sort_by_date(events: Iterable[NormalizedEvent]) -> list[NormalizedEvent]:
    """Sort events by calendar date, keeping the feed order within a day."""
    return sorted(events, key=lambda e: e.date)


def get_upcoming_events(
    events: Iterable[NormalizedEvent],
    today: date | None = None,
) -> list[NormalizedEvent]:
    """Get events from today onwards that are not cancelled, soonest first.

    Args:
        events: Normalized events
        today: Reference date, defaults to the local date
    """
    today = today or date.today()
    return sort_by_date(e for e in events if e.date >= today and not e.cancelled)


def get_subtype_label(event: NormalizedEvent) -> str:
    """Human-readable label of an event's subtype."""
    return SUBTYPE_LABELS.get(event.subtype, "Event")
