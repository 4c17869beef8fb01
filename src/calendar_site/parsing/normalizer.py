"""Normalization of classified calendar events into site records.

## Time Handling

Times of day are read straight from the `dateTime` string the feed returns
(e.g. `2026-02-06T10:00:00-05:00` -> `10:00`), never converted through the
server's local timezone. The full timestamps are passed through verbatim so
that the browser can render them in the visitor's timezone.

Whole-day events have no time of day; they are shown as 12:00-13:00, with
timestamps synthesized at a fixed -05:00 offset on the start date and on the
feed's end date. That offset is Eastern Standard Time and is an hour off
while daylight saving is in effect.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any, Callable
from zoneinfo import ZoneInfo

from calendar_site.models.event import (
    CalendarEvent,
    EventCategory,
    NormalizedEvent,
    Paper,
    Presentation,
    ReadingGroupSession,
    Speaker,
    WritingFeedbackSession,
)
from calendar_site.parsing.classifier import Classification, classify_title
from calendar_site.parsing.description import first_field, parse_description

logger = logging.getLogger(__name__)

ALL_DAY_START_TIME = "12:00"
ALL_DAY_END_TIME = "13:00"
ALL_DAY_UTC_OFFSET = "-05:00"  # EST, ignores daylight saving
DISPLAY_TIMEZONE = "America/New_York"
SLUG_MAX_LENGTH = 50

_TIME_RE = re.compile(r"T(\d{2}):(\d{2})")
_SLUG_SEPARATOR_RE = re.compile(r"[^a-z0-9]+")

CANCELLED_MARKERS = ("cancelled", "canceled")


class EventParseError(ValueError):
    """Raised when a classified event lacks the data needed to normalize it."""

    def __init__(self, message: str, event_id: str | None = None):
        super().__init__(message)
        self.event_id = event_id


def extract_time(date_time: str) -> str:
    """Extract HH:MM from an ISO timestamp without timezone conversion.

    Falls back to parsing the timestamp and rendering it in Eastern time when
    the string has no `THH:MM` part.
    """
    match = _TIME_RE.search(date_time)
    if match:
        return f"{match.group(1)}:{match.group(2)}"

    try:
        parsed = datetime.fromisoformat(date_time.replace("Z", "+00:00"))
    except ValueError as e:
        raise EventParseError(f"Unrecognized timestamp: {date_time!r}") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo(DISPLAY_TIMEZONE))
    return parsed.strftime("%H:%M")


def extract_date(value: str) -> date:
    """Extract the calendar date from a `YYYY-MM-DD` date or ISO timestamp."""
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        raise EventParseError(f"Unrecognized date: {value!r}") from e


def slugify(title: str) -> str:
    slug = _SLUG_SEPARATOR_RE.sub("-", title.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH].rstrip("-")


def generate_event_id(title: str, event_date: date) -> str:
    """Build the stable identifier of an event from its title and date."""
    slug = slugify(title)
    if not slug:
        return event_date.isoformat()
    return f"{event_date.isoformat()}-{slug}"


def is_cancelled(event: CalendarEvent) -> bool:
    """Check the feed status and the title for a cancellation."""
    if event.is_cancelled:
        return True
    summary = event.summary.lower()
    return any(marker in summary for marker in CANCELLED_MARKERS)


def _build_presentation(
    common: dict[str, Any], fields: dict[str, str], classification: Classification
) -> Presentation:
    speaker = None
    speaker_name = first_field(fields, "speaker", "presenter")
    if speaker_name:
        speaker = Speaker(
            name=speaker_name,
            affiliation=fields.get("affiliation"),
            bio=fields.get("bio"),
            url=fields.get("url"),
            photo=fields.get("photo"),
        )

    return Presentation(
        **common,
        speaker=speaker,
        abstract=first_field(fields, "abstract", "description"),
    )


def _build_reading_group(
    common: dict[str, Any], fields: dict[str, str], classification: Classification
) -> ReadingGroupSession:
    paper = None
    paper_title = first_field(fields, "paper", "title")
    if paper_title:
        year = fields.get("year", "")
        paper = Paper(
            title=paper_title,
            authors=fields.get("authors"),
            venue=fields.get("venue"),
            year=int(year) if year.isdigit() else None,
            link=first_field(fields, "link", "url"),
        )

    return ReadingGroupSession(
        **common,
        paper=paper,
        facilitator=first_field(fields, "facilitator", "lead", "leader"),
        summary=first_field(fields, "summary", "description", "goal"),
    )


def _build_writing_feedback(
    common: dict[str, Any], fields: dict[str, str], classification: Classification
) -> WritingFeedbackSession:
    return WritingFeedbackSession(
        **common,
        subtype=classification.subtype,
        facilitator=first_field(fields, "facilitator", "lead", "leader"),
        summary=first_field(fields, "summary", "description", "goal"),
    )


_VARIANT_BUILDERS: dict[
    EventCategory,
    Callable[[dict[str, Any], dict[str, str], Classification], NormalizedEvent],
] = {
    EventCategory.PRESENTATION: _build_presentation,
    EventCategory.READING_GROUP: _build_reading_group,
    EventCategory.WRITING_FEEDBACK: _build_writing_feedback,
}


def normalize_event(
    event: CalendarEvent,
    classification: Classification,
    fields: dict[str, str],
) -> NormalizedEvent | None:
    """Combine a raw event, its classification and description fields.

    Args:
        event: Event as fetched from the feed
        classification: Result of `classify_title` for the event's title
        fields: Result of `parse_description` for the event's description

    Returns:
        The normalized event, or None for an unclassified event

    Raises:
        EventParseError: If the event has no usable start date
    """
    if not classification.matched:
        return None

    start_value = event.start or event.start_date
    if not start_value:
        raise EventParseError(f"Event {event.id} has no start", event_id=event.id)

    title = classification.strip_prefix(event.summary)
    # Date in the event's own offset, not the UTC date, so ids of late-evening
    # events differ from ids derived from UTC timestamps
    event_date = extract_date(start_value)

    if event.start:
        start_time = extract_time(event.start)
        start_datetime = event.start
    else:
        start_time = ALL_DAY_START_TIME
        start_datetime = f"{event_date.isoformat()}T12:00:00{ALL_DAY_UTC_OFFSET}"

    if event.end:
        end_time = extract_time(event.end)
        end_datetime = event.end
    else:
        end_time = ALL_DAY_END_TIME
        end_date = extract_date(event.end_date) if event.end_date else event_date
        end_datetime = f"{end_date.isoformat()}T13:00:00{ALL_DAY_UTC_OFFSET}"

    common: dict[str, Any] = {
        "id": generate_event_id(title, event_date),
        "title": title,
        "date": event_date,
        "start_time": start_time,
        "end_time": end_time,
        "start_datetime": start_datetime,
        "end_datetime": end_datetime,
        "location": event.location or fields.get("location"),
        "cancelled": is_cancelled(event),
    }

    build = _VARIANT_BUILDERS[classification.category]
    return build(common, fields, classification)


def parse_event(event: CalendarEvent) -> NormalizedEvent | None:
    """Classify, parse and normalize a single feed event.

    Returns None for events that are not site content or cannot be
    normalized; the latter are logged.
    """
    classification = classify_title(event.summary)
    if not classification.matched:
        return None

    fields = parse_description(event.description)
    try:
        return normalize_event(event, classification, fields)
    except EventParseError as e:
        logger.warning(f"Skipping event {event.id} ({event.summary!r}): {e}")
        return None


def parse_events(events: Iterable[CalendarEvent]) -> list[NormalizedEvent]:
    """Normalize a batch of feed events, dropping those that are not site content."""
    normalized = []
    for event in events:
        parsed = parse_event(event)
        if parsed is not None:
            normalized.append(parsed)
    return normalized
