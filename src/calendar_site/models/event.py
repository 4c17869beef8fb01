"""Event models for the calendar-backed site content.

Two layers live here:

- `CalendarEvent`: an item exactly as the Google Calendar feed reported it.
- `Presentation`, `ReadingGroupSession` and `WritingFeedbackSession`: the
  normalized records handed to the site generator. They form a tagged union
  (`NormalizedEvent`) keyed by `category`, so each variant only carries the
  fields that make sense for it (only reading-group sessions have a paper).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as date_type
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field


class EventCategory(str, Enum):
    """Content category, derived from the bracketed title prefix."""

    PRESENTATION = "presentation"
    READING_GROUP = "reading-group"
    WRITING_FEEDBACK = "writing-feedback"


class EventSubtype(str, Enum):
    """More specific kind of event within a category."""

    TALK = "talk"  # presentation
    READING = "reading"  # reading-group
    WRITING = "writing"  # writing-feedback
    FEEDBACK = "feedback"  # writing-feedback


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event as fetched from the feed.

    Timed events keep their `dateTime` strings verbatim in `start`/`end`;
    whole-day events carry `start_date`/`end_date` (YYYY-MM-DD) instead.
    """

    id: str
    calendar_id: str
    summary: str = ""
    description: str | None = None
    location: str | None = None
    start: str | None = None
    end: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    time_zone: str | None = None
    status: str = "confirmed"  # confirmed, tentative, cancelled
    raw_data: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, data: dict[str, Any], calendar_id: str) -> CalendarEvent:
        """Create from Google Calendar API response."""
        start_data = data.get("start") or {}
        end_data = data.get("end") or {}

        return cls(
            id=data.get("id", ""),
            calendar_id=calendar_id,
            summary=data.get("summary") or "",
            description=data.get("description"),
            location=data.get("location"),
            start=start_data.get("dateTime"),
            end=end_data.get("dateTime"),
            start_date=start_data.get("date"),
            end_date=end_data.get("date"),
            time_zone=start_data.get("timeZone"),
            status=data.get("status", "confirmed"),
            raw_data=data,
        )

    @property
    def is_all_day(self) -> bool:
        return self.start is None and self.start_date is not None

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"

    @property
    def is_removed(self) -> bool:
        """Deleted since the last sync (incremental feeds send a bare stub)."""
        return self.is_cancelled and self.start is None and self.start_date is None


class Speaker(BaseModel):
    """Speaker of a presentation."""

    name: str
    affiliation: str | None = None
    bio: str | None = None
    url: str | None = None
    photo: str | None = None


class Paper(BaseModel):
    """Paper discussed in a reading-group session."""

    title: str
    authors: str | None = None
    venue: str | None = None
    year: int | None = None
    link: str | None = None


class BaseEvent(BaseModel):
    """Attributes shared by every normalized event."""

    id: str = Field(..., description="Date-prefixed slug, stable per title and date")
    title: str = Field(..., description="Title with the category prefix removed")
    date: date_type
    start_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    end_time: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    start_datetime: str = Field(
        ..., description="Offset-aware ISO timestamp for client-side rendering"
    )
    end_datetime: str = Field(
        ..., description="Offset-aware ISO timestamp for client-side rendering"
    )
    location: str | None = None
    cancelled: bool = False


class Presentation(BaseEvent):
    """A research talk or seminar."""

    category: Literal[EventCategory.PRESENTATION] = EventCategory.PRESENTATION
    subtype: Literal[EventSubtype.TALK] = EventSubtype.TALK
    speaker: Speaker | None = None
    abstract: str | None = None


class ReadingGroupSession(BaseEvent):
    """A paper discussion."""

    category: Literal[EventCategory.READING_GROUP] = EventCategory.READING_GROUP
    subtype: Literal[EventSubtype.READING] = EventSubtype.READING
    paper: Paper | None = None
    facilitator: str | None = None
    summary: str | None = None


class WritingFeedbackSession(BaseEvent):
    """A joint writing or work-in-progress feedback session."""

    category: Literal[EventCategory.WRITING_FEEDBACK] = EventCategory.WRITING_FEEDBACK
    subtype: Literal[EventSubtype.WRITING, EventSubtype.FEEDBACK]
    facilitator: str | None = None
    summary: str | None = None


NormalizedEvent = Annotated[
    Union[Presentation, ReadingGroupSession, WritingFeedbackSession],
    Field(discriminator="category"),
]
