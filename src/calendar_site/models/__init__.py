"""Domain models for calendar-backed site content."""

from calendar_site.models.event import (
    BaseEvent,
    CalendarEvent,
    EventCategory,
    EventSubtype,
    NormalizedEvent,
    Paper,
    Presentation,
    ReadingGroupSession,
    Speaker,
    WritingFeedbackSession,
)
from calendar_site.models.sync import SyncMode, SyncState

__all__ = [
    # Raw feed
    "CalendarEvent",
    # Normalized events
    "BaseEvent",
    "EventCategory",
    "EventSubtype",
    "NormalizedEvent",
    "Paper",
    "Presentation",
    "ReadingGroupSession",
    "Speaker",
    "WritingFeedbackSession",
    # Sync
    "SyncMode",
    "SyncState",
]
