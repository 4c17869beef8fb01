"""Parsing of calendar events into site content.

## Pipeline

1. `classify_title`: map the bracketed title prefix to a category
2. `parse_description`: extract "Key: Value" fields from the description
3. `normalize_event`: build the typed record for the category

`parse_event` runs all three and drops events that are not site content.
"""

from calendar_site.parsing.classifier import (
    CLASSIFICATION_RULES,
    UNCLASSIFIED,
    Classification,
    classify_title,
)
from calendar_site.parsing.description import parse_description
from calendar_site.parsing.normalizer import (
    EventParseError,
    generate_event_id,
    normalize_event,
    parse_event,
    parse_events,
)

__all__ = [
    "CLASSIFICATION_RULES",
    "UNCLASSIFIED",
    "Classification",
    "classify_title",
    "parse_description",
    "EventParseError",
    "generate_event_id",
    "normalize_event",
    "parse_event",
    "parse_events",
]
