"""Event classification by title prefix.

Events are published to the site by prefixing their calendar title with a
bracketed tag:

| Title prefix | Category | Subtype |
|--------------|----------|---------|
| [Talk] | presentation | talk |
| [Seminar] | presentation | talk |
| [Reading Group] | reading-group | reading |
| [Reading] | reading-group | reading |
| [Writing] | writing-feedback | writing |
| [Feedback] | writing-feedback | feedback |

Matching is case-insensitive and ignores leading whitespace. Rules are
checked in order and the first match wins, so a longer tag must be listed
before any shorter tag it starts with. Titles without a known tag are not
site content and get the null classification.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from calendar_site.models.event import EventCategory, EventSubtype


def _prefix(tag: str) -> re.Pattern[str]:
    return re.compile(rf"^\s*\[{tag}\]\s*", re.IGNORECASE)


CLASSIFICATION_RULES: list[tuple[re.Pattern[str], EventCategory, EventSubtype]] = [
    (_prefix("talk"), EventCategory.PRESENTATION, EventSubtype.TALK),
    (_prefix("seminar"), EventCategory.PRESENTATION, EventSubtype.TALK),
    (_prefix(r"reading\s*group"), EventCategory.READING_GROUP, EventSubtype.READING),
    (_prefix("reading"), EventCategory.READING_GROUP, EventSubtype.READING),
    (_prefix("writing"), EventCategory.WRITING_FEEDBACK, EventSubtype.WRITING),
    (_prefix("feedback"), EventCategory.WRITING_FEEDBACK, EventSubtype.FEEDBACK),
]


@dataclass(frozen=True)
class Classification:
    """Category, subtype and matched prefix of an event title."""

    category: EventCategory | None = None
    subtype: EventSubtype | None = None
    prefix: re.Pattern[str] | None = None

    @property
    def matched(self) -> bool:
        return self.category is not None

    def strip_prefix(self, title: str) -> str:
        """Remove the matched prefix and surrounding whitespace from a title."""
        title = title.strip()
        if self.prefix is None:
            return title
        return self.prefix.sub("", title, count=1).strip()


UNCLASSIFIED = Classification()


def classify_title(title: str | None) -> Classification:
    """Classify an event by the bracketed prefix of its title."""
    if not title:
        return UNCLASSIFIED

    for pattern, category, subtype in CLASSIFICATION_RULES:
        if pattern.match(title):
            return Classification(category=category, subtype=subtype, prefix=pattern)

    return UNCLASSIFIED
