"""Field extraction from event descriptions.

Event descriptions follow a loose "Key: Value" convention, one field per
line, with values allowed to continue over the following lines:

```
Speaker: Jane Doe
Affiliation: Example University
Abstract: First line of the abstract
which continues here.
```

Google Calendar stores descriptions edited in its web UI as light HTML, so
markup is normalized before scanning. Nothing here raises: text that does not
follow the convention just produces fewer (or no) fields.
"""

from __future__ import annotations

import re
from enum import Enum

# Field labels are ASCII letters only, so "2024: results" is not a field.
FIELD_LINE_RE = re.compile(r"^([A-Za-z]+):\s*(.*)$")

_BREAK_TAG_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")

# Replaced in this order, so "&amp;lt;" decodes to "<".
_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
)


class _ScanState(Enum):
    SEEKING_KEY = "seeking_key"
    ACCUMULATING_VALUE = "accumulating_value"


def normalize_markup(text: str) -> str:
    """Turn description markup into plain text with newline line breaks."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _BREAK_TAG_RE.sub("\n", text)
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text


def parse_description(description: str | None) -> dict[str, str]:
    """Parse a description into a mapping of lower-cased field names to values.

    Lines before the first field label are ignored. A line that is not a
    field label extends the value of the current field. When a label repeats,
    the last value wins.

    Args:
        description: Raw event description, possibly containing HTML

    Returns:
        Field mapping, empty if no field label was found
    """
    fields: dict[str, str] = {}
    if not description:
        return fields

    state = _ScanState.SEEKING_KEY
    key = ""
    value_lines: list[str] = []

    for line in normalize_markup(description).split("\n"):
        match = FIELD_LINE_RE.match(line)
        if match:
            if state is _ScanState.ACCUMULATING_VALUE:
                fields[key.lower()] = "\n".join(value_lines).strip()
            key = match.group(1)
            value_lines = [match.group(2)]
            state = _ScanState.ACCUMULATING_VALUE
        elif state is _ScanState.ACCUMULATING_VALUE:
            value_lines.append(line)

    if state is _ScanState.ACCUMULATING_VALUE:
        fields[key.lower()] = "\n".join(value_lines).strip()

    return fields


def first_field(fields: dict[str, str], *names: str) -> str | None:
    """Return the first non-empty value among `names`, in priority order."""
    for name in names:
        value = fields.get(name)
        if value:
            return value
    return None
