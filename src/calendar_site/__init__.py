"""Calendar-backed content for a static research-group site.

Events on a Google Calendar whose titles start with a bracketed tag such as
`[Talk]` or `[Reading Group]` become seminar, reading-group and
writing-feedback pages. A watcher rebuilds the site when the calendar
changes.
"""

__version__ = "0.1.0"
