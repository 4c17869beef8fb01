"""Logging setup for the command-line entry points.

Every module logs through `logging.getLogger(__name__)`; this module only
installs the handlers. Log lines look like:

```
[2026-02-06T10:00:00+0000] INFO calendar_site.calendar.sync: No changes detected
```
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def setup_logging(log_level: str = "INFO", log_file: Path | str | None = None) -> None:
    """Configure root logging to stderr and, optionally, a file.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: File to append log lines to; parent directories are created
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Discovery cache warnings from the Google client are noise here
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
