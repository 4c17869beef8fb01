"""Pytest fixtures for calendar site tests.

This module provides test fixtures that ensure:
1. No external API calls are made (Google Calendar is a mocked service)
2. Sync state lives in an in-memory SQLite database
3. Builds are recorded instead of run, unless a test runs a real command
"""

import os
from typing import Any
from unittest.mock import MagicMock

import httplib2
import pytest

# Set test environment BEFORE importing application modules
# This ensures no real services are contacted during test collection
os.environ.setdefault("GOOGLE_CALENDAR_ID", "test-calendar@group.calendar.google.com")
os.environ.setdefault("GOOGLE_API_KEY", "test-api-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from googleapiclient.errors import HttpError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from calendar_site.build.rebuild import BuildResult
from calendar_site.calendar.google_calendar import GoogleCalendarClient
from calendar_site.database.models import Base
from calendar_site.database.state import SyncStateStore

CALENDAR_ID = "test-calendar@group.calendar.google.com"


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from calendar_site.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def session_factory():
    """Session factory bound to a fresh in-memory database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(engine, expire_on_commit=False, autoflush=False)
    engine.dispose()


@pytest.fixture
def state_store(session_factory) -> SyncStateStore:
    """Sync state store for the test calendar."""
    return SyncStateStore(session_factory, CALENDAR_ID)


# =============================================================================
# Google Calendar Fixtures
# =============================================================================


@pytest.fixture
def calendar_service() -> MagicMock:
    """Mocked googleapiclient service resource.

    Set the pages returned by successive `events().list().execute()` calls
    with `calendar_service.set_pages([...])`; exceptions in the list are raised.
    """
    service = MagicMock()
    list_request = service.events.return_value.list

    def set_pages(pages: list[Any]) -> None:
        list_request.return_value.execute.side_effect = pages

    service.set_pages = set_pages
    service.list_calls = lambda: [c.kwargs for c in list_request.call_args_list]
    return service


@pytest.fixture
def calendar_client(calendar_service) -> GoogleCalendarClient:
    """Calendar client using the mocked service."""
    return GoogleCalendarClient(api_key="test-api-key", service=calendar_service)


@pytest.fixture
def http_error():
    """Factory for googleapiclient HttpError with a given status."""

    def make(status: int, reason: str = "Error") -> HttpError:
        resp = httplib2.Response({"status": status, "reason": reason})
        return HttpError(resp, b"")

    return make


@pytest.fixture
def api_item():
    """Factory for Google Calendar API event items."""

    def make(
        event_id: str = "evt1",
        summary: str | None = "[Talk] Learning Analytics at Scale",
        start: str | None = "2026-02-06T10:00:00-05:00",
        end: str | None = "2026-02-06T11:00:00-05:00",
        all_day: str | None = None,
        all_day_end: str | None = None,
        description: str | None = None,
        location: str | None = None,
        status: str = "confirmed",
    ) -> dict[str, Any]:
        item: dict[str, Any] = {"id": event_id, "status": status}
        if summary is not None:
            item["summary"] = summary
        if description is not None:
            item["description"] = description
        if location is not None:
            item["location"] = location
        if all_day:
            item["start"] = {"date": all_day}
            item["end"] = {"date": all_day_end or all_day}
        elif start:
            item["start"] = {"dateTime": start, "timeZone": "America/New_York"}
            item["end"] = {"dateTime": end, "timeZone": "America/New_York"}
        return item

    return make


# =============================================================================
# Build Fixtures
# =============================================================================


class RecordingBuilder:
    """Builder double that records runs instead of building."""

    def __init__(self, success: bool = True, on_run=None):
        self.success = success
        self.on_run = on_run
        self.runs = 0

    def run(self) -> BuildResult:
        self.runs += 1
        if self.on_run is not None:
            self.on_run()
        return BuildResult(
            success=self.success,
            returncode=0 if self.success else 1,
            stderr="" if self.success else "Build error: missing page",
        )


@pytest.fixture
def builder() -> RecordingBuilder:
    """Builder that succeeds."""
    return RecordingBuilder()


@pytest.fixture
def failing_builder() -> RecordingBuilder:
    """Builder that fails."""
    return RecordingBuilder(success=False)
