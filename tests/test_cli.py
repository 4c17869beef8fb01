"""Tests for the command-line interface."""

import json

import httplib2
import pytest

from calendar_site import cli
from calendar_site.build.rebuild import BuildResult
from calendar_site.calendar.sync import CalendarSyncService, SyncResult
from calendar_site.models.sync import SyncMode


class StubSiteBuilder:
    """Stands in for SiteBuilder so no real command runs."""

    def __init__(self, builder):
        self.builder = builder

    def from_settings(self, settings):
        return self.builder


@pytest.fixture
def patched_cli(monkeypatch, calendar_client, builder):
    """Run the CLI against the mocked calendar and recording builder."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "GoogleCalendarClient", lambda api_key: calendar_client)
    monkeypatch.setattr(cli, "SiteBuilder", StubSiteBuilder(builder))
    return cli


class TestMain:
    """Tests for argument handling."""

    def test_no_command_prints_help(self, capsys):
        """Test running without a command shows usage."""
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_invalid_configuration(self, monkeypatch, capsys):
        """Test missing required settings exit with status 2."""
        monkeypatch.delenv("GOOGLE_CALENDAR_ID", raising=False)
        assert cli.main(["rebuild"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_unknown_category_rejected(self):
        """Test category choices are validated."""
        with pytest.raises(SystemExit):
            cli.main(["events", "--category", "workshop"])


class TestSyncCommand:
    """Tests for the sync command."""

    def test_first_sync(self, patched_cli, calendar_service, builder, api_item):
        """Test a first run succeeds without building."""
        calendar_service.set_pages([{"items": [api_item()], "nextSyncToken": "tok"}])

        assert patched_cli.main(["sync"]) == 0
        assert builder.runs == 0

    def test_fetch_error(self, patched_cli, calendar_service, http_error):
        """Test an unreadable calendar exits with status 1."""
        calendar_service.set_pages([http_error(500)])
        assert patched_cli.main(["sync"]) == 1

    def test_network_failure(self, patched_cli, calendar_service):
        """Test an unreachable API exits with status 1 instead of a traceback."""
        calendar_service.set_pages([httplib2.ServerNotFoundError("no route")])
        assert patched_cli.main(["sync"]) == 1

    def test_failed_build(self, monkeypatch, patched_cli):
        """Test a failed build exits with status 1."""

        def failed_run(self, force_full_sync=False):
            return SyncResult(
                calendar_id=self.calendar_id,
                mode=SyncMode.INCREMENTAL,
                rebuild_triggered=True,
                build=BuildResult(success=False, returncode=1),
            )

        monkeypatch.setattr(CalendarSyncService, "run", failed_run)
        assert patched_cli.main(["sync"]) == 1


class TestEventsCommand:
    """Tests for the events command."""

    def test_writes_json(self, patched_cli, calendar_service, api_item, tmp_path):
        """Test the output file holds the tagged event records."""
        calendar_service.set_pages(
            [
                {
                    "items": [
                        api_item(
                            event_id="a",
                            summary="[Talk] Foo Bar",
                            description="Speaker: Jane Doe",
                        ),
                        api_item(
                            event_id="b",
                            summary="[Feedback] Drafts",
                            start="2026-01-20T14:00:00-05:00",
                            end="2026-01-20T15:00:00-05:00",
                        ),
                        api_item(event_id="c", summary="Lab meeting"),
                    ]
                }
            ]
        )
        output = tmp_path / "events.json"

        assert patched_cli.main(["events", "-o", str(output)]) == 0

        records = json.loads(output.read_text())
        assert [r["id"] for r in records] == [
            "2026-01-20-drafts",
            "2026-02-06-foo-bar",
        ]
        feedback, talk = records
        assert feedback["category"] == "writing-feedback"
        assert feedback["subtype"] == "feedback"
        assert "paper" not in feedback
        assert talk["category"] == "presentation"
        assert talk["subtype"] == "talk"
        assert talk["date"] == "2026-02-06"
        assert talk["start_datetime"] == "2026-02-06T10:00:00-05:00"
        assert talk["speaker"]["name"] == "Jane Doe"

    def test_category_filter_to_stdout(
        self, patched_cli, calendar_service, api_item, capsys
    ):
        """Test filtering by category and printing to stdout."""
        calendar_service.set_pages(
            [
                {
                    "items": [
                        api_item(event_id="a", summary="[Talk] One"),
                        api_item(event_id="b", summary="[Reading] Two"),
                    ]
                }
            ]
        )

        assert patched_cli.main(["events", "--category", "reading-group"]) == 0

        records = json.loads(capsys.readouterr().out)
        assert [r["title"] for r in records] == ["Two"]

    def test_fetch_error(self, patched_cli, calendar_service, http_error):
        """Test fetch errors exit with status 1 instead of an empty list."""
        calendar_service.set_pages([http_error(403)])
        assert patched_cli.main(["events"]) == 1

    def test_network_failure(self, patched_cli, calendar_service):
        """Test an unreachable API exits with status 1."""
        calendar_service.set_pages([httplib2.ServerNotFoundError("no route")])
        assert patched_cli.main(["events"]) == 1


class TestRebuildCommand:
    """Tests for the rebuild command."""

    def test_rebuild(self, patched_cli, builder):
        """Test a successful rebuild."""
        assert patched_cli.main(["rebuild"]) == 0
        assert builder.runs == 1

    def test_failed_rebuild(self, monkeypatch, patched_cli, failing_builder):
        """Test a failed rebuild exits with status 1."""
        monkeypatch.setattr(cli, "SiteBuilder", StubSiteBuilder(failing_builder))
        assert patched_cli.main(["rebuild"]) == 1
