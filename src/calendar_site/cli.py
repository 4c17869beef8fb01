"""Command-line interface for the calendar-backed site.

Commands:

- `sync`: one watcher run; schedule it periodically (e.g. cron every 5 min)
- `events`: write the site events as JSON for the site generator
- `rebuild`: rebuild the site now
- `webhook`: serve the rebuild webhook
"""

import argparse
import logging
import sys

from pydantic import TypeAdapter, ValidationError

from calendar_site import __version__
from calendar_site.build.rebuild import SiteBuilder
from calendar_site.calendar.collections import (
    fetch_calendar_events,
    filter_by_category,
    get_upcoming_events,
    sort_by_date,
)
from calendar_site.calendar.google_calendar import CalendarAPIError, GoogleCalendarClient
from calendar_site.calendar.sync import CalendarSyncService
from calendar_site.config import Settings, get_settings
from calendar_site.database.connection import close_db, get_session_factory, init_db
from calendar_site.database.state import SyncStateConflictError, SyncStateStore
from calendar_site.log_config import setup_logging
from calendar_site.models.event import EventCategory, NormalizedEvent

logger = logging.getLogger(__name__)


def cmd_sync(settings: Settings, args: argparse.Namespace) -> int:
    logger.info("Calendar watcher started")

    init_db()
    try:
        service = CalendarSyncService.from_settings(
            settings,
            client=GoogleCalendarClient(settings.google_api_key),
            store=SyncStateStore(get_session_factory(), settings.google_calendar_id),
            builder=SiteBuilder.from_settings(settings),
        )
        result = service.run(force_full_sync=args.full)
    except (CalendarAPIError, SyncStateConflictError) as e:
        logger.error(f"Error: {e}")
        return 1
    finally:
        close_db()

    if not result.success:
        logger.error("Calendar watcher finished with a failed build")
        return 1

    logger.info("Calendar watcher finished")
    return 0


def cmd_events(settings: Settings, args: argparse.Namespace) -> int:
    client = GoogleCalendarClient(settings.google_api_key)
    try:
        events = fetch_calendar_events(
            client,
            settings.google_calendar_id,
            time_min=settings.full_sync_time_min,
            time_max=settings.full_sync_time_max,
            max_results=settings.max_results_per_page,
        )
    except CalendarAPIError as e:
        logger.error(f"Failed to fetch calendar events: {e}")
        return 1

    if args.category:
        events = filter_by_category(events, EventCategory(args.category))
    events = get_upcoming_events(events) if args.upcoming else sort_by_date(events)

    payload = TypeAdapter(list[NormalizedEvent]).dump_json(events, indent=2)
    if args.output:
        with open(args.output, "wb") as f:
            f.write(payload)
        logger.info(f"Wrote {len(events)} events to {args.output}")
    else:
        sys.stdout.write(payload.decode() + "\n")
    return 0


def cmd_rebuild(settings: Settings, args: argparse.Namespace) -> int:
    result = SiteBuilder.from_settings(settings).run()
    if result.stdout:
        print(result.stdout, end="")
    return 0 if result.success else 1


def cmd_webhook(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    from calendar_site.api import create_app

    uvicorn.run(
        create_app(),
        host=args.host or settings.webhook_host,
        port=args.port or settings.webhook_port,
        log_config=None,  # Keep the handlers from setup_logging
    )
    return 0


COMMANDS = {
    "sync": cmd_sync,
    "events": cmd_events,
    "rebuild": cmd_rebuild,
    "webhook": cmd_webhook,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calendar Site Sync - Publish calendar events on a static site"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Sync command
    sync_parser = subparsers.add_parser(
        "sync", help="Check the calendar for changes and rebuild if needed"
    )
    sync_parser.add_argument(
        "--full",
        action="store_true",
        help="Ignore the stored sync token and perform a full sync",
    )

    # Events command
    events_parser = subparsers.add_parser(
        "events", help="Print site events as JSON"
    )
    events_parser.add_argument(
        "--category",
        choices=[c.value for c in EventCategory],
        help="Only events of this category",
    )
    events_parser.add_argument(
        "--upcoming",
        action="store_true",
        help="Only events from today on that are not cancelled",
    )
    events_parser.add_argument(
        "--output",
        "-o",
        help="Write to this file instead of stdout",
    )

    # Rebuild command
    subparsers.add_parser("rebuild", help="Rebuild the site now")

    # Webhook command
    webhook_parser = subparsers.add_parser(
        "webhook", help="Serve the rebuild webhook"
    )
    webhook_parser.add_argument("--host", help="Bind address")
    webhook_parser.add_argument("--port", type=int, help="Port to listen on")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    setup_logging(settings.log_level, settings.log_file)

    return COMMANDS[args.command](settings, args)


if __name__ == "__main__":
    sys.exit(main())
