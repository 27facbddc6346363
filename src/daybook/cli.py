from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import orjson

from .api.serializers import serialize_event
from .bootstrap import configure_logging
from .config import get_settings
from .domain import DaybookError, EventFilter
from .services import CalendarService, ServiceContext
from .services.http import run_local_server

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Daybook command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the HTTP API server.")
    api_parser.add_argument("--host", default=settings.http.host)
    api_parser.add_argument("--port", type=int, default=settings.http.port)

    subparsers.add_parser("init-db", help="Create the event store schema.")

    user_parser = subparsers.add_parser("add-user", help="Register a user that may own events.")
    user_parser.add_argument("username")
    user_parser.add_argument("email")
    user_parser.add_argument("--id", dest="user_id", default=None)

    for name, help_text in (("list", "Print a user's events as JSON."), ("export", "Write a user's events as an iCalendar feed.")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--user", required=True, dest="user_id")
        sub.add_argument("--start-date", default=None)
        sub.add_argument("--end-date", default=None)
        if name == "list":
            sub.add_argument("--category", default=None)
            sub.add_argument("--search", default=None)
        else:
            sub.add_argument("--output", type=Path, default=None, help="Defaults to calendar.ics")

    return parser


def _run_offline(args: argparse.Namespace) -> None:
    with ServiceContext() as context:
        if args.command == "init-db":
            logger.info("Schema ready at %s", context.settings.storage.database_url)
            return
        if args.command == "add-user":
            account = context.users.create(args.username, args.email, user_id=args.user_id)
            print(account.id)
            return

        calendar = CalendarService(context)
        if args.command == "list":
            event_filter = EventFilter.build(
                start_date=args.start_date,
                end_date=args.end_date,
                category=args.category,
                search=args.search,
            )
            payload = [serialize_event(event) for event in calendar.list_events(args.user_id, event_filter)]
            sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n")
        elif args.command == "export":
            window = EventFilter.build(start_date=args.start_date, end_date=args.end_date)
            document = calendar.export_feed(args.user_id, start_date=window.start_date, end_date=window.end_date)
            output = args.output or Path(document.filename)
            output.write_text(document.body, encoding="utf-8")
            logger.info("Wrote feed to %s", output)


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    logging.getLogger(__name__).info("Daybook CLI starting")
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "api":
        run_local_server(host=args.host, port=args.port)
        return 0
    try:
        _run_offline(args)
    except DaybookError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
