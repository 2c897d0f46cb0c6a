from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Any, Optional, Sequence

import orjson

from .bootstrap import configure_logging
from .config import get_settings
from .domain import CalendarError, parse_iso_date
from .engine import format_leave_units
from .services import CalendarService, ServiceContext

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Work calendar statistics and day lookups.")
    parser.add_argument("--log-level", default=None, help="Override HR_CALENDAR_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    stats_parser = subparsers.add_parser("stats", help="Print the statistics record for a year as JSON.")
    stats_parser.add_argument("--year", type=int, default=date.today().year)

    day_parser = subparsers.add_parser("day", help="Print the resolved type and merged entry of a date.")
    day_parser.add_argument("date", type=parse_iso_date)

    leave_parser = subparsers.add_parser("leave", help="Count leave days in an inclusive date range.")
    leave_parser.add_argument("start", type=parse_iso_date)
    leave_parser.add_argument("end", type=parse_iso_date)

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API server.")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def _dump(payload: Any) -> None:
    sys.stdout.write(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode() + "\n")


def _load_service() -> CalendarService:
    service = CalendarService(ServiceContext())
    asyncio.run(service.load())
    return service


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logger.debug("HR calendar CLI running %s", args.command)

    if args.command == "serve":
        from .services.http import run_local_server

        server = get_settings().server
        run_local_server(host=args.host or server.host, port=args.port or server.port)
        return 0

    try:
        service = _load_service()
        if args.command == "stats":
            stats = service.stats(args.year)
            _dump(stats.to_record() if stats else None)
        elif args.command == "day":
            entry = service.day_data(args.date)
            _dump(
                {
                    "date": args.date.isoformat(),
                    "dayType": service.day_type(args.date).value,
                    "day": entry.to_record() if entry else None,
                }
            )
        elif args.command == "leave":
            units = service.leave_units(args.start, args.end)
            _dump({"units": units, "formatted": format_leave_units(units)})
        else:  # pragma: no cover - argparse enforces choices
            parser.print_help()
            return 2
    except CalendarError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
