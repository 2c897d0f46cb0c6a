"""Work-calendar day-type resolution, statistics and day editing."""

from __future__ import annotations

from .domain import CalendarDay, DayPatch, DayType, WorkCalendar
from .engine import compute_stats, get_day_data, resolve_day_type

__all__ = [
    "CalendarDay",
    "DayPatch",
    "DayType",
    "WorkCalendar",
    "compute_stats",
    "get_day_data",
    "main",
    "resolve_day_type",
]


def main() -> None:
    from .cli import main as cli_main

    raise SystemExit(cli_main())
