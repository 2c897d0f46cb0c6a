"""Pure calendar computations: resolution, recurring indices, statistics."""

from __future__ import annotations

from .leave import (
    MAX_LEAVE_RANGE_DAYS,
    count_leave_units,
    format_leave_units,
    is_leave_selectable,
    leave_units,
    round_to_half,
)
from .recurring import EMPTY_INDEX, RecurringIndex, build_recurring_index
from .resolver import get_day_data, resolve_day_type
from .statistics import (
    CalendarStats,
    HalfYearStats,
    MonthlyStats,
    QuarterlyStats,
    compute_stats,
    working_hours_for,
)

__all__ = [
    "CalendarStats",
    "EMPTY_INDEX",
    "HalfYearStats",
    "MAX_LEAVE_RANGE_DAYS",
    "MonthlyStats",
    "QuarterlyStats",
    "RecurringIndex",
    "build_recurring_index",
    "compute_stats",
    "count_leave_units",
    "format_leave_units",
    "get_day_data",
    "is_leave_selectable",
    "leave_units",
    "resolve_day_type",
    "round_to_half",
    "working_hours_for",
]
