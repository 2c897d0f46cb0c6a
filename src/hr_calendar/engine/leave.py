"""Leave accounting in day units derived from resolved day types."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..domain import DayType, ValidationError, WorkCalendar
from .recurring import RecurringIndex, build_recurring_index
from .resolver import resolve_day_type

# Longest range a single leave count may walk.
MAX_LEAVE_RANGE_DAYS = 366

_UNITS = {
    DayType.WORKING: 1.0,
    DayType.SPECIAL_WORKING: 1.0,
    DayType.HALF_DAY: 0.5,
}


def leave_units(day_type: DayType) -> float:
    return _UNITS.get(day_type, 0.0)


def is_leave_selectable(day_type: DayType) -> bool:
    return leave_units(day_type) > 0


def round_to_half(value: float) -> float:
    doubled = (Decimal(str(value)) * 2).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(doubled / 2)


def count_leave_units(
    start: date,
    end: date,
    calendar: Optional[WorkCalendar],
    index: Optional[RecurringIndex] = None,
) -> float:
    """Leave days consumed by the inclusive range ``start``..``end``."""

    if start > end:
        return 0.0
    span = end.toordinal() - start.toordinal() + 1
    if span > MAX_LEAVE_RANGE_DAYS:
        raise ValidationError(f"Leave range covers {span} days; at most {MAX_LEAVE_RANGE_DAYS} are allowed")
    if index is None and calendar is not None:
        index = build_recurring_index(calendar)
    total = 0.0
    for ordinal in range(start.toordinal(), end.toordinal() + 1):
        total += leave_units(resolve_day_type(date.fromordinal(ordinal), calendar, index))
    return round_to_half(total)


def format_leave_units(units: float) -> str:
    rounded = round_to_half(units)
    if rounded.is_integer():
        return str(int(rounded))
    return f"{rounded:.1f}"
