"""Domain types for the work calendar."""

from __future__ import annotations

from .dates import MonthDay, days_of_year, iso_key, parse_iso_date, weekday_index
from .enums import CalendarStatus, DayType, EventType, HolidayType
from .exceptions import (
    CalendarError,
    ConsistencyWarning,
    DayNotFoundError,
    PartialMoveError,
    PersistenceError,
    ValidationError,
)
from .models import (
    CalendarDay,
    CalendarEvent,
    DayPatch,
    WorkCalendar,
    WorkingTimeRules,
    day_field_path,
    utc_now,
)

__all__ = [
    "CalendarDay",
    "CalendarError",
    "CalendarEvent",
    "CalendarStatus",
    "ConsistencyWarning",
    "DayNotFoundError",
    "DayPatch",
    "DayType",
    "EventType",
    "HolidayType",
    "MonthDay",
    "PartialMoveError",
    "PersistenceError",
    "ValidationError",
    "WorkCalendar",
    "WorkingTimeRules",
    "day_field_path",
    "days_of_year",
    "iso_key",
    "parse_iso_date",
    "utc_now",
    "weekday_index",
]
