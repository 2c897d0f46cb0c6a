"""Canonical date handling for calendar keys and recurring matches."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Iterator, NamedTuple

from .exceptions import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# Any leap year works; used to check that a month-day exists at all.
_LEAP_YEAR = 2000


def parse_iso_date(value: object) -> date:
    """Parse a strict ``yyyy-MM-dd`` value into a :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValidationError(f"Expected a yyyy-MM-dd date, got {value!r}")
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError(f"Invalid calendar date: {value!r}") from exc


def iso_key(day: date) -> str:
    return day.isoformat()


def weekday_index(day: date) -> int:
    """Weekday number with 0=Sunday .. 6=Saturday."""

    return (day.weekday() + 1) % 7


def days_of_year(year: int) -> Iterator[date]:
    current = date(year, 1, 1).toordinal()
    last = date(year, 12, 31).toordinal()
    while current <= last:
        yield date.fromordinal(current)
        current += 1


class MonthDay(NamedTuple):
    month: int
    day: int

    @classmethod
    def of(cls, day: date) -> "MonthDay":
        return cls(day.month, day.day)

    @classmethod
    def parse(cls, value: str) -> "MonthDay":
        try:
            month_str, day_str = value.split("-")
            month, day = int(month_str), int(day_str)
        except ValueError as exc:
            raise ValidationError(f"Expected an MM-DD month-day, got {value!r}") from exc
        return cls.checked(month, day)

    @classmethod
    def checked(cls, month: int, day: int) -> "MonthDay":
        try:
            date(_LEAP_YEAR, month, day)
        except ValueError as exc:
            raise ValidationError(f"No such month-day: {month}-{day}") from exc
        return cls(month, day)

    def in_year(self, year: int) -> date | None:
        try:
            return date(year, self.month, self.day)
        except ValueError:
            return None

    def __str__(self) -> str:
        return f"{self.month:02d}-{self.day:02d}"
