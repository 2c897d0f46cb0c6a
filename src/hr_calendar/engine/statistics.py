"""Yearly, half-year, quarterly and monthly day statistics for payroll reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import MAXYEAR, MINYEAR
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..domain import CalendarDay, DayType, ValidationError, WorkCalendar, WorkingTimeRules, days_of_year
from .recurring import build_recurring_index
from .resolver import resolve_day_type

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
QUARTER_NAMES = ("Q1", "Q2", "Q3", "Q4")

# Day types that count as worked time in ``working_days``.
_WORKED_TYPES = frozenset({DayType.WORKING, DayType.SPECIAL_WORKING, DayType.HALF_DAY})


@dataclass(frozen=True, slots=True, kw_only=True)
class PeriodStats:
    total_days: int = 0
    working_days: int = 0
    weekend_days: int = 0
    public_holidays: int = 0
    company_holidays: int = 0
    special_working_days: int = 0
    half_days: int = 0
    total_working_hours: float = 0.0

    def _counters(self) -> Dict[str, Any]:
        return {
            "totalDays": self.total_days,
            "workingDays": self.working_days,
            "weekendDays": self.weekend_days,
            "publicHolidays": self.public_holidays,
            "companyHolidays": self.company_holidays,
            "specialWorkingDays": self.special_working_days,
            "halfDays": self.half_days,
            "totalWorkingHours": self.total_working_hours,
        }


@dataclass(frozen=True, slots=True, kw_only=True)
class MonthlyStats(PeriodStats):
    month: int
    month_name: str

    def to_record(self) -> Dict[str, Any]:
        return {"month": self.month, "monthName": self.month_name, **self._counters()}


@dataclass(frozen=True, slots=True, kw_only=True)
class QuarterlyStats(PeriodStats):
    quarter: int
    quarter_name: str

    def to_record(self) -> Dict[str, Any]:
        return {"quarter": self.quarter, "quarterName": self.quarter_name, **self._counters()}


@dataclass(frozen=True, slots=True)
class HalfYearStats:
    working_days: int = 0
    total_working_hours: float = 0.0

    def to_record(self) -> Dict[str, Any]:
        return {"workingDays": self.working_days, "totalWorkingHours": self.total_working_hours}


@dataclass(frozen=True, slots=True, kw_only=True)
class CalendarStats(PeriodStats):
    year: int
    monthly: tuple[MonthlyStats, ...] = ()
    quarterly: tuple[QuarterlyStats, ...] = ()
    first_half: HalfYearStats = field(default_factory=HalfYearStats)
    second_half: HalfYearStats = field(default_factory=HalfYearStats)

    def to_record(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            **self._counters(),
            "monthly": [item.to_record() for item in self.monthly],
            "quarterly": [item.to_record() for item in self.quarterly],
            "firstHalf": self.first_half.to_record(),
            "secondHalf": self.second_half.to_record(),
        }


@dataclass
class _Tally:
    """Mutable accumulator; hours are summed as Decimal so rollups match exactly."""

    total_days: int = 0
    working_days: int = 0
    counts: Dict[DayType, int] = field(default_factory=lambda: {day_type: 0 for day_type in DayType})
    hours: Decimal = Decimal(0)

    def add(self, day_type: DayType, hours: Decimal) -> None:
        self.total_days += 1
        self.counts[day_type] += 1
        if day_type in _WORKED_TYPES:
            self.working_days += 1
        self.hours += hours

    @classmethod
    def combine(cls, tallies: Iterable["_Tally"]) -> "_Tally":
        combined = cls()
        for tally in tallies:
            combined.total_days += tally.total_days
            combined.working_days += tally.working_days
            combined.hours += tally.hours
            for day_type, count in tally.counts.items():
                combined.counts[day_type] += count
        return combined

    def fields(self) -> Dict[str, Any]:
        return {
            "total_days": self.total_days,
            "working_days": self.working_days,
            "weekend_days": self.counts[DayType.WEEKEND],
            "public_holidays": self.counts[DayType.PUBLIC_HOLIDAY],
            "company_holidays": self.counts[DayType.COMPANY_HOLIDAY],
            "special_working_days": self.counts[DayType.SPECIAL_WORKING],
            "half_days": self.counts[DayType.HALF_DAY],
            "total_working_hours": float(self.hours),
        }

    def half_year(self) -> HalfYearStats:
        return HalfYearStats(working_days=self.working_days, total_working_hours=float(self.hours))


def working_hours_for(day_type: DayType, day_data: Optional[CalendarDay], rules: WorkingTimeRules) -> float:
    """Hours contributed by one date; an explicit ``working_hours`` on the stored entry wins."""

    explicit = day_data.working_hours if day_data is not None else None
    if day_type in (DayType.WORKING, DayType.SPECIAL_WORKING):
        return rules.standard_working_hours_per_day if explicit is None else explicit
    if day_type is DayType.HALF_DAY:
        return rules.half_day_hours if explicit is None else explicit
    return 0


def _check_year(year: Any) -> int:
    if isinstance(year, bool) or not isinstance(year, int) or not MINYEAR <= year <= MAXYEAR:
        raise ValidationError(f"Year must be an integer between {MINYEAR} and {MAXYEAR}, got {year!r}")
    return year


def compute_stats(calendar: Optional[WorkCalendar], year: int) -> Optional[CalendarStats]:
    """Walk every date of ``year`` once and roll the classifications up.

    Returns ``None`` when there is no calendar. Quarter and half-year figures
    are always sums of the monthly figures.
    """

    if calendar is None:
        return None
    year = _check_year(year)

    index = build_recurring_index(calendar)
    rules = calendar.working_time_rules
    months: List[_Tally] = [_Tally() for _ in MONTH_NAMES]
    totals = _Tally()

    for day in days_of_year(year):
        day_type = resolve_day_type(day, calendar, index)
        hours = Decimal(str(working_hours_for(day_type, calendar.days.get(day), rules)))
        months[day.month - 1].add(day_type, hours)
        totals.add(day_type, hours)

    monthly = tuple(
        MonthlyStats(month=number, month_name=name, **tally.fields())
        for number, (name, tally) in enumerate(zip(MONTH_NAMES, months), start=1)
    )
    quarterly = tuple(
        QuarterlyStats(
            quarter=number,
            quarter_name=name,
            **_Tally.combine(_quarter_months(months, number)).fields(),
        )
        for number, name in enumerate(QUARTER_NAMES, start=1)
    )

    return CalendarStats(
        year=year,
        monthly=monthly,
        quarterly=quarterly,
        first_half=_Tally.combine(months[:6]).half_year(),
        second_half=_Tally.combine(months[6:]).half_year(),
        **totals.fields(),
    )


def _quarter_months(months: Sequence[_Tally], quarter: int) -> Sequence[_Tally]:
    start = (quarter - 1) * 3
    return months[start : start + 3]
