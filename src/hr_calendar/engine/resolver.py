"""Day-type resolution for a single calendar date."""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Union

from ..domain import CalendarDay, CalendarEvent, DayType, MonthDay, WorkCalendar, parse_iso_date, weekday_index
from ..domain.models import DEFAULT_WEEKEND_DAYS
from .recurring import RecurringIndex, build_recurring_index

DateLike = Union[date, str]


def _as_date(value: DateLike) -> date:
    return value if isinstance(value, date) else parse_iso_date(value)


def resolve_day_type(
    value: DateLike,
    calendar: Optional[WorkCalendar],
    index: Optional[RecurringIndex] = None,
) -> DayType:
    """Classify ``value`` by precedence: exact entry, recurring holiday, weekend, working.

    Without a calendar, Saturday and Sunday are weekends.
    """

    day = _as_date(value)
    if calendar is None:
        return DayType.WEEKEND if weekday_index(day) in DEFAULT_WEEKEND_DAYS else DayType.WORKING

    specific = calendar.days.get(day)
    if specific is not None:
        return specific.day_type

    if index is None:
        index = build_recurring_index(calendar)
    recurring = index.holiday_for(MonthDay.of(day))
    if recurring is not None:
        return recurring.day_type

    if weekday_index(day) in calendar.weekend_days:
        return DayType.WEEKEND
    return DayType.WORKING


def _merge_events(existing: Iterable[CalendarEvent], extra: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    merged: List[CalendarEvent] = []
    seen: set[str] = set()
    for event in (*existing, *extra):
        if event.id in seen:
            continue
        seen.add(event.id)
        merged.append(event)
    return merged


def get_day_data(
    value: DateLike,
    calendar: Optional[WorkCalendar],
    index: Optional[RecurringIndex] = None,
) -> Optional[CalendarDay]:
    """Merged view of a date for display and editing."""

    if calendar is None:
        return None
    day = _as_date(value)
    if index is None:
        index = build_recurring_index(calendar)
    month_day = MonthDay.of(day)
    recurring_events = index.events_for(month_day)

    specific = calendar.days.get(day)
    if specific is not None:
        if not recurring_events:
            return specific
        return specific.with_events(_merge_events(specific.events, recurring_events))

    holiday = index.holiday_for(month_day)
    if holiday is not None:
        events = _merge_events((), recurring_events) if recurring_events else holiday.events
        return holiday.with_date(day).with_events(events)

    if recurring_events:
        return CalendarDay(date=day, day_type=DayType.WORKING, events=tuple(_merge_events((), recurring_events)))

    return None
