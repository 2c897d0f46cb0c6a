from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..domain import CalendarDay, CalendarEvent, MonthDay, WorkCalendar


@dataclass(frozen=True)
class RecurringIndex:
    """Month-day lookups derived from ``WorkCalendar.days``.

    Rebuild it whenever the day map changes; it is never edited in place.
    """

    holidays: Dict[MonthDay, CalendarDay] = field(default_factory=dict)
    events: Dict[MonthDay, List[CalendarEvent]] = field(default_factory=dict)

    def holiday_for(self, month_day: MonthDay) -> Optional[CalendarDay]:
        return self.holidays.get(month_day)

    def events_for(self, month_day: MonthDay) -> List[CalendarEvent]:
        return self.events.get(month_day, [])


EMPTY_INDEX = RecurringIndex()


def build_recurring_index(calendar: Optional[WorkCalendar]) -> RecurringIndex:
    """Single pass over the stored days.

    When several years mark the same month-day as a recurring holiday, the last
    one iterated wins.
    """

    if calendar is None or not calendar.days:
        return EMPTY_INDEX

    holidays: Dict[MonthDay, CalendarDay] = {}
    events: Dict[MonthDay, List[CalendarEvent]] = {}
    for day in calendar.days.values():
        month_day = MonthDay.of(day.date)
        if day.is_recurring_holiday:
            holidays[month_day] = day
        recurring = day.recurring_events
        if recurring:
            events.setdefault(month_day, []).extend(recurring)
    return RecurringIndex(holidays=holidays, events=events)
