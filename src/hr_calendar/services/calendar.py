from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Union

from ..domain import CalendarDay, DayType, WorkCalendar, parse_iso_date
from ..engine import CalendarStats, compute_stats, count_leave_units, get_day_data, resolve_day_type
from .context import ServiceContext
from .coordinator import DayMutationCoordinator, PatchLike

logger = logging.getLogger(__name__)

DateLike = Union[date, str]


class CalendarNotLoadedError(RuntimeError):
    """Raised when the calendar is used before :meth:`CalendarService.load`."""


@dataclass(slots=True)
class CalendarService:
    context: ServiceContext
    _coordinator: Optional[DayMutationCoordinator] = field(default=None, init=False)

    @property
    def coordinator(self) -> DayMutationCoordinator:
        if self._coordinator is None:
            raise CalendarNotLoadedError("Calendar has not been loaded. Call load() first.")
        return self._coordinator

    @property
    def calendar(self) -> WorkCalendar:
        return self.coordinator.calendar

    @property
    def is_loaded(self) -> bool:
        return self._coordinator is not None

    async def load(self) -> WorkCalendar:
        """Read the calendar once from the store, creating the default one if absent."""

        calendar_id = self.context.settings.storage.calendar_id
        record = await self.context.store.read_calendar(calendar_id)
        if record is None:
            calendar = WorkCalendar.default(calendar_id)
            await self.context.store.create_calendar(calendar_id, calendar.to_record())
            logger.info("Initialized default calendar %s", calendar_id)
        else:
            calendar = WorkCalendar.from_record(record)
            logger.info("Loaded calendar %s with %d configured days", calendar_id, len(calendar.days))
        self._coordinator = DayMutationCoordinator(calendar, self.context.store, calendar_id)
        return calendar

    def stats(self, year: int) -> Optional[CalendarStats]:
        return compute_stats(self.calendar, year)

    def day_type(self, value: DateLike) -> DayType:
        return resolve_day_type(value, self.calendar, self.coordinator.index)

    def day_data(self, value: DateLike) -> Optional[CalendarDay]:
        return get_day_data(value, self.calendar, self.coordinator.index)

    def leave_units(self, start: DateLike, end: DateLike) -> float:
        return count_leave_units(
            parse_iso_date(start),
            parse_iso_date(end),
            self.calendar,
            self.coordinator.index,
        )

    async def save_day(self, value: DateLike, patch: PatchLike = None) -> CalendarDay:
        return await self.coordinator.save(value, patch)

    async def delete_day(self, value: DateLike) -> CalendarDay:
        return await self.coordinator.delete(value)

    async def move_day(self, from_value: DateLike, to_value: DateLike, patch: PatchLike = None) -> CalendarDay:
        return await self.coordinator.move(from_value, to_value, patch)
