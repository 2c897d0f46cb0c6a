from __future__ import annotations

import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from ..data import CalendarStore
from ..domain import (
    CalendarDay,
    DayNotFoundError,
    DayPatch,
    PartialMoveError,
    PersistenceError,
    WorkCalendar,
    day_field_path,
    parse_iso_date,
    utc_now,
)
from ..engine import RecurringIndex, build_recurring_index

logger = logging.getLogger(__name__)

DateLike = Union[date, str]
PatchLike = Union[DayPatch, Mapping[str, Any], None]
Forward = Callable[[], None]
Compensate = Callable[[], None]
Commit = Callable[[], Awaitable[None]]


async def apply_optimistic(forward: Forward, compensate: Compensate, commit: Commit, *, description: str) -> None:
    """Apply ``forward`` locally, then await ``commit``.

    If the commit fails, ``compensate`` undoes ``forward`` and exactly one
    :class:`PersistenceError` propagates. No retries.
    """

    forward()
    try:
        await commit()
    except PersistenceError:
        compensate()
        logger.warning("%s failed; local changes rolled back", description)
        raise
    except Exception as exc:  # noqa: BLE001
        compensate()
        logger.warning("%s failed; local changes rolled back: %s", description, exc)
        raise PersistenceError(f"{description} failed") from exc


def _as_date(value: DateLike) -> date:
    return value if isinstance(value, date) else parse_iso_date(value)


def _as_patch(value: PatchLike) -> DayPatch:
    if value is None:
        return DayPatch()
    if isinstance(value, DayPatch):
        return value
    return DayPatch.from_record(value)


class DayMutationCoordinator:
    """Owns the in-memory calendar and reconciles day edits with the durable store.

    Optimistic writes are visible to readers before the store acknowledges
    them. Concurrent edits of the same date are not serialized.
    """

    def __init__(self, calendar: WorkCalendar, store: CalendarStore, calendar_id: str) -> None:
        self._calendar = calendar
        self._store = store
        self._calendar_id = calendar_id
        self._revision = 0
        self._index: Optional[RecurringIndex] = None
        self._index_revision = -1

    @property
    def calendar(self) -> WorkCalendar:
        return self._calendar

    @property
    def calendar_id(self) -> str:
        return self._calendar_id

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def index(self) -> RecurringIndex:
        if self._index is None or self._index_revision != self._revision:
            self._index = build_recurring_index(self._calendar)
            self._index_revision = self._revision
        return self._index

    def snapshot(self) -> WorkCalendar:
        return self._calendar.snapshot()

    def _touch(self) -> None:
        self._calendar.updated_at = utc_now()

    def _changes(self, changes: Dict[date, Optional[CalendarDay]]) -> Tuple[Forward, Compensate]:
        days = self._calendar.days
        prior = {key: days.get(key) for key in changes}
        order: List[date] = list(days)

        def forward() -> None:
            for key, value in changes.items():
                if value is None:
                    days.pop(key, None)
                else:
                    days[key] = value
            self._revision += 1

        def compensate() -> None:
            for key, value in prior.items():
                if value is None:
                    days.pop(key, None)
                else:
                    days[key] = value
            # Put restored keys back where they were; the recurring index is order-sensitive.
            position = {key: number for number, key in enumerate(order)}
            restored = sorted(days.items(), key=lambda item: position.get(item[0], len(order)))
            days.clear()
            days.update(restored)
            self._revision += 1

        return forward, compensate

    async def save(self, value: DateLike, patch: PatchLike = None) -> CalendarDay:
        """Create or replace the entry for a date."""

        day = _as_date(value)
        entry = _as_patch(patch).build(day)
        record = entry.to_record()
        forward, compensate = self._changes({day: entry})

        async def commit() -> None:
            await self._store.upsert_field(self._calendar_id, day_field_path(day), record)

        await apply_optimistic(forward, compensate, commit, description=f"Saving {day.isoformat()}")
        self._touch()
        logger.info("Saved %s as %s", day.isoformat(), entry.day_type.value)
        return entry

    async def delete(self, value: DateLike) -> CalendarDay:
        """Remove the entry for a date and return what was removed."""

        day = _as_date(value)
        existing = self._calendar.days.get(day)
        if existing is None:
            raise DayNotFoundError(f"No calendar entry for {day.isoformat()}")
        forward, compensate = self._changes({day: None})

        async def commit() -> None:
            await self._store.delete_field(self._calendar_id, day_field_path(day))

        await apply_optimistic(forward, compensate, commit, description=f"Deleting {day.isoformat()}")
        self._touch()
        logger.info("Deleted %s", day.isoformat())
        return existing

    async def move(self, from_value: DateLike, to_value: DateLike, patch: PatchLike = None) -> CalendarDay:
        """Move the entry at ``from_value`` to ``to_value`` with the given data.

        The two durable writes are not atomic. If the source was deleted and
        the target write failed, :class:`PartialMoveError` is raised.
        """

        from_day = _as_date(from_value)
        to_day = _as_date(to_value)
        if from_day not in self._calendar.days:
            raise DayNotFoundError(f"No calendar entry for {from_day.isoformat()}")
        entry = _as_patch(patch).build(to_day)
        record = entry.to_record()
        forward, compensate = self._changes({from_day: None, to_day: entry})

        async def commit() -> None:
            await self._store.delete_field(self._calendar_id, day_field_path(from_day))
            try:
                await self._store.upsert_field(self._calendar_id, day_field_path(to_day), record)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "Move %s -> %s: source removed remotely but target write failed",
                    from_day.isoformat(),
                    to_day.isoformat(),
                )
                raise PartialMoveError(from_day, to_day) from exc

        description = f"Moving {from_day.isoformat()} -> {to_day.isoformat()}"
        await apply_optimistic(forward, compensate, commit, description=description)
        self._touch()
        logger.info("Moved %s to %s", from_day.isoformat(), to_day.isoformat())
        return entry
