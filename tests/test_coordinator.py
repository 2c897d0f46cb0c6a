from __future__ import annotations

import asyncio
from datetime import date

import pytest

from conftest import FakeCalendarStore, StoreFailure, calendar_record, make_calendar
from hr_calendar.domain import (
    CalendarDay,
    DayNotFoundError,
    DayPatch,
    DayType,
    HolidayType,
    MonthDay,
    PartialMoveError,
    PersistenceError,
    ValidationError,
)
from hr_calendar.engine import compute_stats
from hr_calendar.services import DayMutationCoordinator, apply_optimistic

A = date(2025, 4, 1)
B = date(2025, 4, 3)
C = date(2025, 4, 7)


def _build(days=None):
    record = calendar_record(days)
    store = FakeCalendarStore({"default": record})
    coordinator = DayMutationCoordinator(make_calendar(days), store, "default")
    return coordinator, store


def _entry(day: date, day_type: str, **extra):
    return {"date": day.isoformat(), "dayType": day_type, **extra}


@pytest.mark.asyncio
async def test_save_writes_memory_and_store():
    coordinator, store = _build()

    saved = await coordinator.save(A, {"dayType": "company_holiday", "holidayName": "Founders day"})

    assert coordinator.calendar.days[A] == saved
    assert saved.day_type is DayType.COMPANY_HOLIDAY
    assert store.documents["default"]["days"]["2025-04-01"] == {
        "date": "2025-04-01",
        "dayType": "company_holiday",
        "holidayName": "Founders day",
    }


@pytest.mark.asyncio
async def test_save_defaults_to_working_and_accepts_iso_strings():
    coordinator, _ = _build()
    saved = await coordinator.save("2025-04-01", DayPatch(working_hours=0))
    assert saved.day_type is DayType.WORKING
    assert saved.working_hours == 0


@pytest.mark.asyncio
async def test_failed_save_of_new_day_removes_it():
    coordinator, store = _build()
    store.fail_on.add(("upsert", "days.2025-04-01"))
    before = dict(coordinator.calendar.days)

    with pytest.raises(PersistenceError) as excinfo:
        await coordinator.save(A, {"dayType": "half_day"})

    assert isinstance(excinfo.value.__cause__, StoreFailure)
    assert A not in coordinator.calendar.days
    assert coordinator.calendar.days == before


@pytest.mark.asyncio
async def test_failed_save_over_existing_day_restores_it():
    days = {
        "2025-04-01": _entry(A, "public_holiday", holidayName="Old"),
        "2025-04-03": _entry(B, "half_day"),
    }
    coordinator, store = _build(days)
    store.fail_on.add(("upsert", "days.2025-04-01"))
    before = list(coordinator.calendar.days.items())

    with pytest.raises(PersistenceError):
        await coordinator.save(A, {"dayType": "working"})

    assert list(coordinator.calendar.days.items()) == before


@pytest.mark.asyncio
async def test_invalid_patch_is_rejected_before_any_mutation():
    coordinator, store = _build()
    with pytest.raises(ValidationError):
        await coordinator.save(A, {"dayType": "holiday"})
    with pytest.raises(ValidationError):
        await coordinator.save("2025-4-1", {})
    assert coordinator.calendar.days == {}
    assert store.calls == []


@pytest.mark.asyncio
async def test_plain_string_holiday_type_is_coerced_on_save():
    coordinator, store = _build()

    saved = await coordinator.save(A, DayPatch(day_type=DayType.PUBLIC_HOLIDAY, holiday_type="public"))

    assert saved.holiday_type is HolidayType.PUBLIC
    assert store.documents["default"]["days"]["2025-04-01"]["holidayType"] == "public"


@pytest.mark.asyncio
async def test_unknown_holiday_type_never_reaches_the_store():
    coordinator, store = _build()

    with pytest.raises(ValidationError):
        await coordinator.save(A, DayPatch(holiday_type="regional"))

    assert coordinator.calendar.days == {}
    assert store.calls == []


@pytest.mark.asyncio
async def test_serialization_error_is_not_reported_as_persistence_failure(monkeypatch):
    coordinator, store = _build()

    def broken(self):
        raise AttributeError("'str' object has no attribute 'value'")

    monkeypatch.setattr(CalendarDay, "to_record", broken)

    with pytest.raises(AttributeError) as excinfo:
        await coordinator.save(A, {"dayType": "company_holiday"})

    assert not isinstance(excinfo.value, PersistenceError)
    assert coordinator.calendar.days == {}
    assert coordinator.revision == 0
    assert store.calls == []


@pytest.mark.asyncio
async def test_successful_edits_stamp_updated_at():
    coordinator, store = _build({"2025-04-03": _entry(B, "half_day")})
    coordinator.calendar.updated_at = "2000-01-01T00:00:00Z"

    await coordinator.save(A, {"dayType": "company_holiday"})
    assert coordinator.calendar.updated_at != "2000-01-01T00:00:00Z"

    coordinator.calendar.updated_at = "2000-01-01T00:00:00Z"
    await coordinator.move(B, C, {"dayType": "half_day"})
    assert coordinator.calendar.updated_at != "2000-01-01T00:00:00Z"

    coordinator.calendar.updated_at = "2000-01-01T00:00:00Z"
    await coordinator.delete(C)
    assert coordinator.calendar.updated_at != "2000-01-01T00:00:00Z"


@pytest.mark.asyncio
async def test_failed_edit_leaves_updated_at_alone():
    coordinator, store = _build()
    coordinator.calendar.updated_at = "2000-01-01T00:00:00Z"
    store.fail_on.add(("upsert", "days.2025-04-01"))

    with pytest.raises(PersistenceError):
        await coordinator.save(A, {"dayType": "company_holiday"})

    assert coordinator.calendar.updated_at == "2000-01-01T00:00:00Z"


@pytest.mark.asyncio
async def test_delete_removes_day():
    coordinator, store = _build({"2025-04-01": _entry(A, "company_holiday")})

    removed = await coordinator.delete(A)

    assert removed.day_type is DayType.COMPANY_HOLIDAY
    assert A not in coordinator.calendar.days
    assert "2025-04-01" not in store.documents["default"]["days"]


@pytest.mark.asyncio
async def test_failed_delete_restores_entry_in_place():
    days = {
        "2025-04-01": _entry(A, "public_holiday"),
        "2025-04-03": _entry(B, "half_day"),
        "2025-04-07": _entry(C, "company_holiday"),
    }
    coordinator, store = _build(days)
    store.fail_on.add(("delete", "days.2025-04-03"))
    before = list(coordinator.calendar.days.items())

    with pytest.raises(PersistenceError):
        await coordinator.delete(B)

    assert list(coordinator.calendar.days.items()) == before


@pytest.mark.asyncio
async def test_delete_of_absent_day_is_rejected():
    coordinator, store = _build()
    with pytest.raises(DayNotFoundError):
        await coordinator.delete(A)
    assert store.calls == []


@pytest.mark.asyncio
async def test_move_relocates_day():
    coordinator, store = _build({"2025-04-01": _entry(A, "company_holiday", holidayName="Retreat")})

    moved = await coordinator.move(A, B, {"dayType": "company_holiday", "holidayName": "Retreat"})

    assert A not in coordinator.calendar.days
    assert coordinator.calendar.days[B].date == B
    assert moved.holiday_name == "Retreat"
    assert store.documents["default"]["days"] == {
        "2025-04-03": {"date": "2025-04-03", "dayType": "company_holiday", "holidayName": "Retreat"}
    }
    assert store.calls == [("delete", "days.2025-04-01"), ("upsert", "days.2025-04-03")]


@pytest.mark.asyncio
async def test_failed_move_restores_both_days():
    days = {
        "2025-04-01": _entry(A, "company_holiday"),
        "2025-04-03": _entry(B, "half_day", workingHours=5),
    }
    coordinator, store = _build(days)
    store.fail_on.add(("delete", "days.2025-04-01"))
    before = list(coordinator.calendar.days.items())

    with pytest.raises(PersistenceError) as excinfo:
        await coordinator.move(A, B, {"dayType": "public_holiday"})

    assert not isinstance(excinfo.value, PartialMoveError)
    assert list(coordinator.calendar.days.items()) == before
    assert store.documents["default"]["days"] == days


@pytest.mark.asyncio
async def test_move_failing_after_source_delete_reports_partial_failure():
    coordinator, store = _build({"2025-04-01": _entry(A, "company_holiday")})
    store.fail_on.add(("upsert", "days.2025-04-03"))
    before = list(coordinator.calendar.days.items())

    with pytest.raises(PartialMoveError) as excinfo:
        await coordinator.move(A, B, {"dayType": "company_holiday"})

    assert (excinfo.value.from_date, excinfo.value.to_date) == (A, B)
    assert isinstance(excinfo.value, PersistenceError)
    assert list(coordinator.calendar.days.items()) == before
    # The durable store is left in neither state.
    assert store.documents["default"]["days"] == {}


@pytest.mark.asyncio
async def test_move_of_absent_day_is_rejected():
    coordinator, store = _build()
    with pytest.raises(DayNotFoundError):
        await coordinator.move(A, B, {})
    assert store.calls == []


@pytest.mark.asyncio
async def test_recurring_index_follows_mutations():
    coordinator, store = _build()
    assert coordinator.index.holiday_for(MonthDay(4, 1)) is None

    await coordinator.save(A, {"dayType": "public_holiday", "isRecurring": True})
    assert coordinator.index.holiday_for(MonthDay(4, 1)).date == A

    store.fail_on.add(("delete", "days.2025-04-01"))
    with pytest.raises(PersistenceError):
        await coordinator.delete(A)
    assert coordinator.index.holiday_for(MonthDay(4, 1)).date == A

    store.fail_on.clear()
    await coordinator.delete(A)
    assert coordinator.index.holiday_for(MonthDay(4, 1)) is None


class _GatedStore(FakeCalendarStore):
    def __init__(self, documents):
        super().__init__(documents)
        self.gate = asyncio.Event()

    async def upsert_field(self, calendar_id, field_path, value):
        await self.gate.wait()
        await super().upsert_field(calendar_id, field_path, value)


@pytest.mark.asyncio
async def test_optimistic_write_is_visible_before_confirmation():
    store = _GatedStore({"default": calendar_record()})
    coordinator = DayMutationCoordinator(make_calendar(), store, "default")

    task = asyncio.create_task(coordinator.save(A, {"dayType": "company_holiday"}))
    await asyncio.sleep(0)

    assert coordinator.calendar.days[A].day_type is DayType.COMPANY_HOLIDAY
    assert compute_stats(coordinator.calendar, 2025).company_holidays == 1
    assert "days" not in store.documents["default"] or not store.documents["default"]["days"]

    store.gate.set()
    await task
    assert "2025-04-01" in store.documents["default"]["days"]


@pytest.mark.asyncio
async def test_apply_optimistic_compensates_once_and_wraps_error():
    log = []

    async def commit():
        raise OSError("offline")

    with pytest.raises(PersistenceError) as excinfo:
        await apply_optimistic(lambda: log.append("forward"), lambda: log.append("compensate"), commit, description="Test")

    assert log == ["forward", "compensate"]
    assert isinstance(excinfo.value.__cause__, OSError)


@pytest.mark.asyncio
async def test_apply_optimistic_keeps_forward_on_success():
    log = []

    async def commit():
        log.append("commit")

    await apply_optimistic(lambda: log.append("forward"), lambda: log.append("compensate"), commit, description="Test")
    assert log == ["forward", "commit"]
