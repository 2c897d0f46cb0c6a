from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, List, Optional, Tuple

import pytest

from hr_calendar.config import AppSettings, ServerSettings, StorageSettings, SupabaseSettings
from hr_calendar.data.store import delete_field, set_field
from hr_calendar.domain import WorkCalendar


class StoreFailure(RuntimeError):
    pass


class FakeCalendarStore:
    """In-memory CalendarStore; ``fail_on`` holds (operation, field_path) pairs that raise."""

    def __init__(self, documents: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        self.documents: Dict[str, Dict[str, Any]] = deepcopy(documents or {})
        self.fail_on: set[Tuple[str, str]] = set()
        self.calls: List[Tuple[str, str]] = []

    def _check(self, operation: str, field_path: str) -> None:
        self.calls.append((operation, field_path))
        if (operation, field_path) in self.fail_on:
            raise StoreFailure(f"{operation} {field_path} rejected")

    async def read_calendar(self, calendar_id: str) -> Optional[Dict[str, Any]]:
        document = self.documents.get(calendar_id)
        return deepcopy(document) if document is not None else None

    async def create_calendar(self, calendar_id: str, record: Dict[str, Any]) -> None:
        self.documents[calendar_id] = deepcopy(record)

    async def upsert_field(self, calendar_id: str, field_path: str, value: Any) -> None:
        self._check("upsert", field_path)
        set_field(self.documents.setdefault(calendar_id, {}), field_path, deepcopy(value))

    async def delete_field(self, calendar_id: str, field_path: str) -> None:
        self._check("delete", field_path)
        delete_field(self.documents.setdefault(calendar_id, {}), field_path)


def calendar_record(days: Optional[Dict[str, Dict[str, Any]]] = None, **overrides: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "id": "default",
        "weekendDays": [0, 6],
        "workingTimeRules": {
            "standardWorkingHoursPerDay": 8,
            "workingHoursPerWeek": 40,
            "halfDayHours": 4,
            "breakTimeMinutes": 60,
        },
        "days": days or {},
    }
    record.update(overrides)
    return record


def make_calendar(days: Optional[Dict[str, Dict[str, Any]]] = None, **overrides: Any) -> WorkCalendar:
    return WorkCalendar.from_record(calendar_record(days, **overrides))


@pytest.fixture
def fake_store() -> FakeCalendarStore:
    return FakeCalendarStore()


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        supabase=SupabaseSettings(url=None, key=None),
        storage=StorageSettings(
            backend="json",
            calendar_id="default",
            calendars_table="work_calendars",
            set_field_rpc="set_calendar_field",
            delete_field_rpc="delete_calendar_field",
            json_dir=tmp_path / "calendars",
        ),
        server=ServerSettings(host="127.0.0.1", port=8000),
    )
