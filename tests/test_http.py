from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import FakeCalendarStore
from hr_calendar.api import api_state
from hr_calendar.services import ServiceContext
from hr_calendar.services.http import app


@pytest.fixture
def store() -> FakeCalendarStore:
    return FakeCalendarStore()


@pytest.fixture
def client(settings, store):
    api_state.configure(ServiceContext(settings=settings, store=store))
    with TestClient(app) as test_client:
        yield test_client


def _call(client, name, **arguments):
    return client.post(f"/api/functions/{name}", json={"arguments": arguments})


def test_lists_registered_functions(client):
    response = client.get("/api/functions")
    assert response.status_code == 200
    names = {item["name"] for item in response.json()["functions"]}
    assert {"calendar_stats", "calendar_save_day", "calendar_move_day"} <= names


def test_stats_for_bootstrapped_calendar(client, store):
    response = _call(client, "calendar_stats", year=2025)

    assert response.status_code == 200
    stats = response.json()["result"]["stats"]
    assert stats["totalDays"] == 365
    assert stats["workingDays"] == 261
    assert len(stats["monthly"]) == 12
    assert "default" in store.documents


def test_save_then_resolve_day(client):
    response = _call(client, "calendar_save_day", day="2025-03-05", data={"dayType": "half_day", "workingHours": 0})
    assert response.status_code == 200
    assert response.json()["result"]["day"] == {"date": "2025-03-05", "dayType": "half_day", "workingHours": 0}

    response = _call(client, "calendar_day", day="2025-03-05")
    assert response.json()["result"]["dayType"] == "half_day"


def test_validation_errors_map_to_400(client):
    assert _call(client, "calendar_day_type", day="05/03/2025").status_code == 400
    assert _call(client, "calendar_save_day", day="2025-03-05", data={"workingHours": -2}).status_code == 400
    assert _call(client, "calendar_stats").status_code == 400
    assert _call(client, "calendar_leave_units", start="0001-01-01", end="9999-12-31").status_code == 400


def test_missing_day_and_function_map_to_404(client):
    assert _call(client, "calendar_delete_day", day="2025-03-05").status_code == 404
    assert _call(client, "calendar_unknown").status_code == 404


def test_persistence_failures_map_to_502(client, store):
    store.fail_on.add(("upsert", "days.2025-03-05"))
    response = _call(client, "calendar_save_day", day="2025-03-05", data={"dayType": "company_holiday"})
    assert response.status_code == 502
    assert response.json()["detail"]["partial"] is False
    assert _call(client, "calendar_day", day="2025-03-05").json()["result"]["day"] is None


def test_partial_move_is_flagged(client, store):
    assert _call(client, "calendar_save_day", day="2025-03-05", data={"dayType": "company_holiday"}).status_code == 200
    store.fail_on.add(("upsert", "days.2025-03-06"))

    response = _call(client, "calendar_move_day", from_day="2025-03-05", to_day="2025-03-06", data={})

    assert response.status_code == 502
    assert response.json()["detail"]["partial"] is True
    result = _call(client, "calendar_day", day="2025-03-05").json()["result"]
    assert result["dayType"] == "company_holiday"
