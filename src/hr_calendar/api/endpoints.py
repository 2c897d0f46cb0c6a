from __future__ import annotations

from typing import Any, Dict, Optional

from ..domain import iso_key, parse_iso_date
from ..engine import format_leave_units
from .registry import register_api
from .serializers import parse_day_patch, serialize_day, serialize_stats
from .state import api_state


@register_api(
    "calendar_stats",
    description="Return yearly, half-year, quarterly and monthly day statistics for a year.",
    category="calendar",
    tags=("read", "stats"),
)
def calendar_stats(year: int) -> Dict[str, Any]:
    return {"year": year, "stats": serialize_stats(api_state.calendar.stats(year))}


@register_api(
    "calendar_day_type",
    description="Resolve the day type of a single date.",
    category="calendar",
    tags=("read",),
)
def calendar_day_type(day: str) -> Dict[str, Any]:
    target = parse_iso_date(day)
    return {"date": iso_key(target), "dayType": api_state.calendar.day_type(target).value}


@register_api(
    "calendar_day",
    description="Return the merged day entry (explicit, recurring holiday or recurring events) for a date.",
    category="calendar",
    tags=("read",),
)
def calendar_day(day: str) -> Dict[str, Any]:
    target = parse_iso_date(day)
    service = api_state.calendar
    return {
        "date": iso_key(target),
        "dayType": service.day_type(target).value,
        "day": serialize_day(service.day_data(target)),
    }


@register_api(
    "calendar_leave_units",
    description="Count leave days consumed by an inclusive date range.",
    category="calendar",
    tags=("read", "leave"),
)
def calendar_leave_units(start: str, end: str) -> Dict[str, Any]:
    units = api_state.calendar.leave_units(start, end)
    return {"start": start, "end": end, "units": units, "formatted": format_leave_units(units)}


@register_api(
    "calendar_save_day",
    description="Create or replace the configuration of a date.",
    category="calendar",
    tags=("write",),
)
async def calendar_save_day(day: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    saved = await api_state.calendar.save_day(parse_iso_date(day), parse_day_patch(data))
    return {"day": serialize_day(saved)}


@register_api(
    "calendar_delete_day",
    description="Remove the configuration of a date.",
    category="calendar",
    tags=("write",),
)
async def calendar_delete_day(day: str) -> Dict[str, Any]:
    deleted = await api_state.calendar.delete_day(parse_iso_date(day))
    return {"deleted": serialize_day(deleted)}


@register_api(
    "calendar_move_day",
    description="Move a configured date to another date, replacing its data.",
    category="calendar",
    tags=("write",),
)
async def calendar_move_day(from_day: str, to_day: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    moved = await api_state.calendar.move_day(parse_iso_date(from_day), parse_iso_date(to_day), parse_day_patch(data))
    return {"from": from_day, "day": serialize_day(moved)}
