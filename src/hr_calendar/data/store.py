from __future__ import annotations

from typing import Any, Dict, MutableMapping, Optional, Protocol


class CalendarStore(Protocol):
    """Durable system of record for work calendars.

    Field paths are dotted, e.g. ``days.2025-01-01``.
    """

    async def read_calendar(self, calendar_id: str) -> Optional[Dict[str, Any]]:
        ...

    async def create_calendar(self, calendar_id: str, record: Dict[str, Any]) -> None:
        ...

    async def upsert_field(self, calendar_id: str, field_path: str, value: Any) -> None:
        ...

    async def delete_field(self, calendar_id: str, field_path: str) -> None:
        ...


def split_field_path(field_path: str) -> list[str]:
    parts = field_path.split(".")
    if not all(parts):
        raise ValueError(f"Invalid field path: {field_path!r}")
    return parts


def set_field(document: MutableMapping[str, Any], field_path: str, value: Any) -> None:
    *parents, leaf = split_field_path(field_path)
    target = document
    for name in parents:
        child = target.get(name)
        if not isinstance(child, dict):
            child = target[name] = {}
        target = child
    target[leaf] = value


def delete_field(document: MutableMapping[str, Any], field_path: str) -> None:
    *parents, leaf = split_field_path(field_path)
    target: Any = document
    for name in parents:
        target = target.get(name) if isinstance(target, dict) else None
        if target is None:
            return
    if isinstance(target, dict):
        target.pop(leaf, None)
