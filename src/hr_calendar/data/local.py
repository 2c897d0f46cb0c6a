from __future__ import annotations

import asyncio
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import orjson

from ..core import ensure_data_dir
from ..domain import utc_now
from .store import delete_field, set_field

logger = logging.getLogger(__name__)


class CalendarDocumentMissingError(LookupError):
    """Raised when a field write targets a calendar that was never created."""


class JsonCalendarStore:
    """File-backed calendar store: one orjson document per calendar id."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        self._directory = ensure_data_dir(directory)
        self._lock = asyncio.Lock()

    def path_for(self, calendar_id: str) -> Path:
        if not calendar_id or "/" in calendar_id or calendar_id.startswith("."):
            raise ValueError(f"Invalid calendar id: {calendar_id!r}")
        return self._directory / f"{calendar_id}.json"

    def _load(self, calendar_id: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(calendar_id)
        if not path.exists():
            return None
        raw = path.read_bytes()
        if not raw:
            return None
        return orjson.loads(raw)

    def _persist(self, calendar_id: str, document: Dict[str, Any]) -> None:
        payload = orjson.dumps(document, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS)
        path = self.path_for(calendar_id)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(payload + b"\n")
        tmp_path.replace(path)

    def _mutate(self, calendar_id: str, callback: Callable[[Dict[str, Any]], None]) -> None:
        document = self._load(calendar_id)
        if document is None:
            raise CalendarDocumentMissingError(f"Calendar {calendar_id!r} does not exist.")
        callback(document)
        document["updatedAt"] = utc_now()
        self._persist(calendar_id, document)

    async def read_calendar(self, calendar_id: str) -> Optional[Dict[str, Any]]:
        async with self._lock:
            return await asyncio.to_thread(self._load, calendar_id)

    async def create_calendar(self, calendar_id: str, record: Dict[str, Any]) -> None:
        document = deepcopy(record)
        document["id"] = calendar_id
        async with self._lock:
            await asyncio.to_thread(self._persist, calendar_id, document)
        logger.info("Created calendar %s at %s", calendar_id, self.path_for(calendar_id))

    async def upsert_field(self, calendar_id: str, field_path: str, value: Any) -> None:
        value = deepcopy(value)
        async with self._lock:
            await asyncio.to_thread(self._mutate, calendar_id, lambda doc: set_field(doc, field_path, value))

    async def delete_field(self, calendar_id: str, field_path: str) -> None:
        async with self._lock:
            await asyncio.to_thread(self._mutate, calendar_id, lambda doc: delete_field(doc, field_path))
