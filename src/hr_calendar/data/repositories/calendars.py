from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..store import split_field_path
from ..supabase import SupabaseGateway

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SupabaseCalendarStore:
    """Calendar documents in a ``work_calendars`` table (``id`` text, ``data`` jsonb).

    Field writes go through Postgres functions so a single jsonb path changes
    without rewriting the document; see ``supabase/migrations``.
    """

    gateway: SupabaseGateway
    table_name: str
    set_field_rpc: str
    delete_field_rpc: str

    async def read_calendar(self, calendar_id: str) -> Optional[Dict[str, Any]]:
        table = await self.gateway.table(self.table_name)
        response = await table.select("id, data").eq("id", calendar_id).limit(1).execute()
        rows = response.data or []
        if not rows:
            return None
        record = dict(rows[0].get("data") or {})
        record.setdefault("id", rows[0]["id"])
        return record

    async def create_calendar(self, calendar_id: str, record: Dict[str, Any]) -> None:
        table = await self.gateway.table(self.table_name)
        await table.upsert({"id": calendar_id, "data": record}, on_conflict="id").execute()
        logger.info("Created calendar %s in %s", calendar_id, self.table_name)

    async def upsert_field(self, calendar_id: str, field_path: str, value: Any) -> None:
        await self.gateway.rpc(
            self.set_field_rpc,
            {"p_calendar_id": calendar_id, "p_path": split_field_path(field_path), "p_value": value},
        )

    async def delete_field(self, calendar_id: str, field_path: str) -> None:
        await self.gateway.rpc(
            self.delete_field_rpc,
            {"p_calendar_id": calendar_id, "p_path": split_field_path(field_path)},
        )
