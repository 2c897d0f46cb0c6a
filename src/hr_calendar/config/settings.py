from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..core import CALENDARS_DIR

load_dotenv()

STORE_BACKENDS = ("json", "supabase")


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.key)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("SUPABASE_URL")
        if not self.key:
            missing.append("SUPABASE_KEY")
        return missing


@dataclass(frozen=True)
class StorageSettings:
    backend: str
    calendar_id: str
    calendars_table: str
    set_field_rpc: str
    delete_field_rpc: str
    json_dir: Path


@dataclass(frozen=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True)
class AppSettings:
    supabase: SupabaseSettings
    storage: StorageSettings
    server: ServerSettings


def _backend_from_env() -> str:
    backend = os.getenv("HR_CALENDAR_STORE", "json").strip().lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(f"HR_CALENDAR_STORE must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}")
    return backend


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        key=os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY"),
    )

    storage = StorageSettings(
        backend=_backend_from_env(),
        calendar_id=os.getenv("HR_CALENDAR_ID", "default"),
        calendars_table=os.getenv("HR_CALENDAR_TABLE", "work_calendars"),
        set_field_rpc=os.getenv("HR_CALENDAR_SET_FIELD_RPC", "set_calendar_field"),
        delete_field_rpc=os.getenv("HR_CALENDAR_DELETE_FIELD_RPC", "delete_calendar_field"),
        json_dir=Path(os.getenv("HR_CALENDAR_JSON_DIR") or CALENDARS_DIR),
    )

    server = ServerSettings(
        host=os.getenv("HR_CALENDAR_HOST", "127.0.0.1"),
        port=int(os.getenv("HR_CALENDAR_PORT", "8000")),
    )

    return AppSettings(supabase=supabase, storage=storage, server=server)
