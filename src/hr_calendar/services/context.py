from __future__ import annotations

from dataclasses import dataclass, field

from ..config import AppSettings, get_settings
from ..data import CalendarStore, JsonCalendarStore, SupabaseCalendarStore, SupabaseGateway


def build_store(settings: AppSettings) -> CalendarStore:
    storage = settings.storage
    if storage.backend == "supabase":
        return SupabaseCalendarStore(
            gateway=SupabaseGateway(settings.supabase),
            table_name=storage.calendars_table,
            set_field_rpc=storage.set_field_rpc,
            delete_field_rpc=storage.delete_field_rpc,
        )
    return JsonCalendarStore(storage.json_dir)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root for services to share settings and the durable store."""

    settings: AppSettings = field(default_factory=get_settings)
    store: CalendarStore = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.store is None:
            self.store = build_store(self.settings)
