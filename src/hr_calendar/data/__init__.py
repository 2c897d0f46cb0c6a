"""Data access layer."""

from __future__ import annotations

from .local import CalendarDocumentMissingError, JsonCalendarStore
from .repositories import SupabaseCalendarStore
from .store import CalendarStore, delete_field, set_field, split_field_path
from .supabase import SupabaseGateway, SupabaseNotInitializedError

__all__ = [
    "CalendarDocumentMissingError",
    "CalendarStore",
    "JsonCalendarStore",
    "SupabaseCalendarStore",
    "SupabaseGateway",
    "SupabaseNotInitializedError",
    "delete_field",
    "set_field",
    "split_field_path",
]
