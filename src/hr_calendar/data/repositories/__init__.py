"""Supabase repositories for first-class domain objects."""

from __future__ import annotations

from .calendars import SupabaseCalendarStore

__all__ = ["SupabaseCalendarStore"]
