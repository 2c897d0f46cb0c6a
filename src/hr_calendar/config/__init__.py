"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, ServerSettings, StorageSettings, SupabaseSettings, get_settings

__all__ = ["AppSettings", "ServerSettings", "StorageSettings", "SupabaseSettings", "get_settings"]
