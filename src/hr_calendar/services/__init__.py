"""Application services orchestrating the calendar snapshot and its store."""

from __future__ import annotations

from .calendar import CalendarNotLoadedError, CalendarService
from .context import ServiceContext, build_store
from .coordinator import DayMutationCoordinator, apply_optimistic

__all__ = [
    "CalendarNotLoadedError",
    "CalendarService",
    "DayMutationCoordinator",
    "ServiceContext",
    "apply_optimistic",
    "build_store",
]
