from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from ..domain import CalendarDay, DayPatch, ValidationError
from ..engine import CalendarStats
from .models import DayPatchPayload


def serialize_day(day: Optional[CalendarDay]) -> Optional[Dict[str, Any]]:
    return day.to_record() if day is not None else None


def serialize_stats(stats: Optional[CalendarStats]) -> Optional[Dict[str, Any]]:
    return stats.to_record() if stats is not None else None


def parse_day_patch(data: Optional[Mapping[str, Any]]) -> DayPatch:
    try:
        return DayPatchPayload.model_validate(dict(data or {})).to_patch()
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc
