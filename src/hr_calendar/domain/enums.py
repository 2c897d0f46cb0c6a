from __future__ import annotations

from enum import Enum

from .exceptions import ValidationError


class DayType(str, Enum):
    WORKING = "working"
    WEEKEND = "weekend"
    PUBLIC_HOLIDAY = "public_holiday"
    COMPANY_HOLIDAY = "company_holiday"
    SPECIAL_WORKING = "special_working"
    HALF_DAY = "half_day"

    @classmethod
    def parse(cls, value: object) -> "DayType":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown day type: {value!r}") from exc

    @property
    def is_holiday(self) -> bool:
        return self in (DayType.PUBLIC_HOLIDAY, DayType.COMPANY_HOLIDAY)


class HolidayType(str, Enum):
    PUBLIC = "public"
    COMPANY = "company"


class EventType(str, Enum):
    MEETING = "meeting"
    DEADLINE = "deadline"
    BIRTHDAY = "birthday"
    ANNIVERSARY = "anniversary"
    TRAINING = "training"
    OTHER = "other"


class CalendarStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"
