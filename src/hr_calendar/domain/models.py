from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional

from .dates import iso_key, parse_iso_date
from .enums import CalendarStatus, DayType, EventType, HolidayType
from .exceptions import ConsistencyWarning, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_WEEKEND_DAYS: FrozenSet[int] = frozenset({0, 6})


def utc_now() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _hours(value: Any, *, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative, got {value!r}")
    return value


def _minutes(value: Any, *, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a whole number, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field_name} must be a whole number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{field_name} must not be negative, got {value!r}")
    return int(value)


def _holiday_type(value: Any) -> Optional[HolidayType]:
    if not value:
        return None
    try:
        return HolidayType(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown holiday type: {value!r}") from exc


def _optional_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


@dataclass(slots=True)
class WorkingTimeRules:
    standard_working_hours_per_day: float = 8
    working_hours_per_week: float = 40
    half_day_hours: float = 4
    break_time_minutes: int = 60
    is_shift_based: bool = False
    overtime_eligible: bool = True

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> "WorkingTimeRules":
        record = record or {}
        if not isinstance(record, Mapping):
            raise ValidationError(f"workingTimeRules must be an object, got {type(record).__name__}")
        defaults = cls()

        def pick(key: str, fallback: Any) -> Any:
            value = record.get(key)
            return fallback if value is None else value

        return cls(
            standard_working_hours_per_day=_hours(
                pick("standardWorkingHoursPerDay", defaults.standard_working_hours_per_day),
                field_name="standardWorkingHoursPerDay",
            ),
            working_hours_per_week=_hours(
                pick("workingHoursPerWeek", defaults.working_hours_per_week),
                field_name="workingHoursPerWeek",
            ),
            half_day_hours=_hours(
                pick("halfDayHours", defaults.half_day_hours),
                field_name="halfDayHours",
            ),
            break_time_minutes=_minutes(
                pick("breakTimeMinutes", defaults.break_time_minutes),
                field_name="breakTimeMinutes",
            ),
            is_shift_based=bool(pick("isShiftBased", defaults.is_shift_based)),
            overtime_eligible=bool(pick("overtimeEligible", defaults.overtime_eligible)),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "standardWorkingHoursPerDay": self.standard_working_hours_per_day,
            "workingHoursPerWeek": self.working_hours_per_week,
            "halfDayHours": self.half_day_hours,
            "breakTimeMinutes": self.break_time_minutes,
            "isShiftBased": self.is_shift_based,
            "overtimeEligible": self.overtime_eligible,
        }


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """Informational overlay on a day; never changes the day type."""

    id: str
    title: str
    type: EventType = EventType.OTHER
    description: Optional[str] = None
    is_recurring: bool = False

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CalendarEvent":
        if not isinstance(record, Mapping):
            raise ValidationError(f"Calendar event must be an object, got {type(record).__name__}")
        if not record.get("id"):
            raise ValidationError("Calendar event is missing an id")
        try:
            event_type = EventType(record.get("type") or EventType.OTHER)
        except ValueError:
            event_type = EventType.OTHER
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or ""),
            type=event_type,
            description=record.get("description"),
            is_recurring=bool(record.get("isRecurring")),
        )

    def to_record(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "isRecurring": self.is_recurring,
        }
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True, slots=True)
class CalendarDay:
    date: date
    day_type: DayType
    holiday_name: Optional[str] = None
    holiday_type: Optional[HolidayType] = None
    working_hours: Optional[float] = None
    is_paid: Optional[bool] = None
    is_recurring: Optional[bool] = None
    legal_reference: Optional[str] = None
    note: Optional[str] = None
    events: tuple[CalendarEvent, ...] = ()

    @property
    def is_recurring_holiday(self) -> bool:
        return bool(self.is_recurring) and self.day_type.is_holiday

    @property
    def recurring_events(self) -> tuple[CalendarEvent, ...]:
        return tuple(event for event in self.events if event.is_recurring)

    def with_date(self, day: date) -> "CalendarDay":
        return replace(self, date=day)

    def with_events(self, events: Iterable[CalendarEvent]) -> "CalendarDay":
        return replace(self, events=tuple(events))

    @classmethod
    def from_record(cls, record: Mapping[str, Any], *, key: Optional[date] = None) -> "CalendarDay":
        day = key if key is not None else parse_iso_date(record.get("date"))
        raw_events = record.get("events") or []
        if not isinstance(raw_events, list):
            raise ValidationError(f"events must be a list, got {type(raw_events).__name__}")
        working_hours = record.get("workingHours")
        return cls(
            date=day,
            day_type=DayType.parse(record.get("dayType")),
            holiday_name=record.get("holidayName") or None,
            holiday_type=_holiday_type(record.get("holidayType")),
            working_hours=None if working_hours is None else _hours(working_hours, field_name="workingHours"),
            is_paid=_optional_bool(record.get("isPaid")),
            is_recurring=_optional_bool(record.get("isRecurring")),
            legal_reference=record.get("legalReference") or None,
            note=record.get("note") or None,
            events=tuple(CalendarEvent.from_record(item) for item in raw_events),
        )

    def to_record(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"date": iso_key(self.date), "dayType": self.day_type.value}
        if self.holiday_name:
            payload["holidayName"] = self.holiday_name
        if self.holiday_type is not None:
            payload["holidayType"] = self.holiday_type.value
        if self.working_hours is not None:
            payload["workingHours"] = self.working_hours
        if self.is_paid is not None:
            payload["isPaid"] = self.is_paid
        if self.is_recurring is not None:
            payload["isRecurring"] = self.is_recurring
        if self.legal_reference:
            payload["legalReference"] = self.legal_reference
        if self.note:
            payload["note"] = self.note
        if self.events:
            payload["events"] = [event.to_record() for event in self.events]
        return payload


@dataclass(slots=True)
class DayPatch:
    """Partial day data submitted by an editor.

    Only defined values are carried into the canonical :class:`CalendarDay`.
    ``working_hours``, ``is_paid`` and ``is_recurring`` count as defined when
    not ``None`` (``0`` hours and ``False`` are meaningful); the text fields
    and ``holiday_type`` only when non-empty.
    """

    day_type: Optional[DayType] = None
    holiday_name: Optional[str] = None
    holiday_type: Optional[HolidayType] = None
    working_hours: Optional[float] = None
    is_paid: Optional[bool] = None
    is_recurring: Optional[bool] = None
    legal_reference: Optional[str] = None
    note: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "DayPatch":
        day_type = record.get("dayType")
        working_hours = record.get("workingHours")
        return cls(
            day_type=DayType.parse(day_type) if day_type else None,
            holiday_name=record.get("holidayName"),
            holiday_type=_holiday_type(record.get("holidayType")),
            working_hours=None if working_hours is None else _hours(working_hours, field_name="workingHours"),
            is_paid=_optional_bool(record.get("isPaid")),
            is_recurring=_optional_bool(record.get("isRecurring")),
            legal_reference=record.get("legalReference"),
            note=record.get("note"),
        )

    def build(self, day: date) -> CalendarDay:
        if self.working_hours is not None:
            _hours(self.working_hours, field_name="workingHours")
        return CalendarDay(
            date=day,
            day_type=DayType.parse(self.day_type) if self.day_type else DayType.WORKING,
            holiday_name=self.holiday_name or None,
            holiday_type=_holiday_type(self.holiday_type),
            working_hours=self.working_hours,
            is_paid=self.is_paid,
            is_recurring=self.is_recurring,
            legal_reference=self.legal_reference or None,
            note=self.note or None,
        )


def _ingest_days(raw_days: Optional[Mapping[str, Any]]) -> Dict[date, CalendarDay]:
    days: Dict[date, CalendarDay] = {}
    if raw_days is not None and not isinstance(raw_days, Mapping):
        raise ValidationError(f"days must be an object, got {type(raw_days).__name__}")
    for raw_key, raw_day in (raw_days or {}).items():
        try:
            key = parse_iso_date(raw_key)
            if not isinstance(raw_day, Mapping):
                raise ValidationError(f"Day entry must be an object, got {type(raw_day).__name__}")
            days[key] = CalendarDay.from_record(raw_day, key=key)
        except ValidationError as exc:
            message = f"Skipping calendar day {raw_key!r}: {exc}"
            logger.warning(message)
            warnings.warn(message, ConsistencyWarning, stacklevel=3)
    return days


def _ingest_weekend_days(raw: Any) -> FrozenSet[int]:
    if raw is None:
        return DEFAULT_WEEKEND_DAYS
    if not isinstance(raw, (list, tuple)):
        message = f"Ignoring weekendDays {raw!r}; expected a list, using Saturday and Sunday"
        logger.warning(message)
        warnings.warn(message, ConsistencyWarning, stacklevel=3)
        return DEFAULT_WEEKEND_DAYS
    weekend: set[int] = set()
    for value in raw:
        if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 6:
            weekend.add(value)
        else:
            message = f"Ignoring invalid weekend day {value!r}"
            logger.warning(message)
            warnings.warn(message, ConsistencyWarning, stacklevel=3)
    return frozenset(weekend)


@dataclass(slots=True)
class WorkCalendar:
    weekend_days: FrozenSet[int] = DEFAULT_WEEKEND_DAYS
    working_time_rules: WorkingTimeRules = field(default_factory=WorkingTimeRules)
    days: Dict[date, CalendarDay] = field(default_factory=dict)
    id: Optional[str] = None
    name: str = ""
    description: str = ""
    year: Optional[int] = None
    country: Optional[str] = None
    region: Optional[str] = None
    time_zone: Optional[str] = None
    status: CalendarStatus = CalendarStatus.ACTIVE
    is_default: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: Optional[int] = None

    @classmethod
    def default(cls, calendar_id: str, *, year: Optional[int] = None) -> "WorkCalendar":
        now = utc_now()
        return cls(
            id=calendar_id,
            name="Work calendar",
            description="Monday to Friday working, Saturday and Sunday off",
            year=year or date.today().year,
            is_default=True,
            created_at=now,
            updated_at=now,
            version=1,
        )

    def snapshot(self) -> "WorkCalendar":
        """Shallow copy with its own ``days`` map; day entries are immutable."""

        return replace(self, days=dict(self.days))

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "WorkCalendar":
        try:
            status = CalendarStatus(record.get("status") or CalendarStatus.ACTIVE)
        except ValueError:
            status = CalendarStatus.ACTIVE
        return cls(
            weekend_days=_ingest_weekend_days(record.get("weekendDays")),
            working_time_rules=WorkingTimeRules.from_record(record.get("workingTimeRules")),
            days=_ingest_days(record.get("days")),
            id=record.get("id"),
            name=record.get("name") or "",
            description=record.get("description") or "",
            year=record.get("year"),
            country=record.get("country"),
            region=record.get("region"),
            time_zone=record.get("timeZone"),
            status=status,
            is_default=bool(record.get("isDefault")),
            created_at=record.get("createdAt"),
            updated_at=record.get("updatedAt"),
            version=record.get("version"),
        )

    def to_record(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "year": self.year,
            "country": self.country,
            "region": self.region,
            "timeZone": self.time_zone,
            "status": self.status.value,
            "isDefault": self.is_default,
            "workingTimeRules": self.working_time_rules.to_record(),
            "weekendDays": sorted(self.weekend_days),
            "days": {iso_key(key): day.to_record() for key, day in sorted(self.days.items())},
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
        }
        return {key: value for key, value in payload.items() if value is not None}


def day_field_path(day: date) -> str:
    return f"days.{iso_key(day)}"


__all__ = [
    "CalendarDay",
    "CalendarEvent",
    "DayPatch",
    "DEFAULT_WEEKEND_DAYS",
    "WorkCalendar",
    "WorkingTimeRules",
    "day_field_path",
    "utc_now",
]

