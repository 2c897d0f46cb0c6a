from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain import DayPatch, DayType, HolidayType


class DayPatchPayload(BaseModel):
    """Editor input for saving or moving a day; unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    day_type: Optional[DayType] = Field(default=None, alias="dayType")
    holiday_name: Optional[str] = Field(default=None, alias="holidayName")
    holiday_type: Optional[HolidayType] = Field(default=None, alias="holidayType")
    working_hours: Optional[float] = Field(default=None, alias="workingHours", ge=0)
    is_paid: Optional[bool] = Field(default=None, alias="isPaid")
    is_recurring: Optional[bool] = Field(default=None, alias="isRecurring")
    legal_reference: Optional[str] = Field(default=None, alias="legalReference")
    note: Optional[str] = Field(default=None)

    @field_validator("day_type", "holiday_type", mode="before")
    @classmethod
    def _blank_as_missing(cls, value: Any) -> Any:
        return None if value == "" else value

    def to_patch(self) -> DayPatch:
        return DayPatch(
            day_type=self.day_type,
            holiday_name=self.holiday_name,
            holiday_type=self.holiday_type,
            working_hours=self.working_hours,
            is_paid=self.is_paid,
            is_recurring=self.is_recurring,
            legal_reference=self.legal_reference,
            note=self.note,
        )


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)
