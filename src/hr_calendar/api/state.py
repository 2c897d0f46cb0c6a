from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..services import CalendarService, ServiceContext


@dataclass(slots=True)
class ApiState:
    _calendar: Optional[CalendarService] = None

    def configure(self, context: Optional[ServiceContext] = None) -> CalendarService:
        self._calendar = CalendarService(context or ServiceContext())
        return self._calendar

    @property
    def calendar(self) -> CalendarService:
        if self._calendar is None:
            return self.configure()
        return self._calendar


api_state = ApiState()
