from __future__ import annotations

from datetime import date


class CalendarError(Exception):
    """Base class for work-calendar errors."""


class ValidationError(CalendarError, ValueError):
    """Raised when a date, day type, or day payload is malformed."""


class PersistenceError(CalendarError, RuntimeError):
    """Raised when the durable calendar store rejects or fails an operation."""


class PartialMoveError(PersistenceError):
    """Raised when a move removed the source day remotely but did not write the target."""

    def __init__(self, from_date: date, to_date: date) -> None:
        super().__init__(
            f"Move {from_date.isoformat()} -> {to_date.isoformat()} left the store without either day."
        )
        self.from_date = from_date
        self.to_date = to_date


class DayNotFoundError(CalendarError, LookupError):
    """Raised when a delete or move targets a date without a stored entry."""


class ConsistencyWarning(UserWarning):
    """Emitted when a stored calendar entry is skipped during ingestion."""
