"""Exception hierarchy for the engine.

Every error carries a machine-readable ``code`` so callers can branch on it
without parsing messages. All errors are also ``ValueError``s: they signal a
caller passing inputs that violate a contract.
"""

from datetime import date
from typing import Any, Optional


class SprintPulseError(ValueError):
    """Base class for all engine errors."""

    code: str = "SPRINTPULSE_ERROR"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidDateRangeError(SprintPulseError):
    code = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date):
        super().__init__(
            message=f"Range start {start} is after end {end}.",
            details={"start": str(start), "end": str(end)},
        )


class InvalidWorkWeekError(SprintPulseError):
    code = "INVALID_WORK_WEEK"


class InvalidScheduleValueError(SprintPulseError):
    code = "INVALID_SCHEDULE_VALUE"

    def __init__(self, raw: Any):
        super().__init__(
            message=f"Unknown schedule value {raw!r}; expected one of '1', '0.5', 'X'.",
            details={"raw": repr(raw)},
        )


class InvalidCatalogError(SprintPulseError):
    code = "INVALID_CATALOG"
