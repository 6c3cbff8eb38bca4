"""Validation of engine inputs and sprint calculations."""

from sprintpulse.validation.validator import (
    InputValidator,
    SprintCalculationValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "InputValidator",
    "SprintCalculationValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
