"""Validation of raw engine inputs and sprint calculations.

Unlike the domain constructors, which raise, the validators here collect
every problem into a ValidationResult so callers can report them all at
once.
"""

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Sequence

from sprintpulse.analytics.capacity import CapacityCalculator
from sprintpulse.domain.models import DateRange, ScheduleEntry, ScheduleValue


class ValidationErrorType(Enum):
    """Types of validation errors."""

    INVALID_DATE_RANGE = "invalid_date_range"
    NEGATIVE_TEAM_SIZE = "negative_team_size"
    ENTRY_OUTSIDE_RANGE = "entry_outside_range"
    SICK_FLAG_ON_WORKED_DAY = "sick_flag_on_worked_day"
    DUPLICATE_ENTRY = "duplicate_entry"
    POTENTIAL_MISMATCH = "potential_mismatch"


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    message: str
    member_id: Optional[str] = None
    entry_date: Optional[date] = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.error_type.value}]"]
        if self.member_id:
            parts.append(f"Member {self.member_id}:")
        parts.append(self.message)
        if self.entry_date is not None:
            parts.append(f"({self.entry_date.isoformat()})")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """Result of a validation run."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    details: dict = field(default_factory=dict)

    def add_error(self, error: ValidationError) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, warning: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(warning)


class InputValidator:
    """Checks raw sprint inputs before they reach the calculators.

    Example:
        >>> validator = InputValidator()
        >>> result = validator.validate(8, date(2024, 1, 7), date(2024, 1, 18), entries)
        >>> if not result.is_valid:
        ...     for error in result.errors:
        ...         print(error)
    """

    def validate(
        self,
        team_size: int,
        start: date,
        end: date,
        entries: Sequence[ScheduleEntry] = (),
    ) -> ValidationResult:
        """Validate a team size, a raw date pair and schedule entries.

        Args:
            team_size: Number of people in the team.
            start: Sprint start date.
            end: Sprint end date.
            entries: Schedule entries meant for the sprint.

        Returns:
            ValidationResult with is_valid flag and any errors.
        """
        result = ValidationResult(is_valid=True)

        if start > end:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.INVALID_DATE_RANGE,
                    message=f"Start {start.isoformat()} is after end {end.isoformat()}",
                    details={"start": start.isoformat(), "end": end.isoformat()},
                )
            )

        if team_size < 0:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.NEGATIVE_TEAM_SIZE,
                    message=f"Team size {team_size} is negative",
                    details={"team_size": team_size},
                )
            )
        elif team_size == 0:
            result.add_warning("Team size is 0; potential hours will be 0")

        self._validate_entries(entries, start, end, result)

        return result

    def _validate_entries(
        self,
        entries: Sequence[ScheduleEntry],
        start: date,
        end: date,
        result: ValidationResult,
    ) -> None:
        """Check entry dates, sick flags and duplicates."""
        # Only meaningful when the range itself is valid
        if start <= end:
            for entry in entries:
                if not start <= entry.entry_date <= end:
                    result.add_error(
                        ValidationError(
                            error_type=ValidationErrorType.ENTRY_OUTSIDE_RANGE,
                            message="Entry date is outside the sprint",
                            member_id=entry.member_id,
                            entry_date=entry.entry_date,
                        )
                    )

        for entry in entries:
            if entry.is_sick and entry.value != ScheduleValue.ABSENT:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.SICK_FLAG_ON_WORKED_DAY,
                        message=f"Sick flag set on a {entry.value.name.lower()} day",
                        member_id=entry.member_id,
                        entry_date=entry.entry_date,
                    )
                )

        counts = Counter((e.member_id, e.entry_date) for e in entries)
        for (member_id, entry_date), count in counts.items():
            if count > 1:
                result.add_error(
                    ValidationError(
                        error_type=ValidationErrorType.DUPLICATE_ENTRY,
                        message=f"{count} entries for the same day",
                        member_id=member_id,
                        entry_date=entry_date,
                        details={"count": count},
                    )
                )


class SprintCalculationValidator:
    """Cross-checks a sprint potential figure against the calculator.

    Example:
        >>> validator = SprintCalculationValidator()
        >>> result = validator.validate(8, DateRange.from_iso("2024-01-07", "2024-01-18"), 560)
        >>> result.is_valid
        True
    """

    MIN_WORKING_DAYS = 5
    MAX_TEAM_SIZE = 12
    MAX_WORKING_DAYS = 60
    HOURS_TOLERANCE = 0.1

    def __init__(self, capacity_calculator: Optional[CapacityCalculator] = None):
        self.capacity_calculator = capacity_calculator or CapacityCalculator()

    def validate(
        self,
        team_size: int,
        date_range: DateRange,
        calculated_potential: float,
    ) -> ValidationResult:
        """Validate a supplied potential-hours figure.

        Args:
            team_size: Number of people in the team.
            date_range: Sprint range.
            calculated_potential: Potential hours to check.

        Returns:
            ValidationResult; ``details`` carries the expected figures.
        """
        result = ValidationResult(is_valid=True)
        calculator = self.capacity_calculator
        work_week = calculator.work_week

        working_days = calculator.calendar.working_days_between(date_range)
        expected = calculator.calculate_sprint_potential(team_size, date_range)
        days_per_week = work_week.days_per_week
        sprint_weeks = math.ceil(working_days / days_per_week) if days_per_week else 0

        result.details = {
            "team_size": team_size,
            "working_days": working_days,
            "sprint_weeks": sprint_weeks,
            "expected_potential": expected,
            "calculated_potential": calculated_potential,
            "hours_per_day": work_week.hours_per_day,
            "hours_per_week": work_week.hours_per_week,
            "breakdown": (
                f"{team_size} people x {working_days} working days x "
                f"{work_week.hours_per_day:g}h/day = {expected:g}h"
            ),
        }

        if abs(calculated_potential - expected) > 1e-9:
            result.add_error(
                ValidationError(
                    error_type=ValidationErrorType.POTENTIAL_MISMATCH,
                    message=f"Sprint potential mismatch: expected {expected:g}h, got {calculated_potential:g}h",
                    details={"expected": expected, "actual": calculated_potential},
                )
            )

        if team_size > 0 and sprint_weeks > 0:
            per_week = calculated_potential / team_size / sprint_weeks
            if abs(per_week - work_week.hours_per_week) > self.HOURS_TOLERANCE:
                result.add_warning(
                    f"Hours per week inconsistent: expected {work_week.hours_per_week:g}h/person/week, "
                    f"calculated {per_week:.1f}h"
                )

        if working_days < self.MIN_WORKING_DAYS:
            result.add_warning(
                "Sprint duration less than 1 week may lead to inaccurate capacity planning"
            )
        if team_size > self.MAX_TEAM_SIZE:
            result.add_warning(
                f"Large team size (>{self.MAX_TEAM_SIZE}) may have coordination overhead"
            )
        if working_days > self.MAX_WORKING_DAYS:
            result.add_warning(
                f"Long sprint duration (>{self.MAX_WORKING_DAYS} working days) increases uncertainty"
            )

        return result
