"""Tests for input and sprint calculation validation."""

from datetime import date

import pytest

from sprintpulse.domain.models import DateRange, ScheduleEntry, ScheduleValue
from sprintpulse.validation.validator import (
    InputValidator,
    SprintCalculationValidator,
    ValidationErrorType,
)

START = date(2024, 1, 7)
END = date(2024, 1, 18)


class TestInputValidator:
    """Tests for InputValidator."""

    @pytest.fixture
    def validator(self):
        """Create an input validator."""
        return InputValidator()

    def test_valid_inputs(self, validator):
        """Well-formed inputs pass without warnings."""
        entries = [ScheduleEntry("M1", START, ScheduleValue.FULL)]
        result = validator.validate(8, START, END, entries)
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_inverted_range(self, validator):
        """Start after end is reported, not raised."""
        result = validator.validate(8, END, START)
        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.INVALID_DATE_RANGE

    def test_negative_team_size(self, validator):
        """Negative team sizes are errors."""
        result = validator.validate(-1, START, END)
        assert [e.error_type for e in result.errors] == [ValidationErrorType.NEGATIVE_TEAM_SIZE]

    def test_zero_team_size_warns(self, validator):
        """An empty team is valid but flagged."""
        result = validator.validate(0, START, END)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_entry_outside_range(self, validator):
        """Entries outside the sprint are flagged."""
        entry = ScheduleEntry("M1", date(2024, 1, 21), ScheduleValue.FULL)
        result = validator.validate(1, START, END, [entry])
        error = result.errors[0]
        assert error.error_type == ValidationErrorType.ENTRY_OUTSIDE_RANGE
        assert error.member_id == "M1"
        assert str(error) == "[entry_outside_range] Member M1: Entry date is outside the sprint (2024-01-21)"

    def test_sick_flag_on_worked_day(self, validator):
        """Sick leave only makes sense on an absent day."""
        entries = [
            ScheduleEntry("M1", START, ScheduleValue.HALF, is_sick=True),
            ScheduleEntry("M1", END, ScheduleValue.ABSENT, reason="Flu", is_sick=True),
        ]
        result = validator.validate(1, START, END, entries)
        assert [e.error_type for e in result.errors] == [ValidationErrorType.SICK_FLAG_ON_WORKED_DAY]

    def test_duplicate_entries(self, validator):
        """Two entries for the same member and day are flagged once."""
        entries = [
            ScheduleEntry("M1", START, ScheduleValue.FULL),
            ScheduleEntry("M1", START, ScheduleValue.HALF),
            ScheduleEntry("M2", START, ScheduleValue.FULL),
        ]
        result = validator.validate(2, START, END, entries)
        assert len(result.errors) == 1
        assert result.errors[0].error_type == ValidationErrorType.DUPLICATE_ENTRY
        assert result.errors[0].details == {"count": 2}


class TestSprintCalculationValidator:
    """Tests for SprintCalculationValidator."""

    @pytest.fixture
    def validator(self):
        """Create a sprint calculation validator."""
        return SprintCalculationValidator()

    @pytest.fixture
    def sprint(self):
        """Two-week sprint."""
        return DateRange(START, END)

    def test_correct_potential(self, validator, sprint):
        """8 people over 10 days at 7h is 560h."""
        result = validator.validate(8, sprint, 560)
        assert result.is_valid
        assert result.warnings == []
        assert result.details["expected_potential"] == 560
        assert result.details["sprint_weeks"] == 2
        assert result.details["breakdown"] == "8 people x 10 working days x 7h/day = 560h"

    def test_potential_mismatch(self, validator, sprint):
        """A wrong figure is an error and breaks the per-week check."""
        result = validator.validate(8, sprint, 500)
        assert not result.is_valid
        assert result.errors[0].error_type == ValidationErrorType.POTENTIAL_MISMATCH
        assert any("Hours per week" in w for w in result.warnings)

    def test_short_sprint_warning(self, validator):
        """Less than a week of working days is flagged."""
        short = DateRange(START, date(2024, 1, 9))
        result = validator.validate(2, short, 42)
        assert result.is_valid
        assert any("less than 1 week" in w for w in result.warnings)

    def test_large_team_warning(self, validator, sprint):
        """Teams above 12 are flagged."""
        result = validator.validate(13, sprint, 13 * 70)
        assert result.is_valid
        assert any("Large team" in w for w in result.warnings)

    def test_long_sprint_warning(self, validator):
        """More than 60 working days is flagged."""
        long_sprint = DateRange(START, date(2024, 4, 30))
        working_days = validator.capacity_calculator.calendar.working_days_between(long_sprint)
        result = validator.validate(1, long_sprint, working_days * 7)
        assert any("Long sprint" in w for w in result.warnings)
