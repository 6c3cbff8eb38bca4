"""Policy definitions for capacity classification rules.

This module contains configurable policies that define the business rules
for sprint health, on-track expectations and utilization bands. Policies are
kept separate from the calculators to allow independent testing and easy
modification of thresholds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sprintpulse.domain.models import HealthStatus, UtilizationStatus


class HealthPolicy(ABC):
    """Abstract base class for sprint health classification."""

    @abstractmethod
    def classify(self, completion_percentage: float, days_remaining: int) -> HealthStatus:
        """Classify sprint health.

        Args:
            completion_percentage: Rounded completion percentage (may exceed 100).
            days_remaining: Working days left in the sprint.

        Returns:
            Health status for the sprint.
        """
        pass


class OnTrackPolicy(ABC):
    """Abstract base class for on-track rules."""

    @abstractmethod
    def expected_completion(self, progress_percentage: float) -> float:
        """Completion percentage expected at a given time progress."""
        pass

    @abstractmethod
    def is_on_track(self, completion_percentage: float, progress_percentage: float) -> bool:
        """Check if completion meets the expectation for the time elapsed."""
        pass


class UtilizationPolicy(ABC):
    """Abstract base class for utilization bands."""

    @abstractmethod
    def classify(self, utilization_percentage: float) -> UtilizationStatus:
        """Map a utilization percentage to a status band."""
        pass


@dataclass
class DefaultHealthPolicy(HealthPolicy):
    """Default health ladder, evaluated top-down:

    - completion >= 90: excellent
    - completion >= 75: good
    - completion >= 50 or more than 3 working days left: warning
    - otherwise: critical

    The days-remaining disjunct keeps a low-completion team at "warning"
    while there is still time to recover.
    """

    excellent_threshold: float = 90
    good_threshold: float = 75
    warning_threshold: float = 50
    recoverable_days: int = 3

    def classify(self, completion_percentage: float, days_remaining: int) -> HealthStatus:
        if completion_percentage >= self.excellent_threshold:
            return HealthStatus.EXCELLENT
        elif completion_percentage >= self.good_threshold:
            return HealthStatus.GOOD
        elif (
            completion_percentage >= self.warning_threshold
            or days_remaining > self.recoverable_days
        ):
            return HealthStatus.WARNING
        else:
            return HealthStatus.CRITICAL


@dataclass
class DefaultOnTrackPolicy(OnTrackPolicy):
    """Default on-track rule.

    Expected completion is 80% of time progress, with a floor of 20 so that
    teams are not flagged as behind in the first days of a sprint.
    """

    expected_ratio: float = 0.8
    minimum_expected: float = 20

    def expected_completion(self, progress_percentage: float) -> float:
        return max(self.minimum_expected, progress_percentage * self.expected_ratio)

    def is_on_track(self, completion_percentage: float, progress_percentage: float) -> bool:
        return completion_percentage >= self.expected_completion(progress_percentage)


@dataclass
class DefaultUtilizationPolicy(UtilizationPolicy):
    """Default utilization bands: 90 / 70 / 50."""

    excellent_threshold: float = 90
    good_threshold: float = 70
    attention_threshold: float = 50

    def classify(self, utilization_percentage: float) -> UtilizationStatus:
        if utilization_percentage >= self.excellent_threshold:
            return UtilizationStatus.EXCELLENT
        elif utilization_percentage >= self.good_threshold:
            return UtilizationStatus.GOOD
        elif utilization_percentage >= self.attention_threshold:
            return UtilizationStatus.NEEDS_ATTENTION
        else:
            return UtilizationStatus.CRITICAL


def round_half_away_from_zero(value: float) -> int:
    """Round to the nearest integer, with halves rounded away from zero.

    Python's built-in ``round`` uses banker's rounding (``round(2.5) == 2``).
    """
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percentage(part: float, whole: float) -> int:
    """Rounded ``part / whole x 100``; 0 when ``whole`` is not positive."""
    if whole <= 0:
        return 0
    return round_half_away_from_zero(part / whole * 100)
