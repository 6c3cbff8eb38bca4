"""Sprint time progress and on-track checks.

Progress depends on the current instant, so every method takes ``now``
explicitly. A plain ``date`` passed as ``now`` means midnight of that day.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

import structlog

from sprintpulse.analytics.capacity import CapacityCalculator
from sprintpulse.domain.models import (
    DateRange,
    ScheduleEntry,
    SprintAssessment,
    SprintProgress,
)
from sprintpulse.domain.policies import (
    DefaultOnTrackPolicy,
    OnTrackPolicy,
    round_half_away_from_zero,
)

logger = structlog.get_logger(__name__)


def _as_datetime(now: date) -> datetime:
    if isinstance(now, datetime):
        # Calendar comparison only; drop any timezone
        return now.replace(tzinfo=None)
    return datetime.combine(now, time.min)


class ProgressTracker:
    """Tracks elapsed time, remaining working days and on-track status.

    Example:
        >>> tracker = ProgressTracker()
        >>> sprint = DateRange.from_iso("2024-01-07", "2024-01-18")
        >>> tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 13))
        55
    """

    def __init__(
        self,
        capacity_calculator: Optional[CapacityCalculator] = None,
        on_track_policy: Optional[OnTrackPolicy] = None,
    ):
        self.capacity_calculator = capacity_calculator or CapacityCalculator()
        self.on_track_policy = on_track_policy or DefaultOnTrackPolicy()

    @property
    def calendar(self):
        return self.capacity_calculator.calendar

    def calculate_sprint_progress(self, date_range: DateRange, now: date) -> int:
        """Elapsed share of the sprint's wall-clock window, 0-100.

        The window runs from the start date at 00:00 to the end date at
        00:00. A one-day range is complete as soon as it starts.
        """
        current = _as_datetime(now)
        start = datetime.combine(date_range.start, time.min)
        end = datetime.combine(date_range.end, time.min)

        if current < start:
            return 0
        if current >= end:
            return 100

        elapsed = (current - start).total_seconds()
        total = (end - start).total_seconds()
        return round_half_away_from_zero(elapsed / total * 100)

    def calculate_days_remaining(self, end_date: date, now: date) -> int:
        """Working days strictly between ``now`` and ``end_date``."""
        today = _as_datetime(now).date()
        end = end_date.date() if isinstance(end_date, datetime) else end_date
        first = today + timedelta(days=1)
        last = end - timedelta(days=1)
        if first > last:
            return 0
        return self.calendar.working_days_between(DateRange(first, last))

    def is_on_track(self, completion_percentage: float, progress_percentage: float) -> bool:
        return self.on_track_policy.is_on_track(completion_percentage, progress_percentage)

    def calculate_progress_info(
        self,
        date_range: DateRange,
        completion_percentage: float,
        now: date,
    ) -> SprintProgress:
        """Progress, remaining days and on-track status in one value."""
        progress = self.calculate_sprint_progress(date_range, now)
        return SprintProgress(
            progress_percentage=progress,
            days_remaining=self.calculate_days_remaining(date_range.end, now),
            is_on_track=self.is_on_track(completion_percentage, progress),
        )

    def assess(
        self,
        team_size: int,
        date_range: DateRange,
        entries: Sequence[ScheduleEntry],
        now: date,
    ) -> SprintAssessment:
        """Metrics, progress and health for one sprint, computed together.

        Args:
            team_size: Number of people in the team.
            date_range: Sprint range (inclusive).
            entries: Schedule entries, already filtered to the sprint.
            now: Observation instant.

        Returns:
            SprintAssessment combining all figures.
        """
        metrics = self.capacity_calculator.calculate_sprint_metrics(
            team_size, date_range, entries
        )
        progress = self.calculate_progress_info(
            date_range, metrics.completion_percentage, now
        )
        health = self.capacity_calculator.get_health_status(
            metrics.completion_percentage, progress.days_remaining
        )

        logger.debug(
            "Assessed sprint",
            start=date_range.start.isoformat(),
            end=date_range.end.isoformat(),
            progress_percentage=progress.progress_percentage,
            days_remaining=progress.days_remaining,
            health=health.value,
        )

        return SprintAssessment(
            date_range=date_range,
            metrics=metrics,
            progress=progress,
            health=health,
        )
