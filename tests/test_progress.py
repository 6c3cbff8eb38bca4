"""Tests for sprint progress tracking."""

from datetime import date, datetime, timedelta, timezone

import pytest

from sprintpulse.analytics.progress import ProgressTracker
from sprintpulse.domain.models import DateRange, HealthStatus, ScheduleEntry, ScheduleValue


@pytest.fixture
def tracker():
    """Tracker with default calculator and on-track policy."""
    return ProgressTracker()


@pytest.fixture
def sprint():
    """Two-week sprint, Sunday 2024-01-07 to Thursday 2024-01-18."""
    return DateRange.from_iso("2024-01-07", "2024-01-18")


class TestSprintProgress:
    """Tests for calculate_sprint_progress."""

    def test_before_start(self, tracker, sprint):
        """Before the sprint starts, progress is 0."""
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 6, 23)) == 0

    def test_at_start(self, tracker, sprint):
        """At midnight of the start date, progress is 0."""
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 7)) == 0

    def test_after_end(self, tracker, sprint):
        """From midnight of the end date on, progress is 100."""
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 18)) == 100
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 18, 12)) == 100
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 19)) == 100
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 2, 1)) == 100

    def test_halfway(self, tracker, sprint):
        """Six of eleven days elapsed rounds to 55%."""
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 13)) == 55

    def test_time_based_not_working_day_based(self, tracker, sprint):
        """Progress follows wall-clock time, weekends included."""
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 10)) == 27
        assert tracker.calculate_sprint_progress(sprint, datetime(2024, 1, 17, 12)) == 95

    def test_date_means_midnight(self, tracker, sprint):
        """A plain date is read as midnight of that day."""
        assert tracker.calculate_sprint_progress(sprint, date(2024, 1, 13)) == 55

    def test_aware_datetime_uses_wall_clock(self, tracker, sprint):
        """Timezone info is dropped; the wall-clock reading is used."""
        now = datetime(2024, 1, 13, tzinfo=timezone.utc)
        assert tracker.calculate_sprint_progress(sprint, now) == 55

    def test_one_day_range(self, tracker):
        """A one-day range is 0 before it starts and 100 from its start on."""
        day = DateRange.from_iso("2024-01-08", "2024-01-08")
        assert tracker.calculate_sprint_progress(day, datetime(2024, 1, 7, 23)) == 0
        assert tracker.calculate_sprint_progress(day, datetime(2024, 1, 8)) == 100
        assert tracker.calculate_sprint_progress(day, datetime(2024, 1, 8, 15)) == 100

    def test_within_bounds(self, tracker, sprint):
        """Progress stays within 0-100 for every hour around the sprint."""
        start = datetime(2024, 1, 5)
        for hours in range(0, 24 * 18, 5):
            progress = tracker.calculate_sprint_progress(sprint, start + timedelta(hours=hours))
            assert 0 <= progress <= 100


class TestDaysRemaining:
    """Tests for calculate_days_remaining."""

    def test_strictly_between(self, tracker):
        """From Sunday 14th to Thursday 18th: Mon, Tue, Wed remain."""
        assert tracker.calculate_days_remaining(date(2024, 1, 18), date(2024, 1, 14)) == 3

    def test_skips_weekend(self, tracker):
        """From Thursday 11th: Sun 14 to Wed 17 remain."""
        assert tracker.calculate_days_remaining(date(2024, 1, 18), date(2024, 1, 11)) == 4

    def test_on_end_date(self, tracker):
        """No days remain on the end date."""
        assert tracker.calculate_days_remaining(date(2024, 1, 18), date(2024, 1, 18)) == 0

    def test_day_before_end(self, tracker):
        """Nothing lies strictly between the day before the end and the end."""
        assert tracker.calculate_days_remaining(date(2024, 1, 18), date(2024, 1, 17)) == 0

    def test_after_end(self, tracker):
        """Past the end, 0 days remain."""
        assert tracker.calculate_days_remaining(date(2024, 1, 18), date(2024, 1, 25)) == 0

    def test_time_of_day_ignored(self, tracker):
        """Late evening still counts from that calendar date."""
        now = datetime(2024, 1, 14, 23, 59)
        assert tracker.calculate_days_remaining(date(2024, 1, 18), now) == 3

    def test_datetime_end_date(self, tracker):
        """A datetime end date counts by its calendar date."""
        end = datetime(2024, 1, 18, 17, 30)
        assert tracker.calculate_days_remaining(end, datetime(2024, 1, 10)) == 5


class TestOnTrack:
    """Tests for is_on_track."""

    def test_floor_of_twenty(self, tracker):
        """Early in a sprint, 20% completion is enough."""
        assert tracker.is_on_track(20, 0) is True
        assert tracker.is_on_track(19, 0) is False
        assert tracker.is_on_track(20, 25) is True

    def test_eighty_percent_of_progress(self, tracker):
        """Late in a sprint, completion must reach 80% of time progress."""
        assert tracker.is_on_track(80, 100) is True
        assert tracker.is_on_track(79, 100) is False
        assert tracker.is_on_track(40, 50) is True


class TestAssessment:
    """Tests for calculate_progress_info and assess."""

    def test_progress_info(self, tracker, sprint):
        """Progress info bundles progress, remaining days and on-track."""
        info = tracker.calculate_progress_info(sprint, 45, datetime(2024, 1, 13))
        assert info.progress_percentage == 55
        assert info.days_remaining == 4
        assert info.is_on_track is True

    def test_assess(self, tracker, sprint):
        """Assessment combines metrics, progress and health."""
        working = tracker.calendar.working_dates(sprint)
        entries = [ScheduleEntry("M1", d, ScheduleValue.FULL) for d in working]

        assessment = tracker.assess(2, sprint, entries, datetime(2024, 1, 14))

        assert assessment.metrics.potential_hours == 140
        assert assessment.metrics.completion_percentage == 50
        assert assessment.progress.progress_percentage == 64
        assert assessment.progress.days_remaining == 3
        assert assessment.progress.is_on_track is False
        assert assessment.health == HealthStatus.WARNING

    def test_assess_matches_components(self, tracker, sprint):
        """Assessment numbers equal the individual calculations."""
        now = datetime(2024, 1, 16, 9)
        entries = [ScheduleEntry("M1", date(2024, 1, 7), ScheduleValue.HALF)]
        assessment = tracker.assess(4, sprint, entries, now)

        calculator = tracker.capacity_calculator
        metrics = calculator.calculate_sprint_metrics(4, sprint, entries)
        days = tracker.calculate_days_remaining(sprint.end, now)

        assert assessment.metrics == metrics
        assert assessment.progress.days_remaining == days
        assert assessment.health == calculator.get_health_status(metrics.completion_percentage, days)
