"""Tests for weekly metric snapshots."""

from datetime import date, timedelta

import pytest

from sprintpulse.analytics.calendar import CalendarResolver
from sprintpulse.analytics.metrics import MetricSnapshotBuilder, week_start_for
from sprintpulse.domain.models import (
    MetricName,
    MetricRecord,
    ScheduleEntry,
    ScheduleValue,
    WorkWeekDefinition,
)

WEEK = date(2024, 1, 7)


@pytest.fixture
def builder():
    """Builder with the default Sunday-Thursday week."""
    return MetricSnapshotBuilder()


def entries_for(member_id, days, week_start=WEEK):
    return [
        ScheduleEntry(member_id, week_start + timedelta(days=d), ScheduleValue.FULL)
        for d in days
    ]


def rate(value, period_start, user_id="u1"):
    return MetricRecord(user_id, MetricName.WEEKLY_COMPLETION_RATE, value, period_start)


class TestWeekStart:
    """Tests for week_start_for."""

    def test_week_start(self):
        """Weeks start on Sunday."""
        assert week_start_for(date(2024, 1, 10)) == WEEK
        assert week_start_for(WEEK) == WEEK
        assert week_start_for(date(2024, 1, 13)) == WEEK


class TestWeeklyCompletionRate:
    """Tests for weekly_completion_rate."""

    def test_full_week(self, builder):
        """Every working day filled is 100%."""
        assert builder.weekly_completion_rate("u1", entries_for("u1", range(5)), WEEK) == 100

    def test_partial_week(self, builder):
        """Three of five working days is 60%."""
        assert builder.weekly_completion_rate("u1", entries_for("u1", [0, 2, 4]), WEEK) == 60

    def test_ignores_weekend_other_users_and_duplicates(self, builder):
        """Only the user's distinct working dates count."""
        entries = entries_for("u1", [0, 0, 5, 6]) + entries_for("u2", range(5))
        assert builder.weekly_completion_rate("u1", entries, WEEK) == 20

    def test_rounds_down(self):
        """Two of three working days is 66, not 67."""
        calendar = CalendarResolver(WorkWeekDefinition(working_days=frozenset({0, 1, 2})))
        builder = MetricSnapshotBuilder(calendar)
        assert builder.weekly_completion_rate("u1", entries_for("u1", [0]), WEEK) == 33
        assert builder.weekly_completion_rate("u1", entries_for("u1", [0, 1]), WEEK) == 66

    def test_no_working_days(self):
        """A week without working days is 0%."""
        builder = MetricSnapshotBuilder(CalendarResolver(WorkWeekDefinition(working_days=frozenset())))
        assert builder.weekly_completion_rate("u1", entries_for("u1", range(7)), WEEK) == 0


class TestConsistencyStreak:
    """Tests for consistency_streak."""

    def test_counts_back_from_current_week(self, builder):
        """Full weeks in a row, ending at the current week."""
        history = [
            rate(80, date(2023, 12, 31)),
            rate(100, WEEK),
            rate(100, date(2024, 1, 14)),
        ]
        assert builder.consistency_streak("u1", history, date(2024, 1, 14)) == 2

    def test_current_week_missing(self, builder):
        """Without a record for the current week the streak is 0."""
        assert builder.consistency_streak("u1", [rate(100, WEEK)], date(2024, 1, 14)) == 0

    def test_other_users_ignored(self, builder):
        """Only the user's records count."""
        assert builder.consistency_streak("u1", [rate(100, WEEK, user_id="u2")], WEEK) == 0


class TestBuild:
    """Tests for build."""

    def test_build_includes_this_week(self, builder):
        """The streak counts the week being built."""
        history = [rate(100, WEEK)]
        records = builder.build(
            "u1", entries_for("u1", range(5), date(2024, 1, 14)), history, date(2024, 1, 14)
        )

        completion, streak = records
        assert completion.metric == MetricName.WEEKLY_COMPLETION_RATE
        assert completion.value == 100
        assert completion.period_start == date(2024, 1, 14)
        assert completion.period_end == date(2024, 1, 20)
        assert streak.metric == MetricName.CONSISTENCY_STREAK
        assert streak.value == 2
