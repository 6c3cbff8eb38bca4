"""Capacity and recognition calculations."""

from sprintpulse.analytics.achievements import (
    AchievementEvaluator,
    RecognitionContext,
    calculate_level,
    total_points,
)
from sprintpulse.analytics.calendar import CalendarResolver, SprintDetector
from sprintpulse.analytics.capacity import CapacityCalculator, entries_from_rows
from sprintpulse.analytics.leaderboard import (
    LeaderboardAggregator,
    filter_records,
    timeframe_period,
)
from sprintpulse.analytics.metrics import MetricSnapshotBuilder, week_start_for
from sprintpulse.analytics.progress import ProgressTracker

__all__ = [
    "AchievementEvaluator",
    "CalendarResolver",
    "CapacityCalculator",
    "LeaderboardAggregator",
    "MetricSnapshotBuilder",
    "ProgressTracker",
    "RecognitionContext",
    "SprintDetector",
    "calculate_level",
    "entries_from_rows",
    "filter_records",
    "timeframe_period",
    "total_points",
    "week_start_for",
]
