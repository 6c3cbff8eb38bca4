"""Domain models for the capacity and recognition engine.

This module contains the core data structures shared by every engine
component: the work-week definition, schedule entries, date ranges, derived
capacity/progress values, metric history, and recognition records.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Optional

from sprintpulse.domain.errors import (
    InvalidDateRangeError,
    InvalidScheduleValueError,
    InvalidWorkWeekError,
)


WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


def weekday_index(d: date) -> int:
    """Weekday index with Sunday=0 ... Saturday=6.

    Python's ``date.weekday()`` uses Monday=0, so the value is shifted.
    """
    return (d.weekday() + 1) % 7


@dataclass(frozen=True)
class WorkWeekDefinition:
    """Which weekdays are working days and how long a working day is.

    Attributes:
        working_days: Weekday indices (Sunday=0 ... Saturday=6) that count
            as working days. Defaults to Sunday through Thursday.
        hours_per_day: Hours in a full working day.
    """

    working_days: frozenset[int] = frozenset({0, 1, 2, 3, 4})
    hours_per_day: float = 7.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "working_days", frozenset(self.working_days))
        invalid = sorted(d for d in self.working_days if not 0 <= d <= 6)
        if invalid:
            raise InvalidWorkWeekError(
                f"Working day indices must be within 0..6, got {invalid}",
                details={"invalid_days": invalid},
            )
        if self.hours_per_day <= 0:
            raise InvalidWorkWeekError(
                f"Hours per day must be positive, got {self.hours_per_day}",
                details={"hours_per_day": self.hours_per_day},
            )

    @property
    def half_day_hours(self) -> float:
        """Hours credited for a half day."""
        return self.hours_per_day / 2

    @property
    def days_per_week(self) -> int:
        """Number of working days in one calendar week."""
        return len(self.working_days)

    @property
    def hours_per_week(self) -> float:
        """Full-time hours for one person over one calendar week."""
        return self.days_per_week * self.hours_per_day

    def is_working_day(self, d: date) -> bool:
        """Check if a calendar date falls on a working weekday."""
        return weekday_index(d) in self.working_days

    def __repr__(self) -> str:
        names = ", ".join(WEEKDAY_NAMES[i][:3] for i in sorted(self.working_days))
        return f"WorkWeekDefinition([{names}], {self.hours_per_day}h/day)"


class ScheduleValue(Enum):
    """Availability recorded for one person on one day.

    Values carry the codes used by the schedule table:
    ``"1"`` full day, ``"0.5"`` half day, ``"X"`` absent.
    """

    FULL = "1"
    HALF = "0.5"
    ABSENT = "X"

    @classmethod
    def from_code(cls, code: str) -> "ScheduleValue":
        """Parse a schedule code ("1", "0.5", "X")."""
        normalized = str(code).strip().upper()
        for value in cls:
            if value.value == normalized:
                return value
        raise InvalidScheduleValueError(code)

    @classmethod
    def from_hours(cls, hours: float, work_week: WorkWeekDefinition) -> "ScheduleValue":
        """Map an hour figure back to the closest tag at or below it."""
        if hours >= work_week.hours_per_day:
            return cls.FULL
        if hours >= work_week.half_day_hours:
            return cls.HALF
        return cls.ABSENT

    def to_hours(self, work_week: WorkWeekDefinition) -> float:
        """Hours this value is worth under a work week."""
        if self is ScheduleValue.FULL:
            return work_week.hours_per_day
        if self is ScheduleValue.HALF:
            return work_week.half_day_hours
        return 0.0


@dataclass(frozen=True)
class ScheduleEntry:
    """One person's availability on one calendar date.

    Attributes:
        member_id: ID of the team member.
        entry_date: Calendar date of the entry.
        value: Full, half or absent.
        reason: Optional free-text reason (mostly for absences).
        is_sick: Marks an absence as sick leave.
    """

    member_id: str
    entry_date: date
    value: ScheduleValue
    reason: Optional[str] = None
    is_sick: bool = False

    def hours(self, work_week: WorkWeekDefinition) -> float:
        """Hours credited for this entry."""
        return self.value.to_hours(work_week)


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar dates.

    Raises:
        InvalidDateRangeError: If ``start`` is after ``end``.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        # datetime is a subclass of date; keep calendar dates only
        if isinstance(self.start, datetime):
            object.__setattr__(self, "start", self.start.date())
        if isinstance(self.end, datetime):
            object.__setattr__(self, "end", self.end.date())
        if self.start > self.end:
            raise InvalidDateRangeError(self.start, self.end)

    @classmethod
    def from_iso(cls, start: str, end: str) -> "DateRange":
        """Create a range from ISO ``YYYY-MM-DD`` strings."""
        return cls(date.fromisoformat(start), date.fromisoformat(end))

    @property
    def num_days(self) -> int:
        """Number of calendar days in the range."""
        return (self.end - self.start).days + 1

    def dates(self) -> list[date]:
        """All calendar dates in the range, in order."""
        return [self.start + timedelta(days=i) for i in range(self.num_days)]

    def contains(self, d: date) -> bool:
        """Check if a date falls inside the range."""
        return self.start <= d <= self.end

    def __repr__(self) -> str:
        return f"DateRange({self.start.isoformat()}..{self.end.isoformat()})"


class HealthStatus(Enum):
    """Qualitative sprint health, from best to worst."""

    EXCELLENT = "excellent"
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        """0 for excellent up to 3 for critical."""
        return list(HealthStatus).index(self)


class UtilizationStatus(Enum):
    """Utilization band used for members, teams and leaderboards."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_ATTENTION = "Needs Attention"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class CapacityMetrics:
    """Capacity figures for one team over one sprint.

    Attributes:
        potential_hours: Team size x working days x hours per day.
        actual_hours: Sum of hours over the supplied schedule entries.
        completion_percentage: Rounded actual/potential percentage (unclamped).
        working_days: Working days in the sprint range.
        team_size: Team size used for the calculation.
    """

    potential_hours: float
    actual_hours: float
    completion_percentage: int
    working_days: int
    team_size: int


@dataclass(frozen=True)
class SprintProgress:
    """Time progress of a sprint as observed at one instant.

    Attributes:
        progress_percentage: Elapsed share of the sprint's wall-clock window (0-100).
        days_remaining: Working days strictly between now and the end date.
        is_on_track: Completion meets the time-adjusted expectation.
    """

    progress_percentage: int
    days_remaining: int
    is_on_track: bool


@dataclass(frozen=True)
class SprintAssessment:
    """Metrics, progress and health computed together for one view."""

    date_range: DateRange
    metrics: CapacityMetrics
    progress: SprintProgress
    health: HealthStatus


@dataclass(frozen=True)
class SprintWindow:
    """A detected sprint.

    Attributes:
        number: 1-based sprint number counted from the first sprint.
        date_range: Sprint start and end dates.
        working_dates: Working dates inside the sprint.
        is_current_for_date: True if the target date lies inside the range.
    """

    number: int
    date_range: DateRange
    working_dates: tuple[date, ...]
    is_current_for_date: bool

    @property
    def name(self) -> str:
        return f"Sprint {self.number}"


@dataclass
class TeamMember:
    """A member whose schedule feeds the sprint summaries."""

    id: str
    name: str
    is_manager: bool = False


@dataclass(frozen=True)
class MemberSprintSummary:
    """Capacity summary for one member over one sprint."""

    member_id: str
    member_name: str
    is_manager: bool
    max_possible_hours: float
    actual_hours: float
    utilization_percentage: int
    working_days_filled: int
    total_working_days: int

    @property
    def missing_days(self) -> int:
        """Working days without any entry."""
        return self.total_working_days - self.working_days_filled


@dataclass(frozen=True)
class TeamSprintSummary:
    """Capacity summary aggregated over a team's members."""

    team_id: str
    team_name: str
    total_members: int
    manager_count: int
    max_capacity_hours: float
    actual_hours: float
    utilization_percentage: int
    completion_percentage: int
    utilization_status: UtilizationStatus
    member_summaries: list[MemberSprintSummary] = field(default_factory=list)


class MetricName(Enum):
    """Named measurements kept in metric history."""

    WEEKLY_COMPLETION_RATE = "weekly_completion_rate"
    CONSISTENCY_STREAK = "consistency_streak"
    EARLY_PLANNING_SCORE = "early_planning_score"
    TEAM_COLLABORATION_SCORE = "team_collaboration_score"
    SPRINT_PARTICIPATION_RATE = "sprint_participation_rate"
    SCHEDULE_ACCURACY_SCORE = "schedule_accuracy_score"
    SPRINTS_COMPLETED = "sprints_completed"
    HOURS = "hours"


@dataclass(frozen=True)
class MetricRecord:
    """One measurement of one metric for one user and period.

    Attributes:
        user_id: ID of the measured user.
        metric: Which metric was measured.
        value: Measured value.
        period_start: First date of the measured period.
        period_end: Last date of the measured period (defaults to period_start).
    """

    user_id: str
    metric: MetricName
    value: float
    period_start: date
    period_end: Optional[date] = None

    def __post_init__(self) -> None:
        if self.period_end is None:
            object.__setattr__(self, "period_end", self.period_start)


class Rarity(Enum):
    """Rarity tier of an achievement."""

    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


@dataclass(frozen=True)
class Achievement:
    """An achievement earned by a user.

    Created exactly once per (user, achievement type); the persistence
    layer owns the stored copies.
    """

    id: str
    user_id: str
    achievement_type: str
    earned_at: datetime
    points: int
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass(frozen=True)
class AchievementProgress:
    """How close a user is to an unearned achievement.

    ``progress_percent`` is informational; it never grants partial credit.
    """

    achievement_type: str
    title: str
    current_value: float
    target_value: float
    progress_percent: float


@dataclass(frozen=True)
class RecognitionLevel:
    """A named level reached at a minimum point total."""

    level: int
    title: str
    minimum_points: int
    description: str = ""


@dataclass(frozen=True)
class LevelInfo:
    """A user's level derived from their point total."""

    total_points: int
    current_level: RecognitionLevel
    next_level: Optional[RecognitionLevel]
    points_to_next_level: int


class LeaderboardTimeframe(Enum):
    """Historical window selected for leaderboard queries."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    ALL_TIME = "all-time"


@dataclass(frozen=True)
class LeaderboardCandidate:
    """Input row for ranking.

    Attributes:
        id: User or team ID.
        points: Accumulated points in the timeframe.
        utilization: Utilization percentage in the timeframe.
        streak: Consistency streak, the default tie-break key.
        name: Optional display name.
    """

    id: str
    points: float
    utilization: float = 0.0
    streak: float = 0.0
    name: str = ""


@dataclass(frozen=True)
class LeaderboardEntry:
    """A ranked leaderboard row. Rank is 1-based and unique."""

    id: str
    points: float
    utilization: float
    rank: int
    streak: float = 0.0
    name: str = ""
    previous_rank: Optional[int] = None

    @property
    def rank_change(self) -> Optional[int]:
        """Positive when the entry moved up since the previous ranking."""
        if self.previous_rank is None:
            return None
        return self.previous_rank - self.rank


@dataclass
class TeamRecognitionStats:
    """Recognition totals for a team."""

    team_id: str
    total_members: int
    average_consistency: int
    total_achievements: int
    top_performers: list[LeaderboardEntry] = field(default_factory=list)


@dataclass
class RecognitionProfile:
    """Everything the recognition panel shows for one user."""

    user_id: str
    level: LevelInfo
    achievements: list[Achievement] = field(default_factory=list)
    badges: list[str] = field(default_factory=list)
    average_completion_rate: int = 0
    best_streak: float = 0.0
    rank: Optional[int] = None

    @property
    def total_points(self) -> int:
        return self.level.total_points


@dataclass(frozen=True)
class PerformanceProjection:
    """Forward-looking figures derived from recent weekly completion rates.

    Attributes:
        next_week_completion: Mean of the last three weekly rates, 0-100.
            0 when fewer than three weeks are known.
        achievement_opportunities: Unearned achievement types the user is
            close to.
    """

    next_week_completion: float = 0.0
    achievement_opportunities: tuple[str, ...] = ()


@dataclass(frozen=True)
class PerformanceAnalysis:
    """Insights, recommendations and projections for one user."""

    user_id: str
    average_completion_rate: int
    best_streak: float
    insights: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    projections: PerformanceProjection = PerformanceProjection()
