"""Domain models, policies and achievement catalog."""

from sprintpulse.domain.errors import (
    InvalidCatalogError,
    InvalidDateRangeError,
    InvalidScheduleValueError,
    InvalidWorkWeekError,
    SprintPulseError,
)
from sprintpulse.domain.models import (
    Achievement,
    AchievementProgress,
    CapacityMetrics,
    DateRange,
    HealthStatus,
    LeaderboardCandidate,
    LeaderboardEntry,
    LeaderboardTimeframe,
    LevelInfo,
    MemberSprintSummary,
    MetricName,
    MetricRecord,
    PerformanceAnalysis,
    PerformanceProjection,
    Rarity,
    RecognitionLevel,
    RecognitionProfile,
    ScheduleEntry,
    ScheduleValue,
    SprintAssessment,
    SprintProgress,
    SprintWindow,
    TeamMember,
    TeamRecognitionStats,
    TeamSprintSummary,
    UtilizationStatus,
    WorkWeekDefinition,
)
from sprintpulse.domain.policies import (
    DefaultHealthPolicy,
    DefaultOnTrackPolicy,
    DefaultUtilizationPolicy,
    HealthPolicy,
    OnTrackPolicy,
    UtilizationPolicy,
)
from sprintpulse.domain.recognition import (
    AchievementCatalog,
    AchievementCriterion,
    AchievementDefinition,
    Aggregation,
    AllOf,
    ConsecutivePeriods,
    MetricThreshold,
    MilestoneLadder,
    MilestoneStep,
)

__all__ = [
    # Errors
    "InvalidCatalogError",
    "InvalidDateRangeError",
    "InvalidScheduleValueError",
    "InvalidWorkWeekError",
    "SprintPulseError",
    # Models
    "Achievement",
    "AchievementProgress",
    "CapacityMetrics",
    "DateRange",
    "HealthStatus",
    "LeaderboardCandidate",
    "LeaderboardEntry",
    "LeaderboardTimeframe",
    "LevelInfo",
    "MemberSprintSummary",
    "MetricName",
    "MetricRecord",
    "PerformanceAnalysis",
    "PerformanceProjection",
    "Rarity",
    "RecognitionLevel",
    "RecognitionProfile",
    "ScheduleEntry",
    "ScheduleValue",
    "SprintAssessment",
    "SprintProgress",
    "SprintWindow",
    "TeamMember",
    "TeamRecognitionStats",
    "TeamSprintSummary",
    "UtilizationStatus",
    "WorkWeekDefinition",
    # Policies
    "DefaultHealthPolicy",
    "DefaultOnTrackPolicy",
    "DefaultUtilizationPolicy",
    "HealthPolicy",
    "OnTrackPolicy",
    "UtilizationPolicy",
    # Recognition
    "AchievementCatalog",
    "AchievementCriterion",
    "AchievementDefinition",
    "Aggregation",
    "AllOf",
    "ConsecutivePeriods",
    "MetricThreshold",
    "MilestoneLadder",
    "MilestoneStep",
]
