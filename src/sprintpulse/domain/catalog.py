"""Default achievement catalog, milestone ladders and recognition levels."""

from sprintpulse.domain.models import MetricName, Rarity, RecognitionLevel
from sprintpulse.domain.recognition import (
    AchievementCatalog,
    AchievementDefinition,
    Aggregation,
    AllOf,
    ConsecutivePeriods,
    MetricThreshold,
    MilestoneLadder,
    MilestoneStep,
)

WEEKLY_LOOKBACK_DAYS = 7

CONSISTENT_UPDATER = AchievementDefinition(
    achievement_type="consistent_updater",
    title="Consistent Updater",
    description="Updated availability every day this week",
    criterion=MetricThreshold(MetricName.WEEKLY_COMPLETION_RATE, 100),
    points=50,
    rarity=Rarity.COMMON,
    lookback_days=WEEKLY_LOOKBACK_DAYS,
)

EARLY_PLANNER = AchievementDefinition(
    achievement_type="early_planner",
    title="Early Planner",
    description="Planned next week before Friday",
    criterion=MetricThreshold(MetricName.EARLY_PLANNING_SCORE, 3),
    points=75,
    rarity=Rarity.RARE,
    lookback_days=WEEKLY_LOOKBACK_DAYS,
)

PERFECT_WEEK = AchievementDefinition(
    achievement_type="perfect_week",
    title="Perfect Week",
    description="Complete and accurate week planning",
    criterion=AllOf(
        (
            MetricThreshold(MetricName.WEEKLY_COMPLETION_RATE, 100),
            MetricThreshold(MetricName.EARLY_PLANNING_SCORE, 3),
        )
    ),
    points=100,
    rarity=Rarity.RARE,
    lookback_days=WEEKLY_LOOKBACK_DAYS,
)

TEAM_HELPER = AchievementDefinition(
    achievement_type="team_helper",
    title="Team Helper",
    description="Helped team members with planning",
    criterion=MetricThreshold(
        MetricName.TEAM_COLLABORATION_SCORE, 5, aggregation=Aggregation.SUM
    ),
    points=150,
    rarity=Rarity.EPIC,
    lookback_days=30,
)

SPRINT_CHAMPION = AchievementDefinition(
    achievement_type="sprint_champion",
    title="Sprint Champion",
    description="Completed sprint planning perfectly",
    criterion=ConsecutivePeriods(MetricName.WEEKLY_COMPLETION_RATE, 100, periods=2),
    points=200,
    rarity=Rarity.EPIC,
    lookback_days=28,
)

RELIABILITY_STREAK = AchievementDefinition(
    achievement_type="reliability_streak",
    title="Reliability Streak",
    description="Consistent updates for multiple weeks",
    criterion=MetricThreshold(MetricName.CONSISTENCY_STREAK, 3),
    points=300,
    rarity=Rarity.LEGENDARY,
)

SPRINT_MILESTONES = MilestoneLadder(
    key="sprints",
    metric=MetricName.SPRINTS_COMPLETED,
    steps=(
        MilestoneStep(1, "First Sprint", 25, Rarity.COMMON),
        MilestoneStep(5, "Regular Contributor", 50, Rarity.COMMON),
        MilestoneStep(15, "Experienced Member", 100, Rarity.RARE),
        MilestoneStep(50, "Sprint Veteran", 250, Rarity.EPIC),
        MilestoneStep(100, "Sprint Master", 500, Rarity.LEGENDARY),
    ),
)

STREAK_MILESTONES = MilestoneLadder(
    key="streak",
    metric=MetricName.CONSISTENCY_STREAK,
    steps=(
        MilestoneStep(3, "Getting Started", 30, Rarity.COMMON),
        MilestoneStep(7, "One Month Strong", 70, Rarity.RARE),
        MilestoneStep(15, "Quarter Champion", 150, Rarity.RARE),
        MilestoneStep(30, "Half Year Hero", 300, Rarity.EPIC),
        MilestoneStep(52, "Annual Legend", 520, Rarity.LEGENDARY),
    ),
)

HOURS_MILESTONES = MilestoneLadder(
    key="hours",
    metric=MetricName.HOURS,
    aggregation=Aggregation.SUM,
    steps=(
        MilestoneStep(100, "Century Mark", 50, Rarity.COMMON),
        MilestoneStep(500, "Power Contributor", 200, Rarity.RARE),
        MilestoneStep(1000, "Thousand Club", 400, Rarity.EPIC),
        MilestoneStep(2500, "Elite Performer", 750, Rarity.LEGENDARY),
    ),
)

DEFAULT_ACHIEVEMENTS = (
    CONSISTENT_UPDATER,
    EARLY_PLANNER,
    PERFECT_WEEK,
    TEAM_HELPER,
    SPRINT_CHAMPION,
    RELIABILITY_STREAK,
)

DEFAULT_MILESTONE_LADDERS = (SPRINT_MILESTONES, STREAK_MILESTONES, HOURS_MILESTONES)

DEFAULT_CATALOG = AchievementCatalog.build(DEFAULT_ACHIEVEMENTS, DEFAULT_MILESTONE_LADDERS)

RECOGNITION_LEVELS = (
    RecognitionLevel(1, "Newcomer", 0, "Just getting started with recognition"),
    RecognitionLevel(2, "Consistent Contributor", 500, "Building good planning habits"),
    RecognitionLevel(3, "Reliable Planner", 1500, "Demonstrating planning excellence"),
    RecognitionLevel(4, "Planning Master", 3000, "Setting the standard for the team"),
    RecognitionLevel(5, "Recognition Legend", 5000, "The ultimate planning champion"),
)
