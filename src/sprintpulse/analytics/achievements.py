"""Achievement evaluation and recognition levels.

The evaluator holds no state of its own. Whatever has already been earned
is passed in by the caller, who owns the persisted set and stores the
returned achievements.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Iterable, Optional, Sequence

import structlog

from sprintpulse.domain.catalog import DEFAULT_CATALOG, RECOGNITION_LEVELS
from sprintpulse.domain.models import (
    Achievement,
    AchievementProgress,
    LevelInfo,
    MetricName,
    MetricRecord,
    PerformanceAnalysis,
    PerformanceProjection,
    RecognitionLevel,
    RecognitionProfile,
)
from sprintpulse.domain.policies import round_half_away_from_zero
from sprintpulse.domain.recognition import AchievementCatalog

logger = structlog.get_logger(__name__)


def total_points(achievements: Iterable[Achievement]) -> int:
    """Plain sum of earned points; no decay or weighting."""
    return sum(a.points for a in achievements)


def calculate_level(
    points: int,
    levels: Sequence[RecognitionLevel] = RECOGNITION_LEVELS,
) -> LevelInfo:
    """Highest level whose minimum is reached, and the distance to the next one."""
    ordered = sorted(levels, key=lambda lvl: lvl.minimum_points)
    current = ordered[0]
    next_level = None
    for level in ordered:
        if points >= level.minimum_points:
            current = level
        else:
            next_level = level
            break

    return LevelInfo(
        total_points=points,
        current_level=current,
        next_level=next_level,
        points_to_next_level=next_level.minimum_points - points if next_level else 0,
    )


def _as_datetime(as_of: Optional[date]) -> datetime:
    if as_of is None:
        return datetime.now()
    if isinstance(as_of, datetime):
        return as_of
    return datetime.combine(as_of, time.min)


def achievement_id(user_id: str, achievement_type: str) -> str:
    """Stable ID for the single instance of a type a user can earn."""
    return f"{user_id}:{achievement_type}"


@dataclass
class RecognitionContext:
    """Per-user recognition state handed to the evaluator.

    Attributes:
        user_id: ID of the user.
        history: Metric history, as loaded from storage.
        earned: Achievements already earned, as loaded from storage.
    """

    user_id: str
    history: list[MetricRecord] = field(default_factory=list)
    earned: list[Achievement] = field(default_factory=list)

    @property
    def earned_types(self) -> set[str]:
        return {a.achievement_type for a in self.earned}

    @property
    def total_points(self) -> int:
        return total_points(self.earned)


def _metric_values(context: RecognitionContext, metric: MetricName) -> list[float]:
    """The user's values for one metric, oldest period first."""
    records = sorted(
        (r for r in context.history if r.user_id == context.user_id and r.metric == metric),
        key=lambda r: r.period_start,
    )
    return [r.value for r in records]


def _average(values: Sequence[float]) -> int:
    return round_half_away_from_zero(sum(values) / len(values)) if values else 0


class AchievementEvaluator:
    """Determines newly earned achievements from metric history.

    Example:
        >>> evaluator = AchievementEvaluator()
        >>> new = evaluator.evaluate("u1", history, already_earned_types={"early_planner"})
        >>> [a.achievement_type for a in new]
        ['consistent_updater']
    """

    def __init__(
        self,
        catalog: Optional[AchievementCatalog] = None,
        levels: Sequence[RecognitionLevel] = RECOGNITION_LEVELS,
    ):
        """Initialize evaluator.

        Args:
            catalog: Achievement catalog (default catalog with milestone ladders).
            levels: Recognition levels used for level calculation.
        """
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.levels = tuple(levels)

    def evaluate(
        self,
        user_id: str,
        history: Iterable[MetricRecord],
        catalog: Optional[AchievementCatalog] = None,
        already_earned_types: Iterable[str] = (),
        as_of: Optional[date] = None,
    ) -> list[Achievement]:
        """Return achievements newly satisfied by the history.

        Args:
            user_id: User being evaluated. Records of other users are ignored.
            history: Metric history.
            catalog: Catalog to evaluate (defaults to the evaluator's catalog).
            already_earned_types: Types the user already holds; never re-awarded.
            as_of: Evaluation instant, also used as ``earned_at``. A plain date
                means midnight. Defaults to now.

        Returns:
            New achievements in catalog order, at most one per type.
        """
        catalog = catalog if catalog is not None else self.catalog
        as_of = _as_datetime(as_of)
        earned = set(already_earned_types)
        own = [r for r in history if r.user_id == user_id]

        awarded = []
        for definition in catalog:
            if definition.achievement_type in earned:
                continue
            window = definition.window(own, as_of.date())
            if not definition.criterion.is_satisfied(window):
                continue

            earned.add(definition.achievement_type)
            awarded.append(
                Achievement(
                    id=achievement_id(user_id, definition.achievement_type),
                    user_id=user_id,
                    achievement_type=definition.achievement_type,
                    earned_at=as_of,
                    points=definition.points,
                    metadata={
                        "title": definition.title,
                        "rarity": definition.rarity.value,
                        "value": definition.criterion.current_value(window),
                    },
                )
            )

        if awarded:
            logger.info(
                "Awarded achievements",
                user_id=user_id,
                achievement_types=[a.achievement_type for a in awarded],
                points=total_points(awarded),
            )
        return awarded

    def evaluate_context(
        self,
        context: RecognitionContext,
        as_of: Optional[date] = None,
    ) -> list[Achievement]:
        """Evaluate a context and append the new achievements to it."""
        awarded = self.evaluate(
            context.user_id,
            context.history,
            already_earned_types=context.earned_types,
            as_of=as_of,
        )
        context.earned.extend(awarded)
        return awarded

    def progress_toward(
        self,
        user_id: str,
        history: Iterable[MetricRecord],
        catalog: Optional[AchievementCatalog] = None,
        already_earned_types: Iterable[str] = (),
        as_of: Optional[date] = None,
    ) -> list[AchievementProgress]:
        """Progress toward every unearned achievement. Grants nothing."""
        catalog = catalog if catalog is not None else self.catalog
        as_of = _as_datetime(as_of)
        earned = set(already_earned_types)
        own = [r for r in history if r.user_id == user_id]

        progress = []
        for definition in catalog:
            if definition.achievement_type in earned:
                continue
            window = definition.window(own, as_of.date())
            current = definition.criterion.current_value(window)
            target = definition.criterion.target_value
            progress.append(
                AchievementProgress(
                    achievement_type=definition.achievement_type,
                    title=definition.title,
                    current_value=current,
                    target_value=target,
                    progress_percent=current / target * 100,
                )
            )
        return progress

    def total_points(self, achievements: Iterable[Achievement]) -> int:
        return total_points(achievements)

    def calculate_level(self, points: int) -> LevelInfo:
        return calculate_level(points, self.levels)

    def build_profile(
        self,
        context: RecognitionContext,
        rank: Optional[int] = None,
    ) -> RecognitionProfile:
        """Summarize a user's recognition state for display."""
        rates = _metric_values(context, MetricName.WEEKLY_COMPLETION_RATE)
        streaks = _metric_values(context, MetricName.CONSISTENCY_STREAK)

        badges = []
        for achievement in context.earned:
            definition = self.catalog.get(achievement.achievement_type)
            badges.append(definition.title if definition else achievement.achievement_type)

        return RecognitionProfile(
            user_id=context.user_id,
            level=self.calculate_level(context.total_points),
            achievements=list(context.earned),
            badges=badges,
            average_completion_rate=_average(rates),
            best_streak=max(streaks, default=0.0),
            rank=rank,
        )

    def analyze_performance(self, context: RecognitionContext) -> PerformanceAnalysis:
        """Derive insights, recommendations and projections from a user's history.

        The trend compares the first and last of the three most recent
        weekly completion rates. Opportunities name unearned achievements
        the user is close to.

        Args:
            context: User history and earned achievements.

        Returns:
            PerformanceAnalysis for the user.
        """
        rates = _metric_values(context, MetricName.WEEKLY_COMPLETION_RATE)
        average = _average(rates)
        best_streak = max(_metric_values(context, MetricName.CONSISTENCY_STREAK), default=0.0)
        recent = rates[-3:]

        insights = []
        if average >= 90:
            insights.append("Excellent consistency in availability updates")
        elif average >= 70:
            insights.append("Good planning habits with room for improvement")
        else:
            insights.append("Opportunity to improve consistency in planning")

        if best_streak >= 5:
            insights.append("Outstanding reliability streak - keep it up!")
        elif best_streak >= 3:
            insights.append("Building good consistency habits")

        if len(context.earned) >= 10:
            insights.append("High achiever in the recognition system")

        recommendations = []
        if average < 80:
            recommendations.append("Try to update your schedule every day to build consistency")
        if best_streak < 3:
            recommendations.append("Focus on maintaining weekly updates to build a streak")
        if len(recent) == 3:
            change = recent[-1] - recent[0]
            if change < 0:
                recommendations.append(
                    "Your consistency has declined recently - try to get back on track"
                )
            elif change > 0:
                recommendations.append("Great improvement in consistency - keep the momentum!")

        earned = context.earned_types
        opportunities = []
        if average >= 85 and "consistent_updater" not in earned:
            opportunities.append("consistent_updater")
        if best_streak >= 2 and "reliability_streak" not in earned:
            opportunities.append("reliability_streak")

        prediction = min(100.0, max(0.0, sum(recent) / 3)) if len(recent) == 3 else 0.0

        logger.debug(
            "Analyzed performance",
            user_id=context.user_id,
            average_completion_rate=average,
            best_streak=best_streak,
            weeks=len(rates),
        )

        return PerformanceAnalysis(
            user_id=context.user_id,
            average_completion_rate=average,
            best_streak=best_streak,
            insights=tuple(insights),
            recommendations=tuple(recommendations),
            projections=PerformanceProjection(
                next_week_completion=prediction,
                achievement_opportunities=tuple(opportunities),
            ),
        )
