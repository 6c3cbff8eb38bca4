"""Achievement definitions, criteria and milestone ladders.

Criteria are small predicate objects evaluated against a user's metric
history. Each criterion also reports a current value and a target value so
the same object drives both awarding and progress display.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Iterable, Iterator, Optional, Sequence

from sprintpulse.domain.errors import InvalidCatalogError
from sprintpulse.domain.models import MetricName, MetricRecord, Rarity


class Aggregation(Enum):
    """How a metric's records are folded into one value."""

    LATEST = "latest"  # Value of the most recent period
    MAX = "max"  # Best value seen
    SUM = "sum"  # Running total (e.g., hours)
    COUNT = "count"  # Number of records


def records_for(history: Iterable[MetricRecord], metric: MetricName) -> list[MetricRecord]:
    """Records of one metric, ordered by period start (stable for ties)."""
    return sorted(
        (r for r in history if r.metric == metric),
        key=lambda r: r.period_start,
    )


def aggregate(records: Sequence[MetricRecord], aggregation: Aggregation) -> float:
    """Fold metric records into a single value. Empty input yields 0."""
    if not records:
        return 0.0
    if aggregation == Aggregation.LATEST:
        latest = max(r.period_start for r in records)
        # Last record wins when several share the latest period
        return [r for r in records if r.period_start == latest][-1].value
    if aggregation == Aggregation.MAX:
        return max(r.value for r in records)
    if aggregation == Aggregation.SUM:
        return sum(r.value for r in records)
    return float(len(records))


class AchievementCriterion(ABC):
    """Abstract base class for achievement criteria."""

    @abstractmethod
    def current_value(self, history: Sequence[MetricRecord]) -> float:
        """Value the user has reached, computed from the given history."""
        pass

    @property
    @abstractmethod
    def target_value(self) -> float:
        """Value at which the criterion is satisfied."""
        pass

    def is_satisfied(self, history: Sequence[MetricRecord]) -> bool:
        """Check if the history satisfies this criterion."""
        return self.current_value(history) >= self.target_value


@dataclass(frozen=True)
class MetricThreshold(AchievementCriterion):
    """Aggregated metric value must reach a threshold.

    Attributes:
        metric: Metric to read.
        threshold: Value to reach.
        aggregation: How records are folded (latest by default).
    """

    metric: MetricName
    threshold: float
    aggregation: Aggregation = Aggregation.LATEST

    def current_value(self, history: Sequence[MetricRecord]) -> float:
        return aggregate(records_for(history, self.metric), self.aggregation)

    @property
    def target_value(self) -> float:
        return self.threshold


@dataclass(frozen=True)
class ConsecutivePeriods(AchievementCriterion):
    """A run of adjacent periods, ending at the latest one, at or above a threshold.

    Attributes:
        metric: Metric to read.
        threshold: Minimum value each period must reach.
        periods: Length of the run required.
        period_days: Spacing between adjacent period starts.
    """

    metric: MetricName
    threshold: float
    periods: int
    period_days: int = 7

    def current_value(self, history: Sequence[MetricRecord]) -> float:
        by_period: dict[date, float] = {}
        for record in records_for(history, self.metric):
            by_period[record.period_start] = record.value

        run = 0
        expected: Optional[date] = None
        for period_start in sorted(by_period, reverse=True):
            if expected is not None and period_start != expected:
                break
            if by_period[period_start] < self.threshold:
                break
            run += 1
            expected = period_start - timedelta(days=self.period_days)
        return float(run)

    @property
    def target_value(self) -> float:
        return float(self.periods)


@dataclass(frozen=True)
class AllOf(AchievementCriterion):
    """Every sub-criterion must hold. Progress counts satisfied parts."""

    criteria: tuple[AchievementCriterion, ...]

    def current_value(self, history: Sequence[MetricRecord]) -> float:
        return float(sum(1 for c in self.criteria if c.is_satisfied(history)))

    @property
    def target_value(self) -> float:
        return float(len(self.criteria))

    def is_satisfied(self, history: Sequence[MetricRecord]) -> bool:
        return all(c.is_satisfied(history) for c in self.criteria)


@dataclass(frozen=True)
class AchievementDefinition:
    """Static catalog entry for an achievement.

    Attributes:
        achievement_type: Unique ID of the achievement (e.g., "perfect_week").
        title: Display title.
        criterion: Predicate evaluated against metric history.
        points: Points granted when earned.
        rarity: Rarity tier.
        description: Display description.
        lookback_days: Only records whose period started within this many
            days before the evaluation date are considered. None = all history.
    """

    achievement_type: str
    title: str
    criterion: AchievementCriterion
    points: int
    rarity: Rarity = Rarity.COMMON
    description: str = ""
    lookback_days: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.achievement_type:
            raise InvalidCatalogError("Achievement type must not be empty")
        if self.points < 0:
            raise InvalidCatalogError(
                f"Achievement {self.achievement_type!r} has negative points",
                details={"achievement_type": self.achievement_type, "points": self.points},
            )
        if self.criterion.target_value <= 0:
            raise InvalidCatalogError(
                f"Achievement {self.achievement_type!r} needs a positive target",
                details={"achievement_type": self.achievement_type},
            )
        if self.lookback_days is not None and self.lookback_days < 0:
            raise InvalidCatalogError(
                f"Achievement {self.achievement_type!r} has a negative lookback",
                details={"achievement_type": self.achievement_type},
            )

    def window(self, history: Iterable[MetricRecord], as_of: date) -> list[MetricRecord]:
        """Records inside this definition's lookback window, up to ``as_of``."""
        earliest = None
        if self.lookback_days is not None:
            earliest = as_of - timedelta(days=self.lookback_days)
        return [
            r
            for r in history
            if r.period_start <= as_of and (earliest is None or r.period_start >= earliest)
        ]


@dataclass(frozen=True)
class MilestoneStep:
    """One rung of a milestone ladder."""

    threshold: float
    title: str
    points: int
    rarity: Rarity = Rarity.COMMON


@dataclass(frozen=True)
class MilestoneLadder:
    """A monotonically increasing counter with fixed milestones.

    Every step whose threshold is at or below the current value is
    satisfied, so a jump from 0 to 20 satisfies all steps up to 20 at once.

    Attributes:
        key: Prefix for generated achievement types (e.g., "sprints").
        metric: Counter metric.
        steps: Milestone steps; stored sorted by threshold.
        aggregation: How the counter is read from history.
    """

    key: str
    metric: MetricName
    steps: tuple[MilestoneStep, ...]
    aggregation: Aggregation = Aggregation.MAX

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "steps", tuple(sorted(self.steps, key=lambda s: s.threshold))
        )

    def achievement_type(self, step: MilestoneStep) -> str:
        return f"{self.key}-{step.threshold:g}"

    def satisfied_steps(self, value: float) -> list[MilestoneStep]:
        """All steps reached at ``value``."""
        return [s for s in self.steps if s.threshold <= value]

    def next_step(self, value: float) -> Optional[MilestoneStep]:
        """First step not yet reached, or None at the top of the ladder."""
        for step in self.steps:
            if step.threshold > value:
                return step
        return None

    def definitions(self) -> tuple[AchievementDefinition, ...]:
        """One achievement definition per step."""
        return tuple(
            AchievementDefinition(
                achievement_type=self.achievement_type(step),
                title=step.title,
                criterion=MetricThreshold(self.metric, step.threshold, self.aggregation),
                points=step.points,
                rarity=step.rarity,
            )
            for step in self.steps
        )


@dataclass(frozen=True)
class AchievementCatalog:
    """Ordered, immutable set of achievement definitions with unique types."""

    definitions: tuple[AchievementDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "definitions", tuple(self.definitions))
        seen: set[str] = set()
        for definition in self.definitions:
            if definition.achievement_type in seen:
                raise InvalidCatalogError(
                    f"Duplicate achievement type {definition.achievement_type!r}",
                    details={"achievement_type": definition.achievement_type},
                )
            seen.add(definition.achievement_type)

    @classmethod
    def build(
        cls,
        definitions: Iterable[AchievementDefinition] = (),
        ladders: Iterable[MilestoneLadder] = (),
    ) -> "AchievementCatalog":
        """Combine plain definitions with the definitions of milestone ladders."""
        combined = list(definitions)
        for ladder in ladders:
            combined.extend(ladder.definitions())
        return cls(tuple(combined))

    def __iter__(self) -> Iterator[AchievementDefinition]:
        return iter(self.definitions)

    def __len__(self) -> int:
        return len(self.definitions)

    def get(self, achievement_type: str) -> Optional[AchievementDefinition]:
        for definition in self.definitions:
            if definition.achievement_type == achievement_type:
                return definition
        return None

    def points_for(self, achievement_type: str) -> int:
        """Points of a type, 0 if the type is not in the catalog."""
        definition = self.get(achievement_type)
        return definition.points if definition else 0
