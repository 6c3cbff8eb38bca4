"""Leaderboard ranking and timeframe windows.

Ranking itself is timeframe-agnostic: callers select the window with
``timeframe_period`` / ``filter_records`` and rank whatever they built.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Mapping, Optional, Sequence, TypeVar, Union

import structlog

from sprintpulse.domain.models import (
    Achievement,
    DateRange,
    LeaderboardCandidate,
    LeaderboardEntry,
    LeaderboardTimeframe,
    MetricName,
    MetricRecord,
    TeamRecognitionStats,
)
from sprintpulse.domain.policies import round_half_away_from_zero

logger = structlog.get_logger(__name__)

Record = TypeVar("Record", MetricRecord, Achievement)
SecondaryKey = Callable[[LeaderboardCandidate], float]


def by_streak(candidate: LeaderboardCandidate) -> float:
    return candidate.streak


def by_utilization(candidate: LeaderboardCandidate) -> float:
    return candidate.utilization


def timeframe_period(
    timeframe: Union[LeaderboardTimeframe, str],
    today: date,
) -> Optional[DateRange]:
    """Calendar window for a timeframe, or None for all-time.

    Weeks run Monday to Sunday; months and quarters are calendar months
    and quarters.
    """
    timeframe = LeaderboardTimeframe(timeframe)
    if isinstance(today, datetime):
        today = today.date()

    if timeframe == LeaderboardTimeframe.WEEK:
        start = today - timedelta(days=today.weekday())
        return DateRange(start, start + timedelta(days=6))

    if timeframe == LeaderboardTimeframe.MONTH:
        start = today.replace(day=1)
        return DateRange(start, _month_end(start.year, start.month))

    if timeframe == LeaderboardTimeframe.QUARTER:
        first_month = (today.month - 1) // 3 * 3 + 1
        start = date(today.year, first_month, 1)
        return DateRange(start, _month_end(today.year, first_month + 2))

    return None


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year, 12, 31)
    return date(year, month + 1, 1) - timedelta(days=1)


def _record_date(record: Union[MetricRecord, Achievement]) -> date:
    if isinstance(record, Achievement):
        return record.earned_at.date()
    return record.period_start


def filter_records(
    records: Iterable[Record],
    timeframe: Union[LeaderboardTimeframe, str],
    today: date,
) -> list[Record]:
    """Keep metric records (by period start) or achievements (by earn date) in the window."""
    period = timeframe_period(timeframe, today)
    if period is None:
        return list(records)
    return [r for r in records if period.contains(_record_date(r))]


class LeaderboardAggregator:
    """Ranks users or teams.

    Order is points descending, then the secondary key descending, then the
    input order. Ranks are 1..n with no shared ranks.

    Example:
        >>> aggregator = LeaderboardAggregator()
        >>> entries = aggregator.rank([
        ...     LeaderboardCandidate("a", points=100, streak=2),
        ...     LeaderboardCandidate("b", points=100, streak=5),
        ... ])
        >>> [(e.id, e.rank) for e in entries]
        [('b', 1), ('a', 2)]
    """

    def __init__(self, secondary_key: Optional[SecondaryKey] = None):
        self.secondary_key = secondary_key or by_streak

    def rank(
        self,
        candidates: Sequence[LeaderboardCandidate],
        timeframe: Optional[Union[LeaderboardTimeframe, str]] = None,
        previous_ranks: Optional[Mapping[str, int]] = None,
    ) -> list[LeaderboardEntry]:
        """Rank candidates.

        Args:
            candidates: Rows to rank, already aggregated for the timeframe.
            timeframe: Window the rows were built for. Only logged.
            previous_ranks: Ranks from an earlier ranking, by ID, to fill
                ``previous_rank``.

        Returns:
            Entries in rank order.
        """
        previous_ranks = previous_ranks or {}
        # sorted() is stable, so equal keys keep input order
        ordered = sorted(
            candidates,
            key=lambda c: (-c.points, -self.secondary_key(c)),
        )

        entries = [
            LeaderboardEntry(
                id=c.id,
                points=c.points,
                utilization=c.utilization,
                rank=position,
                streak=c.streak,
                name=c.name,
                previous_rank=previous_ranks.get(c.id),
            )
            for position, c in enumerate(ordered, start=1)
        ]

        logger.debug(
            "Ranked leaderboard",
            timeframe=LeaderboardTimeframe(timeframe).value if timeframe else None,
            entries=len(entries),
        )
        return entries

    def build_candidates(
        self,
        user_ids: Sequence[str],
        achievements: Iterable[Achievement],
        history: Iterable[MetricRecord],
        timeframe: Union[LeaderboardTimeframe, str],
        today: date,
        names: Optional[Mapping[str, str]] = None,
    ) -> list[LeaderboardCandidate]:
        """Aggregate per-user rows for a timeframe.

        Points are achievement points earned in the window, utilization is
        the mean weekly completion rate in the window, and streak is the
        latest consistency streak in the window.
        """
        names = names or {}
        achievements = filter_records(achievements, timeframe, today)
        history = filter_records(history, timeframe, today)

        candidates = []
        for user_id in user_ids:
            points = sum(a.points for a in achievements if a.user_id == user_id)
            rates = [
                r.value for r in history
                if r.user_id == user_id and r.metric == MetricName.WEEKLY_COMPLETION_RATE
            ]
            streaks = sorted(
                (
                    r for r in history
                    if r.user_id == user_id and r.metric == MetricName.CONSISTENCY_STREAK
                ),
                key=lambda r: r.period_start,
            )
            candidates.append(
                LeaderboardCandidate(
                    id=user_id,
                    points=points,
                    utilization=(
                        round_half_away_from_zero(sum(rates) / len(rates)) if rates else 0
                    ),
                    streak=streaks[-1].value if streaks else 0,
                    name=names.get(user_id, ""),
                )
            )
        return candidates

    def team_stats(
        self,
        team_id: str,
        members: Sequence[LeaderboardCandidate],
        achievements: Iterable[Achievement],
        top_n: int = 3,
    ) -> TeamRecognitionStats:
        """Recognition totals for a team.

        Average consistency is the rounded mean of member utilization.
        """
        member_ids = {m.id for m in members}
        ranked = self.rank(members)
        average = (
            round_half_away_from_zero(sum(m.utilization for m in members) / len(members))
            if members
            else 0
        )
        return TeamRecognitionStats(
            team_id=team_id,
            total_members=len(members),
            average_consistency=average,
            total_achievements=sum(1 for a in achievements if a.user_id in member_ids),
            top_performers=ranked[:top_n],
        )
