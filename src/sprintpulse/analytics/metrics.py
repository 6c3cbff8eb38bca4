"""Weekly metric snapshots derived from schedule entries."""

from datetime import date, timedelta
from typing import Iterable, Optional

import structlog

from sprintpulse.analytics.calendar import CalendarResolver
from sprintpulse.domain.models import (
    DateRange,
    MetricName,
    MetricRecord,
    ScheduleEntry,
    weekday_index,
)

logger = structlog.get_logger(__name__)

FULL_COMPLETION = 100


def week_start_for(d: date) -> date:
    """Sunday on or before ``d``."""
    return d - timedelta(days=weekday_index(d))


class MetricSnapshotBuilder:
    """Builds the weekly metric records that feed achievement evaluation.

    The engine never writes; the returned records are for the caller to
    persist.
    """

    def __init__(self, calendar: Optional[CalendarResolver] = None):
        self.calendar = calendar or CalendarResolver()

    def weekly_completion_rate(
        self,
        user_id: str,
        entries: Iterable[ScheduleEntry],
        week_start: date,
    ) -> int:
        """Percentage of the week's working days with an entry, rounded down."""
        week = DateRange(week_start, week_start + timedelta(days=6))
        working = set(self.calendar.working_dates(week))
        if not working:
            return 0
        filled = {
            e.entry_date for e in entries
            if e.member_id == user_id and e.entry_date in working
        }
        return len(filled) * 100 // len(working)

    def consistency_streak(
        self,
        user_id: str,
        history: Iterable[MetricRecord],
        week_start: date,
    ) -> int:
        """Consecutive weeks, ending at ``week_start``, with full completion."""
        rates: dict[date, float] = {}
        for record in history:
            if record.user_id == user_id and record.metric == MetricName.WEEKLY_COMPLETION_RATE:
                rates[record.period_start] = record.value

        streak = 0
        current = week_start
        while rates.get(current, 0) >= FULL_COMPLETION:
            streak += 1
            current -= timedelta(days=7)
        return streak

    def build(
        self,
        user_id: str,
        entries: Iterable[ScheduleEntry],
        history: Iterable[MetricRecord],
        week_start: date,
    ) -> list[MetricRecord]:
        """Completion-rate and streak records for one user and week.

        The streak takes this week's completion rate into account, so the
        caller does not need to persist it first.
        """
        week_end = week_start + timedelta(days=6)
        rate = self.weekly_completion_rate(user_id, entries, week_start)
        rate_record = MetricRecord(
            user_id=user_id,
            metric=MetricName.WEEKLY_COMPLETION_RATE,
            value=float(rate),
            period_start=week_start,
            period_end=week_end,
        )

        streak = self.consistency_streak(user_id, [*history, rate_record], week_start)

        logger.debug(
            "Built weekly snapshot",
            user_id=user_id,
            week_start=week_start.isoformat(),
            completion_rate=rate,
            streak=streak,
        )

        return [
            rate_record,
            MetricRecord(
                user_id=user_id,
                metric=MetricName.CONSISTENCY_STREAK,
                value=float(streak),
                period_start=week_start,
                period_end=week_end,
            ),
        ]
