"""Sprint capacity calculations.

Potential hours, actual hours and completion for a team over a sprint, plus
per-member and per-team summaries built on the same arithmetic.
"""

from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

import structlog

from sprintpulse.analytics.calendar import CalendarResolver
from sprintpulse.domain.errors import InvalidScheduleValueError
from sprintpulse.domain.models import (
    CapacityMetrics,
    DateRange,
    HealthStatus,
    MemberSprintSummary,
    ScheduleEntry,
    ScheduleValue,
    TeamMember,
    TeamSprintSummary,
    UtilizationStatus,
)
from sprintpulse.domain.policies import (
    DefaultHealthPolicy,
    DefaultUtilizationPolicy,
    HealthPolicy,
    UtilizationPolicy,
    percentage,
)

logger = structlog.get_logger(__name__)

DEFAULT_MANAGER_HOURS_PER_DAY = 3.5


def entries_from_rows(
    rows: Iterable[Mapping[str, Any]],
    strict: bool = True,
) -> list[ScheduleEntry]:
    """Build schedule entries from raw rows.

    Each row carries ``member_id``, ``date`` (date or ISO string) and
    ``value`` (one of the schedule codes), with optional ``reason`` and
    ``is_sick``.

    Args:
        rows: Raw rows as stored by the schedule table.
        strict: Raise on unknown value codes. When False, such rows are
            skipped and logged.

    Returns:
        Parsed entries, in input order.
    """
    entries = []
    for row in rows:
        try:
            value = ScheduleValue.from_code(row["value"])
        except InvalidScheduleValueError:
            if strict:
                raise
            logger.warning(
                "Skipping schedule row with unknown value",
                member_id=row.get("member_id"),
                value=row.get("value"),
            )
            continue

        raw_date = row["date"]
        entry_date = date.fromisoformat(raw_date) if isinstance(raw_date, str) else raw_date
        entries.append(
            ScheduleEntry(
                member_id=str(row["member_id"]),
                entry_date=entry_date,
                value=value,
                reason=row.get("reason"),
                is_sick=bool(row.get("is_sick", False)),
            )
        )
    return entries


class CapacityCalculator:
    """Computes capacity metrics for sprints.

    Every view that shows sprint numbers goes through this class, so the
    dashboard, the team modal and the recognition panel agree.

    Example:
        >>> calculator = CapacityCalculator()
        >>> sprint = DateRange.from_iso("2024-01-07", "2024-01-18")
        >>> calculator.calculate_sprint_potential(8, sprint)
        560.0
    """

    def __init__(
        self,
        calendar: Optional[CalendarResolver] = None,
        health_policy: Optional[HealthPolicy] = None,
        utilization_policy: Optional[UtilizationPolicy] = None,
        manager_hours_per_day: float = DEFAULT_MANAGER_HOURS_PER_DAY,
    ):
        """Initialize calculator.

        Args:
            calendar: Calendar resolver (Sunday-Thursday, 7h default).
            health_policy: Health classification ladder.
            utilization_policy: Utilization status bands.
            manager_hours_per_day: Daily capacity credited to managers.
        """
        self.calendar = calendar or CalendarResolver()
        self.health_policy = health_policy or DefaultHealthPolicy()
        self.utilization_policy = utilization_policy or DefaultUtilizationPolicy()
        self.manager_hours_per_day = manager_hours_per_day

    @property
    def work_week(self):
        return self.calendar.work_week

    def calculate_sprint_potential(self, team_size: int, date_range: DateRange) -> float:
        """Team size x working days x hours per day.

        A team size of zero yields zero. A negative team size is treated the
        same way and logged.
        """
        if team_size < 0:
            logger.warning("Negative team size treated as zero", team_size=team_size)
            return 0.0
        working_days = self.calendar.working_days_between(date_range)
        return float(team_size * working_days * self.work_week.hours_per_day)

    def calculate_actual_hours(self, entries: Iterable[ScheduleEntry]) -> float:
        """Sum of entry hours. Entries are not filtered by date."""
        return float(sum(entry.hours(self.work_week) for entry in entries))

    def calculate_completion_percentage(self, actual_hours: float, potential_hours: float) -> int:
        """Rounded actual/potential percentage; 0 when potential is 0. Not clamped."""
        return percentage(actual_hours, potential_hours)

    def calculate_sprint_metrics(
        self,
        team_size: int,
        date_range: DateRange,
        entries: Sequence[ScheduleEntry],
    ) -> CapacityMetrics:
        """Compute all capacity figures for one team and sprint.

        Args:
            team_size: Number of people in the team.
            date_range: Sprint range (inclusive).
            entries: Schedule entries, already filtered to the sprint.

        Returns:
            CapacityMetrics for the sprint.
        """
        working_days = self.calendar.working_days_between(date_range)
        potential = self.calculate_sprint_potential(team_size, date_range)
        actual = self.calculate_actual_hours(entries)
        completion = self.calculate_completion_percentage(actual, potential)

        logger.debug(
            "Calculated sprint metrics",
            team_size=team_size,
            working_days=working_days,
            potential_hours=potential,
            actual_hours=actual,
            completion_percentage=completion,
        )

        return CapacityMetrics(
            potential_hours=potential,
            actual_hours=actual,
            completion_percentage=completion,
            working_days=working_days,
            team_size=team_size,
        )

    def get_health_status(self, completion_percentage: float, days_remaining: int) -> HealthStatus:
        return self.health_policy.classify(completion_percentage, days_remaining)

    def get_utilization_status(self, utilization_percentage: float) -> UtilizationStatus:
        return self.utilization_policy.classify(utilization_percentage)

    def calculate_member_summary(
        self,
        member: TeamMember,
        date_range: DateRange,
        entries: Iterable[ScheduleEntry],
    ) -> MemberSprintSummary:
        """Capacity summary for one member.

        Only the member's entries on working dates inside the range count.
        Managers are credited ``manager_hours_per_day`` per working day.
        """
        working_dates = set(self.calendar.working_dates(date_range))
        own = [
            e for e in entries
            if e.member_id == member.id and e.entry_date in working_dates
        ]

        daily = self.manager_hours_per_day if member.is_manager else self.work_week.hours_per_day
        max_hours = len(working_dates) * daily
        actual = self.calculate_actual_hours(own)

        return MemberSprintSummary(
            member_id=member.id,
            member_name=member.name,
            is_manager=member.is_manager,
            max_possible_hours=max_hours,
            actual_hours=actual,
            utilization_percentage=percentage(actual, max_hours),
            working_days_filled=len({e.entry_date for e in own}),
            total_working_days=len(working_dates),
        )

    def calculate_team_summary(
        self,
        team_id: str,
        team_name: str,
        members: Sequence[TeamMember],
        date_range: DateRange,
        entries: Sequence[ScheduleEntry],
    ) -> TeamSprintSummary:
        """Aggregate member summaries for a team.

        ``completion_percentage`` here is the share of (member, working day)
        cells that have an entry, i.e. how much of the schedule is filled in.
        """
        summaries = [
            self.calculate_member_summary(member, date_range, entries) for member in members
        ]

        max_capacity = sum(s.max_possible_hours for s in summaries)
        actual = sum(s.actual_hours for s in summaries)
        utilization = percentage(actual, max_capacity)
        filled = sum(s.working_days_filled for s in summaries)
        cells = sum(s.total_working_days for s in summaries)

        return TeamSprintSummary(
            team_id=team_id,
            team_name=team_name,
            total_members=len(members),
            manager_count=sum(1 for m in members if m.is_manager),
            max_capacity_hours=max_capacity,
            actual_hours=actual,
            utilization_percentage=utilization,
            completion_percentage=percentage(filled, cells),
            utilization_status=self.get_utilization_status(utilization),
            member_summaries=summaries,
        )
