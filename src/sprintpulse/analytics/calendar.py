"""Working-day arithmetic and sprint detection.

Dates are compared as calendar dates, never as instants, so no timezone
shift can move a day across a boundary.
"""

from datetime import date, datetime, timedelta
from typing import Optional

import structlog

from sprintpulse.domain.errors import InvalidWorkWeekError
from sprintpulse.domain.models import DateRange, SprintWindow, WorkWeekDefinition

logger = structlog.get_logger(__name__)


def _as_date(value: date) -> date:
    return value.date() if isinstance(value, datetime) else value


class CalendarResolver:
    """Resolves working days under a work-week definition.

    Example:
        >>> resolver = CalendarResolver()
        >>> resolver.working_days_between(DateRange.from_iso("2024-01-07", "2024-01-18"))
        10
    """

    def __init__(self, work_week: Optional[WorkWeekDefinition] = None):
        self.work_week = work_week or WorkWeekDefinition()

    def is_working_day(self, d: date) -> bool:
        return self.work_week.is_working_day(_as_date(d))

    def working_dates(self, date_range: DateRange) -> list[date]:
        """Working dates inside the range, in order."""
        return [d for d in date_range.dates() if self.work_week.is_working_day(d)]

    def working_days_between(self, date_range: DateRange) -> int:
        """Count working dates from start to end, both inclusive."""
        count = len(self.working_dates(date_range))
        logger.debug(
            "Counted working days",
            start=date_range.start.isoformat(),
            end=date_range.end.isoformat(),
            working_days=count,
        )
        return count

    def next_working_day(self, d: date) -> date:
        """First working date strictly after ``d``."""
        self._require_working_days()
        current = _as_date(d) + timedelta(days=1)
        while not self.work_week.is_working_day(current):
            current += timedelta(days=1)
        return current

    def sprint_end_date(self, start: date, length_weeks: int) -> date:
        """Date of the last working day of a sprint starting on ``start``.

        A sprint holds ``length_weeks`` weeks' worth of working days. The
        start date counts when it is itself a working day.
        """
        self._require_working_days()
        if length_weeks < 1:
            raise ValueError(f"Sprint length must be at least one week, got {length_weeks}")

        target = length_weeks * self.work_week.days_per_week
        current = _as_date(start)
        counted = 0
        while True:
            if self.work_week.is_working_day(current):
                counted += 1
                if counted == target:
                    return current
            current += timedelta(days=1)

    def _require_working_days(self) -> None:
        if not self.work_week.working_days:
            raise InvalidWorkWeekError("Work week has no working days")


class SprintDetector:
    """Locates the sprint containing a date.

    Sprints are laid end to end from ``first_sprint_start``. Each sprint
    covers ``sprint_length_weeks`` weeks of working days, and the next one
    starts on the first working day after the previous end.

    Example:
        >>> detector = SprintDetector(date(2024, 1, 7))
        >>> detector.detect(date(2024, 1, 22)).name
        'Sprint 2'
    """

    def __init__(
        self,
        first_sprint_start: date,
        sprint_length_weeks: int = 2,
        calendar: Optional[CalendarResolver] = None,
        max_sprints: int = 520,
    ):
        """Initialize detector.

        Args:
            first_sprint_start: Start date of sprint 1.
            sprint_length_weeks: Length of each sprint in weeks.
            calendar: Calendar resolver (Sunday-Thursday default).
            max_sprints: Safety limit on the number of sprints walked.
        """
        self.first_sprint_start = _as_date(first_sprint_start)
        self.sprint_length_weeks = sprint_length_weeks
        self.calendar = calendar or CalendarResolver()
        self.max_sprints = max_sprints

    def detect(self, target: date) -> Optional[SprintWindow]:
        """Find the sprint for ``target``.

        Returns the sprint containing the date, or the upcoming sprint when
        the date falls in the gap between two sprints (``is_current_for_date``
        is False then). Returns None before the first sprint or past the
        safety limit.
        """
        target = _as_date(target)
        if target < self.first_sprint_start:
            return None

        start = self.first_sprint_start
        for number in range(1, self.max_sprints + 1):
            end = self.calendar.sprint_end_date(start, self.sprint_length_weeks)
            if target <= end:
                date_range = DateRange(start, end)
                return SprintWindow(
                    number=number,
                    date_range=date_range,
                    working_dates=tuple(self.calendar.working_dates(date_range)),
                    is_current_for_date=date_range.contains(target),
                )
            start = self.calendar.next_working_day(end)

        logger.warning(
            "Sprint detection hit safety limit",
            target=target.isoformat(),
            max_sprints=self.max_sprints,
        )
        return None

    def sprints(self, count: int) -> list[SprintWindow]:
        """The first ``count`` sprints, in order."""
        windows = []
        start = self.first_sprint_start
        for number in range(1, count + 1):
            end = self.calendar.sprint_end_date(start, self.sprint_length_weeks)
            date_range = DateRange(start, end)
            windows.append(
                SprintWindow(
                    number=number,
                    date_range=date_range,
                    working_dates=tuple(self.calendar.working_dates(date_range)),
                    is_current_for_date=False,
                )
            )
            start = self.calendar.next_working_day(end)
        return windows
