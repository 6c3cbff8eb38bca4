"""Command-line interface for the SprintPulse analytics engine."""

import argparse
import sys
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

import structlog
from pydantic import ValidationError

from sprintpulse.analytics.achievements import AchievementEvaluator, RecognitionContext
from sprintpulse.analytics.calendar import CalendarResolver, SprintDetector
from sprintpulse.analytics.capacity import CapacityCalculator
from sprintpulse.analytics.leaderboard import LeaderboardAggregator
from sprintpulse.analytics.metrics import MetricSnapshotBuilder, week_start_for
from sprintpulse.analytics.progress import ProgressTracker
from sprintpulse.config.logging_config import configure_logging
from sprintpulse.config.settings import EngineSettings, get_settings
from sprintpulse.domain.errors import SprintPulseError
from sprintpulse.domain.models import (
    DateRange,
    LeaderboardTimeframe,
    MetricName,
    MetricRecord,
    ScheduleEntry,
    ScheduleValue,
    TeamMember,
)
from sprintpulse.validation.validator import InputValidator

logger = structlog.get_logger(__name__)

SAMPLE_NAMES = [
    "Alice", "Bob", "Carol", "David", "Eve", "Frank", "Grace", "Henry",
    "Ivy", "Jack", "Kate", "Leo", "Mia", "Noah", "Olivia", "Paul",
]


def create_sample_members(count: int = 8) -> list[TeamMember]:
    """Create sample team members. The first member is the manager."""
    members = []
    for i in range(count):
        name = SAMPLE_NAMES[i % len(SAMPLE_NAMES)]
        if i >= len(SAMPLE_NAMES):
            name = f"{name}{i // len(SAMPLE_NAMES) + 1}"
        members.append(TeamMember(id=f"M{i + 1:03d}", name=name, is_manager=i == 0))
    return members


def create_sample_entries(
    members: Sequence[TeamMember],
    working_dates: Sequence[date],
    fill_ratio: float = 0.8,
) -> list[ScheduleEntry]:
    """Create deterministic sample entries covering ``fill_ratio`` of the cells."""
    entries = []
    cells = [(m, d) for m in members for d in working_dates]
    filled = int(len(cells) * fill_ratio)
    for i, (member, d) in enumerate(cells[:filled]):
        # Mostly full days, some half days, occasional absence
        if i % 11 == 0:
            value = ScheduleValue.ABSENT
        elif i % 4 == 0:
            value = ScheduleValue.HALF
        else:
            value = ScheduleValue.FULL
        entries.append(
            ScheduleEntry(
                member_id=member.id,
                entry_date=d,
                value=value,
                reason="Vacation" if value == ScheduleValue.ABSENT else None,
            )
        )
    return entries


def run_capacity(
    settings: EngineSettings,
    team_size: int,
    start: date,
    end: date,
    fill_ratio: float,
    now: datetime,
) -> None:
    """Compute and print capacity, progress and health for a sample team."""
    calendar = CalendarResolver(settings.work_week())
    calculator = CapacityCalculator(
        calendar=calendar,
        manager_hours_per_day=settings.manager_hours_per_day,
    )
    tracker = ProgressTracker(capacity_calculator=calculator)

    members = create_sample_members(team_size)
    sprint = DateRange(start, end)
    entries = create_sample_entries(members, calendar.working_dates(sprint), fill_ratio)

    validation = InputValidator().validate(team_size, start, end, entries)
    for warning in validation.warnings:
        print(f"  Warning: {warning}")

    assessment = tracker.assess(team_size, sprint, entries, now)
    metrics = assessment.metrics
    progress = assessment.progress

    print(f"Sprint {sprint.start.isoformat()} .. {sprint.end.isoformat()}")
    print(f"  Working days: {metrics.working_days}")
    print(f"  Potential hours: {metrics.potential_hours:g}")
    print(f"  Actual hours: {metrics.actual_hours:g}")
    print(f"  Completion: {metrics.completion_percentage}%")
    print(f"  Time elapsed: {progress.progress_percentage}%")
    print(f"  Days remaining: {progress.days_remaining}")
    print(f"  On track: {'yes' if progress.is_on_track else 'no'}")
    print(f"  Health: {assessment.health.value}")

    summary = calculator.calculate_team_summary("T1", "Sample Team", members, sprint, entries)
    print(f"\nTeam utilization: {summary.utilization_percentage}% ({summary.utilization_status.value})")
    for member in summary.member_summaries:
        role = " (manager)" if member.is_manager else ""
        print(
            f"  {member.member_name:<10}{role:<10} "
            f"{member.actual_hours:>6g}/{member.max_possible_hours:<6g}h "
            f"{member.utilization_percentage:>4}%  missing days: {member.missing_days}"
        )


def run_detect(settings: EngineSettings, target: date, first_start: date, weeks: int) -> int:
    """Print the sprint containing ``target``."""
    calendar = CalendarResolver(settings.work_week())
    detector = SprintDetector(first_start, sprint_length_weeks=weeks, calendar=calendar)
    window = detector.detect(target)
    if window is None:
        print(f"No sprint found for {target.isoformat()}")
        return 1

    status = "current" if window.is_current_for_date else "upcoming"
    print(f"{window.name} ({status})")
    print(f"  {window.date_range.start.isoformat()} .. {window.date_range.end.isoformat()}")
    print(f"  Working days: {len(window.working_dates)}")
    return 0


def create_sample_history(
    user_ids: Sequence[str],
    weeks: int,
    today: date,
    builder: MetricSnapshotBuilder,
) -> list[MetricRecord]:
    """Build weekly snapshots for sample users, oldest week first."""
    calendar = builder.calendar
    current_week = week_start_for(today)
    history: list[MetricRecord] = []

    for u, user_id in enumerate(user_ids):
        for w in range(weeks - 1, -1, -1):
            week_start = current_week - timedelta(days=7 * w)
            week = DateRange(week_start, week_start + timedelta(days=6))
            days = calendar.working_dates(week)
            # User u skips one day every (u + 1)th week
            if u and w % (u + 1) == 0:
                days = days[1:]
            entries = [ScheduleEntry(user_id, d, ScheduleValue.FULL) for d in days]
            history.extend(builder.build(user_id, entries, history, week_start))
            history.append(
                MetricRecord(
                    user_id=user_id,
                    metric=MetricName.EARLY_PLANNING_SCORE,
                    value=float((u + w) % 5),
                    period_start=week_start,
                )
            )
            history.append(
                MetricRecord(
                    user_id=user_id,
                    metric=MetricName.HOURS,
                    value=len(days) * calendar.work_week.hours_per_day,
                    period_start=week_start,
                )
            )
    return history


def run_recognition(settings: EngineSettings, user_count: int, weeks: int, timeframe: str) -> None:
    """Evaluate achievements for sample users and print a leaderboard."""
    now = datetime.now()
    builder = MetricSnapshotBuilder(CalendarResolver(settings.work_week()))
    members = create_sample_members(user_count)
    user_ids = [m.id for m in members]
    names = {m.id: m.name for m in members}
    history = create_sample_history(user_ids, weeks, now.date(), builder)

    evaluator = AchievementEvaluator()
    contexts = {}
    all_achievements = []
    for user_id in user_ids:
        context = RecognitionContext(
            user_id=user_id,
            history=[r for r in history if r.user_id == user_id],
        )
        all_achievements.extend(evaluator.evaluate_context(context, as_of=now))
        contexts[user_id] = context

    aggregator = LeaderboardAggregator()
    candidates = aggregator.build_candidates(
        user_ids, all_achievements, history, timeframe, now.date(), names=names
    )
    entries = aggregator.rank(candidates, timeframe=timeframe)

    print(f"Leaderboard ({LeaderboardTimeframe(timeframe).value})")
    for entry in entries:
        profile = evaluator.build_profile(contexts[entry.id], rank=entry.rank)
        print(
            f"  #{entry.rank:<3} {entry.name:<10} {entry.points:>6g} pts  "
            f"streak {entry.streak:g}  level: {profile.level.current_level.title}"
        )
        if profile.badges:
            print(f"       badges: {', '.join(profile.badges)}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for CLI."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Error: invalid settings\n{exc}", file=sys.stderr)
        return 1

    parser = argparse.ArgumentParser(
        description="SprintPulse - Capacity & Recognition Analytics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s capacity                           Sample team of 8, current sprint dates
  %(prog)s capacity --start 2024-01-07 --end 2024-01-18 --fill 0.6

  %(prog)s detect --date 2024-03-12 --first-start 2024-01-07

  %(prog)s recognition                        Sample users over 6 weeks
  %(prog)s recognition --timeframe month
        """,
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=settings.log_json,
        help="Emit JSON log lines",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    today = date.today()

    capacity_parser = subparsers.add_parser("capacity", help="Sprint capacity for a sample team")
    capacity_parser.add_argument(
        "--team-size", "-n",
        type=int,
        default=8,
        help="Number of team members (default: 8)",
    )
    capacity_parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=week_start_for(today),
        help="Sprint start date, YYYY-MM-DD (default: this week's Sunday)",
    )
    capacity_parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Sprint end date, YYYY-MM-DD (default: end of a sprint from --start)",
    )
    capacity_parser.add_argument(
        "--fill", "-f",
        type=float,
        default=0.8,
        help="Share of schedule cells filled in (default: 0.8)",
    )

    detect_parser = subparsers.add_parser("detect", help="Find the sprint for a date")
    detect_parser.add_argument(
        "--date", "-d",
        type=date.fromisoformat,
        default=today,
        help="Target date, YYYY-MM-DD (default: today)",
    )
    detect_parser.add_argument(
        "--first-start",
        type=date.fromisoformat,
        default=settings.first_sprint_start,
        help="Start date of sprint 1, YYYY-MM-DD",
    )
    detect_parser.add_argument(
        "--weeks", "-w",
        type=int,
        default=settings.sprint_length_weeks,
        help=f"Sprint length in weeks (default: {settings.sprint_length_weeks})",
    )

    recognition_parser = subparsers.add_parser(
        "recognition",
        help="Achievements and leaderboard for sample users",
    )
    recognition_parser.add_argument(
        "--users", "-u",
        type=int,
        default=5,
        help="Number of sample users (default: 5)",
    )
    recognition_parser.add_argument(
        "--weeks", "-w",
        type=int,
        default=6,
        help="Weeks of history to generate (default: 6)",
    )
    recognition_parser.add_argument(
        "--timeframe", "-t",
        type=str,
        default="all-time",
        choices=[t.value for t in LeaderboardTimeframe],
        help="Leaderboard timeframe (default: all-time)",
    )

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json=args.log_json)

    try:
        return _dispatch(parser, args, settings)
    except SprintPulseError as exc:
        logger.error("Command failed", command=args.command, error=exc.code)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    args: argparse.Namespace,
    settings: EngineSettings,
) -> int:
    """Run the selected command and return its exit code."""
    if args.command == "capacity":
        end = args.end
        if end is None:
            calendar = CalendarResolver(settings.work_week())
            end = calendar.sprint_end_date(args.start, settings.sprint_length_weeks)
        if args.start > end:
            print(f"Error: start {args.start} is after end {end}", file=sys.stderr)
            return 1
        run_capacity(settings, args.team_size, args.start, end, args.fill, datetime.now())
        return 0
    elif args.command == "detect":
        if args.first_start is None:
            print(
                "Error: --first-start is required when SPRINTPULSE_FIRST_SPRINT_START is not set",
                file=sys.stderr,
            )
            return 1
        return run_detect(settings, args.date, args.first_start, args.weeks)
    elif args.command == "recognition":
        run_recognition(settings, args.users, args.weeks, args.timeframe)
        return 0
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
