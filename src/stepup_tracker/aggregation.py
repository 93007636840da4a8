"""
Aggregation Engine.

Pure functions deriving dashboard figures from the raw workout and rest day
collections: weekly series, per-type breakdowns, weekly totals, best week,
streaks and the calendar strip for the current week.

All date handling is at calendar-day granularity. ``today`` can be passed in
explicitly; it defaults to the local date.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from .models import WeeklyGoal, Workout

if TYPE_CHECKING:
    from .repository import ActivityRepository

logger = logging.getLogger(__name__)

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
CALENDAR_LABELS = ["M", "T", "W", "T", "F", "S", "S"]


class DayStatus(str, Enum):
    """Status of one day in the weekly streak calendar."""

    COMPLETED = "completed"
    REST = "rest"
    TODAY = "today"
    FUTURE = "future"
    NONE = "none"


@dataclass
class DayTotals:
    """Summed activity for a single day."""

    date: str
    label: str
    steps: int = 0
    calories: int = 0
    duration: int = 0

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "label": self.label,
            "steps": self.steps,
            "calories": self.calories,
            "duration": self.duration,
        }


@dataclass
class WeeklySeries:
    """Trailing seven days of totals, oldest first."""

    days: List[DayTotals] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [d.label for d in self.days]

    @property
    def per_day_totals(self) -> List[Dict[str, int]]:
        return [
            {"steps": d.steps, "calories": d.calories, "duration": d.duration}
            for d in self.days
        ]

    def to_dict(self) -> dict:
        return {
            "labels": self.labels,
            "perDayTotals": self.per_day_totals,
            "days": [d.to_dict() for d in self.days],
        }


@dataclass
class TypeDuration:
    type: str
    total_duration: int

    def to_dict(self) -> dict:
        return {"type": self.type, "totalDuration": self.total_duration}


@dataclass
class BestWeek:
    week_start: Optional[str] = None
    total_duration: int = 0

    def to_dict(self) -> dict:
        return {"weekStart": self.week_start, "totalDuration": self.total_duration}


@dataclass
class CalendarDay:
    day: str
    date: str
    status: DayStatus

    def to_dict(self) -> dict:
        return {"day": self.day, "date": self.date, "status": self.status.value}


def week_start(day: date) -> date:
    """Monday of the week containing ``day`` (Sunday belongs to the prior Monday)."""
    return day - timedelta(days=day.weekday())


def _parse_day(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring workout with unparseable date {value!r}")
        return None


def _sum_duration(workouts: Iterable[Workout]) -> int:
    return sum(w.duration for w in workouts)


def weekly_series(workouts: List[Workout], today: Optional[date] = None) -> WeeklySeries:
    """
    Per-day steps, calories and duration for the 7 days ending today.

    Args:
        workouts: All stored workouts
        today: Reference day (defaults to the local date)

    Returns:
        WeeklySeries with exactly seven days, oldest first
    """
    today = today or date.today()
    series = WeeklySeries()

    for offset in range(6, -1, -1):
        day = today - timedelta(days=offset)
        day_str = day.isoformat()
        totals = DayTotals(date=day_str, label=WEEKDAY_LABELS[day.weekday()])
        for w in workouts:
            if w.date == day_str:
                totals.steps += w.steps or 0
                totals.calories += w.calories
                totals.duration += w.duration
        series.days.append(totals)

    return series


def _week_bounds(today: date, week_offset: int = 0) -> tuple:
    monday = week_start(today) - timedelta(weeks=week_offset)
    return monday.isoformat(), (monday + timedelta(days=7)).isoformat()


def weekly_type_breakdown(workouts: List[Workout], today: Optional[date] = None) -> List[TypeDuration]:
    """Total duration per workout type for the current Monday-start week."""
    start, end = _week_bounds(today or date.today())

    totals: Dict[str, int] = {}
    for w in workouts:
        if not w.type or not (start <= w.date < end):
            continue
        totals[w.type] = totals.get(w.type, 0) + w.duration

    return [TypeDuration(type=t, total_duration=d) for t, d in totals.items()]


def total_duration_for_week(
    workouts: List[Workout],
    week_offset: int = 0,
    today: Optional[date] = None,
) -> int:
    """
    Sum of durations for a Monday-start week.

    Args:
        workouts: All stored workouts
        week_offset: 0 for this week, 1 for last week, and so on
        today: Reference day (defaults to the local date)

    Returns:
        Total minutes over the half-open window [monday, monday + 7 days)
    """
    if week_offset < 0:
        raise ValueError("week_offset must be >= 0")

    start, end = _week_bounds(today or date.today(), week_offset)
    return _sum_duration(w for w in workouts if start <= w.date < end)


def best_week(workouts: List[Workout]) -> BestWeek:
    """
    The Monday-start week with the most workout minutes.

    Weeks are visited in the order they are first seen in ``workouts`` and
    only a strictly greater total replaces the current best, so on a tie the
    earliest-seen week wins.
    """
    weeks: Dict[str, int] = {}
    for w in workouts:
        day = _parse_day(w.date)
        if day is None:
            continue
        monday = week_start(day).isoformat()
        weeks[monday] = weeks.get(monday, 0) + w.duration

    best = BestWeek()
    for monday, total in weeks.items():
        if total > best.total_duration:
            best = BestWeek(week_start=monday, total_duration=total)
    return best


def activity_days(workouts: List[Workout], rest_days: List[str]) -> set:
    """Union of workout dates and rest day dates."""
    return {w.date for w in workouts} | set(rest_days)


def streak(
    workouts: List[Workout],
    rest_days: List[str],
    today: Optional[date] = None,
) -> int:
    """
    Count consecutive activity days ending today or yesterday.

    A day counts when it has a workout or is marked as a rest day. If
    neither today nor yesterday counts the streak is broken and 0 is
    returned; otherwise counting starts from today (or yesterday when today
    has nothing logged yet) and walks backwards until the first gap.
    """
    today = today or date.today()
    active = activity_days(workouts, rest_days)

    cursor = today
    if cursor.isoformat() not in active:
        cursor = today - timedelta(days=1)
        if cursor.isoformat() not in active:
            return 0

    count = 0
    while cursor.isoformat() in active:
        count += 1
        cursor -= timedelta(days=1)
    return count


def calendar_week_status(
    workouts: List[Workout],
    rest_days: List[str],
    today: Optional[date] = None,
) -> List[CalendarDay]:
    """
    Status for each day of the current Monday-start week.

    Precedence: future, then completed (any workout), then rest, then today,
    then none. A day with both a workout and a rest mark is completed.
    """
    today = today or date.today()
    monday = week_start(today)
    workout_days = {w.date for w in workouts}
    rest = set(rest_days)

    calendar = []
    for i in range(7):
        day = monday + timedelta(days=i)
        day_str = day.isoformat()

        if day > today:
            status = DayStatus.FUTURE
        elif day_str in workout_days:
            status = DayStatus.COMPLETED
        elif day_str in rest:
            status = DayStatus.REST
        elif day == today:
            status = DayStatus.TODAY
        else:
            status = DayStatus.NONE

        calendar.append(CalendarDay(day=CALENDAR_LABELS[i], date=day_str, status=status))
    return calendar


def percentage_change(current: int, previous: int) -> str:
    """Signed percent change between two weekly totals, e.g. "+25%"."""
    if previous == 0:
        return "+100%" if current > 0 else "0%"
    change = (current - previous) / previous * 100
    sign = "+" if change >= 0 else ""
    return f"{sign}{math.floor(change + 0.5)}%"


def format_duration(minutes: int) -> str:
    """Render minutes as "1h 5m" or "45m"."""
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


@dataclass
class ActivitySnapshot:
    """Collections read together for one screen load."""

    workouts: List[Workout] = field(default_factory=list)
    rest_days: List[str] = field(default_factory=list)
    goal: Optional[WeeklyGoal] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def progress_summary(self, today: Optional[date] = None) -> dict:
        """Everything the progress screen shows, computed in one pass."""
        today = today or date.today()
        this_week = total_duration_for_week(self.workouts, 0, today)
        last_week = total_duration_for_week(self.workouts, 1, today)
        return {
            "streak": streak(self.workouts, self.rest_days, today),
            "bestWeek": best_week(self.workouts).to_dict(),
            "typeBreakdown": [t.to_dict() for t in weekly_type_breakdown(self.workouts, today)],
            "totalDuration": this_week,
            "lastWeekDuration": last_week,
            "percentageChange": percentage_change(this_week, last_week),
            "calendar": [d.to_dict() for d in calendar_week_status(self.workouts, self.rest_days, today)],
        }


async def load_snapshot(repository: "ActivityRepository") -> ActivitySnapshot:
    """Read workouts, rest days and the latest goal, one after another."""
    workouts = await repository.list_workouts()
    rest_days = await repository.list_rest_days()
    goal = await repository.latest_goal()

    errors = [r.error for r in (workouts, rest_days, goal) if not r.ok]
    return ActivitySnapshot(
        workouts=workouts.value,
        rest_days=rest_days.value,
        goal=goal.value,
        errors=errors,
    )
