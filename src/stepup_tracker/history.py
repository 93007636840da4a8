"""Filtering and sorting for the workout history list."""
from datetime import date, timedelta
from typing import Dict, List, Optional

from .models import Workout

ALL_WORKOUTS = "All Workouts"


def filter_by_date_range(
    workouts: List[Workout],
    date_range: str = "All Time",
    today: Optional[date] = None,
) -> List[Workout]:
    """
    Keep workouts within a named range ending today.

    "This Week" starts on Sunday here, clamped to the first of the month.
    Unknown range names leave the list unfiltered.
    """
    today = today or date.today()

    if date_range == "This Month":
        start = today.replace(day=1)
    elif date_range == "This Week":
        sunday = today - timedelta(days=(today.weekday() + 1) % 7)
        start = max(sunday, today.replace(day=1))
    else:
        return list(workouts)

    start_str, end_str = start.isoformat(), today.isoformat()
    return [w for w in workouts if w.date and start_str <= w.date <= end_str]


def filter_by_type(workouts: List[Workout], workout_type: Optional[str] = None) -> List[Workout]:
    if not workout_type or workout_type == ALL_WORKOUTS:
        return list(workouts)
    return [w for w in workouts if w.type == workout_type]


def sort_workouts(workouts: List[Workout], sort_by: str = "Date (Newest)") -> List[Workout]:
    """Return a sorted copy; equal keys keep their stored order."""
    if sort_by == "Date (Newest)":
        return sorted(workouts, key=lambda w: w.date or "", reverse=True)
    if sort_by == "Date (Oldest)":
        return sorted(workouts, key=lambda w: w.date or "")
    if sort_by == "Duration":
        return sorted(workouts, key=lambda w: w.duration, reverse=True)
    if sort_by == "Calories":
        return sorted(workouts, key=lambda w: w.calories, reverse=True)
    return list(workouts)


def workout_types(workouts: List[Workout]) -> List[str]:
    """Filter choices: "All Workouts" followed by each type in first-seen order."""
    types = [ALL_WORKOUTS]
    for w in workouts:
        if w.type and w.type not in types:
            types.append(w.type)
    return types


def history_view(
    workouts: List[Workout],
    date_range: str = "All Time",
    workout_type: Optional[str] = None,
    sort_by: str = "Date (Newest)",
    today: Optional[date] = None,
) -> List[Workout]:
    """Date range filter, then type filter, then sort."""
    selected = filter_by_date_range(workouts, date_range, today)
    selected = filter_by_type(selected, workout_type)
    return sort_workouts(selected, sort_by)


def marked_dates(workouts: List[Workout], max_dots: int = 3) -> Dict[str, int]:
    """Number of calendar dots per date: one per workout, capped at ``max_dots``."""
    marks: Dict[str, int] = {}
    for w in workouts:
        if not w.date:
            continue
        marks[w.date] = min(marks.get(w.date, 0) + 1, max_dots)
    return marks
