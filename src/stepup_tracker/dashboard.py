"""Dashboard figures: today's card and weekly goal progress."""
from datetime import date
from typing import List, Optional

from .aggregation import WeeklySeries
from .models import WeeklyGoal, Workout


def _percent(current: float, target: float) -> float:
    if not target:
        return 0.0
    return min(current / target * 100, 100.0)


def badge_text(progress: float) -> str:
    """Short encouragement label for a progress percentage."""
    if progress >= 100:
        return "Goal Achieved!"
    if progress >= 75:
        return "Almost There"
    if progress >= 50:
        return "On Track"
    if progress > 0:
        return "Keep Going"
    return "Get Started"


def workout_count_message(count: int) -> str:
    if count == 0:
        return "No workouts yet"
    if count == 1:
        return "1 Workout Completed"
    return f"{count} Workouts Completed"


def today_summary(
    workouts: List[Workout],
    goal: Optional[WeeklyGoal],
    today: Optional[date] = None,
) -> dict:
    """
    Totals for today's workouts with progress toward a daily step target.

    The daily target is one seventh of the weekly step goal; without a goal
    (or a zero step target) progress is 0.
    """
    today_str = (today or date.today()).isoformat()
    todays = [w for w in workouts if w.date == today_str]

    steps = sum(w.steps or 0 for w in todays)
    daily_target = goal.target_steps / 7 if goal and goal.target_steps else 0
    progress = _percent(steps, daily_target)

    return {
        "date": today_str,
        "steps": steps,
        "calories": sum(w.calories for w in todays),
        "duration": sum(w.duration for w in todays),
        "workoutCount": len(todays),
        "progressPercent": progress,
        "badge": badge_text(progress),
        "message": workout_count_message(len(todays)),
    }


def weekly_goal_progress(series: WeeklySeries, goal: Optional[WeeklyGoal]) -> dict:
    """
    Compare the trailing seven days against the latest weekly goal.

    A day counts toward the workout target when it has any logged minutes.
    Percentages are capped at 100 and are 0 when there is no goal.
    """
    steps = sum(d.steps for d in series.days)
    calories = sum(d.calories for d in series.days)
    minutes = sum(d.duration for d in series.days)
    workout_days = sum(1 for d in series.days if d.duration > 0)

    targets = {
        "steps": goal.target_steps if goal else 0,
        "calories": goal.target_calories if goal else 0,
        "minutes": goal.target_minutes if goal else 0,
        "workouts": goal.target_workouts if goal else 0,
    }
    current = {
        "steps": steps,
        "calories": calories,
        "minutes": minutes,
        "workouts": workout_days,
    }

    return {
        "hasGoal": goal is not None,
        "current": current,
        "targets": targets,
        "percent": {k: _percent(current[k], targets[k]) for k in current},
    }
