"""
User-facing actions.

Validated entry points for the presentation layer: logging and editing
workouts, setting weekly goals, managing workout types and rest days, and the
local login session.

Every action is async and returns a dict with a ``status`` of "success" or
"error" and a ``message`` suitable for showing to the user. Validation
problems are reported this way rather than raised.
"""

import logging
import time
import uuid
from datetime import date
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .models import Intensity, User, WeeklyGoal, Workout
from .repository import ActivityRepository

logger = logging.getLogger(__name__)

GOAL_FIELDS = ("targetSteps", "targetCalories", "targetMinutes", "targetWorkouts")


def _error(message: str) -> Dict[str, Any]:
    return {"status": "error", "message": message}


def _parse_whole(value: Any) -> Optional[int]:
    """Parse form input as a non-negative whole number, None if it is not one."""
    if isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return number if number >= 0 else None


def _parse_day(value: Any) -> Optional[date]:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def new_workout_id() -> str:
    return f"uuid-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


async def log_workout(
    repository: ActivityRepository,
    form: Dict[str, Any],
    editing_id: Optional[str] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Create a workout from form input, or update one when ``editing_id`` is set.

    Args:
        repository: Repository to write to
        form: Form values (type, duration, calories, steps, intensity,
            notes, isRestDay, date)
        editing_id: Id of the workout being edited, if any
        today: Default date for the entry (defaults to the local date)

    Returns:
        Dict containing:
        - status: "success" or "error"
        - message: User-facing message
        - workout: The saved workout document (on success)
    """
    is_rest_day = bool(form.get("isRestDay", False))
    day = _parse_day(form.get("date") or (today or date.today()))
    if day is None:
        return _error("Please choose a valid date.")

    if is_rest_day:
        duration, calories, steps = 0, 0, None
        workout_type, intensity = "Rest", Intensity.REST.value
    else:
        if form.get("duration") in (None, ""):
            return _error("Please enter a duration for your workout.")
        duration = _parse_whole(form.get("duration"))
        if duration is None:
            return _error("Duration must be a whole number of minutes.")

        calories = _parse_whole(form.get("calories") or 0)
        if calories is None:
            return _error("Calories must be a whole number.")

        steps = None
        if form.get("steps") not in (None, ""):
            steps = _parse_whole(form.get("steps"))
            if steps is None:
                return _error("Steps must be a whole number.")

        workout_type = form.get("type") or "Strength"
        intensity = form.get("intensity") or Intensity.MODERATE.value

    try:
        workout = Workout(
            id=editing_id or new_workout_id(),
            date=day.isoformat(),
            type=workout_type,
            duration=duration,
            calories=calories,
            steps=steps,
            intensity=intensity,
            notes=form.get("notes") or "",
            is_rest_day=is_rest_day,
        )
    except ValidationError as e:
        logger.info(f"[ACTIONS] Rejected workout form: {e.error_count()} errors")
        return _error("Please check the workout details and try again.")

    if editing_id:
        result = await repository.update_workout(workout)
    else:
        result = await repository.save_workout(workout)

    if not result.ok:
        logger.error(f"[ACTIONS] Saving workout failed: {result.error}")
        return _error("Failed to save workout")

    return {
        "status": "success",
        "message": "Workout saved successfully!",
        "workout": workout.to_document(),
    }


async def remove_workout(repository: ActivityRepository, workout_id: str) -> Dict[str, Any]:
    """Delete a workout by id."""
    result = await repository.delete_workout(workout_id)
    if not result.ok:
        logger.error(f"[ACTIONS] Deleting workout failed: {result.error}")
        return _error("Failed to delete workout")
    return {"status": "success", "message": "Workout deleted", "count": len(result.value)}


async def set_weekly_goal(
    repository: ActivityRepository,
    form: Dict[str, Any],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Save a new weekly goal starting today; all four targets are required."""
    if any(form.get(name) in (None, "") for name in GOAL_FIELDS):
        return _error("Please fill in all goal fields.")

    targets = {name: _parse_whole(form.get(name)) for name in GOAL_FIELDS}
    if any(value is None for value in targets.values()):
        return _error("Goal targets must be whole numbers.")

    goal = WeeklyGoal(weekStart=(today or date.today()).isoformat(), **targets)
    result = await repository.save_goal(goal)
    if not result.ok:
        logger.error(f"[ACTIONS] Saving goal failed: {result.error}")
        return _error("Failed to save goal")

    return {"status": "success", "message": "Weekly goal saved", "goal": goal.to_document()}


async def add_workout_type(repository: ActivityRepository, name: str) -> Dict[str, Any]:
    """Add a custom workout type after trimming whitespace."""
    trimmed = (name or "").strip()
    if not trimmed:
        return _error("Please enter a name for the workout type.")

    existing = await repository.list_custom_types()
    if trimmed in existing.value or trimmed in repository.default_types:
        return _error("This workout type already exists.")

    result = await repository.add_custom_type(trimmed)
    if not result.ok:
        logger.error(f"[ACTIONS] Saving custom type failed: {result.error}")
        return _error("Failed to save custom type")

    return {"status": "success", "message": f"Added {trimmed}", "types": result.value}


async def mark_rest_day(
    repository: ActivityRepository,
    day: Any,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Mark a past or current day as a rest day."""
    parsed = _parse_day(day)
    if parsed is None:
        return _error("Please choose a valid date.")
    if parsed > (today or date.today()):
        return _error("Future days cannot be marked as rest days.")

    result = await repository.save_rest_day(parsed.isoformat())
    if not result.ok:
        logger.error(f"[ACTIONS] Saving rest day failed: {result.error}")
        return _error("Failed to mark rest day")

    return {"status": "success", "message": f"{parsed.isoformat()} marked as a rest day"}


async def login(repository: ActivityRepository, email: str, password: str) -> Dict[str, Any]:
    """
    Start a local session.

    There is no account backend: any non-empty credentials are accepted and
    the display name is taken from the part of the email before the "@".
    """
    if not email or not password:
        return _error("Please fill in all fields")

    user = User(name=email.split("@")[0], email=email, is_logged_in=True)
    result = await repository.save_user(user)
    if not result.ok:
        return _error("Failed to save login session")

    return {"status": "success", "message": f"Welcome, {user.name}", "user": user.to_document()}


async def logout(repository: ActivityRepository) -> Dict[str, Any]:
    result = await repository.clear_user()
    if not result.ok:
        return _error("Failed to log out")
    return {"status": "success", "message": "Logged out"}
