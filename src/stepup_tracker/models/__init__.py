"""Pydantic models for the persisted JSON documents."""
from .workout import Workout, Intensity, to_int
from .goal import WeeklyGoal
from .user import User

__all__ = [
    "Workout",
    "Intensity",
    "WeeklyGoal",
    "User",
    "to_int",
]
