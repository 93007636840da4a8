"""
StepUp Tracker.

Local workout logging with weekly goals, streaks and progress summaries,
persisted as JSON documents in a key-value store.
"""

from .config import Settings, StorageKeys, get_settings
from .results import Result
from .store import MemoryStore, SQLiteStore
from .repository import ActivityRepository
from .aggregation import (
    best_week,
    calendar_week_status,
    load_snapshot,
    streak,
    total_duration_for_week,
    weekly_series,
    weekly_type_breakdown,
)

__all__ = [
    "Settings",
    "StorageKeys",
    "get_settings",
    "Result",
    "MemoryStore",
    "SQLiteStore",
    "ActivityRepository",
    "best_week",
    "calendar_week_status",
    "load_snapshot",
    "streak",
    "total_duration_for_week",
    "weekly_series",
    "weekly_type_breakdown",
]
