"""
Pytest fixtures for StepUp Tracker tests.
"""
import sys
from datetime import date
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure src/ is on sys.path so tests can import stepup_tracker without installing.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Load environment variables
load_dotenv()

from stepup_tracker.config import StorageKeys  # noqa: E402
from stepup_tracker.models import Workout  # noqa: E402
from stepup_tracker.repository import ActivityRepository  # noqa: E402
from stepup_tracker.store import MemoryStore, SQLiteStore  # noqa: E402


# Wednesday; the Monday of its week is 2024-06-10
TODAY = date(2024, 6, 12)


def make_workout(day, duration=30, workout_id=None, **kwargs) -> Workout:
    """Build a Workout for ``day`` (a date or "YYYY-MM-DD" string)."""
    day_str = day.isoformat() if isinstance(day, date) else day
    return Workout(
        id=workout_id or f"w-{day_str}-{duration}-{kwargs.get('type', 'x')}",
        date=day_str,
        duration=duration,
        **kwargs,
    )


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def sqlite_store(tmp_path):
    return SQLiteStore(str(tmp_path / "stepup.db"))


@pytest.fixture
def storage_keys():
    return StorageKeys()


@pytest.fixture
def repository(memory_store, storage_keys):
    return ActivityRepository(memory_store, keys=storage_keys)
