"""
Activity Repository.

Typed, asynchronous read/write operations over the workout, goal, custom
type, rest day and user documents held in a key-value store.

Every public method returns a Result and never raises. A bucket that cannot
be read or decoded behaves like an empty bucket (the Result is marked failed
but ``value`` still holds the empty default), and writes proceed on top of
that empty view: last writer wins.
"""

import logging
from datetime import date, timedelta
from typing import Any, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from .config import StorageKeys, get_settings
from .models import User, WeeklyGoal, Workout
from .results import Result
from .store import KeyValueStore

logger = logging.getLogger(__name__)

# A parsed model paired with the raw document it came from (model is None
# when the document failed validation).
Record = Tuple[Optional[BaseModel], Any]


def _sample_workouts(today: date) -> List[Workout]:
    return [
        Workout(
            id="uuid-1",
            date=today.isoformat(),
            type="Strength",
            duration=45,
            steps=1200,
            calories=300,
            notes="Upper body focus",
        ),
        Workout(
            id="uuid-2",
            date=(today - timedelta(days=1)).isoformat(),
            type="Cardio",
            duration=30,
            steps=4000,
            calories=250,
            notes="Morning run",
        ),
        Workout(
            id="uuid-3",
            date=(today - timedelta(days=2)).isoformat(),
            type="Yoga",
            duration=60,
            steps=500,
            calories=150,
            notes="Relaxing flow",
        ),
    ]


def _default_goal(today: date) -> WeeklyGoal:
    return WeeklyGoal(
        week_start=today.isoformat(),
        target_minutes=300,
        target_workouts=5,
        target_steps=50000,
        target_calories=2000,
    )


class ActivityRepository:
    """
    Repository over the five persisted JSON documents.

    Bucket names come from an injected StorageKeys instance rather than
    module constants, so several independent data sets can share a store.
    """

    def __init__(
        self,
        store: KeyValueStore,
        keys: Optional[StorageKeys] = None,
        default_types: Optional[List[str]] = None,
    ):
        settings = get_settings()
        self.store = store
        self.keys = keys or settings.storage_keys
        self.default_types = list(default_types or settings.default_workout_types)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_list(self, key: str) -> Result[List[Any]]:
        result = self.store.get(key)
        if not result.ok:
            return Result.failure(result.error, [])
        if result.value is None:
            return Result.success([])
        if not isinstance(result.value, list):
            logger.error(f"[REPO] Expected a list under {key}, got {type(result.value).__name__}")
            return Result.failure(f"unexpected document type under {key}", [])
        return Result.success(result.value)

    def _read_records(self, key: str, model: Type[BaseModel]) -> Result[List[Record]]:
        """
        Parse every document in a list bucket.

        Documents that fail validation are kept as ``(None, raw)`` so that
        writes put them back untouched instead of dropping them.
        """
        raw = self._read_list(key)
        records: List[Record] = []
        for item in raw.value:
            try:
                records.append((model.model_validate(item), item))
            except ValidationError as e:
                logger.warning(f"[REPO] Keeping unreadable record under {key} as-is: {e.error_count()} errors")
                records.append((None, item))
        if not raw.ok:
            return Result.failure(raw.error, records)
        return Result.success(records)

    def _write_records(self, key: str, records: List[Record]) -> Result[bool]:
        return self.store.set(
            key,
            [parsed.to_document() if parsed is not None else raw for parsed, raw in records],
        )

    @staticmethod
    def _parsed(records: List[Record]) -> list:
        return [parsed for parsed, _ in records if parsed is not None]

    @staticmethod
    def _record_id(record: Record) -> Optional[str]:
        parsed, raw = record
        if parsed is not None:
            return parsed.id
        return raw.get("id") if isinstance(raw, dict) else None

    def _read_workouts(self) -> Result[List[Workout]]:
        records = self._read_records(self.keys.workouts, Workout)
        workouts = self._parsed(records.value)
        if not records.ok:
            return Result.failure(records.error, workouts)
        return Result.success(workouts)

    def _write_workouts(self, records: List[Record]) -> Result[List[Workout]]:
        written = self._write_records(self.keys.workouts, records)
        if not written.ok:
            return Result.failure(written.error, [])
        return Result.success(self._parsed(records))

    def _read_goals(self) -> Result[List[WeeklyGoal]]:
        records = self._read_records(self.keys.weekly_goals, WeeklyGoal)
        goals = self._parsed(records.value)
        if not records.ok:
            return Result.failure(records.error, goals)
        return Result.success(goals)

    def _read_strings(self, key: str) -> Result[List[str]]:
        raw = self._read_list(key)
        values = [v for v in raw.value if isinstance(v, str)]
        if not raw.ok:
            return Result.failure(raw.error, values)
        return Result.success(values)

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    async def list_workouts(self) -> Result[List[Workout]]:
        """Return every stored workout; callers sort as they need."""
        return self._read_workouts()

    async def get_workout(self, workout_id: str) -> Result[Optional[Workout]]:
        """Look up a single workout by id (None when absent)."""
        current = self._read_workouts()
        match = next((w for w in current.value if w.id == workout_id), None)
        if not current.ok:
            return Result.failure(current.error, match)
        return Result.success(match)

    async def save_workout(self, workout: Workout) -> Result[List[Workout]]:
        """
        Prepend a new workout and persist the collection.

        Returns:
            Result holding the new full list. A workout whose id is already
            stored is rejected and the existing list is returned unchanged.
        """
        records = self._read_records(self.keys.workouts, Workout).value
        if any(self._record_id(r) == workout.id for r in records):
            logger.warning(f"[REPO] Workout id {workout.id} already exists, not saved")
            return Result.failure(f"duplicate workout id: {workout.id}", self._parsed(records))

        result = self._write_workouts([(workout, None), *records])
        if result.ok:
            logger.info(f"[REPO] Saved workout {workout.id} ({workout.type}, {workout.date})")
        return result

    async def update_workout(self, workout: Workout) -> Result[List[Workout]]:
        """Replace the workout with a matching id; silently a no-op otherwise."""
        records = self._read_records(self.keys.workouts, Workout).value
        found = any(self._record_id(r) == workout.id for r in records)
        if not found:
            logger.debug(f"[REPO] No workout {workout.id} to update")
        updated = [(workout, None) if self._record_id(r) == workout.id else r for r in records]
        result = self._write_workouts(updated)
        if result.ok and found:
            logger.info(f"[REPO] Updated workout {workout.id}")
        return result

    async def delete_workout(self, workout_id: str) -> Result[List[Workout]]:
        """Remove the workout with ``workout_id``; silently a no-op if absent."""
        records = self._read_records(self.keys.workouts, Workout).value
        remaining = [r for r in records if self._record_id(r) != workout_id]
        found = len(remaining) != len(records)
        if not found:
            logger.debug(f"[REPO] No workout {workout_id} to delete")
        result = self._write_workouts(remaining)
        if result.ok and found:
            logger.info(f"[REPO] Deleted workout {workout_id}")
        return result

    # ------------------------------------------------------------------
    # Weekly goals
    # ------------------------------------------------------------------

    async def list_goals(self) -> Result[List[WeeklyGoal]]:
        return self._read_goals()

    async def save_goal(self, goal: WeeklyGoal) -> Result[List[WeeklyGoal]]:
        """Append a goal; the newest goal is always the last element."""
        records = [*self._read_records(self.keys.weekly_goals, WeeklyGoal).value, (goal, None)]
        written = self._write_records(self.keys.weekly_goals, records)
        if not written.ok:
            return Result.failure(written.error, [])
        logger.info(f"[REPO] Saved weekly goal starting {goal.week_start}")
        return Result.success(self._parsed(records))

    async def latest_goal(self) -> Result[Optional[WeeklyGoal]]:
        goals = self._read_goals()
        latest = goals.value[-1] if goals.value else None
        if not goals.ok:
            return Result.failure(goals.error, latest)
        return Result.success(latest)

    # ------------------------------------------------------------------
    # Custom workout types
    # ------------------------------------------------------------------

    async def list_custom_types(self) -> Result[List[str]]:
        """Stored types, or the default list when nothing has been stored."""
        result = self.store.get(self.keys.custom_types)
        if not result.ok:
            return Result.failure(result.error, list(self.default_types))
        if result.value is None:
            return Result.success(list(self.default_types))
        if not isinstance(result.value, list):
            logger.error(f"[REPO] Expected a list under {self.keys.custom_types}, got {type(result.value).__name__}")
            return Result.failure(f"unexpected document type under {self.keys.custom_types}", list(self.default_types))
        return Result.success([t for t in result.value if isinstance(t, str)])

    async def add_custom_type(self, name: str) -> Result[List[str]]:
        """Append ``name`` unless already present (exact, case-sensitive)."""
        types = (await self.list_custom_types()).value
        if name in types:
            return Result.success(types)

        types = [*types, name]
        written = self.store.set(self.keys.custom_types, types)
        if not written.ok:
            return Result.failure(written.error, [])
        logger.info(f"[REPO] Added custom workout type {name!r}")
        return Result.success(types)

    # ------------------------------------------------------------------
    # Rest days
    # ------------------------------------------------------------------

    async def list_rest_days(self) -> Result[List[str]]:
        return self._read_strings(self.keys.rest_days)

    async def save_rest_day(self, day: str) -> Result[List[str]]:
        """Mark ``day`` as a rest day; marking twice keeps a single entry."""
        rest_days = self._read_strings(self.keys.rest_days).value
        if day in rest_days:
            return Result.success(rest_days)

        rest_days = [*rest_days, day]
        written = self.store.set(self.keys.rest_days, rest_days)
        if not written.ok:
            return Result.failure(written.error, [])
        logger.info(f"[REPO] Marked {day} as a rest day")
        return Result.success(rest_days)

    async def remove_rest_day(self, day: str) -> Result[List[str]]:
        """Unmark ``day``; a no-op when it was not marked."""
        rest_days = self._read_strings(self.keys.rest_days).value
        if day not in rest_days:
            logger.debug(f"[REPO] {day} is not a rest day")
            return Result.success(rest_days)

        rest_days = [d for d in rest_days if d != day]
        written = self.store.set(self.keys.rest_days, rest_days)
        if not written.ok:
            return Result.failure(written.error, [])
        logger.info(f"[REPO] Unmarked rest day {day}")
        return Result.success(rest_days)

    # ------------------------------------------------------------------
    # User
    # ------------------------------------------------------------------

    async def get_user(self) -> Result[Optional[User]]:
        result = self.store.get(self.keys.user)
        if not result.ok:
            return Result.failure(result.error, None)
        if result.value is None:
            return Result.success(None)
        try:
            return Result.success(User.model_validate(result.value))
        except ValidationError as e:
            logger.error(f"[REPO] Unreadable user record: {e.error_count()} errors")
            return Result.failure("invalid user record", None)

    async def save_user(self, user: User) -> Result[bool]:
        written = self.store.set(self.keys.user, user.to_document())
        if written.ok:
            logger.info(f"[REPO] Saved user {user.email}")
        return written

    async def clear_user(self) -> Result[bool]:
        return self.store.remove(self.keys.user)

    # ------------------------------------------------------------------
    # Bootstrap
    # ------------------------------------------------------------------

    async def seed_if_empty(self, today: Optional[date] = None) -> Result[bool]:
        """
        Populate sample data for first-run use.

        Safe to call on every start: workouts are seeded only when the
        workout bucket is empty, and the default goal only when there are
        no goals.
        """
        today = today or date.today()
        ok = True
        errors = []

        if not self._read_records(self.keys.workouts, Workout).value:
            written = self._write_workouts([(w, None) for w in _sample_workouts(today)])
            if written.ok:
                logger.info("[SEED] Seeded 3 sample workouts")
            else:
                ok = False
                errors.append(written.error)

        if not self._read_records(self.keys.weekly_goals, WeeklyGoal).value:
            goal = _default_goal(today)
            written = self.store.set(self.keys.weekly_goals, [goal.to_document()])
            if written.ok:
                logger.info("[SEED] Seeded default weekly goal")
            else:
                ok = False
                errors.append(written.error)

        if not ok:
            return Result.failure("; ".join(errors), False)
        return Result.success(True)
