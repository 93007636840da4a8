#!/usr/bin/env python3
"""
Create a StepUp store file with first-run sample data.

Seeds three sample workouts (today, yesterday, two days ago) and a default
weekly goal into a SQLite key-value store. Running it again leaves existing
data untouched unless --reset is given.

Usage:
    python scripts/populate_store.py
    python scripts/populate_store.py --db data/stepup.db --reset
"""
import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))

from stepup_tracker.config import get_settings  # noqa: E402
from stepup_tracker.repository import ActivityRepository  # noqa: E402
from stepup_tracker.store import SQLiteStore  # noqa: E402


async def populate(db_path: str) -> bool:
    repository = ActivityRepository(SQLiteStore(db_path))
    result = await repository.seed_if_empty()
    if not result.ok:
        print(f"  ERROR: seeding failed: {result.error}")
        return False

    workouts = (await repository.list_workouts()).value
    goals = (await repository.list_goals()).value
    print(f"  {len(workouts)} workouts, {len(goals)} weekly goals in {db_path}")
    return True


def main():
    load_dotenv()
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Seed a StepUp store with sample data")
    parser.add_argument("--db", default=settings.store_path, help="Path to the SQLite store file")
    parser.add_argument("--reset", action="store_true", help="Remove the existing store first")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    db_path = Path(args.db)
    if args.reset and db_path.exists():
        os.remove(db_path)
        print(f"  Removed existing: {db_path.name}")
    db_path.parent.mkdir(parents=True, exist_ok=True)

    print("Populating StepUp store...")
    ok = asyncio.run(populate(str(db_path)))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
