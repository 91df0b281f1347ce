#!/usr/bin/env python3
"""
Create the default coaches, and optionally a few sample sessions.

Coaches whose name is already taken are skipped, so the script can be run
again safely. Sample sessions are only added to coaches that have none.

Usage:
    python scripts/seed_coaches.py
    python scripts/seed_coaches.py --coach Ada --coach Grace --with-samples
    python scripts/seed_coaches.py --dry-run

Requires:
    - .env file (or environment) with DATABASE_URL, unless the default
      SQLite file is fine
"""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Add the project root to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from coachtrack.config.settings import get_settings
from coachtrack.core.training import Equipment, ProgressAggregator, TrainingType
from coachtrack.core.training.errors import ConflictError, TrainingError
from coachtrack.infrastructure.database import (
    DatabaseConfig,
    DatabaseConnectionError,
    create_database,
)

DEFAULT_COACHES = [
    {"name": "Soukeyna", "email": "soukeyna@coachtrack.com", "phone": "+221 77 123 4567"},
    {"name": "Fabacary", "email": "fabacary@coachtrack.com", "phone": "+221 77 765 4321"},
]

# (coach index, date, equipment, type, hours, notes)
SAMPLE_SESSIONS = [
    (0, date(2025, 1, 15), Equipment.REFORMER, TrainingType.PRACTICE, 2.0, "Intensive practice session"),
    (0, date(2025, 1, 16), Equipment.MAT, TrainingType.OBSERVATION, 1.5, "Observed an advanced class"),
    (1, date(2025, 1, 14), Equipment.CHAIR, TrainingType.PRACTICE, 1.0, "First session on the chair"),
]


def coaches_from_args(names: list[str] | None) -> list[dict]:
    if not names:
        return DEFAULT_COACHES
    return [{"name": name} for name in names]


async def seed(database_url: str, coaches: list[dict], with_samples: bool) -> bool:
    """Create coaches and samples, then print each coach's progress."""
    database = create_database(DatabaseConfig(url=database_url))
    try:
        await database.init_schema()
    except DatabaseConnectionError as e:
        print(f"ERROR: {e}")
        return False

    try:
        async with database.store() as store:
            seeded = []
            for data in coaches:
                try:
                    coach = await store.create_coach(**data)
                    print(f"[OK] Created coach: {coach.name}")
                    seeded.append(coach)
                except ConflictError:
                    print(f"[SKIP] Coach already exists: {data['name']}")

            if with_samples:
                await seed_samples(store, seeded)

            await show_statistics(store)
    except TrainingError as e:
        print(f"ERROR: {e}")
        return False
    finally:
        await database.close()

    return True


async def seed_samples(store, coaches) -> None:
    created = 0
    for index, session_date, equipment, session_type, hours, notes in SAMPLE_SESSIONS:
        if index >= len(coaches):
            continue
        coach = coaches[index]
        await store.create_session(
            coach_id=coach.id,
            date=session_date,
            equipment=equipment,
            type=session_type,
            hours=hours,
            notes=notes,
        )
        created += 1
    print(f"[OK] Created {created} sample sessions")


async def show_statistics(store) -> None:
    aggregator = ProgressAggregator(store)
    coaches = await store.list_coaches()

    print(f"\n=== {len(coaches)} coaches ===")
    for coach in coaches:
        progress = await aggregator.compute_progress(coach.id)
        print(f"\n{coach.name}:")
        for equipment, item in progress.items():
            print(
                f"  {equipment.value}: {item.total}h / {item.objectives.total}h "
                f"({item.total_percentage:.1f}%)"
            )


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Create default coaches")
    parser.add_argument(
        "--coach",
        action="append",
        dest="coaches",
        metavar="NAME",
        help="Coach name to create (repeatable). Defaults to Soukeyna and Fabacary.",
    )
    parser.add_argument("--with-samples", action="store_true", help="Also create sample sessions")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be created")
    parser.add_argument("--database-url", help="Override DATABASE_URL")

    args = parser.parse_args()

    coaches = coaches_from_args(args.coaches)
    database_url = args.database_url or get_settings().database_url

    if args.dry_run:
        print("\n=== DRY RUN - Nothing will be written ===\n")
        print(f"Database: {database_url}")
        for data in coaches:
            print(f"Would create coach: {data['name']}")
        if args.with_samples:
            print(f"Would create up to {len(SAMPLE_SESSIONS)} sample sessions")
        sys.exit(0)

    success = asyncio.run(seed(database_url, coaches, args.with_samples))
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
