"""
Integration tests for the SQL store.

Each test runs against a fresh SQLite file in pytest's tmp_path, through
the same Database class the application uses. Every scenario runs inside
a single event loop, from engine creation to disposal.
"""

import asyncio
from datetime import date, timedelta
from uuid import uuid4

import pytest

from coachtrack.core.training.errors import ConflictError, InvalidInputError, NotFoundError
from coachtrack.core.training.models import Equipment, TrainingType
from coachtrack.core.training.progress import ProgressAggregator
from coachtrack.infrastructure.database import Database, DatabaseConfig, seed_coaches


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'data' / 'coachtrack.sqlite3'}"


@pytest.fixture
def run_scenario(database_url):
    """Run `scenario(database)` against a freshly initialized database."""

    def runner(scenario):
        async def main():
            database = Database(DatabaseConfig(url=database_url))
            await database.init_schema()
            try:
                return await scenario(database)
            finally:
                await database.close()

        return asyncio.run(main())

    return runner


# ---------------------------------------------------------------------------
# Schema and persistence
# ---------------------------------------------------------------------------

class TestPersistence:
    """Data written through one store is visible to the next."""

    def test_database_directory_is_created(self, run_scenario, tmp_path):
        async def scenario(database):
            async with database.store() as store:
                await store.ping()

        run_scenario(scenario)
        assert (tmp_path / "data" / "coachtrack.sqlite3").exists()

    def test_coach_survives_across_stores(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                created = await store.create_coach("Ada", phone="+221 77 123 4567")
            async with database.store() as store:
                return created, await store.get_coach(created.id)

        created, fetched = run_scenario(scenario)
        assert fetched.id == created.id
        assert fetched.phone == "+221 77 123 4567"

    def test_data_survives_a_restart(self, database_url):
        """A second Database on the same file sees the first one's rows."""

        async def write():
            database = Database(DatabaseConfig(url=database_url))
            await database.init_schema()
            async with database.store() as store:
                await store.create_coach("Ada")
            await database.close()

        async def read():
            database = Database(DatabaseConfig(url=database_url))
            await database.init_schema()
            async with database.store() as store:
                coaches = await store.list_coaches()
            await database.close()
            return coaches

        asyncio.run(write())
        assert [c.name for c in asyncio.run(read())] == ["Ada"]


# ---------------------------------------------------------------------------
# Coaches
# ---------------------------------------------------------------------------

class TestCoaches:

    def test_duplicate_name_conflicts(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                await store.create_coach("Ada")
                await store.create_coach("Ada")

        with pytest.raises(ConflictError):
            run_scenario(scenario)

    def test_store_usable_after_conflict(self, run_scenario):
        """A rejected write leaves the session in a usable state."""

        async def scenario(database):
            async with database.store() as store:
                await store.create_coach("Ada")
                with pytest.raises(ConflictError):
                    await store.create_coach("Ada")
                await store.create_coach("Grace")
                return await store.list_coaches()

        assert [c.name for c in run_scenario(scenario)] == ["Ada", "Grace"]

    def test_soft_delete_hides_coach(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                await store.delete_coach(coach.id)
                listed = await store.list_coaches()
                with pytest.raises(NotFoundError):
                    await store.get_coach(coach.id)
                with pytest.raises(ConflictError):
                    await store.create_coach("Ada")
                return listed

        assert run_scenario(scenario) == []

    def test_update_coach(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                await store.update_coach(coach.id, name="Ada L.", email="ADA@example.com")
            async with database.store() as store:
                return await store.get_coach(coach.id)

        coach = run_scenario(scenario)
        assert coach.name == "Ada L."
        assert coach.email == "ada@example.com"

    def test_unknown_coach_is_not_found(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                await store.get_coach(uuid4())

        with pytest.raises(NotFoundError):
            run_scenario(scenario)


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------

class TestSessions:

    def test_sessions_newest_first(self, run_scenario):
        today = date.today()

        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                for days_ago in (3, 0, 7):
                    await store.create_session(
                        coach.id, today - timedelta(days=days_ago),
                        Equipment.MAT, TrainingType.PRACTICE, 1.0,
                    )
                return await store.list_sessions(coach.id)

        sessions = run_scenario(scenario)
        assert [s.date for s in sessions] == [
            today,
            today - timedelta(days=3),
            today - timedelta(days=7),
        ]
        assert all(s.coach_name == "Ada" for s in sessions)

    def test_session_for_unknown_coach_persists_nothing(self, run_scenario):
        missing = uuid4()

        async def scenario(database):
            async with database.store() as store:
                with pytest.raises(NotFoundError):
                    await store.create_session(
                        missing, date.today(), Equipment.MAT, TrainingType.PRACTICE, 1.0,
                    )
                return await store.sum_hours(missing)

        assert run_scenario(scenario) == []

    def test_session_round_trip(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                created = await store.create_session(
                    coach.id, date(2024, 3, 1), Equipment.REFORMER,
                    TrainingType.OBSERVATION, 2.5, "Watched a level 2 class",
                )
            async with database.store() as store:
                return await store.get_session(created.id)

        session = run_scenario(scenario)
        assert session.date == date(2024, 3, 1)
        assert session.equipment is Equipment.REFORMER
        assert session.type is TrainingType.OBSERVATION
        assert session.hours == 2.5
        assert session.notes == "Watched a level 2 class"

    def test_update_session_is_validated(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                session = await store.create_session(
                    coach.id, date.today(), Equipment.MAT, TrainingType.PRACTICE, 1.0,
                )
                with pytest.raises(InvalidInputError):
                    await store.update_session(session.id, hours=25)
                return await store.update_session(session.id, hours=3, notes=None)

        assert run_scenario(scenario).hours == 3.0

    def test_delete_session(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                session = await store.create_session(
                    coach.id, date.today(), Equipment.MAT, TrainingType.PRACTICE, 1.0,
                )
                await store.delete_session(session.id)
                with pytest.raises(NotFoundError):
                    await store.delete_session(session.id)
                return await store.list_sessions(coach.id)

        assert run_scenario(scenario) == []

    def test_delete_all_sessions_counts(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                empty = await store.delete_all_sessions(coach.id)
                for hours in (1.0, 2.0):
                    await store.create_session(
                        coach.id, date.today(), Equipment.CHAIR, TrainingType.PRACTICE, hours,
                    )
                return empty, await store.delete_all_sessions(coach.id)

        assert run_scenario(scenario) == (0, 2)

    def test_sessions_of_deleted_coach_are_unreachable(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                session = await store.create_session(
                    coach.id, date.today(), Equipment.MAT, TrainingType.PRACTICE, 1.0,
                )
                await store.delete_coach(coach.id)
                await store.get_session(session.id)

        with pytest.raises(NotFoundError):
            run_scenario(scenario)


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

class TestProgress:

    def test_progress_from_grouped_sums(self, run_scenario):
        async def scenario(database):
            async with database.store() as store:
                coach = await store.create_coach("Ada")
                for hours in (1.0, 0.5):
                    await store.create_session(
                        coach.id, date.today(), Equipment.MAT, TrainingType.PRACTICE, hours,
                    )
                await store.create_session(
                    coach.id, date.today(), Equipment.REFORMER, TrainingType.PRACTICE, 24,
                )
                await store.create_session(
                    coach.id, date.today(), Equipment.REFORMER, TrainingType.PRACTICE, 6,
                )
                return await ProgressAggregator(store).compute_progress(coach.id)

        progress = run_scenario(scenario)

        assert progress[Equipment.MAT].practice == 1.5
        assert progress[Equipment.MAT].practice_percentage == 12.5
        assert progress[Equipment.REFORMER].practice == 30
        assert progress[Equipment.REFORMER].practice_percentage == 100.0
        assert progress[Equipment.CHAIR].total == 0


class TestSeedCoaches:

    def test_seeding_is_idempotent(self, run_scenario):
        async def scenario(database):
            first = await seed_coaches(database, ["Soukeyna", "Fabacary"])
            second = await seed_coaches(database, ["Soukeyna", "Fabacary", "Ada"])
            async with database.store() as store:
                coaches = await store.list_coaches()
            return first, second, coaches

        first, second, coaches = run_scenario(scenario)
        assert first == ["Soukeyna", "Fabacary"]
        assert second == ["Ada"]
        assert [c.name for c in coaches] == ["Ada", "Fabacary", "Soukeyna"]
