"""
Database connection management.

Provides the engine lifecycle and a context manager that hands out a
SessionStore per unit of work. Includes a mock mode with in-memory
storage for local development.

Using the repository pattern means most code never touches this module
directly - it goes through a SessionStore which handles the translation
between domain models and database rows.
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, Optional, Protocol, Union

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from coachtrack.core.training.errors import ConflictError
from coachtrack.core.training.store import SessionStore

from .repositories.memory import InMemorySessionStore
from .repositories.sessions import SqlSessionStore
from .tables import Base

logger = logging.getLogger(__name__)


class DatabaseConnectionError(Exception):
    """Raised when the database can't be reached or initialized."""
    pass


@dataclass
class DatabaseConfig:
    """Configuration for the database connection."""
    url: str
    echo: bool = False


class StoreProvider(Protocol):
    """What the API needs from a database: a store per unit of work."""

    async def init_schema(self) -> None: ...
    def store(self): ...
    async def close(self) -> None: ...


def _ensure_sqlite_dir(url: str) -> None:
    parsed = make_url(url)
    if not parsed.drivername.startswith("sqlite"):
        return
    db_path = parsed.database
    if not db_path or db_path == ":memory:":
        return
    parent = os.path.dirname(db_path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores REFERENCES clauses unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """
    SQL database behind the SessionStore interface.

    Owns one async engine for the lifetime of the application. Each call
    to `store()` opens a fresh AsyncSession, so requests never share
    transactional state.

    Usage:
        database = Database(DatabaseConfig(url="sqlite+aiosqlite:///app.db"))
        await database.init_schema()
        async with database.store() as store:
            coaches = await store.list_coaches()
        await database.close()
    """

    def __init__(self, config: DatabaseConfig) -> None:
        _ensure_sqlite_dir(config.url)

        self._engine = create_async_engine(config.url, echo=config.echo, future=True)
        if self._engine.dialect.name == "sqlite":
            _enable_sqlite_foreign_keys(self._engine)

        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False)

        logger.debug(
            "Created database engine",
            extra={"dialect": self._engine.dialect.name}
        )

    async def init_schema(self) -> None:
        """Create the tables if they don't exist yet."""
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(
                "Database initialization failed",
                extra={"error": str(e)}
            )
            raise DatabaseConnectionError(f"Database initialization failed: {e}")

        logger.info("Database schema ready")

    @asynccontextmanager
    async def store(self) -> AsyncGenerator[SessionStore, None]:
        async with self._sessionmaker() as session:
            yield SqlSessionStore(session)

    async def close(self) -> None:
        await self._engine.dispose()
        logger.debug("Disposed database engine")


# ---------------------------------------------------------------------------
# Mock Database for Local Development
# ---------------------------------------------------------------------------

class MockDatabase:
    """
    In-memory stand-in for Database.

    Every unit of work gets the same InMemorySessionStore, so data
    persists across requests for as long as the process lives.
    """

    def __init__(self) -> None:
        self._store = InMemorySessionStore()
        logger.info("Using in-memory store (mock mode)")

    async def init_schema(self) -> None:
        return None

    @asynccontextmanager
    async def store(self) -> AsyncGenerator[SessionStore, None]:
        yield self._store

    async def close(self) -> None:
        return None


def create_database(
    config: Optional[DatabaseConfig] = None,
    mock_mode: bool = False,
) -> Union[Database, MockDatabase]:
    """
    Factory function for the application's database.

    Returns a MockDatabase in mock mode, otherwise a Database for the
    configured URL.
    """
    if mock_mode:
        return MockDatabase()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return Database(config)


async def seed_coaches(database: StoreProvider, names: list[str]) -> list[str]:
    """
    Create coaches that don't exist yet.

    Returns the names that were actually created; names already taken
    are skipped, so running this on every startup is safe.
    """
    created = []
    async with database.store() as store:
        for name in names:
            try:
                await store.create_coach(name)
            except ConflictError:
                logger.debug("Seed coach already exists", extra={"coach_name": name})
                continue
            created.append(name)

    if created:
        logger.info("Seeded coaches", extra={"coaches": created})
    return created
