"""
FastAPI dependency injection.

Dependencies provide the store, the aggregator and configuration to
route handlers. Using dependency injection means:
- Routes don't open their own database sessions (easier to test)
- The mock store can be swapped in through settings alone
- Resource lifecycle (sessions, engine) is managed in one place

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated, AsyncGenerator, Union

from fastapi import Depends, Request

from ..config.settings import Settings
from ..core.training.progress import ProgressAggregator
from ..core.training.store import SessionStore
from ..infrastructure.database.client import Database, MockDatabase

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Union[Database, MockDatabase]:
    """
    Provide the application's database.

    Created once in the application lifespan and kept on app.state.
    """
    return request.app.state.database


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


async def get_session_store(
    database: Annotated[Union[Database, MockDatabase], Depends(get_database)],
) -> AsyncGenerator[SessionStore, None]:
    """
    Provide a SessionStore for the duration of one request.

    This is a generator because the underlying database session must be
    closed after the request:
    1. Open a session
    2. Yield the store (FastAPI injects it)
    3. Close the session (cleanup after request)

    In mock mode the same in-memory store is shared by every request.
    """
    async with database.store() as store:
        yield store


def get_progress_aggregator(
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> ProgressAggregator:
    """The aggregator is stateless, so we create a new instance per request."""
    return ProgressAggregator(store)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
DatabaseDep = Annotated[Union[Database, MockDatabase], Depends(get_database)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
ProgressAggregatorDep = Annotated[ProgressAggregator, Depends(get_progress_aggregator)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
