"""
In-memory store for mock mode.

Implements just enough of the SessionStore interface to run the API and
the tests without a database. Data lives in two dicts and is lost when
the process exits.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional
from uuid import UUID

from coachtrack.core.training.errors import ConflictError, NotFoundError
from coachtrack.core.training.models import (
    COACH_UPDATABLE_FIELDS,
    SESSION_UPDATABLE_FIELDS,
    Coach,
    Equipment,
    HoursTotal,
    TrainingSession,
    TrainingType,
    check_update_fields,
    utcnow,
)

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """
    SessionStore backed by plain dicts.

    Objects are copied on the way in and out so callers can't mutate
    stored state behind the store's back.
    """

    def __init__(self) -> None:
        self._coaches: dict[UUID, Coach] = {}
        self._sessions: dict[UUID, TrainingSession] = {}

    async def create_coach(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Coach:
        coach = Coach(name=name, email=email, phone=phone)
        self._ensure_name_available(coach.name)
        self._coaches[coach.id] = coach
        logger.debug("Created coach in memory", extra={"coach_id": str(coach.id)})
        return replace(coach)

    async def list_coaches(self) -> list[Coach]:
        active = [c for c in self._coaches.values() if c.is_active]
        return [replace(c) for c in sorted(active, key=lambda c: c.name)]

    async def get_coach(self, coach_id: UUID) -> Coach:
        return replace(self._active_coach(coach_id))

    async def update_coach(self, coach_id: UUID, **changes: Any) -> Coach:
        check_update_fields(changes, COACH_UPDATABLE_FIELDS)
        current = self._active_coach(coach_id)

        updated = replace(current, **changes, updated_at=utcnow())
        if updated.name != current.name:
            self._ensure_name_available(updated.name)

        self._coaches[coach_id] = updated
        return replace(updated)

    async def delete_coach(self, coach_id: UUID) -> None:
        coach = self._active_coach(coach_id)
        coach.is_active = False
        coach.updated_at = utcnow()
        logger.debug("Deactivated coach in memory", extra={"coach_id": str(coach_id)})

    async def create_session(
        self,
        coach_id: UUID,
        date: date,
        equipment: Equipment,
        type: TrainingType,
        hours: float,
        notes: Optional[str] = None,
    ) -> TrainingSession:
        session = TrainingSession(
            coach_id=coach_id,
            date=date,
            equipment=equipment,
            type=type,
            hours=hours,
            notes=notes,
        )
        session.coach_name = self._active_coach(coach_id).name
        self._sessions[session.id] = session
        return replace(session)

    async def list_sessions(self, coach_id: UUID) -> list[TrainingSession]:
        coach = self._active_coach(coach_id)
        owned = [s for s in self._sessions.values() if s.coach_id == coach_id]
        owned.sort(key=lambda s: (s.date, s.created_at), reverse=True)
        return [replace(s, coach_name=coach.name) for s in owned]

    async def get_session(self, session_id: UUID) -> TrainingSession:
        session = self._reachable_session(session_id)
        return replace(session, coach_name=self._coaches[session.coach_id].name)

    async def update_session(self, session_id: UUID, **changes: Any) -> TrainingSession:
        check_update_fields(changes, SESSION_UPDATABLE_FIELDS)
        current = self._reachable_session(session_id)

        updated = replace(
            current,
            **changes,
            coach_name=self._coaches[current.coach_id].name,
            updated_at=utcnow(),
        )
        self._sessions[session_id] = updated
        return replace(updated)

    async def delete_session(self, session_id: UUID) -> None:
        self._reachable_session(session_id)
        del self._sessions[session_id]

    async def delete_all_sessions(self, coach_id: UUID) -> int:
        self._active_coach(coach_id)
        doomed = [sid for sid, s in self._sessions.items() if s.coach_id == coach_id]
        for sid in doomed:
            del self._sessions[sid]
        return len(doomed)

    async def sum_hours(self, coach_id: UUID) -> list[HoursTotal]:
        sums: dict[tuple[Equipment, TrainingType], float] = {}
        for session in self._sessions.values():
            if session.coach_id != coach_id:
                continue
            key = (session.equipment, session.type)
            sums[key] = sums.get(key, 0.0) + session.hours
        return [
            HoursTotal(equipment=equipment, type=type_, hours=hours)
            for (equipment, type_), hours in sums.items()
        ]

    async def ping(self) -> None:
        return None

    def _active_coach(self, coach_id: UUID) -> Coach:
        coach = self._coaches.get(coach_id)
        if coach is None or not coach.is_active:
            raise NotFoundError(f"Coach {coach_id} not found")
        return coach

    def _reachable_session(self, session_id: UUID) -> TrainingSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        coach = self._coaches.get(session.coach_id)
        if coach is None or not coach.is_active:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    def _ensure_name_available(self, name: str) -> None:
        if any(c.name == name for c in self._coaches.values()):
            raise ConflictError(f"A coach named '{name}' already exists")
