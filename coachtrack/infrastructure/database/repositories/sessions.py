"""
SQL repository for coaches and training sessions.

This module implements the repository pattern for the tracking data.
The repository:
1. Translates between domain models and database rows
2. Encapsulates all queries
3. Translates SQLAlchemy errors into domain errors

The application code never builds queries directly - it asks the store
for what it needs in domain terms.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from coachtrack.core.training.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
)
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

from ..tables import CoachRow, SessionRow

logger = logging.getLogger(__name__)


class SqlSessionStore:
    """
    SessionStore backed by a SQLAlchemy async session.

    One instance wraps one AsyncSession, i.e. one request. Each write
    method commits before returning, so a method that returns has
    persisted its change and a method that raises has persisted nothing.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    # -----------------------------------------------------------------------
    # Coaches
    # -----------------------------------------------------------------------

    async def create_coach(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Coach:
        coach = Coach(name=name, email=email, phone=phone)
        await self._ensure_name_available(coach.name)

        self._session.add(CoachRow(
            id=coach.id,
            name=coach.name,
            email=coach.email,
            phone=coach.phone,
            is_active=coach.is_active,
            created_at=coach.created_at,
            updated_at=coach.updated_at,
        ))
        await self._commit()

        logger.info(
            "Created coach",
            extra={"coach_id": str(coach.id), "coach_name": coach.name}
        )
        return coach

    async def list_coaches(self) -> list[Coach]:
        rows = await self._scalars(
            select(CoachRow)
            .where(CoachRow.is_active.is_(True))
            .order_by(CoachRow.name)
        )
        return [self._coach_from_row(row) for row in rows]

    async def get_coach(self, coach_id: UUID) -> Coach:
        row = await self._get_active_coach_row(coach_id)
        return self._coach_from_row(row)

    async def update_coach(self, coach_id: UUID, **changes: Any) -> Coach:
        check_update_fields(changes, COACH_UPDATABLE_FIELDS)
        row = await self._get_active_coach_row(coach_id)

        coach = replace(self._coach_from_row(row), **changes, updated_at=utcnow())
        if coach.name != row.name:
            await self._ensure_name_available(coach.name)

        row.name = coach.name
        row.email = coach.email
        row.phone = coach.phone
        row.updated_at = coach.updated_at
        await self._commit()

        return coach

    async def delete_coach(self, coach_id: UUID) -> None:
        """Soft delete: the coach and its sessions stay in the tables."""
        row = await self._get_active_coach_row(coach_id)
        row.is_active = False
        row.updated_at = utcnow()
        await self._commit()

        logger.info("Deactivated coach", extra={"coach_id": str(coach_id)})

    # -----------------------------------------------------------------------
    # Sessions
    # -----------------------------------------------------------------------

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
        coach_row = await self._get_active_coach_row(coach_id)
        session.coach_name = coach_row.name

        self._session.add(SessionRow(
            id=session.id,
            coach_id=session.coach_id,
            date=session.date,
            equipment=session.equipment.value,
            type=session.type.value,
            hours=session.hours,
            notes=session.notes,
            created_at=session.created_at,
            updated_at=session.updated_at,
        ))
        await self._commit()

        logger.info(
            "Created session",
            extra={
                "session_id": str(session.id),
                "coach_id": str(coach_id),
                "equipment": session.equipment.value,
                "hours": session.hours,
            }
        )
        return session

    async def list_sessions(self, coach_id: UUID) -> list[TrainingSession]:
        """Newest first: by date, then by creation time."""
        coach_row = await self._get_active_coach_row(coach_id)
        rows = await self._scalars(
            select(SessionRow)
            .where(SessionRow.coach_id == coach_id)
            .order_by(SessionRow.date.desc(), SessionRow.created_at.desc())
        )
        return [self._session_from_row(row, coach_row.name) for row in rows]

    async def get_session(self, session_id: UUID) -> TrainingSession:
        row, coach_name = await self._get_session_row(session_id)
        return self._session_from_row(row, coach_name)

    async def update_session(self, session_id: UUID, **changes: Any) -> TrainingSession:
        check_update_fields(changes, SESSION_UPDATABLE_FIELDS)
        row, coach_name = await self._get_session_row(session_id)

        session = replace(self._session_from_row(row, coach_name), **changes, updated_at=utcnow())

        row.date = session.date
        row.equipment = session.equipment.value
        row.type = session.type.value
        row.hours = session.hours
        row.notes = session.notes
        row.updated_at = session.updated_at
        await self._commit()

        return session

    async def delete_session(self, session_id: UUID) -> None:
        row, _ = await self._get_session_row(session_id)
        await self._session.delete(row)
        await self._commit()

        logger.info("Deleted session", extra={"session_id": str(session_id)})

    async def delete_all_sessions(self, coach_id: UUID) -> int:
        await self._get_active_coach_row(coach_id)
        result = await self._execute(
            delete(SessionRow).where(SessionRow.coach_id == coach_id)
        )
        await self._commit()

        deleted = result.rowcount or 0
        logger.info(
            "Cleared coach sessions",
            extra={"coach_id": str(coach_id), "deleted_count": deleted}
        )
        return deleted

    async def sum_hours(self, coach_id: UUID) -> list[HoursTotal]:
        result = await self._execute(
            select(SessionRow.equipment, SessionRow.type, func.sum(SessionRow.hours))
            .where(SessionRow.coach_id == coach_id)
            .group_by(SessionRow.equipment, SessionRow.type)
        )
        return [
            HoursTotal(
                equipment=Equipment(equipment),
                type=TrainingType(type_),
                hours=float(hours or 0),
            )
            for equipment, type_, hours in result.all()
        ]

    async def ping(self) -> None:
        await self._execute(select(1))

    # -----------------------------------------------------------------------
    # Private Methods
    # -----------------------------------------------------------------------

    async def _get_active_coach_row(self, coach_id: UUID) -> CoachRow:
        try:
            row = await self._session.get(CoachRow, coach_id)
        except SQLAlchemyError as e:
            raise self._store_error("Failed to load coach", e)

        if row is None or not row.is_active:
            raise NotFoundError(f"Coach {coach_id} not found")
        return row

    async def _get_session_row(self, session_id: UUID) -> tuple[SessionRow, str]:
        """Load a session whose coach is still active, with the coach's name."""
        result = await self._execute(
            select(SessionRow, CoachRow.name)
            .join(CoachRow, SessionRow.coach_id == CoachRow.id)
            .where(SessionRow.id == session_id, CoachRow.is_active.is_(True))
        )
        found = result.first()
        if found is None:
            raise NotFoundError(f"Session {session_id} not found")
        return found[0], found[1]

    async def _ensure_name_available(self, name: str) -> None:
        result = await self._execute(
            select(CoachRow.id).where(CoachRow.name == name)
        )
        if result.first() is not None:
            raise ConflictError(f"A coach named '{name}' already exists")

    async def _execute(self, statement):
        try:
            return await self._session.execute(statement)
        except SQLAlchemyError as e:
            raise self._store_error("Query failed", e)

    async def _scalars(self, statement) -> list:
        result = await self._execute(statement)
        return list(result.scalars().all())

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            # Only the coach name is unique; anything else is a real failure.
            if "name" in str(e.orig).lower() or "unique" in str(e.orig).lower():
                raise ConflictError("A coach with this name already exists")
            raise self._store_error("Integrity error", e)
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise self._store_error("Commit failed", e)

    def _store_error(self, message: str, error: Exception) -> StoreError:
        logger.error(message, extra={"error": str(error)})
        return StoreError(f"{message}: {error}")

    def _coach_from_row(self, row: CoachRow) -> Coach:
        return Coach(
            id=row.id,
            name=row.name,
            email=row.email,
            phone=row.phone,
            is_active=row.is_active,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _session_from_row(self, row: SessionRow, coach_name: Optional[str]) -> TrainingSession:
        return TrainingSession(
            id=row.id,
            coach_id=row.coach_id,
            coach_name=coach_name,
            date=row.date,
            equipment=row.equipment,
            type=row.type,
            hours=row.hours,
            notes=row.notes,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
