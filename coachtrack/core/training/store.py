"""
Persistence interface for coaches and training sessions.

The application layer only ever talks to a `SessionStore`. Concrete
implementations live in the infrastructure package (SQL database and an
in-memory mock); both raise the errors from `errors` so callers never
see backend-specific exceptions.
"""

from datetime import date
from typing import Any, Optional, Protocol
from uuid import UUID

from .models import Coach, Equipment, HoursTotal, TrainingSession, TrainingType


class SessionStore(Protocol):
    """
    Async store for coaches and their sessions.

    Coach lookups treat soft-deleted coaches as absent. Every method that
    receives an unknown identifier raises NotFoundError.
    """

    async def create_coach(
        self,
        name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Coach: ...

    async def list_coaches(self) -> list[Coach]: ...

    async def get_coach(self, coach_id: UUID) -> Coach: ...

    async def update_coach(self, coach_id: UUID, **changes: Any) -> Coach: ...

    async def delete_coach(self, coach_id: UUID) -> None: ...

    async def create_session(
        self,
        coach_id: UUID,
        date: date,
        equipment: Equipment,
        type: TrainingType,
        hours: float,
        notes: Optional[str] = None,
    ) -> TrainingSession: ...

    async def list_sessions(self, coach_id: UUID) -> list[TrainingSession]: ...

    async def get_session(self, session_id: UUID) -> TrainingSession: ...

    async def update_session(self, session_id: UUID, **changes: Any) -> TrainingSession: ...

    async def delete_session(self, session_id: UUID) -> None: ...

    async def delete_all_sessions(self, coach_id: UUID) -> int: ...

    async def sum_hours(self, coach_id: UUID) -> list[HoursTotal]: ...

    async def ping(self) -> None: ...
