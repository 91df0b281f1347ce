"""
Training session API endpoints.

Sessions are the hours a coach logs on one piece of equipment on one
day. They are created and listed under their coach
(`/coaches/{coach_id}/sessions`) and addressed individually by id
(`/sessions/{session_id}`).

All field checks happen in the request models, before the store is
called, so a rejected request never writes anything.
"""

import logging
import datetime as dt
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...core.training.models import (
    Equipment,
    TrainingSession,
    TrainingType,
    validate_hours,
    validate_notes,
    validate_session_date,
)
from ..dependencies import SessionStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class SessionCreateRequest(BaseModel):
    """Request to log a training session."""
    date: dt.date = Field(description="Day of the session (YYYY-MM-DD), not in the future")
    equipment: Equipment = Field(description="reformer, mat or chair")
    type: TrainingType = Field(description="practice or observation")
    hours: float = Field(description="Duration in hours: 0.5 to 24, in steps of 0.5")
    notes: Optional[str] = Field(None, description="Free text, up to 500 characters")

    @field_validator("date")
    @classmethod
    def check_date(cls, value: dt.date) -> dt.date:
        return validate_session_date(value)

    # Runs on the raw JSON value so booleans are not coerced to 1.0
    @field_validator("hours", mode="before")
    @classmethod
    def check_hours(cls, value: float) -> float:
        return validate_hours(value)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, value: Optional[str]) -> Optional[str]:
        return validate_notes(value)


class SessionUpdateRequest(BaseModel):
    """
    Partial session update.

    Only the fields present in the body change. `notes` may be set to
    null to clear it; the other fields can't be cleared.
    """
    date: Optional[dt.date] = None
    equipment: Optional[Equipment] = None
    type: Optional[TrainingType] = None
    hours: Optional[float] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("date")
    @classmethod
    def check_date(cls, value: Optional[dt.date]) -> Optional[dt.date]:
        if value is None:
            raise ValueError("Date cannot be empty")
        return validate_session_date(value)

    @field_validator("equipment", "type")
    @classmethod
    def check_required(cls, value):
        if value is None:
            raise ValueError("Field cannot be empty")
        return value

    @field_validator("hours", mode="before")
    @classmethod
    def check_hours(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            raise ValueError("Hours cannot be empty")
        return validate_hours(value)

    @field_validator("notes")
    @classmethod
    def check_notes(cls, value: Optional[str]) -> Optional[str]:
        return validate_notes(value)

    @model_validator(mode="after")
    def require_a_field(self) -> "SessionUpdateRequest":
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self


class SessionResponse(BaseModel):
    """A training session as returned by the API."""
    id: UUID
    coach_id: UUID
    coach_name: Optional[str] = None
    date: dt.date
    equipment: Equipment
    type: TrainingType
    hours: float
    notes: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_domain(cls, session: TrainingSession) -> "SessionResponse":
        return cls(
            id=session.id,
            coach_id=session.coach_id,
            coach_name=session.coach_name,
            date=session.date,
            equipment=session.equipment,
            type=session.type,
            hours=session.hours,
            notes=session.notes,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class MessageResponse(BaseModel):
    message: str


class ClearSessionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_count: int = Field(alias="deletedCount")


# ---------------------------------------------------------------------------
# Coach-scoped endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/coaches/{coach_id}/sessions",
    response_model=list[SessionResponse],
    summary="List coach sessions",
    description="Sessions of one coach, newest first",
    tags=["Coaches"],
)
async def list_sessions(coach_id: UUID, store: SessionStoreDep) -> list[SessionResponse]:
    sessions = await store.list_sessions(coach_id)
    return [SessionResponse.from_domain(session) for session in sessions]


@router.post(
    "/coaches/{coach_id}/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log a session",
    tags=["Coaches"],
)
async def create_session(
    coach_id: UUID,
    request: SessionCreateRequest,
    store: SessionStoreDep,
) -> SessionResponse:
    session = await store.create_session(
        coach_id=coach_id,
        date=request.date,
        equipment=request.equipment,
        type=request.type,
        hours=request.hours,
        notes=request.notes,
    )
    return SessionResponse.from_domain(session)


@router.delete(
    "/coaches/{coach_id}/sessions",
    response_model=ClearSessionsResponse,
    summary="Clear coach history",
    description="Delete every session of a coach. Succeeds with a count of 0 when there is nothing to delete.",
    tags=["Coaches"],
)
async def delete_all_sessions(coach_id: UUID, store: SessionStoreDep) -> ClearSessionsResponse:
    deleted = await store.delete_all_sessions(coach_id)
    return ClearSessionsResponse(
        message="All sessions deleted successfully",
        deleted_count=deleted,
    )


# ---------------------------------------------------------------------------
# Session endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    summary="Get session",
)
async def get_session(session_id: UUID, store: SessionStoreDep) -> SessionResponse:
    session = await store.get_session(session_id)
    return SessionResponse.from_domain(session)


@router.put(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    summary="Update session",
    description="Change any of date, equipment, type, hours or notes",
)
async def update_session(
    session_id: UUID,
    request: SessionUpdateRequest,
    store: SessionStoreDep,
) -> SessionResponse:
    changes = request.model_dump(exclude_unset=True)
    session = await store.update_session(session_id, **changes)

    logger.info(
        "Updated session",
        extra={"session_id": str(session_id), "fields": sorted(changes)}
    )
    return SessionResponse.from_domain(session)


@router.delete(
    "/sessions/{session_id}",
    response_model=MessageResponse,
    summary="Delete session",
)
async def delete_session(session_id: UUID, store: SessionStoreDep) -> MessageResponse:
    await store.delete_session(session_id)
    return MessageResponse(message="Session deleted successfully")
