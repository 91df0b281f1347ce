"""
Coach API endpoints.

Coaches are the people logging training hours. Besides plain CRUD this
module exposes the derived views: progress against the certification
objectives and a short summary of logged sessions.

Deleting a coach is a soft delete - the coach disappears from every
endpoint but its records stay in the database.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...core.training.models import (
    Coach,
    Equipment,
    validate_email,
    validate_name,
    validate_phone,
)
from ...core.training.progress import CoachSummary, EquipmentProgress
from ..dependencies import ProgressAggregatorDep, SessionStoreDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class CoachCreateRequest(BaseModel):
    """Request to register a new coach."""
    name: str = Field(description="Unique display name, 2 to 50 characters")
    email: Optional[str] = Field(None, description="Contact email")
    phone: Optional[str] = Field(None, description="Contact phone number")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return validate_name(value)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: Optional[str]) -> Optional[str]:
        return validate_email(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: Optional[str]) -> Optional[str]:
        return validate_phone(value)


class CoachUpdateRequest(CoachCreateRequest):
    """Partial update: only the fields present in the body change."""
    name: Optional[str] = Field(None, description="New display name")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("Coach name cannot be empty")
        return validate_name(value)

    @model_validator(mode="after")
    def require_a_field(self) -> "CoachUpdateRequest":
        if not self.model_fields_set:
            raise ValueError("At least one field is required")
        return self


class CoachResponse(BaseModel):
    """A coach as returned by the API."""
    id: UUID
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, coach: Coach) -> "CoachResponse":
        return cls(
            id=coach.id,
            name=coach.name,
            email=coach.email,
            phone=coach.phone,
            is_active=coach.is_active,
            created_at=coach.created_at,
            updated_at=coach.updated_at,
        )


class MessageResponse(BaseModel):
    message: str


class ObjectivesResponse(BaseModel):
    practice: float
    observation: float
    total: float


class EquipmentProgressResponse(BaseModel):
    """Hours and completion percentages for one piece of equipment."""
    model_config = ConfigDict(populate_by_name=True)

    practice: float = Field(description="Practice hours logged")
    observation: float = Field(description="Observation hours logged")
    total: float = Field(description="Practice + observation hours")
    objectives: ObjectivesResponse
    practice_percentage: float = Field(alias="practicePercentage")
    observation_percentage: float = Field(alias="observationPercentage")
    total_percentage: float = Field(alias="totalPercentage")
    is_complete: bool = Field(alias="isComplete", description="Practice and observation targets both met")

    @classmethod
    def from_domain(cls, progress: EquipmentProgress) -> "EquipmentProgressResponse":
        return cls(
            practice=progress.practice,
            observation=progress.observation,
            total=progress.total,
            objectives=ObjectivesResponse(**progress.objectives.as_dict()),
            practice_percentage=progress.practice_percentage,
            observation_percentage=progress.observation_percentage,
            total_percentage=progress.total_percentage,
            is_complete=progress.is_complete,
        )


class HoursBreakdownResponse(BaseModel):
    practice: float
    observation: float
    total: float


class CoachSummaryResponse(BaseModel):
    """Session count and hours, overall and per equipment."""
    model_config = ConfigDict(populate_by_name=True)

    total_sessions: int = Field(alias="totalSessions")
    total_hours: float = Field(alias="totalHours")
    by_equipment: dict[str, HoursBreakdownResponse] = Field(alias="byEquipment")

    @classmethod
    def from_domain(cls, summary: CoachSummary) -> "CoachSummaryResponse":
        return cls(
            total_sessions=summary.total_sessions,
            total_hours=summary.total_hours,
            by_equipment={
                equipment.value: HoursBreakdownResponse(
                    practice=hours.practice,
                    observation=hours.observation,
                    total=hours.total,
                )
                for equipment, hours in summary.by_equipment.items()
            },
        )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[CoachResponse],
    summary="List coaches",
    description="Active coaches ordered by name",
)
async def list_coaches(store: SessionStoreDep) -> list[CoachResponse]:
    coaches = await store.list_coaches()
    return [CoachResponse.from_domain(coach) for coach in coaches]


@router.post(
    "",
    response_model=CoachResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create coach",
    description="Register a new coach. Names are unique (case-sensitive).",
    responses={409: {"description": "A coach with this name already exists"}},
)
async def create_coach(
    request: CoachCreateRequest,
    store: SessionStoreDep,
) -> CoachResponse:
    coach = await store.create_coach(
        name=request.name,
        email=request.email,
        phone=request.phone,
    )
    return CoachResponse.from_domain(coach)


@router.get(
    "/{coach_id}",
    response_model=CoachResponse,
    summary="Get coach",
)
async def get_coach(coach_id: UUID, store: SessionStoreDep) -> CoachResponse:
    coach = await store.get_coach(coach_id)
    return CoachResponse.from_domain(coach)


@router.put(
    "/{coach_id}",
    response_model=CoachResponse,
    summary="Update coach",
    description="Change a coach's name or contact details",
)
async def update_coach(
    coach_id: UUID,
    request: CoachUpdateRequest,
    store: SessionStoreDep,
) -> CoachResponse:
    changes = request.model_dump(exclude_unset=True)
    coach = await store.update_coach(coach_id, **changes)

    logger.info(
        "Updated coach",
        extra={"coach_id": str(coach_id), "fields": sorted(changes)}
    )
    return CoachResponse.from_domain(coach)


@router.delete(
    "/{coach_id}",
    response_model=MessageResponse,
    summary="Delete coach",
    description="Deactivate a coach. Its sessions are kept but no longer reachable.",
)
async def delete_coach(coach_id: UUID, store: SessionStoreDep) -> MessageResponse:
    await store.delete_coach(coach_id)
    return MessageResponse(message="Coach deleted successfully")


@router.get(
    "/{coach_id}/progress",
    response_model=dict[str, EquipmentProgressResponse],
    summary="Get coach progress",
    description="Hours per equipment compared to the certification objectives",
)
async def get_progress(
    coach_id: UUID,
    aggregator: ProgressAggregatorDep,
) -> dict[str, EquipmentProgressResponse]:
    """
    Progress towards certification.

    Every equipment is present, with zeros when the coach has not logged
    anything on it yet. Percentages are capped at 100.
    """
    progress = await aggregator.compute_progress(coach_id)
    return {
        equipment.value: EquipmentProgressResponse.from_domain(progress[equipment])
        for equipment in Equipment
        if equipment in progress
    }


@router.get(
    "/{coach_id}/summary",
    response_model=CoachSummaryResponse,
    summary="Get coach summary",
    description="Number of sessions and hours logged, overall and per equipment",
)
async def get_summary(
    coach_id: UUID,
    aggregator: ProgressAggregatorDep,
) -> CoachSummaryResponse:
    summary = await aggregator.compute_summary(coach_id)
    return CoachSummaryResponse.from_domain(summary)
