"""
Domain models for training-hour tracking.

These models represent the core business concepts: coaches, the training
sessions they log, and the objectives they train towards. They have no
dependencies on FastAPI or SQLAlchemy; validation lives here so every
store implementation enforces the same rules.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from .errors import InvalidInputError


NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
NOTES_MAX_LENGTH = 500
HOURS_MIN = 0.5
HOURS_MAX = 24.0
HOURS_STEP = 0.5

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")
_PHONE_PATTERN = re.compile(r"^\+?[\d\s().-]{6,20}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Equipment(Enum):
    """Apparatus a session was done on."""
    REFORMER = "reformer"
    MAT = "mat"
    CHAIR = "chair"


class TrainingType(Enum):
    """
    Nature of a training session.

    Practice hours are spent teaching or doing the work; observation
    hours are spent watching a certified instructor.
    """
    PRACTICE = "practice"
    OBSERVATION = "observation"


# ---------------------------------------------------------------------------
# Field validation
# ---------------------------------------------------------------------------

def validate_name(name: str) -> str:
    """Trim a coach name and check its length."""
    if not isinstance(name, str):
        raise InvalidInputError("Coach name is required")
    name = name.strip()
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidInputError(
            f"Coach name must be between {NAME_MIN_LENGTH} and "
            f"{NAME_MAX_LENGTH} characters"
        )
    return name


def validate_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip().lower()
    if not email:
        return None
    if not _EMAIL_PATTERN.match(email):
        raise InvalidInputError("Invalid email address")
    return email


def validate_phone(phone: Optional[str]) -> Optional[str]:
    if phone is None:
        return None
    phone = phone.strip()
    if not phone:
        return None
    if not _PHONE_PATTERN.match(phone) or sum(c.isdigit() for c in phone) < 6:
        raise InvalidInputError("Invalid phone number")
    return phone


def validate_session_date(value: date) -> date:
    """Sessions are logged after the fact, never ahead of today."""
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise InvalidInputError("Invalid date")
    if value > date.today():
        raise InvalidInputError("Session date cannot be in the future")
    return value


def validate_hours(hours: float) -> float:
    """
    Hours must be a multiple of 0.5 between 0.5 and 24.

    Multiples of 0.5 are exact in binary floating point, so dividing by the
    step and checking for an integer is a precise test.
    """
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise InvalidInputError("Hours must be a number")
    hours = float(hours)
    if not HOURS_MIN <= hours <= HOURS_MAX:
        raise InvalidInputError(
            f"Hours must be between {HOURS_MIN} and {HOURS_MAX:g}"
        )
    if not (hours / HOURS_STEP).is_integer():
        raise InvalidInputError("Hours must be a multiple of 0.5")
    return hours


def validate_notes(notes: Optional[str]) -> Optional[str]:
    if notes is None:
        return None
    notes = notes.strip()
    if len(notes) > NOTES_MAX_LENGTH:
        raise InvalidInputError(
            f"Notes cannot exceed {NOTES_MAX_LENGTH} characters"
        )
    return notes or None


def parse_equipment(value) -> Equipment:
    if isinstance(value, Equipment):
        return value
    try:
        return Equipment(value)
    except ValueError:
        raise InvalidInputError("Equipment must be reformer, mat or chair")


def parse_training_type(value) -> TrainingType:
    if isinstance(value, TrainingType):
        return value
    try:
        return TrainingType(value)
    except ValueError:
        raise InvalidInputError("Type must be practice or observation")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

@dataclass
class Coach:
    """
    A coach working towards certification.

    Deleting a coach only clears `is_active`; the record and its sessions
    stay in storage but the coach disappears from every listing.
    """
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    is_active: bool = True
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.name = validate_name(self.name)
        self.email = validate_email(self.email)
        self.phone = validate_phone(self.phone)


@dataclass
class TrainingSession:
    """One block of hours logged by a coach on one piece of equipment."""
    coach_id: UUID
    date: date
    equipment: Equipment
    type: TrainingType
    hours: float
    notes: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    coach_name: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.date = validate_session_date(self.date)
        self.equipment = parse_equipment(self.equipment)
        self.type = parse_training_type(self.type)
        self.hours = validate_hours(self.hours)
        self.notes = validate_notes(self.notes)


@dataclass(frozen=True)
class HoursTotal:
    """Sum of hours for one (equipment, type) pair."""
    equipment: Equipment
    type: TrainingType
    hours: float


# Fields a session update may touch.
SESSION_UPDATABLE_FIELDS = frozenset({"date", "equipment", "type", "hours", "notes"})
COACH_UPDATABLE_FIELDS = frozenset({"name", "email", "phone"})


def check_update_fields(changes: dict, allowed: frozenset) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise InvalidInputError(f"Unknown fields: {', '.join(sorted(unknown))}")
