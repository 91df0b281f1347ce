"""
SQLAlchemy table definitions.

Two tables: `coaches` and `training_sessions`. The check constraints
repeat the domain rules so rows written outside the application (seed
scripts, manual fixes) can't break the progress arithmetic.
"""

import datetime as dt
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    String,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class CoachRow(Base):
    __tablename__ = "coaches"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)


class SessionRow(Base):
    __tablename__ = "training_sessions"
    __table_args__ = (
        CheckConstraint("equipment IN ('reformer', 'mat', 'chair')", name="ck_sessions_equipment"),
        CheckConstraint("type IN ('practice', 'observation')", name="ck_sessions_type"),
        CheckConstraint("hours >= 0.5 AND hours <= 24", name="ck_sessions_hours"),
        Index("ix_sessions_coach_date", "coach_id", "date"),
        Index("ix_sessions_coach_equipment", "coach_id", "equipment"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True)
    coach_id: Mapped[UUID] = mapped_column(Uuid, ForeignKey("coaches.id", ondelete="CASCADE"), index=True)

    date: Mapped[dt.date] = mapped_column(Date)
    equipment: Mapped[str] = mapped_column(String(16))
    type: Mapped[str] = mapped_column(String(16))
    hours: Mapped[float] = mapped_column(Float)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)
