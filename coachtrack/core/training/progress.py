"""
Progress aggregation.

Turns a coach's logged hours into a per-equipment view of how far they
are from each certification objective. The arithmetic is kept in pure
functions (`build_progress`, `build_summary`) so it can be tested without
a store; `ProgressAggregator` only adds the store lookups.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping
from uuid import UUID

from .models import Equipment, HoursTotal, TrainingType
from .objectives import OBJECTIVES, Objective
from .store import SessionStore

logger = logging.getLogger(__name__)


def percentage(actual: float, target: float) -> float:
    """Share of `target` reached, clamped to [0, 100]."""
    return max(0.0, min(100.0, actual / target * 100))


@dataclass
class EquipmentProgress:
    """Accumulated hours and completion for one piece of equipment."""
    equipment: Equipment
    objectives: Objective
    practice: float = 0.0
    observation: float = 0.0

    @property
    def total(self) -> float:
        return self.practice + self.observation

    @property
    def practice_percentage(self) -> float:
        return percentage(self.practice, self.objectives.target_for(TrainingType.PRACTICE))

    @property
    def observation_percentage(self) -> float:
        return percentage(self.observation, self.objectives.target_for(TrainingType.OBSERVATION))

    @property
    def total_percentage(self) -> float:
        return percentage(self.total, self.objectives.total)

    @property
    def is_complete(self) -> bool:
        """Both the practice and the observation targets are met."""
        return self.practice_percentage >= 100 and self.observation_percentage >= 100


@dataclass
class HoursBreakdown:
    practice: float = 0.0
    observation: float = 0.0

    @property
    def total(self) -> float:
        return self.practice + self.observation


@dataclass
class CoachSummary:
    """Headline numbers for a coach: how many sessions, how many hours."""
    total_sessions: int = 0
    total_hours: float = 0.0
    by_equipment: dict[Equipment, HoursBreakdown] = field(default_factory=dict)


def build_progress(
    totals: Iterable[HoursTotal],
    objectives: Mapping[Equipment, Objective] = OBJECTIVES,
) -> dict[Equipment, EquipmentProgress]:
    """
    Compare grouped hour totals to the objectives.

    Every equipment in `objectives` appears in the result, with zeros when
    the coach has no sessions on it. Totals may repeat a pair; they add up.
    """
    progress = {
        equipment: EquipmentProgress(equipment=equipment, objectives=objective)
        for equipment, objective in objectives.items()
    }

    for row in totals:
        entry = progress.get(row.equipment)
        if entry is None:
            continue
        if row.type is TrainingType.PRACTICE:
            entry.practice += row.hours
        else:
            entry.observation += row.hours

    return progress


def build_summary(
    totals: Iterable[HoursTotal],
    session_count: int,
) -> CoachSummary:
    summary = CoachSummary(
        total_sessions=session_count,
        by_equipment={equipment: HoursBreakdown() for equipment in Equipment},
    )
    for row in totals:
        breakdown = summary.by_equipment[row.equipment]
        if row.type is TrainingType.PRACTICE:
            breakdown.practice += row.hours
        else:
            breakdown.observation += row.hours
        summary.total_hours += row.hours
    return summary


class ProgressAggregator:
    """
    Computes progress views on demand.

    Nothing is cached: every call re-reads the coach's totals, so the view
    reflects whatever the store holds at that moment.
    """

    def __init__(
        self,
        store: SessionStore,
        objectives: Mapping[Equipment, Objective] = OBJECTIVES,
    ) -> None:
        self._store = store
        self._objectives = objectives

    async def compute_progress(self, coach_id: UUID) -> dict[Equipment, EquipmentProgress]:
        """Per-equipment hours and percentages for an active coach."""
        await self._store.get_coach(coach_id)
        totals = await self._store.sum_hours(coach_id)

        logger.debug(
            "Computed hour totals",
            extra={"coach_id": str(coach_id), "groups": len(totals)}
        )

        return build_progress(totals, self._objectives)

    async def compute_summary(self, coach_id: UUID) -> CoachSummary:
        sessions = await self._store.list_sessions(coach_id)
        totals = await self._store.sum_hours(coach_id)
        return build_summary(totals, len(sessions))
