"""
Certification objectives.

Hours a coach must accumulate on each piece of equipment. The table is
fixed configuration: it is built once at import time and exposed as a
read-only mapping.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from .models import Equipment, TrainingType


@dataclass(frozen=True)
class Objective:
    """Target hours for one piece of equipment."""
    practice: float
    observation: float
    total: float

    def __post_init__(self) -> None:
        if min(self.practice, self.observation, self.total) <= 0:
            raise ValueError("Objective targets must be positive")
        if self.practice + self.observation != self.total:
            raise ValueError("Objective total must equal practice + observation")

    def target_for(self, training_type: TrainingType) -> float:
        if training_type is TrainingType.PRACTICE:
            return self.practice
        return self.observation

    def as_dict(self) -> dict[str, float]:
        return {
            "practice": self.practice,
            "observation": self.observation,
            "total": self.total,
        }


OBJECTIVES: Mapping[Equipment, Objective] = MappingProxyType({
    Equipment.REFORMER: Objective(practice=22, observation=5, total=27),
    Equipment.MAT: Objective(practice=12, observation=3, total=15),
    Equipment.CHAIR: Objective(practice=12, observation=3, total=15),
})
