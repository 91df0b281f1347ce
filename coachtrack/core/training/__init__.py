"""
Training-hour tracking logic.

Contains the domain models, the certification objectives, the store
interface and the progress aggregator.
"""

from .errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    StoreError,
    TrainingError,
)
from .models import (
    Coach,
    Equipment,
    HoursTotal,
    TrainingSession,
    TrainingType,
)
from .objectives import OBJECTIVES, Objective
from .progress import (
    CoachSummary,
    EquipmentProgress,
    ProgressAggregator,
    build_progress,
)
from .store import SessionStore

__all__ = [
    "Coach",
    "CoachSummary",
    "ConflictError",
    "Equipment",
    "EquipmentProgress",
    "HoursTotal",
    "InvalidInputError",
    "NotFoundError",
    "OBJECTIVES",
    "Objective",
    "ProgressAggregator",
    "SessionStore",
    "StoreError",
    "TrainingError",
    "TrainingSession",
    "TrainingType",
    "build_progress",
]
