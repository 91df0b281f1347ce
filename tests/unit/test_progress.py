"""
Unit tests for progress aggregation.

The arithmetic is tested through the pure functions; the aggregator is
exercised against the in-memory store, which needs no database.
"""

import asyncio
from datetime import date
from uuid import uuid4

import pytest

from coachtrack.core.training.errors import NotFoundError
from coachtrack.core.training.models import Equipment, HoursTotal, TrainingType
from coachtrack.core.training.objectives import Objective
from coachtrack.core.training.progress import (
    ProgressAggregator,
    build_progress,
    build_summary,
    percentage,
)
from coachtrack.infrastructure.database.repositories import InMemorySessionStore


def total(equipment, training_type, hours):
    return HoursTotal(equipment=equipment, type=training_type, hours=hours)


# ---------------------------------------------------------------------------
# Pure function Tests
# ---------------------------------------------------------------------------

class TestPercentage:

    def test_partial_progress(self):
        assert percentage(6, 12) == 50.0

    def test_clamped_at_one_hundred(self):
        """Extra hours beyond the target don't push past 100%."""
        assert percentage(30, 22) == 100.0

    def test_zero_hours(self):
        assert percentage(0, 5) == 0.0


class TestBuildProgress:
    """Tests for turning grouped totals into per-equipment progress."""

    def test_no_sessions_gives_zeros_everywhere(self):
        """Every equipment is reported even without any hours."""
        progress = build_progress([])

        assert set(progress) == set(Equipment)
        for item in progress.values():
            assert item.total == 0
            assert item.total_percentage == 0

    def test_practice_and_observation_are_split(self):
        progress = build_progress([
            total(Equipment.REFORMER, TrainingType.PRACTICE, 11),
            total(Equipment.REFORMER, TrainingType.OBSERVATION, 2.5),
        ])

        reformer = progress[Equipment.REFORMER]
        assert reformer.practice == 11
        assert reformer.observation == 2.5
        assert reformer.total == 13.5
        assert reformer.practice_percentage == 50.0
        assert reformer.observation_percentage == 50.0
        assert reformer.total_percentage == pytest.approx(50.0)

    def test_mat_practice_scenario(self):
        """1.5h of mat practice is 12.5% of practice and 10% overall."""
        progress = build_progress([total(Equipment.MAT, TrainingType.PRACTICE, 1.5)])

        mat = progress[Equipment.MAT]
        assert mat.practice == 1.5
        assert mat.total == 1.5
        assert mat.practice_percentage == 12.5
        assert mat.total_percentage == pytest.approx(10.0)

    def test_overflow_is_clamped(self):
        """30h of reformer practice caps the practice bar at 100%."""
        progress = build_progress([total(Equipment.REFORMER, TrainingType.PRACTICE, 30)])

        reformer = progress[Equipment.REFORMER]
        assert reformer.practice == 30
        assert reformer.practice_percentage == 100.0
        assert reformer.total_percentage == 100.0
        assert not reformer.is_complete

    def test_complete_when_both_targets_met(self):
        progress = build_progress([
            total(Equipment.CHAIR, TrainingType.PRACTICE, 12),
            total(Equipment.CHAIR, TrainingType.OBSERVATION, 3),
        ])
        assert progress[Equipment.CHAIR].is_complete

    def test_repeated_groups_add_up(self):
        progress = build_progress([
            total(Equipment.MAT, TrainingType.OBSERVATION, 1),
            total(Equipment.MAT, TrainingType.OBSERVATION, 0.5),
        ])
        assert progress[Equipment.MAT].observation == 1.5

    def test_custom_objectives(self):
        """Only the equipment in the objectives table is reported."""
        objectives = {Equipment.MAT: Objective(practice=2, observation=2, total=4)}
        progress = build_progress(
            [
                total(Equipment.MAT, TrainingType.PRACTICE, 1),
                total(Equipment.CHAIR, TrainingType.PRACTICE, 1),
            ],
            objectives,
        )

        assert list(progress) == [Equipment.MAT]
        assert progress[Equipment.MAT].practice_percentage == 50.0


class TestBuildSummary:

    def test_summary_totals(self):
        summary = build_summary(
            [
                total(Equipment.MAT, TrainingType.PRACTICE, 2),
                total(Equipment.CHAIR, TrainingType.OBSERVATION, 1.5),
            ],
            session_count=3,
        )

        assert summary.total_sessions == 3
        assert summary.total_hours == 3.5
        assert summary.by_equipment[Equipment.MAT].total == 2
        assert summary.by_equipment[Equipment.CHAIR].observation == 1.5
        assert summary.by_equipment[Equipment.REFORMER].total == 0


# ---------------------------------------------------------------------------
# Aggregator Tests
# ---------------------------------------------------------------------------

class TestProgressAggregator:
    """The aggregator reads totals from a store on every call."""

    def test_progress_reflects_logged_sessions(self):
        store = InMemorySessionStore()
        aggregator = ProgressAggregator(store)

        async def scenario():
            coach = await store.create_coach("Ada")
            await store.create_session(
                coach.id, date.today(), Equipment.MAT, TrainingType.PRACTICE, 1.5
            )
            return await aggregator.compute_progress(coach.id)

        progress = asyncio.run(scenario())

        assert progress[Equipment.MAT].practice_percentage == 12.5
        assert progress[Equipment.REFORMER].total == 0

    def test_unknown_coach_raises_not_found(self):
        aggregator = ProgressAggregator(InMemorySessionStore())

        with pytest.raises(NotFoundError):
            asyncio.run(aggregator.compute_progress(uuid4()))

    def test_deleted_coach_raises_not_found(self):
        store = InMemorySessionStore()
        aggregator = ProgressAggregator(store)

        async def scenario():
            coach = await store.create_coach("Ada")
            await store.delete_coach(coach.id)
            await aggregator.compute_progress(coach.id)

        with pytest.raises(NotFoundError):
            asyncio.run(scenario())

    def test_summary_counts_sessions(self):
        store = InMemorySessionStore()
        aggregator = ProgressAggregator(store)

        async def scenario():
            coach = await store.create_coach("Ada")
            for hours in (1, 2):
                await store.create_session(
                    coach.id, date.today(), Equipment.REFORMER, TrainingType.PRACTICE, hours
                )
            return await aggregator.compute_summary(coach.id)

        summary = asyncio.run(scenario())

        assert summary.total_sessions == 2
        assert summary.total_hours == 3
