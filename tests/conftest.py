"""
Shared fixtures and factories for the campaign planner tests.
"""

from typing import Optional, Sequence

import pytest

from campaign_planner import plan_campaign
from config import get_difficulty_settings
from models import (
    ClueDelivery,
    ClueElimination,
    ClueNarrative,
    PlannedClue,
    Solution,
)
from seeded_random import SeededRandom


def make_clue(
    position: int,
    category: str,
    element_ids: Sequence[str],
    elimination_type: str,
    act: str = "act1_setup",
    references: Sequence[int] = (),
    group_index: Optional[int] = None,
) -> PlannedClue:
    """Factory for hand-built clues."""
    return PlannedClue(
        position=position,
        act=act,
        elimination=ClueElimination(
            category=category,
            group_index=position - 1 if group_index is None else group_index,
            element_ids=tuple(element_ids),
            type=elimination_type,
        ),
        delivery=ClueDelivery(type="observation", speaker="Inspector Brown"),
        narrative=ClueNarrative(tone="establishing", references=tuple(references)),
    )


@pytest.fixture
def rng():
    return SeededRandom(42)


@pytest.fixture
def solution():
    return Solution(suspect_id="S01", item_id="I01", location_id="L01", time_id="T05")


@pytest.fixture
def intermediate():
    return get_difficulty_settings("intermediate")


@pytest.fixture
def expert():
    return get_difficulty_settings("expert")


@pytest.fixture
def beginner():
    return get_difficulty_settings("beginner")


@pytest.fixture
def expert_plan():
    return plan_campaign({"seed": 42, "difficulty": "expert"})


@pytest.fixture
def beginner_plan():
    return plan_campaign({"seed": 7, "difficulty": "beginner"})
