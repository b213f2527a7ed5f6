"""
elimination_planner.py
======================
Partitions the non-solution elements of each category into elimination groups.

Every non-solution element ends up in exactly one group and the solution
element in none. Each group is tagged with an elimination mechanism suited to
its size, the act it should land in, an ordering priority, and whatever
context the eventual clue text will need (alibi location, time, item
category).

Group sizes are drawn at random within the difficulty's limits, so the same
seed always yields the same partition.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from config import (
    ALIBI_TYPES,
    CATEGORIES,
    ELIMINATION_TYPE_INFO,
    DifficultySettings,
    get_elimination_types_for_category,
)
from errors import InvariantViolation
from game_elements import CATALOG, GameCatalog
from models import CategoryEliminationPlan, EliminationContext, EliminationGroup, Solution
from seeded_random import SeededRandom

logger = logging.getLogger("tudor_mystery.elimination_planner")

# Size classes a group of a given size may use.
_SIZE_CLASSES = {
    1: ("single", "small"),
    2: ("small", "medium"),
    3: ("medium", "large"),
}
_LARGE_ONLY = ("large",)


# ---------------------------------------------------------------------------
# Per-group decisions
# ---------------------------------------------------------------------------

def select_elimination_type(
    rng:        SeededRandom,
    category:   str,
    group_size: int,
) -> str:
    """
    Pick a mechanism legal for `category` whose typical size fits the group.

    Falls back to any legal mechanism for the category when none matches.
    """
    legal = get_elimination_types_for_category(category)
    classes = _SIZE_CLASSES.get(group_size, _LARGE_ONLY)
    suitable = [t for t in legal if ELIMINATION_TYPE_INFO[t].typical_group_size in classes]
    return rng.pick(suitable or legal)


def determine_target_act(group_size: int, max_group_size: int) -> str:
    """Big groups open the story, pairs complicate it, singles decide it."""
    if group_size >= 3 or group_size >= max_group_size:
        return "act1_setup"
    if group_size == 2:
        return "act2_confrontation"
    return "act3_resolution"


def calculate_priority(group_index: int, group_size: int) -> int:
    """Lower sorts earlier: earlier groups and bigger groups first."""
    return group_index * 10 - group_size * 5


def build_elimination_context(
    rng:              SeededRandom,
    elimination_type: str,
    solution:         Solution,
    catalog:          GameCatalog = CATALOG,
) -> Optional[EliminationContext]:
    """
    Facts the clue text needs for `elimination_type`, or None if it needs none.

    Alibis name a location other than the crime scene and the crime time.
    category_secured names an item category that does not contain the stolen
    item. Gathering/presence mechanisms name a time before the crime, when
    one exists.
    """
    if elimination_type in ALIBI_TYPES:
        alibi_locations = [l.id for l in catalog.locations if l.id != solution.location_id]
        return EliminationContext(
            alibi_location=rng.pick(alibi_locations),
            alibi_time=solution.time_id,
        )

    if elimination_type == "category_secured":
        stolen = catalog.item(solution.item_id)
        stolen_category = stolen.category if stolen else None
        candidates = [c for c in catalog.item_categories() if c != stolen_category]
        if not candidates:
            return None
        return EliminationContext(item_category=rng.pick(candidates))

    if elimination_type in ("location_occupied", "location_visibility"):
        return EliminationContext(alibi_time=solution.time_id)

    if elimination_type in ("item_present", "all_together", "staff_activity"):
        crime_time = catalog.time(solution.time_id)
        crime_order = crime_time.order if crime_time else len(catalog.times)
        earlier = [t.id for t in catalog.times if t.order < crime_order]
        if earlier:
            return EliminationContext(alibi_time=rng.pick(earlier))
        return None

    return None


# ---------------------------------------------------------------------------
# Category planning
# ---------------------------------------------------------------------------

def plan_category_eliminations(
    rng:         SeededRandom,
    category:    str,
    element_ids: Sequence[str],
    settings:    DifficultySettings,
    solution:    Solution,
    catalog:     GameCatalog = CATALOG,
) -> CategoryEliminationPlan:
    """
    Split `element_ids` into consecutive groups of a shuffled order.

    While more than the maximum group size remains, each group takes a random
    size between the minimum and maximum; whatever is left at the end forms
    the final group.

    Args:
        rng:         Plan-wide generator.
        category:    "suspect" | "item" | "location" | "time".
        element_ids: Non-solution IDs of the category.
        settings:    Difficulty settings supplying group-size limits.
        solution:    Used for group context only.
        catalog:     Element catalog for context lookups.

    Returns:
        CategoryEliminationPlan whose groups partition `element_ids`.
    """
    max_size = settings.max_group_size.for_category(category)
    order = rng.shuffle(element_ids)

    groups: List[EliminationGroup] = []
    cursor = 0
    while cursor < len(order):
        remaining = len(order) - cursor
        if remaining <= max_size:
            size = remaining
        else:
            upper = min(max_size, remaining)
            size = rng.next_int(min(settings.min_group_size, upper), upper)

        members = tuple(order[cursor:cursor + size])
        cursor += size

        index = len(groups)
        elimination_type = select_elimination_type(rng, category, size)
        groups.append(EliminationGroup(
            index=index,
            element_ids=members,
            elimination_type=elimination_type,
            target_act=determine_target_act(size, max_size),
            priority=calculate_priority(index, size),
            context=build_elimination_context(rng, elimination_type, solution, catalog),
        ))

    logger.debug(
        "Planned %d %s group(s) covering %d element(s)",
        len(groups), category, len(order),
    )
    return CategoryEliminationPlan(groups=tuple(groups))


def partition_problems(
    category_plan: CategoryEliminationPlan,
    expected_ids:  Sequence[str],
) -> List[str]:
    """
    Describe how `category_plan` fails to partition `expected_ids`.

    An empty list means every expected ID appears in exactly one non-empty
    group and no other IDs appear.
    """
    problems: List[str] = []
    seen: Dict[str, int] = {}
    for group in category_plan.groups:
        if not group.element_ids:
            problems.append(f"group {group.index} is empty")
        for element_id in group.element_ids:
            seen[element_id] = seen.get(element_id, 0) + 1

    expected = set(expected_ids)
    missing = [eid for eid in expected_ids if eid not in seen]
    duplicated = sorted(eid for eid, n in seen.items() if n > 1)
    unexpected = sorted(eid for eid in seen if eid not in expected)
    if missing:
        problems.append(f"not eliminated: {', '.join(missing)}")
    if duplicated:
        problems.append(f"eliminated more than once: {', '.join(duplicated)}")
    if unexpected:
        problems.append(f"unexpected elements: {', '.join(unexpected)}")
    return problems


def plan_all_eliminations(
    rng:      SeededRandom,
    solution: Solution,
    settings: DifficultySettings,
    catalog:  GameCatalog = CATALOG,
) -> Dict[str, CategoryEliminationPlan]:
    """
    Plan every category in the fixed order suspect, item, location, time.

    Raises:
        InvariantViolation: (INCOMPLETE_PARTITION) if a category's groups do
            not exactly cover its non-solution elements.
    """
    plans: Dict[str, CategoryEliminationPlan] = {}
    for category in CATEGORIES:
        solution_id = solution.id_for(category)
        candidates = [eid for eid in catalog.ids(category) if eid != solution_id]
        category_plan = plan_category_eliminations(
            rng, category, candidates, settings, solution, catalog,
        )

        problems = partition_problems(category_plan, candidates)
        if problems:
            raise InvariantViolation(
                f"{category} groups do not partition the non-solution elements: "
                + "; ".join(problems),
                code="INCOMPLETE_PARTITION",
            )
        plans[category] = category_plan
    return plans
