"""
clue_sequencer.py
=================
Turns elimination groups into a numbered clue sequence laid over three acts.

Steps:
  1. Flatten every (category, group) pair and order them by target act,
     then by priority.
  2. Keep the first `clue_count` pairs.
  3. Rebalance the kept pairs against the difficulty's act distribution.
  4. Number the result 1..N and give each clue an act, a tone, a delivery
     method and (sometimes) references to earlier clues.

All randomness comes from the plan-wide SeededRandom passed in.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Tuple

from config import (
    ACT_SETTINGS,
    ACTS,
    CATEGORIES,
    DELIVERY_TYPES,
    ELIMINATION_TYPE_INFO,
    PLANNER_CONFIG,
    SPEAKERS,
    ActDistribution,
    DifficultySettings,
    PlannerConfig,
)
from models import (
    ActInfo,
    CategoryEliminationPlan,
    ClueDelivery,
    ClueElimination,
    ClueNarrative,
    EliminationGroup,
    NarrativeArc,
    PlannedClue,
)
from seeded_random import SeededRandom

logger = logging.getLogger("tudor_mystery.clue_sequencer")

# (category, group) pair awaiting a position.
GroupRef = Tuple[str, EliminationGroup]

_ACT_ORDER: Dict[str, int] = {act: i for i, act in enumerate(ACTS)}


# ---------------------------------------------------------------------------
# Narrative arc
# ---------------------------------------------------------------------------

def build_narrative_arc(distribution: ActDistribution) -> NarrativeArc:
    """Lay the three acts end to end starting at position 1."""
    counts = (distribution.act1, distribution.act2, distribution.act3)
    acts: List[ActInfo] = []
    start = 1
    for act, count in zip(ACTS, counts):
        settings = ACT_SETTINGS[act]
        acts.append(ActInfo(
            act=act,
            clue_count=count,
            start_position=start,
            end_position=start + count - 1,
            focus=settings.focus,
            tone=settings.dominant_tone,
        ))
        start += count
    return NarrativeArc(*acts)


# ---------------------------------------------------------------------------
# Act rebalancing
# ---------------------------------------------------------------------------

def redistribute_across_acts(
    rng:          SeededRandom,
    pairs:        Sequence[GroupRef],
    distribution: ActDistribution,
) -> List[GroupRef]:
    """
    Choose pairs per act so the sequence approximates `distribution`.

    When Act 1 or Act 3 has fewer candidate groups than it wants, the
    shortfall is handed to Act 2. Each act's pool is shuffled and sliced.
    Any remaining gap is filled from unused pairs, again shuffled.
    """
    pools: Dict[str, List[GroupRef]] = {act: [] for act in ACTS}
    for pair in pairs:
        pools[pair[1].target_act].append(pair)

    act1_pool = pools["act1_setup"]
    act2_pool = pools["act2_confrontation"]
    act3_pool = pools["act3_resolution"]

    want1, want2, want3 = distribution.act1, distribution.act2, distribution.act3
    if len(act1_pool) < want1:
        want2 += want1 - len(act1_pool)
        want1 = len(act1_pool)
    if len(act3_pool) < want3:
        want2 += want3 - len(act3_pool)
        want3 = len(act3_pool)

    result: List[GroupRef] = []
    result.extend(rng.shuffle(act1_pool)[:want1])
    result.extend(rng.shuffle(act2_pool)[:want2])
    result.extend(rng.shuffle(act3_pool)[:want3])

    needed = distribution.total
    if len(result) < needed:
        used = {(category, group.index) for category, group in result}
        unused = [p for p in pairs if (p[0], p[1].index) not in used]
        result.extend(rng.shuffle(unused)[:needed - len(result)])

    return result


# ---------------------------------------------------------------------------
# Per-clue decoration
# ---------------------------------------------------------------------------

def select_delivery_method(
    rng:              SeededRandom,
    elimination_type: str,
    config:           PlannerConfig = PLANNER_CONFIG,
) -> ClueDelivery:
    """
    Delivery type and speaker, biased toward the mechanism's preferred speaker.

    A butler delivery is always spoken by Ashe.
    """
    preferred = ELIMINATION_TYPE_INFO[elimination_type].preferred_speaker
    chance = config.speaker_preference_chance

    if preferred == "Ashe":
        delivery = "butler" if rng.next_bool(chance) else rng.pick(DELIVERY_TYPES)
        speaker = "Ashe" if delivery == "butler" else rng.pick(SPEAKERS)
    elif preferred == "Inspector Brown":
        delivery = "inspector_note" if rng.next_bool(chance) else rng.pick(DELIVERY_TYPES)
        speaker = "Ashe" if delivery == "butler" else "Inspector Brown"
    else:
        delivery = rng.pick(DELIVERY_TYPES)
        speaker = "Ashe" if delivery == "butler" else rng.pick(SPEAKERS)

    return ClueDelivery(type=delivery, speaker=speaker)


def build_references(
    rng:      SeededRandom,
    position: int,
    config:   PlannerConfig = PLANNER_CONFIG,
) -> Tuple[int, ...]:
    """
    Earlier positions the clue at `position` alludes to.

    Most clues reference nothing. When they do, one or two earlier positions
    are drawn, weighted toward the most recent clues. Positions are unique
    and always < `position`.
    """
    earlier = position - 1
    if not rng.next_bool(config.reference_chance) or earlier <= 0:
        return ()

    candidates = list(range(1, earlier + 1))
    weights = candidates  # later positions weigh more
    count = rng.next_int(1, min(config.max_references, earlier))

    picked: List[int] = []
    for _ in range(count):
        ref = rng.pick_weighted(candidates, weights)
        if ref not in picked:
            picked.append(ref)
    return tuple(picked)


# ---------------------------------------------------------------------------
# Sequencing
# ---------------------------------------------------------------------------

def _flatten(elimination_plans: Dict[str, CategoryEliminationPlan]) -> List[GroupRef]:
    pairs: List[GroupRef] = []
    for category in CATEGORIES:
        category_plan = elimination_plans.get(category)
        if category_plan is None:
            continue
        pairs.extend((category, group) for group in category_plan.groups)
    return pairs


def sequence_clues(
    rng:               SeededRandom,
    elimination_plans: Dict[str, CategoryEliminationPlan],
    arc:               NarrativeArc,
    settings:          DifficultySettings,
    config:            PlannerConfig = PLANNER_CONFIG,
) -> Tuple[List[PlannedClue], NarrativeArc]:
    """
    Build the numbered clue sequence.

    Args:
        rng:               Plan-wide generator.
        elimination_plans: Groups per category, keyed by singular category.
        arc:               Configured narrative arc for the difficulty.
        settings:          Difficulty settings (clue count, act distribution).
        config:            Delivery and reference probabilities.

    Returns:
        (clues, arc) where `clues` have positions 1..N and `arc` tiles 1..N.
        The arc is the configured one, shrunk when fewer than `clue_count`
        groups exist.
    """
    pairs = _flatten(elimination_plans)
    pairs.sort(key=lambda p: (_ACT_ORDER[p[1].target_act], p[1].priority))
    selected = pairs[:settings.clue_count]

    ordered = redistribute_across_acts(rng, selected, settings.act_distribution)

    if len(ordered) < arc.total:
        logger.info(
            "Only %d clue(s) available for a %d-clue arc; shrinking the arc",
            len(ordered), arc.total,
        )
    arc = arc.fitted_to(len(ordered))

    clues: List[PlannedClue] = []
    for index, (category, group) in enumerate(ordered):
        position = index + 1
        act, tone = arc.act_and_tone_for(position)
        delivery = select_delivery_method(rng, group.elimination_type, config)
        references = build_references(rng, position, config) if position > 1 else ()

        clues.append(PlannedClue(
            position=position,
            act=act,
            elimination=ClueElimination(
                category=category,
                group_index=group.index,
                element_ids=group.element_ids,
                type=group.elimination_type,
                context=group.context,
            ),
            delivery=delivery,
            narrative=ClueNarrative(tone=tone, references=references),
        ))

    logger.debug("Sequenced %d clue(s) from %d group(s)", len(clues), len(pairs))
    return clues, arc
