"""
narrative_planners.py
=====================
Story decorations layered on a finished clue sequence.

  - plan_narrative_threads : group related clues into story lines.
  - plan_red_herrings      : cast doubt on innocent, already-eliminated elements.
  - plan_dramatic_events   : interludes spread evenly between clues.

These planners read the clues and never change them. Thread membership is
written onto the clues only when the plan aggregate is assembled, via
assign_thread_ids(), which returns new clue objects.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, List, Sequence, Tuple

from config import (
    ALIBI_TYPES,
    CATEGORY_PLURALS,
    DRAMATIC_EVENT_TYPES,
    NARRATIVE_THREAD_TEMPLATES,
    PLANNER_CONFIG,
    RED_HERRING_CATEGORIES,
    RED_HERRING_TYPES,
    DifficultySettings,
    PlannerConfig,
)
from game_elements import CATALOG, GameCatalog
from models import (
    NarrativeThread,
    PlannedClue,
    PlannedDramaticEvent,
    RedHerring,
    RedHerringTarget,
    Solution,
)
from seeded_random import SeededRandom

logger = logging.getLogger("tudor_mystery.narrative_planners")


# ---------------------------------------------------------------------------
# Narrative threads
# ---------------------------------------------------------------------------

def _thread(template_id: str, clues: Sequence[PlannedClue], category: str) -> NarrativeThread:
    template = NARRATIVE_THREAD_TEMPLATES[template_id]
    return NarrativeThread(
        id=template.id,
        name=template.name,
        involved_elements={
            CATEGORY_PLURALS[category]: tuple(
                eid for clue in clues for eid in clue.elimination.element_ids
            ),
        },
        clue_positions=tuple(clue.position for clue in clues),
        is_red_herring=template.is_red_herring,
    )


def plan_narrative_threads(clues: Sequence[PlannedClue]) -> List[NarrativeThread]:
    """
    Build the true-timeline, alibi-network and item-trail threads.

    A thread is only emitted when at least two clues belong to it.
    """
    time_clues = [c for c in clues if c.elimination.category == "time"]
    alibi_clues = [
        c for c in clues
        if c.elimination.category == "suspect" and c.elimination.type in ALIBI_TYPES
    ]
    item_clues = [c for c in clues if c.elimination.category == "item"]

    threads: List[NarrativeThread] = []
    for template_id, members, category in (
        ("true_timeline", time_clues,  "time"),
        ("alibi_network", alibi_clues, "suspect"),
        ("item_trail",    item_clues,  "item"),
    ):
        if len(members) >= 2:
            threads.append(_thread(template_id, members, category))
    return threads


def assign_thread_ids(
    clues:   Sequence[PlannedClue],
    threads: Sequence[NarrativeThread],
) -> Tuple[PlannedClue, ...]:
    """New clues with `narrative.thread_id` set for every thread member."""
    thread_of: Dict[int, str] = {}
    for thread in threads:
        for position in thread.clue_positions:
            thread_of.setdefault(position, thread.id)

    updated: List[PlannedClue] = []
    for clue in clues:
        thread_id = thread_of.get(clue.position)
        if thread_id is None:
            updated.append(clue)
            continue
        narrative = dataclasses.replace(clue.narrative, thread_id=thread_id)
        updated.append(dataclasses.replace(clue, narrative=narrative))
    return tuple(updated)


# ---------------------------------------------------------------------------
# Red herrings
# ---------------------------------------------------------------------------

def plan_red_herrings(
    rng:      SeededRandom,
    clues:    Sequence[PlannedClue],
    solution: Solution,
    settings: DifficultySettings,
    catalog:  GameCatalog = CATALOG,
    config:   PlannerConfig = PLANNER_CONFIG,
) -> List[RedHerring]:
    """
    Plan misdirection introduced in Act 2.

    The i-th herring is introduced by the i-th Act 2 clue. Its target is an
    element of a random category (suspect, item or location) that has
    already been eliminated at or before that clue, so the player can always
    see through it. When no such element exists the herring is skipped.
    Difficulties that require resolution point each herring at a random
    Act 3 clue.
    """
    count = settings.red_herrings.count
    if count <= 0 or len(clues) < config.min_clues_for_red_herrings:
        return []

    act2_clues = [c for c in clues if c.act == "act2_confrontation"]
    act3_clues = [c for c in clues if c.act == "act3_resolution"]

    herrings: List[RedHerring] = []
    for i in range(min(count, len(act2_clues))):
        category = rng.pick(RED_HERRING_CATEGORIES)
        intro = act2_clues[i]
        solution_id = solution.id_for(category)

        eliminated = [
            eid
            for clue in clues
            if clue.elimination.category == category and clue.position <= intro.position
            for eid in clue.elimination.element_ids
            if eid != solution_id
        ]
        if not eliminated:
            logger.debug(
                "No %s eliminated by clue %d; skipping red herring %d",
                category, intro.position, i + 1,
            )
            continue

        target_id = rng.pick(eliminated)
        herring_type = rng.pick(RED_HERRING_TYPES)
        resolved_in = None
        if settings.red_herrings.must_resolve and act3_clues:
            resolved_in = rng.pick(act3_clues).position

        herrings.append(RedHerring(
            type=herring_type,
            target=RedHerringTarget(category=category, element_id=target_id),
            introduced_in_clue=intro.position,
            resolved_in_clue=resolved_in,
            hint=f"Something seems suspicious about {catalog.name_of(category, target_id)}...",
        ))
    return herrings


# ---------------------------------------------------------------------------
# Dramatic events
# ---------------------------------------------------------------------------

def event_positions(total_clues: int, event_count: int) -> List[int]:
    """
    Evenly spaced `after_clue` positions, rounded and clamped to [2, total-1].

    Two events may share a position when the sequence is short.
    """
    spacing = total_clues / (event_count + 1)
    return [
        max(2, min(math.floor(spacing * i + 0.5), total_clues - 1))
        for i in range(1, event_count + 1)
    ]


def _purpose_for(rng: SeededRandom, act: str) -> str:
    if act == "act1_setup":
        return "atmosphere"
    if act == "act2_confrontation":
        return rng.pick(("tension", "misdirection"))
    return "revelation"


def plan_dramatic_events(
    rng:      SeededRandom,
    clues:    Sequence[PlannedClue],
    solution: Solution,
    settings: DifficultySettings,
    catalog:  GameCatalog = CATALOG,
    config:   PlannerConfig = PLANNER_CONFIG,
) -> List[PlannedDramaticEvent]:
    """
    Place dramatic interludes between clues.

    Each event takes the act of the clue it follows (Act 2 if that clue is
    missing), an event type suitable for that act, and as many innocent
    suspects as the event type calls for.
    """
    count = settings.dramatic_event_count
    if count <= 0 or len(clues) < config.min_clues_for_events:
        return []

    act_at = {c.position: c.act for c in clues}
    innocent = [s.id for s in catalog.suspects if s.id != solution.suspect_id]

    events: List[PlannedDramaticEvent] = []
    for after_clue in event_positions(len(clues), count):
        act = act_at.get(after_clue, "act2_confrontation")
        suitable = [e for e in DRAMATIC_EVENT_TYPES if act in e.suitable_acts]
        if not suitable:
            continue

        event_type = rng.pick(suitable)
        involved_count = min(event_type.requires_suspects, len(innocent))
        involved = rng.pick_multiple(innocent, involved_count) if involved_count > 0 else []

        events.append(PlannedDramaticEvent(
            after_clue=after_clue,
            event_type=event_type.id,
            involved_suspects=tuple(involved),
            purpose=_purpose_for(rng, act),
        ))
    return events
