"""
campaign_planner.py
===================
Entry point for planning a Tudor Mansion theft mystery.

Contains:
  CampaignPlanner : wires the solution selector, elimination planner, clue
                    sequencer, narrative planners and validator together
                    and returns an immutable CampaignPlan.

Public API summary:
    plan = plan_campaign({"difficulty": "expert", "seed": 42})
    plan = CampaignPlanner(catalog=my_catalog).plan(request)
    select_theme(rng, "M04")             → MysteryTheme
    select_solution(rng, request)        → Solution

Determinism
-----------
A single SeededRandom is created per request and threaded through every
stage in a fixed order: theme, solution, eliminations (suspect, item,
location, time), sequencing, red herrings, dramatic events, then the
campaign ID suffix. The same seed and request therefore always produce the
same plan, ID included.

Logging
-------
The logger name for this module is ``tudor_mystery.campaign_planner``.
Configure handlers once at the entry point (see cli.py).
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from clue_sequencer import build_narrative_arc, sequence_clues
from config import CATEGORIES, PLANNER_CONFIG, PlannerConfig, get_difficulty_settings
from elimination_planner import plan_all_eliminations
from errors import EmptyCandidatePool, InvalidRequest, PlanValidationError
from game_elements import CATALOG, GameCatalog, MysteryTheme
from models import CampaignPlan, CampaignRequest, Solution
from narrative_planners import (
    assign_thread_ids,
    plan_dramatic_events,
    plan_narrative_threads,
    plan_red_herrings,
)
from seeded_random import SeededRandom
from validator import validate_plan

logger = logging.getLogger("tudor_mystery.campaign_planner")

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def to_base36(number: int) -> str:
    """Lower-case base-36 rendering of a non-negative integer."""
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def coerce_request(
    request: Union[CampaignRequest, Dict[str, Any], None],
) -> CampaignRequest:
    """
    Accept a CampaignRequest, a plain dict (snake_case or camelCase keys),
    or None for all defaults.

    Raises:
        InvalidRequest: If the dict fails schema validation.
    """
    if request is None:
        return CampaignRequest()
    if isinstance(request, CampaignRequest):
        return request
    try:
        return CampaignRequest.model_validate(request)
    except ValidationError as exc:
        raise InvalidRequest(f"Invalid campaign request: {exc}") from exc


# ---------------------------------------------------------------------------
# Theme and solution selection
# ---------------------------------------------------------------------------

def select_theme(
    rng:      SeededRandom,
    theme_id: Optional[str] = None,
    catalog:  GameCatalog = CATALOG,
) -> MysteryTheme:
    """
    The requested theme, or a random one.

    An unknown `theme_id` is not an error: it is logged and a random theme
    is used instead. The RNG is only consumed when no valid ID is given.
    """
    if theme_id:
        theme = catalog.theme(theme_id)
        if theme is not None:
            return theme
        logger.warning("Unknown theme_id=%r; picking a random theme instead.", theme_id)
    return rng.pick(catalog.themes)


def select_solution(
    rng:     SeededRandom,
    request: CampaignRequest,
    catalog: GameCatalog = CATALOG,
) -> Solution:
    """
    Pick the culprit, stolen item, location and time, honouring exclusions.

    Categories are drawn in the fixed order suspect, item, location, time.

    Raises:
        EmptyCandidatePool: If exclusions remove every candidate of a category.
    """
    chosen: Dict[str, str] = {}
    for category in CATEGORIES:
        excluded = set(request.exclusions_for(category))
        candidates = [eid for eid in catalog.ids(category) if eid not in excluded]
        if not candidates:
            raise EmptyCandidatePool(category)
        chosen[category] = rng.pick(candidates)

    return Solution(
        suspect_id=chosen["suspect"],
        item_id=chosen["item"],
        location_id=chosen["location"],
        time_id=chosen["time"],
    )


# ---------------------------------------------------------------------------
# Planner
# ---------------------------------------------------------------------------

class CampaignPlanner:
    """
    Builds complete campaign plans against one catalog and configuration.

    The planner itself holds no per-request state, so a single instance can
    serve any number of requests.

    Attributes:
        catalog: Game elements to draw from.
        config:  Probabilities, thresholds and the default difficulty.
    """

    def __init__(
        self,
        catalog: GameCatalog = CATALOG,
        config:  PlannerConfig = PLANNER_CONFIG,
    ) -> None:
        self.catalog = catalog
        self.config  = config

    def plan(self, request: Union[CampaignRequest, Dict[str, Any], None] = None) -> CampaignPlan:
        """
        Plan one campaign.

        Args:
            request: CampaignRequest, equivalent dict, or None for defaults.

        Returns:
            A validated, immutable CampaignPlan.

        Raises:
            InvalidRequest:      Malformed request.
            EmptyCandidatePool:  Exclusions leave a category empty.
            InvariantViolation:  Elimination groups fail to partition a category.
            PlanValidationError: The assembled plan has validation errors.
        """
        req = coerce_request(request)
        seed = req.seed if req.seed is not None else int(time.time() * 1000)
        difficulty = req.difficulty or self.config.default_difficulty
        settings = get_difficulty_settings(difficulty)
        rng = SeededRandom(seed)

        logger.info("Planning campaign: seed=%d difficulty=%s", seed, difficulty)

        theme = select_theme(rng, req.theme_id, self.catalog)
        solution = select_solution(rng, req, self.catalog)
        logger.debug(
            "Theme %s; solution %s/%s/%s/%s",
            theme.id, solution.suspect_id, solution.item_id,
            solution.location_id, solution.time_id,
        )

        elimination_plans = plan_all_eliminations(rng, solution, settings, self.catalog)

        arc = build_narrative_arc(settings.act_distribution)
        clues, arc = sequence_clues(rng, elimination_plans, arc, settings, self.config)

        threads = plan_narrative_threads(clues)
        red_herrings = plan_red_herrings(rng, clues, solution, settings, self.catalog, self.config)
        dramatic_events = plan_dramatic_events(rng, clues, solution, settings, self.catalog, self.config)

        validation = validate_plan(solution, elimination_plans, clues, settings)
        campaign_id = f"CMP-{to_base36(seed)}-{rng.next_int(1000, 9999)}"

        if not validation.valid:
            logger.error(
                "Campaign %s failed validation: %s",
                campaign_id, ", ".join(e.code for e in validation.errors),
            )
            raise PlanValidationError(validation)

        for warning in validation.warnings:
            logger.info("Campaign %s warning %s: %s", campaign_id, warning.code, warning.message)

        plan = CampaignPlan(
            id=campaign_id,
            seed=seed,
            difficulty=difficulty,
            theme_id=theme.id,
            solution=solution,
            elimination_plans=elimination_plans,
            narrative_arc=arc,
            clues=assign_thread_ids(clues, threads),
            threads=tuple(threads),
            red_herrings=tuple(red_herrings),
            dramatic_events=tuple(dramatic_events),
            validation=validation,
        )
        logger.info(
            "Planned %s: %d clue(s), %d thread(s), %d red herring(s), %d event(s)",
            plan.id, len(plan.clues), len(plan.threads),
            len(plan.red_herrings), len(plan.dramatic_events),
        )
        return plan


def plan_campaign(
    request: Union[CampaignRequest, Dict[str, Any], None] = None,
    catalog: GameCatalog = CATALOG,
    config:  PlannerConfig = PLANNER_CONFIG,
) -> CampaignPlan:
    """Plan one campaign with a throwaway CampaignPlanner."""
    return CampaignPlanner(catalog=catalog, config=config).plan(request)
