"""
models.py
=========
Shared data models for the Tudor Mansion campaign planner.

Contains:
  - CampaignRequest   : Pydantic schema for an incoming generation request.
  - Solution          : The hidden (suspect, item, location, time) answer.
  - Elimination*      : Groups of non-solution elements and how they are ruled out.
  - PlannedClue       : One numbered clue before any prose is attached.
  - NarrativeArc      : The three acts tiling the clue sequence.
  - RedHerring, PlannedDramaticEvent, NarrativeThread : decorations on the clues.
  - ValidationResult  : Errors, warnings and coverage for a plan.
  - CampaignPlan      : The immutable aggregate handed to the text stage.

Every plan shape is a frozen dataclass. A plan is never edited after it is
built; callers that need a variation (e.g. with clue text attached) create a
new one with dataclasses.replace.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Pydantic request schema
# ---------------------------------------------------------------------------

class CampaignRequest(BaseModel):
    """
    Validated input for plan_campaign().

    Accepts both snake_case field names and the camelCase keys used by JSON
    clients (`themeId`, `excludeSuspects`, ...).

    Fields:
        difficulty:        beginner | intermediate | expert. None selects the
                           configured default.
        theme_id:          Mystery theme ID (e.g. "M04"). Unknown IDs fall back
                           to a random theme rather than failing.
        seed:              Non-negative RNG seed. None derives one from the clock.
        exclude_suspects:  Suspect IDs that may not be the culprit.
        exclude_items:     Item IDs that may not be the stolen item.
        exclude_locations: Location IDs that may not be the theft location.
        exclude_times:     Time IDs that may not be the theft time.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    difficulty:        Optional[Literal["beginner", "intermediate", "expert"]] = None
    theme_id:          Optional[str] = None
    seed:              Optional[int] = Field(default=None, ge=0)
    exclude_suspects:  List[str] = Field(default_factory=list)
    exclude_items:     List[str] = Field(default_factory=list)
    exclude_locations: List[str] = Field(default_factory=list)
    exclude_times:     List[str] = Field(default_factory=list)

    def exclusions_for(self, category: str) -> List[str]:
        return {
            "suspect":  self.exclude_suspects,
            "item":     self.exclude_items,
            "location": self.exclude_locations,
            "time":     self.exclude_times,
        }[category]


# ---------------------------------------------------------------------------
# Solution and elimination groups
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Solution:
    suspect_id:  str
    item_id:     str
    location_id: str
    time_id:     str

    def id_for(self, category: str) -> str:
        """The solution element for an elimination category."""
        return getattr(self, f"{category}_id")

    def ids(self) -> Tuple[str, str, str, str]:
        return (self.suspect_id, self.item_id, self.location_id, self.time_id)


@dataclass(frozen=True)
class EliminationContext:
    """
    Extra facts a clue's text needs, depending on the mechanism.

    Attributes:
        alibi_location: Location ID where the eliminated suspects were.
        alibi_time:     Time ID the clue refers to.
        item_category:  Item category secured by a category_secured clue.
    """
    alibi_location: Optional[str] = None
    alibi_time:     Optional[str] = None
    item_category:  Optional[str] = None


@dataclass(frozen=True)
class EliminationGroup:
    """
    A set of elements of one category ruled out together by a single clue.

    Attributes:
        index:            Position of the group within its category, from 0.
        element_ids:      Non-empty, never contains the solution element.
        elimination_type: Mechanism legal for the group's category.
        target_act:       Act the sequencer should try to place the clue in.
        priority:         Ordering hint within the act; lower comes first.
        context:          Mechanism-specific facts, if any.
    """
    index:            int
    element_ids:      Tuple[str, ...]
    elimination_type: str
    target_act:       str
    priority:         int
    context:          Optional[EliminationContext] = None

    @property
    def size(self) -> int:
        return len(self.element_ids)


@dataclass(frozen=True)
class CategoryEliminationPlan:
    groups: Tuple[EliminationGroup, ...]

    @property
    def total_elements(self) -> int:
        return sum(g.size for g in self.groups)

    @property
    def clue_count(self) -> int:
        return len(self.groups)

    def eliminated_ids(self) -> List[str]:
        return [eid for g in self.groups for eid in g.element_ids]


# ---------------------------------------------------------------------------
# Planned clues
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ClueElimination:
    category:    str
    group_index: int
    element_ids: Tuple[str, ...]
    type:        str
    context:     Optional[EliminationContext] = None


@dataclass(frozen=True)
class ClueDelivery:
    type:    str
    speaker: str


@dataclass(frozen=True)
class ClueNarrative:
    """Tone for the clue, earlier positions it alludes to, and its story thread."""
    tone:       str
    references: Tuple[int, ...] = ()
    thread_id:  Optional[str]   = None


@dataclass(frozen=True)
class PlannedClue:
    """
    One clue in the published sequence.

    `position` is 1-based and contiguous across the plan. `text` stays None
    until the external text stage fills it in (see clue_text.py).
    """
    position:    int
    act:         str
    elimination: ClueElimination
    delivery:    ClueDelivery
    narrative:   ClueNarrative
    text:        Optional[str] = None


# ---------------------------------------------------------------------------
# Narrative arc
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActInfo:
    act:            str
    clue_count:     int
    start_position: int
    end_position:   int
    focus:          str
    tone:           str

    def contains(self, position: int) -> bool:
        return self.start_position <= position <= self.end_position


@dataclass(frozen=True)
class NarrativeArc:
    """
    Three consecutive acts. Act ranges are contiguous and cover 1..total
    with no gap or overlap; an act may be empty (clue_count 0).
    """
    act1: ActInfo
    act2: ActInfo
    act3: ActInfo

    def acts(self) -> Tuple[ActInfo, ActInfo, ActInfo]:
        return (self.act1, self.act2, self.act3)

    @property
    def total(self) -> int:
        return self.act1.clue_count + self.act2.clue_count + self.act3.clue_count

    def act_for(self, position: int) -> ActInfo:
        """The act containing `position`; positions past the end belong to Act 3."""
        for info in self.acts():
            if info.clue_count and info.contains(position):
                return info
        return self.act3

    def act_and_tone_for(self, position: int) -> Tuple[str, str]:
        """
        Act and narrative tone for a clue position.

        Act 1 establishes, Act 3 reveals. Act 2 develops for its first half
        (rounded up) and escalates for the rest.
        """
        info = self.act_for(position)
        if info.act == "act1_setup":
            return info.act, "establishing"
        if info.act == "act2_confrontation":
            midpoint = info.start_position + (info.clue_count + 1) // 2 - 1
            return info.act, "developing" if position <= midpoint else "escalating"
        return info.act, "revealing"

    def fitted_to(self, total: int) -> "NarrativeArc":
        """
        Shrink the arc so it tiles exactly 1..total.

        The shortfall is taken from Act 2 first, then Act 3, then Act 1. An arc
        that already has `total` clues is returned unchanged.
        """
        if total >= self.total:
            return self
        counts = {"act1": self.act1.clue_count,
                  "act2": self.act2.clue_count,
                  "act3": self.act3.clue_count}
        shortfall = self.total - total
        for key in ("act2", "act3", "act1"):
            taken = min(counts[key], shortfall)
            counts[key] -= taken
            shortfall -= taken

        start = 1
        fitted: Dict[str, ActInfo] = {}
        for key, info in (("act1", self.act1), ("act2", self.act2), ("act3", self.act3)):
            count = counts[key]
            fitted[key] = dataclasses.replace(
                info,
                clue_count=count,
                start_position=start,
                end_position=start + count - 1,
            )
            start += count
        return NarrativeArc(**fitted)


# ---------------------------------------------------------------------------
# Threads, red herrings and dramatic events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NarrativeThread:
    """
    A story line connecting several clues.

    `involved_elements` maps a plural category name ("suspects", "times", ...)
    to the element IDs the thread touches.
    """
    id:                str
    name:              str
    involved_elements: Dict[str, Tuple[str, ...]]
    clue_positions:    Tuple[int, ...]
    is_red_herring:    bool = False


@dataclass(frozen=True)
class RedHerringTarget:
    category:   str
    element_id: str


@dataclass(frozen=True)
class RedHerring:
    """
    Misdirection at an innocent element.

    The target is always eliminated by a clue at or before
    `introduced_in_clue`, so following the herring never contradicts the
    elimination record.
    """
    type:               str
    target:             RedHerringTarget
    introduced_in_clue: int
    resolved_in_clue:   Optional[int] = None
    hint:               Optional[str] = None


@dataclass(frozen=True)
class PlannedDramaticEvent:
    after_clue:        int
    event_type:        str
    involved_suspects: Tuple[str, ...]
    purpose:           str


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ValidationIssue:
    code:       str
    message:    str
    field:      Optional[str] = None
    suggestion: Optional[str] = None


@dataclass(frozen=True)
class CategoryCoverage:
    total:   int
    covered: int
    missing: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a plan.

    `valid` is True exactly when `errors` is empty. `coverage` is keyed by
    plural category name ("suspects", "items", "locations", "times").
    """
    valid:    bool
    errors:   Tuple[ValidationIssue, ...] = ()
    warnings: Tuple[ValidationIssue, ...] = ()
    coverage: Optional[Dict[str, CategoryCoverage]] = None


# ---------------------------------------------------------------------------
# Campaign plan aggregate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CampaignPlan:
    """
    The complete, immutable plan for one mystery.

    Attributes:
        id:                Campaign ID, "CMP-<seed base36>-<4 digits>".
        seed:              Seed that reproduces this exact plan.
        difficulty:        Difficulty level used for pacing.
        theme_id:          Selected mystery theme.
        solution:          The hidden answer.
        elimination_plans: Groups per category, keyed by singular category.
        narrative_arc:     Act ranges tiling 1..len(clues).
        clues:             Clues ordered by position.
        threads:           Story threads over the clues.
        red_herrings:      Planned misdirection.
        dramatic_events:   Interludes between clues.
        validation:        Result of validating this plan.
    """
    id:                str
    seed:              int
    difficulty:        str
    theme_id:          str
    solution:          Solution
    elimination_plans: Dict[str, CategoryEliminationPlan]
    narrative_arc:     NarrativeArc
    clues:             Tuple[PlannedClue, ...]
    threads:           Tuple[NarrativeThread, ...]
    red_herrings:      Tuple[RedHerring, ...]
    dramatic_events:   Tuple[PlannedDramaticEvent, ...]
    validation:        ValidationResult

    def clue_at(self, position: int) -> Optional[PlannedClue]:
        return next((c for c in self.clues if c.position == position), None)


def plan_to_dict(plan: CampaignPlan) -> Dict[str, Any]:
    """
    JSON-ready view of a plan.

    Tuples become lists once serialised; derived group statistics are added
    so consumers do not have to recompute them.
    """
    data = dataclasses.asdict(plan)
    for category, category_plan in plan.elimination_plans.items():
        data["elimination_plans"][category]["total_elements"] = category_plan.total_elements
        data["elimination_plans"][category]["clue_count"] = category_plan.clue_count
    return data
