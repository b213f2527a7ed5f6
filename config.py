"""
config.py
=========
Central configuration module for the Tudor Mansion campaign planner.

All tunable constants live here: per-difficulty pacing, act settings, the
elimination-mechanism catalog, dramatic event types, and narrative thread
templates. Planning logic reads these tables and never mutates them.

Usage:
    from config import DIFFICULTY_SETTINGS, ELIMINATION_TYPE_INFO, PLANNER_CONFIG
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, List, Tuple


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

DIFFICULTIES: Tuple[str, ...] = ("beginner", "intermediate", "expert")

ACTS: Tuple[str, ...] = ("act1_setup", "act2_confrontation", "act3_resolution")

CATEGORIES: Tuple[str, ...] = ("suspect", "item", "location", "time")
"""Elimination categories, in the fixed order every planner walks them."""

CATEGORY_PLURALS: Dict[str, str] = {
    "suspect":  "suspects",
    "item":     "items",
    "location": "locations",
    "time":     "times",
}

DELIVERY_TYPES: Tuple[str, ...] = ("butler", "inspector_note", "observation")

SPEAKERS: Tuple[str, ...] = ("Ashe", "Inspector Brown")

RED_HERRING_TYPES: Tuple[str, ...] = (
    "false_suspicion",
    "misleading_evidence",
    "suspicious_behavior",
)

RED_HERRING_CATEGORIES: Tuple[str, ...] = ("suspect", "item", "location")

ALIBI_TYPES: Tuple[str, ...] = (
    "group_alibi",
    "individual_alibi",
    "witness_testimony",
)


# ---------------------------------------------------------------------------
# Difficulty settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActDistribution:
    """Number of clues planned for each of the three acts."""
    act1: int
    act2: int
    act3: int

    @property
    def total(self) -> int:
        return self.act1 + self.act2 + self.act3


@dataclass(frozen=True)
class RedHerringSettings:
    count:        int
    must_resolve: bool


@dataclass(frozen=True)
class GroupSizeLimits:
    """Maximum elimination-group size, per category."""
    suspects:  int
    items:     int
    locations: int
    times:     int

    def for_category(self, category: str) -> int:
        return getattr(self, CATEGORY_PLURALS[category])


@dataclass(frozen=True)
class DifficultySettings:
    """
    Pacing and misdirection knobs for one difficulty level.

    Attributes:
        clue_count:           Total number of clues in the campaign.
        act_distribution:     Clues per act; must sum to clue_count.
        red_herrings:         How many red herrings, and whether each must be
                              resolved by an Act 3 clue.
        dramatic_event_count: Number of dramatic interludes between clues.
        max_group_size:       Largest elimination group, per category.
        min_group_size:       Smallest elimination group (1 = singles allowed).
    """
    clue_count:           int
    act_distribution:     ActDistribution
    red_herrings:         RedHerringSettings
    dramatic_event_count: int
    max_group_size:       GroupSizeLimits
    min_group_size:       int = 1


DIFFICULTY_SETTINGS: Dict[str, DifficultySettings] = {
    "beginner": DifficultySettings(
        clue_count=12,
        act_distribution=ActDistribution(act1=4, act2=5, act3=3),
        red_herrings=RedHerringSettings(count=1, must_resolve=True),
        dramatic_event_count=2,
        max_group_size=GroupSizeLimits(suspects=4, items=4, locations=3, times=3),
    ),
    "intermediate": DifficultySettings(
        clue_count=10,
        act_distribution=ActDistribution(act1=3, act2=4, act3=3),
        red_herrings=RedHerringSettings(count=2, must_resolve=False),
        dramatic_event_count=3,
        max_group_size=GroupSizeLimits(suspects=3, items=3, locations=3, times=3),
    ),
    "expert": DifficultySettings(
        clue_count=7,
        act_distribution=ActDistribution(act1=3, act2=3, act3=1),
        red_herrings=RedHerringSettings(count=3, must_resolve=False),
        dramatic_event_count=3,
        max_group_size=GroupSizeLimits(suspects=2, items=2, locations=2, times=2),
    ),
}


def get_difficulty_settings(difficulty: str) -> DifficultySettings:
    """Return the settings for `difficulty`; raises KeyError if unknown."""
    return DIFFICULTY_SETTINGS[difficulty]


# ---------------------------------------------------------------------------
# Act settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ActSettings:
    act:           str
    name:          str
    focus:         str
    dominant_tone: str


ACT_SETTINGS: Dict[str, ActSettings] = {
    "act1_setup": ActSettings(
        act="act1_setup",
        name="Act 1: Setup",
        focus="Scene-setting, easy eliminations, establishing the mystery",
        dominant_tone="establishing",
    ),
    "act2_confrontation": ActSettings(
        act="act2_confrontation",
        name="Act 2: Confrontation",
        focus="Complications, red herrings, narrowing the field",
        dominant_tone="developing",
    ),
    "act3_resolution": ActSettings(
        act="act3_resolution",
        name="Act 3: Resolution",
        focus="Decisive clues enabling the solution",
        dominant_tone="revealing",
    ),
}


# ---------------------------------------------------------------------------
# Elimination mechanism catalog
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EliminationTypeInfo:
    """
    Metadata for one elimination mechanism.

    Attributes:
        type:               Mechanism identifier (e.g. "group_alibi").
        category:           The only category this mechanism may eliminate from.
        description:        Human-readable summary passed to the text stage.
        typical_group_size: "single" | "small" | "medium" | "large".
        preferred_speaker:  "Ashe" | "Inspector Brown" | "either".
    """
    type:               str
    category:           str
    description:        str
    typical_group_size: str
    preferred_speaker:  str


def _mechanism(type_: str, category: str, description: str,
               size: str, speaker: str) -> EliminationTypeInfo:
    return EliminationTypeInfo(type_, category, description, size, speaker)


ELIMINATION_TYPE_INFO: Dict[str, EliminationTypeInfo] = {
    info.type: info
    for info in (
        # Suspects
        _mechanism("group_alibi", "suspect",
                   "Multiple suspects were together and alibied each other",
                   "large", "either"),
        _mechanism("individual_alibi", "suspect",
                   "Single suspect has a verified alibi",
                   "single", "Inspector Brown"),
        _mechanism("witness_testimony", "suspect",
                   "Witnesses saw the suspect elsewhere",
                   "small", "either"),
        _mechanism("physical_impossibility", "suspect",
                   "Suspect physically could not have committed the theft",
                   "single", "Inspector Brown"),
        _mechanism("motive_cleared", "suspect",
                   "Suspect had no reason to steal",
                   "single", "Ashe"),
        # Items
        _mechanism("category_secured", "item",
                   "All items of a category were locked up",
                   "large", "Ashe"),
        _mechanism("item_sighting", "item",
                   "Item was seen after the theft time",
                   "single", "either"),
        _mechanism("item_accounted", "item",
                   "Item has been located and verified",
                   "single", "Inspector Brown"),
        _mechanism("item_condition", "item",
                   "Item's display case was undisturbed",
                   "single", "Inspector Brown"),
        # Locations
        _mechanism("location_inaccessible", "location",
                   "Location was being renovated or locked",
                   "single", "either"),
        _mechanism("location_undisturbed", "location",
                   "Location shows no signs of tampering",
                   "single", "Inspector Brown"),
        _mechanism("location_occupied", "location",
                   "Location was continuously occupied",
                   "small", "Ashe"),
        _mechanism("location_visibility", "location",
                   "Location had too much foot traffic",
                   "medium", "Ashe"),
        # Times
        _mechanism("all_together", "time",
                   "All suspects were gathered during this time",
                   "single", "either"),
        _mechanism("item_present", "time",
                   "Item was verified present during this time",
                   "single", "Ashe"),
        _mechanism("staff_activity", "time",
                   "Staff were everywhere during this time",
                   "medium", "Ashe"),
        _mechanism("timeline_impossibility", "time",
                   "Timeline rules out this period",
                   "single", "Inspector Brown"),
    )
}


def get_elimination_types_for_category(category: str) -> List[str]:
    """Mechanisms legal for `category`, in catalog order."""
    return [
        info.type for info in ELIMINATION_TYPE_INFO.values()
        if info.category == category
    ]


# ---------------------------------------------------------------------------
# Dramatic events and narrative threads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DramaticEventType:
    id:                str
    name:              str
    description:       str
    requires_suspects: int
    suitable_acts:     Tuple[str, ...]


DRAMATIC_EVENT_TYPES: Tuple[DramaticEventType, ...] = (
    DramaticEventType("power_outage", "Power Outage",
                      "The lights flicker and go out momentarily",
                      0, ("act2_confrontation", "act3_resolution")),
    DramaticEventType("argument", "Heated Argument",
                      "Two suspects have a heated exchange",
                      2, ("act2_confrontation",)),
    DramaticEventType("scream", "A Scream in the Night",
                      "A scream echoes through the mansion",
                      1, ("act2_confrontation", "act3_resolution")),
    DramaticEventType("discovery", "Suspicious Discovery",
                      "Something unusual is found",
                      1, ("act2_confrontation",)),
    DramaticEventType("arrival", "Unexpected Arrival",
                      "Someone arrives unexpectedly",
                      1, ("act1_setup", "act2_confrontation")),
    DramaticEventType("crash", "Crashing Sound",
                      "A loud crash echoes through the halls",
                      0, ("act1_setup", "act2_confrontation")),
    DramaticEventType("secret_passage", "Secret Passage Found",
                      "A hidden passage is discovered",
                      0, ("act2_confrontation", "act3_resolution")),
    DramaticEventType("confrontation", "Direct Confrontation",
                      "A suspect is directly confronted about their behavior",
                      1, ("act3_resolution",)),
)


@dataclass(frozen=True)
class NarrativeThreadTemplate:
    id:             str
    name:           str
    description:    str
    is_red_herring: bool


NARRATIVE_THREAD_TEMPLATES: Dict[str, NarrativeThreadTemplate] = {
    t.id: t
    for t in (
        NarrativeThreadTemplate("true_timeline", "The True Timeline",
                                "Clues that establish when the theft actually occurred", False),
        NarrativeThreadTemplate("alibi_network", "The Alibi Network",
                                "Interconnected alibis between suspects", False),
        NarrativeThreadTemplate("item_trail", "The Item Trail",
                                "Tracking where items were seen or stored", False),
    )
}


# ---------------------------------------------------------------------------
# Planner behaviour
# ---------------------------------------------------------------------------

LOG_LEVELS: Tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class PlannerConfig:
    """
    Probabilities and thresholds used while sequencing and decorating clues.

    Attributes:
        default_difficulty:        Difficulty used when a request names none.
        speaker_preference_chance: Chance a clue honours its mechanism's
                                   preferred speaker.
        reference_chance:          Chance a clue (after the first) references
                                   earlier clues.
        max_references:            Upper bound on references per clue.
        min_clues_for_red_herrings: Below this many clues no herrings are planned.
        min_clues_for_events:       Below this many clues no events are planned.
        log_level:                  Level the CLI passes to logging.basicConfig.
    """
    default_difficulty:         str   = "intermediate"
    speaker_preference_chance:  float = 0.7
    reference_chance:           float = 0.3
    max_references:             int   = 2
    min_clues_for_red_herrings: int   = 4
    min_clues_for_events:       int   = 3
    log_level:                  str   = "INFO"


def load_planner_config() -> PlannerConfig:
    """
    Build a PlannerConfig, applying environment overrides.

    Reads TUDOR_MYSTERY_DIFFICULTY and TUDOR_MYSTERY_LOG_LEVEL. Call after
    load_dotenv() so values from a .env file are visible. An unknown
    difficulty name is ignored in favour of the built-in default.
    """
    difficulty = os.environ.get("TUDOR_MYSTERY_DIFFICULTY", "").strip().lower()
    if difficulty not in DIFFICULTY_SETTINGS:
        difficulty = PlannerConfig.default_difficulty
    log_level = os.environ.get("TUDOR_MYSTERY_LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        log_level = PlannerConfig.log_level
    return PlannerConfig(default_difficulty=difficulty, log_level=log_level)


# ---------------------------------------------------------------------------
# Singleton instance (import-ready)
# ---------------------------------------------------------------------------

PLANNER_CONFIG = PlannerConfig()
