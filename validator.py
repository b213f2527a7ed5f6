"""
validator.py
============
Solvability and consistency checks for campaign plans.

Two entry points:
  - validate_plan          : the check run while a plan is being built
                             (solution never eliminated, coverage, clue count).
  - validate_campaign_plan : re-validates a finished CampaignPlan from scratch,
                             adding solution-membership, partition, act, red-herring, event,
                             sequencing and thread checks.

Errors make a plan unusable (`valid` is False). Warnings describe soft
shortfalls, such as elements no clue rules out, and never block a plan.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from config import ACTS, CATEGORIES, CATEGORY_PLURALS, DifficultySettings, get_difficulty_settings
from elimination_planner import partition_problems
from game_elements import CATALOG, GameCatalog
from models import (
    CampaignPlan,
    CategoryCoverage,
    CategoryEliminationPlan,
    NarrativeArc,
    PlannedClue,
    Solution,
    ValidationIssue,
    ValidationResult,
)

logger = logging.getLogger("tudor_mystery.validator")

_SOLUTION_LABELS = {
    "suspect":  "the guilty suspect",
    "item":     "the stolen item",
    "location": "the crime location",
    "time":     "the crime time",
}

_ACT_LABELS = {
    "act1_setup":         "Act 1",
    "act2_confrontation": "Act 2",
    "act3_resolution":    "Act 3",
}


# ---------------------------------------------------------------------------
# Shared checks
# ---------------------------------------------------------------------------

def check_solution_not_eliminated(
    solution: Solution,
    clues:    Sequence[PlannedClue],
) -> List[ValidationIssue]:
    """One SOLUTION_ELIMINATED error per (clue, solution element) collision."""
    errors: List[ValidationIssue] = []
    for clue in clues:
        eliminated = set(clue.elimination.element_ids)
        for category in CATEGORIES:
            if solution.id_for(category) in eliminated:
                errors.append(ValidationIssue(
                    code="SOLUTION_ELIMINATED",
                    message=f"Clue {clue.position} eliminates {_SOLUTION_LABELS[category]}",
                    field=f"clues[{clue.position}]",
                ))
    return errors


def calculate_coverage(
    elimination_plans: Dict[str, CategoryEliminationPlan],
    clues:             Sequence[PlannedClue],
) -> Dict[str, CategoryCoverage]:
    """
    Per-category coverage of the planned eliminations by the actual clues.

    `total` counts planned elements, `covered` the distinct elements some
    clue eliminates, and `missing` lists planned elements no clue touches.
    Keys are plural category names.
    """
    covered: Dict[str, set] = {category: set() for category in CATEGORIES}
    for clue in clues:
        covered.setdefault(clue.elimination.category, set()).update(clue.elimination.element_ids)

    coverage: Dict[str, CategoryCoverage] = {}
    for category in CATEGORIES:
        category_plan = elimination_plans.get(category)
        planned = category_plan.eliminated_ids() if category_plan else []
        coverage[CATEGORY_PLURALS[category]] = CategoryCoverage(
            total=len(planned),
            covered=len(covered[category]),
            missing=tuple(eid for eid in planned if eid not in covered[category]),
        )
    return coverage


def _coverage_warnings(coverage: Dict[str, CategoryCoverage]) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []
    for plural, stats in coverage.items():
        if stats.missing:
            warnings.append(ValidationIssue(
                code="INCOMPLETE_COVERAGE",
                message=f"{len(stats.missing)} {plural} not covered by clues",
                suggestion=f"Some {plural} cannot be eliminated by clues",
            ))
    return warnings


def _result(
    errors:   List[ValidationIssue],
    warnings: List[ValidationIssue],
    coverage: Optional[Dict[str, CategoryCoverage]],
) -> ValidationResult:
    return ValidationResult(
        valid=not errors,
        errors=tuple(errors),
        warnings=tuple(warnings),
        coverage=coverage,
    )


# ---------------------------------------------------------------------------
# Build-time validation
# ---------------------------------------------------------------------------

def validate_plan(
    solution:          Solution,
    elimination_plans: Dict[str, CategoryEliminationPlan],
    clues:             Sequence[PlannedClue],
    settings:          DifficultySettings,
) -> ValidationResult:
    """
    Validate a freshly sequenced plan.

    Returns:
        ValidationResult with SOLUTION_ELIMINATED errors, and
        INCOMPLETE_COVERAGE / CLUE_COUNT_MISMATCH warnings.
    """
    errors = check_solution_not_eliminated(solution, clues)
    coverage = calculate_coverage(elimination_plans, clues)
    warnings = _coverage_warnings(coverage)

    if len(clues) != settings.clue_count:
        warnings.append(ValidationIssue(
            code="CLUE_COUNT_MISMATCH",
            message=f"Expected {settings.clue_count} clues but generated {len(clues)}",
        ))

    return _result(errors, warnings, coverage)


# ---------------------------------------------------------------------------
# Full re-validation
# ---------------------------------------------------------------------------

def _check_solution_elements(plan: CampaignPlan, catalog: GameCatalog) -> List[ValidationIssue]:
    """One INVALID_SOLUTION_<CATEGORY> error per solution id missing from the catalog."""
    errors: List[ValidationIssue] = []
    for category in CATEGORIES:
        solution_id = plan.solution.id_for(category)
        if solution_id not in catalog.ids(category):
            errors.append(ValidationIssue(
                code=f"INVALID_SOLUTION_{category.upper()}",
                message=f"Solution {category} {solution_id!r} is not in the catalog",
                field=f"solution.{category}_id",
            ))
    return errors


def _check_partitions(plan: CampaignPlan, catalog: GameCatalog) -> List[ValidationIssue]:
    errors: List[ValidationIssue] = []
    for category in CATEGORIES:
        solution_id = plan.solution.id_for(category)
        expected = [eid for eid in catalog.ids(category) if eid != solution_id]
        category_plan = plan.elimination_plans.get(category, CategoryEliminationPlan(groups=()))
        problems = partition_problems(category_plan, expected)
        if problems:
            errors.append(ValidationIssue(
                code="INCOMPLETE_PARTITION",
                message=f"{category} groups are not a partition: " + "; ".join(problems),
                field=f"elimination_plans.{category}",
            ))
    return errors


def _check_arc(arc: NarrativeArc, total: int) -> List[ValidationIssue]:
    errors: List[ValidationIssue] = []
    expected_start = 1
    for info in arc.acts():
        if info.clue_count < 0 or info.end_position - info.start_position + 1 != info.clue_count:
            errors.append(ValidationIssue(
                code="ACT_RANGE_GAP",
                message=(f"{_ACT_LABELS[info.act]} spans {info.start_position}..{info.end_position} "
                         f"but claims {info.clue_count} clue(s)"),
                field="narrative_arc",
            ))
        if info.start_position != expected_start:
            errors.append(ValidationIssue(
                code="ACT_RANGE_GAP",
                message=(f"{_ACT_LABELS[info.act]} starts at {info.start_position}, "
                         f"expected {expected_start}"),
                field="narrative_arc",
            ))
        expected_start = info.end_position + 1
    if expected_start - 1 != total:
        errors.append(ValidationIssue(
            code="ACT_RANGE_GAP",
            message=f"Acts cover positions 1..{expected_start - 1} but there are {total} clues",
            field="narrative_arc",
        ))
    return errors


def _check_act_distribution(
    clues:    Sequence[PlannedClue],
    settings: DifficultySettings,
) -> List[ValidationIssue]:
    counts = {act: 0 for act in ACTS}
    for clue in clues:
        counts[clue.act] = counts.get(clue.act, 0) + 1

    expected = dict(zip(ACTS, (settings.act_distribution.act1,
                               settings.act_distribution.act2,
                               settings.act_distribution.act3)))
    return [
        ValidationIssue(
            code="ACT_DISTRIBUTION_MISMATCH",
            message=f"{_ACT_LABELS[act]} has {counts[act]} clues, expected {expected[act]}",
        )
        for act in ACTS
        if counts[act] != expected[act]
    ]


def _check_red_herrings(
    plan:     CampaignPlan,
    settings: DifficultySettings,
) -> Tuple[List[ValidationIssue], List[ValidationIssue]]:
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []
    positions = {c.position for c in plan.clues}

    for n, herring in enumerate(plan.red_herrings):
        field = f"red_herrings[{n}]"
        category, target_id = herring.target.category, herring.target.element_id

        if target_id == plan.solution.id_for(category):
            errors.append(ValidationIssue(
                code="RED_HERRING_TARGETS_SOLUTION",
                message=f"Red herring targets the solution {category}",
                field=field,
            ))

        if herring.introduced_in_clue not in positions:
            warnings.append(ValidationIssue(
                code="RED_HERRING_INVALID_INTRO",
                message=f"Red herring introduction clue {herring.introduced_in_clue} not found",
                field=field,
            ))

        eliminated_by_intro = any(
            clue.elimination.category == category
            and target_id in clue.elimination.element_ids
            and clue.position <= herring.introduced_in_clue
            for clue in plan.clues
        )
        if not eliminated_by_intro:
            errors.append(ValidationIssue(
                code="RED_HERRING_NOT_ELIMINATED",
                message=(f"Red herring target {target_id} is not eliminated by clue "
                         f"{herring.introduced_in_clue} or earlier"),
                field=field,
            ))

        if settings.red_herrings.must_resolve and herring.resolved_in_clue is None:
            warnings.append(ValidationIssue(
                code="RED_HERRING_NOT_RESOLVED",
                message="Red herring should be resolved for this difficulty but has no resolution clue",
                field=field,
            ))
    return errors, warnings


def _check_dramatic_events(plan: CampaignPlan) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []
    for event in plan.dramatic_events:
        if not 1 <= event.after_clue <= len(plan.clues):
            warnings.append(ValidationIssue(
                code="DRAMATIC_EVENT_INVALID_TRIGGER",
                message=f"Dramatic event triggers after clue {event.after_clue} which is out of range",
            ))
        if plan.solution.suspect_id in event.involved_suspects:
            warnings.append(ValidationIssue(
                code="DRAMATIC_EVENT_INVOLVES_GUILTY",
                message="Dramatic event involves the guilty suspect",
                suggestion="This may be intentional for misdirection",
            ))
    return warnings


def _check_sequencing(plan: CampaignPlan) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []
    for index, clue in enumerate(plan.clues):
        if clue.position != index + 1:
            warnings.append(ValidationIssue(
                code="CLUE_SEQUENCE_ERROR",
                message=f"Clue at index {index} has position {clue.position}, expected {index + 1}",
            ))
        elif clue.act != plan.narrative_arc.act_for(clue.position).act:
            warnings.append(ValidationIssue(
                code="CLUE_SEQUENCE_ERROR",
                message=f"Clue {clue.position} is tagged {clue.act} but falls outside that act",
            ))

        for ref in clue.narrative.references:
            if ref >= clue.position or ref < 1:
                warnings.append(ValidationIssue(
                    code="INVALID_CLUE_REFERENCE",
                    message=f"Clue {clue.position} references clue {ref}, which is not earlier",
                ))
    return warnings


def _check_threads(plan: CampaignPlan) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []
    positions = {c.position for c in plan.clues}
    for thread in plan.threads:
        if not thread.clue_positions:
            warnings.append(ValidationIssue(
                code="EMPTY_NARRATIVE_THREAD",
                message=f'Narrative thread "{thread.name}" has no clues',
            ))
        for position in thread.clue_positions:
            if position not in positions:
                warnings.append(ValidationIssue(
                    code="INVALID_THREAD_CLUE",
                    message=f'Thread "{thread.name}" references non-existent clue {position}',
                ))
    return warnings


def validate_campaign_plan(
    plan:     CampaignPlan,
    catalog:  GameCatalog = CATALOG,
    settings: Optional[DifficultySettings] = None,
) -> ValidationResult:
    """
    Re-validate a finished plan without trusting its stored `validation`.

    Args:
        plan:     The plan to check.
        catalog:  Catalog the plan was drawn from.
        settings: Difficulty settings; looked up from `plan.difficulty` when omitted.

    Returns:
        A fresh ValidationResult. Coverage is measured against every
        non-solution element of the catalog.
    """
    settings = settings or get_difficulty_settings(plan.difficulty)

    errors = check_solution_not_eliminated(plan.solution, plan.clues)
    errors += _check_solution_elements(plan, catalog)
    errors += _check_partitions(plan, catalog)
    errors += _check_arc(plan.narrative_arc, len(plan.clues))

    coverage: Dict[str, CategoryCoverage] = {}
    for category in CATEGORIES:
        solution_id = plan.solution.id_for(category)
        expected = [eid for eid in catalog.ids(category) if eid != solution_id]
        covered = {
            eid for clue in plan.clues if clue.elimination.category == category
            for eid in clue.elimination.element_ids
        }
        coverage[CATEGORY_PLURALS[category]] = CategoryCoverage(
            total=len(expected),
            covered=len(covered),
            missing=tuple(eid for eid in expected if eid not in covered),
        )
    warnings = _coverage_warnings(coverage)

    warnings += _check_act_distribution(plan.clues, settings)
    herring_errors, herring_warnings = _check_red_herrings(plan, settings)
    errors += herring_errors
    warnings += herring_warnings
    warnings += _check_dramatic_events(plan)
    warnings += _check_sequencing(plan)
    warnings += _check_threads(plan)

    if errors:
        logger.warning(
            "Plan %s failed re-validation with %d error(s): %s",
            plan.id, len(errors), ", ".join(sorted({e.code for e in errors})),
        )
    return _result(errors, warnings, coverage)


def is_valid(plan: CampaignPlan) -> bool:
    return validate_campaign_plan(plan).valid
