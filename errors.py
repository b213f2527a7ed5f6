"""
errors.py
=========
Structured failures raised by the campaign planner.

Every error carries a machine-readable `code` and a human `message` so the
hosting layer (CLI, HTTP handler, test harness) can report it without parsing
strings. Soft shortfalls are never raised; they live in
ValidationResult.warnings instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Optional

if TYPE_CHECKING:
    from models import ValidationResult


class PlanningError(Exception):
    """Base class for every hard planning failure."""

    code = "PLANNING_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, str]:
        return {"code": self.code, "message": self.message}


class InvalidRequest(PlanningError):
    """The generation request failed schema validation."""

    code = "INVALID_REQUEST"


class EmptyCandidatePool(PlanningError):
    """An exclusion list removed every candidate of a category."""

    code = "EMPTY_CANDIDATE_POOL"

    def __init__(self, category: str) -> None:
        super().__init__(
            f"Exclusions leave no candidate {category} to choose a solution from"
        )
        self.category = category


class InvariantViolation(PlanningError):
    """A planner produced output that breaks a structural invariant (a bug)."""

    code = "INVARIANT_VIOLATION"


class PlanValidationError(PlanningError):
    """
    The finished plan failed validation and must not be surfaced to players.

    The full ValidationResult is attached so callers can report every error,
    not just the first.
    """

    code = "PLAN_INVALID"

    def __init__(self, result: "ValidationResult") -> None:
        first = result.errors[0]
        super().__init__(
            f"Plan failed validation with {len(result.errors)} error(s): {first.message}",
            code=first.code,
        )
        self.result = result


class ClueTextError(PlanningError):
    """Generated clue text does not line up with the planned clues."""

    code = "CLUE_TEXT_MISMATCH"
