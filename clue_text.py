"""
clue_text.py
============
Contract between the campaign planner and the external clue-text stage.

The text stage (an LLM prompt, a human author, a template engine) receives a
CampaignPlan and must return one GeneratedClueText per clue. This module
validates that output and produces a new plan carrying the text. The
original plan is never modified.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from errors import ClueTextError
from models import CampaignPlan, ValidationIssue

logger = logging.getLogger("tudor_mystery.clue_text")


class GeneratedClueText(BaseModel):
    """
    Validated output schema for one clue from the text stage.

    Fields:
        position: 1-based position of the planned clue this text belongs to.
        text:     The clue as read to players. Surrounding whitespace is
                  stripped; blank text is rejected.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    position: int = Field(ge=1)
    text:     str

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("clue text must not be blank")
        return value


def parse_clue_texts(raw: Iterable[Union[GeneratedClueText, Dict[str, Any]]]) -> List[GeneratedClueText]:
    """
    Coerce raw text-stage output into GeneratedClueText objects.

    Raises:
        ClueTextError: If any entry fails schema validation.
    """
    parsed: List[GeneratedClueText] = []
    for entry in raw:
        if isinstance(entry, GeneratedClueText):
            parsed.append(entry)
            continue
        try:
            parsed.append(GeneratedClueText.model_validate(entry))
        except ValidationError as exc:
            raise ClueTextError(f"Invalid clue text entry {entry!r}: {exc}") from exc
    return parsed


def attach_clue_text(
    plan:  CampaignPlan,
    texts: Iterable[Union[GeneratedClueText, Dict[str, Any]]],
) -> CampaignPlan:
    """
    Return a copy of `plan` whose clues carry the supplied text.

    Clues without a matching entry keep their current text. Every entry must
    name an existing position, and no position may appear twice.

    Raises:
        ClueTextError: (CLUE_TEXT_MISMATCH) on unknown or duplicate positions,
            or entries that fail schema validation.
    """
    entries = parse_clue_texts(texts)
    known = {clue.position for clue in plan.clues}

    by_position: Dict[int, str] = {}
    for entry in entries:
        if entry.position not in known:
            raise ClueTextError(
                f"Clue text given for position {entry.position}, "
                f"but the plan has positions 1..{len(plan.clues)}"
            )
        if entry.position in by_position:
            raise ClueTextError(f"Clue text given twice for position {entry.position}")
        by_position[entry.position] = entry.text

    clues = tuple(
        dataclasses.replace(clue, text=by_position[clue.position])
        if clue.position in by_position else clue
        for clue in plan.clues
    )
    logger.debug("Attached text to %d of %d clue(s) in %s", len(by_position), len(clues), plan.id)
    return dataclasses.replace(plan, clues=clues)


def missing_clue_text(plan: CampaignPlan) -> List[ValidationIssue]:
    """One EMPTY_CLUE_TEXT issue per clue that still has no usable text."""
    return [
        ValidationIssue(
            code="EMPTY_CLUE_TEXT",
            message=f"Clue {clue.position} has no text",
            field=f"clues[{clue.position}].text",
        )
        for clue in plan.clues
        if not (clue.text and clue.text.strip())
    ]
