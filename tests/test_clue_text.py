"""
Tests for the clue-text attachment contract.
"""

import pytest

from clue_text import GeneratedClueText, attach_clue_text, missing_clue_text, parse_clue_texts
from errors import ClueTextError


class TestSchema:

    def test_text_is_stripped(self):
        entry = GeneratedClueText(position=1, text="  Ashe clears his throat.  ")
        assert entry.text == "Ashe clears his throat."

    def test_blank_text_rejected(self):
        with pytest.raises(ClueTextError):
            parse_clue_texts([{"position": 1, "text": "   "}])

    def test_position_must_be_positive(self):
        with pytest.raises(ClueTextError):
            parse_clue_texts([{"position": 0, "text": "x"}])


class TestAttach:

    def test_returns_new_plan(self, expert_plan):
        texts = [{"position": c.position, "text": f"Clue number {c.position}"} for c in expert_plan.clues]

        updated = attach_clue_text(expert_plan, texts)

        assert updated is not expert_plan
        assert [c.text for c in updated.clues] == [f"Clue number {n}" for n in range(1, 8)]
        assert all(c.text is None for c in expert_plan.clues)
        assert updated.solution == expert_plan.solution
        assert missing_clue_text(updated) == []

    def test_partial_attach_leaves_others_missing(self, expert_plan):
        updated = attach_clue_text(expert_plan, [GeneratedClueText(position=2, text="Two")])
        assert updated.clue_at(2).text == "Two"
        missing = [issue.field for issue in missing_clue_text(updated)]
        assert "clues[2].text" not in missing
        assert len(missing) == 6

    def test_unknown_position(self, expert_plan):
        with pytest.raises(ClueTextError) as excinfo:
            attach_clue_text(expert_plan, [{"position": 8, "text": "Too far"}])
        assert excinfo.value.code == "CLUE_TEXT_MISMATCH"

    def test_duplicate_position(self, expert_plan):
        with pytest.raises(ClueTextError):
            attach_clue_text(expert_plan, [
                {"position": 1, "text": "First"},
                {"position": 1, "text": "Again"},
            ])

    def test_missing_text_codes(self, expert_plan):
        issues = missing_clue_text(expert_plan)
        assert len(issues) == 7
        assert {issue.code for issue in issues} == {"EMPTY_CLUE_TEXT"}
