"""
End-to-end tests for plan_campaign and its selection helpers.
"""

import logging
import re

import pytest
from hypothesis import given, settings, strategies as st

import campaign_planner
from campaign_planner import (
    CampaignPlanner,
    coerce_request,
    plan_campaign,
    select_solution,
    select_theme,
    to_base36,
)
from config import CATEGORIES, DIFFICULTIES, PlannerConfig
from errors import EmptyCandidatePool, InvalidRequest, PlanValidationError, PlanningError
from game_elements import CATALOG
from models import CampaignRequest, ValidationIssue, ValidationResult
from seeded_random import SeededRandom
from validator import validate_campaign_plan

seeds = st.integers(min_value=0, max_value=2**40)


class TestPlanProperties:

    @settings(max_examples=50, deadline=None)
    @given(seeds, st.sampled_from(DIFFICULTIES))
    def test_every_plan_is_solvable(self, seed, difficulty):
        plan = plan_campaign({"seed": seed, "difficulty": difficulty})

        assert plan.validation.valid
        assert [c.position for c in plan.clues] == list(range(1, len(plan.clues) + 1))
        solution_ids = set(plan.solution.ids())
        for clue in plan.clues:
            assert not solution_ids & set(clue.elimination.element_ids)

        start = 1
        for act in plan.narrative_arc.acts():
            assert act.start_position == start
            start = act.end_position + 1
        assert start - 1 == len(plan.clues)

        assert not validate_campaign_plan(plan).errors

    @settings(max_examples=20, deadline=None)
    @given(seeds, st.sampled_from(DIFFICULTIES))
    def test_same_seed_same_plan(self, seed, difficulty):
        request = {"seed": seed, "difficulty": difficulty}
        assert plan_campaign(request) == plan_campaign(request)


class TestScenarios:

    def test_seed_42_expert(self, expert_plan):
        assert len(expert_plan.clues) == 7
        assert [c.position for c in expert_plan.clues] == [1, 2, 3, 4, 5, 6, 7]
        assert expert_plan.validation.valid
        assert expert_plan.validation.errors == ()
        assert expert_plan.difficulty == "expert"
        assert expert_plan.seed == 42

    def test_plan_id_is_reproducible(self, expert_plan):
        assert re.fullmatch(r"CMP-16-\d{4}", expert_plan.id)
        assert plan_campaign({"seed": 42, "difficulty": "expert"}).id == expert_plan.id

    def test_different_seeds_vary_solutions(self):
        solutions = {plan_campaign({"seed": s}).solution for s in range(1, 21)}
        assert len(solutions) > 1

    def test_excluded_suspects_never_selected(self):
        for seed in range(100):
            plan = plan_campaign({"seed": seed, "exclude_suspects": ["S01", "S02"]})
            assert plan.solution.suspect_id not in ("S01", "S02")

    def test_all_exclusions_honoured(self):
        request = {
            "seed": 11,
            "excludeSuspects": ["S01"],
            "excludeItems": ["I01", "I02"],
            "excludeLocations": ["L01"],
            "excludeTimes": ["T01", "T10"],
        }
        solution = plan_campaign(request).solution
        assert solution.suspect_id != "S01"
        assert solution.item_id not in ("I01", "I02")
        assert solution.location_id != "L01"
        assert solution.time_id not in ("T01", "T10")

    def test_requested_theme_is_used(self):
        assert plan_campaign({"seed": 3, "theme_id": "M04"}).theme_id == "M04"

    def test_unknown_theme_degrades_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="tudor_mystery.campaign_planner"):
            plan = plan_campaign({"seed": 3, "theme_id": "M99"})
        assert plan.theme_id in {t.id for t in CATALOG.themes}
        assert "M99" in caplog.text

    def test_default_difficulty(self):
        assert plan_campaign({"seed": 5}).difficulty == "intermediate"
        planner = CampaignPlanner(config=PlannerConfig(default_difficulty="beginner"))
        assert planner.plan({"seed": 5}).difficulty == "beginner"

    def test_no_seed_uses_clock(self):
        plan = plan_campaign()
        assert plan.seed > 0
        assert plan.validation.valid

    def test_threads_tagged_on_clues(self, beginner_plan):
        for thread in beginner_plan.threads:
            for position in thread.clue_positions:
                assert beginner_plan.clue_at(position).narrative.thread_id == thread.id


class TestFailures:

    def test_all_suspects_excluded(self):
        with pytest.raises(EmptyCandidatePool) as excinfo:
            plan_campaign({"seed": 1, "exclude_suspects": list(CATALOG.ids("suspect"))})
        assert excinfo.value.code == "EMPTY_CANDIDATE_POOL"
        assert excinfo.value.category == "suspect"
        assert excinfo.value.to_dict()["code"] == "EMPTY_CANDIDATE_POOL"

    @pytest.mark.parametrize("request_data", [
        {"difficulty": "impossible"},
        {"seed": -1},
        {"seed": "abc"},
        {"exclude_suspect": ["S01"]},
    ])
    def test_invalid_requests(self, request_data):
        with pytest.raises(InvalidRequest) as excinfo:
            plan_campaign(request_data)
        assert excinfo.value.code == "INVALID_REQUEST"
        assert isinstance(excinfo.value, PlanningError)

    def test_validation_errors_block_the_plan(self, monkeypatch):
        broken = ValidationResult(
            valid=False,
            errors=(ValidationIssue("SOLUTION_ELIMINATED", "Clue 1 eliminates the guilty suspect"),),
        )
        monkeypatch.setattr(campaign_planner, "validate_plan", lambda *args, **kwargs: broken)
        with pytest.raises(PlanValidationError) as excinfo:
            plan_campaign({"seed": 42})
        assert excinfo.value.code == "SOLUTION_ELIMINATED"
        assert excinfo.value.result is broken


class TestHelpers:

    @pytest.mark.parametrize("number,expected", [(0, "0"), (35, "z"), (36, "10"), (42, "16")])
    def test_to_base36(self, number, expected):
        assert to_base36(number) == expected

    def test_coerce_request_variants(self):
        assert coerce_request(None) == CampaignRequest()
        req = CampaignRequest(seed=1)
        assert coerce_request(req) is req
        camel = coerce_request({"themeId": "M02", "excludeTimes": ["T03"]})
        assert camel.theme_id == "M02"
        assert camel.exclude_times == ["T03"]

    def test_select_theme_consumes_rng_only_when_needed(self):
        rng = SeededRandom(10)
        assert select_theme(rng, "M05").id == "M05"
        assert rng.next() == SeededRandom(10).next()

    def test_select_solution_draws_in_category_order(self):
        solution = select_solution(SeededRandom(4), CampaignRequest())
        rng = SeededRandom(4)
        expected = [rng.pick(CATALOG.ids(category)) for category in CATEGORIES]
        assert list(solution.ids()) == expected
