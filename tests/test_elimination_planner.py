"""
Tests for partitioning non-solution elements into elimination groups.
"""

import pytest
from hypothesis import given, settings, strategies as st

import elimination_planner
from config import CATEGORIES, ELIMINATION_TYPE_INFO, get_difficulty_settings
from elimination_planner import (
    build_elimination_context,
    calculate_priority,
    determine_target_act,
    partition_problems,
    plan_all_eliminations,
    plan_category_eliminations,
    select_elimination_type,
)
from errors import InvariantViolation
from game_elements import CATALOG
from models import CategoryEliminationPlan, EliminationGroup, Solution
from seeded_random import SeededRandom

seeds = st.integers(min_value=0, max_value=2**31 - 1)
difficulties = st.sampled_from(["beginner", "intermediate", "expert"])


class TestPartition:

    @settings(max_examples=60, deadline=None)
    @given(seeds, difficulties)
    def test_groups_partition_non_solution_ids(self, seed, difficulty):
        rng = SeededRandom(seed)
        solution = Solution(
            suspect_id=rng.pick(CATALOG.ids("suspect")),
            item_id=rng.pick(CATALOG.ids("item")),
            location_id=rng.pick(CATALOG.ids("location")),
            time_id=rng.pick(CATALOG.ids("time")),
        )
        plans = plan_all_eliminations(rng, solution, get_difficulty_settings(difficulty))

        assert list(plans) == list(CATEGORIES)
        for category, category_plan in plans.items():
            expected = {eid for eid in CATALOG.ids(category) if eid != solution.id_for(category)}
            eliminated = category_plan.eliminated_ids()
            assert len(eliminated) == len(set(eliminated))
            assert set(eliminated) == expected
            assert category_plan.total_elements == len(expected)
            assert category_plan.clue_count == len(category_plan.groups)

    @settings(max_examples=40, deadline=None)
    @given(seeds, difficulties)
    def test_group_sizes_and_mechanisms_respect_settings(self, seed, difficulty):
        settings_ = get_difficulty_settings(difficulty)
        solution = Solution("S03", "I07", "L05", "T04")
        plans = plan_all_eliminations(SeededRandom(seed), solution, settings_)

        for category, category_plan in plans.items():
            limit = settings_.max_group_size.for_category(category)
            for index, group in enumerate(category_plan.groups):
                assert group.index == index
                assert 1 <= group.size <= limit
                assert ELIMINATION_TYPE_INFO[group.elimination_type].category == category

    def test_same_seed_same_groups(self, solution, intermediate):
        ids = [eid for eid in CATALOG.ids("suspect") if eid != solution.suspect_id]
        a = plan_category_eliminations(SeededRandom(8), "suspect", ids, intermediate, solution)
        b = plan_category_eliminations(SeededRandom(8), "suspect", ids, intermediate, solution)
        assert a == b

    def test_broken_partition_raises(self, monkeypatch, rng, solution, intermediate):
        monkeypatch.setattr(
            elimination_planner,
            "plan_category_eliminations",
            lambda *args, **kwargs: CategoryEliminationPlan(groups=()),
        )
        with pytest.raises(InvariantViolation) as excinfo:
            plan_all_eliminations(rng, solution, intermediate)
        assert excinfo.value.code == "INCOMPLETE_PARTITION"


class TestPartitionProblems:

    def _group(self, index, ids):
        return EliminationGroup(index, tuple(ids), "individual_alibi", "act3_resolution", 0)

    def test_exact_partition_has_no_problems(self):
        plan = CategoryEliminationPlan((self._group(0, ["S02", "S03"]), self._group(1, ["S04"])))
        assert partition_problems(plan, ["S02", "S03", "S04"]) == []

    def test_reports_missing_duplicate_and_unexpected(self):
        plan = CategoryEliminationPlan((self._group(0, ["S02", "S09"]), self._group(1, ["S02"])))
        problems = partition_problems(plan, ["S02", "S03"])
        assert any("S03" in p and "not eliminated" in p for p in problems)
        assert any("S02" in p and "more than once" in p for p in problems)
        assert any("S09" in p and "unexpected" in p for p in problems)

    def test_empty_group_reported(self):
        plan = CategoryEliminationPlan((self._group(0, []),))
        assert any("empty" in p for p in partition_problems(plan, []))


class TestGroupDecisions:

    @pytest.mark.parametrize("category,size,expected", [
        ("suspect", 4, "group_alibi"),
        ("suspect", 3, "group_alibi"),
        ("item", 3, "category_secured"),
        ("location", 3, "location_visibility"),
        ("time", 3, "staff_activity"),
    ])
    def test_single_candidate_mechanisms(self, rng, category, size, expected):
        assert select_elimination_type(rng, category, size) == expected

    def test_falls_back_to_any_legal_type(self, rng):
        for _ in range(20):
            chosen = select_elimination_type(rng, "location", 4)
            assert ELIMINATION_TYPE_INFO[chosen].category == "location"

    def test_single_groups_use_small_mechanisms(self, rng):
        for _ in range(20):
            chosen = select_elimination_type(rng, "suspect", 1)
            assert ELIMINATION_TYPE_INFO[chosen].typical_group_size in ("single", "small")

    @pytest.mark.parametrize("size,max_size,act", [
        (4, 4, "act1_setup"),
        (3, 4, "act1_setup"),
        (2, 2, "act1_setup"),
        (2, 3, "act2_confrontation"),
        (1, 3, "act3_resolution"),
        (1, 1, "act1_setup"),
    ])
    def test_target_act(self, size, max_size, act):
        assert determine_target_act(size, max_size) == act

    def test_priority(self):
        assert calculate_priority(0, 3) == -15
        assert calculate_priority(2, 3) == 5
        assert calculate_priority(1, 1) < calculate_priority(2, 1)


class TestContext:

    @pytest.mark.parametrize("mechanism", ["group_alibi", "individual_alibi", "witness_testimony"])
    def test_alibi_context(self, rng, solution, mechanism):
        for _ in range(20):
            context = build_elimination_context(rng, mechanism, solution)
            assert context.alibi_location != solution.location_id
            assert context.alibi_location in CATALOG.ids("location")
            assert context.alibi_time == solution.time_id

    def test_category_secured_avoids_stolen_category(self, rng, solution):
        stolen_category = CATALOG.item(solution.item_id).category
        for _ in range(20):
            context = build_elimination_context(rng, "category_secured", solution)
            assert context.item_category in CATALOG.item_categories()
            assert context.item_category != stolen_category

    @pytest.mark.parametrize("mechanism", ["location_occupied", "location_visibility"])
    def test_location_context_uses_crime_time(self, rng, solution, mechanism):
        context = build_elimination_context(rng, mechanism, solution)
        assert context.alibi_time == solution.time_id
        assert context.alibi_location is None

    @pytest.mark.parametrize("mechanism", ["item_present", "all_together", "staff_activity"])
    def test_earlier_time_context(self, rng, solution, mechanism):
        crime_order = CATALOG.time(solution.time_id).order
        for _ in range(20):
            context = build_elimination_context(rng, mechanism, solution)
            assert CATALOG.time(context.alibi_time).order < crime_order

    def test_no_earlier_time_omits_context(self, rng):
        dawn = Solution("S01", "I01", "L01", "T01")
        assert build_elimination_context(rng, "all_together", dawn) is None

    def test_mechanisms_without_context(self, rng, solution):
        assert build_elimination_context(rng, "motive_cleared", solution) is None
        assert build_elimination_context(rng, "timeline_impossibility", solution) is None
