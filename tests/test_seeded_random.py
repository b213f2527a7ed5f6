"""
Tests for the deterministic generator every planner draws from.
"""

import pytest
from hypothesis import given, strategies as st

from seeded_random import SeededRandom, create_rng

seeds = st.integers(min_value=0, max_value=2**31 - 1)


class TestSequence:

    def test_first_value_follows_lcg(self):
        assert SeededRandom(0).next() == 12345 / 2**31
        assert SeededRandom(1).next() == 1103527590 / 2**31

    @given(seeds)
    def test_same_seed_same_sequence(self, seed):
        a, b = SeededRandom(seed), SeededRandom(seed)
        assert [a.next() for _ in range(20)] == [b.next() for _ in range(20)]

    @given(seeds)
    def test_values_in_unit_interval(self, seed):
        rng = SeededRandom(seed)
        for _ in range(50):
            assert 0.0 <= rng.next() < 1.0

    def test_seed_property_and_factory(self):
        rng = create_rng(99)
        rng.next()
        assert rng.seed == 99

    def test_default_seed_is_time_based(self):
        assert SeededRandom().seed > 0

    def test_clone_continues_identically(self):
        rng = SeededRandom(5)
        rng.next()
        twin = rng.clone()
        assert [rng.next() for _ in range(5)] == [twin.next() for _ in range(5)]


class TestDraws:

    @given(seeds, st.integers(-20, 20), st.integers(0, 20))
    def test_next_int_inclusive_bounds(self, seed, low, span):
        rng = SeededRandom(seed)
        high = low + span
        for _ in range(20):
            assert low <= rng.next_int(low, high) <= high

    def test_next_bool_extremes(self):
        rng = SeededRandom(3)
        assert not any(rng.next_bool(0.0) for _ in range(50))
        assert all(rng.next_bool(1.0) for _ in range(50))

    def test_pick_empty_raises(self, rng):
        with pytest.raises(ValueError):
            rng.pick([])

    def test_pick_returns_member(self, rng):
        items = ["a", "b", "c"]
        for _ in range(20):
            assert rng.pick(items) in items

    def test_pick_multiple_too_many_raises(self, rng):
        with pytest.raises(ValueError):
            rng.pick_multiple([1, 2], 3)

    def test_pick_multiple_distinct(self, rng):
        picked = rng.pick_multiple(list(range(10)), 4)
        assert len(picked) == 4
        assert len(set(picked)) == 4

    @given(seeds, st.lists(st.integers(), max_size=15))
    def test_shuffle_is_permutation_and_pure(self, seed, items):
        original = list(items)
        shuffled = SeededRandom(seed).shuffle(items)
        assert items == original
        assert sorted(shuffled) == sorted(items)


class TestWeighted:

    def test_mismatched_weights_raise(self, rng):
        with pytest.raises(ValueError):
            rng.pick_weighted(["a", "b"], [1])

    def test_empty_raises(self, rng):
        with pytest.raises(ValueError):
            rng.pick_weighted([], [])

    @given(seeds)
    def test_zero_weight_never_chosen(self, seed):
        rng = SeededRandom(seed)
        for _ in range(20):
            assert rng.pick_weighted(["never", "always"], [0, 3]) == "always"

    def test_all_zero_weights_fall_back_to_uniform(self, rng):
        for _ in range(20):
            assert rng.pick_weighted(["a", "b"], [0, 0]) in ("a", "b")
