"""
seeded_random.py
================
Deterministic pseudo-random generator for reproducible campaign plans.

A linear congruential generator is all that is needed here: the goal is a
sequence that is identical for the same seed on every run and platform, not
cryptographic quality. Every planning function receives one SeededRandom
instance explicitly; constructing a second generator mid-plan would silently
break reproducibility.
"""

from __future__ import annotations

import math
import time
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")

_MULTIPLIER = 1103515245
_INCREMENT  = 12345
_MASK       = 0x7FFFFFFF
_MODULUS    = 0x80000000


class SeededRandom:
    """
    Seeded LCG exposing the picks and shuffles the planners need.

    Args:
        seed: Integer seed. Defaults to the current time in milliseconds.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        if seed is None:
            seed = int(time.time() * 1000)
        self._seed  = int(seed)
        self._state = int(seed)

    @property
    def seed(self) -> int:
        """The seed this generator was constructed with."""
        return self._seed

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK
        return self._state / _MODULUS

    def next_int(self, low: int, high: int) -> int:
        """Random integer in [low, high], both inclusive."""
        return math.floor(self.next() * (high - low + 1)) + low

    def next_bool(self, probability: float = 0.5) -> bool:
        return self.next() < probability

    def pick(self, items: Sequence[T]) -> T:
        """Uniformly pick one element. Raises ValueError on an empty sequence."""
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[math.floor(self.next() * len(items))]

    def pick_multiple(self, items: Sequence[T], count: int) -> List[T]:
        """Pick `count` distinct elements (by position) in random order."""
        if count > len(items):
            raise ValueError(
                f"Cannot pick {count} elements from a sequence of length {len(items)}"
            )
        return self.shuffle(items)[:count]

    def pick_weighted(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """
        Pick one element with probability proportional to its weight.

        Weights are aligned with `items` by index. When the weights sum to
        zero or less the pick degrades to a uniform one.

        Raises:
            ValueError: If `items` is empty or the lengths differ.
        """
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        if len(items) != len(weights):
            raise ValueError("Weights must match the number of items")

        total = sum(weights)
        if total <= 0:
            return self.pick(items)

        remaining = self.next() * total
        for item, weight in zip(items, weights):
            if remaining < weight:
                return item
            remaining -= weight
        return items[-1]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle into a new list; the input is left untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = math.floor(self.next() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result

    def clone(self) -> "SeededRandom":
        """Copy of this generator at its current position in the sequence."""
        twin = SeededRandom(self._seed)
        twin._state = self._state
        return twin


def create_rng(seed: Optional[int] = None) -> SeededRandom:
    return SeededRandom(seed)
