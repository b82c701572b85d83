"""Seeded linear-congruential generator driving every annealing decision.

The same seed always yields the same sequence on every platform, which is
what makes annealing runs reproducible.
"""

from __future__ import annotations

import time
from typing import Sequence, TypeVar

T = TypeVar("T")

_MODULUS_MASK = 0x7FFFFFFF
_MULTIPLIER = 1103515245
_INCREMENT = 12345


class SeededRandom:
    """LCG with ``state = (state * 1103515245 + 12345) mod 2**31``.

    Args:
        seed: Starting state. ``None`` seeds from the wall clock in
            milliseconds, so the run cannot be reproduced.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int(time.time() * 1000)
        self.seed = seed
        self._state = seed & _MODULUS_MASK

    def next(self) -> float:
        """Next value in [0, 1]."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MODULUS_MASK
        return self._state / _MODULUS_MASK

    def index(self, n: int) -> int:
        """Uniform index in ``range(n)``; *n* must be positive."""
        return min(int(self.next() * n), n - 1)

    def pick(self, items: Sequence[T]) -> T:
        return items[self.index(len(items))]

    def pick_two(self, items: Sequence[T]) -> tuple[T, T]:
        """Two distinct positions of *items* (needs at least two items)."""
        i = self.index(len(items))
        j = self.index(len(items) - 1)
        if j >= i:
            j += 1
        return items[i], items[j]
