"""Seedable RNG wrapper built on top of random.Random."""
from __future__ import annotations

from random import Random


class RNG:
    """Wrapper around random.Random; the same seed replays the same rolls."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)
