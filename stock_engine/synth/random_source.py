"""
Stock Dashboard — Randomness
──────────────────────────────
Two kinds of randomness live here and nowhere else:

  seeded_random(seed)   deterministic, drives every synthetic series
  RandomSource          live entropy for quotes and unknown-ticker base prices

Tests pin RandomSource with a seed (or FixedRandomSource) to make the
live paths reproducible too.
"""

import math
import random
from typing import Iterable, Optional


def ticker_seed(ticker: str) -> int:
    """Sum of character code points. Anagrams share a seed."""
    return sum(ord(ch) for ch in ticker)


def seeded_random(seed: float) -> float:
    """Pure pseudo-random value in [0, 1) for a given seed."""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


class RandomSource:
    """Uniform [0, 1) draws. Unseeded by default."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


class FixedRandomSource(RandomSource):
    """Replays a fixed cycle of values. Used by tests."""

    def __init__(self, values: Iterable[float] = (0.5,)):
        self._values = list(values)
        if not self._values:
            raise ValueError("FixedRandomSource needs at least one value")
        self._i = 0

    def random(self) -> float:
        v = self._values[self._i % len(self._values)]
        self._i += 1
        return v


# Process-wide live entropy
default_source = RandomSource()
