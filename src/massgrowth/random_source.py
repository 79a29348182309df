"""
Randomness for probabilistic calculations.

Calculators only ever ask for a uniform draw in [0, 1). Production code uses
numpy's Generator; tests inject a fixed sequence to pin each branch.
"""

from typing import Optional, Protocol, Sequence
import itertools
import numpy as np


class RandomSource(Protocol):
    def random(self) -> float:
        ...


class NumpyRandomSource:
    """Uniform draws from ``numpy.random.default_rng`` (unseeded by default)."""

    def __init__(self, seed: Optional[int] = None):
        self.rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self.rng.random())


class SequenceRandomSource:
    """Replays a fixed sequence of draws, cycling when exhausted."""

    def __init__(self, values: Sequence[float]):
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Draw {v} outside [0, 1)")
        self.values = list(values)
        self._iter = itertools.cycle(self.values)
        self.draws = 0

    def random(self) -> float:
        self.draws += 1
        return next(self._iter)
