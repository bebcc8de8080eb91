"""
Deterministic sine-hash generator used to shuffle permutation tables.

The draw for a given input is ``frac(sin(x) * 10000)``. It is not a good
random source, but it is stateless and reproducible for a given seed, which
is all the permutation shuffle needs.
"""

import math
from typing import Protocol


class DeterministicGenerator(Protocol):
    """Anything that maps a numeric input to a float in [0, 1)."""

    def at(self, value: float) -> float:
        ...


class SinePRNG:
    """Stateless ``frac(sin(x) * 10000)`` generator."""

    def __init__(self, multiplier: float = 10000.0):
        self.multiplier = multiplier
        self.call_count = 0

    def at(self, value: float) -> float:
        """Return the draw for ``value`` in [0, 1).

        Non-finite inputs (and the NaN they produce) yield 0.0 so the
        shuffle degrades to a fixed table instead of failing.
        """
        self.call_count += 1
        if not math.isfinite(value):
            return 0.0
        s = math.sin(value) * self.multiplier
        r = s - math.floor(s)
        # Guard against r rounding up to exactly 1.0
        if not 0.0 <= r < 1.0:
            return 0.0
        return r
