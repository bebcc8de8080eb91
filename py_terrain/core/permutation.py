"""
Seeded permutation table for gradient noise lookups.

The table holds a shuffled copy of 0..255 followed by the same 256 entries
again, so lattice lookups of the form ``p[p[x] + y + 1]`` never need to wrap.
"""

import math
from typing import Optional

import numpy as np
import structlog

from .sine_prng import DeterministicGenerator, SinePRNG

logger = structlog.get_logger()

TABLE_SIZE = 256


class PermutationTable:
    """Immutable 512-entry permutation table built from a seed."""

    def __init__(self, values: np.ndarray, seed: float):
        if values.shape != (TABLE_SIZE * 2,):
            raise ValueError(f"Permutation table must have {TABLE_SIZE * 2} entries")
        values = values.astype(np.int64, copy=True)
        values.setflags(write=False)
        self._values = values
        self.seed = seed

    @property
    def values(self) -> np.ndarray:
        """Read-only view over all 512 entries."""
        return self._values

    @property
    def base(self) -> np.ndarray:
        """The first 256 entries (the actual permutation)."""
        return self._values[:TABLE_SIZE]

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index):
        return self._values[index]

    def is_valid(self) -> bool:
        """Check that the first half is a permutation of 0..255."""
        return bool(np.array_equal(np.sort(self.base), np.arange(TABLE_SIZE)))


def build_permutation_table(
    seed: float, generator: Optional[DeterministicGenerator] = None
) -> PermutationTable:
    """
    Build a permutation table with a seeded Fisher-Yates shuffle.

    Step ``i`` (from 255 down to 1) swaps entry ``i`` with entry
    ``floor(rand(seed + i) * (i + 1))``.

    Args:
        seed: Numeric seed; non-finite seeds give a fixed, defined table
        generator: Draw function, defaults to ``SinePRNG``

    Returns:
        PermutationTable for this seed
    """
    generator = generator or SinePRNG()
    seed = float(seed)

    permutation = list(range(TABLE_SIZE))
    for i in range(TABLE_SIZE - 1, 0, -1):
        j = math.floor(generator.at(seed + i) * (i + 1))
        j = min(max(j, 0), i)
        permutation[i], permutation[j] = permutation[j], permutation[i]

    if not math.isfinite(seed):
        logger.warning("Non-finite seed, using degenerate permutation", seed=seed)

    values = np.array(permutation + permutation, dtype=np.int64)
    logger.debug("Permutation table built", seed=seed)
    return PermutationTable(values, seed)
