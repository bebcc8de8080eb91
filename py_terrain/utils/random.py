"""
Random seed utilities.

Terrain generation itself is fully determined by its seed. The only
non-deterministic step is drawing that seed, so the source is injectable.
"""

from typing import Callable, Optional

import numpy as np

DEFAULT_SEED_RANGE = 10000.0


def draw_seed(
    source: Optional[Callable[[], float]] = None,
    seed_range: float = DEFAULT_SEED_RANGE,
) -> float:
    """
    Draw a terrain seed in [0, seed_range).

    Args:
        source: Callable returning a float in [0, 1); defaults to a fresh
            NumPy generator
        seed_range: Upper bound of the seed

    Returns:
        Seed value
    """
    if source is None:
        source = np.random.default_rng().random
    return float(source()) * seed_range
