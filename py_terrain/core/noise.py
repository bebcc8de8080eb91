"""
2-D coherent noise built on a seeded permutation table.

Lattice corners get one of four diagonal gradients picked from the table,
and the four corner contributions are blended with the quintic fade curve
``6t^5 - 15t^4 + 10t^3``. Output lies roughly in [-1, 1] and is exactly 0 on
integer lattice points, so neighbouring cells join without seams.

All functions accept scalars or NumPy arrays of matching shape.
"""

from typing import Union

import numpy as np

from .permutation import PermutationTable, TABLE_SIZE

ArrayLike = Union[float, np.ndarray]


def fade(t: ArrayLike) -> ArrayLike:
    """Quintic smoothing curve t^3 (t (6t - 15) + 10)."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def lerp(t: ArrayLike, a: ArrayLike, b: ArrayLike) -> ArrayLike:
    return a + t * (b - a)


def grad(hash_value: np.ndarray, x: ArrayLike, y: ArrayLike) -> np.ndarray:
    """Dot product of (x, y) with the gradient selected by the low two bits."""
    h = np.asarray(hash_value) & 3
    u = np.where(h < 2, x, y)
    v = np.where(h < 2, y, x)
    return np.where(h & 1, -u, u) + np.where(h & 2, -v, v)


class ValueNoiseField:
    """Pure sample function over an immutable permutation table."""

    def __init__(self, table: PermutationTable):
        self.table = table

    def sample(self, x: float, y: float) -> float:
        """Sample the field at a single point."""
        return float(self.sample_array(np.asarray(x, dtype=np.float64),
                                       np.asarray(y, dtype=np.float64)))

    def sample_array(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        """
        Sample the field at many points at once.

        Args:
            x: X coordinates
            y: Y coordinates, same shape as ``x``

        Returns:
            Noise values with the shape of the inputs
        """
        p = self.table.values

        x_floor = np.floor(x)
        y_floor = np.floor(y)
        # Same as floor(x) & 255 for negative coordinates too
        xi = np.mod(x_floor, TABLE_SIZE).astype(np.int64)
        yi = np.mod(y_floor, TABLE_SIZE).astype(np.int64)
        xf = x - x_floor
        yf = y - y_floor

        u = fade(xf)
        v = fade(yf)

        a = p[xi] + yi
        b = p[xi + 1] + yi

        return lerp(
            v,
            lerp(u, grad(p[a], xf, yf), grad(p[b], xf - 1, yf)),
            lerp(u, grad(p[a + 1], xf, yf - 1), grad(p[b + 1], xf - 1, yf - 1)),
        )
