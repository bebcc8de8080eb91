"""Row-major 2-D grid of normalized float samples."""

from typing import Iterator, Tuple

import numpy as np


class ScalarGrid:
    """
    A 2-D field of floats stored row-major (``values[row, col]``).

    Rows run along Y (or Z for the terrain plane), columns along X.
    Grids are treated as values: operations return new grids.
    """

    def __init__(self, values: np.ndarray):
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"ScalarGrid needs a 2-D array, got {values.ndim}-D")
        self._values = values

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def width(self) -> int:
        return self._values.shape[1]

    @property
    def height(self) -> int:
        return self._values.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._values.shape

    def at(self, x: int, y: int) -> float:
        """Value at column ``x`` of row ``y``."""
        return float(self._values[y, x])

    def __getitem__(self, index):
        return self._values[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._values)

    def __len__(self) -> int:
        return self.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, ScalarGrid):
            return NotImplemented
        return np.array_equal(self._values, other._values)

    def __repr__(self) -> str:
        return f"ScalarGrid(width={self.width}, height={self.height})"

    def flatten(self) -> np.ndarray:
        """Row-major 1-D copy of the samples."""
        return self._values.ravel().copy()

    def mean(self) -> float:
        if self._values.size == 0:
            return 0.0
        return float(self._values.mean())

    def shifted(self, modifier: float) -> "ScalarGrid":
        """Add ``modifier`` to every sample and clamp back into [0, 1]."""
        return ScalarGrid(np.clip(self._values + modifier, 0.0, 1.0))

    def resample(self, segments: int) -> "ScalarGrid":
        """
        Nearest-cell lookup of a ``(segments + 1)^2`` vertex grid onto this one.

        Vertex coordinate ``c`` maps to cell ``floor(c * (n - 1) / segments)``
        along each axis, ``n`` being that axis' length.
        """
        coords = np.arange(segments + 1, dtype=np.int64)
        rows = (coords * (self.height - 1)) // segments
        cols = (coords * (self.width - 1)) // segments
        return ScalarGrid(self._values[np.ix_(rows, cols)])
