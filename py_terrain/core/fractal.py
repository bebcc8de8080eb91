"""
Multi-octave fractal accumulation of gradient noise into a scalar grid.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog

from .errors import ConfigurationError
from .grid import ScalarGrid
from .noise import ValueNoiseField
from .permutation import PermutationTable, build_permutation_table

logger = structlog.get_logger()


@dataclass(frozen=True)
class NoiseParameters:
    """Fractal noise parameters."""

    scale: float = 0.1
    octaves: int = 4
    persistence: float = 0.5  # Amplitude decay per octave
    lacunarity: float = 2.0  # Frequency growth per octave

    def __post_init__(self):
        if isinstance(self.octaves, bool) or not _is_integral(self.octaves):
            raise ConfigurationError(f"octaves must be an integer, got {self.octaves!r}")
        object.__setattr__(self, "octaves", int(self.octaves))
        if self.octaves < 1:
            raise ConfigurationError(f"octaves must be >= 1, got {self.octaves}")
        for name in ("scale", "persistence", "lacunarity"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ConfigurationError(f"{name} must be finite, got {value}")

    @classmethod
    def clamped(
        cls,
        scale: float = 0.1,
        octaves: int = 4,
        persistence: float = 0.5,
        lacunarity: float = 2.0,
    ) -> "NoiseParameters":
        """Build parameters with ``octaves`` floored and clamped to at least 1."""
        if not math.isfinite(octaves):
            raise ConfigurationError(f"octaves must be finite, got {octaves}")
        return cls(
            scale=float(scale),
            octaves=max(1, math.floor(octaves)),
            persistence=float(persistence),
            lacunarity=float(lacunarity),
        )


class FractalNoiseMap:
    """Generates normalized fractal noise grids for one seed."""

    def __init__(self, seed: float, table: Optional[PermutationTable] = None):
        """
        Initialize the generator.

        Args:
            seed: Numeric seed
            table: Pre-built permutation table for ``seed``, built if omitted
        """
        self.seed = seed
        self.table = table or build_permutation_table(seed)
        self.field = ValueNoiseField(self.table)

    def generate(
        self,
        width: int,
        height: int,
        params: Optional[NoiseParameters] = None,
        offset_x: float = 0.0,
        offset_y: float = 0.0,
    ) -> ScalarGrid:
        """
        Generate a ``height`` x ``width`` grid of fractal noise in [0, 1].

        Each cell sums ``amplitude * noise((x + offset_x) * scale * frequency,
        (y + offset_y) * scale * frequency)`` over the octaves, then maps the
        sum from [-1, 1] to [0, 1] with ``(sum + 1) / 2``. Sums that stray past
        the nominal range are clamped.

        Args:
            width: Number of columns
            height: Number of rows
            params: Noise parameters
            offset_x: Horizontal sample offset in cells
            offset_y: Vertical sample offset in cells

        Returns:
            ScalarGrid of shape (height, width)
        """
        params = params or NoiseParameters()
        width = _grid_dimension("width", width)
        height = _grid_dimension("height", height)
        if not (math.isfinite(offset_x) and math.isfinite(offset_y)):
            raise ConfigurationError(
                f"offsets must be finite, got ({offset_x}, {offset_y})"
            )

        ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
        xs += offset_x
        ys += offset_y

        total = np.zeros((height, width), dtype=np.float64)
        amplitude = 1.0
        frequency = 1.0
        for octave in range(params.octaves):
            sample_x = xs * params.scale * frequency
            sample_y = ys * params.scale * frequency
            if not (
                math.isfinite(amplitude)
                and np.isfinite(sample_x).all()
                and np.isfinite(sample_y).all()
            ):
                logger.warning(
                    "Noise octaves overflowed, stopping early",
                    octave=octave,
                    octaves=params.octaves,
                )
                break
            total += self.field.sample_array(sample_x, sample_y) * amplitude
            amplitude *= params.persistence
            frequency *= params.lacunarity

        values = np.nan_to_num((total + 1) / 2, nan=0.5, posinf=1.0, neginf=0.0)
        values = np.clip(values, 0.0, 1.0)

        logger.debug(
            "Noise map generated",
            width=width,
            height=height,
            seed=self.seed,
            octaves=params.octaves,
            scale=params.scale,
        )
        return ScalarGrid(values)


def _is_integral(value) -> bool:
    try:
        return float(value).is_integer()
    except (TypeError, ValueError):
        return False


def _grid_dimension(name: str, value) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value}")
    value = int(value)
    if value < 0:
        raise ConfigurationError(f"{name} must be non-negative, got {value}")
    return value


def generate_noise_map(
    width: int,
    height: int,
    seed: float,
    scale: float = 0.1,
    octaves: int = 4,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
) -> ScalarGrid:
    """
    Generate a normalized fractal noise grid.

    ``octaves`` below 1 is clamped to 1. A ``scale`` of 0 samples every cell
    at the origin and gives a constant grid.
    """
    params = NoiseParameters.clamped(scale, octaves, persistence, lacunarity)
    return FractalNoiseMap(seed).generate(width, height, params, offset_x, offset_y)
