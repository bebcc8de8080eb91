"""
Biome definitions and ordered rule sets.

A biome is a named rule: inclusive temperature and humidity ranges, an
optional height range, a display colour and a priority weight. Rule sets are
ordered; the first rule doubles as the fallback when nothing matches.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import structlog

from .errors import ConfigurationError

logger = structlog.get_logger()

Range = Tuple[float, float]
RGB = Tuple[float, float, float]
ColorLike = Union[str, int, Sequence[float]]


def parse_color(color: ColorLike) -> RGB:
    """
    Convert a colour to an RGB float triple in [0, 1].

    Accepts ``"#RRGGBB"`` / ``"RRGGBB"`` strings, ``0xRRGGBB`` integers and
    float triples.
    """
    if isinstance(color, str):
        text = color.lstrip("#")
        if len(text) != 6:
            raise ConfigurationError(f"Invalid hex colour: {color!r}")
        try:
            value = int(text, 16)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid hex colour: {color!r}") from exc
        return parse_color(value)

    if isinstance(color, (int, np.integer)) and not isinstance(color, bool):
        if not 0 <= color <= 0xFFFFFF:
            raise ConfigurationError(f"Colour out of range: {color:#x}")
        return (
            ((color >> 16) & 0xFF) / 255.0,
            ((color >> 8) & 0xFF) / 255.0,
            (color & 0xFF) / 255.0,
        )

    components = tuple(float(c) for c in color)
    if len(components) != 3 or not all(0.0 <= c <= 1.0 for c in components):
        raise ConfigurationError(f"RGB colour must be three floats in [0, 1]: {color!r}")
    return components


def _parse_range(name: str, value: Sequence[float]) -> Range:
    bounds = tuple(float(v) for v in value)
    if len(bounds) != 2:
        raise ConfigurationError(f"{name} must be a [low, high] pair, got {value!r}")
    low, high = bounds
    if not (math.isfinite(low) and math.isfinite(high)):
        raise ConfigurationError(f"{name} bounds must be finite, got {value!r}")
    if low > high:
        raise ConfigurationError(f"{name} low bound exceeds high bound: {value!r}")
    return low, high


def ranges_overlap(first: Range, second: Range) -> bool:
    """Inclusive interval overlap: either range contains an endpoint of the other."""
    return (
        first[0] <= second[0] <= first[1]
        or first[0] <= second[1] <= first[1]
        or second[0] <= first[0] <= second[1]
        or second[0] <= first[1] <= second[1]
    )


@dataclass(frozen=True)
class BiomeDefinition:
    """A single biome rule. Colours are normalized to RGB floats."""

    name: str
    temperature_range: Range
    humidity_range: Range
    color: RGB
    weight: float = 1.0
    height_range: Optional[Range] = None

    def __post_init__(self):
        object.__setattr__(
            self, "temperature_range", _parse_range("temperature_range", self.temperature_range)
        )
        object.__setattr__(
            self, "humidity_range", _parse_range("humidity_range", self.humidity_range)
        )
        if self.height_range is not None:
            object.__setattr__(
                self, "height_range", _parse_range("height_range", self.height_range)
            )
        object.__setattr__(self, "color", parse_color(self.color))
        object.__setattr__(self, "weight", float(self.weight))

    @property
    def hex_color(self) -> str:
        return "#" + "".join(f"{round(c * 255):02x}" for c in self.color)

    def matches(self, temperature: float, humidity: float, height: float) -> bool:
        """Inclusive containment test; a height range, if set, must also hold."""
        t_low, t_high = self.temperature_range
        h_low, h_high = self.humidity_range
        if not (t_low <= temperature <= t_high and h_low <= humidity <= h_high):
            return False
        if self.height_range is not None:
            return self.height_range[0] <= height <= self.height_range[1]
        return True

    def match_mask(
        self, temperature: np.ndarray, humidity: np.ndarray, height: np.ndarray
    ) -> np.ndarray:
        """Vectorized ``matches`` over same-shaped arrays."""
        t_low, t_high = self.temperature_range
        h_low, h_high = self.humidity_range
        mask = (
            (temperature >= t_low)
            & (temperature <= t_high)
            & (humidity >= h_low)
            & (humidity <= h_high)
        )
        if self.height_range is not None:
            mask &= (height >= self.height_range[0]) & (height <= self.height_range[1])
        return mask


class BiomeOverlap(NamedTuple):
    """Two biomes whose temperature and humidity ranges both overlap."""

    first: BiomeDefinition
    second: BiomeDefinition

    @property
    def names(self) -> Tuple[str, str]:
        return self.first.name, self.second.name


@dataclass(frozen=True)
class BiomeRuleSet:
    """Immutable ordered sequence of biome definitions."""

    biomes: Tuple[BiomeDefinition, ...]

    def __post_init__(self):
        biomes = tuple(self.biomes)
        if not biomes:
            raise ConfigurationError("A biome rule set needs at least one biome")
        object.__setattr__(self, "biomes", biomes)

    @classmethod
    def from_dicts(cls, entries: Iterable[dict]) -> "BiomeRuleSet":
        """Build a rule set from plain mappings with BiomeDefinition field names."""
        return cls(tuple(BiomeDefinition(**entry) for entry in entries))

    def __iter__(self) -> Iterator[BiomeDefinition]:
        return iter(self.biomes)

    def __len__(self) -> int:
        return len(self.biomes)

    def __getitem__(self, index: int) -> BiomeDefinition:
        return self.biomes[index]

    @property
    def default(self) -> BiomeDefinition:
        """Fallback biome used when no rule matches."""
        return self.biomes[0]

    @property
    def names(self) -> List[str]:
        return [biome.name for biome in self.biomes]

    @property
    def weights(self) -> np.ndarray:
        return np.array([biome.weight for biome in self.biomes], dtype=np.float64)

    @property
    def colors(self) -> np.ndarray:
        """(n_biomes, 3) float32 colour table in rule order."""
        return np.array([biome.color for biome in self.biomes], dtype=np.float32)

    def index_of(self, biome: BiomeDefinition) -> int:
        for i, candidate in enumerate(self.biomes):
            if candidate is biome:
                return i
        raise ValueError(f"{biome.name!r} is not part of this rule set")

    def check_consistency(self) -> List[BiomeOverlap]:
        """
        Report every pair of biomes whose temperature AND humidity ranges overlap.

        Height ranges are not considered, so biomes separated only by height
        are still reported. Diagnostic only; generation is never blocked.

        Returns:
            Overlapping pairs in rule order
        """
        overlaps = []
        for i, first in enumerate(self.biomes):
            for second in self.biomes[i + 1:]:
                if ranges_overlap(
                    first.temperature_range, second.temperature_range
                ) and ranges_overlap(first.humidity_range, second.humidity_range):
                    overlaps.append(BiomeOverlap(first, second))
                    logger.warning(
                        "Biome overlap detected",
                        first=first.name,
                        second=second.name,
                    )
        return overlaps
