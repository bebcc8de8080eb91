"""
Rule-based biome classification.

A sample (temperature, humidity, height) is matched against every rule in a
BiomeRuleSet. The highest-weight match wins and ties go to the earliest rule.
When nothing matches, the first rule is returned and the result is flagged
as a fallback classification.
"""

from dataclasses import dataclass
from typing import Dict, NamedTuple

import numpy as np
import structlog

from .biomes import BiomeDefinition, BiomeRuleSet
from .grid import ScalarGrid

logger = structlog.get_logger()

FALLBACK_INDEX = 0


class Classification(NamedTuple):
    """Outcome of classifying one sample."""

    biome: BiomeDefinition
    index: int
    fallback: bool


@dataclass
class ClassifiedBiomeGrid:
    """
    Biome per grid cell, stored as indices into a shared rule set.

    Cells reference the rule set's BiomeDefinition objects; nothing is copied.
    """

    rules: BiomeRuleSet
    indices: np.ndarray  # (rows, cols) int, index into rules
    fallback_mask: np.ndarray  # (rows, cols) bool, True where no rule matched

    @property
    def shape(self):
        return self.indices.shape

    @property
    def fallback_count(self) -> int:
        return int(np.count_nonzero(self.fallback_mask))

    def biome_at(self, x: int, y: int) -> BiomeDefinition:
        """Biome at column ``x`` of row ``y``."""
        return self.rules[int(self.indices[y, x])]

    def colors(self) -> np.ndarray:
        """Per-cell RGB colours, shape (rows, cols, 3)."""
        return self.rules.colors[self.indices]

    def statistics(self) -> Dict[str, int]:
        """
        Get statistics about biome distribution.

        Returns:
            Dictionary with biome names and cell counts, in rule order
        """
        counts = np.bincount(self.indices.ravel(), minlength=len(self.rules))
        stats = {}
        for biome, count in zip(self.rules, counts):
            if count:
                stats[biome.name] = stats.get(biome.name, 0) + int(count)
        return stats


class BiomeClassifier:
    """Classifies climate samples against an ordered biome rule set."""

    def __init__(self, rules: BiomeRuleSet):
        self.rules = rules

    def resolve(self, temperature: float, humidity: float, height: float) -> Classification:
        """Classify one sample and report whether the fallback was used."""
        best_index = -1
        best_weight = -np.inf
        for i, biome in enumerate(self.rules):
            # Strict comparison keeps the earliest rule among equal weights
            if biome.matches(temperature, humidity, height) and biome.weight > best_weight:
                best_index = i
                best_weight = biome.weight

        if best_index < 0:
            return Classification(self.rules[FALLBACK_INDEX], FALLBACK_INDEX, True)
        return Classification(self.rules[best_index], best_index, False)

    def classify(self, temperature: float, humidity: float, height: float) -> BiomeDefinition:
        return self.resolve(temperature, humidity, height).biome

    def classify_grid(
        self, temperature: ScalarGrid, humidity: ScalarGrid, height: ScalarGrid
    ) -> ClassifiedBiomeGrid:
        """
        Classify every cell of three same-shaped grids.

        Args:
            temperature: Temperature samples
            humidity: Humidity samples
            height: Normalized height samples

        Returns:
            ClassifiedBiomeGrid with the same shape as the inputs
        """
        if not (temperature.shape == humidity.shape == height.shape):
            raise ValueError(
                "Grid shapes differ: "
                f"{temperature.shape}, {humidity.shape}, {height.shape}"
            )

        t, h, z = temperature.values, humidity.values, height.values
        best_index = np.full(t.shape, -1, dtype=np.int64)
        best_weight = np.full(t.shape, -np.inf, dtype=np.float64)

        for i, biome in enumerate(self.rules):
            better = biome.match_mask(t, h, z) & (biome.weight > best_weight)
            best_index[better] = i
            best_weight[better] = biome.weight

        fallback_mask = best_index < 0
        best_index[fallback_mask] = FALLBACK_INDEX

        grid = ClassifiedBiomeGrid(self.rules, best_index, fallback_mask)
        logger.info(
            "Biome classification completed",
            biomes=grid.statistics(),
            fallback_cells=grid.fallback_count,
        )
        return grid


def classify_biome(
    temperature: float, humidity: float, height: float, rules: BiomeRuleSet
) -> BiomeDefinition:
    """Classify a single sample against ``rules``."""
    return BiomeClassifier(rules).classify(temperature, humidity, height)
