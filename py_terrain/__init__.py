"""
py-terrain: procedural heightfield terrain with biome colouring.
"""

__version__ = "0.1.0"

from .core import (
    BiomeDefinition,
    BiomeRuleSet,
    ConfigurationError,
    ScalarGrid,
    TerrainMesh,
)
from .pipeline import build_terrain_mesh, classify_biome, generate_noise_map, load_biome_rules

__all__ = ['BiomeDefinition', 'BiomeRuleSet', 'ConfigurationError', 'ScalarGrid',
           'TerrainMesh', 'build_terrain_mesh', 'classify_biome', 'generate_noise_map',
           'load_biome_rules']
