"""
Core terrain generation functionality.
"""

from .errors import ConfigurationError
from .sine_prng import SinePRNG
from .permutation import PermutationTable, build_permutation_table
from .noise import ValueNoiseField
from .grid import ScalarGrid
from .fractal import FractalNoiseMap, NoiseParameters, generate_noise_map
from .biomes import BiomeDefinition, BiomeOverlap, BiomeRuleSet
from .classifier import BiomeClassifier, Classification, ClassifiedBiomeGrid, classify_biome
from .mesh import ClimateFieldOptions, TerrainConfig, TerrainMesh, TerrainMeshBuilder

__all__ = ['ConfigurationError', 'SinePRNG', 'PermutationTable', 'build_permutation_table',
           'ValueNoiseField', 'ScalarGrid', 'FractalNoiseMap', 'NoiseParameters',
           'generate_noise_map', 'BiomeDefinition', 'BiomeOverlap', 'BiomeRuleSet',
           'BiomeClassifier', 'Classification', 'ClassifiedBiomeGrid', 'classify_biome',
           'ClimateFieldOptions', 'TerrainConfig', 'TerrainMesh', 'TerrainMeshBuilder']
