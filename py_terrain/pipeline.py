"""
Entry points used by the rendering shell.

These wrap the core generators with the application's configured defaults.
"""

from typing import Optional

import structlog

from .config import get_biome_table, settings
from .core.biomes import BiomeRuleSet
from .core.classifier import classify_biome
from .core.fractal import NoiseParameters, generate_noise_map
from .core.mesh import ClimateFieldOptions, TerrainConfig, TerrainMesh, TerrainMeshBuilder
from .utils.random import draw_seed

logger = structlog.get_logger()


def load_biome_rules(name: Optional[str] = None) -> BiomeRuleSet:
    """
    Load a biome table preset and report overlapping rules.

    Intended to run once at startup. Overlaps are logged, never fatal.
    """
    name = name or settings.biome_table
    rules = get_biome_table(name)
    overlaps = rules.check_consistency()
    logger.info("Biome rules loaded", table=name, biomes=len(rules), overlaps=len(overlaps))
    return rules


def build_terrain_mesh(
    size: float,
    segments: int,
    seed: Optional[float] = None,
    scale: Optional[float] = None,
    octaves: Optional[int] = None,
    persistence: Optional[float] = None,
    lacunarity: Optional[float] = None,
    amplitude: Optional[float] = None,
    offset_x: float = 0.0,
    offset_y: float = 0.0,
    temp_modifier: Optional[float] = None,
    humid_modifier: Optional[float] = None,
    rules: Optional[BiomeRuleSet] = None,
    climate: Optional[ClimateFieldOptions] = None,
) -> TerrainMesh:
    """
    Build a displaced, biome-coloured terrain mesh.

    Noise, amplitude, modifier and climate arguments left as ``None`` take
    their values from ``settings``.

    Args:
        size: Side length of the square terrain
        segments: Cells per side; the mesh has (segments + 1)^2 vertices
        seed: Numeric seed, drawn within ``settings.seed_range`` if omitted
        scale: Height noise scale
        octaves: Height noise octaves, clamped to at least 1
        persistence: Per-octave amplitude decay
        lacunarity: Per-octave frequency growth
        amplitude: Vertical displacement for a normalized height of 1
        offset_x: Horizontal noise offset in cells
        offset_y: Vertical noise offset in cells
        temp_modifier: Added to every temperature sample before clamping
        humid_modifier: Added to every humidity sample before clamping
        rules: Biome rules, defaults to the configured preset
        climate: Temperature/humidity grid options

    Returns:
        TerrainMesh

    Raises:
        ConfigurationError: If size or segments is not positive
    """
    noise = NoiseParameters.clamped(
        settings.default_scale if scale is None else scale,
        settings.default_octaves if octaves is None else octaves,
        settings.default_persistence if persistence is None else persistence,
        settings.default_lacunarity if lacunarity is None else lacunarity,
    )
    overrides = {
        "size": size,
        "segments": segments,
        "noise": noise,
        "offset_x": offset_x,
        "offset_y": offset_y,
    }
    if amplitude is not None:
        overrides["amplitude"] = amplitude
    if temp_modifier is not None:
        overrides["temperature_modifier"] = temp_modifier
    if humid_modifier is not None:
        overrides["humidity_modifier"] = humid_modifier
    if climate is not None:
        overrides["climate"] = climate
    config = TerrainConfig.from_settings(settings, **overrides)

    if seed is None:
        seed = draw_seed(seed_range=settings.seed_range)
    rules = rules or get_biome_table(settings.biome_table)
    return TerrainMeshBuilder(config, rules).build(seed)


__all__ = ['build_terrain_mesh', 'classify_biome', 'generate_noise_map', 'load_biome_rules']
