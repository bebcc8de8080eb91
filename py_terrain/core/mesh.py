"""
Terrain mesh construction.

Combines a fractal height grid with temperature and humidity grids to
produce a displaced, biome-coloured plane mesh with vertex normals. The
plane lies in XZ centred on the origin with +Y up; vertices are stored
row-major, row index along +Z.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import numpy as np
import structlog

from .biomes import BiomeRuleSet
from .classifier import BiomeClassifier, ClassifiedBiomeGrid
from .errors import ConfigurationError
from .fractal import FractalNoiseMap, NoiseParameters
from .grid import ScalarGrid
from ..utils.random import draw_seed

logger = structlog.get_logger()


@dataclass(frozen=True)
class ClimateFieldOptions:
    """Options for the coarse temperature and humidity grids."""

    resolution: int = 256
    noise: NoiseParameters = field(
        default_factory=lambda: NoiseParameters(
            scale=0.01, octaves=4, persistence=0.5, lacunarity=2.0
        )
    )
    humidity_offset: float = 512.0  # Cells; decorrelates humidity from temperature

    def __post_init__(self):
        if self.resolution < 2:
            raise ConfigurationError(
                f"climate resolution must be at least 2, got {self.resolution}"
            )


@dataclass(frozen=True)
class TerrainConfig:
    """Configuration for terrain mesh generation."""

    size: float
    segments: int
    noise: NoiseParameters = field(
        default_factory=lambda: NoiseParameters(
            scale=0.05, octaves=8, persistence=0.4, lacunarity=2.0
        )
    )
    amplitude: float = 0.05
    offset_x: float = 0.0
    offset_y: float = 0.0
    temperature_modifier: float = 0.0
    humidity_modifier: float = 0.0
    climate: ClimateFieldOptions = field(default_factory=ClimateFieldOptions)

    def __post_init__(self):
        if isinstance(self.size, bool) or not math.isfinite(self.size) or self.size <= 0:
            raise ConfigurationError(f"size must be a positive number, got {self.size!r}")
        if isinstance(self.segments, bool) or not float(self.segments).is_integer():
            raise ConfigurationError(f"segments must be an integer, got {self.segments!r}")
        if self.segments <= 0:
            raise ConfigurationError(f"segments must be positive, got {self.segments!r}")
        object.__setattr__(self, "segments", int(self.segments))
        for name in ("amplitude", "offset_x", "offset_y",
                     "temperature_modifier", "humidity_modifier"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be finite, got {getattr(self, name)}")

    @property
    def vertices_per_side(self) -> int:
        return self.segments + 1

    @classmethod
    def from_settings(cls, settings, **overrides) -> "TerrainConfig":
        """Build a configuration from application settings defaults."""
        config = cls(
            size=settings.default_size,
            segments=settings.default_segments,
            noise=NoiseParameters(
                scale=settings.default_scale,
                octaves=settings.default_octaves,
                persistence=settings.default_persistence,
                lacunarity=settings.default_lacunarity,
            ),
            amplitude=settings.default_amplitude,
            temperature_modifier=settings.default_temperature_modifier,
            humidity_modifier=settings.default_humidity_modifier,
            climate=ClimateFieldOptions(
                resolution=settings.climate_resolution,
                noise=NoiseParameters(
                    scale=settings.climate_scale, octaves=settings.climate_octaves
                ),
            ),
        )
        return replace(config, **overrides) if overrides else config


@dataclass
class TerrainMesh:
    """Renderable terrain: row-major vertex attributes plus triangle indices."""

    positions: np.ndarray  # (n_vertices, 3) float32
    normals: np.ndarray  # (n_vertices, 3) float32
    colors: np.ndarray  # (n_vertices, 3) float32 RGB
    uvs: np.ndarray  # (n_vertices, 2) float32
    indices: np.ndarray  # (n_triangles, 3) uint32
    heights: ScalarGrid  # normalized heights before amplitude scaling
    biomes: ClassifiedBiomeGrid
    seed: float
    size: float
    segments: int

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def position_buffer(self) -> np.ndarray:
        return self.positions.ravel()

    @property
    def normal_buffer(self) -> np.ndarray:
        return self.normals.ravel()

    @property
    def color_buffer(self) -> np.ndarray:
        """Flat RGB buffer, three floats per vertex."""
        return self.colors.ravel()

    @property
    def index_buffer(self) -> np.ndarray:
        return self.indices.ravel()


def plane_grid(size: float, segments: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Build a flat square plane in XZ.

    Args:
        size: Side length
        segments: Cells per side

    Returns:
        Tuple of (positions, uvs, indices)
    """
    n = segments + 1
    step = size / segments
    half = size / 2

    rows, cols = np.divmod(np.arange(n * n, dtype=np.int64), n)
    positions = np.zeros((n * n, 3), dtype=np.float32)
    positions[:, 0] = cols * step - half
    positions[:, 2] = rows * step - half

    uvs = np.empty((n * n, 2), dtype=np.float32)
    uvs[:, 0] = cols / segments
    uvs[:, 1] = 1 - rows / segments

    cell_rows, cell_cols = np.divmod(np.arange(segments * segments, dtype=np.int64), segments)
    a = cell_cols + n * cell_rows
    b = cell_cols + n * (cell_rows + 1)
    c = (cell_cols + 1) + n * (cell_rows + 1)
    d = (cell_cols + 1) + n * cell_rows
    indices = np.empty((segments * segments * 2, 3), dtype=np.uint32)
    indices[0::2] = np.stack([a, b, d], axis=1)
    indices[1::2] = np.stack([b, c, d], axis=1)

    return positions, uvs, indices


def compute_vertex_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """
    Average face normals onto vertices.

    Face normals are left unnormalized before summing, so larger faces weigh
    more. Vertices with no usable faces get a zero normal.
    """
    tri = indices.astype(np.int64)
    p0 = positions[tri[:, 0]].astype(np.float64)
    p1 = positions[tri[:, 1]].astype(np.float64)
    p2 = positions[tri[:, 2]].astype(np.float64)
    face_normals = np.cross(p1 - p0, p2 - p0)

    normals = np.zeros((len(positions), 3), dtype=np.float64)
    for corner in range(3):
        np.add.at(normals, tri[:, corner], face_normals)

    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    np.divide(normals, lengths, out=normals, where=lengths > 0)
    return normals.astype(np.float32)


class TerrainMeshBuilder:
    """
    Builds biome-coloured terrain meshes.

    The rule set is fixed per builder; each ``build`` call is independent
    and keeps no state between calls.
    """

    def __init__(self, config: TerrainConfig, rules: BiomeRuleSet):
        """
        Initialize the builder.

        Args:
            config: Terrain configuration
            rules: Ordered biome rule set
        """
        self.config = config
        self.rules = rules
        self.classifier = BiomeClassifier(rules)

    def generate_climate(self, noise_map: FractalNoiseMap) -> Tuple[ScalarGrid, ScalarGrid]:
        """
        Generate temperature and humidity grids, shifted by the modifiers.

        Returns:
            Tuple of (temperature, humidity) grids, values clamped to [0, 1]
        """
        config = self.config
        climate = config.climate
        temperature = noise_map.generate(
            climate.resolution,
            climate.resolution,
            climate.noise,
            config.offset_x,
            config.offset_y,
        ).shifted(config.temperature_modifier)
        humidity = noise_map.generate(
            climate.resolution,
            climate.resolution,
            climate.noise,
            config.offset_x + climate.humidity_offset,
            config.offset_y + climate.humidity_offset,
        ).shifted(config.humidity_modifier)

        logger.info(
            "Climate fields generated",
            average_temperature=round(temperature.mean(), 3),
            average_humidity=round(humidity.mean(), 3),
        )
        return temperature, humidity

    def build(self, seed: Optional[float] = None) -> TerrainMesh:
        """
        Generate a terrain mesh.

        Args:
            seed: Numeric seed; drawn from the process-wide source if omitted

        Returns:
            TerrainMesh with (segments + 1)^2 vertices
        """
        if seed is None:
            seed = draw_seed()

        config = self.config
        n = config.vertices_per_side
        noise_map = FractalNoiseMap(seed)

        heights = noise_map.generate(n, n, config.noise, config.offset_x, config.offset_y)
        temperature, humidity = self.generate_climate(noise_map)

        biomes = self.classifier.classify_grid(
            temperature.resample(config.segments),
            humidity.resample(config.segments),
            heights,
        )

        positions, uvs, indices = plane_grid(config.size, config.segments)
        positions[:, 1] = heights.flatten() * config.amplitude
        normals = compute_vertex_normals(positions, indices)
        colors = biomes.colors().reshape(-1, 3).astype(np.float32)

        mesh = TerrainMesh(
            positions=positions,
            normals=normals,
            colors=colors,
            uvs=uvs,
            indices=indices,
            heights=heights,
            biomes=biomes,
            seed=seed,
            size=config.size,
            segments=config.segments,
        )
        logger.info(
            "Terrain mesh built",
            seed=seed,
            vertices=mesh.vertex_count,
            triangles=mesh.triangle_count,
        )
        return mesh
