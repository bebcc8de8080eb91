"""Tests for terrain mesh construction."""

import numpy as np
import pytest

from py_terrain import build_terrain_mesh
from py_terrain.config import Settings, get_biome_table, settings
from py_terrain.core import mesh as mesh_module
from py_terrain.core.errors import ConfigurationError
from py_terrain.core.fractal import FractalNoiseMap, NoiseParameters
from py_terrain.core.mesh import (
    ClimateFieldOptions,
    TerrainConfig,
    TerrainMeshBuilder,
    compute_vertex_normals,
    plane_grid,
)

SMALL_CLIMATE = ClimateFieldOptions(resolution=32)


@pytest.fixture
def rules():
    return get_biome_table("default")


@pytest.fixture
def small_mesh(rules):
    """A 4x4-cell mesh for seed 42."""
    return build_terrain_mesh(size=100, segments=4, seed=42, rules=rules)


class TestTerrainConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize("size", [0, -1, -100.5, float("inf"), float("nan")])
    def test_bad_size(self, size):
        with pytest.raises(ConfigurationError):
            TerrainConfig(size=size, segments=4)

    @pytest.mark.parametrize("segments", [0, -1, 2.5])
    def test_bad_segments(self, segments):
        with pytest.raises(ConfigurationError):
            TerrainConfig(size=10, segments=segments)

    def test_integral_float_segments_accepted(self):
        assert TerrainConfig(size=10, segments=8.0).segments == 8

    def test_from_settings(self):
        settings = Settings(default_segments=16, default_octaves=3, climate_resolution=64)
        config = TerrainConfig.from_settings(settings)

        assert config.segments == 16
        assert config.size == settings.default_size
        assert config.noise.octaves == 3
        assert config.amplitude == settings.default_amplitude
        assert config.temperature_modifier == 0.5
        assert config.humidity_modifier == -0.3
        assert config.climate.resolution == 64

    def test_from_settings_overrides(self):
        config = TerrainConfig.from_settings(Settings(), segments=8, amplitude=2.0)

        assert config.segments == 8
        assert config.amplitude == 2.0

    def test_from_settings_override_validated(self):
        with pytest.raises(ConfigurationError):
            TerrainConfig.from_settings(Settings(), segments=-2)


class TestPlaneGrid:
    """Test plane geometry and normals."""

    def test_layout(self):
        positions, uvs, indices = plane_grid(10.0, 2)

        assert positions.shape == (9, 3)
        np.testing.assert_allclose(positions[0], [-5.0, 0.0, -5.0])
        np.testing.assert_allclose(positions[2], [5.0, 0.0, -5.0])
        np.testing.assert_allclose(positions[3], [-5.0, 0.0, 0.0])
        np.testing.assert_allclose(positions[8], [5.0, 0.0, 5.0])
        np.testing.assert_allclose(uvs[0], [0.0, 1.0])
        np.testing.assert_allclose(uvs[8], [1.0, 0.0])
        assert indices.shape == (8, 3)
        assert indices[0].tolist() == [0, 3, 1]
        assert indices[1].tolist() == [3, 4, 1]

    def test_flat_normals_point_up(self):
        positions, _, indices = plane_grid(10.0, 3)
        normals = compute_vertex_normals(positions, indices)

        np.testing.assert_allclose(normals, np.tile([0.0, 1.0, 0.0], (16, 1)), atol=1e-6)

    def test_sloped_normals(self):
        """A plane rising along +X tilts its normals towards -X."""
        positions, _, indices = plane_grid(4.0, 4)
        positions[:, 1] = positions[:, 0]
        normals = compute_vertex_normals(positions, indices)

        expected = np.array([-1.0, 1.0, 0.0]) / np.sqrt(2.0)
        np.testing.assert_allclose(normals, np.tile(expected, (25, 1)), atol=1e-6)

    def test_normals_unit_length(self):
        positions, _, indices = plane_grid(4.0, 6)
        positions[:, 1] = np.random.default_rng(3).random(len(positions))
        normals = compute_vertex_normals(positions, indices)

        np.testing.assert_allclose(np.linalg.norm(normals, axis=1), 1.0, atol=1e-5)
        assert np.all(normals[:, 1] > 0)


class TestBuildTerrainMesh:
    """Test the terrain mesh entry point."""

    def test_shape(self, small_mesh):
        """4 segments give 25 vertices and a 75-float colour buffer."""
        assert small_mesh.vertex_count == 25
        assert len(small_mesh.color_buffer) == 75
        assert len(small_mesh.normal_buffer) == 75
        assert len(small_mesh.position_buffer) == 75
        assert small_mesh.triangle_count == 32
        assert small_mesh.uvs.shape == (25, 2)
        assert small_mesh.indices.max() < 25
        assert small_mesh.heights.shape == (5, 5)
        assert small_mesh.biomes.shape == (5, 5)

    def test_deterministic(self, rules):
        first = build_terrain_mesh(50, 8, seed=1234.5, rules=rules, climate=SMALL_CLIMATE)
        second = build_terrain_mesh(50, 8, seed=1234.5, rules=rules, climate=SMALL_CLIMATE)

        np.testing.assert_array_equal(first.positions, second.positions)
        np.testing.assert_array_equal(first.normals, second.normals)
        np.testing.assert_array_equal(first.colors, second.colors)

    def test_displacement(self, rules):
        mesh = build_terrain_mesh(100, 6, seed=9, amplitude=10.0, rules=rules)

        expected = (mesh.heights.flatten() * 10.0).astype(np.float32)
        np.testing.assert_allclose(mesh.positions[:, 1], expected, rtol=1e-6)
        assert mesh.positions[:, 0].min() == pytest.approx(-50.0)
        assert mesh.positions[:, 0].max() == pytest.approx(50.0)
        assert mesh.positions[:, 2].min() == pytest.approx(-50.0)
        assert mesh.positions[:, 2].max() == pytest.approx(50.0)

    def test_normals_follow_displacement(self, rules):
        mesh = build_terrain_mesh(20, 6, seed=9, amplitude=5.0, rules=rules)

        np.testing.assert_array_equal(
            mesh.normals, compute_vertex_normals(mesh.positions, mesh.indices)
        )

    def test_zero_amplitude_is_flat(self, rules):
        mesh = build_terrain_mesh(20, 4, seed=9, amplitude=0.0, rules=rules)

        assert np.all(mesh.positions[:, 1] == 0.0)
        np.testing.assert_allclose(mesh.normals[:, 1], 1.0, atol=1e-6)

    def test_colors_match_biomes(self, small_mesh, rules):
        biomes = small_mesh.biomes
        for row in range(5):
            for col in range(5):
                vertex = row * 5 + col
                expected = np.float32(biomes.biome_at(col, row).color)
                np.testing.assert_array_equal(small_mesh.colors[vertex], expected)

    def test_biomes_reference_rule_set(self, small_mesh, rules):
        assert small_mesh.biomes.rules is rules

    def test_heights_normalized(self, small_mesh):
        assert np.all(small_mesh.heights.values >= 0.0)
        assert np.all(small_mesh.heights.values <= 1.0)

    def test_octaves_clamped(self, rules):
        mesh = build_terrain_mesh(10, 2, seed=3, octaves=0, rules=rules, climate=SMALL_CLIMATE)
        assert mesh.vertex_count == 9

    @pytest.mark.parametrize("size,segments", [(-100, 4), (0, 4), (100, -4), (100, 0)])
    def test_configuration_errors(self, rules, size, segments):
        with pytest.raises(ConfigurationError):
            build_terrain_mesh(size=size, segments=segments, seed=42, rules=rules)

    def test_default_rules_used(self):
        mesh = build_terrain_mesh(10, 2, seed=5, climate=SMALL_CLIMATE)
        assert mesh.biomes.rules.names[0] == "Grassland"

    def test_settings_fill_omitted_arguments(self, rules, monkeypatch):
        """Omitted noise, amplitude and climate arguments come from settings."""
        monkeypatch.setattr(settings, "default_amplitude", 123.0)
        monkeypatch.setattr(settings, "climate_resolution", 16)
        monkeypatch.setattr(settings, "default_temperature_modifier", 10.0)
        monkeypatch.setattr(settings, "default_humidity_modifier", -10.0)
        shapes = []
        generate_climate = mesh_module.TerrainMeshBuilder.generate_climate

        def recording_climate(builder, noise_map):
            fields = generate_climate(builder, noise_map)
            shapes.extend(field.shape for field in fields)
            return fields

        monkeypatch.setattr(mesh_module.TerrainMeshBuilder, "generate_climate", recording_climate)

        mesh = build_terrain_mesh(10, 2, seed=5, scale=0.3, rules=rules)

        expected = (mesh.heights.flatten() * 123.0).astype(np.float32)
        np.testing.assert_allclose(mesh.positions[:, 1], expected, rtol=1e-6)
        assert shapes == [(16, 16), (16, 16)]
        assert set(mesh.biomes.statistics()) <= {"Desert", "Ocean"}

    def test_explicit_arguments_override_settings(self, rules, monkeypatch):
        monkeypatch.setattr(settings, "default_amplitude", 123.0)
        monkeypatch.setattr(settings, "default_scale", 0.0)

        mesh = build_terrain_mesh(10, 2, seed=5, amplitude=2.0, scale=0.3, rules=rules)
        flat = build_terrain_mesh(10, 2, seed=5, amplitude=2.0, rules=rules)

        np.testing.assert_allclose(mesh.positions[:, 1], mesh.heights.flatten() * 2.0, rtol=1e-6)
        assert np.all(flat.heights.values == 0.5)
        assert not np.all(mesh.heights.values == 0.5)

    def test_extreme_modifiers_pick_hot_dry_biomes(self, rules):
        """Saturated temperature and zero humidity leave only Desert or Ocean."""
        mesh = build_terrain_mesh(
            20, 8, seed=77, temp_modifier=10, humid_modifier=-10, rules=rules
        )

        assert set(mesh.biomes.statistics()) <= {"Desert", "Ocean"}


class TestTerrainMeshBuilder:
    """Test the builder directly."""

    def test_temperature_modifier_clamps(self, rules):
        """A modifier of 10 saturates every temperature sample at exactly 1.0."""
        config = TerrainConfig(size=10, segments=4, temperature_modifier=10, climate=SMALL_CLIMATE)
        temperature, humidity = TerrainMeshBuilder(config, rules).generate_climate(
            FractalNoiseMap(42)
        )

        assert np.all(temperature.values == 1.0)
        assert np.all((humidity.values >= 0.0) & (humidity.values <= 1.0))

    def test_humidity_modifier_clamps(self, rules):
        config = TerrainConfig(size=10, segments=4, humidity_modifier=-10, climate=SMALL_CLIMATE)
        _, humidity = TerrainMeshBuilder(config, rules).generate_climate(FractalNoiseMap(42))

        assert np.all(humidity.values == 0.0)

    def test_climate_resolution(self, rules):
        config = TerrainConfig(size=10, segments=4)
        temperature, humidity = TerrainMeshBuilder(config, rules).generate_climate(
            FractalNoiseMap(1)
        )

        assert temperature.shape == (256, 256)
        assert humidity.shape == (256, 256)

    def test_humidity_decorrelated(self, rules):
        config = TerrainConfig(size=10, segments=4, climate=SMALL_CLIMATE)
        temperature, humidity = TerrainMeshBuilder(config, rules).generate_climate(
            FractalNoiseMap(42)
        )

        assert temperature != humidity

    def test_zero_humidity_offset_matches_temperature(self, rules):
        climate = ClimateFieldOptions(resolution=32, humidity_offset=0.0)
        config = TerrainConfig(size=10, segments=4, climate=climate)
        temperature, humidity = TerrainMeshBuilder(config, rules).generate_climate(
            FractalNoiseMap(42)
        )

        assert temperature == humidity

    def test_bad_climate_resolution(self):
        with pytest.raises(ConfigurationError):
            ClimateFieldOptions(resolution=1)

    def test_seed_drawn_when_omitted(self, rules, monkeypatch):
        monkeypatch.setattr(mesh_module, "draw_seed", lambda: 7.0)
        config = TerrainConfig(size=10, segments=2, climate=SMALL_CLIMATE)

        mesh = TerrainMeshBuilder(config, rules).build()

        assert mesh.seed == 7.0
        np.testing.assert_array_equal(
            mesh.positions, TerrainMeshBuilder(config, rules).build(seed=7.0).positions
        )

    def test_builder_reusable(self, rules):
        config = TerrainConfig(
            size=10, segments=4, noise=NoiseParameters(scale=0.2), climate=SMALL_CLIMATE
        )
        builder = TerrainMeshBuilder(config, rules)

        first = builder.build(seed=3)
        builder.build(seed=4)
        again = builder.build(seed=3)

        np.testing.assert_array_equal(first.colors, again.colors)
