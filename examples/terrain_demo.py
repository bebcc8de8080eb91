#!/usr/bin/env python3
"""
Simple demo script showing terrain mesh generation.
"""

import numpy as np
from py_terrain import build_terrain_mesh, load_biome_rules
from py_terrain.config import list_biome_tables
from py_terrain.utils import configure_logging


def main():
    """Demonstrate terrain generation for each biome table."""
    configure_logging("WARNING", "plain")
    print("Py-Terrain Mesh Generation Demo")
    print("=" * 40)

    size, segments, seed = 100.0, 128, 4242.0

    for table_name in list_biome_tables():
        print(f"\n{table_name.upper()} biome table:")
        print("-" * 30)

        rules = load_biome_rules(table_name)
        mesh = build_terrain_mesh(
            size, segments, seed,
            scale=0.01, octaves=8, persistence=0.4, lacunarity=2.0,
            amplitude=10.0, temp_modifier=0.5, humid_modifier=-0.3,
            rules=rules,
        )

        elevations = mesh.positions[:, 1]
        print(f"  Vertices: {mesh.vertex_count}")
        print(f"  Triangles: {mesh.triangle_count}")
        print(f"  Elevation range: {elevations.min():.2f}-{elevations.max():.2f}")
        print(f"  Average elevation: {np.mean(elevations):.2f}")
        print(f"  Fallback cells: {mesh.biomes.fallback_count}")

        total = mesh.vertex_count
        for name, count in sorted(mesh.biomes.statistics().items(), key=lambda kv: -kv[1]):
            print(f"    {name:<20} {count:>6} ({count / total * 100:.1f}%)")


if __name__ == "__main__":
    main()
