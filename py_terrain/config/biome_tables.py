"""
Biome table presets.

Each preset is an ordered list of biome rules. Order matters: the first
rule is the fallback for samples that no rule covers. Ranges are in
normalized [0, 1] units for temperature, humidity and height.
"""

from typing import Dict, List

from ..core.biomes import BiomeRuleSet

BIOME_TABLES: Dict[str, List[dict]] = {
    "default": [
        {
            "name": "Grassland",
            "temperature_range": (0.25, 0.5),
            "humidity_range": (0.45, 0.6),
            "color": "#7CFC00",
            "weight": 2.0,
        },
        {
            "name": "Tundra",
            "temperature_range": (0.0, 0.25),
            "humidity_range": (0.45, 1.0),
            "color": "#D9FBFF",
            "weight": 1.0,
        },
        {
            "name": "Forest",
            "temperature_range": (0.25, 0.6),
            "humidity_range": (0.6, 1.0),
            "color": "#376137",
            "weight": 1.0,
        },
        {
            "name": "Savanna",
            "temperature_range": (0.5, 0.75),
            "humidity_range": (0.0, 0.5),
            "color": "#D7A100",
            "weight": 1.0,
        },
        {
            "name": "Desert",
            "temperature_range": (0.6, 1.0),
            "humidity_range": (0.0, 0.3),
            "color": "#EDC9AF",
            "weight": 1.0,
        },
        {
            "name": "Tropical Rainforest",
            "temperature_range": (0.75, 1.0),
            "humidity_range": (0.5, 1.0),
            "color": "#00853E",
            "weight": 1.0,
        },
        {
            "name": "Beach",
            "temperature_range": (0.5, 1.0),
            "humidity_range": (0.3, 0.7),
            "height_range": (0.0, 0.3),
            "color": "#FFF5BA",
            "weight": 10.0,
        },
        {
            "name": "Ocean",
            "temperature_range": (0.0, 1.0),
            "humidity_range": (0.0, 1.0),
            "height_range": (0.0, 0.15),
            "color": "#1E90FF",
            "weight": 100.0,
        },
    ],
}

# Default table plus height-gated mountain biomes
BIOME_TABLES["highlands"] = BIOME_TABLES["default"] + [
    {
        "name": "Alpine",
        "temperature_range": (0.0, 1.0),
        "humidity_range": (0.0, 1.0),
        "height_range": (0.75, 1.0),
        "color": "#A0A0A0",
        "weight": 50.0,
    },
    {
        "name": "Glacier",
        "temperature_range": (0.0, 0.3),
        "humidity_range": (0.0, 1.0),
        "height_range": (0.7, 1.0),
        "color": "#D5E7EB",
        "weight": 60.0,
    },
]


def list_biome_tables() -> List[str]:
    """Names of all available presets."""
    return sorted(BIOME_TABLES)


def get_biome_table(name: str) -> BiomeRuleSet:
    """
    Build the rule set for a named preset.

    Raises:
        KeyError: If no preset has that name
    """
    if name not in BIOME_TABLES:
        raise KeyError(
            f"Unknown biome table {name!r}; available: {', '.join(list_biome_tables())}"
        )
    return BiomeRuleSet.from_dicts(BIOME_TABLES[name])
