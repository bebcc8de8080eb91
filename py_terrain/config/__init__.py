"""
Configuration: application settings and biome table presets.
"""

from .settings import Settings, settings
from .biome_tables import BIOME_TABLES, get_biome_table, list_biome_tables

__all__ = ['Settings', 'settings', 'BIOME_TABLES', 'get_biome_table', 'list_biome_tables']
