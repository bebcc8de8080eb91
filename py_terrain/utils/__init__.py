"""
Utility helpers: seed draws and logging setup.
"""

from .logging_config import configure_logging
from .random import draw_seed

__all__ = ['configure_logging', 'draw_seed']
