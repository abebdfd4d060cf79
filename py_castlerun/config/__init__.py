"""
Configuration for map generation: ambient settings and algorithm constraints.
"""

from .config import Settings, settings
from .constants import BIOME_CONSTRAINTS, GRID_CONSTRAINTS, SECTION_CONSTRAINTS

__all__ = [
    "Settings",
    "settings",
    "GRID_CONSTRAINTS",
    "SECTION_CONSTRAINTS",
    "BIOME_CONSTRAINTS",
]
