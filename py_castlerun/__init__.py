"""
Deterministic tile-map generation: carving, biome labeling and spawn point placement.
"""

__version__ = "0.1.0"
