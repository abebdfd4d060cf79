"""
Core map generation functionality.
"""

from .models import Grid, Tile, TileType, Position, BiomeType, InteractableType, ExpansionMode
from .seeded_random import SeededRandom, create_rng
from .errors import MapGenerationError, ConfigurationError, ResourceExhaustionError, NoValidMovesError
from .mining import MiningConfig, MiningResult, run_mining_algorithm
from .biomes import BiomeDefinition, BiomeConfig, BiomeAssignmentResult, assign_biomes
from .connectivity import analyze_connectivity
from .spawn_points import SpawnPointConfig, SpawnPointResult, place_spawn_points
from .pipeline import MapGenerationResult, generate_map, default_mining_config

__all__ = ['Grid', 'Tile', 'TileType', 'Position', 'BiomeType', 'InteractableType', 'ExpansionMode',
           'SeededRandom', 'create_rng',
           'MapGenerationError', 'ConfigurationError', 'ResourceExhaustionError', 'NoValidMovesError',
           'MiningConfig', 'MiningResult', 'run_mining_algorithm',
           'BiomeDefinition', 'BiomeConfig', 'BiomeAssignmentResult', 'assign_biomes',
           'analyze_connectivity',
           'SpawnPointConfig', 'SpawnPointResult', 'place_spawn_points',
           'MapGenerationResult', 'generate_map', 'default_mining_config']
