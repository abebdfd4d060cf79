"""
End-to-end map generation: carve, label biomes, place spawn points.

Each stage works on its own clone of the previous stage's grid, so every
stage result keeps the grid exactly as that stage left it.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from ..config import Settings, settings as default_settings
from .biomes import BiomeAssignmentResult, BiomeConfig, assign_biomes
from .errors import MapGenerationError
from .mining import MiningConfig, MiningResult, run_mining_algorithm
from .spawn_points import SpawnPointConfig, SpawnPointResult, place_spawn_points

logger = structlog.get_logger()


@dataclass
class MapGenerationResult:
    mining: MiningResult
    biomes: BiomeAssignmentResult
    spawn_points: SpawnPointResult

    @property
    def grid(self):
        """Final grid with topology, biomes and interactables."""
        return self.spawn_points.grid


def default_mining_config(settings: Optional[Settings] = None, **overrides) -> MiningConfig:
    """Build a MiningConfig from the ambient settings, with keyword overrides."""
    settings = settings or default_settings
    values = dict(
        width=settings.default_width,
        height=settings.default_height,
        target_percentage=settings.default_target_percentage,
        break_wall_weight=settings.default_break_wall_weight,
        backtrack_weight=settings.default_backtrack_weight,
        seed=settings.default_seed,
    )
    values.update(overrides)
    return MiningConfig(**values)


def generate_map(
    mining: MiningConfig,
    biomes: BiomeConfig,
    spawn_points: SpawnPointConfig,
) -> MapGenerationResult:
    """
    Run all three generation stages.

    Raises:
        MapGenerationError: Any stage failure, after logging the failing stage
    """
    stage = "mining"
    try:
        logger.info("Carving topology")
        mining_result = run_mining_algorithm(mining)

        stage = "biomes"
        logger.info("Assigning biomes")
        biome_grid = mining_result.grid.clone(reset_biomes=True)
        biome_result = assign_biomes(biome_grid, biomes)

        stage = "spawn_points"
        logger.info("Placing spawn points")
        spawn_grid = biome_result.grid.clone(reset_interactables=True)
        spawn_result = place_spawn_points(spawn_grid, spawn_points)
    except MapGenerationError as e:
        logger.error("Map generation failed", stage=stage, error=str(e))
        raise

    logger.info(
        "Map generation completed",
        mining_seed=mining_result.seed,
        biome_seed=biome_result.seed,
        spawn_seed=spawn_result.seed,
    )
    return MapGenerationResult(
        mining=mining_result,
        biomes=biome_result,
        spawn_points=spawn_result,
    )
