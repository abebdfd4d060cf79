"""
Biome labeling by synchronized probabilistic wavefronts.

Every biome center starts its own front. Each cycle processes the fronts in
creation order; a front drains its current queue, converting tiles with the
configured chance and queueing neighbours of converted tiles for the next
cycle. Failed attempts are retried on the next cycle. Tiles are claimed by the
first front to convert them, so earlier biomes and earlier cycles win ties.

A conversion chance of exactly 0 never converges for that tile type.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog
from pydantic import BaseModel

from ..config.constants import BIOME_CONSTRAINTS
from .errors import ConfigurationError, ResourceExhaustionError
from .models import (
    ALL_DIRECTIONS,
    CARDINAL_DIRECTIONS,
    BiomeAction,
    BiomePathNode,
    BiomeType,
    ExpansionMode,
    Grid,
    Position,
    TileType,
    ValidationResult,
    get_position_in_direction,
)
from .seeded_random import SeededRandom, create_rng, shuffle_in_place

logger = structlog.get_logger()


@dataclass
class BiomeDefinition:
    type: BiomeType
    center_count: int

    def __post_init__(self):
        self.type = BiomeType(self.type)


@dataclass
class BiomeConfig:
    """Configuration for the biome labeling stage."""

    biomes: List[BiomeDefinition]
    floor_conversion_chance: float
    wall_conversion_chance: float
    expansion_mode: ExpansionMode = ExpansionMode.CARDINAL
    seed: Optional[int] = None

    def __post_init__(self):
        self.expansion_mode = ExpansionMode(self.expansion_mode)


class BiomeStats(BaseModel):
    """Coverage and conversion metrics of a labeling run."""

    biome_coverage: Dict[BiomeType, float]
    total_biome_centers: int
    tiles_with_biome: int
    tiles_without_biome: int
    conversion_attempts: int
    successful_conversions: int
    skipped_tiles: int
    total_cycles: int


@dataclass
class BiomeAssignmentResult:
    grid: Grid
    path: List[BiomePathNode]
    stats: BiomeStats
    seed: int = 0
    centers: List[Position] = field(default_factory=list)


@dataclass
class BiomeFront:
    """One expanding wavefront of a single biome center."""

    biome_type: BiomeType
    current: List[Position]
    # Insertion-ordered set: dict keys
    next: Dict[Position, None] = field(default_factory=dict)

    def has_work(self) -> bool:
        return bool(self.current) or bool(self.next)


def validate_biome_config(config: BiomeConfig, grid: Optional[Grid] = None) -> None:
    """
    Validate a biome configuration, and optionally that the grid is unlabeled.

    Raises:
        ConfigurationError: On any hard constraint violation
    """
    if not config.biomes:
        raise ConfigurationError("At least one biome must be specified")

    seen = set()
    for biome in config.biomes:
        if biome.type in seen:
            raise ConfigurationError(
                f"Duplicate biome type: {biome.type.value}. "
                f"Each biome type should only appear once."
            )
        seen.add(biome.type)

    if not 0 <= config.floor_conversion_chance <= 1:
        raise ConfigurationError("Floor conversion chance must be between 0 and 1")

    if not 0 <= config.wall_conversion_chance <= 1:
        raise ConfigurationError("Wall conversion chance must be between 0 and 1")

    # Not guarded: a zero chance leaves that tile type unconverged forever
    for tile_type, chance in (
        (TileType.FLOOR, config.floor_conversion_chance),
        (TileType.WALL, config.wall_conversion_chance),
    ):
        if chance == 0:
            logger.warning(
                "Zero conversion chance, expansion will not terminate while such tiles are queued",
                tile_type=tile_type.value,
            )

    for biome in config.biomes:
        if biome.center_count < 1:
            raise ConfigurationError(f"Biome {biome.type.value} must have at least 1 center")

        if biome.center_count > BIOME_CONSTRAINTS["MAX_RECOMMENDED_CENTERS"]:
            logger.warning(
                "Biome center count may be excessive",
                biome=biome.type.value,
                center_count=biome.center_count,
            )

    if grid is not None:
        biomes_found = sum(
            1
            for tile in grid.iter_tiles()
            if tile.type != TileType.VOID and tile.biome is not None
        )
        if biomes_found > 0:
            raise ConfigurationError(
                f"Grid already has biomes assigned to {biomes_found} tiles. "
                f"Clone the carved grid with reset_biomes=True first."
            )

    total_centers = sum(b.center_count for b in config.biomes)
    logger.info(
        "Biome assignment configured",
        total_centers=total_centers,
        biome_types=len(config.biomes),
    )


def validate_biome_assignment(grid: Grid) -> ValidationResult:
    """Check that every non-VOID tile carries a biome."""
    max_listed = BIOME_CONSTRAINTS["MAX_LISTED_UNASSIGNED"]
    errors = []
    unassigned = 0

    for tile in grid.iter_tiles():
        if tile.type != TileType.VOID and tile.biome is None:
            unassigned += 1
            if unassigned <= max_listed:
                errors.append(
                    f"Tile at ({tile.position.x}, {tile.position.y}) "
                    f"[{tile.type.value}] has no biome"
                )

    if unassigned > max_listed:
        errors.append(f"... and {unassigned - max_listed} more unassigned tiles")

    logger.info("Biome validation", unassigned_tiles=unassigned)
    return ValidationResult(is_valid=unassigned == 0, errors=errors)


def calculate_biome_stats(
    grid: Grid,
    path: List[BiomePathNode],
    total_cycles: int,
    total_centers: int,
) -> BiomeStats:
    biome_counts: Dict[BiomeType, int] = {}
    tiles_with_biome = 0
    tiles_without_biome = 0

    for tile in grid.iter_tiles():
        if tile.type == TileType.VOID:
            continue
        if tile.biome is not None:
            tiles_with_biome += 1
            biome_counts[tile.biome] = biome_counts.get(tile.biome, 0) + 1
        else:
            tiles_without_biome += 1

    total_non_void = tiles_with_biome + tiles_without_biome
    biome_coverage = {
        biome: (count / total_non_void) * 100 for biome, count in biome_counts.items()
    }

    converted = sum(1 for node in path if node.action == BiomeAction.CONVERT)
    skipped = sum(1 for node in path if node.action == BiomeAction.SKIP)

    return BiomeStats(
        biome_coverage=biome_coverage,
        total_biome_centers=total_centers,
        tiles_with_biome=tiles_with_biome,
        tiles_without_biome=tiles_without_biome,
        conversion_attempts=converted + skipped,
        successful_conversions=converted,
        skipped_tiles=skipped,
        total_cycles=total_cycles,
    )


def find_random_floor_tiles(
    grid: Grid, count: int, rng: SeededRandom, used: set
) -> List[Position]:
    """
    Pick count distinct FLOOR positions not in used.

    All candidates are collected row-major and shuffled with the shared RNG,
    then the first count are taken.

    Raises:
        ResourceExhaustionError: Fewer candidates than requested
    """
    floor_tiles = [
        tile.position
        for tile in grid.iter_tiles()
        if tile.type == TileType.FLOOR and tile.position not in used
    ]

    if len(floor_tiles) < count:
        raise ResourceExhaustionError(
            f"Not enough FLOOR tiles for biome centers. "
            f"Need {count}, found {len(floor_tiles)}"
        )

    shuffle_in_place(floor_tiles, rng)
    return floor_tiles[:count]


class BiomeAssigner:
    """Labels every non-VOID tile of a carved grid with a biome."""

    def __init__(self, grid: Grid, config: BiomeConfig):
        """
        Initialize the assigner.

        Args:
            grid: Carved grid without biome labels, mutated in place
            config: Biome configuration
        """
        validate_biome_config(config, grid)

        self.grid = grid
        self.config = config
        self.rng = create_rng(config.seed)
        self.directions = (
            CARDINAL_DIRECTIONS
            if config.expansion_mode == ExpansionMode.CARDINAL
            else ALL_DIRECTIONS
        )

        self.fronts: List[BiomeFront] = []
        self.centers: List[Position] = []
        self.path: List[BiomePathNode] = []
        self.cycle_number = 0
        self._step_number = 0
        self._start_time = 0.0

    def _elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._start_time) * 1000)

    def place_centers(self) -> None:
        """Pick the centers of every biome and open one front per center."""
        used = set()
        for definition in self.config.biomes:
            centers = find_random_floor_tiles(
                self.grid, definition.center_count, self.rng, used
            )
            for center in centers:
                used.add(center)
                self.centers.append(center)
                self.fronts.append(BiomeFront(biome_type=definition.type, current=[center]))

    def _record(self, pos: Position, front: BiomeFront, action: BiomeAction) -> None:
        self.path.append(
            BiomePathNode(
                position=pos,
                biome_type=front.biome_type,
                action=action,
                cycle_number=self.cycle_number,
                step_number=self._step_number,
                timestamp=self._elapsed_ms(),
            )
        )
        self._step_number += 1

    def _process_front(self, front: BiomeFront) -> None:
        """Drain a front's current queue, then promote its next set."""
        queue = front.current
        index = 0
        while index < len(queue):
            pos = queue[index]
            index += 1

            tile = self.grid.get_tile(pos)
            if tile is None or tile.type == TileType.VOID or tile.biome is not None:
                continue

            chance = (
                self.config.floor_conversion_chance
                if tile.type == TileType.FLOOR
                else self.config.wall_conversion_chance
            )

            if self.rng.next() < chance:
                tile.biome = front.biome_type
                for direction in self.directions:
                    front.next[get_position_in_direction(pos, direction)] = None
                self._record(pos, front, BiomeAction.CONVERT)
            else:
                front.next[pos] = None
                self._record(pos, front, BiomeAction.SKIP)

        front.current = list(front.next)
        front.next = {}

    def expand(self) -> None:
        """Run synchronized cycles until no front has pending work."""
        while any(front.has_work() for front in self.fronts):
            self.cycle_number += 1
            for front in self.fronts:
                self._process_front(front)

    def assign(self) -> BiomeAssignmentResult:
        self._start_time = time.perf_counter()
        logger.info("Starting biome assignment", seed=self.rng.seed)

        self.place_centers()
        self.expand()

        validation = validate_biome_assignment(self.grid)
        if not validation.is_valid:
            logger.error("Biome assignment failed validation", errors=validation.errors)
        else:
            logger.info("All tiles successfully assigned biomes", cycles=self.cycle_number)

        total_centers = sum(b.center_count for b in self.config.biomes)
        stats = calculate_biome_stats(self.grid, self.path, self.cycle_number, total_centers)

        return BiomeAssignmentResult(
            grid=self.grid,
            path=self.path,
            stats=stats,
            seed=self.rng.seed,
            centers=self.centers,
        )


def assign_biomes(grid: Grid, config: BiomeConfig) -> BiomeAssignmentResult:
    """
    Assign biomes to all non-VOID tiles of a grid.

    Args:
        grid: Carved grid without biome labels, mutated in place
        config: Biome configuration

    Returns:
        BiomeAssignmentResult with the labeled grid, attempt trace and statistics

    Raises:
        ConfigurationError: Invalid configuration or pre-labeled grid
        ResourceExhaustionError: Not enough FLOOR tiles for the centers
    """
    return BiomeAssigner(grid, config).assign()
