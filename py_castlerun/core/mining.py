"""
Topology carver: builds the WALL/FLOOR/VOID layout with a weighted random walk.

This module implements:
- Configuration validation (hard limits raise, soft limits warn)
- Optional partitioning into independently carved sections
- The miner loop with memoized wall-breaking rules
- VOID trimming of unreachable outer walls
- Statistics and post-generation validation
"""

import math
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import structlog
from pydantic import BaseModel

from ..config.constants import GRID_CONSTRAINTS, SECTION_CONSTRAINTS
from .breakability import BreakabilityCache, determine_action, get_valid_moves
from .errors import ConfigurationError, NoValidMovesError
from .models import (
    TILE_CODES,
    Grid,
    MiningAction,
    PathNode,
    Position,
    TileType,
    ValidationResult,
    get_position_in_direction,
    is_in_bounds,
    is_on_border,
)
from .post_processing import apply_void_to_edges
from .seeded_random import create_rng
from .sections import Section, create_sections, is_on_grid_border, single_section

logger = structlog.get_logger()


@dataclass
class MiningConfig:
    """Configuration for the carving stage."""

    width: int
    height: int
    target_percentage: float
    break_wall_weight: float
    backtrack_weight: float
    sections_x: int = 1
    sections_y: int = 1
    apply_void: bool = False
    seed: Optional[int] = None
    starting_pos: Optional[Position] = None

    @property
    def uses_sections(self) -> bool:
        return self.sections_x > 1 or self.sections_y > 1


class MiningStats(BaseModel):
    """Composition, action and timing metrics of a carving run."""

    total_tiles: int
    floor_tiles: int
    wall_tiles: int
    void_tiles: int

    total_steps: int
    break_actions: int
    backtrack_actions: int

    execution_time_ms: float
    avg_step_time_ms: float

    miners_start_position: Position
    final_percentage: float
    section_floor_counts: Dict[str, int] = {}


@dataclass
class MiningResult:
    grid: Grid
    path: List[PathNode]
    stats: MiningStats
    seed: int = 0
    sections: List[Section] = field(default_factory=list)


def calculate_max_percentage(width: int, height: int) -> float:
    """
    Theoretical maximum floor percentage for a grid size.

    Based on the densest layout allowed by the no-2x2 rule: full odd rows
    alternating with rows floored on every other column, inside the border.
    """
    inner_width = width - 2
    inner_height = height - 2

    odd_rows = math.ceil(inner_height / 2)
    even_rows = inner_height // 2
    odd_cols = math.ceil(inner_width / 2)

    max_floor_tiles = odd_rows * inner_width + even_rows * odd_cols
    return (max_floor_tiles / (width * height)) * 100


def validate_mining_config(config: MiningConfig) -> None:
    """
    Validate a mining configuration.

    Raises:
        ConfigurationError: On any hard constraint violation
    """
    min_size = GRID_CONSTRAINTS["MATHEMATICAL_MIN_SIZE"]
    recommended_size = GRID_CONSTRAINTS["RECOMMENDED_MIN_SIZE"]

    if config.width < min_size or config.height < min_size:
        raise ConfigurationError(
            f"Grid size must be at least {min_size}x{min_size}. "
            f"Got {config.width}x{config.height}"
        )

    if config.width < recommended_size or config.height < recommended_size:
        logger.warning(
            "Grid size below recommended minimum",
            width=config.width,
            height=config.height,
            recommended=recommended_size,
        )

    if config.target_percentage <= 0 or config.target_percentage > 100:
        raise ConfigurationError(
            f"Target percentage must be between 0 and 100. Got {config.target_percentage}"
        )

    if config.target_percentage > GRID_CONSTRAINTS["ALLOWED_MAX_PERCENT"]:
        raise ConfigurationError(
            f"Target percentage {config.target_percentage}% exceeds allowed maximum of "
            f"{GRID_CONSTRAINTS['ALLOWED_MAX_PERCENT']}%"
        )

    if config.target_percentage > GRID_CONSTRAINTS["RECOMMENDED_MAX_PERCENT"]:
        logger.warning(
            "Target percentage exceeds recommended maximum",
            target_percentage=config.target_percentage,
            recommended=GRID_CONSTRAINTS["RECOMMENDED_MAX_PERCENT"],
        )

    if config.break_wall_weight <= 0:
        raise ConfigurationError(
            f"Break wall weight must be greater than 0. Got {config.break_wall_weight}"
        )

    if config.backtrack_weight <= 0:
        raise ConfigurationError(
            f"Backtrack weight must be greater than 0. Got {config.backtrack_weight}"
        )

    if config.sections_x < 1 or config.sections_y < 1:
        raise ConfigurationError(
            f"Section counts must be at least 1. "
            f"Got sections_x={config.sections_x}, sections_y={config.sections_y}"
        )

    if config.sections_x > config.width or config.sections_y > config.height:
        raise ConfigurationError(
            f"Cannot have more sections than grid dimensions. "
            f"Grid: {config.width}x{config.height}, "
            f"Sections: {config.sections_x}x{config.sections_y}"
        )

    section_width = config.width // config.sections_x
    section_height = config.height // config.sections_y
    min_section_size = min(section_width, section_height)

    if min_section_size < SECTION_CONSTRAINTS["MIN_SECTION_SIZE"]:
        raise ConfigurationError(
            f"Section size too small ({section_width}x{section_height}). "
            f"Minimum {SECTION_CONSTRAINTS['MIN_SECTION_SIZE']}x"
            f"{SECTION_CONSTRAINTS['MIN_SECTION_SIZE']} required. "
            f"Reduce section count or increase grid size."
        )

    if min_section_size < SECTION_CONSTRAINTS["RECOMMENDED_SECTION_SIZE"]:
        logger.warning(
            "Section size below recommended minimum",
            section_width=section_width,
            section_height=section_height,
            recommended=SECTION_CONSTRAINTS["RECOMMENDED_SECTION_SIZE"],
        )

    if config.starting_pos is not None:
        pos = Position(*config.starting_pos)
        if not is_in_bounds(pos, config.width, config.height):
            raise ConfigurationError(
                f"Starting position ({pos.x}, {pos.y}) is out of bounds "
                f"for grid size {config.width}x{config.height}"
            )

        if is_on_border(pos, config.width, config.height):
            raise ConfigurationError(
                f"Starting position ({pos.x}, {pos.y}) cannot be on border"
            )

        if config.uses_sections:
            logger.warning(
                "Starting position is ignored when using multiple sections",
                starting_pos=tuple(pos),
            )


def validate_grid(grid: Grid) -> ValidationResult:
    """
    Check a carved grid against the carving invariants.

    1. No 2x2 block of FLOOR tiles
    2. No FLOOR tile on the grid border
    """
    errors = []
    floor = grid.type_array() == TILE_CODES[TileType.FLOOR]

    blocks = floor[:-1, :-1] & floor[:-1, 1:] & floor[1:, :-1] & floor[1:, 1:]
    for y, x in np.argwhere(blocks):
        errors.append(
            f"2x2 floor pattern found at position ({x}, {y}). "
            f"Pattern: ({x},{y}), ({x + 1},{y}), ({x},{y + 1}), ({x + 1},{y + 1})"
        )

    border = np.zeros_like(floor)
    border[0, :] = border[-1, :] = True
    border[:, 0] = border[:, -1] = True
    for y, x in np.argwhere(floor & border):
        errors.append(f"Border tile at ({x}, {y}) is FLOOR (should be WALL or VOID)")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


def calculate_stats(
    grid: Grid,
    path: List[PathNode],
    execution_time_ms: float,
    section_floor_counts: Dict[str, int],
) -> MiningStats:
    codes = grid.type_array()
    total_tiles = grid.width * grid.height
    floor_tiles = int(np.count_nonzero(codes == TILE_CODES[TileType.FLOOR]))

    total_steps = len(path)
    break_actions = sum(1 for node in path if node.mining_action == MiningAction.BREAK)

    return MiningStats(
        total_tiles=total_tiles,
        floor_tiles=floor_tiles,
        wall_tiles=int(np.count_nonzero(codes == TILE_CODES[TileType.WALL])),
        void_tiles=int(np.count_nonzero(codes == TILE_CODES[TileType.VOID])),
        total_steps=total_steps,
        break_actions=break_actions,
        backtrack_actions=total_steps - break_actions,
        execution_time_ms=execution_time_ms,
        avg_step_time_ms=execution_time_ms / total_steps if total_steps > 0 else 0.0,
        miners_start_position=path[0].position,
        final_percentage=(floor_tiles / total_tiles) * 100,
        section_floor_counts=section_floor_counts,
    )


class MapMiner:
    """
    Carves a grid with one miner per section.

    Single-section mode mines the whole grid with one miner and treats a stall
    as fatal. Multi-section mode mines each section in order and moves on to
    the next section when a miner runs out of moves.
    """

    def __init__(self, config: MiningConfig):
        validate_mining_config(config)

        self.config = config
        self.rng = create_rng(config.seed)
        self.grid = Grid.create(config.width, config.height, TileType.WALL)
        self.cache = BreakabilityCache(config.width, config.height)

        if config.uses_sections:
            self.sections = create_sections(
                config.width,
                config.height,
                config.sections_x,
                config.sections_y,
                config.target_percentage,
            )
        else:
            self.sections = [
                single_section(config.width, config.height, config.target_percentage)
            ]

        self.path: List[PathNode] = []
        self._start_time = 0.0

    def _elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._start_time) * 1000)

    def _pick_start(self, section: Section) -> Position:
        if not self.config.uses_sections and self.config.starting_pos is not None:
            return Position(*self.config.starting_pos)

        while True:
            start = Position(
                self.rng.next_int(section.min_x, section.max_x + 1),
                self.rng.next_int(section.min_y, section.max_y + 1),
            )
            if not is_on_grid_border(start, self.config.width, self.config.height):
                return start

    def _break(self, pos: Position) -> None:
        self.grid.set_tile(pos, TileType.FLOOR)
        self.cache.update_after_break(self.grid, pos)
        self.path.append(PathNode(pos, MiningAction.BREAK, self._elapsed_ms()))

    def mine_section(self, section: Section) -> int:
        """
        Run one miner inside a section until its target floor count is reached.

        Returns:
            Number of floor tiles carved in the section

        Raises:
            NoValidMovesError: Single-section miner stalled
        """
        start = self._pick_start(section)
        self._break(start)
        floor_count = 1
        miner = start

        while floor_count < section.target_floor_count:
            moves = get_valid_moves(
                self.grid,
                miner,
                self.config.break_wall_weight,
                self.config.backtrack_weight,
                self.cache,
                section,
            )

            if not moves:
                if not self.config.uses_sections:
                    raise NoValidMovesError(
                        f"No valid moves at ({miner.x}, {miner.y}). "
                        f"Floor: {floor_count}/{section.target_floor_count}"
                    )
                logger.warning(
                    "No valid moves, moving to next section",
                    section_id=section.id,
                    position=tuple(miner),
                    floor_tiles=floor_count,
                    target=section.target_floor_count,
                )
                break

            direction = self.rng.choice(moves)
            target = get_position_in_direction(miner, direction)

            if determine_action(self.grid, target) == MiningAction.BREAK:
                self._break(target)
                floor_count += 1
            else:
                self.path.append(
                    PathNode(target, MiningAction.BACKTRACK, self._elapsed_ms())
                )

            miner = target

        logger.info(
            "Section complete",
            section_id=section.id,
            floor_tiles=floor_count,
            target=section.target_floor_count,
        )
        return floor_count

    def run(self) -> MiningResult:
        """Carve every section, post-process, validate and collect statistics."""
        logger.info(
            "Starting mining",
            width=self.config.width,
            height=self.config.height,
            sections=len(self.sections),
            seed=self.rng.seed,
        )
        self._start_time = time.perf_counter()

        section_floor_counts = {}
        for section in self.sections:
            section_floor_counts[section.id] = self.mine_section(section)

        execution_time_ms = (time.perf_counter() - self._start_time) * 1000
        logger.info("Total floor tiles", floor_tiles=sum(section_floor_counts.values()))

        if self.config.apply_void:
            apply_void_to_edges(self.grid)

        stats = calculate_stats(self.grid, self.path, execution_time_ms, section_floor_counts)

        validation = validate_grid(self.grid)
        if not validation.is_valid:
            logger.error("Generated grid failed validation", errors=validation.errors)

        return MiningResult(
            grid=self.grid,
            path=self.path,
            stats=stats,
            seed=self.rng.seed,
            sections=self.sections,
        )


def run_mining_algorithm(config: MiningConfig) -> MiningResult:
    """
    Execute the complete carving stage.

    Args:
        config: Mining configuration

    Returns:
        MiningResult with the carved grid, the miner path and statistics

    Raises:
        ConfigurationError: Invalid configuration
        NoValidMovesError: Single-section miner stalled
    """
    return MapMiner(config).run()
