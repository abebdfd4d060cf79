"""
Wall-breaking rules and the memoized move generator used by the miner.

A wall may be broken when:
1. It is not on the grid border (section boundaries do not count)
2. Breaking it does not complete a 2x2 block of FLOOR tiles
"""

import math
from typing import List, Optional

import numpy as np

from .errors import MapGenerationError
from .models import (
    CARDINAL_DIRECTIONS,
    Direction,
    Grid,
    MiningAction,
    Position,
    TileType,
    get_position_in_direction,
)
from .sections import Section, is_in_section, is_on_grid_border

# (cardinal, cardinal, diagonal) corners of the four 2x2 windows around a target
TWO_BY_TWO_PATTERNS = [
    (Direction.N, Direction.E, Direction.NE),
    (Direction.N, Direction.W, Direction.NW),
    (Direction.S, Direction.E, Direction.SE),
    (Direction.S, Direction.W, Direction.SW),
]


def _is_floor(grid: Grid, pos: Position) -> bool:
    tile = grid.get_tile(pos)
    return tile is not None and tile.type == TileType.FLOOR


def can_break_wall(grid: Grid, pos: Position, direction: Direction) -> bool:
    """
    Check whether the wall next to pos in the given direction may be broken.

    Args:
        grid: Current grid state
        pos: Miner position
        direction: Direction of the wall to break

    Returns:
        True if both breaking rules pass
    """
    target = get_position_in_direction(pos, direction)

    if is_on_grid_border(target, grid.width, grid.height):
        return False

    for card1, card2, diag in TWO_BY_TWO_PATTERNS:
        if (
            _is_floor(grid, get_position_in_direction(target, card1))
            and _is_floor(grid, get_position_in_direction(target, card2))
            and _is_floor(grid, get_position_in_direction(target, diag))
        ):
            return False

    return True


class BreakabilityCache:
    """
    Memoized breakability flags.

    cant_break[y, x]: the wall at (x, y) is known to be unbreakable
    no_further_break[y, x]: the floor at (x, y) is known to have no breakable neighbour
    """

    def __init__(self, width: int, height: int):
        self.cant_break = np.zeros((height, width), dtype=bool)
        self.no_further_break = np.zeros((height, width), dtype=bool)

    def can_break(self, grid: Grid, pos: Position, direction: Direction) -> bool:
        """can_break_wall() with the cache consulted first and updated on failure."""
        target = get_position_in_direction(pos, direction)

        if not grid.in_bounds(target):
            return False

        if self.cant_break[target.y, target.x]:
            return False

        if self.no_further_break[pos.y, pos.x]:
            return False

        breakable = can_break_wall(grid, pos, direction)
        if not breakable:
            self.cant_break[target.y, target.x] = True

        return breakable

    def update_after_break(self, grid: Grid, new_floor: Position) -> None:
        """Refresh flags around a freshly carved floor tile."""
        blocks_all_adjacent = True

        for direction in CARDINAL_DIRECTIONS:
            adj = get_position_in_direction(new_floor, direction)
            adj_tile = grid.get_tile(adj)

            if adj_tile is not None and adj_tile.type == TileType.WALL:
                if can_break_wall(grid, new_floor, direction):
                    blocks_all_adjacent = False
                else:
                    self.cant_break[adj.y, adj.x] = True

        if blocks_all_adjacent:
            self.no_further_break[new_floor.y, new_floor.x] = True


def get_valid_moves(
    grid: Grid,
    pos: Position,
    break_wall_weight: float,
    backtrack_weight: float,
    cache: BreakabilityCache,
    section: Optional[Section] = None,
) -> List[Direction]:
    """
    Weighted list of moves from pos: each direction is repeated by its weight.

    A breakable WALL contributes break_wall_weight entries, a FLOOR contributes
    backtrack_weight entries. Fractional weights round up. Targets outside the
    section are excluded.
    """
    weighted = []

    for direction in CARDINAL_DIRECTIONS:
        target = get_position_in_direction(pos, direction)
        target_tile = grid.get_tile(target)

        if target_tile is None:
            continue

        if section is not None and not is_in_section(target, section):
            continue

        if target_tile.type == TileType.WALL and cache.can_break(grid, pos, direction):
            weighted.extend([direction] * math.ceil(break_wall_weight))

        if target_tile.type == TileType.FLOOR:
            weighted.extend([direction] * math.ceil(backtrack_weight))

    return weighted


def determine_action(grid: Grid, target: Position) -> MiningAction:
    tile = grid.get_tile(target)
    if tile is None:
        raise MapGenerationError(f"Invalid target position: {target.x}, {target.y}")
    return MiningAction.BREAK if tile.type == TileType.WALL else MiningAction.BACKTRACK
