"""
Post-processing applied after carving: trims unreachable outer walls to VOID.
"""

from collections import deque

import numpy as np
import structlog

from .models import ALL_DIRECTIONS, Grid, Position, TileType, get_position_in_direction

logger = structlog.get_logger()


def _has_adjacent_floor(grid: Grid, pos: Position) -> bool:
    for direction in ALL_DIRECTIONS:
        neighbor = grid.get_tile(get_position_in_direction(pos, direction))
        if neighbor is not None and neighbor.type == TileType.FLOOR:
            return True
    return False


def apply_void_to_edges(grid: Grid) -> int:
    """
    Convert unreachable outer walls to VOID using BFS from the border.

    A WALL becomes VOID only when none of its 8 neighbours is FLOOR; the
    conversion then spreads to its unvisited WALL neighbours. Walls touching
    FLOOR stay WALL and stop the spread.

    Args:
        grid: Carved grid, mutated in place

    Returns:
        Number of tiles converted to VOID
    """
    visited = np.zeros((grid.height, grid.width), dtype=bool)
    queue = deque()

    # Seed with border walls in row-major order
    for y in range(grid.height):
        for x in range(grid.width):
            if x == 0 or x == grid.width - 1 or y == 0 or y == grid.height - 1:
                if grid.tiles[y][x].type == TileType.WALL:
                    queue.append(Position(x, y))

    converted = 0
    while queue:
        current = queue.popleft()

        if visited[current.y, current.x]:
            continue
        visited[current.y, current.x] = True

        tile = grid.tiles[current.y][current.x]
        if tile.type != TileType.WALL:
            continue

        if _has_adjacent_floor(grid, current):
            continue

        tile.type = TileType.VOID
        converted += 1

        for direction in ALL_DIRECTIONS:
            neighbor_pos = get_position_in_direction(current, direction)
            if not grid.in_bounds(neighbor_pos) or visited[neighbor_pos.y, neighbor_pos.x]:
                continue
            if grid.tiles[neighbor_pos.y][neighbor_pos.x].type == TileType.WALL:
                queue.append(neighbor_pos)

    logger.info("Applied VOID to outer walls", converted=converted)
    return converted
