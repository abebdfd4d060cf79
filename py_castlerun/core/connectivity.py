"""
Connectivity analysis: groups FLOOR tiles by how many FLOOR tiles touch them.

C1 tiles are dead ends, C4 tiles are fully connected hubs.
"""

from typing import Dict, List

from .models import CARDINAL_DIRECTIONS, Grid, Position, TileType, get_position_in_direction

ConnectivityMap = Dict[int, List[Position]]


def count_floor_neighbors(grid: Grid, pos: Position) -> int:
    count = 0
    for direction in CARDINAL_DIRECTIONS:
        neighbor = grid.get_tile(get_position_in_direction(pos, direction))
        if neighbor is not None and neighbor.type == TileType.FLOOR:
            count += 1
    return count


def analyze_connectivity(grid: Grid) -> ConnectivityMap:
    """
    Bucket FLOOR positions by cardinal FLOOR-neighbour count.

    Args:
        grid: Grid to analyze

    Returns:
        Mapping 1..4 -> positions in row-major order (isolated tiles are left out)
    """
    connectivity: ConnectivityMap = {1: [], 2: [], 3: [], 4: []}

    for tile in grid.iter_tiles():
        if tile.type != TileType.FLOOR:
            continue
        degree = count_floor_neighbors(grid, tile.position)
        if 1 <= degree <= 4:
            connectivity[degree].append(tile.position)

    return connectivity
