"""Tests for VOID trimming of outer walls."""

from py_castlerun.core.models import ALL_DIRECTIONS, Position, TileType, get_position_in_direction
from py_castlerun.core.post_processing import apply_void_to_edges


class TestApplyVoid:
    """Test border BFS conversion to VOID."""

    def test_single_room(self, make_grid):
        """Only the ring of walls touching the floor survives."""
        grid = make_grid([
            "#######",
            "#######",
            "#######",
            "###.###",
            "#######",
            "#######",
            "#######",
        ])
        converted = apply_void_to_edges(grid)

        assert converted == 40
        assert grid.to_rows() == [
            "       ",
            "       ",
            "  ###  ",
            "  #.#  ",
            "  ###  ",
            "       ",
            "       ",
        ]

    def test_enclosed_walls_stay(self, make_grid):
        """Walls the border BFS cannot reach are kept."""
        grid = make_grid([
            "#########",
            "#########",
            "##.....##",
            "##.###.##",
            "##.###.##",
            "##.###.##",
            "##.....##",
            "#########",
            "#########",
        ])
        apply_void_to_edges(grid)

        assert grid.get_tile(Position(4, 4)).type == TileType.WALL
        assert grid.get_tile(Position(0, 0)).type == TileType.VOID

    def test_void_never_touches_floor(self, make_grid):
        grid = make_grid([
            "########",
            "#.#.####",
            "#...####",
            "###.####",
            "########",
        ])
        apply_void_to_edges(grid)

        for tile in grid.iter_tiles():
            if tile.type != TileType.VOID:
                continue
            for direction in ALL_DIRECTIONS:
                neighbor = grid.get_tile(get_position_in_direction(tile.position, direction))
                assert neighbor is None or neighbor.type != TileType.FLOOR

    def test_floor_count_unchanged(self, make_grid):
        grid = make_grid([
            "######",
            "#..###",
            "#.####",
            "######",
        ])
        apply_void_to_edges(grid)

        assert grid.count_tiles(TileType.FLOOR) == 3
