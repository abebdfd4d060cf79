"""Tests for connectivity bucketing."""

from py_castlerun.core.connectivity import analyze_connectivity, count_floor_neighbors
from py_castlerun.core.models import Position


class TestConnectivity:
    """Test FLOOR neighbour counting."""

    def test_corridor(self, make_grid):
        grid = make_grid([
            "#######",
            "#.....#",
            "#######",
        ])
        connectivity = analyze_connectivity(grid)

        assert connectivity[1] == [Position(1, 1), Position(5, 1)]
        assert connectivity[2] == [Position(2, 1), Position(3, 1), Position(4, 1)]
        assert connectivity[3] == []
        assert connectivity[4] == []

    def test_cross(self, make_grid):
        grid = make_grid([
            "#####",
            "##.##",
            "#...#",
            "##.##",
            "#####",
        ])
        connectivity = analyze_connectivity(grid)

        assert connectivity[4] == [Position(2, 2)]
        assert connectivity[1] == [Position(2, 1), Position(1, 2), Position(3, 2), Position(2, 3)]

    def test_isolated_floor_excluded(self, make_grid):
        grid = make_grid([
            "#####",
            "#.#.#",
            "#####",
        ])
        connectivity = analyze_connectivity(grid)

        assert all(connectivity[degree] == [] for degree in (1, 2, 3, 4))
        assert count_floor_neighbors(grid, Position(1, 1)) == 0

    def test_diagonals_ignored(self, make_grid):
        grid = make_grid([
            "#####",
            "#.###",
            "##.##",
            "#####",
        ])
        assert count_floor_neighbors(grid, Position(1, 1)) == 0
