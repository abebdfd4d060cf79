"""Tests for grid and tile data structures."""

import numpy as np

from py_castlerun.core.models import (
    BIOME_NAMES,
    TILE_CODES,
    BiomeType,
    Direction,
    Grid,
    InteractableType,
    Position,
    TileType,
    get_position_in_direction,
    is_on_border,
    parse_position_key,
    position_key,
)


class TestPosition:
    """Test position helpers."""

    def test_directions(self):
        pos = Position(3, 3)

        assert get_position_in_direction(pos, Direction.N) == Position(3, 2)
        assert get_position_in_direction(pos, Direction.S) == Position(3, 4)
        assert get_position_in_direction(pos, Direction.E) == Position(4, 3)
        assert get_position_in_direction(pos, Direction.W) == Position(2, 3)
        assert get_position_in_direction(pos, Direction.NE) == Position(4, 2)
        assert get_position_in_direction(pos, Direction.SW) == Position(2, 4)

    def test_position_key(self):
        assert position_key(Position(4, 7)) == "4,7"
        assert parse_position_key("4,7") == Position(4, 7)

    def test_border(self):
        assert is_on_border(Position(0, 3), 7, 7)
        assert is_on_border(Position(3, 6), 7, 7)
        assert not is_on_border(Position(1, 1), 7, 7)

    def test_biome_names_cover_all_types(self):
        assert set(BIOME_NAMES) == set(BiomeType)


class TestGrid:
    """Test grid creation, access and cloning."""

    def test_create(self):
        grid = Grid.create(4, 3)

        assert grid.width == 4
        assert grid.height == 3
        assert len(grid.tiles) == 3
        assert all(len(row) == 4 for row in grid.tiles)
        assert grid.count_tiles(TileType.WALL) == 12
        assert grid.tiles[2][1].position == Position(1, 2)

    def test_out_of_bounds(self):
        grid = Grid.create(4, 3)

        assert grid.get_tile(Position(-1, 0)) is None
        assert grid.get_tile(Position(4, 0)) is None
        assert grid.set_tile(Position(0, 3), TileType.FLOOR) is False

    def test_set_tile(self):
        grid = Grid.create(4, 3)

        assert grid.set_tile(Position(1, 1), TileType.FLOOR) is True
        assert grid.get_tile(Position(1, 1)).type == TileType.FLOOR
        assert grid.count_tiles(TileType.FLOOR) == 1

    def test_iter_tiles_row_major(self):
        grid = Grid.create(3, 2)
        positions = [tile.position for tile in grid.iter_tiles()]

        assert positions == [
            Position(0, 0), Position(1, 0), Position(2, 0),
            Position(0, 1), Position(1, 1), Position(2, 1),
        ]

    def test_clone_is_independent(self):
        grid = Grid.create(4, 4)
        copy = grid.clone()
        copy.set_tile(Position(1, 1), TileType.FLOOR)

        assert grid.get_tile(Position(1, 1)).type == TileType.WALL
        assert copy.tiles[1][1] is not grid.tiles[1][1]

    def test_clone_resets(self):
        grid = Grid.create(4, 4)
        tile = grid.get_tile(Position(1, 1))
        tile.biome = BiomeType.ICE
        tile.interactable = InteractableType.KEY

        kept = grid.clone()
        no_biomes = grid.clone(reset_biomes=True)
        no_markers = grid.clone(reset_interactables=True)

        assert kept.get_tile(Position(1, 1)).biome == BiomeType.ICE
        assert kept.get_tile(Position(1, 1)).interactable == InteractableType.KEY
        assert no_biomes.get_tile(Position(1, 1)).biome is None
        assert no_biomes.get_tile(Position(1, 1)).interactable == InteractableType.KEY
        assert no_markers.get_tile(Position(1, 1)).biome == BiomeType.ICE
        assert no_markers.get_tile(Position(1, 1)).interactable is None

    def test_type_array(self, make_grid):
        grid = make_grid([
            "####",
            "#. #",
            "####",
        ])
        codes = grid.type_array()

        assert codes.shape == (3, 4)
        assert codes.dtype == np.int8
        assert codes[1, 1] == TILE_CODES[TileType.FLOOR]
        assert codes[1, 2] == TILE_CODES[TileType.VOID]
        assert codes[0, 0] == TILE_CODES[TileType.WALL]

    def test_to_rows(self, make_grid):
        rows = ["####", "#. #", "####"]
        assert make_grid(rows).to_rows() == rows
