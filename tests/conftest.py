"""Shared fixtures for map generation tests."""

import pytest

from py_castlerun.core.models import Grid, Position, TileType

SYMBOLS = {"#": TileType.WALL, ".": TileType.FLOOR, " ": TileType.VOID}


@pytest.fixture
def make_grid():
    """Build a Grid from text rows: '#' wall, '.' floor, ' ' void."""

    def _make(rows):
        grid = Grid.create(len(rows[0]), len(rows))
        for y, row in enumerate(rows):
            for x, symbol in enumerate(row):
                grid.set_tile(Position(x, y), SYMBOLS[symbol])
        return grid

    return _make
