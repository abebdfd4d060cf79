"""
Domain model shared by all generation stages.

This module defines:
- Closed enumerations for tiles, directions, actions, biomes and interactables
- Position and direction helpers
- The canonical Tile/Grid structure every stage reads and mutates
- Trace records (path nodes) produced by the carver and the biome labeler
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np


class TileType(str, Enum):
    """Types of tiles in the grid."""

    WALL = "WALL"
    FLOOR = "FLOOR"
    VOID = "VOID"


class Direction(str, Enum):
    """
    Directions on the grid.

    Cardinals are used for miner movement; diagonals only for 2x2 detection,
    VOID trimming and ALL-mode biome expansion.
    """

    N = "N"
    S = "S"
    E = "E"
    W = "W"
    NE = "NE"
    SE = "SE"
    NW = "NW"
    SW = "SW"


class MiningAction(str, Enum):
    """Actions the miner can take during carving."""

    BREAK = "BREAK"
    BACKTRACK = "BACKTRACK"


class BiomeType(str, Enum):
    """Biome labels assigned by the biome labeler."""

    WATER = "WATER"
    FOREST = "FOREST"
    SWAMP = "SWAMP"
    MAGMA = "MAGMA"
    ICE = "ICE"
    DESERT = "DESERT"
    DUNGEON = "DUNGEON"


# Biome names for display
BIOME_NAMES = {
    BiomeType.WATER: "Water",
    BiomeType.FOREST: "Forest",
    BiomeType.SWAMP: "Swamp",
    BiomeType.MAGMA: "Magma",
    BiomeType.ICE: "Ice",
    BiomeType.DESERT: "Desert",
    BiomeType.DUNGEON: "Dungeon",
}


class BiomeAction(str, Enum):
    """Outcome of a single biome conversion attempt."""

    CONVERT = "CONVERT"
    SKIP = "SKIP"


class ExpansionMode(str, Enum):
    """Neighbourhood used when a biome front expands."""

    CARDINAL = "CARDINAL"
    ALL = "ALL"


class InteractableType(str, Enum):
    """Gameplay markers placed by the spawn point placer."""

    ENTRY = "ENTRY"
    EXIT = "EXIT"
    KEY = "KEY"


class Position(NamedTuple):
    """2D grid position, origin (0, 0) at the top-left corner."""

    x: int
    y: int


DIRECTION_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.N: (0, -1),
    Direction.S: (0, 1),
    Direction.E: (1, 0),
    Direction.W: (-1, 0),
    Direction.NE: (1, -1),
    Direction.SE: (1, 1),
    Direction.NW: (-1, -1),
    Direction.SW: (-1, 1),
}

# Order matters: candidate lists and queues are built in this order
CARDINAL_DIRECTIONS: List[Direction] = [
    Direction.N,
    Direction.S,
    Direction.E,
    Direction.W,
]

ALL_DIRECTIONS: List[Direction] = [
    Direction.N,
    Direction.S,
    Direction.E,
    Direction.W,
    Direction.NE,
    Direction.SE,
    Direction.NW,
    Direction.SW,
]


def get_position_in_direction(pos: Position, direction: Direction) -> Position:
    """Get the position one step away from pos in the given direction."""
    dx, dy = DIRECTION_OFFSETS[direction]
    return Position(pos.x + dx, pos.y + dy)


def is_in_bounds(pos: Position, width: int, height: int) -> bool:
    return 0 <= pos.x < width and 0 <= pos.y < height


def is_on_border(pos: Position, width: int, height: int) -> bool:
    return pos.x == 0 or pos.x == width - 1 or pos.y == 0 or pos.y == height - 1


def position_key(pos: Position) -> str:
    """String key "x,y" used by external consumers of the trace data."""
    return f"{pos.x},{pos.y}"


def parse_position_key(key: str) -> Position:
    x, y = key.split(",")
    return Position(int(x), int(y))


@dataclass
class Tile:
    """Individual grid cell. Biome and interactable stay None until labeled/placed."""

    type: TileType
    position: Position
    biome: Optional[BiomeType] = None
    interactable: Optional[InteractableType] = None


# Integer codes used by type_array()
TILE_CODES = {
    TileType.WALL: 0,
    TileType.FLOOR: 1,
    TileType.VOID: 2,
}


@dataclass
class Grid:
    """
    2D grid of tiles, addressed tiles[y][x] (row-major).

    Every stage mutates tiles in place; use clone() before handing a grid
    to another stage.
    """

    width: int
    height: int
    tiles: List[List[Tile]] = field(default_factory=list)

    @classmethod
    def create(cls, width: int, height: int, fill_type: TileType = TileType.WALL) -> "Grid":
        """Create a grid filled with a single tile type."""
        tiles = [
            [Tile(type=fill_type, position=Position(x, y)) for x in range(width)]
            for y in range(height)
        ]
        return cls(width=width, height=height, tiles=tiles)

    def in_bounds(self, pos: Position) -> bool:
        return is_in_bounds(pos, self.width, self.height)

    def get_tile(self, pos: Position) -> Optional[Tile]:
        """Tile at pos, or None when out of bounds."""
        if pos.y < 0 or pos.y >= self.height or pos.x < 0 or pos.x >= self.width:
            return None
        return self.tiles[pos.y][pos.x]

    def set_tile(self, pos: Position, tile_type: TileType) -> bool:
        """Set the tile type at pos. Returns False when out of bounds."""
        tile = self.get_tile(pos)
        if tile is None:
            return False
        tile.type = tile_type
        return True

    def iter_tiles(self) -> Iterator[Tile]:
        """Iterate tiles in row-major order."""
        for row in self.tiles:
            yield from row

    def count_tiles(self, tile_type: TileType) -> int:
        return sum(1 for tile in self.iter_tiles() if tile.type == tile_type)

    def clone(self, reset_biomes: bool = False, reset_interactables: bool = False) -> "Grid":
        """
        Deep copy of the grid.

        Args:
            reset_biomes: Drop biome labels in the copy
            reset_interactables: Drop interactables in the copy

        Returns:
            New Grid sharing no tiles with this one
        """
        tiles = [
            [
                Tile(
                    type=tile.type,
                    position=Position(tile.position.x, tile.position.y),
                    biome=None if reset_biomes else tile.biome,
                    interactable=None if reset_interactables else tile.interactable,
                )
                for tile in row
            ]
            for row in self.tiles
        ]
        return Grid(width=self.width, height=self.height, tiles=tiles)

    def type_array(self) -> np.ndarray:
        """Tile types as an int8 (height, width) array using TILE_CODES."""
        codes = np.zeros((self.height, self.width), dtype=np.int8)
        for y, row in enumerate(self.tiles):
            for x, tile in enumerate(row):
                codes[y, x] = TILE_CODES[tile.type]
        return codes

    def to_rows(self) -> List[str]:
        """Compact text dump, one string per row: '#' wall, '.' floor, ' ' void."""
        symbols = {TileType.WALL: "#", TileType.FLOOR: ".", TileType.VOID: " "}
        return ["".join(symbols[tile.type] for tile in row) for row in self.tiles]


@dataclass
class PathNode:
    """Single step in the miner's path."""

    position: Position
    mining_action: MiningAction
    timestamp: int


@dataclass
class BiomePathNode:
    """Single conversion attempt made by a biome front."""

    position: Position
    biome_type: BiomeType
    action: BiomeAction
    cycle_number: int
    step_number: int
    timestamp: int


@dataclass
class ValidationResult:
    """Outcome of a post-generation validation pass. Never raised."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
