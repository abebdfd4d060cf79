"""
Spawn point placement: entries, exits and keys chosen by connectivity tier.

Placement order is fixed (exits, entries, keys) and every category shuffles
its own candidates with the shared RNG:
- Exits prefer dead ends (C1), falling back to C2
- Entries prefer hubs (C4), falling back to C3
- Keys draw from a mixed C3 + C2 pool

A key shortfall is fatal; an exit or entry shortfall only logs a warning.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

import structlog
from pydantic import BaseModel

from .connectivity import ConnectivityMap, analyze_connectivity
from .errors import ConfigurationError, ResourceExhaustionError
from .models import Grid, InteractableType, Position, ValidationResult
from .seeded_random import create_rng, shuffle_in_place

logger = structlog.get_logger()


@dataclass
class SpawnPointConfig:
    """Configuration for the spawn point placement stage."""

    entry_count: int
    exit_count: int
    key_count: int
    seed: Optional[int] = None


class SpawnPointStats(BaseModel):
    """Bucket sizes and the tier each placed marker came from."""

    c1_tiles: int
    c2_tiles: int
    c3_tiles: int
    c4_tiles: int

    entries_placed_on_c4: int = 0
    entries_placed_on_c3: int = 0

    exits_placed_on_c1: int = 0
    exits_placed_on_c2: int = 0

    keys_placed_on_c3: int = 0
    keys_placed_on_c2: int = 0


@dataclass
class SpawnPointResult:
    grid: Grid
    entries: List[Position]
    exits: List[Position]
    keys: List[Position]
    stats: SpawnPointStats
    seed: int = 0
    connectivity: ConnectivityMap = field(default_factory=dict)


def validate_spawn_point_config(
    config: SpawnPointConfig, connectivity: ConnectivityMap
) -> None:
    """
    Validate placement counts against the grid's connectivity buckets.

    Raises:
        ConfigurationError: A count below 1
        ResourceExhaustionError: Not enough C1+C2 tiles for exits or C3+C4 tiles for entries
    """
    if config.entry_count < 1:
        raise ConfigurationError("Must have at least 1 entry")

    if config.exit_count < 1:
        raise ConfigurationError("Must have at least 1 exit")

    if config.key_count < 1:
        raise ConfigurationError("Must have at least 1 key")

    c1, c2, c3, c4 = (len(connectivity[degree]) for degree in (1, 2, 3, 4))
    logger.info("Connectivity analysis", c1=c1, c2=c2, c3=c3, c4=c4)

    if c1 + c2 < config.exit_count:
        raise ResourceExhaustionError(
            f"Not enough isolated tiles for exits. "
            f"Need {config.exit_count}, found {c1 + c2} (C1+C2)"
        )

    if c4 + c3 < config.entry_count:
        raise ResourceExhaustionError(
            f"Not enough connected tiles for entries. "
            f"Need {config.entry_count}, found {c4 + c3} (C4+C3)"
        )

    # Approximate: entries and exits may not all come out of C2/C3
    available_for_keys = c2 + c3 - (config.entry_count + config.exit_count)
    if available_for_keys < config.key_count:
        logger.warning(
            "Might not have enough C2/C3 tiles for keys",
            needed=config.key_count,
            approximately_available=available_for_keys,
        )

    if config.key_count < config.exit_count:
        logger.warning(
            "Fewer keys than exits, recommend at least 1 key per exit",
            keys=config.key_count,
            exits=config.exit_count,
        )


def validate_spawn_point_placement(
    grid: Grid,
    entries: List[Position],
    exits: List[Position],
    keys: List[Position],
) -> ValidationResult:
    """Check the grid agrees with the returned lists and no position is shared."""
    errors = []

    counts = {kind: 0 for kind in InteractableType}
    for tile in grid.iter_tiles():
        if tile.interactable is not None:
            counts[tile.interactable] += 1

    for kind, placed, label in (
        (InteractableType.ENTRY, entries, "Entry"),
        (InteractableType.EXIT, exits, "Exit"),
        (InteractableType.KEY, keys, "Key"),
    ):
        if counts[kind] != len(placed):
            errors.append(
                f"{label} count mismatch: grid has {counts[kind]}, list has {len(placed)}"
            )

    all_positions = [*entries, *exits, *keys]
    if len(set(all_positions)) != len(all_positions):
        errors.append("Duplicate positions detected in spawn points")

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)


class SpawnPointPlacer:
    """Places entries, exits and keys on a biome-labeled grid."""

    def __init__(self, grid: Grid, config: SpawnPointConfig):
        self.connectivity = analyze_connectivity(grid)
        validate_spawn_point_config(config, self.connectivity)

        self.grid = grid
        self.config = config
        self.rng = create_rng(config.seed)
        self.used: Set[Position] = set()

    def _place_from(
        self,
        candidates: List[Position],
        kind: InteractableType,
        placed: List[Position],
        wanted: int,
    ) -> int:
        """
        Mark candidates in order until wanted markers exist.

        Returns:
            Number of markers placed from this candidate list
        """
        count = 0
        for pos in candidates:
            if len(placed) >= wanted:
                break
            if pos in self.used:
                continue

            tile = self.grid.get_tile(pos)
            if tile is None or tile.interactable is not None:
                continue

            tile.interactable = kind
            placed.append(pos)
            self.used.add(pos)
            count += 1
        return count

    def place(self) -> SpawnPointResult:
        logger.info("Starting spawn point placement", seed=self.rng.seed)
        stats = SpawnPointStats(
            c1_tiles=len(self.connectivity[1]),
            c2_tiles=len(self.connectivity[2]),
            c3_tiles=len(self.connectivity[3]),
            c4_tiles=len(self.connectivity[4]),
        )
        entries: List[Position] = []
        exits: List[Position] = []
        keys: List[Position] = []

        # 1. Exits: C1, then C2
        c1_tiles = list(self.connectivity[1])
        c2_tiles = list(self.connectivity[2])
        shuffle_in_place(c1_tiles, self.rng)
        shuffle_in_place(c2_tiles, self.rng)

        stats.exits_placed_on_c1 = self._place_from(
            c1_tiles, InteractableType.EXIT, exits, self.config.exit_count
        )
        if len(exits) < self.config.exit_count:
            logger.warning(
                "Not enough C1 tiles, using C2 tiles for remaining exits",
                c1_exits=stats.exits_placed_on_c1,
            )
            stats.exits_placed_on_c2 = self._place_from(
                c2_tiles, InteractableType.EXIT, exits, self.config.exit_count
            )
        if len(exits) < self.config.exit_count:
            logger.warning(
                "Placed fewer exits than requested",
                placed=len(exits),
                requested=self.config.exit_count,
            )

        # 2. Entries: C4, then C3
        c4_tiles = list(self.connectivity[4])
        c3_tiles = list(self.connectivity[3])
        shuffle_in_place(c4_tiles, self.rng)
        shuffle_in_place(c3_tiles, self.rng)

        stats.entries_placed_on_c4 = self._place_from(
            c4_tiles, InteractableType.ENTRY, entries, self.config.entry_count
        )
        if len(entries) < self.config.entry_count:
            logger.warning(
                "Not enough C4 tiles, using C3 tiles for remaining entries",
                c4_entries=stats.entries_placed_on_c4,
            )
            stats.entries_placed_on_c3 = self._place_from(
                c3_tiles, InteractableType.ENTRY, entries, self.config.entry_count
            )
        if len(entries) < self.config.entry_count:
            logger.warning(
                "Placed fewer entries than requested",
                placed=len(entries),
                requested=self.config.entry_count,
            )

        # 3. Keys: shuffled C3 + C2 pool, shuffled again
        key_tiles = [pos for pos in [*c3_tiles, *c2_tiles] if pos not in self.used]
        shuffle_in_place(key_tiles, self.rng)

        c3_set = set(self.connectivity[3])
        self._place_from(key_tiles, InteractableType.KEY, keys, self.config.key_count)
        stats.keys_placed_on_c3 = sum(1 for pos in keys if pos in c3_set)
        stats.keys_placed_on_c2 = len(keys) - stats.keys_placed_on_c3

        if len(keys) < self.config.key_count:
            raise ResourceExhaustionError(
                f"Could only place {len(keys)}/{self.config.key_count} keys"
            )

        validation = validate_spawn_point_placement(self.grid, entries, exits, keys)
        if not validation.is_valid:
            logger.error("Spawn point placement validation failed", errors=validation.errors)

        logger.info(
            "Spawn points placed",
            entries=len(entries),
            exits=len(exits),
            keys=len(keys),
        )

        return SpawnPointResult(
            grid=self.grid,
            entries=entries,
            exits=exits,
            keys=keys,
            stats=stats,
            seed=self.rng.seed,
            connectivity=self.connectivity,
        )


def place_spawn_points(grid: Grid, config: SpawnPointConfig) -> SpawnPointResult:
    """
    Place entries, exits and keys on a grid.

    Args:
        grid: Biome-labeled grid, mutated in place
        config: Spawn point configuration

    Returns:
        SpawnPointResult with the marked grid and the placed positions

    Raises:
        ConfigurationError: A count below 1
        ResourceExhaustionError: Not enough tiles for exits/entries, or for all keys
    """
    return SpawnPointPlacer(grid, config).place()
