"""End-to-end tests for the three-stage pipeline."""

import pytest

from py_castlerun.config import Settings
from py_castlerun.core.biomes import BiomeConfig, BiomeDefinition
from py_castlerun.core.errors import ConfigurationError
from py_castlerun.core.mining import MiningConfig
from py_castlerun.core.models import BiomeType, InteractableType, TileType
from py_castlerun.core.pipeline import default_mining_config, generate_map
from py_castlerun.core.spawn_points import SpawnPointConfig


class TestGenerateMap:
    """Test stage hand-off and final map contents."""

    @pytest.fixture
    def configs(self):
        mining = MiningConfig(
            width=30,
            height=30,
            target_percentage=30,
            break_wall_weight=5,
            backtrack_weight=1,
            apply_void=True,
            seed=42,
        )
        biomes = BiomeConfig(
            biomes=[BiomeDefinition(BiomeType.WATER, 2), BiomeDefinition(BiomeType.FOREST, 1)],
            floor_conversion_chance=0.6,
            wall_conversion_chance=0.4,
            seed=3,
        )
        spawn_points = SpawnPointConfig(entry_count=1, exit_count=1, key_count=1, seed=5)
        return mining, biomes, spawn_points

    @pytest.fixture
    def result(self, configs):
        return generate_map(*configs)

    def test_stage_grids_are_separate(self, result):
        assert result.mining.grid is not result.biomes.grid
        assert result.biomes.grid is not result.spawn_points.grid
        assert result.grid is result.spawn_points.grid

    def test_topology_preserved(self, result):
        rows = result.mining.grid.to_rows()

        assert result.biomes.grid.to_rows() == rows
        assert result.spawn_points.grid.to_rows() == rows

    def test_earlier_stages_untouched(self, result):
        assert all(tile.biome is None for tile in result.mining.grid.iter_tiles())
        assert all(tile.interactable is None for tile in result.biomes.grid.iter_tiles())

    def test_full_biome_coverage(self, result):
        for tile in result.grid.iter_tiles():
            if tile.type == TileType.VOID:
                assert tile.biome is None
            else:
                assert tile.biome in (BiomeType.WATER, BiomeType.FOREST)

    def test_spawn_points_on_floor(self, result):
        markers = [tile for tile in result.grid.iter_tiles() if tile.interactable is not None]

        assert len(markers) == 3
        assert {tile.interactable for tile in markers} == set(InteractableType)
        assert all(tile.type == TileType.FLOOR for tile in markers)

    def test_reproducible(self, configs, result):
        again = generate_map(*configs)

        assert again.grid.to_rows() == result.grid.to_rows()
        assert [t.biome for t in again.grid.iter_tiles()] == [t.biome for t in result.grid.iter_tiles()]
        assert again.spawn_points.entries == result.spawn_points.entries
        assert again.spawn_points.exits == result.spawn_points.exits
        assert again.spawn_points.keys == result.spawn_points.keys

    def test_errors_propagate(self, configs):
        mining, biomes, spawn_points = configs
        mining.target_percentage = 90
        with pytest.raises(ConfigurationError):
            generate_map(mining, biomes, spawn_points)


class TestDefaultMiningConfig:
    def test_from_settings(self):
        config = default_mining_config(Settings(default_width=64, default_seed=8))

        assert config.width == 64
        assert config.height == 50
        assert config.target_percentage == 30.0
        assert config.break_wall_weight == 5
        assert config.backtrack_weight == 1
        assert config.seed == 8

    def test_overrides(self):
        config = default_mining_config(Settings(), width=20, apply_void=True)

        assert config.width == 20
        assert config.apply_void is True
