"""Tests for biomes classification module."""

import numpy as np
import pytest

from mapgen.core.biomes import (
    BIOME_NAMES,
    BiomeClassifier,
    BiomeOptions,
    BiomeType,
    assign_biomes,
    biome_statistics,
)
from mapgen.core.grid import GridConfig


def _uniform(shape, value):
    return np.full(shape, value, dtype=np.float32)


class TestBiomes:
    """Test biome classification."""

    @pytest.fixture
    def land(self):
        elevation = np.full((10, 10), 0.3, dtype=np.float32)
        elevation[2:8, 2:8] = 0.65
        return elevation

    def classify(self, elevation, temperature, humidity, options=None):
        grid = GridConfig(elevation.shape[1], elevation.shape[0])
        return BiomeClassifier(grid, elevation, temperature, humidity, options=options).classify_biomes()

    def test_biome_names_cover_all_codes(self):
        assert set(BIOME_NAMES) == set(BiomeType)

    def test_every_code_is_assignable(self, land):
        classifier = BiomeClassifier(
            GridConfig(10, 10), land, _uniform((10, 10), 10), _uniform((10, 10), 0.5)
        )
        overrides = {
            BiomeType.OCEAN,
            BiomeType.LAKE,
            BiomeType.WETLAND,
            BiomeType.GLACIER,
            BiomeType.MANGROVE,
            BiomeType.ALPINE,
        }
        from_matrix = {BiomeType(int(code)) for code in np.unique(classifier.biome_matrix)}
        assert from_matrix | overrides == set(BiomeType)

    def test_matrix_shape(self, land):
        classifier = BiomeClassifier(
            GridConfig(10, 10), land, _uniform((10, 10), 10), _uniform((10, 10), 0.5)
        )
        assert classifier.biome_matrix.shape == (6, 5)

    @pytest.mark.parametrize(
        "temperature,humidity,expected",
        [
            (-20, 0.1, BiomeType.GLACIER),
            (0, 0.1, BiomeType.TUNDRA),
            (0, 0.7, BiomeType.TAIGA),
            (10, 0.1, BiomeType.DESERT),
            (10, 0.3, BiomeType.TEMPERATE_GRASSLAND),
            (20, 0.3, BiomeType.MEDITERRANEAN),
            (20, 0.5, BiomeType.TEMPERATE_DECIDUOUS_FOREST),
            (30, 0.1, BiomeType.HOT_DESERT),
            (30, 0.3, BiomeType.SAVANNA),
            (30, 0.7, BiomeType.TROPICAL_RAINFOREST),
        ],
    )
    def test_matrix_lookup(self, land, temperature, humidity, expected):
        biomes = self.classify(land, _uniform(land.shape, temperature), _uniform(land.shape, humidity))
        # Interior land cell, away from the coast
        assert biomes[5, 5] == expected

    def test_water_biomes(self, land):
        land[4:6, 4:6] = 0.4  # Enclosed lake
        biomes = self.classify(land, _uniform(land.shape, 15), _uniform(land.shape, 0.5))
        assert biomes[0, 0] == BiomeType.OCEAN
        assert biomes[4, 4] == BiomeType.LAKE

    def test_frozen_water_is_glacier(self, land):
        biomes = self.classify(land, _uniform(land.shape, -30), _uniform(land.shape, 0.5))
        assert biomes[0, 0] == BiomeType.GLACIER

    def test_alpine_override(self, land):
        land[5, 5] = 0.95
        biomes = self.classify(land, _uniform(land.shape, 30), _uniform(land.shape, 0.5))
        assert biomes[5, 5] == BiomeType.ALPINE

    def test_wetland_on_wet_lowland(self, land):
        land[2:8, 2:8] = 0.51
        biomes = self.classify(land, _uniform(land.shape, 10), _uniform(land.shape, 0.9))
        assert biomes[5, 5] == BiomeType.WETLAND

    def test_mangrove_on_hot_wet_coast(self, land):
        options = BiomeOptions(wetland_threshold=1.1)
        biomes = self.classify(
            land, _uniform(land.shape, 30), _uniform(land.shape, 0.7), options=options
        )
        assert biomes[2, 2] == BiomeType.MANGROVE  # Coast
        assert biomes[5, 5] != BiomeType.MANGROVE  # Interior

    def test_total_over_random_inputs(self):
        """Every combination of inputs maps to a valid code."""
        rng = np.random.default_rng(0)
        elevation = rng.random((30, 30)).astype(np.float32)
        temperature = rng.uniform(-60, 60, (30, 30)).astype(np.float32)
        humidity = rng.random((30, 30)).astype(np.float32)
        biomes = assign_biomes(elevation, temperature, humidity)
        assert biomes.dtype == np.uint8
        assert np.all(np.isin(biomes, [int(b) for b in BiomeType]))

    def test_statistics(self, land):
        biomes = assign_biomes(land, _uniform(land.shape, 20), _uniform(land.shape, 0.5))
        stats = biome_statistics(biomes)
        assert sum(stats.values()) == 100
        assert stats["Ocean"] == 100 - 36
