"""Tests for water classification and feature detection."""

import numpy as np

from mapgen.core.features import WaterType, classify_water, detect_features, land_ratio


class TestWaterClassification:
    """Test land, sea and lake classification."""

    def test_sea_lake_and_land(self, island_elevation):
        water = classify_water(island_elevation)
        assert water.shape == (20, 20)
        assert water[0, 0] == WaterType.SEA
        assert water[9, 9] == WaterType.LAKE
        assert water[5, 5] == WaterType.LAND

    def test_every_cell_classified_once(self, island_elevation):
        water = classify_water(island_elevation)
        land = island_elevation > 0.5
        assert np.array_equal(water == WaterType.LAND, land)
        assert np.all(np.isin(water, [WaterType.LAND, WaterType.SEA, WaterType.LAKE]))

    def test_sea_level_itself_is_water(self):
        elevation = np.full((3, 3), 0.5, dtype=np.float32)
        assert np.all(classify_water(elevation) == WaterType.SEA)

    def test_diagonal_water_is_not_connected(self):
        """Water bodies only connect through shared edges."""
        elevation = np.full((5, 5), 0.8)
        elevation[0, 0] = 0.2  # Border water
        elevation[1, 1] = 0.2  # Diagonal neighbour, enclosed
        water = classify_water(elevation)
        assert water[0, 0] == WaterType.SEA
        assert water[1, 1] == WaterType.LAKE

    def test_single_cell(self):
        assert classify_water(np.array([[0.2]]))[0, 0] == WaterType.SEA
        assert classify_water(np.array([[0.9]]))[0, 0] == WaterType.LAND

    def test_land_ratio(self, island_elevation):
        water = classify_water(island_elevation)
        assert land_ratio(water) == (144 - 9) / 400


class TestFeatureDetection:
    """Test feature markup."""

    def test_features(self, island_elevation):
        features = detect_features(island_elevation)
        kinds = sorted(feature.type for feature in features)
        assert kinds == ["island", "lake", "ocean"]

        ocean = next(f for f in features if f.type == "ocean")
        assert ocean.border
        assert ocean.first_cell == 0
        assert ocean.cells == 400 - 144

        lake = next(f for f in features if f.type == "lake")
        assert lake.cells == 9
        assert not lake.border
        assert [f.id for f in features] == [1, 2, 3]
