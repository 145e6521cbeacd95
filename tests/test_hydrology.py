"""Tests for hydrology and river generation."""

import numpy as np
import pytest

from mapgen.core.biomes import BiomeType
from mapgen.core.errors import InvariantViolation
from mapgen.core.grid import GridConfig
from mapgen.core.hydrology import Hydrology, HydrologyOptions, generate_rivers


class TestHydrology:
    """Test flow directions, accumulation and river tracing."""

    @pytest.fixture
    def slope(self):
        """Land rising from a sea column on the west to a ridge on the east."""
        width, height = 20, 10
        elevation = np.tile(np.linspace(0.3, 0.9, width), (height, 1)).astype(np.float32)
        biomes = np.where(
            elevation > 0.5, BiomeType.TEMPERATE_RAINFOREST, BiomeType.OCEAN
        ).astype(np.uint8)
        return GridConfig(width, height), elevation, biomes

    def test_flow_directions_go_downhill(self, slope):
        grid, elevation, biomes = slope
        hydrology = Hydrology(grid, elevation, biomes)
        directions = hydrology.calculate_flow_directions()
        flat = elevation.ravel()
        for cell, target in enumerate(directions):
            if target != -1:
                assert flat[target] < flat[cell]

    def test_water_has_no_flow(self, slope):
        grid, elevation, biomes = slope
        directions = Hydrology(grid, elevation, biomes).calculate_flow_directions()
        assert np.all(directions.reshape(10, 20)[elevation <= 0.5] == -1)

    def test_flux_accumulates_downstream(self, slope):
        grid, elevation, biomes = slope
        hydrology = Hydrology(grid, elevation, biomes)
        flux = hydrology.simulate_water_flow().reshape(10, 20)
        land_columns = np.flatnonzero(elevation[5] > 0.5)
        # Lowest land column collects more than the ridge
        assert flux[5, land_columns[0]] > flux[5, land_columns[-1]]

    def test_rivers_reach_sea(self, slope):
        grid, elevation, biomes = slope
        river_map = generate_rivers(elevation, biomes)
        assert river_map.rivers
        for river in river_map.rivers:
            assert river.outlet in ("sea", "river")
            assert len(river.cells) >= HydrologyOptions().min_river_length
            heights = elevation.ravel()[river.cells]
            assert np.all(np.diff(heights) < 0)
            assert river.length > 0
        assert river_map.river_ids.shape == (10, 20)
        assert river_map.flux.shape == (10, 20)

    def test_tributaries_link_to_parents(self, slope):
        grid, elevation, biomes = slope
        river_map = generate_rivers(elevation, biomes)
        by_id = {river.id: river for river in river_map.rivers}
        for river in river_map.rivers:
            if river.outlet == "river":
                assert river.id in by_id[river.parent_id].tributaries

    def test_basin_pools_into_sink(self):
        """Land that slopes into a dry hollow ends its river in a sink."""
        ys, xs = np.indices((15, 15))
        elevation = (0.6 + 0.02 * np.hypot(xs - 7, ys - 7)).astype(np.float32)
        biomes = np.full((15, 15), BiomeType.TEMPERATE_RAINFOREST, dtype=np.uint8)
        river_map = generate_rivers(elevation, biomes)
        assert river_map.rivers
        assert all(river.outlet in ("sink", "river") for river in river_map.rivers)
        assert 7 * 15 + 7 in river_map.lake_sinks

    def test_frozen_enclosed_lake_is_lake_outlet(self):
        """Rivers draining into an ice-covered lake report a lake outlet."""
        ys, xs = np.indices((21, 21))
        elevation = (0.3 + 0.05 * np.hypot(xs - 10, ys - 10)).astype(np.float32)
        biomes = np.where(
            elevation > 0.5, BiomeType.TEMPERATE_RAINFOREST, BiomeType.GLACIER
        ).astype(np.uint8)
        river_map = generate_rivers(elevation, biomes)
        outlets = {river.outlet for river in river_map.rivers}
        assert "lake" in outlets
        assert outlets <= {"lake", "river"}
        for river in river_map.rivers:
            if river.outlet == "lake":
                assert elevation.ravel()[river.mouth_cell] <= 0.5

    def test_all_water_has_no_rivers(self):
        elevation = np.full((8, 8), 0.2, dtype=np.float32)
        biomes = np.full((8, 8), BiomeType.OCEAN, dtype=np.uint8)
        river_map = generate_rivers(elevation, biomes)
        assert river_map.rivers == []
        assert np.all(river_map.river_ids == 0)

    def test_non_downhill_step_is_invariant_violation(self, slope):
        grid, elevation, biomes = slope
        hydrology = Hydrology(grid, elevation, biomes)
        hydrology.calculate_flow_directions()
        hydrology.simulate_water_flow()
        hydrology.river_ids = np.zeros(grid.n_cells, dtype=np.int32)
        hydrology.flow_directions[5] = 6  # Uphill
        with pytest.raises(InvariantViolation):
            hydrology._trace_river_path(5)

    def test_single_cell(self):
        river_map = generate_rivers(
            np.array([[0.9]], dtype=np.float32), np.array([[BiomeType.TAIGA]], dtype=np.uint8)
        )
        assert river_map.rivers == []
