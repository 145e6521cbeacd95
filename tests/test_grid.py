"""Tests for the cell grid."""

import numpy as np
import pytest

from mapgen.core.errors import ConfigurationError
from mapgen.core.grid import GridConfig, shifted_pairs
from mapgen.core.heightmap_generator import Heightmap


class TestGridConfig:
    """Test grid addressing and neighbourhoods."""

    def test_rejects_empty_grid(self):
        with pytest.raises(ConfigurationError):
            GridConfig(0, 10)

    def test_index_round_trip(self):
        grid = GridConfig(7, 3)
        assert grid.index(4, 2) == 18
        assert grid.xy(18) == (4, 2)
        assert grid.shape == (3, 7)
        assert grid.n_cells == 21

    def test_find_cell_clamps(self):
        grid = GridConfig(10, 5)
        assert grid.find_cell(-3, -3) == 0
        assert grid.find_cell(100, 100) == grid.n_cells - 1
        assert grid.find_cell(2.7, 1.2) == 12

    def test_corner_neighbors(self):
        grid = GridConfig(4, 4)
        assert sorted(grid.neighbors4(0)) == [1, 4]
        assert sorted(grid.neighbors8(0)) == [1, 4, 5]

    def test_interior_neighbors(self):
        grid = GridConfig(4, 4)
        assert len(list(grid.neighbors4(5))) == 4
        assert len(list(grid.neighbors8(5))) == 8

    def test_single_cell_has_no_neighbors(self):
        grid = GridConfig(1, 1)
        assert list(grid.neighbors8(0)) == []
        assert grid.border_mask().all()

    def test_border_mask(self):
        mask = GridConfig(5, 4).border_mask()
        assert mask.sum() == 5 * 2 + 2 * 2
        assert not mask[1:-1, 1:-1].any()

    def test_check_layer(self):
        grid = GridConfig(3, 2)
        assert grid.check_layer("flat", np.arange(6)).shape == (2, 3)
        heightmap = Heightmap(width=3, height=2, values=np.zeros((2, 3), dtype=np.float32))
        assert grid.check_layer("heightmap", heightmap).shape == (2, 3)
        with pytest.raises(ConfigurationError):
            grid.check_layer("bad", np.arange(5))


class TestShiftedPairs:
    """Test adjacent pair views."""

    def test_pairs_are_neighbors(self):
        values = np.arange(12).reshape(3, 4)
        horizontal, vertical = list(shifted_pairs(values))
        assert np.all(horizontal[1] - horizontal[0] == 1)
        assert np.all(vertical[1] - vertical[0] == 4)
        assert horizontal[0].size == 3 * 3
        assert vertical[0].size == 2 * 4
