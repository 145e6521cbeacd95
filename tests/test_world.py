"""Tests for generation parameters and world types."""

import pytest

from mapgen.core.errors import ConfigurationError
from mapgen.core.world import (
    PROFILES,
    WorldGenerationParams,
    WorldType,
    describe,
    get_profile,
    round_half_up,
)


class TestWorldType:
    """Test world type parsing."""

    @pytest.mark.parametrize("name", [t.value for t in WorldType])
    def test_exact_names(self, name):
        assert WorldType.parse(name).value == name

    @pytest.mark.parametrize("value", ["Foo", "earthlike", "ARCHIPELAGO", "", None, 3])
    def test_unknown_falls_back_to_earth_like(self, value):
        assert WorldType.parse(value) is WorldType.EARTH_LIKE

    def test_every_type_has_profile(self):
        assert set(PROFILES) == set(WorldType)

    def test_ice_age_is_colder(self):
        assert get_profile(WorldType.ICE_AGE_EARTH).temperature_bias < 0
        assert get_profile(WorldType.DESERT_MEDITERRANEAN).humidity_bias < 0


class TestWorldGenerationParams:
    """Test parameter validation."""

    def test_defaults(self):
        params = WorldGenerationParams.from_config({})
        assert params.world_type is WorldType.EARTH_LIKE
        assert params.terrain.total_provinces == 120
        assert params.width >= 1 and params.height >= 1

    def test_flat_config_is_nested(self):
        params = WorldGenerationParams.from_config(
            {
                "seed": 5,
                "width": 32,
                "height": 16,
                "world_type": "Archipelago",
                "total_provinces": 10,
                "island_density": 0.5,
                "global_temperature_offset": -3.0,
            }
        )
        assert params.seed == 5
        assert params.n_cells == 32 * 16
        assert params.world_type is WorldType.ARCHIPELAGO
        assert params.terrain.total_provinces == 10
        assert params.islands.island_density == 0.5
        assert params.climate.global_temperature_offset == -3.0

    def test_none_values_use_defaults(self):
        params = WorldGenerationParams.from_config({"world_type": None, "total_provinces": None})
        assert params.world_type is WorldType.EARTH_LIKE
        assert params.terrain.total_provinces == 120

    def test_unknown_world_type_is_not_an_error(self):
        params = WorldGenerationParams.from_config({"world_type": "Foo"})
        assert params.world_type is WorldType.EARTH_LIKE

    @pytest.mark.parametrize(
        "config",
        [
            {"width": 0},
            {"height": -4},
            {"total_provinces": 0},
            {"seed": -1},
            {"smooth_radius": -1},
            {"island_density": 1.5},
            {"mountain_compression": 2},
            {"elevation_power": 0},
            {"width": "wide"},
        ],
    )
    def test_invalid_config_raises(self, config):
        with pytest.raises(ConfigurationError):
            WorldGenerationParams.from_config(config)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            WorldGenerationParams.from_config({"width": 0})

    def test_params_are_frozen(self):
        params = WorldGenerationParams.from_config({})
        with pytest.raises(Exception):
            params.seed = 3

    def test_describe(self):
        params = WorldGenerationParams.from_config({"seed": 9, "total_provinces": 12})
        summary = describe(params)
        assert summary["seed"] == 9
        assert summary["total_provinces"] == 12
        assert summary["world_type"] == "EarthLike"
        assert describe(None) == {}


class TestRounding:
    """Test half-up rounding used for the province split."""

    @pytest.mark.parametrize(
        "value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (14.0, 14), (0.49, 0), (-0.5, -1)]
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected
