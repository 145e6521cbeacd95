"""Tests for the climate module."""

import numpy as np
import pytest

from mapgen.core.alea_prng import AleaPRNG
from mapgen.core.climate import (
    Climate,
    ClimateOptions,
    calculate_humidity,
    generate_climate_maps,
)
from mapgen.core.grid import GridConfig


class TestClimate:
    """Test temperature, wind and humidity."""

    @pytest.fixture
    def flat_sea(self):
        return np.full((40, 30), 0.3, dtype=np.float32)

    @pytest.fixture
    def continent(self):
        """Land on the east half with a north-south ridge near its west coast."""
        elevation = np.full((40, 60), 0.3, dtype=np.float32)
        elevation[:, 30:] = 0.55
        elevation[:, 34:37] = 0.95
        return elevation

    def test_options_default_winds(self):
        options = ClimateOptions()
        assert len(options.winds) == 6

    def test_latitudes(self, flat_sea):
        climate = Climate(GridConfig(30, 40), flat_sea)
        latitudes = climate.latitudes()
        assert latitudes[0] > 0.9
        assert latitudes[-1] < -0.9
        assert np.allclose(latitudes, -latitudes[::-1])

    def test_equator_warmer_than_poles(self, flat_sea):
        climate = Climate(GridConfig(30, 40), flat_sea)
        temperature = climate.calculate_temperatures()
        assert temperature.shape == (40, 30)
        assert temperature[20, 0] > temperature[0, 0]
        assert temperature[20, 0] > temperature[-1, 0]

    def test_offset_shifts_uniformly(self, flat_sea):
        climate = Climate(GridConfig(30, 40), flat_sea)
        base = climate.calculate_temperatures()
        shifted = climate.calculate_temperatures(offset=-5)
        assert np.allclose(shifted - base, -5, atol=1e-4)

    def test_polar_amplification_cools_poles(self, flat_sea):
        climate = Climate(GridConfig(30, 40), flat_sea)
        base = climate.calculate_temperatures()
        amplified = climate.calculate_temperatures(polar_amplification=2.0)
        assert amplified[0, 0] < base[0, 0]

    def test_altitude_cools(self, continent):
        climate = Climate(GridConfig(60, 40), continent)
        temperature = climate.calculate_temperatures()
        assert temperature[20, 35] < temperature[20, 50]

    def test_winds_are_finite(self, continent):
        climate = Climate(GridConfig(60, 40), continent)
        wind = climate.calculate_winds(AleaPRNG("wind"))
        assert wind.u.shape == (40, 60)
        assert np.all(np.isfinite(wind.u)) and np.all(np.isfinite(wind.v))
        assert np.all(wind.speed >= 0)

    def test_humidity_bounds_and_coast(self, continent):
        climate = Climate(GridConfig(60, 40), continent)
        wind = climate.calculate_winds(AleaPRNG("wind"))
        humidity = climate.calculate_humidity(wind)
        assert humidity.min() >= 0 and humidity.max() <= 1
        # Water is wetter than deep inland
        assert humidity[20, 5] > humidity[20, 59]

    def test_humidity_offset_clamped(self, continent):
        climate = Climate(GridConfig(60, 40), continent)
        wind = climate.calculate_winds(AleaPRNG("wind"))
        assert np.all(climate.calculate_humidity(wind, offset=5.0) == 1.0)
        assert np.all(climate.calculate_humidity(wind, offset=-5.0) == 0.0)

    def test_all_land_has_no_coastal_moisture(self):
        elevation = np.full((10, 10), 0.7, dtype=np.float32)
        climate = Climate(GridConfig(10, 10), elevation)
        wind = climate.calculate_winds(AleaPRNG("dry"))
        humidity = climate.calculate_humidity(wind)
        assert humidity.max() == 0.0

    def test_stage_functions(self, continent):
        temperature, wind = generate_climate_maps(7, 60, 40, continent, temp_offset=1.0)
        again, wind_again = generate_climate_maps(7, 60, 40, continent, temp_offset=1.0)
        assert np.array_equal(temperature, again)
        assert np.array_equal(wind.u, wind_again.u)

        humidity = calculate_humidity(60, 40, continent, wind, humidity_offset=0.1)
        assert humidity.shape == (40, 60)

    def test_single_cell(self):
        elevation = np.array([[0.7]], dtype=np.float32)
        temperature, wind = generate_climate_maps(0, 1, 1, elevation)
        humidity = calculate_humidity(1, 1, elevation, wind)
        assert temperature.shape == (1, 1)
        assert 0 <= humidity[0, 0] <= 1
