"""
Climate calculation system for temperature, wind and humidity.

This module implements:
- Latitude-based temperature bands with polar amplification
- Altitude temperature drop
- Prevailing wind belts with orographic deflection
- Coastal and wind-advected humidity with rain shadows
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog
from scipy import ndimage

from ..utils.random import stage_prng
from .alea_prng import AleaPRNG
from .grid import GridConfig
from .world import SEA_LEVEL

logger = structlog.get_logger()


@dataclass
class ClimateOptions:
    """Climate calculation options."""

    # Temperature settings
    temperature_equator: float = 28.0  # °C at the equator
    temperature_pole: float = -25.0  # °C at either pole
    height_exponent: float = 1.5  # Exponent for altitude calculations
    max_altitude_km: float = 5.0  # Altitude of elevation 1.0
    temperature_lapse_rate: float = 6.5  # °C per km altitude drop

    # Wind system
    winds: List[int] = None  # Wind angles by latitude tier, north to south
    wind_tier_span: int = 30  # Degrees per wind tier
    wind_speed: float = 1.0
    wind_jitter_degrees: float = 10.0
    orographic_deflection: float = 8.0  # Slope multiplier for deflection

    # Humidity
    coastal_decay: float = 6.0  # Cells over which coastal moisture falls to 1/e
    coastal_weight: float = 0.45
    advected_weight: float = 0.55
    advection_steps: int = 48
    moisture_retention: float = 0.95  # Share of moisture kept per downwind step
    uphill_moisture_loss: float = 4.0  # Moisture lost per unit of elevation climbed
    altitude_drying: float = 0.3

    def __post_init__(self):
        if self.winds is None:
            # Direction the wind blows towards, in degrees counter-clockwise
            # from east
            self.winds = [
                225,  # Tier 0: Polar easterlies (NE to SW)
                45,  # Tier 1: Westerlies (SW to NE)
                225,  # Tier 2: Trade winds (NE to SW)
                135,  # Tier 3: Trade winds (SE to NW)
                315,  # Tier 4: Westerlies (NW to SE)
                135,  # Tier 5: Polar easterlies (SE to NW)
            ]


@dataclass
class WindField:
    """Per-cell wind vectors; u points east (+x), v points south (+y)."""

    u: np.ndarray
    v: np.ndarray
    speed: np.ndarray


def _gradient(elevation: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """(d/dy, d/dx) of a grid, zero along axes shorter than two cells."""
    gy = np.gradient(elevation, axis=0) if elevation.shape[0] > 1 else np.zeros_like(elevation)
    gx = np.gradient(elevation, axis=1) if elevation.shape[1] > 1 else np.zeros_like(elevation)
    return gy, gx


class Climate:
    """Handles temperature, wind and humidity calculations."""

    def __init__(
        self,
        grid: GridConfig,
        elevation: np.ndarray,
        options: Optional[ClimateOptions] = None,
        sea_level: float = SEA_LEVEL,
    ):
        """
        Initialize climate calculator.

        Args:
            grid: Grid dimensions
            elevation: Heightmap grid in [0, 1]
            options: Climate calculation options
            sea_level: Land/water threshold
        """
        self.grid = grid
        self.elevation = grid.check_layer("heightmap", elevation).astype(np.float64)
        self.options = options or ClimateOptions()
        self.sea_level = sea_level

        self.water = self.elevation <= sea_level
        # Relative height above sea level in [0, 1], zero on water
        self.relative_height = np.where(
            self.water, 0.0, (self.elevation - sea_level) / max(1 - sea_level, 1e-9)
        )

    def latitudes(self) -> np.ndarray:
        """Row-centre latitude in [-1, 1], north (top row) positive."""
        rows = np.arange(self.grid.height)
        return 1 - 2 * (rows + 0.5) / self.grid.height

    def calculate_temperatures(
        self,
        offset: float = 0.0,
        polar_amplification: float = 1.0,
        latitude_exponent: float = 1.0,
    ) -> np.ndarray:
        """
        Calculate temperature (°C) for each cell from latitude and altitude.

        Returns:
            float32 grid of shape (height, width)
        """
        coldness = np.abs(self.latitudes()) ** latitude_exponent
        span = self.options.temperature_equator - self.options.temperature_pole
        sea_level_temp = (
            self.options.temperature_equator
            - span * coldness * polar_amplification**coldness
        )

        altitude_drop = (
            self.relative_height**self.options.height_exponent
            * self.options.max_altitude_km
            * self.options.temperature_lapse_rate
        )

        temperatures = sea_level_temp[:, None] - altitude_drop + offset
        return temperatures.astype(np.float32)

    def calculate_winds(self, prng: AleaPRNG) -> WindField:
        """
        Prevailing wind per cell.

        Each row takes the direction of its latitude tier plus a small
        seeded jitter. Slopes remove the uphill part of the wind and slow it.
        """
        latitude_degrees = self.latitudes() * 90
        tiers = np.clip(
            ((90 - latitude_degrees) // self.options.wind_tier_span).astype(int),
            0,
            len(self.options.winds) - 1,
        )
        jitter = self.options.wind_jitter_degrees
        angles = np.array(
            [self.options.winds[tier] + prng.uniform(-jitter, jitter) for tier in tiers]
        )
        radians = np.deg2rad(angles)

        u = np.repeat(np.cos(radians)[:, None], self.grid.width, axis=1)
        v = np.repeat(-np.sin(radians)[:, None], self.grid.width, axis=1)

        gy, gx = _gradient(self.elevation)
        slope = np.hypot(gx, gy)
        safe = np.where(slope > 0, slope, 1.0)
        nx, ny = gx / safe, gy / safe

        uphill = np.maximum(u * nx + v * ny, 0.0)
        strength = np.clip(slope * self.options.orographic_deflection, 0.0, 1.0)
        u = u - strength * uphill * nx
        v = v - strength * uphill * ny

        slowdown = 1 - np.clip(slope * self.options.orographic_deflection, 0.0, 0.8)
        speed = np.hypot(u, v) * slowdown * self.options.wind_speed

        norm = np.hypot(u, v)
        safe_norm = np.where(norm > 0, norm, 1.0)
        u = np.where(norm > 0, u / safe_norm * speed, 0.0)
        v = np.where(norm > 0, v / safe_norm * speed, 0.0)

        return WindField(
            u=u.astype(np.float32), v=v.astype(np.float32), speed=speed.astype(np.float32)
        )

    def _coastal_moisture(self) -> np.ndarray:
        if not self.water.any():
            return np.zeros(self.grid.shape)
        distance = ndimage.distance_transform_edt(~self.water)
        return np.exp(-distance / self.options.coastal_decay)

    def _upwind_cells(self, wind: WindField) -> Tuple[np.ndarray, np.ndarray]:
        """Row and column of the cell each cell receives its air from."""
        u = wind.u.astype(np.float64)
        v = wind.v.astype(np.float64)
        norm = np.hypot(u, v)
        safe = np.where(norm > 0, norm, 1.0)
        step_x = np.where(norm > 0, np.rint(u / safe), 0).astype(int)
        step_y = np.where(norm > 0, np.rint(v / safe), 0).astype(int)

        rows, cols = np.indices(self.grid.shape)
        up_rows = np.clip(rows - step_y, 0, self.grid.height - 1)
        up_cols = np.clip(cols - step_x, 0, self.grid.width - 1)
        return up_rows, up_cols

    def _advected_moisture(self, wind: WindField) -> np.ndarray:
        """
        Carry moisture downwind from water cells.

        Every step a cell takes the moisture of its upwind cell, keeps
        ``moisture_retention`` of it and loses more for every unit of
        elevation climbed, which leaves rain shadows behind ridges.
        """
        up_rows, up_cols = self._upwind_cells(wind)
        climb = np.maximum(self.elevation - self.elevation[up_rows, up_cols], 0.0)
        source = self.water.astype(np.float64)

        moisture = source.copy()
        for _ in range(self.options.advection_steps):
            carried = (
                moisture[up_rows, up_cols] * self.options.moisture_retention
                - climb * self.options.uphill_moisture_loss
            )
            moisture = np.maximum(source, np.clip(carried, 0.0, 1.0))
        return moisture

    def calculate_humidity(self, wind: WindField, offset: float = 0.0) -> np.ndarray:
        """
        Relative humidity in [0, 1] for each cell.

        Returns:
            float32 grid of shape (height, width)
        """
        humidity = (
            self.options.coastal_weight * self._coastal_moisture()
            + self.options.advected_weight * self._advected_moisture(wind)
            - self.options.altitude_drying * self.relative_height
            + offset
        )
        return np.clip(humidity, 0.0, 1.0).astype(np.float32)


def generate_climate_maps(
    seed: int,
    width: int,
    height: int,
    heightmap,
    temp_offset: float = 0.0,
    polar_amplification: float = 1.0,
    latitude_exponent: float = 1.0,
    sea_level: float = SEA_LEVEL,
    options: Optional[ClimateOptions] = None,
) -> Tuple[np.ndarray, WindField]:
    """
    Generate temperature and wind layers.

    Args:
        seed: World seed
        width: Grid width
        height: Grid height
        heightmap: Heightmap or elevation grid
        temp_offset: Global temperature offset in °C
        polar_amplification: Multiplier on polar cooling
        latitude_exponent: Shape of the latitude falloff
        sea_level: Land/water threshold
        options: Climate options

    Returns:
        (temperature grid, wind field)
    """
    climate = Climate(GridConfig(width, height), heightmap, options, sea_level)

    temperatures = climate.calculate_temperatures(
        temp_offset, polar_amplification, latitude_exponent
    )
    wind = climate.calculate_winds(stage_prng(seed, "climate"))

    logger.info(
        "Climate maps generated",
        min_temperature=round(float(temperatures.min()), 1),
        max_temperature=round(float(temperatures.max()), 1),
        mean_wind_speed=round(float(wind.speed.mean()), 3),
    )
    return temperatures, wind


def calculate_humidity(
    width: int,
    height: int,
    heightmap,
    wind: WindField,
    sea_level: float = SEA_LEVEL,
    humidity_offset: float = 0.0,
    options: Optional[ClimateOptions] = None,
) -> np.ndarray:
    """Humidity layer from elevation and wind."""
    climate = Climate(GridConfig(width, height), heightmap, options, sea_level)
    humidity = climate.calculate_humidity(wind, humidity_offset)

    logger.info("Humidity calculated", mean_humidity=round(float(humidity.mean()), 3))
    return humidity
