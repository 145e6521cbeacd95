"""
World generation parameters and world-type profiles.

The parameter models are frozen pydantic models: once a pipeline run has
built its ``WorldGenerationParams`` nothing can change them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..utils.random import MAX_SEED
from .errors import ConfigurationError

# Elevation threshold separating land from water
SEA_LEVEL = 0.5

# Share of the province budget assigned to land
LAND_PROVINCE_SHARE = 0.7


class WorldType(str, Enum):
    """Large-scale world layouts."""

    EARTH_LIKE = "EarthLike"
    SUPERCONTINENT = "Supercontinent"
    ARCHIPELAGO = "Archipelago"
    MEDITERRANEAN = "Mediterranean"
    ICE_AGE_EARTH = "IceAgeEarth"
    DESERT_MEDITERRANEAN = "DesertMediterranean"

    @classmethod
    def parse(cls, value: Any) -> WorldType:
        """
        Parse a world type name.

        Matching is exact and case-sensitive. Anything unrecognised,
        including None, falls back to EarthLike.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.EARTH_LIKE


@dataclass(frozen=True)
class WorldProfile:
    """Generator tuning for one world type."""

    template: str
    noise_frequency: float  # Noise lattice cells across the longer map side
    noise_octaves: int
    noise_amplitude: float  # Height units on the 0-100 scale
    temperature_bias: float = 0.0
    humidity_bias: float = 0.0
    polar_amplification_factor: float = 1.0


PROFILES: Dict[WorldType, WorldProfile] = {
    WorldType.EARTH_LIKE: WorldProfile(
        template="continents", noise_frequency=6.0, noise_octaves=4, noise_amplitude=12.0
    ),
    WorldType.SUPERCONTINENT: WorldProfile(
        template="pangea", noise_frequency=4.0, noise_octaves=4, noise_amplitude=10.0
    ),
    WorldType.ARCHIPELAGO: WorldProfile(
        template="archipelago", noise_frequency=10.0, noise_octaves=3, noise_amplitude=16.0
    ),
    WorldType.MEDITERRANEAN: WorldProfile(
        template="mediterranean", noise_frequency=7.0, noise_octaves=4, noise_amplitude=10.0
    ),
    WorldType.ICE_AGE_EARTH: WorldProfile(
        template="continents",
        noise_frequency=6.0,
        noise_octaves=4,
        noise_amplitude=12.0,
        temperature_bias=-8.0,
        humidity_bias=-0.1,
        polar_amplification_factor=1.5,
    ),
    WorldType.DESERT_MEDITERRANEAN: WorldProfile(
        template="mediterranean",
        noise_frequency=7.0,
        noise_octaves=4,
        noise_amplitude=10.0,
        temperature_bias=4.0,
        humidity_bias=-0.25,
    ),
}


def get_profile(world_type: WorldType) -> WorldProfile:
    """Profile for a world type."""
    return PROFILES[WorldType.parse(world_type)]


class TerrainSettings(BaseModel):
    """Terrain shaping parameters."""

    model_config = ConfigDict(frozen=True)

    elevation_power: float = Field(
        default=1.0, gt=0, description="Exponent shaping the elevation curve"
    )
    smooth_radius: int = Field(default=1, ge=0, description="Smoothing kernel radius")
    mountain_compression: float = Field(
        default=0.3, ge=0, le=1, description="Compression of high elevations"
    )
    total_provinces: int = Field(default=120, ge=1, description="Target province count")


class IslandSettings(BaseModel):
    """Island seeding parameters."""

    model_config = ConfigDict(frozen=True)

    island_density: float = Field(
        default=0.3, ge=0, le=1, description="Density of scattered islands"
    )
    min_island_size: int = Field(
        default=4, ge=0, description="Smallest land mass kept, in cells"
    )


class ClimateSettings(BaseModel):
    """Global climate parameters."""

    model_config = ConfigDict(frozen=True)

    global_temperature_offset: float = Field(default=0.0, description="Offset in °C")
    global_humidity_offset: float = Field(default=0.0, description="Humidity offset")
    polar_amplification: float = Field(
        default=1.0, ge=0, description="Multiplier on polar cooling"
    )
    climate_latitude_exponent: float = Field(
        default=1.0, gt=0, description="Shape of the latitude falloff"
    )


class WorldGenerationParams(BaseModel):
    """Complete, validated input of one pipeline run."""

    model_config = ConfigDict(frozen=True)

    seed: int = Field(default=0, ge=0, le=MAX_SEED, description="World seed")
    width: int = Field(default=256, ge=1, description="Grid width in cells")
    height: int = Field(default=128, ge=1, description="Grid height in cells")
    world_type: WorldType = Field(default=WorldType.EARTH_LIKE)
    terrain: TerrainSettings = Field(default_factory=TerrainSettings)
    islands: IslandSettings = Field(default_factory=IslandSettings)
    climate: ClimateSettings = Field(default_factory=ClimateSettings)

    @field_validator("world_type", mode="before")
    @classmethod
    def _parse_world_type(cls, value: Any) -> WorldType:
        return WorldType.parse(value)

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    @property
    def profile(self) -> WorldProfile:
        return get_profile(self.world_type)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> WorldGenerationParams:
        """
        Build parameters from a flat configuration mapping.

        Accepts the flat field names of the host configuration
        (``total_provinces``, ``island_density``, ...) and nests them into
        the settings groups. Missing fields use the defaults.

        Raises:
            ConfigurationError: if any field is malformed or out of range
        """
        terrain_keys = TerrainSettings.model_fields.keys()
        island_keys = IslandSettings.model_fields.keys()
        climate_keys = ClimateSettings.model_fields.keys()

        top: Dict[str, Any] = {}
        terrain: Dict[str, Any] = {}
        islands: Dict[str, Any] = {}
        climate: Dict[str, Any] = {}
        for key, value in config.items():
            if value is None:
                continue
            if key in terrain_keys:
                terrain[key] = value
            elif key in island_keys:
                islands[key] = value
            elif key in climate_keys:
                climate[key] = value
            else:
                top[key] = value

        try:
            return cls(
                **top,
                terrain=TerrainSettings(**terrain),
                islands=IslandSettings(**islands),
                climate=ClimateSettings(**climate),
            )
        except (ValidationError, TypeError) as e:
            raise ConfigurationError(f"Invalid world configuration: {e}") from e


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def describe(params: Optional[WorldGenerationParams]) -> Dict[str, Any]:
    """Compact key-value summary for log events."""
    if params is None:
        return {}
    return {
        "seed": params.seed,
        "width": params.width,
        "height": params.height,
        "world_type": params.world_type.value,
        "total_provinces": params.terrain.total_provinces,
    }
