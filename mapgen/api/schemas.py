"""Request models of the HTTP API."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..utils.random import MAX_SEED


class HeightmapRequest(BaseModel):
    """Request for a bare heightmap with EarthLike defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    seed: int = Field(default=0, ge=0, le=MAX_SEED, description="World seed")
    width: Optional[int] = Field(default=None, ge=1, description="Grid width in cells")
    height: Optional[int] = Field(default=None, ge=1, description="Grid height in cells")


class WorldConfig(BaseModel):
    """
    World configuration sent by viewers.

    Accepts camelCase (``worldType``) and snake_case (``world_type``) keys.
    Missing fields use the defaults of the generation parameters.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    seed: int = Field(default=0, ge=0, le=MAX_SEED, description="World seed")
    world_type: Optional[str] = Field(
        default=None, description="World type name; unknown names fall back to EarthLike"
    )
    width: Optional[int] = Field(default=None, ge=1, description="Grid width in cells")
    height: Optional[int] = Field(default=None, ge=1, description="Grid height in cells")

    global_temperature_offset: float = Field(default=0.0, description="Offset in °C")
    global_humidity_offset: float = Field(default=0.0, description="Humidity offset")
    total_provinces: int = Field(default=120, ge=1, description="Target province count")
    elevation_power: float = Field(default=1.0, gt=0, description="Elevation curve exponent")
    smooth_radius: int = Field(default=1, ge=0, description="Smoothing kernel radius")
    island_density: float = Field(default=0.3, ge=0, le=1, description="Island density")
    min_island_size: int = Field(default=4, ge=0, description="Smallest land mass kept")
    polar_amplification: float = Field(default=1.0, ge=0, description="Polar cooling multiplier")
    climate_latitude_exponent: float = Field(
        default=1.0, gt=0, description="Shape of the latitude falloff"
    )
    mountain_compression: float = Field(
        default=0.3, ge=0, le=1, description="Compression of high elevations"
    )
    include_rivers: Optional[bool] = Field(default=None, description="Export the river layer")

    def generation_config(self, default_width: int, default_height: int) -> Dict[str, Any]:
        """Flat parameter mapping for ``WorldGenerationParams.from_config``."""
        config = self.model_dump(exclude={"include_rivers"})
        if config["width"] is None:
            config["width"] = default_width
        if config["height"] is None:
            config["height"] = default_height
        return config
