"""
World generation pipeline.

Runs every stage in order, from elevation to named regions, and gathers
the layers into a ``WorldResult``:

1. Heightmap
2. Temperature and wind, then humidity
3. Biomes
4. Water classification
5. Rivers
6. Provinces
7. Province graph
8. Regions
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import structlog

from .biomes import BiomeType, assign_biomes
from .climate import WindField, calculate_humidity, generate_climate_maps
from .errors import InvariantViolation
from .features import WaterType, classify_water, land_ratio
from .heightmap_generator import Heightmap, generate_heightmap
from .hydrology import RiverMap, generate_rivers
from .province_graph import ProvinceGraph, build_province_graph
from .provinces import (
    Province,
    generate_province_seeds,
    generate_provinces_from_seeds,
    split_province_counts,
)
from .regions import Region, group_provinces_into_regions, province_to_region_index
from .world import SEA_LEVEL, WorldGenerationParams, describe

logger = structlog.get_logger()


@dataclass
class PipelineOptions:
    """Options that shape the pipeline output rather than the world."""

    region_target_size: int = 8
    include_rivers: bool = False  # Export the river layer
    validate: bool = True  # Check output invariants after every run


@dataclass
class WorldResult:
    """Every layer of a generated world."""

    params: WorldGenerationParams
    options: PipelineOptions
    heightmap: Heightmap
    temperature: np.ndarray
    wind: WindField
    humidity: np.ndarray
    biomes: np.ndarray
    water: np.ndarray
    rivers: RiverMap
    provinces: List[Province]
    pixel_to_id: np.ndarray
    graph: ProvinceGraph
    regions: List[Region]
    province_to_region: np.ndarray
    region_ids: np.ndarray
    land_ratio: float

    @property
    def width(self) -> int:
        return self.params.width

    @property
    def height(self) -> int:
        return self.params.height


@contextmanager
def _stage(name: str):
    start = time.perf_counter()
    logger.debug("Stage started", stage=name)
    yield
    logger.info(
        "Stage completed", stage=name, elapsed_ms=round((time.perf_counter() - start) * 1000, 2)
    )


def generate_world(
    params: WorldGenerationParams, options: Optional[PipelineOptions] = None
) -> WorldResult:
    """
    Generate a complete world.

    Args:
        params: Validated generation parameters
        options: Pipeline options

    Returns:
        WorldResult with every layer

    Raises:
        InvariantViolation: if a stage breaks one of its guarantees
    """
    options = options or PipelineOptions()
    profile = params.profile
    width, height, seed = params.width, params.height, params.seed

    logger.info("Generating world", **describe(params))
    start = time.perf_counter()

    with _stage("heightmap"):
        heightmap = generate_heightmap(
            seed,
            width,
            height,
            params.world_type,
            params.islands.island_density,
            params.terrain,
            params.islands.min_island_size,
        )

    with _stage("climate"):
        temperature, wind = generate_climate_maps(
            seed,
            width,
            height,
            heightmap,
            temp_offset=params.climate.global_temperature_offset + profile.temperature_bias,
            polar_amplification=(
                params.climate.polar_amplification * profile.polar_amplification_factor
            ),
            latitude_exponent=params.climate.climate_latitude_exponent,
            sea_level=SEA_LEVEL,
        )
        humidity = calculate_humidity(
            width,
            height,
            heightmap,
            wind,
            sea_level=SEA_LEVEL,
            humidity_offset=params.climate.global_humidity_offset + profile.humidity_bias,
        )

    with _stage("biomes"):
        biomes = assign_biomes(heightmap, temperature, humidity, SEA_LEVEL)

    with _stage("water"):
        water = classify_water(heightmap, SEA_LEVEL)
        ratio = land_ratio(water)

    with _stage("rivers"):
        rivers = generate_rivers(heightmap, biomes, sea_level=SEA_LEVEL)

    with _stage("provinces"):
        land_cells = int(np.count_nonzero(water == WaterType.LAND))
        num_land, num_sea = split_province_counts(
            params.terrain.total_provinces, land_cells, water.size - land_cells
        )
        seeds = generate_province_seeds(heightmap, biomes, water, num_land, num_sea, seed)
        provinces, pixel_to_id = generate_provinces_from_seeds(heightmap, biomes, water, seeds)

    with _stage("province_graph"):
        graph = build_province_graph(provinces, pixel_to_id, width, height)

    with _stage("regions"):
        regions = group_provinces_into_regions(
            provinces, graph, options.region_target_size, seed=seed
        )
        province_to_region = province_to_region_index(regions, len(provinces))
        region_ids = province_to_region[pixel_to_id]

    result = WorldResult(
        params=params,
        options=options,
        heightmap=heightmap,
        temperature=temperature,
        wind=wind,
        humidity=humidity,
        biomes=biomes,
        water=water,
        rivers=rivers,
        provinces=provinces,
        pixel_to_id=pixel_to_id,
        graph=graph,
        regions=regions,
        province_to_region=province_to_region,
        region_ids=region_ids,
        land_ratio=ratio,
    )

    if options.validate:
        validate_world(result)

    logger.info(
        "World generated",
        seed=seed,
        provinces=len(provinces),
        regions=len(regions),
        rivers=len(rivers.rivers),
        land_ratio=round(ratio, 4),
        elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return result


def validate_world(result: WorldResult) -> None:
    """
    Check the invariants every generated world must hold.

    Raises:
        InvariantViolation: naming the first broken invariant
    """
    shape = (result.height, result.width)
    elevation = result.heightmap.values

    if elevation.shape != shape or not np.all((elevation >= 0) & (elevation <= 1)):
        raise InvariantViolation("heightmap", "elevation outside [0, 1] or wrong shape")

    land = result.water == WaterType.LAND
    if np.any(land != (elevation > SEA_LEVEL)):
        raise InvariantViolation("water", "water classification disagrees with elevation")

    valid_biomes = np.array([int(b) for b in BiomeType])
    if not np.all(np.isin(result.biomes, valid_biomes)):
        raise InvariantViolation("biomes", "unknown biome code")

    count = len(result.provinces)
    ids = result.pixel_to_id
    if ids.shape != shape or ids.min() < 0 or ids.max() >= count:
        raise InvariantViolation("provinces", "pixel_to_id does not cover the grid")

    areas = np.bincount(ids.ravel(), minlength=count)
    for province in result.provinces:
        if areas[province.id] != province.area or province.area <= 0:
            raise InvariantViolation("provinces", f"province {province.id} area mismatch")

    for a, b in result.graph.edges():
        if a == b:
            raise InvariantViolation("province_graph", f"self loop on {a}")

    if np.any(result.province_to_region < 0):
        raise InvariantViolation("regions", "province without region")
    for region in result.regions:
        if not result.graph.is_connected(region.province_ids):
            raise InvariantViolation("regions", f"region {region.id} is not connected")
    names = [region.name for region in result.regions]
    if len(set(names)) != len(names):
        raise InvariantViolation("regions", "duplicate region names")
