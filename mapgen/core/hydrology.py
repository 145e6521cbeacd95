"""
Hydrology system for river generation and water flow simulation.

This module implements:
- Steepest-descent flow directions
- Runoff accumulation driven by biome moisture
- River tracing from highland sources to the sea, other rivers or sinks
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np
import structlog

from .biomes import BiomeType
from .errors import InvariantViolation
from .features import Features, WaterType
from .grid import OFFSETS_8, GridConfig
from .world import SEA_LEVEL

logger = structlog.get_logger()

# Share of precipitation that becomes surface runoff, by biome
BIOME_RUNOFF: Dict[BiomeType, float] = {
    BiomeType.OCEAN: 0.0,
    BiomeType.LAKE: 0.0,
    BiomeType.WETLAND: 1.0,
    BiomeType.GLACIER: 0.3,
    BiomeType.TUNDRA: 0.3,
    BiomeType.TAIGA: 0.6,
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: 0.7,
    BiomeType.TEMPERATE_RAINFOREST: 1.0,
    BiomeType.TEMPERATE_GRASSLAND: 0.4,
    BiomeType.MEDITERRANEAN: 0.4,
    BiomeType.DESERT: 0.1,
    BiomeType.HOT_DESERT: 0.05,
    BiomeType.SAVANNA: 0.4,
    BiomeType.TROPICAL_SEASONAL_FOREST: 0.7,
    BiomeType.TROPICAL_RAINFOREST: 1.0,
    BiomeType.MANGROVE: 1.0,
    BiomeType.ALPINE: 0.5,
}


def _runoff_lookup() -> np.ndarray:
    """Runoff indexed by biome code."""
    lookup = np.zeros(max(int(b) for b in BiomeType) + 1, dtype=np.float64)
    for biome, runoff in BIOME_RUNOFF.items():
        lookup[biome] = runoff
    return lookup


@dataclass
class HydrologyOptions:
    """Hydrology calculation options."""

    source_min_elevation: float = 0.6  # Lowest elevation a river can start at
    wet_runoff_threshold: float = 0.9  # Runoff that makes a cell a source
    min_river_length: int = 3  # Shorter rivers are discarded


@dataclass
class River:
    """Represents a river with its properties."""

    id: int
    cells: List[int]  # Land cell indices from source to last land cell
    flow: float  # Accumulated flux at the last cell
    length: float  # River length in cells
    source_cell: int
    mouth_cell: int  # Water cell, joined river cell or sink cell
    outlet: str  # "sea", "lake", "river" or "sink"
    parent_id: Optional[int] = None
    tributaries: List[int] = field(default_factory=list)


@dataclass
class RiverMap:
    """River layer of a world."""

    rivers: List[River]
    river_ids: np.ndarray  # int32 grid, 0 = no river
    flow_directions: np.ndarray  # int32 grid of target cell, -1 = none
    flux: np.ndarray  # float32 grid of accumulated runoff
    lake_sinks: List[int]  # Cells where a river pooled without an outlet


class Hydrology:
    """Handles water flow simulation and river generation."""

    def __init__(
        self,
        grid: GridConfig,
        elevation: np.ndarray,
        biome_map: np.ndarray,
        options: Optional[HydrologyOptions] = None,
        sea_level: float = SEA_LEVEL,
    ):
        """
        Initialize hydrology system.

        Args:
            grid: Grid dimensions
            elevation: Heightmap grid in [0, 1]
            biome_map: Biome codes
            options: Hydrology calculation options
            sea_level: Land/water threshold
        """
        self.grid = grid
        self.elevation = grid.check_layer("heightmap", elevation).astype(np.float64).ravel()
        self.biomes = grid.check_layer("biomes", biome_map).ravel()
        self.options = options or HydrologyOptions()
        features = Features(grid, self.elevation.reshape(grid.shape), sea_level)
        self.water_type = features.classify_water().ravel()
        self.land = self.water_type == WaterType.LAND

        self.flow_directions = None
        self.water_flux = None
        self.rivers: List[River] = []
        self.river_ids = None
        self.lake_sinks: List[int] = []

    def calculate_flow_directions(self) -> np.ndarray:
        """
        Each land cell flows to its steepest lower 8-neighbour.

        Slope is the drop divided by the step length. Cells without a
        lower neighbour (local minima) and water cells get -1.
        """
        h, w = self.grid.shape
        heights = self.elevation.reshape(h, w)
        padded = np.pad(heights, 1, mode="constant", constant_values=np.inf)

        slopes = np.empty((len(OFFSETS_8), h, w))
        for k, (dx, dy) in enumerate(OFFSETS_8):
            neighbor = padded[1 + dy : 1 + dy + h, 1 + dx : 1 + dx + w]
            slopes[k] = (heights - neighbor) / math.hypot(dx, dy)

        best = np.argmax(slopes, axis=0)
        best_slope = np.take_along_axis(slopes, best[None], axis=0)[0]

        offsets = np.array(OFFSETS_8)
        rows, cols = np.indices((h, w))
        target = (rows + offsets[best, 1]) * w + (cols + offsets[best, 0])

        directions = np.where((best_slope > 0) & self.land.reshape(h, w), target, -1)
        self.flow_directions = directions.astype(np.int32).ravel()
        return self.flow_directions

    def simulate_water_flow(self) -> np.ndarray:
        """
        Accumulate biome runoff downstream, highest cells first.
        """
        if self.flow_directions is None:
            self.calculate_flow_directions()

        flux = np.where(self.land, _runoff_lookup()[self.biomes], 0.0)

        for cell in np.argsort(-self.elevation, kind="stable"):
            target = self.flow_directions[cell]
            if target != -1:
                flux[target] += flux[cell]

        self.water_flux = flux.astype(np.float32)

        logger.info(
            "Water flow simulation completed",
            max_flow=float(np.max(self.water_flux)) if self.water_flux.size else 0.0,
            total_flow=float(np.sum(self.water_flux)),
        )
        return self.water_flux

    def find_sources(self) -> List[int]:
        """Candidate river sources, highest first."""
        h, w = self.grid.shape
        heights = self.elevation.reshape(h, w)
        padded = np.pad(heights, 1, mode="constant", constant_values=-np.inf)
        local_max = np.ones((h, w), dtype=bool)
        for dx, dy in OFFSETS_8:
            local_max &= heights >= padded[1 + dy : 1 + dy + h, 1 + dx : 1 + dx + w]

        wet = _runoff_lookup()[self.biomes] >= self.options.wet_runoff_threshold

        candidates = (
            self.land
            & (self.elevation >= self.options.source_min_elevation)
            & (local_max.ravel() | wet)
            & (self.flow_directions != -1)
        )
        cells = np.flatnonzero(candidates)
        return cells[np.argsort(-self.elevation[cells], kind="stable")].tolist()

    def generate_rivers(self) -> List[River]:
        """
        Trace rivers from every source downhill.

        A river ends when it reaches water, joins an existing river as a
        tributary or pools in a local minimum.
        """
        logger.info("Generating rivers")

        if self.water_flux is None:
            self.simulate_water_flow()

        self.rivers = []
        self.lake_sinks = []
        self.river_ids = np.zeros(self.grid.n_cells, dtype=np.int32)

        for source in self.find_sources():
            if self.river_ids[source] != 0:
                continue

            path, mouth, outlet = self._trace_river_path(source)
            if len(path) < self.options.min_river_length:
                continue

            river_id = len(self.rivers) + 1
            parent_id = int(self.river_ids[mouth]) if outlet == "river" else None
            river = River(
                id=river_id,
                cells=path,
                flow=float(self.water_flux[path[-1]]),
                length=self._calculate_river_length(path),
                source_cell=path[0],
                mouth_cell=mouth,
                outlet=outlet,
                parent_id=parent_id,
            )
            self.river_ids[path] = river_id
            if parent_id is not None:
                self.rivers[parent_id - 1].tributaries.append(river_id)
            if outlet == "sink":
                self.lake_sinks.append(mouth)
            self.rivers.append(river)

        logger.info(
            "Rivers generated", count=len(self.rivers), lake_sinks=len(self.lake_sinks)
        )
        return self.rivers

    def _trace_river_path(self, start_cell: int):
        """
        Follow flow directions from a source.

        Returns:
            (land cells of the path, mouth cell, outlet kind)
        """
        path = [start_cell]
        current = start_cell

        while True:
            next_cell = int(self.flow_directions[current])

            if next_cell == -1:
                return path, current, "sink"
            if self.elevation[next_cell] >= self.elevation[current]:
                raise InvariantViolation(
                    "rivers", f"flow from cell {current} to {next_cell} is not downhill"
                )
            if not self.land[next_cell]:
                outlet = "lake" if self.water_type[next_cell] == WaterType.LAKE else "sea"
                return path, next_cell, outlet
            if self.river_ids[next_cell] != 0:
                return path, next_cell, "river"

            path.append(next_cell)
            current = next_cell
            if len(path) > self.grid.n_cells:
                raise InvariantViolation(
                    "rivers", f"river from cell {start_cell} exceeds {self.grid.n_cells} cells"
                )

    def _calculate_river_length(self, river_path: List[int]) -> float:
        """River length in cell units, diagonal steps counting sqrt(2)."""
        total_length = 0.0
        for a, b in zip(river_path, river_path[1:]):
            ax, ay = self.grid.xy(a)
            bx, by = self.grid.xy(b)
            total_length += math.hypot(ax - bx, ay - by)
        return total_length

    def river_map(self) -> RiverMap:
        if self.river_ids is None:
            self.generate_rivers()
        return RiverMap(
            rivers=self.rivers,
            river_ids=self.river_ids.reshape(self.grid.shape),
            flow_directions=self.flow_directions.reshape(self.grid.shape),
            flux=self.water_flux.reshape(self.grid.shape),
            lake_sinks=self.lake_sinks,
        )


def generate_rivers(
    heightmap,
    biome_map: np.ndarray,
    options: Optional[HydrologyOptions] = None,
    sea_level: float = SEA_LEVEL,
) -> RiverMap:
    """
    Extract rivers from a heightmap and biome map.

    Args:
        heightmap: Heightmap or elevation grid
        biome_map: Biome codes, same shape
        options: Hydrology options
        sea_level: Land/water threshold

    Returns:
        RiverMap with rivers, per-cell river ids, flow directions and flux
    """
    biome_map = np.asarray(biome_map)
    if biome_map.ndim != 2:
        biome_map = biome_map.reshape(1, -1)
    grid = GridConfig(biome_map.shape[1], biome_map.shape[0])

    hydrology = Hydrology(grid, heightmap, biome_map, options, sea_level)
    hydrology.calculate_flow_directions()
    hydrology.simulate_water_flow()
    hydrology.generate_rivers()
    return hydrology.river_map()
