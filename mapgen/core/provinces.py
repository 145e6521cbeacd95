"""
Province partitioning.

Province seeds are scattered over land and water with a minimum spacing,
then every seed grows at once over the grid with a cost-based expansion
until each cell belongs to exactly one province.
"""

import heapq
import math
from typing import List, Optional, Tuple

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field

from ..utils.random import stage_prng
from .alea_prng import AleaPRNG
from .biomes import BiomeType
from .errors import ConfigurationError, InvariantViolation
from .features import WaterType
from .grid import GridConfig, shifted_pairs
from .world import LAND_PROVINCE_SHARE, round_half_up

logger = structlog.get_logger()


class ProvinceOptions(BaseModel):
    """Province generation options."""

    spacing_factor: float = Field(
        default=0.75, description="Seed spacing relative to sqrt(cells per seed)"
    )
    spacing_relaxation: float = Field(
        default=0.9, description="Spacing multiplier applied when placement stalls"
    )
    attempts_per_seed: int = Field(
        default=30, description="Failed draws before the spacing is relaxed"
    )
    elevation_cost: float = Field(
        default=20.0, description="Growth cost per unit of elevation climbed"
    )
    mountain_cost: float = Field(default=4.0, description="Extra cost of entering alpine cells")


class ProvinceSeed(BaseModel):
    """Starting cell of a province."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Province id")
    cell: int = Field(description="Seed cell index")
    is_land: bool = Field(description="Whether the seed sits on land")


class Province(BaseModel):
    """Data structure for a political province."""

    id: int = Field(description="Dense province identifier")
    is_land: bool = Field(description="Land or sea province")
    coastal: bool = Field(default=False, description="Borders the other land/water class")
    area: int = Field(description="Number of cells")
    center: Tuple[float, float] = Field(description="Centroid (x, y) in grid space")
    seed_cell: int = Field(description="Cell the province grew from")


def split_province_counts(total: int, land_cells: int, water_cells: int) -> Tuple[int, int]:
    """
    Split a province budget between land and sea.

    Land gets ``round_half_up(total * 0.7)``, sea the remainder. A class
    with fewer cells than provinces hands the excess to the other class,
    and the total never exceeds the number of cells.

    Returns:
        (num_land, num_sea)
    """
    if total < 1:
        raise ConfigurationError(f"total_provinces must be at least 1, got {total}")

    total = min(total, land_cells + water_cells)
    num_land = round_half_up(total * LAND_PROVINCE_SHARE)
    num_sea = total - num_land

    if num_land > land_cells:
        num_sea += num_land - land_cells
        num_land = land_cells
    if num_sea > water_cells:
        num_land += num_sea - water_cells
        num_sea = water_cells

    return num_land, num_sea


class ProvinceGenerator:
    """Generates provinces from seeds by cost-based expansion."""

    def __init__(
        self,
        grid: GridConfig,
        elevation: np.ndarray,
        biome_map: np.ndarray,
        water_type: np.ndarray,
        options: Optional[ProvinceOptions] = None,
        prng: Optional[AleaPRNG] = None,
    ):
        """
        Initialize province generator.

        Args:
            grid: Grid dimensions
            elevation: Heightmap grid in [0, 1]
            biome_map: Biome codes
            water_type: WaterType codes
            options: Province generation options
            prng: Random number generator for seed placement
        """
        self.grid = grid
        self.elevation = grid.check_layer("heightmap", elevation).astype(np.float64).ravel()
        self.biomes = grid.check_layer("biomes", biome_map).ravel()
        self.land = grid.check_layer("water_type", water_type).ravel() == WaterType.LAND
        self.options = options or ProvinceOptions()
        self.prng = prng or AleaPRNG("provinces")

    def place_seeds(self, num_land: int, num_sea: int) -> List[ProvinceSeed]:
        """
        Place land seeds on land cells and sea seeds on water cells.

        Land seeds get ids 0..num_land-1, sea seeds follow.
        """
        land_cells = np.flatnonzero(self.land)
        water_cells = np.flatnonzero(~self.land)

        if num_land > len(land_cells) or num_sea > len(water_cells):
            raise ConfigurationError(
                f"Cannot place {num_land} land and {num_sea} sea provinces on "
                f"{len(land_cells)} land and {len(water_cells)} water cells"
            )
        if num_land + num_sea < 1:
            raise ConfigurationError("At least one province is required")

        seeds: List[ProvinceSeed] = []
        for cell in self._place_class_seeds(land_cells, num_land):
            seeds.append(ProvinceSeed(id=len(seeds), cell=cell, is_land=True))
        for cell in self._place_class_seeds(water_cells, num_sea):
            seeds.append(ProvinceSeed(id=len(seeds), cell=cell, is_land=False))

        logger.info("Placed province seeds", land=num_land, sea=num_sea)
        return seeds

    def _place_class_seeds(self, candidates: np.ndarray, count: int) -> List[int]:
        """Rejection sampling with a relaxing minimum spacing, then a fill."""
        if count == 0:
            return []

        spacing = self.options.spacing_factor * math.sqrt(len(candidates) / count)
        chosen: List[int] = []
        taken = set()
        points: List[Tuple[int, int]] = []

        attempts = 0
        stalled = 0
        max_attempts = count * self.options.attempts_per_seed * 4

        while len(chosen) < count and attempts < max_attempts:
            attempts += 1
            cell = int(self.prng.choice(candidates))
            x, y = self.grid.xy(cell)

            too_close = cell in taken or any(
                (x - sx) ** 2 + (y - sy) ** 2 < spacing**2 for sx, sy in points
            )
            if too_close:
                stalled += 1
                if stalled >= self.options.attempts_per_seed:
                    # Reduce spacing requirement if struggling
                    spacing *= self.options.spacing_relaxation
                    stalled = 0
                continue

            chosen.append(cell)
            taken.add(cell)
            points.append((x, y))
            stalled = 0

        if len(chosen) < count:
            for cell in candidates.tolist():
                if cell not in taken:
                    chosen.append(cell)
                    taken.add(cell)
                    if len(chosen) == count:
                        break

        return chosen

    def _step_cost(self, from_cell: int, to_cell: int) -> float:
        rise = max(self.elevation[to_cell] - self.elevation[from_cell], 0.0)
        cost = 1.0 + rise * self.options.elevation_cost
        if self.biomes[to_cell] == BiomeType.ALPINE:
            cost += self.options.mountain_cost
        return cost

    def grow(self, seeds: List[ProvinceSeed]) -> np.ndarray:
        """
        Expand all seeds at once with a multi-source Dijkstra.

        Entering a cell of the other land/water class costs more than any
        same-class path, so same-class provinces always claim a cell first
        when they can reach it. Equal costs go to the lowest seed index.

        Returns:
            int32 grid of province ids
        """
        n_cells = self.grid.n_cells
        max_step = 1.0 + self.options.elevation_cost + self.options.mountain_cost
        crossing_penalty = n_cells * max_step + 1.0

        owner = np.full(n_cells, -1, dtype=np.int32)
        best_cost = np.full(n_cells, np.inf)
        best_seed = np.full(n_cells, np.iinfo(np.int32).max, dtype=np.int64)

        # Priority queue: (cost, seed index, cell)
        heap: List[Tuple[float, int, int]] = []
        for index, seed in enumerate(seeds):
            if best_cost[seed.cell] == 0:
                raise ConfigurationError(f"Seed cell {seed.cell} is used twice")
            best_cost[seed.cell] = 0.0
            best_seed[seed.cell] = index
            heap.append((0.0, index, seed.cell))
        heapq.heapify(heap)

        seed_is_land = [seed.is_land for seed in seeds]

        while heap:
            cost, index, cell = heapq.heappop(heap)
            if owner[cell] != -1:
                continue
            owner[cell] = index

            for neighbor in self.grid.neighbors4(cell):
                if owner[neighbor] != -1:
                    continue

                total_cost = cost + self._step_cost(cell, neighbor)
                if self.land[neighbor] != seed_is_land[index]:
                    total_cost += crossing_penalty

                if total_cost < best_cost[neighbor] or (
                    total_cost == best_cost[neighbor] and index < best_seed[neighbor]
                ):
                    best_cost[neighbor] = total_cost
                    best_seed[neighbor] = index
                    heapq.heappush(heap, (total_cost, index, neighbor))

        unassigned = int(np.count_nonzero(owner == -1))
        if unassigned:
            raise InvariantViolation("provinces", f"{unassigned} cells have no province")

        return owner.reshape(self.grid.shape)

    def build_provinces(
        self, seeds: List[ProvinceSeed], pixel_to_id: np.ndarray
    ) -> List[Province]:
        """Province records with area, centroid and coastal flag."""
        count = len(seeds)
        flat = pixel_to_id.ravel()

        areas = np.bincount(flat, minlength=count)
        empty = np.flatnonzero(areas == 0)
        if len(empty):
            raise InvariantViolation("provinces", f"provinces {empty.tolist()} own no cells")

        xs = np.tile(np.arange(self.grid.width), self.grid.height)
        ys = np.repeat(np.arange(self.grid.height), self.grid.width)
        center_x = np.bincount(flat, weights=xs, minlength=count) / areas
        center_y = np.bincount(flat, weights=ys, minlength=count) / areas

        province_land = np.array([seed.is_land for seed in seeds], dtype=bool)
        land_grid = self.land.reshape(self.grid.shape)
        coastal = np.zeros(count, dtype=bool)
        for (ids_a, ids_b), (land_a, land_b) in zip(
            shifted_pairs(pixel_to_id), shifted_pairs(land_grid)
        ):
            coastal[ids_a[land_b != province_land[ids_a]]] = True
            coastal[ids_b[land_a != province_land[ids_b]]] = True

        return [
            Province(
                id=index,
                is_land=seed.is_land,
                coastal=bool(coastal[index]),
                area=int(areas[index]),
                center=(float(center_x[index]), float(center_y[index])),
                seed_cell=seed.cell,
            )
            for index, seed in enumerate(seeds)
        ]


def _as_grid(heightmap, water_type: np.ndarray) -> GridConfig:
    water_type = np.asarray(water_type)
    if water_type.ndim != 2:
        values = np.asarray(getattr(heightmap, "values", heightmap))
        shape = values.shape if values.ndim == 2 else (1, water_type.size)
        return GridConfig(shape[1], shape[0])
    return GridConfig(water_type.shape[1], water_type.shape[0])


def generate_province_seeds(
    heightmap,
    biome_map: np.ndarray,
    water_type: np.ndarray,
    num_land: int,
    num_sea: int,
    seed: int,
    options: Optional[ProvinceOptions] = None,
) -> List[ProvinceSeed]:
    """
    Place province seeds.

    Args:
        heightmap: Heightmap or elevation grid
        biome_map: Biome codes
        water_type: WaterType codes
        num_land: Number of land provinces
        num_sea: Number of sea provinces
        seed: World seed
        options: Province options

    Returns:
        Seeds with land ids first
    """
    grid = _as_grid(heightmap, water_type)
    generator = ProvinceGenerator(
        grid, heightmap, biome_map, water_type, options, stage_prng(seed, "provinces")
    )
    return generator.place_seeds(num_land, num_sea)


def generate_provinces_from_seeds(
    heightmap,
    biome_map: np.ndarray,
    water_type: np.ndarray,
    seeds: List[ProvinceSeed],
    options: Optional[ProvinceOptions] = None,
) -> Tuple[List[Province], np.ndarray]:
    """
    Grow provinces from their seeds.

    Returns:
        (provinces, pixel_to_id grid of shape (height, width))
    """
    grid = _as_grid(heightmap, water_type)
    generator = ProvinceGenerator(grid, heightmap, biome_map, water_type, options)
    pixel_to_id = generator.grow(seeds)
    provinces = generator.build_provinces(seeds, pixel_to_id)

    logger.info(
        "Provinces generated",
        count=len(provinces),
        land=sum(1 for p in provinces if p.is_land),
        coastal=sum(1 for p in provinces if p.coastal),
    )
    return provinces, pixel_to_id
