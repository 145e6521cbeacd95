"""
Geographic features detection and markup.

This module handles:
- Land/water classification based on height
- Sea versus lake classification of water bodies
- Island identification
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Tuple

import numpy as np
import structlog
from scipy import ndimage

from .grid import GridConfig
from .world import SEA_LEVEL

logger = structlog.get_logger()


class WaterType(IntEnum):
    """Per-cell water classification."""

    LAND = 0
    SEA = 1
    LAKE = 2


@dataclass
class Feature:
    """Represents a geographic feature (ocean, lake, island)."""

    id: int
    type: str  # "ocean", "lake", "island"
    land: bool
    border: bool  # touches map edge
    cells: int  # total cells in feature
    first_cell: int


class Features:
    """Handles geographic feature detection and markup."""

    def __init__(self, grid: GridConfig, elevation: np.ndarray, sea_level: float = SEA_LEVEL):
        """
        Initialize Features with an elevation grid.

        Args:
            grid: Grid dimensions
            elevation: Heightmap grid in [0, 1]
            sea_level: Land/water threshold
        """
        self.grid = grid
        self.elevation = grid.check_layer("heightmap", elevation)
        self.sea_level = sea_level
        self.land = self.elevation > sea_level
        self.border = grid.border_mask()

    def _label(self, mask: np.ndarray) -> Tuple[np.ndarray, int, np.ndarray]:
        """
        Label 4-connected components of ``mask``.

        Returns:
            (labels, count, border flag per label); label 0 is background
        """
        labels, count = ndimage.label(mask)
        touches_border = np.zeros(count + 1, dtype=bool)
        touches_border[np.unique(labels[self.border])] = True
        touches_border[0] = False
        return labels, count, touches_border

    def classify_water(self) -> np.ndarray:
        """
        Classify every cell as land, sea or lake.

        Water bodies touching the map border are sea, enclosed ones lakes.
        """
        water_type = np.full(self.grid.shape, WaterType.LAND, dtype=np.uint8)
        labels, _, touches_border = self._label(~self.land)

        water = ~self.land
        sea = water & touches_border[labels]
        water_type[sea] = WaterType.SEA
        water_type[water & ~sea] = WaterType.LAKE
        return water_type

    def markup_grid(self) -> List[Feature]:
        """
        Identify oceans, lakes and islands as ``Feature`` records.

        Water features come first, then land, each in order of their first
        cell. Ids start at 1.
        """
        features: List[Feature] = []
        for is_land in (False, True):
            mask = self.land if is_land else ~self.land
            labels, count, touches_border = self._label(mask)
            if count == 0:
                continue

            flat = labels.ravel()
            sizes = np.bincount(flat, minlength=count + 1)
            # Index of the first cell of every label
            first_cells = np.full(count + 1, -1, dtype=np.int64)
            present, first_index = np.unique(flat, return_index=True)
            first_cells[present] = first_index

            for label in range(1, count + 1):
                if is_land:
                    feature_type = "island"
                elif touches_border[label]:
                    feature_type = "ocean"
                else:
                    feature_type = "lake"

                features.append(
                    Feature(
                        id=len(features) + 1,
                        type=feature_type,
                        land=is_land,
                        border=bool(touches_border[label]),
                        cells=int(sizes[label]),
                        first_cell=int(first_cells[label]),
                    )
                )
        return features


def classify_water(heightmap, sea_level: float = SEA_LEVEL) -> np.ndarray:
    """
    Classify water for a heightmap.

    Args:
        heightmap: Heightmap or (height, width) elevation grid
        sea_level: Land/water threshold

    Returns:
        uint8 grid of ``WaterType`` codes
    """
    values = getattr(heightmap, "values", heightmap)
    values = np.asarray(values)
    if values.ndim != 2:
        values = values.reshape(1, -1)
    grid = GridConfig(values.shape[1], values.shape[0])

    water_type = Features(grid, values, sea_level).classify_water()
    logger.info(
        "Water classified",
        land_cells=int(np.count_nonzero(water_type == WaterType.LAND)),
        sea_cells=int(np.count_nonzero(water_type == WaterType.SEA)),
        lake_cells=int(np.count_nonzero(water_type == WaterType.LAKE)),
    )
    return water_type


def detect_features(heightmap, sea_level: float = SEA_LEVEL) -> List[Feature]:
    """Oceans, lakes and islands of a heightmap."""
    values = np.asarray(getattr(heightmap, "values", heightmap))
    if values.ndim != 2:
        values = values.reshape(1, -1)
    grid = GridConfig(values.shape[1], values.shape[0])
    return Features(grid, values, sea_level).markup_grid()


def land_ratio(water_type: np.ndarray) -> float:
    """Share of cells classified as land."""
    water_type = np.asarray(water_type)
    if water_type.size == 0:
        return 0.0
    return float(np.count_nonzero(water_type == WaterType.LAND)) / water_type.size
