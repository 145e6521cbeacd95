"""
Biome classification system based on temperature and humidity.

This module implements:
- Temperature/humidity matrix classification
- Alpine and glacier overrides
- Geographic influence on biomes (wetlands, mangroves)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional

import numpy as np
import structlog
from scipy import ndimage

from .errors import InvariantViolation
from .features import Features, WaterType
from .grid import GridConfig
from .world import SEA_LEVEL

logger = structlog.get_logger()


class BiomeType(IntEnum):
    """Biome types."""

    OCEAN = 0
    LAKE = 1
    WETLAND = 2
    GLACIER = 3
    TUNDRA = 4
    TAIGA = 5
    TEMPERATE_DECIDUOUS_FOREST = 6
    TEMPERATE_RAINFOREST = 7
    TEMPERATE_GRASSLAND = 8
    MEDITERRANEAN = 9
    DESERT = 10
    HOT_DESERT = 11
    SAVANNA = 12
    TROPICAL_SEASONAL_FOREST = 13
    TROPICAL_RAINFOREST = 14
    MANGROVE = 15
    ALPINE = 16


# Biome names for display
BIOME_NAMES = {
    BiomeType.OCEAN: "Ocean",
    BiomeType.LAKE: "Lake",
    BiomeType.WETLAND: "Wetland",
    BiomeType.GLACIER: "Glacier",
    BiomeType.TUNDRA: "Tundra",
    BiomeType.TAIGA: "Taiga",
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: "Temperate Deciduous Forest",
    BiomeType.TEMPERATE_RAINFOREST: "Temperate Rainforest",
    BiomeType.TEMPERATE_GRASSLAND: "Temperate Grassland",
    BiomeType.MEDITERRANEAN: "Mediterranean",
    BiomeType.DESERT: "Desert",
    BiomeType.HOT_DESERT: "Hot Desert",
    BiomeType.SAVANNA: "Savanna",
    BiomeType.TROPICAL_SEASONAL_FOREST: "Tropical Seasonal Forest",
    BiomeType.TROPICAL_RAINFOREST: "Tropical Rainforest",
    BiomeType.MANGROVE: "Mangrove",
    BiomeType.ALPINE: "Alpine",
}

WATER_BIOMES = frozenset({BiomeType.OCEAN, BiomeType.LAKE})


@dataclass
class BiomeOptions:
    """Biome classification options."""

    wetland_threshold: float = 0.8  # Humidity for wetland formation
    wetland_max_rise: float = 0.03  # Elevation above sea level for wetlands
    mangrove_temperature: float = 25.0  # Minimum °C for mangroves
    mangrove_humidity: float = 0.6  # Minimum humidity for mangroves
    alpine_height_threshold: float = 0.85  # Elevation for alpine biomes
    glacier_temperature_threshold: float = -10.0  # Temperature for glaciers


class BiomeClassifier:
    """Handles biome classification based on climate and geography."""

    def __init__(
        self,
        grid: GridConfig,
        elevation: np.ndarray,
        temperature: np.ndarray,
        humidity: np.ndarray,
        sea_level: float = SEA_LEVEL,
        options: Optional[BiomeOptions] = None,
    ):
        """
        Initialize biome classifier.

        Args:
            grid: Grid dimensions
            elevation: Heightmap grid in [0, 1]
            temperature: Temperature grid in °C
            humidity: Humidity grid in [0, 1]
            sea_level: Land/water threshold
            options: Biome classification options
        """
        self.grid = grid
        self.elevation = grid.check_layer("heightmap", elevation)
        self.temperature = grid.check_layer("temperature", temperature)
        self.humidity = grid.check_layer("humidity", humidity)
        self.sea_level = sea_level
        self.options = options or BiomeOptions()

        self.biomes = None

        self._init_biome_matrix()

    def _init_biome_matrix(self):
        """
        Initialize the temperature/humidity biome classification matrix.

        Temperature bands: 0=very cold, 1=cold, 2=cool, 3=temperate, 4=warm, 5=hot
        Humidity bands: 0=very dry, 1=dry, 2=moderate, 3=wet, 4=very wet
        """
        # Biome matrix [temperature_band][humidity_band]
        self.biome_matrix = np.array(
            [
                # Very Cold (below -10°C)
                [
                    BiomeType.GLACIER,
                    BiomeType.GLACIER,
                    BiomeType.TUNDRA,
                    BiomeType.TUNDRA,
                    BiomeType.TUNDRA,
                ],
                # Cold (-10 to 5°C)
                [
                    BiomeType.TUNDRA,
                    BiomeType.TUNDRA,
                    BiomeType.TAIGA,
                    BiomeType.TAIGA,
                    BiomeType.TAIGA,
                ],
                # Cool (5 to 15°C)
                [
                    BiomeType.DESERT,
                    BiomeType.TEMPERATE_GRASSLAND,
                    BiomeType.TEMPERATE_DECIDUOUS_FOREST,
                    BiomeType.TEMPERATE_DECIDUOUS_FOREST,
                    BiomeType.TEMPERATE_RAINFOREST,
                ],
                # Temperate (15 to 25°C)
                [
                    BiomeType.DESERT,
                    BiomeType.MEDITERRANEAN,
                    BiomeType.TEMPERATE_DECIDUOUS_FOREST,
                    BiomeType.TEMPERATE_DECIDUOUS_FOREST,
                    BiomeType.TEMPERATE_RAINFOREST,
                ],
                # Warm (25 to 35°C)
                [
                    BiomeType.HOT_DESERT,
                    BiomeType.SAVANNA,
                    BiomeType.TROPICAL_SEASONAL_FOREST,
                    BiomeType.TROPICAL_RAINFOREST,
                    BiomeType.TROPICAL_RAINFOREST,
                ],
                # Hot (35°C+)
                [
                    BiomeType.HOT_DESERT,
                    BiomeType.HOT_DESERT,
                    BiomeType.SAVANNA,
                    BiomeType.TROPICAL_SEASONAL_FOREST,
                    BiomeType.TROPICAL_RAINFOREST,
                ],
            ],
            dtype=np.uint8,
        )

        # Temperature band thresholds (°C)
        self.temp_thresholds = [-10, 5, 15, 25, 35]

        # Humidity band thresholds
        self.humidity_thresholds = [0.2, 0.4, 0.6, 0.8]

    def classify_biomes(self) -> np.ndarray:
        """
        Classify biomes for all cells based on climate data.

        Returns:
            uint8 grid of ``BiomeType`` codes
        """
        water_type = Features(self.grid, self.elevation, self.sea_level).classify_water()
        water = water_type != WaterType.LAND
        frozen = self.temperature <= self.options.glacier_temperature_threshold

        # Bands follow "value < threshold" for band i
        temp_band = np.digitize(self.temperature, self.temp_thresholds)
        humidity_band = np.digitize(self.humidity, self.humidity_thresholds)
        biomes = self.biome_matrix[temp_band, humidity_band]

        alpine = ~water & (self.elevation >= self.options.alpine_height_threshold)
        biomes = np.where(alpine, np.uint8(BiomeType.ALPINE), biomes)
        biomes = np.where(~water & ~alpine & frozen, np.uint8(BiomeType.GLACIER), biomes)

        biomes = np.where(water_type == WaterType.SEA, np.uint8(BiomeType.OCEAN), biomes)
        biomes = np.where(water_type == WaterType.LAKE, np.uint8(BiomeType.LAKE), biomes)
        biomes = np.where(water & frozen, np.uint8(BiomeType.GLACIER), biomes)

        self.biomes = biomes.astype(np.uint8)
        self._apply_geographic_influences(water)
        self._validate()

        return self.biomes

    def _apply_geographic_influences(self, water: np.ndarray):
        """Form wetlands on wet lowlands and mangroves on hot wet coasts."""
        eligible = ~water & ~np.isin(self.biomes, [BiomeType.ALPINE, BiomeType.GLACIER])

        wetland = (
            eligible
            & (self.humidity >= self.options.wetland_threshold)
            & (self.elevation < self.sea_level + self.options.wetland_max_rise)
        )
        self.biomes[wetland] = BiomeType.WETLAND

        near_water = ndimage.binary_dilation(water, structure=np.ones((3, 3), dtype=bool))
        mangrove = (
            eligible
            & near_water
            & (self.temperature >= self.options.mangrove_temperature)
            & (self.humidity >= self.options.mangrove_humidity)
        )
        self.biomes[mangrove] = BiomeType.MANGROVE

    def _validate(self):
        valid = np.array([int(b) for b in BiomeType])
        invalid = ~np.isin(self.biomes, valid)
        if invalid.any():
            raise InvariantViolation(
                "biomes", f"{int(invalid.sum())} cells have no valid biome code"
            )


def assign_biomes(
    heightmap,
    temperature: np.ndarray,
    humidity: np.ndarray,
    sea_level: float = SEA_LEVEL,
    options: Optional[BiomeOptions] = None,
) -> np.ndarray:
    """
    Classify every cell into a biome.

    Args:
        heightmap: Heightmap or elevation grid
        temperature: Temperature grid in °C
        humidity: Humidity grid in [0, 1]
        sea_level: Land/water threshold
        options: Biome options

    Returns:
        uint8 grid of ``BiomeType`` codes, same shape as the heightmap
    """
    values = np.asarray(getattr(heightmap, "values", heightmap))
    if values.ndim != 2:
        values = values.reshape(np.asarray(temperature).shape)
    grid = GridConfig(values.shape[1], values.shape[0])

    classifier = BiomeClassifier(grid, values, temperature, humidity, sea_level, options)
    biomes = classifier.classify_biomes()

    logger.info("Biome classification completed", unique_biomes=len(np.unique(biomes)))
    return biomes


def biome_statistics(biome_map: np.ndarray) -> Dict[str, int]:
    """Cell count per biome name, for biomes that occur."""
    codes, counts = np.unique(np.asarray(biome_map), return_counts=True)
    return {BIOME_NAMES[BiomeType(int(code))]: int(count) for code, count in zip(codes, counts)}
