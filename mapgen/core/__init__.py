"""
Core world generation functionality.
"""

from .errors import ConfigurationError, InvariantViolation, MapGenError
from .grid import GridConfig
from .world import SEA_LEVEL, WorldGenerationParams, WorldType
from .heightmap_generator import Heightmap, HeightmapGenerator, generate_heightmap
from .climate import Climate, ClimateOptions, WindField
from .biomes import BiomeClassifier, BiomeType
from .features import WaterType, classify_water
from .hydrology import Hydrology, RiverMap, generate_rivers
from .provinces import Province, generate_province_seeds, generate_provinces_from_seeds
from .province_graph import ProvinceGraph, build_province_graph
from .regions import Region, group_provinces_into_regions
from .pipeline import PipelineOptions, WorldResult, generate_world

__all__ = ['MapGenError', 'ConfigurationError', 'InvariantViolation', 'GridConfig',
           'SEA_LEVEL', 'WorldGenerationParams', 'WorldType',
           'Heightmap', 'HeightmapGenerator', 'generate_heightmap',
           'Climate', 'ClimateOptions', 'WindField', 'BiomeClassifier', 'BiomeType',
           'WaterType', 'classify_water', 'Hydrology', 'RiverMap', 'generate_rivers',
           'Province', 'generate_province_seeds', 'generate_provinces_from_seeds',
           'ProvinceGraph', 'build_province_graph', 'Region', 'group_provinces_into_regions',
           'PipelineOptions', 'WorldResult', 'generate_world']
