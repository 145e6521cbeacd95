"""
mapgen: procedural world map generation.

Generates elevation, climate, biomes, water, rivers, provinces and named
regions from a single seed.
"""

from .core import (
    ConfigurationError,
    InvariantViolation,
    MapGenError,
    PipelineOptions,
    WorldGenerationParams,
    WorldResult,
    WorldType,
    generate_world,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "InvariantViolation",
    "MapGenError",
    "PipelineOptions",
    "WorldGenerationParams",
    "WorldResult",
    "WorldType",
    "generate_world",
]
