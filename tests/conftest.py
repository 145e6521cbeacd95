"""Shared fixtures for the test suite."""

import numpy as np
import pytest

from mapgen.core.pipeline import PipelineOptions, generate_world
from mapgen.core.world import WorldGenerationParams


@pytest.fixture(scope="session")
def example_params():
    """The reference scenario: seed 42 on a 64x64 EarthLike map."""
    return WorldGenerationParams.from_config(
        {"seed": 42, "width": 64, "height": 64, "world_type": "EarthLike", "total_provinces": 20}
    )


@pytest.fixture(scope="session")
def example_world(example_params):
    """Complete world for the reference scenario, rivers included."""
    return generate_world(example_params, PipelineOptions(include_rivers=True))


@pytest.fixture
def island_elevation():
    """20x20 grid with a square island and an enclosed lake inside it."""
    elevation = np.full((20, 20), 0.3, dtype=np.float32)
    elevation[4:16, 4:16] = 0.7
    elevation[8:11, 8:11] = 0.4
    return elevation
