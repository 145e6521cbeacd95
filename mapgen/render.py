"""
Preview images of generated worlds.

Needs the ``viz`` extra (matplotlib). The Agg backend is selected so the
renderer works without a display.
"""

from pathlib import Path
from typing import Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import structlog
from matplotlib.colors import LinearSegmentedColormap, ListedColormap

from .core.biomes import BIOME_NAMES, BiomeType
from .core.pipeline import WorldResult
from .core.world import SEA_LEVEL

logger = structlog.get_logger()

# Elevation in [0, 1], sea level at 0.5
TERRAIN_COLORS = [
    (0.0, "#001a33"),  # Deep ocean
    (0.25, "#003366"),  # Ocean
    (0.49, "#0066cc"),  # Shallow water
    (0.5, "#66b266"),  # Coast
    (0.62, "#99cc99"),  # Plains
    (0.75, "#cccc99"),  # Hills
    (0.85, "#cc9966"),  # Mountains
    (0.93, "#996633"),  # High mountains
    (1.0, "#ffffff"),  # Snow peaks
]

BIOME_COLORS = {
    BiomeType.OCEAN: "#1e4f8a",
    BiomeType.LAKE: "#4f8fd1",
    BiomeType.WETLAND: "#0b9131",
    BiomeType.GLACIER: "#d5e7eb",
    BiomeType.TUNDRA: "#96784b",
    BiomeType.TAIGA: "#4b6b32",
    BiomeType.TEMPERATE_DECIDUOUS_FOREST: "#29bc56",
    BiomeType.TEMPERATE_RAINFOREST: "#409c43",
    BiomeType.TEMPERATE_GRASSLAND: "#c8d68f",
    BiomeType.MEDITERRANEAN: "#b5b887",
    BiomeType.DESERT: "#e3d7a1",
    BiomeType.HOT_DESERT: "#fbe79f",
    BiomeType.SAVANNA: "#d2d082",
    BiomeType.TROPICAL_SEASONAL_FOREST: "#b6d95d",
    BiomeType.TROPICAL_RAINFOREST: "#7dcb35",
    BiomeType.MANGROVE: "#2e6b4f",
    BiomeType.ALPINE: "#a8a8a8",
}


def _biome_colormap() -> ListedColormap:
    size = max(int(code) for code in BiomeType) + 1
    colors = ["#000000"] * size
    for code, color in BIOME_COLORS.items():
        colors[int(code)] = color
    return ListedColormap(colors)


def _shuffled_ids(ids: np.ndarray, count: int, seed: int) -> np.ndarray:
    """Permute ids so neighbouring provinces get distinct colors."""
    order = np.random.default_rng(seed).permutation(max(count, 1))
    return order[ids]


def render_world(result: WorldResult, path: Union[str, Path], dpi: int = 150) -> Path:
    """
    Render elevation, biomes, provinces and regions side by side.

    Args:
        result: Generated world
        path: Output PNG path
        dpi: Image resolution

    Returns:
        Path of the written image
    """
    path = Path(path)
    elevation = result.heightmap.values
    land = elevation > SEA_LEVEL
    has_coast = result.width > 1 and result.height > 1 and land.any() and not land.all()

    fig, axes = plt.subplots(2, 2, figsize=(12, 12 * result.height / max(result.width, 1)))
    (ax_elev, ax_biome), (ax_prov, ax_region) = axes

    terrain = LinearSegmentedColormap.from_list("terrain_custom", TERRAIN_COLORS, N=100)
    im = ax_elev.imshow(elevation, cmap=terrain, vmin=0, vmax=1, interpolation="nearest")
    if has_coast:
        ax_elev.contour(elevation, levels=[SEA_LEVEL], colors="navy", linewidths=0.8)
    fig.colorbar(im, ax=ax_elev, label="Elevation", shrink=0.8)
    ax_elev.set_title(f"Elevation (land {result.land_ratio:.0%})")

    biome_cmap = _biome_colormap()
    ax_biome.imshow(
        result.biomes, cmap=biome_cmap, vmin=0, vmax=biome_cmap.N - 1, interpolation="nearest"
    )
    present = np.unique(result.biomes)
    ax_biome.set_title(f"Biomes ({len(present)} types)")

    provinces = _shuffled_ids(result.pixel_to_id, len(result.provinces), result.params.seed)
    ax_prov.imshow(provinces, cmap="tab20", interpolation="nearest")
    ax_prov.set_title(f"Provinces ({len(result.provinces)})")

    regions = _shuffled_ids(result.region_ids, len(result.regions), result.params.seed + 1)
    ax_region.imshow(regions, cmap="tab20", interpolation="nearest")
    if has_coast:
        ax_region.contour(land.astype(float), levels=[0.5], colors="black", linewidths=0.5)
    ax_region.set_title(f"Regions ({len(result.regions)})")

    for ax in axes.ravel():
        ax.set_xticks([])
        ax.set_yticks([])

    fig.suptitle(
        f"{result.params.world_type.value} - seed {result.params.seed} - "
        f"{result.width}x{result.height}"
    )
    fig.tight_layout()
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)

    logger.info(
        "World rendered",
        path=str(path),
        biomes=[BIOME_NAMES[BiomeType(int(code))] for code in present],
    )
    return path
