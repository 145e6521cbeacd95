"""
Regular cell grid shared by all pipeline stages.

Cells are addressed either by (x, y) or by their row-major index
``y * width + x``. Per-cell layers are numpy arrays of shape
``(height, width)``; ``array.ravel()`` gives the flat row-major view.
"""

from dataclasses import dataclass
from typing import Iterator, List, Tuple

import numpy as np

from .errors import ConfigurationError

# 4-connectivity offsets (dx, dy)
OFFSETS_4: List[Tuple[int, int]] = [(0, -1), (-1, 0), (1, 0), (0, 1)]

# 8-connectivity offsets (dx, dy)
OFFSETS_8: List[Tuple[int, int]] = [
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
]


@dataclass(frozen=True)
class GridConfig:
    """Dimensions of the cell grid."""

    width: int
    height: int

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ConfigurationError(
                f"Grid dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    @property
    def shape(self) -> Tuple[int, int]:
        """Numpy shape (rows, columns)."""
        return (self.height, self.width)

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def xy(self, cell: int) -> Tuple[int, int]:
        return cell % self.width, cell // self.width

    def find_cell(self, x: float, y: float) -> int:
        """Cell containing the continuous point (x, y), clamped to the grid."""
        col = min(max(int(x), 0), self.width - 1)
        row = min(max(int(y), 0), self.height - 1)
        return row * self.width + col

    def neighbors4(self, cell: int) -> Iterator[int]:
        """Edge-adjacent cells."""
        return self._neighbors(cell, OFFSETS_4)

    def neighbors8(self, cell: int) -> Iterator[int]:
        """Edge- and corner-adjacent cells."""
        return self._neighbors(cell, OFFSETS_8)

    def _neighbors(self, cell: int, offsets) -> Iterator[int]:
        x, y = cell % self.width, cell // self.width
        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield ny * self.width + nx

    def border_mask(self) -> np.ndarray:
        """Boolean grid that is True on the outermost ring of cells."""
        mask = np.zeros(self.shape, dtype=bool)
        mask[0, :] = True
        mask[-1, :] = True
        mask[:, 0] = True
        mask[:, -1] = True
        return mask

    def check_layer(self, name: str, layer: np.ndarray) -> np.ndarray:
        """
        Return ``layer`` shaped (height, width).

        Accepts arrays or wrappers such as ``Heightmap`` that carry a
        ``values`` grid. Flat row-major layers are reshaped. Raises ConfigurationError when the size
        does not match the grid.
        """
        if hasattr(layer, "width") and hasattr(layer, "values"):
            layer = layer.values
        array = np.asarray(layer)
        if array.shape == self.shape:
            return array
        if array.size == self.n_cells:
            return array.reshape(self.shape)
        raise ConfigurationError(
            f"{name} has {array.size} cells, expected {self.width}x{self.height}"
        )


def shifted_pairs(grid: np.ndarray) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
    """
    Yield (a, b) views of every horizontally and vertically adjacent pair.

    ``a[k]`` and ``b[k]`` are neighbours for every k. Used for vectorised
    boundary scans.
    """
    yield grid[:, :-1], grid[:, 1:]
    yield grid[:-1, :], grid[1:, :]
