"""
Heightmap generation module.

Terrain is built on a regular cell grid in two phases:

1. A world-type template of terrain commands (hills, pits, ranges,
   troughs, straits, smoothing, masks) shapes the large-scale layout on a
   0-100 height scale where 20 is the land threshold. A fractal value-noise
   layer and scattered island hills add detail.
2. The raw heights are remapped to [0, 1] with sea level at 0.5 and shaped
   by the terrain settings (elevation power, mountain compression,
   smoothing, small island removal).
"""

from collections import deque
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

import numpy as np
import structlog
from scipy import ndimage

from ..config.heightmap_templates import get_template
from ..utils.random import stage_prng
from .alea_prng import AleaPRNG
from .grid import GridConfig
from .world import SEA_LEVEL, TerrainSettings, WorldType, get_profile, round_half_up

logger = structlog.get_logger()

# Land threshold on the raw 0-100 scale
RAW_LAND_HEIGHT = 20

# Elevation above which mountain compression applies
MOUNTAIN_KNEE = 0.75

# Blob and line spreading power by cell count
BLOB_POWER_TABLE = {
    1000: 0.93,
    2000: 0.95,
    5000: 0.97,
    10000: 0.98,
    20000: 0.99,
    30000: 0.991,
    40000: 0.993,
    50000: 0.994,
    60000: 0.995,
    70000: 0.9955,
    80000: 0.996,
    90000: 0.9964,
    100000: 0.9973,
}

LINE_POWER_TABLE = {
    1000: 0.75,
    2000: 0.77,
    5000: 0.79,
    10000: 0.81,
    20000: 0.82,
    30000: 0.83,
    40000: 0.84,
    50000: 0.86,
    60000: 0.87,
    70000: 0.88,
    80000: 0.91,
    90000: 0.92,
    100000: 0.93,
}


def _interpolate_power(table: dict, cells: int) -> float:
    keys = sorted(table)
    return float(np.interp(cells, keys, [table[k] for k in keys]))


@dataclass
class Heightmap:
    """Elevation grid in [0, 1], shape (height, width)."""

    width: int
    height: int
    values: np.ndarray

    @property
    def data(self) -> np.ndarray:
        """Flat row-major view of length width * height."""
        return self.values.ravel()

    def land_mask(self, sea_level: float = SEA_LEVEL) -> np.ndarray:
        return self.values > sea_level


class HeightmapGenerator:
    """
    Generates raw heights using template commands on a cell grid.

    Heights are kept on the 0-100 scale while commands run. All random
    decisions come from the PRNG passed in, so a generator fed the same
    PRNG state and commands always produces the same heights.
    """

    def __init__(self, grid: GridConfig, prng: AleaPRNG):
        """
        Initialize the heightmap generator.

        Args:
            grid: Grid dimensions
            prng: Random number generator for this stage
        """
        self.grid = grid
        self.n_cells = grid.n_cells
        self._prng = prng

        # float32 avoids uint8 overflow while commands accumulate
        self.heights = np.zeros(self.n_cells, dtype=np.float32)

        self.blob_power = _interpolate_power(BLOB_POWER_TABLE, self.n_cells)
        self.line_power = _interpolate_power(LINE_POWER_TABLE, self.n_cells)

    def _lim(self, value: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Limit values to 0-100 range."""
        return np.clip(value, 0, 100)

    def _random(self) -> float:
        return self._prng.random()

    def _rand(self, min_val: float, max_val: float) -> int:
        """Integer in [min, max] inclusive."""
        return int(self._random() * (max_val - min_val + 1)) + int(min_val)

    def _P(self, probability: float) -> bool:
        return self._prng.probability(probability)

    def _get_number_in_range(self, value: Union[int, float, str]) -> float:
        """Parse a number or "min-max" range string and draw a value from it."""
        r = str(value)

        try:
            num = float(r)
            # Integer part plus a chance of rounding up by the fractional part
            integer_part = int(num)
            fractional_part = num - integer_part
            if fractional_part > 0 and self._P(fractional_part):
                return float(integer_part + 1)
            return float(integer_part)
        except ValueError:
            pass

        if "-" in r:
            sign = 1
            if r[0] == "-":
                sign = -1
                r = r[1:]

            if "-" in r:
                parts = r.split("-")
                min_val = float(parts[0]) * sign
                max_val = float(parts[1])
                return float(self._rand(min_val, max_val))

        return 0.0

    def _get_point_in_range(self, range_str: str, max_val: float) -> float:
        """Random coordinate inside a percentage range such as "20-80"."""
        if "-" in range_str:
            parts = range_str.split("-")
            min_pct = float(parts[0]) / 100 if parts[0] else 0
            max_pct = float(parts[1]) / 100 if parts[1] else min_pct
            return float(self._rand(min_pct * max_val, max_pct * max_val))

        pct = float(range_str) / 100
        return max_val * pct

    def _find_start(
        self, range_x: str, range_y: str, accept, attempts: int = 50
    ) -> Tuple[int, float, float]:
        """Draw start points until ``accept(cell)`` holds or attempts run out."""
        x = y = 0.0
        cell = 0
        for _ in range(attempts):
            x = self._get_point_in_range(range_x, self.grid.width)
            y = self._get_point_in_range(range_y, self.grid.height)
            cell = self.grid.find_cell(x, y)
            if accept(cell):
                return cell, x, y
        return -1, x, y

    def add_hill(
        self, count: Union[int, str], height: Union[int, str], range_x: str, range_y: str
    ) -> None:
        """
        Add hills using the blob spreading algorithm.

        Args:
            count: Number of hills to add
            height: Height range for hills
            range_x: X-coordinate range (percentage)
            range_y: Y-coordinate range (percentage)
        """
        count = int(self._get_number_in_range(count))

        for _ in range(count):
            self._add_one_hill(height, range_x, range_y)

    def _add_one_hill(self, height: Union[int, str], range_x: str, range_y: str) -> None:
        # uint8 truncation of each spread step is what makes blobs decay
        change = np.zeros(self.n_cells, dtype=np.uint8)
        h = self._lim(self._get_number_in_range(height))

        start, _, _ = self._find_start(
            range_x, range_y, lambda cell: self.heights[cell] + h <= 90
        )
        if start == -1:
            return

        change[start] = int(h)
        queue = deque([start])

        while queue:
            current = queue.popleft()
            value = change[current]

            for neighbor in self.grid.neighbors8(current):
                if change[neighbor] > 0:
                    continue

                change[neighbor] = (value**self.blob_power) * (self._random() * 0.2 + 0.9)

                if change[neighbor] > 1:
                    queue.append(neighbor)

        self.heights = self._lim(self.heights + change)

    def add_pit(
        self, count: Union[int, str], height: Union[int, str], range_x: str, range_y: str
    ) -> None:
        """
        Add pits (depressions) to the heightmap.

        Args:
            count: Number of pits to add
            height: Depth range for pits
            range_x: X-coordinate range (percentage)
            range_y: Y-coordinate range (percentage)
        """
        count = int(self._get_number_in_range(count))

        for _ in range(count):
            self._add_one_pit(height, range_x, range_y)

    def _add_one_pit(self, height: Union[int, str], range_x: str, range_y: str) -> None:
        used = np.zeros(self.n_cells, dtype=bool)
        h = self._get_number_in_range(height)

        start, _, _ = self._find_start(
            range_x, range_y, lambda cell: self.heights[cell] >= RAW_LAND_HEIGHT
        )
        if start == -1:
            start = self.grid.find_cell(
                self._get_point_in_range(range_x, self.grid.width),
                self._get_point_in_range(range_y, self.grid.height),
            )

        queue = deque([start])
        used[start] = True

        while queue:
            current = queue.popleft()
            h = (h**self.blob_power) * (self._random() * 0.2 + 0.9)

            if h < 1:
                break

            for neighbor in self.grid.neighbors8(current):
                if used[neighbor]:
                    continue

                depth = h * (self._random() * 0.2 + 0.9)
                self.heights[neighbor] = self._lim(self.heights[neighbor] - depth)
                used[neighbor] = True
                queue.append(neighbor)

    def _random_end_point(self, start_x: float, start_y: float, max_share: float) -> int:
        """End cell at a Manhattan distance between width/8 and width*max_share."""
        end_x = end_y = 0.0
        for _ in range(50):
            end_x = self._random() * self.grid.width * 0.8 + self.grid.width * 0.1
            end_y = self._random() * self.grid.height * 0.7 + self.grid.height * 0.15
            dist = abs(end_y - start_y) + abs(end_x - start_x)

            if self.grid.width / 8 <= dist <= self.grid.width * max_share:
                break

        return self.grid.find_cell(end_x, end_y)

    def add_range(
        self,
        count: Union[int, str],
        height: Union[int, str],
        range_x: Optional[str] = None,
        range_y: Optional[str] = None,
    ) -> None:
        """
        Add mountain ranges to the heightmap.

        Args:
            count: Number of ranges to add
            height: Height range for mountains
            range_x: X-coordinate range for start point
            range_y: Y-coordinate range for start point
        """
        count = int(self._get_number_in_range(count))

        for _ in range(count):
            self._add_one_range(height, range_x or "0-100", range_y or "0-100")

    def _add_one_range(self, height: Union[int, str], range_x: str, range_y: str) -> None:
        used = np.zeros(self.n_cells, dtype=bool)
        h = self._lim(self._get_number_in_range(height))

        start_x = self._get_point_in_range(range_x, self.grid.width)
        start_y = self._get_point_in_range(range_y, self.grid.height)
        start_cell = self.grid.find_cell(start_x, start_y)
        end_cell = self._random_end_point(start_x, start_y, 1 / 3)

        ridge = self._get_range_path(start_cell, end_cell, used)

        queue = list(ridge)
        iteration = 0

        while queue and h >= 2:
            frontier = queue
            queue = []
            iteration += 1

            for cell in frontier:
                self.heights[cell] = self._lim(
                    self.heights[cell] + h * (self._random() * 0.3 + 0.85)
                )

            h = h**self.line_power - 1

            for cell in frontier:
                for neighbor in self.grid.neighbors8(cell):
                    if not used[neighbor]:
                        queue.append(neighbor)
                        used[neighbor] = True

        # Spurs running downhill from every 6th ridge cell
        for i, cell in enumerate(ridge):
            if i % 6 == 0:
                self._add_prominence(cell, iteration)

    def _get_range_path(self, start: int, end: int, used: np.ndarray) -> List[int]:
        """Greedy, slightly randomised walk from start towards end."""
        path = [start]
        current = start
        used[current] = True
        end_x, end_y = self.grid.xy(end)

        while current != end:
            min_dist = float("inf")
            next_cell = None

            for neighbor in self.grid.neighbors8(current):
                if used[neighbor]:
                    continue

                nx, ny = self.grid.xy(neighbor)
                dist = (end_x - nx) ** 2 + (end_y - ny) ** 2

                if self._random() > 0.85:
                    dist = dist / 2

                if dist < min_dist:
                    min_dist = dist
                    next_cell = neighbor

            if next_cell is None:
                break

            path.append(next_cell)
            used[next_cell] = True
            current = next_cell

        return path

    def _add_prominence(self, start_cell: int, iterations: int) -> None:
        current = start_cell

        for _ in range(iterations):
            neighbors = list(self.grid.neighbors8(current))
            if not neighbors:
                break

            min_cell = neighbors[int(np.argmin([self.heights[n] for n in neighbors]))]
            self.heights[min_cell] = (self.heights[current] * 2 + self.heights[min_cell]) / 3
            current = min_cell

    def add_trough(
        self,
        count: Union[int, str],
        height: Union[int, str],
        range_x: Optional[str] = None,
        range_y: Optional[str] = None,
    ) -> None:
        """
        Add valleys (troughs) to the heightmap.

        Args:
            count: Number of troughs to add
            height: Depth range for valleys
            range_x: X-coordinate range for start point
            range_y: Y-coordinate range for start point
        """
        count = int(self._get_number_in_range(count))

        for _ in range(count):
            self._add_one_trough(height, range_x or "0-100", range_y or "0-100")

    def _add_one_trough(self, height: Union[int, str], range_x: str, range_y: str) -> None:
        used = np.zeros(self.n_cells, dtype=bool)
        h = self._lim(self._get_number_in_range(height))

        start_cell, start_x, start_y = self._find_start(
            range_x, range_y, lambda cell: self.heights[cell] >= RAW_LAND_HEIGHT
        )
        if start_cell == -1:
            start_cell = self.grid.find_cell(start_x, start_y)
        end_cell = self._random_end_point(start_x, start_y, 1 / 2)

        valley = self._get_range_path(start_cell, end_cell, used)

        queue = list(valley)
        while queue and h >= 2:
            frontier = queue
            queue = []

            for cell in frontier:
                self.heights[cell] = self._lim(
                    self.heights[cell] - h * (self._random() * 0.3 + 0.85)
                )

            h = h**self.line_power - 1

            for cell in frontier:
                for neighbor in self.grid.neighbors8(cell):
                    if not used[neighbor]:
                        queue.append(neighbor)
                        used[neighbor] = True

    def add_strait(self, width: Union[int, str], direction: str = "vertical", *unused) -> None:
        """
        Add a strait (water channel) across the map.

        Args:
            width: Width of the strait
            direction: "vertical" or "horizontal"
        """
        width_raw = self._get_number_in_range(width)
        width_int = min(int(width_raw), self.grid.width // 3)

        if width_int < 1:
            return

        used = np.zeros(self.n_cells, dtype=bool)
        w, h = self.grid.width, self.grid.height

        if direction == "vertical":
            start_x = self._random() * w * 0.4 + w * 0.3
            start_y = min(5, h - 1)
            end_x = w - start_x - w * 0.1 + self._random() * w * 0.2
            end_y = max(h - 5, 0)
        else:
            start_x = min(5, w - 1)
            start_y = self._random() * h * 0.4 + h * 0.3
            end_x = max(w - 5, 0)
            end_y = h - start_y - h * 0.1 + self._random() * h * 0.2

        path = self._get_strait_path(
            self.grid.find_cell(start_x, start_y), self.grid.find_cell(end_x, end_y)
        )

        step = 0.1 / width_int
        for layer in range(width_int, 0, -1):
            exp = 0.9 - step * layer
            next_layer = []

            for cell in path:
                for neighbor in self.grid.neighbors8(cell):
                    if not used[neighbor]:
                        used[neighbor] = True
                        next_layer.append(neighbor)
                        self.heights[neighbor] = self.heights[neighbor] ** exp

            path = next_layer

    def _get_strait_path(self, start: int, end: int) -> List[int]:
        """Randomised walk from start to end, bounded by the cell count."""
        path = []
        current = start
        end_x, end_y = self.grid.xy(end)

        for _ in range(self.n_cells):
            if current == end:
                break
            min_dist = float("inf")
            next_cell = None

            for neighbor in self.grid.neighbors8(current):
                nx, ny = self.grid.xy(neighbor)
                dist = (end_x - nx) ** 2 + (end_y - ny) ** 2

                if self._random() > 0.8:
                    dist = dist / 2

                if dist < min_dist:
                    min_dist = dist
                    next_cell = neighbor

            if next_cell is None:
                break

            path.append(next_cell)
            current = next_cell

        return path

    def smooth(self, factor: Union[int, str] = 2, add: Union[float, str] = 0, *unused) -> None:
        """
        Smooth the heightmap by averaging each cell with its 8 neighbours.

        Args:
            factor: Smoothing factor (higher = less smoothing)
            add: Value to add after smoothing
        """
        factor = self._get_number_in_range(factor) if factor else 2
        add = self._get_number_in_range(add) if add else 0

        grid_heights = self.heights.reshape(self.grid.shape)
        avg = ndimage.uniform_filter(grid_heights, size=3, mode="nearest").ravel()

        if factor <= 1:
            new_heights = avg + add
        else:
            new_heights = (self.heights * (factor - 1) + avg + add) / factor

        self.heights = self._lim(new_heights).astype(np.float32)

    def mask(self, power: Union[float, str] = 1, *unused) -> None:
        """
        Apply a radial mask that fades heights towards the map edges.

        Args:
            power: Mask strength (negative inverts, fading the centre)
        """
        power = float(power) if power else 1.0
        factor = abs(power)

        xs = 2 * (np.arange(self.grid.width) + 0.5) / self.grid.width - 1
        ys = 2 * (np.arange(self.grid.height) + 0.5) / self.grid.height - 1
        distance = ((1 - ys**2)[:, None] * (1 - xs**2)[None, :]).ravel()

        if power < 0:
            distance = 1 - distance

        masked = self.heights * distance
        new_heights = (self.heights * (factor - 1) + masked) / factor

        self.heights = self._lim(new_heights).astype(np.float32)

    def modify(
        self, range_spec: str, add: float = 0, multiply: float = 1, power: Optional[float] = None
    ) -> None:
        """
        Modify heights within a range.

        Args:
            range_spec: "all", "land", or "min-max"
            add: Value to add
            multiply: Value to multiply by
            power: Optional power to raise to
        """
        if range_spec == "land":
            min_h, max_h = RAW_LAND_HEIGHT, 100
            is_land = True
        elif range_spec == "all":
            min_h, max_h = 0, 100
            is_land = False
        else:
            parts = range_spec.split("-")
            min_h = float(parts[0])
            max_h = float(parts[1])
            is_land = min_h == RAW_LAND_HEIGHT

        mask = (self.heights >= min_h) & (self.heights <= max_h)

        if add != 0:
            if is_land:
                self.heights[mask] = np.maximum(self.heights[mask] + add, RAW_LAND_HEIGHT)
            else:
                self.heights[mask] = self.heights[mask] + add

        if multiply != 1:
            if is_land:
                self.heights[mask] = (self.heights[mask] - RAW_LAND_HEIGHT) * multiply + RAW_LAND_HEIGHT
            else:
                self.heights[mask] = self.heights[mask] * multiply

        if power is not None:
            if is_land:
                self.heights[mask] = (self.heights[mask] - RAW_LAND_HEIGHT) ** power + RAW_LAND_HEIGHT
            else:
                self.heights[mask] = self.heights[mask] ** power

        self.heights = self._lim(self.heights)

    def invert(self, probability: Union[float, str], axes: str = "both", *unused) -> None:
        """
        Flip the heightmap with the given probability.

        Args:
            probability: Probability of inversion (0-1)
            axes: "x", "y", or "both"
        """
        if not self._P(self._get_number_in_range(probability)):
            return

        grid_heights = self.heights.reshape(self.grid.shape)
        if axes != "y":
            grid_heights = grid_heights[:, ::-1]
        if axes != "x":
            grid_heights = grid_heights[::-1, :]
        self.heights = np.ascontiguousarray(grid_heights).ravel()

    def add_noise(self, frequency: float, octaves: int, amplitude: float) -> None:
        """
        Add fractal value noise centred on zero.

        Args:
            frequency: Lattice cells across the longer map side for octave 0
            octaves: Number of octaves, each doubling the frequency
            amplitude: Peak offset in height units
        """
        if amplitude <= 0 or octaves < 1:
            return

        total = np.zeros(self.grid.shape, dtype=np.float64)
        weight = 1.0
        weights = 0.0
        for octave in range(octaves):
            total += weight * self._value_noise(frequency * 2**octave)
            weights += weight
            weight *= 0.5

        noise = (total / weights - 0.5) * 2 * amplitude
        self.heights = self._lim(self.heights + noise.ravel()).astype(np.float32)

    def _value_noise(self, frequency: float) -> np.ndarray:
        """Smoothly interpolated lattice noise in [0, 1)."""
        longest = max(self.grid.width, self.grid.height)
        xs = (np.arange(self.grid.width) + 0.5) / longest * frequency
        ys = (np.arange(self.grid.height) + 0.5) / longest * frequency
        lattice_w = int(xs[-1]) + 2
        lattice_h = int(ys[-1]) + 2

        lattice = np.array(
            [self._random() for _ in range(lattice_w * lattice_h)], dtype=np.float64
        ).reshape(lattice_h, lattice_w)

        x0 = xs.astype(int)
        y0 = ys.astype(int)
        tx = xs - x0
        ty = ys - y0
        tx = tx * tx * (3 - 2 * tx)
        ty = ty * ty * (3 - 2 * ty)

        top = lattice[y0][:, x0] + (lattice[y0][:, x0 + 1] - lattice[y0][:, x0]) * tx
        bottom = lattice[y0 + 1][:, x0] + (lattice[y0 + 1][:, x0 + 1] - lattice[y0 + 1][:, x0]) * tx
        return top + (bottom - top) * ty[:, None]

    def add_islands(self, density: float) -> int:
        """
        Scatter small island hills over open water.

        Returns:
            Number of island hills placed
        """
        if density <= 0:
            return 0

        count = round_half_up(density * self.n_cells / 400)
        if self.n_cells >= 64:
            count = max(count, 1)

        placed = 0
        for _ in range(count):
            before = self.heights.copy()
            self._add_one_island()
            if not np.array_equal(before, self.heights):
                placed += 1
        return placed

    def _add_one_island(self) -> None:
        change = np.zeros(self.n_cells, dtype=np.uint8)
        h = self._rand(15, 25)

        start, _, _ = self._find_start(
            "5-95", "5-95", lambda cell: self.heights[cell] < RAW_LAND_HEIGHT
        )
        if start == -1:
            return

        # Islands decay faster than hills so they stay small
        power = self.blob_power * 0.9
        change[start] = h
        queue = deque([start])
        while queue:
            current = queue.popleft()
            value = change[current]
            for neighbor in self.grid.neighbors8(current):
                if change[neighbor] > 0:
                    continue
                change[neighbor] = (value**power) * (self._random() * 0.2 + 0.9)
                if change[neighbor] > 1:
                    queue.append(neighbor)

        self.heights = self._lim(self.heights + change)

    def from_template(self, template_name: str) -> np.ndarray:
        """
        Run every command of a template.

        Args:
            template_name: Name of template to load

        Returns:
            Raw heights array (0-100 scale)
        """
        template = get_template(template_name)

        for line in template.strip().split("\n"):
            parts = line.strip().split()
            if len(parts) < 2:
                continue

            command = parts[0]
            args = parts[1:]

            if command == "Hill":
                self.add_hill(*args[:4])
            elif command == "Pit":
                self.add_pit(*args[:4])
            elif command == "Range":
                self.add_range(*args[:4])
            elif command == "Trough":
                self.add_trough(*args[:4])
            elif command == "Strait":
                self.add_strait(*args)
            elif command == "Smooth":
                self.smooth(*args)
            elif command == "Mask":
                self.mask(float(args[0]))
            elif command == "Add":
                self.modify(args[1], add=float(args[0]))
            elif command == "Multiply":
                self.modify(args[1], multiply=float(args[0]))
            elif command == "Invert":
                self.invert(*args)
            else:
                raise ValueError(f"Unknown template command '{command}' in '{template_name}'")

        return self.heights


def to_unit_range(raw: np.ndarray) -> np.ndarray:
    """Map raw 0-100 heights to [0, 1] so the land threshold lands on sea level."""
    raw = np.asarray(raw, dtype=np.float64)
    below = raw / RAW_LAND_HEIGHT * SEA_LEVEL
    above = SEA_LEVEL + (raw - RAW_LAND_HEIGHT) / (100 - RAW_LAND_HEIGHT) * (1 - SEA_LEVEL)
    return np.where(raw <= RAW_LAND_HEIGHT, below, above)


def apply_elevation_power(elevation: np.ndarray, power: float) -> np.ndarray:
    """
    Raise relative height above (and depth below) sea level to ``power``.

    Each half of the range is remapped back onto itself, so cells never
    change between land and water.
    """
    if power == 1:
        return elevation
    land = elevation > SEA_LEVEL
    relative = np.where(
        land,
        (elevation - SEA_LEVEL) / (1 - SEA_LEVEL),
        (SEA_LEVEL - elevation) / SEA_LEVEL,
    )
    shaped = np.clip(relative, 0, 1) ** power
    return np.where(
        land,
        SEA_LEVEL + shaped * (1 - SEA_LEVEL),
        SEA_LEVEL - shaped * SEA_LEVEL,
    )


def compress_mountains(elevation: np.ndarray, compression: float) -> np.ndarray:
    """Flatten elevations above the mountain knee by ``compression``."""
    if compression <= 0:
        return elevation
    high = elevation > MOUNTAIN_KNEE
    return np.where(
        high, MOUNTAIN_KNEE + (elevation - MOUNTAIN_KNEE) * (1 - compression), elevation
    )


def smooth_elevation(elevation: np.ndarray, radius: int) -> np.ndarray:
    """Box mean filter of size 2 * radius + 1."""
    if radius <= 0:
        return elevation
    return ndimage.uniform_filter(elevation, size=2 * radius + 1, mode="nearest")


def remove_small_islands(elevation: np.ndarray, min_size: int) -> Tuple[np.ndarray, int]:
    """
    Sink 4-connected land masses smaller than ``min_size`` cells.

    Returns:
        New elevation array and the number of land masses removed
    """
    if min_size <= 1:
        return elevation, 0

    labels, count = ndimage.label(elevation > SEA_LEVEL)
    if count == 0:
        return elevation, 0

    sizes = np.bincount(labels.ravel())
    small = sizes < min_size
    small[0] = False
    removed = int(np.count_nonzero(small))
    if removed == 0:
        return elevation, 0

    result = elevation.copy()
    sink = small[labels]
    result[sink] = np.minimum(result[sink], SEA_LEVEL - 0.01)
    return result, removed


def shape_elevation(
    raw: np.ndarray, terrain: TerrainSettings, min_island_size: int = 0
) -> np.ndarray:
    """Turn raw template heights into the final [0, 1] elevation grid."""
    elevation = to_unit_range(raw)
    elevation = apply_elevation_power(elevation, terrain.elevation_power)
    elevation = compress_mountains(elevation, terrain.mountain_compression)
    elevation = smooth_elevation(elevation, terrain.smooth_radius)
    elevation, removed = remove_small_islands(elevation, min_island_size)
    if removed:
        logger.debug("Removed small islands", count=removed, min_size=min_island_size)
    return np.clip(elevation, 0.0, 1.0).astype(np.float32)


def generate_heightmap(
    seed: int,
    width: int,
    height: int,
    world_type: Union[WorldType, str],
    island_density: float,
    terrain: Optional[TerrainSettings] = None,
    min_island_size: int = 0,
) -> Heightmap:
    """
    Generate the world heightmap.

    Args:
        seed: World seed, the only source of randomness
        width: Grid width in cells
        height: Grid height in cells
        world_type: World layout (unknown names behave as EarthLike)
        island_density: Density of scattered islands in [0, 1]
        terrain: Terrain shaping settings
        min_island_size: Land masses smaller than this many cells are sunk

    Returns:
        Heightmap with values in [0, 1]
    """
    grid = GridConfig(width, height)
    world_type = WorldType.parse(world_type)
    profile = get_profile(world_type)
    terrain = terrain or TerrainSettings()

    logger.info(
        "Generating heightmap",
        width=width,
        height=height,
        world_type=world_type.value,
        template=profile.template,
    )

    generator = HeightmapGenerator(grid, stage_prng(seed, "heightmap"))
    generator.from_template(profile.template)
    generator.add_noise(profile.noise_frequency, profile.noise_octaves, profile.noise_amplitude)
    islands = generator.add_islands(island_density)

    elevation = shape_elevation(generator.heights.reshape(grid.shape), terrain, min_island_size)

    logger.info(
        "Heightmap generated",
        islands=islands,
        land_cells=int(np.count_nonzero(elevation > SEA_LEVEL)),
        prng_calls=generator._prng.call_count,
    )
    return Heightmap(width=width, height=height, values=elevation)
