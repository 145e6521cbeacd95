"""
Province adjacency graph.

Two provinces are adjacent when some pair of edge-adjacent cells belongs to
one and the other. The graph is undirected, has no self loops and keeps
the number of shared cell boundaries of every edge.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

import numpy as np
import structlog

from .grid import GridConfig, shifted_pairs

logger = structlog.get_logger()


@dataclass
class ProvinceGraph:
    """Undirected adjacency between provinces."""

    node_count: int
    adjacency: List[Set[int]] = field(default_factory=list)
    # Shared cell boundaries per edge, keyed by (low id, high id)
    border_lengths: Dict[Tuple[int, int], int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.adjacency:
            self.adjacency = [set() for _ in range(self.node_count)]

    def add_edge(self, a: int, b: int, shared: int = 1) -> None:
        if a == b:
            return
        key = (a, b) if a < b else (b, a)
        self.adjacency[a].add(b)
        self.adjacency[b].add(a)
        self.border_lengths[key] = self.border_lengths.get(key, 0) + shared

    def neighbors(self, province_id: int) -> List[int]:
        """Adjacent province ids in ascending order."""
        return sorted(self.adjacency[province_id])

    def border_length(self, a: int, b: int) -> int:
        key = (a, b) if a < b else (b, a)
        return self.border_lengths.get(key, 0)

    def edges(self) -> List[Tuple[int, int]]:
        """Every edge once, as (low id, high id), sorted."""
        return sorted(self.border_lengths)

    @property
    def edge_count(self) -> int:
        return len(self.border_lengths)

    def connected_components(self) -> List[List[int]]:
        """Connected groups of province ids, ordered by their lowest id."""
        seen = [False] * self.node_count
        components = []
        for start in range(self.node_count):
            if seen[start]:
                continue
            seen[start] = True
            stack = [start]
            component = []
            while stack:
                node = stack.pop()
                component.append(node)
                for neighbor in self.adjacency[node]:
                    if not seen[neighbor]:
                        seen[neighbor] = True
                        stack.append(neighbor)
            components.append(sorted(component))
        return components

    def is_connected(self, members) -> bool:
        """True when ``members`` form one connected subgraph."""
        members = set(members)
        if not members:
            return False
        start = next(iter(members))
        seen = {start}
        stack = [start]
        while stack:
            for neighbor in self.adjacency[stack.pop()]:
                if neighbor in members and neighbor not in seen:
                    seen.add(neighbor)
                    stack.append(neighbor)
        return len(seen) == len(members)


def build_province_graph(provinces, pixel_to_id: np.ndarray, width: int, height: int) -> ProvinceGraph:
    """
    Build the adjacency graph of a province partition.

    Args:
        provinces: Province records (only the count is used)
        pixel_to_id: Province id per cell
        width: Grid width
        height: Grid height

    Returns:
        ProvinceGraph over ids 0..len(provinces)-1
    """
    grid = GridConfig(width, height)
    ids = grid.check_layer("pixel_to_id", pixel_to_id).astype(np.int64)

    graph = ProvinceGraph(node_count=len(provinces))
    for a, b in shifted_pairs(ids):
        differs = a != b
        if not differs.any():
            continue
        low = np.minimum(a[differs], b[differs])
        high = np.maximum(a[differs], b[differs])
        pairs, counts = np.unique(np.stack([low, high], axis=1), axis=0, return_counts=True)
        for (p, q), count in zip(pairs.tolist(), counts.tolist()):
            graph.add_edge(p, q, count)

    logger.info("Province graph built", nodes=graph.node_count, edges=graph.edge_count)
    return graph
