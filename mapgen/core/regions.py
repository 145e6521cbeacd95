"""
Region grouping.

Provinces are grouped into named regions of a target size. A region only
contains provinces of one class (land or sea) and is always connected in
the province graph.
"""

from typing import Dict, List

import numpy as np
import structlog
from pydantic import BaseModel, Field

from ..utils.random import stage_prng
from .errors import ConfigurationError, InvariantViolation
from .name_generator import NameGenerator, to_roman
from .province_graph import ProvinceGraph

logger = structlog.get_logger()


class Region(BaseModel):
    """Named group of adjacent provinces."""

    id: int = Field(description="Dense region identifier")
    name: str = Field(description="Region name, unique within a world")
    province_ids: List[int] = Field(description="Member provinces in ascending order")
    is_land: bool = Field(description="Land or sea region")


class RegionGrouper:
    """Groups provinces into regions by greedy growth and merging."""

    def __init__(self, provinces, graph: ProvinceGraph, target_size: int):
        if target_size < 1:
            raise ConfigurationError(f"Region target size must be at least 1, got {target_size}")
        if graph.node_count != len(provinces):
            raise ConfigurationError(
                f"Graph has {graph.node_count} nodes for {len(provinces)} provinces"
            )
        self.provinces = provinces
        self.graph = graph
        self.target_size = target_size
        self.is_land = [province.is_land for province in provinces]

    def grow(self) -> List[List[int]]:
        """
        Grow groups from the lowest unassigned province.

        Each group absorbs the unassigned same-class neighbour sharing the
        longest border with it (lowest id on ties) until it reaches the
        target size or runs out of candidates.
        """
        assignment = [-1] * len(self.provinces)
        groups: List[List[int]] = []

        for start in range(len(self.provinces)):
            if assignment[start] != -1:
                continue

            group_id = len(groups)
            members = [start]
            assignment[start] = group_id
            candidates: Dict[int, int] = {}
            self._add_candidates(start, assignment, candidates)

            while len(members) < self.target_size and candidates:
                best = max(candidates, key=lambda p: (candidates[p], -p))
                del candidates[best]
                members.append(best)
                assignment[best] = group_id
                self._add_candidates(best, assignment, candidates)

            groups.append(sorted(members))

        return groups

    def _add_candidates(self, province: int, assignment: List[int], candidates: Dict[int, int]):
        for neighbor in self.graph.adjacency[province]:
            if assignment[neighbor] == -1 and self.is_land[neighbor] == self.is_land[province]:
                candidates[neighbor] = candidates.get(neighbor, 0) + self.graph.border_length(
                    province, neighbor
                )

    def merge_small(self, groups: List[List[int]]) -> List[List[int]]:
        """
        Merge groups below half the target size into their smallest
        same-class neighbour group, until none is left that can merge.
        """
        min_size = max(1, self.target_size // 2)
        groups = [list(g) for g in groups]

        changed = True
        while changed:
            changed = False
            group_of = {}
            for index, members in enumerate(groups):
                for province in members:
                    group_of[province] = index

            for index, members in enumerate(groups):
                if not members or len(members) >= min_size:
                    continue

                is_land = self.is_land[members[0]]
                neighbors = {
                    group_of[neighbor]
                    for province in members
                    for neighbor in self.graph.adjacency[province]
                    if group_of[neighbor] != index and self.is_land[neighbor] == is_land
                }
                if not neighbors:
                    continue

                target = min(neighbors, key=lambda g: (len(groups[g]), g))
                groups[target] = sorted(groups[target] + members)
                groups[index] = []
                changed = True
                break

        groups = [g for g in groups if g]
        return sorted(groups, key=lambda g: g[0])

    def validate(self, groups: List[List[int]]) -> None:
        seen = np.zeros(len(self.provinces), dtype=np.int64)
        for members in groups:
            if not members:
                raise InvariantViolation("regions", "empty region")
            seen[members] += 1
        if (seen != 1).any():
            bad = np.flatnonzero(seen != 1).tolist()
            raise InvariantViolation("regions", f"provinces {bad[:10]} are not in exactly one region")


def name_regions(groups: List[List[int]], is_land: List[bool], seed: int) -> List[str]:
    """
    Markov names for every group, unique within the list.

    Each region draws from its own PRNG derived from the seed and the
    region id. Repeated names get a Roman numeral suffix.
    """
    generator = NameGenerator()
    names: List[str] = []
    used = set()

    for region_id, members in enumerate(groups):
        generator.reseed(stage_prng(seed, f"regions:{region_id}"))
        name = generator.generate_region_name(
            generator.base_for(region_id), is_land[members[0]]
        )

        if name in used:
            counter = 2
            while f"{name} {to_roman(counter)}" in used:
                counter += 1
            name = f"{name} {to_roman(counter)}"

        used.add(name)
        names.append(name)

    return names


def group_provinces_into_regions(
    provinces, graph: ProvinceGraph, target_size: int, seed: int = 0
) -> List[Region]:
    """
    Group provinces into named regions.

    Args:
        provinces: Province records
        graph: Province adjacency graph
        target_size: Desired provinces per region
        seed: World seed for region names

    Returns:
        Regions with dense ids, ordered by their lowest province id
    """
    grouper = RegionGrouper(provinces, graph, target_size)
    groups = grouper.merge_small(grouper.grow())
    grouper.validate(groups)

    is_land = grouper.is_land
    names = name_regions(groups, is_land, seed)

    regions = [
        Region(id=index, name=names[index], province_ids=members, is_land=is_land[members[0]])
        for index, members in enumerate(groups)
    ]

    logger.info(
        "Regions grouped",
        count=len(regions),
        land=sum(1 for r in regions if r.is_land),
        target_size=target_size,
    )
    return regions


def province_to_region_index(regions: List[Region], province_count: int) -> np.ndarray:
    """int32 array mapping every province id to its region id."""
    index = np.full(province_count, -1, dtype=np.int32)
    for region in regions:
        index[region.province_ids] = region.id
    return index
