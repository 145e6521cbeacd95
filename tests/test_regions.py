"""Tests for region grouping and naming."""

import numpy as np
import pytest

from mapgen.core.errors import ConfigurationError
from mapgen.core.province_graph import ProvinceGraph
from mapgen.core.provinces import Province
from mapgen.core.regions import (
    group_provinces_into_regions,
    name_regions,
    province_to_region_index,
)


def make_provinces(land_flags):
    return [
        Province(id=i, is_land=is_land, area=1, center=(float(i), 0.0), seed_cell=i)
        for i, is_land in enumerate(land_flags)
    ]


def chain_graph(count):
    """Provinces 0..count-1 in a row, each touching the next."""
    graph = ProvinceGraph(node_count=count)
    for i in range(count - 1):
        graph.add_edge(i, i + 1)
    return graph


def is_connected(graph, members):
    members = set(members)
    start = next(iter(members))
    seen = {start}
    stack = [start]
    while stack:
        node = stack.pop()
        for neighbor in graph.adjacency[node]:
            if neighbor in members and neighbor not in seen:
                seen.add(neighbor)
                stack.append(neighbor)
    return seen == members


class TestRegionGrouping:
    """Test the region partition."""

    def test_chain_grouping(self):
        regions = group_provinces_into_regions(make_provinces([True] * 10), chain_graph(10), 4)
        assert [r.province_ids for r in regions] == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]
        assert [r.id for r in regions] == [0, 1, 2]

    def test_small_groups_are_merged(self):
        regions = group_provinces_into_regions(make_provinces([True] * 9), chain_graph(9), 4)
        assert [r.province_ids for r in regions] == [[0, 1, 2, 3], [4, 5, 6, 7, 8]]

    def test_classes_never_mix(self):
        provinces = make_provinces([True, True, True, False, False])
        regions = group_provinces_into_regions(provinces, chain_graph(5), 8)
        assert [r.province_ids for r in regions] == [[0, 1, 2], [3, 4]]
        assert [r.is_land for r in regions] == [True, False]

    def test_longest_border_absorbed_first(self):
        graph = ProvinceGraph(node_count=3)
        graph.add_edge(0, 1, 1)
        graph.add_edge(0, 2, 5)
        regions = group_provinces_into_regions(make_provinces([True] * 3), graph, 2)
        assert regions[0].province_ids == [0, 2]

    def test_partition_and_connectivity(self):
        rng = np.random.default_rng(3)
        count = 40
        graph = chain_graph(count)
        for _ in range(30):
            a, b = rng.integers(0, count, size=2)
            graph.add_edge(int(a), int(b))
        provinces = make_provinces([bool(i % 3) for i in range(count)])

        regions = group_provinces_into_regions(provinces, graph, 5, seed=8)
        members = sorted(p for r in regions for p in r.province_ids)
        assert members == list(range(count))
        for region in regions:
            assert region.province_ids
            assert is_connected(graph, region.province_ids)
            assert len({provinces[p].is_land for p in region.province_ids}) == 1

    def test_isolated_province_is_own_region(self):
        graph = ProvinceGraph(node_count=3)
        graph.add_edge(0, 1)
        regions = group_provinces_into_regions(make_provinces([True] * 3), graph, 8)
        assert [r.province_ids for r in regions] == [[0, 1], [2]]

    def test_names_unique_and_deterministic(self):
        provinces = make_provinces([True] * 30)
        a = group_provinces_into_regions(provinces, chain_graph(30), 2, seed=5)
        b = group_provinces_into_regions(provinces, chain_graph(30), 2, seed=5)
        names = [r.name for r in a]
        assert names == [r.name for r in b]
        assert len(set(names)) == len(names)

    def test_invalid_target_size(self):
        with pytest.raises(ConfigurationError):
            group_provinces_into_regions(make_provinces([True]), chain_graph(1), 0)

    def test_graph_mismatch(self):
        with pytest.raises(ConfigurationError):
            group_provinces_into_regions(make_provinces([True] * 3), chain_graph(2), 4)

    def test_province_to_region_index(self):
        regions = group_provinces_into_regions(make_provinces([True] * 10), chain_graph(10), 4)
        index = province_to_region_index(regions, 10)
        assert index.tolist() == [0, 0, 0, 0, 1, 1, 1, 1, 2, 2]


class TestRegionNames:
    """Test region naming."""

    def test_many_names_stay_unique(self):
        groups = [[i] for i in range(200)]
        names = name_regions(groups, [i % 2 == 0 for i in range(200)], seed=1)
        assert len(set(names)) == 200
        assert all(names)

    def test_sea_regions_use_maritime_patterns(self):
        names = name_regions([[0], [1], [2]], [False, False, False], seed=2)
        keywords = ("Sea", "Bay", "Gulf", "Sound", "Deep")
        assert all(any(k in name for k in keywords) for name in names)
