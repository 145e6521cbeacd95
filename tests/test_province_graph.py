"""Tests for the province adjacency graph."""

import numpy as np

from mapgen.core.province_graph import ProvinceGraph, build_province_graph


class TestProvinceGraph:
    """Test graph construction from a partition."""

    def test_four_quadrants(self):
        pixel_to_id = np.array([[0, 0, 1, 1], [0, 0, 1, 1], [2, 2, 3, 3], [2, 2, 3, 3]])
        graph = build_province_graph(range(4), pixel_to_id, 4, 4)
        assert graph.edges() == [(0, 1), (0, 2), (1, 3), (2, 3)]
        # Diagonal contact is not adjacency
        assert 3 not in graph.neighbors(0)
        assert graph.border_length(0, 1) == 2
        assert graph.border_length(1, 0) == 2
        assert graph.border_length(0, 3) == 0

    def test_no_self_loops(self):
        graph = build_province_graph(range(1), np.zeros((5, 5), dtype=int), 5, 5)
        assert graph.edge_count == 0
        assert graph.neighbors(0) == []

    def test_flat_input(self):
        graph = build_province_graph(range(2), np.array([0, 0, 1, 1, 0, 1]), 3, 2)
        assert graph.edges() == [(0, 1)]
        assert graph.border_length(0, 1) == 4

    def test_add_edge(self):
        graph = ProvinceGraph(node_count=3)
        graph.add_edge(0, 1)
        graph.add_edge(1, 0, 2)
        graph.add_edge(2, 2)
        assert graph.border_length(0, 1) == 3
        assert graph.edge_count == 1
        assert graph.adjacency[2] == set()

    def test_connected_components(self):
        pixel_to_id = np.array([[0, 1, 2, 2], [0, 1, 3, 3]])
        graph = build_province_graph(range(5), pixel_to_id, 4, 2)
        assert graph.connected_components() == [[0, 1, 2, 3], [4]]

    def test_is_connected(self):
        pixel_to_id = np.array([[0, 1, 2, 2], [0, 1, 3, 3]])
        graph = build_province_graph(range(5), pixel_to_id, 4, 2)
        assert graph.is_connected([0, 1, 3])
        assert graph.is_connected([2])
        assert not graph.is_connected([0, 2])
        assert not graph.is_connected([3, 4])
        assert not graph.is_connected([])

    def test_single_cell(self):
        graph = build_province_graph(range(1), np.array([[0]]), 1, 1)
        assert graph.node_count == 1
        assert graph.edges() == []
