"""Unit tests for graphwire.graph module."""

import numpy as np
import pytest

from graphwire.graph import Direction, Graph
from graphwire.index import U8, U16


def _out(g, a):
    return set(g.neighbors_directed(a, Direction.OUTGOING))


def _in(g, a):
    return set(g.neighbors_directed(a, Direction.INCOMING))


class TestInsertion:
    """Adding nodes and edges."""

    def test_indices_are_positions(self):
        g = Graph()
        assert g.add_node("a") == 0
        assert g.add_node("b") == 1
        assert g.add_edge(0, 1, 1.0) == 0
        assert g.add_edge(1, 0, 2.0) == 1
        assert g.node_count() == 2
        assert g.edge_count() == 2

    def test_new_edge_becomes_list_head(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        e0 = g.add_edge(a, b)
        e1 = g.add_edge(a, b)
        assert g.raw_nodes()[a].next[Direction.OUTGOING] == e1
        assert g.raw_edges()[e1].next[Direction.OUTGOING] == e0
        assert g.raw_edges()[e0].next[Direction.OUTGOING] == g.index_type.end

    def test_add_edge_out_of_bounds(self):
        g = Graph()
        g.add_node("a")
        with pytest.raises(IndexError):
            g.add_edge(0, 1)

    def test_node_indices_exhausted(self):
        g = Graph(index_type=U8)
        for i in range(254):
            g.add_node(i)
        with pytest.raises(OverflowError):
            g.add_node(254)
        assert g.node_count() == 254

    def test_edge_indices_exhausted(self):
        g = Graph(index_type=U8)
        a = g.add_node("a")
        for _ in range(254):
            g.add_edge(a, a)
        with pytest.raises(OverflowError):
            g.add_edge(a, a)

    def test_extend_with_edges(self):
        g = Graph()
        for name in "abc":
            g.add_node(name)
        g.extend_with_edges([(0, 1), (1, 2, "w")])
        assert g.edge_weight(0) is None
        assert g.edge_weight(1) == "w"
        assert g.edge_endpoints(1) == (1, 2)


class TestTraversal:
    """Neighbor and incident-edge iteration."""

    def test_directed_neighbors(self, make_graph):
        g = make_graph()
        # After removing D: A=0, B=1, C=2, F=3, E=4
        assert _out(g, 0) == {1}
        assert _out(g, 1) == {2, 3}
        assert _out(g, 2) == {0, 3}
        assert _out(g, 3) == set()
        assert _out(g, 4) == {3}
        assert _in(g, 3) == {1, 2, 4}
        assert set(g.neighbors(1)) == {2, 3}

    def test_undirected_neighbors_report_both_lists(self):
        g = Graph(directed=False)
        a = g.add_node("a")
        b = g.add_node("b")
        c = g.add_node("c")
        g.add_edge(a, b)
        g.add_edge(c, a)
        assert set(g.neighbors(a)) == {b, c}
        assert set(g.neighbors_directed(a, Direction.INCOMING)) == {b, c}

    def test_undirected_self_loop_reported_once(self):
        g = Graph(directed=False)
        a = g.add_node("a")
        loop = g.add_edge(a, a)
        assert list(g.edges_directed(a, Direction.OUTGOING)) == [loop]
        assert list(g.neighbors(a)) == [a]

    def test_directed_self_loop_in_both_lists(self):
        g = Graph()
        a = g.add_node("a")
        loop = g.add_edge(a, a)
        assert list(g.edges_directed(a, Direction.OUTGOING)) == [loop]
        assert list(g.edges_directed(a, Direction.INCOMING)) == [loop]

    def test_neighbors_undirected_on_directed_graph(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        c = g.add_node("c")
        g.add_edge(a, b)
        g.add_edge(c, a)
        assert set(g.neighbors_undirected(a)) == {b, c}

    def test_parallel_edges_repeat_neighbor(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        g.add_edge(a, b)
        g.add_edge(a, b)
        assert list(g.neighbors(a)) == [b, b]
        assert g.degree(a) == 2

    def test_find_edge(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        e = g.add_edge(a, b)
        assert g.find_edge(a, b) == e
        assert g.find_edge(b, a) is None

    def test_find_edge_undirected(self):
        g = Graph(directed=False)
        a = g.add_node("a")
        b = g.add_node("b")
        e = g.add_edge(a, b)
        assert g.find_edge(b, a) == e

    def test_missing_lookups_return_none(self):
        g = Graph()
        assert g.node_weight(0) is None
        assert g.edge_weight(0) is None
        assert g.edge_endpoints(0) is None
        assert g.find_edge(0, 0) is None


class TestRemoval:
    """Swap-remove semantics of remove_edge and remove_node."""

    def test_scenario_layout_after_remove_node(self, make_graph):
        g = make_graph()
        assert [n.weight for n in g.raw_nodes()] == ["A", "B", "C", "F", "E"]
        assert [e.weight for e in g.raw_edges()] == [7, 9, 15, 10, 11, 6]
        assert [g.edge_endpoints(e) for e in g.edge_indices()] == [
            (0, 1), (2, 0), (1, 3), (1, 2), (2, 3), (4, 3),
        ]

    def test_remove_edge_moves_last_edge(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        c = g.add_node("c")
        g.add_edge(a, b, "ab")
        g.add_edge(b, c, "bc")
        g.add_edge(c, a, "ca")
        assert g.remove_edge(0) == "ab"
        assert [e.weight for e in g.raw_edges()] == ["ca", "bc"]
        assert list(g.edges_directed(c, Direction.OUTGOING)) == [0]
        assert list(g.edges_directed(a, Direction.INCOMING)) == [0]
        assert _out(g, a) == set()
        assert _in(g, b) == set()

    def test_remove_last_edge(self):
        g = Graph()
        a = g.add_node("a")
        g.add_edge(a, a, 1)
        assert g.remove_edge(0) == 1
        assert g.edge_count() == 0
        assert g.raw_nodes()[a].next == [g.index_type.end, g.index_type.end]

    def test_remove_missing_edge(self):
        assert Graph().remove_edge(3) is None

    def test_remove_node_drops_incident_edges(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        c = g.add_node("c")
        g.add_edge(a, b)
        g.add_edge(b, c)
        g.add_edge(c, b)
        assert g.remove_node(b) == "b"
        assert g.edge_count() == 0
        # c moved into b's slot
        assert g.node_weight(1) == "c"

    def test_remove_node_rewrites_moved_endpoints(self):
        g = Graph()
        a = g.add_node("a")
        b = g.add_node("b")
        c = g.add_node("c")
        g.add_edge(c, a, "ca")
        g.add_edge(b, c, "bc")
        g.remove_node(a)
        # c is now index 0, b stays 1
        assert g.edge_endpoints(0) == (1, 0)
        assert g.edge_weight(0) == "bc"
        assert _out(g, 1) == {0}

    def test_remove_both_nodes(self):
        g = Graph()
        a = g.add_node(1729)
        b = g.add_node(1730)
        g.remove_node(b)
        g.remove_node(a)
        assert g.node_count() == 0

    def test_remove_missing_node(self):
        assert Graph().remove_node(0) is None


class TestArrays:
    def test_edge_endpoints_array(self, make_graph):
        g = make_graph(index_type=U16)
        endpoints = g.edge_endpoints_array()
        assert endpoints.dtype == np.uint16
        assert endpoints.shape == (6, 2)
        assert endpoints[5].tolist() == [4, 3]

    def test_empty_endpoints_array(self):
        assert Graph().edge_endpoints_array().shape == (0, 2)

    def test_repr(self):
        assert repr(Graph(directed=False)) == "Graph(undirected, u32, 0 nodes, 0 edges)"
