"""Pytest fixtures shared across all test modules."""

import os

import pytest

from graphwire.graph import Graph
from graphwire.index import U32


def build_weighted_graph(directed=True, index_type=U32):
    """Six nodes A-F, nine weighted edges, then node D removed.

    Removing D swaps F into D's slot and pulls the last edges into the
    slots of D's edges, so both arrays end up reordered.
    """
    g = Graph(directed=directed, index_type=index_type)
    a = g.add_node("A")
    b = g.add_node("B")
    c = g.add_node("C")
    d = g.add_node("D")
    e = g.add_node("E")
    f = g.add_node("F")
    g.extend_with_edges([
        (a, b, 7),
        (c, a, 9),
        (a, d, 14),
        (b, c, 10),
        (d, c, 2),
        (d, e, 9),
        (b, f, 15),
        (c, f, 11),
        (e, f, 6),
    ])
    g.remove_node(d)
    return g


@pytest.fixture
def make_graph():
    """Factory for the six-node weighted graph with one node removed."""
    return build_weighted_graph


@pytest.fixture
def fixtures_dir():
    """Directory holding the JSONL fixture files."""
    return os.path.join(os.path.dirname(__file__), "fixtures")
