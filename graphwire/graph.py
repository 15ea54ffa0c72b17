"""Adjacency-list graph backed by two flat arrays.

Nodes and edges live in Python lists and are addressed by position. Each
edge is threaded onto two intrusive singly linked lists: the outgoing list
of its source and the incoming list of its target. ``Node.next`` holds the
list heads and ``Edge.next`` holds the links, both as indices into the edge
array, with ``index_type.end`` as the terminator.

Removal swaps the last element into the vacated slot, so indices are array
positions and not stable identities.
"""

import enum
from typing import Iterator, Optional

import numpy as np

from graphwire.index import DEFAULT_INDEX_TYPE, IndexType


class Direction(enum.IntEnum):
    """Which of an edge's two lists; doubles as a position into ``next``."""

    OUTGOING = 0
    INCOMING = 1

    def opposite(self) -> "Direction":
        return Direction(1 - self)


DIRECTIONS = (Direction.OUTGOING, Direction.INCOMING)


class Node:
    """A node weight plus the heads of its outgoing and incoming lists."""

    __slots__ = ("weight", "next")

    def __init__(self, weight, next):
        self.weight = weight
        self.next = next

    def __repr__(self):
        return f"Node(weight={self.weight!r}, next={self.next})"


class Edge:
    """An edge weight, its endpoints, and its links in both lists."""

    __slots__ = ("weight", "node", "next")

    def __init__(self, weight, node, next):
        self.weight = weight
        self.node = node
        self.next = next

    def source(self) -> int:
        return self.node[Direction.OUTGOING]

    def target(self) -> int:
        return self.node[Direction.INCOMING]

    def __repr__(self):
        return f"Edge(weight={self.weight!r}, node={self.node}, next={self.next})"


class Graph:
    """
    Directed or undirected multigraph with O(1) edge insertion.

    The edge type is fixed at construction. For undirected graphs edges are
    still stored with a source and a target, but traversal reports both
    lists.
    """

    def __init__(self, directed: bool = True, index_type: IndexType = DEFAULT_INDEX_TYPE):
        self.directed = directed
        self.index_type = index_type
        self.nodes = []
        self.edges = []

    @classmethod
    def from_raw(cls, nodes, edges, directed=True, index_type=DEFAULT_INDEX_TYPE):
        """Adopt prebuilt node and edge arrays without touching their links."""
        graph = cls(directed=directed, index_type=index_type)
        graph.nodes = nodes
        graph.edges = edges
        return graph

    def __repr__(self):
        kind = "directed" if self.directed else "undirected"
        return (
            f"Graph({kind}, {self.index_type.name}, "
            f"{self.node_count():,} nodes, {self.edge_count():,} edges)"
        )

    # ------------------------------------------------------------------
    # Sizes and raw access
    # ------------------------------------------------------------------

    def is_directed(self) -> bool:
        return self.directed

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def raw_nodes(self):
        return self.nodes

    def raw_edges(self):
        return self.edges

    def node_indices(self):
        return range(len(self.nodes))

    def edge_indices(self):
        return range(len(self.edges))

    def node_weight(self, a: int):
        """Weight of node ``a``, or None if it does not exist."""
        if 0 <= a < len(self.nodes):
            return self.nodes[a].weight
        return None

    def edge_weight(self, e: int):
        """Weight of edge ``e``, or None if it does not exist."""
        if 0 <= e < len(self.edges):
            return self.edges[e].weight
        return None

    def edge_endpoints(self, e: int) -> Optional[tuple]:
        """``(source, target)`` of edge ``e``, or None if it does not exist."""
        if 0 <= e < len(self.edges):
            edge = self.edges[e]
            return edge.node[0], edge.node[1]
        return None

    def edge_endpoints_array(self) -> np.ndarray:
        """All edge endpoints as an ``(edge_count, 2)`` array of the index dtype."""
        endpoints = np.empty((len(self.edges), 2), dtype=self.index_type.dtype)
        for i, edge in enumerate(self.edges):
            endpoints[i, 0] = edge.node[0]
            endpoints[i, 1] = edge.node[1]
        return endpoints

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, weight) -> int:
        """Append a node and return its index.

        The node count is kept below ``index_type.max`` so every graph built
        here also decodes.
        """
        end = self.index_type.end
        node_idx = len(self.nodes)
        if node_idx + 1 >= end:
            raise OverflowError(
                f"Graph.add_node: node indices exhausted for {self.index_type.name}"
            )
        self.nodes.append(Node(weight, [end, end]))
        return node_idx

    def add_edge(self, a: int, b: int, weight=None) -> int:
        """Add an edge from ``a`` to ``b`` and return its index.

        Parallel edges and self-loops are allowed. The new edge becomes the
        head of ``a``'s outgoing list and ``b``'s incoming list.
        """
        end = self.index_type.end
        edge_idx = len(self.edges)
        if edge_idx + 1 >= end:
            raise OverflowError(
                f"Graph.add_edge: edge indices exhausted for {self.index_type.name}"
            )
        n = len(self.nodes)
        if not (0 <= a < n and 0 <= b < n):
            raise IndexError(f"Graph.add_edge: node indices out of bounds ({a}, {b})")

        an = self.nodes[a]
        bn = self.nodes[b]
        edge = Edge(weight, [a, b], [an.next[0], bn.next[1]])
        an.next[0] = edge_idx
        bn.next[1] = edge_idx
        self.edges.append(edge)
        return edge_idx

    def extend_with_edges(self, iterable) -> None:
        """Add edges from ``(a, b)`` or ``(a, b, weight)`` tuples."""
        for item in iterable:
            if len(item) == 2:
                self.add_edge(item[0], item[1])
            else:
                self.add_edge(item[0], item[1], item[2])

    def _change_edge_links(self, edge_node, e, edge_next):
        """Replace every link pointing at edge ``e`` with ``edge_next``.

        ``edge_node`` gives the owner of each list: the source for the
        outgoing list and the target for the incoming list.
        """
        for k in DIRECTIONS:
            node = self.nodes[edge_node[k]]
            if node.next[k] == e:
                node.next[k] = edge_next[k]
                continue
            cur = node.next[k]
            while cur != self.index_type.end:
                cur_edge = self.edges[cur]
                if cur_edge.next[k] == e:
                    cur_edge.next[k] = edge_next[k]
                    break
                cur = cur_edge.next[k]

    def remove_edge(self, e: int):
        """Remove edge ``e`` and return its weight, or None if absent.

        The last edge takes index ``e``.
        """
        if not 0 <= e < len(self.edges):
            return None
        removed = self.edges[e]
        self._change_edge_links(removed.node, e, removed.next)

        last = self.edges.pop()
        if e == len(self.edges):
            return removed.weight
        self.edges[e] = last
        # Links that pointed at the old last position now point at e.
        self._change_edge_links(last.node, len(self.edges), [e, e])
        return removed.weight

    def remove_node(self, a: int):
        """Remove node ``a`` and all its edges; return its weight or None.

        The last node takes index ``a``.
        """
        if not 0 <= a < len(self.nodes):
            return None
        end = self.index_type.end
        for k in DIRECTIONS:
            while True:
                nxt = self.nodes[a].next[k]
                if nxt == end:
                    break
                self.remove_edge(nxt)

        removed = self.nodes[a]
        last = self.nodes.pop()
        if a == len(self.nodes):
            return removed.weight
        self.nodes[a] = last
        for k in DIRECTIONS:
            cur = last.next[k]
            while cur != end:
                cur_edge = self.edges[cur]
                cur_edge.node[k] = a
                cur = cur_edge.next[k]
        return removed.weight

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _walk(self, head: int, k: int) -> Iterator[int]:
        end = self.index_type.end
        edges = self.edges
        cur = head
        while cur != end:
            yield cur
            cur = edges[cur].next[k]

    def edges_directed(self, a: int, direction: Direction) -> Iterator[int]:
        """Indices of the edges in ``a``'s outgoing or incoming list.

        For undirected graphs both lists are reported regardless of
        ``direction``, with self-loops reported once.
        """
        k = Direction(direction)
        node = self.nodes[a]
        yield from self._walk(node.next[k], k)
        if not self.directed:
            other = k.opposite()
            for e in self._walk(node.next[other], other):
                if self.edges[e].node[k] != a:
                    yield e

    def neighbors_directed(self, a: int, direction: Direction) -> Iterator[int]:
        """Nodes adjacent to ``a`` along ``direction``.

        A node appears once per connecting edge, so parallel edges repeat it.
        """
        k = Direction(direction)
        for e in self.edges_directed(a, k):
            node = self.edges[e].node
            # The far end is whichever endpoint is not in the list's own slot.
            yield node[1 - k] if node[k] == a else node[k]

    def neighbors(self, a: int) -> Iterator[int]:
        """Outgoing neighbors for directed graphs, all neighbors otherwise."""
        return self.neighbors_directed(a, Direction.OUTGOING)

    def neighbors_undirected(self, a: int) -> Iterator[int]:
        """All neighbors of ``a`` ignoring edge direction."""
        node = self.nodes[a]
        for e in self._walk(node.next[0], 0):
            yield self.edges[e].node[1]
        for e in self._walk(node.next[1], 1):
            src = self.edges[e].node[0]
            if src != a:
                yield src

    def find_edge(self, a: int, b: int) -> Optional[int]:
        """Index of an edge from ``a`` to ``b`` (either way if undirected)."""
        if not 0 <= a < len(self.nodes):
            return None
        for e in self._walk(self.nodes[a].next[0], 0):
            if self.edges[e].node[1] == b:
                return e
        if not self.directed:
            for e in self._walk(self.nodes[a].next[1], 1):
                if self.edges[e].node[0] == b:
                    return e
        return None

    def degree(self, a: int, direction: Direction = Direction.OUTGOING) -> int:
        return sum(1 for _ in self.edges_directed(a, direction))
