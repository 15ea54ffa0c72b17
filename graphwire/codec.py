"""Encode graphs to bytes and decode them back.

Encoding copies the node and edge arrays in order into a GraphMirror and
writes it out. Decoding reads a mirror and then runs a fixed pipeline:

1. direction tag must match the expected edge type
2. node_holes must be empty
3. node and edge counts must stay below the index sentinel
4. the parsed records become the graph's arrays
5. every edge is spliced onto its endpoints' adjacency lists

Any failure raises and the half-built graph is dropped.
"""

import time
from pathlib import Path
from typing import Union

from graphwire.errors import CapacityExceeded, DanglingEdge, HoleNotAllowed
from graphwire.graph import Edge, Graph, Node
from graphwire.index import DEFAULT_INDEX_TYPE, IndexType
from graphwire.mirror import GraphMirror, MirrorCodec
from graphwire.primitives import BinaryReader, BinaryWriter


def validate_holes(mirror: GraphMirror) -> None:
    if mirror.node_holes:
        raise HoleNotAllowed(
            f"Graph can not have holes in the node set, found "
            f"{len(mirror.node_holes)} hole(s)"
        )


def validate_capacity(mirror: GraphMirror, index_type: IndexType) -> None:
    # The sentinel shares the index space, so a count equal to max would
    # make the last real index indistinguishable from "no edge".
    if len(mirror.nodes) >= index_type.max:
        raise CapacityExceeded("nodes", len(mirror.nodes), index_type)
    if len(mirror.edges) >= index_type.max:
        raise CapacityExceeded("edges", len(mirror.edges), index_type)


def relink(graph: Graph) -> None:
    """Rebuild the adjacency lists of a graph from its edge endpoints.

    Existing links are discarded first. Edges are pushed onto list heads in
    array order, so each list ends up in reverse edge order. Raises
    DanglingEdge for an out-of-range endpoint.
    """
    end = graph.index_type.end
    nodes = graph.nodes
    for node in nodes:
        node.next = [end, end]
    n = len(nodes)
    for edge_idx, edge in enumerate(graph.edges):
        a, b = edge.node
        if a >= n or b >= n:
            raise DanglingEdge(edge_idx, max(a, b), n)
        an = nodes[a]
        bn = nodes[b]
        edge.next = [an.next[0], bn.next[1]]
        an.next[0] = edge_idx
        bn.next[1] = edge_idx


class GraphCodec:
    """Binary codec for Graph.

    Args:
        node_codec: weight codec for node weights (see graphwire.primitives)
        edge_codec: weight codec for edge weights
        directed: edge type expected when decoding
        index_type: index width expected when decoding

    Encoding always follows the edge type and index width of the graph being
    encoded; ``directed`` and ``index_type`` describe the decode target.
    """

    def __init__(
        self,
        node_codec,
        edge_codec,
        directed: bool = True,
        index_type: IndexType = DEFAULT_INDEX_TYPE,
    ):
        self.node_codec = node_codec
        self.edge_codec = edge_codec
        self.directed = directed
        self.index_type = index_type

    def _mirror_codec(self, index_type: IndexType) -> MirrorCodec:
        return MirrorCodec(self.node_codec, self.edge_codec, index_type)

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode_into(self, writer: BinaryWriter, graph: Graph) -> None:
        mirror = GraphMirror.from_graph(graph)
        self._mirror_codec(graph.index_type).encode(writer, mirror)

    def encode(self, graph: Graph) -> bytes:
        writer = BinaryWriter()
        self.encode_into(writer, graph)
        return writer.getvalue()

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def from_mirror(self, mirror: GraphMirror) -> Graph:
        """Validate a mirror and assemble a linked graph from copies of its records.

        The mirror's own records are left untouched, so a mirror taken from a
        live graph with ``GraphMirror.from_graph`` does not alias the result.
        """
        mirror.edge_property.check(self.directed)
        validate_holes(mirror)
        validate_capacity(mirror, self.index_type)
        end = self.index_type.end
        graph = Graph.from_raw(
            [Node(node.weight, [end, end]) for node in mirror.nodes],
            [Edge(edge.weight, list(edge.node), [end, end]) for edge in mirror.edges],
            directed=self.directed,
            index_type=self.index_type,
        )
        relink(graph)
        return graph

    def decode_from(self, reader: BinaryReader) -> Graph:
        """Decode one graph starting at the reader's position.

        Bytes after the graph are left unread.
        """
        mirror = self._mirror_codec(self.index_type).decode(reader)
        return self.from_mirror(mirror)

    def decode(self, data, verbose: bool = False) -> Graph:
        """Decode a buffer holding exactly one graph."""
        t0 = time.perf_counter()
        reader = BinaryReader(data)
        graph = self.decode_from(reader)
        reader.finish()
        if verbose:
            t1 = time.perf_counter()
            print(
                f"Decoded {graph.node_count():,} nodes, {graph.edge_count():,} edges "
                f"from {reader.position:,} bytes in {t1 - t0:.2f}s"
            )
        return graph

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def save(self, graph: Graph, filepath: Union[str, Path]) -> None:
        """Encode a graph straight into a file."""
        filepath = Path(filepath)
        print(f"Saving graph to {filepath}...")
        with open(filepath, "wb") as f:
            self.encode_into(BinaryWriter(f), graph)
        print(
            f"Graph saved! {graph.node_count():,} nodes, {graph.edge_count():,} "
            f"edges, {filepath.stat().st_size / 1024 / 1024:.1f} MB"
        )

    def load(self, filepath: Union[str, Path]) -> Graph:
        """Decode a graph from a file written by ``save``."""
        filepath = Path(filepath)
        print(f"Loading graph from {filepath}...")
        with open(filepath, "rb") as f:
            data = f.read()
        graph = self.decode(data)
        print(f"Graph loaded! {graph.node_count():,} nodes, {graph.edge_count():,} edges")
        return graph
