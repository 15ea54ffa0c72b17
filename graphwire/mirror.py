"""Transient wire-shaped view of a graph.

Field order on the wire::

    nodes:         [weight]
    node_holes:    [index]          always empty for Graph
    edge_property: u8 tag           0 = undirected, 1 = directed
    edges:         [Option<(index, index, weight)>]
"""

from dataclasses import dataclass, field

from graphwire.errors import CapacityExceeded
from graphwire.graph import Edge, Graph, Node
from graphwire.index import IndexType, decode_index, encode_index
from graphwire.primitives import BinaryReader, BinaryWriter
from graphwire.records import EdgeProperty, EdgeRecordCodec, NodeRecordCodec


@dataclass
class GraphMirror:
    """The four wire fields of a graph.

    Declaration order differs from wire order so ``node_holes`` can default
    to empty; ``MirrorCodec`` writes them in the order shown above.
    """
    nodes: list[Node]
    edge_property: EdgeProperty
    edges: list[Edge]
    node_holes: list[int] = field(default_factory=list)

    @classmethod
    def from_graph(cls, graph: Graph) -> "GraphMirror":
        return cls(
            nodes=graph.raw_nodes(),
            edge_property=EdgeProperty.from_directed(graph.is_directed()),
            edges=graph.raw_edges(),
            node_holes=[],
        )


class MirrorCodec:
    """Reads and writes a GraphMirror at one index width."""

    def __init__(self, node_codec, edge_codec, index_type: IndexType):
        self.index_type = index_type
        self.node_records = NodeRecordCodec(node_codec, index_type)
        self.edge_records = EdgeRecordCodec(edge_codec, index_type)

    def encode(self, writer: BinaryWriter, mirror: GraphMirror) -> None:
        writer.write_len(len(mirror.nodes))
        for node in mirror.nodes:
            self.node_records.encode(writer, node)

        writer.write_len(len(mirror.node_holes))
        for hole in mirror.node_holes:
            encode_index(writer, self.index_type, hole)

        mirror.edge_property.encode(writer)

        writer.write_len(len(mirror.edges))
        for edge in mirror.edges:
            self.edge_records.encode(writer, edge)

    def _read_count(self, reader: BinaryReader, kind: str) -> int:
        # Checked before the element loop: zero-width weights consume no input.
        count = reader.read_len()
        if count >= self.index_type.max:
            raise CapacityExceeded(kind, count, self.index_type)
        return count

    def decode(self, reader: BinaryReader) -> GraphMirror:
        node_count = self._read_count(reader, "nodes")
        nodes = [self.node_records.decode(reader) for _ in range(node_count)]
        node_holes = [
            decode_index(reader, self.index_type) for _ in range(reader.read_len())
        ]
        edge_property = EdgeProperty.decode(reader)
        edge_count = self._read_count(reader, "edges")
        edges = [self.edge_records.decode(reader) for _ in range(edge_count)]
        return GraphMirror(
            nodes=nodes,
            edge_property=edge_property,
            edges=edges,
            node_holes=node_holes,
        )
