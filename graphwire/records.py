"""Wire codecs for the direction tag and for single node and edge records.

A node record is its weight alone. An edge record is an option tag
followed by ``(source, target, weight)``; graphs without vacant slots
always write the "present" tag and refuse to read the "absent" one.
Adjacency links are never written. Decoded records come back with
sentinel links, to be filled in by relinking.
"""

import enum

from graphwire.errors import DirectionMismatch, HoleNotAllowed
from graphwire.graph import Edge, Node
from graphwire.index import IndexType, decode_index, encode_index
from graphwire.primitives import OPTION_NONE, OPTION_SOME, BinaryReader, BinaryWriter


class EdgeProperty(enum.IntEnum):
    """Direction tag; values are the wire discriminants."""

    UNDIRECTED = 0
    DIRECTED = 1

    def is_directed(self) -> bool:
        return self is EdgeProperty.DIRECTED

    @classmethod
    def from_directed(cls, directed: bool) -> "EdgeProperty":
        return cls.DIRECTED if directed else cls.UNDIRECTED

    def check(self, expected_directed: bool) -> None:
        """Raise DirectionMismatch unless this tag matches the expected type."""
        if self.is_directed() != bool(expected_directed):
            raise DirectionMismatch(expected_directed, self.is_directed())

    def encode(self, writer: BinaryWriter) -> None:
        writer.write_u8(int(self))

    @classmethod
    def decode(cls, reader: BinaryReader) -> "EdgeProperty":
        return cls(reader.read_tag(len(cls), "EdgeProperty"))


class NodeRecordCodec:
    """Encodes a node as its weight only."""

    def __init__(self, weight_codec, index_type: IndexType):
        self.weight_codec = weight_codec
        self.index_type = index_type

    def encode(self, writer: BinaryWriter, node: Node) -> None:
        self.weight_codec.encode(writer, node.weight)

    def decode(self, reader: BinaryReader) -> Node:
        end = self.index_type.end
        return Node(self.weight_codec.decode(reader), [end, end])


class EdgeRecordCodec:
    """Encodes an edge as ``Some((source, target, weight))``."""

    def __init__(self, weight_codec, index_type: IndexType):
        self.weight_codec = weight_codec
        self.index_type = index_type

    def encode(self, writer: BinaryWriter, edge: Edge) -> None:
        writer.write_u8(OPTION_SOME)
        encode_index(writer, self.index_type, edge.node[0])
        encode_index(writer, self.index_type, edge.node[1])
        self.weight_codec.encode(writer, edge.weight)

    def decode(self, reader: BinaryReader) -> Edge:
        if reader.read_tag(2, "edge option") == OPTION_NONE:
            raise HoleNotAllowed(
                "Graph can not have holes in the edge set, found None, "
                "expected edge"
            )
        source = decode_index(reader, self.index_type)
        target = decode_index(reader, self.index_type)
        weight = self.weight_codec.decode(reader)
        end = self.index_type.end
        return Edge(weight, [source, target], [end, end])
