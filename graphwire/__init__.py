"""
graphwire - Binary codec for index-addressed adjacency-list graphs
"""

__version__ = "0.1.0"

from graphwire.codec import GraphCodec, relink
from graphwire.errors import (
    CapacityExceeded,
    DanglingEdge,
    DecodeError,
    DirectionMismatch,
    GraphwireError,
    HoleNotAllowed,
    IndexSizeMismatch,
    PrimitiveCodecError,
)
from graphwire.graph import Direction, Edge, Graph, Node
from graphwire.index import U8, U16, U32, U64, IndexType, index_type_by_name
from graphwire.loader import build_graph_from_jsonl
from graphwire.mirror import GraphMirror, MirrorCodec
from graphwire.primitives import BinaryReader, BinaryWriter
from graphwire.records import EdgeProperty, EdgeRecordCodec, NodeRecordCodec

__all__ = [
    # Core classes
    "Graph",
    "Node",
    "Edge",
    "Direction",
    "GraphCodec",
    "GraphMirror",
    "MirrorCodec",
    # Records
    "EdgeProperty",
    "NodeRecordCodec",
    "EdgeRecordCodec",
    "relink",
    # Indices
    "IndexType",
    "U8",
    "U16",
    "U32",
    "U64",
    "index_type_by_name",
    # Primitives
    "BinaryReader",
    "BinaryWriter",
    # Loading
    "build_graph_from_jsonl",
    # Errors
    "GraphwireError",
    "DecodeError",
    "PrimitiveCodecError",
    "IndexSizeMismatch",
    "DirectionMismatch",
    "CapacityExceeded",
    "HoleNotAllowed",
    "DanglingEdge",
]
