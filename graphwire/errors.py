"""Exceptions raised while encoding and decoding graphs.

Every decode failure derives from DecodeError, which is also a ValueError,
so callers can catch either. A decode call that raises never hands back a
partially built graph.
"""


class GraphwireError(Exception):
    """Base class for all graphwire errors."""


class DecodeError(GraphwireError, ValueError):
    """A byte stream could not be turned into a graph."""


class PrimitiveCodecError(DecodeError):
    """Malformed or truncated input at the primitive level."""


class IndexSizeMismatch(PrimitiveCodecError):
    """An integer does not fit the configured index width."""

    def __init__(self, value, index_type):
        self.value = value
        self.index_type = index_type
        super().__init__(
            f"index {value} is not representable as {index_type.name} "
            f"(0..{index_type.max})"
        )


class DirectionMismatch(DecodeError):
    """The stream's direction tag differs from the expected edge type."""

    def __init__(self, expected_directed, found_directed):
        self.expected_directed = expected_directed
        self.found_directed = found_directed
        expected = "directed" if expected_directed else "undirected"
        found = "directed" if found_directed else "undirected"
        super().__init__(
            f"graph edge property mismatch: expected {expected}, found {found}"
        )


class CapacityExceeded(DecodeError):
    """Node or edge count reaches the index type's sentinel value."""

    def __init__(self, kind, count, index_type):
        self.kind = kind
        self.count = count
        self.index_type = index_type
        super().__init__(
            f"invalid size: {count:,} {kind} do not fit {index_type.name} "
            f"indices (limit {index_type.max - 1:,})"
        )


class HoleNotAllowed(DecodeError):
    """The stream contains a vacant node or edge slot."""


class DanglingEdge(DecodeError):
    """An edge refers to a node that does not exist."""

    def __init__(self, edge_index, node_index, node_count):
        self.edge_index = edge_index
        self.node_index = node_index
        self.node_count = node_count
        super().__init__(
            f"invalid node: edge {edge_index} refers to node {node_index}, "
            f"graph has {node_count} nodes"
        )
