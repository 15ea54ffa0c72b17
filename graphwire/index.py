"""Fixed-width node and edge indices.

Graphs are addressed by plain integer positions into their node and edge
arrays. Each graph picks one index width from a closed set; the largest
value of that width is reserved as the ``end`` sentinel meaning "no further
edge", so a graph holds at most ``max - 1`` nodes and ``max - 1`` edges.
"""

import numpy as np

from graphwire.errors import IndexSizeMismatch
from graphwire.primitives import BinaryReader, BinaryWriter


class IndexType:
    """One supported index width, backed by a numpy unsigned dtype."""

    __slots__ = ("name", "dtype", "width", "max", "_write", "_read")

    def __init__(self, name, dtype, write, read):
        self.name = name
        self.dtype = np.dtype(dtype)
        self.width = self.dtype.itemsize
        self.max = int(np.iinfo(self.dtype).max)
        self._write = write
        self._read = read

    @property
    def end(self) -> int:
        """Sentinel terminating an adjacency list."""
        return self.max

    def fits(self, value: int) -> bool:
        return 0 <= value <= self.max

    def check(self, value: int) -> int:
        """Return ``value`` as an int, or raise if it does not fit this width."""
        value = int(value)
        if not self.fits(value):
            raise IndexSizeMismatch(value, self)
        return value

    def __repr__(self):
        return f"IndexType({self.name})"


U8 = IndexType("u8", np.uint8, BinaryWriter.write_u8, BinaryReader.read_u8)
U16 = IndexType("u16", np.uint16, BinaryWriter.write_u16, BinaryReader.read_u16)
U32 = IndexType("u32", np.uint32, BinaryWriter.write_u32, BinaryReader.read_u32)
U64 = IndexType("u64", np.uint64, BinaryWriter.write_u64, BinaryReader.read_u64)

DEFAULT_INDEX_TYPE = U32

INDEX_TYPES = {ix.name: ix for ix in (U8, U16, U32, U64)}


def index_type_by_name(name: str) -> IndexType:
    """Look up an index width by name (``"u8"``, ``"u16"``, ``"u32"``, ``"u64"``)."""
    try:
        return INDEX_TYPES[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown index type: {name} (expected one of {', '.join(INDEX_TYPES)})"
        ) from None


def encode_index(writer: BinaryWriter, index_type: IndexType, value: int) -> None:
    """Write a node or edge index as its underlying fixed-width integer."""
    index_type._write(writer, index_type.check(value))


def decode_index(reader: BinaryReader, index_type: IndexType) -> int:
    """Read a node or edge index written by ``encode_index``."""
    return index_type.check(index_type._read(reader))
