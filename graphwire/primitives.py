"""Primitive binary codec used for leaf values, tags and sequences.

Layout follows the Borsh conventions:

- integers and floats are fixed width, little-endian
- bool is one byte (0 or 1)
- strings and byte strings are a u32 length followed by the payload
- sequences are a u32 count followed by the elements
- enum and option tags are a single u8 discriminant

Weight codecs at the bottom of the module are small objects exposing
``encode(writer, value)`` and ``decode(reader)``. Graph codecs take one for
node weights and one for edge weights.
"""

import io
import struct

import msgpack

from graphwire.errors import PrimitiveCodecError


OPTION_NONE = 0
OPTION_SOME = 1

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_I8 = struct.Struct("<b")
_I16 = struct.Struct("<h")
_I32 = struct.Struct("<i")
_I64 = struct.Struct("<q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")


class BinaryWriter:
    """Writes primitives to a binary sink (``io.BytesIO`` by default).

    Errors raised by the sink propagate unchanged.
    """

    __slots__ = ("_sink",)

    def __init__(self, sink=None):
        self._sink = sink if sink is not None else io.BytesIO()

    def getvalue(self) -> bytes:
        return self._sink.getvalue()

    def write_raw(self, data) -> None:
        self._sink.write(data)

    def _pack(self, fmt: struct.Struct, value) -> None:
        try:
            self._sink.write(fmt.pack(value))
        except struct.error as e:
            if isinstance(value, (int, float)):
                raise OverflowError(f"{value!r} out of range for {fmt.format}") from e
            raise TypeError(f"cannot pack {type(value).__name__} as {fmt.format}") from e

    def write_u8(self, value: int) -> None:
        self._pack(_U8, value)

    def write_u16(self, value: int) -> None:
        self._pack(_U16, value)

    def write_u32(self, value: int) -> None:
        self._pack(_U32, value)

    def write_u64(self, value: int) -> None:
        self._pack(_U64, value)

    def write_i8(self, value: int) -> None:
        self._pack(_I8, value)

    def write_i16(self, value: int) -> None:
        self._pack(_I16, value)

    def write_i32(self, value: int) -> None:
        self._pack(_I32, value)

    def write_i64(self, value: int) -> None:
        self._pack(_I64, value)

    def write_f32(self, value: float) -> None:
        self._pack(_F32, value)

    def write_f64(self, value: float) -> None:
        self._pack(_F64, value)

    def write_bool(self, value: bool) -> None:
        self._pack(_U8, 1 if value else 0)

    def write_len(self, length: int) -> None:
        """Write a sequence length prefix."""
        self._pack(_U32, length)

    def write_bytes(self, value: bytes) -> None:
        self.write_len(len(value))
        self._sink.write(value)

    def write_string(self, value: str) -> None:
        self.write_bytes(value.encode("utf-8"))


class BinaryReader:
    """Reads primitives from an in-memory buffer.

    Any attempt to read past the end raises PrimitiveCodecError.
    """

    __slots__ = ("_view", "_pos")

    def __init__(self, data):
        self._view = memoryview(data).cast("B")
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def finish(self) -> None:
        """Fail if any input is left unread."""
        if self.remaining:
            raise PrimitiveCodecError(
                f"Not all bytes read: {self.remaining} trailing byte(s) "
                f"at offset {self._pos}"
            )

    def read_raw(self, n: int) -> bytes:
        end = self._pos + n
        if n < 0 or end > len(self._view):
            raise PrimitiveCodecError(
                f"Unexpected length of input: wanted {n} byte(s) at offset "
                f"{self._pos}, {self.remaining} available"
            )
        data = self._view[self._pos:end].tobytes()
        self._pos = end
        return data

    def _unpack(self, fmt: struct.Struct):
        end = self._pos + fmt.size
        if end > len(self._view):
            raise PrimitiveCodecError(
                f"Unexpected length of input: wanted {fmt.size} byte(s) at "
                f"offset {self._pos}, {self.remaining} available"
            )
        value = fmt.unpack_from(self._view, self._pos)[0]
        self._pos = end
        return value

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_u64(self) -> int:
        return self._unpack(_U64)

    def read_i8(self) -> int:
        return self._unpack(_I8)

    def read_i16(self) -> int:
        return self._unpack(_I16)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_i64(self) -> int:
        return self._unpack(_I64)

    def read_f32(self) -> float:
        return self._unpack(_F32)

    def read_f64(self) -> float:
        return self._unpack(_F64)

    def read_bool(self) -> bool:
        value = self._unpack(_U8)
        if value > 1:
            raise PrimitiveCodecError(f"Invalid bool representation: {value}")
        return value == 1

    def read_len(self) -> int:
        return self._unpack(_U32)

    def read_bytes(self) -> bytes:
        return self.read_raw(self.read_len())

    def read_string(self) -> str:
        raw = self.read_bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PrimitiveCodecError(f"Invalid UTF-8 string: {e}") from e

    def read_tag(self, variants: int, what: str = "enum") -> int:
        """Read a one-byte discriminant, checking it names a known variant."""
        tag = self._unpack(_U8)
        if tag >= variants:
            raise PrimitiveCodecError(
                f"Unexpected variant index {tag} for {what} "
                f"with {variants} variants"
            )
        return tag


# ---------------------------------------------------------------------
# Weight codecs
# ---------------------------------------------------------------------


class _Scalar:
    """Codec bound to a pair of writer/reader methods."""

    __slots__ = ("name", "_write", "_read")

    def __init__(self, name, write, read):
        self.name = name
        self._write = write
        self._read = read

    def encode(self, writer: BinaryWriter, value) -> None:
        self._write(writer, value)

    def decode(self, reader: BinaryReader):
        return self._read(reader)

    def __repr__(self):
        return self.name


U8 = _Scalar("U8", BinaryWriter.write_u8, BinaryReader.read_u8)
U16 = _Scalar("U16", BinaryWriter.write_u16, BinaryReader.read_u16)
U32 = _Scalar("U32", BinaryWriter.write_u32, BinaryReader.read_u32)
U64 = _Scalar("U64", BinaryWriter.write_u64, BinaryReader.read_u64)
I8 = _Scalar("I8", BinaryWriter.write_i8, BinaryReader.read_i8)
I16 = _Scalar("I16", BinaryWriter.write_i16, BinaryReader.read_i16)
I32 = _Scalar("I32", BinaryWriter.write_i32, BinaryReader.read_i32)
I64 = _Scalar("I64", BinaryWriter.write_i64, BinaryReader.read_i64)
F32 = _Scalar("F32", BinaryWriter.write_f32, BinaryReader.read_f32)
F64 = _Scalar("F64", BinaryWriter.write_f64, BinaryReader.read_f64)
BOOL = _Scalar("BOOL", BinaryWriter.write_bool, BinaryReader.read_bool)
STRING = _Scalar("STRING", BinaryWriter.write_string, BinaryReader.read_string)
BYTES = _Scalar("BYTES", BinaryWriter.write_bytes, BinaryReader.read_bytes)
# Zero bytes on the wire; decodes to None.
UNIT = _Scalar("UNIT", lambda writer, value: None, lambda reader: None)


class _Msgpack:
    """Arbitrary JSON-like values as a length-prefixed msgpack payload."""

    def encode(self, writer: BinaryWriter, value) -> None:
        writer.write_bytes(msgpack.packb(value, use_bin_type=True))

    def decode(self, reader: BinaryReader):
        payload = reader.read_bytes()
        try:
            return msgpack.unpackb(payload, raw=False)
        except Exception as e:
            raise PrimitiveCodecError(f"MessagePack decode failed: {e}") from e

    def __repr__(self):
        return "MSGPACK"


MSGPACK = _Msgpack()


class TupleCodec:
    """Fixed-arity tuple: the element encodings back to back."""

    def __init__(self, *codecs):
        self.codecs = codecs

    def encode(self, writer: BinaryWriter, value) -> None:
        if len(value) != len(self.codecs):
            raise ValueError(
                f"expected a {len(self.codecs)}-tuple, got {len(value)} items"
            )
        for codec, item in zip(self.codecs, value):
            codec.encode(writer, item)

    def decode(self, reader: BinaryReader):
        return tuple(codec.decode(reader) for codec in self.codecs)

    def __repr__(self):
        return f"TupleCodec({', '.join(map(repr, self.codecs))})"


class OptionCodec:
    """``None`` or a value, behind a one-byte tag."""

    def __init__(self, codec):
        self.codec = codec

    def encode(self, writer: BinaryWriter, value) -> None:
        if value is None:
            writer.write_u8(OPTION_NONE)
        else:
            writer.write_u8(OPTION_SOME)
            self.codec.encode(writer, value)

    def decode(self, reader: BinaryReader):
        if reader.read_tag(2, "option") == OPTION_NONE:
            return None
        return self.codec.decode(reader)

    def __repr__(self):
        return f"OptionCodec({self.codec!r})"


class SequenceCodec:
    """Length-prefixed homogeneous sequence, decoded as a list."""

    def __init__(self, codec):
        self.codec = codec

    def encode(self, writer: BinaryWriter, value) -> None:
        writer.write_len(len(value))
        for item in value:
            self.codec.encode(writer, item)

    def decode(self, reader: BinaryReader):
        return [self.codec.decode(reader) for _ in range(reader.read_len())]

    def __repr__(self):
        return f"SequenceCodec({self.codec!r})"


_NAMED = {
    "u8": U8, "u16": U16, "u32": U32, "u64": U64,
    "i8": I8, "i16": I16, "i32": I32, "i64": I64,
    "f32": F32, "f64": F64,
    "bool": BOOL, "string": STRING, "bytes": BYTES,
    "unit": UNIT, "msgpack": MSGPACK,
}


def codec_by_name(name: str):
    """Look up a scalar weight codec by its lowercase name (e.g. ``"i32"``)."""
    try:
        return _NAMED[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown weight codec: {name} (expected one of {', '.join(_NAMED)})"
        ) from None
