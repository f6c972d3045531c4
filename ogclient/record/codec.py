"""Binary encoding helpers for record serialization.

The ``append_*`` functions extend a bytearray in place and return it; any
other bytes-like buffer is copied into a new bytearray first.
"""

from __future__ import annotations

import struct
from collections.abc import Sequence

BOOLEAN_SIZE_BYTES = 1
UINT32_SIZE_BYTES = 4
INT64_SIZE_BYTES = 8
FLOAT64_SIZE_BYTES = 8

SIZE_OF_INT = 8
SIZE_OF_UINT16 = 2
SIZE_OF_UINT32 = 4
MAX_SLICE_SIZE = SIZE_OF_UINT32

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MASK = (1 << 64) - 1


def _as_bytearray(buf) -> bytearray:
    if isinstance(buf, bytearray):
        return buf
    return bytearray(buf if buf is not None else b"")


def bytes_to_str(data: bytes) -> str:
    """Decode bytes as UTF-8, keeping undecodable bytes recoverable."""
    return bytes(data).decode("utf-8", errors="surrogateescape")


def append_uint16(buf, value: int) -> bytearray:
    """Append the low 16 bits of value, big-endian."""
    out = _as_bytearray(buf)
    out += (value & 0xFFFF).to_bytes(2, "big")
    return out


def append_uint32(buf, value: int) -> bytearray:
    """Append the low 32 bits of value, big-endian."""
    out = _as_bytearray(buf)
    out += (value & 0xFFFFFFFF).to_bytes(4, "big")
    return out


def append_int64(buf, value: int) -> bytearray:
    """Append a zig-zag encoded signed 64-bit integer, big-endian."""
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise OverflowError(f"value out of int64 range: {value}")
    encoded = ((value << 1) ^ (value >> 63)) & _UINT64_MASK
    out = _as_bytearray(buf)
    out += encoded.to_bytes(8, "big")
    return out


def append_int(buf, value: int) -> bytearray:
    """Append a platform int, encoded as a 64-bit zig-zag integer."""
    return append_int64(buf, value)


def append_string(buf, s: str) -> bytearray:
    """Append a string prefixed by its UTF-8 byte length as uint16."""
    data = s.encode("utf-8")
    out = append_uint16(buf, len(data))
    out += data
    return out


def append_bytes(buf, data: bytes) -> bytearray:
    """Append bytes prefixed by their length as uint32."""
    out = append_uint32(buf, len(data))
    out += data
    return out


def uint32_slice_to_bytes(values: Sequence[int]) -> bytes:
    """Return the raw little-endian bytes of a sequence of uint32 values."""
    if not values:
        return b""
    return struct.pack(f"<{len(values)}I", *values)


def append_uint32_slice(buf, values: Sequence[int]) -> bytearray:
    """Append a uint32 count followed by the raw uint32 values."""
    out = append_uint32(buf, len(values))
    out += uint32_slice_to_bytes(values)
    return out


def size_of_string(s: str) -> int:
    return len(s.encode("utf-8")) + SIZE_OF_UINT16


def size_of_uint32() -> int:
    return SIZE_OF_UINT32


def size_of_int() -> int:
    return SIZE_OF_INT


def size_of_uint32_slice(values: Sequence[int]) -> int:
    return len(values) * size_of_uint32() + MAX_SLICE_SIZE


def size_of_byte_slice(data: bytes) -> int:
    return len(data) + size_of_uint32()