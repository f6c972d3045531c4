"""Column values with a validity bitmap, as carried in a record."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from dataclasses import field as dc_field

from .codec import (
    append_bytes,
    append_int,
    append_uint32_slice,
    bytes_to_str,
    size_of_byte_slice,
    size_of_int,
    size_of_uint32_slice,
)
from .field import TYPE_SIZE, FieldType

BIT_MASK = (1, 2, 4, 8, 16, 32, 64, 128)
FLIPPED_BIT_MASK = (254, 253, 251, 247, 239, 223, 191, 127)

_INT64 = struct.Struct("<q")
_FLOAT64 = struct.Struct("<d")


@dataclass
class NilCount:
    """Prefix counts of null values: ``value[j]`` is the nulls among rows < j."""

    value: list[int] = dc_field(default_factory=list)
    total: int = 0

    def init(self, total: int, size: int) -> None:
        self.total = total
        if total == 0:
            return
        if len(self.value) < size:
            self.value.extend([0] * (size - len(self.value)))
        else:
            del self.value[size:]
        self.value[0] = 0


def sub_bitmap_bytes(bitmap: bytes, bitmap_offset: int, length: int) -> tuple[bytes, int]:
    """Return the bitmap bytes covering ``length`` rows and the bit offset within them."""
    end = bitmap_offset + length
    stop = (end >> 3) + 1 if end & 0x7 else end >> 3
    return bytes(bitmap[bitmap_offset >> 3 : stop]), bitmap_offset & 0x7


@dataclass
class ColVal:
    """One column: packed values, string offsets and a validity bitmap."""

    val: bytearray = dc_field(default_factory=bytearray)
    offset: list[int] = dc_field(default_factory=list)
    bitmap: bytearray = dc_field(default_factory=bytearray)
    bitmap_offset: int = 0
    length: int = 0
    nil_count: int = 0

    def __post_init__(self) -> None:
        self.val = bytearray(self.val)
        self.offset = list(self.offset)
        self.bitmap = bytearray(self.bitmap)

    def reset(self) -> None:
        """Empty the column."""
        self.val.clear()
        self.offset.clear()
        self.bitmap.clear()
        self.length = 0
        self.nil_count = 0
        self.bitmap_offset = 0

    def reserve_offset(self, size: int) -> None:
        self.offset.extend([0] * size)

    def set_bitmap(self, index: int) -> None:
        if (self.length + self.bitmap_offset) >> 3 >= len(self.bitmap):
            self.bitmap.append(1)
            return
        index += self.bitmap_offset
        self.bitmap[index >> 3] |= BIT_MASK[index & 0x07]

    def reset_bitmap(self, index: int) -> None:
        if (self.length + self.bitmap_offset) >> 3 >= len(self.bitmap):
            self.bitmap.append(0)
            return
        index += self.bitmap_offset
        self.bitmap[index >> 3] &= FLIPPED_BIT_MASK[index & 0x07]

    def append_null(self) -> None:
        self.reset_bitmap(self.length)
        self.length += 1
        self.nil_count += 1

    def append_nulls(self, count: int) -> None:
        for _ in range(count):
            self.append_null()

    def _append_packed(self, packed: bytes) -> None:
        self.val += packed
        self.set_bitmap(self.length)
        self.length += 1

    def append_integer(self, value: int) -> None:
        self._append_packed(_INT64.pack(value))

    def append_integers(self, *args: int) -> None:
        for value in args:
            self.append_integer(value)

    def append_integer_null(self) -> None:
        self.append_null()

    def append_integer_nulls(self, count: int) -> None:
        self.append_nulls(count)

    def append_float(self, value: float) -> None:
        self._append_packed(_FLOAT64.pack(value))

    def append_floats(self, *args: float) -> None:
        for value in args:
            self.append_float(value)

    def append_float_null(self) -> None:
        self.append_null()

    def append_float_nulls(self, count: int) -> None:
        self.append_nulls(count)

    def append_boolean(self, value: bool) -> None:
        self._append_packed(b"\x01" if value else b"\x00")

    def append_booleans(self, *args: bool) -> None:
        for value in args:
            self.append_boolean(value)

    def append_boolean_null(self) -> None:
        self.append_null()

    def append_boolean_nulls(self, count: int) -> None:
        self.append_nulls(count)

    def append_string(self, value: str) -> None:
        self.offset.append(len(self.val))
        self._append_packed(value.encode("utf-8"))

    def integer_values(self) -> list[int]:
        count = len(self.val) // _INT64.size
        return list(struct.unpack_from(f"<{count}q", self.val))

    def float_values(self) -> list[float]:
        count = len(self.val) // _FLOAT64.size
        return list(struct.unpack_from(f"<{count}d", self.val))

    def boolean_values(self) -> list[bool]:
        return [byte != 0 for byte in self.val]

    def string_values(self) -> list[str]:
        """Return the non-null string values in row order."""
        result = []
        offsets = self.offset
        for i, start in enumerate(offsets):
            if self.is_nil(i):
                continue
            end = offsets[i + 1] if i + 1 < len(offsets) else len(self.val)
            result.append(bytes_to_str(self.val[start:end]))
        return result

    def is_nil(self, i: int) -> bool:
        if i >= self.length or not self.bitmap:
            return True
        if self.nil_count == 0:
            return False
        idx = self.bitmap_offset + i
        return not self.bitmap[idx >> 3] & BIT_MASK[idx & 0x07]

    def append_all(self, src: ColVal) -> None:
        """Take over every row of src; meant for an empty column."""
        self.val += src.val
        self.offset.extend(src.offset)
        bitmap, bitmap_offset = sub_bitmap_bytes(src.bitmap, src.bitmap_offset, src.length)
        self.bitmap += bitmap
        self.bitmap_offset = bitmap_offset
        self.length = src.length
        self.nil_count = src.nil_count

    def append_string_range(self, src: ColVal, start: int, end: int) -> None:
        """Append the string bytes and offsets of rows start..end of src."""
        offset = len(self.val)
        for i in range(start, end):
            if i != start:
                offset += src.offset[i] - src.offset[i - 1]
            self.offset.append(offset)
        if end == src.length:
            self.val += src.val[src.offset[start] :]
        else:
            self.val += src.val[src.offset[start] : src.offset[end]]

    def size(self) -> int:
        """Number of bytes that marshal appends."""
        return (
            3 * size_of_int()
            + size_of_byte_slice(self.val)
            + size_of_byte_slice(self.bitmap)
            + size_of_uint32_slice(self.offset)
        )

    def marshal(self, buf) -> bytearray:
        out = append_int(buf, self.length)
        out = append_int(out, self.nil_count)
        out = append_int(out, self.bitmap_offset)
        out = append_bytes(out, self.val)
        out = append_bytes(out, self.bitmap)
        return append_uint32_slice(out, self.offset)

    def delete_last(self, field_type: int) -> None:
        """Remove the last row."""
        if self.length == 0:
            return
        was_nil = self.is_nil(self.length - 1)
        self.length -= 1
        if self.length % 8 == 0:
            del self.bitmap[-1:]

        if was_nil:
            self.nil_count -= 1
        else:
            size = TYPE_SIZE.get(field_type, 0)
            if field_type == FieldType.STRING:
                size = len(self.val) - self.offset[self.length]
            if size:
                del self.val[len(self.val) - size :]

        if field_type == FieldType.STRING:
            del self.offset[self.length :]

    def append_with_nil_count(
        self, src: ColVal, field_type: int, start: int, end: int, nil_count: NilCount
    ) -> None:
        """Append rows start..end of src, using precomputed null counts."""
        if end <= start or src.length == 0:
            return
        if end - start == src.length and self.length == 0:
            self.append_all(src)
            return

        start_offset, end_offset = start, end
        if nil_count.total > 0:
            start_offset = start - nil_count.value[start]
            end_offset = end - nil_count.value[end]

        if field_type in (FieldType.STRING, FieldType.TAG):
            self.append_string_range(src, start, end)
        elif field_type in (FieldType.INT, FieldType.FLOAT, FieldType.BOOLEAN):
            size = TYPE_SIZE[field_type]
            self.val += src.val[start_offset * size : end_offset * size]
        else:
            raise ValueError(f"error type: {field_type}")

        self.append_bitmap(src.bitmap, src.bitmap_offset, src.length, start, end)
        self.length += end - start
        self.nil_count += end - start - (end_offset - start_offset)

    def append_bitmap(
        self, bitmap: bytes, bit_offset: int, rows: int, start: int, end: int
    ) -> None:
        """Append the validity bits of rows start..end of a source bitmap."""
        src_bits, src_offset = sub_bitmap_bytes(bitmap, bit_offset, rows)
        if (self.bitmap_offset + self.length) % 8 == 0 and (start + src_offset) % 8 == 0:
            first = (start + src_offset) // 8
            last = (end + src_offset) // 8
            if (end + src_offset) % 8 != 0:
                last += 1
            self.bitmap += src_bits[first:last]
            return

        dst_row = self.bitmap_offset + self.length
        add_size = (dst_row + end - start + 7) // 8 - (dst_row + 7) // 8
        if add_size > 0:
            self.bitmap.extend(bytes(add_size))

        for i in range(end - start):
            dst_index = dst_row + i
            src_index = src_offset + start + i
            if src_bits[src_index >> 3] & BIT_MASK[src_index & 0x07]:
                self.bitmap[dst_index >> 3] |= BIT_MASK[dst_index & 0x07]
            else:
                self.bitmap[dst_index >> 3] &= FLIPPED_BIT_MASK[dst_index & 0x07]