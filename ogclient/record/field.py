"""Field types and record schemas."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .codec import (
    BOOLEAN_SIZE_BYTES,
    FLOAT64_SIZE_BYTES,
    INT64_SIZE_BYTES,
    append_int,
    append_string,
    size_of_int,
    size_of_string,
)


class FieldType(enum.IntEnum):
    """Column data type."""

    UNKNOWN = 0
    INT = 1
    UINT = 2
    FLOAT = 3
    STRING = 4
    BOOLEAN = 5
    TAG = 6
    LAST = 7


FIELD_TYPE_NAME: dict[int, str] = {
    FieldType.UNKNOWN: "Unknown",
    FieldType.INT: "Integer",
    FieldType.UINT: "Unsigned",
    FieldType.FLOAT: "Float",
    FieldType.STRING: "String",
    FieldType.BOOLEAN: "Boolean",
    FieldType.TAG: "Tag",
    FieldType.LAST: "Unknown",
}

# Byte width of each fixed-size value type; variable or unknown types map to 0.
TYPE_SIZE: dict[int, int] = {
    FieldType.INT: INT64_SIZE_BYTES,
    FieldType.FLOAT: FLOAT64_SIZE_BYTES,
    FieldType.BOOLEAN: BOOLEAN_SIZE_BYTES,
}


@dataclass
class Field:
    """A named, typed column of a record."""

    name: str
    type: int

    def __str__(self) -> str:
        return self.name + FIELD_TYPE_NAME.get(self.type, "")

    def marshal(self, buf) -> bytearray:
        """Append the encoded field to buf and return the result."""
        out = append_string(buf, self.name)
        return append_int(out, int(self.type))

    def size(self) -> int:
        """Number of bytes that marshal appends."""
        return size_of_string(self.name) + size_of_int()


class Schemas(list):
    """An ordered list of fields."""

    def __str__(self) -> str:
        return "".join(f"{f}\n" for f in self)