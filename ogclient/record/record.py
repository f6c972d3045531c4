"""Columnar records: a schema plus one column of values per field."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .codec import append_uint32
from .column import ColVal
from .field import TYPE_SIZE, Field, FieldType, Schemas

TIME_FIELD = "time"

_log = logging.getLogger(__name__)


class Record:
    """A set of columns described by a schema; the time column comes last."""

    def __init__(self, schema: Iterable[Field] | None = None) -> None:
        self.schema = Schemas(schema or [])
        self.col_vals: list[ColVal] = [ColVal() for _ in self.schema]

    def __len__(self) -> int:
        return len(self.schema)

    def swap(self, i: int, j: int) -> None:
        """Exchange two fields together with their columns."""
        self.schema[i], self.schema[j] = self.schema[j], self.schema[i]
        self.col_vals[i], self.col_vals[j] = self.col_vals[j], self.col_vals[i]

    def less(self, i: int, j: int) -> bool:
        """Order fields by name, with the time field always last."""
        if self.schema[i].name == TIME_FIELD:
            return False
        if self.schema[j].name == TIME_FIELD:
            return True
        return self.schema[i].name < self.schema[j].name

    def column(self, i: int) -> ColVal:
        return self.col_vals[i]

    def __str__(self) -> str:
        lines = []
        for f, col in zip(self.schema, self.col_vals):
            if f.type == FieldType.FLOAT:
                values: list = col.float_values()
            elif f.type in (FieldType.STRING, FieldType.TAG):
                values = col.string_values()
            elif f.type == FieldType.BOOLEAN:
                values = col.boolean_values()
            elif f.type == FieldType.INT:
                values = col.integer_values()
            else:
                continue
            lines.append(f"field({f.name}):{values!r}\n")
        return "".join(lines)

    def reset(self) -> None:
        """Drop every field and column."""
        self.schema = Schemas()
        self.col_vals = []

    def reset_with_schema(self, schema: Iterable[Field]) -> None:
        """Replace the schema and give each field a fresh, empty column."""
        fields = list(schema)
        self.reset()
        self.schema = Schemas(fields)
        self.reserve_col_val(len(self.schema))

    def reserve_col_val(self, size: int) -> None:
        """Add ``size`` empty columns."""
        start = len(self.col_vals)
        self.col_vals.extend(ColVal() for _ in range(size))
        self.init_col_val(start, start + size)

    def init_col_val(self, start: int, end: int) -> None:
        """Empty the columns start..end."""
        for col in self.col_vals[start:end]:
            col.reset()

    def row_nums(self) -> int:
        """Number of rows, taken from the last (time) column."""
        if not self.col_vals:
            return 0
        return self.col_vals[-1].length

    def times(self) -> list[int]:
        """Values of the last (time) column."""
        if not self.col_vals:
            return []
        return self.col_vals[-1].integer_values()

    def append_time(self, *args: int) -> None:
        """Append timestamps to the last column."""
        last = self.col_vals[-1]
        for t in args:
            last.append_integer(t)

    def sort_columns(self) -> None:
        """Sort fields by name, keeping the time field last."""
        order = sorted(
            range(len(self.schema)),
            key=lambda k: (self.schema[k].name == TIME_FIELD, self.schema[k].name),
        )
        self.schema = Schemas(self.schema[k] for k in order)
        self.col_vals = [self.col_vals[k] for k in order]

    def marshal(self, buf) -> bytearray:
        """Append the encoded schema and columns to buf and return the result."""
        out = append_uint32(buf, len(self.schema))
        for f in self.schema:
            out = append_uint32(out, f.size())
            out = f.marshal(out)
        out = append_uint32(out, len(self.col_vals))
        for col in self.col_vals:
            out = append_uint32(out, col.size())
            out = col.marshal(out)
        return out


def _schema_text(rec: Record) -> str:
    return "[" + " ".join(f"{{{f.type} {f.name}}}" for f in rec.schema) + "]"


def check_schema(i: int, rec: Record, is_order_schema: bool) -> bool:
    """Return whether the schema is still in order after looking at field i."""
    if is_order_schema and i > 0 and rec.schema[i - 1].name >= rec.schema[i].name:
        _log.warning(
            "record schema is invalid; idx i-1: %d, name: %s, idx i: %d, name: %s",
            i - 1,
            rec.schema[i - 1].name,
            i,
            rec.schema[i].name,
        )
        return False
    return is_order_schema


def check_record(rec: Record) -> None:
    """Validate a record, raising ValueError; an unordered schema is sorted."""
    col_n = len(rec.schema)
    if col_n <= 1 or rec.schema[col_n - 1].name != TIME_FIELD:
        raise ValueError(f"invalid schema: {_schema_text(rec)}")

    if rec.col_vals[col_n - 1].nil_count != 0:
        raise ValueError(f"invalid colvals: {rec}")

    for i in range(1, col_n):
        if rec.schema[i].name == rec.schema[i - 1].name:
            raise ValueError(f"same schema; idx: {i}, name: {rec.schema[i].name}")

    is_order_schema = True
    for i in range(col_n - 1):
        f = rec.schema[i]
        col1, col2 = rec.col_vals[i], rec.col_vals[i + 1]
        if col1.length != col2.length:
            raise ValueError(f"invalid colvals length: {rec}")
        is_order_schema = check_schema(i, rec, is_order_schema)

        if f.type in (FieldType.STRING, FieldType.TAG):
            continue

        exp_len = TYPE_SIZE.get(f.type, 0) * (col1.length - col1.nil_count)
        if exp_len != len(col1.val):
            raise ValueError(
                f"the length of rec.ColVals[{i}].val is incorrect. "
                f"exp: {exp_len}, got: {len(col1.val)}\n{rec}"
            )

    if not is_order_schema:
        rec.sort_columns()