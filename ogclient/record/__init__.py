"""Columnar records: columns with null bitmaps, schemas, sorting by time and binary encoding."""

__all__ = ["codec", "column", "field", "record", "sort"]