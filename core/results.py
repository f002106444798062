#!/usr/bin/env python3
"""Helpers for reading scalar values out of DB-API rows."""

from typing import Any, Dict, Optional, Sequence, Union

Row = Union[Sequence[Any], Dict[str, Any]]


def to_text(value: Any) -> str:
    """Convert a column value to the string form the server displays"""
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode('utf-8', errors='replace')
    return str(value)


def first_column(row: Optional[Row], key: Optional[str] = None) -> Any:
    """Return the first (or named) column of a tuple or dict row"""
    if row is None:
        return None
    if isinstance(row, dict):
        if key is not None and key in row:
            return row[key]
        return next(iter(row.values()), None)
    return row[0] if len(row) else None


def name_value(row: Row):
    """Split a two-column SHOW row into (name, value)"""
    if isinstance(row, dict):
        if 'Variable_name' in row:
            return row['Variable_name'], row.get('Value')
        values = list(row.values())
        return values[0], values[1]
    return row[0], row[1]


def row_to_dict(row: Row, description) -> Dict[str, Any]:
    """Return a row as a dict keyed by column name"""
    if isinstance(row, dict):
        return dict(row)
    columns = [col[0] for col in (description or [])]
    return dict(zip(columns, row))
