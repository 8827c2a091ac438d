from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .converters import cell_text, parse_bool, parse_date, parse_decimal, parse_int

"""Header index: position -> trimmed label lookup built from a sheet's first row.

Labels need not be unique; lookups return the first matching position and -1
when the label is absent. Callers treat -1 as "column not present".
"""

__all__ = [
    "NOT_FOUND",
    "build_header_index",
    "get_bool_value",
    "get_cell",
    "get_date_value",
    "get_decimal_value",
    "get_header_index",
    "get_header_index_ignore_case",
    "get_int_value",
    "get_string_value",
]

NOT_FOUND = -1

HeaderIndex = dict[int, str]


def build_header_index(row: Sequence[Any] | None) -> HeaderIndex:
    """Map each column position of ``row`` to its trimmed label ("" for blanks)."""
    if row is None:
        return {}
    return {position: cell_text(value) for position, value in enumerate(row)}


def get_header_index(index: HeaderIndex, label: str) -> int:
    target = str(label).strip()
    for position, name in index.items():
        if name == target:
            return position
    return NOT_FOUND


def get_header_index_ignore_case(index: HeaderIndex, label: str) -> int:
    target = str(label).strip().casefold()
    for position, name in index.items():
        if name.casefold() == target:
            return position
    return NOT_FOUND


def get_cell(row: Sequence[Any], index: HeaderIndex, label: str) -> Any:
    """Raw cell under ``label``; None when the column is absent or the row short."""
    position = get_header_index(index, label)
    if position == NOT_FOUND or position >= len(row):
        return None
    return row[position]


def get_string_value(label: str, row: Sequence[Any], index: HeaderIndex) -> str:
    return cell_text(get_cell(row, index, label))


def get_int_value(label: str, row: Sequence[Any], index: HeaderIndex) -> int:
    return parse_int(get_cell(row, index, label)) or 0


def get_decimal_value(label: str, row: Sequence[Any], index: HeaderIndex) -> float:
    return parse_decimal(get_cell(row, index, label)) or 0.0


def get_bool_value(label: str, row: Sequence[Any], index: HeaderIndex) -> bool:
    return bool(parse_bool(get_cell(row, index, label)))


def get_date_value(label: str, row: Sequence[Any], index: HeaderIndex) -> str:
    return parse_date(get_cell(row, index, label)) or ""
