from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

from ..requests.styles import number_format
from .converters import CellValue, cell_text, convert_from_sheet_value, convert_to_cell_data, convert_to_sheet_value
from .header_index import NOT_FOUND, build_header_index, get_header_index
from .schema import ColumnSchemaEntry, find_entry, get_schema

"""Row mapper: sheet value grids <-> typed entity lists.

Reading is driven entirely by header-name lookup, so the column order of the
live sheet does not matter. Writing follows the order of the header row passed
in, so output aligns with whatever layout the sheet currently has. Only input
columns are written; formula and unknown columns are emitted blank.
"""

__all__ = [
    "map_from_range_data",
    "map_to_range_data",
    "map_to_row_data",
    "map_to_row_format",
]

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _is_blank_row(row: Sequence[Any] | None) -> bool:
    return not row or cell_text(row[0]) == ""


def map_from_range_data(values: Sequence[Sequence[Any]] | None, entity_cls: type[E]) -> list[E]:
    """Map a raw value grid (header row first) to entities of ``entity_cls``.

    Steps:
    1. Drop rows whose first cell is blank
    2. First remaining row becomes the header index
    3. Pad short rows, convert each declared column by header lookup
    4. row_id counts retained rows with the header as row 1
    """
    entries = get_schema(entity_cls)
    if not values:
        return []
    retained = [list(row) for row in values if not _is_blank_row(row)]
    if not retained:
        return []

    index = build_header_index(retained[0])
    positions = {entry.field: get_header_index(index, entry.header) for entry in entries}

    entities: list[E] = []
    for row_id, row in enumerate(retained[1:], start=2):
        if len(row) < len(index):
            row.extend([None] * (len(index) - len(row)))
        kwargs: dict[str, Any] = {}
        for entry in entries:
            position = positions[entry.field]
            raw = row[position] if position != NOT_FOUND else None
            kwargs[entry.field] = convert_from_sheet_value(raw, entry)
        entity = entity_cls(**kwargs)
        entity.row_id = row_id  # type: ignore[attr-defined]
        entity.saved = True  # type: ignore[attr-defined]
        entities.append(entity)

    logger.debug("mapped %d %s row(s)", len(entities), entity_cls.__name__)
    return entities


def _input_columns(entity_cls: type, headers: Sequence[Any]) -> list[ColumnSchemaEntry | None]:
    resolved: list[ColumnSchemaEntry | None] = []
    for header in headers:
        entry = find_entry(entity_cls, cell_text(header))
        resolved.append(entry if entry is not None and entry.is_input else None)
    return resolved


def _columns_for(cache: dict[type, list[ColumnSchemaEntry | None]], entity: Any, headers: Sequence[Any]) -> list[ColumnSchemaEntry | None]:
    entity_cls = type(entity)
    if entity_cls not in cache:
        cache[entity_cls] = _input_columns(entity_cls, headers)
    return cache[entity_cls]


def map_to_range_data(entities: Sequence[Any], headers: Sequence[Any]) -> list[list[CellValue]]:
    """Map entities to value rows in the order of ``headers``."""
    cache: dict[type, list[ColumnSchemaEntry | None]] = {}
    rows: list[list[CellValue]] = []
    for entity in entities:
        columns = _columns_for(cache, entity, headers)
        rows.append([
            convert_to_sheet_value(getattr(entity, entry.field), entry) if entry is not None else None
            for entry in columns
        ])
    return rows


def map_to_row_data(entities: Sequence[Any], headers: Sequence[Any]) -> list[dict[str, Any]]:
    """Map entities to Sheets ``RowData`` objects in the order of ``headers``."""
    cache: dict[type, list[ColumnSchemaEntry | None]] = {}
    rows: list[dict[str, Any]] = []
    for entity in entities:
        cells: list[dict[str, Any]] = []
        for entry in _columns_for(cache, entity, headers):
            value = convert_to_cell_data(getattr(entity, entry.field), entry) if entry is not None else {}
            cells.append({"userEnteredValue": value} if value else {})
        rows.append({"values": cells})
    return rows


def map_to_row_format(headers: Sequence[Any], entity_cls: type) -> dict[str, Any]:
    """One ``RowData`` carrying the declared number format of each column."""
    cells: list[dict[str, Any]] = []
    for header in headers:
        entry = find_entry(entity_cls, cell_text(header))
        if entry is None or entry.format is None:
            cells.append({})
            continue
        cells.append({"userEnteredFormat": {"numberFormat": number_format(entry.format)}})
    return {"values": cells}
