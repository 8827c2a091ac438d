from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..models.enums import DimensionType

"""Request builders for the data (row) side of a spreadsheet.

Row ids are 1-based sheet row numbers as carried by entities; grid indexes in
the generated requests are 0-based with exclusive ends.
"""

__all__ = [
    "generate_append_cells",
    "generate_batch_get_values_by_data_filter_request",
    "generate_delete_requests",
    "generate_delete_sheet_requests",
    "generate_index_ranges",
    "generate_update_cells_request",
    "generate_update_sheet_index",
    "generate_update_value_request",
]


def generate_index_ranges(row_ids: Iterable[int]) -> list[tuple[int, int]]:
    """Merge row ids into ``(start, end_exclusive)`` index ranges, bottom-up.

    >>> generate_index_ranges([2, 3, 4, 7])
    [(6, 7), (1, 4)]
    """
    ordered = sorted(set(row_ids), reverse=True)
    if not ordered:
        return []
    ranges: list[tuple[int, int]] = []
    start, end = ordered[0] - 1, ordered[0]
    for row_id in ordered[1:]:
        if row_id == start:
            start = row_id - 1
        else:
            ranges.append((start, end))
            start, end = row_id - 1, row_id
    ranges.append((start, end))
    return ranges


def generate_delete_requests(sheet_id: int, row_ids: Iterable[int]) -> list[dict[str, Any]]:
    return [
        {
            "deleteDimension": {
                "range": {
                    "sheetId": sheet_id,
                    "dimension": DimensionType.ROWS.value,
                    "startIndex": start,
                    "endIndex": end,
                }
            }
        }
        for start, end in generate_index_ranges(row_ids)
    ]


def generate_delete_sheet_requests(sheet_ids: Iterable[int]) -> list[dict[str, Any]]:
    return [{"deleteSheet": {"sheetId": sheet_id}} for sheet_id in sheet_ids]


def generate_batch_get_values_by_data_filter_request(sheets: Sequence[str] | None, range_: str = "") -> dict[str, Any]:
    if not sheets:
        return {}
    filters = [{"a1Range": f"{sheet}!{range_}" if range_ and range_.strip() else sheet} for sheet in sheets]
    return {"dataFilters": filters}


def generate_update_value_request(sheet_name: str, row_values: Mapping[int, Sequence[Sequence[Any]]]) -> dict[str, Any]:
    """``BatchUpdateValuesRequest`` writing each row block at ``Sheet!A{row_id}``."""
    data = [
        {"majorDimension": "ROWS", "range": f"{sheet_name}!A{row_id}", "values": [list(v) for v in values]}
        for row_id, values in row_values.items()
    ]
    return {"data": data, "valueInputOption": "USER_ENTERED"}


def generate_append_cells(sheet_id: int, rows: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    return {"appendCells": {"sheetId": sheet_id, "rows": list(rows), "fields": "userEnteredValue"}}


def generate_update_cells_request(sheet_id: int, row_index: int, rows: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    return {
        "updateCells": {
            "range": {"sheetId": sheet_id, "startRowIndex": row_index, "endRowIndex": row_index + 1},
            "rows": list(rows),
            "fields": "userEnteredValue",
        }
    }


def generate_update_sheet_index(sheet_id: int, index: int) -> dict[str, Any]:
    """Move a sheet tab to the 0-based position ``index``."""
    return {
        "updateSheetProperties": {
            "properties": {"sheetId": sheet_id, "index": index},
            "fields": "index",
        }
    }
