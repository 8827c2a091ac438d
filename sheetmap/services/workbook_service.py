from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.converters import cell_text, normalize_cell
from ..models.enums import DimensionType
from ..models.sheet_model import column_index, column_name
from ..workbook.reader import read_workbook, write_workbook

"""Offline sheet-access backend over an in-memory workbook.

Implements the SheetService contract on plain value grids, optionally loaded
from and saved to an ``.xlsx`` file. Structural requests that only affect
presentation (formats, banding, protection, dimensions) are accepted and
ignored; requests that change content or sheet layout are applied.

There is no formula engine: a formula written to the header row is stored as
the label it displays there, and formulas written below it are stored blank.

Failures raise SheetServiceError internally and leave every public method as
None, mirroring how a remote backend reports errors to the manager.
Batch updates apply all of their requests or none of them.
"""

__all__ = [
    "SheetServiceError",
    "WorkbookSheetService",
]

logger = logging.getLogger(__name__)

Grid = list[list[Any]]
F = TypeVar("F", bound=Callable[..., Any])

# Sheet!A5, Sheet!A1:Z, Sheet!1:1, Sheet
_RANGE_RE = re.compile(r"^(?P<sheet>[^!]+?)(?:!(?P<start>[A-Za-z]*\d*)(?::(?P<end>[A-Za-z]*\d*))?)?$")
_CELL_RE = re.compile(r"^(?P<col>[A-Za-z]*)(?P<row>\d*)$")
# First string literal of a header formula is the label shown in row 1.
_FORMULA_LABEL = re.compile(r'"([^"]*)"')

# Accepted without effect on the value grid.
_PRESENTATION_REQUESTS = frozenset({
    "addBanding",
    "addProtectedRange",
    "appendDimension",
    "repeatCell",
    "updateDimensionProperties",
})

# Request kind -> method applying it to the grids.
_HANDLERS = {
    "addSheet": "_add_sheet",
    "appendCells": "_append_cells",
    "deleteDimension": "_delete_dimension",
    "deleteSheet": "_delete_sheet",
    "updateCells": "_update_cells",
    "updateSheetProperties": "_update_sheet_properties",
}


class SheetServiceError(Exception):
    """Backend failure inside the workbook service."""


def _backend_call(method: F) -> F:
    @functools.wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return method(self, *args, **kwargs)
        except SheetServiceError as e:
            logger.warning("%s failed: %s", method.__name__, e)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("%s failed: malformed request (%s: %s)", method.__name__, type(e).__name__, e)
        return None
    return wrapper  # type: ignore[return-value]


def _cell_value(cell: Mapping[str, Any], header_row: bool = False) -> Any:
    """Plain value of one ``CellData``."""
    value = cell.get("userEnteredValue") or {}
    if "formulaValue" in value:
        label = _FORMULA_LABEL.search(value["formulaValue"]) if header_row else None
        return label.group(1) if label else None
    for key in ("stringValue", "numberValue", "boolValue"):
        if key in value:
            return value[key]
    return None


class WorkbookSheetService:
    """SheetService over ``{sheet title: value grid}``."""

    def __init__(
        self,
        sheets: Mapping[str, Sequence[Sequence[Any]]] | None = None,
        title: str = "Workbook",
        spreadsheet_id: str = "workbook",
    ) -> None:
        self.title = title
        self.spreadsheet_id = spreadsheet_id
        self._grids: dict[str, Grid] = {}
        self._ids: dict[str, int] = {}
        for name, grid in (sheets or {}).items():
            self._ids[name] = len(self._ids)
            self._grids[name] = [[normalize_cell(v) for v in row] for row in grid]

    @classmethod
    def from_file(cls, path: Path, spreadsheet_id: str = "") -> WorkbookSheetService:
        return cls(read_workbook(path), title=path.stem, spreadsheet_id=spreadsheet_id or path.stem)

    @property
    def sheet_names(self) -> list[str]:
        return list(self._grids)

    def grid(self, sheet: str) -> Grid:
        """Copy of a sheet's values (tests and CLI output)."""
        return [list(row) for row in self._resolve(sheet)[1]]

    def save(self, path: Path) -> Path:
        logger.info("saving workbook %s (%d sheet(s))", path, len(self._grids))
        return write_workbook(self._grids, path)

    @_backend_call
    def get_sheet_data(self, sheet: str) -> dict[str, Any] | None:
        name, grid = self._resolve(sheet)
        return {"range": name, "majorDimension": "ROWS", "values": [list(r) for r in grid]}

    @_backend_call
    def get_batch_data(self, sheets: Sequence[str], range_: str = "") -> dict[str, Any] | None:
        value_ranges = []
        for sheet in sheets:
            a1 = f"{sheet}!{range_}" if range_ and range_.strip() else sheet
            name, grid = self._resolve(sheet)
            rows = self._select_rows(grid, range_)
            value_ranges.append({
                "valueRange": {"range": a1, "majorDimension": "ROWS", "values": rows},
                "dataFilters": [{"a1Range": a1}],
            })
        return {"spreadsheetId": self.spreadsheet_id, "valueRanges": value_ranges}

    @_backend_call
    def get_sheet_info(self, ranges: Sequence[str] | None = None) -> dict[str, Any] | None:
        with_data = {self._parse_range(r)[0].strip("'").casefold(): r for r in (ranges or [])}
        sheets = []
        for index, (name, grid) in enumerate(self._grids.items()):
            # Ranged requests only describe the sheets they name.
            if with_data and name.casefold() not in with_data:
                continue
            sheet: dict[str, Any] = {"properties": {"sheetId": self._ids[name], "title": name, "index": index}}
            if name.casefold() in with_data:
                _, start, _ = self._parse_range(with_data[name.casefold()])
                rows = self._select_rows(grid, with_data[name.casefold()].partition("!")[2])
                sheet["data"] = [{
                    "startRow": start[0],
                    "rowData": [{"values": [{"formattedValue": cell_text(v)} for v in row]} for row in rows],
                }]
            sheets.append(sheet)
        return {
            "spreadsheetId": self.spreadsheet_id,
            "properties": {"title": self.title},
            "sheets": sheets,
        }

    @_backend_call
    def append_data(self, values: Grid, range_: str) -> dict[str, Any] | None:
        sheet, _, _ = self._parse_range(range_)
        name, grid = self._resolve(sheet)
        start = len(grid)
        grid.extend([normalize_cell(v) for v in row] for row in values)
        updated = f"{name}!A{start + 1}:{column_name(max((len(r) for r in values), default=1) - 1)}{len(grid)}"
        logger.debug("appended %d row(s) to %s", len(values), name)
        return {"updates": {"updatedRange": updated, "updatedRows": len(values)}}

    @_backend_call
    def update_data(self, values: Grid, range_: str) -> dict[str, Any] | None:
        return {"updatedRows": self._write(values, range_)}

    @_backend_call
    def batch_update_data(self, body: dict[str, Any]) -> dict[str, Any] | None:
        with self._atomic():
            total = sum(self._write(item["values"], item["range"]) for item in body.get("data", []))
        return {"spreadsheetId": self.spreadsheet_id, "totalUpdatedRows": total}

    @_backend_call
    def batch_update_spreadsheet(self, body: dict[str, Any]) -> dict[str, Any] | None:
        requests = body.get("requests", [])
        # Reject unsupported request kinds before applying any.
        for request in requests:
            kind = next(iter(request))
            if kind not in _PRESENTATION_REQUESTS and kind not in _HANDLERS:
                raise SheetServiceError(f"unsupported request: {kind}")
        replies = []
        with self._atomic():
            for request in requests:
                kind, payload = next(iter(request.items()))
                if kind in _PRESENTATION_REQUESTS:
                    replies.append({})
                    continue
                replies.append(getattr(self, _HANDLERS[kind])(payload))
        logger.debug("applied %d structural request(s)", len(requests))
        return {"spreadsheetId": self.spreadsheet_id, "replies": replies}

    @contextmanager
    def _atomic(self) -> Iterator[None]:
        """Restore the grids and sheet ids when the block raises."""
        grids = {name: [list(row) for row in grid] for name, grid in self._grids.items()}
        ids = dict(self._ids)
        try:
            yield
        except Exception:
            self._grids = grids
            self._ids = ids
            raise

    def _add_sheet(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        properties = dict(payload["properties"])
        title = properties["title"]
        if self._find(title) is not None:
            raise SheetServiceError(f"A sheet with the name \"{title}\" already exists")
        sheet_id = properties.get("sheetId")
        if sheet_id is None:
            sheet_id = max(self._ids.values(), default=-1) + 1
        self._ids[title] = sheet_id
        self._grids[title] = []
        properties["sheetId"] = sheet_id
        return {"addSheet": {"properties": properties}}

    def _append_cells(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        grid = self._grid_by_id(payload["sheetId"])
        for row in payload.get("rows", []):
            grid.append([_cell_value(cell, header_row=not grid) for cell in row.get("values", [])])
        return {}

    def _update_cells(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        target = payload["range"]
        grid = self._grid_by_id(target["sheetId"])
        start_row = target.get("startRowIndex", 0)
        start_col = target.get("startColumnIndex", 0)
        for offset, row in enumerate(payload.get("rows", [])):
            row_index = start_row + offset
            values = [_cell_value(c, header_row=row_index == 0) for c in row.get("values", [])]
            self._put_row(grid, row_index, start_col, values)
        return {}

    def _delete_dimension(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        target = payload["range"]
        if target.get("dimension") != DimensionType.ROWS.value:
            raise SheetServiceError("only row deletion is supported")
        grid = self._grid_by_id(target["sheetId"])
        del grid[target["startIndex"]:target["endIndex"]]
        return {}

    def _delete_sheet(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        name = self._name_by_id(payload["sheetId"])
        del self._grids[name]
        del self._ids[name]
        return {}

    def _update_sheet_properties(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        properties = payload["properties"]
        name = self._name_by_id(properties["sheetId"])
        if "index" in payload.get("fields", "") and "index" in properties:
            order = [n for n in self._grids if n != name]
            order.insert(min(properties["index"], len(order)), name)
            self._grids = {n: self._grids[n] for n in order}
        return {}

    def _find(self, sheet: str) -> str | None:
        folded = sheet.strip().strip("'").casefold()
        return next((n for n in self._grids if n.casefold() == folded), None)

    def _resolve(self, sheet: str) -> tuple[str, Grid]:
        name = self._find(sheet.partition("!")[0])
        if name is None:
            raise SheetServiceError(f"Unable to parse range: {sheet}")
        return name, self._grids[name]

    def _name_by_id(self, sheet_id: int) -> str:
        name = next((n for n, i in self._ids.items() if i == sheet_id), None)
        if name is None:
            raise SheetServiceError(f"No grid with id: {sheet_id}")
        return name

    def _grid_by_id(self, sheet_id: int) -> Grid:
        return self._grids[self._name_by_id(sheet_id)]

    @staticmethod
    def _parse_range(range_: str) -> tuple[str, tuple[int, int], int | None]:
        """``(sheet, (row0, col0), end_row0 or None)`` of an A1 range."""
        match = _RANGE_RE.match(range_.strip())
        if match is None:
            raise SheetServiceError(f"Unable to parse range: {range_}")
        start = _CELL_RE.match(match.group("start") or "")
        end = _CELL_RE.match(match.group("end") or "")
        row0 = int(start.group("row")) - 1 if start and start.group("row") else 0
        col0 = column_index(start.group("col")) if start and start.group("col") else 0
        end_row = int(end.group("row")) - 1 if end and end.group("row") else None
        return match.group("sheet"), (row0, col0), end_row

    def _select_rows(self, grid: Grid, range_: str) -> Grid:
        if not range_ or not range_.strip():
            return [list(r) for r in grid]
        _, (row0, _), end_row = self._parse_range(f"_!{range_}")
        stop = end_row + 1 if end_row is not None else len(grid)
        return [list(r) for r in grid[row0:stop]]

    @staticmethod
    def _put_row(grid: Grid, row_index: int, col_index: int, values: Sequence[Any]) -> None:
        while len(grid) <= row_index:
            grid.append([])
        row = grid[row_index]
        needed = col_index + len(values)
        if len(row) < needed:
            row.extend([None] * (needed - len(row)))
        for offset, value in enumerate(values):
            row[col_index + offset] = normalize_cell(value)

    def _write(self, values: Grid, range_: str) -> int:
        sheet, (row0, col0), _ = self._parse_range(range_)
        _, grid = self._resolve(sheet)
        for offset, row in enumerate(values):
            self._put_row(grid, row0 + offset, col0, row)
        return len(values)
