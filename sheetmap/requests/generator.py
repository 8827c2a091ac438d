from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from typing import Any, Callable

from ..models.enums import ColorType, DimensionType
from ..models.sheet_model import SheetCellModel, SheetModel
from .styles import DEFAULT_COLUMN_COUNT, PROTECTION_WARNINGS, color, data_validation, number_format

"""Sheet request generator: SheetModel -> ordered Sheets batchUpdate requests.

For every sheet the requests come out in a fixed order, each referencing the
sheet id assigned by the first one:

1. addSheet (title, tab colour, frozen rows/columns)
2. appendDimension, only when there are more headers than default columns
3. appendCells writing the bold header row (formula cells get thick borders
   unless the whole sheet is protected)
4. addProtectedRange per formula column (unprotected sheets only)
5. addBanding
6. addProtectedRange for the whole sheet or just its header row

repeatCell requests for column formats and validations are collected while the
sheets are processed and appended after the last sheet. All protections are
warning-only.

The builder holds the in-progress state and is created fresh for each
generation call, so concurrent calls never share accumulators.
"""

__all__ = [
    "SheetRequestBuilder",
    "generate_sheets_request",
    "random_sheet_id",
]

logger = logging.getLogger(__name__)

HEADER_FIELDS = "userEnteredValue,userEnteredFormat,note"

_THICK_BORDER = {"style": "SOLID_THICK"}


def random_sheet_id() -> int:
    return random.randint(1, 2**31 - 1)


class SheetRequestBuilder:
    """Accumulates the structural requests for one batch of sheets."""

    def __init__(self, id_factory: Callable[[], int] | None = None) -> None:
        self._id_factory = id_factory or random_sheet_id
        self._requests: list[dict[str, Any]] = []
        self._repeat_cells: list[dict[str, Any]] = []
        self._sheets: list[SheetModel] = []

    @property
    def sheets(self) -> list[SheetModel]:
        return list(self._sheets)

    def add_sheet(self, sheet: SheetModel) -> SheetRequestBuilder:
        if not sheet.id:
            sheet.id = self._id_factory()
        self._sheets.append(sheet)

        self._requests.append(self._add_sheet_request(sheet))
        dimension = self._append_dimension_request(sheet)
        if dimension is not None:
            self._requests.append(dimension)
        self._requests.append(self._header_cells_request(sheet))

        for header in sheet.headers:
            if header.formula and not sheet.protect_sheet:
                self._requests.append(self._column_protection_request(sheet, header))
            repeat = self._repeat_cell_request(sheet, header)
            if repeat is not None:
                self._repeat_cells.append(repeat)

        self._requests.append(self._banding_request(sheet))
        self._requests.append(self._protected_range_request(sheet))
        logger.debug("generated requests for sheet %s (id=%d)", sheet.name, sheet.id)
        return self

    def build(self) -> dict[str, list[dict[str, Any]]]:
        """Return the ``BatchUpdateSpreadsheetRequest`` body."""
        return {"requests": self._requests + self._repeat_cells}

    @staticmethod
    def _add_sheet_request(sheet: SheetModel) -> dict[str, Any]:
        return {
            "addSheet": {
                "properties": {
                    "sheetId": sheet.id,
                    "title": sheet.name,
                    "tabColor": color(sheet.tab_color),
                    "gridProperties": {
                        "frozenColumnCount": sheet.freeze_column_count,
                        "frozenRowCount": sheet.freeze_row_count,
                    },
                }
            }
        }

    @staticmethod
    def _append_dimension_request(sheet: SheetModel) -> dict[str, Any] | None:
        if len(sheet.headers) <= DEFAULT_COLUMN_COUNT:
            return None
        return {
            "appendDimension": {
                "sheetId": sheet.id,
                "dimension": DimensionType.COLUMNS.value,
                "length": len(sheet.headers) - DEFAULT_COLUMN_COUNT,
            }
        }

    @staticmethod
    def _header_cell(sheet: SheetModel, header: SheetCellModel) -> dict[str, Any]:
        cell_format: dict[str, Any] = {"textFormat": {"bold": True}}
        if header.formula:
            value = {"formulaValue": header.formula}
            if not sheet.protect_sheet:
                cell_format["borders"] = {side: dict(_THICK_BORDER) for side in ("top", "bottom", "left", "right")}
        else:
            value = {"stringValue": header.name}
        cell: dict[str, Any] = {"userEnteredValue": value, "userEnteredFormat": cell_format}
        if header.note:
            cell["note"] = header.note
        return cell

    def _header_cells_request(self, sheet: SheetModel) -> dict[str, Any]:
        return {
            "appendCells": {
                "sheetId": sheet.id,
                "rows": [{"values": [self._header_cell(sheet, h) for h in sheet.headers]}],
                "fields": HEADER_FIELDS,
            }
        }

    @staticmethod
    def _column_range(sheet: SheetModel, header: SheetCellModel) -> dict[str, int]:
        return {"sheetId": sheet.id, "startColumnIndex": header.index, "endColumnIndex": header.index + 1}

    def _column_protection_request(self, sheet: SheetModel, header: SheetCellModel) -> dict[str, Any]:
        return {
            "addProtectedRange": {
                "protectedRange": {
                    "description": PROTECTION_WARNINGS["column"],
                    "range": self._column_range(sheet, header),
                    "warningOnly": True,
                }
            }
        }

    def _repeat_cell_request(self, sheet: SheetModel, header: SheetCellModel) -> dict[str, Any] | None:
        if header.format is None and header.validation is None:
            return None
        cell: dict[str, Any] = {}
        fields: list[str] = []
        if header.format is not None:
            cell["userEnteredFormat"] = {"numberFormat": number_format(header.format)}
            fields.append("userEnteredFormat")
        rule = data_validation(header.validation, header.column)
        if rule is not None:
            cell["dataValidation"] = rule
            fields.append("dataValidation")
        grid_range = self._column_range(sheet, header)
        grid_range["startRowIndex"] = 1
        return {"repeatCell": {"range": grid_range, "cell": cell, "fields": ",".join(fields)}}

    @staticmethod
    def _banding_request(sheet: SheetModel) -> dict[str, Any]:
        return {
            "addBanding": {
                "bandedRange": {
                    "bandedRangeId": sheet.id,
                    "range": {"sheetId": sheet.id},
                    "rowProperties": {
                        "headerColor": color(sheet.tab_color),
                        "firstBandColor": color(ColorType.WHITE),
                        "secondBandColor": color(sheet.cell_color),
                    },
                }
            }
        }

    @staticmethod
    def _protected_range_request(sheet: SheetModel) -> dict[str, Any]:
        if sheet.protect_sheet:
            protected = {
                "description": PROTECTION_WARNINGS["sheet"],
                "range": {"sheetId": sheet.id},
                "warningOnly": True,
            }
        else:
            protected = {
                "description": PROTECTION_WARNINGS["header"],
                "range": {
                    "sheetId": sheet.id,
                    "startColumnIndex": 0,
                    "endColumnIndex": len(sheet.headers),
                    "startRowIndex": 0,
                    "endRowIndex": 1,
                },
                "warningOnly": True,
            }
        return {"addProtectedRange": {"protectedRange": protected}}


def generate_sheets_request(
    sheets: Iterable[SheetModel], id_factory: Callable[[], int] | None = None
) -> dict[str, list[dict[str, Any]]]:
    """Build the batchUpdate body materialising ``sheets`` in one call."""
    builder = SheetRequestBuilder(id_factory)
    for sheet in sheets:
        builder.add_sheet(sheet)
    return builder.build()
