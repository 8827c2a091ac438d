from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..models.enums import MessageType
from ..models.message import Message, create_error_message, create_info_message, create_warning_message
from ..models.sheet_model import SheetModel, column_name
from .converters import cell_text

"""Header validation: actual sheet header rows vs declared sheet models.

A declared column missing from the sheet is an Error. A column that exists but
sits at another position, or an undeclared extra column, is only a Warning.
Spreadsheet metadata arrives as the Sheets API ``Spreadsheet`` JSON.
"""

__all__ = [
    "check_sheet_headers",
    "check_sheets",
    "get_headers_from_cell_data",
    "get_sheet_headers",
    "get_spreadsheet_sheets",
    "get_spreadsheet_title",
]


def check_sheet_headers(actual_headers: Sequence[Any] | None, sheet: SheetModel) -> list[Message]:
    """Compare a sheet's first row with its declared headers.

    Returns an empty list when both match exactly.
    """
    actual = [cell_text(h) for h in (actual_headers or [])]
    messages: list[Message] = []

    for index, header in enumerate(sheet.headers):
        prefix = f"[{sheet.name}!{header.column or column_name(index)}]: "
        if header.name not in actual:
            messages.append(create_error_message(f"{prefix}Missing column [{header.name}]", MessageType.CHECK_SHEET))
            continue
        if index < len(actual) and actual[index] != header.name:
            messages.append(
                create_warning_message(
                    f"{prefix}Unexpected column [{actual[index]}] should be [{header.name}]",
                    MessageType.CHECK_SHEET,
                )
            )

    expected = set(sheet.header_names())
    for index, name in enumerate(actual):
        if name and name not in expected:
            messages.append(
                create_warning_message(
                    f"[{sheet.name}!{column_name(index)}]: Extra column [{name}]", MessageType.CHECK_SHEET
                )
            )
    return messages


def get_spreadsheet_title(info: Mapping[str, Any] | None) -> str:
    if not info:
        return ""
    return str(info.get("properties", {}).get("title", "") or "")


def get_spreadsheet_sheets(info: Mapping[str, Any] | None) -> list[str]:
    """Upper-cased titles of the sheets present in a spreadsheet."""
    if not info:
        return []
    return [
        str(sheet.get("properties", {}).get("title", "")).upper()
        for sheet in info.get("sheets", []) or []
    ]


def get_headers_from_cell_data(values: Iterable[Mapping[str, Any]] | None) -> list[str]:
    """Header labels from a row of ``CellData`` (formatted value preferred)."""
    headers: list[str] = []
    for cell in values or []:
        text = cell.get("formattedValue")
        if text is None:
            text = cell.get("userEnteredValue", {}).get("stringValue", "")
        headers.append(str(text).strip())
    return headers


def get_sheet_headers(info: Mapping[str, Any] | None) -> dict[str, list[str]]:
    """Sheet title -> header row taken from spreadsheet grid data."""
    result: dict[str, list[str]] = {}
    if not info:
        return result
    for sheet in info.get("sheets", []) or []:
        title = str(sheet.get("properties", {}).get("title", ""))
        data = sheet.get("data") or [{}]
        row_data = data[0].get("rowData") or [{}]
        result[title] = get_headers_from_cell_data(row_data[0].get("values"))
    return result


def check_sheets(info: Mapping[str, Any] | None, expected_names: Iterable[str]) -> list[Message]:
    """Report declared sheets absent from the spreadsheet."""
    if not info:
        return [create_error_message("Unable to retrieve sheet(s)", MessageType.GET_SHEETS)]
    present = set(get_spreadsheet_sheets(info))
    messages = [
        create_error_message(f"Unable to find sheet {name.upper()}", MessageType.MISSING_SHEETS)
        for name in expected_names
        if name.upper() not in present
    ]
    if not messages:
        messages.append(create_info_message("All sheets found", MessageType.MISSING_SHEETS))
    return messages
