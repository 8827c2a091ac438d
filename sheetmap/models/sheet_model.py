from __future__ import annotations

from dataclasses import dataclass, field

from .enums import ColorType, FormatType, ValidationType

"""Sheet model: the declarative definition of one spreadsheet tab.

A SheetModel holds the ordered header cells of a sheet together with its tab
colours, protection and freeze settings. Column letters are always derived from
the header position; ``update_columns`` re-derives them for the whole list after
headers are composed from shared groups.
"""

__all__ = [
    "SheetCellModel",
    "SheetModel",
    "add_column",
    "column_index",
    "column_name",
    "update_columns",
]

_LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def column_name(index: int) -> str:
    """Return the bijective base-26 column letter for a 0-based index.

    0 -> A, 25 -> Z, 26 -> AA, 701 -> ZZ, 702 -> AAA.
    """
    if index < 0:
        raise ValueError(f"column index must be >= 0: {index}")
    letters = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, len(_LETTERS))
        letters = _LETTERS[rem] + letters
    return letters


def column_index(letters: str) -> int:
    """Inverse of ``column_name``: ``"A"`` -> 0, ``"AA"`` -> 26."""
    text = letters.strip().upper()
    if not text or any(ch not in _LETTERS for ch in text):
        raise ValueError(f"invalid column letters: {letters!r}")
    n = 0
    for ch in text:
        n = n * len(_LETTERS) + _LETTERS.index(ch) + 1
    return n - 1


@dataclass
class SheetCellModel:
    """One header cell of a sheet."""
    name: str
    index: int = 0
    column: str = ""
    formula: str = ""  # empty = plain input column
    format: FormatType | None = None
    protect: bool = False
    validation: ValidationType | None = None
    note: str = ""


@dataclass
class SheetModel:
    id: int = 0  # backend sheet id, assigned at request generation
    name: str = ""
    headers: list[SheetCellModel] = field(default_factory=list)
    tab_color: ColorType = ColorType.WHITE
    cell_color: ColorType = ColorType.WHITE
    protect_sheet: bool = False
    freeze_column_count: int = 0
    freeze_row_count: int = 0

    def header_names(self) -> list[str]:
        return [h.name for h in self.headers]

    def get_header(self, header: str) -> SheetCellModel | None:
        return next((h for h in self.headers if h.name == header), None)

    def get_column(self, header: str) -> str:
        """Column letter of ``header`` or ``""`` when the sheet lacks it."""
        cell = self.get_header(header)
        return cell.column if cell is not None else ""

    def get_index(self, header: str) -> int:
        cell = self.get_header(header)
        return cell.index if cell is not None else -1

    def get_range(self, header: str, row: int = 1) -> str:
        """Sheet-qualified open range of a column, e.g. ``Trips!C1:C``."""
        column = self.get_column(header)
        if not column:
            return f"{self.name}!"
        return f"{self.name}!{column}{row}:{column}"

    def get_local_range(self, header: str, row: int = 1) -> str:
        column = self.get_column(header)
        if not column:
            return ""
        return f"{column}{row}:{column}"

    def get_range_between_columns(self, start_header: str, end_header: str) -> str:
        return f"{self.name}!{self.get_column(start_header)}:{self.get_column(end_header)}"


def add_column(headers: list[SheetCellModel], header: SheetCellModel) -> None:
    """Append ``header`` assigning it the next index and column letter."""
    header.index = len(headers)
    header.column = column_name(header.index)
    headers.append(header)


def update_columns(headers: list[SheetCellModel]) -> list[SheetCellModel]:
    """Re-derive index and column letter of every header in place."""
    existing = list(headers)
    headers.clear()
    for header in existing:
        add_column(headers, header)
    return headers
