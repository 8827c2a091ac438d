from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

"""Sheet-access collaborator contract.

The manager never talks to a backend directly. Every operation returns the
Sheets API v4 response shape on success and None on any backend failure
(auth, invalid id, quota, missing sheet); implementations must not let backend
exceptions escape.
"""

__all__ = [
    "SheetService",
]

Grid = list[list[Any]]


class SheetService(Protocol):
    def get_sheet_data(self, sheet: str) -> dict[str, Any] | None:
        """``ValueRange`` of one whole sheet."""
        ...

    def get_batch_data(self, sheets: Sequence[str], range_: str = "") -> dict[str, Any] | None:
        """``BatchGetValuesByDataFilterResponse`` with one value range per sheet."""
        ...

    def get_sheet_info(self, ranges: Sequence[str] | None = None) -> dict[str, Any] | None:
        """``Spreadsheet`` metadata; ``ranges`` selects grid data to include."""
        ...

    def append_data(self, values: Grid, range_: str) -> dict[str, Any] | None:
        ...

    def update_data(self, values: Grid, range_: str) -> dict[str, Any] | None:
        ...

    def batch_update_data(self, body: dict[str, Any]) -> dict[str, Any] | None:
        """Apply a ``BatchUpdateValuesRequest``."""
        ...

    def batch_update_spreadsheet(self, body: dict[str, Any]) -> dict[str, Any] | None:
        """Apply a ``BatchUpdateSpreadsheetRequest``."""
        ...
