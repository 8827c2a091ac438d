from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from ..core.converters import CellValue, normalize_cell
from ..core.schema import to_json_dict

"""Workbook file I/O with pandas.

Sheets are read raw (``header=None``) so the first row stays part of the grid,
exactly like a Sheets API value range. Missing cells become None and trailing
empty cells of each row are dropped.
"""

__all__ = [
    "entities_to_frame",
    "read_workbook",
    "write_workbook",
]


def _trim_row(row: Sequence[Any]) -> list[CellValue]:
    cells = [normalize_cell(v) for v in row]
    while cells and (cells[-1] is None or cells[-1] == ""):
        cells.pop()
    return cells


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> dict[str, list[list[CellValue]]]:
    """Read every sheet (or ``target_sheets``) as a raw value grid.

    Sheet order follows the workbook tab order.
    """
    wanted = set(target_sheets) if target_sheets is not None else None
    grids: dict[str, list[list[CellValue]]] = {}
    with pd.ExcelFile(path, engine="openpyxl") as xls:
        for name in xls.sheet_names:
            if wanted is not None and str(name) not in wanted:
                continue
            df = xls.parse(name, header=None, dtype=object, keep_default_na=False, na_values=[""])
            rows = [_trim_row(raw) for raw in df.itertuples(index=False, name=None)]
            while rows and not rows[-1]:
                rows.pop()
            grids[str(name)] = rows
    return grids


def write_workbook(grids: Mapping[str, Sequence[Sequence[Any]]], path: Path) -> Path:
    """Write value grids to ``path``, one tab per grid, without index or header."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for name, grid in grids.items():
            pd.DataFrame([list(row) for row in grid]).to_excel(writer, sheet_name=name, header=False, index=False)
    return path


def entities_to_frame(entities: Sequence[Any]) -> pd.DataFrame:
    """Tabular view of mapped entities keyed by their json names."""
    return pd.DataFrame([to_json_dict(e) for e in entities])
