from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Callable

from ..core.schema import build_headers
from ..models.enums import ColorType
from ..models.sheet_model import SheetModel

"""Domain registry types.

A domain is an ordered set of sheets. Each sheet pairs a builder returning a
fresh SheetModel with the entity class its rows map to and the attribute name
under which SpreadsheetData carries those entities.
"""

__all__ = [
    "DomainDefinition",
    "SheetDefinition",
    "apply_formulas",
    "new_sheet",
]


@dataclass(frozen=True)
class SheetDefinition:
    name: str
    build: Callable[[], SheetModel]
    entity_cls: type
    attribute: str  # key in SpreadsheetData.entities


@dataclass(frozen=True)
class DomainDefinition:
    name: str
    sheets: tuple[SheetDefinition, ...]  # tab order

    def sheet_names(self) -> list[str]:
        return [s.name for s in self.sheets]

    def get(self, name: str) -> SheetDefinition | None:
        """Sheet definition by name (case-insensitive), None when unknown."""
        folded = name.strip().casefold()
        return next((s for s in self.sheets if s.name.casefold() == folded), None)

    def resolve(self, names: Iterable[str] | None) -> tuple[list[SheetDefinition], list[str]]:
        """Split requested names into known definitions and unknown names.

        ``None`` selects every sheet of the domain.
        """
        if names is None:
            return list(self.sheets), []
        known: list[SheetDefinition] = []
        unknown: list[str] = []
        for name in names:
            definition = self.get(name)
            if definition is None:
                unknown.append(name)
            elif definition not in known:
                known.append(definition)
        return known, unknown


def new_sheet(
    name: str,
    entity_cls: type,
    tab_color: ColorType,
    cell_color: ColorType,
    protect: bool = False,
    freeze_columns: int = 0,
    freeze_rows: int = 0,
) -> SheetModel:
    """Fresh SheetModel whose headers come from the entity column schema."""
    return SheetModel(
        name=name,
        headers=build_headers(entity_cls),
        tab_color=tab_color,
        cell_color=cell_color,
        protect_sheet=protect,
        freeze_column_count=freeze_columns,
        freeze_row_count=freeze_rows,
    )


def apply_formulas(sheet: SheetModel, formulas: Mapping[str, str]) -> SheetModel:
    """Attach header formulas; formula columns are marked protected."""
    for header in sheet.headers:
        formula = formulas.get(header.name)
        if formula:
            header.formula = formula
            header.protect = True
    return sheet
