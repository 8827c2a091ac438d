from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from ..models.enums import FieldType, FormatType, ValidationType
from ..models.sheet_model import SheetCellModel, update_columns

"""Column schema registry.

Each row entity declares its columns once, as an ordered tuple of
ColumnSchemaEntry, registered against the entity class at import time. The
converter and the row mapper both read this table; nothing is discovered by
inspecting entity attributes at runtime.
"""

__all__ = [
    "ColumnSchemaEntry",
    "SchemaError",
    "build_headers",
    "column",
    "find_entry",
    "get_schema",
    "register_schema",
    "sheet_columns",
    "to_json_dict",
]

T = TypeVar("T")

# Row bookkeeping fields present on every entity.
_BASE_JSON_NAMES = (("row_id", "rowId"), ("action", "action"), ("saved", "saved"))


class SchemaError(Exception):
    """Raised when an entity type has no registered column schema."""


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class ColumnSchemaEntry:
    """Metadata of one entity field.

    Attributes:
        field: Attribute name on the entity
        header: Sheet header label
        field_type: Declared cell type driving conversion
        is_input: True when the column is user-editable and written back
        json_name: Serialized name (camelCase of ``field`` when empty)
        nullable: Blank/malformed input yields None instead of the type default
        signed: Integer columns keep a leading minus sign
        format: Display format of the data cells
        note: Header note text
        validation: Data validation rule of the data cells
    """
    field: str
    header: str
    field_type: FieldType = FieldType.STRING
    is_input: bool = False
    json_name: str = ""
    nullable: bool = False
    signed: bool = False
    format: FormatType | None = None
    note: str = ""
    validation: ValidationType | None = None

    @property
    def json_key(self) -> str:
        return self.json_name or _camel_case(self.field)


def column(field: str, header: str, field_type: FieldType = FieldType.STRING, **options: Any) -> ColumnSchemaEntry:
    """Shorthand constructor used by entity declarations."""
    return ColumnSchemaEntry(field=field, header=header, field_type=field_type, **options)


_SCHEMAS: dict[type, tuple[ColumnSchemaEntry, ...]] = {}


def register_schema(entity_cls: type, entries: Iterable[ColumnSchemaEntry]) -> tuple[ColumnSchemaEntry, ...]:
    frozen = tuple(entries)
    _SCHEMAS[entity_cls] = frozen
    return frozen


def sheet_columns(*entries: ColumnSchemaEntry) -> Callable[[type[T]], type[T]]:
    """Class decorator registering ``entries`` as the schema of the class."""
    def decorator(entity_cls: type[T]) -> type[T]:
        register_schema(entity_cls, entries)
        return entity_cls
    return decorator


def get_schema(entity_cls: type) -> tuple[ColumnSchemaEntry, ...]:
    try:
        return _SCHEMAS[entity_cls]
    except KeyError:
        raise SchemaError(f"no column schema registered for {entity_cls.__name__}") from None


def find_entry(entity_cls: type, header: str) -> ColumnSchemaEntry | None:
    """First schema entry whose header equals ``header`` (trimmed, case-sensitive)."""
    label = str(header).strip()
    return next((e for e in get_schema(entity_cls) if e.header == label), None)


def build_headers(entity_cls: type) -> list[SheetCellModel]:
    """Header cells declared by an entity, in declaration order."""
    headers = [
        SheetCellModel(
            name=entry.header,
            format=entry.format,
            note=entry.note,
            validation=entry.validation,
        )
        for entry in get_schema(entity_cls)
    ]
    return update_columns(headers)


def to_json_dict(entity: Any) -> dict[str, Any]:
    """Serialize an entity keyed by json names, row bookkeeping first."""
    data: dict[str, Any] = {}
    for attr, key in _BASE_JSON_NAMES:
        if hasattr(entity, attr):
            data[key] = getattr(entity, attr)
    for entry in get_schema(type(entity)):
        data[entry.json_key] = getattr(entity, entry.field)
    return data
