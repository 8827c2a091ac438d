from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import TypeVar

"""Enumerations shared by the mapping, validation and request layers.

Every member's value is its human label (sheet header text, API token or
display name). Label lookups go through a process-wide read-through cache keyed
by the enum class: it is built on first use and never invalidated, since the
member/label pairs are fixed when the module is imported.
"""

__all__ = [
    "ActionType",
    "ColorType",
    "DimensionType",
    "FieldType",
    "FormatType",
    "MessageLevel",
    "MessageType",
    "ValidationType",
    "get_description",
    "get_descriptions",
    "get_value_from_name",
    "try_get_value_from_name",
]

E = TypeVar("E", bound=Enum)


class FieldType(Enum):
    """Declared cell type of an entity field."""
    STRING = "String"
    NUMBER = "Number"
    INTEGER = "Integer"
    CURRENCY = "Currency"
    DATE_TIME = "DateTime"
    TIME = "Time"
    DURATION = "Duration"
    BOOLEAN = "Boolean"
    PERCENTAGE = "Percentage"
    EMAIL = "Email"
    URL = "Url"
    PHONE_NUMBER = "PhoneNumber"


class FormatType(Enum):
    """Display format applied to a data column."""
    ACCOUNTING = "Accounting"
    CURRENCY = "Currency"
    DATE = "Date"
    DISTANCE = "Distance"
    DURATION = "Duration"
    NUMBER = "Number"
    PERCENT = "Percent"
    TEXT = "Text"
    TIME = "Time"
    WEEKDAY = "Weekday"


class ValidationType(Enum):
    """Data validation rule attached to a data column."""
    BOOLEAN = "Boolean"
    RANGE_ADDRESS = "RangeAddress"
    RANGE_NAME = "RangeName"
    RANGE_PLACE = "RangePlace"
    RANGE_REGION = "RangeRegion"
    RANGE_SERVICE = "RangeService"
    RANGE_SELF = "RangeSelf"
    RANGE_TYPE = "RangeType"


class ColorType(Enum):
    BLACK = "Black"
    BLUE = "Blue"
    CYAN = "Cyan"
    DARK_YELLOW = "Dark Yellow"
    GREEN = "Green"
    LIGHT_CYAN = "Light Cyan"
    LIGHT_GRAY = "Light Gray"
    LIGHT_GREEN = "Light Green"
    LIGHT_RED = "Light Red"
    LIGHT_YELLOW = "Light Yellow"
    LIME = "Lime"
    ORANGE = "Orange"
    MAGENTA = "Magenta"
    PINK = "Pink"
    PURPLE = "Purple"
    RED = "Red"
    WHITE = "White"
    YELLOW = "Yellow"


class MessageLevel(Enum):
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class MessageType(Enum):
    """Category of a diagnostic message."""
    GENERAL = "General"
    ADD_DATA = "Add Data"
    API_ERROR = "API Error"
    CHECK_SHEET = "Check Sheet"
    CREATE_SHEET = "Create Sheet"
    DELETE_DATA = "Delete Data"
    DELETE_SHEET = "Delete Sheet"
    GET_SHEETS = "Get Sheets"
    MISSING_SHEETS = "Missing Sheets"
    UPDATE_DATA = "Update Data"
    VALIDATION = "Validation"


class ActionType(Enum):
    """Intended write operation for an entity row."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class DimensionType(Enum):
    COLUMNS = "COLUMNS"
    ROWS = "ROWS"


@lru_cache(maxsize=None)
def _label_index(enum_cls: type[Enum]) -> dict[str, Enum]:
    # Upper-cased label and member name -> member; first declaration wins.
    index: dict[str, Enum] = {}
    for member in enum_cls:
        index.setdefault(str(member.value).strip().upper(), member)
        index.setdefault(member.name.upper(), member)
    return index


def get_description(member: Enum) -> str:
    """Return the human label of an enum member."""
    return str(member.value)


def get_descriptions(enum_cls: type[Enum]) -> list[str]:
    return [get_description(m) for m in enum_cls]


def try_get_value_from_name(enum_cls: type[E], name: str | None) -> E | None:
    """Case-insensitive lookup by label or member name, ``None`` when unknown."""
    if name is None:
        return None
    return _label_index(enum_cls).get(str(name).strip().upper())  # type: ignore[return-value]


def get_value_from_name(enum_cls: type[E], name: str | None) -> E:
    """Case-insensitive lookup by label or member name.

    Unknown names resolve to the first declared member, mirroring how sheet
    labels with typos degrade instead of failing.
    """
    member = try_get_value_from_name(enum_cls, name)
    if member is None:
        return next(iter(enum_cls))
    return member
