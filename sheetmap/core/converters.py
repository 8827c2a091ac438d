from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Any, Union

import pandas as pd

from ..models.enums import FieldType

if TYPE_CHECKING:
    from .schema import ColumnSchemaEntry

"""Typed field conversion between raw sheet cells and entity values.

Raw cells arrive as whatever the backend produced (formatted strings, numbers,
booleans, NaN from pandas, numpy scalars). ``normalize_cell`` collapses them to
the closed set str / int / float / bool / None before any typed parsing, and no
other value kind travels further into the mapper.

Data-quality problems never raise: each parser returns the type default
(``""``, ``0``, ``0.0``, ``False``) or ``None`` for nullable targets. Only a
missing schema entry is treated as a programmer error.
"""

__all__ = [
    "CellValue",
    "DATE_FORMAT",
    "cell_text",
    "convert_from_sheet_value",
    "convert_to_cell_data",
    "convert_to_sheet_value",
    "from_date_serial",
    "normalize_cell",
    "parse_bool",
    "parse_date",
    "parse_decimal",
    "parse_int",
    "parse_percentage",
    "parse_string",
    "to_date_serial",
    "to_duration_serial",
    "to_time_serial",
]

CellValue = Union[str, int, float, bool, None]

DATE_FORMAT = "%Y-%m-%d"
# Day zero of spreadsheet date serials.
SERIAL_EPOCH = date(1899, 12, 30)
SECONDS_PER_DAY = 86400

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%d-%b-%Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M:%S %p",
)
_TIME_FORMATS = (
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I:%M:%S %p",
    "%I:%M%p",
    "%I %p",
)
_NON_DIGIT = re.compile(r"[^0-9]")
_NON_DECIMAL = re.compile(r"[^0-9.\-]")


def _is_missing(value: Any) -> bool:
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def normalize_cell(value: Any) -> CellValue:
    """Collapse any incoming cell into str / int / float / bool / None."""
    if value is None:
        return None
    if isinstance(value, (list, tuple, dict, set)):
        return str(value)
    if _is_missing(value):
        return None
    # numpy scalars (pandas frames) -> python scalars
    if not isinstance(value, (str, bytes)) and hasattr(value, "item") and not isinstance(value, pd.Timestamp):
        try:
            value = value.item()
        except (TypeError, ValueError):
            pass
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, datetime):
        if value.hour == 0 and value.minute == 0 and value.second == 0 and value.microsecond == 0:
            return value.strftime(DATE_FORMAT)
        return value.isoformat()
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def cell_text(value: Any) -> str:
    """Trimmed text form of a cell; integral floats lose their ``.0``."""
    cell = normalize_cell(value)
    if cell is None:
        return ""
    if isinstance(cell, bool):
        return "TRUE" if cell else "FALSE"
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def parse_string(value: Any) -> str:
    return cell_text(value)


def _whole_number(number: int | float, signed: bool, default: int | None) -> int | None:
    if isinstance(number, float) and not (math.isfinite(number) and number.is_integer()):
        return default
    whole = int(number)
    return whole if signed else abs(whole)


def parse_int(value: Any, nullable: bool = False, signed: bool = False) -> int | None:
    """Parse an integer cell.

    Every non-digit character is stripped before parsing, a leading minus sign
    included, unless ``signed`` is set. A value with a fractional part is not
    an integer and yields the default, whether it arrives as a number
    (``2.75``) or as text (``"2.75"``). Integral decimals (``2.0``, ``"2.00"``)
    parse as their integer.
    """
    default = None if nullable else 0
    cell = normalize_cell(value)
    if isinstance(cell, bool):
        return int(cell)
    if isinstance(cell, (int, float)):
        return _whole_number(cell, signed, default)
    text = cell_text(cell)
    if not text:
        return default
    if "." in text:
        number = parse_decimal(text, nullable=True)
        return default if number is None else _whole_number(number, signed, default)
    negative = signed and text.startswith("-")
    digits = _NON_DIGIT.sub("", text)
    if not digits:
        return default
    number = int(digits)
    return -number if negative else number


def parse_decimal(value: Any, nullable: bool = False, currency: bool = False) -> float | None:
    """Parse a decimal/currency cell keeping digits, ``.`` and ``-`` only.

    A lone ``-`` (the accounting rendering of zero) parses as 0.
    """
    default = None if nullable else 0.0
    cell = normalize_cell(value)
    if isinstance(cell, bool):
        return float(cell)
    if isinstance(cell, (int, float)):
        return float(cell)
    text = cell_text(cell)
    if not text:
        return default
    if currency:
        text = text.replace("$", "")
    cleaned = _NON_DECIMAL.sub("", text)
    if cleaned == "-":
        return 0.0
    if cleaned == "":
        return default
    try:
        return float(cleaned)
    except ValueError:
        return default


def parse_percentage(value: Any, nullable: bool = False) -> float | None:
    """``"12.5%"`` -> ``0.125``; values without ``%`` are taken as fractions."""
    cell = normalize_cell(value)
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return float(cell)
    text = cell_text(cell)
    number = parse_decimal(text.replace("%", ""), nullable=nullable)
    if number is None:
        return None
    return number / 100 if "%" in text else number


def parse_bool(value: Any, nullable: bool = False) -> bool | None:
    cell = normalize_cell(value)
    if isinstance(cell, bool):
        return cell
    text = cell_text(cell)
    if not text and nullable:
        return None
    return text.upper() == "TRUE"


def _parse_datetime(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_date(value: Any, nullable: bool = False) -> str | None:
    """Normalize a date cell to ``yyyy-MM-dd``.

    Numeric cells are read as date serials. Unparsable input yields ``""``
    (``None`` for nullable targets).
    """
    default = None if nullable else ""
    cell = normalize_cell(value)
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return from_date_serial(cell) or default
    text = cell_text(cell)
    if not text:
        return default
    parsed = _parse_datetime(text)
    if parsed is None:
        return default
    return parsed.strftime(DATE_FORMAT)


def to_date_serial(value: Any) -> int | None:
    """Days since 1899-12-30 for a date cell, ``None`` when unparsable."""
    text = parse_date(value, nullable=True)
    if not text:
        return None
    parsed = datetime.strptime(text, DATE_FORMAT).date()
    return (parsed - SERIAL_EPOCH).days


def from_date_serial(serial: float) -> str:
    try:
        return (SERIAL_EPOCH + timedelta(days=int(serial))).strftime(DATE_FORMAT)
    except (OverflowError, ValueError):
        return ""


def to_time_serial(value: Any) -> float | None:
    """Time of day as a fraction of one day, ``None`` when unparsable."""
    cell = normalize_cell(value)
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return float(cell) if 0 <= cell < 1 else None
    text = cell_text(cell).upper()
    if not text:
        return None
    for fmt in _TIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return (parsed.hour * 3600 + parsed.minute * 60 + parsed.second) / SECONDS_PER_DAY
    return None


def to_duration_serial(value: Any) -> float | None:
    """Convert ``[-]H:MM:SS[.fff]`` to a signed fractional-day serial.

    Anything that does not split into exactly three colon separated parts is
    rejected with ``None``.
    """
    cell = normalize_cell(value)
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return float(cell)
    text = cell_text(cell)
    if not text:
        return None
    sign = 1
    if text.startswith("-"):
        sign = -1
        text = text[1:]
    parts = text.split(":")
    if len(parts) != 3:
        return None
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
        seconds = float(parts[2])
    except ValueError:
        return None
    if hours < 0 or not 0 <= minutes < 60 or not 0 <= seconds < 60:
        return None
    return sign * (hours * 3600 + minutes * 60 + seconds) / SECONDS_PER_DAY


def _require(entry: ColumnSchemaEntry | None) -> ColumnSchemaEntry:
    if entry is None:
        raise TypeError("column schema entry is required")
    return entry


def convert_from_sheet_value(raw: Any, entry: ColumnSchemaEntry) -> Any:
    """Convert a raw cell to the typed value declared by ``entry``."""
    entry = _require(entry)
    field_type = entry.field_type
    if field_type == FieldType.INTEGER:
        return parse_int(raw, nullable=entry.nullable, signed=entry.signed)
    if field_type == FieldType.NUMBER:
        return parse_decimal(raw, nullable=entry.nullable)
    if field_type == FieldType.CURRENCY:
        return parse_decimal(raw, nullable=entry.nullable, currency=True)
    if field_type == FieldType.PERCENTAGE:
        return parse_percentage(raw, nullable=entry.nullable)
    if field_type == FieldType.BOOLEAN:
        return parse_bool(raw, nullable=entry.nullable)
    if field_type == FieldType.DATE_TIME:
        return parse_date(raw, nullable=entry.nullable)
    # String, Email, Url, PhoneNumber, Time and Duration keep their text form.
    text = parse_string(raw)
    if entry.nullable and not text:
        return None
    return text


def convert_to_sheet_value(value: Any, entry: ColumnSchemaEntry) -> CellValue:
    """Convert a typed entity value back to a raw cell for value writes."""
    entry = _require(entry)
    if value is None:
        return None
    field_type = entry.field_type
    if field_type == FieldType.BOOLEAN:
        return bool(value)
    if field_type == FieldType.INTEGER:
        return int(value)
    if field_type in (FieldType.NUMBER, FieldType.CURRENCY, FieldType.PERCENTAGE):
        return float(value)
    if field_type == FieldType.DATE_TIME:
        return parse_date(value) or str(value)
    return str(value)


def convert_to_cell_data(value: Any, entry: ColumnSchemaEntry) -> dict[str, Any]:
    """Build a Sheets ``ExtendedValue`` for structured row writes.

    Date, time and duration text goes out as serial numbers when it parses so
    the sheet stores real values instead of strings.
    """
    cell = convert_to_sheet_value(value, entry)
    if cell is None or cell == "":
        return {}
    field_type = entry.field_type
    if field_type == FieldType.DATE_TIME:
        serial = to_date_serial(cell)
        return {"numberValue": serial} if serial is not None else {"stringValue": str(cell)}
    if field_type == FieldType.TIME:
        serial = to_time_serial(cell)
        return {"numberValue": serial} if serial is not None else {"stringValue": str(cell)}
    if field_type == FieldType.DURATION:
        serial = to_duration_serial(cell)
        return {"numberValue": serial} if serial is not None else {"stringValue": str(cell)}
    if isinstance(cell, bool):
        return {"boolValue": cell}
    if isinstance(cell, (int, float)):
        return {"numberValue": cell}
    return {"stringValue": cell}
