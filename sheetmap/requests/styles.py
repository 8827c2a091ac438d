from __future__ import annotations

from typing import Any

from ..models.enums import ColorType, FormatType, ValidationType

"""Static styling data for generated sheet requests.

Colours, number-format patterns, protection warnings, grid defaults and the
data validation rules referenced by column definitions. Request bodies follow
the Google Sheets API v4 JSON shape.
"""

__all__ = [
    "ACCOUNTING_PATTERN",
    "COLORS",
    "DEFAULT_COLUMN_COUNT",
    "HEADER_RANGE",
    "KEY_RANGE",
    "PATTERNS",
    "PROTECTION_WARNINGS",
    "RANGE",
    "color",
    "data_validation",
    "number_format",
]

DEFAULT_COLUMN_COUNT = 26
RANGE = "A1:ZZZ10000000"
HEADER_RANGE = "1:1"
KEY_RANGE = "A1:A"

ACCOUNTING_PATTERN = '_("$"* #,##0.00_);_("$"* \\(#,##0.00\\);_("$"* "-"??_);_(@_)'

PATTERNS = {
    "accounting": ACCOUNTING_PATTERN,
    "currency": "$#,##0.00",
    "date": "yyyy-MM-dd",
    "distance": "#,##0.0",
    "duration": "[h]:mm",
    "number": "#,##0",
    "percentage": "0.00%",
    "text": "@",
    "time": "hh:mm am/pm",
    "weekday": "ddd",
}

PROTECTION_WARNINGS = {
    "column": "Editing this column will cause a #REF error.",
    "header": "Editing the header could cause a #REF error or break sheet references.",
    "sheet": "Editing this sheet will cause a #REF error.",
}

# RGB floats 0..1
COLORS: dict[ColorType, tuple[float, float, float]] = {
    ColorType.BLACK: (0.0, 0.0, 0.0),
    ColorType.BLUE: (0.0, 0.0, 1.0),
    ColorType.CYAN: (0.3, 0.8, 0.9),
    ColorType.DARK_YELLOW: (0.9686, 0.7961, 0.3020),
    ColorType.GREEN: (0.0, 0.5, 0.0),
    ColorType.LIGHT_CYAN: (0.9, 1.0, 1.0),
    ColorType.LIGHT_GRAY: (0.9059, 0.9765, 0.9373),
    ColorType.LIGHT_GREEN: (0.3882, 0.8235, 0.5922),
    ColorType.LIGHT_RED: (1.0, 0.9, 0.85),
    ColorType.LIGHT_YELLOW: (0.9961, 0.9725, 0.8902),
    ColorType.LIME: (0.0, 1.0, 0.0),
    ColorType.ORANGE: (1.0, 0.6, 0.0),
    ColorType.MAGENTA: (1.0, 0.0, 1.0),
    ColorType.PINK: (1.0, 0.0, 1.0),
    ColorType.PURPLE: (0.5, 0.0, 0.5),
    ColorType.RED: (1.0, 0.0, 0.0),
    ColorType.WHITE: (1.0, 1.0, 1.0),
    ColorType.YELLOW: (1.0, 1.0, 0.0),
}

# FormatType -> (numberFormat type, pattern key)
_NUMBER_FORMATS: dict[FormatType, tuple[str, str | None]] = {
    FormatType.ACCOUNTING: ("NUMBER", "accounting"),
    FormatType.CURRENCY: ("NUMBER", "currency"),
    FormatType.DATE: ("DATE", "date"),
    FormatType.DISTANCE: ("NUMBER", "distance"),
    FormatType.DURATION: ("DATE", "duration"),
    FormatType.NUMBER: ("NUMBER", "number"),
    FormatType.PERCENT: ("PERCENT", "percentage"),
    FormatType.TEXT: ("TEXT", None),
    FormatType.TIME: ("DATE", "time"),
    FormatType.WEEKDAY: ("DATE", "weekday"),
}

# Lookup sheets feeding the range validations.
_VALIDATION_SHEETS = {
    ValidationType.RANGE_ADDRESS: "Addresses",
    ValidationType.RANGE_NAME: "Names",
    ValidationType.RANGE_PLACE: "Places",
    ValidationType.RANGE_REGION: "Regions",
    ValidationType.RANGE_SERVICE: "Services",
    ValidationType.RANGE_TYPE: "Types",
}


def color(color_type: ColorType) -> dict[str, float]:
    red, green, blue = COLORS.get(color_type, COLORS[ColorType.WHITE])
    return {"red": red, "green": green, "blue": blue}


def number_format(format_type: FormatType | None) -> dict[str, str]:
    """``NumberFormat`` for a column format; unknown formats fall back to TEXT."""
    kind, pattern_key = _NUMBER_FORMATS.get(format_type, ("TEXT", None)) if format_type else ("TEXT", None)
    result = {"type": kind}
    if pattern_key is not None:
        result["pattern"] = PATTERNS[pattern_key]
    return result


def data_validation(validation: ValidationType | None, column: str = "") -> dict[str, Any] | None:
    """``DataValidationRule`` for a column, None when no rule applies."""
    if validation is None:
        return None
    if validation == ValidationType.BOOLEAN:
        return {"condition": {"type": "BOOLEAN"}}
    if validation == ValidationType.RANGE_SELF:
        formula = f"={column}2:{column}"
    else:
        formula = f"={_VALIDATION_SHEETS[validation]}!A2:A"
    return {
        "condition": {"type": "ONE_OF_RANGE", "values": [{"userEnteredValue": formula}]},
        "showCustomUi": True,
        "strict": False,
    }
