from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from ..models.enums import FieldType
from ..models.validation_result import ValidationResult
from .converters import cell_text, parse_date, to_duration_serial
from .header_index import NOT_FOUND, build_header_index, get_header_index
from .schema import get_schema

"""Structural and type validation of sheet grids, plus parameter checks.

Unlike the header validator these checks return a ValidationResult (plain
error/warning strings) and are meant for explicit validation passes before a
write, not for routine reads.
"""

__all__ = [
    "SchemaValidator",
    "validate_date_format",
    "validate_non_negative",
    "validate_required_parameters",
    "validate_spreadsheet_id",
]

SPREADSHEET_ID_MIN_LENGTH = 40
SPREADSHEET_ID_MAX_LENGTH = 50

_NUMERIC_TEXT = re.compile(r"^\(?-?\$?\s*-?[0-9,]*\.?[0-9]+\)?%?$|^\$?\s*-$")


class SchemaValidator:
    """Grid level checks against expected headers or a registered entity."""

    @staticmethod
    def validate_sheet(headers: Sequence[Any] | None, expected_headers: Sequence[str]) -> ValidationResult:
        """Case-insensitive presence check of expected headers."""
        result = ValidationResult()
        actual = [cell_text(h) for h in (headers or [])]
        actual_folded = {h.casefold() for h in actual if h}
        expected_folded = {h.casefold() for h in expected_headers}

        for name in expected_headers:
            if name.casefold() not in actual_folded:
                result.add_error(f"Missing required column: {name}")
        for name in actual:
            if name and name.casefold() not in expected_folded:
                result.add_warning(f"Unexpected column: {name}")
        return result

    @staticmethod
    def validate_sheet_structure(
        values: Sequence[Sequence[Any]] | None, expected_headers: Sequence[str], min_rows: int = 1
    ) -> ValidationResult:
        """Check the grid is non-empty, tall enough and not ragged."""
        if not values:
            return ValidationResult.failure("Sheet has no data")

        result = SchemaValidator.validate_sheet(values[0], expected_headers)
        if len(values) < min_rows:
            result.add_error(f"Sheet has {len(values)} row(s), expected at least {min_rows}")

        width = len(values[0])
        for i, row in enumerate(values[1:], start=1):
            if len(row) != width:
                result.add_warning(f"Row {i + 1} has {len(row)} columns, expected {width}")
        return result

    @staticmethod
    def validate_data_types(values: Sequence[Sequence[Any]] | None, entity_cls: type) -> ValidationResult:
        """Warn about non-blank cells that do not parse as their declared type."""
        result = ValidationResult()
        if not values:
            return result
        index = build_header_index(values[0])
        for entry in get_schema(entity_cls):
            position = get_header_index(index, entry.header)
            if position == NOT_FOUND:
                continue
            for i, row in enumerate(values[1:], start=2):
                text = cell_text(row[position]) if position < len(row) else ""
                if not text or _parses(text, entry.field_type):
                    continue
                result.add_warning(
                    f"Row {i} column [{entry.header}]: invalid {entry.field_type.value} value '{text}'"
                )
        return result


def _parses(text: str, field_type: FieldType) -> bool:
    if field_type in (FieldType.NUMBER, FieldType.CURRENCY, FieldType.PERCENTAGE, FieldType.INTEGER):
        return bool(_NUMERIC_TEXT.match(text.replace(" ", "")))
    if field_type == FieldType.BOOLEAN:
        return text.upper() in ("TRUE", "FALSE")
    if field_type == FieldType.DATE_TIME:
        return bool(parse_date(text))
    if field_type == FieldType.DURATION:
        return to_duration_serial(text) is not None
    return True


def validate_required_parameters(**params: Any) -> ValidationResult:
    result = ValidationResult()
    for name, value in params.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            result.add_error(f"Required parameter '{name}' is null or empty")
    return result


def validate_spreadsheet_id(spreadsheet_id: str | None) -> ValidationResult:
    if spreadsheet_id is None or not spreadsheet_id.strip():
        return ValidationResult.failure("Spreadsheet ID cannot be null or empty")
    result = ValidationResult()
    if not SPREADSHEET_ID_MIN_LENGTH <= len(spreadsheet_id.strip()) <= SPREADSHEET_ID_MAX_LENGTH:
        result.add_warning("Spreadsheet ID format may be invalid")
    return result


def validate_date_format(value: str | None, field_name: str = "Date") -> ValidationResult:
    if value is None or not value.strip():
        return ValidationResult.success()
    if not parse_date(value):
        return ValidationResult.failure(f"{field_name} has invalid date format: {value}")
    return ValidationResult.success()


def validate_non_negative(value: float | None, field_name: str) -> ValidationResult:
    if value is not None and value < 0:
        return ValidationResult.failure(f"{field_name} cannot be negative")
    return ValidationResult.success()
