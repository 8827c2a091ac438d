from __future__ import annotations

from dataclasses import dataclass

import pytest

from sheetmap.core.schema import SchemaError, build_headers, find_entry, get_schema, to_json_dict
from sheetmap.domains.gig import Expense, Trip
from sheetmap.domains.stock import Stock
from sheetmap.models.enums import FieldType, FormatType, ValidationType


def test_unregistered_entity_raises_schema_error():
    @dataclass
    class Unknown:
        value: str = ""

    with pytest.raises(SchemaError):
        get_schema(Unknown)


def test_schema_keeps_declaration_order():
    assert [e.header for e in get_schema(Expense)] == ["Date", "Name", "Description", "Amount", "Category"]


def test_find_entry_trims_but_is_case_sensitive():
    entry = find_entry(Trip, " Pay ")
    assert entry is not None
    assert entry.field == "pay"
    assert entry.field_type == FieldType.CURRENCY
    assert entry.nullable is True
    assert find_entry(Trip, "pay") is None


def test_input_and_output_columns_are_flagged():
    assert find_entry(Trip, "Pay").is_input is True
    assert find_entry(Trip, "Total").is_input is False
    assert find_entry(Trip, "Key").is_input is False


def test_build_headers_carries_format_note_and_validation():
    headers = build_headers(Trip)
    assert len(headers) == len(get_schema(Trip))
    assert [h.column for h in headers[:3]] == ["A", "B", "C"]
    assert headers[26].column == "AA"

    date = headers[0]
    assert date.name == "Date"
    assert date.format == FormatType.DATE
    assert date.note == "Format: YYYY-MM-DD"
    assert headers[1].validation == ValidationType.RANGE_SERVICE


def test_to_json_dict_uses_json_names():
    data = to_json_dict(Trip(row_id=2, action="UPDATE", date="2024-01-15", pickup_time="08:00", pay=5.0))
    keys = list(data)
    assert keys[:3] == ["rowId", "action", "saved"]
    assert data["rowId"] == 2
    assert data["pickupTime"] == "08:00"
    assert data["pay"] == 5.0
    assert data["amountPerTime"] is None


def test_explicit_json_names_override_camel_case():
    data = to_json_dict(Stock(return_amount=12.0, week_high_52=99.0))
    assert data["return"] == 12.0
    assert data["52WeekHigh"] == 99.0
    assert "returnAmount" not in data
