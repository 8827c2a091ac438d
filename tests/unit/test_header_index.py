from __future__ import annotations

from sheetmap.core.header_index import (
    NOT_FOUND,
    build_header_index,
    get_bool_value,
    get_cell,
    get_date_value,
    get_decimal_value,
    get_header_index,
    get_header_index_ignore_case,
    get_int_value,
    get_string_value,
)


def test_build_header_index_trims_and_keeps_blanks():
    index = build_header_index([" Date ", None, "Pay", 3.0])
    assert index == {0: "Date", 1: "", 2: "Pay", 3: "3"}
    assert build_header_index(None) == {}


def test_duplicate_labels_resolve_to_first_position():
    index = build_header_index(["Pay", "Tips", "Pay"])
    assert get_header_index(index, "Pay") == 0
    assert get_header_index(index, " Tips ") == 1


def test_lookup_is_case_sensitive_unless_asked():
    index = build_header_index(["Date", "Pay"])
    assert get_header_index(index, "pay") == NOT_FOUND
    assert get_header_index_ignore_case(index, "pay") == 1
    assert get_header_index_ignore_case(index, "Missing") == NOT_FOUND


def test_get_cell_tolerates_short_rows_and_missing_columns():
    index = build_header_index(["Date", "Pay", "Tips"])
    assert get_cell(["2024-01-15", "10"], index, "Pay") == "10"
    assert get_cell(["2024-01-15", "10"], index, "Tips") is None
    assert get_cell(["2024-01-15", "10"], index, "Bonus") is None


def test_typed_accessors_fall_back_to_defaults():
    index = build_header_index(["Date", "Trips", "Pay", "X", "Name"])
    row = ["01/15/2024", "3", "$9.75", "TRUE", " Alex "]
    assert get_date_value("Date", row, index) == "2024-01-15"
    assert get_int_value("Trips", row, index) == 3
    assert get_decimal_value("Pay", row, index) == 9.75
    assert get_bool_value("X", row, index) is True
    assert get_string_value("Name", row, index) == "Alex"

    assert get_int_value("Missing", row, index) == 0
    assert get_decimal_value("Missing", row, index) == 0.0
    assert get_bool_value("Missing", row, index) is False
    assert get_date_value("Missing", row, index) == ""
