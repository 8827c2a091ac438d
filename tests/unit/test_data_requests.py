from __future__ import annotations

import pytest

from sheetmap.requests.data_requests import (
    generate_append_cells,
    generate_batch_get_values_by_data_filter_request,
    generate_delete_requests,
    generate_delete_sheet_requests,
    generate_index_ranges,
    generate_update_cells_request,
    generate_update_sheet_index,
    generate_update_value_request,
)


@pytest.mark.parametrize(
    ("row_ids", "expected"),
    [
        ([], []),
        ([5], [(4, 5)]),
        ([2, 3, 4, 7], [(6, 7), (1, 4)]),
        ([9, 2, 3, 3, 8], [(7, 9), (1, 3)]),
    ],
)
def test_index_ranges_merge_and_run_bottom_up(row_ids, expected):
    assert generate_index_ranges(row_ids) == expected


def test_delete_requests_use_row_dimension():
    requests = generate_delete_requests(12, [3, 4])
    assert requests == [
        {"deleteDimension": {"range": {"sheetId": 12, "dimension": "ROWS", "startIndex": 2, "endIndex": 4}}}
    ]
    assert generate_delete_requests(12, []) == []


def test_delete_sheet_requests():
    assert generate_delete_sheet_requests([1, 2]) == [{"deleteSheet": {"sheetId": 1}}, {"deleteSheet": {"sheetId": 2}}]


def test_batch_get_filter_request():
    assert generate_batch_get_values_by_data_filter_request(None) == {}
    assert generate_batch_get_values_by_data_filter_request([]) == {}
    assert generate_batch_get_values_by_data_filter_request(["Trips", "Shifts"], "A1:B") == {
        "dataFilters": [{"a1Range": "Trips!A1:B"}, {"a1Range": "Shifts!A1:B"}]
    }
    assert generate_batch_get_values_by_data_filter_request(["Trips"], "  ") == {"dataFilters": [{"a1Range": "Trips"}]}


def test_update_value_request_writes_each_block_at_its_row():
    body = generate_update_value_request("Trips", {2: [["2024-01-01", "Uber"]], 5: [("x",)]})
    assert body["valueInputOption"] == "USER_ENTERED"
    assert body["data"] == [
        {"majorDimension": "ROWS", "range": "Trips!A2", "values": [["2024-01-01", "Uber"]]},
        {"majorDimension": "ROWS", "range": "Trips!A5", "values": [["x"]]},
    ]


def test_append_and_update_cells():
    rows = [{"values": [{"userEnteredValue": {"stringValue": "a"}}]}]
    assert generate_append_cells(3, rows) == {"appendCells": {"sheetId": 3, "rows": rows, "fields": "userEnteredValue"}}

    update = generate_update_cells_request(3, 4, rows)["updateCells"]
    assert update["range"] == {"sheetId": 3, "startRowIndex": 4, "endRowIndex": 5}
    assert update["fields"] == "userEnteredValue"


def test_update_sheet_index():
    assert generate_update_sheet_index(7, 3) == {
        "updateSheetProperties": {"properties": {"sheetId": 7, "index": 3}, "fields": "index"}
    }
