from __future__ import annotations

import logging

import pytest

from sheetmap.services.workbook_service import WorkbookSheetService


@pytest.fixture()
def service() -> WorkbookSheetService:
    return WorkbookSheetService(
        {
            "Sheet1": [],
            "Expenses": [
                ["Date", "Name", "Amount"],
                ["2024-01-01", "Fuel", 45.1],
                ["2024-01-02", "Parking", 5],
            ],
        },
        title="Book",
        spreadsheet_id="book-1",
    )


def test_get_sheet_data_is_case_insensitive(service):
    data = service.get_sheet_data("expenses")
    assert data["range"] == "Expenses"
    assert data["values"][1] == ["2024-01-01", "Fuel", 45.1]


def test_batch_data_selects_rows(service):
    response = service.get_batch_data(["Expenses", "Sheet1"], "1:1")
    ranges = response["valueRanges"]
    assert response["spreadsheetId"] == "book-1"
    assert ranges[0]["valueRange"] == {"range": "Expenses!1:1", "majorDimension": "ROWS", "values": [["Date", "Name", "Amount"]]}
    assert ranges[1]["valueRange"]["values"] == []

    rows = service.get_batch_data(["Expenses"], "A2:C")["valueRanges"][0]["valueRange"]["values"]
    assert [r[1] for r in rows] == ["Fuel", "Parking"]


def test_unknown_sheet_returns_none_and_logs(service, caplog):
    with caplog.at_level(logging.WARNING, logger="sheetmap.services.workbook_service"):
        assert service.get_batch_data(["Expenses", "Trips"]) is None
        assert service.get_sheet_data("Trips") is None
    assert "get_batch_data failed" in caplog.text


def test_sheet_info_without_and_with_ranges(service):
    info = service.get_sheet_info()
    assert info["properties"] == {"title": "Book"}
    assert [s["properties"] for s in info["sheets"]] == [
        {"sheetId": 0, "title": "Sheet1", "index": 0},
        {"sheetId": 1, "title": "Expenses", "index": 1},
    ]
    assert all("data" not in s for s in info["sheets"])

    ranged = service.get_sheet_info(["Expenses!1:1", "Trips!1:1"])
    assert [s["properties"]["title"] for s in ranged["sheets"]] == ["Expenses"]
    values = ranged["sheets"][0]["data"][0]["rowData"][0]["values"]
    assert [v["formattedValue"] for v in values] == ["Date", "Name", "Amount"]


def test_append_and_update_values(service):
    appended = service.append_data([["2024-01-03", "Tolls", 2.5]], "Expenses!A1")
    assert appended["updates"] == {"updatedRange": "Expenses!A4:C4", "updatedRows": 1}

    assert service.update_data([["Garage"]], "Expenses!B3") == {"updatedRows": 1}
    body = {"data": [{"range": "Expenses!A5", "values": [["2024-01-05", "Wash", 9]]}]}
    assert service.batch_update_data(body)["totalUpdatedRows"] == 1

    grid = service.grid("Expenses")
    assert grid[2] == ["2024-01-02", "Garage", 5]
    assert grid[3] == ["2024-01-03", "Tolls", 2.5]
    assert grid[4] == ["2024-01-05", "Wash", 9]


def test_structural_requests_apply_content_changes(service):
    body = {
        "requests": [
            {"addSheet": {"properties": {"sheetId": 40, "title": "Notes"}}},
            {"appendCells": {"sheetId": 40, "rows": [
                {"values": [
                    {"userEnteredValue": {"stringValue": "Note"}},
                    {"userEnteredValue": {"formulaValue": '=ARRAYFORMULA(IFS(ROW(A1:A)=1,"Len",true,LEN(A1:A)))'}},
                ]},
                {"values": [{"userEnteredValue": {"stringValue": "a"}}, {"userEnteredValue": {"formulaValue": "=LEN(A2)"}}]},
            ], "fields": "userEnteredValue"}},
            {"repeatCell": {"range": {"sheetId": 40}, "cell": {}, "fields": "userEnteredFormat"}},
            {"deleteDimension": {"range": {"sheetId": 1, "dimension": "ROWS", "startIndex": 1, "endIndex": 2}}},
            {"updateSheetProperties": {"properties": {"sheetId": 0, "index": 2}, "fields": "index"}},
        ]
    }
    response = service.batch_update_spreadsheet(body)

    assert response["replies"][0]["addSheet"]["properties"] == {"sheetId": 40, "title": "Notes"}
    assert service.sheet_names == ["Expenses", "Notes", "Sheet1"]
    assert service.grid("Notes") == [["Note", "Len"], ["a", None]]
    assert [r[1] for r in service.grid("Expenses")] == ["Name", "Parking"]


def test_unsupported_request_rejects_whole_batch(service):
    body = {"requests": [
        {"addSheet": {"properties": {"title": "Notes"}}},
        {"mergeCells": {"range": {"sheetId": 1}}},
    ]}
    assert service.batch_update_spreadsheet(body) is None
    assert service.sheet_names == ["Sheet1", "Expenses"]


def test_failing_request_rolls_back_earlier_ones(service):
    before = service.grid("Expenses")
    body = {"requests": [
        {"addSheet": {"properties": {"title": "Notes", "sheetId": 7}}},
        {"deleteDimension": {"range": {"sheetId": 1, "dimension": "ROWS", "startIndex": 1, "endIndex": 2}}},
        {"addSheet": {"properties": {"title": "expenses"}}},
    ]}
    assert service.batch_update_spreadsheet(body) is None
    assert service.sheet_names == ["Sheet1", "Expenses"]
    assert service.grid("Expenses") == before
    # The rolled back id is free again.
    reply = service.batch_update_spreadsheet({"requests": [{"addSheet": {"properties": {"title": "Notes", "sheetId": 7}}}]})
    assert reply["replies"][0]["addSheet"]["properties"]["sheetId"] == 7


def test_failing_value_write_rolls_back_batch(service):
    body = {"data": [
        {"range": "Expenses!B2", "values": [["Diesel"]]},
        {"range": "Missing!A1", "values": [["x"]]},
    ]}
    assert service.batch_update_data(body) is None
    assert service.grid("Expenses")[1] == ["2024-01-01", "Fuel", 45.1]


def test_duplicate_sheet_and_delete_sheet(service):
    assert service.batch_update_spreadsheet({"requests": [{"addSheet": {"properties": {"title": "EXPENSES"}}}]}) is None
    assert service.batch_update_spreadsheet({"requests": [{"deleteSheet": {"sheetId": 1}}]}) is not None
    assert service.sheet_names == ["Sheet1"]
    assert service.batch_update_spreadsheet({"requests": [{"deleteSheet": {"sheetId": 1}}]}) is None


def test_save_and_reload(service, tmp_path):
    path = service.save(tmp_path / "out" / "book.xlsx")
    reloaded = WorkbookSheetService.from_file(path)

    assert reloaded.title == "book"
    assert reloaded.sheet_names == ["Sheet1", "Expenses"]
    assert reloaded.grid("Expenses") == service.grid("Expenses")
    assert reloaded.grid("Sheet1") == []
