from __future__ import annotations

from pathlib import Path

from sheetmap.domains.gig import GIG_DOMAIN
from sheetmap.domains.stock import STOCK_DOMAIN, stocks_sheet
from sheetmap.services.manager import SheetManager
from sheetmap.services.workbook_service import WorkbookSheetService
from sheetmap.workbook.reader import write_workbook

"""Workbook file -> service -> manager -> entities."""


def test_read_trips_from_xlsx(tmp_path: Path, trip_header, trip_rows):
    path = write_workbook({"Trips": [trip_header, *trip_rows]}, tmp_path / "gig.xlsx")
    manager = SheetManager(WorkbookSheetService.from_file(path), GIG_DOMAIN)

    data = manager.get_sheets(["Trips"])

    assert not data.has_errors
    assert data.name == "gig"
    trips = data.entities["trips"]
    assert [(t.row_id, t.date, t.service) for t in trips] == [(2, "2024-01-15", "Uber"), (3, "2024-01-16", "DoorDash")]
    assert trips[0].pay == 12.5
    assert trips[0].distance == 4.2
    assert trips[1].pay == 8.0
    assert trips[1].duration == "0:25:00"


def test_create_save_reload_and_change(tmp_path: Path):
    path = tmp_path / "stock.xlsx"
    service = WorkbookSheetService({"Sheet1": []}, title="stock")
    manager = SheetManager(service, STOCK_DOMAIN)
    assert not manager.create_sheets().has_errors
    service.save(path)

    reloaded = WorkbookSheetService.from_file(path)
    assert reloaded.sheet_names == ["Accounts", "Stocks", "Tickers", "Sheet1"]
    assert reloaded.grid("Stocks") == [stocks_sheet().header_names()]

    manager = SheetManager(reloaded, STOCK_DOMAIN)
    assert [m.message for m in manager.check_sheets(check_headers=True)] == [
        "All sheets found",
        "No sheet header issues found",
    ]

    data = manager.get_sheets(["Stocks"])
    assert data.entities["stocks"] == []

    Stock = STOCK_DOMAIN.get("Stocks").entity_cls
    data.entities["stocks"] = [
        Stock(account="Brokerage", ticker="ACME", shares=10, average_cost=12.5, action="INSERT"),
        Stock(account="IRA", ticker="INIT", shares=3, average_cost=40.0, action="INSERT"),
    ]
    manager.change_sheet_data(["Stocks"], data)
    reloaded.save(path)

    stocks = SheetManager(WorkbookSheetService.from_file(path), STOCK_DOMAIN).get_sheets(["Stocks"]).entities["stocks"]
    assert [(s.row_id, s.account, s.ticker, s.shares, s.average_cost) for s in stocks] == [
        (2, "Brokerage", "ACME", 10.0, 12.5),
        (3, "IRA", "INIT", 3.0, 40.0),
    ]
    # Formula columns have no engine behind them and stay blank.
    assert stocks[0].cost_total == 0.0
