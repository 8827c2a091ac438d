from __future__ import annotations

import pytest

from sheetmap.domains.gig import (
    GIG_DOMAIN,
    Weekly,
    daily_sheet,
    monthly_sheet,
    names_sheet,
    regions_sheet,
    shifts_sheet,
    trips_sheet,
    weekdays_sheet,
    weekly_sheet,
    yearly_sheet,
)
from sheetmap.domains.registry import DOMAINS, get_domain
from sheetmap.domains.stock import STOCK_DOMAIN, accounts_sheet, stocks_sheet, tickers_sheet
from sheetmap.core.row_mapper import map_from_range_data
from sheetmap.requests.formulas import (
    array_formula,
    count_if,
    google_finance,
    rolling_average,
    sort_unique_combined,
    split_by_index,
    sum_if,
)


def test_registry_lookup_is_case_insensitive():
    assert get_domain(" GIG ") is GIG_DOMAIN
    assert get_domain("stock") is STOCK_DOMAIN
    assert set(DOMAINS) == {"gig", "stock"}
    with pytest.raises(ValueError, match="unknown domain: crypto"):
        get_domain("crypto")


def test_domain_sheet_order():
    assert GIG_DOMAIN.sheet_names() == [
        "Trips", "Shifts", "Expenses", "Addresses", "Names", "Places", "Regions", "Services", "Types",
        "Daily", "Weekdays", "Weekly", "Monthly", "Yearly",
    ]
    assert STOCK_DOMAIN.sheet_names() == ["Accounts", "Stocks", "Tickers"]


def test_resolve_splits_known_and_unknown():
    known, unknown = GIG_DOMAIN.resolve(["trips", "Bogus", "TRIPS", "Shifts"])
    assert [d.name for d in known] == ["Trips", "Shifts"]
    assert unknown == ["Bogus"]

    everything, none = GIG_DOMAIN.resolve(None)
    assert len(everything) == 14 and none == []


def test_builders_return_fresh_models():
    first, second = trips_sheet(), trips_sheet()
    first.id = 99
    first.headers[0].name = "Changed"
    assert second.id == 0
    assert second.headers[0].name == "Date"


def test_trip_layout_and_formulas():
    sheet = trips_sheet()
    assert len(sheet.headers) == 30
    assert sheet.get_column("Key") == "Y"
    assert sheet.get_column("Amt/Dist") == "AD"
    assert [h.name for h in sheet.headers if h.formula] == [
        "Total", "Key", "Day", "Month", "Year", "Amt/Time", "Amt/Dist",
    ]
    assert sheet.get_header("Total").formula == (
        '=ARRAYFORMULA(IFS(ROW(A1:A)=1,"Total",ISBLANK(A1:A), "",true,J1:J+K1:K+L1:L))'
    )
    assert all(h.protect for h in sheet.headers if h.formula)


def test_shift_totals_add_linked_trips():
    sheet = shifts_sheet()
    assert sheet.get_column("Key") == "S"
    assert sheet.get_header("T Pay").formula == array_formula(
        "T Pay", "A1:A", "J1:J+SUMIF(Trips!Y1:Y,S1:S,Trips!J1:J)"
    )
    assert sheet.get_header("T Trips").formula == array_formula("T Trips", "A1:A", "I1:I+COUNTIF(Trips!Y1:Y,S1:S)")


def test_lookup_sheets_are_protected_and_formula_driven():
    names = names_sheet()
    assert names.protect_sheet is True
    assert all(h.formula for h in names.headers)
    assert names.get_header("Trips").formula == count_if("Trips", "A1:A", "Trips!R1:R", "A1:A")

    regions = regions_sheet()
    assert regions.get_header("Region").formula == sort_unique_combined("Region", "Trips!W2:W", "Shifts!Q2:Q")
    assert regions.get_header("Pay").formula == sum_if("Pay", "A1:A", "Shifts!Q1:Q", "A1:A", "Shifts!W1:W")


def test_stock_sheets():
    stocks = stocks_sheet()
    assert stocks.header_names()[:4] == ["Account", "Ticker", "Name", "Shares"]
    assert stocks.protect_sheet is False
    assert stocks.get_header("Current Price").formula == sum_if(
        "Current Price", "A1:A", "Tickers!A1:A", "B1:B", "Tickers!G1:G"
    )
    assert not stocks.get_header("Shares").formula

    tickers = tickers_sheet()
    assert tickers.protect_sheet is True
    assert tickers.get_header("Name").formula == google_finance("Name", "A:A", "ticker", "name")
    assert tickers.get_header("Ticker").formula == '={"Ticker";SORT(UNIQUE({Stocks!B2:B}))}'

    accounts = accounts_sheet()
    assert accounts.header_names()[:3] == ["Account", "Stocks", "Shares"]
    assert accounts.get_header("Stocks").formula == count_if("Stocks", "A1:A", "Stocks!A1:A", "A1:A")


@pytest.mark.parametrize("builder", [daily_sheet, weekdays_sheet, weekly_sheet, monthly_sheet, yearly_sheet])
def test_period_sheets_are_protected_and_formula_driven(builder):
    sheet = builder()
    assert sheet.protect_sheet is True
    assert sheet.freeze_column_count == 1 and sheet.freeze_row_count == 1
    assert [h.name for h in sheet.headers if not h.formula] == []


def test_daily_rolls_up_shift_totals():
    daily = daily_sheet()
    assert daily.header_names()[:6] == ["Date", "Trips", "Pay", "Tips", "Bonus", "Total"]
    assert daily.get_header("Date").formula == sort_unique_combined("Date", "Shifts!A2:A")
    assert daily.get_header("Trips").formula == sum_if("Trips", "A1:A", "Shifts!A1:A", "A1:A", "Shifts!V1:V")
    assert daily.get_header("Pay").formula == sum_if("Pay", "A1:A", "Shifts!A1:A", "A1:A", "Shifts!W1:W")
    assert daily.get_header("Time").formula == sum_if("Time", "A1:A", "Shifts!A1:A", "A1:A", "Shifts!U1:U")
    assert daily.get_header("Week").formula == array_formula("Week", "A1:A", 'WEEKNUM(A1:A,2)&"-"&YEAR(A1:A)')
    assert daily.get_header("Month").formula == array_formula("Month", "A1:A", 'MONTH(A1:A)&"-"&YEAR(A1:A)')


def test_weekdays_count_days_and_look_up_current_week():
    weekdays = weekdays_sheet()
    assert weekdays.get_header("Day").formula == sort_unique_combined("Day", "Daily!M2:M")
    assert weekdays.get_header("Days").formula == count_if("Days", "A1:A", "Daily!M1:M", "A1:A")
    assert weekdays.get_header("Curr Amt").formula == array_formula(
        "Curr Amt", "A1:A", "IFERROR(VLOOKUP(TODAY()-WEEKDAY(TODAY(),2)+A1:A,Daily!A:F,6,false),0)"
    )
    assert weekdays.get_header("Prev Amt").formula == array_formula(
        "Prev Amt", "A1:A", "IFERROR(VLOOKUP(TODAY()-WEEKDAY(TODAY(),2)+A1:A-7,Daily!A:F,6,false),0)"
    )
    assert weekdays.get_header("Amt/Prev Day").formula == array_formula(
        "Amt/Prev Day", "A1:A", "(H1:H-Q1:Q)/IF(D1:D=0,1,D1:D-IF(Q1:Q=0,0,-1))"
    )


def test_weekly_splits_its_key_and_derives_dates():
    weekly = weekly_sheet()
    assert weekly.get_header("Week").formula == sort_unique_combined("Week", "Daily!O2:O")
    assert weekly.get_header("Trips").formula == sum_if("Trips", "A1:A", "Daily!O1:O", "A1:A", "Daily!B1:B")
    assert weekly.get_header("Average").formula == rolling_average("Average", "A1:A", "G1:G")
    assert weekly.get_header("#").formula == split_by_index("#", "A1:A", "A1:A", "-", 1)
    assert weekly.get_header("Begin").formula == array_formula(
        "Begin", "A1:A", "DATE(Q1:Q,1,1)+((P1:P-1)*7)-WEEKDAY(DATE(Q1:Q,1,1),3)"
    )
    assert weekly.get_header("End").formula == array_formula(
        "End", "A1:A", "DATE(Q1:Q,1,7)+((P1:P-1)*7)-WEEKDAY(DATE(Q1:Q,1,1),3)"
    )


def test_yearly_sums_monthly_days():
    monthly, yearly = monthly_sheet(), yearly_sheet()
    assert monthly.get_header("Year").formula == split_by_index("Year", "A1:A", "A1:A", "-", 2)
    assert yearly.get_header("Year").formula == sort_unique_combined("Year", "Monthly!Q2:Q")
    assert yearly.get_header("Days").formula == sum_if("Days", "A1:A", "Monthly!Q1:Q", "A1:A", "Monthly!C1:C")


def test_period_rows_map_to_entities():
    grid = [
        weekly_sheet().header_names(),
        ["1-2024", 12, 3, "$100.00", "$20.00", "", "$120.00", "", "$10.00", 40.5, "$2.96", "5:30:00", "$21.82",
         "$40.00", "$120.00", 1, 2024, "2024-01-01", "2024-01-07"],
    ]
    week = map_from_range_data(grid, Weekly)[0]
    assert (week.row_id, week.week, week.trips, week.days) == (2, "1-2024", 12, 3)
    assert week.total == 120.0
    assert week.bonus is None
    assert week.time == "5:30:00"
    assert (week.number, week.year, week.begin, week.end) == (1, 2024, "2024-01-01", "2024-01-07")
