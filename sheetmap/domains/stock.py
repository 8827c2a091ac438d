from __future__ import annotations

from dataclasses import dataclass

from ..core.schema import ColumnSchemaEntry, column, sheet_columns
from ..models.entities import RowEntity
from ..models.enums import ColorType, FieldType, FormatType
from ..models.sheet_model import SheetModel
from ..requests.formulas import (
    count_if,
    divide_ranges,
    google_finance,
    google_finance_max,
    google_finance_min,
    multiply_ranges,
    sort_unique,
    subtract_ranges,
    sum_if,
    sum_if_blank,
    sum_if_divide,
)
from ..requests.styles import KEY_RANGE
from .base import DomainDefinition, SheetDefinition, apply_formulas, new_sheet

"""Stock portfolio domain: holdings per account, aggregated per account and ticker.

Stocks is the only input sheet. Tickers pulls live prices with GOOGLEFINANCE
and Accounts rolls the holdings up per account; both are protected. The cost
and price column groups are shared between sheets.
"""

__all__ = [
    "Account",
    "STOCK_DOMAIN",
    "Stock",
    "Ticker",
    "accounts_sheet",
    "stocks_sheet",
    "tickers_sheet",
]

AVERAGE_COST_NOTE = (
    "The average cost of the share is calculated based on all previous purchases and will change if you buy "
    "or sell additional shares"
)

# GOOGLEFINANCE attribute names
PRICE = "price"
HIGH = "high"
LOW = "low"
NAME = "name"
PE_RATIO = "pe"
WEEK_HIGH_52 = "high52"
WEEK_LOW_52 = "low52"


def _amount(field: str, header: str, is_input: bool = False, note: str = "", json_name: str = "") -> ColumnSchemaEntry:
    return column(
        field, header, FieldType.CURRENCY, is_input=is_input, format=FormatType.ACCOUNTING, note=note, json_name=json_name
    )


def _cost_columns(is_input: bool = False) -> list[ColumnSchemaEntry]:
    return [
        column("shares", "Shares", FieldType.NUMBER, is_input=is_input, format=FormatType.ACCOUNTING),
        _amount("average_cost", "Avg Cost", is_input=is_input, note=AVERAGE_COST_NOTE),
        _amount("cost_total", "Cost Total"),
        _amount("current_price", "Current Price"),
        _amount("current_total", "Current Total"),
        _amount("return_amount", "Return", json_name="return"),
    ]


_PRICE_COLUMNS = [
    _amount("pe_ratio", "P/E Ratio"),
    _amount("week_high_52", "52 Wk High", json_name="52WeekHigh"),
    _amount("week_low_52", "52 Wk Low", json_name="52WeekLow"),
    _amount("max_high", "Max High"),
    _amount("min_low", "Min Low"),
]


@dataclass
class _Cost(RowEntity):
    shares: float = 0.0
    average_cost: float = 0.0
    cost_total: float = 0.0
    current_price: float = 0.0
    current_total: float = 0.0
    return_amount: float = 0.0


@dataclass
class _Price(_Cost):
    pe_ratio: float = 0.0
    week_high_52: float = 0.0
    week_low_52: float = 0.0
    max_high: float = 0.0
    min_low: float = 0.0


@sheet_columns(
    column("account", "Account"),
    column("stocks", "Stocks", FieldType.INTEGER),
    *_cost_columns(),
)
@dataclass
class Account(_Cost):
    account: str = ""
    stocks: int = 0


@sheet_columns(
    column("account", "Account", is_input=True),
    column("ticker", "Ticker", is_input=True),
    column("name", "Name", is_input=True),
    *_cost_columns(is_input=True),
    *_PRICE_COLUMNS,
)
@dataclass
class Stock(_Price):
    account: str = ""
    ticker: str = ""
    name: str = ""


@sheet_columns(
    column("ticker", "Ticker"),
    column("name", "Name"),
    column("accounts", "Accts", FieldType.INTEGER),
    *_cost_columns(),
    *_PRICE_COLUMNS,
)
@dataclass
class Ticker(_Price):
    ticker: str = ""
    name: str = ""
    accounts: int = 0


def stocks_sheet() -> SheetModel:
    sheet = new_sheet("Stocks", Stock, ColorType.CYAN, ColorType.LIGHT_CYAN, freeze_columns=2, freeze_rows=1)
    tickers = tickers_sheet()
    local = sheet.get_local_range
    ticker = local("Ticker")
    lookup = tickers.get_range("Ticker")

    formulas = {
        "Cost Total": multiply_ranges("Cost Total", KEY_RANGE, local("Shares"), local("Avg Cost")),
        "Current Total": multiply_ranges("Current Total", KEY_RANGE, local("Shares"), local("Current Price")),
        "Return": subtract_ranges("Return", KEY_RANGE, local("Current Total"), local("Cost Total")),
        "P/E Ratio": sum_if_blank("P/E Ratio", KEY_RANGE, lookup, ticker, tickers.get_range("P/E Ratio")),
    }
    for header in ("Current Price", "52 Wk High", "52 Wk Low", "Max High", "Min Low"):
        formulas[header] = sum_if(header, KEY_RANGE, lookup, ticker, tickers.get_range(header))
    return apply_formulas(sheet, formulas)


def tickers_sheet() -> SheetModel:
    sheet = new_sheet("Tickers", Ticker, ColorType.ORANGE, ColorType.LIGHT_YELLOW, protect=True, freeze_columns=1, freeze_rows=1)
    # Header layout only; stocks_sheet() itself builds a Tickers sheet.
    stocks = new_sheet("Stocks", Stock, ColorType.CYAN, ColorType.LIGHT_CYAN)
    local = sheet.get_local_range
    ticker_column = sheet.get_column("Ticker")
    lookup = stocks.get_range("Ticker")

    formulas = {
        "Ticker": sort_unique("Ticker", stocks.get_range("Ticker", 2)),
        "Name": google_finance("Name", f"{ticker_column}:{ticker_column}", "ticker", NAME),
        "Accts": count_if("Accts", KEY_RANGE, lookup, KEY_RANGE),
        "Avg Cost": divide_ranges("Avg Cost", KEY_RANGE, local("Cost Total"), local("Shares")),
        "Return": subtract_ranges("Return", KEY_RANGE, local("Current Total"), local("Cost Total")),
    }
    for header in ("Shares", "Cost Total", "Current Total"):
        formulas[header] = sum_if(header, KEY_RANGE, lookup, KEY_RANGE, stocks.get_range(header))

    ticker_range = f"{ticker_column}:{ticker_column}"
    for header, attribute in (
        ("Current Price", PRICE),
        ("P/E Ratio", PE_RATIO),
        ("52 Wk High", WEEK_HIGH_52),
        ("52 Wk Low", WEEK_LOW_52),
    ):
        formulas[header] = google_finance(header, ticker_range, "ticker", attribute)
    formulas["Max High"] = google_finance_max("Max High", ticker_range, "ticker", HIGH)
    formulas["Min Low"] = google_finance_min("Min Low", ticker_range, "ticker", LOW)
    return apply_formulas(sheet, formulas)


def accounts_sheet() -> SheetModel:
    sheet = new_sheet("Accounts", Account, ColorType.GREEN, ColorType.LIGHT_GREEN, protect=True, freeze_columns=1, freeze_rows=1)
    stocks = stocks_sheet()
    local = sheet.get_local_range
    lookup = stocks.get_range("Account")

    formulas = {
        "Account": sort_unique("Account", stocks.get_range("Account", 2)),
        "Stocks": count_if("Stocks", KEY_RANGE, lookup, KEY_RANGE),
        "Avg Cost": sum_if_divide(
            "Avg Cost", KEY_RANGE, lookup, KEY_RANGE, stocks.get_range("Avg Cost"), local("Stocks")
        ),
        "Return": subtract_ranges("Return", KEY_RANGE, local("Current Total"), local("Cost Total")),
    }
    for header in ("Shares", "Cost Total", "Current Total"):
        formulas[header] = sum_if(header, KEY_RANGE, lookup, KEY_RANGE, stocks.get_range(header))
    return apply_formulas(sheet, formulas)


STOCK_DOMAIN = DomainDefinition(
    name="stock",
    sheets=(
        SheetDefinition("Accounts", accounts_sheet, Account, "accounts"),
        SheetDefinition("Stocks", stocks_sheet, Stock, "stocks"),
        SheetDefinition("Tickers", tickers_sheet, Ticker, "tickers"),
    ),
)
