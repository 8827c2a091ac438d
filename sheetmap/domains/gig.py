from __future__ import annotations

from dataclasses import dataclass

from ..core.schema import ColumnSchemaEntry, column, sheet_columns
from ..models.entities import RowEntity
from ..models.enums import ColorType, FieldType, FormatType, ValidationType
from ..models.sheet_model import SheetModel
from ..requests.formulas import (
    array_formula,
    count_if,
    date_part,
    rolling_average,
    safe_divide,
    sort_unique_combined,
    split_by_index,
    sum_if,
    sum_ranges,
)
from .base import DomainDefinition, SheetDefinition, apply_formulas, new_sheet

"""Gig work domain: trips, shifts, expenses and the sheets built from them.

Trips and Shifts are the input sheets. A trip is linked to its shift through the
Key column (``date-number-service``), which lets the shift totals sum the trips
of that shift. The lookup sheets (Addresses, Names, Places, Regions, Services,
Types) are fully formula driven and protected; they also feed the dropdown
validations of the input sheets.

The period sheets roll the shift totals up by day (Daily), then by weekday,
week and month from Daily, and by year from Monthly. They are protected too.
"""

__all__ = [
    "Address",
    "Daily",
    "Expense",
    "GIG_DOMAIN",
    "Monthly",
    "Name",
    "Place",
    "Region",
    "Service",
    "Shift",
    "Trip",
    "Type",
    "Weekday",
    "Weekly",
    "Yearly",
    "addresses_sheet",
    "daily_sheet",
    "expenses_sheet",
    "monthly_sheet",
    "names_sheet",
    "places_sheet",
    "regions_sheet",
    "services_sheet",
    "shifts_sheet",
    "trips_sheet",
    "types_sheet",
    "weekdays_sheet",
    "weekly_sheet",
    "yearly_sheet",
]

NL = "\n"

DATE_NOTE = "Format: YYYY-MM-DD"
ACTIVE_TIME_NOTE = f"Time with a delivery.{NL}{NL}Can be filled out on requests sheet if you have that info."
SHIFT_DISTANCE_NOTE = "Distance not accounted for on the Requests/Trips sheet."
SHIFT_KEY_NOTE = "Used to connect requests to Requests/Trips sheet."
SHIFT_NUMBER_NOTE = f"Format: HH:MM{NL}{NL}Leave blank if there is only one shift for that service for that day."
SHIFT_TRIPS_NOTE = (
    f"Requests/Deliveries/Trips{NL}{NL}Use this column if you don't track requests or need to increase the number."
)
TIME_OMIT_NOTE = (
    "Omit time from non service specific totals. Mainly useful if you multi app so you can get a more "
    f"accurate $/hour calculation.{NL}{NL}Active time is still counted for the day from omitted shifts."
)
TOTAL_TIME_NOTE = "Total time"
TOTAL_TIME_ACTIVE_NOTE = "Total Active time from Requests and Shifts sheets."
TOTAL_TRIPS_NOTE = "Number of requests during a shift."


def _money(field: str, header: str, is_input: bool = False) -> ColumnSchemaEntry:
    return column(field, header, FieldType.CURRENCY, is_input=is_input, nullable=True, format=FormatType.ACCOUNTING)


def _distance(field: str, header: str, is_input: bool = False, note: str = "") -> ColumnSchemaEntry:
    return column(field, header, FieldType.NUMBER, is_input=is_input, nullable=True, format=FormatType.DISTANCE, note=note)


@sheet_columns(
    column("date", "Date", FieldType.DATE_TIME, is_input=True, format=FormatType.DATE, note=DATE_NOTE),
    column("service", "Service", is_input=True, validation=ValidationType.RANGE_SERVICE),
    column("number", "#", FieldType.INTEGER, is_input=True, nullable=True),
    column("exclude", "X", FieldType.BOOLEAN, is_input=True, validation=ValidationType.BOOLEAN),
    column("type", "Type", is_input=True, validation=ValidationType.RANGE_TYPE),
    column("place", "Place", is_input=True, validation=ValidationType.RANGE_PLACE),
    column("pickup_time", "Pickup", FieldType.TIME, is_input=True, format=FormatType.TIME),
    column("dropoff_time", "Dropoff", FieldType.TIME, is_input=True, format=FormatType.TIME),
    column("duration", "Duration", FieldType.DURATION, is_input=True, format=FormatType.DURATION),
    _money("pay", "Pay", is_input=True),
    _money("tips", "Tips", is_input=True),
    _money("bonus", "Bonus", is_input=True),
    _money("total", "Total"),
    _money("cash", "Cash", is_input=True),
    _distance("start_odometer", "Odo Start", is_input=True),
    _distance("end_odometer", "Odo End", is_input=True),
    _distance("distance", "Dist", is_input=True),
    column("name", "Name", is_input=True, validation=ValidationType.RANGE_NAME),
    column("start_address", "Start Address", is_input=True, validation=ValidationType.RANGE_ADDRESS),
    column("end_address", "End Address", is_input=True, validation=ValidationType.RANGE_ADDRESS),
    column("end_unit", "End Unit", is_input=True),
    column("order_number", "Order #", is_input=True),
    column("region", "Region", is_input=True, validation=ValidationType.RANGE_REGION),
    column("note", "Note", is_input=True),
    column("key", "Key"),
    column("day", "Day", FieldType.INTEGER),
    column("month", "Month", FieldType.INTEGER),
    column("year", "Year", FieldType.INTEGER),
    _money("amount_per_time", "Amt/Time"),
    _money("amount_per_distance", "Amt/Dist"),
)
@dataclass
class Trip(RowEntity):
    date: str = ""
    service: str = ""
    number: int | None = None
    exclude: bool = False
    type: str = ""
    place: str = ""
    pickup_time: str = ""
    dropoff_time: str = ""
    duration: str = ""
    pay: float | None = None
    tips: float | None = None
    bonus: float | None = None
    total: float | None = None
    cash: float | None = None
    start_odometer: float | None = None
    end_odometer: float | None = None
    distance: float | None = None
    name: str = ""
    start_address: str = ""
    end_address: str = ""
    end_unit: str = ""
    order_number: str = ""
    region: str = ""
    note: str = ""
    key: str = ""
    day: int = 0
    month: int = 0
    year: int = 0
    amount_per_time: float | None = None
    amount_per_distance: float | None = None


@sheet_columns(
    column("date", "Date", FieldType.DATE_TIME, is_input=True, format=FormatType.DATE, note=DATE_NOTE),
    column("start_time", "Start", FieldType.TIME, is_input=True, format=FormatType.TIME),
    column("finish_time", "Finish", FieldType.TIME, is_input=True, format=FormatType.TIME),
    column("service", "Service", is_input=True, validation=ValidationType.RANGE_SERVICE),
    column("number", "#", FieldType.INTEGER, is_input=True, nullable=True, note=SHIFT_NUMBER_NOTE),
    column("active", "Active", FieldType.DURATION, is_input=True, format=FormatType.DURATION, note=ACTIVE_TIME_NOTE),
    column("time", "Time", FieldType.DURATION, is_input=True, format=FormatType.DURATION, note=TOTAL_TIME_NOTE),
    column("omit", "O", FieldType.BOOLEAN, is_input=True, validation=ValidationType.BOOLEAN, note=TIME_OMIT_NOTE),
    column("trips", "Trips", FieldType.INTEGER, is_input=True, note=SHIFT_TRIPS_NOTE),
    _money("pay", "Pay", is_input=True),
    _money("tips", "Tips", is_input=True),
    _money("bonus", "Bonus", is_input=True),
    _money("cash", "Cash", is_input=True),
    _distance("start_odometer", "Odo Start", is_input=True),
    _distance("end_odometer", "Odo End", is_input=True),
    _distance("distance", "Dist", is_input=True, note=SHIFT_DISTANCE_NOTE),
    column("region", "Region", is_input=True, validation=ValidationType.RANGE_REGION),
    column("note", "Note", is_input=True),
    column("key", "Key", note=SHIFT_KEY_NOTE),
    column("total_active", "T Active", FieldType.DURATION, format=FormatType.DURATION, note=TOTAL_TIME_ACTIVE_NOTE),
    column("total_time", "T Time", FieldType.DURATION, format=FormatType.DURATION),
    column("total_trips", "T Trips", FieldType.INTEGER, note=TOTAL_TRIPS_NOTE),
    _money("total_pay", "T Pay"),
    _money("total_tips", "T Tips"),
    _money("total_bonus", "T Bonus"),
    _money("grand_total", "G Total"),
    _money("total_cash", "T Cash"),
    _money("amount_per_trip", "Amt/Trip"),
    _money("amount_per_time", "Amt/Time"),
    _distance("total_distance", "T Dist"),
)
@dataclass
class Shift(RowEntity):
    date: str = ""
    start_time: str = ""
    finish_time: str = ""
    service: str = ""
    number: int | None = None
    active: str = ""
    time: str = ""
    omit: bool = False
    trips: int = 0
    pay: float | None = None
    tips: float | None = None
    bonus: float | None = None
    cash: float | None = None
    start_odometer: float | None = None
    end_odometer: float | None = None
    distance: float | None = None
    region: str = ""
    note: str = ""
    key: str = ""
    total_active: str = ""
    total_time: str = ""
    total_trips: int = 0
    total_pay: float | None = None
    total_tips: float | None = None
    total_bonus: float | None = None
    grand_total: float | None = None
    total_cash: float | None = None
    amount_per_trip: float | None = None
    amount_per_time: float | None = None
    total_distance: float | None = None


@sheet_columns(
    column("date", "Date", FieldType.DATE_TIME, is_input=True, format=FormatType.DATE, note=DATE_NOTE),
    column("name", "Name", is_input=True),
    column("description", "Description", is_input=True),
    column("amount", "Amount", FieldType.CURRENCY, is_input=True, format=FormatType.ACCOUNTING),
    column("category", "Category", is_input=True),
)
@dataclass
class Expense(RowEntity):
    date: str = ""
    name: str = ""
    description: str = ""
    amount: float = 0.0
    category: str = ""


# Totals shared by every lookup sheet, after its key column.
_TOTAL_COLUMNS = (
    column("trips", "Trips", FieldType.INTEGER),
    _money("pay", "Pay"),
    _money("tips", "Tips"),
    _money("bonus", "Bonus"),
    _money("total", "Total"),
    _money("amount_per_trip", "Amt/Trip"),
    _distance("distance", "Dist"),
)


@dataclass
class _TripTotals(RowEntity):
    trips: int = 0
    pay: float | None = None
    tips: float | None = None
    bonus: float | None = None
    total: float | None = None
    amount_per_trip: float | None = None
    distance: float | None = None


@sheet_columns(column("address", "Address"), *_TOTAL_COLUMNS)
@dataclass
class Address(_TripTotals):
    address: str = ""


@sheet_columns(column("name", "Name"), *_TOTAL_COLUMNS)
@dataclass
class Name(_TripTotals):
    name: str = ""


@sheet_columns(column("place", "Place"), *_TOTAL_COLUMNS)
@dataclass
class Place(_TripTotals):
    place: str = ""


@sheet_columns(column("region", "Region"), *_TOTAL_COLUMNS)
@dataclass
class Region(_TripTotals):
    region: str = ""


@sheet_columns(column("service", "Service"), *_TOTAL_COLUMNS)
@dataclass
class Service(_TripTotals):
    service: str = ""


@sheet_columns(column("type", "Type"), *_TOTAL_COLUMNS)
@dataclass
class Type(_TripTotals):
    type: str = ""


# Period sheet columns, in sheet order.
_PERIOD_TRIPS = column("trips", "Trips", FieldType.INTEGER, format=FormatType.NUMBER)
_PERIOD_DAYS = column("days", "Days", FieldType.INTEGER, format=FormatType.NUMBER)
_PERIOD_INCOME = (
    _money("pay", "Pay"),
    _money("tips", "Tips"),
    _money("bonus", "Bonus"),
    _money("total", "Total"),
    _money("cash", "Cash"),
)
_PERIOD_TRAVEL = (
    _money("amount_per_trip", "Amt/Trip"),
    _distance("distance", "Dist"),
    _money("amount_per_distance", "Amt/Dist"),
)
_PERIOD_TIME = (
    column("time", "Time", FieldType.DURATION, format=FormatType.DURATION),
    _money("amount_per_time", "Amt/Time"),
)
_PERIOD_AVERAGES = (
    *_PERIOD_TIME,
    _money("amount_per_day", "Amt/Day"),
    _money("average", "Average"),
)


@dataclass
class _PeriodTotals(RowEntity):
    trips: int = 0
    pay: float | None = None
    tips: float | None = None
    bonus: float | None = None
    total: float | None = None
    cash: float | None = None
    amount_per_trip: float | None = None
    distance: float | None = None
    amount_per_distance: float | None = None
    time: str = ""
    amount_per_time: float | None = None


@dataclass
class _PeriodAverages(_PeriodTotals):
    days: int = 0
    amount_per_day: float | None = None
    average: float | None = None


@sheet_columns(
    column("date", "Date", FieldType.DATE_TIME, format=FormatType.DATE),
    _PERIOD_TRIPS,
    *_PERIOD_INCOME,
    *_PERIOD_TRAVEL,
    *_PERIOD_TIME,
    column("day", "Day", FieldType.INTEGER, format=FormatType.NUMBER),
    column("weekday", "Weekday"),
    column("week", "Week"),
    column("month", "Month"),
)
@dataclass
class Daily(_PeriodTotals):
    date: str = ""
    day: int = 0
    weekday: str = ""
    week: str = ""
    month: str = ""


@sheet_columns(
    column("day", "Day", FieldType.INTEGER, format=FormatType.NUMBER),
    column("weekday", "Weekday"),
    _PERIOD_TRIPS,
    _PERIOD_DAYS,
    *_PERIOD_INCOME,
    *_PERIOD_TRAVEL,
    *_PERIOD_TIME,
    _money("amount_per_day", "Amt/Day"),
    _money("current_amount", "Curr Amt"),
    _money("previous_amount", "Prev Amt"),
    _money("amount_per_previous_day", "Amt/Prev Day"),
)
@dataclass
class Weekday(_PeriodTotals):
    day: int = 0
    weekday: str = ""
    days: int = 0
    amount_per_day: float | None = None
    current_amount: float | None = None
    previous_amount: float | None = None
    amount_per_previous_day: float | None = None


@sheet_columns(
    column("week", "Week"),
    _PERIOD_TRIPS,
    _PERIOD_DAYS,
    *_PERIOD_INCOME,
    *_PERIOD_TRAVEL,
    *_PERIOD_AVERAGES,
    column("number", "#", FieldType.INTEGER),
    column("year", "Year", FieldType.INTEGER),
    column("begin", "Begin", FieldType.DATE_TIME, format=FormatType.DATE),
    column("end", "End", FieldType.DATE_TIME, format=FormatType.DATE),
)
@dataclass
class Weekly(_PeriodAverages):
    week: str = ""
    number: int = 0
    year: int = 0
    begin: str = ""
    end: str = ""


@sheet_columns(
    column("month", "Month"),
    _PERIOD_TRIPS,
    _PERIOD_DAYS,
    *_PERIOD_INCOME,
    *_PERIOD_TRAVEL,
    *_PERIOD_AVERAGES,
    column("number", "#", FieldType.INTEGER),
    column("year", "Year", FieldType.INTEGER),
)
@dataclass
class Monthly(_PeriodAverages):
    month: str = ""
    number: int = 0
    year: int = 0


@sheet_columns(
    column("year", "Year", FieldType.INTEGER),
    _PERIOD_TRIPS,
    _PERIOD_DAYS,
    *_PERIOD_INCOME,
    *_PERIOD_TRAVEL,
    *_PERIOD_AVERAGES,
)
@dataclass
class Yearly(_PeriodAverages):
    year: int = 0


def _key_formula(sheet: SheetModel, key_range: str) -> str:
    date = sheet.get_local_range("Date")
    number = sheet.get_local_range("#")
    service = sheet.get_local_range("Service")
    return array_formula(
        "Key",
        key_range,
        f'IF(ISBLANK({number}),{date}&"-0-"&{service},{date}&"-"&{number}&"-"&{service})',
    )


def _per_hour(header: str, key_range: str, amount: str, hours: str) -> str:
    return array_formula(header, key_range, f"{amount}/IF({hours}=0,1,{hours}*24)")


def trips_sheet() -> SheetModel:
    sheet = new_sheet("Trips", Trip, ColorType.DARK_YELLOW, ColorType.LIGHT_YELLOW, freeze_columns=1, freeze_rows=1)
    key_range = sheet.get_local_range("Date")
    local = sheet.get_local_range
    return apply_formulas(sheet, {
        "Total": sum_ranges("Total", key_range, local("Pay"), local("Tips"), local("Bonus")),
        "Key": _key_formula(sheet, key_range),
        "Day": date_part("Day", key_range, "DAY", key_range),
        "Month": date_part("Month", key_range, "MONTH", key_range),
        "Year": date_part("Year", key_range, "YEAR", key_range),
        "Amt/Time": _per_hour("Amt/Time", key_range, local("Total"), local("Duration")),
        "Amt/Dist": safe_divide("Amt/Dist", key_range, local("Total"), local("Dist")),
    })


def shifts_sheet() -> SheetModel:
    sheet = new_sheet("Shifts", Shift, ColorType.RED, ColorType.LIGHT_RED, freeze_columns=1, freeze_rows=1)
    trips = trips_sheet()
    key_range = sheet.get_local_range("Date")
    local = sheet.get_local_range
    key = local("Key")
    trip_key = trips.get_range("Key")

    def plus_trips(header: str, own: str, trip_header: str) -> str:
        return array_formula(header, key_range, f"{local(own)}+SUMIF({trip_key},{key},{trips.get_range(trip_header)})")

    return apply_formulas(sheet, {
        "Key": _key_formula(sheet, key_range),
        "T Active": array_formula(
            "T Active",
            key_range,
            f'IF(ISBLANK({local("Active")}),SUMIF({trip_key},{key},{trips.get_range("Duration")}),{local("Active")})',
        ),
        "T Time": array_formula(
            "T Time",
            key_range,
            f'IF(ISBLANK({local("Time")}),MOD({local("Finish")}-{local("Start")},1),{local("Time")})',
        ),
        "T Trips": array_formula("T Trips", key_range, f"{local('Trips')}+COUNTIF({trip_key},{key})"),
        "T Pay": plus_trips("T Pay", "Pay", "Pay"),
        "T Tips": plus_trips("T Tips", "Tips", "Tips"),
        "T Bonus": plus_trips("T Bonus", "Bonus", "Bonus"),
        "G Total": sum_ranges("G Total", key_range, local("T Pay"), local("T Tips"), local("T Bonus")),
        "T Cash": plus_trips("T Cash", "Cash", "Cash"),
        "Amt/Trip": safe_divide("Amt/Trip", key_range, local("G Total"), local("T Trips")),
        "Amt/Time": _per_hour("Amt/Time", key_range, local("G Total"), local("T Time")),
        "T Dist": plus_trips("T Dist", "Dist", "Dist"),
    })


def expenses_sheet() -> SheetModel:
    return new_sheet("Expenses", Expense, ColorType.RED, ColorType.LIGHT_RED, freeze_columns=1, freeze_rows=1)


# Lookup totals sourced from Trips vs from Shifts (which already include trips).
_TRIP_SOURCES = {"Pay": "Pay", "Tips": "Tips", "Bonus": "Bonus", "Total": "Total", "Dist": "Dist"}
_SHIFT_SOURCES = {"Pay": "T Pay", "Tips": "T Tips", "Bonus": "T Bonus", "Total": "G Total", "Dist": "T Dist"}


def _lookup_sheet(
    name: str,
    entity_cls: type,
    key_sources: list[str],
    source: SheetModel,
    criterion_header: str,
    sums: dict[str, str],
    trips_header: str = "",
) -> SheetModel:
    """Protected sheet listing unique values of a source column with their totals.

    ``trips_header`` sums a trip count column of ``source``; when empty the
    source rows are counted instead.
    """
    sheet = new_sheet(name, entity_cls, ColorType.CYAN, ColorType.LIGHT_CYAN, protect=True, freeze_columns=1, freeze_rows=1)
    key_header = sheet.headers[0].name
    key_range = sheet.get_local_range(key_header)
    local = sheet.get_local_range
    lookup = source.get_range(criterion_header)

    formulas = {key_header: sort_unique_combined(key_header, *key_sources)}
    if trips_header:
        formulas["Trips"] = sum_if("Trips", key_range, lookup, key_range, source.get_range(trips_header))
    else:
        formulas["Trips"] = count_if("Trips", key_range, lookup, key_range)
    for header, source_header in sums.items():
        formulas[header] = sum_if(header, key_range, lookup, key_range, source.get_range(source_header))
    formulas["Amt/Trip"] = safe_divide("Amt/Trip", key_range, local("Total"), local("Trips"))
    return apply_formulas(sheet, formulas)


def addresses_sheet() -> SheetModel:
    trips = trips_sheet()
    sources = [trips.get_range("Start Address", 2), trips.get_range("End Address", 2)]
    return _lookup_sheet("Addresses", Address, sources, trips, "End Address", _TRIP_SOURCES)


def names_sheet() -> SheetModel:
    trips = trips_sheet()
    return _lookup_sheet("Names", Name, [trips.get_range("Name", 2)], trips, "Name", _TRIP_SOURCES)


def places_sheet() -> SheetModel:
    trips = trips_sheet()
    return _lookup_sheet("Places", Place, [trips.get_range("Place", 2)], trips, "Place", _TRIP_SOURCES)


def regions_sheet() -> SheetModel:
    trips, shifts = trips_sheet(), shifts_sheet()
    sources = [trips.get_range("Region", 2), shifts.get_range("Region", 2)]
    return _lookup_sheet("Regions", Region, sources, shifts, "Region", _SHIFT_SOURCES, trips_header="T Trips")


def services_sheet() -> SheetModel:
    trips, shifts = trips_sheet(), shifts_sheet()
    sources = [trips.get_range("Service", 2), shifts.get_range("Service", 2)]
    return _lookup_sheet("Services", Service, sources, shifts, "Service", _SHIFT_SOURCES, trips_header="T Trips")


def types_sheet() -> SheetModel:
    trips = trips_sheet()
    return _lookup_sheet("Types", Type, [trips.get_range("Type", 2)], trips, "Type", _TRIP_SOURCES)


# Period totals sourced from Shifts (Daily) vs from another period sheet.
_SHIFT_PERIOD_SOURCES = {
    "Trips": "T Trips",
    "Pay": "T Pay",
    "Tips": "T Tips",
    "Bonus": "T Bonus",
    "Cash": "T Cash",
    "Dist": "T Dist",
    "Time": "T Time",
}
_PERIOD_SOURCES = {header: header for header in ("Trips", "Pay", "Tips", "Bonus", "Cash", "Dist", "Time")}


def _period_sheet(name: str, entity_cls: type, source: SheetModel, source_key: str, sums: dict[str, str]) -> SheetModel:
    """Protected sheet totalling ``source`` rows per unique ``source_key`` value.

    The first column lists the unique keys. ``Days`` counts the matching source
    rows; ratio and average columns are derived from the local totals.
    """
    sheet = new_sheet(name, entity_cls, ColorType.LIGHT_GREEN, ColorType.LIGHT_GRAY, protect=True, freeze_columns=1, freeze_rows=1)
    key_header = sheet.headers[0].name
    key_range = sheet.get_local_range(key_header)
    local = sheet.get_local_range
    lookup = source.get_range(source_key)

    formulas = {key_header: sort_unique_combined(key_header, source.get_range(source_key, 2))}
    for header, source_header in sums.items():
        formulas[header] = sum_if(header, key_range, lookup, key_range, source.get_range(source_header))
    formulas["Total"] = sum_ranges("Total", key_range, local("Pay"), local("Tips"), local("Bonus"))
    formulas["Amt/Trip"] = safe_divide("Amt/Trip", key_range, local("Total"), local("Trips"))
    formulas["Amt/Dist"] = safe_divide("Amt/Dist", key_range, local("Total"), local("Dist"))
    formulas["Amt/Time"] = _per_hour("Amt/Time", key_range, local("Total"), local("Time"))
    if sheet.get_header("Days") is not None:
        formulas["Days"] = count_if("Days", key_range, lookup, key_range)
        formulas["Amt/Day"] = safe_divide("Amt/Day", key_range, local("Total"), local("Days"))
    if sheet.get_header("Average") is not None:
        formulas["Average"] = rolling_average("Average", key_range, local("Total"))
    return apply_formulas(sheet, formulas)


def _week_start(header: str, key_range: str, year: str, number: str, first_day: int) -> str:
    start = f"DATE({year},1,{first_day})+(({number}-1)*7)-WEEKDAY(DATE({year},1,1),3)"
    return array_formula(header, key_range, start)


def _weekday_amount(header: str, key_range: str, daily: SheetModel, offset: int) -> str:
    """Daily total for this weekday of the current week, shifted ``offset`` days."""
    lookup_range = daily.get_range_between_columns("Date", "Total")
    total_index = daily.get_index("Total") - daily.get_index("Date") + 1
    shift = f"{offset:+d}" if offset else ""
    day = f"TODAY()-WEEKDAY(TODAY(),2)+{key_range}{shift}"
    return array_formula(header, key_range, f"IFERROR(VLOOKUP({day},{lookup_range},{total_index},false),0)")


def daily_sheet() -> SheetModel:
    sheet = _period_sheet("Daily", Daily, shifts_sheet(), "Date", _SHIFT_PERIOD_SOURCES)
    key_range = sheet.get_local_range("Date")
    return apply_formulas(sheet, {
        "Day": array_formula("Day", key_range, f"WEEKDAY({key_range},2)"),
        "Weekday": array_formula("Weekday", key_range, f'TEXT({key_range},"ddd")'),
        "Week": array_formula("Week", key_range, f'WEEKNUM({key_range},2)&"-"&YEAR({key_range})'),
        "Month": array_formula("Month", key_range, f'MONTH({key_range})&"-"&YEAR({key_range})'),
    })


def weekdays_sheet() -> SheetModel:
    daily = daily_sheet()
    sheet = _period_sheet("Weekdays", Weekday, daily, "Day", _PERIOD_SOURCES)
    key_range = sheet.get_local_range("Day")
    local = sheet.get_local_range
    total, previous, days = local("Total"), local("Prev Amt"), local("Days")
    return apply_formulas(sheet, {
        # Day 1 is Monday, and serial 2 is a Monday.
        "Weekday": array_formula("Weekday", key_range, f'TEXT({key_range}+1,"ddd")'),
        "Curr Amt": _weekday_amount("Curr Amt", key_range, daily, 0),
        "Prev Amt": _weekday_amount("Prev Amt", key_range, daily, -7),
        "Amt/Prev Day": array_formula(
            "Amt/Prev Day",
            key_range,
            f"({total}-{previous})/IF({days}=0,1,{days}-IF({previous}=0,0,-1))",
        ),
    })


def weekly_sheet() -> SheetModel:
    sheet = _period_sheet("Weekly", Weekly, daily_sheet(), "Week", _PERIOD_SOURCES)
    key_range = sheet.get_local_range("Week")
    local = sheet.get_local_range
    return apply_formulas(sheet, {
        "#": split_by_index("#", key_range, key_range, "-", 1),
        "Year": split_by_index("Year", key_range, key_range, "-", 2),
        "Begin": _week_start("Begin", key_range, local("Year"), local("#"), 1),
        "End": _week_start("End", key_range, local("Year"), local("#"), 7),
    })


def monthly_sheet() -> SheetModel:
    sheet = _period_sheet("Monthly", Monthly, daily_sheet(), "Month", _PERIOD_SOURCES)
    key_range = sheet.get_local_range("Month")
    return apply_formulas(sheet, {
        "#": split_by_index("#", key_range, key_range, "-", 1),
        "Year": split_by_index("Year", key_range, key_range, "-", 2),
    })


def yearly_sheet() -> SheetModel:
    monthly = monthly_sheet()
    sheet = _period_sheet("Yearly", Yearly, monthly, "Year", _PERIOD_SOURCES)
    key_range = sheet.get_local_range("Year")
    # Months already count their days.
    days = sum_if("Days", key_range, monthly.get_range("Year"), key_range, monthly.get_range("Days"))
    return apply_formulas(sheet, {"Days": days})


GIG_DOMAIN = DomainDefinition(
    name="gig",
    sheets=(
        SheetDefinition("Trips", trips_sheet, Trip, "trips"),
        SheetDefinition("Shifts", shifts_sheet, Shift, "shifts"),
        SheetDefinition("Expenses", expenses_sheet, Expense, "expenses"),
        SheetDefinition("Addresses", addresses_sheet, Address, "addresses"),
        SheetDefinition("Names", names_sheet, Name, "names"),
        SheetDefinition("Places", places_sheet, Place, "places"),
        SheetDefinition("Regions", regions_sheet, Region, "regions"),
        SheetDefinition("Services", services_sheet, Service, "services"),
        SheetDefinition("Types", types_sheet, Type, "types"),
        SheetDefinition("Daily", daily_sheet, Daily, "daily"),
        SheetDefinition("Weekdays", weekdays_sheet, Weekday, "weekdays"),
        SheetDefinition("Weekly", weekly_sheet, Weekly, "weekly"),
        SheetDefinition("Monthly", monthly_sheet, Monthly, "monthly"),
        SheetDefinition("Yearly", yearly_sheet, Yearly, "yearly"),
    ),
)
