from __future__ import annotations

"""Formula text builders for computed header cells.

Output columns carry a single array formula in their header cell: row 1 shows
the header label, blank key rows stay blank and every other row evaluates the
inner formula.
"""

__all__ = [
    "array_formula",
    "count_if",
    "date_part",
    "divide_ranges",
    "google_finance",
    "google_finance_max",
    "google_finance_min",
    "joined_key",
    "map_lambda",
    "multiply_ranges",
    "rolling_average",
    "safe_divide",
    "sort_unique",
    "split_by_index",
    "sort_unique_combined",
    "subtract_ranges",
    "sum_if",
    "sum_if_blank",
    "sum_if_divide",
    "sum_ranges",
]


def array_formula(header: str, key_range: str, formula: str) -> str:
    return f'=ARRAYFORMULA(IFS(ROW({key_range})=1,"{header}",ISBLANK({key_range}), "",true,{formula}))'


def count_if(header: str, key_range: str, lookup_range: str, criterion: str) -> str:
    return array_formula(header, key_range, f"COUNTIF({lookup_range},{criterion})")


def sum_if(header: str, key_range: str, lookup_range: str, criterion: str, sum_range: str) -> str:
    return array_formula(header, key_range, f"SUMIF({lookup_range},{criterion},{sum_range})")


def sum_if_blank(header: str, key_range: str, lookup_range: str, criterion: str, sum_range: str) -> str:
    """Like ``sum_if`` but shows blank instead of 0."""
    total = f"SUMIF({lookup_range},{criterion},{sum_range})"
    return array_formula(header, key_range, f'IF({total}=0,"",{total})')


def sum_ranges(header: str, key_range: str, *ranges: str) -> str:
    return array_formula(header, key_range, "+".join(ranges))


def multiply_ranges(header: str, key_range: str, first: str, second: str) -> str:
    return array_formula(header, key_range, f"{first}*{second}")


def subtract_ranges(header: str, key_range: str, first: str, second: str) -> str:
    return array_formula(header, key_range, f"{first}-{second}")


def divide_ranges(header: str, key_range: str, first: str, second: str) -> str:
    return array_formula(header, key_range, f"IFERROR({first}/{second},0)")


def safe_divide(header: str, key_range: str, numerator: str, denominator: str) -> str:
    return array_formula(header, key_range, f"{numerator}/IF({denominator}=0,1,{denominator})")


def date_part(header: str, key_range: str, function: str, date_range: str) -> str:
    """``DAY`` / ``MONTH`` / ``YEAR`` / ``WEEKDAY`` of a date column."""
    return array_formula(header, key_range, f"{function}({date_range})")


def joined_key(header: str, key_range: str, *ranges: str, separator: str = "-") -> str:
    joined = f'&"{separator}"&'.join(ranges)
    return array_formula(header, key_range, joined)


def split_by_index(header: str, key_range: str, source_range: str, delimiter: str, index: int) -> str:
    """Part ``index`` (1-based) of a delimited key, 0 when missing."""
    return array_formula(header, key_range, f'IFERROR(INDEX(SPLIT({source_range}, "{delimiter}"), 0, {index}), 0)')


def rolling_average(header: str, key_range: str, total_range: str) -> str:
    """Running mean of ``total_range`` over the data rows so far."""
    running = f'SUMIF(ROW({total_range}),"<="&ROW({total_range}),{total_range})'
    return array_formula(header, key_range, f"{running}/(ROW({total_range})-1)")


def sort_unique(header: str, source_range: str) -> str:
    return f'={{"{header}";SORT(UNIQUE({{{source_range}}}))}}'


def sort_unique_combined(header: str, *source_ranges: str) -> str:
    """Sorted unique non-blank values across several columns."""
    stacked = ";".join(source_ranges)
    return f'={{"{header}";SORT(UNIQUE(FILTER({{{stacked}}},{{{stacked}}}<>"")))}}'


def sum_if_divide(
    header: str, key_range: str, lookup_range: str, criterion: str, sum_range: str, divide_range: str
) -> str:
    return array_formula(header, key_range, f"SUMIF({lookup_range},{criterion},{sum_range})/{divide_range}")


def map_lambda(header: str, map_array: str, name: str, formula: str) -> str:
    """Per-cell ``MAP``/``LAMBDA`` formula for functions that do not spill."""
    return f'=MAP({map_array},LAMBDA({name},IF(ROW({name})=1,"{header}",if(isblank({name}),,{formula}))))'


def google_finance(header: str, map_array: str, name: str, attribute: str) -> str:
    return map_lambda(header, map_array, name, f'GOOGLEFINANCE({name},"{attribute}")')


def google_finance_max(header: str, map_array: str, name: str, attribute: str) -> str:
    history = f'GOOGLEFINANCE({name}, "{attribute}", DATE(1980,1,2), TODAY(), "DAILY")'
    return map_lambda(header, map_array, name, f"MAX(INDEX({history},,2))")


def google_finance_min(header: str, map_array: str, name: str, attribute: str) -> str:
    history = f'GOOGLEFINANCE({name}, "{attribute}", DATE(1980,1,2), TODAY(), "DAILY")'
    return map_lambda(header, map_array, name, f"MIN(INDEX({history},,2))")
