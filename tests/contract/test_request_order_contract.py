from __future__ import annotations

from itertools import count

import pytest

from sheetmap.domains.gig import GIG_DOMAIN
from sheetmap.domains.stock import STOCK_DOMAIN
from sheetmap.requests.generator import generate_sheets_request

"""Structural request ordering contract for every declared sheet."""

_SHEET_ORDER = ["addSheet", "appendDimension", "appendCells", "addProtectedRange", "addBanding", "addProtectedRange"]


def _kinds(requests):
    return [next(iter(r)) for r in requests]


@pytest.mark.parametrize(
    "definition",
    [*GIG_DOMAIN.sheets, *STOCK_DOMAIN.sheets],
    ids=lambda d: d.name,
)
def test_sheet_requests_follow_fixed_order(definition):
    counter = count(1000)
    sheet = definition.build()
    kinds = _kinds(generate_sheets_request([sheet], id_factory=lambda: next(counter))["requests"])

    body = [k for k in kinds if k != "repeatCell"]
    # Collapse consecutive duplicates to compare with the fixed phase order.
    phases = [k for i, k in enumerate(body) if i == 0 or k != body[i - 1]]
    expected = [k for k in _SHEET_ORDER if k != "appendDimension" or len(sheet.headers) > 26]
    if sheet.protect_sheet or not any(h.formula for h in sheet.headers):
        expected.remove("addProtectedRange")
    assert phases == expected

    first_repeat = kinds.index("repeatCell") if "repeatCell" in kinds else len(kinds)
    assert all(k == "repeatCell" for k in kinds[first_repeat:])


@pytest.mark.parametrize("domain", [GIG_DOMAIN, STOCK_DOMAIN], ids=lambda d: d.name)
def test_every_request_references_a_generated_sheet(domain):
    counter = count(1)
    sheets = [d.build() for d in domain.sheets]
    requests = generate_sheets_request(sheets, id_factory=lambda: next(counter))["requests"]

    ids = {s.id for s in sheets}
    assert len(ids) == len(sheets)
    for request in requests:
        payload = next(iter(request.values()))
        target = (
            payload.get("properties", {}).get("sheetId")
            or payload.get("sheetId")
            or payload.get("range", {}).get("sheetId")
            or payload.get("protectedRange", {}).get("range", {}).get("sheetId")
            or payload.get("bandedRange", {}).get("range", {}).get("sheetId")
        )
        assert target in ids
