# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from sheetmap.domains.gig import trips_sheet
from sheetmap.logging.init import reset_logging
from sheetmap.services.workbook_service import WorkbookSheetService


@pytest.fixture(autouse=True)
def clean_logging():
    # The CLI logger binds sys.stdout at setup; rebind per test for capsys.
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        # setenv first so values loaded from .env during a test are undone too.
        for name in ("SHEETMAP_SPREADSHEET_ID", "SHEETMAP_WORKBOOK"):
            monkeypatch.setenv(name, "")
            monkeypatch.delenv(name)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """domain: gig
spreadsheet_id: 1AbCdEfGhIjKlMnOpQrStUvWxYz0123456789abcdEF
workbook: ./data/gig.xlsx
log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "sheetmap.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def trip_header() -> list[str]:
    return trips_sheet().header_names()


@pytest.fixture()
def trip_rows(trip_header: list[str]) -> list[list[object]]:
    """Two filled trips and one blank-keyed row, aligned to the Trips header."""
    def row(**cells: object) -> list[object]:
        return [cells.get(h, None) for h in trip_header]

    return [
        row(Date="2024-01-15", Service="Uber", **{"#": 1}, Type="Pickup", Pay="$12.50", Tips="3", Bonus="-",
            Dist="4.2", Name="Alex", **{"Key": "2024-01-15-1-Uber"}),
        row(Date="", Service="DoorDash"),
        row(Date="2024-01-16", Service="DoorDash", Pay=8, Tips="", X="TRUE", Duration="0:25:00"),
    ]


@pytest.fixture()
def gig_service(trip_header: list[str], trip_rows: list[list[object]]) -> WorkbookSheetService:
    """In-memory workbook holding Sheet1 and a populated Trips sheet."""
    return WorkbookSheetService(
        {"Sheet1": [], "Trips": [trip_header, *trip_rows]},
        title="Gig Tracker",
        spreadsheet_id="test-sheet",
    )
