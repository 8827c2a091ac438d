from __future__ import annotations

from pathlib import Path

from sheetmap.cli.__main__ import main as cli_main
from sheetmap.domains.gig import trips_sheet
from sheetmap.workbook.reader import write_workbook

"""Exit code contract: 0 success, 1 fatal, 2 finished with errors."""


def test_exit_code_fatal_startup(temp_workdir: Path, capsys):
    # no config/sheetmap.yml -> exit 1
    code = cli_main(["check"])
    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR config:" in captured.out


def test_exit_code_invalid_config(write_config: Path, capsys):
    write_config.write_text("domain: gig\nunknown: 1\n", encoding="utf-8")
    assert cli_main(["check"]) == 1
    assert "config validation failed" in capsys.readouterr().out


def test_exit_code_missing_workbook(write_config: Path, capsys):
    code = cli_main(["check"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR workbook not found: ./data/gig.xlsx" in out
    assert "SUMMARY" not in out


def test_exit_code_all_success(write_config: Path, capsys):
    assert cli_main(["create"]) == 0
    capsys.readouterr()

    code = cli_main(["check"])
    out = capsys.readouterr().out
    assert code == 0
    assert code != 2  # no exit code 2 on pure success
    assert "SUMMARY sheets=14 info=2 warnings=0 errors=0" in out


def test_exit_code_missing_sheets(write_config: Path, temp_workdir: Path, capsys):
    write_workbook({"Trips": [trips_sheet().header_names()]}, temp_workdir / "data" / "gig.xlsx")

    code = cli_main(["check"])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR [Missing Sheets] Unable to find sheet SHIFTS" in out
    assert "errors=13" in out


def test_exit_code_create_existing_sheets(write_config: Path, capsys):
    assert cli_main(["create"]) == 0
    capsys.readouterr()
    assert cli_main(["create"]) == 2
    assert "ERROR [Create Sheet] TRIPS not created" in capsys.readouterr().out
