from __future__ import annotations

import re
from pathlib import Path

from sheetmap.cli.__main__ import main as cli_main

"""SUMMARY line format contract: the last stdout line of every run."""

SUMMARY_PATTERN = re.compile(r"^SUMMARY\s+sheets=([0-9]+)\s+info=([0-9]+)\s+warnings=([0-9]+)\s+errors=([0-9]+)$")


def test_summary_pattern_example_line():
    m = SUMMARY_PATTERN.match("SUMMARY sheets=9 info=2 warnings=0 errors=0")
    assert m, "SUMMARY line should match contract regex"
    assert m.group(1) == "9"


def test_summary_is_last_line_of_layout(write_config: Path, capsys):
    assert cli_main(["layout"]) == 0
    last = capsys.readouterr().out.strip().splitlines()[-1]
    assert SUMMARY_PATTERN.match(last)
    assert last == "SUMMARY sheets=14 info=0 warnings=0 errors=0"


def test_summary_is_last_line_of_create(write_config: Path, capsys):
    assert cli_main(["create"]) == 0
    last = capsys.readouterr().out.strip().splitlines()[-1]
    assert last == "SUMMARY sheets=14 info=14 warnings=0 errors=0"


def test_every_line_is_labeled(write_config: Path, capsys):
    cli_main(["create"])
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines
    assert all(re.match(r"^(INFO|WARN|ERROR|SUMMARY) ", line) for line in lines)
