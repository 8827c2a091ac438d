from __future__ import annotations

import json
from pathlib import Path

from sheetmap.cli.__main__ import main as cli_main
from sheetmap.models.enums import MessageLevel, MessageType

"""Message log contract: JSON Lines with a fixed key set per run."""

REQUIRED_KEYS = ["level", "type", "message", "time"]


def _log_files(temp_workdir: Path) -> list[Path]:
    return sorted((temp_workdir / "logs").glob("messages-*.log"))


def test_message_log_lines_have_fixed_keys(write_config: Path, temp_workdir: Path):
    cli_main(["create"])
    files = _log_files(temp_workdir)
    assert len(files) == 1

    records = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert len(records) == 14
    levels = {m.value for m in MessageLevel}
    types = {m.value for m in MessageType}
    for record in records:
        assert list(record) == REQUIRED_KEYS
        assert record["level"] in levels
        assert record["type"] in types
        assert isinstance(record["time"], int)


def test_layout_writes_no_message_log(write_config: Path, temp_workdir: Path):
    cli_main(["layout"])
    assert _log_files(temp_workdir) == []
