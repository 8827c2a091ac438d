from __future__ import annotations

import re

from sheetmap.models.enums import MessageLevel
from sheetmap.models.message import create_error_message, create_info_message, create_warning_message
from sheetmap.services.summary import count_levels, render_summary_line

SUMMARY_RE = re.compile(r"^SUMMARY sheets=\d+ info=\d+ warnings=\d+ errors=\d+$")


def test_render_summary_line_format():
    messages = [
        create_info_message("Trips created"),
        create_info_message("Shifts created"),
        create_warning_message("Found sheet header issue(s)"),
        create_error_message("Unable to find sheet TYPES"),
    ]
    line = render_summary_line(9, messages)
    assert line == "SUMMARY sheets=9 info=2 warnings=1 errors=1"
    assert SUMMARY_RE.match(line)


def test_render_summary_line_without_messages():
    assert render_summary_line(0, []) == "SUMMARY sheets=0 info=0 warnings=0 errors=0"


def test_count_levels_has_every_level():
    counts = count_levels(iter([create_error_message("a"), create_error_message("b")]))
    assert counts == {MessageLevel.INFO: 0, MessageLevel.WARNING: 0, MessageLevel.ERROR: 2}
