from __future__ import annotations

from collections.abc import Iterable

from ..models.enums import MessageLevel
from ..models.message import Message

"""SUMMARY line rendering for CLI runs."""

__all__ = [
    "count_levels",
    "render_summary_line",
]


def count_levels(messages: Iterable[Message]) -> dict[MessageLevel, int]:
    counts = {level: 0 for level in MessageLevel}
    for message in messages:
        counts[MessageLevel(message.level)] += 1
    return counts


def render_summary_line(total_sheets: int, messages: Iterable[Message]) -> str:
    """Render the final SUMMARY line of a run.

    Format::

        SUMMARY sheets={n} info={i} warnings={w} errors={e}

    Examples:
        >>> from sheetmap.models.message import create_error_message, create_info_message
        >>> render_summary_line(3, [create_info_message("ok"), create_error_message("bad")])
        'SUMMARY sheets=3 info=1 warnings=0 errors=1'
    """
    counts = count_levels(messages)
    return (
        f"SUMMARY sheets={total_sheets} "
        f"info={counts[MessageLevel.INFO]} "
        f"warnings={counts[MessageLevel.WARNING]} "
        f"errors={counts[MessageLevel.ERROR]}"
    )
