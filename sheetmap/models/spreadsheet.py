from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .enums import MessageLevel
from .message import Message

"""Result container returned by sheet manager operations."""

__all__ = [
    "SpreadsheetData",
]


@dataclass
class SpreadsheetData:
    """Spreadsheet title, diagnostics and mapped entities keyed by sheet attribute."""
    name: str = ""
    messages: list[Message] = field(default_factory=list)
    entities: dict[str, list[Any]] = field(default_factory=dict)

    def count(self, level: MessageLevel) -> int:
        return sum(1 for m in self.messages if m.level == level.value)

    @property
    def has_errors(self) -> bool:
        return self.count(MessageLevel.ERROR) > 0
