from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.message import Message

"""Message log buffering.

- JSON Lines with the fixed key set ``level, type, message, time``
- One ``messages-YYYYMMDD-HHMMSS.log`` (UTC) per run, created on first flush
- Serial use only
"""

__all__ = [
    "MessageLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class MessageLogBuffer:
    """In-memory buffer of Messages; ``flush`` appends them to the run log."""

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory or LOGS_DIR
        self._messages: list[Message] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._directory / f"messages-{stamp}.log"
        return self._file_path

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def extend(self, messages: Iterable[Message]) -> None:
        self._messages.extend(messages)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._messages)

    def flush(self) -> Path | None:
        """Write buffered messages; None when there was nothing to write."""
        if not self._messages:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for message in self._messages:
                f.write(message.to_json_line() + "\n")
        self._messages.clear()
        return fp
