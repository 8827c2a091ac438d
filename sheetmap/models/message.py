from __future__ import annotations

import json
import time
from dataclasses import dataclass

from .enums import MessageLevel, MessageType, get_description

"""Message model: the diagnostic channel of every read, check and write operation.

Messages are plain values accumulated into lists; expected conditions such as a
missing header or an unreadable sheet are reported through them instead of
being raised.
"""

__all__ = [
    "Message",
    "create_error_message",
    "create_info_message",
    "create_warning_message",
]


@dataclass(frozen=True)
class Message:
    """A single diagnostic entry.

    Attributes:
        level: INFO, WARNING or ERROR
        type: Category label (see ``MessageType``)
        message: Human readable text
        time: Creation time in unix seconds
    """
    level: str
    type: str
    message: str
    time: int

    @staticmethod
    def create(level: MessageLevel, message: str, message_type: MessageType = MessageType.GENERAL) -> Message:
        return Message(
            level=level.value,
            type=get_description(message_type),
            message=message,
            time=int(time.time()),
        )

    @property
    def is_error(self) -> bool:
        return self.level == MessageLevel.ERROR.value

    @property
    def is_warning(self) -> bool:
        return self.level == MessageLevel.WARNING.value

    def to_dict(self) -> dict[str, object]:
        return {"level": self.level, "type": self.type, "message": self.message, "time": self.time}

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines record with the fixed key set."""
        return json.dumps(self.to_dict(), ensure_ascii=False)


def create_error_message(message: str, message_type: MessageType = MessageType.GENERAL) -> Message:
    return Message.create(MessageLevel.ERROR, message, message_type)


def create_warning_message(message: str, message_type: MessageType = MessageType.GENERAL) -> Message:
    return Message.create(MessageLevel.WARNING, message, message_type)


def create_info_message(message: str, message_type: MessageType = MessageType.GENERAL) -> Message:
    return Message.create(MessageLevel.INFO, message, message_type)
