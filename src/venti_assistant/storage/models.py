"""Data models for the conversation log and its persisted snapshot."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from venti_assistant.core.types import Role


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        timestamp = datetime.fromisoformat(data["timestamp"])
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        content = data["content"]
        if not isinstance(content, str):
            raise TypeError(f"message content must be a string, got {type(content).__name__}")
        return cls(role=Role(data["role"]), content=content, timestamp=timestamp)


@dataclass
class Snapshot:
    """Conversation log plus the instant it was written.

    Serialized as ``{"timestamp": <epoch ms>, "messages": [...]}``.
    """

    written_at: datetime
    messages: list[Message] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps(
            {
                "timestamp": int(self.written_at.timestamp() * 1000),
                "messages": [m.to_dict() for m in self.messages],
            },
            ensure_ascii=False,
        )

    @classmethod
    def from_json(cls, raw: str) -> Snapshot:
        """Parse a stored snapshot. Raises ValueError on any malformed content."""
        try:
            data = json.loads(raw)
            written_at = datetime.fromtimestamp(data["timestamp"] / 1000, tz=timezone.utc)
            messages = [Message.from_dict(m) for m in data["messages"]]
        except (TypeError, KeyError, AttributeError, ValueError, OverflowError, OSError) as e:
            raise ValueError(f"Malformed conversation snapshot: {e}") from e
        return cls(written_at=written_at, messages=messages)
