"""Convert the conversation log to the model's chat history format."""

from __future__ import annotations

from typing import Any, Iterable

from venti_assistant.core.types import Role
from venti_assistant.storage.models import Message


def build_history(messages: Iterable[Message]) -> list[dict[str, Any]]:
    """Map log entries to ``{"role", "parts": [{"text"}]}``.

    The provider requires the first turn to be user-authored, so leading
    model entries (the welcome message) are dropped.
    """
    history: list[dict[str, Any]] = []
    for message in messages:
        if not history and message.role == Role.MODEL:
            continue
        history.append(
            {
                "role": "model" if message.role == Role.MODEL else "user",
                "parts": [{"text": message.content}],
            }
        )
    return history
