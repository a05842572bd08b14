"""Scripted stand-ins for the model backend."""

from __future__ import annotations

from typing import Any

from venti_assistant.ai.client import (
    AIClient,
    AIResponse,
    ChatSession,
    FunctionCall,
    OutboundMessage,
    ReplyPart,
)


def text_reply(*texts: str) -> AIResponse:
    return AIResponse(parts=[ReplyPart(text=t) for t in texts])


def tool_reply(*calls: tuple[str, dict[str, Any]]) -> AIResponse:
    return AIResponse(
        parts=[
            ReplyPart(function_call=FunctionCall(name=name, args=args, id=f"call_{i}"))
            for i, (name, args) in enumerate(calls)
        ]
    )


class ScriptedChat(ChatSession):
    def __init__(self, client: ScriptedClient):
        self._client = client

    async def send(self, message: OutboundMessage) -> AIResponse:
        self._client.sent.append(message)
        if self._client.on_send is not None:
            await self._client.on_send(message)
        if not self._client.script:
            raise AssertionError("model called more times than scripted")
        step = self._client.script.pop(0)
        if isinstance(step, BaseException):
            raise step
        return step


class ScriptedClient(AIClient):
    """Returns queued replies (or raises queued exceptions) in order."""

    def __init__(self, *script: AIResponse | BaseException):
        self.script: list[AIResponse | BaseException] = list(script)
        self.sent: list[OutboundMessage] = []
        self.chats: list[dict[str, Any]] = []
        self.on_send = None

    @property
    def model_name(self) -> str:
        return "scripted"

    @property
    def call_count(self) -> int:
        return len(self.sent)

    def start_chat(self, history, tools, system="", max_output_tokens=1000) -> ChatSession:
        self.chats.append(
            {"history": history, "tools": tools, "system": system, "max_output_tokens": max_output_tokens}
        )
        return ScriptedChat(self)
