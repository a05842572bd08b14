"""AI client abstraction over a function-calling chat model."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Union

from venti_assistant.ai.tools.base import ToolResult
from venti_assistant.config import AnthropicConfig
from venti_assistant.log import get_logger

logger = get_logger(__name__)


@dataclass
class FunctionCall:
    name: str
    args: dict[str, Any] = field(default_factory=dict)
    id: str = ""


@dataclass
class ReplyPart:
    """One element of a model reply: either free text or a function call."""

    text: str | None = None
    function_call: FunctionCall | None = None


@dataclass
class AIResponse:
    """Unified reply from any AI backend."""

    parts: list[ReplyPart] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    raw: Any = None  # Backend-specific raw response

    @property
    def text_parts(self) -> list[str]:
        return [p.text for p in self.parts if p.text]

    @property
    def function_calls(self) -> list[FunctionCall]:
        return [p.function_call for p in self.parts if p.function_call is not None]


# Either a new user utterance or the batch of results for the previous calls
OutboundMessage = Union[str, list[ToolResult]]


class ChatSession(ABC):
    """A single multi-round exchange with the model."""

    @abstractmethod
    async def send(self, message: OutboundMessage) -> AIResponse:
        ...


class AIClient(ABC):
    """Abstract base class for AI backends."""

    @abstractmethod
    def start_chat(
        self,
        history: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        system: str = "",
        max_output_tokens: int = 1000,
    ) -> ChatSession:
        """Open a chat seeded with *history*.

        History entries use the provider-neutral shape
        ``{"role": "user" | "model", "parts": [{"text": ...}]}`` and tools are
        function declarations ``{"name", "description", "parameters"}``.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        ...


class AnthropicClient(AIClient):
    """Anthropic API backend using the official SDK."""

    def __init__(self, config: AnthropicConfig, model: str, temperature: float = 0.7):
        import anthropic

        self._client = anthropic.AsyncAnthropic(
            api_key=config.api_key,
            base_url=config.base_url,
            max_retries=config.max_retries,
            timeout=config.timeout,
        )
        self._model = model
        self._temperature = temperature

    @property
    def model_name(self) -> str:
        return self._model

    def start_chat(
        self,
        history: list[dict[str, Any]],
        tools: list[dict[str, Any]],
        system: str = "",
        max_output_tokens: int = 1000,
    ) -> ChatSession:
        return AnthropicChatSession(
            client=self._client,
            model=self._model,
            temperature=self._temperature,
            system=system,
            max_tokens=max_output_tokens,
            history=history,
            tools=tools,
        )


def _history_to_messages(history: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert neutral history to Anthropic messages, merging same-role runs."""
    messages: list[dict[str, Any]] = []
    for entry in history:
        role = "assistant" if entry.get("role") == "model" else "user"
        text = "".join(p.get("text", "") for p in entry.get("parts", []))
        if not text:
            continue
        if messages and messages[-1]["role"] == role:
            messages[-1]["content"] += "\n\n" + text
        else:
            messages.append({"role": role, "content": text})
    return messages


def _declaration_to_tool(declaration: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": declaration["name"],
        "description": declaration.get("description", ""),
        "input_schema": declaration.get("parameters") or {"type": "object", "properties": {}},
    }


class AnthropicChatSession(ChatSession):
    """Keeps the running message list for one turn and its tool rounds."""

    def __init__(
        self,
        client: Any,
        model: str,
        temperature: float,
        system: str,
        max_tokens: int,
        history: list[dict[str, Any]],
        tools: list[dict[str, Any]],
    ):
        self._client = client
        self._model = model
        self._temperature = temperature
        self._system = system
        self._max_tokens = max_tokens
        self._messages = _history_to_messages(history)
        self._tools = [_declaration_to_tool(d) for d in tools]

    @property
    def messages(self) -> list[dict[str, Any]]:
        return self._messages

    def _append_user(self, content: Any) -> None:
        if self._messages and self._messages[-1]["role"] == "user" and isinstance(content, str):
            last = self._messages[-1]
            if isinstance(last["content"], str):
                last["content"] += "\n\n" + content
                return
        self._messages.append({"role": "user", "content": content})

    async def send(self, message: OutboundMessage) -> AIResponse:
        if isinstance(message, str):
            self._append_user(message)
        else:
            self._append_user(
                [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.call_id,
                        "content": json.dumps(result.payload, ensure_ascii=False, default=str),
                        "is_error": result.is_error,
                    }
                    for result in message
                ]
            )

        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": self._messages,
            "temperature": self._temperature,
        }
        if self._system:
            kwargs["system"] = self._system
        if self._tools:
            kwargs["tools"] = self._tools

        logger.debug("api_request", model=self._model, message_count=len(self._messages))
        response = await self._client.messages.create(**kwargs)
        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0
        logger.debug(
            "api_response",
            model=self._model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            stop_reason=getattr(response, "stop_reason", None),
        )

        parts: list[ReplyPart] = []
        assistant_content: list[dict[str, Any]] = []
        for block in getattr(response, "content", None) or []:
            if block.type == "text":
                parts.append(ReplyPart(text=block.text))
                assistant_content.append({"type": "text", "text": block.text})
            elif block.type == "tool_use":
                args = block.input if isinstance(block.input, dict) else {}
                parts.append(ReplyPart(function_call=FunctionCall(name=block.name, args=args, id=block.id)))
                assistant_content.append(
                    {"type": "tool_use", "id": block.id, "name": block.name, "input": block.input}
                )
        if assistant_content:
            self._messages.append({"role": "assistant", "content": assistant_content})

        return AIResponse(
            parts=parts,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            raw=response,
        )
