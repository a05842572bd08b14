"""Iterative tool execution loop for function-calling model replies."""

from __future__ import annotations

import asyncio

from venti_assistant.ai.client import ChatSession
from venti_assistant.ai.tools.base import ToolResult
from venti_assistant.ai.tools.registry import ToolRegistry
from venti_assistant.log import get_logger

logger = get_logger(__name__)

MAX_TOOL_ROUNDS = 10
TOOL_LIMIT_TEXT = (
    "No pude completar la solicitud después de varios intentos. "
    "Por favor, intenta reformular tu pregunta."
)
EMPTY_REPLY_TEXT = "No obtuve una respuesta del asistente. ¿Podrías intentar de nuevo?"


class TurnCancelled(Exception):
    """Raised at a suspension point once the turn's cancel event is set."""


def _check_cancelled(cancel_event: asyncio.Event | None, stage: str) -> None:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("tool_loop_cancelled", stage=stage)
        raise TurnCancelled(stage)


async def run_tool_loop(
    chat: ChatSession,
    tool_registry: ToolRegistry,
    text: str,
    tenant_id: str,
    max_rounds: int = MAX_TOOL_ROUNDS,
    cancel_event: asyncio.Event | None = None,
) -> str:
    """Send *text* and resolve tool calls until the model answers in plain text.

    Tool calls within a reply run sequentially in the order received and are
    returned to the model as one batch. Returns the final reply text.
    """
    _check_cancelled(cancel_event, "before_model")
    response = await chat.send(text)
    rounds = 0

    while response.function_calls:
        if rounds >= max_rounds:
            logger.warning("tool_round_limit_reached", rounds=rounds, tenant_id=tenant_id)
            return TOOL_LIMIT_TEXT

        results: list[ToolResult] = []
        for call in response.function_calls:
            _check_cancelled(cancel_event, "before_tool")
            results.append(await tool_registry.execute(call.name, call.args, tenant_id, call_id=call.id))

        rounds += 1
        logger.debug("tool_round_completed", round=rounds, calls=[r.name for r in results])
        _check_cancelled(cancel_event, "before_model")
        response = await chat.send(results)

    final_text = "".join(response.text_parts).strip()
    if not final_text:
        logger.warning("empty_model_reply", rounds=rounds)
        return EMPTY_REPLY_TEXT
    return final_text
