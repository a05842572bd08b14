"""Assistant session: the observable conversation state and its entry point."""

from __future__ import annotations

import asyncio
from typing import Callable

from venti_assistant.ai.client import AIClient
from venti_assistant.ai.conversation import build_history
from venti_assistant.ai.tool_runner import TurnCancelled, run_tool_loop
from venti_assistant.ai.tools.registry import ToolRegistry
from venti_assistant.config import AssistantConfig
from venti_assistant.core.tenant import TenantContext
from venti_assistant.core.types import Role
from venti_assistant.log import get_logger
from venti_assistant.storage.conversation_store import ConversationStore
from venti_assistant.storage.models import Message, utcnow

logger = get_logger(__name__)

APOLOGY_TEXT = "Lo siento, ocurrió un error al procesar tu solicitud. ¿Podrías intentar de nuevo?"
CANCELLED_TEXT = "La solicitud fue cancelada."

Listener = Callable[["AssistantSession"], None]


class AssistantSession:
    """Owns the conversation log for one client session.

    ``send_message`` calls are serialized: a call made while another turn is
    in flight waits for it to finish, so appends always land in turn order.
    Every turn that passes the tenant check appends exactly one model message
    and ends with ``is_loading`` False.
    """

    def __init__(
        self,
        ai_client: AIClient,
        tool_registry: ToolRegistry,
        store: ConversationStore,
        tenant_context: TenantContext,
        config: AssistantConfig | None = None,
    ):
        self._ai_client = ai_client
        self._tool_registry = tool_registry
        self._store = store
        self._tenant_context = tenant_context
        self._config = config or AssistantConfig()
        self._messages: list[Message] = store.default_messages()
        self._is_loading = False
        self._listeners: list[Listener] = []
        self._turn_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Seed the log from the persisted snapshot."""
        self._messages = await self._store.load()
        logger.info("session_restored", message_count=len(self._messages))
        self._notify()

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* whenever messages or the loading flag change."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    async def send_message(self, text: str, cancel_event: asyncio.Event | None = None) -> None:
        """Run one turn for *text*.

        Raises MissingTenantError, before touching the log or the model, when
        no tenant is selected. Every other failure ends in an apology message.
        """
        async with self._turn_lock:
            tenant_id = self._tenant_context.require_tenant_id()

            await self._append(Message(role=Role.USER, content=text))
            self._set_loading(True)
            try:
                try:
                    reply = await self._run_turn(text, tenant_id, cancel_event)
                except TurnCancelled:
                    reply = CANCELLED_TEXT
                except Exception as e:
                    logger.error("ai_error", tenant_id=tenant_id, error=str(e), exc_info=True)
                    reply = APOLOGY_TEXT
                await self._append(Message(role=Role.MODEL, content=reply))
            finally:
                self._set_loading(False)

    async def clear(self) -> None:
        """Start over with only the welcome message."""
        async with self._turn_lock:
            self._messages = await self._store.clear()
            logger.info("session_cleared")
            self._notify()

    async def _run_turn(self, text: str, tenant_id: str, cancel_event: asyncio.Event | None) -> str:
        # The user message just appended travels as the new input, not as history
        history = build_history(self._messages[:-1])
        system = self._config.system_prompt.replace("{current_date}", utcnow().isoformat())
        chat = self._ai_client.start_chat(
            history=history,
            tools=self._tool_registry.list_tools(),
            system=system,
            max_output_tokens=self._config.max_tokens,
        )
        return await run_tool_loop(
            chat=chat,
            tool_registry=self._tool_registry,
            text=text,
            tenant_id=tenant_id,
            max_rounds=self._config.max_tool_rounds,
            cancel_event=cancel_event,
        )

    async def _append(self, message: Message) -> None:
        self._messages.append(message)
        await self._store.save(self._messages)
        self._notify()

    def _set_loading(self, value: bool) -> None:
        self._is_loading = value
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error("session_listener_error", error=str(e))
