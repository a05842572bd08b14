"""Persisted conversation log with a time-to-live on read."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

from venti_assistant.core.types import Role
from venti_assistant.log import get_logger
from venti_assistant.storage.kv import KeyValueStorage
from venti_assistant.storage.models import Message, Snapshot, utcnow

logger = get_logger(__name__)

DEFAULT_SESSION_KEY = "venti_ai_chat_history"
DEFAULT_TTL = timedelta(hours=24)
WELCOME_TEXT = (
    "¡Hola! Soy tu asistente de Venti. Puedo ayudarte con información sobre "
    "tus ventas, órdenes y productos. ¿En qué puedo ayudarte hoy?"
)


class ConversationStore:
    """Loads and saves the conversation log under a single storage key.

    Persistence is best-effort: ``save`` never raises, and ``load`` falls back
    to a single welcome message whenever the snapshot is missing, unreadable
    or older than the TTL.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_SESSION_KEY,
        ttl: timedelta = DEFAULT_TTL,
        welcome_text: str = WELCOME_TEXT,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._storage = storage
        self._key = key
        self._ttl = ttl
        self._welcome_text = welcome_text
        self._clock = clock

    def default_messages(self) -> list[Message]:
        return [Message(role=Role.MODEL, content=self._welcome_text, timestamp=self._clock())]

    async def load(self) -> list[Message]:
        try:
            raw = await self._storage.get(self._key)
        except Exception as e:
            logger.warning("conversation_load_failed", key=self._key, error=str(e))
            return self.default_messages()

        if raw is None:
            return self.default_messages()

        try:
            snapshot = Snapshot.from_json(raw)
        except ValueError as e:
            logger.warning("conversation_snapshot_malformed", key=self._key, error=str(e))
            return self.default_messages()

        age = self._clock() - snapshot.written_at
        if age > self._ttl:
            logger.info("snapshot_expired", key=self._key, age_seconds=int(age.total_seconds()))
            await self._delete_quietly()
            return self.default_messages()

        if not snapshot.messages:
            return self.default_messages()

        logger.debug("conversation_loaded", key=self._key, message_count=len(snapshot.messages))
        return list(snapshot.messages)

    async def save(self, messages: list[Message]) -> None:
        snapshot = Snapshot(written_at=self._clock(), messages=list(messages))
        try:
            await self._storage.set(self._key, snapshot.to_json())
        except Exception as e:
            logger.error("conversation_save_failed", key=self._key, error=str(e))
            return
        logger.debug("conversation_saved", key=self._key, message_count=len(messages))

    async def clear(self) -> list[Message]:
        """Drop the stored snapshot and return a fresh log."""
        await self._delete_quietly()
        return self.default_messages()

    async def _delete_quietly(self) -> None:
        try:
            await self._storage.delete(self._key)
        except Exception as e:
            logger.error("conversation_clear_failed", key=self._key, error=str(e))
