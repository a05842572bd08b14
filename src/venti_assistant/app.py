"""Application wiring - builds all components and manages lifecycle."""

from __future__ import annotations

from venti_assistant.ai.client import AIClient, AnthropicClient
from venti_assistant.ai.tools.registry import ToolRegistry
from venti_assistant.config import AppConfig
from venti_assistant.core.session import AssistantSession
from venti_assistant.core.tenant import TenantContext
from venti_assistant.log import get_logger
from venti_assistant.storage.conversation_store import ConversationStore
from venti_assistant.storage.database import Database
from venti_assistant.storage.kv import KeyValueStorage, MemoryStorage, SQLiteStorage
from venti_assistant.storage.tenant_repo import TenantDataRepository

logger = get_logger(__name__)


class AssistantApp:
    """Top-level application object."""

    def __init__(self, config: AppConfig, ai_client: AIClient | None = None):
        self.config = config
        self.db = Database(config.storage.db_path)
        self.tenant_repo = TenantDataRepository(self.db)
        self.tenant_context = TenantContext(config.tenant_id)
        self.tool_registry = ToolRegistry(self.tenant_repo)
        self._ai_client = ai_client
        self.store: ConversationStore | None = None
        self.session: AssistantSession | None = None

    async def start(self) -> AssistantSession:
        """Open storage, register tools and restore the conversation."""
        await self.db.initialize()

        self.tool_registry.discover_and_register()
        if self.config.assistant.tools:
            self.tool_registry.restrict_to(self.config.assistant.tools)

        storage: KeyValueStorage = (
            SQLiteStorage(self.db) if self.config.storage.persist else MemoryStorage()
        )
        self.store = ConversationStore(
            storage,
            key=self.config.storage.session_key,
            ttl=self.config.storage.ttl,
        )

        self.session = AssistantSession(
            ai_client=self._ai_client or self._create_ai_client(),
            tool_registry=self.tool_registry,
            store=self.store,
            tenant_context=self.tenant_context,
            config=self.config.assistant,
        )
        await self.session.initialize()
        logger.info(
            "assistant_started",
            tools=self.tool_registry.names(),
            tenant_id=self.tenant_context.tenant_id,
        )
        return self.session

    async def stop(self) -> None:
        await self.db.close()
        logger.info("assistant_stopped")

    def _create_ai_client(self) -> AIClient:
        if not self.config.anthropic:
            raise ValueError("No 'anthropic' section in config")
        return AnthropicClient(
            self.config.anthropic,
            model=self.config.assistant.model,
            temperature=self.config.assistant.temperature,
        )
