import asyncio
from datetime import datetime, timezone

import pytest

from venti_assistant.ai.tool_runner import TOOL_LIMIT_TEXT
from venti_assistant.ai.tools.registry import ToolRegistry
from venti_assistant.config import AssistantConfig
from venti_assistant.core.session import APOLOGY_TEXT, CANCELLED_TEXT, AssistantSession
from venti_assistant.core.tenant import MissingTenantError, TenantContext
from venti_assistant.core.types import Role
from venti_assistant.storage.conversation_store import WELCOME_TEXT, ConversationStore
from venti_assistant.storage.kv import MemoryStorage
from venti_assistant.storage.models import Message

from fakes import ScriptedClient, text_reply, tool_reply


@pytest.fixture
def registry(repo):
    registry = ToolRegistry(repo)
    registry.discover_and_register()
    return registry


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return ConversationStore(storage)


async def _session(client, registry, store, tenant="t1", **config) -> AssistantSession:
    session = AssistantSession(
        ai_client=client,
        tool_registry=registry,
        store=store,
        tenant_context=TenantContext(tenant),
        config=AssistantConfig(**config),
    )
    await session.initialize()
    return session


@pytest.mark.asyncio
async def test_new_session_starts_with_welcome(registry, store):
    session = await _session(ScriptedClient(), registry, store)

    assert [(m.role, m.content) for m in session.messages] == [(Role.MODEL, WELCOME_TEXT)]
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_low_stock_question_end_to_end(registry, store):
    client = ScriptedClient(
        tool_reply(("get_inventory_alerts", {"onlyOutOfStock": False})),
        text_reply("Tienes 2 productos con bajo stock: Pantalón (0) y Camiseta (3)."),
    )
    session = await _session(client, registry, store)

    await session.send_message("¿qué productos tienen bajo stock?")

    assert [(m.role, m.content) for m in session.messages] == [
        (Role.MODEL, WELCOME_TEXT),
        (Role.USER, "¿qué productos tienen bajo stock?"),
        (Role.MODEL, "Tienes 2 productos con bajo stock: Pantalón (0) y Camiseta (3)."),
    ]
    batch = client.sent[1]
    assert batch[0].payload == [
        {"name": "Pantalón", "sku": "PA-001", "stock_quantity": 0},
        {"name": "Camiseta", "sku": "TS-001", "stock_quantity": 3},
    ]
    assert all(row["stock_quantity"] < 10 for row in batch[0].payload)
    assert session.is_loading is False

    persisted = await store.load()
    assert [m.content for m in persisted] == [m.content for m in session.messages]


@pytest.mark.asyncio
async def test_history_skips_welcome_and_current_message(registry, store):
    client = ScriptedClient(text_reply("Primera"), text_reply("Segunda"))
    session = await _session(client, registry, store)

    await session.send_message("uno")
    await session.send_message("dos")

    assert client.chats[0]["history"] == []
    assert client.chats[1]["history"] == [
        {"role": "user", "parts": [{"text": "uno"}]},
        {"role": "model", "parts": [{"text": "Primera"}]},
    ]
    assert client.sent == ["uno", "dos"]


@pytest.mark.asyncio
async def test_chat_receives_tools_and_generation_config(registry, store):
    client = ScriptedClient(text_reply("ok"))
    session = await _session(client, registry, store, max_tokens=321)

    await session.send_message("hola")

    chat = client.chats[0]
    assert chat["max_output_tokens"] == 321
    assert {t["name"] for t in chat["tools"]} == set(registry.names())
    assert "{current_date}" not in chat["system"]


@pytest.mark.asyncio
async def test_missing_tenant_raises_before_model_call(registry, store):
    client = ScriptedClient(text_reply("never"))
    session = await _session(client, registry, store, tenant=None)

    with pytest.raises(MissingTenantError):
        await session.send_message("hola")

    assert client.call_count == 0
    assert len(session.messages) == 1
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_model_failure_appends_single_apology(registry, store):
    client = ScriptedClient(text_reply("Primera"), ConnectionError("network down"))
    session = await _session(client, registry, store)
    await session.send_message("uno")
    before = session.messages

    await session.send_message("dos")

    assert session.messages[: len(before)] == before
    assert [(m.role, m.content) for m in session.messages[len(before):]] == [
        (Role.USER, "dos"),
        (Role.MODEL, APOLOGY_TEXT),
    ]
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_failure_during_tool_round_appends_apology(registry, store):
    client = ScriptedClient(tool_reply(("get_active_promotions", {})), TimeoutError("slow"))
    session = await _session(client, registry, store)

    await session.send_message("promos")

    assert session.messages[-1].content == APOLOGY_TEXT
    assert len(session.messages) == 3


@pytest.mark.asyncio
async def test_round_limit_surfaces_degraded_message(registry, store):
    client = ScriptedClient(*[tool_reply(("get_active_promotions", {})) for _ in range(3)])
    session = await _session(client, registry, store, max_tool_rounds=2)

    await session.send_message("bucle")

    assert session.messages[-1].content == TOOL_LIMIT_TEXT
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_cancelled_turn_appends_notice(registry, store):
    cancel = asyncio.Event()
    cancel.set()
    client = ScriptedClient(text_reply("never"))
    session = await _session(client, registry, store)

    await session.send_message("hola", cancel_event=cancel)

    assert session.messages[-1].content == CANCELLED_TEXT
    assert client.call_count == 0


@pytest.mark.asyncio
async def test_loading_flag_is_set_while_awaiting_model(registry, store):
    client = ScriptedClient(text_reply("ok"))
    session = await _session(client, registry, store)
    seen = []

    async def observe(message):
        seen.append(session.is_loading)

    client.on_send = observe

    await session.send_message("hola")

    assert seen == [True]
    assert session.is_loading is False


@pytest.mark.asyncio
async def test_overlapping_sends_are_serialized(registry, store):
    release = asyncio.Event()
    client = ScriptedClient(text_reply("respuesta uno"), text_reply("respuesta dos"))

    async def hold_first(message):
        if message == "uno":
            await release.wait()

    client.on_send = hold_first
    session = await _session(client, registry, store)

    first = asyncio.create_task(session.send_message("uno"))
    second = asyncio.create_task(session.send_message("dos"))
    await asyncio.sleep(0.01)
    assert [m.content for m in session.messages[1:]] == ["uno"]
    release.set()
    await asyncio.gather(first, second)

    assert [m.content for m in session.messages[1:]] == [
        "uno",
        "respuesta uno",
        "dos",
        "respuesta dos",
    ]


@pytest.mark.asyncio
async def test_each_append_is_persisted(registry, storage, store):
    snapshots = []

    class RecordingStore(ConversationStore):
        async def save(self, messages):
            snapshots.append([m.content for m in messages])
            await super().save(messages)

    client = ScriptedClient(text_reply("hola!"))
    session = await _session(client, registry, RecordingStore(storage))

    await session.send_message("hola")

    assert snapshots == [[WELCOME_TEXT, "hola"], [WELCOME_TEXT, "hola", "hola!"]]


@pytest.mark.asyncio
async def test_restored_conversation_is_used_as_history(registry, store):
    now = datetime.now(timezone.utc)
    await store.save(
        [
            Message(Role.MODEL, WELCOME_TEXT, now),
            Message(Role.USER, "¿ventas de hoy?", now),
            Message(Role.MODEL, "Hoy: 0 €", now),
        ]
    )
    client = ScriptedClient(text_reply("ok"))
    session = await _session(client, registry, store)

    await session.send_message("¿y ayer?")

    assert [h["role"] for h in client.chats[0]["history"]] == ["user", "model"]


@pytest.mark.asyncio
async def test_listeners_observe_changes_and_can_unsubscribe(registry, store):
    client = ScriptedClient(text_reply("uno"), text_reply("dos"))
    session = await _session(client, registry, store)
    events = []

    def listener(s):
        events.append((len(s.messages), s.is_loading))

    def broken(s):
        raise RuntimeError("render failed")

    unsubscribe = session.subscribe(listener)
    session.subscribe(broken)
    await session.send_message("a")
    unsubscribe()
    await session.send_message("b")

    assert events == [(2, False), (2, True), (3, True), (3, False)]


@pytest.mark.asyncio
async def test_clear_resets_to_welcome(registry, storage, store):
    client = ScriptedClient(text_reply("ok"))
    session = await _session(client, registry, store)
    await session.send_message("hola")

    await session.clear()

    assert [m.content for m in session.messages] == [WELCOME_TEXT]
    assert await storage.get("venti_ai_chat_history") is None
