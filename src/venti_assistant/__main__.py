"""CLI entry point for venti-assistant."""

from __future__ import annotations

import argparse
import asyncio
import sys

from venti_assistant.app import AssistantApp
from venti_assistant.config import AppConfig, load_config
from venti_assistant.core.tenant import MissingTenantError
from venti_assistant.log import setup_logging


def _add_config_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-c", "--config", default="config.yaml", help="Path to config file")
    parser.add_argument("-e", "--env", default=".env", help="Path to .env file")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="venti-assistant",
        description="Back-office assistant answering questions over a store's data",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    chat_parser = subparsers.add_parser("chat", help="Chat with the assistant in the terminal")
    _add_config_args(chat_parser)
    chat_parser.add_argument("-t", "--tenant", help="Tenant ID (overrides config)")

    check_parser = subparsers.add_parser("config-check", help="Validate configuration")
    _add_config_args(check_parser)

    tools_parser = subparsers.add_parser("tools", help="List the tools offered to the model")
    _add_config_args(tools_parser)

    clear_parser = subparsers.add_parser("clear-history", help="Delete the saved conversation")
    _add_config_args(clear_parser)

    args = parser.parse_args()

    if args.command is None:
        args.command = "chat"
        args.config = "config.yaml"
        args.env = ".env"
        args.tenant = None

    if args.command == "config-check":
        _check_config(args.config, args.env)
        return

    config = _load_or_exit(args.config, args.env)
    setup_logging(config.log_level, json_logs=config.json_logs)

    if args.command == "tools":
        _list_tools(config)
    elif args.command == "clear-history":
        asyncio.run(_clear_history(config))
    elif args.command == "chat":
        if args.tenant:
            config.tenant_id = args.tenant
        try:
            asyncio.run(_chat(config))
        except KeyboardInterrupt:
            pass


def _load_or_exit(config_path: str, env_path: str) -> AppConfig:
    try:
        return load_config(config_path, env_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Run 'python install.py' first or copy config.example.yaml to config.yaml")
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _check_config(config_path: str, env_path: str) -> None:
    """Validate configuration and print summary."""
    config = _load_or_exit(config_path, env_path)
    print(f"Configuration valid: {config_path}")
    print(f"  Data directory: {config.data_dir}")
    print(f"  Tenant: {config.tenant_id or '(not selected)'}")
    print(f"  Model: {config.assistant.model} (max_tokens={config.assistant.max_tokens})")
    print(f"  Max tool rounds: {config.assistant.max_tool_rounds}")
    tools = config.assistant.tools
    print(f"  Tools: {', '.join(tools) if tools else '(all)'}")
    print(f"  Storage: {config.storage.db_path} (persist={config.storage.persist})")
    print(f"  History TTL: {config.storage.ttl_hours}h")
    if not config.anthropic:
        print("  Warning: no 'anthropic' section; chat will not start", file=sys.stderr)


def _list_tools(config: AppConfig) -> None:
    from venti_assistant.ai.tools.registry import ToolRegistry

    registry = ToolRegistry()
    registry.discover_and_register()
    if config.assistant.tools:
        registry.restrict_to(config.assistant.tools)
    for declaration in registry.list_tools():
        params = declaration["parameters"].get("properties", {})
        required = set(declaration["parameters"].get("required", []))
        print(f"{declaration['name']}")
        print(f"    {declaration['description']}")
        for param, spec in params.items():
            marker = "*" if param in required else " "
            enum = f" {spec['enum']}" if "enum" in spec else ""
            print(f"   {marker} {param} ({spec.get('type', '?')}){enum}: {spec.get('description', '')}")


async def _clear_history(config: AppConfig) -> None:
    from venti_assistant.storage.conversation_store import ConversationStore
    from venti_assistant.storage.database import Database
    from venti_assistant.storage.kv import SQLiteStorage

    db = Database(config.storage.db_path)
    await db.initialize()
    try:
        await ConversationStore(SQLiteStorage(db), key=config.storage.session_key).clear()
    finally:
        await db.close()
    print("Conversation history cleared.")


async def _chat(config: AppConfig) -> None:
    app = AssistantApp(config)
    try:
        session = await app.start()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        await app.stop()
        sys.exit(1)

    for message in session.messages:
        print(f"[{message.role}] {message.content}\n")

    try:
        while True:
            text = (await asyncio.to_thread(input, "> ")).strip()
            if not text:
                continue
            if text.lower() in ("/exit", "/quit"):
                break
            if text.lower() == "/reset":
                await session.clear()
                print(f"[model] {session.messages[-1].content}\n")
                continue
            try:
                await session.send_message(text)
            except MissingTenantError:
                print("Error: no tenant selected. Use --tenant or set tenant_id.", file=sys.stderr)
                continue
            print(f"\n[model] {session.messages[-1].content}\n")
    except EOFError:
        pass
    finally:
        await app.stop()


if __name__ == "__main__":
    main()
