"""Tool registry: the declared tool set and its dispatcher."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from venti_assistant.ai.tools.base import ArgumentError, Tool, ToolResult, validate_arguments
from venti_assistant.log import get_logger

if TYPE_CHECKING:
    from venti_assistant.storage.tenant_repo import TenantDataRepository

logger = get_logger(__name__)

UNKNOWN_TOOL_ERROR = "Unknown tool"
MISSING_TENANT_ERROR = "Tenant not selected"


class ToolRegistry:
    """Registry of available tools, keyed by name."""

    def __init__(self, repo: TenantDataRepository | None = None):
        self._tools: dict[str, Tool] = {}
        self._repo = repo

    def register(self, tool: Tool) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool_name=tool.name)

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def restrict_to(self, names: list[str]) -> None:
        """Keep only the named tools. Unknown names are logged and ignored."""
        for name in names:
            if name not in self._tools:
                logger.warning("tool_not_found", tool_name=name)
        self._tools = {n: t for n, t in self._tools.items() if n in names}

    def list_tools(self) -> list[dict[str, Any]]:
        """Declarations advertised to the model on every turn."""
        return [tool.to_declaration() for tool in self._tools.values()]

    async def execute(
        self, name: str, args: dict[str, Any] | None, tenant_id: str | None, call_id: str = ""
    ) -> ToolResult:
        """Dispatch one tool call. Never raises; failures become ``{"error": ...}`` payloads."""
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("unknown_tool", tool=name)
            return ToolResult(name=name, payload={"error": UNKNOWN_TOOL_ERROR}, call_id=call_id)

        if not tenant_id:
            logger.error("tool_without_tenant", tool=name)
            return ToolResult(name=name, payload={"error": MISSING_TENANT_ERROR}, call_id=call_id)

        try:
            kwargs = validate_arguments(tool.input_schema, args or {})
        except ArgumentError as e:
            logger.warning("tool_invalid_arguments", tool=name, error=str(e))
            return ToolResult(name=name, payload={"error": f"Invalid arguments: {e}"}, call_id=call_id)

        logger.info("tool_execute", tool=name, tenant_id=tenant_id)
        try:
            payload = await tool.execute(tenant_id, **kwargs)
        except Exception as e:
            logger.error("tool_execution_error", tool=name, error=str(e))
            payload = {"error": str(e) or type(e).__name__}
        return ToolResult(name=name, payload=payload, call_id=call_id)

    def discover_and_register(self) -> None:
        """Import and register all built-in tools."""
        from venti_assistant.ai.tools.audit import RecentAuditLogsTool
        from venti_assistant.ai.tools.customers import CustomerSegmentTool
        from venti_assistant.ai.tools.orders import OrderDetailsTool, OrdersTool
        from venti_assistant.ai.tools.products import (
            InventoryAlertsTool,
            ProductPerformanceTool,
            ProductsTool,
        )
        from venti_assistant.ai.tools.promotions import ActivePromotionsTool
        from venti_assistant.ai.tools.sales import SalesMetricsTool, SalesStatsTool

        for tool_cls in (
            SalesStatsTool,
            OrdersTool,
            ProductsTool,
            OrderDetailsTool,
            SalesMetricsTool,
            InventoryAlertsTool,
            ProductPerformanceTool,
            CustomerSegmentTool,
            ActivePromotionsTool,
            RecentAuditLogsTool,
        ):
            self.register(tool_cls(self._repo))
        logger.info("tools_registered", count=len(self._tools))
