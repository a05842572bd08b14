"""Order lookup tools."""

from __future__ import annotations

from typing import Any

import aiosqlite

from venti_assistant.ai.tools.base import Tool

ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "cancelled", "refunded"]


class OrdersTool(Tool):
    """Latest orders, optionally filtered by status, customer and start date."""

    @property
    def name(self) -> str:
        return "get_orders"

    @property
    def description(self) -> str:
        return "Get orders by status, customer name or date range."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "status": {
                    "type": "string",
                    "enum": ORDER_STATUSES,
                    "description": "Order status (pending, processing, shipped, delivered, cancelled, refunded)",
                },
                "customerName": {"type": "string", "description": "Name of the customer"},
                "startDate": {"type": "string", "description": "ISO date string"},
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        try:
            return await self.repo.list_orders(
                tenant_id,
                status=kwargs.get("status"),
                customer_name=kwargs.get("customerName"),
                start_date=kwargs.get("startDate"),
            )
        except aiosqlite.Error as e:
            return {"error": str(e)}


class OrderDetailsTool(Tool):
    @property
    def name(self) -> str:
        return "get_order_details"

    @property
    def description(self) -> str:
        return (
            "Obtiene toda la información detallada de una orden específica, incluyendo "
            "productos comprados, estado de pago y datos de envío."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "orderNumber": {
                    "type": "string",
                    "description": "El número de orden (ej: STORE-2024-0001)",
                },
            },
            "required": ["orderNumber"],
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        order_number = kwargs["orderNumber"]
        try:
            order = await self.repo.get_order(tenant_id, order_number)
        except aiosqlite.Error as e:
            return {"error": str(e)}
        if order is None:
            return {"error": f"Order {order_number} not found"}
        return order
