"""Product catalogue and stock tools."""

from __future__ import annotations

from typing import Any

import aiosqlite

from venti_assistant.ai.tools.base import Tool


class ProductsTool(Tool):
    @property
    def name(self) -> str:
        return "get_products"

    @property
    def description(self) -> str:
        return "Get product information including stock levels and prices."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "search": {"type": "string", "description": "Product name or SKU"},
                "lowStock": {
                    "type": "boolean",
                    "description": "If true, only returns products with low stock",
                },
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        try:
            return await self.repo.list_products(
                tenant_id,
                search=kwargs.get("search"),
                low_stock=bool(kwargs.get("lowStock", False)),
            )
        except aiosqlite.Error as e:
            return {"error": str(e)}


class InventoryAlertsTool(Tool):
    """Products that are sold out or below the low-stock threshold."""

    @property
    def name(self) -> str:
        return "get_inventory_alerts"

    @property
    def description(self) -> str:
        return (
            "Lista los productos que están agotados o por debajo del umbral de stock bajo. "
            "Responde a \"¿Qué productos debo reponer?\""
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "onlyOutOfStock": {
                    "type": "boolean",
                    "description": "Si es true, solo muestra los que tienen stock 0",
                },
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        try:
            return await self.repo.inventory_alerts(
                tenant_id, only_out_of_stock=bool(kwargs.get("onlyOutOfStock", False))
            )
        except aiosqlite.Error as e:
            return {"error": str(e)}


class ProductPerformanceTool(Tool):
    @property
    def name(self) -> str:
        return "get_product_performance"

    @property
    def description(self) -> str:
        return (
            "Identifica los productos más vendidos (top sellers) y los que generan más "
            "ingresos en los últimos 30 días."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "number",
                    "description": "Cantidad de productos a mostrar (defecto 5)",
                },
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        # TODO: rank by order_items revenue once the analytics views are exposed
        return {"message": "Identifying top performers... Feature coming soon."}
