"""Sales tools: aggregated revenue over a period."""

from __future__ import annotations

from typing import Any

import aiosqlite

from venti_assistant.ai.tools.base import Tool

SALES_PERIODS = ["today", "yesterday", "this_week", "this_month", "last_month"]


class SalesStatsTool(Tool):
    """Total sales and order count, excluding cancelled and refunded orders."""

    @property
    def name(self) -> str:
        return "get_sales_stats"

    @property
    def description(self) -> str:
        return "Get sales statistics for a specific period of time."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "startDate": {"type": "string", "description": "ISO date string (YYYY-MM-DD)"},
                "endDate": {"type": "string", "description": "ISO date string (YYYY-MM-DD)"},
                "category": {
                    "type": "string",
                    "description": "Optional category name to filter sales",
                },
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        start_date = kwargs.get("startDate")
        end_date = kwargs.get("endDate")
        try:
            rows = await self.repo.sales_orders(
                tenant_id,
                start_date=start_date,
                end_date=end_date,
                category=kwargs.get("category"),
            )
        except (aiosqlite.Error, ValueError) as e:
            return {"error": str(e)}

        total = sum(row["total_amount"] or 0 for row in rows)
        return {
            "total_sales": round(total, 2),
            "count": len(rows),
            "period": f"{start_date or 'all'} to {end_date or 'now'}",
        }


class SalesMetricsTool(Tool):
    """Placeholder until period aggregation lands."""

    @property
    def name(self) -> str:
        return "get_sales_metrics"

    @property
    def description(self) -> str:
        return (
            "Obtiene métricas de ventas agregadas (ingresos totales, número de órdenes) "
            "para un periodo de tiempo. Útil para responder \"cuánto vendimos ayer\" "
            "o \"comparativa de este mes\"."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "period": {
                    "type": "string",
                    "enum": SALES_PERIODS,
                    "description": "El periodo de tiempo a consultar",
                },
            },
            "required": ["period"],
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        return {"message": f"Calculating metrics for {kwargs['period']}... Feature coming soon."}
