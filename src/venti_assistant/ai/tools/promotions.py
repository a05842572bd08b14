"""Discount code tool."""

from __future__ import annotations

from typing import Any

import aiosqlite

from venti_assistant.ai.tools.base import Tool


class ActivePromotionsTool(Tool):
    @property
    def name(self) -> str:
        return "get_active_promotions"

    @property
    def description(self) -> str:
        return "Lista los códigos de descuento activos, su validez y cuántas veces se han usado."

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        try:
            return await self.repo.active_discounts(tenant_id)
        except aiosqlite.Error as e:
            return {"error": str(e)}
