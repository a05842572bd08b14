"""Audit log tool (not yet backed by data)."""

from __future__ import annotations

from typing import Any

from venti_assistant.ai.tools.base import Tool


class RecentAuditLogsTool(Tool):
    @property
    def name(self) -> str:
        return "get_recent_audit_logs"

    @property
    def description(self) -> str:
        return (
            "Consulta los últimos cambios importantes en la plataforma (creación de productos, "
            "cambios de precios, reembolsos). Útil para auditoría técnica."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "resourceType": {
                    "type": "string",
                    "description": "Filtrar por tipo de recurso: product, order, tenant, payment",
                },
                "limit": {"type": "number", "description": "Número de registros a traer"},
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        return {"message": "Checking audit logs... Feature coming soon."}
