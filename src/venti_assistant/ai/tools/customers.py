"""Customer segmentation tool (not yet backed by data)."""

from __future__ import annotations

from typing import Any

from venti_assistant.ai.tools.base import Tool

CUSTOMER_SEGMENTS = ["VIP", "Loyal", "Repeat", "New", "Prospect"]


class CustomerSegmentTool(Tool):
    @property
    def name(self) -> str:
        return "analyze_customer_segment"

    @property
    def description(self) -> str:
        return (
            "Busca clientes por segmento (VIP, Loyal, Repeat, New) o por correo. "
            "Útil para \"¿Quiénes son mis clientes VIP?\" o "
            "\"¿Cuándo fue la última compra de este cliente?\""
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "segment": {
                    "type": "string",
                    "enum": CUSTOMER_SEGMENTS,
                    "description": "El segmento de clientes a filtrar",
                },
                "email": {
                    "type": "string",
                    "description": "Email opcional para buscar un cliente específico",
                },
            },
        }

    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        segment = kwargs.get("segment") or "all"
        return {"message": f"Analyzing segment {segment}... Feature coming soon."}
