"""Currently selected tenant."""

from __future__ import annotations

from venti_assistant.log import get_logger

logger = get_logger(__name__)


class MissingTenantError(RuntimeError):
    """No tenant is selected; no tenant-scoped work can run."""


class TenantContext:
    """Holds the tenant the assistant operates on."""

    def __init__(self, tenant_id: str | None = None) -> None:
        self._tenant_id = tenant_id or None

    @property
    def tenant_id(self) -> str | None:
        return self._tenant_id

    def select(self, tenant_id: str) -> None:
        if not tenant_id:
            raise ValueError("tenant_id must be a non-empty string")
        self._tenant_id = tenant_id
        logger.info("tenant_selected", tenant_id=tenant_id)

    def clear(self) -> None:
        self._tenant_id = None

    def require_tenant_id(self) -> str:
        if not self._tenant_id:
            raise MissingTenantError("Tenant not selected")
        return self._tenant_id
