"""Abstract tool interface for model function calling."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from venti_assistant.storage.tenant_repo import TenantDataRepository

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "array": (list,),
    "object": (dict,),
}


class ArgumentError(ValueError):
    """Raised when tool arguments do not satisfy the declared schema."""


@dataclass
class ToolResult:
    """Outcome of one tool call. ``payload`` is domain data or ``{"error": ...}``."""

    name: str
    payload: Any
    call_id: str = ""

    @property
    def is_error(self) -> bool:
        return isinstance(self.payload, dict) and "error" in self.payload


def validate_arguments(schema: dict[str, Any], args: dict[str, Any]) -> dict[str, Any]:
    """Check *args* against an object schema and return the accepted subset.

    Unknown keys are dropped. ``None`` values are treated as omitted.
    """
    if not isinstance(args, dict):
        raise ArgumentError("arguments must be an object")

    properties: dict[str, Any] = schema.get("properties", {})
    accepted: dict[str, Any] = {}
    for key, value in args.items():
        spec = properties.get(key)
        if spec is None or value is None:
            continue
        expected = _JSON_TYPES.get(spec.get("type", ""), ())
        # bool is an int subclass; never accept it for numeric fields
        if expected and (not isinstance(value, expected) or (isinstance(value, bool) and bool not in expected)):
            raise ArgumentError(f"'{key}' must be of type {spec['type']}")
        if "enum" in spec and value not in spec["enum"]:
            raise ArgumentError(f"'{key}' must be one of {', '.join(map(str, spec['enum']))}")
        accepted[key] = value

    missing = [k for k in schema.get("required", []) if k not in accepted]
    if missing:
        raise ArgumentError(f"missing required argument(s): {', '.join(missing)}")
    return accepted


class Tool(ABC):
    """Base class for all model-callable tools.

    A tool carries both its declaration (what the model sees) and its
    handler, so the advertised set and the dispatch table cannot drift apart.
    """

    def __init__(self, repo: TenantDataRepository | None = None) -> None:
        self._repo = repo

    @property
    def repo(self) -> TenantDataRepository:
        if self._repo is None:
            raise RuntimeError(f"Tool '{self.name}' has no data repository")
        return self._repo

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name sent to the model."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Natural-language description the model uses to judge relevance."""
        ...

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON-schema-like dict describing accepted parameters."""
        return {"type": "object", "properties": {}}

    @abstractmethod
    async def execute(self, tenant_id: str, **kwargs: Any) -> Any:
        """Run a tenant-scoped, read-only query and return a JSON-able payload."""
        ...

    def to_declaration(self) -> dict[str, Any]:
        """Serialize to the function declaration advertised to the model."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.input_schema,
        }
