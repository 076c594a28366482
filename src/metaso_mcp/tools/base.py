"""Tool protocol and data types.

Defines the ``Tool`` protocol that every Metaso pipeline satisfies,
plus the static definition and the caller-facing response envelope.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class ToolDefinition:
    """Discovery record for a tool: name, description and JSON Schema."""

    name: str
    description: str
    input_schema: dict[str, Any]


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Envelope returned for every call, success or failure."""

    payload: dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def success(cls, payload: dict[str, Any]) -> ToolResponse:
        return cls(payload=payload)

    @classmethod
    def failure(cls, message: str) -> ToolResponse:
        return cls(payload={"error": message}, is_error=True)

    @property
    def error(self) -> str | None:
        if not self.is_error:
            return None
        return str(self.payload.get("error", ""))

    def to_json(self) -> str:
        return json.dumps(self.payload, indent=2, ensure_ascii=False)


@runtime_checkable
class Tool(Protocol):
    """Protocol that all tool pipelines must satisfy."""

    @property
    def definition(self) -> ToolDefinition:
        """Static discovery record."""
        ...

    @property
    def fallback_error(self) -> str:
        """Message used when a failure carries no message of its own."""
        ...

    async def run(self, arguments: Any) -> dict[str, Any]:
        """Validate, call upstream and format.

        Raises:
            MetasoError: On validation, safety or upstream failure.
        """
        ...
