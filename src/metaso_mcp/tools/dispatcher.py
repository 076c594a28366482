"""Tool dispatcher: routes a call to its pipeline and builds the envelope.

The dispatcher is the boundary where failures become values. Whatever
happens inside a pipeline, callers get a :class:`ToolResponse`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from metaso_mcp.core.errors import MetasoError, UnknownToolError
from metaso_mcp.tools.base import ToolDefinition, ToolResponse
from metaso_mcp.tools.chat import ChatTool
from metaso_mcp.tools.reader import ReaderTool
from metaso_mcp.tools.search import SearchTool
from metaso_mcp.upstream.client import MetasoHttpClient

if TYPE_CHECKING:
    from metaso_mcp.config.schema import Config
    from metaso_mcp.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Registry of the Metaso tools plus call dispatch.

    Tools are registered in discovery order: search, reader, chat.
    """

    def __init__(self, config: Config, *, client: MetasoHttpClient | None = None) -> None:
        self._config = config
        self._client = client or MetasoHttpClient(config)
        self._tools: dict[str, Tool] = {}
        for tool in (
            SearchTool(self._client),
            ReaderTool(self._client),
            ChatTool(self._client),
        ):
            self.register(tool)

    @property
    def client(self) -> MetasoHttpClient:
        return self._client

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        name = tool.definition.name
        if name in self._tools:
            msg = f"Tool already registered: {name}"
            raise ValueError(msg)
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        """Get a tool by name.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        if name not in self._tools:
            raise UnknownToolError(name)
        return self._tools[name]

    def list_definitions(self) -> list[ToolDefinition]:
        return [t.definition for t in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    async def dispatch(self, name: str, arguments: Any) -> ToolResponse:
        """Run a tool call and reduce the outcome to an envelope.

        Unknown tools, validation failures, unsafe URLs and upstream
        errors all come back as ``ToolResponse(is_error=True)``.
        """
        try:
            tool = self.get(name)
        except UnknownToolError as exc:
            logger.warning("%s", exc)
            return ToolResponse.failure(str(exc))

        logger.debug("Calling %s", name)
        try:
            payload = await tool.run(arguments)
        except MetasoError as exc:
            logger.warning("%s failed: %s", name, exc)
            return ToolResponse.failure(str(exc) or tool.fallback_error)
        except Exception as exc:
            logger.exception("Unexpected error in %s", name)
            return ToolResponse.failure(str(exc) or tool.fallback_error)
        return ToolResponse.success(payload)

    async def aclose(self) -> None:
        await self._client.aclose()
