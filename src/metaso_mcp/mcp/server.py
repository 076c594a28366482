"""MCP server exposing the Metaso tools over stdio."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, TextContent, Tool

from metaso_mcp import __version__
from metaso_mcp.tools.dispatcher import ToolDispatcher
from metaso_mcp.upstream.client import MetasoHttpClient

if TYPE_CHECKING:
    from metaso_mcp.config.schema import Config
    from metaso_mcp.tools.base import ToolResponse

logger = logging.getLogger(__name__)

SERVER_NAME = "metaso-mcp-server"


def _get_tools(dispatcher: ToolDispatcher) -> list[Tool]:
    """Convert tool definitions to MCP tools, in discovery order."""
    return [
        Tool(
            name=d.name,
            description=d.description,
            inputSchema=d.input_schema,
        )
        for d in dispatcher.list_definitions()
    ]


def _to_result(response: ToolResponse) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=response.to_json())],
        isError=response.is_error,
    )


async def call_tool(
    dispatcher: ToolDispatcher, name: str, arguments: dict[str, Any] | None
) -> CallToolResult:
    """Handle a tool call."""
    response = await dispatcher.dispatch(name, arguments)
    return _to_result(response)


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server bound to the given dispatcher."""
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
    async def list_tools() -> list[Tool]:
        return _get_tools(dispatcher)

    # The dispatcher validates arguments itself and reports every violation.
    @server.call_tool(validate_input=False)  # type: ignore[untyped-decorator]
    async def handle_call_tool(name: str, arguments: dict) -> CallToolResult:  # type: ignore[type-arg]
        return await call_tool(dispatcher, name, arguments)

    return server


async def run_server(config: Config) -> None:
    """Start the MCP server on stdio."""
    async with MetasoHttpClient(config) as client:
        dispatcher = ToolDispatcher(config, client=client)
        server = create_server(dispatcher)
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Metaso MCP Server started")
            logger.info("Available tools: %s", ", ".join(dispatcher.list_names()))
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    logger.info("Metaso MCP Server stopped")
