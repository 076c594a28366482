"""metaso_reader: fetch a web page's content as markdown or JSON."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from metaso_mcp.core.errors import UnsafeURLError
from metaso_mcp.core.safety import is_safe
from metaso_mcp.tools.base import ToolDefinition
from metaso_mcp.tools.formatters import format_reader_response
from metaso_mcp.tools.payloads import build_reader_payload
from metaso_mcp.tools.requests import ReaderRequest, ToolKind, validate_arguments

if TYPE_CHECKING:
    from metaso_mcp.upstream.client import MetasoHttpClient

logger = logging.getLogger(__name__)

READER_TOOL = ToolDefinition(
    name="metaso_reader",
    description=(
        "Read and extract content from web pages using Metaso API. Returns the "
        "full text content of the specified webpage in markdown or JSON format."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "url": {
                "type": "string",
                "format": "uri",
                "description": "URL of the webpage to read",
                "pattern": "^https?://",
            },
            "format": {
                "type": "string",
                "enum": ["markdown", "json"],
                "default": "markdown",
                "description": "Format of the returned content",
            },
        },
        "required": ["url"],
    },
)


class ReaderTool:
    """Implements the :class:`Tool` protocol for ``metaso_reader``.

    Unlike search, an unsafe target URL fails the whole call.
    """

    fallback_error = "An unexpected error occurred while reading the webpage."

    def __init__(self, client: MetasoHttpClient) -> None:
        self._client = client

    @property
    def definition(self) -> ToolDefinition:
        return READER_TOOL

    async def run(self, arguments: Any) -> dict[str, Any]:
        request = validate_arguments(ToolKind.READER, arguments)
        assert isinstance(request, ReaderRequest)

        if not is_safe(request.url):
            raise UnsafeURLError(request.url)

        payload = build_reader_payload(request)
        logger.debug("Reading %s as %s", request.url, request.format)
        body = await self._client.send(
            payload.method, payload.path, payload.body, payload.headers
        )
        return format_reader_response(body, request)
