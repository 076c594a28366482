"""metaso_search: web, document, scholar and media search."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from metaso_mcp.tools.base import ToolDefinition
from metaso_mcp.tools.formatters import format_search_response
from metaso_mcp.tools.payloads import build_search_payload
from metaso_mcp.tools.requests import (
    MAX_PAGE,
    MAX_QUERY_LENGTH,
    MAX_SIZE,
    SearchRequest,
    ToolKind,
    validate_arguments,
)

if TYPE_CHECKING:
    from metaso_mcp.upstream.client import MetasoHttpClient

logger = logging.getLogger(__name__)

SEARCH_TOOL = ToolDefinition(
    name="metaso_search",
    description=(
        "Search the internet using Metaso AI search engine. Supports multiple "
        "search scopes including webpages, documents, academic papers, images, "
        "videos, and podcasts."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query content",
                "minLength": 1,
                "maxLength": MAX_QUERY_LENGTH,
            },
            "scope": {
                "type": "string",
                "enum": ["webpage", "document", "scholar", "image", "video", "podcast"],
                "default": "webpage",
                "description": "Search scope/domain",
            },
            "page": {
                "type": "number",
                "minimum": 1,
                "maximum": MAX_PAGE,
                "description": "Page number for pagination (mutually exclusive with size)",
            },
            "size": {
                "type": "number",
                "minimum": 1,
                "maximum": MAX_SIZE,
                "description": "Number of results to return (mutually exclusive with page)",
            },
            "include_summary": {
                "type": "boolean",
                "default": True,
                "description": "Whether to include AI-generated summary",
            },
            "include_row_content": {
                "type": "boolean",
                "default": False,
                "description": "Whether to include raw webpage content",
            },
        },
        "required": ["query"],
        "not": {
            "allOf": [
                {"required": ["page"]},
                {"required": ["size"]},
            ]
        },
    },
)


class SearchTool:
    """Implements the :class:`Tool` protocol for ``metaso_search``."""

    fallback_error = "An unexpected error occurred during search."

    def __init__(self, client: MetasoHttpClient) -> None:
        self._client = client

    @property
    def definition(self) -> ToolDefinition:
        return SEARCH_TOOL

    async def run(self, arguments: Any) -> dict[str, Any]:
        request = validate_arguments(ToolKind.SEARCH, arguments)
        assert isinstance(request, SearchRequest)

        payload = build_search_payload(request)
        logger.debug("Searching %r (scope=%s)", request.query, request.scope)
        body = await self._client.send(
            payload.method, payload.path, payload.body, payload.headers
        )
        return format_search_response(body, request)
