"""metaso_chat: search-augmented question answering."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from metaso_mcp.tools.base import ToolDefinition
from metaso_mcp.tools.formatters import format_chat_response
from metaso_mcp.tools.payloads import build_chat_payload
from metaso_mcp.tools.requests import (
    MAX_QUERY_LENGTH,
    ChatRequest,
    ToolKind,
    validate_arguments,
)

if TYPE_CHECKING:
    from metaso_mcp.upstream.client import MetasoHttpClient

CHAT_TOOL = ToolDefinition(
    name="metaso_chat",
    description=(
        "Chat with Metaso AI assistant. Get intelligent responses based on "
        "search-enhanced AI models. Supports multiple models and output formats."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Question or prompt for the AI assistant",
                "minLength": 1,
                "maxLength": MAX_QUERY_LENGTH,
            },
            "model": {
                "type": "string",
                "enum": ["fast", "fast_thinking", "ds-r1"],
                "default": "fast",
                "description": "AI model to use for the response",
            },
            "scope": {
                "type": "string",
                "enum": ["document", "scholar", "video", "podcast"],
                "description": "Search scope for enhanced responses (webpage is default)",
            },
            "format": {
                "type": "string",
                "enum": ["chat_completions", "simple"],
                "default": "chat_completions",
                "description": "Response format",
            },
            "stream": {
                "type": "boolean",
                "default": False,
                "description": "Enable streaming output (for compatible formats)",
            },
        },
        "required": ["query"],
    },
)


class ChatTool:
    """Implements the :class:`Tool` protocol for ``metaso_chat``."""

    fallback_error = "An unexpected error occurred during AI chat."

    def __init__(self, client: MetasoHttpClient) -> None:
        self._client = client

    @property
    def definition(self) -> ToolDefinition:
        return CHAT_TOOL

    async def run(self, arguments: Any) -> dict[str, Any]:
        request = validate_arguments(ToolKind.CHAT, arguments)
        assert isinstance(request, ChatRequest)

        payload = build_chat_payload(request)
        body = await self._client.send(
            payload.method, payload.path, payload.body, payload.headers
        )
        return format_chat_response(body, request)
