"""Reshape raw upstream bodies into caller-facing tool responses."""

from __future__ import annotations

from typing import Any

from metaso_mcp.core.safety import is_safe
from metaso_mcp.tools.requests import ChatRequest, ReaderRequest, SearchRequest

MAX_CONTENT_LENGTH = 1_000_000
TRUNCATION_MARKER = "\n\n[Content truncated due to length...]"


def truncate_content(content: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def _as_object(body: Any) -> dict[str, Any]:
    if isinstance(body, dict):
        return dict(body)
    return {"content": body}


def _is_safe_result(result: Any) -> bool:
    if not isinstance(result, dict):
        return True
    url = result.get("url")
    return not url or is_safe(str(url))


def format_search_response(body: Any, request: SearchRequest) -> dict[str, Any]:
    """Drop results pointing at unsafe URLs and echo a non-default scope."""
    response = _as_object(body)
    results = response.get("results")
    if isinstance(results, list):
        response["results"] = [r for r in results if _is_safe_result(r)]
    if request.scope != "webpage":
        response["scope"] = request.scope
    return response


def format_reader_response(body: Any, request: ReaderRequest) -> dict[str, Any]:
    """Wrap plain-text bodies and cap content length."""
    if isinstance(body, str):
        return {"content": truncate_content(body), "url": request.url}

    response = _as_object(body)
    response["url"] = request.url
    content = response.get("content")
    if isinstance(content, str):
        response["content"] = truncate_content(content)
    return response


def format_chat_response(body: Any, request: ChatRequest) -> dict[str, Any]:
    response = _as_object(body)
    if request.format == "simple":
        return response
    if not response.get("model"):
        response["model"] = request.model
    return response
