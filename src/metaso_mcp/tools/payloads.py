"""Mapping from validated requests to Metaso wire payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from metaso_mcp.tools.requests import ChatRequest, ReaderRequest, SearchRequest

SEARCH_PATH = "/api/v1/search"
READER_PATH = "/api/v1/reader"
CHAT_PATH = "/api/v1/chat/completions"

_READER_ACCEPT = {
    "markdown": "text/plain",
    "json": "application/json",
}


@dataclass(frozen=True, slots=True)
class UpstreamPayload:
    """One outbound call: endpoint path, JSON body and extra headers."""

    path: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    method: str = "POST"


def build_search_payload(request: SearchRequest) -> UpstreamPayload:
    body: dict[str, Any] = {
        "q": request.query,
        "scope": request.scope,
        "includeSummary": request.include_summary,
        "includeRowContent": request.include_row_content,
    }
    # page and size are mutually exclusive upstream; page wins.
    if request.page is not None:
        body["page"] = request.page
    elif request.size is not None:
        body["size"] = request.size
    return UpstreamPayload(SEARCH_PATH, body)


def build_reader_payload(request: ReaderRequest) -> UpstreamPayload:
    return UpstreamPayload(
        READER_PATH,
        {"url": request.url},
        headers={"Accept": _READER_ACCEPT[request.format]},
    )


def build_chat_payload(request: ChatRequest) -> UpstreamPayload:
    """Build either the ``simple`` or the ``chat_completions`` body."""
    body: dict[str, Any]
    if request.format == "simple":
        body = {
            "q": request.query,
            "model": request.model,
            "format": "simple",
        }
    else:
        body = {
            "model": request.model,
            "stream": request.stream,
            "messages": [{"role": "user", "content": request.query}],
        }
    # webpage is the implicit upstream default, so scope is only sent when set
    if request.scope is not None:
        body["scope"] = request.scope
    return UpstreamPayload(CHAT_PATH, body)
