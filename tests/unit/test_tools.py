"""Tests for the search, reader and chat pipelines."""

from __future__ import annotations

import httpx
import pytest

from metaso_mcp.core.errors import (
    ServiceUnavailableError,
    ToolValidationError,
    UnsafeURLError,
    UpstreamStatusError,
)
from metaso_mcp.tools.base import Tool
from metaso_mcp.tools.chat import CHAT_TOOL, ChatTool
from metaso_mcp.tools.formatters import MAX_CONTENT_LENGTH, TRUNCATION_MARKER
from metaso_mcp.tools.reader import READER_TOOL, ReaderTool
from metaso_mcp.tools.search import SEARCH_TOOL, SearchTool

# ── Definitions ──────────────────────────────────────────────────


class TestDefinitions:
    def test_implement_tool_protocol(self, client):
        for tool in (SearchTool(client), ReaderTool(client), ChatTool(client)):
            assert isinstance(tool, Tool)
            assert tool.fallback_error

    def test_names(self):
        assert [SEARCH_TOOL.name, READER_TOOL.name, CHAT_TOOL.name] == [
            "metaso_search",
            "metaso_reader",
            "metaso_chat",
        ]

    def test_search_schema(self):
        schema = SEARCH_TOOL.input_schema
        assert schema["required"] == ["query"]
        props = schema["properties"]
        assert props["query"]["maxLength"] == 1000
        assert props["scope"]["default"] == "webpage"
        assert props["page"]["maximum"] == 100
        assert props["size"]["maximum"] == 50
        assert props["include_summary"]["default"] is True
        assert props["include_row_content"]["default"] is False
        assert schema["not"] == {"allOf": [{"required": ["page"]}, {"required": ["size"]}]}

    def test_reader_schema(self):
        schema = READER_TOOL.input_schema
        assert schema["required"] == ["url"]
        assert schema["properties"]["format"]["enum"] == ["markdown", "json"]
        assert schema["properties"]["format"]["default"] == "markdown"

    def test_chat_schema(self):
        props = CHAT_TOOL.input_schema["properties"]
        assert props["model"]["enum"] == ["fast", "fast_thinking", "ds-r1"]
        assert props["model"]["default"] == "fast"
        assert props["format"]["default"] == "chat_completions"
        assert props["stream"]["default"] is False
        assert "default" not in props["scope"]


# ── Search ───────────────────────────────────────────────────────


class TestSearchTool:
    async def test_search(self, client, upstream):
        upstream.queue(
            httpx.Response(
                200,
                json={
                    "results": [
                        {"title": "Python", "url": "https://python.org"},
                        {"title": "Router", "url": "http://192.168.0.1/"},
                    ],
                    "total": 2,
                },
            )
        )
        result = await SearchTool(client).run({"query": "python", "size": 10})
        assert result == {"results": [{"title": "Python", "url": "https://python.org"}], "total": 2}
        assert upstream.requests[0].url.path == "/api/v1/search"
        assert upstream.body() == {
            "q": "python",
            "scope": "webpage",
            "includeSummary": True,
            "includeRowContent": False,
            "size": 10,
        }

    async def test_scope_echoed(self, client, upstream):
        upstream.queue(httpx.Response(200, json={"results": []}))
        result = await SearchTool(client).run({"query": "q", "scope": "podcast"})
        assert result["scope"] == "podcast"

    async def test_long_query_never_hits_network(self, client, upstream):
        with pytest.raises(ToolValidationError):
            await SearchTool(client).run({"query": "x" * 1001})
        assert upstream.calls == 0

    async def test_page_and_size_never_hit_network(self, client, upstream):
        with pytest.raises(ToolValidationError):
            await SearchTool(client).run({"query": "q", "page": 1, "size": 1})
        assert upstream.calls == 0

    async def test_upstream_error_propagates(self, client, upstream, sleep):
        upstream.queue(*(httpx.Response(503) for _ in range(3)))
        with pytest.raises(ServiceUnavailableError):
            await SearchTool(client).run({"query": "q"})
        assert sleep.delays == [1.0, 2.0]


# ── Reader ───────────────────────────────────────────────────────


class TestReaderTool:
    async def test_markdown(self, client, upstream):
        upstream.queue(httpx.Response(200, text="# Example\n\nHello"))
        result = await ReaderTool(client).run({"url": "https://example.com/post"})
        assert result == {"content": "# Example\n\nHello", "url": "https://example.com/post"}
        request = upstream.requests[0]
        assert request.url.path == "/api/v1/reader"
        assert request.headers["Accept"] == "text/plain"
        assert upstream.body() == {"url": "https://example.com/post"}

    async def test_json(self, client, upstream):
        upstream.queue(httpx.Response(200, json={"title": "Example", "content": "Hello"}))
        result = await ReaderTool(client).run({"url": "https://example.com", "format": "json"})
        assert result == {"title": "Example", "content": "Hello", "url": "https://example.com"}
        assert upstream.requests[0].headers["Accept"] == "application/json"

    async def test_json_truncated(self, client, upstream):
        upstream.queue(httpx.Response(200, json={"content": "z" * (MAX_CONTENT_LENGTH + 100)}))
        result = await ReaderTool(client).run({"url": "https://example.com", "format": "json"})
        assert result["content"] == "z" * MAX_CONTENT_LENGTH + TRUNCATION_MARKER

    @pytest.mark.parametrize(
        "url",
        [
            "http://127.0.0.1/",
            "http://10.1.2.3/secret",
            "http://192.168.1.1/",
            "http://172.16.5.4/",
            "http://10.1/admin",
            "http://0x7f.0.0.1/",
            "http://[::ffff:192.168.0.1]/",
        ],
    )
    async def test_unsafe_url_rejected_before_io(self, client, upstream, url):
        with pytest.raises(UnsafeURLError):
            await ReaderTool(client).run({"url": url})
        assert upstream.calls == 0

    async def test_localhost_rejected_before_io(self, client, upstream):
        with pytest.raises(ToolValidationError):
            await ReaderTool(client).run({"url": "http://localhost/"})
        assert upstream.calls == 0


# ── Chat ─────────────────────────────────────────────────────────


class TestChatTool:
    async def test_completions(self, client, upstream):
        upstream.queue(
            httpx.Response(
                200,
                json={
                    "id": "c1",
                    "choices": [{"index": 0, "message": {"role": "assistant", "content": "Hi"}}],
                },
            )
        )
        result = await ChatTool(client).run({"query": "hello", "model": "fast_thinking"})
        assert result["model"] == "fast_thinking"
        assert result["choices"][0]["message"]["content"] == "Hi"
        assert upstream.requests[0].url.path == "/api/v1/chat/completions"
        assert upstream.body() == {
            "model": "fast_thinking",
            "stream": False,
            "messages": [{"role": "user", "content": "hello"}],
        }

    async def test_simple_passthrough(self, client, upstream):
        mock = {"answer": "42", "sources": ["https://example.com"]}
        upstream.queue(httpx.Response(200, json=mock))
        result = await ChatTool(client).run({"query": "q", "format": "simple", "scope": "scholar"})
        assert result == mock
        assert upstream.body() == {"q": "q", "model": "fast", "format": "simple", "scope": "scholar"}

    async def test_not_found_not_retried(self, client, upstream, sleep):
        upstream.queue(httpx.Response(404))
        with pytest.raises(UpstreamStatusError):
            await ChatTool(client).run({"query": "q"})
        assert upstream.calls == 1
        assert sleep.delays == []
