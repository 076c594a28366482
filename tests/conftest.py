"""Shared test fixtures for metaso-mcp."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from metaso_mcp.config.schema import Config
from metaso_mcp.upstream.client import MetasoHttpClient

if TYPE_CHECKING:
    from collections.abc import Callable

TEST_API_KEY = "mk-ABCDEFGHIJKLMNOPQRSTUVWXYZ012345"
TEST_BASE_URL = "https://metaso.test"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class MockUpstream:
    """Scripted upstream: returns queued responses and records requests."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def queue(self, *responses: httpx.Response | Exception) -> None:
        self._responses.extend(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            msg = f"Unexpected request: {request.method} {request.url}"
            raise AssertionError(msg)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


@pytest.fixture
def config() -> Config:
    return Config(api_key=TEST_API_KEY, base_url=TEST_BASE_URL)


@pytest.fixture
def debug_config() -> Config:
    return Config(api_key=TEST_API_KEY, base_url=TEST_BASE_URL, debug=True)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def upstream() -> MockUpstream:
    return MockUpstream()


@pytest.fixture
def make_client(
    config: Config, sleep: RecordingSleep, upstream: MockUpstream
) -> Callable[..., MetasoHttpClient]:
    """Factory for a client wired to the ``upstream`` mock and ``sleep``."""

    def _make(cfg: Config | None = None) -> MetasoHttpClient:
        return MetasoHttpClient(
            cfg or config,
            transport=httpx.MockTransport(upstream),
            sleep=sleep,
        )

    return _make


@pytest.fixture
async def client(make_client: Callable[..., MetasoHttpClient]) -> MetasoHttpClient:  # type: ignore[misc]
    c = make_client()
    yield c
    await c.aclose()
