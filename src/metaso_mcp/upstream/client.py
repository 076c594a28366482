"""Authenticated HTTP client for the Metaso API with retry and error mapping."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from metaso_mcp.core.errors import (
    NetworkError,
    RequestSetupError,
    classify_status,
)
from metaso_mcp.core.retry import RetryConfig, retry_with_backoff

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from metaso_mcp.config.schema import Config

logger = logging.getLogger(__name__)


def mask_api_key(api_key: str) -> str:
    """Mask an API key for logging, keeping the first and last 3 chars."""
    if len(api_key) <= 8:
        return "*" * len(api_key)
    return f"{api_key[:3]}{'*' * (len(api_key) - 6)}{api_key[-3:]}"


def mask_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers with the bearer token masked."""
    masked = dict(headers)
    for key, value in masked.items():
        if key.lower() != "authorization":
            continue
        scheme, _, token = value.partition(" ")
        if token:
            masked[key] = f"{scheme} {mask_api_key(token)}"
    return masked


class MetasoHttpClient:
    """Client for the Metaso REST API.

    Every request carries ``Authorization: Bearer <api_key>``. Failed
    attempts are retried per :class:`RetryConfig` and surfaced as the
    :mod:`metaso_mcp.core.errors` upstream taxonomy.

    Usage::

        async with MetasoHttpClient(config) as client:
            body = await client.post("/api/v1/search", {"q": "python"})
    """

    def __init__(
        self,
        config: Config,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        retry: RetryConfig | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._retry = retry or RetryConfig()
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=config.base_url.rstrip("/"),
            timeout=config.timeout,
            transport=transport,
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Bearer {config.api_key}",
            },
            event_hooks={
                "request": [self._log_request],
                "response": [self._log_response],
            },
        )

    async def __aenter__(self) -> MetasoHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- Logging hooks ---------------------------------------------------------

    async def _log_request(self, request: httpx.Request) -> None:
        if self._config.debug:
            logger.debug(
                "HTTP request: %s %s headers=%s",
                request.method,
                request.url,
                mask_headers(request.headers),
            )

    async def _log_response(self, response: httpx.Response) -> None:
        if self._config.debug:
            logger.debug(
                "HTTP response: %s %s %s",
                response.status_code,
                response.reason_phrase,
                response.request.url,
            )

    def _log_status_error(self, request: httpx.Request, response: httpx.Response) -> None:
        logger.warning(
            "HTTP error: %s %s - %s %s",
            request.method,
            request.url,
            response.status_code,
            response.reason_phrase,
        )
        if self._config.debug and response.content:
            logger.debug("Error response body: %s", response.text)

    def _on_retry(self, attempt: int, delay: float, error: Exception) -> None:
        if self._config.debug:
            logger.debug(
                "Attempt %d failed (%s), retrying in %dms...",
                attempt,
                error,
                int(delay * 1000),
            )

    # -- Requests --------------------------------------------------------------

    async def send(
        self,
        method: str,
        path: str,
        payload: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a request, retrying transient failures.

        Returns:
            The decoded JSON body, or the raw text for non-JSON responses.

        Raises:
            UpstreamStatusError: Non-2xx response (subclassed by status).
            NetworkError: The server could not be reached.
            RequestSetupError: The request could not be built.
        """
        return await retry_with_backoff(
            lambda: self._send_once(method, path, payload, headers),
            self._retry,
            sleep=self._sleep,
            on_retry=self._on_retry,
        )

    async def post(
        self,
        path: str,
        payload: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return await self.send("POST", path, payload, headers)

    async def get(self, path: str, headers: Mapping[str, str] | None = None) -> Any:
        return await self.send("GET", path, None, headers)

    async def _send_once(
        self,
        method: str,
        path: str,
        payload: Any,
        headers: Mapping[str, str] | None,
    ) -> Any:
        try:
            request = self._client.build_request(
                method,
                path,
                json=payload,
                headers=dict(headers) if headers else None,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            logger.error("Request setup failed: %s %s: %s", method, path, e)
            raise RequestSetupError(str(e)) from e

        try:
            response = await self._client.send(request)
        except httpx.UnsupportedProtocol as e:
            raise RequestSetupError(str(e)) from e
        except httpx.TransportError as e:
            logger.warning("Network error: %s %s: %s", method, request.url, e)
            raise NetworkError(str(e)) from e
        except httpx.RequestError as e:
            # Body decoding and redirect failures after the server answered.
            logger.warning("Request failed: %s %s: %s", method, request.url, e)
            raise NetworkError(str(e)) from e

        if not response.is_success:
            self._log_status_error(request, response)
            raise classify_status(response.status_code, response.reason_phrase)

        return _parse_body(response)


def _parse_body(response: httpx.Response) -> Any:
    """Decode JSON responses, fall back to text."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text

