"""Exception hierarchy for metaso-mcp.

Every module imports from here. The hierarchy is:

    MetasoError
    ├── ToolValidationError(violations)
    ├── UnsafeURLError(url)
    ├── UnknownToolError(name)
    ├── UpstreamError
    │   ├── NetworkError
    │   ├── RequestSetupError
    │   └── UpstreamStatusError(status, reason)
    │       ├── AuthenticationError       (401)
    │       ├── AuthorizationError        (403)
    │       ├── RateLimitError            (429)
    │       ├── ServerError               (500)
    │       └── ServiceUnavailableError   (502, 503, 504)
    └── ConfigError
"""

from __future__ import annotations

from dataclasses import dataclass


class MetasoError(Exception):
    """Base exception for all metaso-mcp errors."""


# ─── Caller Input Errors ──────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """A single rejected argument."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ToolValidationError(MetasoError):
    """Caller arguments failed validation. Carries every violated field."""

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        detail = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid arguments: {detail}")

    @property
    def fields(self) -> list[str]:
        return [v.field for v in self.violations]


class UnsafeURLError(MetasoError):
    """Target URL points at a loopback/private host or a non-HTTP scheme."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            "Invalid or unsafe URL. Only public HTTP/HTTPS URLs are allowed."
        )


class UnknownToolError(MetasoError):
    """No pipeline is registered under the requested tool name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


# ─── Upstream Errors ──────────────────────────────────────────


class UpstreamError(MetasoError):
    """Base for failures talking to the Metaso API."""


class NetworkError(UpstreamError):
    """The request never reached the server (connect failure, timeout)."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(
            "Network error: Unable to connect to Metaso API. "
            "Please check your internet connection."
        )


class RequestSetupError(UpstreamError):
    """The request could not be constructed."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Request setup error: {detail}")


class UpstreamStatusError(UpstreamError):
    """The server answered with a non-2xx status."""

    def __init__(self, status: int, reason: str = "", message: str | None = None) -> None:
        self.status = status
        self.reason = reason
        super().__init__(message or f"HTTP {status}: {reason}")


class AuthenticationError(UpstreamStatusError):
    """401: API key rejected."""

    def __init__(self, status: int = 401, reason: str = "Unauthorized") -> None:
        super().__init__(
            status, reason, "Authentication failed. Please check your API key."
        )


class AuthorizationError(UpstreamStatusError):
    """403: API key lacks permission."""

    def __init__(self, status: int = 403, reason: str = "Forbidden") -> None:
        super().__init__(
            status,
            reason,
            "Access forbidden. Your API key may not have the required permissions.",
        )


class RateLimitError(UpstreamStatusError):
    """429: Rate limit exceeded."""

    def __init__(self, status: int = 429, reason: str = "Too Many Requests") -> None:
        super().__init__(
            status, reason, "Rate limit exceeded. Please try again later."
        )


class ServerError(UpstreamStatusError):
    """500: Internal server error."""

    def __init__(self, status: int = 500, reason: str = "Internal Server Error") -> None:
        super().__init__(
            status, reason, "Internal server error. Please try again later."
        )


class ServiceUnavailableError(UpstreamStatusError):
    """502/503/504: Upstream temporarily unavailable."""

    def __init__(self, status: int = 503, reason: str = "Service Unavailable") -> None:
        super().__init__(
            status, reason, "Service temporarily unavailable. Please try again later."
        )


_STATUS_ERRORS: dict[int, type[UpstreamStatusError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    429: RateLimitError,
    500: ServerError,
    502: ServiceUnavailableError,
    503: ServiceUnavailableError,
    504: ServiceUnavailableError,
}


def classify_status(status: int, reason: str = "") -> UpstreamStatusError:
    """Map a non-2xx status code to its exception."""
    error_cls = _STATUS_ERRORS.get(status)
    if error_cls is None:
        return UpstreamStatusError(status, reason)
    if reason:
        return error_cls(status, reason)
    return error_cls(status)


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(MetasoError):
    """Invalid configuration."""
