"""Core errors, retry policy, and URL safety filter."""

from metaso_mcp.core.errors import (
    AuthenticationError,
    AuthorizationError,
    ConfigError,
    FieldViolation,
    MetasoError,
    NetworkError,
    RateLimitError,
    RequestSetupError,
    ServerError,
    ServiceUnavailableError,
    ToolValidationError,
    UnknownToolError,
    UnsafeURLError,
    UpstreamError,
    UpstreamStatusError,
    classify_status,
)
from metaso_mcp.core.retry import (
    RetryConfig,
    compute_delay,
    is_retryable,
    retry_with_backoff,
)
from metaso_mcp.core.safety import is_safe

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "ConfigError",
    "FieldViolation",
    "MetasoError",
    "NetworkError",
    "RateLimitError",
    "RequestSetupError",
    "RetryConfig",
    "ServerError",
    "ServiceUnavailableError",
    "ToolValidationError",
    "UnknownToolError",
    "UnsafeURLError",
    "UpstreamError",
    "UpstreamStatusError",
    "classify_status",
    "compute_delay",
    "is_retryable",
    "is_safe",
    "retry_with_backoff",
]
