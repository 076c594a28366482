"""Validated request records for each tool.

Raw MCP arguments are untyped. ``validate_arguments`` turns them into a
frozen, fully defaulted pydantic record or raises
:class:`ToolValidationError` listing every violated field.
"""

from __future__ import annotations

import enum
from typing import Any, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from metaso_mcp.core.errors import FieldViolation, ToolValidationError

MAX_QUERY_LENGTH = 1000
MAX_URL_LENGTH = 2048
MAX_PAGE = 100
MAX_SIZE = 50

SearchScope = Literal["webpage", "document", "scholar", "image", "video", "podcast"]
ChatScope = Literal["document", "scholar", "video", "podcast"]
ChatModel = Literal["fast", "fast_thinking", "ds-r1"]
ChatFormat = Literal["chat_completions", "simple"]
ReaderFormat = Literal["markdown", "json"]


class ToolKind(enum.Enum):
    SEARCH = "search"
    READER = "reader"
    CHAT = "chat"


class _Request(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class SearchRequest(_Request):
    query: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    scope: SearchScope = "webpage"
    page: int | None = Field(default=None, ge=1, le=MAX_PAGE)
    size: int | None = Field(default=None, ge=1, le=MAX_SIZE)
    include_summary: bool = True
    include_row_content: bool = False


class ReaderRequest(_Request):
    url: str = Field(max_length=MAX_URL_LENGTH)
    format: ReaderFormat = "markdown"

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        try:
            parts = urlsplit(value)
            hostname = parts.hostname
            parts.port  # noqa: B018 - raises on a malformed port
        except ValueError as e:
            msg = "Invalid URL format"
            raise ValueError(msg) from e
        if parts.scheme.lower() not in ("http", "https") or not hostname:
            msg = "URL must be an absolute http:// or https:// URL"
            raise ValueError(msg)
        if "." not in hostname:
            msg = "Invalid domain name"
            raise ValueError(msg)
        return value


class ChatRequest(_Request):
    query: str = Field(min_length=1, max_length=MAX_QUERY_LENGTH)
    model: ChatModel = "fast"
    scope: ChatScope | None = None
    format: ChatFormat = "chat_completions"
    stream: bool = False


ValidatedRequest = SearchRequest | ReaderRequest | ChatRequest

_MODELS: dict[ToolKind, type[_Request]] = {
    ToolKind.SEARCH: SearchRequest,
    ToolKind.READER: ReaderRequest,
    ToolKind.CHAT: ChatRequest,
}


def _violation(err: Any) -> FieldViolation:
    field = ".".join(str(p) for p in err["loc"]) or "arguments"
    if err["type"] == "value_error":
        message = str(err["ctx"]["error"])
    else:
        message = err["msg"]
    return FieldViolation(field, message)


def _cross_field_violations(kind: ToolKind, raw: dict[str, Any]) -> list[FieldViolation]:
    if kind is ToolKind.SEARCH and raw.get("page") is not None and raw.get("size") is not None:
        return [FieldViolation("page", "page and size are mutually exclusive")]
    return []


def validate_arguments(kind: ToolKind, raw: Any) -> ValidatedRequest:
    """Validate raw caller arguments for a tool.

    Args:
        kind: Which tool the arguments are for.
        raw: The untyped argument object (``None`` is treated as empty).

    Returns:
        The typed, defaulted request record.

    Raises:
        ToolValidationError: With one violation per offending field.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ToolValidationError([FieldViolation("arguments", "must be an object")])

    violations = _cross_field_violations(kind, raw)
    try:
        request = _MODELS[kind].model_validate(raw)
    except ValidationError as e:
        violations.extend(_violation(err) for err in e.errors())
        raise ToolValidationError(violations) from e

    if violations:
        raise ToolValidationError(violations)
    return request  # type: ignore[return-value]
