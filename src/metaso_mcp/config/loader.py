"""Configuration loading from environment variables.

Recognised variables:
    ``METASO_API_KEY``   required, ``mk-`` followed by 32 uppercase
                         alphanumeric characters
    ``METASO_BASE_URL``  API root, defaults to ``https://metaso.cn``
    ``METASO_TIMEOUT``   request timeout in milliseconds
    ``METASO_DEBUG``     ``true`` enables request/response debug logging

Programmatic overrides (passed to ``load_config``) are merged last.
"""

from __future__ import annotations

import os
import re
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from pydantic import ValidationError

from metaso_mcp.core.errors import ConfigError

from .schema import Config

if TYPE_CHECKING:
    from collections.abc import Mapping

API_KEY_PATTERN = re.compile(r"^mk-[A-Z0-9]{32}$")


def validate_api_key_format(api_key: str) -> bool:
    """Check an API key against the ``mk-XXXXXXXX...`` format."""
    return API_KEY_PATTERN.match(api_key) is not None


def _read_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect raw config values from the environment."""
    raw: dict[str, Any] = {}

    api_key = env.get("METASO_API_KEY")
    if api_key:
        raw["api_key"] = api_key.strip()

    base_url = env.get("METASO_BASE_URL")
    if base_url:
        raw["base_url"] = base_url.strip()

    timeout = env.get("METASO_TIMEOUT")
    if timeout:
        try:
            raw["timeout"] = int(timeout) / 1000
        except ValueError as e:
            msg = f"METASO_TIMEOUT must be an integer number of milliseconds, got {timeout!r}"
            raise ConfigError(msg) from e

    raw["debug"] = env.get("METASO_DEBUG", "").strip().lower() == "true"
    return raw


def _check_base_url(base_url: str) -> None:
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        msg = f"METASO_BASE_URL must be an http(s) URL, got {base_url!r}"
        raise ConfigError(msg)


def load_config(
    env: Mapping[str, str] | None = None,
    overrides: dict[str, Any] | None = None,
) -> Config:
    """Load and validate configuration.

    Args:
        env: Environment mapping. Defaults to ``os.environ``.
        overrides: Values merged last (highest priority).

    Returns:
        Validated, frozen Config instance.

    Raises:
        ConfigError: Missing or malformed API key, bad timeout or base URL.
    """
    raw = _read_env(os.environ if env is None else env)
    if overrides:
        raw.update(overrides)

    if not raw.get("api_key"):
        msg = "METASO_API_KEY is required"
        raise ConfigError(msg)

    try:
        config = Config.model_validate(raw)
    except ValidationError as e:
        issues = ", ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        msg = f"Configuration validation failed: {issues}"
        raise ConfigError(msg) from e

    if not validate_api_key_format(config.api_key):
        msg = (
            "Invalid API key format. "
            "Expected format: mk-[32 alphanumeric characters]"
        )
        raise ConfigError(msg)

    _check_base_url(config.base_url)
    return config
