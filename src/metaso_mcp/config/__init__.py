"""Configuration: pydantic schema and environment loader."""

from metaso_mcp.config.loader import load_config, validate_api_key_format
from metaso_mcp.config.schema import DEFAULT_BASE_URL, Config

__all__ = [
    "DEFAULT_BASE_URL",
    "Config",
    "load_config",
    "validate_api_key_format",
]
