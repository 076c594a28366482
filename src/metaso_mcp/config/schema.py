"""Pydantic model for metaso-mcp configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL = "https://metaso.cn"


class Config(BaseModel):
    """Process-wide configuration. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(min_length=1)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(default=30.0, gt=0)
    debug: bool = False
