"""Upstream Metaso API access."""

from metaso_mcp.upstream.client import MetasoHttpClient, mask_api_key, mask_headers

__all__ = ["MetasoHttpClient", "mask_api_key", "mask_headers"]
