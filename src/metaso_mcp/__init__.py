"""metaso-mcp: Metaso search, reader and chat exposed as MCP tools."""

__version__ = "1.0.0"
