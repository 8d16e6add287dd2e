"""MCP tools for Persist MCP."""

from persist_mcp.tools.storage import sync_storage

__all__ = ["sync_storage"]
