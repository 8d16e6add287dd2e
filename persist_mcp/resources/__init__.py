"""MCP resources for Persist MCP."""

from persist_mcp.resources.storage import storage_status_resource

__all__ = ["storage_status_resource"]
