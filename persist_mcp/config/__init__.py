"""Configuration module for Persist MCP."""

from persist_mcp.config.settings import Settings

__all__ = ["Settings"]
