"""Persist MCP: back up sandbox state to object storage and verify it landed."""

__version__ = "0.1.0"
