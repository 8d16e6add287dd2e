"""Persist MCP middleware components."""

from persist_mcp.middleware.base import PersistMiddleware
from persist_mcp.middleware.errors import ErrorHandlingMiddleware
from persist_mcp.middleware.logging import LoggingMiddleware

__all__ = [
    "ErrorHandlingMiddleware",
    "LoggingMiddleware",
    "PersistMiddleware",
]
