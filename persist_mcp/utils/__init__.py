"""Utilities for Persist MCP."""

from persist_mcp.utils.console import ColorfulFormatter
from persist_mcp.utils.shell import login_shell, shell_escape_arg

__all__ = [
    "ColorfulFormatter",
    "login_shell",
    "shell_escape_arg",
]
