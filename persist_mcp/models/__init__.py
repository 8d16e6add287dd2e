"""Data models for Persist MCP."""

from persist_mcp.models.command import CommandResult, ConfigCheckResult, ProcessLogs
from persist_mcp.models.ssh import SSHHost
from persist_mcp.models.storage import (
    ConfigCandidate,
    StorageCredentials,
    SyncLayout,
)
from persist_mcp.models.sync import SyncError, SyncFailure, SyncResult, SyncSuccess

__all__ = [
    "CommandResult",
    "ConfigCandidate",
    "ConfigCheckResult",
    "ProcessLogs",
    "SSHHost",
    "StorageCredentials",
    "SyncError",
    "SyncFailure",
    "SyncLayout",
    "SyncResult",
    "SyncSuccess",
]
