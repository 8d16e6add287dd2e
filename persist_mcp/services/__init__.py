"""Services for Persist MCP."""

from persist_mcp.services.availability import ToolAvailabilityCheck, is_available
from persist_mcp.services.connection import SandboxConnectionError, SandboxConnector
from persist_mcp.services.locator import (
    ConfigLocation,
    ConfigLocator,
    ConfigLookupFailure,
)
from persist_mcp.services.mount import S3FSMounter
from persist_mcp.services.orchestrator import SyncOrchestrator
from persist_mcp.services.probe import FilesystemProbe, FilesystemSnapshot
from persist_mcp.services.runner import ProcessRunner, truncate_output
from persist_mcp.services.sandbox import SSHProcessHandle, SSHSandbox

__all__ = [
    "ConfigLocation",
    "ConfigLocator",
    "ConfigLookupFailure",
    "FilesystemProbe",
    "FilesystemSnapshot",
    "ProcessRunner",
    "S3FSMounter",
    "SSHProcessHandle",
    "SSHSandbox",
    "SandboxConnectionError",
    "SandboxConnector",
    "SyncOrchestrator",
    "ToolAvailabilityCheck",
    "is_available",
    "truncate_output",
]
