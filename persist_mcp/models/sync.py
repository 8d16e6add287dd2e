"""Sync outcome models.

A sync invocation returns exactly one of ``SyncSuccess`` or ``SyncFailure``.
Failures carry a stable category plus optional verbose details.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal


class SyncError(str, Enum):
    """Stable failure categories for a sync invocation."""

    NOT_CONFIGURED = "not-configured"
    MOUNT_FAILED = "mount-failed"
    SOURCE_VERIFICATION_FAILED = "source-verification-failed"
    CONFIG_CHECK_INCOMPLETE = "config-check-incomplete"
    NO_CONFIG_FOUND = "no-config-found"
    TOOL_CHECK_INCOMPLETE = "tool-check-incomplete"
    TOOL_UNAVAILABLE = "tool-unavailable"
    TOOL_CHECK_FAILED = "tool-check-failed"
    SYNC_FAILED = "sync-failed"
    SYNC_ERROR = "sync-error"

    @property
    def message(self) -> str:
        """Short human-readable description."""
        return _MESSAGES[self]


_MESSAGES = {
    SyncError.NOT_CONFIGURED: "Storage is not configured",
    SyncError.MOUNT_FAILED: "Failed to mount storage",
    SyncError.SOURCE_VERIFICATION_FAILED: "Failed to verify source files",
    SyncError.CONFIG_CHECK_INCOMPLETE: "Sync aborted: config check did not complete",
    SyncError.NO_CONFIG_FOUND: "Sync aborted: no config file found",
    SyncError.TOOL_CHECK_INCOMPLETE: "Sync aborted: rsync check did not complete",
    SyncError.TOOL_UNAVAILABLE: "Sync aborted: rsync is not available",
    SyncError.TOOL_CHECK_FAILED: "Sync aborted: rsync check failed",
    SyncError.SYNC_FAILED: "Sync failed",
    SyncError.SYNC_ERROR: "Sync error",
}


@dataclass(frozen=True)
class SyncSuccess:
    """Sync completed and the timestamp marker was read back."""

    last_sync: str
    success: Literal[True] = True

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "last_sync": self.last_sync}


@dataclass(frozen=True)
class SyncFailure:
    """Sync aborted or could not be verified."""

    error: SyncError
    details: str | None = None
    success: Literal[False] = False

    @property
    def message(self) -> str:
        return self.error.message

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": False,
            "error": self.error.value,
            "message": self.message,
        }
        if self.details is not None:
            data["details"] = self.details
        return data


SyncResult = SyncSuccess | SyncFailure
