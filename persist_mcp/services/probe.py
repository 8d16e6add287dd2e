"""Best-effort filesystem diagnostics for failure reports."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from persist_mcp.models import CommandResult
from persist_mcp.services.runner import ProcessRunner
from persist_mcp.utils.shell import login_shell, shell_escape_arg

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class FilesystemSnapshot:
    """Either the probe's command result or the reason it could not run."""

    result: CommandResult | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fs_context": self.result.to_dict() if self.result else None,
            "fs_context_error": self.error,
        }


class FilesystemProbe:
    """Collects working directory, identity and listings of config roots."""

    def __init__(
        self,
        runner: ProcessRunner,
        roots: Sequence[str],
        timeout_ms: int = PROBE_TIMEOUT_MS,
    ) -> None:
        self.runner = runner
        self.roots = tuple(roots)
        self.timeout_ms = timeout_ms

    def build_command(self) -> str:
        parts = ["pwd", "id"]
        for root in self.roots:
            parts.append(f"echo {shell_escape_arg(f'--- {root} ---')}")
            parts.append(f"ls -la {shell_escape_arg(root)} 2>&1 || true")
        return login_shell("; ".join(parts))

    async def snapshot(self) -> FilesystemSnapshot:
        """Gather diagnostics without ever raising.

        Returns:
            Snapshot holding either a result or a short error string.
        """
        try:
            result = await self.runner.run(self.build_command(), self.timeout_ms)
        except Exception as e:
            logger.warning("Filesystem probe failed: %s", e)
            return FilesystemSnapshot(error=str(e) or type(e).__name__)
        return FilesystemSnapshot(result=result)
