"""Remote command execution data models."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ProcessLogs:
    """Captured output of a sandbox process."""

    stdout: str = ""
    stderr: str = ""


@dataclass(frozen=True)
class CommandResult:
    """Result of a single remote command execution.

    ``exit_code`` is only meaningful when ``did_complete`` is true. The
    runner never stores an exit code for a command that missed its deadline.
    """

    command: str
    status: str
    exit_code: int | None
    stdout: str
    stderr: str
    duration_ms: int
    did_complete: bool

    @property
    def succeeded(self) -> bool:
        """Command finished in time with exit code 0."""
        return self.did_complete and self.exit_code == 0

    def to_dict(self) -> dict[str, Any]:
        """Structured form used in diagnostic payloads."""
        return {
            "command": self.command,
            "status": self.status,
            "exit_code": self.exit_code,
            "did_complete": self.did_complete,
            "duration_ms": self.duration_ms,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }


@dataclass(frozen=True)
class ConfigCheckResult(CommandResult):
    """Command result of probing a single config path."""

    path: str = ""

    @property
    def exists(self) -> bool:
        """Config file confirmed present.

        Exit code 0 alone is not enough: the stat output must echo the path
        back, otherwise the outer shell may have masked a failed inner check.
        """
        return self.succeeded and self.path in self.stdout

    @classmethod
    def from_result(cls, result: CommandResult, path: str) -> "ConfigCheckResult":
        """Attach the probed path to a plain command result."""
        return cls(
            command=result.command,
            status=result.status,
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
            duration_ms=result.duration_ms,
            did_complete=result.did_complete,
            path=path,
        )

    def to_dict(self) -> dict[str, Any]:
        """Structured form including path and existence."""
        return {"path": self.path, "exists": self.exists, **super().to_dict()}
