"""Protocol interfaces for the sandbox collaborators.

The sync services depend on these contracts rather than on the SSH
transport, so tests can hand in scripted fakes:

    class FakeHandle:
        status = "completed"
        exit_code = 0

        async def get_logs(self) -> ProcessLogs:
            return ProcessLogs(stdout="/usr/bin/rsync\\n")

    class FakeSandbox:
        async def start_process(self, command: str) -> FakeHandle:
            return FakeHandle()

    runner = ProcessRunner(FakeSandbox())
"""

from typing import Protocol, runtime_checkable

from persist_mcp.models import ProcessLogs, StorageCredentials

ACTIVE_STATUSES = frozenset({"starting", "running"})


@runtime_checkable
class ProcessHandle(Protocol):
    """A process started inside the sandbox.

    ``status`` is one of starting, running, completed, failed, killed or
    error. ``exit_code`` is None until the process reaches a terminal status.
    """

    @property
    def status(self) -> str: ...

    @property
    def exit_code(self) -> int | None: ...

    async def get_logs(self) -> ProcessLogs:
        """Return output captured so far.

        Safe to call at any point in the process lifetime.
        """
        ...


@runtime_checkable
class Sandbox(Protocol):
    """Remote compute unit that can run shell commands."""

    async def start_process(self, command: str) -> ProcessHandle:
        """Start ``command`` and return immediately with a handle.

        Raises:
            SandboxConnectionError: If the sandbox cannot be reached.
        """
        ...


@runtime_checkable
class StorageMounter(Protocol):
    """Makes the object storage bucket available as a sandbox path."""

    async def mount(self, credentials: StorageCredentials) -> bool:
        """Mount the bucket if needed.

        Idempotent. True means the mount point is ready for file operations.
        """
        ...
