"""Sandbox process API over SSH.

Each started command becomes an ``SSHProcessHandle`` whose output is drained
in the background, so logs can be read at any point and status can be
polled without blocking.
"""

import asyncio
import logging
from typing import Any

import asyncssh

from persist_mcp.models import ProcessLogs
from persist_mcp.services.connection import SandboxConnectionError, SandboxConnector
from persist_mcp.services.runner import MAX_LOG_CHARS

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 4096
# Enough for the runner to see that output was truncated
MAX_BUFFERED_CHARS = MAX_LOG_CHARS + READ_CHUNK_SIZE


class _OutputBuffer:
    """Keeps the head of a stream up to ``limit`` chars, dropping the rest."""

    def __init__(self, limit: int = MAX_BUFFERED_CHARS) -> None:
        self.limit = limit
        self._chunks: list[str] = []
        self._size = 0

    def append(self, chunk: str) -> None:
        room = self.limit - self._size
        if room <= 0:
            return
        chunk = chunk[:room]
        self._chunks.append(chunk)
        self._size += len(chunk)

    def __str__(self) -> str:
        return "".join(self._chunks)


class SSHProcessHandle:
    """Status and output of one remote process."""

    def __init__(
        self,
        process: "asyncssh.SSHClientProcess[str]",
        host_name: str = "sandbox",
        max_buffered_chars: int = MAX_BUFFERED_CHARS,
    ) -> None:
        self._process = process
        self._host_name = host_name
        self._stdout = _OutputBuffer(max_buffered_chars)
        self._stderr = _OutputBuffer(max_buffered_chars)
        self._finished = False
        self._transport_error: Exception | None = None
        self.task: asyncio.Task[None] = asyncio.create_task(self._collect())

    async def _drain(self, stream: Any, sink: _OutputBuffer) -> None:
        # Keep reading past the cap so the remote side never blocks on a full pipe
        while chunk := await stream.read(READ_CHUNK_SIZE):
            sink.append(chunk)

    async def _collect(self) -> None:
        try:
            await asyncio.gather(
                self._drain(self._process.stdout, self._stdout),
                self._drain(self._process.stderr, self._stderr),
            )
            await self._process.wait_closed()
        except (asyncssh.Error, OSError) as e:
            logger.warning("Lost remote process channel: %s", e)
            self._transport_error = e
        finally:
            self._finished = True

    @property
    def status(self) -> str:
        if not self._finished:
            return "running"
        if self._process.exit_signal is not None:
            return "killed"
        exit_status = self._process.exit_status
        if exit_status is None:
            return "error"
        return "completed" if exit_status == 0 else "failed"

    @property
    def exit_code(self) -> int | None:
        if not self._finished:
            return None
        return self._process.returncode

    @property
    def transport_error(self) -> str | None:
        return str(self._transport_error) if self._transport_error else None

    async def get_logs(self) -> ProcessLogs:
        """Return output captured so far.

        Raises:
            SandboxConnectionError: If the channel was lost while collecting
        """
        if self._transport_error is not None:
            raise SandboxConnectionError(
                self._host_name, self._transport_error
            ) from self._transport_error
        return ProcessLogs(stdout=str(self._stdout), stderr=str(self._stderr))


class SSHSandbox:
    """Starts commands in the sandbox through a shared SSH connection."""

    def __init__(self, connector: SandboxConnector) -> None:
        self.connector = connector
        self._active: set[SSHProcessHandle] = set()

    @property
    def active_processes(self) -> int:
        return len(self._active)

    async def start_process(self, command: str) -> SSHProcessHandle:
        """Start ``command`` without waiting for it.

        Raises:
            SandboxConnectionError: If the sandbox cannot be reached
        """
        conn = await self.connector.get_connection_with_retry()
        try:
            process = await conn.create_process(command, encoding="utf-8", errors="replace")
        except (asyncssh.Error, OSError) as e:
            await self.connector.close()
            raise SandboxConnectionError(self.connector.host.name, e) from e

        process.stdin.write_eof()
        handle = SSHProcessHandle(process, host_name=self.connector.host.name)
        # Keep handles alive until the remote process exits, even after the
        # caller stops waiting on them
        self._active.add(handle)
        handle.task.add_done_callback(lambda _: self._active.discard(handle))
        return handle

    async def close(self) -> None:
        """Stop collecting output and close the connection."""
        for handle in list(self._active):
            handle.task.cancel()
        self._active.clear()
        await self.connector.close()
