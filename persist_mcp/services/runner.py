"""Bounded execution of shell commands inside the sandbox.

Polling Strategy:
- The process is started once, then its status is re-read every poll
  interval until it leaves starting/running or the deadline passes
- Each wait is an awaited sleep, never a busy loop
- Logs are fetched once after the loop, not per poll
- A local timeout does not stop the remote process
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from persist_mcp.models import CommandResult
from persist_mcp.protocols import ACTIVE_STATUSES, Sandbox

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 200
MAX_LOG_CHARS = 2000
TRUNCATION_MARKER = "\n...[truncated]"

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]


def truncate_output(value: str, limit: int = MAX_LOG_CHARS) -> str:
    """Cap a captured stream, marking the cut when one is made.

    Args:
        value: Captured stdout or stderr
        limit: Maximum characters kept

    Returns:
        ``value`` unchanged when within limit, otherwise its first ``limit``
        characters followed by the truncation marker.
    """
    if len(value) <= limit:
        return value
    return value[:limit] + TRUNCATION_MARKER


class ProcessRunner:
    """Runs one command at a time against a sandbox with a deadline."""

    def __init__(
        self,
        sandbox: Sandbox,
        poll_interval_ms: int = POLL_INTERVAL_MS,
        max_log_chars: int = MAX_LOG_CHARS,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        """Initialize runner.

        Args:
            sandbox: Sandbox to start processes in
            poll_interval_ms: Delay between status checks
            max_log_chars: Per-stream cap on captured output
            clock: Monotonic clock in seconds
            sleep: Coroutine function used to wait between polls
        """
        self.sandbox = sandbox
        self.poll_interval_ms = poll_interval_ms
        self.max_log_chars = max_log_chars
        self._clock = clock
        self._sleep = sleep

    async def run(
        self,
        command: str,
        timeout_ms: int,
        display: str | None = None,
    ) -> CommandResult:
        """Execute ``command`` and wait up to ``timeout_ms`` for it to finish.

        Args:
            command: Fully escaped shell command
            timeout_ms: Time budget in milliseconds
            display: Text shown in logs and results instead of the command,
                for commands that embed secrets

        Returns:
            CommandResult describing the final observed state.

        Raises:
            Exception: Transport failures from the sandbox propagate unchanged.
        """
        started_at = self._clock()
        deadline = started_at + timeout_ms / 1000
        shown = command if display is None else display
        logger.debug("Starting command (timeout=%dms): %s", timeout_ms, shown)

        handle = await self.sandbox.start_process(command)

        status = handle.status
        observed_at = self._clock()
        while status in ACTIVE_STATUSES and observed_at < deadline:
            await self._sleep(self.poll_interval_ms / 1000)
            status = handle.status
            observed_at = self._clock()

        exit_code = handle.exit_code
        did_complete = (
            status not in ACTIVE_STATUSES
            and exit_code is not None
            and observed_at < deadline
        )
        if not did_complete:
            exit_code = None

        logs = await handle.get_logs()
        duration_ms = int((self._clock() - started_at) * 1000)

        if did_complete:
            logger.debug(
                "Command finished: status=%s exit_code=%s [%dms]",
                status,
                exit_code,
                duration_ms,
            )
        else:
            logger.warning(
                "Command did not complete within %dms (status=%s): %s",
                timeout_ms,
                status,
                shown,
            )

        return CommandResult(
            command=shown,
            status=status,
            exit_code=exit_code,
            stdout=truncate_output(logs.stdout or "", self.max_log_chars),
            stderr=truncate_output(logs.stderr or "", self.max_log_chars),
            duration_ms=duration_ms,
            did_complete=did_complete,
        )
