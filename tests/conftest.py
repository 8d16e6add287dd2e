"""Shared fakes for sandbox tests.

The fake sandbox answers commands by substring match and reports process
status from a fake clock, so polling and deadlines run without real delays.
"""

from collections.abc import Generator
from dataclasses import dataclass

import pytest

from persist_mcp.models import ProcessLogs
from persist_mcp.services.runner import ProcessRunner
from persist_mcp.services.state import reset_state


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@dataclass
class ProcessScript:
    """How a fake process behaves.

    ``finishes_after`` is seconds after start (None = never finishes).
    ``stale_exit_code`` is reported even while the process is still running.
    """

    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    finishes_after: float | None = 0.0
    terminal_status: str | None = None
    stale_exit_code: int | None = None
    error: Exception | None = None
    logs_error: Exception | None = None


class FakeHandle:
    """Process handle driven by a ProcessScript and the fake clock."""

    def __init__(self, script: ProcessScript, clock: FakeClock) -> None:
        self.script = script
        self.clock = clock
        self.started_at = clock.now
        self.log_fetches = 0

    @property
    def _finished(self) -> bool:
        after = self.script.finishes_after
        return after is not None and self.clock.now - self.started_at >= after

    @property
    def status(self) -> str:
        if not self._finished:
            return "running"
        if self.script.terminal_status:
            return self.script.terminal_status
        return "completed" if self.script.exit_code == 0 else "failed"

    @property
    def exit_code(self) -> int | None:
        if self._finished:
            return self.script.exit_code
        return self.script.stale_exit_code

    async def get_logs(self) -> ProcessLogs:
        self.log_fetches += 1
        if self.script.logs_error:
            raise self.script.logs_error
        return ProcessLogs(stdout=self.script.stdout, stderr=self.script.stderr)


class FakeSandbox:
    """Sandbox that answers commands by the first matching substring."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.rules: dict[str, ProcessScript] = {}
        self.commands: list[str] = []
        self.handles: list[FakeHandle] = []

    def on(self, substring: str, **kwargs: object) -> ProcessScript:
        """Script the response for commands containing ``substring``."""
        script = ProcessScript(**kwargs)  # type: ignore[arg-type]
        self.rules[substring] = script
        return script

    def ran(self, substring: str) -> list[str]:
        return [c for c in self.commands if substring in c]

    async def start_process(self, command: str) -> FakeHandle:
        self.commands.append(command)
        script = next(
            (s for sub, s in self.rules.items() if sub in command),
            ProcessScript(),
        )
        if script.error:
            raise script.error
        handle = FakeHandle(script, self.clock)
        self.handles.append(handle)
        return handle


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sandbox(clock: FakeClock) -> FakeSandbox:
    return FakeSandbox(clock)


@pytest.fixture
def runner(sandbox: FakeSandbox, clock: FakeClock) -> ProcessRunner:
    return ProcessRunner(sandbox, clock=clock, sleep=clock.sleep)


@pytest.fixture(autouse=True)
def clean_state() -> Generator[None, None, None]:
    """Drop any dependency container a test installed."""
    reset_state()
    yield
    reset_state()
