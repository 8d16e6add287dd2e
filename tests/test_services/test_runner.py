"""Tests for the bounded command runner."""

import pytest

from persist_mcp.services.runner import (
    MAX_LOG_CHARS,
    TRUNCATION_MARKER,
    ProcessRunner,
    truncate_output,
)


@pytest.mark.asyncio
async def test_run_returns_completed_result(sandbox, runner) -> None:
    """A command that finishes immediately is complete with its output."""
    sandbox.on("echo hi", stdout="hi\n")

    result = await runner.run("echo hi", 5000)

    assert result.command == "echo hi"
    assert result.status == "completed"
    assert result.exit_code == 0
    assert result.did_complete is True
    assert result.stdout == "hi\n"
    assert result.stderr == ""
    assert sandbox.commands == ["echo hi"]


@pytest.mark.asyncio
async def test_run_polls_at_fixed_interval(sandbox, runner, clock) -> None:
    """Status is re-checked every 200ms until the process finishes."""
    sandbox.on("sleep", finishes_after=0.9)

    result = await runner.run("sleep 1", 5000)

    assert result.did_complete is True
    assert clock.sleeps == [0.2] * 5
    assert 900 <= result.duration_ms <= 1100


@pytest.mark.asyncio
async def test_run_reports_nonzero_exit(sandbox, runner) -> None:
    """A failing command still completes, with its exit code."""
    sandbox.on("false", exit_code=1, stderr="nope")

    result = await runner.run("false", 5000)

    assert result.did_complete is True
    assert result.status == "failed"
    assert result.exit_code == 1
    assert result.stderr == "nope"
    assert result.succeeded is False


@pytest.mark.asyncio
async def test_run_times_out_and_drops_stale_exit_code(sandbox, runner, clock) -> None:
    """A process still running at the deadline never reports an exit code."""
    sandbox.on("hang", finishes_after=None, stale_exit_code=0)

    result = await runner.run("hang", 1000)

    assert result.did_complete is False
    assert result.exit_code is None
    assert result.status == "running"
    assert clock.now >= 1.0


@pytest.mark.asyncio
async def test_run_terminal_after_deadline_is_incomplete(sandbox, clock) -> None:
    """Finishing only after the deadline does not count as completion."""
    runner = ProcessRunner(sandbox, poll_interval_ms=300, clock=clock, sleep=clock.sleep)
    sandbox.on("slow", finishes_after=1.1)

    result = await runner.run("slow", 1000)

    assert result.status == "completed"
    assert result.did_complete is False
    assert result.exit_code is None


@pytest.mark.asyncio
async def test_run_fetches_logs_once(sandbox, runner) -> None:
    """Logs are fetched once after polling, not on every poll."""
    sandbox.on("build", finishes_after=2.0, stdout="done")

    await runner.run("build", 5000)

    assert sandbox.handles[0].log_fetches == 1


@pytest.mark.asyncio
async def test_run_truncates_each_stream(sandbox, runner) -> None:
    """Each stream is capped independently."""
    sandbox.on("noisy", stdout="o" * 2500, stderr="e" * 1999)

    result = await runner.run("noisy", 5000)

    assert result.stdout == "o" * MAX_LOG_CHARS + TRUNCATION_MARKER
    assert result.stderr == "e" * 1999


@pytest.mark.asyncio
async def test_run_propagates_transport_errors(sandbox, runner) -> None:
    """Failures starting the process are not swallowed."""
    sandbox.on("boom", error=ConnectionResetError("sandbox went away"))

    with pytest.raises(ConnectionResetError, match="sandbox went away"):
        await runner.run("boom", 5000)


@pytest.mark.asyncio
async def test_run_propagates_log_fetch_errors(sandbox, runner) -> None:
    """Failures fetching logs are not swallowed either."""
    sandbox.on("quiet", logs_error=RuntimeError("logs unavailable"))

    with pytest.raises(RuntimeError, match="logs unavailable"):
        await runner.run("quiet", 5000)


@pytest.mark.asyncio
async def test_run_display_replaces_command_in_result(sandbox, runner) -> None:
    """Secret-bearing commands are reported by their display text."""
    result = await runner.run("printf 'key:secret' > /etc/passwd-s3fs", 5000, display="s3fs mount")

    assert sandbox.commands == ["printf 'key:secret' > /etc/passwd-s3fs"]
    assert result.command == "s3fs mount"


class TestTruncateOutput:
    """Tests for the log truncation helper."""

    def test_long_value_is_cut_to_limit_plus_marker(self) -> None:
        value = "x" * 2500

        truncated = truncate_output(value)

        assert truncated[:2000] == "x" * 2000
        assert truncated[2000:] == "\n...[truncated]"

    def test_value_under_limit_is_untouched(self) -> None:
        value = "x" * 1999

        assert truncate_output(value) == value

    def test_value_at_limit_is_untouched(self) -> None:
        value = "x" * 2000

        assert truncate_output(value) == value

    def test_custom_limit(self) -> None:
        assert truncate_output("abcdef", limit=3) == "abc" + TRUNCATION_MARKER
