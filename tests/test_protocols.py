"""Tests that concrete collaborators satisfy the protocol interfaces."""

from unittest.mock import MagicMock

import pytest

from persist_mcp.models import SSHHost
from persist_mcp.protocols import ProcessHandle, Sandbox, StorageMounter
from persist_mcp.services import S3FSMounter, SandboxConnector, SSHSandbox
from persist_mcp.services.sandbox import SSHProcessHandle


def test_ssh_sandbox_is_sandbox() -> None:
    connector = SandboxConnector(SSHHost(name="sandbox", hostname="sb"), known_hosts="/dev/null")

    assert isinstance(SSHSandbox(connector), Sandbox)


def test_s3fs_mounter_is_storage_mounter(runner) -> None:
    assert isinstance(S3FSMounter(runner, "/data/moltbot"), StorageMounter)


def test_fake_sandbox_is_sandbox(sandbox) -> None:
    assert isinstance(sandbox, Sandbox)


@pytest.mark.asyncio
async def test_ssh_process_handle_is_process_handle() -> None:
    process = MagicMock()
    handle = SSHProcessHandle(process)
    handle.task.cancel()

    assert isinstance(handle, ProcessHandle)
