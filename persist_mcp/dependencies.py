"""Dependency injection container for Persist MCP."""

import asyncio
from dataclasses import dataclass, field

from persist_mcp.config import Settings
from persist_mcp.models import SyncResult
from persist_mcp.services import (
    ProcessRunner,
    S3FSMounter,
    SandboxConnector,
    SSHSandbox,
    SyncOrchestrator,
)


@dataclass
class Dependencies:
    """Container for Persist MCP dependencies.

    Pass this to tools and resources that need the sandbox or orchestrator.

    Example:
        deps = Dependencies.create()
        result = await deps.run_sync()
    """

    settings: Settings
    sandbox: SSHSandbox
    orchestrator: SyncOrchestrator
    sync_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @classmethod
    def create(cls) -> "Dependencies":
        """Create dependencies from environment settings."""
        return cls.from_settings(Settings.from_env())

    @classmethod
    def from_settings(cls, settings: Settings) -> "Dependencies":
        """Wire the SSH sandbox, runner and orchestrator from settings.

        Args:
            settings: Custom Settings instance

        Returns:
            Dependencies ready for use
        """
        connector = SandboxConnector(
            settings.sandbox_host_config(),
            known_hosts=settings.known_hosts_path,
            strict_host_key_checking=settings.strict_host_key_checking,
        )
        sandbox = SSHSandbox(connector)
        runner = ProcessRunner(sandbox)
        layout = settings.layout()
        orchestrator = SyncOrchestrator(
            runner,
            S3FSMounter(runner, layout.mount_path),
            layout=layout,
        )
        return cls(settings=settings, sandbox=sandbox, orchestrator=orchestrator)

    async def run_sync(self) -> SyncResult:
        """Run one sync, serialized against concurrent callers."""
        async with self.sync_lock:
            return await self.orchestrator.sync(self.settings.credentials())

    async def cleanup(self) -> None:
        """Close the sandbox connection."""
        await self.sandbox.close()
