"""Back up sandbox state to object storage and verify that it landed.

Stages run strictly in order and each one can abort the sync:

1. Precondition: storage credentials are present
2. Mount: the bucket is mounted inside the sandbox
3. Config discovery: the config directory to mirror is located
4. Tool availability: rsync resolves to a real binary
5. Pipeline + verification: the mirror pipeline runs, then the timestamp
   marker is read back by a separate command

Every failure is returned as a ``SyncFailure``. The pipeline's own exit
status is never trusted on its own: a degraded mount can accept writes as
no-ops and still exit 0, so only a marker read back with a valid date and
this run's identifier counts as success.
"""

import json
import logging
import uuid
from collections.abc import Callable

from persist_mcp.models import (
    CommandResult,
    StorageCredentials,
    SyncError,
    SyncFailure,
    SyncLayout,
    SyncResult,
    SyncSuccess,
)
from persist_mcp.protocols import StorageMounter
from persist_mcp.services.availability import ToolAvailabilityCheck, is_available
from persist_mcp.services.locator import ConfigLocator, ConfigLookupFailure
from persist_mcp.services.pipeline import (
    build_marker_read_command,
    build_run_marker_read_command,
    build_sync_command,
    is_valid_timestamp,
)
from persist_mcp.services.probe import FilesystemProbe
from persist_mcp.services.runner import ProcessRunner

logger = logging.getLogger(__name__)

SYNC_TIMEOUT_MS = 30000
MARKER_TIMEOUT_MS = 5000
NO_MARKER_MESSAGE = "No timestamp file created"


def _describe(error: Exception) -> str:
    return str(error) or "Unknown error"


def _check_details(result: CommandResult) -> str:
    return json.dumps({"check": result.to_dict()}, indent=2)


def _new_run_id() -> str:
    return uuid.uuid4().hex


class SyncOrchestrator:
    """Runs one sync invocation end to end.

    Holds no state between invocations. Callers must make sure only one
    sync runs against a sandbox at a time.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        mounter: StorageMounter,
        layout: SyncLayout | None = None,
        locator: ConfigLocator | None = None,
        tool_check: ToolAvailabilityCheck | None = None,
        sync_timeout_ms: int = SYNC_TIMEOUT_MS,
        marker_timeout_ms: int = MARKER_TIMEOUT_MS,
        run_id_factory: Callable[[], str] = _new_run_id,
    ) -> None:
        """Initialize orchestrator.

        Args:
            runner: Command runner bound to the sandbox
            mounter: Storage mount collaborator
            layout: Sandbox and bucket layout (defaults to SyncLayout())
            locator: Config locator (built from runner when omitted)
            tool_check: Tool availability check (built from runner when omitted)
            sync_timeout_ms: Budget for the mirror pipeline
            marker_timeout_ms: Budget for each marker read
            run_id_factory: Produces the identifier written with the marker
        """
        self.runner = runner
        self.mounter = mounter
        self.layout = layout or SyncLayout()
        self.locator = locator or ConfigLocator(
            runner, FilesystemProbe(runner, self.layout.probe_roots)
        )
        self.tool_check = tool_check or ToolAvailabilityCheck(runner)
        self.sync_timeout_ms = sync_timeout_ms
        self.marker_timeout_ms = marker_timeout_ms
        self._run_id_factory = run_id_factory

    async def sync(self, credentials: StorageCredentials | None) -> SyncResult:
        """Back up config, workspace and skills to the bucket.

        Args:
            credentials: Storage credentials, None when not configured

        Returns:
            SyncSuccess with the marker timestamp, or SyncFailure.
        """
        if credentials is None or not credentials.is_complete:
            return self._fail(SyncError.NOT_CONFIGURED)

        try:
            mounted = await self.mounter.mount(credentials)
        except Exception as e:
            return self._fail(SyncError.MOUNT_FAILED, _describe(e))
        if not mounted:
            return self._fail(SyncError.MOUNT_FAILED)

        try:
            location = await self.locator.locate(self.layout.config_candidates)
        except Exception as e:
            return self._fail(SyncError.SOURCE_VERIFICATION_FAILED, _describe(e))
        if isinstance(location, ConfigLookupFailure):
            return self._fail(location.error, location.details)

        tool = self.layout.sync_tool
        try:
            check = await self.tool_check.check(tool)
        except Exception as e:
            return self._fail(SyncError.TOOL_CHECK_FAILED, _describe(e))
        if not check.did_complete:
            return self._fail(SyncError.TOOL_CHECK_INCOMPLETE, _check_details(check))
        if not is_available(check):
            return self._fail(SyncError.TOOL_UNAVAILABLE, _check_details(check))

        try:
            return await self._mirror_and_verify(location.directory)
        except Exception as e:
            logger.exception("Sync pipeline raised")
            return self._fail(SyncError.SYNC_ERROR, _describe(e))

    async def last_sync(self, credentials: StorageCredentials | None = None) -> str | None:
        """Read the current marker without syncing.

        Args:
            credentials: When given, the bucket is mounted first so a backup
                survives a sandbox restart that dropped the mount

        Returns:
            The marker timestamp, or None when the bucket could not be
            mounted or the marker is missing or malformed.

        Raises:
            Exception: Transport failures propagate.
        """
        if credentials is not None and not await self.mounter.mount(credentials):
            logger.warning("Storage not mounted, last sync unknown")
            return None

        result = await self.runner.run(
            build_marker_read_command(self.layout),
            self.marker_timeout_ms,
        )
        value = result.stdout.strip()
        return value if is_valid_timestamp(value) else None

    async def _mirror_and_verify(self, config_dir: str) -> SyncResult:
        run_id = self._run_id_factory()
        logger.info("Syncing %s to %s (run=%s)", config_dir, self.layout.mount_path, run_id)

        pipeline = await self.runner.run(
            build_sync_command(config_dir, self.layout, run_id),
            self.sync_timeout_ms,
        )
        if not pipeline.did_complete:
            logger.warning(
                "Sync pipeline still running after %dms, verifying marker anyway",
                self.sync_timeout_ms,
            )

        marker = await self.runner.run(
            build_marker_read_command(self.layout),
            self.marker_timeout_ms,
        )
        last_sync = marker.stdout.strip()
        output = pipeline.stderr or pipeline.stdout

        if not is_valid_timestamp(last_sync):
            return self._fail(SyncError.SYNC_FAILED, output or NO_MARKER_MESSAGE)

        owner = await self.runner.run(
            build_run_marker_read_command(self.layout),
            self.marker_timeout_ms,
        )
        if owner.stdout.strip() != run_id:
            # Marker left by an earlier run, or this run has not finished yet
            stale = f"Timestamp marker {last_sync!r} was not written by run {run_id}"
            return self._fail(
                SyncError.SYNC_FAILED,
                f"{stale}\n{output}" if output else stale,
            )

        logger.info("Sync completed: last_sync=%s", last_sync)
        return SyncSuccess(last_sync=last_sync)

    def _fail(self, error: SyncError, details: str | None = None) -> SyncFailure:
        logger.warning("%s (%s)", error.message, error.value)
        return SyncFailure(error=error, details=details)
