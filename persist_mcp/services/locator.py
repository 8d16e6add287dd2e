"""Discovery of the authoritative gateway config directory.

Candidates are probed in priority order. A probe that did not finish in
time is never treated as "absent": if the preferred location could not be
checked, the legacy location is not used in its place, since mirroring the
wrong directory would overwrite a good backup.
"""

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from persist_mcp.models import ConfigCandidate, ConfigCheckResult, SyncError
from persist_mcp.services.probe import FilesystemProbe, FilesystemSnapshot
from persist_mcp.services.runner import ProcessRunner
from persist_mcp.utils.shell import login_shell, shell_escape_arg

logger = logging.getLogger(__name__)

CONFIG_CHECK_TIMEOUT_MS = 5000


@dataclass(frozen=True)
class ConfigLocation:
    """The candidate chosen as the config source."""

    candidate: ConfigCandidate
    checks: tuple[ConfigCheckResult, ...]

    @property
    def directory(self) -> str:
        return self.candidate.directory


@dataclass(frozen=True)
class ConfigLookupFailure:
    """No usable config candidate, with diagnostics."""

    error: SyncError
    checks: tuple[ConfigCheckResult, ...]
    snapshot: FilesystemSnapshot

    @property
    def details(self) -> str:
        """JSON diagnostics listing every probed path."""
        return json.dumps(
            {
                "tried_paths": [check.path for check in self.checks],
                "checks": [check.to_dict() for check in self.checks],
                **self.snapshot.to_dict(),
            },
            indent=2,
        )


class ConfigLocator:
    """Finds which candidate config file exists in the sandbox."""

    def __init__(
        self,
        runner: ProcessRunner,
        probe: FilesystemProbe,
        timeout_ms: int = CONFIG_CHECK_TIMEOUT_MS,
    ) -> None:
        self.runner = runner
        self.probe = probe
        self.timeout_ms = timeout_ms

    async def check_path(self, path: str) -> ConfigCheckResult:
        """Stat a single path.

        Args:
            path: Absolute file path inside the sandbox

        Returns:
            ConfigCheckResult whose ``exists`` reflects the stat output.
        """
        command = login_shell(f"stat -c '%F %s %n' {shell_escape_arg(path)}")
        result = await self.runner.run(command, self.timeout_ms)
        check = ConfigCheckResult.from_result(result, path)
        logger.debug(
            "Config check %s: exists=%s did_complete=%s",
            path,
            check.exists,
            check.did_complete,
        )
        return check

    async def locate(
        self,
        candidates: Sequence[ConfigCandidate],
    ) -> ConfigLocation | ConfigLookupFailure:
        """Choose the first existing candidate.

        Args:
            candidates: Config candidates, preferred first

        Returns:
            ConfigLocation on success, otherwise ConfigLookupFailure with
            CONFIG_CHECK_INCOMPLETE (some probe timed out) or
            NO_CONFIG_FOUND (every probe completed and found nothing).

        Raises:
            Exception: Transport failures while probing propagate.
        """
        checks: list[ConfigCheckResult] = []
        incomplete = False

        for candidate in candidates:
            check = await self.check_path(candidate.path)
            checks.append(check)

            if not check.did_complete:
                incomplete = True
            elif check.exists and not incomplete:
                logger.info("Using config directory %s", candidate.directory)
                return ConfigLocation(candidate=candidate, checks=tuple(checks))

        error = SyncError.CONFIG_CHECK_INCOMPLETE if incomplete else SyncError.NO_CONFIG_FOUND
        logger.warning(
            "Config lookup failed (%s) after probing: %s",
            error.value,
            ", ".join(check.path for check in checks),
        )
        snapshot = await self.probe.snapshot()
        return ConfigLookupFailure(error=error, checks=tuple(checks), snapshot=snapshot)
