"""Check that a required binary is usable inside the sandbox."""

import logging

from persist_mcp.models import CommandResult
from persist_mcp.services.runner import ProcessRunner
from persist_mcp.utils.shell import login_shell, shell_escape_arg

logger = logging.getLogger(__name__)

TOOL_CHECK_TIMEOUT_MS = 5000


def is_available(result: CommandResult) -> bool:
    """Decide whether a ``command -v`` probe found the tool.

    Requires a completed run, exit code 0 and a non-blank resolved path.
    Some shells report success from ``command -v`` without printing anything.
    """
    return result.succeeded and result.stdout.strip() != ""


class ToolAvailabilityCheck:
    """Locates binaries with ``command -v``."""

    def __init__(
        self,
        runner: ProcessRunner,
        timeout_ms: int = TOOL_CHECK_TIMEOUT_MS,
    ) -> None:
        self.runner = runner
        self.timeout_ms = timeout_ms

    async def check(self, tool_name: str) -> CommandResult:
        """Run the locator command for ``tool_name``.

        Raises:
            Exception: Transport failures propagate.
        """
        command = login_shell(f"command -v {shell_escape_arg(tool_name)}")
        result = await self.runner.run(command, self.timeout_ms)
        logger.debug(
            "Tool check %s: available=%s path=%r",
            tool_name,
            is_available(result),
            result.stdout.strip(),
        )
        return result
