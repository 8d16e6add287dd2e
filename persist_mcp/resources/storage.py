"""Storage status resource."""

import json

from fastmcp.exceptions import ResourceError

from persist_mcp.services import SandboxConnectionError
from persist_mcp.services.state import get_deps


async def storage_status_resource() -> str:
    """Report whether storage is configured and when it was last synced.

    Returns:
        JSON with ``configured``, ``mount_path`` and ``last_sync``. A null
        ``last_sync`` means the bucket could not be mounted or was never synced.

    Raises:
        ResourceError: If the sandbox cannot be reached.
    """
    deps = get_deps()
    layout = deps.orchestrator.layout
    status: dict[str, object] = {
        "configured": deps.settings.storage_configured,
        "mount_path": layout.mount_path,
        "last_sync": None,
    }

    if status["configured"]:
        try:
            status["last_sync"] = await deps.orchestrator.last_sync(deps.settings.credentials())
        except SandboxConnectionError as e:
            raise ResourceError(str(e)) from e

    return json.dumps(status, indent=2)
