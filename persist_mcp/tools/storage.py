"""Storage sync tool."""

import logging
from typing import Any

from persist_mcp.services.state import get_deps

logger = logging.getLogger(__name__)


async def sync_storage() -> dict[str, Any]:
    """Back up the sandbox's config, workspace and skills to object storage.

    Mirrors the gateway config directory, the workspace and its skills onto
    the mounted bucket, then verifies the backup by reading the timestamp
    marker back.

    Returns:
        {"success": true, "last_sync": "<ISO timestamp>"} on success, or
        {"success": false, "error": "<category>", "message": ..., "details": ...}
    """
    deps = get_deps()
    if deps.sync_lock.locked():
        logger.info("Sync already in progress, waiting for it to finish")

    result = await deps.run_sync()
    return result.to_dict()
