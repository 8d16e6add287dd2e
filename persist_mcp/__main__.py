"""Entry point for persist_mcp server."""

import logging

from persist_mcp.server import mcp  # Importing also configures logging
from persist_mcp.services.state import get_deps

logger = logging.getLogger(__name__)


def run_server() -> None:
    """Run the MCP server with configured transport."""
    settings = get_deps().settings

    if settings.transport == "stdio":
        logger.info("Starting Persist MCP server (transport=stdio)")
        mcp.run(transport="stdio")
    else:
        logger.info(
            "Starting Persist MCP server (transport=http, host=%s, port=%d)",
            settings.http_host,
            settings.http_port,
        )
        mcp.run(
            transport="http",
            host=settings.http_host,
            port=settings.http_port,
        )


if __name__ == "__main__":
    run_server()
