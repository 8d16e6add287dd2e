"""Persist MCP FastMCP server.

Thin wiring of the sync tool and status resource onto a FastMCP server.
All sync logic lives in services/.
"""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from persist_mcp.config import Settings
from persist_mcp.middleware import ErrorHandlingMiddleware, LoggingMiddleware
from persist_mcp.resources import storage_status_resource
from persist_mcp.services.state import get_deps
from persist_mcp.tools import sync_storage
from persist_mcp.utils.console import ColorfulFormatter

NOISY_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "asyncssh",
    "httpx",
    "httpcore",
    "fastmcp",
    "starlette",
    "anyio",
)


def _configure_logging(settings: Settings) -> None:
    """Configure logging for the persist_mcp package.

    Called at module load time so loggers are ready however the server
    is started.
    """
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("persist_mcp")
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_logging(Settings.from_env())

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict[str, Any]]:
    """Create dependencies at startup and close the sandbox connection at exit."""
    deps = get_deps()
    settings = deps.settings
    logger.info(
        "Persist MCP server starting (sandbox=%s:%d, mount=%s)",
        settings.sandbox_host,
        settings.sandbox_port,
        settings.mount_path,
    )
    if not settings.storage_configured:
        logger.warning(
            "Storage is not configured: set R2_ACCESS_KEY_ID, "
            "R2_SECRET_ACCESS_KEY and CF_ACCOUNT_ID"
        )

    try:
        yield {"storage_configured": settings.storage_configured}
    finally:
        logger.info("Persist MCP server shutting down")
        await deps.cleanup()
        logger.info("Persist MCP server shutdown complete")


def configure_middleware(server: FastMCP, settings: Settings) -> None:
    """Add middleware in order: ErrorHandling -> Logging.

    Args:
        server: The FastMCP server to configure.
        settings: Settings supplying logging options.
    """
    server.add_middleware(ErrorHandlingMiddleware(include_traceback=settings.include_traceback))
    server.add_middleware(
        LoggingMiddleware(
            include_payloads=settings.log_payloads,
            slow_threshold_ms=settings.slow_threshold_ms,
        )
    )


def create_server(settings: Settings | None = None) -> FastMCP:
    """Create and configure the MCP server.

    Returns:
        Configured FastMCP server instance
    """
    settings = settings or Settings.from_env()
    server = FastMCP("persist_mcp", lifespan=app_lifespan)

    configure_middleware(server, settings)

    server.tool()(sync_storage)
    server.resource(
        "storage://status",
        name="storage status",
        description="Whether storage is configured and the last sync time",
        mime_type="application/json",
    )(storage_status_resource)

    @server.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> PlainTextResponse:
        """Health check endpoint."""
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Health check from %s", client_host)
        return PlainTextResponse("OK")

    return server


# Default server instance
mcp = create_server()
