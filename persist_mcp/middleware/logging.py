"""Logging middleware for tool calls and resource reads."""

import json
import logging
import time
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from persist_mcp.middleware.base import PersistMiddleware


class LoggingMiddleware(PersistMiddleware):
    """Logs each tool call and resource read with its duration.

    Requests slower than ``slow_threshold_ms`` are logged at WARNING. A sync
    against a large workspace routinely takes seconds, so the threshold is
    configurable.

    Example:
        >>> mcp.add_middleware(LoggingMiddleware(slow_threshold_ms=5000))
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_payloads: bool = False,
        max_payload_length: int = 1000,
        slow_threshold_ms: float = 1000.0,
    ) -> None:
        """Initialize logging middleware.

        Args:
            logger: Optional custom logger.
            include_payloads: Whether to log response payloads at DEBUG.
            max_payload_length: Maximum payload length before truncation.
            slow_threshold_ms: Threshold in ms for slow request warnings.
        """
        super().__init__(logger=logger)
        self.include_payloads = include_payloads
        self.max_payload_length = max_payload_length
        self.slow_threshold_ms = slow_threshold_ms

    def _truncate(self, data: Any) -> str:
        try:
            text = json.dumps(data, default=str)
        except (TypeError, ValueError):
            text = str(data)
        if len(text) > self.max_payload_length:
            return text[: self.max_payload_length] + "... [truncated]"
        return text

    def _format_duration(self, duration_ms: float) -> str:
        if duration_ms >= self.slow_threshold_ms:
            return f"{duration_ms:.1f}ms SLOW!"
        return f"{duration_ms:.1f}ms"

    def _summarize_result(self, result: Any) -> str:
        """One-word outcome for sync results, size for anything else."""
        payload = getattr(result, "structured_content", result)
        if isinstance(payload, dict) and "success" in payload:
            if payload["success"]:
                return f"ok last_sync={payload.get('last_sync')}"
            return f"failed error={payload.get('error')}"
        if result is None:
            return "null"
        if isinstance(result, str):
            return f"{len(result)} chars"
        if isinstance(result, (list, tuple)):
            return f"{len(result)} items"
        return type(result).__name__

    async def _timed(self, label: str, context: MiddlewareContext, call_next: Any) -> Any:
        start = time.perf_counter()
        self.logger.info(">>> %s", label)
        try:
            result = await call_next(context)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                "!!! %s -> %s: %s [%s]",
                label,
                type(e).__name__,
                e,
                self._format_duration(duration_ms),
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if duration_ms >= self.slow_threshold_ms else logging.INFO
        self.logger.log(
            level,
            "<<< %s -> %s [%s]",
            label,
            self._summarize_result(result),
            self._format_duration(duration_ms),
        )
        if self.include_payloads and result is not None:
            self.logger.debug("    Result: %s", self._truncate(result))
        return result

    async def on_call_tool(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log tool calls with name and timing."""
        name = getattr(context.message, "name", "unknown")
        return await self._timed(f"TOOL: {name}", context, call_next)

    async def on_read_resource(self, context: MiddlewareContext, call_next: Any) -> Any:
        """Log resource reads with URI and timing."""
        uri = getattr(context.message, "uri", "unknown")
        return await self._timed(f"RESOURCE: {uri}", context, call_next)
