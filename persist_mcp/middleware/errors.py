"""Error handling middleware for unexpected server exceptions.

Sync failures are returned as data and never reach this middleware. What
does reach it is a bug or a transport failure outside the sync path
(e.g. the status resource losing its SSH connection).
"""

import logging
import traceback
from collections import Counter
from typing import Any

from fastmcp.server.middleware import MiddlewareContext

from persist_mcp.middleware.base import PersistMiddleware


class ErrorHandlingMiddleware(PersistMiddleware):
    """Logs and counts exceptions by type, then re-raises them."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        include_traceback: bool = False,
    ) -> None:
        """Initialize error handling middleware.

        Args:
            logger: Optional custom logger.
            include_traceback: Whether to include full traceback in logs.
        """
        super().__init__(logger=logger)
        self.include_traceback = include_traceback
        self._error_counts: Counter[str] = Counter()

    def get_error_stats(self) -> dict[str, int]:
        """Occurrences per exception type name."""
        return dict(self._error_counts)

    def reset_stats(self) -> None:
        self._error_counts.clear()

    async def on_message(
        self,
        context: MiddlewareContext,
        call_next: Any,
    ) -> Any:
        """Pass the request through, logging any exception it raises."""
        try:
            return await call_next(context)
        except Exception as e:
            error_type = type(e).__name__
            self._error_counts[error_type] += 1

            if self.include_traceback:
                self.logger.error(
                    "Error in %s: %s: %s\n%s",
                    context.method,
                    error_type,
                    e,
                    traceback.format_exc(),
                )
            else:
                self.logger.error("Error in %s: %s: %s", context.method, error_type, e)
            raise
