"""Colorful console logging formatter."""

import logging
import re
from datetime import datetime

RESET = "\033[0m"
DIM = "\033[2m"

LEVEL_COLORS = {
    "DEBUG": "\033[90m",
    "INFO": "\033[92m",
    "WARNING": "\033[93m",
    "ERROR": "\033[91m",
    "CRITICAL": "\033[41m\033[37m\033[1m",
}

# Longest prefix wins, so list specific modules before their parents
COMPONENT_COLORS = {
    "persist_mcp.services.orchestrator": "\033[96m",
    "persist_mcp.services.runner": "\033[90m",
    "persist_mcp.services": "\033[95m",
    "persist_mcp.middleware": "\033[33m",
    "persist_mcp.config": "\033[32m",
    "persist_mcp.server": "\033[94m",
}

_DURATION = re.compile(r"(\d+\.?\d*ms)")
_SYNC_OUTCOME = re.compile(r"\b(last_sync=\S+|error=[\w-]+)")


class ColorfulFormatter(logging.Formatter):
    """Single-line formatter: time | level | component | message."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{RESET}"

    def _component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if name.startswith(prefix):
                return color
        return "\033[37m"

    def _highlight(self, message: str) -> str:
        if not self.use_colors:
            return message
        message = _DURATION.sub(f"\033[93m\\1{RESET}", message)
        return _SYNC_OUTCOME.sub(f"\033[96m\\1{RESET}", message)

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record."""
        created = datetime.fromtimestamp(record.created)
        timestamp = f"{created:%H:%M:%S}.{int(record.msecs):03d} {created:%m/%d}"

        name = record.name.removeprefix("persist_mcp.")
        level = self._colorize(
            f"{record.levelname:<8}", LEVEL_COLORS.get(record.levelname, "")
        )
        component = self._colorize(f"{name:<22}", self._component_color(record.name))
        sep = self._colorize("|", DIM)

        line = (
            f"{self._colorize(timestamp, DIM)} {sep} {level} {sep} "
            f"{component} {sep} {self._highlight(record.getMessage())}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line
