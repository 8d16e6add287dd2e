"""Global state management for Persist MCP."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from persist_mcp.dependencies import Dependencies

# Global state (initialized on first access)
_deps: "Dependencies | None" = None


def get_deps() -> "Dependencies":
    """Get or create the dependency container."""
    global _deps
    if _deps is None:
        from persist_mcp.dependencies import Dependencies

        _deps = Dependencies.create()
    return _deps


def set_deps(deps: "Dependencies") -> None:
    """Set the global dependency container.

    Allows tests to inject fakes without touching module internals.

    Args:
        deps: Dependencies instance to use globally.
    """
    global _deps
    _deps = deps


def reset_state() -> None:
    """Reset global state for testing."""
    global _deps
    _deps = None
