"""Shell pipeline that mirrors sandbox state onto the mounted bucket.

Stages are chained with ``&&`` so the first failing stage aborts the rest
and the timestamp marker is only written when every copy succeeded.
"""

import re

from persist_mcp.models import SyncLayout
from persist_mcp.utils.shell import login_shell, shell_escape_arg

TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")


def is_valid_timestamp(value: str | None) -> bool:
    """Check that a marker value starts with a YYYY-MM-DD date."""
    if not value:
        return False
    return TIMESTAMP_PATTERN.match(value.strip()) is not None


def _dir(path: str) -> str:
    # Trailing slash makes rsync copy directory contents, not the directory
    return shell_escape_arg(path.rstrip("/") + "/")


def mirror_command(source: str, dest: str, excludes: tuple[str, ...] = ()) -> str:
    """rsync invocation that makes ``dest`` an exact copy of ``source``.

    ``--no-times`` because the s3fs mount cannot set modification times.
    """
    parts = ["rsync", "-r", "--no-times", "--delete"]
    parts.extend(f"--exclude={shell_escape_arg(pattern)}" for pattern in excludes)
    parts.extend([_dir(source), _dir(dest)])
    return " ".join(parts)


def _if_dir(path: str, command: str) -> str:
    return f"if [ -d {shell_escape_arg(path)} ]; then {command}; fi"


def build_sync_stages(config_dir: str, layout: SyncLayout, run_id: str) -> list[str]:
    """Ordered pipeline stages.

    Args:
        config_dir: Config directory chosen by the locator
        layout: Sandbox and bucket layout
        run_id: Identifier written next to the marker for this run

    Returns:
        Shell fragments, each of which must succeed for the next to run.
    """
    transient = layout.transient_patterns
    workspace_excludes = (*transient, layout.skills_dirname)

    return [
        mirror_command(config_dir, layout.storage_path(layout.config_dest), transient),
        _if_dir(
            layout.workspace_dir,
            mirror_command(
                layout.workspace_dir,
                layout.storage_path(layout.workspace_dest),
                workspace_excludes,
            ),
        ),
        _if_dir(
            layout.workspace_dir,
            mirror_command(
                layout.workspace_dir,
                layout.storage_path(layout.legacy_workspace_dest),
                workspace_excludes,
            ),
        ),
        _if_dir(
            layout.skills_dir,
            mirror_command(
                layout.skills_dir,
                layout.storage_path(layout.skills_dest),
                transient,
            ),
        ),
        f"printf '%s\\n' {shell_escape_arg(run_id)} > {shell_escape_arg(layout.run_marker_path)}",
        f"date -Iseconds > {shell_escape_arg(layout.marker_path)}",
    ]


def build_sync_command(config_dir: str, layout: SyncLayout, run_id: str) -> str:
    """Full pipeline as a single sandbox command."""
    return login_shell(" && ".join(build_sync_stages(config_dir, layout, run_id)))


def build_marker_read_command(layout: SyncLayout) -> str:
    return login_shell(f"cat {shell_escape_arg(layout.marker_path)}")


def build_run_marker_read_command(layout: SyncLayout) -> str:
    return login_shell(f"cat {shell_escape_arg(layout.run_marker_path)}")
