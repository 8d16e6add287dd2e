"""Storage credentials and sandbox filesystem layout."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageCredentials:
    """Object storage credentials used to mount the bucket."""

    access_key_id: str | None = None
    secret_access_key: str | None = None
    account_id: str | None = None
    bucket_name: str = "moltbot-data"

    @property
    def is_complete(self) -> bool:
        """All values required for mounting are present."""
        return bool(self.access_key_id and self.secret_access_key and self.account_id)

    @property
    def endpoint(self) -> str:
        """S3-compatible endpoint URL for the account."""
        return f"https://{self.account_id}.r2.cloudflarestorage.com"


@dataclass(frozen=True)
class ConfigCandidate:
    """A possible location of the gateway config file."""

    directory: str
    filename: str

    @property
    def path(self) -> str:
        return f"{self.directory.rstrip('/')}/{self.filename}"


DEFAULT_CONFIG_CANDIDATES = (
    ConfigCandidate("/root/.openclaw", "openclaw.json"),
    ConfigCandidate("/root/.clawdbot", "clawdbot.json"),
)


@dataclass(frozen=True)
class SyncLayout:
    """Where things live inside the sandbox and on the mounted bucket.

    Config candidates are ordered by priority: preferred location first,
    legacy location after it.
    """

    mount_path: str = "/data/moltbot"
    config_candidates: tuple[ConfigCandidate, ...] = DEFAULT_CONFIG_CANDIDATES
    workspace_dir: str = "/root/clawd"
    skills_dirname: str = "skills"
    transient_patterns: tuple[str, ...] = ("*.lock", "*.log", "*.tmp")
    config_dest: str = "openclaw"
    workspace_dest: str = "workspace"
    legacy_workspace_dest: str = "clawd"
    skills_dest: str = "skills"
    marker_name: str = ".last-sync"
    run_marker_name: str = ".last-sync-run"
    sync_tool: str = "rsync"
    extra_roots: tuple[str, ...] = ()

    @property
    def skills_dir(self) -> str:
        return f"{self.workspace_dir.rstrip('/')}/{self.skills_dirname}"

    @property
    def marker_path(self) -> str:
        return self.storage_path(self.marker_name)

    @property
    def run_marker_path(self) -> str:
        return self.storage_path(self.run_marker_name)

    @property
    def probe_roots(self) -> tuple[str, ...]:
        """Directories listed in filesystem diagnostics."""
        return tuple(c.directory for c in self.config_candidates) + self.extra_roots

    def storage_path(self, name: str) -> str:
        """Path of ``name`` under the mounted bucket."""
        return f"{self.mount_path.rstrip('/')}/{name}"
