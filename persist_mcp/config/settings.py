"""Application settings from environment variables.

Storage credentials keep the names the gateway already uses
(R2_*, CF_ACCOUNT_ID). Everything else uses the PERSIST_* prefix.
"""

import logging
import os
from dataclasses import dataclass, field

from persist_mcp.models import SSHHost, StorageCredentials, SyncLayout

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    """

    # Storage
    r2_access_key_id: str | None = None
    r2_secret_access_key: str | None = None
    cf_account_id: str | None = None
    r2_bucket_name: str = field(default="moltbot-data")

    # Sandbox SSH endpoint
    sandbox_host: str = field(default="localhost")
    sandbox_port: int = field(default=22)
    sandbox_user: str = field(default="root")
    sandbox_identity_file: str | None = None
    known_hosts_path: str | None = None
    strict_host_key_checking: bool = field(default=True)

    # Sandbox layout
    mount_path: str = field(default="/data/moltbot")
    workspace_dir: str = field(default="/root/clawd")

    # Transport
    transport: str = field(default="http")
    http_host: str = field(default="0.0.0.0")
    http_port: int = field(default=8000)

    # Logging
    log_level: str = field(default="INFO")
    log_colors: bool = field(default=True)
    log_payloads: bool = field(default=False)
    slow_threshold_ms: int = field(default=1000)
    include_traceback: bool = field(default=False)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            r2_access_key_id=cls._get_str("R2_ACCESS_KEY_ID"),
            r2_secret_access_key=cls._get_str("R2_SECRET_ACCESS_KEY"),
            cf_account_id=cls._get_str("CF_ACCOUNT_ID"),
            r2_bucket_name=cls._get_str("R2_BUCKET_NAME") or "moltbot-data",
            sandbox_host=os.getenv("PERSIST_SANDBOX_HOST", "localhost"),
            sandbox_port=cls._get_int("PERSIST_SANDBOX_PORT", 22),
            sandbox_user=os.getenv("PERSIST_SANDBOX_USER", "root"),
            sandbox_identity_file=cls._get_str("PERSIST_SANDBOX_IDENTITY_FILE"),
            known_hosts_path=cls._get_str("PERSIST_KNOWN_HOSTS"),
            strict_host_key_checking=cls._get_bool("PERSIST_STRICT_HOST_KEY_CHECKING", True),
            mount_path=os.getenv("PERSIST_MOUNT_PATH", "/data/moltbot"),
            workspace_dir=os.getenv("PERSIST_WORKSPACE_DIR", "/root/clawd"),
            transport=cls._get_transport(),
            http_host=os.getenv("PERSIST_HTTP_HOST", "0.0.0.0"),
            http_port=cls._get_int("PERSIST_HTTP_PORT", 8000),
            log_level=os.getenv("PERSIST_LOG_LEVEL", "INFO").upper(),
            log_colors=cls._get_bool("PERSIST_LOG_COLORS", True),
            log_payloads=cls._get_bool("PERSIST_LOG_PAYLOADS", False),
            slow_threshold_ms=cls._get_int("PERSIST_SLOW_THRESHOLD_MS", 1000),
            include_traceback=cls._get_bool("PERSIST_INCLUDE_TRACEBACK", False),
        )

    @staticmethod
    def _get_str(key: str) -> str | None:
        """Get a non-blank string from environment, else None."""
        value = os.getenv(key, "").strip()
        return value or None

    @staticmethod
    def _get_int(key: str, default: int) -> int:
        """Get integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            return int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        """Get boolean from environment.

        Args:
            key: Environment variable key
            default: Default value if not set

        Returns:
            Boolean value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_transport() -> str:
        """Get transport from environment with validation.

        Returns:
            Transport type ("http" or "stdio")
        """
        transport = os.getenv("PERSIST_TRANSPORT", "").lower()
        if transport in ("http", "stdio"):
            return transport
        return "http"

    @property
    def storage_configured(self) -> bool:
        return self.credentials().is_complete

    def credentials(self) -> StorageCredentials:
        """Storage credentials assembled from settings."""
        return StorageCredentials(
            access_key_id=self.r2_access_key_id,
            secret_access_key=self.r2_secret_access_key,
            account_id=self.cf_account_id,
            bucket_name=self.r2_bucket_name,
        )

    def sandbox_host_config(self) -> SSHHost:
        """SSH endpoint of the sandbox."""
        return SSHHost(
            name="sandbox",
            hostname=self.sandbox_host,
            user=self.sandbox_user,
            port=self.sandbox_port,
            identity_file=self.sandbox_identity_file,
        )

    def layout(self) -> SyncLayout:
        """Sandbox and bucket layout with configured paths."""
        return SyncLayout(mount_path=self.mount_path, workspace_dir=self.workspace_dir)
