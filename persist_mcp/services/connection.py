"""SSH connection to the sandbox with lazy connect and one-time retry."""

import asyncio
import logging

import asyncssh

from persist_mcp.models import SSHHost

logger = logging.getLogger(__name__)


class SandboxConnectionError(Exception):
    """Failed to establish SSH connection to the sandbox after retry."""

    def __init__(self, host_name: str, original_error: Exception):
        """Initialize connection error.

        Args:
            host_name: Name of the sandbox host
            original_error: Original exception that caused the failure
        """
        self.host_name = host_name
        self.original_error = original_error
        super().__init__(f"Cannot connect to {host_name}: {original_error}")


class SandboxConnector:
    """Owns a single reusable SSH connection to the sandbox."""

    def __init__(
        self,
        host: SSHHost,
        known_hosts: str | None = None,
        strict_host_key_checking: bool = True,
    ) -> None:
        """Initialize connector.

        Args:
            host: Sandbox SSH endpoint
            known_hosts: Path to known_hosts file, or None to disable verification
            strict_host_key_checking: Whether to reject unknown host keys
        """
        self.host = host
        self._known_hosts = known_hosts
        self._strict_host_key = strict_host_key_checking
        self._connection: asyncssh.SSHClientConnection | None = None
        self._lock = asyncio.Lock()

        if self._known_hosts is None:
            logger.warning(
                "SSH host key verification DISABLED for %s. "
                "Set PERSIST_KNOWN_HOSTS to a known_hosts file path.",
                host.name,
            )

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.is_closed()

    async def _connect(self) -> asyncssh.SSHClientConnection:
        host = self.host
        client_keys = [host.identity_file] if host.identity_file else None
        logger.info("Opening SSH connection to %s (%s)", host.name, host.address)

        try:
            return await asyncssh.connect(
                host.hostname,
                port=host.port,
                username=host.user,
                known_hosts=self._known_hosts,
                client_keys=client_keys,
            )
        except asyncssh.HostKeyNotVerifiable as e:
            if self._strict_host_key:
                logger.error(
                    "Host key verification failed for %s: %s. "
                    "Add the host key to %s or set "
                    "PERSIST_STRICT_HOST_KEY_CHECKING=false",
                    host.name,
                    e,
                    self._known_hosts,
                )
                raise
            logger.warning(
                "Host key not verified for %s (strict mode disabled): %s",
                host.name,
                e,
            )
            return await asyncssh.connect(
                host.hostname,
                port=host.port,
                username=host.user,
                known_hosts=None,
                client_keys=client_keys,
            )

    async def get_connection(self) -> asyncssh.SSHClientConnection:
        """Return the open connection, connecting if needed."""
        async with self._lock:
            if self.is_connected:
                assert self._connection is not None
                return self._connection

            if self._connection is not None:
                logger.info("Connection to %s is stale, reconnecting", self.host.name)

            self._connection = await self._connect()
            logger.info("SSH connection established to %s", self.host.name)
            return self._connection

    async def get_connection_with_retry(self) -> asyncssh.SSHClientConnection:
        """Get connection, dropping it and retrying once on failure.

        Raises:
            SandboxConnectionError: If the retry fails as well
        """
        try:
            return await self.get_connection()
        except Exception as first_error:
            logger.warning(
                "Connection to %s failed: %s, retrying after cleanup",
                self.host.name,
                first_error,
            )
            try:
                await self.close()
                conn = await self.get_connection()
                logger.info("Retry connection to %s succeeded", self.host.name)
                return conn
            except Exception as retry_error:
                logger.error(
                    "Retry connection to %s failed: %s",
                    self.host.name,
                    retry_error,
                )
                raise SandboxConnectionError(self.host.name, retry_error) from retry_error

    async def close(self) -> None:
        """Close the connection if open."""
        async with self._lock:
            if self._connection is not None:
                logger.info("Closing connection to %s", self.host.name)
                self._connection.close()
                self._connection = None
