"""Mount the object storage bucket inside the sandbox with s3fs."""

import logging

from persist_mcp.models import StorageCredentials
from persist_mcp.services.runner import ProcessRunner
from persist_mcp.utils.shell import login_shell, shell_escape_arg

logger = logging.getLogger(__name__)

MOUNT_CHECK_TIMEOUT_MS = 5000
MOUNT_TIMEOUT_MS = 15000
PASSWD_FILE = "/etc/passwd-s3fs"


class S3FSMounter:
    """Idempotent s3fs mount of the R2 bucket at a fixed path."""

    def __init__(self, runner: ProcessRunner, mount_path: str) -> None:
        self.runner = runner
        self.mount_path = mount_path

    async def is_mounted(self) -> bool:
        """Check the mount table for the mount path."""
        needle = shell_escape_arg(f" {self.mount_path} ")
        result = await self.runner.run(
            login_shell(f"mount | grep -F -q {needle}"),
            MOUNT_CHECK_TIMEOUT_MS,
        )
        return result.succeeded

    async def mount(self, credentials: StorageCredentials) -> bool:
        """Mount the bucket unless it is already mounted.

        Args:
            credentials: Storage credentials with account and keys

        Returns:
            True when the mount point is ready.

        Raises:
            Exception: Transport failures propagate.
        """
        if await self.is_mounted():
            logger.debug("Storage already mounted at %s", self.mount_path)
            return True

        mount_path = shell_escape_arg(self.mount_path)
        passwd = shell_escape_arg(PASSWD_FILE)
        secret = shell_escape_arg(
            f"{credentials.access_key_id}:{credentials.secret_access_key}"
        )
        script = (
            f"mkdir -p {mount_path} && "
            f"printf '%s' {secret} > {passwd} && chmod 600 {passwd} && "
            f"s3fs {shell_escape_arg(credentials.bucket_name)} {mount_path} "
            f"-o passwd_file={passwd} "
            f"-o url={shell_escape_arg(credentials.endpoint)} "
            f"-o use_path_request_style"
        )
        logger.info(
            "Mounting bucket %s at %s",
            credentials.bucket_name,
            self.mount_path,
        )
        result = await self.runner.run(
            login_shell(script),
            MOUNT_TIMEOUT_MS,
            display=f"s3fs {credentials.bucket_name} {self.mount_path}",
        )
        if not result.succeeded:
            logger.warning(
                "Mount failed (status=%s, exit_code=%s): %s",
                result.status,
                result.exit_code,
                result.stderr.strip() or result.stdout.strip(),
            )
            return False

        logger.info("Storage mounted at %s", self.mount_path)
        return True
