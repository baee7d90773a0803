"""No-credential ACL / listing checks through an external tool."""

import asyncio
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from s3checker.core.config import settings
from s3checker.core.error_handler import error_handler
from s3checker.parsers.listing_parser import parse_cli_summary


@dataclass(frozen=True)
class AclOutcome:
    """What an anonymous ACL/listing attempt revealed."""

    readable: bool
    object_count: Optional[int] = None
    total_size: Optional[int] = None


NOT_READABLE = AclOutcome(readable=False)


class AclChecker(ABC):
    """Secondary permission signal used when the HTTP listing is inconclusive."""

    name: str = "base"

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the checker can run at all."""
        raise NotImplementedError("Subclass must implement is_available() method")

    @abstractmethod
    async def check(self, bucket: str) -> AclOutcome:
        """
        Try to list or read the ACL of a bucket without credentials.

        Implementations never raise for tool or network failures; they
        return NOT_READABLE instead.
        """
        raise NotImplementedError("Subclass must implement check() method")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name}>"


class NoopAclChecker(AclChecker):
    """Disabled fallback: never available, never readable."""

    name = "noop"

    def is_available(self) -> bool:
        return False

    async def check(self, bucket: str) -> AclOutcome:
        return NOT_READABLE


class AwsCliAclChecker(AclChecker):
    """Runs the ``aws`` CLI with ``--no-sign-request``.

    Tries ``aws s3 ls --summarize`` first and ``aws s3api get-bucket-acl``
    second; exit code 0 on either means the bucket is anonymously readable.
    """

    name = "aws-cli"

    def __init__(self, binary: str = "aws", timeout: Optional[float] = None):
        """
        Initialize the checker.

        Args:
            binary: Name or path of the aws executable
            timeout: Per-command timeout in seconds (defaults to settings.ACL_TIMEOUT)
        """
        self.binary = binary
        self.timeout = timeout if timeout is not None else settings.ACL_TIMEOUT
        self._available: Optional[bool] = None

    def is_available(self) -> bool:
        if self._available is None:
            tool_path = shutil.which(self.binary)
            if tool_path:
                logger.debug(f"Tool {self.binary} found at: {tool_path}")
            else:
                logger.warning(f"Tool {self.binary} not found in PATH, ACL fallback disabled")
            self._available = tool_path is not None
        return self._available

    def build_commands(self, bucket: str) -> List[List[str]]:
        return [
            [self.binary, "s3", "ls", f"s3://{bucket}", "--no-sign-request", "--summarize"],
            [self.binary, "s3api", "get-bucket-acl", "--bucket", bucket, "--no-sign-request"],
        ]

    async def check(self, bucket: str) -> AclOutcome:
        if not self.is_available():
            return NOT_READABLE

        listing, acl = self.build_commands(bucket)

        stdout, return_code = await self.execute_command(listing)
        if return_code == 0:
            stats = parse_cli_summary(stdout)
            logger.debug(f"{bucket}: anonymous CLI listing succeeded")
            if stats is None:
                return AclOutcome(readable=True)
            return AclOutcome(
                readable=True,
                object_count=stats.object_count,
                total_size=stats.total_size,
            )

        _, return_code = await self.execute_command(acl)
        if return_code == 0:
            logger.debug(f"{bucket}: anonymous ACL read succeeded")
            return AclOutcome(readable=True)

        return NOT_READABLE

    async def execute_command(self, command: List[str]) -> Tuple[str, int]:
        """
        Run a command, returning (stdout, return_code).

        Timeouts and spawn failures are reported as return code -1.
        """
        logger.debug(f"Executing command: {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.debug(f"Could not start {command[0]}: {error_handler.describe(e)}")
            return "", -1

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.debug(f"Command timed out after {self.timeout}s: {' '.join(command)}")
            process.kill()
            await process.wait()
            return "", -1

        return stdout.decode("utf-8", errors="ignore"), process.returncode
