"""Process management for FFMPEG execution."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Optional

from ..errors import FFmpegError
from .binaries import BinaryLocator
from .command_builder import FFMPEGCommand

logger = logging.getLogger("mediafx")


@dataclass
class ProcessResult:
    """Result of an FFMPEG process execution."""
    success: bool
    return_code: int
    stdout: str
    stderr: str
    command: str
    output_path: Optional[str] = None
    error_message: Optional[str] = None
    timed_out: bool = False


class ProcessManager:
    """Runs FFMPEG and ffprobe as asynchronous subprocesses."""

    def __init__(
        self,
        locator: Optional[BinaryLocator] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize process manager.

        Args:
            locator: Binary discovery; binaries are resolved on first use.
            timeout: Deadline in seconds for each invocation. On expiry
                the process is killed. None waits indefinitely.
        """
        self.locator = locator or BinaryLocator()
        self.timeout = timeout

    def _prepare(self, command: FFMPEGCommand | list[str]) -> tuple[list[str], str, Optional[str]]:
        if isinstance(command, FFMPEGCommand):
            args = command.to_args()
            cmd_string = command.to_string()
            output_path = command.outputs[0] if command.outputs else None
        else:
            args = list(command)
            cmd_string = " ".join(args)
            output_path = None

        # Replace the bare binary name with the discovered path
        if args and args[0] in ("ffmpeg", "ffprobe"):
            args[0] = self.locator.locate(args[0])
        return args, cmd_string, output_path

    async def execute_async(
        self,
        command: FFMPEGCommand | list[str],
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """Execute a command and collect its output.

        Args:
            command: FFMPEGCommand object or list of arguments whose first
                element is ``"ffmpeg"``/``"ffprobe"`` or an executable path.
            timeout: Overrides the manager's deadline for this call.

        Returns:
            ProcessResult with execution details. Spawn failures and
            timeouts are reported as unsuccessful results.
        """
        args, cmd_string, output_path = self._prepare(command)
        deadline = timeout if timeout is not None else self.timeout
        logger.debug("Running: %s", cmd_string)

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            return ProcessResult(
                success=False,
                return_code=-1,
                stdout="",
                stderr=str(e),
                command=cmd_string,
                output_path=output_path,
                error_message=str(e),
            )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            return ProcessResult(
                success=False,
                return_code=-1,
                stdout="",
                stderr=f"Process timed out after {deadline} seconds",
                command=cmd_string,
                output_path=output_path,
                error_message="Execution timed out",
                timed_out=True,
            )
        except asyncio.CancelledError:
            process.kill()
            await process.wait()
            raise

        stderr_str = stderr.decode(errors="replace")
        success = process.returncode == 0
        return ProcessResult(
            success=success,
            return_code=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr_str,
            command=cmd_string,
            output_path=output_path,
            error_message=None if success else self._parse_error(stderr_str),
        )

    async def run(
        self,
        command: FFMPEGCommand | list[str],
        description: str = "running FFmpeg",
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """Execute a command and raise if it fails.

        Raises:
            FFmpegError: With the process's stderr attached verbatim.
        """
        result = await self.execute_async(command, timeout=timeout)
        if not result.success:
            raise FFmpegError(
                f"Error {description}",
                stderr=result.stderr,
                return_code=result.return_code,
                command=result.command,
            )
        return result

    def _parse_error(self, stderr: str) -> str:
        """Extract a concise error message from FFMPEG stderr."""
        lines = stderr.strip().split("\n")

        error_patterns = [
            r"Error .*",
            r"Invalid .*",
            r"No such file or directory",
            r"Permission denied",
            r"Unknown encoder .*",
            r"No such filter: .*",
            r"Could not .*",
        ]

        for line in reversed(lines):
            for pattern in error_patterns:
                if re.search(pattern, line, re.IGNORECASE):
                    return line.strip()

        for line in reversed(lines):
            if line.strip():
                return line.strip()

        return "Unknown error"
