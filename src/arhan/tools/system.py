"""Shell command execution tool.

Commands run through the system shell with no filtering; the confirmation
gate is what stands between the model and this tool. Output is captured up
to a fixed ceiling per stream and the command is killed, together with any
children it spawned, when it exceeds that ceiling or runs past the timeout.
"""

import asyncio
import os
import signal
import sys
from typing import Any, Callable

from ..logging import get_logger
from ..types import ToolResult
from .arguments import RunCommandArgs
from .base import BaseTool

logger = get_logger(__name__)

MAX_BUFFER = 10 * 1024 * 1024  # 10MB per stream
COMMAND_TIMEOUT = 120  # seconds
READ_CHUNK = 64 * 1024


def _kill_process_tree(process: asyncio.subprocess.Process) -> None:
    """Kill the shell and everything in its process group."""
    if process.returncode is not None:
        return
    try:
        if sys.platform != "win32":
            # the shell leads its own session, so its pgid is its pid
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()
    except ProcessLookupError:
        logger.debug(f"process {process.pid} already exited")


class _StreamCapture:
    """Bytes read from one pipe, truncated at ``limit``."""

    def __init__(self, limit: int):
        self.limit = limit
        self.data = bytearray()
        self.overflowed = False

    async def drain(self, stream: asyncio.StreamReader, on_overflow: Callable[[], None]) -> None:
        while True:
            chunk = await stream.read(READ_CHUNK)
            if not chunk:
                return
            room = self.limit - len(self.data)
            self.data.extend(chunk[:room])
            if len(chunk) > room:
                self.overflowed = True
                on_overflow()
                return

    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")


class RunCommandTool(BaseTool[RunCommandArgs]):
    """Execute a shell command and capture its output.

    A non-zero exit status is a failed result carrying stderr (or a
    description of the failure when stderr is empty). Exceeding the output
    ceiling or the timeout is a failed result carrying the stdout captured
    so far.
    """

    def __init__(self, timeout: float = COMMAND_TIMEOUT, max_buffer: int = MAX_BUFFER):
        """Initialize the tool.

        Args:
            timeout: Seconds a command may run before it is killed
            max_buffer: Bytes kept per output stream before the command is killed
        """
        self.timeout = timeout
        self.max_buffer = max_buffer

    @property
    def name(self) -> str:
        return "run_command"

    @property
    def description(self) -> str:
        return "Execute a shell command. Use this to run npm install, git commands, tests, etc."

    @property
    def parameters(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "command": {
                    "type": "string",
                    "description": "The shell command to execute",
                },
                "cwd": {
                    "type": "string",
                    "description": "Working directory for the command (optional)",
                },
            },
            "required": ["command"],
        }

    async def execute(self, args: RunCommandArgs) -> ToolResult:
        logger.info(f"running command: {args.command!r} (cwd={args.cwd or '.'})")
        try:
            process = await asyncio.create_subprocess_shell(
                args.command,
                cwd=args.cwd or None,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=sys.platform != "win32",
            )
        except OSError as e:
            return ToolResult.fail(f"Command execution failed: {e}")

        stdout = _StreamCapture(self.max_buffer)
        stderr = _StreamCapture(self.max_buffer)

        def kill() -> None:
            _kill_process_tree(process)

        try:
            await asyncio.wait_for(
                asyncio.gather(
                    stdout.drain(process.stdout, kill),
                    stderr.drain(process.stderr, kill),
                    process.wait(),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"command timed out after {self.timeout}s: {args.command!r}")
            kill()
            await process.wait()
            return ToolResult.fail(
                f"Command timed out after {self.timeout}s",
                output=stdout.text(),
            )
        except BaseException:
            kill()
            raise

        if stdout.overflowed or stderr.overflowed:
            logger.warning(f"command output exceeded {self.max_buffer} bytes: {args.command!r}")
            return ToolResult.fail(
                f"Command output exceeded the buffer limit of {self.max_buffer} bytes",
                output=stdout.text(),
            )

        if process.returncode != 0:
            return ToolResult.fail(
                stderr.text() or f"Command failed with exit code {process.returncode}",
                output=stdout.text(),
            )

        return ToolResult.ok(stdout.text() or stderr.text() or "Command executed successfully (no output)")
