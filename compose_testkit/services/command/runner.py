"""Process execution for compose commands.

Uses asyncio subprocess so that waiting for docker never blocks the
event loop of the test suite.
"""

import asyncio
import os
import signal
from typing import Dict, List, Mapping, Optional, Sequence

import structlog

from ...config import settings
from ...models.errors import CommandError
from ...models.execution import ExecutionResult, strip_final_newline

logger = structlog.get_logger(__name__)


def build_env(
    overlay: Optional[Mapping[str, str]] = None,
    passthrough: Optional[Sequence[str]] = None,
) -> Dict[str, str]:
    """Build the environment for a subprocess.

    Only the variables named in ``passthrough`` are taken from the ambient
    environment. By default these are settings.passthrough_env (PATH) plus
    settings.docker_client_env, so the CLI reaches the same daemon as the
    API client. Everything else comes from ``overlay``, which wins on
    conflicts.
    """
    if passthrough is None:
        names = [*settings.passthrough_env, *settings.docker_client_env]
    else:
        names = passthrough
    env: Dict[str, str] = {}
    for name in names:
        value = os.environ.get(name)
        if value is not None:
            env[name] = value
    if overlay:
        env.update({str(k): str(v) for k, v in overlay.items()})
    return env


class SubprocessCommandRunner:
    """Spawns a process, waits for it and captures its output."""

    def __init__(self, timeout: Optional[float] = None):
        """Initialize the runner.

        Args:
            timeout: Seconds before the process is killed, defaults to
                settings.command_timeout_seconds (None = no limit)
        """
        self._timeout = timeout if timeout is not None else settings.command_timeout_seconds

    async def run(
        self,
        executable: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> ExecutionResult:
        """Run a command to completion.

        Args:
            executable: Program to run (looked up on the PATH in env)
            args: Arguments
            env: Complete environment for the process

        Returns:
            ExecutionResult with trimmed stdout and stderr

        Raises:
            CommandError: If the process exits with a non-zero code
        """
        command: List[str] = [executable, *args]
        logger.debug("Running command", command=command)

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(env) if env is not None else None,
                start_new_session=True,  # New process group for clean cleanup
            )
        except FileNotFoundError as e:
            # Mirror the shell's "command not found" exit status
            raise CommandError(command, 127, "", str(e)) from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                proc.communicate(), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.warning("Command timed out", command=command, timeout=self._timeout)
            raise CommandError(
                command, 124, "", f"Command timed out after {self._timeout} seconds"
            )
        except asyncio.CancelledError:
            await self._kill(proc)
            raise

        stdout = strip_final_newline(self._decode_output(stdout_bytes))
        stderr = strip_final_newline(self._decode_output(stderr_bytes))

        if proc.returncode != 0:
            logger.debug(
                "Command failed",
                command=command,
                exit_code=proc.returncode,
            )
            raise CommandError(command, proc.returncode, stdout, stderr)

        return ExecutionResult(
            command=command,
            stdout=stdout,
            stderr=stderr,
            exit_code=proc.returncode,
        )

    async def _kill(self, proc: asyncio.subprocess.Process) -> None:
        """Kill the process group and reap the process."""
        if proc.returncode is not None:
            return
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        await proc.wait()

    def _decode_output(self, output: Optional[bytes]) -> str:
        """Decode process output; undecodable bytes become U+FFFD."""
        if not output:
            return ""
        return output.decode("utf-8", errors="replace")
