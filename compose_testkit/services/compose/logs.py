"""Service log collection for failure diagnostics."""

from typing import Optional

import structlog

from ...models.project import ProjectInfo
from ..command.runner import SubprocessCommandRunner, build_env
from ..interfaces import CommandRunner
from .cli import ComposeCommand

logger = structlog.get_logger(__name__)


class ComposeLogAggregator:
    """Reads the combined log history of a service.

    Lines keep the ``<container>  | `` prefix docker compose adds, so a
    message can be traced back to the replica that wrote it.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        command: Optional[ComposeCommand] = None,
    ):
        self._runner = runner or SubprocessCommandRunner()
        self._command = command or ComposeCommand()

    async def logs_for(self, project: ProjectInfo, service: str) -> str:
        """Return stdout and stderr history of a service as one text blob.

        Raises:
            CommandError: If ``docker compose logs`` fails
        """
        result = await self._runner.run(
            self._command.executable,
            self._command.logs(project, service),
            build_env(project.env),
        )
        # compose writes container output to stdout, its own warnings to stderr
        parts = [part for part in (result.stdout, result.stderr) if part]
        logger.debug("Collected service logs", project=project.name, service=service)
        return "\n".join(parts)
