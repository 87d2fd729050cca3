"""Starting and stopping compose projects."""

from typing import Optional

import structlog

from ...models.errors import CommandError
from ...models.project import ProjectInfo
from ..command.runner import SubprocessCommandRunner, build_env
from ..interfaces import CommandRunner
from .cli import ComposeCommand

logger = structlog.get_logger(__name__)


class ComposeProjectController:
    """Brings a compose project up and down through the docker CLI."""

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        command: Optional[ComposeCommand] = None,
    ):
        self._runner = runner or SubprocessCommandRunner()
        self._command = command or ComposeCommand()

    async def start(self, project: ProjectInfo) -> None:
        """Pull, create and start all services.

        Raises:
            CommandError: If ``docker compose up`` fails
        """
        logger.info(
            "Starting compose project",
            project=project.name,
            compose_file=str(project.compose_file),
        )
        await self._runner.run(
            self._command.executable,
            self._command.up(project),
            build_env(project.env),
        )
        logger.info("Compose project started", project=project.name)

    async def stop(self, project: ProjectInfo, force_kill: bool = False) -> None:
        """Stop and remove all containers, networks and volumes.

        With force_kill the containers are killed first instead of being
        given their stop grace period.

        Raises:
            CommandError: If ``docker compose down`` fails
        """
        env = build_env(project.env)
        logger.info("Stopping compose project", project=project.name, force_kill=force_kill)
        if force_kill:
            try:
                await self._runner.run(
                    self._command.executable, self._command.kill(project), env
                )
            except CommandError as e:
                # down still removes whatever kill could not reach
                logger.warning(
                    "Failed to kill compose project",
                    project=project.name,
                    exit_code=e.exit_code,
                    stderr=e.stderr,
                )
        await self._runner.run(self._command.executable, self._command.down(project), env)
        logger.info("Compose project stopped", project=project.name)
