"""Compose project lifecycle management."""

from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

import structlog

from ...models.container import ContainerStatus
from ...models.errors import CommandError, ProjectStateError, StartupError, ValidationError
from ...models.execution import ExecutionResult
from ...models.project import (
    ProjectInfo,
    ProjectPhase,
    derive_project_name,
    validate_project_name,
)
from ..command.runner import SubprocessCommandRunner, build_env
from ..interfaces import CommandRunner, ContainerInspector, LogAggregator, ProjectController
from .cli import ComposeCommand
from .controller import ComposeProjectController
from .inspector import DockerContainerInspector
from .logs import ComposeLogAggregator
from .waiter import ExitWaiter

logger = structlog.get_logger(__name__)


class LifecycleManager:
    """Owns one compose project from setup to teardown.

    run_service, exec_in_service and wait_for_service_to_exit are only
    allowed between a successful setup() and teardown().

    Usage:
        async with LifecycleManager("tests/docker-compose.yml", env={"A": "1"}) as compose:
            result = await compose.run_service("app", ["echo", "hello"])
    """

    def __init__(
        self,
        compose_file: Union[str, Path],
        *,
        force_kill: bool = False,
        env: Optional[Mapping[str, str]] = None,
        project_name: Optional[str] = None,
        runner: Optional[CommandRunner] = None,
        controller: Optional[ProjectController] = None,
        inspector: Optional[ContainerInspector] = None,
        logs: Optional[LogAggregator] = None,
        command: Optional[ComposeCommand] = None,
    ):
        path = Path(compose_file)
        if not path.is_file():
            raise ValidationError(f"Compose file not found: {path}")
        path = path.resolve()

        self._project = ProjectInfo(
            name=validate_project_name(project_name) if project_name else derive_project_name(path),
            compose_file=path,
            env={str(k): str(v) for k, v in (env or {}).items()},
            force_kill=force_kill,
        )
        self._phase = ProjectPhase.UNSET

        self._command = command or ComposeCommand()
        self._runner = runner or SubprocessCommandRunner()
        self._controller = controller or ComposeProjectController(self._runner, self._command)
        self._owned_inspector = None
        if inspector is None:
            inspector = self._owned_inspector = DockerContainerInspector()
        self._waiter = ExitWaiter(
            inspector, logs or ComposeLogAggregator(self._runner, self._command)
        )

    @property
    def project(self) -> ProjectInfo:
        return self._project

    @property
    def project_name(self) -> str:
        """Compose project name, as it appears in container names and logs."""
        return self._project.name

    @property
    def phase(self) -> ProjectPhase:
        return self._phase

    def _require_active(self, operation: str) -> None:
        if self._phase is not ProjectPhase.ACTIVE:
            raise ProjectStateError(
                operation, self._phase.value, project_name=self.project_name
            )

    async def setup(self) -> None:
        """Start the project. Call exactly once.

        Raises:
            StartupError: If the project could not be started
            ProjectStateError: If setup was already called
        """
        if self._phase is not ProjectPhase.UNSET:
            raise ProjectStateError("setup", self._phase.value, project_name=self.project_name)
        try:
            await self._controller.start(self._project)
        except CommandError as e:
            logger.error(
                "Compose project failed to start",
                project=self.project_name,
                exit_code=e.exit_code,
                stderr=e.stderr,
            )
            raise StartupError.from_command_error(self.project_name, e) from e
        self._phase = ProjectPhase.ACTIVE

    async def teardown(self) -> bool:
        """Stop and remove the project's containers.

        Safe to call more than once and after a failed setup. Cleanup is
        attempted once, without retries; a failure is logged, not raised.

        Returns:
            True if the project was removed (or already terminated)
        """
        if self._phase is ProjectPhase.TERMINATED:
            logger.debug("Compose project already torn down", project=self.project_name)
            return True

        self._phase = ProjectPhase.TERMINATED
        try:
            await self._controller.stop(self._project, self._project.force_kill)
            return True
        except CommandError as e:
            logger.warning(
                "Failed to tear down compose project",
                project=self.project_name,
                exit_code=e.exit_code,
                stderr=e.stderr,
            )
            return False
        finally:
            if self._owned_inspector is not None:
                self._owned_inspector.close()

    async def run_service(self, service: str, command: Sequence[str]) -> ExecutionResult:
        """Run a command in a new one-off container of ``service``.

        The container sees the project env overlay and the ambient PATH.

        Raises:
            CommandError: If the command exits with a non-zero code
        """
        self._require_active("run_service")
        return await self._runner.run(
            self._command.executable,
            self._command.run(self._project, service, self._check_command(command)),
            build_env(self._project.env),
        )

    async def exec_in_service(self, service: str, command: Sequence[str]) -> ExecutionResult:
        """Run a command inside the already running container of ``service``.

        Raises:
            CommandError: If the command exits with a non-zero code
        """
        self._require_active("exec_in_service")
        return await self._runner.run(
            self._command.executable,
            self._command.exec(self._project, service, self._check_command(command)),
            build_env(self._project.env),
        )

    async def wait_for_service_to_exit(
        self,
        service: str,
        accept_any_exit_code: bool = False,
        timeout: Optional[float] = None,
    ) -> ContainerStatus:
        """Wait until ``service`` has exited, see ExitWaiter.

        Raises:
            ExitCodeMismatchError: The service exited with a non-zero code
            StillRunningError: The service did not exit within the timeout
        """
        self._require_active("wait_for_service_to_exit")
        return await self._waiter.wait_for_service_to_exit(
            self._project,
            service,
            accept_any_exit_code=accept_any_exit_code,
            timeout=timeout,
        )

    @staticmethod
    def _check_command(command: Sequence[str]) -> list:
        if isinstance(command, (str, bytes)):
            raise ValidationError("command must be a list of arguments, not a string")
        return [str(arg) for arg in command]

    async def __aenter__(self) -> "LifecycleManager":
        try:
            await self.setup()
        except BaseException:
            await self.teardown()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.teardown()
