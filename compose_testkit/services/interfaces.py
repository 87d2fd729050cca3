"""Collaborator interfaces used by the lifecycle manager.

The default implementations talk to docker; tests inject anything that
satisfies these protocols.
"""

from typing import List, Mapping, Optional, Protocol, Sequence

from ..models.container import ContainerStatus
from ..models.execution import ExecutionResult
from ..models.project import ProjectInfo


class CommandRunner(Protocol):
    async def run(
        self,
        executable: str,
        args: Sequence[str],
        env: Optional[Mapping[str, str]] = None,
    ) -> ExecutionResult:
        """Run a command, raising CommandError on a non-zero exit."""
        ...


class ProjectController(Protocol):
    async def start(self, project: ProjectInfo) -> None:
        """Pull, create and start every service of the project."""
        ...

    async def stop(self, project: ProjectInfo, force_kill: bool = False) -> None:
        """Stop and remove every container of the project."""
        ...


class ContainerInspector(Protocol):
    async def list(self, project: ProjectInfo) -> List[ContainerStatus]:
        """Current containers of the project, including exited ones."""
        ...


class LogAggregator(Protocol):
    async def logs_for(self, project: ProjectInfo, service: str) -> str:
        """Combined stdout and stderr history of a service."""
        ...
