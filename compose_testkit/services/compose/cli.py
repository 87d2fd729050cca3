"""docker compose argument builder.

ComposeCommand translates lifecycle operations into the argument vectors
passed to the docker CLI. Every vector is scoped to one project with
``-p <name> -f <file>``.
"""

from typing import List, Optional, Sequence

from ...config import settings
from ...models.project import ProjectInfo


class ComposeCommand:
    """Builds ``docker compose`` CLI arguments for a project."""

    def __init__(self, docker_binary: Optional[str] = None):
        self._docker_binary = docker_binary or settings.docker_binary

    @property
    def executable(self) -> str:
        return self._docker_binary

    def base_args(self, project: ProjectInfo) -> List[str]:
        """Arguments selecting the compose plugin and the project."""
        return ["compose", "-p", project.name, "-f", str(project.compose_file)]

    def up(self, project: ProjectInfo) -> List[str]:
        # up pulls missing images, creates and starts every service
        return self.base_args(project) + ["up", "--detach", "--quiet-pull"]

    def kill(self, project: ProjectInfo) -> List[str]:
        return self.base_args(project) + ["kill"]

    def down(self, project: ProjectInfo) -> List[str]:
        return self.base_args(project) + ["down", "--volumes", "--remove-orphans"]

    def run(self, project: ProjectInfo, service: str, command: Sequence[str]) -> List[str]:
        """One-off container for a service.

        ``-T`` disables the pseudo-TTY so stdout and stderr stay separate.
        ``--quiet-pull`` keeps pull progress out of the command's stderr.
        """
        return self.base_args(project) + [
            "run", "--rm", "-T", "--quiet-pull", service, *command
        ]

    def exec(self, project: ProjectInfo, service: str, command: Sequence[str]) -> List[str]:
        """Command inside the running container of a service."""
        return self.base_args(project) + ["exec", "-T", service, *command]

    def logs(self, project: ProjectInfo, service: str) -> List[str]:
        return self.base_args(project) + ["logs", "--no-color", service]
