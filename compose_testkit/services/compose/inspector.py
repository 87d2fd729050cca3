"""Container state inspection through the Docker Engine API.

Compose labels every container it creates with the project and service
name, so the project's containers are found with a label filter instead of
parsing ``docker compose ps`` output.
"""

from typing import Any, List, Mapping, Optional

import docker
import structlog
from docker.context import ContextAPI
from docker.models.containers import Container

from ...models.container import ContainerState, ContainerStatus
from ...models.project import ProjectInfo
from ..command.runner import build_env
from .utils import run_in_executor

logger = structlog.get_logger(__name__)

PROJECT_LABEL = "com.docker.compose.project"
SERVICE_LABEL = "com.docker.compose.service"
ONEOFF_LABEL = "com.docker.compose.oneoff"

# Reported when the engine leaves ExitCode out of an exited container's state
UNKNOWN_EXIT_CODE = -1


def client_from_env(env: Optional[Mapping[str, str]] = None) -> docker.DockerClient:
    """Create a Docker API client for the daemon the compose CLI talks to.

    ``env`` defaults to the environment handed to compose subprocesses.
    DOCKER_HOST wins; otherwise a non-default docker context (DOCKER_CONTEXT
    or the config's current context) supplies the endpoint.
    """
    env = dict(build_env() if env is None else env)
    if "DOCKER_HOST" not in env:
        context = ContextAPI.get_context(env.get("DOCKER_CONTEXT"))
        if context is not None and context.name != "default" and context.Host:
            logger.debug("Using docker context", context=context.name, host=context.Host)
            return docker.DockerClient(base_url=context.Host, tls=context.TLSConfig or False)
    return docker.from_env(environment=env)


class DockerContainerInspector:
    """Lists the containers of a compose project with their state."""

    def __init__(self, client: Optional[docker.DockerClient] = None):
        """Initialize the inspector.

        Args:
            client: Docker client, created with client_from_env on first use
        """
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> docker.DockerClient:
        if self._client is None:
            self._client = client_from_env()
        return self._client

    async def list(self, project: ProjectInfo) -> List[ContainerStatus]:
        """Snapshot of the project's service containers, sorted by name.

        One-off containers created by ``docker compose run`` are skipped,
        matching what ``docker compose ps`` reports.
        """
        containers = await run_in_executor(self._list_containers, project.name)
        statuses = [
            self._to_status(container)
            for container in containers
            if container.labels.get(ONEOFF_LABEL, "False") != "True"
        ]
        statuses.sort(key=lambda status: status.name)
        logger.debug(
            "Inspected project containers",
            project=project.name,
            containers={s.name: s.state.value for s in statuses},
        )
        return statuses

    def _list_containers(self, project_name: str) -> List[Container]:
        return self._get_client().containers.list(
            all=True,
            filters={"label": f"{PROJECT_LABEL}={project_name}"},
        )

    def _to_status(self, container: Container) -> ContainerStatus:
        state_attrs: Any = container.attrs.get("State") or {}
        state = ContainerState.parse(
            state_attrs.get("Status") if isinstance(state_attrs, dict) else container.status
        )
        exit_code = None
        if state is ContainerState.EXITED:
            exit_code = state_attrs.get("ExitCode") if isinstance(state_attrs, dict) else None
            if not isinstance(exit_code, int):
                exit_code = UNKNOWN_EXIT_CODE
        return ContainerStatus(
            service=container.labels.get(SERVICE_LABEL, ""),
            state=state,
            exit_code=exit_code,
            name=container.name,
        )

    def close(self) -> None:
        """Close the docker client if this inspector created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
