"""Waiting for a compose service to exit."""

from typing import Optional

import structlog

from ...core.retry import Abort, Done, Outcome, Retry, RetryPoller
from ...models.container import ContainerStatus
from ...models.errors import (
    CommandError,
    ExitCodeMismatchError,
    PollTimeoutError,
    StillRunningError,
)
from ...models.project import ProjectInfo
from ...models.retry import RetryPolicy
from ..interfaces import ContainerInspector, LogAggregator

logger = structlog.get_logger(__name__)


class ExitWaiter:
    """Polls container state until a service has exited.

    Only an ``exited`` reading settles the wait. A missing container or any
    other state (created, running, restarting) is retried. An exit code
    that is not accepted aborts at once, since a later poll cannot change
    it; the service logs are attached for diagnosis.
    """

    def __init__(self, inspector: ContainerInspector, logs: LogAggregator):
        self._inspector = inspector
        self._logs = logs

    async def wait_for_service_to_exit(
        self,
        project: ProjectInfo,
        service: str,
        accept_any_exit_code: bool = False,
        timeout: Optional[float] = None,
    ) -> ContainerStatus:
        """Wait until ``service`` exits with an accepted exit code.

        Args:
            project: Project the service belongs to
            service: Service name as declared in the compose file
            accept_any_exit_code: Treat every exit code as success
            timeout: Budget in seconds, defaults to
                settings.default_wait_timeout_seconds

        Returns:
            The exited container's status

        Raises:
            ExitCodeMismatchError: The service exited with a non-zero code
            StillRunningError: The service did not exit within the timeout
        """
        policy = RetryPolicy.from_settings(timeout)
        poller = RetryPoller(policy)

        async def check() -> Outcome:
            return await self._check_exit(project, service, accept_any_exit_code)

        logger.info(
            "Waiting for service to exit",
            project=project.name,
            service=service,
            timeout=policy.max_retry_time,
        )
        try:
            status = await poller.poll(check)
        except PollTimeoutError as e:
            raise StillRunningError(
                service,
                policy.max_retry_time,
                last_reason=e.last_reason,
                project_name=project.name,
            ) from e

        logger.info(
            "Service exited",
            project=project.name,
            service=service,
            exit_code=status.exit_code,
        )
        return status

    async def _check_exit(
        self,
        project: ProjectInfo,
        service: str,
        accept_any_exit_code: bool,
    ) -> Outcome:
        containers = await self._inspector.list(project)
        container = next((c for c in containers if c.service == service), None)

        # An unknown service name looks the same as one not created yet
        if container is None:
            return Retry("Service does not exist")
        if not container.exited:
            return Retry(f"Service did not exit (state: {container.state.value})")
        if accept_any_exit_code or container.exit_code == 0:
            return Done(container)

        logs = await self._collect_logs(project, service)
        error = ExitCodeMismatchError(
            service, container.exit_code, logs, project_name=project.name
        )
        logger.error(
            "Service exited with unexpected exit code",
            project=project.name,
            service=service,
            exit_code=container.exit_code,
        )
        return Abort(error)

    async def _collect_logs(self, project: ProjectInfo, service: str) -> str:
        try:
            return await self._logs.logs_for(project, service)
        except CommandError as e:
            logger.warning(
                "Failed to collect service logs",
                project=project.name,
                service=service,
                exit_code=e.exit_code,
            )
            return f"<logs unavailable: {e.stderr or e.message}>"
