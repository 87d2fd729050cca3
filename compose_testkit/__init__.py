"""Drive Docker Compose projects from async test suites.

Usage:
    from compose_testkit import LifecycleManager

    async with LifecycleManager("docker-compose.yml", force_kill=True) as compose:
        await compose.wait_for_service_to_exit("migrations")
        result = await compose.exec_in_service("web", ["cat", "/etc/hostname"])
"""

from .models import (
    CommandError,
    ComposeTestkitError,
    ContainerState,
    ContainerStatus,
    ExecutionResult,
    ExitCodeMismatchError,
    ProjectInfo,
    ProjectPhase,
    ProjectStateError,
    RetryPolicy,
    StartupError,
    StillRunningError,
    ValidationError,
)
from .services.compose import LifecycleManager
from .utils import setup_logging

__version__ = "0.1.0"

__all__ = [
    "LifecycleManager",
    "setup_logging",
    "CommandError",
    "ComposeTestkitError",
    "ContainerState",
    "ContainerStatus",
    "ExecutionResult",
    "ExitCodeMismatchError",
    "ProjectInfo",
    "ProjectPhase",
    "ProjectStateError",
    "RetryPolicy",
    "StartupError",
    "StillRunningError",
    "ValidationError",
]
