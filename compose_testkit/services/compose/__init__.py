"""Docker Compose services.

This package drives compose projects:
- cli.py: ComposeCommand argument builder
- controller.py: Project start and stop
- inspector.py: Container state through the Docker Engine API
- logs.py: Service log collection
- waiter.py: Waiting for a service to exit
- manager.py: Project lifecycle management
"""

from .cli import ComposeCommand
from .controller import ComposeProjectController
from .inspector import DockerContainerInspector
from .logs import ComposeLogAggregator
from .waiter import ExitWaiter
from .manager import LifecycleManager

__all__ = [
    "ComposeCommand",
    "ComposeProjectController",
    "DockerContainerInspector",
    "ComposeLogAggregator",
    "ExitWaiter",
    "LifecycleManager",
]
