"""pytest integration.

Registered through the ``pytest11`` entry point. Provides the
``compose_project`` fixture:

    @pytest.mark.asyncio
    async def test_migrations(compose_project):
        compose = await compose_project("tests/docker-compose.yml", force_kill=True)
        await compose.wait_for_service_to_exit("migrations")

Every project created through the fixture is torn down when the test
finishes, whether it passed or not.
"""

from typing import Any, AsyncIterator, Awaitable, Callable, List

import pytest_asyncio
import structlog

from .services.compose.manager import LifecycleManager
from .utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def pytest_addoption(parser):
    group = parser.getgroup("compose-testkit")
    group.addoption(
        "--compose-log-level",
        action="store",
        default=None,
        help="Configure compose-testkit logging at this level (e.g. DEBUG)",
    )


def pytest_configure(config):
    level = config.getoption("--compose-log-level")
    if level:
        setup_logging(level=level)


@pytest_asyncio.fixture
async def compose_project() -> AsyncIterator[Callable[..., Awaitable[LifecycleManager]]]:
    """Factory creating started LifecycleManagers, torn down after the test."""
    managers: List[LifecycleManager] = []

    async def factory(compose_file: Any, **options: Any) -> LifecycleManager:
        manager = LifecycleManager(compose_file, **options)
        managers.append(manager)
        await manager.setup()
        return manager

    yield factory

    for manager in reversed(managers):
        if not await manager.teardown():
            logger.warning("Compose project left behind", project=manager.project_name)
