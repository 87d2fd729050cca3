"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from compose_testkit.config import settings
from compose_testkit.models import (
    ContainerState,
    ContainerStatus,
    ExecutionResult,
    ProjectInfo,
)

pytest_plugins = ["pytester"]


@pytest.fixture
def compose_file(tmp_path: Path) -> Path:
    """A compose file on disk; the content is never parsed by the library."""
    path = tmp_path / "docker-compose.yml"
    path.write_text("services:\n  app:\n    image: alpine\n")
    return path


@pytest.fixture
def project(compose_file: Path) -> ProjectInfo:
    """Project identity for collaborator tests."""
    return ProjectInfo(
        name="testkit-abc12345",
        compose_file=compose_file,
        env={"TEST_ENV_VAR": "hello world"},
        force_kill=False,
    )


@pytest.fixture
def fast_polling(monkeypatch):
    """Shrink poll intervals so waits in tests finish quickly."""
    monkeypatch.setattr(settings, "poll_min_interval_seconds", 0.01)
    monkeypatch.setattr(settings, "poll_max_interval_seconds", 0.02)


@pytest.fixture
def mock_runner():
    """Mock CommandRunner returning an empty successful result."""
    runner = AsyncMock()
    runner.run = AsyncMock(return_value=ExecutionResult(command=["docker"], exit_code=0))
    return runner


@pytest.fixture
def mock_inspector():
    """Mock ContainerInspector reporting no containers."""
    inspector = AsyncMock()
    inspector.list = AsyncMock(return_value=[])
    return inspector


@pytest.fixture
def mock_logs():
    """Mock LogAggregator with two lines of output."""
    logs = AsyncMock()
    logs.logs_for = AsyncMock(
        return_value="second-1  | exit code is set to: 1\nsecond-1  | stdout"
    )
    return logs


@pytest.fixture
def mock_controller():
    controller = AsyncMock()
    controller.start = AsyncMock(return_value=None)
    controller.stop = AsyncMock(return_value=None)
    return controller


@pytest.fixture
def make_status():
    """Build ContainerStatus snapshots the way the inspector would."""

    def _make(service: str, state: str, exit_code=None, name: str = "") -> ContainerStatus:
        return ContainerStatus(
            service=service,
            state=ContainerState.parse(state),
            exit_code=exit_code,
            name=name or f"testkit-abc12345-{service}-1",
        )

    return _make
