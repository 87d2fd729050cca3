"""Integration test fixtures.

These tests drive a real docker daemon through ``docker compose`` and are
skipped when it is not available. Run them explicitly with:

    pytest tests/integration -m integration
"""

import shutil
import subprocess
from pathlib import Path

import pytest

from compose_testkit.config import settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _docker_compose_available() -> bool:
    if shutil.which(settings.docker_binary) is None:
        return False
    try:
        result = subprocess.run(
            [settings.docker_binary, "compose", "version"],
            capture_output=True,
            timeout=30,
        )
        info = subprocess.run(
            [settings.docker_binary, "info"],
            capture_output=True,
            timeout=30,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return result.returncode == 0 and info.returncode == 0


def pytest_collection_modifyitems(config, items):
    if _docker_compose_available():
        return
    skip = pytest.mark.skip(reason="docker compose is not available")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def fixture_path():
    def _path(name: str) -> Path:
        return FIXTURES_DIR / name

    return _path
