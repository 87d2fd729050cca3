"""Unit test fixtures."""

import pytest

from compose_testkit.config import settings


@pytest.fixture(autouse=True)
def no_docker_client_env(monkeypatch):
    """Keep the developer's docker variables out of environment assertions."""
    monkeypatch.setattr(settings, "docker_client_env", [])
