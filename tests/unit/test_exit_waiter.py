"""Unit tests for ExitWaiter."""

import time
from unittest.mock import AsyncMock

import pytest

from compose_testkit.models.errors import (
    CommandError,
    ExitCodeMismatchError,
    StillRunningError,
)
from compose_testkit.services.compose.waiter import ExitWaiter


@pytest.fixture
def waiter(mock_inspector, mock_logs):
    return ExitWaiter(mock_inspector, mock_logs)


class TestSuccessfulExit:
    """Test waits that end with an accepted exit code."""

    @pytest.mark.asyncio
    async def test_returns_when_service_exited_with_zero(
        self, waiter, mock_inspector, project, make_status, fast_polling
    ):
        """Test exit code 0 resolves the wait."""
        mock_inspector.list.return_value = [make_status("second", "exited", 0)]

        status = await waiter.wait_for_service_to_exit(project, "second", timeout=5)

        assert status.exit_code == 0
        mock_inspector.list.assert_awaited_with(project)

    @pytest.mark.asyncio
    async def test_waits_through_running_state(
        self, waiter, mock_inspector, project, make_status, fast_polling
    ):
        """Test created and running readings are retried until exited."""
        mock_inspector.list.side_effect = [
            [],
            [make_status("second", "created")],
            [make_status("second", "running")],
            [make_status("second", "restarting")],
            [make_status("second", "exited", 0)],
        ]

        status = await waiter.wait_for_service_to_exit(project, "second", timeout=5)

        assert status.exited
        assert mock_inspector.list.await_count == 5

    @pytest.mark.asyncio
    async def test_ignores_other_services(
        self, waiter, mock_inspector, project, make_status, fast_polling
    ):
        """Test only the requested service is evaluated."""
        mock_inspector.list.side_effect = [
            [make_status("first", "exited", 1), make_status("second", "running")],
            [make_status("first", "exited", 1), make_status("second", "exited", 0)],
        ]

        status = await waiter.wait_for_service_to_exit(project, "second", timeout=5)

        assert status.service == "second"

    @pytest.mark.asyncio
    async def test_accept_any_exit_code(
        self, waiter, mock_inspector, mock_logs, project, make_status, fast_polling
    ):
        """Test a non-zero exit succeeds when any exit code is accepted."""
        mock_inspector.list.return_value = [make_status("second", "exited", 7)]

        status = await waiter.wait_for_service_to_exit(
            project, "second", accept_any_exit_code=True, timeout=5
        )

        assert status.exit_code == 7
        mock_logs.logs_for.assert_not_awaited()


class TestExitCodeMismatch:
    """Test non-zero exits abort immediately."""

    @pytest.mark.asyncio
    async def test_non_zero_exit_raises_with_logs(
        self, waiter, mock_inspector, mock_logs, project, make_status, fast_polling
    ):
        """Test the message starts with the exit code line, followed by logs."""
        mock_inspector.list.return_value = [make_status("second", "exited", 1)]

        with pytest.raises(ExitCodeMismatchError) as exc_info:
            await waiter.wait_for_service_to_exit(project, "second", timeout=5)

        lines = str(exc_info.value).split("\n")
        assert lines[0] == "Service exited with exit code 1:"
        assert lines[1] == "second-1  | exit code is set to: 1"
        assert lines[2] == "second-1  | stdout"
        assert exc_info.value.exit_code == 1
        assert exc_info.value.service == "second"
        mock_logs.logs_for.assert_awaited_once_with(project, "second")

    @pytest.mark.asyncio
    async def test_non_zero_exit_does_not_wait_out_timeout(
        self, waiter, mock_inspector, project, make_status
    ):
        """Test the first exited observation fails fast."""
        mock_inspector.list.return_value = [make_status("second", "exited", 2)]

        started = time.monotonic()
        with pytest.raises(ExitCodeMismatchError):
            await waiter.wait_for_service_to_exit(project, "second", timeout=300)

        assert time.monotonic() - started < 1
        assert mock_inspector.list.await_count == 1

    @pytest.mark.asyncio
    async def test_log_failure_still_reports_exit_code(
        self, waiter, mock_inspector, mock_logs, project, make_status
    ):
        """Test an unreadable log does not hide the exit code failure."""
        mock_inspector.list.return_value = [make_status("second", "exited", 3)]
        mock_logs.logs_for.side_effect = CommandError(
            ["docker", "compose", "logs"], 1, "", "no such service"
        )

        with pytest.raises(ExitCodeMismatchError) as exc_info:
            await waiter.wait_for_service_to_exit(project, "second", timeout=5)

        assert str(exc_info.value).startswith("Service exited with exit code 3:\n")
        assert "no such service" in exc_info.value.logs


class TestStillRunning:
    """Test waits that run out of time."""

    @pytest.mark.asyncio
    async def test_timeout_raises_still_running(
        self, waiter, mock_inspector, project, make_status, fast_polling
    ):
        """Test the timeout message is exactly 'Service is still running'."""
        mock_inspector.list.return_value = [make_status("second", "running")]

        started = time.monotonic()
        with pytest.raises(StillRunningError) as exc_info:
            await waiter.wait_for_service_to_exit(project, "second", timeout=0.3)
        elapsed = time.monotonic() - started

        assert str(exc_info.value) == "Service is still running"
        assert exc_info.value.service == "second"
        assert exc_info.value.timeout == 0.3
        assert 0.25 <= elapsed < 2

    @pytest.mark.asyncio
    async def test_missing_service_times_out_with_reason(
        self, waiter, mock_inspector, project, fast_polling
    ):
        """Test a service that never appears keeps the reason for diagnosis."""
        mock_inspector.list.return_value = []

        with pytest.raises(StillRunningError) as exc_info:
            await waiter.wait_for_service_to_exit(project, "typo", timeout=0.1)

        assert str(exc_info.value) == "Service is still running"
        assert exc_info.value.last_reason == "Service does not exist"

    @pytest.mark.asyncio
    async def test_still_running_is_not_exit_code_mismatch(
        self, waiter, mock_inspector, project, make_status, fast_polling
    ):
        """Test the two failure kinds can be told apart."""
        mock_inspector.list.return_value = [make_status("second", "running")]

        with pytest.raises(StillRunningError) as exc_info:
            await waiter.wait_for_service_to_exit(project, "second", timeout=0.05)

        assert not isinstance(exc_info.value, ExitCodeMismatchError)
        assert "running" in exc_info.value.last_reason

    @pytest.mark.asyncio
    async def test_inspector_errors_propagate(self, project):
        """Test inspection failures are surfaced, not retried."""
        inspector = AsyncMock()
        inspector.list = AsyncMock(side_effect=ConnectionError("daemon down"))
        waiter = ExitWaiter(inspector, AsyncMock())

        with pytest.raises(ConnectionError):
            await waiter.wait_for_service_to_exit(project, "second", timeout=5)
