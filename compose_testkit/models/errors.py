"""Error models and exception classes for compose-testkit."""

import time
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


class ErrorType(str, Enum):
    """Error type enumeration."""

    VALIDATION = "validation"
    INVALID_STATE = "invalid_state"
    STARTUP_FAILED = "startup_failed"
    COMMAND_FAILED = "command_failed"
    EXIT_CODE_MISMATCH = "exit_code_mismatch"
    STILL_RUNNING = "still_running"
    TIMEOUT = "timeout"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: Optional[str] = Field(None, description="Attribute the detail refers to")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


class ErrorReport(BaseModel):
    """Serializable summary of a failure, for test reports."""

    error: str = Field(..., description="Main error message")
    error_type: ErrorType = Field(..., description="Error category")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    project_name: Optional[str] = Field(
        None, description="Compose project the failure belongs to"
    )
    timestamp: float = Field(default_factory=time.time, description="Error timestamp")

    model_config = ConfigDict(use_enum_values=True)


# Custom Exception Classes


class ComposeTestkitError(Exception):
    """Base exception for compose-testkit."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.VALIDATION,
        details: Optional[List[ErrorDetail]] = None,
        project_name: Optional[str] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or []
        self.project_name = project_name
        super().__init__(message)

    def to_report(self) -> ErrorReport:
        """Convert exception to an error report model."""
        return ErrorReport(
            error=self.message,
            error_type=self.error_type,
            details=self.details if self.details else None,
            project_name=self.project_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        return self.to_report().model_dump()


class ValidationError(ComposeTestkitError):
    """Invalid arguments given to the library."""

    def __init__(self, message: str = "Validation failed", **kwargs):
        super().__init__(message=message, error_type=ErrorType.VALIDATION, **kwargs)


class ProjectStateError(ComposeTestkitError):
    """An operation was called in the wrong lifecycle phase."""

    def __init__(self, operation: str, phase: str, **kwargs):
        self.operation = operation
        self.phase = phase
        super().__init__(
            message=f"Cannot {operation}: project is {phase}",
            error_type=ErrorType.INVALID_STATE,
            **kwargs,
        )


def _format_command(command: Sequence[str]) -> str:
    return " ".join(command)


class CommandError(ComposeTestkitError):
    """A spawned command exited with a non-zero exit code."""

    def __init__(
        self,
        command: Sequence[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
        **kwargs,
    ):
        self.command = list(command)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        message = f"Command failed with exit code {exit_code}: {_format_command(command)}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(
            message=message,
            error_type=ErrorType.COMMAND_FAILED,
            details=[
                ErrorDetail(field="exit_code", message=str(exit_code)),
                ErrorDetail(field="stderr", message=stderr),
            ],
            **kwargs,
        )


class StartupError(ComposeTestkitError):
    """The compose project failed to start."""

    def __init__(
        self,
        project_name: str,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        message = f"Failed to start project {project_name}"
        if exit_code is not None:
            message = f"{message} (exit code {exit_code})"
        if stderr:
            message = f"{message}:\n{stderr}"
        super().__init__(
            message=message,
            error_type=ErrorType.STARTUP_FAILED,
            project_name=project_name,
        )

    @classmethod
    def from_command_error(cls, project_name: str, error: CommandError) -> "StartupError":
        return cls(
            project_name,
            exit_code=error.exit_code,
            stdout=error.stdout,
            stderr=error.stderr,
        )


class ExitCodeMismatchError(ComposeTestkitError):
    """A service exited, but with an exit code that was not accepted.

    The first line of the message is always
    ``Service exited with exit code <N>:`` followed by the service logs.
    """

    def __init__(self, service: str, exit_code: int, logs: str = "", **kwargs):
        self.service = service
        self.exit_code = exit_code
        self.logs = logs
        super().__init__(
            message=f"Service exited with exit code {exit_code}:\n{logs}",
            error_type=ErrorType.EXIT_CODE_MISMATCH,
            details=[
                ErrorDetail(field="service", message=service),
                ErrorDetail(field="exit_code", message=str(exit_code)),
            ],
            **kwargs,
        )


class PollTimeoutError(ComposeTestkitError):
    """A poll did not reach its condition within the time budget."""

    def __init__(
        self,
        attempts: int,
        elapsed: float,
        last_reason: Optional[str] = None,
        **kwargs,
    ):
        self.attempts = attempts
        self.elapsed = elapsed
        self.last_reason = last_reason
        message = f"Condition not met after {attempts} attempts in {elapsed:.1f}s"
        if last_reason:
            message = f"{message}: {last_reason}"
        super().__init__(message=message, error_type=ErrorType.TIMEOUT, **kwargs)


class StillRunningError(ComposeTestkitError):
    """A service did not exit within the timeout.

    The message is always exactly ``Service is still running``; the last
    observation (for example a missing container) is kept in ``last_reason``.
    """

    MESSAGE = "Service is still running"

    def __init__(
        self,
        service: str,
        timeout: float,
        last_reason: Optional[str] = None,
        **kwargs,
    ):
        self.service = service
        self.timeout = timeout
        self.last_reason = last_reason
        details = [
            ErrorDetail(field="service", message=service),
            ErrorDetail(field="timeout", message=f"{timeout}s"),
        ]
        if last_reason:
            details.append(ErrorDetail(field="last_reason", message=last_reason))
        super().__init__(
            message=self.MESSAGE,
            error_type=ErrorType.STILL_RUNNING,
            details=details,
            **kwargs,
        )
