"""Data models for compose-testkit."""

from .container import ContainerState, ContainerStatus
from .execution import ExecutionResult, strip_final_newline
from .project import ProjectInfo, ProjectPhase, derive_project_name, validate_project_name
from .retry import RetryPolicy
from .errors import (
    ErrorType,
    ErrorDetail,
    ErrorReport,
    ComposeTestkitError,
    ValidationError,
    ProjectStateError,
    CommandError,
    StartupError,
    ExitCodeMismatchError,
    PollTimeoutError,
    StillRunningError,
)

__all__ = [
    # Container models
    "ContainerState",
    "ContainerStatus",
    # Execution models
    "ExecutionResult",
    "strip_final_newline",
    # Project models
    "ProjectInfo",
    "ProjectPhase",
    "derive_project_name",
    "validate_project_name",
    # Retry models
    "RetryPolicy",
    # Error models
    "ErrorType",
    "ErrorDetail",
    "ErrorReport",
    "ComposeTestkitError",
    "ValidationError",
    "ProjectStateError",
    "CommandError",
    "StartupError",
    "ExitCodeMismatchError",
    "PollTimeoutError",
    "StillRunningError",
]
