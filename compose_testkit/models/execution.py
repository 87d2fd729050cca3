"""Command execution results."""

from dataclasses import dataclass, field
from typing import List


def strip_final_newline(output: str) -> str:
    """Remove a single trailing newline (``\\n`` or ``\\r\\n``)."""
    if output.endswith("\r\n"):
        return output[:-2]
    if output.endswith("\n"):
        return output[:-1]
    return output


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a command that exited successfully."""

    command: List[str] = field(default_factory=list)
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
