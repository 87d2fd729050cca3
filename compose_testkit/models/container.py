"""Container state snapshots."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ContainerState(str, Enum):
    """Container states the exit waiter distinguishes.

    Everything docker reports besides created/running/exited (restarting,
    paused, removing, dead) collapses to OTHER.
    """

    CREATED = "created"
    RUNNING = "running"
    EXITED = "exited"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ContainerState":
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class ContainerStatus:
    """One container of a compose project, as seen at inspection time."""

    service: str
    state: ContainerState
    exit_code: Optional[int] = None  # Only set when state is EXITED
    name: str = ""

    @property
    def exited(self) -> bool:
        return self.state is ContainerState.EXITED
