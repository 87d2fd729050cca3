"""Compose project identity and lifecycle phase.

ProjectInfo is the handle passed to every collaborator. It never changes
after the LifecycleManager that owns it is constructed.
"""

import hashlib
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict

from .errors import ValidationError

# docker compose only accepts lowercase alphanumerics, dashes and underscores,
# starting with a letter or digit
_PROJECT_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")
_INVALID_CHARS_RE = re.compile(r"[^a-z0-9_-]+")


class ProjectPhase(str, Enum):
    """Lifecycle phase of a compose project."""

    UNSET = "unset"
    ACTIVE = "active"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class ProjectInfo:
    """Identity of one compose project instance."""

    name: str
    compose_file: Path
    env: Dict[str, str] = field(default_factory=dict)
    force_kill: bool = False


def derive_project_name(compose_file: Path) -> str:
    """Derive a stable project name from a compose file path.

    The name is ``<slug>-<hash8>``: a readable slug built from the parent
    directory and file stem, and the first 8 hex digits of the SHA-256 of
    the resolved path, so that different compose files never share a
    project even when their directories have the same name.

    Args:
        compose_file: Path to the compose file

    Returns:
        A valid docker compose project name
    """
    resolved = Path(compose_file).resolve()
    raw = f"{resolved.parent.name}-{resolved.stem}".lower()
    slug = _INVALID_CHARS_RE.sub("-", raw).strip("-_") or "project"
    digest = hashlib.sha256(str(resolved).encode("utf-8")).hexdigest()[:8]
    return f"{slug}-{digest}"


def validate_project_name(name: str) -> str:
    """Return the name if docker compose accepts it, raise otherwise."""
    if not _PROJECT_NAME_RE.match(name):
        raise ValidationError(
            f"Invalid project name {name!r}: use lowercase letters, digits, "
            "dashes and underscores, starting with a letter or digit"
        )
    return name
