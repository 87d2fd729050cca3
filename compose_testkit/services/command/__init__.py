"""Subprocess execution."""

from .runner import SubprocessCommandRunner, build_env

__all__ = [
    "SubprocessCommandRunner",
    "build_env",
]
