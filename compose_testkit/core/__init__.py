"""Core building blocks shared by the compose services."""

from .retry import Abort, Done, Outcome, Retry, RetryPoller, poll

__all__ = [
    "Abort",
    "Done",
    "Outcome",
    "Retry",
    "RetryPoller",
    "poll",
]
