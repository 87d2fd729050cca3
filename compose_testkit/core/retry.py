"""Bounded polling with explicit outcomes.

A check function returns one of three outcomes on every attempt:

- Done(value): the condition holds, poll() returns value
- Retry(reason): not yet, poll() sleeps and tries again until the deadline
- Abort(error): the condition can never hold, poll() raises error at once

Usage:
    poller = RetryPoller(RetryPolicy(max_retry_time=30))
    status = await poller.poll(check)
"""

import asyncio
import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

import structlog

from ..models.errors import PollTimeoutError
from ..models.retry import RetryPolicy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Floor for the last, budget-clamped sleep
_MIN_SLEEP = 0.001


@dataclass(frozen=True)
class Done(Generic[T]):
    value: T = None


@dataclass(frozen=True)
class Retry:
    reason: str = ""


@dataclass(frozen=True)
class Abort:
    error: BaseException


Outcome = Union[Done, Retry, Abort]
CheckFunction = Callable[[], Union[Outcome, Awaitable[Outcome]]]


class RetryPoller:
    """Invokes a check until it is done, aborts, or the budget runs out."""

    def __init__(
        self,
        policy: RetryPolicy,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._policy = policy
        self._clock = clock
        self._sleep = sleep

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    async def poll(self, check: CheckFunction) -> Any:
        """Run check until it returns Done or Abort.

        Args:
            check: Zero-argument callable returning an Outcome (or awaitable)

        Returns:
            The value carried by Done

        Raises:
            The error carried by Abort, or PollTimeoutError when the
            budget is exhausted. Exceptions raised by check propagate.
        """
        started = self._clock()
        attempt = 0

        while True:
            attempt += 1
            outcome = check()
            if inspect.isawaitable(outcome):
                outcome = await outcome

            if isinstance(outcome, Done):
                return outcome.value
            if isinstance(outcome, Abort):
                raise outcome.error
            if not isinstance(outcome, Retry):
                raise TypeError(f"Check returned {outcome!r}, expected Done, Retry or Abort")

            elapsed = self._clock() - started
            if elapsed >= self._policy.max_retry_time:
                logger.warning(
                    "Poll timed out",
                    attempts=attempt,
                    elapsed=round(elapsed, 3),
                    reason=outcome.reason,
                )
                raise PollTimeoutError(attempt, elapsed, outcome.reason)

            remaining = self._policy.max_retry_time - elapsed
            interval = max(min(self._policy.interval_for(attempt), remaining), _MIN_SLEEP)
            logger.debug(
                "Poll condition not met, retrying",
                attempt=attempt,
                elapsed=round(elapsed, 3),
                next_interval=round(interval, 3),
                reason=outcome.reason,
            )
            await self._sleep(interval)


async def poll(check: CheckFunction, policy: Optional[RetryPolicy] = None) -> Any:
    """Poll with a one-off RetryPoller, using the settings policy by default."""
    return await RetryPoller(policy or RetryPolicy.from_settings()).poll(check)
