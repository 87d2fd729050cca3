"""Retry policy for polling loops."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """Time budget and sleep spacing for a RetryPoller."""

    model_config = ConfigDict(frozen=True)

    max_retry_time: float = Field(..., gt=0, description="Total budget in seconds")
    min_interval: float = Field(default=0.1, gt=0, le=5, description="First sleep in seconds")
    max_interval: float = Field(default=2.0, gt=0, le=5, description="Sleep cap in seconds")
    factor: float = Field(default=2.0, ge=1, description="Sleep growth per retry")

    @model_validator(mode="after")
    def check_intervals(self) -> "RetryPolicy":
        if self.min_interval > self.max_interval:
            raise ValueError("min_interval must not exceed max_interval")
        return self

    def interval_for(self, attempt: int) -> float:
        """Sleep before the retry following ``attempt`` (1-based)."""
        # Exponent is capped so long waits cannot overflow the float pow
        exponent = min(max(attempt - 1, 0), 64)
        return min(self.min_interval * self.factor**exponent, self.max_interval)

    @classmethod
    def from_settings(cls, timeout: Optional[float] = None) -> "RetryPolicy":
        """Create a policy from settings, optionally overriding the budget."""
        from ..config import settings

        return cls(
            max_retry_time=timeout if timeout is not None else settings.default_wait_timeout_seconds,
            min_interval=settings.poll_min_interval_seconds,
            max_interval=settings.poll_max_interval_seconds,
            factor=settings.poll_backoff_factor,
        )
