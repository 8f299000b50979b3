"""Pool hyperparameters and configuration.

All tunables for lock timing, submission intake and the live feed live
here so every process (web workers, the lock watcher) agrees on them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
import pytz


class LockParams(BaseModel):
    """Deadline lock parameters."""

    timezone: str = Field(
        default="America/New_York",
        description="Civil timezone in which event start times are compared. One zone for every caller.",
    )
    check_steps: int = Field(
        default=1,
        ge=1,
        le=1000,
        description="Run the lock sweep every N watcher steps.",
    )
    check_interval_seconds: int = Field(
        default=30,
        ge=1,
        le=3600,
        description="Seconds between watcher steps.",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            pytz.timezone(value)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"unknown timezone: {value}")
        return value

    def tzinfo(self) -> pytz.BaseTzInfo:
        return pytz.timezone(self.timezone)


class SubmissionParams(BaseModel):
    """Submission intake limits."""

    max_per_username: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Soft cap on entries per username per event.",
    )
    require_all_answers: bool = Field(
        default=True,
        description="Reject submissions that leave any question unanswered.",
    )
    max_text_answer_length: int = Field(
        default=200,
        ge=1,
        le=10_000,
        description="Longest accepted free-text answer.",
    )


class FeedParams(BaseModel):
    """Live update feed polling."""

    poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        le=600,
        description="Seconds between snapshot fetches for a subscription.",
    )


class PoolParams(BaseModel):
    """Master configuration for all pool parameters."""

    lock: LockParams = Field(default_factory=LockParams)
    submission: SubmissionParams = Field(default_factory=SubmissionParams)
    feed: FeedParams = Field(default_factory=FeedParams)


# Default instance for easy import
DEFAULT_POOL_PARAMS = PoolParams()


def get_pool_params() -> PoolParams:
    """Get pool parameters."""
    return DEFAULT_POOL_PARAMS


__all__ = [
    "LockParams",
    "SubmissionParams",
    "FeedParams",
    "PoolParams",
    "DEFAULT_POOL_PARAMS",
    "get_pool_params",
]
