"""Type definitions and errors for pool scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from .determinism import compute_leaderboard_hash


class PoolError(Exception):
    """Base class for pool errors."""

    pass


class ValidationError(PoolError):
    """Raised when input validation fails."""

    pass


class NotFoundError(PoolError):
    """Raised when a referenced event or question does not exist."""

    pass


class EventLockedError(PoolError):
    """Raised when a submission targets a locked or inactive event."""

    pass


class SubmissionLimitError(PoolError):
    """Raised when a username has reached its per-event entry cap."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Derived leaderboard records (never persisted)
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LeaderboardEntry:
    """One submission's rank and score."""

    entry_number: int
    submission_id: str
    username: str
    first_name: str
    last_name: str
    correct_answers: int
    total_questions: int
    percentage: float
    submitted_at: Optional[datetime] = None


@dataclass(frozen=True)
class QuestionStat:
    """Correctness rate of one graded question across all submissions."""

    question_id: str
    question: str
    correct_answer: str
    question_number: int
    total_correct: int
    total_submissions: int
    percentage: float


@dataclass(frozen=True)
class Leaderboard:
    entries: Tuple[LeaderboardEntry, ...] = field(default_factory=tuple)
    stats: Tuple[QuestionStat, ...] = field(default_factory=tuple)

    def fingerprint(self) -> str:
        """Deterministic hash of the board, stable across recomputation."""
        return compute_leaderboard_hash(self)


__all__ = [
    "PoolError",
    "ValidationError",
    "NotFoundError",
    "EventLockedError",
    "SubmissionLimitError",
    "LeaderboardEntry",
    "QuestionStat",
    "Leaderboard",
]
