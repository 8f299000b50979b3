"""Scoring for prop-pool events.

This package turns graded questions and submissions into a leaderboard:
- Answer matching (exact for closed-form kinds, fuzzy for free text)
- Leaderboard ranking and per-question statistics
- Answer display formatting
- Submission validation
"""

from __future__ import annotations

from .leaderboard import compute_leaderboard
from .matching import is_pick_correct, matches
from .types import Leaderboard, LeaderboardEntry, QuestionStat

__all__ = [
    "compute_leaderboard",
    "is_pick_correct",
    "matches",
    "Leaderboard",
    "LeaderboardEntry",
    "QuestionStat",
]
