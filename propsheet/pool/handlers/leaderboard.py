"""Leaderboard service: fetch one event's records and rank them.

Read-side only. Lock state is never consulted; a board for an open event is
computed exactly like one for a locked event.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional, Union

from propsheet.pool.feed import LiveFeed, Subscription
from propsheet.pool.scoring.leaderboard import compute_leaderboard
from propsheet.pool.scoring.types import Leaderboard

logger = logging.getLogger(__name__)

LeaderboardCallback = Callable[[Leaderboard], Union[None, Awaitable[None]]]


class LeaderboardService:
    """Compute and watch leaderboards over a DocumentStore."""

    def __init__(self, store: Any, feed: Optional[LiveFeed] = None):
        self.store = store
        self.feed = feed or LiveFeed()

    async def compute(self, event_id: str) -> Leaderboard:
        """Fetch questions and submissions for ``event_id`` and rank them."""
        questions = await self.store.list_questions(event_id)
        submissions = await self.store.list_submissions(event_id)
        return compute_leaderboard(questions, submissions)

    def watch(self, event_id: str, callback: LeaderboardCallback) -> Subscription[Leaderboard]:
        """Deliver a fresh board whenever grading or submissions change."""
        return self.feed.subscribe(
            lambda: self.compute(event_id),
            callback,
            fingerprint=lambda board: board.fingerprint(),
            name=f"leaderboard:{event_id}",
        )


__all__ = ["LeaderboardService", "LeaderboardCallback"]
