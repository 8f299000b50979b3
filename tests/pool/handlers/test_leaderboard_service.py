import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from propsheet.pool.feed import LiveFeed
from propsheet.pool.handlers.leaderboard import LeaderboardService
from propsheet.pool.models import Pick, Question, Submission
from propsheet.shared.enums import QuestionKind

Q = Question(question_id="q", event_id="e1", kind=QuestionKind.YES_NO, correct_answer="yes")


def _sub(sid, answer):
    return Submission(
        submission_id=sid,
        event_id="e1",
        picks=(Pick("q", answer),),
        submitted_at=datetime(2026, 2, 8, tzinfo=timezone.utc),
    )


def _store():
    store = MagicMock()
    store.list_questions = AsyncMock(return_value=[Q])
    store.list_submissions = AsyncMock(return_value=[_sub("a", "no"), _sub("b", "yes")])
    return store


@pytest.mark.asyncio
async def test_compute_fetches_and_ranks():
    store = _store()

    board = await LeaderboardService(store).compute("e1")

    store.list_questions.assert_awaited_once_with("e1")
    store.list_submissions.assert_awaited_once_with("e1")
    assert [e.submission_id for e in board.entries] == ["b", "a"]


@pytest.mark.asyncio
async def test_compute_ignores_lock_state():
    store = _store()
    store.get_event = AsyncMock()

    await LeaderboardService(store).compute("e1")

    store.get_event.assert_not_called()


@pytest.mark.asyncio
async def test_watch_redelivers_only_on_change():
    store = _store()
    received = []
    service = LeaderboardService(store, feed=LiveFeed(interval=0.01))

    sub = service.watch("e1", received.append)
    await asyncio.sleep(0.05)
    store.list_submissions.return_value = [_sub("a", "yes"), _sub("b", "yes")]
    await asyncio.sleep(0.05)
    sub.cancel()
    await sub.wait_closed()

    assert len(received) == 2
    assert received[0].entries[0].submission_id == "b"
    assert all(e.correct_answers == 1 for e in received[1].entries)
