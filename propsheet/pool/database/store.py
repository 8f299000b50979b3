"""Document-style access to pool records.

Equality lookups with optional ascending sort, plus the single-field writes
the pool needs. Every statement goes through DBM.read/DBM.write.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from sqlalchemy import Boolean, DateTime, bindparam, text

from ..models import Event, Question, Submission
from ..scoring.validation import SubmissionDraft
from .schema.base import JSONType

_EVENT_TYPES = {
    "event_date": DateTime(timezone=True),
    "is_active": Boolean,
    "is_locked": Boolean,
}

_SELECT_EVENT = text(
    """
    SELECT event_id, name, description, event_date, is_active, is_locked
    FROM pool_event
    WHERE event_id = :event_id
    """
).columns(**_EVENT_TYPES)

_SELECT_EVENTS = text(
    """
    SELECT event_id, name, description, event_date, is_active, is_locked
    FROM pool_event
    ORDER BY event_date DESC, event_id
    """
).columns(**_EVENT_TYPES)

_SELECT_ACTIVE_EVENTS = text(
    """
    SELECT event_id, name, description, event_date, is_active, is_locked
    FROM pool_event
    WHERE is_active = :active
    ORDER BY event_date DESC, event_id
    """
).columns(**_EVENT_TYPES)

_SELECT_ACTIVE_UNLOCKED_EVENTS = text(
    """
    SELECT event_id, name, description, event_date, is_active, is_locked
    FROM pool_event
    WHERE is_active = :active
      AND is_locked = :locked
    ORDER BY event_date, event_id
    """
).columns(**_EVENT_TYPES)

_SELECT_QUESTIONS = text(
    """
    SELECT
        question_id, event_id, question, kind, options, over_under_line,
        yes_label, no_label, correct_answer, accepted_answers, display_order
    FROM prop_question
    WHERE event_id = :event_id
    ORDER BY display_order, question_id
    """
).columns(options=JSONType, accepted_answers=JSONType)

_SELECT_QUESTION = text(
    """
    SELECT
        question_id, event_id, question, kind, options, over_under_line,
        yes_label, no_label, correct_answer, accepted_answers, display_order
    FROM prop_question
    WHERE question_id = :question_id
    """
).columns(options=JSONType, accepted_answers=JSONType)

_SELECT_SUBMISSIONS = text(
    """
    SELECT submission_id, event_id, username, first_name, last_name, picks, submitted_at
    FROM submission
    WHERE event_id = :event_id
    ORDER BY submitted_at, submission_id
    """
).columns(picks=JSONType, submitted_at=DateTime(timezone=True))

_SELECT_SUBMISSIONS_BY_USERNAME = text(
    """
    SELECT submission_id, event_id, username, first_name, last_name, picks, submitted_at
    FROM submission
    WHERE event_id = :event_id
      AND username = :username
    ORDER BY submitted_at, submission_id
    """
).columns(picks=JSONType, submitted_at=DateTime(timezone=True))

_COUNT_SUBMISSIONS_BY_USERNAME = text(
    """
    SELECT COUNT(*) AS n
    FROM submission
    WHERE event_id = :event_id
      AND username = :username
    """
)

_UPDATE_EVENT_LOCKED = text(
    """
    UPDATE pool_event
    SET is_locked = :locked
    WHERE event_id = :event_id
    """
).bindparams(bindparam("locked", type_=Boolean))

_UPDATE_CORRECT_ANSWER = text(
    """
    UPDATE prop_question
    SET correct_answer = :correct_answer
    WHERE question_id = :question_id
    """
)

_UPDATE_ACCEPTED_ANSWERS = text(
    """
    UPDATE prop_question
    SET accepted_answers = :accepted_answers
    WHERE question_id = :question_id
    """
).bindparams(bindparam("accepted_answers", type_=JSONType))

_INSERT_SUBMISSION = text(
    """
    INSERT INTO submission (
        submission_id, event_id, username, first_name, last_name, picks, submitted_at
    ) VALUES (
        :submission_id, :event_id, :username, :first_name, :last_name, :picks, :submitted_at
    )
    """
).bindparams(
    bindparam("picks", type_=JSONType),
    bindparam("submitted_at", type_=DateTime(timezone=True)),
)


class DocumentStore:
    """Pool record access over a DBM-like object with async read/scalar/write."""

    def __init__(self, database: Any):
        self.database = database

    async def get_event(self, event_id: str) -> Optional[Event]:
        rows = await self.database.read(_SELECT_EVENT, params={"event_id": event_id})
        return Event.from_row(rows[0]) if rows else None

    async def list_events(self, active_only: bool = False) -> List[Event]:
        """Events, most recent first. ``active_only`` hides inactive events."""
        if active_only:
            rows = await self.database.read(_SELECT_ACTIVE_EVENTS, params={"active": True})
        else:
            rows = await self.database.read(_SELECT_EVENTS)
        return [Event.from_row(r) for r in rows]

    async def list_lockable_events(self) -> List[Event]:
        """Active events not yet locked, soonest first."""
        rows = await self.database.read(
            _SELECT_ACTIVE_UNLOCKED_EVENTS,
            params={"active": True, "locked": False},
        )
        return [Event.from_row(r) for r in rows]

    async def get_question(self, question_id: str) -> Optional[Question]:
        rows = await self.database.read(_SELECT_QUESTION, params={"question_id": question_id})
        return Question.from_row(rows[0]) if rows else None

    async def list_questions(self, event_id: str) -> List[Question]:
        rows = await self.database.read(_SELECT_QUESTIONS, params={"event_id": event_id})
        return [Question.from_row(r) for r in rows]

    async def list_submissions(self, event_id: str, username: Optional[str] = None) -> List[Submission]:
        if username is None:
            rows = await self.database.read(_SELECT_SUBMISSIONS, params={"event_id": event_id})
        else:
            rows = await self.database.read(
                _SELECT_SUBMISSIONS_BY_USERNAME,
                params={"event_id": event_id, "username": username},
            )
        return [Submission.from_row(r) for r in rows]

    async def count_submissions(self, event_id: str, username: str) -> int:
        n = await self.database.scalar(
            _COUNT_SUBMISSIONS_BY_USERNAME,
            params={"event_id": event_id, "username": username},
        )
        return int(n or 0)

    async def set_event_locked(self, event_id: str) -> int:
        """Single-field write: locked = true. There is no unlock counterpart."""
        return await self.database.write(
            _UPDATE_EVENT_LOCKED,
            params={"event_id": event_id, "locked": True},
        )

    async def set_correct_answer(self, question_id: str, answer: Optional[str]) -> int:
        return await self.database.write(
            _UPDATE_CORRECT_ANSWER,
            params={"question_id": question_id, "correct_answer": answer},
        )

    async def set_accepted_aliases(self, question_id: str, aliases: Sequence[str]) -> int:
        return await self.database.write(
            _UPDATE_ACCEPTED_ANSWERS,
            params={"question_id": question_id, "accepted_answers": list(aliases)},
        )

    async def insert_submission(
        self,
        event_id: str,
        draft: SubmissionDraft,
        *,
        submitted_at: Optional[datetime] = None,
    ) -> str:
        submission_id = uuid.uuid4().hex
        await self.database.write(
            _INSERT_SUBMISSION,
            params={
                "submission_id": submission_id,
                "event_id": event_id,
                "username": draft.username,
                "first_name": draft.first_name,
                "last_name": draft.last_name,
                "picks": [{"prop_id": p.prop_id, "answer": p.answer} for p in draft.picks],
                "submitted_at": submitted_at or datetime.now(timezone.utc),
            },
        )
        return submission_id


__all__ = ["DocumentStore"]
