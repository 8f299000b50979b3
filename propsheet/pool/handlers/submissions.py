"""Submission intake.

The authoritative event record is re-read at write time: an entry is never
accepted for an event whose stored state is locked, whatever the caller's
view of the page said. The lock controller runs first so an event past its
deadline is locked before the check.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from propsheet.pool.config.pool_params import SubmissionParams, get_pool_params
from propsheet.pool.locking.controller import LockController
from propsheet.pool.models import Submission
from propsheet.pool.scoring.types import EventLockedError, NotFoundError, SubmissionLimitError
from propsheet.pool.scoring.validation import SubmissionValidator, get_validator

logger = logging.getLogger(__name__)


class SubmissionIntake:
    def __init__(
        self,
        store: Any,
        controller: LockController,
        *,
        validator: Optional[SubmissionValidator] = None,
        params: Optional[SubmissionParams] = None,
    ):
        self.store = store
        self.controller = controller
        self.validator = validator or get_validator()
        self.params = params or get_pool_params().submission

    async def submit(
        self,
        event_id: str,
        *,
        username: Optional[str],
        full_name: Optional[str],
        answers: Mapping[str, object],
    ) -> str:
        """Validate and store one entry. Returns the new submission id.

        Raises:
            NotFoundError: Unknown event
            EventLockedError: Event inactive or locked
            ValidationError: Entry is incomplete or malformed
            SubmissionLimitError: Username already at its entry cap
        """
        event = await self.store.get_event(event_id)
        if event is None:
            raise NotFoundError(f"event {event_id} not found")
        if not event.is_active:
            raise EventLockedError(f"event {event_id} is not open")

        if not event.is_locked:
            result = await self.controller.maybe_lock_event(event)
            if result.acted:
                raise EventLockedError(f"event {event_id} locked at its start time")
            # Deadline reached but the lock write failed; still closed
            if result.error is not None:
                raise EventLockedError(f"event {event_id} is past its start time")
        if event.is_locked:
            raise EventLockedError(f"event {event_id} is locked")

        questions = await self.store.list_questions(event_id)
        draft = self.validator.validate_submission(
            username=username,
            full_name=full_name,
            answers=answers,
            questions=questions,
        )

        existing = await self.store.count_submissions(event_id, draft.username)
        if existing >= self.params.max_per_username:
            raise SubmissionLimitError(
                f"{draft.username} already has {existing} entries; the limit is {self.params.max_per_username}"
            )

        # Lock state may have changed while validating; the stored record decides
        latest = await self.store.get_event(event_id)
        if latest is None or latest.is_locked:
            raise EventLockedError(f"event {event_id} is locked")

        submission_id = await self.store.insert_submission(event_id, draft)
        logger.info(
            {"submission_accepted": {"event_id": event_id, "submission_id": submission_id, "username": draft.username}}
        )
        return submission_id


def find_duplicate_usernames(submissions: Iterable[Submission]) -> Dict[str, List[str]]:
    """Usernames with more than one entry, mapped to their submission ids.

    Detection only: duplicates are shown to the organizer, not rejected.
    """
    groups: "OrderedDict[str, List[str]]" = OrderedDict()
    for sub in submissions:
        key = sub.username.strip().lower()
        if not key:
            continue
        groups.setdefault(key, []).append(sub.submission_id)
    return {name: ids for name, ids in groups.items() if len(ids) > 1}


__all__ = ["SubmissionIntake", "find_duplicate_usernames"]
