"""Organizer grading writes.

Each write touches exactly one field of one question and requires a valid
organizer capability token.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from propsheet.pool.auth import CapabilityIssuer
from propsheet.pool.scoring.types import NotFoundError, ValidationError
from propsheet.pool.scoring.validation import SubmissionValidator, get_validator
from propsheet.shared.enums import QuestionKind
from propsheet.shared.logging import log_pool_event

logger = logging.getLogger(__name__)


class GradingHandler:
    def __init__(
        self,
        store: Any,
        capabilities: CapabilityIssuer,
        validator: Optional[SubmissionValidator] = None,
    ):
        self.store = store
        self.capabilities = capabilities
        self.validator = validator or get_validator()

    async def record_answer(self, question_id: str, answer: str, *, token: Optional[str]) -> str:
        """Set the graded answer for a question.

        Raises:
            PermissionDenied: Token missing, forged or expired
            NotFoundError: Unknown question
            ValidationError: Answer not valid for the question kind
        """
        self.capabilities.require_organizer(token)
        question = await self.store.get_question(question_id)
        if question is None:
            raise NotFoundError(f"question {question_id} not found")

        canonical = self.validator.validate_answer(question, answer)
        await self.store.set_correct_answer(question_id, canonical)

        message = {"question_graded": {"question_id": question_id, "event_id": question.event_id, "answer": canonical}}
        logger.info(message)
        log_pool_event(message)
        return canonical

    async def clear_answer(self, question_id: str, *, token: Optional[str]) -> None:
        """Return a question to ungraded."""
        self.capabilities.require_organizer(token)
        await self.store.set_correct_answer(question_id, None)
        log_pool_event({"question_ungraded": {"question_id": question_id}})

    async def set_aliases(self, question_id: str, aliases: Iterable[str], *, token: Optional[str]) -> List[str]:
        """Replace the accepted spellings of a free-text question."""
        self.capabilities.require_organizer(token)
        question = await self.store.get_question(question_id)
        if question is None:
            raise NotFoundError(f"question {question_id} not found")
        if question.kind is not QuestionKind.TEXT:
            raise ValidationError(f"question {question_id}: aliases apply to text questions only")

        cleaned: List[str] = []
        for alias in aliases:
            text = str(alias).strip()
            if text and text not in cleaned:
                cleaned.append(text)
        await self.store.set_accepted_aliases(question_id, cleaned)
        logger.info({"question_aliases_set": {"question_id": question_id, "count": len(cleaned)}})
        return cleaned


__all__ = ["GradingHandler"]
