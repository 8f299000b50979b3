"""Input validation for submissions and grading.

All validation happens BEFORE data reaches the store. Invalid input raises
ValidationError; nothing is partially written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from propsheet.pool.config.pool_params import SubmissionParams, get_pool_params
from propsheet.shared.enums import OverUnder, QuestionKind, YesNo

from ..models import Pick, Question
from .types import ValidationError

_OVER_UNDER = {s.value for s in OverUnder}
_YES_NO = {s.value for s in YesNo}


@dataclass(frozen=True)
class SubmissionDraft:
    """Validated submission ready to be stored."""

    username: str
    first_name: str
    last_name: str
    picks: Tuple[Pick, ...]


def normalize_username(username: Optional[str]) -> str:
    text = (username or "").strip().lower()
    if not text:
        raise ValidationError("username is required")
    return text


def split_full_name(full_name: Optional[str]) -> Tuple[str, str]:
    """Split "First Last [Last...]" into (first, last)."""
    parts = (full_name or "").split()
    if not parts:
        raise ValidationError("full name is required")
    if len(parts) < 2:
        raise ValidationError("full name must include first and last name")
    return parts[0], " ".join(parts[1:])


class SubmissionValidator:
    """Validate participant submissions and organizer answers.

    Stateless; safe to share.
    """

    def __init__(self, params: SubmissionParams | None = None):
        self.params = params or get_pool_params().submission

    def validate_answer(self, question: Question, answer: object) -> str:
        """Check one answer against its question kind and return it canonical.

        Raises:
            ValidationError: If the answer is not valid for the question
        """
        if answer is None:
            raise ValidationError(f"question {question.question_id}: answer is missing")
        text = str(answer)

        if question.kind is QuestionKind.MULTIPLE_CHOICE:
            if question.option_text(text) is None:
                raise ValidationError(f"question {question.question_id}: unknown option {text!r}")
            return text
        if question.kind is QuestionKind.OVER_UNDER:
            if text not in _OVER_UNDER:
                raise ValidationError(f"question {question.question_id}: expected over/under, got {text!r}")
            return text
        if question.kind is QuestionKind.YES_NO:
            if text not in _YES_NO:
                raise ValidationError(f"question {question.question_id}: expected yes/no, got {text!r}")
            return text

        stripped = text.strip()
        if not stripped:
            raise ValidationError(f"question {question.question_id}: answer is empty")
        if len(stripped) > self.params.max_text_answer_length:
            raise ValidationError(
                f"question {question.question_id}: answer longer than {self.params.max_text_answer_length} characters"
            )
        return stripped

    def validate_submission(
        self,
        *,
        username: Optional[str],
        full_name: Optional[str],
        answers: Mapping[str, object],
        questions: Sequence[Question],
    ) -> SubmissionDraft:
        """Validate a full entry for an event.

        Args:
            username: Participant-chosen display name
            full_name: "First Last" as typed
            answers: question id -> raw answer
            questions: Every question of the event

        Returns:
            SubmissionDraft with normalized username and picks in question order
        """
        user = normalize_username(username)
        first, last = split_full_name(full_name)

        by_id: Dict[str, Question] = {q.question_id: q for q in questions}
        unknown = sorted(set(answers) - set(by_id))
        if unknown:
            raise ValidationError(f"answers reference unknown questions: {', '.join(unknown)}")

        picks: List[Pick] = []
        missing: List[str] = []
        for question in sorted(questions, key=lambda q: (q.display_order, q.question_id)):
            raw = answers.get(question.question_id)
            if raw is None or (isinstance(raw, str) and not raw.strip()):
                missing.append(question.question_id)
                continue
            picks.append(Pick(prop_id=question.question_id, answer=self.validate_answer(question, raw)))

        if missing and self.params.require_all_answers:
            raise ValidationError(f"{len(missing)} question(s) unanswered")

        return SubmissionDraft(username=user, first_name=first, last_name=last, picks=tuple(picks))


# Default validator instance
_default_validator: SubmissionValidator | None = None


def get_validator() -> SubmissionValidator:
    """Get or create the default submission validator."""
    global _default_validator
    if _default_validator is None:
        _default_validator = SubmissionValidator()
    return _default_validator


__all__ = [
    "SubmissionDraft",
    "SubmissionValidator",
    "normalize_username",
    "split_full_name",
    "get_validator",
]
