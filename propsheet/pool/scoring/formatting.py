"""Display forms of stored answers."""

from __future__ import annotations

from typing import Optional

from propsheet.shared.enums import OverUnder, QuestionKind, YesNo

from ..models import Question

NOT_SET = "Not set"


def _format_line(line: Optional[float]) -> str:
    if line is None:
        return ""
    return f"{line:g}"


def format_answer(question: Question, answer: str) -> str:
    """Render a stored answer identifier the way participants saw it."""
    if question.kind is QuestionKind.MULTIPLE_CHOICE:
        return question.option_text(answer) or answer
    if question.kind is QuestionKind.YES_NO:
        if question.yes_label and question.no_label:
            return question.yes_label if answer == YesNo.YES.value else question.no_label
        return answer
    if question.kind is QuestionKind.OVER_UNDER:
        side = "Over" if answer == OverUnder.OVER.value else "Under"
        return f"{side} {_format_line(question.over_under_line)}".rstrip()
    return answer


def format_graded_answer(question: Question) -> str:
    if not question.correct_answer:
        return NOT_SET
    return format_answer(question, question.correct_answer)


__all__ = ["NOT_SET", "format_answer", "format_graded_answer"]
