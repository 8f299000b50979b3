"""Answer matching for graded prop questions.

Closed-form kinds (multiple choice, over/under, yes/no) store canonical
identifiers, so they compare by exact string equality with no normalization.

Free-text answers are matched fuzzily against the graded answer and any
accepted aliases:
- equal after lowercasing and trimming, or
- every whitespace token of the expected answer occurs as a substring of the
  submitted answer, or
- every token of the submitted answer occurs as a substring of the expected one.

The token rule is deliberately permissive ("49ers" matches "San Francisco
49ers"); short one-word answers can produce false positives.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from propsheet.shared.enums import QuestionKind

from ..models import Question


def _tokens(text: str) -> List[str]:
    return [word for word in text.split() if word]


def text_matches(expected: Optional[str], actual: Optional[str]) -> bool:
    """Fuzzy match of one expected free-text answer against a submitted one."""
    if not expected or not actual:
        return False

    norm_expected = expected.lower().strip()
    norm_actual = actual.lower().strip()

    if norm_expected == norm_actual:
        return True

    expected_words = _tokens(norm_expected)
    actual_words = _tokens(norm_actual)

    # Whitespace-only answers tokenize to nothing and must not match vacuously
    if not expected_words or not actual_words:
        return False

    if all(word in norm_actual for word in expected_words):
        return True
    if all(word in norm_expected for word in actual_words):
        return True

    return False


def text_answer_correct(
    graded_answer: Optional[str],
    candidate_answer: Optional[str],
    accepted_answers: Iterable[str] = (),
) -> bool:
    """True if the candidate matches the graded answer or any alias."""
    if not candidate_answer:
        return False
    candidates = [c for c in (graded_answer, *accepted_answers) if c]
    return any(text_matches(c, candidate_answer) for c in candidates)


def matches(question: Question, graded_answer: Optional[str], candidate_answer: Optional[str]) -> bool:
    """Decide whether ``candidate_answer`` is correct for ``question``.

    Args:
        question: Question whose kind selects the comparison rule
        graded_answer: Organizer-recorded correct answer (None = ungraded)
        candidate_answer: Participant's answer

    Returns:
        True on a match. Ungraded questions and missing answers never match.
    """
    if not graded_answer or not candidate_answer:
        return False

    if question.kind is QuestionKind.TEXT:
        return text_answer_correct(graded_answer, candidate_answer, question.accepted_answers)

    return graded_answer == candidate_answer


def is_pick_correct(question: Question, candidate_answer: Optional[str]) -> bool:
    """Match against the question's own graded answer."""
    return matches(question, question.correct_answer, candidate_answer)


__all__ = ["text_matches", "text_answer_correct", "matches", "is_pick_correct"]
