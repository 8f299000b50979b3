"""Leaderboard computation for one event.

A full recomputation on every call: no cached or incremental state, so any
change to grading or submissions is reflected by simply calling again.

Flow:
1. Index questions by id
2. Collapse each submission's picks to one per question (first seen wins),
   dropping picks for questions that no longer exist
3. Count correct picks per submission against every question in the event
4. Rank by (correct desc, submitted_at asc, submission_id asc) and number 1..N
5. Per graded question, count matching picks over all submissions
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..models import Question, Submission
from .determinism import ranking_key, safe_percentage
from .formatting import format_graded_answer
from .matching import is_pick_correct
from .types import Leaderboard, LeaderboardEntry, QuestionStat

logger = logging.getLogger(__name__)


def order_questions(questions: Iterable[Question]) -> List[Question]:
    """Questions in display order, ties broken by id."""
    return sorted(questions, key=lambda q: (q.display_order, q.question_id))


def effective_answers(submission: Submission, known_ids: Iterable[str]) -> Dict[str, Optional[str]]:
    """Map question id -> answer, first pick per question wins.

    Picks that reference a question outside ``known_ids`` are stale and
    skipped.
    """
    known = set(known_ids)
    answers: Dict[str, Optional[str]] = {}
    for pick in submission.picks:
        if pick.prop_id not in known:
            continue
        if pick.prop_id in answers:
            continue
        answers[pick.prop_id] = pick.answer
    return answers


def score_submission(answers: Dict[str, Optional[str]], questions: Sequence[Question]) -> int:
    return sum(1 for q in questions if is_pick_correct(q, answers.get(q.question_id)))


def rank_entries(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Sort entries into final order and reassign entry numbers from 1."""
    ordered = sorted(
        entries,
        key=lambda e: ranking_key(e.correct_answers, e.submitted_at, e.submission_id),
    )
    return [
        LeaderboardEntry(
            entry_number=i,
            submission_id=e.submission_id,
            username=e.username,
            first_name=e.first_name,
            last_name=e.last_name,
            correct_answers=e.correct_answers,
            total_questions=e.total_questions,
            percentage=e.percentage,
            submitted_at=e.submitted_at,
        )
        for i, e in enumerate(ordered, start=1)
    ]


def compute_question_stats(
    questions: Sequence[Question],
    answers_by_submission: Sequence[Dict[str, Optional[str]]],
) -> List[QuestionStat]:
    """Correctness rate of each graded question over every submission."""
    total_subs = len(answers_by_submission)
    stats: List[QuestionStat] = []
    for number, question in enumerate(questions, start=1):
        if not question.is_graded:
            continue
        correct = sum(
            1 for answers in answers_by_submission if is_pick_correct(question, answers.get(question.question_id))
        )
        stats.append(
            QuestionStat(
                question_id=question.question_id,
                question=question.question,
                correct_answer=format_graded_answer(question),
                question_number=number,
                total_correct=correct,
                total_submissions=total_subs,
                percentage=safe_percentage(correct, total_subs),
            )
        )
    stats.sort(key=lambda s: (-s.total_correct, -s.percentage, s.question_number))
    return stats


def compute_leaderboard(
    questions: Iterable[Question],
    submissions: Iterable[Submission],
) -> Leaderboard:
    """Rank submissions for one event and compute per-question statistics.

    Args:
        questions: Every question of the event, graded or not
        submissions: Every submission of the event, in any order

    Returns:
        Leaderboard with ranked entries and question stats
    """
    ordered_questions = order_questions(questions)
    question_ids = [q.question_id for q in ordered_questions]
    total_questions = len(ordered_questions)

    subs = list(submissions)
    answers_by_submission = [effective_answers(s, question_ids) for s in subs]

    entries = []
    for submission, answers in zip(subs, answers_by_submission):
        correct = score_submission(answers, ordered_questions)
        entries.append(
            LeaderboardEntry(
                entry_number=0,
                submission_id=submission.submission_id,
                username=submission.username,
                first_name=submission.first_name,
                last_name=submission.last_name,
                correct_answers=correct,
                total_questions=total_questions,
                percentage=safe_percentage(correct, total_questions),
                submitted_at=submission.submitted_at,
            )
        )

    ranked = rank_entries(entries)
    stats = compute_question_stats(ordered_questions, answers_by_submission)

    logger.debug(
        {
            "leaderboard_computed": {
                "questions": total_questions,
                "graded": len(stats),
                "submissions": len(ranked),
            }
        }
    )
    return Leaderboard(entries=tuple(ranked), stats=tuple(stats))


__all__ = [
    "order_questions",
    "effective_answers",
    "score_submission",
    "rank_entries",
    "compute_question_stats",
    "compute_leaderboard",
]
