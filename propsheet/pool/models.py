"""Domain records for events, prop questions and submissions.

Records are immutable snapshots built from store rows. Builders are lenient:
stale or malformed fields become ``None`` or empty rather than raising, so
read-side aggregation never fails on bad upstream writes. An unknown
question kind falls back to free text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from propsheet.shared.enums import QuestionKind


def _as_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_kind(value: Any) -> QuestionKind:
    try:
        return QuestionKind(value)
    except ValueError:
        return QuestionKind.TEXT


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text != "" else None


@dataclass(frozen=True)
class Event:
    event_id: str
    name: str = ""
    event_date: Optional[datetime] = None
    is_active: bool = True
    is_locked: bool = False
    description: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Event":
        return cls(
            event_id=str(row["event_id"]),
            name=str(row.get("name") or ""),
            event_date=_as_datetime(row.get("event_date")),
            is_active=bool(row.get("is_active", True)),
            is_locked=bool(row.get("is_locked", False)),
            description=str(row.get("description") or ""),
        )


@dataclass(frozen=True)
class Option:
    id: str
    text: str


@dataclass(frozen=True)
class Question:
    question_id: str
    event_id: str
    kind: QuestionKind
    question: str = ""
    display_order: int = 0
    options: Tuple[Option, ...] = ()
    over_under_line: Optional[float] = None
    yes_label: Optional[str] = None
    no_label: Optional[str] = None
    correct_answer: Optional[str] = None
    accepted_answers: Tuple[str, ...] = ()

    @property
    def is_graded(self) -> bool:
        return bool(self.correct_answer)

    def option_text(self, option_id: str) -> Optional[str]:
        for opt in self.options:
            if opt.id == option_id:
                return opt.text
        return None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Question":
        options = tuple(
            Option(id=str(o["id"]), text=str(o.get("text", "")))
            for o in (row.get("options") or [])
            if isinstance(o, Mapping) and o.get("id") is not None
        )
        return cls(
            question_id=str(row["question_id"]),
            event_id=str(row.get("event_id") or ""),
            kind=_as_kind(row.get("kind") or QuestionKind.TEXT),
            question=str(row.get("question") or ""),
            display_order=_as_int(row.get("display_order")),
            options=options,
            over_under_line=_as_float(row.get("over_under_line")),
            yes_label=_as_text(row.get("yes_label")),
            no_label=_as_text(row.get("no_label")),
            correct_answer=_as_text(row.get("correct_answer")),
            accepted_answers=tuple(str(a) for a in (row.get("accepted_answers") or []) if a),
        )


@dataclass(frozen=True)
class Pick:
    prop_id: str
    answer: Optional[str]


@dataclass(frozen=True)
class Submission:
    submission_id: str
    event_id: str
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    picks: Tuple[Pick, ...] = field(default_factory=tuple)
    submitted_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Submission":
        raw_picks = row.get("picks")
        picks = tuple(
            Pick(prop_id=str(p["prop_id"]), answer=_as_text(p.get("answer")))
            for p in (raw_picks if isinstance(raw_picks, (list, tuple)) else [])
            if isinstance(p, Mapping) and p.get("prop_id") is not None
        )
        return cls(
            submission_id=str(row["submission_id"]),
            event_id=str(row.get("event_id") or ""),
            username=str(row.get("username") or ""),
            first_name=str(row.get("first_name") or ""),
            last_name=str(row.get("last_name") or ""),
            picks=picks,
            submitted_at=_as_datetime(row.get("submitted_at")),
        )


__all__ = ["Event", "Option", "Question", "Pick", "Submission"]
