"""Events, prop questions and submissions."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from propsheet.shared.enums import QuestionKind

from .base import Base, JSONType, question_kind_enum


class PoolEvent(Base):
    __tablename__ = "pool_event"

    event_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="Event identifier",
    )
    name: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="Display name",
    )
    description: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default="",
        comment="Free-form description shown to participants",
    )
    event_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="Scheduled start; submissions lock at this minute in the pool timezone",
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Visible to participants",
    )
    is_locked: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="No further submissions; only ever set true by the lock controller",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    created_by: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default="",
    )

    __table_args__ = (Index("ix_pool_event_active_locked", "is_active", "is_locked"),)


class PropQuestion(Base):
    __tablename__ = "prop_question"

    question_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    event_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("pool_event.event_id", ondelete="RESTRICT"),
        nullable=False,
        comment="Owning event (immutable)",
    )
    question: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )
    kind: Mapped[QuestionKind] = mapped_column(
        question_kind_enum,
        nullable=False,
    )
    options: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="[{id, text}] for multiple choice",
    )
    over_under_line: Mapped[Optional[float]] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        comment="Line for over/under questions",
    )
    yes_label: Mapped[Optional[str]] = mapped_column(String)
    no_label: Mapped[Optional[str]] = mapped_column(String)
    correct_answer: Mapped[Optional[str]] = mapped_column(
        String,
        comment="Graded answer; NULL means ungraded",
    )
    accepted_answers: Mapped[list[str]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="Extra accepted spellings for free-text questions",
    )
    display_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (UniqueConstraint("event_id", "display_order", name="uq_prop_question_event_order"),)


class PoolSubmission(Base):
    __tablename__ = "submission"

    submission_id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
    )
    event_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("pool_event.event_id", ondelete="RESTRICT"),
        nullable=False,
    )
    username: Mapped[str] = mapped_column(
        String,
        nullable=False,
        comment="Lowercased display name chosen by the participant",
    )
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    picks: Mapped[list[dict[str, Any]]] = mapped_column(
        JSONType,
        nullable=False,
        default=list,
        comment="[{prop_id, answer}]",
    )
    submitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_submission_event_username", "event_id", "username"),)


__all__ = ["PoolEvent", "PropQuestion", "PoolSubmission"]
