"""Shared SQLAlchemy base definitions and enums."""

from __future__ import annotations

from sqlalchemy import JSON, Enum as SAEnum, MetaData
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase

from propsheet.shared.enums import QuestionKind


# Shared metadata constant so every table lands in one DDL run
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}
metadata = MetaData(naming_convention=naming_convention)


class Base(DeclarativeBase):
    metadata = metadata


# JSONB on postgres, plain JSON elsewhere (sqlite in dev and tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

question_kind_enum = SAEnum(
    QuestionKind,
    name="question_kind",
    metadata=metadata,
    values_callable=lambda kinds: [k.value for k in kinds],
)


__all__ = [
    "Base",
    "metadata",
    "JSONType",
    "question_kind_enum",
]
