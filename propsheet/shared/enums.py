from __future__ import annotations

from enum import Enum


class QuestionKind(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    OVER_UNDER = "over_under"
    YES_NO = "yes_no"
    TEXT = "text"


class OverUnder(str, Enum):
    OVER = "over"
    UNDER = "under"


class YesNo(str, Enum):
    YES = "yes"
    NO = "no"


__all__ = ["QuestionKind", "OverUnder", "YesNo"]
