"""Pydantic models for grading events, reputation summaries and grade results."""

from __future__ import annotations

from typing import Literal

import pydantic

from privacy_grade.models.lists import ReputationClass
from privacy_grade.utils.serialization import CAMEL_CASE_CONFIG

Grade = Literal["A", "B", "C", "D"]


class BlockedTracker(pydantic.BaseModel):
    """The part of a blocking verdict the grade cares about."""

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    parent_company: str
    url: str


class GradeEvent(pydantic.BaseModel):
    """A single update fed to a :class:`~privacy_grade.analysis.grade.GradeState`.

    Carries either ``has_https`` or ``tracker_blocked``; when both
    are set only ``has_https`` is applied.
    """

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    has_https: bool = False
    tracker_blocked: BlockedTracker | None = None


class ReputationReasons(pydantic.BaseModel):
    """Good and bad terms-of-service points behind a reputation."""

    model_config = pydantic.ConfigDict(frozen=True)

    good: tuple[str, ...] = ()
    bad: tuple[str, ...] = ()


class ReputationSummary(pydantic.BaseModel):
    """Reputation snapshot taken when a grade state is created."""

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    score: float = 0
    class_: ReputationClass | None = pydantic.Field(default=None, alias="class")
    reasons: ReputationReasons = pydantic.Field(default_factory=ReputationReasons)
    message: str = ""


class GradeResult(pydantic.BaseModel):
    """Before/after site grade.

    All fields are ``None`` for special pages, which are not graded.
    """

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    before: Grade | None = None
    before_index: int | None = None
    after: Grade | None = None
    after_index: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.before is None and self.after is None
