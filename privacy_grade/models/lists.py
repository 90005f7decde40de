"""Pydantic models for the externally supplied tracker, entity and reputation lists."""

from __future__ import annotations

from typing import Any, Literal

import pydantic

ReputationClass = Literal["A", "B", "C", "D", "E"]


class ParentCompanyEntry(pydantic.BaseModel):
    """A tracker hostname's owner, stored in list data as ``{"c": name}``."""

    model_config = pydantic.ConfigDict(frozen=True, populate_by_name=True)

    parent_company: str = pydantic.Field(alias="c")


class Entity(pydantic.BaseModel):
    """A corporate owner and the domain suffixes it controls."""

    model_config = pydantic.ConfigDict(frozen=True)

    name: str
    properties: tuple[str, ...] = ()


class ReputationRecord(pydantic.BaseModel):
    """Terms-of-service privacy rating for one domain.

    List data nests the reason lists under ``match``
    (``{"score": 10, "class": "C", "match": {"good": [], "bad": []}}``);
    both that shape and the flat field names are accepted.
    """

    model_config = pydantic.ConfigDict(frozen=True, populate_by_name=True)

    score: float = 0
    class_: ReputationClass | None = pydantic.Field(default=None, alias="class")
    match_good: tuple[str, ...] = ()
    match_bad: tuple[str, ...] = ()

    @pydantic.model_validator(mode="before")
    @classmethod
    def _flatten_match(cls, data: Any) -> Any:
        if isinstance(data, dict) and "match" in data:
            data = dict(data)
            match = data.pop("match") or {}
            data.setdefault("match_good", match.get("good") or ())
            data.setdefault("match_bad", match.get("bad") or ())
        return data
