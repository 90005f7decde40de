"""Pydantic models for classification verdicts."""

from __future__ import annotations

from typing import Literal

import pydantic

from privacy_grade.utils.serialization import CAMEL_CASE_CONFIG

VerdictReason = Literal["trackersWithParentCompany", "whitelisted", "surrogate", "first-party"]

WHITELIST_LIST_NAME = "trackersWhitelist"
SURROGATE_LIST_NAME = "surrogatesList"


class Verdict(pydantic.BaseModel):
    """Outcome of classifying one request as a tracker.

    ``type`` names the list that matched: a parent-company
    category such as ``"Analytics"``, ``"trackersWhitelist"`` or
    ``"surrogatesList"``.
    """

    model_config = pydantic.ConfigDict(**CAMEL_CASE_CONFIG, frozen=True)

    parent_company: str
    url: str
    type: str
    block: bool
    reason: VerdictReason
    redirect_url: str | None = None

    @pydantic.model_validator(mode="after")
    def _check_invariants(self) -> Verdict:
        if self.redirect_url is not None and self.reason != "surrogate":
            raise ValueError("redirect_url is only allowed on surrogate verdicts")
        if self.reason == "first-party" and self.block:
            raise ValueError("first-party verdicts never block")
        return self

    def as_first_party(self, parent_company: str) -> Verdict:
        """Return a copy rewritten as a non-blocking first-party verdict."""
        return Verdict(
            parent_company=parent_company,
            url=self.url,
            type=self.type,
            block=False,
            reason="first-party",
        )
