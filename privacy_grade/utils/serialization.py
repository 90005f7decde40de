"""Shared serialization helpers for camelCase output.

Verdicts and grades are consumed by browser-side code that expects
camelCase keys (``parentCompany``, ``beforeIndex``), while the Python
API uses snake_case attribute names.
"""

from __future__ import annotations

from typing import Any

import pydantic


def snake_to_camel(name: str) -> str:
    """Convert a snake_case string to camelCase.

    Args:
        name: A snake_case identifier such as ``"redirect_url"``.

    Returns:
        The camelCase equivalent, e.g. ``"redirectUrl"``.
    """
    head, *rest = name.split("_")
    return head + "".join(w.capitalize() for w in rest)


CAMEL_CASE_CONFIG = pydantic.ConfigDict(alias_generator=snake_to_camel, populate_by_name=True)


def to_camel_dict(model: pydantic.BaseModel, *, exclude_none: bool = True) -> dict[str, Any]:
    """Dump *model* with camelCase keys, dropping unset optional fields."""
    return model.model_dump(by_alias=True, exclude_none=exclude_none)
