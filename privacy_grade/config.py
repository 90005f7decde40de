"""
Engine configuration.

Uses ``pydantic_settings.BaseSettings`` for automatic environment
variable binding (prefix ``PRIVACY_GRADE_``), ``.env`` file support,
type coercion and validation.
"""

from __future__ import annotations

import functools
import pathlib

import pydantic
import pydantic_settings

from privacy_grade.utils import logger

log = logger.create_logger("Config")

DEFAULT_BLOCK_CATEGORIES = ("Advertising", "Analytics")


class Settings(pydantic_settings.BaseSettings):
    """Runtime settings for classification and page sessions.

    Attributes:
        block_categories: Parent-company list categories whose
            trackers are blocked, checked in this order.
        allow_trackers: Classify and grade requests but never abort
            or redirect them.
        upgrade_https: Consult the HTTPS advisor before classifying.
        lists_dir: Directory holding the list files read by
            :func:`privacy_grade.data.loader.get_store`.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_prefix="PRIVACY_GRADE_",
        env_file=".env",
        extra="ignore",
    )

    block_categories: list[str] = pydantic.Field(default_factory=lambda: list(DEFAULT_BLOCK_CATEGORIES))
    allow_trackers: bool = False
    upgrade_https: bool = True
    lists_dir: pathlib.Path = pathlib.Path("data")

    @pydantic.field_validator("block_categories")
    @classmethod
    def _require_categories(cls, value: list[str]) -> list[str]:
        cleaned = [v.strip() for v in value if v.strip()]
        if not cleaned:
            raise ValueError("at least one block category is required")
        return cleaned


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings (read once, then cached)."""
    settings = Settings()
    log.debug(
        "Settings loaded",
        {
            "blockCategories": settings.block_categories,
            "allowTrackers": settings.allow_trackers,
            "upgradeHttps": settings.upgrade_https,
        },
    )
    return settings
