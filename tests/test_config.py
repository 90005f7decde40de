"""Tests for privacy_grade.config."""

from __future__ import annotations

import pydantic
import pytest

from privacy_grade import config


class TestSettings:
    def test_defaults(self, settings: config.Settings) -> None:
        assert settings.block_categories == ["Advertising", "Analytics"]
        assert settings.allow_trackers is False
        assert settings.upgrade_https is True

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIVACY_GRADE_BLOCK_CATEGORIES", '["Social", "Advertising"]')
        monkeypatch.setenv("PRIVACY_GRADE_ALLOW_TRACKERS", "true")
        monkeypatch.setenv("PRIVACY_GRADE_UPGRADE_HTTPS", "0")
        settings = config.Settings()
        assert settings.block_categories == ["Social", "Advertising"]
        assert settings.allow_trackers is True
        assert settings.upgrade_https is False

    def test_blank_categories_dropped(self) -> None:
        assert config.Settings(block_categories=[" Analytics ", ""]).block_categories == ["Analytics"]

    @pytest.mark.parametrize("categories", [[], ["", "  "]])
    def test_empty_categories_rejected(self, categories: list[str]) -> None:
        with pytest.raises(pydantic.ValidationError):
            config.Settings(block_categories=categories)


class TestGetSettings:
    def test_cached(self) -> None:
        assert config.get_settings() is config.get_settings()

    def test_reads_environment_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIVACY_GRADE_ALLOW_TRACKERS", "true")
        first = config.get_settings()
        monkeypatch.setenv("PRIVACY_GRADE_ALLOW_TRACKERS", "false")
        assert config.get_settings().allow_trackers is first.allow_trackers is True
