"""Tests for privacy_grade.utils.url — hostname and domain utilities."""

from __future__ import annotations

import pytest

from privacy_grade.utils.url import (
    extract_host,
    extract_hostname,
    find_parent,
    get_base_domain,
    is_special_page,
    split_labels,
)

# ── extract_hostname ────────────────────────────────────────────


class TestExtractHostname:
    """Tests for extract_hostname()."""

    def test_simple_url(self) -> None:
        assert extract_hostname("https://example.com/path") == "example.com"

    def test_url_with_port(self) -> None:
        assert extract_hostname("https://example.com:8080/path") == "example.com"

    def test_keeps_www(self) -> None:
        assert extract_hostname("https://www.example.com/") == "www.example.com"

    def test_lowercases(self) -> None:
        assert extract_hostname("HTTP://WWW.Example.COM/") == "www.example.com"

    def test_bare_hostname(self) -> None:
        assert extract_hostname("example.com/path") == "example.com"

    def test_underscore_in_subdomain(self) -> None:
        assert extract_hostname("http://my_tracker.example.com/x.js") == "my_tracker.example.com"

    def test_falls_back_to_raw_host(self) -> None:
        assert extract_hostname("http://bad^host.com/x") == "bad^host.com"

    @pytest.mark.parametrize("value", ["", "not a url", "/relative/path"])
    def test_unparseable_returns_none(self, value: str) -> None:
        assert extract_hostname(value) is None


# ── extract_host ────────────────────────────────────────────────


class TestExtractHost:
    """Tests for extract_host()."""

    def test_strips_www(self) -> None:
        assert extract_host("https://www.example.com/") == "example.com"

    def test_keeps_other_subdomains(self) -> None:
        assert extract_host("https://news.example.com/") == "news.example.com"

    def test_unparseable_returns_empty(self) -> None:
        assert extract_host("not a url") == ""


# ── get_base_domain ─────────────────────────────────────────────


class TestGetBaseDomain:
    """Tests for get_base_domain()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("https://ssl.google-analytics.com/x", "google-analytics.com"),
            ("example.com", "example.com"),
            ("www.example.com", "example.com"),
            ("tracker.cdn.example.co.uk", "example.co.uk"),
            ("https://encrypted.google.com/search?q=x", "google.com"),
        ],
    )
    def test_effective_domain(self, value: str, expected: str) -> None:
        assert get_base_domain(value) == expected

    @pytest.mark.parametrize("value", ["http://192.168.1.1/", "localhost", "", "not a url"])
    def test_no_effective_domain(self, value: str) -> None:
        assert get_base_domain(value) == ""


# ── split_labels / find_parent ─────────────────────────────────


class TestSplitLabels:
    def test_splits_on_dots(self) -> None:
        assert split_labels("x.y.analytics.com") == ["x", "y", "analytics", "com"]

    def test_ignores_empty_labels(self) -> None:
        assert split_labels("example.com.") == ["example", "com"]


class TestFindParent:
    """Tests for find_parent()."""

    ENTITY_MAP = {"google-analytics.com": "Google", "google.com": "Google", "com": "Registry"}

    def test_full_host_match(self) -> None:
        assert find_parent(["google", "com"], self.ENTITY_MAP) == "Google"

    def test_strips_subdomains(self) -> None:
        assert find_parent(["a", "ssl", "google-analytics", "com"], self.ENTITY_MAP) == "Google"

    def test_never_matches_single_label(self) -> None:
        assert find_parent(["unknown", "com"], self.ENTITY_MAP) is None

    def test_too_few_labels(self) -> None:
        assert find_parent(["com"], self.ENTITY_MAP) is None

    def test_does_not_mutate_labels(self) -> None:
        labels = ["ssl", "google-analytics", "com"]
        find_parent(labels, self.ENTITY_MAP)
        assert labels == ["ssl", "google-analytics", "com"]


# ── is_special_page ─────────────────────────────────────────────


class TestIsSpecialPage:
    @pytest.mark.parametrize(
        "page_url",
        [
            "",
            "about:blank",
            "chrome://newtab/",
            "chrome-extension://abcdef/options.html",
            "moz-extension://abcdef/popup.html",
            "https://newtab/",
        ],
    )
    def test_special(self, page_url: str) -> None:
        assert is_special_page(page_url) is True

    @pytest.mark.parametrize("page_url", ["https://example.com/", "http://news.example.co.uk/a"])
    def test_regular(self, page_url: str) -> None:
        assert is_special_page(page_url) is False
