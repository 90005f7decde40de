"""Shared fixtures for the test suite."""

from __future__ import annotations

import pytest

from privacy_grade import config
from privacy_grade.analysis.surrogates import MappingSurrogateStore
from privacy_grade.analysis.trackers import TrackerClassifier
from privacy_grade.data import loader
from privacy_grade.data.store import ListStore
from privacy_grade.utils import logger

GA_SURROGATE = "data:application/javascript;base64,KGZ1bmN0aW9uKCl7fSkoKQ=="

# ── Raw list data ───────────────────────────────────────────────

TRACKERS_WITH_PARENT_COMPANY = {
    "Advertising": {
        "doubleclick.net": {"c": "Google"},
        "ads.adnetwork.com": {"c": "AdNetwork"},
        "10.0.0.1": {"c": "Obscure"},
    },
    "Analytics": {
        "google-analytics.com": {"c": "Google"},
        "scorecardresearch.com": {"c": "comScore"},
        "adnetwork.com": {"c": "AdNetwork Analytics"},
    },
    "Social": {
        "facebook.net": {"c": "Facebook"},
    },
}

ENTITY_MAP = {
    "google.com": "Google",
    "google-analytics.com": "Google",
    "doubleclick.net": "Google",
    "youtube.com": "Google",
    "facebook.com": "Facebook",
    "facebook.net": "Facebook",
    "scorecardresearch.com": "comScore",
}

ENTITY_LIST = {
    "Google": {"properties": ["google.com", "google-analytics.com", "doubleclick.net", "youtube.com"]},
    "Facebook": {"properties": ["facebook.com", "facebook.net"]},
    "comScore": {"properties": ["scorecardresearch.com"]},
    "Empty Corp": {"properties": []},
}

WHITELIST = [
    "! trackers allowed on specific sites",
    "||scorecardresearch.com/beacon.js$script,domain=example.org",
]

REPUTATION = {
    "google.com": {"score": 40, "class": "B", "match": {"good": ["clear policy"], "bad": ["tracks users"]}},
    "example.org": {"score": 50, "match": {"good": [], "bad": ["sells data"]}},
    "goodsite.com": {"score": -30, "class": "A", "match": {"good": ["no tracking"], "bad": []}},
    "nicesite.com": {"score": -5},
    "badsite.com": {"score": 100, "class": "E"},
    "mixed.com": {"score": 0, "match": {"good": ["deletes data"], "bad": ["shares data"]}},
    "zero.com": {"score": 0, "match": {"good": [], "bad": ["vague terms"]}},
}

REPUTATION_MESSAGES = {
    "A": "Good",
    "B": "Mixed",
    "C": "Poor",
    "D": "Poor",
    "E": "Bad",
    "good": "Good",
    "bad": "Bad",
    "mixed": "Mixed",
    "unknown": "Unknown",
}

MAJOR_TRACKING_NETWORKS = {"google": 84, "Facebook": 36}


# ── Fixtures ────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of the caller's environment and cached settings."""
    for name in ("LOG_LEVEL", "WRITE_TO_FILE", "PRIVACY_GRADE_BLOCK_CATEGORIES", "PRIVACY_GRADE_ALLOW_TRACKERS", "PRIVACY_GRADE_UPGRADE_HTTPS", "PRIVACY_GRADE_LISTS_DIR"):
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    loader.clear_cache()
    logger.clear_log_buffer()


@pytest.fixture()
def store() -> ListStore:
    """A list store populated with a small but complete data set."""
    return ListStore.from_raw(
        trackers_with_parent_company=TRACKERS_WITH_PARENT_COMPANY,
        entity_map=ENTITY_MAP,
        entity_list=ENTITY_LIST,
        whitelist=WHITELIST,
        reputation=REPUTATION,
        reputation_messages=REPUTATION_MESSAGES,
        major_tracking_networks=MAJOR_TRACKING_NETWORKS,
    )


@pytest.fixture()
def surrogates() -> MappingSurrogateStore:
    return MappingSurrogateStore({"google-analytics.com/analytics.js": GA_SURROGATE})


@pytest.fixture()
def classifier(store: ListStore, surrogates: MappingSurrogateStore) -> TrackerClassifier:
    """Classifier with the default block categories and a surrogate store."""
    return TrackerClassifier(store, surrogates=surrogates, block_categories=("Advertising", "Analytics"))


@pytest.fixture()
def settings() -> config.Settings:
    return config.Settings()
