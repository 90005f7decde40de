"""Tracker classification and site privacy grading.

The public API is :class:`TrackerClassifier` for per-request verdicts,
:class:`GradeState` for per-page grades, :class:`ListStore` for the
lists both read, and :class:`PageSession` tying them together for one
page load.
"""

from __future__ import annotations

from privacy_grade.analysis.grade import GradeState
from privacy_grade.analysis.surrogates import MappingSurrogateStore, SurrogateStore
from privacy_grade.analysis.trackers import TrackerClassifier
from privacy_grade.data.loader import load_store, load_surrogates
from privacy_grade.data.store import ListStore
from privacy_grade.models.grade import BlockedTracker, GradeEvent, GradeResult
from privacy_grade.models.verdict import Verdict
from privacy_grade.pipeline.session import HttpsAdvisor, PageSession, RequestDecision

__all__ = [
    "BlockedTracker",
    "GradeEvent",
    "GradeResult",
    "GradeState",
    "HttpsAdvisor",
    "ListStore",
    "MappingSurrogateStore",
    "PageSession",
    "RequestDecision",
    "SurrogateStore",
    "TrackerClassifier",
    "Verdict",
    "load_store",
    "load_surrogates",
]
