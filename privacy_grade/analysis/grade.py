"""Site grading engine.

A :class:`GradeState` is created when a page starts loading, fed one
event per blocked tracker and per HTTPS navigation, and asked for the
grade on demand.

The grade is an index into ``[A, B, C, D]`` computed twice:

- ``before`` is the site without protection and carries every
  penalty;
- ``after`` is the site with protection applied and leaves out the
  penalties that blocking removes (trackers from major networks,
  trackers served from IP addresses, the number of trackers).
"""

from __future__ import annotations

import math
import re

from privacy_grade.analysis import reputation
from privacy_grade.data.store import ListStore
from privacy_grade.models import grade
from privacy_grade.utils import logger, url

log = logger.create_logger("Grade")

SITE_GRADES: tuple[grade.Grade, ...] = ("A", "B", "C", "D")

# Reputation class to grade index adjustment.
REPUTATION_CLASS_ADJUSTMENT = {"A": -1, "B": 0, "C": 0, "D": 1, "E": 2}

# Tracker host that is a bare dotted-quad IPv4 address, optionally with a port.
_IP_RE = re.compile(r"^\d{1,3}(?:\.\d{1,3}){3}(?::\d+)?$")


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def _letter(index: int) -> grade.Grade:
    """Map a grade index to its letter; past the scale is the worst grade."""
    if index < len(SITE_GRADES):
        return SITE_GRADES[index]
    return SITE_GRADES[-1]


class GradeState:
    """Grade accumulator for a single page load.

    Not thread-safe: one instance belongs to one page session.

    Args:
        special_page: The page is browser-internal and is never graded.
        domain: Host (or URL) of the page; reduced to its effective
            domain so ``encrypted.google.com`` grades as ``google.com``.
        store: Lists providing reputation records, the entity map and
            the major tracking networks.
    """

    def __init__(self, special_page: bool, domain: str, store: ListStore) -> None:
        self._store = store
        self.special_page = special_page
        self.has_https = False
        self.in_major_tracking_network = False
        self.total_blocked = 0
        self.has_obscure_tracker = False
        self.domain = url.get_base_domain(domain) if domain else ""
        self.major_network_penalty = self._major_network_penalty()
        self.reputation = reputation.lookup_reputation(self.domain, store)

    def _major_network_penalty(self) -> int:
        """One grade per 10% of top sites the site's own owner tracks."""
        if self.special_page or not self.domain:
            return 0
        parent = url.find_parent(url.split_labels(self.domain), self._store.entity_map)
        if not parent:
            return 0
        strength = self._store.major_tracking_networks.get(parent.lower())
        if not strength:
            return 0
        return math.ceil(strength / 10)

    def update(self, event: grade.GradeEvent) -> None:
        """Fold one event into the state.

        Flags only ever turn on and the blocked count only grows.
        An event carrying ``has_https`` is not also counted as a
        blocked tracker.
        """
        if event.has_https:
            self.has_https = True
            return

        tracker = event.tracker_blocked
        if tracker is None:
            return

        if tracker.parent_company.lower() in self._store.major_tracking_networks:
            self.in_major_tracking_network = True
        if _IP_RE.match(tracker.url):
            self.has_obscure_tracker = True
        self.total_blocked += 1

    def compute_grade(self) -> grade.GradeResult:
        """Calculate the before/after grade from the current state.

        Pure: repeated calls without intervening updates return
        equal results.
        """
        if self.special_page:
            return grade.GradeResult()

        before_index = 1 + self.major_network_penalty
        after_index = 1 + self.major_network_penalty

        rep = self.reputation
        rep_class = rep.class_ if rep is not None else None
        if rep_class:
            before_index += REPUTATION_CLASS_ADJUSTMENT[rep_class]
            after_index += REPUTATION_CLASS_ADJUSTMENT[rep_class]
        elif rep is not None and rep.score:
            before_index += _sign(rep.score)
            after_index += _sign(rep.score)

        if self.in_major_tracking_network:
            before_index += 1
        if not self.has_https:
            before_index += 1
            after_index += 1
        if self.has_obscure_tracker:
            before_index += 1

        # One grade for every started block of ten trackers.
        before_index += math.ceil(self.total_blocked / 10)

        before_index = max(before_index, 0)
        after_index = max(after_index, 0)

        # Only sites with a confirmed class A reputation can reach A.
        if before_index == 0 and rep_class != "A":
            before_index = 1
        if after_index == 0 and rep_class != "A":
            after_index = 1

        return grade.GradeResult(
            before=_letter(before_index),
            before_index=before_index,
            after=_letter(after_index),
            after_index=after_index,
        )

    def __repr__(self) -> str:
        return (
            f"GradeState(domain={self.domain!r}, special_page={self.special_page}, "
            f"has_https={self.has_https}, total_blocked={self.total_blocked})"
        )
