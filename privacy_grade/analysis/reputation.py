"""Site reputation lookup.

Finds the terms-of-service reputation record that applies to a
graded site and summarises it with a human-readable message.
"""

from __future__ import annotations

from collections.abc import Mapping

from privacy_grade.data.store import ListStore
from privacy_grade.models import grade, lists


def _select_message(record: lists.ReputationRecord, messages: Mapping[str, str]) -> str:
    """Pick the message describing *record*.

    1. A letter class uses that class's message.
    2. Both good and bad points make the reputation ``mixed``.
    3. Otherwise the score decides: negative is ``good``, positive
       is ``bad``, zero with any points is ``mixed``.
    """
    key = "unknown"
    if record.class_:
        key = record.class_
    elif record.match_good and record.match_bad:
        key = "mixed"
    elif record.score < 0:
        key = "good"
    elif record.score == 0 and (record.match_good or record.match_bad):
        key = "mixed"
    elif record.score > 0:
        key = "bad"
    return messages.get(key, "")


def summarize(record: lists.ReputationRecord, messages: Mapping[str, str]) -> grade.ReputationSummary:
    """Build the reputation snapshot for one record."""
    return grade.ReputationSummary(
        score=record.score,
        class_=record.class_,
        reasons=grade.ReputationReasons(good=record.match_good, bad=record.match_bad),
        message=_select_message(record, messages),
    )


def lookup_reputation(domain: str, store: ListStore) -> grade.ReputationSummary | None:
    """Return the reputation summary for an effective *domain*.

    Records are tried in list order. A record applies when the
    effective domain of its key is a prefix of *domain*; the record
    stored under that effective domain is used.

    Returns:
        The summary, or ``None`` when no record applies.
    """
    if not domain:
        return None

    for key_domain in store.reputation_domains:
        if not key_domain or not domain.startswith(key_domain):
            continue
        record = store.reputation.get(key_domain)
        if record is None:
            continue
        return summarize(record, store.reputation_messages)
    return None
