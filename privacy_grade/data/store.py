"""
Read-only in-memory list store consumed by the classifier and the grader.

The store is populated once from already parsed list data (tracker
lists, entity map, whitelist rules, reputation table) and then only
read. The one piece of derived state, the per-entity relatedness
pattern, is memoized here rather than on the entity objects.
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterable, Mapping
from typing import Any

import pydantic
from adblockparser import AdblockRules

from privacy_grade.models import lists
from privacy_grade.utils import logger, url

log = logger.create_logger("ListStore")


def build_whitelist(rules: Iterable[str]) -> AdblockRules:
    """Compile whitelist filter rules (Adblock Plus syntax).

    Blank lines and ``!`` comments are dropped; rules with options
    the matcher does not support are skipped.
    """
    lines = [r.strip() for r in rules if r.strip() and not r.lstrip().startswith("!")]
    return AdblockRules(lines, skip_unsupported_rules=True)


def _compile_properties(entity: lists.Entity) -> re.Pattern[str] | None:
    """Join an entity's domain properties into one alternation pattern."""
    if not entity.properties:
        return None
    return re.compile("|".join(re.escape(p) for p in entity.properties))


class ListStore(pydantic.BaseModel):
    """Container for every list the engines read.

    Attributes:
        trackers_by_parent_company: ``{category: {hostname: entry}}``.
        entity_map: Domain to owning entity name.
        entity_details: Entity name to :class:`~privacy_grade.models.lists.Entity`.
        whitelist: Compiled whitelist rules, or ``None``.
        reputation: Domain to reputation record, in list order.
        reputation_messages: Message per reputation class or
            ``good`` / ``bad`` / ``mixed`` / ``unknown``.
        major_tracking_networks: Lowercase company name to the
            percentage of top sites it tracks.
    """

    model_config = pydantic.ConfigDict(frozen=True, arbitrary_types_allowed=True)

    trackers_by_parent_company: dict[str, dict[str, lists.ParentCompanyEntry]] = pydantic.Field(default_factory=dict)
    entity_map: dict[str, str] = pydantic.Field(default_factory=dict)
    entity_details: dict[str, lists.Entity] = pydantic.Field(default_factory=dict)
    whitelist: AdblockRules | None = None
    reputation: dict[str, lists.ReputationRecord] = pydantic.Field(default_factory=dict)
    reputation_messages: dict[str, str] = pydantic.Field(default_factory=dict)
    major_tracking_networks: dict[str, float] = pydantic.Field(default_factory=dict)

    _entity_patterns: dict[str, re.Pattern[str] | None] = pydantic.PrivateAttr(default_factory=dict)
    _pattern_lock: threading.Lock = pydantic.PrivateAttr(default_factory=threading.Lock)
    _reputation_domains: tuple[str, ...] = pydantic.PrivateAttr(default=())

    def model_post_init(self, context: Any, /) -> None:
        # Effective domain of every reputation key, in list order.
        self._reputation_domains = tuple(url.get_base_domain(key) for key in self.reputation)

    @property
    def reputation_domains(self) -> tuple[str, ...]:
        return self._reputation_domains

    @classmethod
    def from_raw(
        cls,
        *,
        trackers_with_parent_company: Mapping[str, Mapping[str, Any]] | None = None,
        entity_map: Mapping[str, str] | None = None,
        entity_list: Mapping[str, Mapping[str, Any]] | None = None,
        whitelist: Iterable[str] | None = None,
        reputation: Mapping[str, Mapping[str, Any]] | None = None,
        reputation_messages: Mapping[str, str] | None = None,
        major_tracking_networks: Mapping[str, float] | None = None,
    ) -> ListStore:
        """Build a store from list data in its JSON-decoded shape.

        Raises:
            pydantic.ValidationError: If any list entry is malformed.
        """
        entity_details = {
            name: lists.Entity(name=name, properties=tuple((details or {}).get("properties") or ()))
            for name, details in (entity_list or {}).items()
        }
        store = cls(
            trackers_by_parent_company={
                category: dict(entries) for category, entries in (trackers_with_parent_company or {}).items()
            },
            entity_map=dict(entity_map or {}),
            entity_details=entity_details,
            whitelist=build_whitelist(whitelist) if whitelist is not None else None,
            reputation=dict(reputation or {}),
            reputation_messages=dict(reputation_messages or {}),
            major_tracking_networks={k.lower(): v for k, v in (major_tracking_networks or {}).items()},
        )
        log.success(
            "List store loaded",
            {
                "trackerCategories": len(store.trackers_by_parent_company),
                "trackerHosts": sum(len(v) for v in store.trackers_by_parent_company.values()),
                "entities": len(store.entity_details),
                "entityDomains": len(store.entity_map),
                "whitelistRules": len(store.whitelist.rules) if store.whitelist is not None else 0,
                "reputationRecords": len(store.reputation),
            },
        )
        return store

    def entity_pattern(self, entity_name: str) -> re.Pattern[str] | None:
        """Return the memoized relatedness pattern for *entity_name*.

        The pattern is compiled at most once per entity; concurrent
        first calls are serialized by a lock. Unknown entities and
        entities without properties yield ``None``.
        """
        try:
            return self._entity_patterns[entity_name]
        except KeyError:
            pass

        entity = self.entity_details.get(entity_name)
        if entity is None:
            return None

        with self._pattern_lock:
            if entity_name not in self._entity_patterns:
                self._entity_patterns[entity_name] = _compile_properties(entity)
            return self._entity_patterns[entity_name]

    def parent_company_entry(self, category: str, hostname: str) -> lists.ParentCompanyEntry | None:
        """Look up *hostname* in one parent-company category."""
        return self.trackers_by_parent_company.get(category, {}).get(hostname)
