"""
Tracker classification engine.

Turns a request URL, the URL of the page that issued it and the
request's resource type into a verdict: blocked, allowed or redirected
to a surrogate, attributed to the company that owns the tracker.

Checks run in a fixed order and the first hit wins:

1. whitelist rules scoped to the page's domain and the resource type;
2. surrogate payloads for trackers unrelated to the page;
3. the parent-company tracker lists, most specific host suffix first.

A hit is then downgraded to a non-blocking ``first-party`` verdict when
the tracker and the page share an effective domain or an owner.
"""

from __future__ import annotations

from collections.abc import Sequence

from privacy_grade import config
from privacy_grade.analysis.surrogates import SurrogateStore
from privacy_grade.data.store import ListStore
from privacy_grade.models.verdict import SURROGATE_LIST_NAME, WHITELIST_LIST_NAME, Verdict, VerdictReason
from privacy_grade.utils import logger, url as url_utils
from privacy_grade.utils.errors import get_error_message

log = logger.create_logger("Trackers")

# Request resource types mapped to Adblock Plus type options.
_RESOURCE_TYPE_OPTIONS = {
    "script": "script",
    "image": "image",
    "imageset": "image",
    "stylesheet": "stylesheet",
    "xhr": "xmlhttprequest",
    "xmlhttprequest": "xmlhttprequest",
    "fetch": "xmlhttprequest",
    "sub_frame": "subdocument",
    "subdocument": "subdocument",
    "document": "document",
    "main_frame": "document",
    "object": "object",
    "media": "media",
    "ping": "ping",
    "beacon": "ping",
    "websocket": "websocket",
}
_TYPE_OPTIONS = frozenset(_RESOURCE_TYPE_OPTIONS.values()) | {"other"}


def _whitelist_options(resource_type: str, site_domain: str, third_party: bool) -> dict[str, object]:
    """Build the matcher options for one request."""
    request_option = _RESOURCE_TYPE_OPTIONS.get(resource_type.lower(), "other")
    options: dict[str, object] = {opt: opt == request_option for opt in _TYPE_OPTIONS}
    options["domain"] = site_domain
    options["third-party"] = third_party
    return options


class TrackerClassifier:
    """Classifies requests against the lists held by a :class:`ListStore`.

    Stateless per call: one instance can be shared by every page
    session and thread. The only mutable state it touches is the
    store's entity-pattern memo, which is safe to populate
    concurrently.
    """

    def __init__(
        self,
        store: ListStore,
        surrogates: SurrogateStore | None = None,
        block_categories: Sequence[str] | None = None,
    ) -> None:
        self._store = store
        self._surrogates = surrogates
        self._block_categories = tuple(block_categories or config.get_settings().block_categories)

    @property
    def block_categories(self) -> tuple[str, ...]:
        return self._block_categories

    def classify(self, url: str, page_url: str, resource_type: str) -> Verdict | None:
        """Classify one request.

        Args:
            url: The request URL.
            page_url: URL of the page that issued the request.
            resource_type: Request type such as ``"script"`` or ``"xhr"``.

        Returns:
            The verdict, or ``None`` when the request is not a known
            tracker. Unparseable URLs are never trackers.
        """
        hostname = url_utils.extract_hostname(url)
        if not hostname:
            log.debug("Unparseable request URL, not classified", {"url": url})
            return None

        site_domain = url_utils.get_base_domain(page_url)

        verdict = self.check_whitelist(url, site_domain, resource_type)
        if verdict is None:
            verdict = self.check_surrogates(url, hostname, page_url)
        if verdict is None:
            verdict = self.check_parent_company(hostname)
        if verdict is None:
            return None

        common_parent = self.get_common_parent_entity(page_url, url)
        if common_parent:
            verdict = verdict.as_first_party(common_parent)

        log.debug(
            "Request classified",
            {
                "url": verdict.url,
                "parentCompany": verdict.parent_company,
                "type": verdict.type,
                "block": verdict.block,
                "reason": verdict.reason,
            },
        )
        return verdict

    # ── Pipeline stages ─────────────────────────────────────────

    def check_whitelist(self, url: str, site_domain: str, resource_type: str) -> Verdict | None:
        """Return a non-blocking verdict if a whitelist rule matches *url*."""
        whitelist = self._store.whitelist
        if whitelist is None:
            return None

        third_party = url_utils.get_base_domain(url) != site_domain
        try:
            matched = whitelist.should_block(url, _whitelist_options(resource_type, site_domain, third_party))
        except Exception as err:
            log.warn("Whitelist match failed", {"url": url, "error": get_error_message(err)})
            return None

        if not matched:
            return None
        return self._tracker_details(url, WHITELIST_LIST_NAME, block=False, reason="whitelisted")

    def check_surrogates(self, url: str, hostname: str, page_url: str) -> Verdict | None:
        """Return a redirecting verdict if a surrogate exists for *url*.

        Trackers owned by an entity related to the page are left to
        the later stages.
        """
        if self._surrogates is None:
            return None

        try:
            payload = self._surrogates.lookup(url, hostname)
        except Exception as err:
            log.warn("Surrogate lookup failed", {"url": url, "error": get_error_message(err)})
            return None
        if not payload:
            return None

        details = self._tracker_details(url, SURROGATE_LIST_NAME, block=True, reason="surrogate", redirect_url=payload)
        if self.is_related_entity(details.parent_company, page_url):
            return None
        return details

    def check_parent_company(self, hostname: str) -> Verdict | None:
        """Match *hostname* against the parent-company lists.

        Lists may hold a tracker under its bare domain
        (``google-analytics.com``) or under a full subdomain
        (``developers.google.com``), so every suffix of at least two
        labels is tried, longest first, in each block category.
        """
        labels = url_utils.split_labels(hostname)
        for start in range(len(labels) - 1):
            candidate = ".".join(labels[start:])
            for category in self._block_categories:
                entry = self._store.parent_company_entry(category, candidate)
                if entry is not None:
                    return Verdict(
                        parent_company=entry.parent_company,
                        url=candidate,
                        type=category,
                        block=True,
                        reason="trackersWithParentCompany",
                    )
        return None

    # ── Relationships ───────────────────────────────────────────

    def is_related_entity(self, entity_name: str | None, page_url: str) -> bool:
        """Return whether *entity_name* owns the page.

        True when one of the entity's declared domain properties
        appears in the page's host, or when the entity map assigns the
        page's effective domain to the same entity.
        """
        if not entity_name:
            return False
        host = url_utils.extract_host(page_url)
        if not host:
            return False

        pattern = self._store.entity_pattern(entity_name)
        if pattern is not None and pattern.search(host) is not None:
            return True

        page_domain = url_utils.get_base_domain(host)
        return bool(page_domain) and self._store.entity_map.get(page_domain) == entity_name

    def get_common_parent_entity(self, page_url: str, url: str) -> str | None:
        """Return the shared owner of the page and the request, if any.

        The owner is the request domain's entity name, or the page's
        effective domain when both share a domain that no entity
        claims.
        """
        page_domain = url_utils.get_base_domain(page_url)
        url_domain = url_utils.get_base_domain(url)
        parent = self._store.entity_map.get(url_domain) if url_domain else None

        if (page_domain and page_domain == url_domain) or self.is_related_entity(parent, page_url):
            return parent or page_domain or None
        return None

    def _tracker_details(
        self,
        url: str,
        list_name: str,
        *,
        block: bool,
        reason: VerdictReason,
        redirect_url: str | None = None,
    ) -> Verdict:
        host = url_utils.extract_host(url)
        parent = url_utils.find_parent(url_utils.split_labels(host), self._store.entity_map) or "unknown"
        return Verdict(
            parent_company=parent,
            url=host,
            type=list_name,
            block=block,
            reason=reason,
            redirect_url=redirect_url,
        )
