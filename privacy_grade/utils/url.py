"""
URL and domain utility functions for tracker classification.

Hostname parsing never raises: malformed input yields ``None`` or an
empty string so that callers can treat it as "no match".
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from urllib import parse

import tldextract

# Offline extractor: uses the public suffix snapshot bundled with
# tldextract and never fetches or caches the list on disk.
_extractor = tldextract.TLDExtract(suffix_list_urls=(), cache_dir=None)

# Last-ditch host grab for URLs the standard parser rejects,
# e.g. ``http://bad_host^name/x``. Keeps any port.
_HOST_FALLBACK_RE = re.compile(r"^(?:.*://)([^/]+)")

_VALID_HOSTNAME_RE = re.compile(r"^[a-z0-9_.:-]+$")

_SPECIAL_SCHEMES = frozenset([
    "about", "chrome", "chrome-extension", "chrome-search", "edge",
    "moz-extension", "resource", "view-source", "data", "blob", "file",
])
_SPECIAL_HOSTS = frozenset(["", "newtab", "extensions"])


def extract_hostname(url: str) -> str | None:
    """Return the hostname of *url*, or ``None`` if none can be found.

    Bare hostnames (``"example.com/path"``) are accepted. When the
    standard parser cannot produce a valid hostname the raw
    ``scheme://host`` portion is used instead.
    """
    if not url:
        return None

    candidate = url if "://" in url or url.startswith("//") else f"//{url}"
    try:
        hostname = parse.urlsplit(candidate).hostname
    except ValueError:
        hostname = None

    if hostname and _VALID_HOSTNAME_RE.match(hostname):
        return hostname

    match = _HOST_FALLBACK_RE.match(url)
    if match:
        return match.group(1).lower()
    return None


def extract_host(url: str) -> str:
    """Extract the hostname from *url* with any leading ``www.`` removed.

    Returns ``""`` when the URL has no recognisable hostname.
    """
    hostname = extract_hostname(url) or ""
    return re.sub(r"^www\.", "", hostname)


def get_base_domain(url_or_host: str) -> str:
    """Extract the registrable (effective) domain.

    Examples:
        ``"https://ssl.google-analytics.com/x"`` -> ``"google-analytics.com"``
        ``"tracker.cdn.example.co.uk"`` -> ``"example.co.uk"``

    Returns ``""`` for IP literals, single-label hosts and input
    without a public suffix.
    """
    hostname = extract_hostname(url_or_host)
    if not hostname:
        return ""
    ext = _extractor(hostname)
    if ext.domain and ext.suffix:
        return f"{ext.domain}.{ext.suffix}"
    return ""


def split_labels(hostname: str) -> list[str]:
    """Split a hostname into its dot-separated labels."""
    return [label for label in hostname.split(".") if label]


def find_parent(labels: Sequence[str], entity_map: Mapping[str, str]) -> str | None:
    """Resolve the owning entity name for a sequence of host labels.

    Tries the full host first, then drops the leftmost label until
    fewer than two labels remain.

    Args:
        labels: Host labels, most specific first
            (``["ssl", "google-analytics", "com"]``).
        entity_map: Mapping of domain to entity name.

    Returns:
        The entity name, or ``None`` when no suffix is mapped.
    """
    for start in range(len(labels) - 1):
        name = entity_map.get(".".join(labels[start:]))
        if name:
            return name
    return None


def is_special_page(url: str) -> bool:
    """Return whether *url* is a browser-internal page that cannot be graded."""
    if not url:
        return True
    try:
        parsed = parse.urlsplit(url)
    except ValueError:
        return False
    if parsed.scheme.lower() in _SPECIAL_SCHEMES:
        return True
    if parsed.scheme in ("http", "https"):
        return (parsed.hostname or "") in _SPECIAL_HOSTS
    return False
