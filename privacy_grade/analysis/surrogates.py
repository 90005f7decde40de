"""Surrogate script lookup.

A surrogate is an inert replacement payload (usually a ``data:``
URI) served instead of a blocked tracker script so that pages relying
on the script's API keep working.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol
from urllib import parse

from privacy_grade.utils import logger

log = logger.create_logger("Surrogates")


class SurrogateStore(Protocol):
    """Anything that can map a tracker URL to a replacement payload."""

    def lookup(self, url: str, hostname: str) -> str | None:
        """Return the replacement payload for *url*, or ``None``."""
        ...


class MappingSurrogateStore:
    """Surrogate store backed by ``{"host/path": payload}`` rules.

    A rule matches when the request host equals the rule host or is
    a subdomain of it, and the request path equals the rule path.
    Query strings and fragments are ignored.
    """

    def __init__(self, rules: Mapping[str, str]) -> None:
        self._rules: dict[str, list[tuple[str, str]]] = {}
        for key, payload in rules.items():
            host, sep, path = key.partition("/")
            if not host or not sep:
                log.warn("Ignoring surrogate rule without a path", {"rule": key})
                continue
            self._rules.setdefault(host.lower(), []).append(("/" + path, payload))

    def __len__(self) -> int:
        return sum(len(v) for v in self._rules.values())

    def lookup(self, url: str, hostname: str) -> str | None:
        if not hostname:
            return None
        try:
            path = parse.urlsplit(url).path
        except ValueError:
            return None

        labels = hostname.lower().split(".")
        for start in range(len(labels) - 1):
            for rule_path, payload in self._rules.get(".".join(labels[start:]), ()):
                if path == rule_path:
                    return payload
        return None
