"""
Data loader for the tracker, entity, whitelist and reputation lists.

Reads the list files from a directory and builds a
:class:`~privacy_grade.data.store.ListStore` from them. The directory
defaults to ``Settings.lists_dir``; the store built from it is loaded
lazily and cached.
"""

from __future__ import annotations

import json
import pathlib
from typing import Any

from privacy_grade import config
from privacy_grade.analysis.surrogates import MappingSurrogateStore
from privacy_grade.data.store import ListStore
from privacy_grade.utils import logger

log = logger.create_logger("Loader")

# from_raw() argument -> file name. Only the tracker list is required.
LIST_FILES = {
    "trackers_with_parent_company": "trackersWithParentCompany.json",
    "entity_map": "entityMap.json",
    "entity_list": "entityList.json",
    "reputation": "tosdr.json",
    "reputation_messages": "tosdrMessages.json",
    "major_tracking_networks": "majorTrackingNetworks.json",
}
REQUIRED_LIST = "trackers_with_parent_company"
WHITELIST_FILE = "trackersWhitelist.txt"
SURROGATES_FILE = "surrogates.json"

# ============================================================================
# File Loading
# ============================================================================


def _load_json(path: pathlib.Path) -> Any:
    """Load and parse one JSON list file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    if not path.exists():
        raise FileNotFoundError(f"List file not found: {path.name}")
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as exc:
            raise json.JSONDecodeError(
                f"Invalid JSON in {path.name}: {exc.msg}",
                exc.doc,
                exc.pos,
            ) from exc


def _load_whitelist(path: pathlib.Path) -> list[str] | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8").splitlines()


# ============================================================================
# Store Loading
# ============================================================================


def load_store(directory: str | pathlib.Path) -> ListStore:
    """Build a list store from the list files in *directory*.

    Optional lists that are missing are logged and left empty.

    Raises:
        FileNotFoundError: If the tracker list is missing.
        json.JSONDecodeError: If a list file contains invalid JSON.
        pydantic.ValidationError: If a list entry is malformed.
    """
    directory = pathlib.Path(directory)
    raw: dict[str, Any] = {}
    for name, filename in LIST_FILES.items():
        path = directory / filename
        if name != REQUIRED_LIST and not path.exists():
            log.warn("Optional list missing", {"file": filename})
            continue
        raw[name] = _load_json(path)

    raw["whitelist"] = _load_whitelist(directory / WHITELIST_FILE)
    return ListStore.from_raw(**raw)


def load_surrogates(directory: str | pathlib.Path) -> MappingSurrogateStore:
    """Build a surrogate store from ``surrogates.json`` in *directory*.

    A missing file yields an empty store.
    """
    path = pathlib.Path(directory) / SURROGATES_FILE
    if not path.exists():
        log.debug("No surrogate file", {"file": SURROGATES_FILE})
        return MappingSurrogateStore({})
    surrogates = MappingSurrogateStore(_load_json(path))
    log.success("Surrogates loaded", {"rules": len(surrogates)})
    return surrogates


_store_cache: ListStore | None = None


def get_store() -> ListStore:
    """Get the list store for ``Settings.lists_dir`` (lazy loaded and cached)."""
    global _store_cache
    if _store_cache is None:
        _store_cache = load_store(config.get_settings().lists_dir)
    return _store_cache


def clear_cache() -> None:
    """Drop the cached store so the next call reloads the lists."""
    global _store_cache
    _store_cache = None
