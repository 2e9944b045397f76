"""In-process cache of raw discovery documents keyed by (api, version)."""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class DiscoveryCache:
    """Insert-if-absent cache of parsed documents.

    Each key has its own lock, so concurrent loads of the same document
    converge on one value while unrelated keys load in parallel. Entries are
    stored only once fully built, so readers never see partial documents.
    A key's lock is dropped once its entry is stored, so the lock table only
    holds keys with a load in flight. Entries live until `clear()` or process exit.
    """

    def __init__(self):
        self._entries: dict[tuple, dict] = {}
        self._locks: dict[tuple, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def __contains__(self, key: tuple) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: tuple) -> dict | None:
        return self._entries.get(key)

    def put(self, key: tuple, document: dict) -> dict:
        """Store a document explicitly, replacing any cached one."""
        with self._lock_for(key):
            self._entries[key] = document
        self._release(key)
        return document

    def get_or_load(self, key: tuple, loader: Callable[[], dict]) -> dict:
        cached = self._entries.get(key)
        if cached is not None:
            logger.debug(f"Discovery cache hit: {key}")
            return cached

        with self._lock_for(key):
            cached = self._entries.get(key)
            if cached is not None:
                return cached
            logger.debug(f"Discovery cache miss: {key}")
            document = loader()
            self._entries[key] = document
        self._release(key)
        return document

    def clear(self) -> None:
        with self._locks_guard:
            self._entries.clear()
            self._locks.clear()

    def _lock_for(self, key: tuple) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(key, threading.Lock())

    def _release(self, key: tuple) -> None:
        # Waiters already holding the old lock find the stored entry
        with self._locks_guard:
            self._locks.pop(key, None)
