"""In-memory set of already persisted record keys, shared by concurrent scans.

Keys are any hashable value; the scan engine uses (address, hash, direction)
tuples.
"""

from __future__ import annotations

import threading
from typing import Hashable


class DedupTracker:
    """
    Thread-safe seen-set.

    mark_if_absent() is the primitive the scan engine relies on: check and
    insert happen under one lock, so among concurrent callers offering the same
    key exactly one gets True and goes on to persist the record.
    """

    def __init__(self) -> None:
        self._seen: set[Hashable] = set()
        self._lock = threading.Lock()

    def is_recorded(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._seen

    def mark_recorded(self, key: Hashable) -> None:
        """Mark key as seen. Idempotent."""
        with self._lock:
            self._seen.add(key)

    def mark_if_absent(self, key: Hashable) -> bool:
        """Insert key; return True if it was not seen before, False otherwise."""
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
