"""
In-memory transaction store: subscribed addresses and per-address transaction logs.

All keys are normalized addresses. The subscription set and the transaction
log are guarded by separate locks so subscribing never waits on a scan that is
appending records. Reads return copies taken under the lock: a reader sees an
append entirely or not at all. State is volatile and lost on restart.
"""

from __future__ import annotations

import threading

from backend_txparser.storage.models import Transaction
from backend_txparser.utils.address_utils import normalize_address


class TransactionStore:
    """Thread-safe registry of subscribed addresses and their append-only transaction logs."""

    def __init__(self) -> None:
        self._subscribed: set[str] = set()
        self._transactions: dict[str, list[Transaction]] = {}
        self._subscribed_lock = threading.Lock()
        self._transactions_lock = threading.Lock()

    def subscribe(self, address: str) -> bool:
        """Register address; return True if newly added, False if already subscribed."""
        key = normalize_address(address)
        with self._subscribed_lock:
            if key in self._subscribed:
                return False
            self._subscribed.add(key)
            return True

    def is_subscribed(self, address: str) -> bool:
        key = normalize_address(address)
        with self._subscribed_lock:
            return key in self._subscribed

    def subscribed_addresses(self) -> list[str]:
        """Snapshot of subscribed (normalized) addresses, sorted."""
        with self._subscribed_lock:
            return sorted(self._subscribed)

    def record_transaction(self, address: str, tx: Transaction) -> None:
        """Append tx to the address log. No uniqueness check; callers deduplicate."""
        key = normalize_address(address)
        with self._transactions_lock:
            self._transactions.setdefault(key, []).append(tx)

    def get_transactions(self, address: str) -> list[Transaction]:
        """Return a copy of the address log in discovery order; empty if nothing recorded."""
        key = normalize_address(address)
        with self._transactions_lock:
            return list(self._transactions.get(key, ()))
