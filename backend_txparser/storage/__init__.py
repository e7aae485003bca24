"""
Storage layer — subscriptions, transaction logs, and the dedup seen-set.

In-memory only; state is volatile and lives for the process lifetime.
"""

from backend_txparser.storage.dedup import DedupTracker
from backend_txparser.storage.memory_storage import TransactionStore
from backend_txparser.storage.models import Direction, Transaction

__all__ = [
    "DedupTracker",
    "Direction",
    "Transaction",
    "TransactionStore",
]
