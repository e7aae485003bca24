"""
Scan engine — block range scanning and transaction classification.

A query for an address pulls every block from the scan cursor up to the
current chain height, classifies each transaction as outgoing (sent by the
address) or incoming (received by it), persists new matches once, advances
the cursor and returns the matches. There is no background thread: each scan
runs synchronously on the worker that handled the query.

Failure policy: only a failed height probe aborts a scan. A block that cannot
be fetched is logged and skipped for good; the cursor still advances past it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from backend_txparser.core.exceptions import RPCError
from backend_txparser.rpc_client.client import ChainReader
from backend_txparser.rpc_client.models import RawTransaction
from backend_txparser.storage.dedup import DedupTracker
from backend_txparser.storage.memory_storage import TransactionStore
from backend_txparser.storage.models import Direction, Transaction
from backend_txparser.txparser_logging import get_logger
from backend_txparser.utils.address_utils import normalize_address


@dataclass
class ScanStats:
    """Lifetime counters for monitoring."""

    scans: int = 0
    blocks_scanned: int = 0
    blocks_skipped: int = 0
    records_persisted: int = 0


def classify(raw: RawTransaction, address: str) -> Transaction | None:
    """
    Return the transaction as seen from `address`, or None if it does not touch it.

    `address` must already be normalized. A self-transfer counts as outgoing.
    """
    sender = normalize_address(raw.from_address)
    receiver = normalize_address(raw.to_address)
    if sender == address:
        direction = Direction.OUTGOING
    elif receiver == address:
        direction = Direction.INCOMING
    else:
        return None
    return Transaction(
        hash=raw.hash,
        from_address=sender,
        to_address=receiver,
        value=raw.value,
        direction=direction,
    )


def record_key(address: str, tx: Transaction) -> tuple[str, str, str]:
    """Dedup key: one record per (address, hash, direction)."""
    return (address, tx.hash, tx.direction.value)


class ScanEngine:
    """
    Orchestrates ChainReader, TransactionStore and DedupTracker.

    The cursor is the last block height fully processed. It is read and
    advanced under its own lock and never moves backwards, so two scans
    finishing out of order cannot undo each other's progress.
    """

    def __init__(
        self,
        chain_reader: ChainReader,
        store: TransactionStore,
        dedup: DedupTracker,
        *,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self._reader = chain_reader
        self._store = store
        self._dedup = dedup
        self._log = logger or get_logger(__name__)
        self._cursor_lock = threading.Lock()
        self._stats = ScanStats()
        self._stats_lock = threading.Lock()

        try:
            height = self._reader.fetch_current_block()
            self._log.info("engine_initial_block_fetched", height=height)
        except RPCError as e:
            self._log.error("engine_initial_block_fetch_failed", error=str(e))
            height = 0
        self._cursor = height
        self._latest_height = height

    @property
    def cursor(self) -> int:
        with self._cursor_lock:
            return self._cursor

    @property
    def stats(self) -> ScanStats:
        with self._stats_lock:
            return ScanStats(**vars(self._stats))

    def get_current_block(self) -> int:
        """
        Return the chain's current height, falling back to the last known one.

        Upstream errors are logged, never raised. The scan cursor is not moved.
        """
        try:
            height = self._reader.fetch_current_block()
        except RPCError as e:
            with self._cursor_lock:
                stale = self._latest_height
            self._log.error("engine_current_block_fetch_failed", error=str(e), stale_height=stale)
            return stale
        with self._cursor_lock:
            self._latest_height = max(self._latest_height, height)
        self._log.info("engine_current_block_updated", height=height)
        return height

    def subscribe(self, address: str) -> bool:
        address = normalize_address(address)
        if self._store.subscribe(address):
            self._log.info("engine_address_subscribed", address=address)
            return True
        self._log.warning("engine_address_already_subscribed", address=address)
        return False

    def get_transactions(self, address: str) -> list[Transaction] | None:
        """
        Scan blocks cursor..H (inclusive) for transactions touching `address`.

        Returns the matches observed in this scan (possibly empty), or None when
        the current height could not be obtained, in which case nothing is
        scanned and the cursor is unchanged.
        """
        address = normalize_address(address)
        try:
            head = self._reader.fetch_current_block()
        except RPCError as e:
            self._log.error("engine_block_number_fetch_failed", address=address, error=str(e))
            return None
        if head == 0:
            self._log.error("engine_block_number_zero", address=address)
            return None

        start = self.cursor
        matches: list[Transaction] = []
        scanned = skipped = persisted = 0
        for height in range(start, head + 1):
            try:
                block = self._reader.fetch_block_by_number(height)
            except RPCError as e:
                skipped += 1
                self._log.error("engine_block_fetch_failed", height=height, error=str(e))
                continue
            scanned += 1
            for raw in block.transactions:
                tx = classify(raw, address)
                if tx is None:
                    continue
                matches.append(tx)
                if self._dedup.mark_if_absent(record_key(address, tx)):
                    self._store.record_transaction(address, tx)
                    persisted += 1

        with self._cursor_lock:
            self._cursor = max(self._cursor, head)
            self._latest_height = max(self._latest_height, head)
            cursor = self._cursor
        with self._stats_lock:
            self._stats.scans += 1
            self._stats.blocks_scanned += scanned
            self._stats.blocks_skipped += skipped
            self._stats.records_persisted += persisted

        self._log.info(
            "engine_scan_completed",
            address=address,
            from_block=start,
            to_block=head,
            blocks_skipped=skipped,
            matches=len(matches),
            persisted=persisted,
            cursor=cursor,
        )
        return matches
