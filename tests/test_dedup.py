"""
Tests for DedupTracker, including the atomic insert-if-absent under contention.
"""

from __future__ import annotations

import threading

from backend_txparser.storage import DedupTracker


def test_mark_and_check(dedup):
    dedup.mark_recorded("0x1")
    assert dedup.is_recorded("0x1") is True
    assert dedup.is_recorded("0x2") is False


def test_mark_recorded_idempotent(dedup):
    dedup.mark_recorded("0x1")
    dedup.mark_recorded("0x1")
    assert len(dedup) == 1


def test_mark_if_absent(dedup):
    """Only the first insert wins."""
    assert dedup.mark_if_absent("0x1") is True
    assert dedup.mark_if_absent("0x1") is False
    assert dedup.is_recorded("0x1") is True


def test_mark_if_absent_single_winner_under_contention():
    """Many threads racing on the same key: exactly one gets True."""
    dedup = DedupTracker()
    barrier = threading.Barrier(16)
    wins: list[bool] = []
    wins_lock = threading.Lock()

    def racer() -> None:
        barrier.wait()
        won = dedup.mark_if_absent("0xhash")
        with wins_lock:
            wins.append(won)

    threads = [threading.Thread(target=racer) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert wins.count(True) == 1
    assert len(wins) == 16
