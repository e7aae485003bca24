"""
Pytest fixtures for TxParser tests. A mock chain reader stands in for the node.
"""

from __future__ import annotations

import threading

import pytest
import structlog

from backend_txparser.core.exceptions import RPCTransportError
from backend_txparser.rpc_client.models import Block, RawTransaction

TEST_ADDRESS = "0xTestAddress"


class MockChainReader:
    """
    In-memory ChainReader: configurable height, per-height transactions,
    and heights (or the height probe itself) that fail with a transport error.
    Blocks without configured transactions are empty.
    """

    rpc_url = "http://mock-node"

    def __init__(self, height: int = 10) -> None:
        self.height = height
        self.blocks: dict[int, list[RawTransaction]] = {}
        self.failing_heights: set[int] = set()
        self.fail_height_probe = False
        self.fetched_heights: list[int] = []
        self.closed = False
        self._lock = threading.Lock()

    def add_tx(self, height: int, tx_hash: str, sender: str, receiver: str, value: str) -> None:
        self.blocks.setdefault(height, []).append(
            RawTransaction(hash=tx_hash, from_address=sender, to_address=receiver, value=value)
        )

    def fetch_current_block(self) -> int:
        if self.fail_height_probe:
            raise RPCTransportError("node unreachable")
        return self.height

    def fetch_block_by_number(self, height: int) -> Block:
        with self._lock:
            self.fetched_heights.append(height)
        if height in self.failing_heights:
            raise RPCTransportError(f"failed to fetch block {height}")
        return Block(transactions=tuple(self.blocks.get(height, ())))

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any configure_logging() done by a test so later loggers use a live stdout."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def chain():
    return MockChainReader(height=10)


@pytest.fixture
def store():
    from backend_txparser.storage import TransactionStore

    return TransactionStore()


@pytest.fixture
def dedup():
    from backend_txparser.storage import DedupTracker

    return DedupTracker()


@pytest.fixture
def engine(chain, store, dedup):
    from backend_txparser.parser import ScanEngine

    return ScanEngine(chain, store, dedup)


@pytest.fixture
def client(engine, store):
    """FastAPI TestClient over an app wired to the mock chain."""
    from fastapi.testclient import TestClient

    from backend_txparser.api_server.server import create_app

    return TestClient(create_app(engine, store))
