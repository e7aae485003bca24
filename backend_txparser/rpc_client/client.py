"""
Ethereum JSON-RPC client — current height and block contents.

Responsibilities:
- Issue eth_blockNumber and eth_getBlockByNumber over HTTP POST (JSON-RPC 2.0).
- Decode hex heights and block payloads into models.
- Raise typed RPCError subclasses for transport, decode and node-reported errors;
  retry policy belongs to the caller (the scan engine skips, it does not retry).
"""

from __future__ import annotations

import itertools
import threading
from typing import Any, Protocol

import httpx
import structlog

from backend_txparser.core.exceptions import (
    BlockNotFoundError,
    RPCDecodeError,
    RPCResponseError,
    RPCTransportError,
)
from backend_txparser.rpc_client.models import Block, parse_hex_quantity
from backend_txparser.txparser_logging import get_logger

DEFAULT_TIMEOUT_SEC = 30.0


class ChainReader(Protocol):
    """Narrow read contract the scan engine needs from a chain node."""

    def fetch_current_block(self) -> int:
        ...

    def fetch_block_by_number(self, height: int) -> Block:
        ...


class EthRpcClient:
    """
    Synchronous JSON-RPC client for a single configured node URL.

    One httpx.Client (connection pool) is shared by all calling threads.
    Request ids increase monotonically per client.
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        logger: structlog.BoundLogger | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Node HTTP endpoint (e.g. https://ethereum-rpc.publicnode.com).
            timeout_sec: HTTP timeout for each request; a stalled node fails the
                call instead of blocking the caller forever.
            logger: Bound logger; defaults to this module's logger.
            http_client: Optional preconfigured client (tests pass one with a
                MockTransport). The caller keeps ownership of a passed client.
        """
        if not rpc_url or not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        self._rpc_url = rpc_url.strip()
        self._log = logger or get_logger(__name__)
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout_sec))
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    @property
    def rpc_url(self) -> str:
        return self._rpc_url

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EthRpcClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def _next_id(self) -> int:
        with self._ids_lock:
            return next(self._ids)

    def _call(self, method: str, params: list[Any]) -> Any:
        """Perform one JSON-RPC call; return the raw result or raise an RPCError."""
        body = {
            "jsonrpc": "2.0",
            "id": self._next_id(),
            "method": method,
            "params": params,
        }
        try:
            resp = self._client.post(self._rpc_url, json=body)
        except httpx.HTTPError as e:
            self._log.error("rpc_request_failed", method=method, error=str(e))
            raise RPCTransportError(f"failed to send {method} request: {e}") from e

        if resp.status_code != httpx.codes.OK:
            self._log.error("rpc_bad_status", method=method, status_code=resp.status_code)
            raise RPCTransportError(
                f"{method} failed: status code {resp.status_code}"
            )

        try:
            data = resp.json()
        except ValueError as e:
            self._log.error("rpc_invalid_json", method=method, error=str(e))
            raise RPCDecodeError(f"failed to parse JSON response for {method}: {e}") from e
        if not isinstance(data, dict):
            raise RPCDecodeError(f"unexpected JSON-RPC envelope for {method}")

        err = data.get("error")
        if err:
            if isinstance(err, dict):
                message = str(err.get("message", err))
                code = err.get("code")
            else:
                message, code = str(err), None
            self._log.error("rpc_error_response", method=method, code=code, rpc_message=message)
            raise RPCResponseError(message, code=code)

        if "result" not in data:
            raise RPCDecodeError(f"JSON-RPC response for {method} has no result")
        return data["result"]

    def fetch_current_block(self) -> int:
        """Return the node's current block height (eth_blockNumber)."""
        result = self._call("eth_blockNumber", [])
        height = parse_hex_quantity(result)
        self._log.debug("rpc_current_block", height=height)
        return height

    def fetch_block_by_number(self, height: int) -> Block:
        """Return block `height` with full transaction objects (eth_getBlockByNumber)."""
        if height < 0:
            raise ValueError("height must be non-negative")
        result = self._call("eth_getBlockByNumber", [hex(height), True])
        if result is None:
            raise BlockNotFoundError(height)
        block = Block.from_rpc_result(result)
        self._log.debug(
            "rpc_block_fetched",
            height=height,
            tx_count=len(block.transactions),
        )
        return block
