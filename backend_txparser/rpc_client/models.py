"""
Data models for JSON-RPC block payloads.

Decodes eth_getBlockByNumber results (full transaction objects) into
immutable dataclasses. Only the fields the scan engine reads are decoded;
the transaction value is converted to a decimal string when it is hex.
Any field of the wrong type raises RPCDecodeError so the whole block is
treated as unreadable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_txparser.core.exceptions import RPCDecodeError


def parse_hex_quantity(text: Any) -> int:
    """Decode a JSON-RPC hex quantity ("0x1a" or "1a") to a non-negative int."""
    if not isinstance(text, str):
        raise RPCDecodeError(f"expected hex string, got {type(text).__name__}")
    digits = text.strip()
    if digits[:2].lower() == "0x":
        digits = digits[2:]
    if not digits:
        raise RPCDecodeError(f"failed to parse hex string {text!r}")
    try:
        return int(digits, 16)
    except ValueError as e:
        raise RPCDecodeError(f"failed to parse hex string {text!r}") from e


def _text_field(item: dict[str, Any], key: str) -> str:
    # null and absent both decode to ""
    value = item.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise RPCDecodeError(f"transaction field {key!r} must be a string, got {type(value).__name__}")
    return value


def _decimal_value(value: Any) -> str:
    # Nodes return wei as a hex quantity; decimal strings and ints are kept as given
    if value is None:
        return "0"
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise RPCDecodeError(f"transaction value must be a string, got {type(value).__name__}")
    if isinstance(value, int):
        return str(value)
    text = value.strip()
    if text[:2].lower() == "0x":
        return str(parse_hex_quantity(text))
    return text


@dataclass(frozen=True)
class RawTransaction:
    """
    Transaction as supplied by the node inside a block.

    Addresses are kept as the node spelled them; the scan engine normalizes.
    """

    hash: str
    from_address: str
    to_address: str
    """Empty string for contract creation (node returns null)."""
    value: str

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "RawTransaction":
        """Build from a single transaction object of eth_getBlockByNumber(..., true)."""
        if not isinstance(item, dict):
            raise RPCDecodeError(f"expected transaction object, got {type(item).__name__}")
        tx_hash = _text_field(item, "hash")
        if not tx_hash:
            raise RPCDecodeError("transaction object has no hash")
        return cls(
            hash=tx_hash,
            from_address=_text_field(item, "from"),
            to_address=_text_field(item, "to"),
            value=_decimal_value(item.get("value")),
        )


@dataclass(frozen=True)
class Block:
    """Transactions of one block, in node order."""

    transactions: tuple[RawTransaction, ...] = ()

    @classmethod
    def from_rpc_result(cls, result: dict[str, Any]) -> "Block":
        """Build from an eth_getBlockByNumber result object."""
        if not isinstance(result, dict):
            raise RPCDecodeError(f"expected block object, got {type(result).__name__}")
        raw_txs = result.get("transactions") or []
        if not isinstance(raw_txs, list):
            raise RPCDecodeError("block transactions must be a list")
        return cls(transactions=tuple(RawTransaction.from_rpc_item(t) for t in raw_txs))
