"""
Application-level exceptions.

RPC failures are split by origin (transport, decode, node-reported error) so
callers can log them distinctly; the scan engine treats every RPCError the
same way. Duplicate subscriptions are not errors and have no exception here.
"""

from __future__ import annotations


class TxParserError(Exception):
    """Base class for all backend_txparser errors."""


class ConfigurationError(TxParserError):
    """Configuration file missing, malformed, or holding an invalid value."""


class RPCError(TxParserError):
    """Any failure talking to the upstream JSON-RPC node."""


class RPCTransportError(RPCError):
    """Network failure or non-success HTTP status from the node."""


class RPCDecodeError(RPCError):
    """Malformed JSON-RPC envelope or malformed hex quantity."""


class RPCResponseError(RPCError):
    """Well-formed JSON-RPC error object returned by the node."""

    def __init__(self, message: str, code: int | None = None) -> None:
        self.code = code
        self.rpc_message = message
        super().__init__(f"RPC error: {message} (code={code})")


class BlockNotFoundError(RPCError):
    """Node returned a null block (height not yet available)."""

    def __init__(self, height: int) -> None:
        self.height = height
        super().__init__(f"block {height} not found")
