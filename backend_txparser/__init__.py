"""
Backend TxParser — Ethereum transaction parser for subscribed addresses.

Scans blocks on demand from a JSON-RPC node, classifies transactions touching
subscribed addresses as incoming or outgoing, and serves them over HTTP.
Modular architecture with clear separation between RPC client, storage,
scan engine, and API server.
"""

__version__ = "0.1.0"
