"""
Transaction parser package.

The scan engine walks new blocks on demand and classifies transactions
touching subscribed addresses as incoming or outgoing.
"""

from backend_txparser.parser.engine import ScanEngine, ScanStats, classify

__all__ = ["ScanEngine", "ScanStats", "classify"]
