"""
Ethereum JSON-RPC client package.

Reads the current chain height and block contents from a single node and
decodes them into immutable models for the scan engine.
"""

from backend_txparser.rpc_client.client import ChainReader, EthRpcClient
from backend_txparser.rpc_client.models import Block, RawTransaction, parse_hex_quantity

__all__ = [
    "Block",
    "ChainReader",
    "EthRpcClient",
    "RawTransaction",
    "parse_hex_quantity",
]
