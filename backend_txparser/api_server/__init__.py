"""
API server package — HTTP/REST interface.

Thin adapter over the scan engine: subscription, current block height,
and per-address transaction queries.
"""
