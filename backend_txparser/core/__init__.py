"""
Core utilities — application exceptions shared across the RPC client,
scan engine, configuration layer, and API server.
"""
