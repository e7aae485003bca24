"""
Configuration management for the TxParser service.

Loads settings from a YAML config file and environment variables (with
optional .env). Exposes a single source of truth for service configuration.
"""

from backend_txparser.config.settings import Settings, load_settings  # noqa: F401

__all__ = ["Settings", "load_settings"]
