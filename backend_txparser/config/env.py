"""
Environment variable loading for TxParser.

- CONFIG_PATH: YAML config file (default: configs/config.yaml)
- API_HOST / API_PORT: HTTP listen address overrides
- ETH_RPC_URL: upstream node URL override
- LOG_LEVEL / LOG_FORMAT: logging overrides (debug|info|warn|error, json|console)
- RPC_TIMEOUT_SEC: per-request timeout for the node
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_txparser/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_BACKEND_DIR = _CONFIG_DIR.parent
_ROOT = _BACKEND_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_CONFIG_PATH = Path("configs/config.yaml")


def load_txparser_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides real env."""
    load_dotenv(_ENV_PATH, override=False)


def get_env(name: str) -> str | None:
    """Return a stripped env value, or None when unset or blank."""
    raw = (os.getenv(name) or "").strip()
    return raw or None


def get_config_path() -> tuple[Path, bool]:
    """
    Resolve the config file path.
    Returns (path, explicit): explicit is True when CONFIG_PATH chose it.
    """
    load_txparser_env()
    env_path = get_env("CONFIG_PATH")
    if env_path:
        return Path(env_path), True
    return DEFAULT_CONFIG_PATH, False
