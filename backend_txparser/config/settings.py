"""
Application settings.

Loaded from a YAML file (server/logging sections) and overridden by
environment variables. Layout:

    server:
      host: localhost
      port: ":8088"
      ethrpc: https://ethereum-rpc.publicnode.com
      rpc_timeout: 30
    logging:
      level: info
      format: json
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from backend_txparser.config.env import get_config_path, get_env, load_txparser_env
from backend_txparser.core.exceptions import ConfigurationError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8088
DEFAULT_ETH_RPC_URL = "https://ethereum-rpc.publicnode.com"
DEFAULT_RPC_TIMEOUT_SEC = 30.0


@dataclass(frozen=True)
class Settings:
    """Typed service configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    eth_rpc_url: str = DEFAULT_ETH_RPC_URL
    log_level: str = "info"
    log_format: str = "json"
    rpc_timeout_sec: float = DEFAULT_RPC_TIMEOUT_SEC


def parse_port(value: Any) -> int:
    """Accept 8088, "8088" or ":8088"."""
    text = str(value).strip().lstrip(":")
    try:
        port = int(text)
    except ValueError as e:
        raise ConfigurationError(f"invalid port {value!r}") from e
    if not (0 < port < 65536):
        raise ConfigurationError(f"port out of range: {port}")
    return port


def _parse_timeout(value: Any) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid rpc timeout {value!r}") from e
    if timeout <= 0:
        raise ConfigurationError("rpc timeout must be positive")
    return timeout


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' section must be a mapping")
    return section


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"malformed config file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    return data


def settings_from_dict(data: dict[str, Any]) -> Settings:
    """Build Settings from a parsed config mapping; missing keys keep defaults."""
    server = _section(data, "server")
    logging_cfg = _section(data, "logging")
    settings = Settings()
    if server.get("host") is not None:
        settings = replace(settings, host=str(server["host"]).strip() or DEFAULT_HOST)
    if server.get("port") is not None:
        settings = replace(settings, port=parse_port(server["port"]))
    if server.get("ethrpc"):
        settings = replace(settings, eth_rpc_url=str(server["ethrpc"]).strip())
    if server.get("rpc_timeout") is not None:
        settings = replace(settings, rpc_timeout_sec=_parse_timeout(server["rpc_timeout"]))
    if logging_cfg.get("level"):
        settings = replace(settings, log_level=str(logging_cfg["level"]).strip().lower())
    if logging_cfg.get("format"):
        settings = replace(settings, log_format=str(logging_cfg["format"]).strip().lower())
    return settings


def _apply_env_overrides(settings: Settings) -> Settings:
    host = get_env("API_HOST")
    if host:
        settings = replace(settings, host=host)
    port = get_env("API_PORT")
    if port:
        settings = replace(settings, port=parse_port(port))
    rpc_url = get_env("ETH_RPC_URL")
    if rpc_url:
        settings = replace(settings, eth_rpc_url=rpc_url)
    level = get_env("LOG_LEVEL")
    if level:
        settings = replace(settings, log_level=level.lower())
    fmt = get_env("LOG_FORMAT")
    if fmt:
        settings = replace(settings, log_format=fmt.lower())
    timeout = get_env("RPC_TIMEOUT_SEC")
    if timeout:
        settings = replace(settings, rpc_timeout_sec=_parse_timeout(timeout))
    return settings


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Return service settings: YAML file, then environment overrides.

    A file requested explicitly (argument or CONFIG_PATH) must exist; a missing
    default file means defaults plus environment.
    """
    load_txparser_env()
    if path is not None:
        config_path, explicit = Path(path), True
    else:
        config_path, explicit = get_config_path()

    if config_path.is_file():
        data = _read_yaml(config_path)
    elif explicit:
        raise ConfigurationError(f"config file not found: {config_path}")
    else:
        data = {}
    return _apply_env_overrides(settings_from_dict(data))
