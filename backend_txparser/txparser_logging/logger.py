"""
Structured JSON logging: timestamp, level, event_type.

structlog with ISO timestamps, log level, and consistent keys for aggregation.
Configuration is explicit: the process entry point calls configure_logging()
with the configured level, and each component receives its own bound logger
at construction instead of reaching for a shared global.

Uses only Python stdlib logging and structlog; no backend_txparser imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

DEFAULT_LEVEL = "info"

# Accepted level names; anything else falls back to info
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type for consistency; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def level_value(level: str | None) -> int:
    """Map a configured level name (debug/info/warn/error) to a logging level; default info."""
    return _LEVELS.get((level or "").strip().lower(), _LEVELS[DEFAULT_LEVEL])


def level_name(level: str | None) -> str:
    """Canonical lower-case name for a configured level (e.g. "warn" -> "warning"), as uvicorn expects."""
    return logging.getLevelName(level_value(level)).lower()


def configure_logging(level: str | None = DEFAULT_LEVEL, fmt: str = "json") -> None:
    """
    Configure structlog: JSON (or console) rendering, timestamp, level, event_type.

    Safe to call more than once; the latest call wins. Loggers bound before a
    reconfiguration pick up the new settings on their next call.
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if (fmt or "json").strip().lower() == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module or component name.

    Log with event_type (first arg) and keyword fields:
        logger = get_logger(__name__)
        logger.info("engine_scan_completed", address=addr, matches=2, cursor=12)
    Output (JSON): {"event_type": "engine_scan_completed", "address": "...", "matches": 2,
    "cursor": 12, "timestamp": "...", "level": "info", "logger": "module.name"}
    """
    return structlog.get_logger(name).bind(logger=name)
