"""
Test that txparser_logging can be imported without circular import and logger works.
"""

from __future__ import annotations

import json
import logging


def test_logging_import():
    """Import get_logger from txparser_logging and use the logger."""
    from backend_txparser.txparser_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_json_output(capsys):
    """Configured JSON output carries event_type, level, logger and fields."""
    from backend_txparser.txparser_logging import configure_logging, get_logger

    configure_logging("debug", "json")
    get_logger("tests.logging").info("engine_scan_completed", matches=2)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event_type"] == "engine_scan_completed"
    assert record["level"] == "info"
    assert record["logger"] == "tests.logging"
    assert record["matches"] == 2
    assert "timestamp" in record


def test_level_filtering(capsys):
    from backend_txparser.txparser_logging import configure_logging, get_logger

    configure_logging("error", "json")
    logger = get_logger("tests.logging")
    logger.info("dropped_event")
    logger.error("kept_event")

    out = capsys.readouterr().out
    assert "dropped_event" not in out
    assert "kept_event" in out


def test_unknown_level_defaults_to_info():
    from backend_txparser.txparser_logging.logger import level_value

    assert level_value("verbose") == logging.INFO
    assert level_value(None) == logging.INFO
    assert level_value("WARN") == logging.WARNING
    assert level_value("debug") == logging.DEBUG


def test_level_name_matches_level_value():
    """Server log level names come from the same table as the structlog filter."""
    from backend_txparser.txparser_logging.logger import level_name

    assert level_name("WARN") == "warning"
    assert level_name("debug") == "debug"
    assert level_name("error") == "error"
    assert level_name("verbose") == "info"
    assert level_name(None) == "info"
