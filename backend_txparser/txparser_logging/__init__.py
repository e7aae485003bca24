"""
Structured logging for Backend TxParser.

JSON logs with timestamp, level, event_type and keyword fields.
Call configure_logging() once at startup, then hand get_logger() results
to components at construction time.
"""

from backend_txparser.txparser_logging.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
