"""
Centralized logging configuration for confstack.

Format: 2026-01-06T14:05:52Z [source] LEVEL message

Environment Variables:
    LOG_LEVEL: "TRACE", "DEBUG", "INFO" (default), "WARNING" or "ERROR"

Usage:
    from confstack.logging_config import configure_logging, get_logger

    configure_logging(source="confstack")
    logger = get_logger(__name__)
    logger.info("Configuration loaded")
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from typing import TextIO

# Custom TRACE level for very verbose diagnostics
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _trace(self: logging.Logger, message: object, *args: object, **kw: object) -> None:
    """Log a message at TRACE level (5)."""
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kw)  # type: ignore[arg-type]


logging.Logger.trace = _trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """Formatter producing ISO8601 timestamps in UTC.

    Output format: 2026-01-06T14:05:52Z [source] LEVEL message
    """

    def __init__(self, source: str = "confstack"):
        self.source = source
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        message = record.getMessage()

        if record.exc_info:
            exception_text = self.formatException(record.exc_info)
            message = f"{message}\n{exception_text}"

        return f"{timestamp} [{self.source}] {record.levelname} {message}"


def resolve_level(level: int | str | None = None, debug: bool | None = None) -> int:
    """Turn a level name, number or the LOG_LEVEL env var into a logging level."""
    if debug:
        return logging.DEBUG
    if isinstance(level, int):
        return level

    name = (level or os.getenv("LOG_LEVEL", "") or "INFO").upper()
    if name == "TRACE":
        return TRACE
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    source: str = "confstack",
    level: int | str | None = None,
    debug: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the root logger with a single formatted handler.

    Args:
        source: Source identifier shown in brackets
        level: Level name or number (defaults to LOG_LEVEL env var, then INFO)
        debug: Force DEBUG
        stream: Output stream (defaults to stderr so command output stays clean)

    Returns:
        Configured root logger
    """
    resolved = resolve_level(level, debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(ISO8601Formatter(source=source))
    root_logger.addHandler(handler)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
