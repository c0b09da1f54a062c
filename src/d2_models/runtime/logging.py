"""
Logging setup for d2-models.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. Applications (and the CLI) call
``setup_logging`` once to get either:
- human-readable console lines, or
- JSON Lines (one JSON object per record) for log collectors
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER = "d2_models"

_NO_COLOR = bool(os.environ.get("NO_COLOR")) or not sys.stderr.isatty()


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "" if _NO_COLOR else "\033[0m"
    DIM = "" if _NO_COLOR else "\033[2m"

    DEBUG = "" if _NO_COLOR else "\033[36m"  # Cyan
    WARNING = "" if _NO_COLOR else "\033[33m"  # Yellow
    ERROR = "" if _NO_COLOR else "\033[31m"  # Red
    CRITICAL = "" if _NO_COLOR else "\033[35m"  # Magenta


class JSONLFormatter(logging.Formatter):
    """
    Formats log records as JSON Lines.

    Example output:
    {"timestamp":"2024-01-15T10:30:45.123000+00:00","level":"WARNING","logger":"d2_models.runtime.model_definition","message":"Fetching /dataElements/x failed: id not found"}
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.levelno >= logging.WARNING:
            entry["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.DEBUG,
        logging.WARNING: Colors.WARNING,
        logging.ERROR: Colors.ERROR,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        prefix = f"{Colors.DIM}{timestamp}{Colors.RESET}"

        # INFO lines stay unlabelled
        if record.levelno != logging.INFO:
            level_color = self.LEVEL_COLORS.get(record.levelno, "")
            prefix = f"{prefix} {level_color}{record.levelname}{Colors.RESET}:"

        return f"{prefix} {record.getMessage()}"


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Attach a single console handler to the package logger.

    Calling it again replaces the previous handler.

    Args:
        level: Minimum log level
        json_format: Emit JSON Lines instead of console lines
        stream: Output stream (defaults to stderr)

    Returns:
        The configured package logger
    """
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONLFormatter() if json_format else ConsoleFormatter())
    handler.setLevel(level)
    root_logger.addHandler(handler)

    return root_logger
