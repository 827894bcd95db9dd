"""Logging setup for the engine package.

Every module logs through ``logging.getLogger(__name__)``; this module only
wires a handler onto the package logger for hosts that do not configure
logging themselves.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from santorini_engine.settings import get_settings

PACKAGE_LOGGER = "santorini_engine"

_HANDLER_MARKER = "_santorini_handler"


class TerminalFormatter(logging.Formatter):
    """Single-line human readable formatter."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )


class JsonFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def configure_logging(
    level: str | int | None = None,
    *,
    json_output: bool | None = None,
) -> logging.Logger:
    """Attach a stream handler to the package logger and return it.

    Calling this more than once replaces the previously installed handler
    instead of stacking a second one.
    """
    settings = get_settings()
    resolved_level = level if level is not None else settings.log_level
    use_json = settings.log_json if json_output is None else json_output

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if use_json else TerminalFormatter())
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)
    logger.setLevel(resolved_level)
    return logger


__all__ = ["PACKAGE_LOGGER", "JsonFormatter", "TerminalFormatter", "configure_logging"]
