"""Structured Logging — JSON formatter and setup for the membrane logger tree.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (stage, membrane, shape, strategy, error_code) surfaced when present
    - Importing the library never configures logging; setup_logging is explicit
    - Repeated setup_logging calls replace the handler instead of stacking

Design Decisions:
    - JSONFormatter over third-party libs: stdlib logging only
    - Configures the "membrane" logger, not root: host applications keep their own setup
"""

import json
import logging
from datetime import datetime, timezone

from membrane.config import get_settings

LOGGER_NAME = "membrane"

_EXTRA_FIELDS = ("stage", "membrane", "shape", "strategy", "error_code")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


class _MembraneHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """Configure the membrane logger. Arguments default to Settings."""
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if isinstance(existing, _MembraneHandler):
            logger.removeHandler(existing)

    handler = _MembraneHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger
