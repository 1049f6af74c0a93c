"""Logging setup for the declguard package logger.

Only the ``declguard`` logger is configured; a host embedding the engine
keeps control of the root logger. Call sites attach context through
``extra=`` using the keys in :data:`CONTEXT_FIELDS`, and both formats
render whichever of them a record carries.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone

PACKAGE_LOGGER = "declguard"

CONTEXT_FIELDS: tuple[str, ...] = ("file_path", "files", "violations", "patterns")

LOG_FORMATS = ("text", "json")

_VERBOSITY_LEVELS = {1: logging.INFO, 2: logging.DEBUG}


def _context(record: logging.LogRecord) -> dict[str, object]:
    return {key: getattr(record, key) for key in CONTEXT_FIELDS if hasattr(record, key)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with the record's context fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(_context(record))
        if record.exc_info and record.exc_info[0]:
            entry["error"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``level logger: message key=value ...`` for terminals."""

    def __init__(self) -> None:
        super().__init__("%(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record)
        if context:
            line += " " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


def resolve_level(verbosity: int = 0) -> int:
    """Map a ``-v`` count to a level; with no flag, DECLGUARD_LOG_LEVEL or WARNING."""
    if verbosity > 0:
        return _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)
    name = os.environ.get("DECLGUARD_LOG_LEVEL", "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(verbosity: int = 0, log_format: str | None = None) -> logging.Logger:
    """Attach a single stderr handler to the ``declguard`` logger.

    Args:
        verbosity: Number of ``-v`` flags given on the command line.
        log_format: ``text`` or ``json``; falls back to DECLGUARD_LOG_FORMAT.

    Returns:
        The configured package logger.
    """
    log_format = (log_format or os.environ.get("DECLGUARD_LOG_FORMAT", "text")).lower()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolve_level(verbosity))
    package_logger.handlers = [handler]
    package_logger.propagate = False
    return package_logger
