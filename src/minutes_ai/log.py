"""Logging setup for minutes-ai.

Every record goes to stderr as ``timestamp | LEVEL | logger | message``.
The HTTP and Gemini SDK loggers log every request at INFO; they are held
at WARNING unless the application itself runs at DEBUG, so pipeline
stages stay readable.
"""

from __future__ import annotations

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Marks the handler installed here, so repeated setup reuses it and
# handlers added by pytest or embedding applications are left alone.
_HANDLER_ATTR = "_minutes_ai_log_handler"

_THIRD_PARTY_LOGGERS = ("httpx", "httpcore", "google_genai")


def _parse_level(level: str) -> int:
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level!r}")
    return numeric_level


def _own_handler(root: logging.Logger) -> logging.Handler:
    """Return the stderr handler installed by :func:`setup_logging`, creating it once."""
    for handler in root.handlers:
        if getattr(handler, _HANDLER_ATTR, False):
            return handler

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    setattr(handler, _HANDLER_ATTR, True)
    root.addHandler(handler)
    return handler


def setup_logging(level: str = "INFO") -> None:
    """Configure root and third-party loggers for the CLI.

    Safe to call repeatedly: the second call only changes levels.

    Args:
        level: A standard logging level name, case-insensitive.

    Raises:
        ValueError: If *level* is not a recognised logging level.
    """
    numeric_level = _parse_level(level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    _own_handler(root).setLevel(numeric_level)

    library_level = numeric_level if numeric_level <= logging.DEBUG else max(
        numeric_level, logging.WARNING
    )
    for name in _THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger called *name*, normally the caller's ``__name__``."""
    return logging.getLogger(name)
