"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by ``kuduscript.main``.  Handlers are attached to
the ``kuduscript`` package logger only, so every module logger
(``logging.getLogger(__name__)``) inherits them while the root logger
and any host application's handlers are left alone.

Levels are resolved in precedence order:
    CLI flag  >  KUDUSCRIPT_LOG_LEVEL env var  >  WARNING (default)

Optional file output via KUDUSCRIPT_LOG_FILE / KUDUSCRIPT_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

PACKAGE_LOGGER = "kuduscript"

# Plain messages when quiet; the CLI prints its own summary
_FMT_MINIMAL = "%(message)s"

# Locator / writer tracing with source position
_FMT_TRACE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_TRACE = "%H:%M:%S"

_FMT_FILE = _FMT_TRACE
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def _console_formatter(level: int) -> logging.Formatter:
    if level <= logging.INFO:
        return logging.Formatter(_FMT_TRACE, datefmt=_DATEFMT_TRACE)
    return logging.Formatter(_FMT_MINIMAL)


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> logging.Logger:
    """Configure the ``kuduscript`` logger for this process.

    Calling it again replaces the handlers from the previous call.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.

    Returns:
        The configured package logger.
    """
    console_level = _parse_level(level)

    package = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package.handlers):
        package.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    package.addHandler(console)

    effective_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        package.addHandler(fh)

    package.setLevel(effective_level)
    package.propagate = False
    return package


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
