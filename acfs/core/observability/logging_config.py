"""
Logging configuration — one-time setup for the ``acfs`` CLI.

Every module logs through ``logging.getLogger(__name__)``; this module
only decides where records go and how they look.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  ACFS_LOG_LEVEL  >  WARNING

A second, always-detailed stream can be written to ACFS_LOG_FILE
(level from ACFS_LOG_FILE_LEVEL, defaulting to the console level).
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "ACFS_LOG_LEVEL"
LOG_FILE_ENV = "ACFS_LOG_FILE"
LOG_FILE_LEVEL_ENV = "ACFS_LOG_FILE_LEVEL"

# ── Console formats, by the most verbose level they apply to ────

_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers kept at WARNING unless debugging
_NOISY_LOGGERS = ("urllib3", "charset_normalizer", "asyncio")


def level_from_flags(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LOG_LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path for a detailed log file.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold noisy third-party loggers at WARNING
            unless the console is at DEBUG.
    """
    console_level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_console_handler(console_level))

    root_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)

    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def setup_from_environment(level: str) -> None:
    """``setup_logging`` with the file settings taken from the environment."""
    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
        quiet_third_party=_parse_level(level) > logging.DEBUG,
    )


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_DEFAULT
    for threshold, candidate_fmt, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate_fmt, candidate_datefmt
            break

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
