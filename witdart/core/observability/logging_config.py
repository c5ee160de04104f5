"""
Logging configuration — one setup call per process.

The CLI group in main.py calls ``setup_logging`` before any command
runs; modules only ever do ``logger = logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  WITDART_LOG_LEVEL  >  WARNING

WITDART_LOG_FILE adds a file handler, WITDART_LOG_FILE_LEVEL sets its
level independently of the console.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

LOG_LEVEL_ENV = "WITDART_LOG_LEVEL"
LOG_FILE_ENV = "WITDART_LOG_FILE"
LOG_FILE_LEVEL_ENV = "WITDART_LOG_FILE_LEVEL"

# (highest level the format applies to, format, datefmt), checked in order
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_PLAIN = "%(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# lark logs grammar construction details at DEBUG
_NOISY_LOGGERS = ("lark",)


def parse_level(level: str | None) -> int:
    """Level name → numeric constant; unknown or empty names mean WARNING."""
    if not level:
        return logging.WARNING
    return logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)


def level_from_flags(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Console level name for the global CLI flags, falling back to the env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LOG_LEVEL_ENV, "WARNING")


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = _CONSOLE_PLAIN, None
    for threshold, candidate, candidate_datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            fmt, datefmt = candidate, candidate_datefmt
            break
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install the console (and optional file) handler on the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path of a log file.
        log_file_level: Level of the log file; defaults to ``level``.
        quiet_third_party: Keep ``lark`` at WARNING unless at DEBUG.
    """
    console_level = parse_level(level)
    handlers = [_console_handler(console_level)]

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # The root must let through whatever the most verbose handler wants
    root.setLevel(min(h.level for h in handlers))

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False
