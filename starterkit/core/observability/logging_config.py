"""
Logging configuration — one call at startup, shared by CLI and server.

Every module logs through ``logging.getLogger(__name__)``; only this
module touches handlers. The console handler is bound to stderr because
``starterkit serve`` owns stdout for JSON-RPC frames.

Console level, highest precedence first:
    -q / -v / --debug  >  STARTERKIT_LOG_LEVEL  >  WARNING

A second, independent sink can be switched on with STARTERKIT_LOG_FILE
(level from STARTERKIT_LOG_FILE_LEVEL, else the console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "STARTERKIT_LOG_LEVEL"
ENV_FILE = "STARTERKIT_LOG_FILE"
ENV_FILE_LEVEL = "STARTERKIT_LOG_FILE_LEVEL"

# (max level, format, datefmt); first row whose level is >= the console level wins
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(message)s", None),
)
_FILE_FORMAT = logging.Formatter(
    "%(asctime)s %(levelname)-5s %(process)d %(name)s:%(lineno)d %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LEVEL, "WARNING")


def level_number(name: str | None) -> int:
    """``"info"`` → ``logging.INFO``; unknown or empty names mean WARNING."""
    value = getattr(logging, (name or "").upper(), None)
    return value if isinstance(value, int) else logging.WARNING


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for limit, f, d in _CONSOLE_FORMATS if level <= limit)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def setup_logging(level: str = "WARNING", log_file: str | None = None, log_file_level: str | None = None) -> None:
    """Replace the root logger's handlers with a stderr console and an optional file.

    Explicit ``log_file`` / ``log_file_level`` arguments take precedence
    over the STARTERKIT_LOG_FILE* environment variables.
    """
    console_level = level_number(level)
    handlers = [_console_handler(console_level)]

    log_file = log_file or os.environ.get(ENV_FILE)
    if log_file:
        file_level = level_number(log_file_level or os.environ.get(ENV_FILE_LEVEL) or level)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(_FILE_FORMAT)
        handlers.append(file_handler)

    root = logging.getLogger()
    root.handlers[:] = handlers
    # Root must pass records down to the most verbose sink
    root.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False
