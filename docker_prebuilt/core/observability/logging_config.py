"""
Logging configuration — set up once by the CLI before the pipeline runs.

Every module logs through ``logging.getLogger(__name__)`` and inherits
this config. Install progress is INFO, per-step detail is DEBUG, and
advisory problems (a missing optional tool, an unreadable uname) are
WARNING, so a default run shows only those plus the final message.

Level precedence:
    --debug / --verbose / --quiet  >  DOCKER_PREBUILT_LOG_LEVEL  >  WARNING

A log file receives full detail when DOCKER_PREBUILT_LOG_FILE is set
(its level comes from DOCKER_PREBUILT_LOG_FILE_LEVEL, default DEBUG).
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV = "DOCKER_PREBUILT_LOG_LEVEL"
FILE_ENV = "DOCKER_PREBUILT_LOG_FILE"
FILE_LEVEL_ENV = "DOCKER_PREBUILT_LOG_FILE_LEVEL"

# Console: bare messages unless we are looking at steps
_FMT_CONSOLE = "%(message)s"
_FMT_STEPS = "%(asctime)s [%(name)s] %(message)s"
_FMT_DETAIL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_SHORT = "%H:%M:%S"
_DATEFMT_FULL = "%Y-%m-%d %H:%M:%S"


def resolve_level(*, debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV, "WARNING")


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path; defaults to DOCKER_PREBUILT_LOG_FILE.
    """
    console_level = _parse_level(level)

    if console_level <= logging.DEBUG:
        console_fmt = logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_SHORT)
    elif console_level <= logging.INFO:
        console_fmt = logging.Formatter(_FMT_STEPS, datefmt=_DATEFMT_SHORT)
    else:
        console_fmt = logging.Formatter(_FMT_CONSOLE)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(console_fmt)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = log_file or os.environ.get(FILE_ENV)
    if log_file:
        file_level = _parse_level(os.environ.get(FILE_LEVEL_ENV), default=logging.DEBUG)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_DETAIL, datefmt=_DATEFMT_FULL))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)


def _parse_level(level: str | None, default: int = logging.WARNING) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
