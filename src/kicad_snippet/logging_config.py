"""Logging setup for the snippet server and the ``--validate`` CLI.

All output goes to stderr and an optional log file. Stdout is left alone:
the MCP stdio transport and the ``--validate`` JSON report both write there.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER = "kicad_snippet"
LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers that flood stderr at INFO with per-request transport chatter
NOISY_LOGGERS = ("mcp", "fastmcp", "uvicorn", "sse_starlette", "httpx")


def _parse_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    # getLevelName returns "Level X" for unknown names
    return value if isinstance(value, int) else logging.INFO


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    level: str | int = "INFO",
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``kicad_snippet`` logger.

    Safe to call more than once: handlers from an earlier call are closed
    and replaced, so the log file is never opened twice.

    Args:
        level: Level name or number. Unknown names fall back to INFO.
        log_file: File to append to as well as the stream. Parent
            directories are created.
        stream: Console stream. Defaults to stderr.

    Returns:
        The configured package logger.
    """
    numeric_level = _parse_level(level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric_level)
    _reset_handlers(logger)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(stream or sys.stderr)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Library chatter only shows up when debugging
    library_level = logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logger.debug(
        "Logging configured at %s%s",
        logging.getLevelName(numeric_level),
        f" (file: {log_file})" if log_file else "",
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the kicad_snippet namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
