"""Diagnostic logging for the headerscope scanners, gate and API.

Command results (tables, `[info]`/`[fail]` gate lines, JSON) are printed to
stdout by the CLI. Everything emitted through these loggers is diagnostics
and goes to stderr, plus an optional log file.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

_LOGGER_NAME = "headerscope"
CONSOLE_FORMAT = "[headerscope] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger for one headerscope module, e.g. `get_logger("extractor")`."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """
    Attach stderr (and optionally file) handlers to the `headerscope` logger.

    Unreadable files are logged as warnings. Per-file extraction counts and
    test-scope tracing only appear with `verbose`. Calling this again
    replaces (and closes) the previous handlers.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
