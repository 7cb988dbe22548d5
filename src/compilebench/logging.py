"""Logging setup for compilebench.

Build tools write straight to the terminal while they run, so compilebench's
own progress lines (cloning, warming up, per-round compile times) carry a
``compilebench>>>`` marker that makes them easy to pick out of, or ``grep``
from, pages of sbt output.  Warnings and errors also show their level.

An optional log file receives everything at DEBUG with timestamps, without
the build output.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "compilebench"
PROGRESS_MARKER = "compilebench>>>"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class ProgressFormatter(logging.Formatter):
    """Console formatter: marker, then the level for warnings and above."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.WARNING:
            return f"{PROGRESS_MARKER} {record.levelname}: {message}"
        return f"{PROGRESS_MARKER} {message}"


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the root compilebench logger.

    Args:
        verbose: Show DEBUG messages (e.g. every command line) on the console.
        quiet: Only show warnings and errors. Ignored if *verbose* is True.
        log_file: Also log everything at DEBUG to this file.

    Returns:
        The configured root logger for compilebench.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # stderr: the report summary and build tools own stdout.
    console = logging.StreamHandler()
    if verbose:
        console.setLevel(logging.DEBUG)
    elif quiet:
        console.setLevel(logging.WARNING)
    else:
        console.setLevel(logging.INFO)
    console.setFormatter(ProgressFormatter("%(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a ``compilebench.<name>`` child logger."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")
