"""Logging configuration for the ``openings`` logger namespace."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "openings"


def setup_logging(level: int = logging.WARNING, log_file: str | None = None) -> None:
    """Configure console and optional file logging for ``openings``.

    Console output goes to stderr so reports on stdout stay clean. The trace
    file, when given, always records DEBUG and above.

    Args:
        level: Console logging level (e.g. logging.DEBUG, logging.INFO).
        log_file: Optional path of a trace log file, overwritten per run.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file else level)

    # Avoid duplicate handlers when called more than once in a process
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S"
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
