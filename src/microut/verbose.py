"""Logging configuration for debug output."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logger(
    debug_file: Optional[Path] = None, verbose: bool = False, logger_name: str = "microut"
) -> logging.Logger:
    """
    Configure and return the framework logger.

    Writes to debug_file when one is given. Optionally also writes to stderr
    if verbose=True; otherwise warnings fall through to logging's default
    handling.

    Args:
        debug_file: Optional path of a debug log file.
        verbose: If True, also log to stderr.
        logger_name: Name of the logger instance to configure.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(logger_name)

    # Drop handlers left over from a previous run
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.disabled = False
    logger.setLevel(logging.DEBUG if (verbose or debug_file) else logging.WARNING)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S"
    )

    if debug_file is not None:
        debug_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(debug_file, mode='a')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if verbose:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(logging.DEBUG)
        stderr_handler.setFormatter(formatter)
        logger.addHandler(stderr_handler)

    return logger
