"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Send ``fournil`` logs to stderr at *level*.

    Only the package logger is configured, so embedding applications keep
    control of the root logger.
    """
    logger = logging.getLogger("fournil")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_fournil", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fournil = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
