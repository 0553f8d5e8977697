"""Logging setup for websearch"""

import logging
from typing import Optional

from rich.logging import RichHandler

from .output import err_console

LOG_FORMAT = "%(name)s: %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the package logger (creates the handler only once)."""
    logger = logging.getLogger("websearch")

    effective_level = getattr(logging, (level or "WARNING").upper(), logging.WARNING)
    logger.setLevel(effective_level)

    if not logger.handlers:
        handler = RichHandler(console=err_console, show_time=False, show_path=False)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
