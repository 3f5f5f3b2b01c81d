"""Application-wide logging helpers.

``get_logger`` hands out module loggers and makes sure the root logger is
configured exactly once, so reloading modules in an editor session does not
stack duplicate handlers.
"""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_LOGGER_INITIALISED = False


def configure_root_logger(level: int = logging.INFO) -> None:
    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger, configuring the root logger on first use."""
    configure_root_logger()
    return logging.getLogger(name)
