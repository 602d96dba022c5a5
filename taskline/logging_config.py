"""Logging setup for the TaskLine API.

Logs go to stderr with a timestamped format; the level comes from the
``LOG_LEVEL`` setting unless overridden.
"""

import logging
from typing import Optional

from taskline import config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Falls back to
            ``config.LOG_LEVEL`` when None and to INFO when unrecognised.
    """
    if log_level is None:
        log_level = config.LOG_LEVEL
    log_level = log_level.upper()

    numeric_level = getattr(logging, log_level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
        log_level = "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(f"Logging initialized: level={log_level}")


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)
