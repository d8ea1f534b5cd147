"""Project logger."""

import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"

logger = logging.getLogger("radar")


def define_log_level(level: str | int = "INFO", name: str = "radar") -> logging.Logger:
    """Configure the project logger with a single stream handler.

    Args:
        level: Level name or number
        name: Logger name

    Returns:
        The configured logger
    """
    log = logging.getLogger(name)
    for handler in list(log.handlers):
        log.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    log.addHandler(handler)
    log.setLevel(level.upper() if isinstance(level, str) else level)
    log.propagate = False
    return log


if not logger.handlers:
    define_log_level()
