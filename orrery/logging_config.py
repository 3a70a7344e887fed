"""
Logging setup for the orrery package.

Library modules only call logging.getLogger(__name__). Handlers are
attached once, by whoever owns the process (the CLI), to the "orrery"
package logger. Output goes to stderr so CLI stdout stays parseable.
"""
import logging
import os
import sys
from typing import Optional

PACKAGE_LOGGER = "orrery"
LOG_LEVEL_ENV = "ORRERY_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def resolve_level(level: Optional[str | int] = None) -> int:
    """
    Turn a level name or number into a logging level.

    Falls back to $ORRERY_LOG_LEVEL, then WARNING.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, DEFAULT_LEVEL)
    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: Optional[str | int] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Point the package logger at stderr, and at ``log_file`` if given.

    Calling it again replaces the handlers from the previous call.

    Raises:
        ValueError: if ``level`` (or $ORRERY_LOG_LEVEL) names no known level
    """
    resolved = resolve_level(level)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolved)

    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    logger.addHandler(_handler(logging.StreamHandler(sys.stderr), resolved))
    if log_file:
        logger.addHandler(
            _handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), resolved)
        )

    logger.debug("Logging to stderr at %s", logging.getLevelName(resolved))
    return logger
