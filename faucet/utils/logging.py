"""
Logging setup.

Configures the loguru logger for scripts and services embedding the
chain clients.
"""

import sys

from loguru import logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    Configure logger with a stderr sink and optional file rotation.

    Args:
        level: Minimum level for all sinks
        log_file: Optional path of a rotating log file
    """
    logger.remove()
    logger.add(sys.stderr, level=level)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            encoding="utf-8",
        )
