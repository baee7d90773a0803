"""Logging setup."""

import sys
from typing import Optional

from loguru import logger

from s3checker.core.config import settings

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level for the stderr sink (defaults to settings.LOG_LEVEL)
        log_file: Optional path of a rotating log file (defaults to settings.LOG_FILE)
    """
    level = (level or settings.LOG_LEVEL).upper()
    log_file = log_file if log_file is not None else settings.LOG_FILE

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)

    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            rotation="10 MB",
            retention=3,
            enqueue=True,
        )

    logger.debug(f"Logging configured at {level}")
