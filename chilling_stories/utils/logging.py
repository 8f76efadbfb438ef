"""
Logging configuration

stderr sink plus an optional rotating file sink
"""

import sys
from typing import Optional
from loguru import logger

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[request_id]} | "
    "{name}:{function}:{line} | {message}"
)


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure loguru sinks

    Args:
        level: minimum log level
        log_file: optional path of a rotating log file
    """
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",  # rotate when the file reaches 10MB
            retention="7 days",
            compression="zip",
            format=LOG_FORMAT,
            level=level,
        )
