# libs/relay_shared/logging.py
"""
Standardized logging configuration for all services.
"""

import logging
import sys
from typing import Optional, TextIO

# One handler shared by every logger so the output stream can be switched
# after modules have been imported (stdout is reserved while MCP runs on stdio).
_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(
    logging.Formatter(
        '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
        '"logger": "%(name)s", "message": "%(message)s"}'
    )
)

_level = logging.INFO


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if not already configured
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
        logger.setLevel(_level)
        logger.propagate = False

    return logger


def configure_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """
    Apply the service log level and, optionally, redirect log output.

    Args:
        level: Level name such as "DEBUG" or "INFO"
        stream: Stream to write to instead of stdout
    """
    global _level
    _level = logging.getLevelName(level.upper())
    if not isinstance(_level, int):
        _level = logging.INFO

    if stream is not None:
        _handler.setStream(stream)

    for logger in logging.Logger.manager.loggerDict.values():
        if isinstance(logger, logging.Logger) and _handler in logger.handlers:
            logger.setLevel(_level)
