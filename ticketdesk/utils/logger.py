"""
Logging configuration
"""
import logging
import sys
from typing import Optional, TextIO

from ticketdesk.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER = "ticketdesk"


def setup_logger(name: str) -> logging.Logger:
    """
    Setup logger with standard format

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    settings = get_settings()
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    # Console handler, attached once
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the configured logger for a module"""
    return setup_logger(name)


def redirect_logs(stream: TextIO, level: Optional[str] = None) -> None:
    """
    Point every package logger's console handler at another stream

    Used by the terminal front-end so log lines never mix with command output.

    Args:
        stream: Target stream (usually sys.stderr)
        level: Optional level name overriding LOG_LEVEL
    """
    for name, logger in list(logging.Logger.manager.loggerDict.items()):
        if not name.startswith(ROOT_LOGGER) or not isinstance(logger, logging.Logger):
            continue
        for handler in logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setStream(stream)
        if level:
            logger.setLevel(getattr(logging, level.upper(), logging.INFO))
