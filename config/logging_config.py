"""
Centralized logging configuration.

Every module logger is a child of the 'formatter' logger, which owns the
handlers: console output and a size-rotated log file. Level and file come
from settings (DOCFORMAT_LOG_LEVEL, DOCFORMAT_LOG_FILE; an empty file name
disables file logging).
"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from .constants import LOG_FORMAT, LOG_MAX_SIZE_MB, LOG_BACKUP_COUNT
from .settings import settings

ROOT_LOGGER_NAME = 'formatter'


def setup_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger below the configured 'formatter' logger.

    Usage:
        from config.logging_config import setup_logger
        logger = setup_logger(__name__)
        logger.info("Message here")

    Args:
        name: Dotted module name. If None, returns the 'formatter' logger.

    Returns:
        Configured logging.Logger instance.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        _configure(root)

    if not name or name == ROOT_LOGGER_NAME:
        return root
    return root.getChild(name)


def _configure(root: logging.Logger):
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    # Console handler - INFO level
    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(formatter)
    root.addHandler(console)

    if not settings.log_file:
        return

    # File handler with rotation - DEBUG level
    log_path = Path(settings.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=LOG_MAX_SIZE_MB * 1024 * 1024,
        backupCount=LOG_BACKUP_COUNT,
        encoding='utf-8',
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Alias for setup_logger."""
    return setup_logger(name)


logger = setup_logger()
