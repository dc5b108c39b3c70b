"""
Configuration for Document Formatter: constants, settings and logging.
"""
from .constants import *
from .settings import BASE_DIR, Settings, settings
from .logging_config import ROOT_LOGGER_NAME, setup_logger, get_logger, logger

__all__ = [
    'BASE_DIR',
    'Settings',
    'settings',
    'ROOT_LOGGER_NAME',
    'setup_logger',
    'get_logger',
    'logger',
]
