"""
Unit Tests for settings and logging configuration
"""

import logging

from config.logging_config import ROOT_LOGGER_NAME, get_logger
from config.settings import Settings
from core.pipeline import FormatOptions


class TestSettings:

    def test_defaults_match_options(self):
        options = FormatOptions.from_settings(Settings())
        assert options == FormatOptions()

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("DOCFORMAT_CHUNK_SIZE", "2500")
        monkeypatch.setenv("DOCFORMAT_CHUNKING_STRATEGY", "paragraph")
        settings = Settings()
        assert settings.chunk_size == 2500
        assert FormatOptions.from_settings(settings).chunking_strategy == "paragraph"


class TestLogging:

    def test_module_loggers_share_root_handlers(self):
        logger = get_logger("core.pipeline.job")
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert logger.name == "formatter.core.pipeline.job"
        assert root.handlers
        assert not logger.handlers

    def test_root_logger(self):
        assert get_logger() is logging.getLogger(ROOT_LOGGER_NAME)
