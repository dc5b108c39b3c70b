#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Settings - Centralized configuration management

Values come from defaults in constants.py, overridden by DOCFORMAT_*
environment variables or a .env file at the project root.
"""

from pathlib import Path
from pydantic_settings import BaseSettings

from .constants import (
    LARGE_DOCUMENT_THRESHOLD, HUGE_DOCUMENT_THRESHOLD, CHUNK_SIZE,
    PREVIEW_SOFT_CAP, PREVIEW_HARD_CAP, PREVIEW_DISABLE_THRESHOLD,
    FULL_NORMALIZE_MAX_CHARS, HEADING_ACCEPTANCE_THRESHOLD,
    STAGE_WARN_SECONDS, SECTION_CONFIDENCE_THRESHOLD, MAX_MERGE_CHARS,
    LOG_LEVEL, LOG_FILE,
)


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Application settings"""

    # ========== Pipeline ==========
    large_document_threshold: int = LARGE_DOCUMENT_THRESHOLD
    huge_document_threshold: int = HUGE_DOCUMENT_THRESHOLD
    chunk_size: int = CHUNK_SIZE
    chunking_strategy: str = "fixed"  # fixed | paragraph
    scheduler_delay: float = 0.0  # seconds slept at each chunk yield

    # ========== Rules ==========
    rule_preset: str = "default"  # default | minimal | academic

    # ========== Analysis ==========
    heading_threshold: float = HEADING_ACCEPTANCE_THRESHOLD
    section_threshold: float = SECTION_CONFIDENCE_THRESHOLD

    # ========== Merging ==========
    merge_strategy: str = "combine"  # combine | separate | priority | dedupe
    max_merge_chars: int = MAX_MERGE_CHARS

    # ========== Sanitizer ==========
    full_normalize_max_chars: int = FULL_NORMALIZE_MAX_CHARS

    # ========== Preview (presentation collaborator) ==========
    preview_soft_cap: int = PREVIEW_SOFT_CAP
    preview_hard_cap: int = PREVIEW_HARD_CAP
    preview_disable_threshold: int = PREVIEW_DISABLE_THRESHOLD

    # ========== Performance ==========
    stage_warn_seconds: float = STAGE_WARN_SECONDS

    # ========== Logging ==========
    log_level: str = LOG_LEVEL
    log_file: str = LOG_FILE  # empty disables the file handler

    class Config:
        env_prefix = "DOCFORMAT_"
        env_file = str(BASE_DIR / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Allow extra fields from .env that aren't defined in model


# Global settings instance
settings = Settings()
