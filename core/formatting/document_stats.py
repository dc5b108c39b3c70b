#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Statistics - Result metadata and input analysis.
"""

import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from config.constants import (
    LARGE_DOCUMENT_THRESHOLD,
    LARGE_TEXT_RECOMMENDATION,
    MANY_TABLES_RECOMMENDATION,
    WORDS_PER_MINUTE,
)

from .models import DocumentStructure


@dataclass(frozen=True)
class DocumentMetadata:
    """Counts attached to every FormattingResult."""
    word_count: int = 0
    character_count: int = 0
    header_count: int = 0
    code_block_count: int = 0
    table_count: int = 0
    estimated_reading_minutes: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class DocumentStats:
    """Statistics about a raw input document."""
    characters: int = 0
    words: int = 0
    paragraphs: int = 0
    lines: int = 0
    tables: int = 0
    headings: int = 0
    lists: int = 0
    estimated_read_minutes: int = 0
    is_large: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def count_words(text: str) -> int:
    return len(text.split())


def reading_minutes(words: int) -> int:
    """Whole minutes at the configured reading speed."""
    return math.ceil(words / WORDS_PER_MINUTE) if words else 0


def build_metadata(text: str, structure: DocumentStructure) -> DocumentMetadata:
    """
    Compute result metadata for formatted text.

    Args:
        text: Final formatted text
        structure: Job-wide structure (headers, code blocks, tables)
    """
    words = count_words(text)
    return DocumentMetadata(
        word_count=words,
        character_count=len(text),
        header_count=len(structure.headers),
        code_block_count=len(structure.code_blocks),
        table_count=len(structure.tables),
        estimated_reading_minutes=reading_minutes(words),
    )


def analyze_text_stats(text: str, large_threshold: int = LARGE_DOCUMENT_THRESHOLD) -> DocumentStats:
    """Quick shape statistics of an input, without structure analysis."""
    words = count_words(text)
    return DocumentStats(
        characters=len(text),
        words=words,
        paragraphs=len([p for p in re.split(r'\n\s*\n', text) if p.strip()]),
        lines=len(text.split('\n')) if text else 0,
        tables=len(re.findall(r'\|.*\|', text)),
        headings=len(re.findall(r'^#{1,6}\s', text, flags=re.MULTILINE)),
        lists=len(re.findall(r'^[ \t]*[-*+]\s', text, flags=re.MULTILINE)),
        estimated_read_minutes=reading_minutes(words),
        is_large=len(text) > large_threshold,
    )


def get_recommendations(stats: DocumentStats) -> List[str]:
    """Performance and formatting hints for an input."""
    recommendations = []
    if stats.characters > LARGE_TEXT_RECOMMENDATION:
        recommendations.append(
            "Very large document: consider splitting it into smaller documents "
            "or using paragraph-aware chunking"
        )
    if stats.is_large:
        recommendations.append("Large document: formatting will run in chunked mode")
    if stats.tables > MANY_TABLES_RECOMMENDATION:
        recommendations.append("Many table rows: table formatting may dominate processing time")
    if stats.characters and not stats.headings and stats.paragraphs > 1:
        recommendations.append("No Markdown headings found: heading detection relies on heuristics")
    return recommendations
