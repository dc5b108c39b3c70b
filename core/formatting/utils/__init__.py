#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Formatting utilities - constants and patterns.
"""

from .constants import (
    TOC_TITLE,
    APPENDIX_TITLE,
    APPENDIX_MAX_LEVEL,
    QUOTES,
    MAX_BLANK_LINES,
)
from .heading_patterns import (
    HeadingRule,
    HeadingMatch,
    HEADING_RULES,
    best_heading_match,
    heuristic_level,
    to_title_case,
)
from .code_patterns import (
    LANGUAGE_SIGNATURES,
    detect_language,
    count_signature_hits,
    fenced_line_mask,
)
from .list_patterns import (
    is_bullet_item,
    is_numbered_item,
    is_list_item,
    normalize_marker,
)
from .table_patterns import (
    is_table_row,
    is_separator_row,
    split_cells,
    separator_row,
)
from .section_patterns import (
    SectionType,
    SECTION_PATTERNS,
)

__all__ = [
    "TOC_TITLE",
    "APPENDIX_TITLE",
    "APPENDIX_MAX_LEVEL",
    "QUOTES",
    "MAX_BLANK_LINES",
    "HeadingRule",
    "HeadingMatch",
    "HEADING_RULES",
    "best_heading_match",
    "heuristic_level",
    "to_title_case",
    "LANGUAGE_SIGNATURES",
    "detect_language",
    "count_signature_hits",
    "fenced_line_mask",
    "is_bullet_item",
    "is_numbered_item",
    "is_list_item",
    "normalize_marker",
    "is_table_row",
    "is_separator_row",
    "split_cells",
    "separator_row",
    "SectionType",
    "SECTION_PATTERNS",
]
