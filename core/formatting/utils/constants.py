#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Formatting Constants - Markdown output conventions.
"""

# =============================================================================
# TOC / APPENDIX
# =============================================================================

TOC_TITLE = "Table of Contents"
APPENDIX_TITLE = "Appendix - Section References"
APPENDIX_MAX_LEVEL = 2            # Only H1/H2 are listed in the appendix
SECTION_SEPARATOR = "---"
TOC_INDENT = "  "                 # Per level below H1


# =============================================================================
# TYPOGRAPHY
# =============================================================================

QUOTES = {
    "double_open": "“",
    "double_close": "”",
    "single_open": "‘",
    "single_close": "’",
}

MAX_BLANK_LINES = 2
