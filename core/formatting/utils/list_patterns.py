#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
List Detection Patterns - Regex patterns for bullet and numbered lists.

Supports:
- Bullet markers (-, *, +, •)
- Numbered markers (1. and 1))
- Nested items via leading indentation
"""

import re
from typing import Optional


# =============================================================================
# LIST PATTERNS
# =============================================================================

BULLET_ITEM = re.compile(r'^(\s*)[-*+•]\s+(.*)$')

NUMBERED_ITEM = re.compile(r'^(\s*)(\d+)[.)]\s+(.*)$')

CANONICAL_BULLET = '-'

# Spaces per tab when expanding list indentation
TAB_WIDTH = 4


def is_bullet_item(line: str) -> bool:
    """Check if line is a bullet list item."""
    return bool(BULLET_ITEM.match(line))


def is_numbered_item(line: str) -> bool:
    """Check if line is a numbered list item."""
    return bool(NUMBERED_ITEM.match(line))


def is_list_item(line: str) -> bool:
    """Check if line is any kind of list item."""
    return is_bullet_item(line) or is_numbered_item(line)


def normalize_marker(line: str) -> Optional[str]:
    """
    Rewrite a list item with the canonical marker.

    Indentation is kept as-is; each nesting level is normalized on its own.

    Returns:
        Normalized line, or None if the line is not a list item
    """
    # Horizontal rules (---, * * *) look like bullets but are not
    if re.match(r'^\s*([-*_])(\s*\1){2,}\s*$', line):
        return None
    m = BULLET_ITEM.match(line)
    if m:
        return f"{m.group(1)}{CANONICAL_BULLET} {m.group(2)}"
    m = NUMBERED_ITEM.match(line)
    if m:
        return f"{m.group(1)}{m.group(2)}. {m.group(3)}"
    return None


def expand_indent(line: str) -> str:
    """Replace tabs in the leading indentation with spaces."""
    stripped = line.lstrip(' \t')
    indent = line[:len(line) - len(stripped)]
    return indent.expandtabs(TAB_WIDTH) + stripped
