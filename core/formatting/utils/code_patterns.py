#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Code Detection Patterns - Fences, indented blocks, inline spans and
language signatures.

Language classification is a vote: each family owns a handful of
independent regex signatures and needs at least two hits. Families are
checked in a fixed priority order and the first one with enough hits wins.
"""

import re
from typing import Dict, List, Pattern

from config.constants import LANGUAGE_MIN_SIGNATURE_HITS


# =============================================================================
# BLOCK PATTERNS
# =============================================================================

# ```python  /  ```
FENCE_LINE = re.compile(r'^\s*```\s*([\w+#.-]*)\s*$')

# Tab or four spaces followed by content
INDENTED_CODE_LINE = re.compile(r'^(?:\t| {4})(?=\S)')

# `code` on a single line
INLINE_CODE = re.compile(r'`([^`\n]+)`')


# =============================================================================
# LANGUAGE SIGNATURES (priority order)
# =============================================================================

LANGUAGE_SIGNATURES: Dict[str, List[Pattern]] = {
    'javascript': [
        re.compile(r'\b(function|const|let|var|=>|async|await)\b'),
        re.compile(r'\.(map|filter|reduce|forEach)\('),
        re.compile(r'require\([\'"][^\'"]+[\'"]\)'),
        re.compile(r'import.*from\s+[\'"].+[\'"]'),
    ],
    'python': [
        re.compile(r'\b(def|class|import|from|if __name__|print)\b'),
        re.compile(r'\.(append|extend|split|join)\('),
        re.compile(r'#.*$', re.MULTILINE),
        re.compile(r'\bself\b'),
    ],
    'java': [
        re.compile(r'\b(public|private|protected|class|interface)\b'),
        re.compile(r'System\.out\.println'),
        re.compile(r'\bstatic\s+void\s+main\b'),
        re.compile(r'@Override'),
    ],
    'csharp': [
        re.compile(r'\b(using|namespace|class|public|private)\b'),
        re.compile(r'Console\.WriteLine'),
        re.compile(r'\bstring\b'),
        re.compile(r'\[.*\]'),
    ],
    'sql': [
        re.compile(r'\b(SELECT|FROM|WHERE|INSERT|UPDATE|DELETE|CREATE|TABLE)\b', re.IGNORECASE),
        re.compile(r'\bJOIN\b', re.IGNORECASE),
        re.compile(r'\bGROUP BY\b', re.IGNORECASE),
        re.compile(r'\bORDER BY\b', re.IGNORECASE),
    ],
    'html': [
        re.compile(r'</?[a-z][\s\S]*>', re.IGNORECASE),
        re.compile(r'<!DOCTYPE', re.IGNORECASE),
        re.compile(r'<html>', re.IGNORECASE),
        re.compile(r'<head>', re.IGNORECASE),
    ],
    'css': [
        re.compile(r'\{[^}]*\}'),
        re.compile(r'\.[a-zA-Z-]+\s*\{'),
        re.compile(r'#[a-zA-Z-]+\s*\{'),
        re.compile(r'@media'),
    ],
    'json': [
        re.compile(r'^\s*\{[\s\S]*\}\s*$'),
        re.compile(r'^\s*\[[\s\S]*\]\s*$'),
        re.compile(r'"[^"]*"\s*:'),
        re.compile(r'\{[\s\S]*"[^"]*"[\s\S]*\}'),
    ],
}

DEFAULT_LANGUAGE = 'text'


def count_signature_hits(code: str, language: str) -> int:
    """Number of signatures of one family that match the code."""
    return sum(1 for pattern in LANGUAGE_SIGNATURES[language] if pattern.search(code))


def detect_language(code: str) -> str:
    """
    Classify a code sample by signature vote.

    Args:
        code: Source text of the block

    Returns:
        Language name, or 'text' when no family reaches the threshold
    """
    for language in LANGUAGE_SIGNATURES:
        if count_signature_hits(code, language) >= LANGUAGE_MIN_SIGNATURE_HITS:
            return language
    return DEFAULT_LANGUAGE


def trim_blank_edges(lines: List[str]) -> List[str]:
    """Drop leading and trailing blank lines, keep everything in between."""
    start, end = 0, len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def is_fence(line: str) -> bool:
    return bool(FENCE_LINE.match(line))


def fenced_line_mask(lines: List[str]) -> List[bool]:
    """
    Mark which lines belong to fenced code, fences included.

    An unterminated fence runs to the end of the text.
    """
    mask = []
    inside = False
    for line in lines:
        if is_fence(line):
            mask.append(True)
            inside = not inside
        else:
            mask.append(inside)
    return mask
