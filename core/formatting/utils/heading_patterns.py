#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Heading Detection Patterns - Weighted rules for heading candidates.

Every rule is evaluated against every candidate line; the caller keeps
the highest-scoring match. Families:
- Markdown markers (# Title)
- ALL CAPS lines
- Dotted numbering (1.1 Title, 2.3.1 Title)
- Colon-terminated short titles
- Bold-wrapped lines (**Title**)
- Setext underlines (Title / =====)
- Canonical section keywords (Introduction, Conclusion, ...)
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern, Tuple

from config.constants import MAX_HEADING_LEVEL


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class HeadingMatch:
    """Result of one rule matching one line."""
    title: str
    level: int
    confidence: float
    source_pattern: str
    consumes_next_line: bool = False


# Extractor receives the regex match, the stripped line and the stripped
# next line (or None) and returns (title, level), or None to reject.
Extractor = Callable[[re.Match, str, Optional[str]], Optional[Tuple[str, int]]]


@dataclass(frozen=True)
class HeadingRule:
    """
    A single heading pattern family.

    Attributes:
        name: Family name, recorded as HeaderCandidate.source_pattern
        pattern: Compiled regex tested against the stripped line
        weight: Base confidence of the family
        extractor: Builds (title, level) from the match
        flag: Name of the headers rule flag gating this family, if any
        on_next_line: Pattern is tested against the following line
    """
    name: str
    pattern: Pattern
    weight: float
    extractor: Extractor
    flag: Optional[str] = None
    on_next_line: bool = False

    def match(self, line: str, next_line: Optional[str]) -> Optional[HeadingMatch]:
        target = next_line if self.on_next_line else line
        if target is None:
            return None
        m = self.pattern.match(target)
        if not m:
            return None
        extracted = self.extractor(m, line, next_line)
        if extracted is None:
            return None
        title, level = extracted
        return HeadingMatch(
            title=title,
            level=max(1, min(MAX_HEADING_LEVEL, level)),
            confidence=self.weight,
            source_pattern=self.name,
            consumes_next_line=self.on_next_line,
        )


# =============================================================================
# PATTERNS
# =============================================================================

MARKDOWN_HEADING = re.compile(r'^(#{1,6})\s+(.+?)(?:\s+#+)?\s*$')

ALL_CAPS_HEADING = re.compile(r'^[A-Z][A-Z\s]{7,}[A-Z]$')

# 1.1 Title / 2.3.1) Title - at least two numeric components
NUMBERED_HEADING = re.compile(r'^(\d+(?:\.\d+)+)[.)]?\s+([A-Z].*)$')

COLON_HEADING = re.compile(r'^[A-Z][a-zA-Z\s]{5,50}:$')

BOLD_HEADING = re.compile(r'^\*\*([^*]+)\*\*$')

UNDERLINE = re.compile(r'^(=+|-+)$')

KEYWORD_PATTERNS = [
    r'abstract|introduction|methodology|results|conclusion|references|appendix|summary|overview',
    r'background|literature review|discussion|limitations|future work',
    r'executive summary|table of contents|acknowledgments',
]

KEYWORD_HEADING = re.compile(
    r'^(' + '|'.join(KEYWORD_PATTERNS) + r')\s*:?$',
    re.IGNORECASE,
)

_LEADING_NUMBER = re.compile(r'^\d+\.\s')
_LEADING_DOTTED_NUMBER = re.compile(r'^\d+\.\d+\s')


# =============================================================================
# HELPERS
# =============================================================================

def heuristic_level(text: str) -> int:
    """
    Guess a heading level from the shape of the text.

    Short upper-case lines are top level, numbered prefixes step down,
    colon titles sit deepest.
    """
    if len(text) < 20 and text == text.upper() and any(c.isalpha() for c in text):
        return 1
    if _LEADING_NUMBER.match(text):
        return 2
    if _LEADING_DOTTED_NUMBER.match(text):
        return 3
    if ':' in text:
        return 4
    return 2


def _markdown(m, line, next_line):
    return m.group(2).strip(), len(m.group(1))


def _all_caps(m, line, next_line):
    if len(line) >= 100:
        return None
    return line, heuristic_level(line)


def _numbered(m, line, next_line):
    if len(line) >= 100 or line.endswith('.'):
        return None
    return line, m.group(1).count('.') + 1


def _colon(m, line, next_line):
    if '.' in line:
        return None
    return line[:-1].strip(), heuristic_level(line)


def _bold(m, line, next_line):
    if len(line) >= 80:
        return None
    title = m.group(1).strip()
    return title, heuristic_level(title)


def _underline(m, line, next_line):
    # Title line must carry words and the rule must span 80% of it
    if not re.search(r'\w', line) or line.startswith(('|', '#', '-', '*', '+', '>')):
        return None
    marker = m.group(1)
    if len(marker) < 3 or len(marker) < 0.8 * len(line):
        return None
    return line, 1 if marker[0] == '=' else 2


def _keyword(m, line, next_line):
    title = line.rstrip(':').strip()
    return title, heuristic_level(title)


HEADING_RULES: List[HeadingRule] = [
    HeadingRule("markdown", MARKDOWN_HEADING, 0.95, _markdown),
    HeadingRule("all_caps", ALL_CAPS_HEADING, 0.85, _all_caps, flag="detect_all_caps"),
    HeadingRule("numbered", NUMBERED_HEADING, 0.90, _numbered, flag="detect_numbers"),
    HeadingRule("colon", COLON_HEADING, 0.75, _colon, flag="detect_colons"),
    HeadingRule("bold", BOLD_HEADING, 0.80, _bold),
    HeadingRule("underline", UNDERLINE, 0.90, _underline, on_next_line=True),
    HeadingRule("keyword", KEYWORD_HEADING, 0.88, _keyword),
]


def best_heading_match(
    line: str,
    next_line: Optional[str] = None,
    rules: Optional[List[HeadingRule]] = None,
) -> Optional[HeadingMatch]:
    """
    Evaluate all rules on one line and return the highest-scoring match.

    Args:
        line: Stripped candidate line
        next_line: Stripped following line, used by underline rules
        rules: Rules to evaluate (default: HEADING_RULES)

    Returns:
        Best HeadingMatch, or None when no rule matched
    """
    best = None
    for rule in rules if rules is not None else HEADING_RULES:
        found = rule.match(line, next_line)
        if found and (best is None or found.confidence > best.confidence):
            best = found
    return best


def to_title_case(text: str) -> str:
    """Capitalize the first letter of every word."""
    return re.sub(r"(?<![\w'’])\w", lambda m: m.group(0).upper(), text.lower())
