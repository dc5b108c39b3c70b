#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table of Contents Generator - TOC and section-reference appendix.

Provides:
- Linked Markdown TOC from detected headings
- Cross-reference appendix for top-level sections
- GitHub-style anchor slugs
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .models import HeaderCandidate
from .utils.constants import (
    APPENDIX_MAX_LEVEL,
    APPENDIX_TITLE,
    SECTION_SEPARATOR,
    TOC_INDENT,
    TOC_TITLE,
)
from .utils.heading_patterns import to_title_case


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class TocEntry:
    """Single entry in the Table of Contents."""
    level: int              # Heading level (1-6)
    title: str              # Heading text as rendered
    anchor: str             # URL-safe anchor for links

    def __repr__(self):
        indent = TOC_INDENT * (self.level - 1)
        return f"{indent}[L{self.level}] {self.title}"


def slugify(text: str) -> str:
    """
    Convert heading text to a URL-safe anchor.

    Lower-case, strip characters that are not word characters, spaces or
    hyphens, turn whitespace runs into single hyphens, trim hyphens.

    Example:
        "2.1 Getting Started!" -> "21-getting-started"
    """
    anchor = text.lower()
    anchor = re.sub(r'[^\w\s-]', '', anchor)
    anchor = re.sub(r'\s+', '-', anchor)
    anchor = re.sub(r'-+', '-', anchor)
    return anchor.strip('-')


class TocGenerator:
    """
    Builds the TOC block and the reference appendix for one job.

    Usage:
        generator = TocGenerator(title_case=True)
        toc = generator.build_toc(structure.headers)
        appendix = generator.build_appendix(structure.headers)
    """

    def __init__(self, title_case: bool = False, cross_reference: bool = True):
        """
        Args:
            title_case: Render titles the way headings were rewritten
            cross_reference: Appendix as link reference definitions
        """
        self.title_case = title_case
        self.cross_reference = cross_reference

    def collect_entries(
        self,
        headers: List[HeaderCandidate],
        max_level: Optional[int] = None,
    ) -> List[TocEntry]:
        """Turn headers into entries, optionally keeping only shallow levels."""
        entries = []
        for header in headers:
            if max_level is not None and header.level > max_level:
                continue
            title = self.display_title(header)
            entries.append(TocEntry(level=header.level, title=title, anchor=slugify(title)))
        return entries

    def display_title(self, header: HeaderCandidate) -> str:
        title = header.normalized_title
        return to_title_case(title) if self.title_case else title

    def build_toc(self, headers: List[HeaderCandidate]) -> str:
        """
        Markdown TOC block, or "" when there are no headers.

        Format:
            # Table of Contents

            - [Introduction](#introduction)
              - [Scope](#scope)

            ---
        """
        entries = self.collect_entries(headers)
        if not entries:
            return ""

        lines = [f"# {TOC_TITLE}", ""]
        for entry in entries:
            indent = TOC_INDENT * (entry.level - 1)
            lines.append(f"{indent}- [{entry.title}](#{entry.anchor})")
        lines.extend(["", SECTION_SEPARATOR])
        return '\n'.join(lines)

    def build_appendix(self, headers: List[HeaderCandidate]) -> str:
        """
        Reference appendix for level 1-2 headers, or "" when there are none.

        The block starts with its own separator so it can be appended
        directly to the document body.
        """
        entries = self.collect_entries(headers, max_level=APPENDIX_MAX_LEVEL)
        if not entries:
            return ""

        lines = [SECTION_SEPARATOR, "", f"## {APPENDIX_TITLE}", ""]
        for number, entry in enumerate(entries, 1):
            if self.cross_reference:
                lines.append(f'[{number}]: #{entry.anchor} "{entry.title}"')
            else:
                lines.append(f"{number}. [{entry.title}](#{entry.anchor})")
        return '\n'.join(lines)
