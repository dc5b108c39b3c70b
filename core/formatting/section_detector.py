#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Section Detector - Typed sections of project documents.

Complements the StructureAnalyzer: instead of generic heading levels it
recognizes what a section IS (executive summary, scope, risks, ...) so
sections of several documents can be matched and merged.

- detect_sections(): split text at typed section titles
- number_sections(): "N.0" numbering plus "N.M" subsections
- extract_tables(): pipe-delimited rows inside section content
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.constants import SECTION_CONFIDENCE_THRESHOLD, SECTION_MAX_LINE_LENGTH
from config.logging_config import get_logger

from core.errors import InputError

from .utils.section_patterns import (
    FIRST_LINE_BOOST,
    HEADING_BOOST,
    HEADING_FORMATTED,
    SECTION_PATTERNS,
    SUBSECTION_LINE,
    SectionType,
)
from .utils.table_patterns import is_separator_row

logger = get_logger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class SectionMatch:
    """Best section type for one line."""
    type: SectionType
    pattern: str
    confidence: float


@dataclass
class Subsection:
    title: str
    start_line: int                 # relative to the parent's content
    content: List[str] = field(default_factory=list)
    numbering: Optional[str] = None
    level: int = 2


@dataclass
class TypedSection:
    """
    A typed section of one document.

    Attributes:
        type: Detected section type
        title: Title line as written (stripped)
        start_line: Zero-based line of the title
        end_line: Last line of the section
        confidence: Score of the winning pattern, capped at 1.0
        content: Lines after the title up to the next typed title
    """
    type: SectionType
    title: str
    start_line: int
    confidence: float
    end_line: Optional[int] = None
    content: List[str] = field(default_factory=list)
    subsections: List[Subsection] = field(default_factory=list)
    numbering: Optional[str] = None
    level: int = 1

    @property
    def body(self) -> str:
        return '\n'.join(self.content).strip('\n')

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "start_line": self.start_line,
            "end_line": self.end_line,
            "confidence": round(self.confidence, 3),
            "numbering": self.numbering,
            "level": self.level,
            "subsections": [
                {"title": s.title, "numbering": s.numbering, "level": s.level}
                for s in self.subsections
            ],
        }


class SectionDetector:
    """
    Detects typed sections by weighted title patterns.

    Usage:
        detector = SectionDetector()
        sections = detector.number_sections(detector.detect_sections(text))
    """

    def __init__(
        self,
        confidence_threshold: float = SECTION_CONFIDENCE_THRESHOLD,
        max_line_length: int = SECTION_MAX_LINE_LENGTH,
    ):
        """
        Args:
            confidence_threshold: Minimum score for a line to open a section
            max_line_length: Longer lines are body text, never titles
        """
        self.confidence_threshold = confidence_threshold
        self.max_line_length = max_line_length

    def detect_sections(self, text: str) -> List[TypedSection]:
        """
        Split text into typed sections.

        Lines before the first typed title are not part of any section.

        Raises:
            InputError: text is not a string
        """
        if not isinstance(text, str):
            raise InputError("Section detection needs a string")
        if not text:
            return []

        lines = text.split('\n')
        sections: List[TypedSection] = []
        current: Optional[TypedSection] = None

        for line_number, line in enumerate(lines):
            match = self.detect_heading(line, line_number)
            if match:
                if current:
                    current.end_line = line_number - 1
                    sections.append(current)
                current = TypedSection(
                    type=match.type,
                    title=line.strip(),
                    start_line=line_number,
                    confidence=match.confidence,
                )
            elif current:
                current.content.append(line)

        if current:
            current.end_line = len(lines) - 1
            sections.append(current)

        logger.debug(f"Detected {len(sections)} typed section(s)")
        return sections

    def detect_heading(self, line: str, line_number: int) -> Optional[SectionMatch]:
        """Best-scoring section type for a line, or None below the threshold."""
        stripped = line.strip()
        if len(stripped) < 3 or len(stripped) > self.max_line_length:
            return None

        is_heading = bool(HEADING_FORMATTED.match(line))
        title = stripped.lstrip('#').strip()

        best: Optional[SectionMatch] = None
        best_score = 0.0
        for section_type, pattern_set in SECTION_PATTERNS.items():
            for pattern in pattern_set.patterns:
                if not pattern.search(title):
                    continue
                score = pattern_set.weight
                if is_heading:
                    score *= HEADING_BOOST
                if line_number == 0:
                    score *= FIRST_LINE_BOOST
                if score > best_score:
                    best_score = score
                    best = SectionMatch(section_type, pattern.pattern, min(1.0, score))

        if best_score >= self.confidence_threshold:
            return best
        return None

    def number_sections(self, sections: List[TypedSection]) -> List[TypedSection]:
        """Number sections "1.0", "2.0", ... and their subsections "1.1", "1.2", ..."""
        for counter, section in enumerate(sections, 1):
            section.numbering = f"{counter}.0"
            section.level = 1
            section.subsections = self.detect_subsections(section.content)
            for sub_counter, subsection in enumerate(section.subsections, 1):
                subsection.numbering = f"{counter}.{sub_counter}"
        return sections

    @staticmethod
    def detect_subsections(content: List[str]) -> List[Subsection]:
        subsections: List[Subsection] = []
        current: Optional[Subsection] = None
        for index, line in enumerate(content):
            if SUBSECTION_LINE.match(line):
                if current:
                    subsections.append(current)
                current = Subsection(title=line.strip(), start_line=index)
            elif current:
                current.content.append(line)
        if current:
            subsections.append(current)
        return subsections

    @staticmethod
    def extract_tables(content: List[str]) -> List[List[List[str]]]:
        """
        Pipe-delimited tables in content lines.

        Returns:
            One list of rows per table; separator rows are dropped
        """
        tables: List[List[List[str]]] = []
        rows: Optional[List[List[str]]] = None

        for line in content:
            if '|' in line:
                if rows is None:
                    rows = []
                if is_separator_row(line):
                    continue
                cells = [cell.strip() for cell in line.split('|') if cell.strip()]
                if cells:
                    rows.append(cells)
            elif rows is not None and not line.strip():
                if rows:
                    tables.append(rows)
                rows = None

        if rows:
            tables.append(rows)
        return tables
