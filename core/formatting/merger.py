#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Merger - Combine several documents into one.

Each source is split into typed sections (SectionDetector); sections of
the same type are then merged with one of four strategies:

- combine:  one section per type, bodies joined in source order
- separate: every section kept, numbered N.1, N.2 under its type
- priority: the first source's version wins, the rest are kept as versions
- dedupe:   identical bodies collapse to one

A source without typed sections contributes a single untyped section
titled by the source name.
"""

import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from config.constants import MAX_MERGE_CHARS
from config.logging_config import get_logger

from core.errors import InputError, MergeError

from .models import HeaderCandidate
from .section_detector import SectionDetector
from .toc_generator import TocGenerator
from .utils.constants import SECTION_SEPARATOR

logger = get_logger(__name__)

UNTYPED_SECTION = "content"


class MergeStrategy(str, Enum):
    COMBINE = "combine"
    SEPARATE = "separate"
    PRIORITY = "priority"
    DEDUPE = "dedupe"


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class SourceDocument:
    """One input of a merge."""
    name: str
    content: str
    author: Optional[str] = None
    modified_at: Optional[datetime] = None


@dataclass
class SourceSection:
    type: str
    title: str
    body: str
    source: str
    document_index: int
    confidence: float = 1.0


@dataclass
class MergedSection:
    """A section of the merged document."""
    type: str
    title: str
    numbering: str
    body: str
    sources: List[str]
    merged: bool = False
    deduplicated: bool = False
    versions: List[SourceSection] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "numbering": self.numbering,
            "body": self.body,
            "sources": self.sources,
            "merged": self.merged,
            "deduplicated": self.deduplicated,
            "versions": len(self.versions),
        }


@dataclass
class MergeResult:
    """Merged sections plus bookkeeping about the sources."""
    sections: List[MergedSection]
    strategy: MergeStrategy
    document_count: int
    failed_count: int = 0
    errors: List[str] = field(default_factory=list)
    authors: List[str] = field(default_factory=list)
    sources: List[str] = field(default_factory=list)
    total_chars: int = 0
    merged_at: datetime = field(default_factory=datetime.now)

    def headers(self) -> List[HeaderCandidate]:
        """Merged sections as level-1 headers (for the TOC)."""
        return [
            HeaderCandidate(
                text=f"{section.numbering} {section.title}",
                normalized_title=f"{section.numbering} {section.title}",
                level=1,
                line_index=index,
                confidence=1.0,
                source_pattern="merge",
            )
            for index, section in enumerate(self.sections)
        ]

    def to_markdown(self, toc: bool = True) -> str:
        """
        Render the merged document.

        Format:
            # Table of Contents            (optional)
            ...
            # 1.0 Executive Summary

            body
        """
        parts = []
        if toc and self.sections:
            parts.append(TocGenerator().build_toc(self.headers()))
        for section in self.sections:
            heading = f"# {section.numbering} {section.title}"
            parts.append(f"{heading}\n\n{section.body}" if section.body else heading)
        return '\n\n'.join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": [s.to_dict() for s in self.sections],
            "strategy": self.strategy.value,
            "document_count": self.document_count,
            "failed_count": self.failed_count,
            "errors": self.errors,
            "authors": self.authors,
            "sources": self.sources,
            "total_chars": self.total_chars,
            "merged_at": self.merged_at.isoformat(),
        }


class DocumentMerger:
    """
    Merges typed sections of several documents.

    Usage:
        merger = DocumentMerger(strategy="combine")
        result = merger.merge([SourceDocument("a.md", text_a), SourceDocument("b.md", text_b)])
        print(result.to_markdown())
    """

    def __init__(
        self,
        strategy=MergeStrategy.COMBINE,
        detector: Optional[SectionDetector] = None,
        max_chars: int = MAX_MERGE_CHARS,
    ):
        """
        Args:
            strategy: Default strategy (MergeStrategy or its value)
            detector: Section detector (default: SectionDetector())
            max_chars: Sources longer than this are rejected
        """
        self.strategy = self._resolve(strategy)
        self.detector = detector or SectionDetector()
        self.max_chars = max_chars

    @classmethod
    def from_settings(cls, settings) -> "DocumentMerger":
        return cls(
            strategy=settings.merge_strategy,
            detector=SectionDetector(confidence_threshold=settings.section_threshold),
            max_chars=settings.max_merge_chars,
        )

    def merge(self, documents: List[SourceDocument], strategy=None) -> MergeResult:
        """
        Merge documents.

        Sources that are not text or exceed max_chars are skipped and
        reported in errors.

        Raises:
            InputError: No documents given, or unknown strategy
            MergeError: Every source was rejected
        """
        if not documents:
            raise InputError("No documents to merge")
        strategy = self._resolve(strategy) if strategy is not None else self.strategy

        accepted: List[SourceDocument] = []
        errors: List[str] = []
        for document in documents:
            problem = self._check(document)
            if problem:
                errors.append(problem)
                logger.warning(f"Skipping source: {problem}")
            else:
                accepted.append(document)

        if not accepted:
            raise MergeError("Failed to read any documents")

        grouped: Dict[str, List[SourceSection]] = {}
        for index, document in enumerate(accepted):
            for section in self._sections_of(document, index):
                grouped.setdefault(section.type, []).append(section)

        merge = {
            MergeStrategy.COMBINE: self._combine,
            MergeStrategy.SEPARATE: self._separate,
            MergeStrategy.PRIORITY: self._priority,
            MergeStrategy.DEDUPE: self._dedupe,
        }[strategy]
        sections = merge(grouped)

        logger.info(
            f"Merged {len(accepted)} document(s) into {len(sections)} section(s) "
            f"[{strategy.value}]"
        )
        return MergeResult(
            sections=sections,
            strategy=strategy,
            document_count=len(accepted),
            failed_count=len(errors),
            errors=errors,
            authors=sorted({d.author for d in accepted if d.author}),
            sources=[d.name for d in accepted],
            total_chars=sum(len(d.content) for d in accepted),
        )

    # =========================================================================
    # HELPERS
    # =========================================================================

    @staticmethod
    def _resolve(strategy) -> MergeStrategy:
        try:
            return MergeStrategy(strategy)
        except ValueError:
            raise InputError(f"Invalid merge strategy: {strategy}")

    def _check(self, document) -> Optional[str]:
        name = getattr(document, "name", None)
        if not name:
            return "Invalid document: missing name"
        if not isinstance(document.content, str):
            return f"{name}: content is not text"
        if len(document.content) > self.max_chars:
            return f"{name}: exceeds {self.max_chars:,} chars"
        return None

    def _sections_of(self, document: SourceDocument, index: int) -> List[SourceSection]:
        typed = self.detector.detect_sections(document.content)
        if not typed:
            return [SourceSection(
                type=UNTYPED_SECTION,
                title=document.name,
                body=document.content.strip('\n'),
                source=document.name,
                document_index=index,
            )]
        return [
            SourceSection(
                type=section.type.value,
                title=section.title.lstrip('#').strip(),
                body=section.body,
                source=document.name,
                document_index=index,
                confidence=section.confidence,
            )
            for section in typed
        ]

    @staticmethod
    def _combine(grouped: Dict[str, List[SourceSection]]) -> List[MergedSection]:
        merged = []
        for counter, (section_type, sections) in enumerate(grouped.items(), 1):
            bodies = [s.body for s in sections if s.body]
            merged.append(MergedSection(
                type=section_type,
                title=sections[0].title,
                numbering=f"{counter}.0",
                body=f"\n\n{SECTION_SEPARATOR}\n\n".join(bodies),
                sources=[s.source for s in sections],
                merged=len(sections) > 1,
                versions=list(sections),
            ))
        return merged

    @staticmethod
    def _separate(grouped: Dict[str, List[SourceSection]]) -> List[MergedSection]:
        merged = []
        for counter, (section_type, sections) in enumerate(grouped.items(), 1):
            for sub_counter, section in enumerate(sections, 1):
                merged.append(MergedSection(
                    type=section_type,
                    title=section.title,
                    numbering=f"{counter}.{sub_counter}",
                    body=section.body,
                    sources=[section.source],
                    versions=[section],
                ))
        return merged

    @staticmethod
    def _priority(grouped: Dict[str, List[SourceSection]]) -> List[MergedSection]:
        merged = []
        for counter, (section_type, sections) in enumerate(grouped.items(), 1):
            ordered = sorted(sections, key=lambda s: s.document_index)
            winner = ordered[0]
            merged.append(MergedSection(
                type=section_type,
                title=winner.title,
                numbering=f"{counter}.0",
                body=winner.body,
                sources=[winner.source],
                versions=ordered,
            ))
        return merged

    @staticmethod
    def _dedupe(grouped: Dict[str, List[SourceSection]]) -> List[MergedSection]:
        merged = []
        for counter, (section_type, sections) in enumerate(grouped.items(), 1):
            unique: List[SourceSection] = []
            seen = set()
            for section in sections:
                digest = content_hash(section.body)
                if digest not in seen:
                    seen.add(digest)
                    unique.append(section)
            for sub_counter, section in enumerate(unique, 1):
                merged.append(MergedSection(
                    type=section_type,
                    title=section.title,
                    numbering=f"{counter}.{sub_counter}",
                    body=section.body,
                    sources=[section.source],
                    deduplicated=len(unique) < len(sections),
                    versions=[section],
                ))
        return merged


def content_hash(text: str) -> str:
    """Whitespace-insensitive digest of a section body."""
    normalized = re.sub(r'\s+', ' ', text).strip()
    return hashlib.sha1(normalized.encode('utf-8')).hexdigest()[:16]
