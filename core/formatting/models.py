#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Model - Typed inventory produced by structure analysis.

HeaderCandidate, CodeBlock and Table come straight out of the analyzer;
Section wraps headers into a tree with dotted numbering.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Document:
    """Raw input plus size-derived mode flags."""
    text: str
    is_large: bool = False
    is_huge: bool = False

    @classmethod
    def from_text(cls, text: str, large_threshold: int, huge_threshold: int) -> "Document":
        return cls(
            text=text,
            is_large=len(text) > large_threshold,
            is_huge=len(text) > huge_threshold,
        )

    def __len__(self):
        return len(self.text)


@dataclass
class HeaderCandidate:
    """
    A detected heading.

    Attributes:
        text: Source line as written (stripped)
        normalized_title: Title without markup (no #, **, trailing colon)
        level: Heading level 1-6 after hierarchy refinement
        line_index: Zero-based line of the heading in the analyzed text
        confidence: Weight of the winning pattern family
        source_pattern: Name of the winning pattern family
        adjusted_from: Original level when refinement clamped it
        consumes_next_line: Heading is underlined (setext) on the next line
    """
    text: str
    normalized_title: str
    level: int
    line_index: int
    confidence: float
    source_pattern: str
    adjusted_from: Optional[int] = None
    consumes_next_line: bool = False

    def __repr__(self):
        title = self.normalized_title
        return f"<H{self.level}: {title[:50]}...>" if len(title) > 50 else f"<H{self.level}: {title}>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "normalized_title": self.normalized_title,
            "level": self.level,
            "line_index": self.line_index,
            "confidence": self.confidence,
            "source_pattern": self.source_pattern,
        }


@dataclass(eq=False)
class Section:
    """A header with its nested subsections."""
    header: HeaderCandidate
    children: List["Section"] = field(default_factory=list)
    parent: Optional["Section"] = field(default=None, repr=False)
    numbering: str = ""

    @property
    def level(self) -> int:
        return self.header.level

    @property
    def title(self) -> str:
        return self.header.normalized_title

    @property
    def depth(self) -> int:
        """Distance from the root of the tree (roots have depth 0)."""
        depth, node = 0, self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def walk(self) -> Iterator["Section"]:
        """Yield this section and all descendants in document order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "level": self.level,
            "numbering": self.numbering,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass
class CodeBlock:
    """
    A code element.

    kind is 'fenced', 'indented' or 'inline'. Offsets index the analyzed
    text; lines are zero-based and end_line is inclusive.
    """
    kind: str
    language: str
    code: str
    start_offset: int = 0
    end_offset: int = 0
    start_line: int = 0
    end_line: int = 0
    explicit_language: bool = False

    @property
    def source_span(self) -> Tuple[int, int]:
        return self.start_offset, self.end_offset

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "language": self.language,
            "code": self.code,
            "source_span": list(self.source_span),
        }


@dataclass
class Table:
    """Rows of cell texts from a contiguous pipe-delimited span."""
    rows: List[List[str]] = field(default_factory=list)
    has_separator: bool = False
    start_line: int = 0
    end_line: int = 0

    @property
    def column_count(self) -> int:
        return max((len(r) for r in self.rows), default=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "has_separator": self.has_separator,
            "start_line": self.start_line,
            "end_line": self.end_line,
        }


@dataclass
class DocumentStructure:
    """Result of StructureAnalyzer.analyze()."""
    headers: List[HeaderCandidate] = field(default_factory=list)
    code_blocks: List[CodeBlock] = field(default_factory=list)
    inline_code: List[CodeBlock] = field(default_factory=list)
    tables: List[Table] = field(default_factory=list)
    sections: List[Section] = field(default_factory=list)

    def iter_sections(self) -> Iterator[Section]:
        for root in self.sections:
            yield from root.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": [h.to_dict() for h in self.headers],
            "code_blocks": [c.to_dict() for c in self.code_blocks],
            "tables": [t.to_dict() for t in self.tables],
            "sections": [s.to_dict() for s in self.sections],
        }
