#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Structure Analyzer - Infer document structure from raw text.

Stage 1 of the formatting core:
- Detect headings (weighted pattern families, best match wins)
- Detect code blocks (fenced first, then indented) and inline code spans
- Classify untagged code by language signature vote
- Detect pipe-delimited tables
- Fold headings into a numbered section tree

The analyzer is pure: same text and rules, same structure.
"""

from typing import Dict, List, Optional, Set

from config.constants import HEADING_ACCEPTANCE_THRESHOLD
from config.logging_config import get_logger

from .models import CodeBlock, DocumentStructure, HeaderCandidate, Section, Table
from .rules import FormattingRuleSet
from .utils.code_patterns import (
    FENCE_LINE,
    INDENTED_CODE_LINE,
    INLINE_CODE,
    detect_language,
    fenced_line_mask,
    is_fence,
    trim_blank_edges,
)
from .utils.heading_patterns import HEADING_RULES, HeadingRule, best_heading_match
from .utils.list_patterns import is_list_item
from .utils.table_patterns import is_separator_row, is_table_row, split_cells

logger = get_logger(__name__)


class StructureAnalyzer:
    """
    Detects structural elements in plain or loosely formatted text.

    Usage:
        analyzer = StructureAnalyzer()
        structure = analyzer.analyze(text)
        for header in structure.headers:
            print(header.level, header.normalized_title)
    """

    def __init__(self, threshold: float = HEADING_ACCEPTANCE_THRESHOLD):
        """
        Initialize analyzer.

        Args:
            threshold: Minimum confidence for a heading candidate to be kept
        """
        self.threshold = threshold

    def analyze(
        self,
        text: str,
        rules: Optional[FormattingRuleSet] = None,
        previous_level: Optional[int] = None,
    ) -> DocumentStructure:
        """
        Analyze text and return its structural inventory.

        Args:
            text: Input text
            rules: Optional rule set; only the header detection flags apply
            previous_level: Level of the last heading before this text, when
                the text continues an earlier chunk

        Returns:
            DocumentStructure with headers, code blocks, inline code,
            tables and the section tree
        """
        lines = text.split('\n')
        offsets = self._line_offsets(lines)
        fence_mask = fenced_line_mask(lines)

        code_blocks = self._detect_fenced_code(lines, offsets)
        indented = self._detect_indented_code(lines, offsets, fence_mask)
        code_blocks.extend(indented)

        indented_lines: Set[int] = set()
        for block in indented:
            indented_lines.update(range(block.start_line, block.end_line + 1))

        tables = self._detect_tables(lines, fence_mask)
        table_lines: Set[int] = set()
        for table in tables:
            table_lines.update(range(table.start_line, table.end_line + 1))

        skip = indented_lines | table_lines
        headers = self._detect_headers(lines, fence_mask, skip, self._enabled_rules(rules))
        headers = refine_hierarchy(headers, previous_level)

        structure = DocumentStructure(
            headers=headers,
            code_blocks=code_blocks,
            inline_code=self._detect_inline_code(lines, offsets, fence_mask, indented_lines),
            tables=tables,
            sections=build_sections(headers),
        )

        logger.debug(
            f"Analyzed {len(lines)} lines: {len(headers)} headers, "
            f"{len(code_blocks)} code blocks, {len(tables)} tables"
        )
        return structure

    # =========================================================================
    # HEADINGS
    # =========================================================================

    @staticmethod
    def _enabled_rules(rules: Optional[FormattingRuleSet]) -> List[HeadingRule]:
        if rules is None:
            return HEADING_RULES
        return [
            rule for rule in HEADING_RULES
            if rule.flag is None or getattr(rules.headers, rule.flag)
        ]

    def _detect_headers(
        self,
        lines: List[str],
        fence_mask: List[bool],
        skip: Set[int],
        heading_rules: List[HeadingRule],
    ) -> List[HeaderCandidate]:
        headers = []
        consumed: Set[int] = set()

        for index, raw in enumerate(lines):
            line = raw.strip()
            if not line or fence_mask[index] or index in skip or index in consumed:
                continue

            next_line = None
            if index + 1 < len(lines) and not fence_mask[index + 1] and index + 1 not in skip:
                next_line = lines[index + 1].strip()

            match = best_heading_match(line, next_line, heading_rules)
            if match is None or match.confidence < self.threshold:
                continue

            if match.consumes_next_line:
                consumed.add(index + 1)

            headers.append(HeaderCandidate(
                text=line,
                normalized_title=match.title,
                level=match.level,
                line_index=index,
                confidence=match.confidence,
                source_pattern=match.source_pattern,
                consumes_next_line=match.consumes_next_line,
            ))

        return headers

    # =========================================================================
    # CODE
    # =========================================================================

    @staticmethod
    def _detect_fenced_code(lines: List[str], offsets: List[int]) -> List[CodeBlock]:
        blocks = []
        i = 0
        while i < len(lines):
            m = FENCE_LINE.match(lines[i])
            if not m:
                i += 1
                continue

            j = i + 1
            while j < len(lines) and not is_fence(lines[j]):
                j += 1
            end_line = min(j, len(lines) - 1)

            code = '\n'.join(trim_blank_edges(lines[i + 1:j]))
            tag = m.group(1)
            blocks.append(CodeBlock(
                kind="fenced",
                language=tag or detect_language(code),
                code=code,
                start_offset=offsets[i],
                end_offset=offsets[end_line] + len(lines[end_line]),
                start_line=i,
                end_line=end_line,
                explicit_language=bool(tag),
            ))
            i = j + 1
        return blocks

    @staticmethod
    def _detect_indented_code(
        lines: List[str],
        offsets: List[int],
        fence_mask: List[bool],
    ) -> List[CodeBlock]:
        blocks = []
        run: List[int] = []

        def flush():
            if len(run) >= 2:
                code = '\n'.join(INDENTED_CODE_LINE.sub('', lines[k], count=1) for k in run)
                blocks.append(CodeBlock(
                    kind="indented",
                    language=detect_language(code),
                    code=code,
                    start_offset=offsets[run[0]],
                    end_offset=offsets[run[-1]] + len(lines[run[-1]]),
                    start_line=run[0],
                    end_line=run[-1],
                ))
            run.clear()

        for index, line in enumerate(lines):
            is_code = (
                not fence_mask[index]
                and INDENTED_CODE_LINE.match(line)
                and not is_list_item(line)
            )
            if is_code:
                run.append(index)
            else:
                flush()
        flush()
        return blocks

    @staticmethod
    def _detect_inline_code(
        lines: List[str],
        offsets: List[int],
        fence_mask: List[bool],
        indented_lines: Set[int],
    ) -> List[CodeBlock]:
        spans = []
        for index, line in enumerate(lines):
            if fence_mask[index] or index in indented_lines:
                continue
            for m in INLINE_CODE.finditer(line):
                spans.append(CodeBlock(
                    kind="inline",
                    language="text",
                    code=m.group(1),
                    start_offset=offsets[index] + m.start(),
                    end_offset=offsets[index] + m.end(),
                    start_line=index,
                    end_line=index,
                ))
        return spans

    # =========================================================================
    # TABLES
    # =========================================================================

    @staticmethod
    def _detect_tables(lines: List[str], fence_mask: List[bool]) -> List[Table]:
        tables = []
        current: Optional[Table] = None

        for index, line in enumerate(lines):
            if not fence_mask[index] and is_table_row(line):
                if current is None:
                    current = Table(start_line=index, end_line=index)
                    tables.append(current)
                if is_separator_row(line):
                    current.has_separator = True
                else:
                    current.rows.append(split_cells(line))
                current.end_line = index
            else:
                current = None
        return tables

    # =========================================================================
    # CONVENIENCE
    # =========================================================================

    def get_outline(self, text: str) -> str:
        """Indented 'H{level}: title' outline of the detected headings."""
        return self.outline(self.analyze(text))

    def get_structure_summary(self, text: str) -> Dict[str, int]:
        """Count detected elements by type."""
        return self.summarize(self.analyze(text))

    @staticmethod
    def outline(structure: DocumentStructure) -> str:
        return '\n'.join(
            f"{'  ' * (h.level - 1)}H{h.level}: {h.normalized_title}"
            for h in structure.headers
        )

    @staticmethod
    def summarize(structure: DocumentStructure) -> Dict[str, int]:
        return {
            "headers": len(structure.headers),
            "code_blocks": len(structure.code_blocks),
            "inline_code": len(structure.inline_code),
            "tables": len(structure.tables),
            "sections": sum(1 for _ in structure.iter_sections()),
        }

    @staticmethod
    def _line_offsets(lines: List[str]) -> List[int]:
        offsets, position = [], 0
        for line in lines:
            offsets.append(position)
            position += len(line) + 1
        return offsets


# =============================================================================
# HIERARCHY
# =============================================================================

def refine_hierarchy(
    headers: List[HeaderCandidate],
    previous: Optional[int] = None,
) -> List[HeaderCandidate]:
    """
    Clamp levels in document order so no level exceeds previous + 1.

    The first header keeps its detected level unless `previous` (the level
    of a heading that came before the list) is given. Mutates and returns
    the list.
    """
    for header in headers:
        if previous is not None and header.level > previous + 1:
            header.adjusted_from = header.level
            header.level = previous + 1
        previous = header.level
    return headers


def build_sections(headers: List[HeaderCandidate]) -> List[Section]:
    """
    Fold ordered headers into a section tree.

    Stack entries at or below the incoming level are popped before the new
    section attaches to the remaining top (or becomes a root).
    """
    roots: List[Section] = []
    stack: List[Section] = []

    for header in headers:
        while stack and stack[-1].level >= header.level:
            stack.pop()

        section = Section(header=header, parent=stack[-1] if stack else None)
        if section.parent is not None:
            section.parent.children.append(section)
            section.numbering = f"{section.parent.numbering}.{len(section.parent.children)}"
        else:
            roots.append(section)
            section.numbering = str(len(roots))
        stack.append(section)

    return roots
