#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Rule Engine - Rewrite text according to its analyzed structure.

Stage 2 of the formatting core. Steps run in a fixed order, each gated by
its rule group:
1. Headers     - '#' markers, optional title case
2. Lists       - canonical markers, indentation, spacing
3. Tables      - trimmed cells, separators, padded rows
4. Code        - re-emitted fences with language tags
5. Typography  - quotes, spacing, paragraph breaks (prose only)
6. Cleanup     - trailing whitespace, blank line cap

TOC and appendix are job-level concerns handled by the pipeline.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from config.logging_config import get_logger

from .models import DocumentStructure
from .rules import (
    CodeRules,
    FormattingRuleSet,
    HeaderRules,
    ListRules,
    TableRules,
    TypographyRules,
)
from .utils.code_patterns import (
    FENCE_LINE,
    INLINE_CODE,
    detect_language,
    fenced_line_mask,
    is_fence,
    trim_blank_edges,
)
from .utils.constants import MAX_BLANK_LINES, QUOTES
from .utils.heading_patterns import to_title_case
from .utils.list_patterns import expand_indent, normalize_marker
from .utils.table_patterns import (
    SEPARATOR_CELL_PATTERN,
    format_row,
    is_separator_row,
    pipe_count,
    separator_row,
    split_cells,
)

logger = get_logger(__name__)


# Line kinds
TEXT = "text"
BLANK = "blank"
HEADING = "heading"
FENCE = "fence"
INDENTED = "indented"
TABLE = "table"
LIST = "list"

_OPEN_CONTEXT = r'(^|[\s(\[{<“‘])'
_SENTENCE_END = re.compile(r'([.!?])[ \t]+(?=[A-Z][a-z])')
_INTERIOR_SPACES = re.compile(r'[ \t]{2,}')


@dataclass
class Line:
    """One output line and what it structurally is."""
    text: str
    kind: str = TEXT


class RuleEngine:
    """
    Applies a FormattingRuleSet to text using a precomputed structure.

    Usage:
        structure = StructureAnalyzer().analyze(text, rules)
        formatted = RuleEngine().transform(text, structure, rules)
    """

    def transform(
        self,
        text: str,
        structure: DocumentStructure,
        rules: Optional[FormattingRuleSet] = None,
        open_ended: bool = False,
    ) -> str:
        """
        Rewrite text according to structure and rules.

        Args:
            text: The text that was analyzed
            structure: Result of StructureAnalyzer.analyze(text)
            rules: Rule set (default: all rules enabled)
            open_ended: Text continues in a following chunk; its last line
                is left untouched by the whitespace cleanup

        Returns:
            Transformed text
        """
        rules = rules or FormattingRuleSet.default()
        lines = self._classify(text, structure)

        lines = self.format_headers(lines, structure, rules.headers)
        lines = self.format_lists(lines, rules.lists)
        lines = self.format_tables(lines, rules.tables)
        lines = self.format_code(lines, rules.code)
        lines = self.apply_typography(lines, rules.typography)

        return final_cleanup('\n'.join(line.text for line in lines), keep_tail=open_ended)

    # =========================================================================
    # CLASSIFICATION
    # =========================================================================

    @staticmethod
    def _classify(text: str, structure: DocumentStructure) -> List[Line]:
        raw = text.split('\n')
        mask = fenced_line_mask(raw)
        lines = [
            Line(t, FENCE if mask[i] else (BLANK if not t.strip() else TEXT))
            for i, t in enumerate(raw)
        ]

        for block in structure.code_blocks:
            if block.kind == "indented":
                for i in range(block.start_line, min(block.end_line + 1, len(lines))):
                    lines[i].kind = INDENTED
        for table in structure.tables:
            for i in range(table.start_line, min(table.end_line + 1, len(lines))):
                lines[i].kind = TABLE
        for header in structure.headers:
            if header.line_index < len(lines):
                lines[header.line_index].kind = HEADING
        return lines

    # =========================================================================
    # 1. HEADERS
    # =========================================================================

    @staticmethod
    def format_headers(lines: List[Line], structure: DocumentStructure, rules: HeaderRules) -> List[Line]:
        if not rules.enforce_hierarchy:
            return lines

        for header in structure.headers:
            index = header.line_index
            if index >= len(lines):
                continue
            title = to_title_case(header.normalized_title) if rules.title_case else header.normalized_title
            lines[index] = Line(f"{'#' * header.level} {title}", HEADING)
            # Setext underline is replaced by the marker
            if header.consumes_next_line and index + 1 < len(lines):
                lines[index + 1] = Line("", BLANK)
        return lines

    # =========================================================================
    # 2. LISTS
    # =========================================================================

    @staticmethod
    def format_lists(lines: List[Line], rules: ListRules) -> List[Line]:
        result: List[Line] = []

        for line in lines:
            if line.kind == TEXT:
                normalized = normalize_marker(line.text)
                if normalized is not None:
                    text = normalized if rules.normalize_markers else line.text
                    if rules.enforce_indentation:
                        text = expand_indent(text)
                    line = Line(text, LIST)

                    previous = result[-1] if result else None
                    if rules.smart_spacing and previous is not None and previous.kind == TEXT:
                        result.append(Line("", BLANK))
            result.append(line)
        return result

    # =========================================================================
    # 3. TABLES
    # =========================================================================

    def format_tables(self, lines: List[Line], rules: TableRules) -> List[Line]:
        result: List[Line] = []
        i = 0
        while i < len(lines):
            if lines[i].kind != TABLE:
                result.append(lines[i])
                i += 1
                continue

            j = i
            while j < len(lines) and lines[j].kind == TABLE:
                j += 1
            result.extend(Line(text, TABLE) for text in self._format_table([l.text for l in lines[i:j]], rules))
            i = j
        return result

    @staticmethod
    def _format_table(rows: List[str], rules: TableRules) -> List[str]:
        header_columns = max(pipe_count(rows[0]) - 1, 1)
        separators = [is_separator_row(r) for r in rows]
        cells = [split_cells(r) for r in rows]

        data_widths = [len(c) for c, sep in zip(cells, separators) if not sep]
        columns = max(data_widths + [header_columns]) if rules.enforce_structure else None
        if columns:
            cells = [
                c if sep else c + [''] * (columns - len(c))
                for c, sep in zip(cells, separators)
            ]

        widths = None
        if rules.auto_align:
            widths = []
            for c, sep in zip(cells, separators):
                if sep:
                    continue
                for k, cell in enumerate(c):
                    if k == len(widths):
                        widths.append(0)
                    widths[k] = max(widths[k], len(cell), 3)

        formatted = []
        for c, sep in zip(cells, separators):
            if sep:
                formatted.append(_format_separator(c, widths, columns))
            else:
                formatted.append(format_row(c, widths))

        if rules.add_separators and len(rows) > 1 and '---' not in rows[1]:
            formatted.insert(1, separator_row(header_columns, widths))
        return formatted

    # =========================================================================
    # 4. CODE
    # =========================================================================

    @staticmethod
    def format_code(lines: List[Line], rules: CodeRules) -> List[Line]:
        result: List[Line] = []
        i = 0
        while i < len(lines):
            line = lines[i]
            m = FENCE_LINE.match(line.text) if line.kind == FENCE else None
            if not m:
                result.append(line)
                i += 1
                continue

            j = i + 1
            while j < len(lines) and not is_fence(lines[j].text):
                j += 1
            if j >= len(lines):
                # Unterminated fence is left as written
                result.extend(lines[i:])
                break

            body = [l.text for l in lines[i + 1:j]]
            if rules.proper_indentation:
                body = trim_blank_edges(body)

            tag = m.group(1)
            if not tag and rules.auto_detect_language:
                tag = detect_language('\n'.join(body))
            if not rules.syntax_highlighting:
                tag = ''

            result.append(Line(f"```{tag}", FENCE))
            result.extend(Line(text, FENCE) for text in body)
            result.append(Line("```", FENCE))
            i = j + 1
        return result

    # =========================================================================
    # 5. TYPOGRAPHY
    # =========================================================================

    @staticmethod
    def apply_typography(lines: List[Line], rules: TypographyRules) -> List[Line]:
        if not (rules.smart_quotes or rules.proper_spacing or rules.paragraph_breaks):
            return lines

        result: List[Line] = []
        for line in lines:
            if line.kind not in (TEXT, LIST):
                result.append(line)
                continue

            stripped = line.text.lstrip(' \t')
            indent = line.text[:len(line.text) - len(stripped)]
            segments = _split_inline_code(stripped)

            for k, (segment, is_code) in enumerate(segments):
                if is_code:
                    continue
                if rules.smart_quotes:
                    segment = smart_quotes(segment)
                if rules.proper_spacing:
                    segment = _INTERIOR_SPACES.sub(' ', segment)
                if rules.paragraph_breaks and line.kind == TEXT:
                    segment = _SENTENCE_END.sub(r'\1\n\n', segment)
                segments[k] = (segment, False)

            text = indent + ''.join(s for s, _ in segments)
            for part in text.split('\n'):
                result.append(Line(part, line.kind if part.strip() else BLANK))
        return result


# =============================================================================
# HELPERS
# =============================================================================

def _split_inline_code(text: str) -> List[tuple]:
    """Split text into (segment, is_inline_code) pairs."""
    segments = []
    position = 0
    for m in INLINE_CODE.finditer(text):
        if m.start() > position:
            segments.append((text[position:m.start()], False))
        segments.append((m.group(0), True))
        position = m.end()
    if position < len(text):
        segments.append((text[position:], False))
    return segments


def _format_separator(cells: List[str], widths: Optional[List[int]], columns: Optional[int]) -> str:
    count = columns or len(cells)
    parts = []
    for k in range(count):
        cell = cells[k] if k < len(cells) and SEPARATOR_CELL_PATTERN.match(cells[k]) else '---'
        left, right = cell.startswith(':'), cell.endswith(':')
        width = max(widths[k], 3) if widths and k < len(widths) else 3
        dashes = '-' * max(width - left - right, 3)
        parts.append(f"{':' if left else ''}{dashes}{':' if right else ''}")
    return '| ' + ' | '.join(parts) + ' |'


def smart_quotes(text: str) -> str:
    """
    Convert straight quotes to curly quotes.

    Quotes at the start of text or after whitespace/opening brackets open;
    everything else closes (apostrophes included).
    """
    text = re.sub(_OPEN_CONTEXT + '"', lambda m: m.group(1) + QUOTES["double_open"], text)
    text = text.replace('"', QUOTES["double_close"])
    text = re.sub(_OPEN_CONTEXT + "'", lambda m: m.group(1) + QUOTES["single_open"], text)
    return text.replace("'", QUOTES["single_close"])


def final_cleanup(text: str, keep_tail: bool = False) -> str:
    """
    Strip trailing whitespace per line and cap blank runs at two lines.

    Args:
        text: Text to clean
        keep_tail: Leave the last line as-is (text continues elsewhere)
    """
    lines = text.split('\n')
    cleaned = []
    blank_run = 0
    for index, line in enumerate(lines):
        is_tail = keep_tail and index == len(lines) - 1
        if not is_tail:
            line = line.rstrip()
        if not line.strip() and not is_tail:
            blank_run += 1
            if blank_run > MAX_BLANK_LINES:
                continue
        else:
            blank_run = 0
        cleaned.append(line)
    return '\n'.join(cleaned)
