#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Table Detection Patterns - Pipe-delimited Markdown tables.

Supports:
- Rows of the form | cell | cell |
- Separator rows (|---|:---:|)
"""

import re
from typing import List


# =============================================================================
# MARKDOWN TABLE PATTERNS
# =============================================================================

# Line that looks like a table row: | cell | cell |
TABLE_ROW_PATTERN = re.compile(r'^\s*\|.*\|\s*$')

# Individual separator cell: ---, :---, :---:, ---:
SEPARATOR_CELL_PATTERN = re.compile(r'^:?-{3,}:?$')


def is_table_row(line: str) -> bool:
    """Check if line is a pipe-delimited table row."""
    return bool(TABLE_ROW_PATTERN.match(line))


def split_cells(line: str) -> List[str]:
    """
    Split a table row into trimmed cell texts.

    Outer pipes are dropped: '| a | b |' -> ['a', 'b'].
    """
    inner = line.strip()
    if inner.startswith('|'):
        inner = inner[1:]
    if inner.endswith('|'):
        inner = inner[:-1]
    return [cell.strip() for cell in inner.split('|')]


def is_separator_row(line: str) -> bool:
    """A row is a separator when it carries '---' and only dash cells."""
    if '---' not in line:
        return False
    cells = [c for c in split_cells(line) if c]
    return bool(cells) and all(SEPARATOR_CELL_PATTERN.match(c) for c in cells)


def pipe_count(line: str) -> int:
    return line.count('|')


def separator_row(columns: int, widths: List[int] = None) -> str:
    """
    Build a separator row.

    Args:
        columns: Number of columns
        widths: Optional per-column widths for aligned output
    """
    if widths:
        return '| ' + ' | '.join('-' * max(3, w) for w in widths[:columns]) + ' |'
    return '|' + ' --- |' * columns


def format_row(cells: List[str], widths: List[int] = None) -> str:
    """Join cells back into a row, padding to widths when given."""
    if widths:
        cells = [cell.ljust(widths[i]) if i < len(widths) else cell for i, cell in enumerate(cells)]
    return '| ' + ' | '.join(cells) + ' |'
