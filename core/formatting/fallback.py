#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Fallback Formatter - Simple deterministic formatting for a single chunk.

Used by the pipeline when the structure-aware engine raises. Each pass is
a handful of regex substitutions; the chain never raises for string input.

Order: tables -> paragraphs -> headings -> lists -> code blocks -> citations
"""

import re

from .utils.heading_patterns import to_title_case


def format_tables(text):
    """
    Pad cell delimiters and add a separator after the header row
    """
    def _table(match):
        rows = match.group(0).split('\n')
        rows = [re.sub(r'\s*\|', ' |', re.sub(r'\|\s*', '| ', row)).strip() for row in rows]
        if len(rows) > 1 and '---' not in rows[1]:
            columns = rows[0].count('|') - 1
            rows.insert(1, '|' + ' --- |' * columns)
        return '\n'.join(rows)

    return re.sub(r'^\|[^\n]*\|(?:\n\|[^\n]*\|)*', _table, text, flags=re.MULTILINE)


def format_paragraphs(text):
    """
    Normalize blank lines and break paragraphs at sentence ends
    """
    text = re.sub(r'\n{3,}', '\n\n', text)

    # Sentence end followed by a capitalized word, a numbered or a bullet item
    text = re.sub(r'([.!?])[ \t]+(?=[A-Z][a-z])', r'\1\n\n', text)
    text = re.sub(r'([.!?])[ \t]+(?=\d+\.\s)', r'\1\n\n', text)
    text = re.sub(r'([.!?])[ \t]+(?=[-*+]\s)', r'\1\n\n', text)
    return text


def format_headings(text):
    """
    Promote ALL CAPS titles, dotted numbered sections and colon titles
    """
    text = re.sub(
        r'^([A-Z][A-Z ]{10,}[A-Z])[ \t]*$',
        lambda m: '# ' + to_title_case(m.group(1)),
        text, flags=re.MULTILINE,
    )
    text = re.sub(r'^(\d+(?:\.\d+)+\s+[A-Z][a-zA-Z ]{3,})[ \t]*$', r'## \1', text, flags=re.MULTILINE)
    text = re.sub(r'^([A-Z][a-zA-Z ]{3,50}):[ \t]*$', r'### \1', text, flags=re.MULTILINE)
    return text


def format_lists(text):
    """
    Canonical bullet and number markers, indentation kept
    """
    text = re.sub(r'^([ \t]*)(\d+)[.)][ \t]+', r'\1\2. ', text, flags=re.MULTILINE)
    text = re.sub(r'^([ \t]*)[*+•][ \t]+', r'\1- ', text, flags=re.MULTILINE)
    text = re.sub(r'^([ \t]*)-[ \t]{2,}', r'\1- ', text, flags=re.MULTILINE)
    return text


def format_code_blocks(text):
    """
    Trim blank edges inside fenced blocks
    """
    def _fence(match):
        lang = match.group(1) or ''
        return '```' + lang + '\n' + match.group(2).strip('\n') + '\n```'

    return re.sub(r'```(\w*)\n(.*?)```', _fence, text, flags=re.DOTALL)


def format_citations(text):
    """
    Numbered citations [n] become superscripts
    """
    return re.sub(r'(?<!<sup>)\[(\d+)\](?!\s*:)(?!\()', r'<sup>[\1]</sup>', text)


FALLBACK_CHAIN = [
    format_tables,
    format_paragraphs,
    format_headings,
    format_lists,
    format_code_blocks,
    format_citations,
]


def fallback_format(text):
    """
    Run the whole fallback chain over one chunk.

    Args:
        text: Raw chunk text

    Returns:
        Formatted chunk text
    """
    for step in FALLBACK_CHAIN:
        text = step(text)
    return text
