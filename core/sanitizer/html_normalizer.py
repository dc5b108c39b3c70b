#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HTML Normalizer - Late-stage cleanup of formatted output.

Preserves document structure while removing dangerous markup:
- sanitize(): strips scripts, inline event handlers, javascript: URLs and
  iframe/embed/object, parsing real tags with BeautifulSoup
- normalize(): full structure-preserving pass for small inputs,
  sanitize-only fast path for large ones
- validate(): read-only structural report

Formatted output is mostly Markdown, so only real HTML tags are treated as
markup. Autolinks (<https://...>) and prose such as "x<y and one = 1 >" are
text and pass through untouched.
"""

import html as html_lib
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from config.constants import FULL_NORMALIZE_MAX_CHARS, TAG_MISMATCH_TOLERANCE
from config.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# PATTERNS
# =============================================================================

# Cheap pre-check; anything matching goes through the parser
DANGEROUS_PATTERN = re.compile(
    r'<\s*(?:script|iframe|embed|object)\b|[\s/"\'`]on[a-z]+\s*=|javascript\s*:',
    re.IGNORECASE,
)

# Tag-shaped token; quoted attribute values may contain '>'
MARKUP_TOKEN = re.compile(
    r'<!--.*?-->'
    r'|<(/?)([a-zA-Z][a-zA-Z0-9-]*)(?=[\s/>])'
    r'((?:[^<>"\'/]|/(?!>)|"[^"]*"|\'[^\']*\')*)(/?)>',
    re.DOTALL,
)

EVENT_HANDLER_NAME = re.compile(
    r'(?:^|[\s/"\'])on(?:abort|animation\w+|auxclick|before\w+|blur|cancel|canplay\w*|change|click'
    r'|close|contextmenu|copy|cuechange|cut|dblclick|drag\w*|drop|durationchange|emptied|ended'
    r'|error|focus\w*|formdata|hashchange|input|invalid|key\w+|load\w*|message\w*|mouse\w+'
    r'|offline|online|page\w+|paste|pause|play\w*|pointer\w+|popstate|progress|ratechange'
    r'|reset|resize|scroll\w*|search|seek\w+|select\w*|show|stalled|storage|submit|suspend'
    r'|timeupdate|toggle|touch\w+|transition\w+|unload|volumechange|waiting|wheel)\s*=',
    re.IGNORECASE,
)

HTML_ELEMENTS = frozenset("""
    a abbr address area article aside audio b base bdi bdo blockquote body br button
    canvas caption cite code col colgroup data datalist dd del details dfn dialog div dl
    dt em embed fieldset figcaption figure font footer form frame frameset h1 h2 h3 h4 h5
    h6 head header hgroup hr html i iframe img input ins kbd label legend li link main map
    mark marquee math menu meta meter nav noscript object ol optgroup option output p param
    picture pre progress q rp rt ruby s samp script section select slot small source span
    strike strong style sub summary sup svg table tbody td template textarea tfoot th thead
    time title tr track tt u ul var video wbr
    animate circle defs desc ellipse foreignobject g image line lineargradient marker mask
    path pattern polygon polyline radialgradient rect set stop symbol text tspan use
""".split())

REMOVED_ELEMENTS = ["script", "iframe", "embed", "object"]
URL_ATTRIBUTES = {"href", "src", "action", "formaction", "xlink:href", "data"}
SCRIPT_URL = re.compile(r'^javascript:', re.IGNORECASE)
URL_NOISE = re.compile(r'[\s\x00-\x1f]+')

PRE_BLOCK = re.compile(r'<pre\b[^>]*>.*?</pre>', re.IGNORECASE | re.DOTALL)
CODE_SPAN = re.compile(r'<code\b[^>]*>.*?</code>', re.IGNORECASE | re.DOTALL)
TABLE_BLOCK = re.compile(r'<table\b[^>]*>.*?</table>', re.IGNORECASE | re.DOTALL)
MARKDOWN_FENCE = re.compile(r'^[ \t]*```[^\n]*\n.*?^[ \t]*```[ \t]*$', re.DOTALL | re.MULTILINE)
MARKDOWN_INLINE_CODE = re.compile(r'`[^`\n]+`')

STRAY_TEXT_AFTER_BLOCK = re.compile(r'(</(?:p|div|h[1-6]|blockquote)>)([^<\s][^<\n]*)', re.IGNORECASE)
LIST_ITEM = re.compile(r'<li\b[^>]*>.*?</li>', re.IGNORECASE | re.DOTALL)
LANGUAGE_CLASS = re.compile(r'class=["\'](?:language-)?([\w+#-]+)["\']', re.IGNORECASE)

OPEN_TAG = re.compile(r'<(?![/!?])[^>]+>')
CLOSE_TAG = re.compile(r'</[^>]+>')
SELF_CLOSING_TAG = re.compile(r'<[^>]+/>')
VOID_TAG = re.compile(r'<(?:br|hr|img|input|meta|link|area|base|col|source|wbr)\b[^>]*>', re.IGNORECASE)
CONTENT_ELEMENT = re.compile(r'<body|<div|<article|<main|<section|<p\b|<h[1-6]', re.IGNORECASE)

PLACEHOLDER = "__{kind}_{index}__"


def split_markup(text: str) -> List[Tuple[bool, str]]:
    """
    Split text into (is_markup, chunk) segments.

    A tag-shaped token counts as markup when it names a known HTML/SVG
    element or a custom element, carries an event handler attribute, or
    closes a tag opened as markup. Everything else is text.
    """
    segments: List[Tuple[bool, str]] = []
    opened = set()
    position = scan = 0
    while True:
        match = MARKUP_TOKEN.search(text, scan)
        if not match:
            break
        if not _is_markup(match, opened):
            # A real tag may start inside a rejected candidate
            scan = match.start() + 1
            continue
        if match.start() > position:
            segments.append((False, text[position:match.start()]))
        segments.append((True, match.group(0)))
        position = scan = match.end()
    if position < len(text):
        segments.append((False, text[position:]))
    return segments


def _is_markup(match, opened) -> bool:
    if match.group(2) is None:
        return True  # comment
    name = match.group(2).lower()
    if match.group(1):
        return name in HTML_ELEMENTS or name in opened
    if name in HTML_ELEMENTS or '-' in name or EVENT_HANDLER_NAME.search(match.group(3)):
        opened.add(name)
        return True
    return False


def _strip_dangerous_attributes(tag):
    for attr in list(tag.attrs):
        name = attr.lower().lstrip('/')
        if name.startswith('on'):
            del tag[attr]
            continue
        if name in URL_ATTRIBUTES:
            value = tag[attr]
            if isinstance(value, list):
                value = ' '.join(value)
            if SCRIPT_URL.match(URL_NOISE.sub('', value)):
                del tag[attr]


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class SanitizationIssue:
    """Non-fatal structural problem reported by validate()."""
    code: str       # empty_content, missing_content_element, unclosed_tags, table_without_rows
    message: str

    def __str__(self):
        return self.message


@dataclass
class ValidationReport:
    """Result of HTMLNormalizer.validate()."""
    is_valid: bool
    issues: List[SanitizationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "issues": [{"code": i.code, "message": i.message} for i in self.issues],
            "stats": self.stats,
        }


class HTMLNormalizer:
    """
    Structure-preserving cleanup for formatted output.

    Usage:
        normalizer = HTMLNormalizer()
        safe = normalizer.sanitize(html)
        cleaned = normalizer.normalize(formatted_text)
        report = normalizer.validate(html)
    """

    def __init__(self, full_normalize_max_chars: int = FULL_NORMALIZE_MAX_CHARS):
        """
        Args:
            full_normalize_max_chars: Inputs shorter than this get the full pass
        """
        self.full_normalize_max_chars = full_normalize_max_chars

    # =========================================================================
    # SANITIZE
    # =========================================================================

    def sanitize(self, html: Optional[str]) -> str:
        """
        Remove scripts, event handlers, javascript: URLs and embedded content.

        Real tags are parsed with BeautifulSoup; text between them is kept
        byte for byte behind placeholders. Returns the input unchanged when
        no dangerous pattern or no real markup is present.
        """
        if not html:
            return ''
        if not DANGEROUS_PATTERN.search(html):
            return html

        segments = split_markup(html)
        if not any(is_markup for is_markup, _ in segments):
            return html

        texts: Dict[str, str] = {}
        skeleton = []
        for is_markup, chunk in segments:
            if is_markup:
                skeleton.append(chunk)
            else:
                key = PLACEHOLDER.format(kind="HTML_TEXT", index=len(texts))
                texts[key] = chunk
                skeleton.append(key)

        soup = BeautifulSoup(''.join(skeleton), "html.parser")
        for element in soup.find_all(REMOVED_ELEMENTS):
            element.decompose()
        for tag in soup.find_all(True):
            _strip_dangerous_attributes(tag)

        sanitized = _restore(str(soup), texts)
        logger.debug(f"Sanitized content: {len(html)} -> {len(sanitized)} chars")
        return sanitized

    # =========================================================================
    # NORMALIZE
    # =========================================================================

    def normalize(self, html: Optional[str]) -> str:
        """
        Full pass below the size threshold, sanitize-only above it.

        Markdown code (fences and backtick spans) is left untouched on
        both paths.
        """
        if not html:
            return ''
        if len(html) < self.full_normalize_max_chars:
            return self.normalize_full(html)

        protected: Dict[str, str] = {}
        text = _protect(MARKDOWN_FENCE, "MD_FENCE", html, protected)
        text = _protect(MARKDOWN_INLINE_CODE, "MD_CODE", text, protected)
        return _restore(self.sanitize(text), protected)

    def normalize_full(self, html: Optional[str]) -> str:
        """
        Structure-preserving normalization.

        Code, inline code, tables and Markdown code are protected behind
        placeholders while whitespace between tags is collapsed, stray text
        after block elements is wrapped and list items are flattened.
        """
        if not html:
            return ''

        protected: Dict[str, str] = {}
        normalized = _protect(MARKDOWN_FENCE, "MD_FENCE", html, protected)
        normalized = _protect(MARKDOWN_INLINE_CODE, "MD_CODE", normalized, protected)
        normalized = self.sanitize(normalized)

        normalized = _protect(PRE_BLOCK, "CODE_BLOCK", normalized, protected)
        normalized = _protect(CODE_SPAN, "INLINE_CODE", normalized, protected)
        normalized = _protect(TABLE_BLOCK, "TABLE", normalized, protected)

        normalized = self._collapse_inter_tag_whitespace(normalized)
        normalized = self._wrap_stray_text(normalized)
        normalized = self._fix_list_items(normalized)

        for key, original in protected.items():
            if key.startswith("__CODE_BLOCK_"):
                protected[key] = self._normalize_code_block(original)
            elif key.startswith("__INLINE_CODE_"):
                protected[key] = self._normalize_inline_code(original)
            elif key.startswith("__TABLE_"):
                protected[key] = self._normalize_table(original)

        return _restore(normalized, protected)

    @staticmethod
    def _collapse_inter_tag_whitespace(html: str) -> str:
        # Only whitespace between two real tags, never inside text
        segments = split_markup(html)
        kept = []
        for index, (is_markup, chunk) in enumerate(segments):
            if (not is_markup and not chunk.strip()
                    and 0 < index < len(segments) - 1
                    and segments[index - 1][0] and segments[index + 1][0]):
                continue
            kept.append(chunk)
        return ''.join(kept)

    @staticmethod
    def _wrap_stray_text(html: str) -> str:
        return STRAY_TEXT_AFTER_BLOCK.sub(lambda m: f"{m.group(1)}\n<p>{m.group(2).strip()}</p>", html)

    @staticmethod
    def _fix_list_items(html: str) -> str:
        def _flatten(match):
            item = match.group(0)
            if re.search(r'<[uo]l\b', item, re.IGNORECASE):
                return item
            return re.sub(r'\s*\n\s*', ' ', item)
        return LIST_ITEM.sub(_flatten, html)

    @staticmethod
    def _normalize_code_block(block: str) -> str:
        lang = LANGUAGE_CLASS.search(block)
        content = re.sub(r'^<pre\b[^>]*>', '', block, flags=re.IGNORECASE)
        content = re.sub(r'</pre>$', '', content, flags=re.IGNORECASE)
        content = re.sub(r'^\s*<code\b[^>]*>', '', content, flags=re.IGNORECASE)
        content = re.sub(r'</code>\s*$', '', content, flags=re.IGNORECASE)
        content = html_lib.unescape(content).replace('\xa0', ' ').strip('\n')
        data_lang = f' data-language="{lang.group(1)}"' if lang else ''
        return f"<pre{data_lang}><code>{content}</code></pre>"

    @staticmethod
    def _normalize_inline_code(span: str) -> str:
        content = re.sub(r'^<code\b[^>]*>', '', span, flags=re.IGNORECASE)
        content = re.sub(r'</code>$', '', content, flags=re.IGNORECASE)
        return f"<code>{html_lib.unescape(content)}</code>"

    @staticmethod
    def _normalize_table(table: str) -> str:
        if re.search(r'<thead\b', table, re.IGNORECASE) or not re.search(r'<tr\b', table, re.IGNORECASE):
            return table

        first_row = re.search(r'<tr\b[^>]*>.*?</tr>', table, re.IGNORECASE | re.DOTALL)
        has_tbody = re.search(r'<tbody\b', table, re.IGNORECASE)
        if first_row and re.search(r'<th\b', first_row.group(0), re.IGNORECASE):
            head = f"<thead>{first_row.group(0)}</thead>"
            rest = table[first_row.end():]
            if has_tbody:
                return table[:first_row.start()] + head + rest
            rest = re.sub(r'</table>\s*$', '</tbody></table>', rest, flags=re.IGNORECASE)
            return table[:first_row.start()] + head + "<tbody>" + rest
        if not has_tbody:
            table = re.sub(r'^(<table\b[^>]*>)', r'\1<tbody>', table, flags=re.IGNORECASE)
            table = re.sub(r'</table>\s*$', '</tbody></table>', table, flags=re.IGNORECASE)
        return table

    # =========================================================================
    # VALIDATE
    # =========================================================================

    def validate(self, html: Optional[str]) -> ValidationReport:
        """
        Report structural problems without touching the input.

        Returns:
            ValidationReport with issues and element counts
        """
        if not html or not html.strip():
            return ValidationReport(
                is_valid=False,
                issues=[SanitizationIssue("empty_content", "Empty HTML content")],
                stats={"tables": 0, "code_blocks": 0, "headings": 0, "paragraphs": 0},
            )

        issues = []
        if not CONTENT_ELEMENT.search(html):
            issues.append(SanitizationIssue(
                "missing_content_element", "Missing body/container element or content"
            ))

        open_tags = len(OPEN_TAG.findall(html))
        close_tags = len(CLOSE_TAG.findall(html))
        self_closing = len(SELF_CLOSING_TAG.findall(html))
        void_tags = len([t for t in VOID_TAG.findall(html) if not t.endswith('/>')])

        expected_close = open_tags - self_closing - void_tags
        tolerance = int(expected_close * TAG_MISMATCH_TOLERANCE)
        if abs(expected_close - close_tags) > tolerance:
            issues.append(SanitizationIssue(
                "unclosed_tags",
                f"Possible unclosed tags ({open_tags} open, {close_tags} close, "
                f"{self_closing} self-closing)",
            ))

        tables = TABLE_BLOCK.findall(html)
        for index, table in enumerate(tables, 1):
            if not re.search(r'<tr\b', table, re.IGNORECASE):
                issues.append(SanitizationIssue("table_without_rows", f"Table {index}: Missing table rows"))

        stats = {
            "tables": len(tables),
            "code_blocks": len(PRE_BLOCK.findall(html)),
            "headings": len(re.findall(r'<h[1-6]\b[^>]*>', html, re.IGNORECASE)),
            "paragraphs": len(re.findall(r'<p\b[^>]*>', html, re.IGNORECASE)),
        }
        if stats["code_blocks"]:
            logger.debug(f"Found {stats['code_blocks']} code blocks")

        return ValidationReport(is_valid=not issues, issues=issues, stats=stats)


def _protect(pattern, kind, text, store):
    """Replace pattern matches with placeholders recorded in store."""
    def _store(match):
        key = PLACEHOLDER.format(kind=kind, index=len(store))
        store[key] = match.group(0)
        return key
    return pattern.sub(_store, text)


def _restore(text, store):
    # Reverse order so placeholders nested inside later blocks resolve
    for key in reversed(list(store)):
        text = text.replace(key, store[key], 1)
    return text
