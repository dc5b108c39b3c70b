"""
Unit Tests for TocGenerator
"""

import pytest

from core.formatting.models import HeaderCandidate
from core.formatting.toc_generator import TocGenerator, slugify


def _headers(*specs):
    return [
        HeaderCandidate(
            text=title, normalized_title=title, level=level, line_index=i,
            confidence=0.95, source_pattern="markdown",
        )
        for i, (level, title) in enumerate(specs)
    ]


class TestSlugify:

    @pytest.mark.parametrize("text,slug", [
        ("Getting Started", "getting-started"),
        ("2.1 Getting Started!", "21-getting-started"),
        ("  Spaces   everywhere  ", "spaces-everywhere"),
        ("What's new?", "whats-new"),
        ("-- Dashed --", "dashed"),
        ("A -- B", "a-b"),
    ])
    def test_slugs(self, text, slug):
        assert slugify(text) == slug


class TestToc:

    def test_toc_block(self):
        toc = TocGenerator().build_toc(_headers((1, "Introduction"), (2, "Scope"), (1, "Usage")))
        assert toc.split('\n') == [
            "# Table of Contents",
            "",
            "- [Introduction](#introduction)",
            "  - [Scope](#scope)",
            "- [Usage](#usage)",
            "",
            "---",
        ]

    def test_empty_headers_no_toc(self):
        assert TocGenerator().build_toc([]) == ""

    def test_title_case_applied_to_titles_and_slugs(self):
        toc = TocGenerator(title_case=True).build_toc(_headers((1, "GETTING STARTED")))
        assert "- [Getting Started](#getting-started)" in toc


class TestAppendix:

    def test_cross_reference_definitions(self):
        appendix = TocGenerator().build_appendix(
            _headers((1, "Introduction"), (3, "Detail"), (2, "Scope"))
        )
        assert appendix.split('\n') == [
            "---",
            "",
            "## Appendix - Section References",
            "",
            '[1]: #introduction "Introduction"',
            '[2]: #scope "Scope"',
        ]

    def test_numbered_links_without_cross_reference(self):
        appendix = TocGenerator(cross_reference=False).build_appendix(_headers((1, "Intro")))
        assert appendix.endswith("1. [Intro](#intro)")

    def test_only_deep_headers_no_appendix(self):
        assert TocGenerator().build_appendix(_headers((3, "Deep"), (4, "Deeper"))) == ""
