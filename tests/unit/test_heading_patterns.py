"""
Unit Tests for heading pattern families

Each family is checked on its own, then best_heading_match is checked for
picking the highest-weighted match.
"""

import pytest

from core.formatting.utils.heading_patterns import (
    HEADING_RULES,
    best_heading_match,
    heuristic_level,
    to_title_case,
)


def _rule(name):
    return next(rule for rule in HEADING_RULES if rule.name == name)


class TestPatternFamilies:
    """Test each heading family in isolation."""

    def test_markdown_marker(self):
        match = _rule("markdown").match("### Setup Guide", None)
        assert match.title == "Setup Guide"
        assert match.level == 3
        assert match.confidence == 0.95

    def test_markdown_closing_hashes_dropped(self):
        match = _rule("markdown").match("## Title ##", None)
        assert match.title == "Title"

    def test_all_caps(self):
        match = _rule("all_caps").match("GETTING STARTED", None)
        assert match is not None
        assert match.level == 1
        assert match.confidence == 0.85

    @pytest.mark.parametrize("line", ["SHORT", "A" * 120, "NOT Caps Line"])
    def test_all_caps_rejects(self, line):
        assert _rule("all_caps").match(line, None) is None

    def test_numbered_level_from_components(self):
        assert _rule("numbered").match("1.1 Subsection", None).level == 2
        assert _rule("numbered").match("2.3.1 Deep Section", None).level == 3

    def test_numbered_keeps_number_in_title(self):
        assert _rule("numbered").match("1.1 Subsection", None).title == "1.1 Subsection"

    @pytest.mark.parametrize("line", [
        "1. First item",              # single component is a list item
        "1.1 This ends with a period.",
        "1.1 lowercase start",
    ])
    def test_numbered_rejects(self, line):
        assert _rule("numbered").match(line, None) is None

    def test_colon_title(self):
        match = _rule("colon").match("Installation Steps:", None)
        assert match.title == "Installation Steps"
        assert match.confidence == 0.75

    def test_colon_rejects_sentence(self):
        assert _rule("colon").match("Note: see above.", None) is None

    def test_bold_line(self):
        match = _rule("bold").match("**Key Results**", None)
        assert match.title == "Key Results"
        assert match.confidence == 0.80

    def test_underline_equals_is_level_one(self):
        match = _rule("underline").match("Overview Of System", "==================")
        assert match.level == 1
        assert match.consumes_next_line is True

    def test_underline_dashes_is_level_two(self):
        assert _rule("underline").match("Details", "-------").level == 2

    def test_underline_too_short(self):
        # Rule must span at least 80% of the title
        assert _rule("underline").match("A Long Heading Title", "===") is None

    def test_underline_needs_next_line(self):
        assert _rule("underline").match("Details", None) is None

    def test_keyword_case_insensitive(self):
        match = _rule("keyword").match("conclusion:", None)
        assert match.title == "conclusion"
        assert match.confidence == 0.88


class TestBestMatch:
    """Test rule selection."""

    def test_highest_weight_wins(self):
        # Matches both all_caps (0.85) and keyword (0.88)
        match = best_heading_match("INTRODUCTION")
        assert match.source_pattern == "keyword"
        assert match.confidence == 0.88
        assert match.level == 1

    def test_plain_sentence_has_no_match(self):
        assert best_heading_match("This is an ordinary sentence.") is None

    def test_restricted_rule_list(self):
        rules = [r for r in HEADING_RULES if r.name != "keyword"]
        assert best_heading_match("INTRODUCTION", rules=rules).source_pattern == "all_caps"


class TestHelpers:

    @pytest.mark.parametrize("text,level", [
        ("OVERVIEW", 1),
        ("1. Start", 2),
        ("Scope: all", 4),
        ("Some Title", 2),
    ])
    def test_heuristic_level(self, text, level):
        assert heuristic_level(text) == level

    def test_title_case(self):
        assert to_title_case("GETTING STARTED with python") == "Getting Started With Python"

    def test_title_case_keeps_apostrophes(self):
        assert to_title_case("the user's guide") == "The User's Guide"
