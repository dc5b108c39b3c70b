"""
Unit Tests for RuleEngine

Each formatting step is tested through transform() with the other rule
groups switched off where they would interfere.
"""

import re

import pytest

from core.formatting.rules import FormattingRuleSet
from core.formatting.transformer import final_cleanup, smart_quotes

SEPARATOR_2_COLUMNS = re.compile(r'^\|\s*:?-{3,}:?\s*\|\s*:?-{3,}:?\s*\|$')


def _rules(**groups):
    rules = FormattingRuleSet.default()
    for group, flags in groups.items():
        rules = rules.with_group(group, **flags)
    return rules


class TestHeaders:

    def test_all_caps_becomes_title_cased_marker(self, format_text):
        output = format_text("INTRODUCTION\nSome body.")
        lines = output.split('\n')
        assert lines[0] == "# Introduction"
        assert lines[1] == "Some body."

    def test_numbered_heading_keeps_body_line(self, format_text):
        lines = format_text("1.1 Subsection\nContent").split('\n')
        assert lines[0] == "## 1.1 Subsection"
        assert lines[1] == "Content"

    def test_title_case_off(self, format_text):
        output = format_text("GETTING STARTED\nText", _rules(headers={"titleCase": False}))
        assert output.startswith("# GETTING STARTED\n")

    def test_enforce_hierarchy_off_leaves_lines(self, format_text):
        rules = _rules(headers={"enforceHierarchy": False})
        assert format_text("INTRODUCTION\nSome body.", rules) == "INTRODUCTION\nSome body."

    def test_setext_underline_removed(self, format_text):
        output = format_text("Project Overview\n================\nText here")
        assert output.split('\n')[0] == "# Project Overview"
        assert "=====" not in output

    def test_clamped_level_is_written(self, format_text):
        assert format_text("# Top\n#### Deep").split('\n')[1] == "## Deep"


class TestLists:

    def test_markers_normalized(self, format_text):
        output = format_text("* one\n+ two\n• three\n1) first\n2. second")
        assert output.split('\n') == ["- one", "- two", "- three", "1. first", "2. second"]

    def test_nested_marker_normalized_independently(self, format_text):
        output = format_text("- parent\n\t* child")
        assert output.split('\n') == ["- parent", "    - child"]

    def test_blank_line_inserted_after_prose(self, format_text):
        output = format_text("Items below\n* one")
        assert output.split('\n') == ["Items below", "", "- one"]

    def test_smart_spacing_off(self, format_text):
        output = format_text("Items below\n* one", _rules(lists={"smartSpacing": False}))
        assert output.split('\n') == ["Items below", "- one"]

    def test_horizontal_rule_is_not_a_list(self, format_text):
        assert format_text("Text\n\n***\n\nMore") == "Text\n\n***\n\nMore"


class TestTables:

    def test_separator_synthesized(self, format_text):
        lines = format_text("|A|B|\n|1|2|").split('\n')
        assert len(lines) == 3
        assert SEPARATOR_2_COLUMNS.match(lines[1])
        assert lines[0].startswith("| A")
        assert lines[2].startswith("| 1")

    def test_existing_separator_not_duplicated(self, format_text):
        lines = format_text("| A | B |\n|:---|---:|\n| 1 | 2 |").split('\n')
        assert len(lines) == 3
        assert lines[1] == "| :--- | ---: |"

    def test_short_rows_padded(self, format_text):
        lines = format_text("|A|B|C|\n|1|").split('\n')
        assert lines[-1].count('|') == 4

    def test_structure_off_keeps_row_width(self, format_text):
        rules = _rules(tables={"enforceStructure": False, "autoAlign": False, "addSeparators": False})
        assert format_text("|A|B|C|\n|1|", rules) == "| A | B | C |\n| 1 |"

    def test_auto_align_pads_columns(self, format_text):
        rules = _rules(tables={"addSeparators": False})
        lines = format_text("|Name|V|\n|alpha|1|", rules).split('\n')
        assert lines == ["| Name  | V   |", "| alpha | 1   |"]


class TestCode:

    def test_fence_tagged_with_detected_language(self, format_text):
        text = "```\n\ndef run(self):\n    items.append(1)\n\n```"
        assert format_text(text) == "```python\ndef run(self):\n    items.append(1)\n```"

    def test_explicit_tag_kept(self, format_text):
        assert format_text("```bash\nls -la\n```").startswith("```bash\n")

    def test_syntax_highlighting_off_drops_tag(self, format_text):
        output = format_text("```python\nx = 1\n```", FormattingRuleSet.academic())
        assert output.split('\n')[0] == "```"

    def test_code_content_untouched_by_typography(self, format_text):
        text = "```\nprint(\"a  b\")  # It's. Done\n```"
        output = format_text(text, _rules(code={"autoDetectLanguage": False}))
        assert "print(\"a  b\")  # It's. Done" in output

    def test_unterminated_fence_left_as_written(self, format_text):
        text = "```js\nconst a = 1;"
        assert format_text(text) == text


class TestTypography:

    def test_smart_quotes(self):
        assert smart_quotes('He said "hi" and it\'s fine') == 'He said “hi” and it’s fine'

    def test_spacing_collapsed(self, format_text):
        assert format_text("Too    many   spaces here") == "Too many spaces here"

    def test_paragraph_break_after_sentence(self, format_text):
        assert format_text("First sentence. Second one.") == "First sentence.\n\nSecond one."

    def test_inline_code_protected(self, format_text):
        output = format_text('Use `x = "a"` here. Then "go" on.')
        assert '`x = "a"`' in output
        assert "“go”" in output

    def test_headings_not_broken(self, format_text):
        assert format_text("# Title. Next Part") == "# Title. Next Part"

    def test_typography_off(self, format_text):
        rules = _rules(typography={"smartQuotes": False, "properSpacing": False, "paragraphBreaks": False})
        text = 'Say "hi".  Then Leave.'
        assert format_text(text, rules) == text


class TestCleanup:

    def test_trailing_whitespace_and_blank_runs(self):
        assert final_cleanup("a  \n\n\n\n\nb\t") == "a\n\n\nb"

    def test_keep_tail(self):
        assert final_cleanup("a  \nword ", keep_tail=True) == "a\nword "


class TestIdempotence:

    @pytest.mark.parametrize("text", [
        "# Introduction\n\nSome body text.\n\n## Scope\n\n- one\n- two\n\n1. first\n2. second",
        "INTRODUCTION\nThis explains things. It has \"quotes\".\n* a\n* b\n\n|A|B|\n|1|2|",
        "Setup Guide\n===========\n\n```\ndef f(self):\n    return self.x.split(',')\n```",
    ])
    def test_second_pass_changes_at_most_whitespace(self, format_text, text):
        once = format_text(text)
        twice = format_text(once)
        assert re.sub(r'\s+', '', twice) == re.sub(r'\s+', '', once)

    def test_rules_not_mutated(self, format_text):
        rules = FormattingRuleSet.default()
        before = rules.to_dict()
        format_text("INTRODUCTION\n* a", rules)
        assert rules.to_dict() == before
