"""
Unit Tests for StructureAnalyzer

Covers heading detection and hierarchy, code block detection with
language classification, table detection and the section tree.
"""

import pytest

from core.formatting.analyzer import StructureAnalyzer, build_sections, refine_hierarchy
from core.formatting.models import HeaderCandidate
from core.formatting.rules import FormattingRuleSet
from core.formatting.utils.code_patterns import count_signature_hits, detect_language


def _header(level, title="T", line=0):
    return HeaderCandidate(
        text=title, normalized_title=title, level=level, line_index=line,
        confidence=0.95, source_pattern="markdown",
    )


class TestHeadingDetection:
    """Test header inventory."""

    def test_all_caps_introduction(self, analyzer):
        structure = analyzer.analyze("INTRODUCTION\nSome body.")
        assert len(structure.headers) == 1
        header = structure.headers[0]
        assert header.level == 1
        assert header.confidence >= 0.85
        assert header.line_index == 0

    def test_numbered_subsection(self, analyzer):
        structure = analyzer.analyze("1.1 Subsection\nContent")
        assert [h.level for h in structure.headers] == [2]
        assert structure.headers[0].normalized_title == "1.1 Subsection"

    def test_setext_heading_consumes_underline(self, analyzer):
        structure = analyzer.analyze("Project Overview\n================\nText here")
        assert len(structure.headers) == 1
        assert structure.headers[0].consumes_next_line is True
        assert structure.headers[0].level == 1

    def test_headings_inside_code_are_ignored(self, analyzer):
        text = "```\n# not a heading\nINTRODUCTION\n```\n# Real Heading"
        structure = analyzer.analyze(text)
        assert [h.normalized_title for h in structure.headers] == ["Real Heading"]

    def test_rules_disable_families(self, analyzer):
        rules = FormattingRuleSet.default().with_group(
            "headers", detectAllCaps=False, detectNumbers=False, detectColons=False
        )
        structure = analyzer.analyze("GETTING STARTED\n2.1 Scope Of Work\nSettings:", rules)
        assert structure.headers == []

    def test_threshold_filters_weak_matches(self):
        strict = StructureAnalyzer(threshold=0.9)
        structure = strict.analyze("Installation Steps:\n# Marked")
        assert [h.source_pattern for h in structure.headers] == ["markdown"]


class TestHierarchy:
    """Test level clamping."""

    def test_jump_is_clamped(self, analyzer):
        structure = analyzer.analyze("# Top\n#### Deep\n## Back")
        assert [h.level for h in structure.headers] == [1, 2, 2]
        assert structure.headers[1].adjusted_from == 4

    def test_first_header_keeps_level(self, analyzer):
        structure = analyzer.analyze("### Starts Deep\n# Top")
        assert [h.level for h in structure.headers] == [3, 1]

    def test_previous_level_continues_hierarchy(self, analyzer):
        structure = analyzer.analyze("#### Deep", previous_level=1)
        assert structure.headers[0].level == 2

    @pytest.mark.parametrize("levels", [
        [1, 6, 6, 2, 5],
        [2, 4, 1, 3],
        [3, 3, 6],
    ])
    def test_levels_never_jump_more_than_one(self, levels):
        headers = refine_hierarchy([_header(level) for level in levels])
        for previous, current in zip(headers, headers[1:]):
            assert current.level <= previous.level + 1


class TestSections:
    """Test section tree construction."""

    def test_tree_and_numbering(self):
        headers = [_header(1, "A"), _header(2, "A1"), _header(2, "A2"), _header(1, "B"), _header(2, "B1")]
        roots = build_sections(headers)
        assert [s.title for s in roots] == ["A", "B"]
        assert [c.title for c in roots[0].children] == ["A1", "A2"]
        assert roots[0].children[1].numbering == "1.2"
        assert roots[1].children[0].numbering == "2.1"
        assert roots[1].children[0].parent is roots[1]

    def test_equal_level_pops_sibling(self):
        roots = build_sections([_header(2, "X"), _header(2, "Y")])
        assert len(roots) == 2
        assert roots[1].depth == 0

    def test_walk_order(self, analyzer):
        structure = analyzer.analyze("# A\n## B\n### C\n# D")
        assert [s.title for s in structure.iter_sections()] == ["A", "B", "C", "D"]


class TestCodeDetection:
    """Test code blocks and language classification."""

    def test_fenced_javascript(self, analyzer):
        text = "Intro\n```javascript\n\nconst x = 1;\n  return x;\n\n```\nAfter"
        structure = analyzer.analyze(text)
        assert len(structure.code_blocks) == 1
        block = structure.code_blocks[0]
        assert block.language == "javascript"
        assert block.code == "const x = 1;\n  return x;"
        assert block.explicit_language is True

    def test_untagged_fence_is_classified(self, analyzer):
        text = "```\ndef main(self):\n    items.append(1)\n```"
        block = analyzer.analyze(text).code_blocks[0]
        assert block.language == "python"
        assert block.explicit_language is False

    def test_indented_block(self, analyzer):
        text = "Example:\n\n    SELECT id FROM users\n    JOIN orders ON id\n\nDone"
        blocks = analyzer.analyze(text).code_blocks
        assert len(blocks) == 1
        assert blocks[0].kind == "indented"
        assert blocks[0].language == "sql"
        assert blocks[0].code == "SELECT id FROM users\nJOIN orders ON id"

    def test_single_indented_line_is_not_code(self, analyzer):
        assert analyzer.analyze("Text\n    one line\nText").code_blocks == []

    def test_indented_list_items_are_not_code(self, analyzer):
        text = "- item\n    - nested one\n    - nested two"
        assert analyzer.analyze(text).code_blocks == []

    def test_inline_code_kept_separately(self, analyzer):
        structure = analyzer.analyze("Run `make test` and `make lint`.")
        assert structure.code_blocks == []
        assert [c.code for c in structure.inline_code] == ["make test", "make lint"]

    def test_one_signature_is_text(self):
        code = "System.out.println(value)"
        assert count_signature_hits(code, "java") == 1
        assert detect_language(code) == "text"

    def test_two_signatures_classify(self):
        assert detect_language("public class App { }\nSystem.out.println(1);") == "java"

    def test_priority_order_breaks_ties(self):
        # Hits both javascript (const, .map) and css ({...}); javascript is checked first
        assert detect_language("const x = items.map(i => { return i; });") == "javascript"


class TestTableDetection:

    def test_contiguous_rows_form_one_table(self, analyzer):
        structure = analyzer.analyze("|A|B|\n|---|---|\n|1|2|\n\n|C|\n|3|")
        assert len(structure.tables) == 2
        first = structure.tables[0]
        assert first.has_separator is True
        assert first.rows == [["A", "B"], ["1", "2"]]
        assert (first.start_line, first.end_line) == (0, 2)

    def test_ragged_rows_are_kept(self, analyzer):
        table = analyzer.analyze("|A|B|C|\n|1|").tables[0]
        assert table.rows == [["A", "B", "C"], ["1"]]
        assert table.column_count == 3


class TestConvenience:

    def test_outline(self, analyzer):
        assert analyzer.get_outline("# A\n## B") == "H1: A\n  H2: B"

    def test_summary(self, analyzer, sample_document):
        summary = analyzer.get_structure_summary(sample_document)
        assert summary["headers"] == 3
        assert summary["code_blocks"] == 1
        assert summary["tables"] == 1

    def test_analysis_is_deterministic(self, analyzer, sample_document):
        assert analyzer.analyze(sample_document).to_dict() == analyzer.analyze(sample_document).to_dict()
