"""
Unit Tests for document metadata and statistics
"""

from core.formatting.document_stats import (
    analyze_text_stats,
    build_metadata,
    get_recommendations,
    reading_minutes,
)
from core.formatting.models import DocumentStructure


class TestMetadata:

    def test_counts(self, analyzer, sample_document):
        structure = analyzer.analyze(sample_document)
        meta = build_metadata(sample_document, structure)
        assert meta.word_count == len(sample_document.split())
        assert meta.character_count == len(sample_document)
        assert meta.header_count == 3
        assert meta.code_block_count == 1
        assert meta.table_count == 1
        assert meta.estimated_reading_minutes == 1

    def test_empty_text(self):
        meta = build_metadata("", DocumentStructure())
        assert meta.word_count == 0
        assert meta.estimated_reading_minutes == 0

    def test_reading_minutes_round_up(self):
        assert reading_minutes(250) == 1
        assert reading_minutes(251) == 2

    def test_to_dict(self):
        assert set(build_metadata("a b", DocumentStructure()).to_dict()) == {
            "word_count", "character_count", "header_count",
            "code_block_count", "table_count", "estimated_reading_minutes",
        }


class TestStats:

    def test_shape(self):
        stats = analyze_text_stats("# Title\n\nPara one.\n\n- a\n- b\n\n|x|y|")
        assert stats.headings == 1
        assert stats.paragraphs == 4
        assert stats.lists == 2
        assert stats.tables == 1
        assert stats.is_large is False

    def test_large_flag(self):
        assert analyze_text_stats("x" * 11, large_threshold=10).is_large is True

    def test_recommendations(self):
        stats = analyze_text_stats("word " * 200_000, large_threshold=100_000)
        hints = get_recommendations(stats)
        assert any("Very large document" in h for h in hints)
        assert any("chunked mode" in h for h in hints)

    def test_no_recommendations_for_small_markdown(self):
        assert get_recommendations(analyze_text_stats("# Title\n\nBody")) == []
