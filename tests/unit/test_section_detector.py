"""
Unit Tests for SectionDetector

Typed section titles, numbering, subsections and table extraction.
"""

import pytest

from core.errors import InputError
from core.formatting.section_detector import SectionDetector
from core.formatting.utils.section_patterns import SectionType


CHARTER = """# Executive Summary
A new billing platform.

## Project Objectives
1.1 Reduce invoice errors
Details on errors.
1.2 Cut processing time
Details on speed.

## Risk Register
| Risk | Impact |
| --- | --- |
| Vendor delay | High |

## Timeline
Kickoff in March.
"""


@pytest.fixture
def detector():
    return SectionDetector()


class TestDetectHeading:

    def test_markdown_heading_on_first_line(self, detector):
        match = detector.detect_heading("# Executive Summary", 0)
        assert match.type == SectionType.EXECUTIVE_SUMMARY
        assert match.confidence == 1.0

    def test_plain_title_keeps_base_weight(self, detector):
        match = detector.detect_heading("Budget", 5)
        assert match.type == SectionType.BUDGET
        assert match.confidence == pytest.approx(0.8)

    def test_heading_marker_boosts_score(self):
        strict = SectionDetector(confidence_threshold=0.9)
        assert strict.detect_heading("Budget", 5) is None
        assert strict.detect_heading("## Budget", 5).type == SectionType.BUDGET

    @pytest.mark.parametrize("line", ["", "ab", "Some ordinary sentence."])
    def test_not_a_section(self, detector, line):
        assert detector.detect_heading(line, 3) is None

    def test_long_lines_are_body_text(self, detector):
        assert detector.detect_heading("cost " * 50, 3) is None

    @pytest.mark.parametrize("line,section_type", [
        ("Project Goals", SectionType.OBJECTIVES),
        ("Scope", SectionType.SCOPE),
        ("Key Stakeholders", SectionType.STAKEHOLDERS),
        ("Work Breakdown Structure", SectionType.WBS),
        ("Milestones", SectionType.TIMELINE),
        ("Approvals", SectionType.APPROVALS),
    ])
    def test_section_types(self, detector, line, section_type):
        assert detector.detect_heading(line, 4).type == section_type


class TestDetectSections:

    def test_charter_sections(self, detector):
        sections = detector.detect_sections(CHARTER)
        assert [s.type for s in sections] == [
            SectionType.EXECUTIVE_SUMMARY,
            SectionType.OBJECTIVES,
            SectionType.RISKS,
            SectionType.TIMELINE,
        ]
        assert (sections[0].start_line, sections[0].end_line) == (0, 2)
        assert sections[0].body == "A new billing platform."
        assert sections[-1].end_line == len(CHARTER.split('\n')) - 1

    def test_text_before_first_section_is_dropped(self, detector):
        sections = detector.detect_sections("Preamble\n# Scope\nText")
        assert len(sections) == 1
        assert sections[0].start_line == 1
        assert sections[0].content == ["Text"]

    def test_empty_text(self, detector):
        assert detector.detect_sections("") == []

    def test_none_rejected(self, detector):
        with pytest.raises(InputError):
            detector.detect_sections(None)


class TestNumbering:

    def test_numbering_and_subsections(self, detector):
        sections = detector.number_sections(detector.detect_sections(CHARTER))
        assert [s.numbering for s in sections] == ["1.0", "2.0", "3.0", "4.0"]
        objectives = sections[1]
        assert [s.numbering for s in objectives.subsections] == ["2.1", "2.2"]
        assert objectives.subsections[0].title == "1.1 Reduce invoice errors"
        assert objectives.subsections[0].content == ["Details on errors."]

    def test_indented_bullets_open_subsections(self, detector):
        subsections = detector.detect_subsections(["  - first", "text", "  * second"])
        assert [s.title for s in subsections] == ["- first", "* second"]

    def test_to_dict(self, detector):
        data = detector.number_sections(detector.detect_sections(CHARTER))[1].to_dict()
        assert data["type"] == "objectives"
        assert data["numbering"] == "2.0"
        assert len(data["subsections"]) == 2


class TestTables:

    def test_rows_without_separator(self, detector):
        risks = detector.detect_sections(CHARTER)[2]
        assert detector.extract_tables(risks.content) == [
            [["Risk", "Impact"], ["Vendor delay", "High"]],
        ]

    def test_blank_line_splits_tables(self, detector):
        lines = ["| A |", "", "| B |", "| C |"]
        assert detector.extract_tables(lines) == [[["A"]], [["B"], ["C"]]]

    def test_no_tables(self, detector):
        assert detector.extract_tables(["plain", "text"]) == []
