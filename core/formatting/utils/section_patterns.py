#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Section Type Patterns - Weighted title patterns for typed sections.

Project documents share a small vocabulary of section titles (executive
summary, scope, risks, ...). Each type carries a list of title patterns
and a base weight; the detector scores every type against a line and
keeps the best.
"""

import re
from enum import Enum
from typing import Dict, List, NamedTuple, Pattern


class SectionType(str, Enum):
    """Known section types."""
    EXECUTIVE_SUMMARY = "executive_summary"
    OBJECTIVES = "objectives"
    SCOPE = "scope"
    STAKEHOLDERS = "stakeholders"
    RISKS = "risks"
    WBS = "wbs"
    TIMELINE = "timeline"
    BUDGET = "budget"
    APPROVALS = "approvals"


class SectionPatternSet(NamedTuple):
    patterns: List[Pattern]
    weight: float


def _compile(*patterns: str) -> List[Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


SECTION_PATTERNS: Dict[SectionType, SectionPatternSet] = {
    SectionType.EXECUTIVE_SUMMARY: SectionPatternSet(_compile(
        r'executive\s+summary',
        r'^summary$',
        r'project\s+overview',
        r'high.?level\s+summary',
    ), 1.0),
    SectionType.OBJECTIVES: SectionPatternSet(_compile(
        r'project\s+objectives?',
        r'\bgoals?\b',
        r'key\s+objectives',
        r'aims?\s+and?\s+objectives',
    ), 0.95),
    SectionType.SCOPE: SectionPatternSet(_compile(
        r'scope\s+(?:of\s+)?(?:work|statement)',
        r'project\s+scope',
        r'^scope$',
        r'in\s+scope\s+and\s+out\s+of\s+scope',
    ), 0.9),
    SectionType.STAKEHOLDERS: SectionPatternSet(_compile(
        r'stakeholders?',
        r'\bparties\b|\bparty\b',
    ), 0.9),
    SectionType.RISKS: SectionPatternSet(_compile(
        r'risks?\s+register',
        r'risk\s+management',
        r'risk\s+assessment',
        r'identified\s+risks',
    ), 0.95),
    SectionType.WBS: SectionPatternSet(_compile(
        r'work\s+breakdown\s+structure',
        r'\bwbs\b',
        r'project\s+structure',
        r'work\s+structure',
    ), 1.0),
    SectionType.TIMELINE: SectionPatternSet(_compile(
        r'timeline',
        r'milestones?',
        r'schedule',
    ), 0.85),
    SectionType.BUDGET: SectionPatternSet(_compile(
        r'budget',
        r'financial',
        r'\bcosts?\b',
    ), 0.8),
    SectionType.APPROVALS: SectionPatternSet(_compile(
        r'^approvals?$',
        r'sign.?off',
        r'approval\s+(?:sheet|record|signatures)',
    ), 0.9),
}

# Markdown heading, or a setext/rule line
HEADING_FORMATTED = re.compile(r'^#+\s|^={2,}$|^-{2,}$')

# "1.2 Title" or an indented bullet opens a subsection
SUBSECTION_LINE = re.compile(r'^\s*\d+\.\d+\s|^\s{2,}[-*]\s')

HEADING_BOOST = 1.2
FIRST_LINE_BOOST = 1.05
