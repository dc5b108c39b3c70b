#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Document Formatting Engine

Structure inference and rule-based formatting for plain and loosely
formatted text.

Stages:
1. Structure Analysis - Detect headings, code, tables; build section tree
2. Rule Engine - Rewrite headers, lists, tables, code and typography
3. References - Table of contents and section appendix
4. Merging - Typed sections of several documents combined into one
"""

__version__ = "1.0.0"

# Stage 1: Analysis
from .analyzer import StructureAnalyzer, build_sections, refine_hierarchy
from .models import (
    CodeBlock,
    Document,
    DocumentStructure,
    HeaderCandidate,
    Section,
    Table,
)

# Stage 2: Rules and transformation
from .rules import (
    CodeRules,
    FormattingRuleSet,
    HeaderRules,
    ListRules,
    ReferenceRules,
    TableRules,
    TypographyRules,
)
from .transformer import RuleEngine, final_cleanup
from .fallback import fallback_format

# Stage 3: References
from .toc_generator import TocEntry, TocGenerator, slugify

# Typed sections and merging
from .section_detector import SectionDetector, SectionMatch, Subsection, TypedSection
from .utils.section_patterns import SectionType
from .merger import (
    DocumentMerger,
    MergedSection,
    MergeResult,
    MergeStrategy,
    SourceDocument,
    content_hash,
)

# Metadata
from .document_stats import (
    DocumentMetadata,
    DocumentStats,
    analyze_text_stats,
    build_metadata,
    get_recommendations,
)

__all__ = [
    # Analysis
    'StructureAnalyzer',
    'refine_hierarchy',
    'build_sections',
    'Document',
    'DocumentStructure',
    'HeaderCandidate',
    'Section',
    'CodeBlock',
    'Table',
    # Rules
    'FormattingRuleSet',
    'HeaderRules',
    'ListRules',
    'TableRules',
    'CodeRules',
    'ReferenceRules',
    'TypographyRules',
    'RuleEngine',
    'final_cleanup',
    'fallback_format',
    # References
    'TocGenerator',
    'TocEntry',
    'slugify',
    # Typed sections and merging
    'SectionDetector',
    'SectionMatch',
    'SectionType',
    'Subsection',
    'TypedSection',
    'DocumentMerger',
    'MergedSection',
    'MergeResult',
    'MergeStrategy',
    'SourceDocument',
    'content_hash',
    # Metadata
    'DocumentMetadata',
    'DocumentStats',
    'build_metadata',
    'analyze_text_stats',
    'get_recommendations',
]
