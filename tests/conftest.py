"""
Pytest configuration and shared fixtures for Document Formatter tests.
"""
import sys
import pytest
from pathlib import Path
from typing import List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.formatting.analyzer import StructureAnalyzer
from core.formatting.rules import FormattingRuleSet
from core.formatting.transformer import RuleEngine
from core.pipeline import ChunkedPipeline, FormatOptions, ManualScheduler, ProgressEvent
from core.sanitizer import HTMLNormalizer


# ============================================================================
# Fixtures: Components
# ============================================================================

@pytest.fixture
def analyzer():
    """Structure analyzer with the default acceptance threshold."""
    return StructureAnalyzer()


@pytest.fixture
def engine():
    """Rule engine."""
    return RuleEngine()


@pytest.fixture
def normalizer():
    """HTML normalizer."""
    return HTMLNormalizer()


@pytest.fixture
def default_rules():
    return FormattingRuleSet.default()


@pytest.fixture
def no_reference_rules():
    """Default rules without TOC and appendix."""
    return FormattingRuleSet.default().with_group(
        "references", auto_link=False, generate_appendix=False
    )


@pytest.fixture
def format_text(analyzer, engine):
    """Analyze then transform, as the pipeline does for one chunk."""
    def _format(text, rules=None):
        rules = rules or FormattingRuleSet.default()
        return engine.transform(text, analyzer.analyze(text, rules), rules)
    return _format


# ============================================================================
# Fixtures: Pipeline
# ============================================================================

@pytest.fixture
def small_chunk_options():
    """Chunk anything over 200 chars into 100-char chunks."""
    return FormatOptions(large_document_threshold=200, chunk_size=100)


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def pipeline():
    """Pipeline that never parks between chunks."""
    return ChunkedPipeline(scheduler=ManualScheduler(auto_advance=True))


@pytest.fixture
def progress_events() -> List[ProgressEvent]:
    """List collecting progress events; pass .append as on_progress."""
    return []


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def sample_document():
    """Small document exercising every element type."""
    return (
        "INTRODUCTION\n"
        "This guide explains the setup. It is short.\n"
        "\n"
        "1.1 Requirements\n"
        "* Python 3\n"
        "+ A terminal\n"
        "\n"
        "```\n"
        "def main():\n"
        "    print('hello')\n"
        "```\n"
        "\n"
        "|Name|Value|\n"
        "|a|1|\n"
        "\n"
        "Conclusion\n"
        "That is all.\n"
    )


def build_large_document(sections: int = 30, section_chars: int = 9_000) -> str:
    """Markdown document of `sections` level-2 sections with long bodies."""
    filler = "lorem ipsum dolor sit amet "
    body = filler * (section_chars // len(filler))
    parts = []
    for number in range(1, sections + 1):
        parts.append(f"## Part {number}\n\n{body.strip()}\n")
    return "\n".join(parts)


@pytest.fixture
def large_document():
    return build_large_document()
