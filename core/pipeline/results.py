"""
Pipeline inputs and outputs: per-call options and the formatting result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from config.constants import (
    CHUNK_SIZE,
    FULL_NORMALIZE_MAX_CHARS,
    HUGE_DOCUMENT_THRESHOLD,
    LARGE_DOCUMENT_THRESHOLD,
    STAGE_WARN_SECONDS,
)
from core.formatting.document_stats import DocumentMetadata
from core.formatting.models import DocumentStructure


@dataclass(frozen=True)
class FormatOptions:
    """
    Size and mode options for one format() call.

    Attributes:
        large_document_threshold: Above this many chars the input is chunked
        huge_document_threshold: Above this many chars the document is flagged huge
        chunk_size: Characters per chunk in chunked mode
        chunking_strategy: 'fixed' (character offsets) or 'paragraph'
        full_normalize_max_chars: Full HTML normalization only below this size
        stage_warn_seconds: Slow stage warning threshold
    """
    large_document_threshold: int = LARGE_DOCUMENT_THRESHOLD
    huge_document_threshold: int = HUGE_DOCUMENT_THRESHOLD
    chunk_size: int = CHUNK_SIZE
    chunking_strategy: str = "fixed"
    full_normalize_max_chars: int = FULL_NORMALIZE_MAX_CHARS
    stage_warn_seconds: float = STAGE_WARN_SECONDS

    @classmethod
    def from_settings(cls, settings) -> "FormatOptions":
        return cls(
            large_document_threshold=settings.large_document_threshold,
            huge_document_threshold=settings.huge_document_threshold,
            chunk_size=settings.chunk_size,
            chunking_strategy=settings.chunking_strategy,
            full_normalize_max_chars=settings.full_normalize_max_chars,
            stage_warn_seconds=settings.stage_warn_seconds,
        )


@dataclass(frozen=True)
class FormattingResult:
    """
    Output of a completed formatting job.

    Independent of the pipeline that produced it. The structure describes
    the input text (line indexes and offsets refer to the input).
    """
    formatted_text: str
    structure: DocumentStructure
    metadata: DocumentMetadata
    job_id: str = ""
    chunk_count: int = 1
    fallback_chunks: int = 0
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def chunked(self) -> bool:
        return self.chunk_count > 1

    def to_dict(self, include_structure: bool = True) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "job_id": self.job_id,
            "formatted_text": self.formatted_text,
            "metadata": self.metadata.to_dict(),
            "chunk_count": self.chunk_count,
            "fallback_chunks": self.fallback_chunks,
            "timings": dict(self.timings),
        }
        if include_structure:
            data["structure"] = self.structure.to_dict()
        return data

