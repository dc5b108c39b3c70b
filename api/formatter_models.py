"""
Formatter API Models

Pydantic models for the document formatting endpoints.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from enum import Enum


class RulePreset(str, Enum):
    """Built-in rule presets"""
    DEFAULT = "default"
    MINIMAL = "minimal"
    ACADEMIC = "academic"


class ChunkingStrategy(str, Enum):
    """How large documents are split"""
    FIXED = "fixed"
    PARAGRAPH = "paragraph"


# ==================== REQUEST MODELS ====================

class FormatRequest(BaseModel):
    """Request to format a document"""
    text: str = Field(..., description="Document text (plain or Markdown)")
    preset: RulePreset = Field(default=RulePreset.DEFAULT, description="Rule preset")
    rules: Optional[Dict[str, Dict[str, bool]]] = Field(
        default=None,
        description="Full rule set (camelCase groups and flags); overrides preset",
    )
    chunk_size: Optional[int] = Field(default=None, gt=0, description="Characters per chunk")
    large_document_threshold: Optional[int] = Field(
        default=None, gt=0, description="Chunk documents longer than this"
    )
    chunking_strategy: Optional[ChunkingStrategy] = Field(default=None)
    include_structure: bool = Field(default=False, description="Return the structure inventory")

    class Config:
        json_schema_extra = {
            "example": {
                "text": "INTRODUCTION\n\nThis is an example.\n\n1.1 Scope\n\nDetails.",
                "preset": "default",
                "chunking_strategy": "fixed",
            }
        }


class AnalyzeRequest(BaseModel):
    """Request to analyze document structure"""
    text: str = Field(..., description="Document text")
    preset: RulePreset = Field(default=RulePreset.DEFAULT)


class HtmlRequest(BaseModel):
    """HTML fragment to sanitize or validate"""
    html: str = Field(..., description="HTML content")


class MergeStrategyName(str, Enum):
    """How sections of the same type are merged"""
    COMBINE = "combine"
    SEPARATE = "separate"
    PRIORITY = "priority"
    DEDUPE = "dedupe"


class SectionsRequest(BaseModel):
    """Request to detect typed sections"""
    text: str = Field(..., description="Document text")


class SourceDocumentRequest(BaseModel):
    name: str = Field(..., min_length=1, description="Source name, e.g. a file name")
    content: str = Field(..., description="Document text")
    author: Optional[str] = None


class MergeRequest(BaseModel):
    """Request to merge several documents"""
    documents: List[SourceDocumentRequest] = Field(..., min_length=1)
    strategy: MergeStrategyName = Field(default=MergeStrategyName.COMBINE)
    include_toc: bool = Field(default=True, description="Prepend a table of contents")

    class Config:
        json_schema_extra = {
            "example": {
                "documents": [
                    {"name": "charter.md", "content": "# Executive Summary\nA short project."},
                    {"name": "plan.md", "content": "# Timeline\nQ1 kickoff."},
                ],
                "strategy": "combine",
            }
        }


# ==================== RESPONSE MODELS ====================

class MetadataResponse(BaseModel):
    """Formatting result metadata"""
    word_count: int
    character_count: int
    header_count: int
    code_block_count: int
    table_count: int
    estimated_reading_minutes: int


class PreviewResponse(BaseModel):
    """Preview admission decision"""
    mode: str
    text: str = ""
    truncated: bool = False


class FormatResponse(BaseModel):
    """Formatted document"""
    job_id: str
    formatted_text: str
    metadata: MetadataResponse
    chunk_count: int = Field(ge=1)
    fallback_chunks: int = Field(ge=0)
    timings: Dict[str, float] = Field(default_factory=dict)
    preview: PreviewResponse
    structure: Optional[Dict[str, Any]] = None


class AnalyzeResponse(BaseModel):
    """Detected structure"""
    structure: Dict[str, Any]
    summary: Dict[str, int]
    outline: str


class SanitizeResponse(BaseModel):
    """Sanitized and normalized HTML"""
    html: str
    changed: bool


class ValidationIssueResponse(BaseModel):
    code: str
    message: str


class ValidateResponse(BaseModel):
    """HTML validation report"""
    is_valid: bool
    issues: List[ValidationIssueResponse]
    stats: Dict[str, int]


class SectionsResponse(BaseModel):
    """Typed sections of one document"""
    sections: List[Dict[str, Any]]
    table_count: int


class MergeResponse(BaseModel):
    """Merged document"""
    markdown: str
    sections: List[Dict[str, Any]]
    strategy: str
    document_count: int
    failed_count: int
    errors: List[str]
    authors: List[str]
    sources: List[str]


class HealthResponse(BaseModel):
    """Service health"""
    status: str
    version: str
    memory_mb: float


class ErrorResponse(BaseModel):
    """Error payload"""
    detail: str
