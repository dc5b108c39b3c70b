"""
Formatter API Router

FastAPI endpoints for structure analysis, formatting, document merging
and HTML cleanup.
"""

import dataclasses

from fastapi import APIRouter, HTTPException

from config.logging_config import get_logger
from config.settings import settings
from core.errors import FormattingCancelledError, InputError, MergeError, PipelineError
from core.formatting.analyzer import StructureAnalyzer
from core.formatting.merger import DocumentMerger, SourceDocument
from core.formatting.section_detector import SectionDetector
from core.formatting.rules import FormattingRuleSet
from core.pipeline import ChunkedPipeline, FormatOptions, PreviewPolicy
from core.sanitizer import HTMLNormalizer

from .formatter_models import (
    AnalyzeRequest,
    AnalyzeResponse,
    ErrorResponse,
    FormatRequest,
    FormatResponse,
    HtmlRequest,
    MergeRequest,
    MergeResponse,
    PreviewResponse,
    SanitizeResponse,
    SectionsRequest,
    SectionsResponse,
    ValidateResponse,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Document Formatter"])


def _resolve_rules(preset: str, rules=None) -> FormattingRuleSet:
    try:
        if rules is not None:
            return FormattingRuleSet.from_dict(rules)
        return FormattingRuleSet.preset(preset)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid rules: {e}")


def _resolve_options(request: FormatRequest) -> FormatOptions:
    overrides = {}
    if request.chunk_size is not None:
        overrides["chunk_size"] = request.chunk_size
    if request.large_document_threshold is not None:
        overrides["large_document_threshold"] = request.large_document_threshold
    if request.chunking_strategy is not None:
        overrides["chunking_strategy"] = request.chunking_strategy.value
    return dataclasses.replace(FormatOptions.from_settings(settings), **overrides)


# ==================== FORMAT ====================

@router.post(
    "/format",
    response_model=FormatResponse,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Format a document",
)
async def format_document(request: FormatRequest):
    """
    Analyze and format a document.

    Documents above the large-document threshold are processed in chunks.
    The response carries a preview decision so clients can avoid rendering
    very large results in full.
    """
    rules = _resolve_rules(request.preset.value, request.rules)
    options = _resolve_options(request)

    # One pipeline per request: a shared pipeline would cancel concurrent jobs
    pipeline = ChunkedPipeline.from_settings(settings)
    try:
        result = await pipeline.format(request.text, rules=rules, options=options)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FormattingCancelledError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PipelineError as e:
        logger.error(f"Format request failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    decision = PreviewPolicy.from_settings(settings).decide(result.formatted_text)
    return FormatResponse(
        job_id=result.job_id,
        formatted_text=result.formatted_text,
        metadata=result.metadata.to_dict(),
        chunk_count=result.chunk_count,
        fallback_chunks=result.fallback_chunks,
        timings=result.timings,
        preview=PreviewResponse(mode=decision.mode.value, text=decision.text, truncated=decision.truncated),
        structure=result.structure.to_dict() if request.include_structure else None,
    )


@router.get("/presets", summary="List rule presets")
async def list_presets():
    """Rule sets of the built-in presets, keyed by name."""
    return {
        name: FormattingRuleSet.preset(name).to_dict()
        for name in ("default", "minimal", "academic")
    }


# ==================== ANALYZE ====================

@router.post("/analyze", response_model=AnalyzeResponse, summary="Detect document structure")
async def analyze_document(request: AnalyzeRequest):
    rules = _resolve_rules(request.preset.value)
    analyzer = StructureAnalyzer(threshold=settings.heading_threshold)
    structure = analyzer.analyze(request.text, rules)
    return AnalyzeResponse(
        structure=structure.to_dict(),
        summary=analyzer.summarize(structure),
        outline=analyzer.outline(structure),
    )


# ==================== SECTIONS / MERGE ====================

@router.post("/sections", response_model=SectionsResponse, summary="Detect typed sections")
async def detect_sections(request: SectionsRequest):
    detector = SectionDetector(confidence_threshold=settings.section_threshold)
    sections = detector.number_sections(detector.detect_sections(request.text))
    table_count = sum(len(detector.extract_tables(s.content)) for s in sections)
    return SectionsResponse(sections=[s.to_dict() for s in sections], table_count=table_count)


@router.post(
    "/merge",
    response_model=MergeResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    summary="Merge documents",
)
async def merge_documents(request: MergeRequest):
    """
    Merge the typed sections of several documents into one.

    Returns 422 when no source could be read.
    """
    merger = DocumentMerger.from_settings(settings)
    documents = [
        SourceDocument(name=d.name, content=d.content, author=d.author)
        for d in request.documents
    ]
    try:
        result = merger.merge(documents, strategy=request.strategy.value)
    except InputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except MergeError as e:
        raise HTTPException(status_code=422, detail=str(e))

    data = result.to_dict()
    return MergeResponse(
        markdown=result.to_markdown(toc=request.include_toc),
        sections=data["sections"],
        strategy=data["strategy"],
        document_count=data["document_count"],
        failed_count=data["failed_count"],
        errors=data["errors"],
        authors=data["authors"],
        sources=data["sources"],
    )


# ==================== HTML ====================

@router.post("/sanitize", response_model=SanitizeResponse, summary="Sanitize HTML")
async def sanitize_html(request: HtmlRequest, normalize: bool = False):
    """
    Remove scripts, event handlers and embedded content.

    With normalize=true the structure-preserving normalization runs as well.
    """
    normalizer = HTMLNormalizer(settings.full_normalize_max_chars)
    html = normalizer.normalize(request.html) if normalize else normalizer.sanitize(request.html)
    return SanitizeResponse(html=html, changed=html != request.html)


@router.post("/validate", response_model=ValidateResponse, summary="Validate HTML structure")
async def validate_html(request: HtmlRequest):
    report = HTMLNormalizer().validate(request.html)
    return ValidateResponse(**report.to_dict())
