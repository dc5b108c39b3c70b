"""
Chunked formatting pipeline.

Runs analysis and transformation over a document (split into chunks
when it is large), then adds the job-wide TOC and appendix, normalizes
the output once and attaches metadata.

Flow:
    text -> [chunk -> analyze -> transform -> progress -> yield]*
         -> TOC/appendix -> normalize -> cleanup -> metadata -> result
"""

import asyncio
import dataclasses
from typing import List, Optional, Tuple

from config.constants import PROGRESS_SANITIZE
from config.logging_config import get_logger

from core.errors import (
    EngineError,
    FormattingCancelledError,
    InputError,
    PipelineError,
)
from core.formatting.analyzer import StructureAnalyzer, build_sections
from core.formatting.document_stats import build_metadata
from core.formatting.fallback import fallback_format
from core.formatting.models import Document, DocumentStructure
from core.formatting.rules import FormattingRuleSet
from core.formatting.toc_generator import TocGenerator
from core.formatting.transformer import RuleEngine, final_cleanup
from core.sanitizer.html_normalizer import HTMLNormalizer

from .chunker import Chunk, get_chunker
from .job import CancellationToken, JobState, ProcessingJob
from .performance import PerformanceMonitor
from .progress_tracker import ProgressCallback, ProgressTracker
from .results import FormatOptions, FormattingResult
from .scheduler import AsyncioScheduler, Scheduler

logger = get_logger(__name__)


class ChunkedPipeline:
    """
    Formats documents of any size, one job at a time.

    Starting a new job while another is still running cancels the older
    one; it settles as cancelled at its next chunk boundary.

    Usage:
        pipeline = ChunkedPipeline()
        result = await pipeline.format(text, on_progress=print)
        print(result.formatted_text)

        # Synchronous callers
        result = pipeline.format_sync(text)
    """

    def __init__(
        self,
        analyzer: Optional[StructureAnalyzer] = None,
        engine: Optional[RuleEngine] = None,
        normalizer: Optional[HTMLNormalizer] = None,
        scheduler: Optional[Scheduler] = None,
        options: Optional[FormatOptions] = None,
    ):
        """
        Args:
            analyzer: Structure analyzer (default: StructureAnalyzer())
            engine: Rule engine (default: RuleEngine())
            normalizer: Output normalizer (default: built per job from options)
            scheduler: Yield strategy between chunks (default: AsyncioScheduler())
            options: Default options for jobs that do not pass their own
        """
        self.analyzer = analyzer or StructureAnalyzer()
        self.engine = engine or RuleEngine()
        self.normalizer = normalizer
        self.scheduler = scheduler or AsyncioScheduler()
        self.options = options or FormatOptions()
        self._current_job: Optional[ProcessingJob] = None

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "ChunkedPipeline":
        """Pipeline configured from a Settings instance."""
        kwargs.setdefault("analyzer", StructureAnalyzer(threshold=settings.heading_threshold))
        kwargs.setdefault("scheduler", AsyncioScheduler(delay=settings.scheduler_delay))
        kwargs.setdefault("options", FormatOptions.from_settings(settings))
        return cls(**kwargs)

    @property
    def current_job(self) -> Optional[ProcessingJob]:
        """Most recently started job (it may have finished)."""
        return self._current_job

    def cancel(self, reason: str = "cancelled by caller") -> bool:
        """
        Cancel the running job, if any.

        Returns:
            True if an active job was signalled
        """
        job = self._current_job
        if job is None or not job.is_active:
            return False
        job.request_cancel(reason)
        logger.info(f"Cancellation requested for job {job.job_id}: {reason}")
        return True

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    async def format(
        self,
        text,
        rules: Optional[FormattingRuleSet] = None,
        options: Optional[FormatOptions] = None,
        token: Optional[CancellationToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> FormattingResult:
        """
        Format a document.

        Args:
            text: Input text (non-str values are converted with str())
            rules: Rule set (default: all rules enabled)
            options: Size/mode options (default: the pipeline's options)
            token: Cancellation token the caller can signal; it can be
                reused across calls, the job follows a linked child token
            on_progress: Called with each ProgressEvent

        Returns:
            FormattingResult

        Raises:
            InputError: text is None
            FormattingCancelledError: The job was cancelled
            PipelineError: Any other failure
        """
        if text is None:
            raise InputError("Input text is required")
        if not isinstance(text, str):
            text = str(text)
        text = text.replace('\r\n', '\n').replace('\r', '\n')

        rules = rules or FormattingRuleSet.default()
        options = options or self.options

        self.cancel("superseded by a new job")
        # Supersession cancels this linked token only
        job = ProcessingJob(token=token.linked() if token is not None else CancellationToken())
        self._current_job = job

        try:
            return await self._run(job, text, rules, options, on_progress)
        except FormattingCancelledError:
            logger.info(f"Job {job.job_id} cancelled after {job.chunks_done}/{job.total_chunks} chunks")
            raise
        except Exception as e:
            job.error = str(e)
            if not job.state.is_terminal:
                job.transition_to(JobState.FAILED)
            logger.error(f"Job {job.job_id} failed: {e}")
            if isinstance(e, PipelineError):
                raise
            raise PipelineError(f"Formatting failed: {e}") from e

    def format_sync(self, text, **kwargs) -> FormattingResult:
        """Run format() to completion on a fresh event loop."""
        return asyncio.run(self.format(text, **kwargs))

    # =========================================================================
    # JOB
    # =========================================================================

    async def _run(
        self,
        job: ProcessingJob,
        text: str,
        rules: FormattingRuleSet,
        options: FormatOptions,
        on_progress: Optional[ProgressCallback],
    ) -> FormattingResult:
        document = Document.from_text(
            text, options.large_document_threshold, options.huge_document_threshold
        )
        chunks = self._split(document, options)
        job.total_chunks = len(chunks)

        tracker = ProgressTracker(job.job_id, len(chunks))
        if on_progress is not None:
            tracker.add_callback(on_progress)
        monitor = PerformanceMonitor(warn_seconds=options.stage_warn_seconds)

        job.transition_to(JobState.RUNNING)
        logger.info(
            f"Job {job.job_id}: {len(text):,} chars, {len(chunks)} chunk(s)"
            + (" [huge]" if document.is_huge else "")
        )

        outputs: List[str] = []
        structure = DocumentStructure()
        previous_level: Optional[int] = None

        for chunk in chunks:
            self._check_cancelled(job)

            formatted, chunk_structure = self._process_chunk(job, chunk, rules, previous_level, monitor)
            outputs.append(formatted)
            if chunk_structure is not None:
                _merge_structure(structure, chunk_structure, chunk)
                if chunk_structure.headers:
                    previous_level = chunk_structure.headers[-1].level

            job.chunks_done += 1
            job.update_progress(tracker.chunk_done(job.chunks_done).percentage)
            await self.scheduler.yield_control(job.job_id, chunk.index)

        self._check_cancelled(job)
        structure.sections = build_sections(structure.headers)

        with monitor.measure("assembly"):
            body = self._assemble(''.join(outputs), structure, rules)

        job.update_progress(tracker.update(PROGRESS_SANITIZE, "sanitizing").percentage)
        normalizer = self.normalizer or HTMLNormalizer(options.full_normalize_max_chars)
        with monitor.measure("sanitize"):
            formatted_text = final_cleanup(normalizer.normalize(body)).strip()

        result = FormattingResult(
            formatted_text=formatted_text,
            structure=structure,
            metadata=build_metadata(formatted_text, structure),
            job_id=job.job_id,
            chunk_count=len(chunks),
            fallback_chunks=job.fallback_chunks,
            timings=monitor.timings(),
        )

        job.transition_to(JobState.COMPLETED)
        job.update_progress(tracker.finish().percentage)
        logger.info(
            f"Job {job.job_id} completed: {len(formatted_text):,} chars, "
            f"{len(structure.headers)} headers, {job.fallback_chunks} fallback chunk(s)"
        )
        return result

    @staticmethod
    def _split(document: Document, options: FormatOptions) -> List[Chunk]:
        if not document.is_large:
            return [Chunk.whole(document.text)]
        return get_chunker(options.chunking_strategy, options.chunk_size).split(document.text)

    def _process_chunk(
        self,
        job: ProcessingJob,
        chunk: Chunk,
        rules: FormattingRuleSet,
        previous_level: Optional[int],
        monitor: PerformanceMonitor,
    ) -> Tuple[str, Optional[DocumentStructure]]:
        """Primary path for one chunk; the fallback chain if it raises."""
        try:
            with monitor.measure("analysis"):
                structure = self.analyzer.analyze(chunk.raw_text, rules, previous_level=previous_level)
            with monitor.measure("transform"):
                formatted = self.engine.transform(
                    chunk.raw_text, structure, rules, open_ended=not chunk.is_last
                )
            return formatted, structure
        except Exception as e:
            error = EngineError(chunk.index, e)
            job.fallback_chunks += 1
            logger.warning(f"Job {job.job_id}: {error}; using fallback formatter")
            with monitor.measure("fallback"):
                return fallback_format(chunk.raw_text), None

    @staticmethod
    def _assemble(body: str, structure: DocumentStructure, rules: FormattingRuleSet) -> str:
        """Prepend the TOC and append the appendix, each at most once."""
        generator = TocGenerator(
            title_case=rules.headers.title_case and rules.headers.enforce_hierarchy,
            cross_reference=rules.references.cross_reference,
        )
        parts = []
        if rules.references.auto_link:
            parts.append(generator.build_toc(structure.headers))
        parts.append(body.strip('\n'))
        if rules.references.generate_appendix:
            parts.append(generator.build_appendix(structure.headers))
        return '\n\n'.join(part for part in parts if part)

    @staticmethod
    def _check_cancelled(job: ProcessingJob):
        if not job.token.is_cancelled:
            return
        if job.state == JobState.RUNNING:
            job.transition_to(JobState.CANCELLING)
        job.transition_to(JobState.CANCELLED)
        raise FormattingCancelledError(job.job_id, job.chunks_done)


def _merge_structure(target: DocumentStructure, source: DocumentStructure, chunk: Chunk):
    """Append a chunk's inventory with positions shifted to document coordinates."""
    for header in source.headers:
        target.headers.append(dataclasses.replace(
            header, line_index=header.line_index + chunk.start_line
        ))
    for block in source.code_blocks:
        target.code_blocks.append(_shift_block(block, chunk))
    for span in source.inline_code:
        target.inline_code.append(_shift_block(span, chunk))
    for table in source.tables:
        target.tables.append(dataclasses.replace(
            table,
            start_line=table.start_line + chunk.start_line,
            end_line=table.end_line + chunk.start_line,
        ))


def _shift_block(block, chunk: Chunk):
    return dataclasses.replace(
        block,
        start_offset=block.start_offset + chunk.start_offset,
        end_offset=block.end_offset + chunk.start_offset,
        start_line=block.start_line + chunk.start_line,
        end_line=block.end_line + chunk.start_line,
    )
