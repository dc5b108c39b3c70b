"""
Chunked Pipeline - async, cancellable formatting jobs.

Components:
- ChunkedPipeline: format()/format_sync() entry points
- ProcessingJob / CancellationToken: job lifecycle and cancellation
- ProgressTracker: {percentage, stage} events
- Schedulers: cooperative yield between chunks
- Chunkers: fixed-size and paragraph-aware splitting
- PreviewPolicy: preview admission control for presentation layers
"""

from .chunked_pipeline import ChunkedPipeline
from .chunker import Chunk, FixedSizeChunker, ParagraphChunker, get_chunker
from .job import ALLOWED_TRANSITIONS, CancellationToken, JobState, ProcessingJob
from .performance import PerformanceMonitor
from .preview import PreviewDecision, PreviewMode, PreviewPolicy
from .progress_tracker import (
    ProgressCallback,
    ProgressEvent,
    ProgressTracker,
    create_logging_callback,
)
from .results import FormatOptions, FormattingResult
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler

__all__ = [
    # Pipeline
    'ChunkedPipeline',
    'FormatOptions',
    'FormattingResult',
    # Jobs
    'JobState',
    'ALLOWED_TRANSITIONS',
    'ProcessingJob',
    'CancellationToken',
    # Progress
    'ProgressEvent',
    'ProgressCallback',
    'ProgressTracker',
    'create_logging_callback',
    # Scheduling
    'Scheduler',
    'AsyncioScheduler',
    'ManualScheduler',
    # Chunking
    'Chunk',
    'FixedSizeChunker',
    'ParagraphChunker',
    'get_chunker',
    # Presentation
    'PreviewPolicy',
    'PreviewDecision',
    'PreviewMode',
    'PerformanceMonitor',
]
