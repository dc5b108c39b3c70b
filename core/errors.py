"""
Error hierarchy for the formatting core.

Chunk-local engine failures are compensated in place by the pipeline;
input errors, cancellations and pipeline failures reach the caller as
distinct exception types.
"""


class FormatterError(Exception):
    """Base exception for document formatting errors"""
    pass


class InputError(FormatterError):
    """Input text is missing; no job is started"""
    pass


class EngineError(FormatterError):
    """Structure-aware formatting failed on a single chunk"""

    def __init__(self, chunk_index: int, cause: Exception):
        self.chunk_index = chunk_index
        self.cause = cause
        super().__init__(f"Engine failed on chunk {chunk_index}: {cause}")


class FormattingCancelledError(FormatterError):
    """Job was cancelled at a chunk boundary"""

    def __init__(self, job_id: str, chunks_done: int = 0):
        self.job_id = job_id
        self.chunks_done = chunks_done
        super().__init__(f"Job {job_id} cancelled after {chunks_done} chunk(s)")


class PipelineError(FormatterError):
    """Unexpected failure; the job ends in the failed state"""
    pass


class MergeError(FormatterError):
    """No source document could be merged"""
    pass
