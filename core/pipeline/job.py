"""
Job lifecycle management.
Handles job state transitions, cancellation signals and timing.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Set

from config.logging_config import get_logger

from core.errors import PipelineError

logger = get_logger(__name__)


class JobState(Enum):
    """Formatting job state."""
    PENDING = "pending"
    RUNNING = "running"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.CANCELLED, JobState.COMPLETED, JobState.FAILED)


ALLOWED_TRANSITIONS: Dict[JobState, Set[JobState]] = {
    JobState.PENDING: {JobState.RUNNING, JobState.CANCELLED, JobState.FAILED},
    JobState.RUNNING: {JobState.CANCELLING, JobState.CANCELLED, JobState.COMPLETED, JobState.FAILED},
    JobState.CANCELLING: {JobState.CANCELLED, JobState.FAILED},
    JobState.CANCELLED: set(),
    JobState.COMPLETED: set(),
    JobState.FAILED: set(),
}


class CancellationToken:
    """
    Cooperative cancellation signal.

    The caller signals with cancel(); the pipeline checks
    is_cancelled at chunk boundaries only. A token built with a parent
    also reports the parent's cancellation, while cancelling the child
    leaves the parent untouched.
    """

    def __init__(self, parent: Optional["CancellationToken"] = None):
        self.parent = parent
        self._cancelled = False
        self._reason: Optional[str] = None

    def cancel(self, reason: str = "cancelled by caller"):
        """Signal cancellation. Repeated calls keep the first reason."""
        if not self._cancelled:
            self._cancelled = True
            self._reason = reason

    def linked(self) -> "CancellationToken":
        """New child token that follows this one."""
        return CancellationToken(parent=self)

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled or (self.parent is not None and self.parent.is_cancelled)

    @property
    def reason(self) -> Optional[str]:
        if self._cancelled:
            return self._reason
        return self.parent.reason if self.parent is not None else None

    def __repr__(self):
        return f"<CancellationToken cancelled={self.is_cancelled}>"


@dataclass
class ProcessingJob:
    """
    One in-flight format() call.

    Usage:
        job = ProcessingJob()
        job.transition_to(JobState.RUNNING)
        job.update_progress(45)
        job.transition_to(JobState.COMPLETED)
    """
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: JobState = JobState.PENDING
    percentage: int = 0
    token: CancellationToken = field(default_factory=CancellationToken)
    total_chunks: int = 0
    chunks_done: int = 0
    fallback_chunks: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None

    def transition_to(self, new_state: JobState):
        """
        Move to a new state.

        Raises:
            PipelineError: Transition not allowed from the current state
        """
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise PipelineError(
                f"Job {self.job_id}: illegal transition {self.state.value} -> {new_state.value}"
            )

        old_state = self.state
        self.state = new_state
        if new_state == JobState.RUNNING:
            self.started_at = datetime.now()
        elif new_state.is_terminal:
            self.finished_at = datetime.now()

        logger.debug(f"Job {self.job_id}: {old_state.value} → {new_state.value}")

    def update_progress(self, percentage: int):
        """Progress never moves backwards."""
        self.percentage = max(self.percentage, min(100, int(percentage)))

    def request_cancel(self, reason: str = "cancelled by caller"):
        """Signal the token; a running job moves to cancelling."""
        self.token.cancel(reason)
        if self.state == JobState.RUNNING:
            self.transition_to(JobState.CANCELLING)

    @property
    def is_active(self) -> bool:
        return self.state in (JobState.PENDING, JobState.RUNNING, JobState.CANCELLING)

    @property
    def duration_seconds(self) -> Optional[float]:
        if self.started_at and self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return None

    def to_dict(self):
        return {
            "job_id": self.job_id,
            "state": self.state.value,
            "percentage": self.percentage,
            "total_chunks": self.total_chunks,
            "chunks_done": self.chunks_done,
            "fallback_chunks": self.fallback_chunks,
            "error": self.error,
            "duration_seconds": self.duration_seconds,
        }
