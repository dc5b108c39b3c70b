"""
Progress tracking and reporting.
Delivers {percentage, stage} events for one formatting job.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from config.constants import PROGRESS_CHUNK_CEILING, PROGRESS_COMPLETE
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProgressEvent:
    """Single progress update."""
    percentage: int
    stage: str
    job_id: str = ""
    completed: int = 0
    total: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "percentage": self.percentage,
            "stage": self.stage,
            "job_id": self.job_id,
            "completed": self.completed,
            "total": self.total,
        }


# Type alias for progress callbacks
ProgressCallback = Callable[[ProgressEvent], None]


def chunk_percentage(done: int, total: int, ceiling: int = PROGRESS_CHUNK_CEILING) -> int:
    """Share of the chunk range (0..ceiling) covered after `done` chunks."""
    if total <= 0:
        return ceiling
    return round(ceiling * done / total)


class ProgressTracker:
    """
    Tracks and reports progress for one job.

    Percentages never decrease: an update below the last reported value
    is raised to it. Callbacks that raise are logged and skipped.

    Usage:
        tracker = ProgressTracker(job_id="abc", total_chunks=4)
        tracker.add_callback(print)
        tracker.chunk_done(1)       # 23% formatting
        tracker.update(95, "sanitizing")
        tracker.finish()            # 100% complete
    """

    def __init__(self, job_id: str = "", total_chunks: int = 0):
        self.job_id = job_id
        self.total_chunks = total_chunks
        self.percentage = 0
        self.stage = "pending"
        self.completed_chunks = 0
        self.events: List[ProgressEvent] = []
        self._callbacks: List[ProgressCallback] = []

    def add_callback(self, callback: ProgressCallback):
        """Add progress callback."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: ProgressCallback):
        """Remove progress callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def chunk_done(self, completed: int) -> ProgressEvent:
        """Report that `completed` chunks are finished."""
        self.completed_chunks = completed
        return self.update(chunk_percentage(completed, self.total_chunks), "formatting")

    def update(self, percentage: int, stage: str) -> ProgressEvent:
        """Record and broadcast a progress event."""
        self.percentage = max(self.percentage, min(100, int(percentage)))
        self.stage = stage
        event = ProgressEvent(
            percentage=self.percentage,
            stage=stage,
            job_id=self.job_id,
            completed=self.completed_chunks,
            total=self.total_chunks,
        )
        self.events.append(event)
        self._notify(event)
        return event

    def finish(self) -> ProgressEvent:
        """Final 100% event."""
        event = self.update(PROGRESS_COMPLETE, "complete")
        logger.info(f"Progress complete: {self.job_id}")
        return event

    def _notify(self, event: ProgressEvent):
        """Notify all callbacks."""
        for callback in list(self._callbacks):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Progress callback error: {e}")


def create_logging_callback(log_interval: int = 5) -> ProgressCallback:
    """
    Create a logging callback that logs every N updates.

    Args:
        log_interval: Log every N updates (the final event is always logged)

    Returns:
        Progress callback function
    """
    counter = {"count": 0}

    def callback(event: ProgressEvent):
        counter["count"] += 1
        if counter["count"] % log_interval == 0 or event.percentage >= 100:
            logger.info(
                f"Progress: {event.completed}/{event.total} chunks "
                f"({event.percentage}%) - {event.stage}"
            )

    return callback
