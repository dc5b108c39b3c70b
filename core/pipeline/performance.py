"""
Stage timing and memory sampling for formatting jobs.
"""

import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

import psutil

from config.constants import STAGE_WARN_SECONDS
from config.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class StageTiming:
    """Accumulated time of one named stage."""
    name: str
    seconds: float = 0.0
    calls: int = 0
    slowest: float = 0.0


@dataclass
class PerformanceMonitor:
    """
    Accumulates wall-clock time per stage.

    A single measurement longer than `warn_seconds` logs a warning with
    the stage name and current memory usage.

    Usage:
        monitor = PerformanceMonitor()
        with monitor.measure("analysis"):
            structure = analyzer.analyze(text)
        monitor.timings()   # {"analysis": 0.012}
    """
    warn_seconds: float = STAGE_WARN_SECONDS
    stages: Dict[str, StageTiming] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @contextmanager
    def measure(self, stage: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.record(stage, time.perf_counter() - start)

    def record(self, stage: str, seconds: float):
        timing = self.stages.setdefault(stage, StageTiming(stage))
        timing.seconds += seconds
        timing.calls += 1
        timing.slowest = max(timing.slowest, seconds)

        if seconds > self.warn_seconds:
            message = (
                f"Slow stage '{stage}': {seconds:.2f}s "
                f"(threshold {self.warn_seconds:.2f}s, memory {self.memory_mb():.1f} MB)"
            )
            self.warnings.append(message)
            logger.warning(message)

    def timings(self) -> Dict[str, float]:
        """Total seconds per stage, rounded to microseconds."""
        return {name: round(t.seconds, 6) for name, t in self.stages.items()}

    @property
    def total_seconds(self) -> float:
        return sum(t.seconds for t in self.stages.values())

    @staticmethod
    def memory_mb() -> float:
        """Resident memory of this process in MB."""
        return psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024

    def report(self) -> Dict[str, object]:
        return {
            "stages": {
                name: {"seconds": round(t.seconds, 6), "calls": t.calls, "slowest": round(t.slowest, 6)}
                for name, t in self.stages.items()
            },
            "total_seconds": round(self.total_seconds, 6),
            "memory_mb": round(self.memory_mb(), 1),
            "warnings": list(self.warnings),
        }
