"""
Cooperative schedulers for the chunked pipeline.

The pipeline awaits Scheduler.yield_control() after every chunk. That
await is the only suspension point of a job, so the scheduler decides
when the next chunk starts:
- AsyncioScheduler hands control back to the event loop (optionally
  sleeping a fixed delay)
- ManualScheduler parks the job until a test calls step()
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from config.logging_config import get_logger

logger = get_logger(__name__)


# Hook signature: (job_id, chunk_index)
YieldHook = Callable[[str, int], None]


class Scheduler(ABC):
    """Decides how a job suspends between chunks."""

    @abstractmethod
    async def yield_control(self, job_id: str, chunk_index: int) -> None:
        """Suspend after chunk `chunk_index` of job `job_id`."""


class AsyncioScheduler(Scheduler):
    """Yield to the running event loop."""

    def __init__(self, delay: float = 0.0):
        """
        Args:
            delay: Seconds to sleep at each yield (0 = just reschedule)
        """
        self.delay = delay

    async def yield_control(self, job_id: str, chunk_index: int) -> None:
        await asyncio.sleep(self.delay)


class ManualScheduler(Scheduler):
    """
    Test scheduler: every yield parks until step() is called.

    Parked jobs are released in the order they parked.

    Usage:
        scheduler = ManualScheduler()
        pipeline = ChunkedPipeline(scheduler=scheduler)
        task = asyncio.create_task(pipeline.format(text))

        await scheduler.wait_until_parked()   # chunk 0 finished
        token.cancel()
        scheduler.step()                      # job resumes, sees the cancel

    With auto_advance=True yields never park; on_yield hooks still run,
    which lets a test act at an exact chunk boundary without tasks.
    """

    def __init__(self, auto_advance: bool = False):
        self.auto_advance = auto_advance
        self.yield_count = 0
        self.yields: List[Tuple[str, int]] = []
        self._hooks: List[YieldHook] = []
        self._parked: Optional[asyncio.Event] = None
        self._waiting: List[asyncio.Event] = []

    def on_yield(self, hook: YieldHook):
        """Register a hook called synchronously at every yield."""
        self._hooks.append(hook)

    @property
    def is_parked(self) -> bool:
        return bool(self._waiting)

    @property
    def parked_count(self) -> int:
        return len(self._waiting)

    async def yield_control(self, job_id: str, chunk_index: int) -> None:
        self.yield_count += 1
        self.yields.append((job_id, chunk_index))
        for hook in list(self._hooks):
            hook(job_id, chunk_index)

        if self.auto_advance:
            await asyncio.sleep(0)
            return

        release = asyncio.Event()
        self._waiting.append(release)
        self._parked_event().set()
        logger.debug(f"Job {job_id} parked after chunk {chunk_index}")
        await release.wait()

    async def wait_until_parked(self) -> None:
        """Wait until a job is parked at a yield."""
        await self._parked_event().wait()

    def step(self) -> None:
        """
        Release the longest-parked job for one chunk.

        Raises:
            RuntimeError: No job is parked
        """
        if not self._waiting:
            raise RuntimeError("No job is parked")
        release = self._waiting.pop(0)
        if not self._waiting:
            self._parked_event().clear()
        release.set()

    async def run_until_complete(self, task: "asyncio.Future", max_steps: int = 10_000):
        """Step a parked job until its task finishes, then return the result."""
        for _ in range(max_steps):
            if task.done():
                break
            parked = asyncio.ensure_future(self.wait_until_parked())
            await asyncio.wait({task, parked}, return_when=asyncio.FIRST_COMPLETED)
            if not parked.done():
                parked.cancel()
            if self.is_parked:
                self.step()
        return await task

    def _parked_event(self) -> asyncio.Event:
        # Created lazily so the event binds to the loop that uses it
        if self._parked is None:
            self._parked = asyncio.Event()
        return self._parked
