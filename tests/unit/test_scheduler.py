"""
Unit Tests for cooperative schedulers
"""

import asyncio

import pytest

from core.pipeline.scheduler import AsyncioScheduler, ManualScheduler


async def _worker(scheduler, job_id, chunks, log):
    for index in range(chunks):
        log.append((job_id, index))
        await scheduler.yield_control(job_id, index)
    return job_id


class TestManualScheduler:

    @pytest.mark.asyncio
    async def test_parks_until_step(self):
        scheduler = ManualScheduler()
        log = []
        task = asyncio.create_task(_worker(scheduler, "a", 2, log))

        await scheduler.wait_until_parked()
        assert log == [("a", 0)]
        assert scheduler.is_parked

        scheduler.step()
        await scheduler.wait_until_parked()
        assert log == [("a", 0), ("a", 1)]

        scheduler.step()
        assert await task == "a"
        assert scheduler.yield_count == 2
        assert not scheduler.is_parked

    @pytest.mark.asyncio
    async def test_releases_in_parking_order(self):
        scheduler = ManualScheduler()
        log = []
        first = asyncio.create_task(_worker(scheduler, "first", 2, log))
        second = asyncio.create_task(_worker(scheduler, "second", 2, log))
        while scheduler.parked_count < 2:
            await asyncio.sleep(0)

        scheduler.step()
        await scheduler.wait_until_parked()
        while len(log) < 3:
            await asyncio.sleep(0)
        assert log[2] == ("first", 1)

        while scheduler.is_parked:
            scheduler.step()
            await asyncio.sleep(0)
        assert await first == "first"
        assert await second == "second"

    def test_step_without_parked_job(self):
        with pytest.raises(RuntimeError, match="No job is parked"):
            ManualScheduler().step()

    @pytest.mark.asyncio
    async def test_auto_advance_runs_hooks(self):
        scheduler = ManualScheduler(auto_advance=True)
        seen = []
        scheduler.on_yield(lambda job_id, index: seen.append(index))

        assert await _worker(scheduler, "a", 3, []) == "a"
        assert seen == [0, 1, 2]
        assert scheduler.yields == [("a", 0), ("a", 1), ("a", 2)]

    @pytest.mark.asyncio
    async def test_run_until_complete(self):
        scheduler = ManualScheduler()
        task = asyncio.create_task(_worker(scheduler, "a", 4, []))
        assert await scheduler.run_until_complete(task) == "a"
        assert scheduler.yield_count == 4


class TestAsyncioScheduler:

    @pytest.mark.asyncio
    async def test_yields_to_other_tasks(self):
        scheduler = AsyncioScheduler()
        log = []
        await asyncio.gather(
            _worker(scheduler, "a", 2, log),
            _worker(scheduler, "b", 2, log),
        )
        assert log == [("a", 0), ("b", 0), ("a", 1), ("b", 1)]
