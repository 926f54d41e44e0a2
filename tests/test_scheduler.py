"""
Scheduler tests

Tests the single suspension slot: elapsing, cancelling, forcing and
waiting on external awaitables.
"""

import asyncio

import pytest

from typewright.lib.scheduler import Scheduler
from typewright.models.playback import SuspensionKind


@pytest.fixture
def scheduler() -> Scheduler:
    return Scheduler(time_unit=0.001)


class TestTimers:
    """Test fixed-duration suspensions"""

    @pytest.mark.asyncio
    async def test_elapses(self, scheduler):
        suspension = scheduler.schedule(1)
        assert scheduler.pending is suspension
        assert await suspension is True
        assert scheduler.pending is None
        assert not suspension.forced

    @pytest.mark.asyncio
    async def test_cancel(self, scheduler):
        suspension = scheduler.schedule(10_000)
        assert scheduler.cancel() is True
        assert await suspension is False
        assert scheduler.pending is None

    @pytest.mark.asyncio
    async def test_resolve_forces_early(self, scheduler):
        suspension = scheduler.schedule(10_000, SuspensionKind.DELAY)
        assert scheduler.resolve(suspension) is True
        assert await asyncio.wait_for(suspension, 0.5) is True
        assert suspension.forced

    @pytest.mark.asyncio
    async def test_settled_handle_ignores_later_calls(self, scheduler):
        suspension = scheduler.schedule(0)
        await suspension
        assert scheduler.cancel(suspension) is False
        assert scheduler.resolve(suspension) is False

    @pytest.mark.asyncio
    async def test_single_slot(self, scheduler):
        """A new suspension cancels one still outstanding"""
        first = scheduler.schedule(10_000)
        second = scheduler.schedule(0)
        assert await first is False
        assert await second is True

    @pytest.mark.asyncio
    async def test_negative_duration_is_immediate(self, scheduler):
        assert await asyncio.wait_for(scheduler.schedule(-5), 0.5) is True


class TestClear:
    """Test clear(): pacing is cancelled, directive waits are forced"""

    @pytest.mark.asyncio
    async def test_clear_cancels_pacing(self, scheduler):
        suspension = scheduler.schedule(10_000, SuspensionKind.PACING)
        scheduler.clear()
        assert await suspension is False

    @pytest.mark.asyncio
    async def test_clear_forces_delay(self, scheduler):
        suspension = scheduler.schedule(10_000, SuspensionKind.DELAY)
        scheduler.clear()
        assert await suspension is True
        assert suspension.forced

    def test_clear_without_pending(self, scheduler):
        scheduler.clear()
        assert scheduler.pending is None


class TestExternal:
    """Test waiting on caller awaitables"""

    @pytest.mark.asyncio
    async def test_value_recorded(self, scheduler):
        async def produce():
            await asyncio.sleep(0)
            return "done"

        suspension = scheduler.external_await(produce())
        assert suspension.kind is SuspensionKind.EXTERNAL
        assert await suspension is True
        assert suspension.value == "done"
        assert suspension.error is None

    @pytest.mark.asyncio
    async def test_error_recorded_not_raised(self, scheduler):
        async def fail():
            raise RuntimeError("boom")

        suspension = scheduler.external_await(fail())
        assert await suspension is True
        assert isinstance(suspension.error, RuntimeError)

    @pytest.mark.asyncio
    async def test_forced_before_completion(self, scheduler):
        finished = asyncio.Event()

        async def slow():
            await finished.wait()
            return "late"

        suspension = scheduler.external_await(slow())
        scheduler.resolve()
        assert await suspension is True
        assert suspension.value is None

        finished.set()
        await suspension.task
        assert suspension.value == "late"
