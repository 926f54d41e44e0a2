"""
Shared fixtures for typewright tests

Provides an in-memory surface, a scheduler that records every suspension
it hands out, and capture of loguru diagnostics.
"""

import asyncio
from typing import Callable, List, Tuple

import pytest
from loguru import logger

from typewright.lib.scheduler import Scheduler, Suspension
from typewright.lib.surface import BufferSurface
from typewright.models.playback import SuspensionKind


class RecordingScheduler(Scheduler):
    """Scheduler keeping a log of (kind, duration) for every wait"""

    def __init__(self, time_unit: float = 0.0001) -> None:
        super().__init__(time_unit=time_unit)
        self.history: List[Tuple[SuspensionKind, float]] = []

    def schedule(self, duration: float, kind: SuspensionKind = SuspensionKind.PACING) -> Suspension:
        self.history.append((kind, duration))
        return super().schedule(duration, kind)

    def external_await(self, awaitable):
        self.history.append((SuspensionKind.EXTERNAL, 0))
        return super().external_await(awaitable)

    def durations(self, kind: SuspensionKind) -> List[float]:
        return [duration for recorded, duration in self.history if recorded is kind]


@pytest.fixture
def surface() -> BufferSurface:
    return BufferSurface()


@pytest.fixture
def scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def log_messages():
    """Collect the text of every loguru record emitted during the test"""
    messages: List[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


async def until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() holds"""

    async def poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(poll(), timeout)


@pytest.fixture
def wait_until():
    return until
