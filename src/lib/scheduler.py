"""
Single-slot suspension scheduler

Every wait the engine performs, whether pacing between characters, a
``[@delay]`` or an awaitable returned by a caller function, goes through
one Scheduler so that pause, skip and write can cancel or force it in one
place. At most one suspension is outstanding at a time.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from ..config import appsettings
from ..models.playback import SuspensionKind
from .log import LOG, ERROR


class Suspension:
    """
    Handle for one outstanding wait

    Awaiting the handle yields True when the wait elapsed or was forced,
    False when it was cancelled.

    Attributes:
        kind: Why the engine is waiting
        forced: Resolved early by Scheduler.resolve()
        value: Result of an external awaitable, once settled
        error: Exception raised by an external awaitable, once settled
    """

    def __init__(self, kind: SuspensionKind, future: "asyncio.Future[bool]") -> None:
        self.kind = kind
        self.future = future
        self.timer: Optional[asyncio.TimerHandle] = None
        self.task: Optional["asyncio.Future[Any]"] = None
        self.forced = False
        self.value: Any = None
        self.error: Optional[BaseException] = None
        self.release: Optional[Callable[["Suspension"], None]] = None

    @property
    def done(self) -> bool:
        return self.future.done()

    def settle(self, outcome: bool) -> bool:
        """Resolve the handle once; later calls are ignored"""
        if self.future.done():
            return False
        if self.timer is not None:
            self.timer.cancel()
        self.future.set_result(outcome)
        if self.release is not None:
            self.release(self)
        return True

    def __await__(self):
        return self.future.__await__()

    def __repr__(self) -> str:
        state = "done" if self.done else "pending"
        return f"<Suspension {self.kind.value} {state}>"


class Scheduler:
    """
    Timer abstraction with schedule, cancel and forced resolution

    Durations are in time units, converted with appsettings.time_unit
    unless another unit is given.
    """

    def __init__(self, time_unit: Optional[float] = None) -> None:
        self.time_unit = appsettings.time_unit if time_unit is None else time_unit
        self.pending: Optional[Suspension] = None

    def slot_claim(self, kind: SuspensionKind) -> Suspension:
        """Create a handle in the slot, cancelling a stale one if present"""
        if self.pending is not None and not self.pending.done:
            LOG(f"Replacing outstanding {self.pending!r}", level=3)
            self.pending.settle(False)

        loop = asyncio.get_running_loop()
        suspension = Suspension(kind, loop.create_future())
        suspension.release = self.slot_release
        self.pending = suspension
        return suspension

    def slot_release(self, suspension: Suspension) -> None:
        if self.pending is suspension:
            self.pending = None

    def schedule(self, duration: float, kind: SuspensionKind = SuspensionKind.PACING) -> Suspension:
        """
        Suspend for a fixed duration

        Args:
            duration: Time units to wait (non-negative)
            kind: PACING or DELAY

        Returns:
            Handle that resolves True once the duration elapsed
        """
        suspension = self.slot_claim(kind)
        loop = asyncio.get_running_loop()
        suspension.timer = loop.call_later(
            max(duration, 0) * self.time_unit, suspension.settle, True
        )
        return suspension

    def external_await(self, awaitable: Awaitable[Any]) -> Suspension:
        """
        Suspend until a caller-supplied awaitable settles

        The awaitable's result or exception is recorded on the handle; it is
        never raised out of the handle. If the handle is forced or cancelled
        first, the awaitable keeps running and a late failure is logged.
        """
        suspension = self.slot_claim(SuspensionKind.EXTERNAL)
        task = asyncio.ensure_future(awaitable)
        suspension.task = task

        def external_settle(finished: "asyncio.Future[Any]") -> None:
            if finished.cancelled():
                suspension.error = asyncio.CancelledError()
            elif finished.exception() is not None:
                suspension.error = finished.exception()
            else:
                suspension.value = finished.result()

            if not suspension.settle(True) and suspension.error is not None:
                ERROR("Awaited function failed after its wait was released.", suspension.error)

        task.add_done_callback(external_settle)
        return suspension

    def cancel(self, suspension: Optional[Suspension] = None) -> bool:
        """
        Cancel a wait; its awaiter sees False

        Args:
            suspension: Handle to cancel, defaults to the outstanding one

        Returns:
            True if a pending wait was cancelled
        """
        suspension = suspension or self.pending
        if suspension is None:
            return False
        return suspension.settle(False)

    def resolve(self, suspension: Optional[Suspension] = None) -> bool:
        """
        Force a wait to resolve immediately; its awaiter sees True

        Returns:
            True if a pending wait was resolved
        """
        suspension = suspension or self.pending
        if suspension is None or suspension.done:
            return False
        suspension.forced = True
        return suspension.settle(True)

    def clear(self) -> None:
        """Cancel pending pacing, force any directive-level wait"""
        if self.pending is None:
            return
        if self.pending.kind is SuspensionKind.PACING:
            self.cancel()
        else:
            self.resolve()
