"""Timing backends that defer a callback and can cancel it before it fires.

Each backend bundles a millisecond clock with a delayed-callback facility,
because the clock has to agree with the time base the callbacks run on.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from asyncio import AbstractEventLoop, get_running_loop
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Anything returned by :meth:`TimerBackend.call_later`."""

    def cancel(self) -> None: ...


class TimerBackend(ABC):
    """Base class for all timing backends.

    Subclasses must implement :meth:`now` and :meth:`call_later`.
    """

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds on a monotonic clock."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        """Run *callback* once after *delay_ms* milliseconds."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AsyncioTimers(TimerBackend):
    """Backend on top of ``loop.call_later``.

    The loop is resolved lazily, so the backend can be created outside of a
    running loop as long as it is first used inside one. Unless a loop was
    passed in, a closed loop is replaced by the currently running one.
    """

    __slots__ = ("_loop", "_pinned")

    def __init__(self, loop: AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._pinned = loop is not None

    def _get_loop(self) -> AbstractEventLoop:
        if self._loop is None or (not self._pinned and self._loop.is_closed()):
            self._loop = get_running_loop()
        return self._loop

    def now(self) -> float:
        return self._get_loop().time() * 1000.0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        return self._get_loop().call_later(delay_ms / 1000.0, callback)


class ThreadingTimers(TimerBackend):
    """Backend on top of daemon ``threading.Timer`` objects."""

    __slots__ = ()

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay_ms / 1000.0, self._run, args=(callback,))
        timer.daemon = True
        timer.start()
        return timer

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Deferred callback %r failed", callback)


class _VirtualHandle:
    __slots__ = ("cancelled", "due", "callback")

    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTimers(TimerBackend):
    """Deterministic backend driven by a manual clock.

    Nothing runs until :meth:`advance` moves time forward, which makes
    delay arithmetic exactly observable in tests and simulations.

    Example::

        timers = VirtualTimers()
        timers.call_later(100, lambda: print("fired"))
        timers.advance(99)   # nothing
        timers.advance(1)    # prints "fired"
    """

    __slots__ = ("_counter", "_now", "_queue")

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, _VirtualHandle]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = _VirtualHandle(self._now + delay_ms, callback)
        heapq.heappush(self._queue, (handle.due, next(self._counter), handle))
        return handle

    @property
    def pending(self) -> int:
        """Number of scheduled callbacks that are neither fired nor cancelled."""
        return sum(1 for _, _, handle in self._queue if not handle.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward by *ms*, running every callback that comes due."""
        if ms < 0:
            raise ValueError(f"cannot move time backwards, got {ms}")

        target = self._now + ms
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            handle.callback()
        self._now = target
