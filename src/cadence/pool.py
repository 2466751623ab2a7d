"""Thread-safe pool holding one scheduler per input stream."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from cadence.config import SchedulerConfig
from cadence.core import AdaptiveDelayScheduler

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from cadence.timers import TimerBackend

logger = logging.getLogger(__name__)


class SchedulerPool:
    """Manages an independent :class:`AdaptiveDelayScheduler` per key.

    Every key (a search field, a chat session, a file path) learns its own
    rhythm. Schedulers are created on first use with the shared *config*
    and disposed when discarded or when the pool closes.

    Args:
        config: Configuration shared by every scheduler in the pool.
        timers: Timing backend shared by every scheduler. When omitted,
            each scheduler builds one from ``config.backend``.

    Example::

        pool = SchedulerPool(SchedulerConfig(min_delay=100, max_delay=600))

        pool.trigger("search-box", lambda: search(query))
        pool.trigger("filter-box", lambda: refilter(text))

        pool.close()
    """

    __slots__ = ("_closed", "_config", "_lock", "_schedulers", "_timers")

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        *,
        timers: TimerBackend | None = None,
    ) -> None:
        self._config = config or SchedulerConfig()
        self._timers = timers
        self._schedulers: dict[Hashable, AdaptiveDelayScheduler] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, key: Hashable) -> AdaptiveDelayScheduler:
        """Return the scheduler for *key*, creating it if needed."""
        with self._lock:
            self._ensure_open()
            scheduler = self._schedulers.get(key)
            if scheduler is None:
                scheduler = AdaptiveDelayScheduler.from_config(self._config, timers=self._timers)
                self._schedulers[key] = scheduler
                logger.debug("Created scheduler for %r", key)
            return scheduler

    def trigger(self, key: Hashable, action: Callable[[], Any]) -> int:
        """Trigger the scheduler for *key*; returns the scheduled delay in ms."""
        return self.get(key).trigger(action)

    def reset(self, key: Hashable) -> None:
        """Reset the scheduler for *key*. Unknown keys are ignored."""
        with self._lock:
            scheduler = self._schedulers.get(key)
        if scheduler is not None:
            scheduler.reset()

    def discard(self, key: Hashable) -> None:
        """Dispose the scheduler for *key* and forget it. Unknown keys are ignored."""
        with self._lock:
            scheduler = self._schedulers.pop(key, None)
        if scheduler is not None:
            scheduler.dispose()
            logger.debug("Discarded scheduler for %r", key)

    def keys(self) -> list[Hashable]:
        with self._lock:
            return list(self._schedulers)

    def close(self) -> None:
        """Dispose every scheduler. Further triggers raise ``RuntimeError``."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            schedulers, self._schedulers = self._schedulers, {}
        for scheduler in schedulers.values():
            scheduler.dispose()
        logger.debug("Pool closed, disposed %d scheduler(s)", len(schedulers))

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("SchedulerPool is closed")

    def __len__(self) -> int:
        with self._lock:
            return len(self._schedulers)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._schedulers

    def __enter__(self) -> SchedulerPool:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    async def __aenter__(self) -> SchedulerPool:
        return self

    async def __aexit__(self, *_: Any) -> None:
        self.close()
