"""AdaptiveDelayScheduler — debounce with a delay learned from trigger cadence."""

from __future__ import annotations

import logging
import math
import threading
from typing import TYPE_CHECKING, Any

from cadence.config import Backend, Phase, SchedulerConfig
from cadence.registry import build_timers

if TYPE_CHECKING:
    from collections.abc import Callable

    from cadence.timers import TimerBackend, TimerHandle

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; 712.5 must become 713.
    return math.floor(value + 0.5)


def _clamp(value: int, lower: int, upper: int) -> int:
    return max(lower, min(upper, value))


class AdaptiveDelayScheduler:
    """Trailing-edge debounce whose quiet period follows the caller's rhythm.

    Uses an exponential moving average (EMA) of inter-trigger intervals to
    compute the delay on every trigger. Fast callers get shorter delays;
    slow, deliberate callers get longer ones. Intervals at or above
    ``pause_threshold`` are treated as pauses and do not move the EMA.

    How it works::

        ema   = interval * alpha + ema * (1 - alpha)   # when interval < pause_threshold
        delay = clamp(round(ema * multiplier), min_delay, max_delay)

    Only the action passed to the last :meth:`trigger` of a burst ever runs,
    and it never runs synchronously inside :meth:`trigger`.

    Args:
        min_delay: Minimum delay in milliseconds.
        max_delay: Maximum delay in milliseconds.
        alpha: EMA smoothing factor (0.0-1.0).
        pause_threshold: Interval in milliseconds treated as a pause.
        multiplier: Factor applied to the EMA to get the delay.
        backend: Timing backend used when *timers* is not given.
        timers: Explicit timing backend, overriding *backend*.

    Example::

        scheduler = AdaptiveDelayScheduler()

        async def on_keystroke(text: str) -> None:
            scheduler.trigger(lambda: search(text))

    Complexity:
        Time:   O(1) per trigger
        Memory: O(1) EMA state + one pending handle
    """

    __slots__ = (
        "_config",
        "_ema",
        "_generation",
        "_last_trigger",
        "_lock",
        "_pending",
        "_phase",
        "_timers",
    )

    def __init__(
        self,
        min_delay: int = 150,
        max_delay: int = 800,
        alpha: float = 0.3,
        pause_threshold: int = 1500,
        multiplier: float = 1.5,
        *,
        backend: Backend = Backend.ASYNCIO,
        timers: TimerBackend | None = None,
    ) -> None:
        self._config = SchedulerConfig(
            min_delay=min_delay,
            max_delay=max_delay,
            alpha=alpha,
            pause_threshold=pause_threshold,
            multiplier=multiplier,
            backend=backend,
        )
        self._timers: TimerBackend = timers if timers is not None else build_timers(backend)
        self._ema: float = self._config.initial_ema
        self._last_trigger: float | None = None
        self._pending: TimerHandle | None = None
        self._generation = 0
        self._phase = Phase.ACTIVE
        self._lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: SchedulerConfig,
        *,
        timers: TimerBackend | None = None,
    ) -> AdaptiveDelayScheduler:
        return cls(
            min_delay=config.min_delay,
            max_delay=config.max_delay,
            alpha=config.alpha,
            pause_threshold=config.pause_threshold,
            multiplier=config.multiplier,
            backend=config.backend,
            timers=timers,
        )

    @property
    def config(self) -> SchedulerConfig:
        return self._config

    @property
    def timers(self) -> TimerBackend:
        return self._timers

    @property
    def current_ema(self) -> float:
        """Smoothed inter-trigger interval in milliseconds."""
        return self._ema

    @property
    def current_delay(self) -> int:
        """Delay in milliseconds the next trigger would use if no time passed."""
        return self._delay_for(self._ema)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def disposed(self) -> bool:
        return self._phase is Phase.DISPOSED

    @property
    def pending(self) -> bool:
        """Whether an action is scheduled and has not fired yet."""
        return self._pending is not None

    def trigger(self, action: Callable[[], Any]) -> int:
        """Schedule *action* after the adaptive delay, replacing any pending one.

        Returns:
            The delay in milliseconds the action was scheduled with.

        Raises:
            RuntimeError: If the scheduler has been disposed.
        """
        with self._lock:
            if self._phase is Phase.DISPOSED:
                raise RuntimeError("AdaptiveDelayScheduler is disposed")

            now = self._timers.now()
            ema = self._ema
            if self._last_trigger is not None:
                interval = now - self._last_trigger
                if interval < self._config.pause_threshold:
                    alpha = self._config.alpha
                    ema = interval * alpha + ema * (1.0 - alpha)
                else:
                    logger.debug("Pause of %.0fms ignored, ema stays %.1fms", interval, ema)

            delay = self._delay_for(ema)
            generation = self._generation + 1
            handle = self._timers.call_later(delay, lambda: self._fire(generation, action))

            # Nothing is committed until the backend accepted the new handle.
            self._cancel_pending()
            self._generation = generation
            self._ema = ema
            self._last_trigger = now
            self._pending = handle

        logger.debug("Scheduled action in %dms (ema=%.1fms)", delay, ema)
        return delay

    def reset(self) -> None:
        """Forget the learned rhythm and drop the pending action without running it."""
        with self._lock:
            self._cancel_pending()
            self._ema = self._config.initial_ema
            self._last_trigger = None
        logger.debug("Scheduler reset, ema=%.1fms", self._ema)

    def dispose(self) -> None:
        """Drop the pending action and move to the terminal phase (idempotent)."""
        with self._lock:
            if self._phase is Phase.DISPOSED:
                return
            self._cancel_pending()
            self._phase = Phase.DISPOSED
        logger.debug("Scheduler disposed")

    def _delay_for(self, ema: float) -> int:
        raw = _round_half_up(ema * self._config.multiplier)
        return _clamp(raw, self._config.min_delay, self._config.max_delay)

    def _cancel_pending(self) -> None:
        # Bumping the generation also discards a fire that already lost the race.
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            logger.debug("Pending action cancelled")

    def _fire(self, generation: int, action: Callable[[], Any]) -> None:
        with self._lock:
            if generation != self._generation or self._phase is Phase.DISPOSED:
                return
            self._pending = None
        logger.debug("Running debounced action")
        action()

    def __enter__(self) -> AdaptiveDelayScheduler:
        return self

    def __exit__(self, *_: Any) -> None:
        self.dispose()

    async def __aenter__(self) -> AdaptiveDelayScheduler:
        return self

    async def __aexit__(self, *_: Any) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return (
            f"AdaptiveDelayScheduler(min_delay={self._config.min_delay}, "
            f"max_delay={self._config.max_delay}, "
            f"ema={self._ema:.1f}, "
            f"delay={self.current_delay}, "
            f"phase={self._phase.value})"
        )
