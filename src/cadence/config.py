"""Configuration types for the cadence library."""

import math
from dataclasses import dataclass
from enum import StrEnum


class Backend(StrEnum):
    """Available timing backends.

    ASYNCIO: Schedules actions with ``loop.call_later`` on the running
             event loop. Actions run on the loop thread.
    THREADING: Schedules actions with daemon ``threading.Timer`` objects.
               Actions run on a timer thread.
    """

    ASYNCIO = "asyncio"
    THREADING = "threading"


class Phase(StrEnum):
    """Lifecycle phase of a scheduler. ``DISPOSED`` is terminal."""

    ACTIVE = "active"
    DISPOSED = "disposed"


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Configuration for an AdaptiveDelayScheduler instance.

    All durations are in milliseconds.

    Attributes:
        min_delay: Lower bound of the computed delay.
        max_delay: Upper bound of the computed delay.
        alpha: EMA smoothing factor (0.0-1.0). Higher reacts faster to the
               most recent interval.
        pause_threshold: Intervals at or above this are treated as a pause
                         and not fed into the EMA.
        multiplier: The delay is ``ema * multiplier`` before clamping.
        backend: The timing backend used to defer actions.
    """

    min_delay: int = 150
    max_delay: int = 800
    alpha: float = 0.3
    pause_threshold: int = 1500
    multiplier: float = 1.5
    backend: Backend = Backend.ASYNCIO

    def __post_init__(self) -> None:
        if self.min_delay <= 0:
            raise ValueError(f"min_delay must be positive, got {self.min_delay}")

        if self.max_delay < self.min_delay:
            raise ValueError(f"max_delay ({self.max_delay}) must be >= min_delay ({self.min_delay})")

        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be within [0.0, 1.0], got {self.alpha}")

        if self.pause_threshold <= 0:
            raise ValueError(f"pause_threshold must be positive, got {self.pause_threshold}")

        if not (self.multiplier > 0 and math.isfinite(self.multiplier)):
            raise ValueError(f"multiplier must be positive and finite, got {self.multiplier}")

    @property
    def initial_ema(self) -> float:
        """EMA value a fresh or reset scheduler starts from."""
        return (self.min_delay + self.max_delay) / 2
