"""cadence — adaptive debounce scheduling for Python.

Delays an action until a quiet period has passed since the last trigger,
where the quiet period is learned from how fast triggers arrive: an
exponential moving average of the inter-trigger interval, scaled and
clamped. Fast bursts collapse into one trailing call sooner; slow,
deliberate input waits longer.

Basic usage:

    from cadence import AdaptiveDelayScheduler

    scheduler = AdaptiveDelayScheduler(min_delay=150, max_delay=800)

    def on_change(text: str) -> None:
        scheduler.trigger(lambda: search(text))

    scheduler.dispose()

Decorator usage:

    from cadence import adaptive_debounce

    @adaptive_debounce(min_delay=100, max_delay=600)
    async def search(query: str) -> None:
        await api.search(query)
"""

import logging

from cadence.config import Backend, Phase, SchedulerConfig
from cadence.core import AdaptiveDelayScheduler
from cadence.decorator import adaptive_debounce
from cadence.pool import SchedulerPool
from cadence.registry import build_timers
from cadence.timers import AsyncioTimers, ThreadingTimers, TimerBackend, VirtualTimers

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AdaptiveDelayScheduler",
    "AsyncioTimers",
    "Backend",
    "Phase",
    "SchedulerConfig",
    "SchedulerPool",
    "ThreadingTimers",
    "TimerBackend",
    "VirtualTimers",
    "adaptive_debounce",
    "build_timers",
]

__version__ = "0.1.0"
