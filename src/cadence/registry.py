"""Maps each ``Backend`` enum member to a callable that builds a ``TimerBackend``.

When you add a new backend:

1. Add a variant to the ``Backend`` enum in ``config.py``.
2. Add an entry to ``REGISTRY`` pointing to a factory that constructs the
   concrete timing backend.
"""

from __future__ import annotations

from collections.abc import Callable

from cadence.config import Backend
from cadence.timers import AsyncioTimers, ThreadingTimers, TimerBackend

TimersFactory = Callable[[], TimerBackend]

REGISTRY: dict[Backend, TimersFactory] = {
    Backend.ASYNCIO: AsyncioTimers,
    Backend.THREADING: ThreadingTimers,
}


def build_timers(backend: Backend) -> TimerBackend:
    """Resolve *backend* to a concrete ``TimerBackend`` instance."""
    factory = REGISTRY.get(backend)
    if not factory:
        raise ValueError(
            f"Unknown backend: {backend!r}. Registered: {', '.join(b.value for b in REGISTRY)}"
        )
    return factory()
