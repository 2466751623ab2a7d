"""Decorator API for applying adaptive debounce behavior to functions."""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar, cast, overload

from cadence.config import Backend
from cadence.core import AdaptiveDelayScheduler

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@overload
def adaptive_debounce(
    func: F,
    /,
) -> F: ...


@overload
def adaptive_debounce(
    *,
    min_delay: int = 150,
    max_delay: int = 800,
    alpha: float = 0.3,
    pause_threshold: int = 1500,
    multiplier: float = 1.5,
    backend: Backend | None = None,
) -> Callable[[F], F]: ...


def adaptive_debounce(
    func: F | None = None,
    /,
    *,
    min_delay: int = 150,
    max_delay: int = 800,
    alpha: float = 0.3,
    pause_threshold: int = 1500,
    multiplier: float = 1.5,
    backend: Backend | None = None,
) -> F | Callable[[F], F]:
    """Decorator that debounces calls to a function with an adaptive delay.

    Each call records its arguments and (re)schedules the function; only the
    last call of a burst actually runs, once the adaptive quiet period has
    passed. The wrapper returns ``None`` and the function's result is
    discarded.

    Coroutine functions default to the asyncio backend and get an ``async``
    wrapper; the debounced call is spawned as a task on the running loop,
    and a failure inside it is logged. Coroutine functions only run on the
    asyncio backend. Plain functions default to the threading backend.

    Args:
        func: The function to decorate (when used without parentheses).
        min_delay: Minimum delay in milliseconds.
        max_delay: Maximum delay in milliseconds.
        alpha: EMA smoothing factor (0.0-1.0).
        pause_threshold: Interval in milliseconds treated as a pause.
        multiplier: Factor applied to the EMA to get the delay.
        backend: Timing backend; inferred from *func* when ``None``.

    Raises:
        ValueError: On an invalid configuration, or a non-asyncio backend for
            a coroutine function.

    Examples:
    ```python
        @adaptive_debounce(min_delay=100, max_delay=600)
        async def search(query: str) -> None:
            await api.search(query)

        @adaptive_debounce
        def save(document: Document) -> None:
            document.write()
    ```
    """

    def decorator(fn: F) -> F:
        if not callable(fn):
            raise TypeError("@adaptive_debounce can only decorate callables.")

        is_async = inspect.iscoroutinefunction(fn)
        chosen = backend or (Backend.ASYNCIO if is_async else Backend.THREADING)
        if is_async and chosen != Backend.ASYNCIO:
            raise ValueError(f"coroutine functions require the asyncio backend, got '{chosen}'")
        scheduler = AdaptiveDelayScheduler(
            min_delay=min_delay,
            max_delay=max_delay,
            alpha=alpha,
            pause_threshold=pause_threshold,
            multiplier=multiplier,
            backend=chosen,
        )

        if is_async:
            tasks: set[asyncio.Task[Any]] = set()

            def settle(task: asyncio.Task[Any]) -> None:
                tasks.discard(task)
                if not task.cancelled() and task.exception() is not None:
                    logger.error("Debounced call %s failed", fn.__qualname__, exc_info=task.exception())

            def spawn(args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
                task = asyncio.get_running_loop().create_task(fn(*args, **kwargs))
                tasks.add(task)
                task.add_done_callback(settle)

            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> None:
                scheduler.trigger(functools.partial(spawn, args, kwargs))

            wrapper: Any = async_wrapper
            wrapper.tasks = tasks
        else:

            @functools.wraps(fn)
            def sync_wrapper(*args: Any, **kwargs: Any) -> None:
                scheduler.trigger(functools.partial(fn, *args, **kwargs))

            wrapper = sync_wrapper

        wrapper.scheduler = scheduler
        wrapper.reset = scheduler.reset
        wrapper.dispose = scheduler.dispose

        return cast("F", wrapper)

    if func is not None:
        return decorator(func)

    return decorator
