"""Tests for SchedulerPool."""

import pytest

from cadence.config import SchedulerConfig
from cadence.core import AdaptiveDelayScheduler
from cadence.pool import SchedulerPool


@pytest.fixture
def pool(timers):
    with SchedulerPool(SchedulerConfig(min_delay=100, max_delay=400), timers=timers) as p:
        yield p


class TestPoolSchedulers:
    def test_get_creates_once(self, pool):
        first = pool.get("search")
        assert isinstance(first, AdaptiveDelayScheduler)
        assert pool.get("search") is first
        assert len(pool) == 1
        assert "search" in pool

    def test_schedulers_share_config(self, pool):
        assert pool.get("a").config == pool.config
        assert pool.get("a").current_ema == 250.0

    def test_default_config(self):
        with SchedulerPool() as p:
            assert p.config == SchedulerConfig()

    def test_keys(self, pool):
        pool.get("a")
        pool.get("b")
        assert sorted(pool.keys()) == ["a", "b"]


class TestPoolTrigger:
    def test_keys_debounce_independently(self, pool, timers, calls):
        pool.trigger("a", lambda: calls.append("a1"))
        pool.trigger("b", lambda: calls.append("b1"))
        timers.advance(10)
        pool.trigger("a", lambda: calls.append("a2"))
        timers.advance(1000)
        assert sorted(calls) == ["a2", "b1"]

    def test_keys_learn_independently(self, pool, timers):
        pool.trigger("fast", lambda: None)
        timers.advance(10)
        pool.trigger("fast", lambda: None)
        assert pool.get("fast").current_ema < 250.0
        assert pool.get("slow").current_ema == 250.0

    def test_trigger_returns_delay(self, pool):
        assert pool.trigger("a", lambda: None) == 375


class TestPoolLifecycle:
    def test_reset(self, pool, timers, calls):
        pool.trigger("a", lambda: calls.append("a"))
        pool.reset("a")
        timers.advance(1000)
        assert calls == []
        assert "a" in pool

    def test_reset_unknown_key_is_noop(self, pool):
        pool.reset("missing")
        assert len(pool) == 0

    def test_discard_disposes(self, pool, timers, calls):
        pool.trigger("a", lambda: calls.append("a"))
        scheduler = pool.get("a")
        pool.discard("a")
        assert scheduler.disposed is True
        assert "a" not in pool
        timers.advance(1000)
        assert calls == []

    def test_discard_unknown_key_is_noop(self, pool):
        pool.discard("missing")

    def test_close_disposes_all(self, timers, calls):
        pool = SchedulerPool(timers=timers)
        a = pool.get("a")
        pool.trigger("b", lambda: calls.append("b"))
        pool.close()
        assert pool.closed is True
        assert a.disposed is True
        assert len(pool) == 0
        timers.advance(5000)
        assert calls == []

    def test_close_is_idempotent(self):
        pool = SchedulerPool()
        pool.close()
        pool.close()
        assert pool.closed is True

    def test_trigger_after_close_raises(self):
        pool = SchedulerPool()
        pool.close()
        with pytest.raises(RuntimeError, match="SchedulerPool is closed"):
            pool.trigger("a", lambda: None)

    async def test_async_context_manager(self, timers):
        async with SchedulerPool(timers=timers) as pool:
            pool.get("a")
        assert pool.closed is True
