"""Tests for SchedulerConfig, Backend and Phase."""

import math

import pytest

from cadence.config import Backend, Phase, SchedulerConfig


class TestBackend:
    def test_asyncio_value(self):
        assert Backend.ASYNCIO == "asyncio"

    def test_threading_value(self):
        assert Backend.THREADING == "threading"

    def test_all_are_str(self):
        for b in Backend:
            assert isinstance(b, str)


class TestPhase:
    def test_values(self):
        assert Phase.ACTIVE == "active"
        assert Phase.DISPOSED == "disposed"


class TestSchedulerConfig:
    def test_defaults(self):
        cfg = SchedulerConfig()
        assert cfg.min_delay == 150
        assert cfg.max_delay == 800
        assert cfg.alpha == 0.3
        assert cfg.pause_threshold == 1500
        assert cfg.multiplier == 1.5
        assert cfg.backend is Backend.ASYNCIO

    def test_initial_ema(self):
        assert SchedulerConfig().initial_ema == 475.0
        assert SchedulerConfig(min_delay=200, max_delay=1000).initial_ema == 600.0

    def test_equal_bounds_allowed(self):
        cfg = SchedulerConfig(min_delay=300, max_delay=300)
        assert cfg.initial_ema == 300.0

    def test_alpha_edges_allowed(self):
        assert SchedulerConfig(alpha=0.0).alpha == 0.0
        assert SchedulerConfig(alpha=1.0).alpha == 1.0

    def test_min_delay_greater_than_max_raises(self):
        with pytest.raises(ValueError, match=r"max_delay \(100\) must be >= min_delay \(200\)"):
            SchedulerConfig(min_delay=200, max_delay=100)

    @pytest.mark.parametrize("min_delay", [0, -1])
    def test_non_positive_min_delay_raises(self, min_delay):
        with pytest.raises(ValueError, match="min_delay must be positive"):
            SchedulerConfig(min_delay=min_delay)

    @pytest.mark.parametrize("alpha", [-0.1, 1.1, math.nan])
    def test_alpha_out_of_range_raises(self, alpha):
        with pytest.raises(ValueError, match="alpha must be within"):
            SchedulerConfig(alpha=alpha)

    @pytest.mark.parametrize("multiplier", [0, -1.5, math.inf])
    def test_bad_multiplier_raises(self, multiplier):
        with pytest.raises(ValueError, match="multiplier must be positive"):
            SchedulerConfig(multiplier=multiplier)

    @pytest.mark.parametrize("pause_threshold", [0, -100])
    def test_non_positive_pause_threshold_raises(self, pause_threshold):
        with pytest.raises(ValueError, match="pause_threshold must be positive"):
            SchedulerConfig(pause_threshold=pause_threshold)

    def test_frozen(self):
        cfg = SchedulerConfig()
        with pytest.raises(AttributeError):
            cfg.min_delay = 10  # type: ignore[misc]
