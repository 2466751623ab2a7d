"""Shared fixtures for cadence tests."""

import pytest

from cadence.config import SchedulerConfig
from cadence.core import AdaptiveDelayScheduler
from cadence.timers import VirtualTimers


@pytest.fixture
def default_config():
    return SchedulerConfig()


@pytest.fixture
def fast_config():
    return SchedulerConfig(min_delay=20, max_delay=60, pause_threshold=500)


@pytest.fixture
def timers():
    return VirtualTimers()


@pytest.fixture
def scheduler(timers):
    with AdaptiveDelayScheduler(timers=timers) as s:
        yield s


@pytest.fixture
def calls():
    return []
