"""Shared fixtures for fixedstep tests."""

import random
import pytest
from sim.core.clock import SimClock
from fixedstep.log import configure_logging, reset_logging


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (real timers)")


@pytest.fixture
def rng():
    """Deterministic RNG for reproducible tests."""
    return random.Random(42)


@pytest.fixture
def clock():
    return SimClock()


@pytest.fixture
def steps():
    """List that a step function can append to."""
    return []


@pytest.fixture
def log_records():
    """Captured fixedstep log records (loguru Record dicts)."""
    records = []
    handler_id = configure_logging({'level': 'DEBUG'},
                                   sink=lambda message: records.append(message.record))
    yield records
    reset_logging(handler_id)


class JitteredClock(SimClock):
    """SimClock whose timers fire up to `max_jitter_ms` late."""

    def __init__(self, rng, max_jitter_ms=5.0):
        super().__init__()
        self.rng = rng
        self.max_jitter_ms = max_jitter_ms

    def schedule(self, delay_ms, callback, *args):
        late = self.rng.uniform(0, self.max_jitter_ms)
        return super().schedule(delay_ms + late, callback, *args)


@pytest.fixture
def jittered_clock(rng):
    return JitteredClock(rng)
