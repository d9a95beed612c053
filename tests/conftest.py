"""Pytest configuration and fixtures."""

import random

import pytest

import log
from command_handler import Context
from hud_state import HudState
from rain import RainEngine
from stats import SystemStats
from telemetry import TelemetryLog


class NoBurstRandom(random.Random):
    """Random source whose probabilistic extra head advance never fires."""

    def randrange(self, start, stop=None, step=1):
        if stop is None and start == 4:
            return 3
        return super().randrange(start, stop, step)


class AlwaysBurstRandom(random.Random):
    """Random source whose probabilistic extra head advance always fires."""

    def randrange(self, start, stop=None, step=1):
        if stop is None and start == 4:
            return 0
        return super().randrange(start, stop, step)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def engine(rng) -> RainEngine:
    """Rain engine on a seeded random source, still sized to zero."""
    return RainEngine(rng=rng)


@pytest.fixture
def ctx(rng) -> Context:
    """Full command context wired to a seeded random source."""
    return Context(
        engine=RainEngine(rng=rng),
        hud=HudState(rng=rng),
        stats=SystemStats(rng=rng),
        logs=TelemetryLog(),
        config={},
    )


@pytest.fixture(autouse=True)
def silent_log():
    """Every test starts and ends with the default (silent) log sink."""
    log.reset_log_fn()
    yield
    log.reset_log_fn()
