"""Shared pytest fixtures for Lightduel tests."""

import random

import pytest

from lightduel.config import GameConfig, set_config
from lightduel.core.enums import Direction, RiderId
from lightduel.core.grid import Position
from lightduel.events.bus import EventBus
from lightduel.simulation.engine import GameEngine
from lightduel.simulation.models import AiConfig, GameSettings, Rider


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """
    Deterministic millisecond clock.

    Returns the current value on each call, then advances by ``step_ms``.
    """

    def __init__(self, start: int = 0, step_ms: int = 0) -> None:
        self.now = start
        self.step_ms = step_ms

    def __call__(self) -> int:
        value = self.now
        self.now += self.step_ms
        return value

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at 0 until advanced manually."""
    return FakeClock()


@pytest.fixture
def ticking_clock() -> FakeClock:
    """Clock that advances 100ms on every read."""
    return FakeClock(start=0, step_ms=100)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def fast_settings() -> GameSettings:
    """Default arena at top speed: riders move on every tick."""
    return GameSettings(arena_size=40, speed=10)


@pytest.fixture
def engine(fast_settings, ticking_clock, event_bus) -> GameEngine:
    """Seeded engine that steps once per tick."""
    return GameEngine(
        settings=fast_settings,
        rng=random.Random(1234),
        clock=ticking_clock,
        event_bus=event_bus,
    )


@pytest.fixture
def passive_ai() -> AiConfig:
    """AI that never re-thinks a safe heading within a short test."""
    return AiConfig(speed=0.1, aggressiveness=0.0, description="Drives straight")


# =============================================================================
# Rider Fixtures
# =============================================================================


@pytest.fixture
def player_rider() -> Rider:
    return Rider(rider_id=RiderId.PLAYER, position=Position(10, 20), direction=Direction.RIGHT)


@pytest.fixture
def ai_rider() -> Rider:
    return Rider(
        rider_id=RiderId.AI,
        position=Position(30, 20),
        direction=Direction.LEFT,
        ai_config=AiConfig(),
    )


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_config():
    """Give every test a fresh config with tuning disabled."""
    set_config(GameConfig(tuning_api_key=None))
    yield
    set_config(None)
