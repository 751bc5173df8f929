"""Event system for game simulation."""

from lightduel.events.bus import EventBus
from lightduel.events.types import (
    AiConfigChangedEvent,
    GameEvent,
    GameResetEvent,
    RoundEndedEvent,
    RoundStartedEvent,
    TickEvent,
)

__all__ = [
    "AiConfigChangedEvent",
    "EventBus",
    "GameEvent",
    "GameResetEvent",
    "RoundEndedEvent",
    "RoundStartedEvent",
    "TickEvent",
]
