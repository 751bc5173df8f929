"""Event types emitted by the game engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from lightduel.core.enums import RoundOutcome

if TYPE_CHECKING:
    from lightduel.simulation.models import AiConfig, GameSnapshot


@dataclass
class GameEvent:
    """Base class for all game events."""

    timestamp: datetime = field(default_factory=datetime.now)

    # Score at time of event
    player_score: int = 0
    ai_score: int = 0


@dataclass
class RoundStartedEvent(GameEvent):
    """Fired when a fresh round is spawned and starts running."""

    round_number: int = 0
    snapshot: Optional["GameSnapshot"] = None


@dataclass
class TickEvent(GameEvent):
    """Fired after every step that moved the riders."""

    snapshot: Optional["GameSnapshot"] = None


@dataclass
class RoundEndedEvent(GameEvent):
    """Fired on a terminal collision outcome."""

    round_number: int = 0
    outcome: RoundOutcome = RoundOutcome.TIE
    snapshot: Optional["GameSnapshot"] = None


@dataclass
class GameResetEvent(GameEvent):
    """Fired when the engine returns to idle."""

    score_cleared: bool = False


@dataclass
class AiConfigChangedEvent(GameEvent):
    """Fired when a new AI configuration is accepted."""

    config: Optional["AiConfig"] = None
    applied_immediately: bool = False
