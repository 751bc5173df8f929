"""Models for the light-cycle duel simulation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from lightduel.core.enums import Direction, GamePhase, RiderId, RoundOutcome
from lightduel.core.grid import DEFAULT_ARENA_SIZE, MIN_ARENA_SIZE, Position, advance
from .trail import Trail, TrailCell


DEFAULT_GAME_SPEED = 5
MIN_GAME_SPEED = 1
MAX_GAME_SPEED = 10

DEFAULT_AI_DESCRIPTION = "A balanced opponent of medium difficulty."


@dataclass(frozen=True)
class AiConfig:
    """
    Tunable AI opponent parameters.

    Produced by the tuning service or set directly. Values are validated
    here so the engine never sees an out-of-range record.
    """

    speed: float = 0.4  # Decision cadence scale, 0 < speed <= 1
    aggressiveness: float = 0.5  # Chance of steering toward the player, 0..1
    description: str = DEFAULT_AI_DESCRIPTION

    def __post_init__(self) -> None:
        if not 0.0 < self.speed <= 1.0:
            raise ValueError(f"AI speed must be in (0, 1], got {self.speed}")
        if not 0.0 <= self.aggressiveness <= 1.0:
            raise ValueError(
                f"AI aggressiveness must be in [0, 1], got {self.aggressiveness}"
            )

    def to_dict(self) -> dict:
        return {
            "speed": self.speed,
            "aggressiveness": self.aggressiveness,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AiConfig:
        return cls(
            speed=float(data.get("speed", 0.4)),
            aggressiveness=float(data.get("aggressiveness", 0.5)),
            description=str(data.get("description", DEFAULT_AI_DESCRIPTION)),
        )


@dataclass(frozen=True)
class GameSettings:
    """Arena and cadence settings for a session."""

    arena_size: int = DEFAULT_ARENA_SIZE
    speed: int = DEFAULT_GAME_SPEED  # 1 (slowest) .. 10 (every frame)

    def __post_init__(self) -> None:
        if self.arena_size < MIN_ARENA_SIZE:
            raise ValueError(
                f"Arena size must be at least {MIN_ARENA_SIZE}, got {self.arena_size}"
            )
        if not MIN_GAME_SPEED <= self.speed <= MAX_GAME_SPEED:
            raise ValueError(
                f"Game speed must be in [{MIN_GAME_SPEED}, {MAX_GAME_SPEED}], got {self.speed}"
            )

    @property
    def frames_per_step(self) -> int:
        """Frames that must accumulate before the riders move once."""
        return (MAX_GAME_SPEED + 1) - self.speed

    def to_dict(self) -> dict:
        return {"arena_size": self.arena_size, "speed": self.speed}


@dataclass
class Score:
    """Cumulative round wins within a session."""

    player: int = 0
    ai: int = 0

    def credit(self, outcome: RoundOutcome) -> None:
        if outcome is RoundOutcome.PLAYER_WIN:
            self.player += 1
        elif outcome is RoundOutcome.AI_WIN:
            self.ai += 1

    def clear(self) -> None:
        self.player = 0
        self.ai = 0

    def to_dict(self) -> dict:
        return {"player": self.player, "ai": self.ai}


@dataclass
class Rider:
    """
    Mutable per-round rider state.

    Owned exclusively by the engine; external code only sees RiderSnapshot.
    """

    rider_id: RiderId
    position: Position
    direction: Direction
    trail: Trail = field(default_factory=Trail)
    is_alive: bool = True

    # AI-only parameters (None for the player)
    ai_config: Optional[AiConfig] = None

    def move(self, now: int) -> None:
        """Step one cell, leaving the vacated head cell on the trail."""
        self.trail.append(self.position, now)
        self.position = advance(self.position, self.direction)

    def snapshot(self, now: int) -> RiderSnapshot:
        return RiderSnapshot(
            rider_id=self.rider_id,
            position=self.position,
            direction=self.direction,
            is_alive=self.is_alive,
            trail=self.trail.visible(now),
            speed=self.ai_config.speed if self.ai_config else None,
            aggressiveness=self.ai_config.aggressiveness if self.ai_config else None,
            description=self.ai_config.description if self.ai_config else None,
        )


@dataclass(frozen=True)
class RiderSnapshot:
    """Read-only view of a rider for rendering collaborators."""

    rider_id: RiderId
    position: Position
    direction: Direction
    is_alive: bool
    trail: tuple[TrailCell, ...]  # Visible cells only, oldest first

    # AI parameters
    speed: Optional[float] = None
    aggressiveness: Optional[float] = None
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "id": self.rider_id.value,
            "position": self.position.to_dict(),
            "direction": self.direction.value,
            "is_alive": self.is_alive,
            "trail": [cell.to_dict() for cell in self.trail],
        }
        if self.rider_id is RiderId.AI:
            data["speed"] = self.speed
            data["aggressiveness"] = self.aggressiveness
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable per-tick view of the whole game."""

    phase: GamePhase
    tick: int  # Steps taken this round
    time_ms: int
    arena_size: int
    game_speed: int
    player: RiderSnapshot
    ai: RiderSnapshot
    score_player: int
    score_ai: int
    outcome: Optional[RoundOutcome] = None

    @property
    def winner(self) -> Optional[RiderId]:
        return self.outcome.winner if self.outcome else None

    @property
    def score(self) -> tuple[int, int]:
        return (self.score_player, self.score_ai)

    def to_dict(self) -> dict:
        winner = self.winner
        return {
            "phase": self.phase.value,
            "tick": self.tick,
            "time_ms": self.time_ms,
            "arena_size": self.arena_size,
            "game_speed": self.game_speed,
            "player": self.player.to_dict(),
            "ai": self.ai.to_dict(),
            "score": {"player": self.score_player, "ai": self.score_ai},
            "outcome": self.outcome.value if self.outcome else None,
            "winner": winner.value if winner else None,
        }
