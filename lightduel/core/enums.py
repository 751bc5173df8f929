"""Game enumerations."""

from __future__ import annotations

from enum import Enum


class Direction(str, Enum):
    """Rider heading on the grid.

    Screen coordinates: +X = right, +Y = down.
    """
    UP = "UP"
    DOWN = "DOWN"
    LEFT = "LEFT"
    RIGHT = "RIGHT"

    @property
    def delta(self) -> tuple[int, int]:
        """Unit displacement (dx, dy) for one step in this direction."""
        return _DELTAS[self]

    @property
    def opposite(self) -> Direction:
        """The exact reverse heading."""
        return _OPPOSITES[self]

    def is_reverse_of(self, other: Direction) -> bool:
        return self.opposite is other


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}

_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Fixed iteration order used wherever "all four directions" are enumerated
ALL_DIRECTIONS = (Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT)


class RiderId(str, Enum):
    """Identity tag for the two riders in a round."""
    PLAYER = "player"
    AI = "ai"


class GamePhase(str, Enum):
    """Round lifecycle phase."""
    IDLE = "idle"           # No active round
    RUNNING = "running"     # Tick loop active
    GAMEOVER = "gameover"   # Outcome fixed, waiting for start/reset


class RoundOutcome(str, Enum):
    """Terminal outcome of a round."""
    PLAYER_WIN = "player_win"
    AI_WIN = "ai_win"
    TIE = "tie"

    @property
    def winner(self) -> RiderId | None:
        if self is RoundOutcome.PLAYER_WIN:
            return RiderId.PLAYER
        if self is RoundOutcome.AI_WIN:
            return RiderId.AI
        return None
