"""Core grid types shared by the simulation and the API."""

from lightduel.core.enums import ALL_DIRECTIONS, Direction, GamePhase, RiderId, RoundOutcome
from lightduel.core.grid import (
    DEFAULT_ARENA_SIZE,
    MIN_ARENA_SIZE,
    Position,
    advance,
    in_bounds,
    spawn_points,
)

__all__ = [
    "ALL_DIRECTIONS",
    "DEFAULT_ARENA_SIZE",
    "Direction",
    "GamePhase",
    "MIN_ARENA_SIZE",
    "Position",
    "RiderId",
    "RoundOutcome",
    "advance",
    "in_bounds",
    "spawn_points",
]
