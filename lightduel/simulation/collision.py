"""Collision resolution for riders after a step."""

from __future__ import annotations

from dataclasses import dataclass

from lightduel.core.grid import Position, in_bounds
from .models import Rider
from .trail import occupied_cells


@dataclass(frozen=True)
class CollisionVerdict:
    """Crash verdicts for both riders from the same step."""
    player_crashed: bool
    ai_crashed: bool

    @property
    def any_crashed(self) -> bool:
        return self.player_crashed or self.ai_crashed


def obstacle_cells(rider: Rider, other: Rider, now: int) -> set[Position]:
    """
    Cells ``rider`` may not occupy.

    Visible trail cells of both riders, plus the other rider's head
    while it is alive. The rider's own head is never included.
    """
    cells = occupied_cells((rider.trail, other.trail), now)
    if other.is_alive:
        cells.add(other.position)
    return cells


def resolve(rider: Rider, other: Rider, arena_size: int, now: int) -> bool:
    """
    Decide whether ``rider`` has crashed.

    Args:
        rider: Rider being evaluated (post-move)
        other: The opponent (post-move)
        arena_size: Side length of the arena
        now: Current time in ms, used for trail expiry

    Returns:
        True if the rider hit a wall, a visible trail cell or the opponent's head
    """
    if not in_bounds(rider.position, arena_size):
        return True
    return rider.position in obstacle_cells(rider, other, now)


def resolve_pair(player: Rider, ai: Rider, arena_size: int, now: int) -> CollisionVerdict:
    """Evaluate both riders against the same post-move state."""
    return CollisionVerdict(
        player_crashed=resolve(player, ai, arena_size, now),
        ai_crashed=resolve(ai, player, arena_size, now),
    )
