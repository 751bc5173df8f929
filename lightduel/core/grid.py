"""Arena geometry and coordinate arithmetic.

The arena is a square grid of ``arena_size`` cells per side.
Valid cells satisfy 0 <= x < arena_size and 0 <= y < arena_size.

Coordinate system:
    Origin (0, 0) = top-left cell
    +X = right
    +Y = down
"""

from __future__ import annotations

from dataclasses import dataclass

from .enums import Direction


DEFAULT_ARENA_SIZE = 40
MIN_ARENA_SIZE = 4


@dataclass(frozen=True)
class Position:
    """Integer grid cell."""
    x: int
    y: int

    def offset(self, dx: int, dy: int) -> Position:
        return Position(self.x + dx, self.y + dy)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


def advance(position: Position, direction: Direction) -> Position:
    """Return the cell one step from ``position`` in ``direction``."""
    dx, dy = direction.delta
    return position.offset(dx, dy)


def in_bounds(position: Position, arena_size: int) -> bool:
    """Check that ``position`` lies inside the arena."""
    return 0 <= position.x < arena_size and 0 <= position.y < arena_size


def spawn_points(arena_size: int) -> tuple[Position, Position]:
    """Mirrored spawn cells (player, ai).

    Player at 1/4 width, AI at 3/4 width, both vertically centered.
    """
    y = arena_size // 2
    return Position(arena_size // 4, y), Position(arena_size * 3 // 4, y)
