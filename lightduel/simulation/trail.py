"""Per-rider light trail with time-based expiry."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from lightduel.core.grid import Position


# Trail cells stop being collidable/visible this long after being vacated
TRAIL_TTL_MS = 5000


@dataclass(frozen=True)
class TrailCell:
    """A vacated head cell tagged with the time (ms) it was vacated."""
    x: int
    y: int
    timestamp: int

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def is_visible(self, now: int, ttl_ms: int = TRAIL_TTL_MS) -> bool:
        return now - self.timestamp < ttl_ms

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "timestamp": self.timestamp}


@dataclass
class Trail:
    """
    Ordered history of a rider's past head cells.

    Append-only while the rider is alive; insertion order is chronological,
    so expired cells always form a prefix of the sequence. Expired cells are
    excluded from every query. ``prune`` may physically drop them.
    """

    ttl_ms: int = TRAIL_TTL_MS
    _cells: list[TrailCell] = field(default_factory=list, repr=False)

    def append(self, position: Position, timestamp: int) -> None:
        """Record ``position`` as vacated at ``timestamp``."""
        self._cells.append(TrailCell(position.x, position.y, timestamp))

    def visible(self, now: int) -> tuple[TrailCell, ...]:
        """All cells still inside the TTL window, oldest first."""
        return tuple(c for c in self._cells if c.is_visible(now, self.ttl_ms))

    def visible_positions(self, now: int) -> set[Position]:
        return {c.position for c in self._cells if c.is_visible(now, self.ttl_ms)}

    def prune(self, now: int) -> int:
        """
        Drop expired cells.

        Returns:
            Number of cells removed
        """
        keep_from = 0
        for keep_from, cell in enumerate(self._cells):
            if cell.is_visible(now, self.ttl_ms):
                break
        else:
            keep_from = len(self._cells)

        if keep_from:
            del self._cells[:keep_from]
        return keep_from

    def clear(self) -> None:
        self._cells.clear()

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[TrailCell]:
        return iter(self._cells)


def occupied_cells(trails: Iterable[Trail], now: int) -> set[Position]:
    """Union of the visible cells of every trail in ``trails``."""
    cells: set[Position] = set()
    for trail in trails:
        cells |= trail.visible_positions(now)
    return cells
