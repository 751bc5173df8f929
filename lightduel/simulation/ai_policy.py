"""Heuristic AI opponent controller.

Greedy, locally-safe, probabilistically opponent-seeking policy:

    1. Inertia - keep the current heading for a while if the next cell is safe
    2. Decision - once the decision counter runs out (or straight is unsafe),
       pick among the safe non-reversing headings
    3. Aggression - with probability ``aggressiveness`` prefer headings that
       close the distance to the player, otherwise choose uniformly at random

Lookahead is exactly one cell. There is no path planning.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from lightduel.core.enums import ALL_DIRECTIONS, Direction
from lightduel.core.grid import Position, advance, in_bounds
from .models import AiConfig


logger = logging.getLogger(__name__)


# Decision counter threshold is DECISION_INTERVAL / speed
DECISION_INTERVAL = 10


class AiDecisionPolicy:
    """
    Chooses the AI rider's heading once per simulation step.

    The random source is injected so tests can seed it.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()
        self.decision_counter = 0

    def reset(self) -> None:
        """Clear the decision counter for a fresh round."""
        self.decision_counter = 0

    def choose_direction(
        self,
        position: Position,
        direction: Direction,
        target: Position,
        config: AiConfig,
        arena_size: int,
        occupied: set[Position],
    ) -> Direction:
        """
        Pick the next heading.

        Args:
            position: AI head (pre-move)
            direction: Current AI heading
            target: Player head (pre-move)
            config: AI speed/aggressiveness
            arena_size: Side length of the arena
            occupied: Visible trail cells of both riders

        Returns:
            The heading to move in this step. May be unsafe when no safe
            heading exists.
        """
        def is_safe(cell: Position) -> bool:
            return in_bounds(cell, arena_size) and cell not in occupied

        self.decision_counter += 1
        if self.decision_counter < DECISION_INTERVAL / config.speed:
            if is_safe(advance(position, direction)):
                return direction

        self.decision_counter = 0

        candidates = [d for d in ALL_DIRECTIONS if d is not direction.opposite]
        safe = [d for d in candidates if is_safe(advance(position, d))]

        if not safe:
            logger.debug(f"AI boxed in at ({position.x}, {position.y}), holding {direction.value}")
            return direction

        if self.rng.random() < config.aggressiveness:
            for preferred in preferred_directions(position, target):
                if preferred in safe:
                    return preferred

        return self.rng.choice(safe)


def preferred_directions(position: Position, target: Position) -> list[Direction]:
    """
    Headings that reduce the displacement to ``target``.

    The axis with the larger absolute displacement comes first (ties go to
    the vertical axis), then the orthogonal axis if it has any displacement.
    """
    dx = target.x - position.x
    dy = target.y - position.y

    horizontal = None
    if dx:
        horizontal = Direction.RIGHT if dx > 0 else Direction.LEFT
    vertical = None
    if dy:
        vertical = Direction.DOWN if dy > 0 else Direction.UP

    if abs(dx) > abs(dy):
        ordered = (horizontal, vertical)
    else:
        ordered = (vertical, horizontal)
    return [d for d in ordered if d is not None]
