"""Tests for collision resolution."""

from lightduel.core.enums import Direction, RiderId
from lightduel.core.grid import Position
from lightduel.simulation.collision import obstacle_cells, resolve, resolve_pair
from lightduel.simulation.models import Rider


def _rider(rider_id: RiderId, x: int, y: int, direction: Direction = Direction.RIGHT) -> Rider:
    return Rider(rider_id=rider_id, position=Position(x, y), direction=direction)


class TestWalls:
    """Wall collisions."""

    def test_outside_arena_crashes(self):
        player = _rider(RiderId.PLAYER, 40, 5)
        ai = _rider(RiderId.AI, 20, 20)
        assert resolve(player, ai, arena_size=40, now=0)

    def test_negative_coordinate_crashes(self):
        player = _rider(RiderId.PLAYER, 5, -1)
        ai = _rider(RiderId.AI, 20, 20)
        assert resolve(player, ai, arena_size=40, now=0)

    def test_inside_arena_is_safe(self):
        player = _rider(RiderId.PLAYER, 39, 39)
        ai = _rider(RiderId.AI, 20, 20)
        assert not resolve(player, ai, arena_size=40, now=0)


class TestTrails:
    """Trail collisions."""

    def test_own_trail_crashes(self):
        player = _rider(RiderId.PLAYER, 5, 5)
        player.trail.append(Position(5, 5), 0)
        ai = _rider(RiderId.AI, 20, 20)

        assert resolve(player, ai, arena_size=40, now=100)

    def test_opponent_trail_crashes(self):
        player = _rider(RiderId.PLAYER, 5, 5)
        ai = _rider(RiderId.AI, 20, 20)
        ai.trail.append(Position(5, 5), 0)

        assert resolve(player, ai, arena_size=40, now=100)

    def test_expired_trail_is_passable(self):
        player = _rider(RiderId.PLAYER, 5, 5)
        ai = _rider(RiderId.AI, 20, 20)
        ai.trail.append(Position(5, 5), 0)

        assert not resolve(player, ai, arena_size=40, now=5000)

    def test_trail_at_4999ms_still_blocks(self):
        player = _rider(RiderId.PLAYER, 5, 5)
        ai = _rider(RiderId.AI, 20, 20)
        ai.trail.append(Position(5, 5), 0)

        assert resolve(player, ai, arena_size=40, now=4999)


class TestHeads:
    """Head-to-head collisions."""

    def test_same_cell_crashes_both(self):
        player = _rider(RiderId.PLAYER, 10, 10, Direction.RIGHT)
        ai = _rider(RiderId.AI, 10, 10, Direction.LEFT)

        verdict = resolve_pair(player, ai, arena_size=40, now=0)

        assert verdict.player_crashed
        assert verdict.ai_crashed
        assert verdict.any_crashed

    def test_dead_opponent_head_is_not_an_obstacle(self):
        player = _rider(RiderId.PLAYER, 10, 10)
        ai = _rider(RiderId.AI, 10, 10)
        ai.is_alive = False

        assert Position(10, 10) not in obstacle_cells(player, ai, now=0)

    def test_own_head_is_not_an_obstacle(self):
        player = _rider(RiderId.PLAYER, 10, 10)
        ai = _rider(RiderId.AI, 20, 20)

        cells = obstacle_cells(player, ai, now=0)

        assert Position(10, 10) not in cells
        assert Position(20, 20) in cells

    def test_no_crash(self):
        player = _rider(RiderId.PLAYER, 10, 10)
        ai = _rider(RiderId.AI, 20, 20)

        verdict = resolve_pair(player, ai, arena_size=40, now=0)

        assert not verdict.any_crashed
