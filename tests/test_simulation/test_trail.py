"""Tests for trail expiry."""

from lightduel.core.grid import Position
from lightduel.simulation.trail import TRAIL_TTL_MS, Trail, TrailCell, occupied_cells


class TestTrailCell:
    """Tests for TrailCell visibility."""

    def test_visible_just_before_ttl(self):
        cell = TrailCell(1, 1, timestamp=0)
        assert cell.is_visible(TRAIL_TTL_MS - 1)

    def test_expired_at_ttl(self):
        """A cell exactly TTL old is gone."""
        cell = TrailCell(1, 1, timestamp=0)
        assert not cell.is_visible(TRAIL_TTL_MS)

    def test_to_dict_includes_timestamp(self):
        assert TrailCell(2, 3, 150).to_dict() == {"x": 2, "y": 3, "timestamp": 150}


class TestTrail:
    """Tests for Trail."""

    def test_append_keeps_order(self):
        trail = Trail()
        trail.append(Position(0, 0), 0)
        trail.append(Position(1, 0), 100)

        assert [c.position for c in trail] == [Position(0, 0), Position(1, 0)]
        assert len(trail) == 2

    def test_visible_excludes_expired(self):
        trail = Trail()
        trail.append(Position(0, 0), 0)
        trail.append(Position(1, 0), 1000)

        visible = trail.visible(5000)

        assert [c.position for c in visible] == [Position(1, 0)]
        assert trail.visible_positions(5000) == {Position(1, 0)}

    def test_boundary_4999_vs_5000(self):
        trail = Trail()
        trail.append(Position(7, 7), 0)

        assert trail.visible_positions(4999) == {Position(7, 7)}
        assert trail.visible_positions(5000) == set()

    def test_prune_drops_expired_prefix(self):
        trail = Trail()
        for i in range(5):
            trail.append(Position(i, 0), i * 2000)

        removed = trail.prune(7000)

        # Cells at 0ms and 2000ms are at least 5000ms old
        assert removed == 2
        assert [c.timestamp for c in trail] == [4000, 6000, 8000]

    def test_prune_everything(self):
        trail = Trail()
        trail.append(Position(0, 0), 0)
        trail.append(Position(1, 0), 10)

        assert trail.prune(100_000) == 2
        assert len(trail) == 0

    def test_prune_empty(self):
        assert Trail().prune(0) == 0

    def test_custom_ttl(self):
        trail = Trail(ttl_ms=100)
        trail.append(Position(0, 0), 0)

        assert trail.visible_positions(99) == {Position(0, 0)}
        assert trail.visible_positions(100) == set()


class TestOccupiedCells:
    """Tests for occupied_cells()."""

    def test_union_of_visible_cells(self):
        a = Trail()
        a.append(Position(0, 0), 0)
        a.append(Position(1, 0), 4000)
        b = Trail()
        b.append(Position(5, 5), 4500)

        assert occupied_cells((a, b), 5000) == {Position(1, 0), Position(5, 5)}
