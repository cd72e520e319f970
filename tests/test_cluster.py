"""Tests for rigid cluster moves and keyboard nudges."""

import random

import pytest

from gridlayout.core.geometry import collides
from gridlayout.core.movement import move_cluster, nudge_cluster
from gridlayout.models import CompactType, LayoutItem

SLOTS = 10


def item(item_id, x, y, w=1, h=1, **kwargs):
    return LayoutItem(id=item_id, x=x, y=y, w=w, h=h, **kwargs)


def by_id(layout):
    return {entry.id: entry for entry in layout}


def offsets(layout, ids):
    """Member positions relative to the first member."""
    items = by_id(layout)
    anchor = items[ids[0]]
    return [(items[i].x - anchor.x, items[i].y - anchor.y) for i in ids]


class TestMoveCluster:
    """Test moving a selection as one rigid body."""

    def test_pushes_obstacle_below_group(self):
        """An obstacle beside the cluster is pushed below its bounding box."""
        layout = [item("a", 0, 0, w=2), item("b", 0, 1, w=2), item("o", 2, 0, w=2, h=2)]
        result = by_id(move_cluster(layout, ["a", "b"], 2, 0, SLOTS, CompactType.VERTICAL))

        assert result["a"].x == result["b"].x == 2
        assert (result["a"].y, result["b"].y) == (0, 1)
        assert result["o"].y == 2

    def test_obstacle_pushed_past_whole_group(self):
        """Hitting the short member still clears the tall one."""
        layout = [item("a", 0, 0), item("b", 0, 1, h=2), item("o", 1, 0)]
        result = by_id(move_cluster(layout, ["a", "b"], 1, 0, SLOTS, CompactType.VERTICAL))
        assert result["o"].y == 3

    def test_slides_past_static(self):
        layout = [
            item("a", 0, 0, w=2),
            item("b", 0, 1, w=2),
            item("s", 0, 3, w=2, is_static=True),
        ]
        result = by_id(move_cluster(layout, ["a", "b"], 0, 3, SLOTS, CompactType.VERTICAL))

        assert (result["a"].y, result["b"].y) == (4, 5)
        assert result["s"].y == 3

    def test_static_members_stay(self):
        """A static item in the selection does not move with the group."""
        layout = [item("a", 0, 0), item("s", 1, 0, is_static=True)]
        result = by_id(move_cluster(layout, ["a", "s"], 5, 5, SLOTS, CompactType.VERTICAL))
        assert (result["a"].x, result["a"].y) == (5, 5)
        assert (result["s"].x, result["s"].y) == (1, 0)

    def test_only_statics_selected(self):
        layout = [item("s", 0, 0, is_static=True)]
        assert move_cluster(layout, ["s"], 3, 3, SLOTS, CompactType.VERTICAL) == layout

    def test_zero_delta_unchanged(self):
        layout = [item("a", 1, 1), item("b", 1, 1)]
        assert move_cluster(layout, ["a"], 1, 1, SLOTS, CompactType.VERTICAL) == layout

    def test_prevent_collision_only_translates(self):
        layout = [item("a", 0, 0), item("o", 2, 0)]
        result = by_id(
            move_cluster(layout, ["a"], 2, 0, SLOTS, CompactType.VERTICAL, prevent_collision=True)
        )
        assert (result["a"].x, result["o"].y) == (2, 0)

    def test_horizontal_pushes_right_of_group(self):
        layout = [item("a", 0, 0), item("b", 1, 0), item("o", 2, 0)]
        result = by_id(move_cluster(layout, ["a", "b"], 1, 0, SLOTS, CompactType.HORIZONTAL))
        assert (result["a"].x, result["b"].x) == (1, 2)
        assert (result["o"].x, result["o"].y) == (3, 0)

    def test_result_is_not_compacted(self):
        layout = [item("a", 0, 0), item("b", 0, 1)]
        result = by_id(move_cluster(layout, ["a", "b"], 0, 4, SLOTS, CompactType.VERTICAL))
        assert (result["a"].y, result["b"].y) == (4, 5)

    @pytest.mark.parametrize("seed", range(10))
    def test_formation_preserved(self, seed):
        """Relative offsets survive any move, including slides past statics."""
        rng = random.Random(seed)
        cells = rng.sample([(x, y) for x in range(4) for y in range(4)], 4)
        members = [item(f"m{i}", x, y) for i, (x, y) in enumerate(cells)]
        layout = members + [
            item("s", rng.randint(0, 8), rng.randint(5, 9), w=2, is_static=True),
            item("o", rng.randint(5, 9), rng.randint(0, 4)),
        ]
        ids = [m.id for m in members]

        result = move_cluster(
            layout, ids, rng.randint(0, 6), rng.randint(0, 8), SLOTS, CompactType.VERTICAL
        )
        assert offsets(result, ids) == offsets(layout, ids)

        moved = by_id(result)
        for member_id in ids:
            assert not collides(moved[member_id], moved["s"])
            assert not collides(moved[member_id], moved["o"])


class TestNudgeCluster:
    """Test discrete keyboard steps."""

    def test_nudge_pushes_neighbor(self):
        layout = [item("a", 0, 0), item("o", 0, 1)]
        result = by_id(nudge_cluster(layout, ["a"], 0, 1, SLOTS, CompactType.VERTICAL))
        assert result["a"].y == 1
        assert result["o"].y == 2

    def test_clamped_at_left_edge(self):
        layout = [item("a", 0, 0, w=2)]
        assert nudge_cluster(layout, ["a"], -1, 0, SLOTS, CompactType.VERTICAL) == layout

    def test_clamped_at_right_edge(self):
        layout = [item("a", 0, 0, w=2)]
        result = nudge_cluster(layout, ["a"], 20, 0, SLOTS, CompactType.VERTICAL)
        assert result[0].x == 8

    def test_clamped_at_top(self):
        layout = [item("a", 3, 0)]
        assert nudge_cluster(layout, ["a"], 0, -1, SLOTS, CompactType.VERTICAL) == layout

    def test_rejected_by_static(self):
        """A step onto a static leaves the layout unchanged."""
        layout = [item("a", 0, 0), item("s", 1, 0, is_static=True)]
        assert nudge_cluster(layout, ["a"], 1, 0, SLOTS, CompactType.VERTICAL) == layout

    def test_selected_static_does_not_block(self):
        layout = [item("a", 0, 0), item("s", 0, 1, is_static=True)]
        result = by_id(nudge_cluster(layout, ["a", "s"], 1, 0, SLOTS, CompactType.VERTICAL))
        assert result["a"].x == 1
        assert result["s"].x == 0

    def test_nudge_group(self):
        layout = [item("a", 0, 0), item("b", 1, 0)]
        result = by_id(nudge_cluster(layout, ["a", "b"], 0, 2, SLOTS, CompactType.VERTICAL))
        assert (result["a"].y, result["b"].y) == (2, 2)
