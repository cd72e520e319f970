"""Tests for the skyline (rising tide) compaction strategies."""

import random

import pytest

from gridlayout.core.geometry import collides
from gridlayout.layout.compactors import (
    FastHorizontalCompactor,
    FastVerticalCompactor,
    HorizontalCompactor,
    VerticalCompactor,
    compact_skyline,
)
from gridlayout.models import CompactType, LayoutItem

SLOTS = 10


def item(item_id, x, y, w=1, h=1, **kwargs):
    return LayoutItem(id=item_id, x=x, y=y, w=w, h=h, **kwargs)


def by_id(layout):
    return {entry.id: entry for entry in layout}


def positions(layout):
    return {entry.id: (entry.x, entry.y) for entry in layout}


def random_layout(rng, count, slots, min_y=0, rows=20, max_size=3):
    """Build a non-overlapping layout of dynamic items."""
    layout = []
    attempts = 0
    while len(layout) < count and attempts < 2000:
        attempts += 1
        w = rng.randint(1, max_size)
        h = rng.randint(1, max_size)
        candidate = item(
            f"item{len(layout)}",
            rng.randint(0, slots - w),
            rng.randint(min_y, rows),
            w,
            h,
        )
        if any(collides(candidate, other) for other in layout):
            continue
        layout.append(candidate)
    return layout


class TestFastVerticalCompactor:
    """Test skyline compaction toward row 0."""

    def test_single_item_rises(self):
        result = FastVerticalCompactor().compact([item("a", 4, 7)], SLOTS)
        assert result[0].y == 0

    def test_settles_on_static(self):
        layout = [item("s", 0, 0, w=2, h=2, is_static=True), item("a", 0, 5, w=2)]
        result = by_id(FastVerticalCompactor().compact(layout, SLOTS))
        assert result["a"].y == 2
        assert result["s"].y == 0

    def test_highest_tide_across_span(self):
        """A wide item settles below the tallest column it spans."""
        layout = [item("tall", 0, 0, h=3), item("short", 1, 0), item("wide", 0, 5, w=2)]
        result = by_id(FastVerticalCompactor().compact(layout, SLOTS))
        assert result["wide"].y == 3

    def test_jumps_unreached_static(self):
        """A dynamic item sorted before a static it overlaps jumps past it."""
        layout = [item("d", 0, 0, w=2, h=3), item("s", 0, 2, w=2, h=2, is_static=True)]
        result = by_id(FastVerticalCompactor().compact(layout, SLOTS))
        assert result["d"].y == 4
        assert result["s"].y == 2

    def test_allow_overlap_returns_copy(self):
        layout = [item("a", 0, 3)]
        result = FastVerticalCompactor().compact(layout, SLOTS, allow_overlap=True)
        assert result == layout
        assert result is not layout

    def test_resolve_collisions_pushes_down(self):
        layout = [item("a", 0, 0), item("b", 0, 0)]
        result = FastVerticalCompactor().resolve_collisions(layout, SLOTS)
        assert result[1].y == 1

    def test_input_order_preserved(self):
        layout = [item("z", 0, 9), item("a", 1, 0)]
        result = compact_skyline(layout, CompactType.VERTICAL, SLOTS)
        assert [entry.id for entry in result] == ["z", "a"]


class TestFastHorizontalCompactor:
    """Test skyline compaction toward column 0; slots counts rows."""

    def test_compacts_leftwards(self):
        result = FastHorizontalCompactor().compact([item("a", 5, 0)], SLOTS)
        assert result[0].x == 0

    def test_pushes_past_static(self):
        layout = [item("s", 2, 0, w=2, is_static=True), item("a", 5, 0)]
        result = by_id(FastHorizontalCompactor().compact(layout, SLOTS))
        assert result["a"].x == 4

    def test_resolve_collisions_pushes_right(self):
        layout = [item("a", 0, 0), item("b", 0, 0)]
        result = FastHorizontalCompactor().resolve_collisions(layout, SLOTS)
        assert result[1].x == 1

    def test_wide_item_jumps_static(self):
        layout = [item("d", 0, 0, w=5, h=2), item("s", 2, 0, w=2, h=2, is_static=True)]
        result = by_id(FastHorizontalCompactor().compact(layout, SLOTS))
        assert result["d"].x == 4

    def test_rows_beyond_slots_keep_their_tide(self):
        """Rows past the slot count are tracked, so items there still stack."""
        layout = [item("a", 0, 5), item("b", 3, 5)]
        result = by_id(FastHorizontalCompactor().compact(layout, 4))
        assert positions(result.values()) == {"a": (0, 5), "b": (1, 5)}

    def test_partly_covered_rows_tracked(self):
        """An item reaching past the last slot still blocks the rows it covers."""
        layout = [item("a", 0, 3, h=3), item("b", 2, 5)]
        result = by_id(FastHorizontalCompactor().compact(layout, 4))
        assert result["a"].x == 0
        assert result["b"].x == 1
        assert not collides(result["a"], result["b"])

    def test_static_in_other_rows_ignored(self):
        layout = [item("d", 0, 0, w=2, h=2), item("s", 0, 5, w=2, h=2, is_static=True)]
        result = by_id(FastHorizontalCompactor().compact(layout, SLOTS))
        assert result["d"].x == 0


class TestStrategyEquivalence:
    """Skyline and standard strategies agree on layouts without static stairs."""

    @pytest.mark.parametrize("seed", range(20))
    def test_vertical_matches_standard(self, seed):
        rng = random.Random(seed)
        layout = random_layout(rng, 20, SLOTS)

        standard = VerticalCompactor().compact(layout, SLOTS)
        fast = FastVerticalCompactor().compact(layout, SLOTS)
        assert positions(fast) == positions(standard)

    @pytest.mark.parametrize("seed", range(10))
    def test_vertical_matches_standard_with_flat_statics(self, seed):
        """Statics along the top row act the same in both strategies."""
        rng = random.Random(seed)
        statics = [
            item("s0", 0, 0, w=3, is_static=True),
            item("s1", 5, 0, w=2, is_static=True),
        ]
        layout = statics + random_layout(rng, 15, SLOTS, min_y=1)

        standard = VerticalCompactor().compact(layout, SLOTS)
        fast = FastVerticalCompactor().compact(layout, SLOTS)
        assert positions(fast) == positions(standard)

    def test_horizontal_matches_standard(self):
        layout = [
            item("a", 3, 0, w=2),
            item("b", 6, 0, h=2),
            item("c", 4, 1, w=2),
            item("s", 1, 2, is_static=True),
            item("d", 5, 2),
        ]
        standard = HorizontalCompactor().compact(layout, SLOTS)
        fast = FastHorizontalCompactor().compact(layout, SLOTS)
        assert positions(fast) == positions(standard)
        assert positions(fast) == {
            "a": (0, 0), "b": (2, 0), "c": (0, 1), "s": (1, 2), "d": (2, 2),
        }

    @pytest.mark.parametrize("seed", range(10))
    def test_fast_vertical_idempotent(self, seed):
        rng = random.Random(seed)
        layout = random_layout(rng, 20, SLOTS)
        compactor = FastVerticalCompactor()

        once = compactor.compact(layout, SLOTS)
        assert positions(compactor.compact(once, SLOTS)) == positions(once)
