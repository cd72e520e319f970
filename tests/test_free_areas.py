"""Tests for free-space queries."""

from gridlayout.core.placement import (
    can_item_fit,
    find_free_areas,
    find_horizontal_free_areas,
    first_free_area,
    last_row_free_area,
)
from gridlayout.models import LayoutItem


def item(item_id, x, y, w=1, h=1, **kwargs):
    return LayoutItem(id=item_id, x=x, y=y, w=w, h=h, **kwargs)


def rects(areas):
    return [(area.x, area.y, area.w, area.h) for area in areas]


class TestFindFreeAreas:
    """Test the maximal empty rectangle search."""

    def test_empty_layout_single_strip(self):
        assert rects(find_free_areas([], 4)) == [(0, 0, 4, 1)]

    def test_maximal_rectangles(self):
        """Contained rectangles are dropped; a shared corner lists the wider first."""
        layout = [item("a", 0, 0, h=2), item("b", 2, 1, w=2)]
        areas = find_free_areas(layout, 4)

        assert rects(areas) == [(1, 0, 3, 1), (1, 0, 1, 2)]
        assert [area.id for area in areas] == ["free_area_0", "free_area_1"]

    def test_full_grid_has_no_areas(self):
        assert find_free_areas([item("a", 0, 0, w=4, h=2)], 4) == []

    def test_rows_below_content_not_reported(self):
        layout = [item("a", 0, 0, w=3)]
        assert rects(find_free_areas(layout, 4)) == [(3, 0, 1, 1)]


class TestHorizontalFreeAreas:
    """Test the per-row strip search."""

    def test_strips_per_row(self):
        layout = [item("a", 0, 0, h=2), item("b", 2, 1, w=2)]
        assert rects(find_horizontal_free_areas(layout, 4)) == [(1, 0, 3, 1), (1, 1, 1, 1)]

    def test_split_row(self):
        layout = [item("a", 1, 0), item("b", 3, 0)]
        assert rects(find_horizontal_free_areas(layout, 5)) == [(0, 0, 1, 1), (2, 0, 1, 1), (4, 0, 1, 1)]

    def test_empty_layout(self):
        assert rects(find_horizontal_free_areas([], 3)) == [(0, 0, 3, 1)]


class TestFreeAreaHelpers:
    """Test the convenience lookups built on the area search."""

    def test_first_free_area(self):
        layout = [item("a", 0, 0, h=2), item("b", 2, 1, w=2)]
        assert rects([first_free_area(layout, 4)]) == [(1, 0, 3, 1)]

    def test_first_free_area_full_grid(self):
        assert first_free_area([item("a", 0, 0, w=4)], 4) is None

    def test_last_row_free_area(self):
        layout = [item("a", 0, 0, w=3), item("b", 0, 1)]
        assert rects([last_row_free_area(layout, 3)]) == [(1, 1, 2, 1)]

    def test_last_row_free_area_none(self):
        assert last_row_free_area([], 3) is None
        assert last_row_free_area([item("a", 0, 0, w=3)], 3) is None

    def test_can_item_fit(self):
        layout = [item("a", 0, 0, h=2), item("b", 2, 1, w=2)]
        assert can_item_fit(layout, item("target", 0, 0, w=3), 4)
        assert can_item_fit(layout, item("target", 0, 0, h=2), 4)
        assert not can_item_fit(layout, item("target", 0, 0, w=2, h=2), 4)
