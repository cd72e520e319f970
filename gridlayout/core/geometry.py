"""Spatial queries over a layout.

Collision tests, bounding boxes, the bottom row and the stable ordering used
as the single tie-break for every compaction and defragmentation pass.

All functions are pure: they read the given items and return new values.
"""

from typing import Iterable, List, Optional, Sequence

from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import BoundingBox, LayoutItem

Layout = List[LayoutItem]


def collides(a: LayoutItem, b: LayoutItem) -> bool:
    """Strict axis-aligned overlap test. Touching edges do not collide."""
    return a.x < b.x + b.w and a.x + a.w > b.x and a.y < b.y + b.h and a.y + a.h > b.y


def get_first_collision(layout: Iterable[LayoutItem], item: LayoutItem) -> Optional[LayoutItem]:
    """Return the first item (list order) overlapping ``item``, skipping its own id."""
    for other in layout:
        if other.id != item.id and collides(other, item):
            return other
    return None


def get_all_collisions(layout: Iterable[LayoutItem], item: LayoutItem) -> Layout:
    """Return every item overlapping ``item``, skipping its own id, in list order."""
    return [other for other in layout if other.id != item.id and collides(other, item)]


def get_statics(layout: Iterable[LayoutItem]) -> Layout:
    """Return the static items of a layout."""
    return [item for item in layout if item.is_static]


def bottom(layout: Iterable[LayoutItem]) -> int:
    """Return the first fully empty row below all items (0 for an empty layout)."""
    return max((item.y + item.h for item in layout), default=0)


def calculate_bounding_box(items: Sequence[LayoutItem]) -> BoundingBox:
    """Compute the minimal rectangle covering ``items``.

    An empty selection yields the degenerate zero rectangle; callers moving
    clusters must pass at least one item.
    """
    if not items:
        return BoundingBox(x=0, y=0, w=0, h=0)

    left = min(item.x for item in items)
    top = min(item.y for item in items)
    right = max(item.x + item.w for item in items)
    lower = max(item.y + item.h for item in items)
    return BoundingBox(x=left, y=top, w=right - left, h=lower - top)


def sort_layout_items(layout: Iterable[LayoutItem], compact_type: CompactType) -> Layout:
    """Sort items in the order compaction processes them.

    Vertical (and none): by row, then column. Horizontal: by column, then
    row. On an exact tie a static item sorts before a dynamic one, so a fixed
    obstacle is settled before anything positioned around it. The sort is
    stable, so list order breaks any remaining tie.
    """
    if compact_type == CompactType.HORIZONTAL:
        return sorted(layout, key=lambda item: (item.x, item.y, not item.is_static))
    return sorted(layout, key=lambda item: (item.y, item.x, not item.is_static))


# =============================================================================
# Axis helpers
# =============================================================================


def push_axis(compact_type: CompactType) -> str:
    """Attribute name of the axis items are pushed along ('x' or 'y')."""
    return "x" if compact_type == CompactType.HORIZONTAL else "y"


def leading_edge(item, axis: str) -> int:
    """Coordinate of the item's leading edge on ``axis``."""
    return item.x if axis == "x" else item.y


def trailing_edge(item, axis: str) -> int:
    """Coordinate just past the item's trailing edge on ``axis``."""
    return item.x + item.w if axis == "x" else item.y + item.h


def shift_to(item: LayoutItem, axis: str, value: int) -> LayoutItem:
    """Copy of ``item`` with its leading edge on ``axis`` set to ``value``."""
    return item.copy_with(**{axis: value})


def resolve_span(item: LayoutItem, axis: str) -> range:
    """Slots the item covers across ``axis``, whether inside the grid or not."""
    if axis == "x":
        return range(item.y, item.y + item.h)
    return range(item.x, item.x + item.w)


__all__ = [
    "Layout",
    "collides",
    "get_first_collision",
    "get_all_collisions",
    "get_statics",
    "bottom",
    "calculate_bounding_box",
    "sort_layout_items",
    "push_axis",
    "leading_edge",
    "trailing_edge",
    "shift_to",
    "resolve_span",
]
