"""Resize engine.

A resize writes the item's new geometry, clamped to its own limits and to
the grid's fixed axis, then makes room for it:

- shrink: neighbors hit along the horizontal resize direction give up the
  overlapping columns, as long as they stay at or above their ``min_w``.
- push: everything else is pushed along the compaction axis with the same
  cascade the move engine uses.

The result is never compacted; callers compact when the gesture ends.
"""

import logging
from typing import List, Optional, Tuple

from gridlayout.core.geometry import (
    Layout,
    collides,
    get_statics,
    push_axis,
)
from gridlayout.core.movement import cascade_push, clear_obstacles
from gridlayout.models.grid_enums import CompactType, ResizeBehavior
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)


def clamp_size(item: LayoutItem, w: int, h: int) -> Tuple[int, int]:
    """Clamp a desired size to the item's limits, truncating the maxima."""
    w = int(min(max(w, item.min_w), item.max_w))
    h = int(min(max(h, item.min_h), item.max_h))
    return max(w, 1), max(h, 1)


def clamp_to_grid(x: int, y: int, w: int, h: int, slots: int) -> Tuple[int, int, int, int]:
    """Fit a rectangle into the fixed axis by giving up size, not position.

    A negative coordinate is cut off at 0 along with the part of the
    rectangle that was outside the grid. A rectangle starting right of the
    last column keeps its position, so ``resize_item`` rejects it.
    """
    if x < 0:
        w += x
        x = 0
    if x + w > slots:
        w = slots - x
    if y < 0:
        h += y
        y = 0
    return x, y, max(w, 1), max(h, 1)


def shrink_neighbor(resized: LayoutItem, neighbor: LayoutItem) -> Optional[LayoutItem]:
    """Give up the columns ``resized`` now covers, or None if that is infeasible.

    A neighbor to the right keeps its right edge and moves its left edge out
    by the overlap; a neighbor to the left keeps its left edge and loses the
    overlap from its width.
    """
    if resized.x < neighbor.x:
        overlap = resized.right - neighbor.x
        shrunk = neighbor.copy_with(x=neighbor.x + overlap, w=neighbor.w - overlap)
    else:
        overlap = neighbor.right - resized.x
        shrunk = neighbor.copy_with(w=neighbor.w - overlap)

    if shrunk.w < max(neighbor.min_w, 1) or collides(shrunk, resized):
        return None
    return shrunk


def resize_item(
    layout: Layout,
    item: LayoutItem,
    behavior: ResizeBehavior,
    slots: int,
    prevent_collision: bool = False,
    compact_type: CompactType = CompactType.VERTICAL,
) -> Layout:
    """Apply a new geometry to an item and resolve its neighbors.

    Args:
        layout: Current layout (left untouched)
        item: The item carrying its desired new geometry
        behavior: ResizeBehavior.SHRINK or ResizeBehavior.PUSH
        slots: Number of columns
        prevent_collision: Accepted for symmetry with the move engine; a
            resize always resolves its collisions
        compact_type: Selects the push axis

    Returns:
        New layout, or an unchanged copy if the item is static or absent
    """
    stored = next((candidate for candidate in layout if candidate.id == item.id), None)
    if stored is None:
        logger.debug(f"Resize of unknown item {item.id} ignored")
        return list(layout)
    if stored.is_static:
        return list(layout)

    w, h = clamp_size(stored, item.w, item.h)
    x, y, w, h = clamp_to_grid(item.x, item.y, w, h, slots)
    if x >= slots:
        logger.debug(f"Resize of {item.id} to column {x} lies outside {slots} columns, ignored")
        return list(layout)
    resized = stored.copy_with(x=x, y=y, w=w, h=h)
    if resized == stored:
        return list(layout)

    axis = push_axis(compact_type)
    statics = get_statics(layout)

    relocated = clear_obstacles(resized, statics, axis)
    if relocated is not resized:
        logger.debug(
            f"Resized item {resized.id} relocated past statics to "
            f"({relocated.x}, {relocated.y})"
        )
        resized = relocated

    items = {candidate.id: candidate for candidate in layout}
    items[resized.id] = resized

    if behavior == ResizeBehavior.SHRINK and (resized.x != stored.x or resized.w != stored.w):
        fallback: List[str] = []
        for other in list(items.values()):
            if other.id == resized.id or other.is_static or not collides(other, resized):
                continue
            shrunk = shrink_neighbor(resized, other)
            if shrunk is None:
                fallback.append(other.id)
                continue
            items[other.id] = shrunk
        if fallback:
            logger.debug(f"Shrink infeasible for {fallback}, pushing instead")

    cascade_push(items, [resized.id], axis, pinned={resized.id})
    return list(items.values())


__all__ = [
    "clamp_size",
    "clamp_to_grid",
    "shrink_neighbor",
    "resize_item",
]
