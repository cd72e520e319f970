"""Standard compaction strategies (O(N^2) sweep).

Items are processed in visual order. Each one is pulled toward the grid
origin while it stays free, then jumped past whatever it still overlaps.
Static items are seeded as already settled and never move.
"""

import logging
from typing import Dict, List

from gridlayout.core.geometry import (
    get_first_collision,
    get_statics,
    push_axis,
    shift_to,
    sort_layout_items,
    trailing_edge,
)
from gridlayout.layout.compactors.base import Compactor
from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)


def compact_item(
    compare_with: List[LayoutItem],
    item: LayoutItem,
    compact_type: CompactType,
    slots: int,
) -> LayoutItem:
    """Compact a single item against already settled items.

    Args:
        compare_with: Settled items (statics plus items compacted so far)
        item: Item to compact
        compact_type: Direction to compact toward
        slots: Number of columns; horizontal compaction wraps on overflow

    Returns:
        The item at its settled position
    """
    current = item

    if compact_type == CompactType.VERTICAL:
        while current.y > 0 and get_first_collision(compare_with, current) is None:
            current = current.copy_with(y=current.y - 1)
    elif compact_type == CompactType.HORIZONTAL:
        while current.x > 0 and get_first_collision(compare_with, current) is None:
            current = current.copy_with(x=current.x - 1)

    while True:
        collider = get_first_collision(compare_with, current)
        if collider is None:
            break

        if compact_type == CompactType.HORIZONTAL:
            current = current.copy_with(x=collider.x + collider.w)
            # Wrap to the start of the next row and check again there
            if current.x + current.w > slots:
                current = current.copy_with(x=0, y=current.y + 1)
        else:
            current = current.copy_with(y=collider.y + collider.h)

    if current.x < 0 or current.y < 0:
        current = current.copy_with(x=max(current.x, 0), y=max(current.y, 0))
    return current


def compact_layout(
    layout: List[LayoutItem],
    compact_type: CompactType,
    slots: int,
) -> List[LayoutItem]:
    """Run the standard sweep over a whole layout, preserving input order."""
    compare_with = get_statics(layout)
    settled: Dict[str, LayoutItem] = {}

    for item in sort_layout_items(layout, compact_type):
        if item.is_static:
            settled[item.id] = item
            continue

        compacted = compact_item(compare_with, item, compact_type, slots)
        compare_with.append(compacted)
        settled[item.id] = compacted

    return [settled[item.id] for item in layout]


def resolve_collisions(layout: List[LayoutItem], compact_type: CompactType) -> List[LayoutItem]:
    """Push overlapping dynamic items apart along the push axis.

    Items are visited in visual order; each dynamic item is moved past any
    settled item it overlaps until it is clear. Nothing is pulled toward the
    origin. Two statics may keep overlapping.

    Args:
        layout: Items that may overlap
        compact_type: Selects the push axis (y unless horizontal)

    Returns:
        New list in input order
    """
    axis = push_axis(compact_type)
    settled_items = get_statics(layout)
    resolved: Dict[str, LayoutItem] = {}
    pushes = 0

    for item in sort_layout_items(layout, compact_type):
        if item.is_static:
            resolved[item.id] = item
            continue

        current = item
        while True:
            collider = get_first_collision(settled_items, current)
            if collider is None:
                break
            current = shift_to(current, axis, trailing_edge(collider, axis))
            pushes += 1

        settled_items.append(current)
        resolved[item.id] = current

    if pushes:
        logger.debug(f"Resolved collisions along {axis} with {pushes} pushes")
    return [resolved[item.id] for item in layout]


class NoCompactor(Compactor):
    """Leaves positions alone, but still separates overlaps after a user action."""

    @property
    def name(self) -> str:
        return "none"

    @property
    def compact_type(self) -> CompactType:
        return CompactType.NONE

    def compact(self, layout, slots, allow_overlap=False):
        if allow_overlap:
            return list(layout)
        return self.resolve_collisions(layout, slots)

    def resolve_collisions(self, layout, slots):
        return resolve_collisions(layout, CompactType.VERTICAL)


class VerticalCompactor(Compactor):
    """Pulls items up toward row 0."""

    @property
    def name(self) -> str:
        return "vertical"

    @property
    def compact_type(self) -> CompactType:
        return CompactType.VERTICAL

    def compact(self, layout, slots, allow_overlap=False):
        if allow_overlap:
            return list(layout)
        return compact_layout(layout, CompactType.VERTICAL, slots)

    def resolve_collisions(self, layout, slots):
        return resolve_collisions(layout, CompactType.VERTICAL)


class HorizontalCompactor(Compactor):
    """Pulls items left toward column 0, wrapping to the next row on overflow."""

    @property
    def name(self) -> str:
        return "horizontal"

    @property
    def compact_type(self) -> CompactType:
        return CompactType.HORIZONTAL

    def compact(self, layout, slots, allow_overlap=False):
        if allow_overlap:
            return list(layout)
        return compact_layout(layout, CompactType.HORIZONTAL, slots)

    def resolve_collisions(self, layout, slots):
        return resolve_collisions(layout, CompactType.HORIZONTAL)
