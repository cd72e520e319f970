"""Placement, defragmentation and free-space queries.

- correct_bounds: pull items back inside the slot count
- place_new_items: append auto-placed items after the existing content
- optimize_layout: best-fit defragmentation in visual order
- find_free_areas and friends: maximal empty rectangles of the occupied rows
"""

import logging
from typing import Iterable, List, Optional, Set, Tuple

from gridlayout.core.geometry import Layout, bottom, collides, sort_layout_items
from gridlayout.models.grid_enums import AUTO_PLACE, CompactType
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)

# Upper bound on candidate positions tried per auto-placed item
MAX_PLACEMENT_ATTEMPTS = 10000

FREE_AREA_PREFIX = "free_area_"


# =============================================================================
# Bounds and placement
# =============================================================================


def correct_bounds(layout: Layout, slots: int) -> Layout:
    """Bring every dynamic item back inside the grid's fixed axis.

    An item overflowing the right edge is moved left to ``max(0, slots - w)``.
    An item starting left of column 0 is moved to 0 and widened to the full
    slot count. Static items are returned unchanged.
    """
    corrected = []
    for item in layout:
        current = item
        if not current.is_static:
            if current.x + current.w > slots:
                current = current.copy_with(x=max(0, slots - current.w))
            if current.x < 0:
                current = current.copy_with(x=0, w=slots)
        corrected.append(current)
    return corrected


def needs_placement(item: LayoutItem) -> bool:
    """True if the item carries the auto-placement sentinel on either axis."""
    return item.x == AUTO_PLACE or item.y == AUTO_PLACE


def place_new_items(existing: Layout, new_items: Iterable[LayoutItem], slots: int) -> Layout:
    """Add items to a layout, auto-placing those marked with ``AUTO_PLACE``.

    Items with explicit coordinates are appended as-is. Auto-placed items are
    packed left to right starting on the first empty row below everything
    else, wrapping to the next row on overflow; interior gaps are never
    searched.

    Args:
        existing: Current layout
        new_items: Items to add
        slots: Number of columns

    Returns:
        ``existing`` + fixed new items + auto-placed items, in that order
    """
    new_items = list(new_items)
    to_place = [item for item in new_items if needs_placement(item)]
    placed = list(existing) + [item for item in new_items if not needs_placement(item)]

    if not to_place:
        return placed

    cursor_y = bottom(placed)
    cursor_x = 0

    for item in to_place:
        attempts = 0
        while attempts < MAX_PLACEMENT_ATTEMPTS:
            attempts += 1

            if cursor_x + item.w > slots and cursor_x > 0:
                cursor_x = 0
                cursor_y += 1
                continue

            candidate = item.copy_with(x=cursor_x, y=cursor_y)
            if any(collides(other, candidate) for other in placed):
                cursor_x += 1
                continue

            placed.append(candidate)
            cursor_x += item.w
            break
        else:
            fallback = item.copy_with(x=0, y=bottom(placed))
            logger.warning(
                f"No free position found for item {item.id} after "
                f"{MAX_PLACEMENT_ATTEMPTS} attempts, placing at row {fallback.y}"
            )
            placed.append(fallback)
            cursor_x, cursor_y = fallback.w, fallback.y

    logger.debug(f"Auto-placed {len(to_place)} items")
    return placed


# =============================================================================
# Defragmentation
# =============================================================================


def _cells(item: LayoutItem) -> Iterable[Tuple[int, int]]:
    for y in range(item.y, item.y + item.h):
        for x in range(item.x, item.x + item.w):
            yield x, y


def _block_free(occupied: Set[Tuple[int, int]], x: int, y: int, w: int, h: int) -> bool:
    return all(
        (cx, cy) not in occupied
        for cy in range(y, y + h)
        for cx in range(x, x + w)
    )


def optimize_layout(layout: Layout, slots: int) -> Layout:
    """Defragment a layout with a first-fit search in visual order.

    Statics stay where they are. Every other item, in row-major visual
    order, takes the first position (scanning rows from the top, then
    columns from the left) where its whole footprint is free, so a large item
    skips gaps that are too small for it.

    Returns:
        New list with the same ids, in input order
    """
    occupied: Set[Tuple[int, int]] = set()
    for item in layout:
        if item.is_static:
            occupied.update(_cells(item))

    settled = {}
    for item in sort_layout_items(layout, CompactType.VERTICAL):
        if item.is_static:
            settled[item.id] = item
            continue

        last_x = max(0, slots - item.w)
        y = 0
        target: Optional[Tuple[int, int]] = None
        while target is None:
            for x in range(last_x + 1):
                if _block_free(occupied, x, y, item.w, item.h):
                    target = (x, y)
                    break
            else:
                y += 1

        moved = item.copy_with(x=target[0], y=target[1])
        occupied.update(_cells(moved))
        settled[item.id] = moved

    return [settled[item.id] for item in layout]


# =============================================================================
# Free-space queries
# =============================================================================


def _occupancy(layout: Layout, slots: int, rows: int) -> List[List[bool]]:
    grid = [[False] * slots for _ in range(rows)]
    for item in layout:
        for x, y in _cells(item):
            if 0 <= y < rows and 0 <= x < slots:
                grid[y][x] = True
    return grid


def _empty_layout_area(slots: int) -> List[LayoutItem]:
    return [LayoutItem(id=f"{FREE_AREA_PREFIX}0", x=0, y=0, w=slots, h=1)]


def find_free_areas(layout: Layout, slots: int) -> List[LayoutItem]:
    """Find every maximal empty rectangle within the occupied rows.

    Rows ``0 .. bottom(layout)`` are scanned with a per-column height
    histogram; from each column the rectangle is grown to the left while the
    running minimum height stays nonzero. Rectangles contained in another one
    are discarded.

    Returns:
        Areas as LayoutItems with ids ``free_area_<n>``, sorted by (y, x),
        wider first on a shared corner.
        An empty layout yields a single one-row strip across the grid.
    """
    if not layout:
        return _empty_layout_area(slots)

    rows = bottom(layout)
    grid = _occupancy(layout, slots, rows)
    heights = [0] * slots
    candidates: Set[Tuple[int, int, int, int]] = set()

    for row in range(rows):
        for col in range(slots):
            heights[col] = 0 if grid[row][col] else heights[col] + 1

        for col in range(slots):
            min_height = heights[col]
            for left in range(col, -1, -1):
                min_height = min(min_height, heights[left])
                if min_height == 0:
                    break
                candidates.add((left, row - min_height + 1, col - left + 1, min_height))

    maximal = [
        rect for rect in candidates
        if not any(
            other != rect
            and rect[0] >= other[0]
            and rect[1] >= other[1]
            and rect[0] + rect[2] <= other[0] + other[2]
            and rect[1] + rect[3] <= other[1] + other[3]
            for other in candidates
        )
    ]
    # Rectangles sharing a corner: wider first
    maximal.sort(key=lambda rect: (rect[1], rect[0], -rect[2], -rect[3]))

    return [
        LayoutItem(id=f"{FREE_AREA_PREFIX}{index}", x=x, y=y, w=w, h=h)
        for index, (x, y, w, h) in enumerate(maximal)
    ]


def find_horizontal_free_areas(layout: Layout, slots: int) -> List[LayoutItem]:
    """Find the free one-row strips of every occupied row, top to bottom."""
    if not layout:
        return _empty_layout_area(slots)

    rows = bottom(layout)
    grid = _occupancy(layout, slots, rows)
    areas = []

    for row in range(rows):
        col = 0
        while col < slots:
            if grid[row][col]:
                col += 1
                continue
            start = col
            while col < slots and not grid[row][col]:
                col += 1
            areas.append(
                LayoutItem(
                    id=f"{FREE_AREA_PREFIX}{len(areas)}",
                    x=start,
                    y=row,
                    w=col - start,
                    h=1,
                )
            )

    return areas


def first_free_area(layout: Layout, slots: int) -> Optional[LayoutItem]:
    """Return the top-left-most maximal free area, or None if the grid is full."""
    areas = find_free_areas(layout, slots)
    return areas[0] if areas else None


def last_row_free_area(layout: Layout, slots: int) -> Optional[LayoutItem]:
    """Return the first free area starting on the last row where an item starts."""
    if not layout:
        return None

    last_row = max(item.y for item in layout)
    return next(
        (area for area in find_free_areas(layout, slots) if area.y == last_row),
        None,
    )


def can_item_fit(layout: Layout, item: LayoutItem, slots: int) -> bool:
    """True if some free area within the occupied rows holds the item's size."""
    return any(
        item.w <= area.w and item.h <= area.h
        for area in find_free_areas(layout, slots)
    )


__all__ = [
    "MAX_PLACEMENT_ATTEMPTS",
    "correct_bounds",
    "needs_placement",
    "place_new_items",
    "optimize_layout",
    "find_free_areas",
    "find_horizontal_free_areas",
    "first_free_area",
    "last_row_free_area",
    "can_item_fit",
]
