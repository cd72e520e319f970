"""
Core Layer - Grid Layout Engine

Pure functions over immutable layouts plus the session object that applies
the caller-side gesture discipline on top of them.

Modules:
- geometry: collision tests, bounding boxes, ordering, axis helpers
- movement: single-item and cluster moves with cascading push
- resize: resize with push-or-shrink neighbor resolution
- placement: bounds correction, auto-placement, defragmentation, free areas
- session: thread-safe holder of the current layout
"""

from .geometry import (
    Layout,
    bottom,
    calculate_bounding_box,
    collides,
    get_all_collisions,
    get_first_collision,
    get_statics,
    sort_layout_items,
)
from .movement import (
    move_cluster,
    move_element,
    nudge_cluster,
)
from .resize import resize_item
from .placement import (
    MAX_PLACEMENT_ATTEMPTS,
    can_item_fit,
    correct_bounds,
    find_free_areas,
    find_horizontal_free_areas,
    first_free_area,
    last_row_free_area,
    optimize_layout,
    place_new_items,
)
from .session import (
    PLACEHOLDER_ID,
    ItemNotFoundError,
    LayoutSession,
)

__all__ = [
    # Geometry
    "Layout",
    "collides",
    "get_first_collision",
    "get_all_collisions",
    "get_statics",
    "bottom",
    "calculate_bounding_box",
    "sort_layout_items",

    # Move engine
    "move_element",
    "move_cluster",
    "nudge_cluster",

    # Resize engine
    "resize_item",

    # Placement & defragmentation
    "MAX_PLACEMENT_ATTEMPTS",
    "correct_bounds",
    "place_new_items",
    "optimize_layout",
    "find_free_areas",
    "find_horizontal_free_areas",
    "first_free_area",
    "last_row_free_area",
    "can_item_fit",

    # Session
    "PLACEHOLDER_ID",
    "ItemNotFoundError",
    "LayoutSession",
]
