"""Grid layout enumerations.

Centralizes the small closed sets of values the engine and its callers
share: compaction direction, resize collision behavior and resize handles.
"""

from enum import Enum


class CompactType(str, Enum):
    """Direction in which a layout is compacted.

    The compaction direction also selects the push axis used when cascading
    collisions: items are pushed down for NONE/VERTICAL and to the right for
    HORIZONTAL.
    """

    NONE = "none"
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class ResizeBehavior(str, Enum):
    """How neighbors react when a resized item grows into them."""

    PUSH = "push"
    SHRINK = "shrink"


class ResizeHandle(str, Enum):
    """Handle used to drive a resize gesture."""

    TOP_LEFT = "top_left"
    TOP = "top"
    TOP_RIGHT = "top_right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom_left"
    LEFT = "left"


# Coordinate marking an item that should be auto-placed
AUTO_PLACE: int = -1


__all__ = [
    "CompactType",
    "ResizeBehavior",
    "ResizeHandle",
    "AUTO_PLACE",
]
