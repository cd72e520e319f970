"""Value models for the grid layout engine.

Items are immutable pydantic models; every engine call consumes them by value
and returns newly built ones.
"""

from .grid_enums import (
    AUTO_PLACE,
    CompactType,
    ResizeBehavior,
    ResizeHandle,
)
from .layout_item import (
    BoundingBox,
    DuplicateItemError,
    LayoutFormatError,
    LayoutItem,
    layout_from_maps,
    layout_to_maps,
)

__all__ = [
    # Items
    "LayoutItem",
    "BoundingBox",
    "layout_to_maps",
    "layout_from_maps",

    # Errors
    "LayoutFormatError",
    "DuplicateItemError",

    # Enumerations
    "CompactType",
    "ResizeBehavior",
    "ResizeHandle",
    "AUTO_PLACE",
]
