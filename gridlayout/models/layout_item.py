"""Layout item model for grid dashboards.

This module provides the immutable value types the layout engine works on:
- LayoutItem: one rectangle on the grid, with size constraints and flags
- BoundingBox: transient rectangle covering a group of items
- Map (de)serialization for the JSON-friendly item form

Every engine operation takes items by value and builds new ones through
``copy_with``; nothing is mutated in place. Items are looked up by ``id``,
never by list position.

Map form:
    Keys are camelCase (``minW``, ``isStatic``, ...). An unbounded maximum is
    written as ``None`` because JSON has no infinity. ``moved`` is always
    written as ``False`` and ignored on input; the engine tracks visited items
    per pass instead of storing a flag on the item.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from gridlayout.config.settings import is_enabled

logger = logging.getLogger(__name__)


class LayoutFormatError(ValueError):
    """Raised when an item map cannot be turned into a LayoutItem."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class DuplicateItemError(LayoutFormatError):
    """Raised when an imported layout repeats an item id."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__("id", f"Duplicate layout item id: '{item_id}'")


class LayoutItem(BaseModel):
    """A single rectangle on the grid.

    Attributes:
        id: Identifier, unique within a layout
        x: Column of the left edge (grid units)
        y: Row of the top edge (grid units)
        w: Width in grid units (>= 1)
        h: Height in grid units (>= 1)
        min_w: Minimum width when resizing
        min_h: Minimum height when resizing
        max_w: Maximum width when resizing (inf if unbounded)
        max_h: Maximum height when resizing (inf if unbounded)
        is_draggable: Per-item drag override, consumed by callers only
        is_resizable: Per-item resize override, consumed by callers only
        is_static: Immovable obstacle; never relocated, still blocks others
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="Item identifier")
    x: int = Field(..., description="Left edge column")
    y: int = Field(..., description="Top edge row")
    w: int = Field(..., description="Width in grid units")
    h: int = Field(..., description="Height in grid units")
    min_w: int = Field(default=1, alias="minW", description="Minimum width")
    min_h: int = Field(default=1, alias="minH", description="Minimum height")
    max_w: float = Field(
        default=math.inf, alias="maxW", description="Maximum width (inf if unbounded)"
    )
    max_h: float = Field(
        default=math.inf, alias="maxH", description="Maximum height (inf if unbounded)"
    )
    is_draggable: Optional[bool] = Field(
        default=None, alias="isDraggable", description="Drag override"
    )
    is_resizable: Optional[bool] = Field(
        default=None, alias="isResizable", description="Resize override"
    )
    is_static: bool = Field(
        default=False, alias="isStatic", description="Immovable obstacle"
    )

    def copy_with(self, **changes: Any) -> "LayoutItem":
        """Return a copy with the given fields replaced.

        Args:
            **changes: Field names (snake_case) and their new values

        Returns:
            New LayoutItem; self is left untouched
        """
        return self.model_copy(update=changes)

    @property
    def right(self) -> int:
        """Column just past the right edge."""
        return self.x + self.w

    @property
    def bottom(self) -> int:
        """Row just past the bottom edge."""
        return self.y + self.h

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> "LayoutItem":
        """Create a LayoutItem from its JSON-friendly map form.

        Numeric fields accept ints or floats (floats are truncated). Missing
        optional fields fall back to their defaults.

        Args:
            data: Item map with camelCase keys

        Returns:
            LayoutItem instance

        Raises:
            LayoutFormatError: If ``id`` is missing or not a string, or a
                numeric field holds a non-numeric value
        """
        item_id = data.get("id")
        if item_id is None:
            raise LayoutFormatError("id", "Layout item is missing mandatory field 'id'")
        if not isinstance(item_id, str):
            raise LayoutFormatError(
                "id", f"Layout item 'id' must be a string, got {type(item_id).__name__}"
            )

        return cls(
            id=item_id,
            x=_int_field(data, "x", 0),
            y=_int_field(data, "y", 0),
            w=_int_field(data, "w", 1),
            h=_int_field(data, "h", 1),
            min_w=_int_field(data, "minW", 1),
            min_h=_int_field(data, "minH", 1),
            max_w=_max_field(data, "maxW"),
            max_h=_max_field(data, "maxH"),
            is_draggable=data.get("isDraggable"),
            is_resizable=data.get("isResizable"),
            is_static=bool(data.get("isStatic") or False),
        )

    def to_map(self) -> Dict[str, Any]:
        """Convert to the JSON-friendly map form.

        Returns:
            Dictionary with camelCase keys; infinite maxima become None
        """
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "minW": self.min_w,
            "minH": self.min_h,
            "maxW": None if math.isinf(self.max_w) else self.max_w,
            "maxH": None if math.isinf(self.max_h) else self.max_h,
            "isDraggable": self.is_draggable,
            "isResizable": self.is_resizable,
            "isStatic": self.is_static,
            "moved": False,
        }


class BoundingBox(BaseModel):
    """Minimal rectangle covering a group of items.

    Computed on demand for cluster moves; never stored on a layout.
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(..., description="Left edge column")
    y: int = Field(..., description="Top edge row")
    w: int = Field(..., description="Width in grid units")
    h: int = Field(..., description="Height in grid units")

    @property
    def right(self) -> int:
        """Column just past the right edge."""
        return self.x + self.w

    @property
    def bottom(self) -> int:
        """Row just past the bottom edge."""
        return self.y + self.h


def _int_field(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise LayoutFormatError(key, f"Layout item field '{key}' must be a number, got {value!r}")
    return int(value)


def _max_field(data: Mapping[str, Any], key: str) -> float:
    # JSON has no infinity; None means unbounded
    value = data.get(key)
    if value is None:
        return math.inf
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise LayoutFormatError(key, f"Layout item field '{key}' must be a number, got {value!r}")
    return float(value)


def layout_to_maps(layout: Iterable[LayoutItem]) -> List[Dict[str, Any]]:
    """Export a layout as a list of item maps."""
    return [item.to_map() for item in layout]


def layout_from_maps(data: Iterable[Any]) -> List[LayoutItem]:
    """Build a layout from a list of item maps.

    Args:
        data: Iterable of item maps

    Returns:
        List of LayoutItem in input order

    Raises:
        LayoutFormatError: If an element is not a mapping or is malformed
        DuplicateItemError: If an id repeats and the ``validate_unique_ids``
            flag is enabled
    """
    layout: List[LayoutItem] = []
    seen = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, Mapping):
            raise LayoutFormatError(
                "layout", f"Invalid layout format: element {index} is not a map"
            )
        item = LayoutItem.from_map(entry)
        if item.id in seen and is_enabled("validate_unique_ids"):
            raise DuplicateItemError(item.id)
        seen.add(item.id)
        layout.append(item)

    logger.debug(f"Imported layout with {len(layout)} items")
    return layout


__all__ = [
    "LayoutItem",
    "BoundingBox",
    "LayoutFormatError",
    "DuplicateItemError",
    "layout_to_maps",
    "layout_from_maps",
]
