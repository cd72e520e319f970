"""MCP tools exposing the grid layout engine.

Provides stateless tools to:
- Compact a layout or separate its overlapping items
- Move a single item or a cluster of items with cascading push
- Resize an item with push or shrink neighbor handling
- Correct bounds, auto-place new items and defragment a layout
- Query free areas

Every tool receives the full layout as an array of item maps and returns
the resulting layout in the same form; nothing is kept between calls.
"""

import logging
from typing import Any, Dict, List, Optional

from mcp import Tool

from ..core.geometry import Layout
from ..core.movement import move_cluster, move_element, nudge_cluster
from ..core.placement import (
    can_item_fit,
    correct_bounds,
    find_free_areas,
    find_horizontal_free_areas,
    optimize_layout,
    place_new_items,
)
from ..core.resize import resize_item
from ..core.session import ItemNotFoundError
from ..layout.compactors import COMPACTORS, Compactor, compactor_for, get_compactor
from ..models.grid_enums import CompactType, ResizeBehavior
from ..models.layout_item import LayoutFormatError, LayoutItem, layout_from_maps, layout_to_maps
from ..utils.response import error_response, layout_response, success_response

logger = logging.getLogger(__name__)

COMPACT_TYPES = [compact_type.value for compact_type in CompactType]
RESIZE_BEHAVIORS = [behavior.value for behavior in ResizeBehavior]

_LAYOUT_PROPERTY = {
    "type": "array",
    "description": "Layout items (id, x, y, w, h, minW, minH, maxW, maxH, isStatic, ...)",
    "items": {"type": "object"}
}
_SLOTS_PROPERTY = {
    "type": "integer",
    "description": "Number of columns",
    "minimum": 1
}
_COMPACT_TYPE_PROPERTY = {
    "type": "string",
    "enum": COMPACT_TYPES,
    "description": "Compaction direction; also selects the push axis",
    "default": "vertical"
}
_PREVENT_COLLISION_PROPERTY = {
    "type": "boolean",
    "description": "Only write the new position, skip the cascading push",
    "default": False
}


class GridTools:
    """Provides grid layout computation tools."""

    def get_tools(self) -> List[Tool]:
        """Return grid layout MCP tools."""
        return [
            Tool(
                name="grid_compact",
                description="Compact a layout toward the top (vertical) or left (horizontal) edge. Static items never move.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "compact_type": _COMPACT_TYPE_PROPERTY,
                        "strategy": {
                            "type": "string",
                            "enum": list(COMPACTORS.keys()),
                            "description": "Explicit strategy, overriding compact_type"
                        },
                        "allow_overlap": {
                            "type": "boolean",
                            "description": "Return the layout unchanged",
                            "default": False
                        }
                    },
                    "required": ["layout", "slots"]
                }
            ),
            Tool(
                name="grid_resolve_collisions",
                description="Push overlapping items apart along the compaction axis without compacting",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "compact_type": _COMPACT_TYPE_PROPERTY,
                        "strategy": {
                            "type": "string",
                            "enum": list(COMPACTORS.keys()),
                            "description": "Explicit strategy, overriding compact_type"
                        }
                    },
                    "required": ["layout", "slots"]
                }
            ),
            Tool(
                name="grid_move_item",
                description="Move one item to (x, y), pushing colliding items out of the way and jumping static obstacles",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "item_id": {
                            "type": "string",
                            "description": "ID of the item to move"
                        },
                        "x": {"type": "integer", "description": "Target column"},
                        "y": {"type": "integer", "description": "Target row"},
                        "compact_type": _COMPACT_TYPE_PROPERTY,
                        "prevent_collision": _PREVENT_COLLISION_PROPERTY,
                        "is_user_action": {
                            "type": "boolean",
                            "description": "Compact the result afterwards",
                            "default": False
                        },
                        "force": {
                            "type": "boolean",
                            "description": "Recompute even if the item is already at the target",
                            "default": False
                        }
                    },
                    "required": ["layout", "slots", "item_id"]
                }
            ),
            Tool(
                name="grid_move_cluster",
                description="Move a group of items as one rigid body. Give x/y for the target bounding box, or dx/dy for a keyboard-style nudge that is rejected on static obstacles.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "item_ids": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "IDs of the cluster members"
                        },
                        "x": {"type": "integer", "description": "Target bounding box column"},
                        "y": {"type": "integer", "description": "Target bounding box row"},
                        "dx": {"type": "integer", "description": "Nudge step in columns"},
                        "dy": {"type": "integer", "description": "Nudge step in rows"},
                        "compact_type": _COMPACT_TYPE_PROPERTY,
                        "prevent_collision": _PREVENT_COLLISION_PROPERTY
                    },
                    "required": ["layout", "slots", "item_ids"]
                }
            ),
            Tool(
                name="grid_resize_item",
                description="Resize an item; neighbors are pushed or shrunk",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "item_id": {
                            "type": "string",
                            "description": "ID of the item to resize"
                        },
                        "x": {"type": "integer", "description": "New column (default: unchanged)"},
                        "y": {"type": "integer", "description": "New row (default: unchanged)"},
                        "w": {"type": "integer", "description": "New width (default: unchanged)"},
                        "h": {"type": "integer", "description": "New height (default: unchanged)"},
                        "behavior": {
                            "type": "string",
                            "enum": RESIZE_BEHAVIORS,
                            "description": "How neighbors make room",
                            "default": "push"
                        },
                        "compact_type": _COMPACT_TYPE_PROPERTY,
                        "prevent_collision": _PREVENT_COLLISION_PROPERTY
                    },
                    "required": ["layout", "slots", "item_id"]
                }
            ),
            Tool(
                name="grid_correct_bounds",
                description="Pull items overflowing the slot count back inside the grid",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY
                    },
                    "required": ["layout", "slots"]
                }
            ),
            Tool(
                name="grid_place_items",
                description="Add items to a layout. Items with x or y set to -1 are auto-placed below the existing content.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "items": {
                            "type": "array",
                            "items": {"type": "object"},
                            "description": "New items in map form"
                        },
                        "compact_type": {
                            "type": "string",
                            "enum": COMPACT_TYPES,
                            "description": "Compact the result afterwards (omit to keep placement as-is)"
                        }
                    },
                    "required": ["layout", "slots", "items"]
                }
            ),
            Tool(
                name="grid_optimize",
                description="Defragment a layout: every item takes the first free spot large enough for it, in visual order",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY
                    },
                    "required": ["layout", "slots"]
                }
            ),
            Tool(
                name="grid_free_areas",
                description="List empty rectangles within the occupied rows",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "layout": _LAYOUT_PROPERTY,
                        "slots": _SLOTS_PROPERTY,
                        "mode": {
                            "type": "string",
                            "enum": ["maximal", "horizontal"],
                            "description": "Maximal rectangles or one-row strips",
                            "default": "maximal"
                        },
                        "w": {"type": "integer", "description": "Width to check for a fit"},
                        "h": {"type": "integer", "description": "Height to check for a fit"}
                    },
                    "required": ["layout", "slots"]
                }
            ),
        ]

    async def handle_tool(self, name: str, arguments: dict) -> dict:
        """Route tool call to appropriate handler.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            Standardized response
        """
        handlers = {
            "grid_compact": self._compact,
            "grid_resolve_collisions": self._resolve_collisions,
            "grid_move_item": self._move_item,
            "grid_move_cluster": self._move_cluster,
            "grid_resize_item": self._resize_item,
            "grid_correct_bounds": self._correct_bounds,
            "grid_place_items": self._place_items,
            "grid_optimize": self._optimize,
            "grid_free_areas": self._free_areas,
        }

        handler = handlers.get(name)
        if not handler:
            return error_response(f"Unknown grid tool: {name}", code="UNKNOWN_TOOL")

        try:
            return await handler(arguments)
        except LayoutFormatError as e:
            return error_response(str(e), code="INVALID_LAYOUT", details={"field": e.field})
        except ItemNotFoundError as e:
            return error_response(f"Item {e.item_id} not found", code="ITEM_NOT_FOUND")
        except KeyError as e:
            return error_response(f"Missing required argument: {e.args[0]}", code="INVALID_ARGUMENT")
        except ValueError as e:
            return error_response(str(e), code="INVALID_ARGUMENT")
        except Exception as e:
            logger.error(f"Error in {name}: {e}", exc_info=True)
            return error_response(str(e), code="TOOL_ERROR")

    # =========================================================================
    # Argument parsing
    # =========================================================================

    def _layout(self, args: dict) -> Layout:
        return layout_from_maps(args["layout"])

    def _slots(self, args: dict) -> int:
        slots = args["slots"]
        if isinstance(slots, bool) or not isinstance(slots, int) or slots < 1:
            raise ValueError(f"slots must be a positive integer, got {slots!r}")
        return slots

    def _compact_type(self, args: dict, key: str = "compact_type") -> CompactType:
        value = args.get(key, CompactType.VERTICAL.value)
        try:
            return CompactType(value)
        except ValueError:
            raise ValueError(f"Unknown compact_type: {value}. Available: {COMPACT_TYPES}")

    def _strategy(self, args: dict) -> Compactor:
        name = args.get("strategy")
        if name:
            return get_compactor(name)
        return compactor_for(self._compact_type(args))

    def _find(self, layout: Layout, item_id: str) -> LayoutItem:
        for item in layout:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    # =========================================================================
    # Handlers
    # =========================================================================

    async def _compact(self, args: dict) -> dict:
        """Compact a layout."""
        layout = self._layout(args)
        slots = self._slots(args)
        strategy = self._strategy(args)

        result = strategy.compact(layout, slots, allow_overlap=args.get("allow_overlap", False))
        return layout_response(result, strategy=strategy.name)

    async def _resolve_collisions(self, args: dict) -> dict:
        """Separate overlapping items."""
        layout = self._layout(args)
        slots = self._slots(args)
        strategy = self._strategy(args)

        result = strategy.resolve_collisions(layout, slots)
        return layout_response(result, strategy=strategy.name)

    async def _move_item(self, args: dict) -> dict:
        """Move one item with cascading push."""
        layout = self._layout(args)
        slots = self._slots(args)
        item = self._find(layout, args["item_id"])

        warnings = []
        if item.is_static:
            warnings.append(f"Item {item.id} is static and was not moved")

        result = move_element(
            layout,
            item,
            args.get("x"),
            args.get("y"),
            slots,
            self._compact_type(args),
            prevent_collision=args.get("prevent_collision", False),
            is_user_action=args.get("is_user_action", False),
            force=args.get("force", False),
        )
        return layout_response(result, warnings, moved=_changed_ids(layout, result))

    async def _move_cluster(self, args: dict) -> dict:
        """Move or nudge a cluster as a rigid body."""
        layout = self._layout(args)
        slots = self._slots(args)
        item_ids = args["item_ids"]
        for item_id in item_ids:
            self._find(layout, item_id)

        compact_type = self._compact_type(args)
        prevent_collision = args.get("prevent_collision", False)

        if "dx" in args or "dy" in args:
            result = nudge_cluster(
                layout,
                item_ids,
                args.get("dx", 0),
                args.get("dy", 0),
                slots,
                compact_type,
                prevent_collision=prevent_collision,
            )
        elif "x" in args and "y" in args:
            result = move_cluster(
                layout,
                item_ids,
                args["x"],
                args["y"],
                slots,
                compact_type,
                prevent_collision=prevent_collision,
            )
        else:
            raise ValueError("grid_move_cluster needs either x and y, or dx/dy")

        return layout_response(result, moved=_changed_ids(layout, result))

    async def _resize_item(self, args: dict) -> dict:
        """Resize one item."""
        layout = self._layout(args)
        slots = self._slots(args)
        item = self._find(layout, args["item_id"])

        behavior_name = args.get("behavior", ResizeBehavior.PUSH.value)
        try:
            behavior = ResizeBehavior(behavior_name)
        except ValueError:
            raise ValueError(f"Unknown behavior: {behavior_name}. Available: {RESIZE_BEHAVIORS}")

        desired = item.copy_with(
            x=args.get("x", item.x),
            y=args.get("y", item.y),
            w=args.get("w", item.w),
            h=args.get("h", item.h),
        )
        result = resize_item(
            layout,
            desired,
            behavior,
            slots,
            prevent_collision=args.get("prevent_collision", False),
            compact_type=self._compact_type(args),
        )
        return layout_response(result, moved=_changed_ids(layout, result))

    async def _correct_bounds(self, args: dict) -> dict:
        """Pull overflowing items back inside the grid."""
        layout = self._layout(args)
        result = correct_bounds(layout, self._slots(args))
        return layout_response(result, moved=_changed_ids(layout, result))

    async def _place_items(self, args: dict) -> dict:
        """Add and auto-place new items."""
        layout = self._layout(args)
        slots = self._slots(args)
        new_items = layout_from_maps(args["items"])

        existing_ids = {item.id for item in layout}
        clashes = sorted(existing_ids & {item.id for item in new_items})
        if clashes:
            raise ValueError(f"Items already in layout: {clashes}")

        result = place_new_items(layout, new_items, slots)
        if args.get("compact_type"):
            result = compactor_for(self._compact_type(args)).compact(result, slots)
        return layout_response(result)

    async def _optimize(self, args: dict) -> dict:
        """Defragment a layout."""
        layout = self._layout(args)
        result = optimize_layout(layout, self._slots(args))
        return layout_response(result, moved=_changed_ids(layout, result))

    async def _free_areas(self, args: dict) -> dict:
        """List free areas of a layout."""
        layout = self._layout(args)
        slots = self._slots(args)
        mode = args.get("mode", "maximal")

        if mode == "maximal":
            areas = find_free_areas(layout, slots)
        elif mode == "horizontal":
            areas = find_horizontal_free_areas(layout, slots)
        else:
            raise ValueError(f"Unknown mode: {mode}. Available: ['maximal', 'horizontal']")

        data: Dict[str, Any] = {
            "areas": layout_to_maps(areas),
            "count": len(areas),
        }
        if "w" in args and "h" in args:
            candidate = LayoutItem(id="__fit_check__", x=0, y=0, w=args["w"], h=args["h"])
            data["can_fit"] = can_item_fit(layout, candidate, slots)
        return success_response(data)


def _changed_ids(before: Layout, after: Layout) -> List[str]:
    """IDs whose geometry differs between two layouts."""
    previous: Dict[str, Optional[LayoutItem]] = {item.id: item for item in before}
    changed = []
    for item in after:
        old = previous.get(item.id)
        if old is None or (old.x, old.y, old.w, old.h) != (item.x, item.y, item.w, item.h):
            changed.append(item.id)
    return changed
