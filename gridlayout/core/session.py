"""Layout Session Module - Holder of "the current layout" for interactive callers.

The engine functions are pure; something still has to own the current
layout between calls and apply the gesture discipline:

- Every drag, cluster drag, resize or external drop takes a snapshot when it
  begins. Each update recomputes from that same snapshot, never from the
  previous update's result, so per-frame calls cannot compound drift.
- Ending a gesture compacts the result; cancelling restores the snapshot.
- Keyboard nudges run against the live layout instead.
- Layouts are cached per slot count so switching breakpoints back and forth
  restores the arrangement the user left there.

Coordinates are grid units throughout; pixel translation belongs to the
caller.

Usage:
    from gridlayout.core.session import LayoutSession

    session = LayoutSession(slots=8)
    session.add_items([LayoutItem(id="a", x=-1, y=-1, w=2, h=2)])

    session.begin_drag("a")
    session.update_drag(3, 0)
    session.end_drag()
"""

import logging
import threading
from typing import Any, Dict, Iterable, List, Optional, Set

from gridlayout.core.geometry import Layout, calculate_bounding_box
from gridlayout.core.movement import move_cluster, move_element, nudge_cluster
from gridlayout.core.placement import (
    correct_bounds,
    find_free_areas,
    needs_placement,
    optimize_layout,
    place_new_items,
)
from gridlayout.core.resize import clamp_size, clamp_to_grid, resize_item
from gridlayout.layout.compactors import compact
from gridlayout.models.grid_enums import (
    AUTO_PLACE,
    CompactType,
    ResizeBehavior,
    ResizeHandle,
)
from gridlayout.models.layout_item import LayoutItem, layout_from_maps, layout_to_maps

logger = logging.getLogger(__name__)

PLACEHOLDER_ID = "__placeholder__"

# Handles that move the left/top edge instead of the right/bottom one
_LEFT_HANDLES = {ResizeHandle.LEFT, ResizeHandle.TOP_LEFT, ResizeHandle.BOTTOM_LEFT}
_RIGHT_HANDLES = {ResizeHandle.RIGHT, ResizeHandle.TOP_RIGHT, ResizeHandle.BOTTOM_RIGHT}
_TOP_HANDLES = {ResizeHandle.TOP, ResizeHandle.TOP_LEFT, ResizeHandle.TOP_RIGHT}
_BOTTOM_HANDLES = {ResizeHandle.BOTTOM, ResizeHandle.BOTTOM_LEFT, ResizeHandle.BOTTOM_RIGHT}


class ItemNotFoundError(KeyError):
    """Raised when an item id is not part of the session's layout."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found")


class LayoutSession:
    """Thread-safe owner of one evolving layout.

    Example:
        session = LayoutSession(slots=4, compact_type=CompactType.VERTICAL)
        session.import_layout([{"id": "a", "x": 0, "y": 0, "w": 2, "h": 1}])

        # Drag: every update starts from the pre-gesture snapshot
        session.begin_drag("a")
        session.update_drag(2, 3)
        layout = session.end_drag()
    """

    def __init__(
        self,
        slots: int = 8,
        compact_type: CompactType = CompactType.VERTICAL,
        resize_behavior: ResizeBehavior = ResizeBehavior.PUSH,
        prevent_collision: bool = False,
        layout: Optional[Iterable[LayoutItem]] = None,
    ):
        """Initialize the session.

        Args:
            slots: Number of columns
            compact_type: Compaction applied after user actions
            resize_behavior: How neighbors react to a growing item
            prevent_collision: Forwarded to the move and resize engines
            layout: Initial items, used as-is
        """
        self._lock = threading.RLock()
        self._slots = slots
        self._compact_type = CompactType(compact_type)
        self._resize_behavior = ResizeBehavior(resize_behavior)
        self._prevent_collision = prevent_collision
        self._layout: Layout = list(layout or [])
        self._layouts_by_slots: Dict[int, Layout] = {}

        # Gesture state
        self._snapshot: Optional[Layout] = None
        self._gesture: Optional[str] = None
        self._active_id: Optional[str] = None
        self._selection: Set[str] = set()
        self._placeholder: Optional[LayoutItem] = None

        # Items the user has selected, kept across gestures
        self._selected: Set[str] = set()

    # =========================================================================
    # Settings and queries
    # =========================================================================

    @property
    def layout(self) -> Layout:
        with self._lock:
            return list(self._layout)

    @property
    def slots(self) -> int:
        return self._slots

    @property
    def compact_type(self) -> CompactType:
        return self._compact_type

    @property
    def resize_behavior(self) -> ResizeBehavior:
        return self._resize_behavior

    @property
    def prevent_collision(self) -> bool:
        return self._prevent_collision

    @property
    def active_item_id(self) -> Optional[str]:
        return self._active_id

    @property
    def gesture(self) -> Optional[str]:
        """Name of the gesture in progress ('drag', 'cluster', 'resize', 'placeholder')."""
        return self._gesture

    @property
    def placeholder(self) -> Optional[LayoutItem]:
        return self._placeholder

    @property
    def selected_ids(self) -> Set[str]:
        with self._lock:
            return set(self._selected)

    def toggle_selection(self, item_id: str, multi: bool = False) -> Set[str]:
        """Select or deselect an item.

        With ``multi`` the item is added to or removed from the selection;
        otherwise the selection is replaced by this item alone.

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        with self._lock:
            self._find(self._layout, item_id)
            if not multi:
                self._selected = {item_id}
            elif item_id in self._selected:
                self._selected.discard(item_id)
            else:
                self._selected.add(item_id)
            return set(self._selected)

    def clear_selection(self) -> None:
        with self._lock:
            self._selected = set()

    def set_compact_type(self, compact_type: CompactType) -> None:
        with self._lock:
            self._compact_type = CompactType(compact_type)

    def set_resize_behavior(self, behavior: ResizeBehavior) -> None:
        with self._lock:
            self._resize_behavior = ResizeBehavior(behavior)

    def set_prevent_collision(self, prevent: bool) -> None:
        with self._lock:
            self._prevent_collision = prevent

    def get_item(self, item_id: str) -> LayoutItem:
        """Look up an item of the current layout.

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        with self._lock:
            return self._find(self._layout, item_id)

    def set_slot_count(self, slots: int) -> Layout:
        """Switch the column count, caching the layout of the previous one.

        Returning to a cached slot count restores its arrangement: surviving
        items keep their cached positions, items removed since are dropped,
        items added since are auto-placed at the bottom, then the result is
        compacted. A slot count seen for the first time is derived from the
        current layout with correct_bounds and vertical compaction.
        """
        with self._lock:
            if slots == self._slots:
                return list(self._layout)

            self._layouts_by_slots[self._slots] = list(self._layout)

            cached = self._layouts_by_slots.get(slots)
            if cached is not None:
                next_layout = self._reconcile(cached, self._layout, slots)
                logger.info(f"Restored cached layout for {slots} slots")
            else:
                corrected = correct_bounds(self._layout, slots)
                next_layout = compact(corrected, CompactType.VERTICAL, slots)

            self._slots = slots
            self._layout = next_layout
            return list(self._layout)

    def _reconcile(self, cached: Layout, current: Layout, slots: int) -> Layout:
        current_ids = {item.id for item in current}
        cached_ids = {item.id for item in cached}

        kept = [item for item in cached if item.id in current_ids]
        added = [
            item.copy_with(x=AUTO_PLACE, y=AUTO_PLACE)
            for item in current
            if item.id not in cached_ids
        ]
        dropped = len(cached) - len(kept)
        if added or dropped:
            logger.info(
                f"Reconciling cached layout for {slots} slots: "
                f"{len(added)} added, {dropped} removed"
            )

        merged = place_new_items(kept, added, slots) if added else kept
        return compact(merged, self._compact_type, slots)

    # =========================================================================
    # Content
    # =========================================================================

    def add_items(
        self,
        items: Iterable[LayoutItem],
        compact_type: Optional[CompactType] = None,
    ) -> Layout:
        """Add items, auto-placing those at ``AUTO_PLACE``, then compact."""
        with self._lock:
            placed = place_new_items(self._layout, items, self._slots)
            self._layout = compact(placed, compact_type or self._compact_type, self._slots)
            return list(self._layout)

    def add_item(self, item: LayoutItem, compact_type: Optional[CompactType] = None) -> Layout:
        if needs_placement(item):
            return self.add_items([item], compact_type=compact_type)

        with self._lock:
            self._layout = compact(
                self._layout + [item],
                compact_type or self._compact_type,
                self._slots,
            )
            return list(self._layout)

    def remove_item(self, item_id: str, compact_type: Optional[CompactType] = None) -> Layout:
        """Remove an item and compact the rest.

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        with self._lock:
            self._find(self._layout, item_id)
            remaining = [item for item in self._layout if item.id != item_id]
            self._layout = compact(remaining, compact_type or self._compact_type, self._slots)
            self._selected.discard(item_id)
            return list(self._layout)

    def remove_items(self, item_ids: Iterable[str]) -> Layout:
        """Remove several items and compact the rest once.

        Raises:
            ItemNotFoundError: If any id is unknown; nothing is removed then
        """
        with self._lock:
            ids = set(item_ids)
            for item_id in ids:
                self._find(self._layout, item_id)
            remaining = [item for item in self._layout if item.id not in ids]
            self._layout = compact(remaining, self._compact_type, self._slots)
            self._selected -= ids
            logger.info(f"Removed {len(ids)} items")
            return list(self._layout)

    def import_layout(self, data: Iterable[Any]) -> Layout:
        """Replace the layout with items parsed from their map form.

        The imported items are bounds-corrected and compacted so the result
        is overlap free.

        Raises:
            LayoutFormatError: If an element is malformed
        """
        items = layout_from_maps(data)
        with self._lock:
            corrected = correct_bounds(items, self._slots)
            self._layout = compact(corrected, self._compact_type, self._slots)
            self._selected &= {item.id for item in self._layout}
            logger.debug(f"Imported {len(items)} items")
            return list(self._layout)

    def export_layout(self) -> List[Dict[str, Any]]:
        with self._lock:
            return layout_to_maps(self._layout)

    def optimize(self) -> Layout:
        """Defragment the current layout."""
        with self._lock:
            self._layout = optimize_layout(self._layout, self._slots)
            return list(self._layout)

    def free_areas(self) -> List[LayoutItem]:
        with self._lock:
            return find_free_areas(self._layout, self._slots)

    # =========================================================================
    # Drag
    # =========================================================================

    def begin_drag(self, item_id: str) -> bool:
        """Start dragging one item.

        Returns:
            False if the item is static (nothing started)

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        with self._lock:
            item = self._find(self._layout, item_id)
            if item.is_static:
                return False
            self._start("drag", item_id)
            return True

    def update_drag(self, x: int, y: int) -> Layout:
        """Move the dragged item to ``(x, y)``, recomputed from the snapshot."""
        with self._lock:
            if self._gesture != "drag":
                return list(self._layout)

            item = self._find(self._snapshot, self._active_id)
            target_x = min(max(x, 0), max(self._slots - item.w, 0))
            target_y = max(y, 0)

            self._layout = move_element(
                self._snapshot,
                item,
                target_x,
                target_y,
                self._slots,
                self._compact_type,
                prevent_collision=self._prevent_collision,
            )
            return list(self._layout)

    def end_drag(self) -> Layout:
        """Finish a single or cluster drag and compact the result."""
        with self._lock:
            if self._gesture not in ("drag", "cluster"):
                return list(self._layout)
            return self._finish()

    def begin_cluster_drag(self, item_ids: Optional[Iterable[str]] = None) -> bool:
        """Start dragging a selection as one rigid group.

        Without ``item_ids`` the current selection is dragged. Statics in the
        selection are left out. Returns False if nothing movable remains.

        Raises:
            ItemNotFoundError: If any id is unknown
        """
        with self._lock:
            ids = sorted(self._selected) if item_ids is None else list(item_ids)
            members = {
                item_id for item_id in ids
                if not self._find(self._layout, item_id).is_static
            }
            if not members:
                return False
            self._start("cluster", ids[0])
            self._selection = members
            return True

    def update_cluster_drag(self, x: int, y: int) -> Layout:
        """Move the selection's bounding box to ``(x, y)``, from the snapshot."""
        with self._lock:
            if self._gesture != "cluster":
                return list(self._layout)

            members = [item for item in self._snapshot if item.id in self._selection]
            box = calculate_bounding_box(members)
            target_x = min(max(x, 0), max(self._slots - box.w, 0))
            target_y = max(y, 0)

            self._layout = move_cluster(
                self._snapshot,
                self._selection,
                target_x,
                target_y,
                self._slots,
                self._compact_type,
                prevent_collision=self._prevent_collision,
            )
            return list(self._layout)

    def nudge(self, dx: int, dy: int) -> Layout:
        """Move the active item or selection one step, against the live layout.

        The step is rejected when it would land on a static item.
        """
        with self._lock:
            if self._gesture == "cluster":
                ids = set(self._selection)
            elif self._gesture == "drag":
                ids = {self._active_id}
            else:
                return list(self._layout)

            self._layout = nudge_cluster(
                self._layout,
                ids,
                dx,
                dy,
                self._slots,
                self._compact_type,
                prevent_collision=self._prevent_collision,
            )
            return list(self._layout)

    # =========================================================================
    # Resize
    # =========================================================================

    def begin_resize(self, item_id: str) -> bool:
        """Start resizing an item.

        Returns:
            False if the item is static or not resizable

        Raises:
            ItemNotFoundError: If the id is unknown
        """
        with self._lock:
            item = self._find(self._layout, item_id)
            if item.is_static or item.is_resizable is False:
                return False
            self._start("resize", item_id)
            return True

    def update_resize(self, handle: ResizeHandle, dw: int, dh: int) -> Layout:
        """Apply a handle drag of ``(dw, dh)`` grid units to the snapshot geometry.

        Left and top handles move that edge and keep the opposite one fixed.
        """
        with self._lock:
            if self._gesture != "resize":
                return list(self._layout)

            handle = ResizeHandle(handle)
            original = self._find(self._snapshot, self._active_id)
            x, y, w, h = original.x, original.y, original.w, original.h

            if handle in _RIGHT_HANDLES:
                w += dw
            elif handle in _LEFT_HANDLES:
                w -= dw
            if handle in _BOTTOM_HANDLES:
                h += dh
            elif handle in _TOP_HANDLES:
                h -= dh

            w, h = clamp_size(original, w, h)
            # Anchor the opposite edge once the size is clamped
            if handle in _LEFT_HANDLES:
                x = original.right - w
            if handle in _TOP_HANDLES:
                y = original.bottom - h
            x, y, w, h = clamp_to_grid(x, y, w, h, self._slots)

            self._layout = resize_item(
                self._snapshot,
                original.copy_with(x=x, y=y, w=w, h=h),
                self._resize_behavior,
                self._slots,
                prevent_collision=self._prevent_collision,
                compact_type=self._compact_type,
            )
            return list(self._layout)

    def end_resize(self) -> Layout:
        with self._lock:
            if self._gesture != "resize":
                return list(self._layout)
            return self._finish()

    # =========================================================================
    # External drop
    # =========================================================================

    def show_placeholder(self, x: int, y: int, w: int, h: int) -> Layout:
        """Show (or move) the drop placeholder for an item dragged in from outside.

        The placeholder is force-moved into the pre-drop snapshot as a user
        action, so neighbors are pushed and the result compacted.
        """
        with self._lock:
            current = self._placeholder
            if current is not None and (current.x, current.y, current.w, current.h) == (x, y, w, h):
                return list(self._layout)

            if current is None:
                self._start("placeholder", PLACEHOLDER_ID)

            placeholder = LayoutItem(id=PLACEHOLDER_ID, x=x, y=y, w=w, h=h, is_draggable=True)
            self._placeholder = placeholder

            base = [item for item in self._snapshot if item.id != PLACEHOLDER_ID]
            base.append(placeholder)

            self._layout = move_element(
                base,
                placeholder,
                x,
                y,
                self._slots,
                self._compact_type,
                prevent_collision=False,
                is_user_action=True,
                force=True,
            )
            return list(self._layout)

    def hide_placeholder(self) -> Layout:
        """Remove the placeholder and restore the pre-drop layout."""
        with self._lock:
            if self._placeholder is None:
                return list(self._layout)
            self._layout = list(self._snapshot)
            self._clear()
            return list(self._layout)

    def drop_placeholder(self, new_id: str) -> Layout:
        """Turn the placeholder into a real item with ``new_id``."""
        with self._lock:
            if self._placeholder is None:
                return list(self._layout)

            settled = next(
                (item for item in self._layout if item.id == PLACEHOLDER_ID),
                self._placeholder,
            )
            dropped = settled.copy_with(id=new_id, is_static=False)
            replaced = [
                dropped if item.id == PLACEHOLDER_ID else item
                for item in self._layout
            ]
            if settled is self._placeholder and all(item.id != new_id for item in replaced):
                replaced.append(dropped)

            self._layout = replaced
            return self._finish()

    def cancel(self) -> Layout:
        """Abort the gesture in progress and restore its snapshot."""
        with self._lock:
            if self._snapshot is not None:
                self._layout = list(self._snapshot)
            self._clear()
            return list(self._layout)

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _find(layout: Layout, item_id: str) -> LayoutItem:
        for item in layout:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def _start(self, gesture: str, item_id: str) -> None:
        if self._gesture is not None:
            logger.debug(f"Gesture '{self._gesture}' replaced by '{gesture}'")
            self.cancel()
        self._snapshot = list(self._layout)
        self._gesture = gesture
        self._active_id = item_id
        self._selection = set()

    def _finish(self) -> Layout:
        # Compaction with overlaps disallowed also separates items under NONE
        self._layout = compact(self._layout, self._compact_type, self._slots, allow_overlap=False)
        self._clear()
        return list(self._layout)

    def _clear(self) -> None:
        self._snapshot = None
        self._gesture = None
        self._active_id = None
        self._selection = set()
        self._placeholder = None


__all__ = [
    "PLACEHOLDER_ID",
    "ItemNotFoundError",
    "LayoutSession",
]
