"""Move engine: single-item moves and rigid cluster moves.

Both operations write the new position(s) first, then resolve collisions
with a cascading push along the compaction axis (down for none/vertical,
right for horizontal):

1. The moved item(s) jump past any static obstacle they land on.
2. Every dynamic item overlapping a moved item is pushed flush against its
   trailing edge, jumping past statics on the way.
3. Each pushed item is queued and pushes whatever it now overlaps in turn.
   An item may be pushed again by a later pusher, so two items pushed to the
   same spot end up stacked rather than overlapping.

Statics never move. The queued-id set is local to one call; nothing is
stored on the items.
"""

import logging
from collections import deque
from typing import Dict, Iterable, List, Optional, Set

from gridlayout.core.geometry import (
    Layout,
    calculate_bounding_box,
    collides,
    get_first_collision,
    get_statics,
    leading_edge,
    push_axis,
    shift_to,
    trailing_edge,
)
from gridlayout.layout.compactors import Compactor, compact
from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)

# Synthetic id for the bounding-box collision check
CLUSTER_BOX_ID = "__cluster_box__"


def clear_obstacles(
    item: LayoutItem,
    statics: List[LayoutItem],
    axis: str,
    pinned: Optional[List[LayoutItem]] = None,
    group_edge: Optional[int] = None,
) -> LayoutItem:
    """Move ``item`` along ``axis`` until it overlaps no static or pinned item.

    Args:
        item: Item to relocate
        statics: Static obstacles
        axis: 'x' or 'y'
        pinned: Items that must not be pushed (the moved item or cluster)
        group_edge: Trailing edge of the pinned group; an item hitting any
            pinned member jumps past the whole group

    Returns:
        The relocated item (``item`` itself if already clear)
    """
    current = item
    while True:
        blocker = get_first_collision(statics, current)
        if blocker is not None:
            current = shift_to(current, axis, trailing_edge(blocker, axis))
            continue

        member = get_first_collision(pinned, current) if pinned else None
        if member is not None:
            edge = group_edge if group_edge is not None else trailing_edge(member, axis)
            current = shift_to(current, axis, edge)
            continue

        return current


def cascade_push(
    items: Dict[str, LayoutItem],
    seeds: Iterable[str],
    axis: str,
    pinned: Optional[Set[str]] = None,
    group_edge: Optional[int] = None,
) -> Set[str]:
    """Push dynamic items out of the way of the seed items, transitively.

    ``items`` is updated in place; callers pass their own working copy.

    Args:
        items: Working map of id -> item, in layout order
        seeds: Ids whose footprint starts the cascade
        axis: Push axis ('x' or 'y')
        pinned: Ids that never move during the cascade
        group_edge: Trailing edge used when a pinned item is the pusher

    Returns:
        Ids of the items that were displaced
    """
    pinned = pinned or set()
    statics = [item for item in items.values() if item.is_static]
    pinned_items = [items[item_id] for item_id in pinned if item_id in items]
    cross = "y" if axis == "x" else "x"

    queue = deque(seeds)
    queued = set(queue)
    displaced: Set[str] = set()

    while queue:
        current_id = queue.popleft()
        queued.discard(current_id)
        current = items[current_id]

        if current_id in pinned and group_edge is not None:
            push_edge = group_edge
        else:
            push_edge = trailing_edge(current, axis)

        collisions = [
            other for other in items.values()
            if other.id != current_id
            and not other.is_static
            and other.id not in pinned
            and collides(other, current)
        ]
        # Nearest first, so pushes are stacked in visual order
        collisions.sort(key=lambda other: (leading_edge(other, axis), getattr(other, cross)))

        for other in collisions:
            pushed = shift_to(other, axis, push_edge)
            pushed = clear_obstacles(pushed, statics, axis, pinned_items, group_edge)
            items[other.id] = pushed
            displaced.add(other.id)

            if other.id not in queued:
                queue.append(other.id)
                queued.add(other.id)

    if displaced:
        logger.debug(f"Cascade along {axis} displaced {len(displaced)} items")
    return displaced


def move_element(
    layout: Layout,
    item: LayoutItem,
    x: Optional[int],
    y: Optional[int],
    slots: int,
    compact_type: CompactType,
    prevent_collision: bool = False,
    is_user_action: bool = False,
    force: bool = False,
    compactor: Optional[Compactor] = None,
) -> Layout:
    """Move one item and resolve the collisions it causes.

    Args:
        layout: Current layout (left untouched)
        item: Item being moved; its stored copy in ``layout`` is used if present
        x: Target column (None keeps the current one)
        y: Target row (None keeps the current one)
        slots: Number of columns
        compact_type: Compaction direction; selects the push axis
        prevent_collision: Only write the mover's position, no cascade
        is_user_action: Compact the result afterwards (unless compact_type is none)
        force: Recompute even if the item already sits at the target
        compactor: Explicit compaction strategy, overriding ``compact_type``

    Returns:
        New layout
    """
    if item.is_static:
        return list(layout)

    stored = next((candidate for candidate in layout if candidate.id == item.id), item)
    new_x = stored.x if x is None else x
    new_y = stored.y if y is None else y

    if (
        not force
        and stored.x == new_x
        and stored.y == new_y
        and stored.w == item.w
        and stored.h == item.h
    ):
        return list(layout)

    items = {candidate.id: candidate for candidate in layout}
    mover = stored.copy_with(x=new_x, y=new_y)
    items[mover.id] = mover

    if prevent_collision:
        return list(items.values())

    if compactor is not None:
        compact_type = compactor.compact_type
    axis = push_axis(compact_type)

    cleared = clear_obstacles(mover, get_statics(items.values()), axis)
    if cleared is not mover:
        logger.debug(
            f"Item {mover.id} jumped static obstacles to "
            f"({cleared.x}, {cleared.y})"
        )
        items[mover.id] = cleared

    cascade_push(items, [mover.id], axis, pinned={mover.id})
    result = list(items.values())

    if is_user_action and compact_type != CompactType.NONE:
        result = compact(result, compact_type, slots, compactor=compactor)
    return result


def move_cluster(
    layout: Layout,
    member_ids: Iterable[str],
    x: int,
    y: int,
    slots: int,
    compact_type: CompactType,
    prevent_collision: bool = False,
) -> Layout:
    """Translate a group of items as one rigid body.

    Every member moves by the same delta, taking the group's bounding box
    top-left to ``(x, y)``, so relative offsets are preserved exactly. If a
    member lands on a static, the whole group slides past it along the push
    axis. Any other item overlapping a member is then pushed past the group's
    bounding box and the cascade continues from there. The result is not
    compacted, since compaction could pull members apart.

    Args:
        layout: Layout to move within; for pointer drags this should be the
            pre-gesture snapshot, not the previous frame's result
        member_ids: Ids of the selected items; statics among them stay put
        x: Target column of the bounding box
        y: Target row of the bounding box
        slots: Number of columns
        compact_type: Compaction direction; selects the push axis
        prevent_collision: Only translate the members, no cascade

    Returns:
        New layout
    """
    selected = set(member_ids)
    members = [item for item in layout if item.id in selected and not item.is_static]
    if not members:
        return list(layout)

    box = calculate_bounding_box(members)
    dx, dy = x - box.x, y - box.y
    if dx == 0 and dy == 0:
        return list(layout)

    axis = push_axis(compact_type)
    moved = [member.copy_with(x=member.x + dx, y=member.y + dy) for member in members]

    statics = get_statics(layout)
    while True:
        hit = next(
            (
                (member, obstacle)
                for member in moved
                for obstacle in statics
                if collides(member, obstacle)
            ),
            None,
        )
        if hit is None:
            break
        member, obstacle = hit
        shift = trailing_edge(obstacle, axis) - leading_edge(member, axis)
        moved = [shift_to(m, axis, leading_edge(m, axis) + shift) for m in moved]
        logger.debug(f"Cluster slid {shift} along {axis} past static {obstacle.id}")

    items = {item.id: item for item in layout}
    for member in moved:
        items[member.id] = member

    if prevent_collision:
        return list(items.values())

    moved_box = calculate_bounding_box(moved)
    group_edge = moved_box.right if axis == "x" else moved_box.bottom
    seeds = [member.id for member in sorted(moved, key=lambda m: leading_edge(m, axis))]
    cascade_push(items, seeds, axis, pinned={m.id for m in moved}, group_edge=group_edge)
    return list(items.values())


def nudge_cluster(
    layout: Layout,
    member_ids: Iterable[str],
    dx: int,
    dy: int,
    slots: int,
    compact_type: CompactType,
    prevent_collision: bool = False,
) -> Layout:
    """Move a selection by a discrete step (keyboard navigation).

    Meant to run against the live layout. The target bounding box is clamped
    to the grid; if it would overlap a static item the move is rejected and
    the layout comes back unchanged.

    Args:
        layout: Current layout
        member_ids: Ids of the selected items (a single id for one item)
        dx: Column step
        dy: Row step
        slots: Number of columns
        compact_type: Compaction direction; selects the push axis
        prevent_collision: Only translate the members, no cascade

    Returns:
        New layout
    """
    selected = set(member_ids)
    members = [item for item in layout if item.id in selected and not item.is_static]
    if not members:
        return list(layout)

    box = calculate_bounding_box(members)
    target_x = min(max(box.x + dx, 0), max(slots - box.w, 0))
    target_y = max(box.y + dy, 0)
    if target_x == box.x and target_y == box.y:
        return list(layout)

    box_item = LayoutItem(id=CLUSTER_BOX_ID, x=target_x, y=target_y, w=box.w, h=box.h)
    blockers = [item for item in get_statics(layout) if item.id not in selected]
    blocker = get_first_collision(blockers, box_item)
    if blocker is not None:
        logger.debug(f"Nudge to ({target_x}, {target_y}) rejected by static {blocker.id}")
        return list(layout)

    return move_cluster(
        layout,
        selected,
        target_x,
        target_y,
        slots,
        compact_type,
        prevent_collision=prevent_collision,
    )


__all__ = [
    "CLUSTER_BOX_ID",
    "clear_obstacles",
    "cascade_push",
    "move_element",
    "move_cluster",
    "nudge_cluster",
]
