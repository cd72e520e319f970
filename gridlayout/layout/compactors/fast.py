"""Skyline compaction strategies (O(N) sweep).

Keeps a "rising tide" per column (per row for horizontal layouts): the first
free coordinate below everything placed so far in that column. An item
settles at the highest tide across the columns it spans, then raises those
columns to its trailing edge. Static items raise the tide when they are
reached in sort order; a dynamic item that lands on a static not yet reached
jumps past it, and the static scan restarts.

For layouts without overlapping inputs or static "stairs" the result matches
the standard strategies exactly.
"""

import logging
from typing import Dict, List

from gridlayout.core.geometry import (
    collides,
    leading_edge,
    push_axis,
    resolve_span,
    shift_to,
    sort_layout_items,
    trailing_edge,
)
from gridlayout.layout.compactors.base import Compactor
from gridlayout.layout.compactors.standard import resolve_collisions
from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)


def compact_skyline(
    layout: List[LayoutItem],
    compact_type: CompactType,
    slots: int,
) -> List[LayoutItem]:
    """Run the rising-tide sweep over a layout, preserving input order.

    Args:
        layout: Items to compact
        compact_type: VERTICAL (tide per column) or HORIZONTAL (tide per row)
        slots: Number of columns (rows for horizontal). Only a sizing hint:
            items spanning slots past it are tracked like any other

    Returns:
        New list with the same ids, in input order
    """
    axis = push_axis(compact_type)
    ordered = sort_layout_items(layout, compact_type)
    statics = [item for item in ordered if item.is_static]

    # Keyed by slot so rows or columns beyond ``slots`` keep their own tide
    tide: Dict[int, int] = dict.fromkeys(range(max(slots, 0)), 0)
    static_offset = 0
    static_jumps = 0
    settled: Dict[str, LayoutItem] = {}

    for item in ordered:
        span = resolve_span(item, axis)

        if item.is_static:
            static_offset += 1
            placed = item
        else:
            placed = shift_to(item, axis, max((tide.get(slot, 0) for slot in span), default=0))

            # Only statics not yet reached in sort order can still be hit
            index = static_offset
            while index < len(statics):
                obstacle = statics[index]
                if leading_edge(obstacle, axis) >= trailing_edge(placed, axis):
                    break
                if collides(placed, obstacle):
                    placed = shift_to(placed, axis, trailing_edge(obstacle, axis))
                    static_jumps += 1
                    index = static_offset
                    continue
                index += 1

        settled[item.id] = placed

        edge = trailing_edge(placed, axis)
        for slot in span:
            if tide.get(slot, 0) < edge:
                tide[slot] = edge

    if static_jumps:
        logger.debug(f"Skyline compaction jumped {static_jumps} static obstacles")
    return [settled[item.id] for item in layout]


class FastVerticalCompactor(Compactor):
    """Skyline compaction toward row 0."""

    @property
    def name(self) -> str:
        return "fast_vertical"

    @property
    def compact_type(self) -> CompactType:
        return CompactType.VERTICAL

    def compact(self, layout, slots, allow_overlap=False):
        if allow_overlap:
            return list(layout)
        return compact_skyline(layout, CompactType.VERTICAL, slots)

    def resolve_collisions(self, layout, slots):
        return resolve_collisions(layout, CompactType.VERTICAL)


class FastHorizontalCompactor(Compactor):
    """Skyline compaction toward column 0; ``slots`` counts rows."""

    @property
    def name(self) -> str:
        return "fast_horizontal"

    @property
    def compact_type(self) -> CompactType:
        return CompactType.HORIZONTAL

    def compact(self, layout, slots, allow_overlap=False):
        if allow_overlap:
            return list(layout)
        return compact_skyline(layout, CompactType.HORIZONTAL, slots)

    def resolve_collisions(self, layout, slots):
        return resolve_collisions(layout, CompactType.HORIZONTAL)
