"""Compaction strategy registry.

Available strategies:
- none: no compaction, overlaps still separated after a user action
- vertical / horizontal: standard O(N^2) sweep
- fast_vertical / fast_horizontal: skyline O(N) sweep
"""

import logging
from typing import List, Optional

from gridlayout.config.settings import is_enabled
from gridlayout.layout.compactors.base import Compactor
from gridlayout.layout.compactors.fast import (
    FastHorizontalCompactor,
    FastVerticalCompactor,
    compact_skyline,
)
from gridlayout.layout.compactors.standard import (
    HorizontalCompactor,
    NoCompactor,
    VerticalCompactor,
    compact_item,
    compact_layout,
    resolve_collisions,
)
from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import LayoutItem

logger = logging.getLogger(__name__)

# Compactor registry
COMPACTORS = {
    "none": NoCompactor,
    "vertical": VerticalCompactor,
    "horizontal": HorizontalCompactor,
    "fast_vertical": FastVerticalCompactor,
    "fast_horizontal": FastHorizontalCompactor,
}


def get_compactor(name: str) -> Compactor:
    """Get a compaction strategy by name.

    Args:
        name: Strategy name ('none', 'vertical', 'horizontal',
            'fast_vertical', 'fast_horizontal')

    Returns:
        Compactor instance

    Raises:
        ValueError: If strategy not found
    """
    if name not in COMPACTORS:
        raise ValueError(f"Unknown compactor: {name}. Available: {list(COMPACTORS.keys())}")
    return COMPACTORS[name]()


def compactor_for(compact_type: CompactType) -> Compactor:
    """Resolve the default strategy for a compaction type.

    The ``use_fast_compaction`` flag swaps the standard vertical/horizontal
    strategies for their skyline counterparts.
    """
    compact_type = CompactType(compact_type)
    if compact_type == CompactType.NONE:
        return NoCompactor()
    if is_enabled("use_fast_compaction"):
        return get_compactor(f"fast_{compact_type.value}")
    return get_compactor(compact_type.value)


def compact(
    layout: List[LayoutItem],
    compact_type: CompactType,
    slots: int,
    allow_overlap: bool = False,
    compactor: Optional[Compactor] = None,
) -> List[LayoutItem]:
    """Compact a layout with the strategy for ``compact_type``.

    Args:
        layout: Items to compact
        compact_type: Compaction direction
        slots: Number of columns
        allow_overlap: If True, return an unchanged copy
        compactor: Explicit strategy, overriding ``compact_type``

    Returns:
        New list with the same ids, in input order
    """
    strategy = compactor or compactor_for(compact_type)
    logger.debug(f"Compacting {len(layout)} items with {strategy.name}")
    return strategy.compact(layout, slots, allow_overlap=allow_overlap)


__all__ = [
    "Compactor",
    "NoCompactor",
    "VerticalCompactor",
    "HorizontalCompactor",
    "FastVerticalCompactor",
    "FastHorizontalCompactor",
    "COMPACTORS",
    "get_compactor",
    "compactor_for",
    "compact",
    "compact_item",
    "compact_layout",
    "compact_skyline",
    "resolve_collisions",
]
