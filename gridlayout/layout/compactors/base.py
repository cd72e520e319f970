"""Base compactor protocol.

Defines the interface that all compaction strategies must implement.
"""

from abc import ABC, abstractmethod
from typing import List

from gridlayout.models.grid_enums import CompactType
from gridlayout.models.layout_item import LayoutItem


class Compactor(ABC):
    """Abstract base class for compaction strategies.

    A compactor moves items toward one grid edge while avoiding overlaps
    (``compact``) and can separate overlapping items without pulling them
    anywhere (``resolve_collisions``). Implementations must be pure and
    return lists in the same order as their input.

    External code may supply its own strategy by subclassing this class.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name (e.g., 'vertical', 'fast_vertical')."""
        ...

    @property
    @abstractmethod
    def compact_type(self) -> CompactType:
        """Direction this strategy compacts toward; also selects the push axis."""
        ...

    @abstractmethod
    def compact(
        self,
        layout: List[LayoutItem],
        slots: int,
        allow_overlap: bool = False,
    ) -> List[LayoutItem]:
        """Compact a layout.

        Args:
            layout: Items to compact
            slots: Number of columns (rows for horizontal layouts)
            allow_overlap: If True, return an unchanged copy

        Returns:
            New list with the same ids, in input order
        """
        ...

    @abstractmethod
    def resolve_collisions(self, layout: List[LayoutItem], slots: int) -> List[LayoutItem]:
        """Push overlapping dynamic items apart without compacting.

        Args:
            layout: Items that may overlap
            slots: Number of columns (rows for horizontal layouts)

        Returns:
            New list with no two overlapping non-static items, in input order
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
