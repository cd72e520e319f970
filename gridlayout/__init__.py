"""Deterministic grid layout engine with an MCP tool server.

Positions, compacts, moves, resizes, groups and defragments rectangular
items on a grid with a fixed number of columns and an unbounded number of
rows.
"""

__version__ = "0.1.0"

# Core first: it loads geometry before the compactors that import it
from gridlayout.core import LayoutSession
from gridlayout.layout import compact, get_compactor
from gridlayout.models import CompactType, LayoutItem, ResizeBehavior

__all__ = [
    "__version__",
    "LayoutItem",
    "CompactType",
    "ResizeBehavior",
    "LayoutSession",
    "compact",
    "get_compactor",
]
