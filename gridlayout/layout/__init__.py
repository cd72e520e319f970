"""Layout module for grid compaction.

This module provides:
- Compactor abstraction (Compactor base class)
- Standard O(N^2) and skyline O(N) compaction strategies
- Strategy registry keyed by name
"""

from gridlayout.layout.compactors import (
    COMPACTORS,
    Compactor,
    compact,
    compactor_for,
    get_compactor,
)

__all__ = [
    "Compactor",
    "COMPACTORS",
    "get_compactor",
    "compactor_for",
    "compact",
]
