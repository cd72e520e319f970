"""
Configuration and Feature Flags for the Grid Layout Engine

This module provides feature flags that select engine strategies and
boundary validation. Flags are controlled via environment variables so a
deployment can switch behavior without code changes.

Usage:
    from gridlayout.config.settings import is_enabled

    if is_enabled('use_fast_compaction'):
        # Skyline (O(N)) compactors
        compactor = FastVerticalCompactor()
    else:
        # Standard (O(N^2)) compactors
        compactor = VerticalCompactor()

Environment Variables:
    GRIDLAYOUT_FAST_COMPACTION=true/false - Use skyline compactors by default
    GRIDLAYOUT_VALIDATE_IDS=true/false    - Reject duplicate ids on map import

Rollback Strategy:
    $ export GRIDLAYOUT_FAST_COMPACTION=false
    Compaction immediately reverts to the standard strategies.
"""

import os
from typing import Dict


# Feature flags with environment variable overrides
FEATURE_FLAGS: Dict[str, bool] = {
    # Default strategy resolution for CompactType.VERTICAL / HORIZONTAL
    'use_fast_compaction': os.getenv('GRIDLAYOUT_FAST_COMPACTION', 'false').lower() == 'true',

    # Duplicate id check in layout_from_maps
    'validate_unique_ids': os.getenv('GRIDLAYOUT_VALIDATE_IDS', 'true').lower() == 'true',
}


def is_enabled(flag: str) -> bool:
    """
    Check if a feature flag is enabled.

    Args:
        flag: Feature flag name (e.g., 'use_fast_compaction')

    Returns:
        True if flag is enabled, False otherwise

    Raises:
        KeyError: If flag name is not recognized

    Example:
        >>> is_enabled('use_fast_compaction')
        False  # Default
    """
    if flag not in FEATURE_FLAGS:
        available = ', '.join(FEATURE_FLAGS.keys())
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {available}"
        )

    return FEATURE_FLAGS[flag]


def get_all_flags() -> Dict[str, bool]:
    """
    Get all feature flags and their current state.

    Returns:
        Dictionary of flag names to boolean values
    """
    return FEATURE_FLAGS.copy()


def set_flag(flag: str, enabled: bool) -> None:
    """
    Programmatically set a feature flag (for testing only).

    Args:
        flag: Feature flag name
        enabled: True to enable, False to disable

    Warning:
        This is for testing only. In production, use environment variables.
    """
    if flag not in FEATURE_FLAGS:
        available = ', '.join(FEATURE_FLAGS.keys())
        raise KeyError(
            f"Unknown feature flag: '{flag}'. "
            f"Available flags: {available}"
        )

    FEATURE_FLAGS[flag] = enabled
