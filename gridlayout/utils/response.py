"""Standardized response envelopes for the grid MCP tools.

Every tool returns either {"ok": true, "data": ...} or
{"ok": false, "error": {"message", "code", "details"}}.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..models.layout_item import LayoutItem, layout_to_maps


def is_success(result: Dict[str, Any]) -> bool:
    """Check if a tool call succeeded."""
    return bool(result.get("ok"))


def success_response(
    data: Any,
    warnings: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Create a successful response envelope.

    Args:
        data: The response data
        warnings: Optional list of warning messages

    Returns:
        Standardized success response
    """
    response = {
        "ok": True,
        "data": data
    }

    if warnings:
        response["warnings"] = warnings

    return response


def error_response(
    message: str,
    code: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create an error response envelope.

    Args:
        message: Error message
        code: Optional error code (INVALID_LAYOUT, ITEM_NOT_FOUND, ...)
        details: Optional error details

    Returns:
        Standardized error response
    """
    error = {"message": message}

    if code:
        error["code"] = code

    if details:
        error["details"] = details

    return {
        "ok": False,
        "error": error
    }


def layout_response(
    layout: Iterable[LayoutItem],
    warnings: Optional[List[str]] = None,
    **extra: Any
) -> Dict[str, Any]:
    """Create a success envelope carrying a layout in its map form.

    Args:
        layout: Resulting items
        warnings: Optional warning messages
        **extra: Additional data fields (e.g. ``moved``)

    Returns:
        Success response with ``layout`` and ``item_count`` in ``data``
    """
    items = layout_to_maps(layout)
    data = {"layout": items, "item_count": len(items)}
    data.update(extra)
    return success_response(data, warnings)
