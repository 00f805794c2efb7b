"""Etsy API client and tool tables."""

from typing import Any, Callable, Dict, List

from mcp.types import Tool

from . import listings, seller_taxonomy, shop
from .base import EtsyClient

ToolHandler = Callable[[Dict[str, Any], EtsyClient], Any]
ToolPrecondition = Callable[[Dict[str, Any]], None]

TOOLS: List[Tool] = [*shop.TOOLS, *listings.TOOLS, *seller_taxonomy.TOOLS]

HANDLERS: Dict[str, ToolHandler] = {
    **shop.HANDLERS,
    **listings.HANDLERS,
    **seller_taxonomy.HANDLERS,
}

PRECONDITIONS: Dict[str, ToolPrecondition] = {**listings.PRECONDITIONS}


def verify_tool_registry(tools: List[Tool], handlers: Dict[str, ToolHandler]) -> None:
    """Check that every descriptor has exactly one handler and vice versa.

    Raises:
        ValueError: On duplicate descriptor names or mismatched key sets
    """
    names = [tool.name for tool in tools]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")

    missing_handlers = sorted(set(names) - set(handlers))
    orphan_handlers = sorted(set(handlers) - set(names))
    if missing_handlers or orphan_handlers:
        raise ValueError(
            f"Tool registry mismatch: descriptors without handlers={missing_handlers}, "
            f"handlers without descriptors={orphan_handlers}"
        )


__all__ = [
    "HANDLERS",
    "PRECONDITIONS",
    "TOOLS",
    "EtsyClient",
    "ToolHandler",
    "ToolPrecondition",
    "verify_tool_registry",
]
