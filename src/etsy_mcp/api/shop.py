"""Shop and user tools."""

from typing import Any, Dict

from mcp.types import Tool

from ..constants import ToolName
from .base import EtsyClient

TOOLS = [
    Tool(
        name=ToolName.GET_SHOP.value,
        description="Get shop information",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop to retrieve"},
            },
            "required": ["shop_id"],
        },
    ),
    Tool(
        name=ToolName.GET_ME.value,
        description="Get info about the authenticated user",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name=ToolName.GET_SHOP_SECTIONS.value,
        description="Get sections for a shop",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop"},
            },
            "required": ["shop_id"],
        },
    ),
]


def get_me(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get("/application/users/me")


def get_shop(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/shops/{arguments['shop_id']}")


def get_shop_sections(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/shops/{arguments['shop_id']}/sections")


HANDLERS = {
    ToolName.GET_ME.value: get_me,
    ToolName.GET_SHOP.value: get_shop,
    ToolName.GET_SHOP_SECTIONS.value: get_shop_sections,
}
