"""Seller taxonomy tools."""

from typing import Any, Dict

from mcp.types import Tool

from ..constants import ToolName
from .base import EtsyClient

TOOLS = [
    Tool(
        name=ToolName.GET_SELLER_TAXONOMY_NODES.value,
        description="Retrieve the full hierarchy tree of seller taxonomy nodes",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name=ToolName.GET_PROPERTIES_BY_TAXONOMY_ID.value,
        description="Get product properties supported for a specific taxonomy ID",
        inputSchema={
            "type": "object",
            "properties": {
                "taxonomy_id": {"type": "string", "description": "The seller taxonomy node ID"},
            },
            "required": ["taxonomy_id"],
        },
    ),
]


def get_seller_taxonomy_nodes(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get("/application/seller-taxonomy/nodes")


def get_properties_by_taxonomy_id(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/seller-taxonomy/nodes/{arguments['taxonomy_id']}/properties")


HANDLERS = {
    ToolName.GET_SELLER_TAXONOMY_NODES.value: get_seller_taxonomy_nodes,
    ToolName.GET_PROPERTIES_BY_TAXONOMY_ID.value: get_properties_by_taxonomy_id,
}
