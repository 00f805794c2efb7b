"""Listing tools: drafts, updates, images, files and inventory."""

import logging
from pathlib import Path
from typing import Any, Dict

from mcp.types import Tool
from requests_toolbelt import MultipartEncoder

from ..constants import LISTING_STATES, WHEN_MADE_VALUES, WHO_MADE_VALUES, ToolName
from ..exceptions import LocalPreconditionError
from .base import EtsyClient

logger = logging.getLogger(__name__)

TOOLS = [
    Tool(
        name=ToolName.GET_LISTINGS_BY_SHOP.value,
        description="Get listings for a given shop",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop"},
                "state": {
                    "type": "string",
                    "description": "The state of the listings to retrieve",
                    "enum": LISTING_STATES,
                },
            },
            "required": ["shop_id"],
        },
    ),
    Tool(
        name=ToolName.CREATE_DRAFT_LISTING.value,
        description="Create a new draft listing",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop"},
                "title": {"type": "string", "description": "The title of the listing"},
                "description": {"type": "string", "description": "The description of the listing"},
                "price": {"type": "number", "description": "The price of the listing"},
                "quantity": {"type": "number", "description": "The quantity of the listing"},
                "who_made": {"type": "string", "enum": WHO_MADE_VALUES},
                "when_made": {"type": "string", "enum": WHEN_MADE_VALUES},
                "taxonomy_id": {"type": "number", "description": "The taxonomy ID of the listing"},
            },
            "required": [
                "shop_id",
                "title",
                "description",
                "price",
                "quantity",
                "who_made",
                "when_made",
                "taxonomy_id",
            ],
        },
    ),
    Tool(
        name=ToolName.UPLOAD_LISTING_IMAGE.value,
        description="Upload an image for a listing",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop"},
                "listing_id": {"type": "string", "description": "The ID of the listing"},
                "image_path": {
                    "type": "string",
                    "description": "Filesystem path to the image file to upload. The file must exist.",
                },
            },
            "required": ["shop_id", "listing_id", "image_path"],
        },
    ),
    Tool(
        name=ToolName.UPDATE_LISTING.value,
        description="Update an existing listing",
        inputSchema={
            "type": "object",
            "properties": {
                "shop_id": {"type": "string", "description": "The ID of the shop"},
                "listing_id": {"type": "string", "description": "The ID of the listing"},
                "title": {"type": "string", "description": "The new title of the listing"},
                "description": {"type": "string", "description": "The new description of the listing"},
                "price": {"type": "number", "description": "The new price of the listing"},
            },
            "required": ["shop_id", "listing_id"],
        },
    ),
    Tool(
        name=ToolName.GET_LISTING_IMAGES.value,
        description="Get images for a listing",
        inputSchema={
            "type": "object",
            "properties": {
                "listing_id": {"type": "string", "description": "The ID of the listing"},
            },
            "required": ["listing_id"],
        },
    ),
    Tool(
        name=ToolName.GET_LISTING_FILES.value,
        description="Get files for a digital listing",
        inputSchema={
            "type": "object",
            "properties": {
                "listing_id": {"type": "string", "description": "The ID of the listing"},
            },
            "required": ["listing_id"],
        },
    ),
    Tool(
        name=ToolName.GET_LISTING_INVENTORY.value,
        description="Get inventory details for a listing",
        inputSchema={
            "type": "object",
            "properties": {
                "listing_id": {"type": "string", "description": "The ID of the listing"},
            },
            "required": ["listing_id"],
        },
    ),
    Tool(
        name=ToolName.UPDATE_LISTING_INVENTORY.value,
        description="Update inventory for a listing",
        inputSchema={
            "type": "object",
            "properties": {
                "listing_id": {"type": "string", "description": "The ID of the listing"},
                "products": {"type": "array", "description": "Inventory products"},
            },
            "required": ["listing_id", "products"],
        },
    ),
]


def _form_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Prepare tool arguments for a form-encoded body.

    Booleans are sent as lowercase strings; None values are left for requests to drop.
    """
    form: Dict[str, Any] = {}
    for key, value in fields.items():
        if isinstance(value, bool):
            form[key] = "true" if value else "false"
        else:
            form[key] = value
    return form


def get_listings_by_shop(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(
        f"/application/shops/{arguments['shop_id']}/listings",
        params={"state": arguments.get("state")},
    )


def create_draft_listing(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    """Create a draft listing; every argument except shop_id goes into the form body."""
    fields = {key: value for key, value in arguments.items() if key != "shop_id"}
    return client.post(
        f"/application/shops/{arguments['shop_id']}/listings",
        data=_form_fields(fields),
    )


def check_upload_listing_image(arguments: Dict[str, Any]) -> None:
    """Raise LocalPreconditionError when image_path is not an existing file."""
    if not Path(arguments["image_path"]).is_file():
        raise LocalPreconditionError(f"File not found: {arguments['image_path']}")


def upload_listing_image(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    """Upload a local image file as multipart field "image".

    The multipart body is streamed from the open file rather than built in memory.

    Raises:
        LocalPreconditionError: When image_path does not point to an existing file
    """
    check_upload_listing_image(arguments)
    image_path = Path(arguments["image_path"])

    path = f"/application/shops/{arguments['shop_id']}/listings/{arguments['listing_id']}/images"
    with image_path.open("rb") as image_file:
        encoder = MultipartEncoder(fields={"image": (image_path.name, image_file)})
        logger.info(f"Uploading {image_path.name} to listing {arguments['listing_id']}")
        return client.post(path, data=encoder, headers={"Content-Type": encoder.content_type})


def update_listing(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    fields = {key: value for key, value in arguments.items() if key not in ("shop_id", "listing_id")}
    return client.put(
        f"/application/shops/{arguments['shop_id']}/listings/{arguments['listing_id']}",
        data=_form_fields(fields),
    )


def get_listing_images(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/listings/{arguments['listing_id']}/images")


def get_listing_files(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/listings/{arguments['listing_id']}/files")


def get_listing_inventory(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.get(f"/application/listings/{arguments['listing_id']}/inventory")


def update_listing_inventory(arguments: Dict[str, Any], client: EtsyClient) -> Any:
    return client.put(
        f"/application/listings/{arguments['listing_id']}/inventory",
        json={"products": arguments["products"]},
    )


HANDLERS = {
    ToolName.GET_LISTINGS_BY_SHOP.value: get_listings_by_shop,
    ToolName.CREATE_DRAFT_LISTING.value: create_draft_listing,
    ToolName.UPLOAD_LISTING_IMAGE.value: upload_listing_image,
    ToolName.UPDATE_LISTING.value: update_listing,
    ToolName.GET_LISTING_IMAGES.value: get_listing_images,
    ToolName.GET_LISTING_FILES.value: get_listing_files,
    ToolName.GET_LISTING_INVENTORY.value: get_listing_inventory,
    ToolName.UPDATE_LISTING_INVENTORY.value: update_listing_inventory,
}

# Local checks run before any network traffic, including the token refresh
PRECONDITIONS = {
    ToolName.UPLOAD_LISTING_IMAGE.value: check_upload_listing_image,
}
