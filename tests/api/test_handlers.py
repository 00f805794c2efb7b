"""Tests for the tool tables and their REST mappings."""

import pytest
from mcp.types import Tool
from requests_toolbelt import MultipartEncoder

from etsy_mcp.api import HANDLERS, PRECONDITIONS, TOOLS, verify_tool_registry
from etsy_mcp.constants import ToolName
from etsy_mcp.exceptions import LocalPreconditionError
from tests.conftest import make_response


def last_request(client):
    return client.session.request.call_args.kwargs


class TestRegistry:
    """Test descriptor/handler parity."""

    def test_descriptors_and_handlers_match(self):
        assert {tool.name for tool in TOOLS} == set(HANDLERS)
        verify_tool_registry(TOOLS, HANDLERS)

    def test_every_tool_name_is_enumerated(self):
        assert {tool.name for tool in TOOLS} == {name.value for name in ToolName}

    def test_names_are_unique(self):
        names = [tool.name for tool in TOOLS]
        assert len(names) == len(set(names))

    def test_orphan_handler_is_rejected(self):
        handlers = dict(HANDLERS, extraTool=lambda arguments, client: None)
        with pytest.raises(ValueError, match="extraTool"):
            verify_tool_registry(TOOLS, handlers)

    def test_orphan_descriptor_is_rejected(self):
        handlers = dict(HANDLERS)
        del handlers[ToolName.GET_ME.value]
        with pytest.raises(ValueError, match="getMe"):
            verify_tool_registry(TOOLS, handlers)

    def test_preconditions_belong_to_known_tools(self):
        assert set(PRECONDITIONS) <= set(HANDLERS)
        assert ToolName.UPLOAD_LISTING_IMAGE.value in PRECONDITIONS

    def test_duplicate_descriptor_is_rejected(self):
        duplicate = Tool(name="getShop", description="again", inputSchema={"type": "object"})
        with pytest.raises(ValueError, match="Duplicate"):
            verify_tool_registry([*TOOLS, duplicate], HANDLERS)


@pytest.mark.parametrize(
    "name, arguments, method, path",
    [
        ("getMe", {}, "GET", "/application/users/me"),
        ("getShop", {"shop_id": "123"}, "GET", "/application/shops/123"),
        ("getShopSections", {"shop_id": "123"}, "GET", "/application/shops/123/sections"),
        ("getListingImages", {"listing_id": "9"}, "GET", "/application/listings/9/images"),
        ("getListingFiles", {"listing_id": "9"}, "GET", "/application/listings/9/files"),
        ("getListingInventory", {"listing_id": "9"}, "GET", "/application/listings/9/inventory"),
        ("getSellerTaxonomyNodes", {}, "GET", "/application/seller-taxonomy/nodes"),
        ("getPropertiesByTaxonomyId", {"taxonomy_id": "42"}, "GET", "/application/seller-taxonomy/nodes/42/properties"),
    ],
)
def test_read_only_tools(client, name, arguments, method, path):
    HANDLERS[name](arguments, client)

    client.session.request.assert_called_once()
    kwargs = last_request(client)
    assert kwargs["method"] == method
    assert kwargs["url"] == f"https://api.etsy.com/v3{path}"


class TestListingHandlers:
    """Test listing handlers that send a body or query."""

    def test_get_listings_by_shop_passes_state(self, client):
        HANDLERS["getListingsByShop"]({"shop_id": "1", "state": "draft"}, client)
        kwargs = last_request(client)
        assert kwargs["url"].endswith("/application/shops/1/listings")
        assert kwargs["params"] == {"state": "draft"}

    def test_create_draft_listing_posts_form(self, client):
        arguments = {
            "shop_id": "1",
            "title": "Mug",
            "description": "A mug",
            "price": 12.5,
            "quantity": 3,
            "who_made": "i_did",
            "when_made": "made_to_order",
            "taxonomy_id": 1633,
            "is_supply": False,
        }
        HANDLERS["createDraftListing"](arguments, client)

        kwargs = last_request(client)
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/application/shops/1/listings")
        assert "shop_id" not in kwargs["data"]
        assert kwargs["data"]["title"] == "Mug"
        assert kwargs["data"]["price"] == 12.5
        assert kwargs["data"]["is_supply"] == "false"
        assert kwargs["json"] is None

    def test_update_listing_puts_form(self, client):
        HANDLERS["updateListing"]({"shop_id": "1", "listing_id": "2", "title": "New"}, client)

        kwargs = last_request(client)
        assert kwargs["method"] == "PUT"
        assert kwargs["url"].endswith("/application/shops/1/listings/2")
        assert kwargs["data"] == {"title": "New"}

    def test_update_listing_inventory_puts_json(self, client):
        products = [{"sku": "A", "offerings": []}]
        HANDLERS["updateListingInventory"]({"listing_id": "2", "products": products}, client)

        kwargs = last_request(client)
        assert kwargs["method"] == "PUT"
        assert kwargs["url"].endswith("/application/listings/2/inventory")
        assert kwargs["json"] == {"products": products}

    def test_upload_listing_image_missing_file(self, client, tmp_path):
        missing = tmp_path / "nope.jpg"

        with pytest.raises(LocalPreconditionError, match="File not found"):
            HANDLERS["uploadListingImage"](
                {"shop_id": "1", "listing_id": "2", "image_path": str(missing)}, client
            )

        client.session.request.assert_not_called()

    def test_upload_listing_image_sends_multipart_and_closes_file(self, client, tmp_path):
        image = tmp_path / "photo.jpg"
        image.write_bytes(b"\xff\xd8\xff")

        HANDLERS["uploadListingImage"]({"shop_id": "1", "listing_id": "2", "image_path": str(image)}, client)

        kwargs = last_request(client)
        assert kwargs["method"] == "POST"
        assert kwargs["url"].endswith("/application/shops/1/listings/2/images")
        encoder = kwargs["data"]
        assert isinstance(encoder, MultipartEncoder)
        assert kwargs["headers"]["Content-Type"].startswith("multipart/form-data; boundary=")
        filename, handle = encoder.fields["image"]
        assert filename == "photo.jpg"
        assert handle.closed

    def test_upload_listing_image_streams_body(self, client, tmp_path):
        image = tmp_path / "large.jpg"
        image.write_bytes(b"\x00" * (512 * 1024))
        seen = {}

        def send(**kwargs):
            body = kwargs["data"]
            seen["is_bytes"] = isinstance(body, (bytes, bytearray))
            seen["total"] = body.len
            seen["first_chunk"] = len(body.read(8192))
            return make_response(200, {"listing_image_id": 1})

        client.session.request.side_effect = send

        result = HANDLERS["uploadListingImage"](
            {"shop_id": "1", "listing_id": "2", "image_path": str(image)}, client
        )

        assert result == {"listing_image_id": 1}
        assert seen["is_bytes"] is False
        assert seen["total"] > 512 * 1024
        assert seen["first_chunk"] <= 8192
