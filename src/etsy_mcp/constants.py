"""Constants and configuration for the Etsy Open API v3."""

from enum import Enum

SERVER_NAME = "etsy-mcp-server"

# Etsy endpoints
API_BASE_URL = "https://api.etsy.com/v3"
TOKEN_URL = "https://api.etsy.com/v3/public/oauth/token"
AUTHORIZATION_URL = "https://www.etsy.com/oauth/connect"

# OAuth scopes requested by the refresh token helper
DEFAULT_SCOPES = [
    "listings_r",
    "listings_w",
    "shops_r",
    "shops_w",
    "transactions_r",
    "transactions_w",
]

# Local callback listener for the authorization-code flow
DEFAULT_CALLBACK_PORT = 3030
CALLBACK_PATH = "/oauth/redirect"

# Environment variables and settings file
ENV_API_KEY = "ETSY_API_KEY"
ENV_SHARED_SECRET = "ETSY_SHARED_SECRET"
ENV_REFRESH_TOKEN = "ETSY_REFRESH_TOKEN"
ENV_SETTINGS_PATH = "ETSY_MCP_SETTINGS_PATH"
ENV_LOG_LEVEL = "ETSY_MCP_LOG_LEVEL"
SETTINGS_FILENAME = "etsy_mcp_settings.json"
SETTINGS_SECTION = "etsy-mcp-server"

# Default request timeout (seconds)
DEFAULT_TIMEOUT = 30

USER_AGENT = "EtsyMCP/1.0 (Language=Python)"


class ToolName(str, Enum):
    """Names of the tools exposed by the MCP server."""

    GET_ME = "getMe"
    GET_SHOP = "getShop"
    GET_SHOP_SECTIONS = "getShopSections"
    GET_LISTINGS_BY_SHOP = "getListingsByShop"
    CREATE_DRAFT_LISTING = "createDraftListing"
    UPLOAD_LISTING_IMAGE = "uploadListingImage"
    UPDATE_LISTING = "updateListing"
    GET_LISTING_IMAGES = "getListingImages"
    GET_LISTING_FILES = "getListingFiles"
    GET_LISTING_INVENTORY = "getListingInventory"
    UPDATE_LISTING_INVENTORY = "updateListingInventory"
    GET_SELLER_TAXONOMY_NODES = "getSellerTaxonomyNodes"
    GET_PROPERTIES_BY_TAXONOMY_ID = "getPropertiesByTaxonomyId"


# Listing enums accepted by createDraftListing
WHO_MADE_VALUES = ["i_did", "someone_else", "collective"]

WHEN_MADE_VALUES = [
    "made_to_order",
    "2020_2025",
    "2010_2019",
    "2006_2009",
    "before_2006",
    "2000_2005",
    "1990s",
    "1980s",
    "1970s",
    "1960s",
    "1950s",
    "1940s",
    "1930s",
    "1920s",
    "1910s",
    "1900s",
    "1800s",
    "1700s",
    "before_1700",
]

LISTING_STATES = ["active", "inactive", "sold_out", "draft", "expired"]
