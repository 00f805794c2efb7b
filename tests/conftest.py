"""Shared fixtures for the etsy-mcp tests."""

import json
from typing import Any, Optional
from unittest.mock import Mock, patch

import pytest
import requests

from etsy_mcp.api.base import EtsyClient
from etsy_mcp.config import EtsyConfig
from etsy_mcp.oauth import AccessTokenHolder


def make_response(status_code: int = 200, payload: Optional[Any] = None, url: str = "https://api.etsy.com/v3") -> requests.Response:
    """Build a real requests.Response carrying a JSON payload."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if payload is None:
        response._content = b""
    else:
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def config() -> EtsyConfig:
    return EtsyConfig(api_key="test-key", shared_secret="test-secret", refresh_token="test-refresh")


@pytest.fixture
def client() -> EtsyClient:
    """EtsyClient whose session.request is a Mock returning an empty JSON object."""
    etsy_client = EtsyClient()
    etsy_client.session.request = Mock(return_value=make_response(200, {}))  # type: ignore[method-assign]
    return etsy_client


@pytest.fixture
def cached_token_holder(client: EtsyClient, config: EtsyConfig) -> AccessTokenHolder:
    """Token holder that already went through one successful refresh."""
    holder = AccessTokenHolder(client, config.api_key, config.refresh_token)
    with patch("etsy_mcp.oauth.requests.post", return_value=make_response(200, {"access_token": "cached-token"})):
        holder.refresh_and_store()
    return holder
