"""Etsy OAuth token endpoint calls and the in-memory access token holder."""

import logging
import threading
from typing import Any, Dict, Optional

import requests

from .api.base import EtsyClient, error_from_http_error
from .constants import DEFAULT_TIMEOUT, TOKEN_URL
from .exceptions import EtsyAPIError, EtsyRequestError, EtsyTransportError, TokenRefreshError

logger = logging.getLogger(__name__)


def _post_token_request(
    token_url: str,
    timeout: float,
    data: Optional[Dict[str, str]] = None,
    json: Optional[Dict[str, str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    try:
        response = requests.post(token_url, data=data, json=json, headers=headers, timeout=timeout)
        response.raise_for_status()
        token_data: Dict[str, Any] = response.json()
        return token_data
    except requests.HTTPError as e:
        raise error_from_http_error(e) from e
    except requests.RequestException as e:
        raise EtsyTransportError(str(e)) from e


def exchange_authorization_code(
    client_id: str,
    code: str,
    code_verifier: str,
    redirect_uri: str,
    token_url: str = TOKEN_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Exchange an authorization code for an access/refresh token pair.

    The body is form-encoded and the keystring is also sent as x-api-key.
    redirect_uri must be the exact value used in the authorization request.

    Raises:
        EtsyAPIError: When Etsy rejects the exchange
        EtsyTransportError: When Etsy could not be reached
    """
    data = {
        "grant_type": "authorization_code",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "code": code,
        "code_verifier": code_verifier,
    }
    headers = {
        "Content-Type": "application/x-www-form-urlencoded",
        "x-api-key": client_id,
    }
    return _post_token_request(token_url, timeout, data=data, headers=headers)


def request_access_token(
    client_id: str,
    refresh_token: str,
    token_url: str = TOKEN_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    """Run the refresh-token grant. Unlike the code exchange this body is JSON."""
    payload = {
        "grant_type": "refresh_token",
        "client_id": client_id,
        "refresh_token": refresh_token,
    }
    return _post_token_request(token_url, timeout, json=payload)


class AccessTokenHolder:
    """Owns the short-lived bearer token used by the API proxy.

    The token lives in memory only. It is fetched lazily on first use and is
    never refreshed again unless refresh_and_store() is called explicitly.
    """

    def __init__(
        self,
        client: EtsyClient,
        api_key: str,
        refresh_token: str,
        token_url: str = TOKEN_URL,
    ) -> None:
        self.client = client
        self.api_key = api_key
        self.refresh_token = refresh_token
        self.token_url = token_url
        self._access_token: Optional[str] = None
        self._lock = threading.Lock()

    def get(self) -> Optional[str]:
        return self._access_token

    def refresh_and_store(self) -> str:
        """Fetch a new access token and install it on the shared client.

        Raises:
            TokenRefreshError: When the refresh-token grant fails. Nothing is
                cached in that case, so the next call tries again.
        """
        try:
            token_data = request_access_token(
                self.api_key,
                self.refresh_token,
                token_url=self.token_url,
                timeout=self.client.timeout,
            )
            access_token = str(token_data["access_token"])
        except EtsyAPIError as e:
            logger.error(f"Error refreshing access token: {e.payload if e.payload is not None else e.message}")
            raise TokenRefreshError("Failed to refresh Etsy access token") from e
        except (EtsyRequestError, KeyError, ValueError) as e:
            logger.error(f"Error refreshing access token: {e}")
            raise TokenRefreshError("Failed to refresh Etsy access token") from e

        self._access_token = access_token
        self.client.set_default_headers(
            {
                "Authorization": f"Bearer {access_token}",
                "x-api-key": self.api_key,
            }
        )
        logger.info("Etsy access token refreshed")
        return access_token

    def ensure(self) -> str:
        """Return the cached token, refreshing once if none is cached yet."""
        token = self._access_token
        if token is not None:
            return token

        with self._lock:
            if self._access_token is None:
                return self.refresh_and_store()
            return self._access_token
