"""Base HTTP client for Etsy Open API v3 interactions."""

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

import requests

from ..constants import API_BASE_URL, DEFAULT_TIMEOUT, USER_AGENT
from ..exceptions import EtsyAPIError, EtsyTransportError

logger = logging.getLogger(__name__)


def decode_body(response: requests.Response) -> Any:
    """Decode a response body as JSON, falling back to text (None when empty)."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def describe_error_payload(payload: Any) -> Optional[str]:
    """Pick a human-readable message out of an Etsy error payload."""
    if isinstance(payload, dict):
        for key in ("message", "error_description", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    return None


def error_from_http_error(error: requests.HTTPError) -> EtsyAPIError:
    """Translate a requests HTTPError into an EtsyAPIError."""
    response = error.response
    status_code = response.status_code if response is not None else 0
    payload = decode_body(response) if response is not None else None
    message = describe_error_payload(payload) or str(error)
    return EtsyAPIError(message, status_code=status_code, payload=payload)


class EtsyClient:
    """Shared HTTP client for the Etsy API.

    The underlying session's headers act as default headers for every call,
    so credentials set once (see AccessTokenHolder) apply to all tools.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Etsy API root, paths are appended to it
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["user-agent"] = USER_AGENT

    @property
    def default_headers(self) -> Dict[str, str]:
        return dict(self.session.headers)

    def set_default_headers(self, headers: Dict[str, str]) -> None:
        """Add or overwrite headers sent with every subsequent request."""
        self.session.headers.update(headers)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Make a request and return the decoded response body.

        Args:
            method: HTTP method (GET, POST, PUT)
            path: API path (without base URL)
            params: Query parameters
            json: JSON request body
            data: Form-encoded body, or a streaming encoder
            headers: Extra headers for this call only, merged over the defaults

        Returns:
            The decoded JSON body, or None for an empty body

        Raises:
            EtsyAPIError: For non-2xx responses
            EtsyTransportError: When the API could not be reached
        """
        request_id = str(uuid.uuid4())
        start_time = datetime.now()

        logger.info(f"Request {request_id}: Starting {method} {path}")

        url = f"{self.base_url}{path}"

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                data=data,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()

            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            logger.info(f"Request {request_id}: Success in {duration_ms}ms, status={response.status_code}")

            return decode_body(response)

        except requests.HTTPError as e:
            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            status = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"Request {request_id}: HTTP error in {duration_ms}ms, status={status}")
            raise error_from_http_error(e) from e
        except requests.RequestException as e:
            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            logger.error(f"Request {request_id}: Transport error in {duration_ms}ms: {e}")
            raise EtsyTransportError(str(e)) from e

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)
