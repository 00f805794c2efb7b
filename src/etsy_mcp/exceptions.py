"""Common exceptions for the etsy-mcp package."""

from typing import Any, Optional


class EtsyMCPError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(EtsyMCPError):
    """Raised when required credentials cannot be resolved."""


class EtsyRequestError(EtsyMCPError):
    """Raised when a call to the Etsy API does not succeed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EtsyTransportError(EtsyRequestError):
    """Raised when the Etsy API could not be reached (DNS, connection, timeout)."""


class EtsyAPIError(EtsyRequestError):
    """Raised when the Etsy API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, payload: Optional[Any] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class TokenRefreshError(EtsyMCPError):
    """Raised when the refresh-token grant fails."""


class LocalPreconditionError(EtsyMCPError):
    """Raised when a tool call references local state that does not exist."""
