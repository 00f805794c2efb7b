"""Decorators for Etsy API error handling."""

import functools
import logging
import uuid
from datetime import datetime
from typing import Any, Callable

from mcp.types import CallToolResult, TextContent

from ..exceptions import EtsyAPIError, EtsyRequestError

logger = logging.getLogger(__name__)


def api_error_result(error: EtsyRequestError) -> CallToolResult:
    """Render a failed Etsy call as a tool result flagged as an error."""
    return CallToolResult(
        content=[TextContent(type="text", text=f"Etsy API error: {error.message}")],
        isError=True,
    )


def handle_etsy_api_errors(func: Callable[..., CallToolResult]) -> Callable[..., CallToolResult]:
    """Decorator to turn failed Etsy calls into soft tool results.

    Only EtsyRequestError (transport failures and non-2xx answers) is caught;
    anything else propagates so the whole tool invocation fails.

    Args:
        func: The function to decorate

    Returns:
        Decorated function that reports API failures as tool results
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> CallToolResult:
        request_id = str(uuid.uuid4())
        start_time = datetime.now()

        try:
            logger.info(f"Request {request_id}: Starting {func.__name__}")
            result = func(*args, **kwargs)

            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            logger.info(f"Request {request_id}: Completed {func.__name__} in {duration_ms}ms")

            return result

        except EtsyRequestError as e:
            duration_ms = int((datetime.now() - start_time).total_seconds() * 1000)
            kind = f"Etsy API error {e.status_code}" if isinstance(e, EtsyAPIError) else "Transport error"
            logger.warning(f"Request {request_id}: {kind} in {duration_ms}ms: {e.message}")
            return api_error_result(e)

    return wrapper
