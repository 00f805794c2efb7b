"""Utility modules for Etsy API operations."""

from .decorators import api_error_result, handle_etsy_api_errors
from .validators import missing_required_arguments, validate_port

__all__ = [
    "api_error_result",
    "handle_etsy_api_errors",
    "missing_required_arguments",
    "validate_port",
]
