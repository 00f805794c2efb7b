"""Input validation utilities for tool arguments."""

from typing import Any, Dict, List, Mapping


def missing_required_arguments(input_schema: Mapping[str, Any], arguments: Dict[str, Any]) -> List[str]:
    """Return the required properties of a JSON schema that are absent or null.

    Args:
        input_schema: The tool's inputSchema
        arguments: Arguments supplied by the caller

    Returns:
        Names of missing required properties, in schema order
    """
    required = input_schema.get("required") or []
    return [name for name in required if arguments.get(name) is None]


def validate_port(port: int) -> bool:
    """Validate a TCP port for the local callback listener."""
    return isinstance(port, int) and not isinstance(port, bool) and 0 < port < 65536
