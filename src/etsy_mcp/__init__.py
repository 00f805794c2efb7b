"""MCP server and OAuth helper for the Etsy Open API v3."""

__version__ = "1.0.0"
