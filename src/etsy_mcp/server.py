#!/usr/bin/env python3
"""MCP Server for the Etsy Open API v3.

Every tool maps to exactly one REST call against https://api.etsy.com/v3.
A bearer access token is obtained lazily through the refresh-token grant on
the first tool call and attached to every request made afterwards.
"""

import asyncio
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .api import (
    HANDLERS,
    PRECONDITIONS,
    TOOLS,
    EtsyClient,
    ToolHandler,
    ToolPrecondition,
    verify_tool_registry,
)
from .config import EtsyConfig, load_etsy_config
from .constants import ENV_LOG_LEVEL, SERVER_NAME
from .exceptions import ConfigurationError, LocalPreconditionError, TokenRefreshError
from .oauth import AccessTokenHolder
from .utils.decorators import handle_etsy_api_errors
from .utils.validators import missing_required_arguments

logger = logging.getLogger(__name__)


def _protocol_error(code: int, message: str) -> McpError:
    return McpError(types.ErrorData(code=code, message=message))


class EtsyServer:
    """Bearer-token-gated proxy exposing Etsy API operations as MCP tools."""

    def __init__(
        self,
        config: EtsyConfig,
        client: Optional[EtsyClient] = None,
        token_holder: Optional[AccessTokenHolder] = None,
        tools: Optional[List[types.Tool]] = None,
        handlers: Optional[Dict[str, ToolHandler]] = None,
        preconditions: Optional[Dict[str, ToolPrecondition]] = None,
    ) -> None:
        self.config = config
        self.client = client or EtsyClient()
        self.token_holder = token_holder or AccessTokenHolder(
            self.client, config.api_key, config.refresh_token
        )
        self.tools = list(TOOLS if tools is None else tools)
        self.handlers = dict(HANDLERS if handlers is None else handlers)
        self.preconditions = dict(PRECONDITIONS if preconditions is None else preconditions)
        verify_tool_registry(self.tools, self.handlers)
        self._tools_by_name = {tool.name: tool for tool in self.tools}

        self.server: Server = Server(SERVER_NAME, version=__version__)
        self.server.list_tools()(self._handle_list_tools)
        # Registered directly so an absent arguments object is not coerced to {}
        self.server.request_handlers[types.CallToolRequest] = self._handle_call_tool

    def list_tools(self) -> List[types.Tool]:
        return list(self.tools)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        """Dispatch one tool call.

        Protocol problems are rejected before any network traffic. Failed
        Etsy calls come back as tool results with isError set; everything
        else is raised as McpError.
        """
        if arguments is None:
            raise _protocol_error(types.INVALID_REQUEST, "Arguments are required")

        handler = self.handlers.get(name)
        if handler is None:
            raise _protocol_error(types.METHOD_NOT_FOUND, f"Unknown tool: {name}")

        missing = missing_required_arguments(self._tools_by_name[name].inputSchema, arguments)
        if missing:
            raise _protocol_error(
                types.INVALID_PARAMS,
                f"Missing required arguments for {name}: {', '.join(missing)}",
            )

        precondition = self.preconditions.get(name)
        if precondition is not None:
            try:
                precondition(arguments)
            except LocalPreconditionError as e:
                raise _protocol_error(types.INVALID_REQUEST, str(e)) from e

        try:
            self.token_holder.ensure()
        except TokenRefreshError as e:
            raise _protocol_error(types.INTERNAL_ERROR, str(e)) from e

        try:
            return self._invoke(handler, arguments)
        except LocalPreconditionError as e:
            raise _protocol_error(types.INVALID_REQUEST, str(e)) from e

    @handle_etsy_api_errors
    def _invoke(self, handler: ToolHandler, arguments: Dict[str, Any]) -> types.CallToolResult:
        body = handler(arguments, self.client)
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=json.dumps(body, indent=2))],
        )

    async def _handle_list_tools(self) -> List[types.Tool]:
        return self.list_tools()

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        result = await asyncio.to_thread(self.call_tool, req.params.name, req.params.arguments)
        return types.ServerResult(result)

    async def run(self) -> None:
        """Serve MCP over stdio until the client disconnects."""
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Etsy MCP server running on stdio")
            await self.server.run(read_stream, write_stream, self.server.create_initialization_options())


def main() -> None:
    """Entry point for the MCP server."""
    load_dotenv()
    logging.basicConfig(
        level=os.getenv(ENV_LOG_LEVEL, "INFO").upper(),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_etsy_config()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    server = EtsyServer(config)
    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        logger.info("Etsy MCP server stopped")


if __name__ == "__main__":
    main()
