"""MCP server exposing the grid layout engine as tools."""

import asyncio
import json
import logging

from mcp import Tool
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions
from mcp.types import TextContent

from . import __version__
from .config.settings import get_all_flags
from .tools.grid_tools import GridTools
from .utils.response import error_response

logger = logging.getLogger(__name__)

SERVER_NAME = "gridlayout-mcp"


class GridLayoutMCPServer:
    """MCP Server for grid layout computation."""

    def __init__(self):
        """Initialize the MCP server and its tool handlers."""
        self.grid_tools = GridTools()

        # Create MCP server instance
        self.server = Server(SERVER_NAME)

        # Register handlers
        self._register_handlers()

    def _register_handlers(self):
        """Register all MCP handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> list[Tool]:
            """List all available tools."""
            return self.grid_tools.get_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict) -> list[TextContent]:
            """Route tool calls to the grid tool handlers."""
            result = await self.call_tool(name, arguments)
            return [TextContent(type="text", text=json.dumps(result, indent=2))]

    async def call_tool(self, name: str, arguments: dict) -> dict:
        """Dispatch one tool call and return its response envelope."""
        if not name.startswith("grid_"):
            return error_response(f"Unknown tool: {name}", code="UNKNOWN_TOOL")

        try:
            return await self.grid_tools.handle_tool(name, arguments or {})
        except Exception as e:
            logger.error(f"Error executing tool {name}: {e}", exc_info=True)
            return error_response(str(e), code="TOOL_ERROR", details={"tool": name})

    async def run(self):
        """Run the MCP server."""
        from mcp.server.stdio import stdio_server

        logger.info(f"Starting {SERVER_NAME} {__version__} with flags {get_all_flags()}")
        async with stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={}
                    )
                )
            )


def main():
    """Main entry point for the MCP server."""
    logging.basicConfig(level=logging.INFO)
    server = GridLayoutMCPServer()
    asyncio.run(server.run())


if __name__ == "__main__":
    main()
