"""MCP server for the Xibo CMS toolset.

Lists the registered tools with the JSON schema of their input models and
dispatches calls to them. Tools never raise; their result envelope is sent
back as JSON text.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.types import ServerCapabilities, TextContent, Tool, ToolsCapability

from xibo_agent.config import Settings, settings as default_settings
from xibo_agent.services.cms import XiboCMSClient
from xibo_agent.services.image_history import ImageHistoryStore
from xibo_agent.tools import XiboTool, build_tools

logger = structlog.get_logger(__name__)


class UnknownToolError(LookupError):
    """Raised when a call names a tool that is not registered."""

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class XiboMCPServer:
    """MCP server holding the Xibo tools and their call metrics."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self._tools: Dict[str, XiboTool] = {}
        self.cms: Optional[XiboCMSClient] = None
        self._server = Server(self.settings.service_name)

        self.metrics: Dict[str, Any] = {
            "call_count": 0,
            "error_count": 0,
            "calls_by_tool": {},
            "start_time": datetime.now(timezone.utc).isoformat(),
        }

        self._setup_handlers()

    def _setup_handlers(self):
        """Set up MCP protocol handlers."""

        @self._server.list_tools()
        async def list_tools() -> list[Tool]:
            return [
                Tool(
                    name=tool.id,
                    description=tool.description,
                    inputSchema=tool.input_schema,
                )
                for tool in self._tools.values()
            ]

        @self._server.call_tool()
        async def call_tool(name: str, arguments: dict):
            try:
                result = await self.call(name, arguments)
            except UnknownToolError as e:
                logger.error("mcp_tool_error", tool=name, error=str(e))
                raise
            return [TextContent(type="text", text=json.dumps(result, ensure_ascii=False))]

    def register_tool(self, tool: XiboTool):
        """Register a tool under its id."""
        self._tools[tool.id] = tool

    @property
    def tools(self) -> Dict[str, XiboTool]:
        return dict(self._tools)

    def get_tool_schema(self, name: str) -> dict:
        """Get the schema for a tool in MCP format."""
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        return tool.definition()

    def list_tool_schemas(self) -> list:
        return [tool.definition() for tool in self._tools.values()]

    async def call(self, name: str, arguments: Optional[dict] = None) -> dict:
        """Run a registered tool and return its result envelope.

        Raises:
            UnknownToolError: If no tool is registered under ``name``
        """
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)

        self.metrics["call_count"] += 1
        by_tool = self.metrics["calls_by_tool"]
        by_tool[name] = by_tool.get(name, 0) + 1

        result = await tool.execute(arguments)
        if not result.get("success"):
            self.metrics["error_count"] += 1
        return result

    async def call_tool_http(self, tool_name: str, arguments: dict) -> dict:
        """Call a tool via HTTP (for REST API endpoint)."""
        return await self.call(tool_name, arguments)

    async def handle_stdio(self):
        """Handle MCP communication over stdio."""
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            await self._server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=self.settings.service_name,
                    server_version=self.settings.service_version,
                    capabilities=ServerCapabilities(
                        tools=ToolsCapability(listChanged=False),
                    ),
                ),
            )

    async def close(self):
        if self.cms is not None:
            await self.cms.close()

    def get_metrics(self) -> dict:
        """Get server metrics."""
        call_count = self.metrics["call_count"]
        return {
            "call_count": call_count,
            "error_count": self.metrics["error_count"],
            "error_rate": (
                self.metrics["error_count"] / call_count if call_count > 0 else 0
            ),
            "calls_by_tool": dict(self.metrics["calls_by_tool"]),
            "start_time": self.metrics["start_time"],
        }


def create_mcp_server(
    settings: Optional[Settings] = None,
    cms: Optional[XiboCMSClient] = None,
    history_store: Optional[ImageHistoryStore] = None,
) -> XiboMCPServer:
    """Create an MCP server with every Xibo tool registered."""
    settings = settings or default_settings
    server = XiboMCPServer(settings=settings)

    cms = cms or XiboCMSClient(settings)
    if history_store is None:
        history_store = ImageHistoryStore.from_settings(settings)

    for tool in build_tools(cms, history_store).values():
        server.register_tool(tool)

    server.cms = cms
    logger.info("mcp_tools_registered", count=len(server.tools))
    return server
