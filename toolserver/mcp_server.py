"""MCP transport — exposes the tool server over the Model Context Protocol (stdio).

The bridge translates between the core's envelopes/outcomes and ``mcp.types``.
Failures keep the flat wire shape: the SDK turns the raised message into a
``CallToolResult`` with ``isError=True``.
"""
import logging
from typing import Any, Dict, List, Tuple, Union

import mcp.types as types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server

from .protocol import Envelope, ImageContent
from .server import ToolServer

logger = logging.getLogger(__name__)

McpContent = Union[types.TextContent, types.ImageContent]


class ToolCallFailed(Exception):
    """Carries the flat failure message back through the SDK."""


def to_mcp_content(envelope: Envelope) -> List[McpContent]:
    items: List[McpContent] = []
    for item in envelope.content:
        if isinstance(item, ImageContent):
            items.append(types.ImageContent(type="image", data=item.data, mimeType=item.mime_type))
        else:
            items.append(types.TextContent(type="text", text=item.text))
    return items


class McpBridge:
    def __init__(self, tool_server: ToolServer):
        self.tool_server = tool_server

    async def list_tools(self) -> List[types.Tool]:
        tools = []
        for tool in self.tool_server.tools():
            tools.append(types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema(),
                outputSchema=tool.output_schema(),
            ))
        return tools

    async def call_tool(
        self, name: str, arguments: Dict[str, Any]
    ) -> Union[List[McpContent], Tuple[List[McpContent], Dict[str, Any]]]:
        outcome = await self.tool_server.call_tool(name, arguments)
        if not outcome.ok:
            logger.info(f"call_tool {name} -> {outcome.error.kind.value}")
            raise ToolCallFailed(outcome.error.message)

        envelope = outcome.envelope
        content = to_mcp_content(envelope)
        if envelope.structured_content is None:
            return content
        return content, envelope.structured_content.model_dump(by_alias=True)

    async def list_resources(self) -> List[types.Resource]:
        return [
            types.Resource(uri=r.uri, name=r.name, description=r.description, mimeType=r.mime_type)
            for r in self.tool_server.list_resources()
        ]

    async def read_resource(self, uri: Any) -> List[ReadResourceContents]:
        contents = await self.tool_server.read_resource(str(uri))
        return [ReadResourceContents(content=contents.text, mime_type=contents.mime_type)]


def build_mcp_server(tool_server: ToolServer) -> Server:
    cfg = tool_server.settings
    server = Server(cfg.server_name, version=cfg.server_version)
    bridge = McpBridge(tool_server)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return await bridge.list_tools()

    # Arguments are validated by the dispatcher's own contracts
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Dict[str, Any]):
        return await bridge.call_tool(name, arguments)

    @server.list_resources()
    async def list_resources() -> List[types.Resource]:
        return await bridge.list_resources()

    @server.read_resource()
    async def read_resource(uri) -> List[ReadResourceContents]:
        return await bridge.read_resource(uri)

    return server


async def serve_stdio(tool_server: ToolServer) -> None:
    server = build_mcp_server(tool_server)
    logger.info("MCP server listening on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
