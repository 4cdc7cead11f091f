"""
MCP Server for Schema-Form.

Serves the validation tools over stdio (local subprocess clients) or SSE
(remote clients). The SSE app also answers ``GET /health``.
"""

import json
import logging
from typing import Any

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from schema_form import __version__
from schema_form.config import get_config
from schema_form.mcp_server.tools import call_mcp_tool, get_mcp_tools

logger = logging.getLogger("schema-form-mcp")

SERVICE_NAME = "schema-form-mcp"


def create_mcp_server() -> Server:
    """
    Build the MCP server with every schema-form tool registered.

    Tool results are returned as a single JSON text block; failures are
    reported inside that payload rather than as protocol errors.
    """
    server = Server(SERVICE_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return [Tool(**definition) for definition in get_mcp_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        logger.info(f"Tool call: {name}")
        result = await call_mcp_tool(name, arguments or {})
        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    return server


async def run_stdio_server(server: Server) -> None:
    logger.info("Serving schema-form tools over stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def _health_payload() -> dict[str, Any]:
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "transport": "sse",
        "version": __version__,
        "tools": [definition["name"] for definition in get_mcp_tools()],
    }


def create_sse_app(server: Server) -> Starlette:
    """
    Starlette app exposing the server over SSE.

    Routes:
        GET  /health         service status and tool names
        GET  /sse            event stream
        POST /sse/messages/  client messages
    """
    # Message endpoint path is relative to the /sse mount
    transport = SseServerTransport("/messages/")

    async def handle_sse(scope, receive, send):
        async with transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    async def handle_messages(scope, receive, send):
        await transport.handle_post_message(scope, receive, send)

    async def health(request):
        return JSONResponse(_health_payload())

    return Starlette(
        routes=[
            Route("/health", health, methods=["GET"]),
            Mount("/sse/messages", app=handle_messages),
            Mount("/sse", app=handle_sse),
        ],
    )


async def run_sse_server(server: Server, host: str, port: int) -> None:
    import uvicorn

    logger.info(f"Serving schema-form tools over SSE on {host}:{port}")
    uvicorn_config = uvicorn.Config(create_sse_app(server), host=host, port=port, log_level="info")
    await uvicorn.Server(uvicorn_config).serve()


async def run_mcp_server(
    transport: str | None = None,
    host: str = "0.0.0.0",
    port: int | None = None,
) -> None:
    """
    Run the MCP server.

    Args:
        transport: "stdio" or "sse". Defaults to ``config.mcp_transport``.
        host: Bind address for SSE.
        port: Port for SSE. Defaults to ``config.mcp_port``.

    Raises:
        ValueError: For an unknown transport.
    """
    config = get_config()
    transport = transport or config.mcp_transport
    server = create_mcp_server()

    if transport == "stdio":
        await run_stdio_server(server)
    elif transport == "sse":
        await run_sse_server(server, host, port if port is not None else config.mcp_port)
    else:
        raise ValueError(f"Unknown transport: {transport}. Use 'stdio' or 'sse'.")
